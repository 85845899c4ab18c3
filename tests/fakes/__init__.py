from tests.fakes.fake_classifier import FakeClassifier
from tests.fakes.fake_embedder import FakeEmbedder
from tests.fakes.fake_vector_db import FlakyVectorDB

__all__ = ["FakeClassifier", "FakeEmbedder", "FlakyVectorDB"]
