from datetime import datetime, timedelta, timezone
from typing import Callable

import numpy as np
import pytest
from fastapi.testclient import TestClient

from cortex.api import create_app
from cortex.domain.connections import Connection
from cortex.domain.note import EmbeddedNote
from cortex.service import NoteService
from cortex.vector_dbs.local_db import LocalVectorDB
from tests.fakes import FakeClassifier, FakeEmbedder

BASE_VECTOR = np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float32)
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def vector_with_similarity(similarity: float, axis: int = 1) -> np.ndarray:
    """Unit vector whose cosine similarity to BASE_VECTOR is `similarity`."""
    vector = np.zeros(4, dtype=np.float32)
    vector[0] = similarity
    vector[axis] = np.sqrt(1.0 - similarity**2)
    return vector


def make_note(
    note_id: str,
    *,
    similarity: float = 0.0,
    title: str | None = None,
    content: str | None = None,
    tags: list[str] | None = None,
    minutes: int = 0,
) -> EmbeddedNote:
    created = BASE_TIME + timedelta(minutes=minutes)
    return EmbeddedNote(
        id=note_id,
        title=title if title is not None else f"Note {note_id}",
        content=content or f"Content of {note_id}",
        tags=tags or [],
        created_at=created,
        updated_at=created,
        vector=vector_with_similarity(similarity),
    )


def make_edge(source: str, target: str, strength: float, label: str = "related_to") -> Connection:
    return Connection(
        id=f"{source}-{target}-{label}",
        source_id=source,
        target_id=target,
        label=label,
        strength=strength,
    )


@pytest.fixture
def note_factory() -> Callable[..., EmbeddedNote]:
    return make_note


@pytest.fixture
def edge_factory() -> Callable[..., Connection]:
    return make_edge


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder(default=BASE_VECTOR)


@pytest.fixture
def fake_classifier() -> FakeClassifier:
    return FakeClassifier()


@pytest.fixture
def vector_db() -> LocalVectorDB:
    return LocalVectorDB.from_data(
        notes=[
            make_note("11111111-1111-1111-1111-111111111111", similarity=0.9, tags=["ideas"]),
            make_note("22222222-2222-2222-2222-222222222222", similarity=0.2, minutes=1),
        ]
    )


@pytest.fixture
def service(
    vector_db: LocalVectorDB, fake_embedder: FakeEmbedder, fake_classifier: FakeClassifier
) -> NoteService:
    return NoteService(vector_db=vector_db, embedder=fake_embedder, classifier=fake_classifier)


@pytest.fixture
def test_client(service: NoteService) -> TestClient:
    """Create test client with fake implementations."""
    return TestClient(create_app(service=service))
