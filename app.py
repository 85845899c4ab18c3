import sys

from loguru import logger

from cortex.api import create_app
from cortex.config import settings
from cortex.providers import build_classifier, build_embedder
from cortex.service import NoteService
from cortex.vector_dbs.local_db import LocalVectorDB

logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

logger.info(f"Initializing Cortex with {settings.embedding_provider} embeddings")
vector_db = LocalVectorDB(settings.local_db_path, match_threshold=settings.match_threshold)
embedder = build_embedder(settings)
classifier = build_classifier(settings)
service = NoteService(
    vector_db=vector_db,
    embedder=embedder,
    classifier=classifier,
    top_k=settings.auto_connect_top_k,
    preview_chars=settings.candidate_preview_chars,
)
app = create_app(service=service)
