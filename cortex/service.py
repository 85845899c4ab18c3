"""Note operations exposed to callers: save, search, traverse, summarize, digest, delete, list."""

from collections import Counter
from datetime import timedelta
from typing import List

from loguru import logger
from pydantic import BaseModel, ValidationError

from cortex.domain.connections import CreatedConnection, GraphNode, InterestGraph
from cortex.domain.note import EmbeddedNote, Note, NoteSource, SimilarNote, TagCount, utc_now
from cortex.embedders.base import Embedder
from cortex.errors import InvalidRequestError, NotFoundError
from cortex.graph.connection_engine import ConnectionEngine
from cortex.graph.interest_graph import InterestGraphExtractor
from cortex.graph.traversal import GraphTraversal
from cortex.llms.base import RelationshipClassifier
from cortex.prompt import TOPIC_SUMMARY_INSTRUCTION
from cortex.vector_dbs.base import VectorDB


class SavedNote(BaseModel):
    note: Note
    connections: List[CreatedConnection]
    warning: str | None
    message: str


class RelatedNotes(BaseModel):
    root: Note
    depth: int
    min_strength: float
    connections: List[GraphNode]


class TopicNotes(BaseModel):
    topic: str
    notes: List[SimilarNote]
    instruction: str


class Digest(BaseModel):
    period: str
    total_notes: int
    top_themes: List[TagCount]
    notes: List[Note]


def _rounded(results: List[SimilarNote]) -> List[SimilarNote]:
    return [r.model_copy(update={"similarity": round(r.similarity, 2)}) for r in results]


class NoteService:
    """Coordinates the store, providers and graph components for each operation."""

    def __init__(
        self,
        *,
        vector_db: VectorDB,
        embedder: Embedder,
        classifier: RelationshipClassifier,
        top_k: int = 5,
        preview_chars: int = 300,
    ):
        self.vector_db = vector_db
        self.embedder = embedder
        self.engine = ConnectionEngine(
            vector_db=vector_db,
            classifier=classifier,
            top_k=top_k,
            preview_chars=preview_chars,
        )
        self.traversal = GraphTraversal(vector_db)
        self.interests = InterestGraphExtractor(vector_db)

    def save_note(
        self,
        *,
        content: str,
        title: str | None = None,
        tags: List[str] | None = None,
        source: NoteSource = "manual",
    ) -> SavedNote:
        """Save a note, then connect it to related notes.

        Embedding and insertion failures are fatal. Anything that goes wrong
        afterwards only produces a warning, the note stays saved.
        """
        try:
            draft = Note(title=title, content=content, tags=tags or [], source=source)
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid note: {e}") from e
        vector = self.embedder.embed(draft.embedding_text)
        embedded = EmbeddedNote(**draft.model_dump(), vector=vector)
        note = self.vector_db.insert_note(embedded)
        logger.info(f"Saved note {note.id}")

        result = self.engine.connect(embedded)
        if result.warning:
            logger.warning(f"Note {note.id}: {result.warning}")

        if result.connections:
            message = f"Saved note and created {len(result.connections)} connection(s)."
        else:
            message = "Saved note. No strong connections found."
        return SavedNote(
            note=note, connections=result.connections, warning=result.warning, message=message
        )

    def search_notes(
        self, query: str, limit: int = 5, tags: List[str] | None = None
    ) -> List[SimilarNote]:
        vector = self.embedder.embed(query)
        return _rounded(self.vector_db.search_by_embedding(vector, limit, tags=tags))

    def get_note(self, note_id: str) -> Note:
        note = self.vector_db.get_note(note_id)
        if note is None:
            raise NotFoundError(f"Note {note_id} not found.")
        return note

    def get_related(self, note_id: str, depth: int = 1, min_strength: float = 0.3) -> RelatedNotes:
        root = self.get_note(note_id)
        connections = self.traversal.related(note_id, depth, min_strength)
        return RelatedNotes(
            root=root, depth=depth, min_strength=min_strength, connections=connections
        )

    def visualize_interests(
        self, limit: int = 50, min_strength: float = 0.3, tag: str | None = None
    ) -> InterestGraph:
        return self.interests.interest_graph(limit, min_strength, tag=tag)

    def summarize_topic(self, topic: str, limit: int = 10) -> TopicNotes:
        vector = self.embedder.embed(topic)
        notes = _rounded(self.vector_db.search_by_embedding(vector, limit))
        return TopicNotes(topic=topic, notes=notes, instruction=TOPIC_SUMMARY_INSTRUCTION)

    def daily_digest(self, days: int = 7, limit: int = 10) -> Digest:
        since = utc_now() - timedelta(days=days)
        notes = self.vector_db.get_recent_notes(limit, since=since)
        tag_counts = Counter(tag for note in notes for tag in note.tags)
        return Digest(
            period=f"Last {days} days",
            total_notes=len(notes),
            top_themes=[TagCount(tag=tag, count=count) for tag, count in tag_counts.most_common(5)],
            notes=notes,
        )

    def delete_note(self, note_id: str) -> Note:
        """Delete a note and all its connections, returning the deleted note."""
        note = self.get_note(note_id)
        self.vector_db.delete_note(note_id)
        logger.info(f"Deleted note {note_id} and its connections")
        return note

    def list_tags(self, limit: int = 50) -> List[TagCount]:
        return self.vector_db.list_tags(limit)
