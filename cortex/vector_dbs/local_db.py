import json
import os
import threading
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List

import numpy as np

from cortex.domain.connections import Connection, ConnectionLabel, clamp_strength
from cortex.domain.note import EmbeddedNote, Note, SimilarNote, TagCount
from cortex.errors import PersistenceError
from cortex.vector_dbs.base import VectorDB


class LocalVectorDB(VectorDB):
    """Local vector database that keeps notes, embeddings and connections in a JSON file."""

    def __init__(self, filepath: str | Path | None = None, match_threshold: float = 0.3) -> None:
        """Initialize LocalVectorDB.

        Args:
            filepath: Path to database file. If provided and exists, will auto-load.
                     If provided, every write is saved back to this path.
                     If not provided, creates empty database in memory only.
            match_threshold: Similarity a note must exceed to be returned by search.
        """
        self._filepath = str(filepath) if filepath else None
        self.match_threshold = match_threshold
        self._notes: Dict[str, EmbeddedNote] = {}
        self._connections: Dict[tuple[str, str, str], Connection] = {}
        # Serializes writes; a write that fails to persist is rolled back
        self._lock = threading.RLock()

        if self._filepath and Path(self._filepath).exists():
            try:
                with open(self._filepath, "r") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise PersistenceError(f"Failed to load database {self._filepath}: {e}") from e
            self._notes = {
                note_id: EmbeddedNote(**note_data) for note_id, note_data in data["notes"].items()
            }
            for connection_data in data.get("connections", []):
                connection = Connection(**connection_data)
                self._connections[connection.key] = connection

    @classmethod
    def from_data(
        cls,
        notes: List[EmbeddedNote] | None = None,
        connections: List[Connection] | None = None,
        match_threshold: float = 0.3,
    ) -> "LocalVectorDB":
        """Create an in-memory LocalVectorDB from provided data (useful for testing)."""
        instance = cls(filepath=None, match_threshold=match_threshold)
        instance._notes = {note.id: note for note in notes or []}
        instance._connections = {connection.key: connection for connection in connections or []}
        return instance

    def insert_note(self, note: EmbeddedNote) -> Note:
        """Store a new note together with its embedding."""
        with self._lock:
            dimensions = self._dimensions()
            if dimensions is not None and len(note.vector) != dimensions:
                raise PersistenceError(
                    f"Embedding has {len(note.vector)} dimensions, store holds {dimensions}"
                )
            previous = self._notes.get(note.id)
            self._notes[note.id] = note
            try:
                self._persist()
            except PersistenceError:
                if previous is None:
                    self._notes.pop(note.id, None)
                else:
                    self._notes[note.id] = previous
                raise
        return note.to_note()

    def get_note(self, note_id: str) -> Note | None:
        """Get a note by its ID."""
        note = self._notes.get(note_id)
        return note.to_note() if note else None

    def get_notes_by_ids(self, note_ids: Iterable[str]) -> dict[str, Note]:
        """Get multiple notes by their IDs, skipping unknown IDs."""
        notes = self._notes
        return {note_id: notes[note_id].to_note() for note_id in note_ids if note_id in notes}

    def delete_note(self, note_id: str) -> None:
        """Delete a note and every connection where it is either endpoint."""
        with self._lock:
            notes, connections = dict(self._notes), self._connections
            self._notes.pop(note_id, None)
            self._connections = {
                key: connection
                for key, connection in list(connections.items())
                if note_id not in (connection.source_id, connection.target_id)
            }
            try:
                self._persist()
            except PersistenceError:
                self._notes, self._connections = notes, connections
                raise

    def search_by_embedding(
        self, vector: np.ndarray, limit: int, tags: list[str] | None = None
    ) -> List[SimilarNote]:
        """Get the notes most similar to a vector by cosine similarity, best match first."""
        query = np.asarray(vector, dtype=np.float32)
        query_norm = np.linalg.norm(query)
        if query_norm == 0:
            return []
        required_tags = set(tags or [])

        similarities = []
        for note in list(self._notes.values()):
            if required_tags and not required_tags.issubset(note.tags):
                continue
            if note.vector.shape != query.shape:
                continue
            note_norm = np.linalg.norm(note.vector)
            if note_norm == 0:
                continue
            similarity = float(np.dot(query, note.vector) / (query_norm * note_norm))
            if similarity > self.match_threshold:
                similarities.append((similarity, note))

        similarities.sort(key=lambda x: x[0], reverse=True)
        return [
            SimilarNote(
                id=note.id,
                title=note.title,
                content=note.content,
                tags=note.tags,
                similarity=clamp_strength(similarity),
            )
            for similarity, note in similarities[:limit]
        ]

    def upsert_connection(
        self,
        source_id: str,
        target_id: str,
        label: ConnectionLabel,
        strength: float,
        reasoning: str | None,
    ) -> Connection:
        """Create a connection or update the one with the same (source, target, label)."""
        key = (source_id, target_id, label)
        connection = Connection(
            source_id=source_id,
            target_id=target_id,
            label=label,
            strength=strength,
            reasoning=reasoning,
        )
        with self._lock:
            existing = self._connections.get(key)
            if existing:
                connection.id = existing.id
                connection.created_at = existing.created_at
            self._connections[key] = connection
            try:
                self._persist()
            except PersistenceError:
                if existing is None:
                    self._connections.pop(key, None)
                else:
                    self._connections[key] = existing
                raise
        return connection

    def get_connections_for_notes(
        self, note_ids: Iterable[str], min_strength: float
    ) -> List[Connection]:
        """Get connections with strength >= min_strength touching any of the notes."""
        wanted = set(note_ids)
        return [
            connection
            for connection in list(self._connections.values())
            if connection.strength >= min_strength
            and (connection.source_id in wanted or connection.target_id in wanted)
        ]

    def get_recent_notes(
        self, limit: int, tag: str | None = None, since: datetime | None = None
    ) -> List[Note]:
        """Get the most recently created notes, newest first."""
        notes = [
            note
            for note in list(self._notes.values())
            if (tag is None or tag in note.tags) and (since is None or note.created_at >= since)
        ]
        notes.sort(key=lambda note: note.created_at, reverse=True)
        return [note.to_note() for note in notes[:limit]]

    def list_tags(self, limit: int) -> List[TagCount]:
        """Get tags with their usage counts, most used first."""
        counts = Counter(tag for note in list(self._notes.values()) for tag in note.tags)
        return [TagCount(tag=tag, count=count) for tag, count in counts.most_common(limit)]

    def save(self, filepath: str | None = None) -> None:
        """Save the database to a JSON file.

        Args:
            filepath: Path to save to. If not provided, uses the filepath from initialization.
        """
        save_path = filepath or self._filepath
        if not save_path:
            raise ValueError(
                "No filepath provided and no default filepath set during initialization"
            )

        with self._lock:
            data = {
                "notes": {
                    note_id: note.model_dump(mode="json")
                    for note_id, note in list(self._notes.items())
                },
                "connections": [
                    connection.model_dump(mode="json")
                    for connection in list(self._connections.values())
                ],
            }
            # The database file is only ever replaced whole
            tmp_path = f"{save_path}.tmp"
            try:
                Path(save_path).parent.mkdir(parents=True, exist_ok=True)
                with open(tmp_path, "w") as f:
                    json.dump(data, f)
                os.replace(tmp_path, save_path)
            except OSError as e:
                raise PersistenceError(f"Failed to save database {save_path}: {e}") from e

    def clear(self) -> None:
        """Clear all data from the database."""
        self._notes.clear()
        self._connections.clear()

    def _dimensions(self) -> int | None:
        for note in list(self._notes.values()):
            return len(note.vector)
        return None

    def _persist(self) -> None:
        if self._filepath:
            self.save()
