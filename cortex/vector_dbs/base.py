from datetime import datetime
from typing import Iterable, List, Protocol

import numpy as np

from cortex.domain.connections import Connection, ConnectionLabel
from cortex.domain.note import EmbeddedNote, Note, SimilarNote, TagCount


class VectorDB(Protocol):
    def insert_note(self, note: EmbeddedNote) -> Note:
        """Store a new note together with its embedding."""
        ...

    def get_note(self, note_id: str) -> Note | None:
        """Get a note by its ID."""
        ...

    def get_notes_by_ids(self, note_ids: Iterable[str]) -> dict[str, Note]:
        """Get multiple notes by their IDs, returning a dictionary mapping ID to Note.

        Args:
            note_ids: IDs of the notes to retrieve

        Returns:
            Dictionary mapping note_id to Note for all found notes
        """
        ...

    def delete_note(self, note_id: str) -> None:
        """Delete a note and every connection where it is either endpoint."""
        ...

    def search_by_embedding(
        self, vector: np.ndarray, limit: int, tags: list[str] | None = None
    ) -> List[SimilarNote]:
        """Get the notes most similar to a vector, best match first.

        When tags are given only notes holding all of them are considered.
        """
        ...

    def upsert_connection(
        self,
        source_id: str,
        target_id: str,
        label: ConnectionLabel,
        strength: float,
        reasoning: str | None,
    ) -> Connection:
        """Create a connection, or replace strength and reasoning of an existing
        connection with the same (source_id, target_id, label)."""
        ...

    def get_connections_for_notes(
        self, note_ids: Iterable[str], min_strength: float
    ) -> List[Connection]:
        """Get connections with strength >= min_strength touching any of the notes."""
        ...

    def get_recent_notes(
        self, limit: int, tag: str | None = None, since: datetime | None = None
    ) -> List[Note]:
        """Get the most recently created notes, newest first."""
        ...

    def list_tags(self, limit: int) -> List[TagCount]:
        """Get tags with their usage counts, most used first."""
        ...

    def save(self, filepath: str | None = None) -> None:
        """Save the database to disk."""
        ...
