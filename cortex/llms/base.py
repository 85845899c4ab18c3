from typing import List, Protocol

from cortex.domain.connections import ConnectionAssessment
from cortex.domain.note import Note, SimilarNote
from cortex.errors import ProviderError


class RelationshipClassifier(Protocol):
    def classify(self, note: Note, candidates: List[SimilarNote]) -> List[ConnectionAssessment]:
        """Propose relationships between a new note and candidate notes.

        May return fewer entries than candidates, including none. Raises
        ProviderError when the backend cannot be reached.
        """
        ...


class UnconfiguredClassifier:
    """Stand-in used when no classification backend is configured."""

    def classify(self, note: Note, candidates: List[SimilarNote]) -> List[ConnectionAssessment]:
        raise ProviderError("Relationship classifier is not configured (missing API key)")
