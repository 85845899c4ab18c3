"""Relationship discovery for freshly saved notes."""

import logging
from dataclasses import dataclass
from typing import Callable, List

from cortex.domain.connections import (
    ConnectionAssessment,
    ConnectionLabel,
    ConnectResult,
    CreatedConnection,
    clamp_strength,
)
from cortex.domain.note import EmbeddedNote, SimilarNote
from cortex.llms.base import RelationshipClassifier
from cortex.vector_dbs.base import VectorDB

logger = logging.getLogger(__name__)


@dataclass
class ClassificationOutcome:
    """What the classifier produced for a set of candidates."""

    assessments: List[ConnectionAssessment]
    error: Exception | None = None


@dataclass(frozen=True)
class SimilarityFallback:
    """Synthesizes edges from embedding similarity when the classifier does not deliver.

    Attributes:
        applies: Predicate over the classification outcome
        min_similarity: Candidates below this similarity are skipped
        max_edges: Upper bound on synthesized edges
        label: Label given to every synthesized edge
        reasoning: Justification stored on every synthesized edge
        warning: Warning prefix reported to the caller, or None for a silent fallback
    """

    applies: Callable[[ClassificationOutcome], bool]
    min_similarity: float
    max_edges: int
    label: ConnectionLabel
    reasoning: str
    warning: str | None = None

    def propose(self, candidates: List[SimilarNote]) -> List[ConnectionAssessment]:
        eligible = [c for c in candidates if c.similarity >= self.min_similarity]
        return [
            ConnectionAssessment(
                note_id=candidate.id,
                label=self.label,
                strength=clamp_strength(candidate.similarity),
                reasoning=self.reasoning,
            )
            for candidate in eligible[: self.max_edges]
        ]


FALLBACK_POLICIES: tuple[SimilarityFallback, ...] = (
    SimilarityFallback(
        applies=lambda outcome: outcome.error is not None,
        min_similarity=0.4,
        max_edges=3,
        label="related_to",
        reasoning=(
            "Fallback edge created from embedding similarity when relationship "
            "classification was unavailable."
        ),
        warning="Note saved. Relationship classification failed, using similarity fallback",
    ),
    SimilarityFallback(
        applies=lambda outcome: not outcome.assessments,
        min_similarity=0.5,
        max_edges=2,
        label="related_to",
        reasoning="Auto-connected from high embedding similarity (no explicit relationship found).",
    ),
)


class ConnectionEngine:
    """Connects a new note to related existing notes in the knowledge graph."""

    def __init__(
        self,
        *,
        vector_db: VectorDB,
        classifier: RelationshipClassifier,
        top_k: int = 5,
        preview_chars: int = 300,
        fallbacks: tuple[SimilarityFallback, ...] = FALLBACK_POLICIES,
    ):
        """Initialize the engine with its collaborators.

        Args:
            vector_db: Store used for similarity search and edge persistence
            classifier: Proposes typed relationships between notes
            top_k: Number of similar notes considered as candidates
            preview_chars: Candidate content is truncated to this length before classification
            fallbacks: Ordered similarity fallbacks, first match wins
        """
        self.vector_db = vector_db
        self.classifier = classifier
        self.top_k = top_k
        self.preview_chars = preview_chars
        self.fallbacks = fallbacks

    def connect(self, note: EmbeddedNote) -> ConnectResult:
        """Discover and persist relationships for a note that is already saved.

        Never raises: failures after the note was saved are reported as a warning.
        """
        result = ConnectResult()
        try:
            candidates = [
                c
                for c in self.vector_db.search_by_embedding(note.vector, self.top_k)
                if c.id != note.id
            ]
            if not candidates:
                return result

            outcome = self._classify(note, candidates)
            assessments, result.warning = self._resolve(outcome, candidates)
            self._persist(note, assessments, candidates, result)
        except Exception as e:
            logger.exception(f"Post-save enrichment failed for note {note.id}")
            result.warning = _join(
                f"Note saved, but relationship analysis could not be completed: {e}",
                result.warning,
            )

        if result.failed:
            result.warning = _join(
                result.warning,
                f"Failed to persist {result.failed} connection(s). Check server logs for details.",
            )
        return result

    def _classify(self, note: EmbeddedNote, candidates: List[SimilarNote]) -> ClassificationOutcome:
        previews = [
            c.model_copy(update={"content": c.content[: self.preview_chars]}) for c in candidates
        ]
        try:
            assessments = self.classifier.classify(note.to_note(), previews)
        except Exception as e:
            logger.warning(f"Relationship classification failed for note {note.id}: {e}")
            return ClassificationOutcome(assessments=[], error=e)

        candidate_ids = {c.id for c in candidates}
        known = [a for a in assessments if a.note_id in candidate_ids]
        if len(known) < len(assessments):
            logger.debug(f"Ignored {len(assessments) - len(known)} proposal(s) for unknown notes")
        return ClassificationOutcome(known)

    def _resolve(
        self, outcome: ClassificationOutcome, candidates: List[SimilarNote]
    ) -> tuple[List[ConnectionAssessment], str | None]:
        for fallback in self.fallbacks:
            if fallback.applies(outcome):
                warning = None
                if fallback.warning:
                    warning = f"{fallback.warning}: {outcome.error}"
                return fallback.propose(candidates), warning
        return outcome.assessments, None

    def _persist(
        self,
        note: EmbeddedNote,
        assessments: List[ConnectionAssessment],
        candidates: List[SimilarNote],
        result: ConnectResult,
    ) -> None:
        titles = {c.id: c.title for c in candidates}
        for assessment in assessments:
            strength = clamp_strength(assessment.strength)
            try:
                self.vector_db.upsert_connection(
                    note.id, assessment.note_id, assessment.label, strength, assessment.reasoning
                )
            except Exception:
                result.failed += 1
                logger.exception(
                    f"Failed to persist connection {note.id} -> {assessment.note_id}"
                )
                continue
            result.connections.append(
                CreatedConnection(
                    target_id=assessment.note_id,
                    target_title=titles.get(assessment.note_id),
                    label=assessment.label,
                    strength=strength,
                    reasoning=assessment.reasoning,
                )
            )


def _join(*messages: str | None) -> str | None:
    parts = [m for m in messages if m]
    return " ".join(parts) if parts else None
