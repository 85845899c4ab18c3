from typing import List

from instructor import Instructor
from loguru import logger

from cortex.domain.connections import CONNECTION_LABELS, ConnectionAssessment
from cortex.domain.note import Note, SimilarNote
from cortex.errors import ProviderError
from cortex.llms.schemas import ProposedRelationship, ProposedRelationships
from cortex.prompt import get_classification_prompt


def is_valid_proposal(proposal: ProposedRelationship) -> bool:
    return proposal.label in CONNECTION_LABELS and 0.0 <= proposal.strength <= 1.0


class InstructorRelationshipClassifier:
    def __init__(
        self,
        instructor: Instructor,
        model: str = "claude-3-5-sonnet-20241022",
        preview_chars: int = 300,
    ) -> None:
        self.instructor = instructor
        self.model = model
        self.preview_chars = preview_chars

    def classify(self, note: Note, candidates: List[SimilarNote]) -> List[ConnectionAssessment]:
        if not candidates:
            return []

        prompt = get_classification_prompt(
            note=note, candidates=candidates, preview_chars=self.preview_chars
        )
        try:
            response = self.instructor.chat.completions.create(
                model=self.model,
                max_tokens=1024,
                temperature=0.1,
                messages=[{"role": "user", "content": prompt}],
                response_model=ProposedRelationships,
            )
        except Exception as e:
            raise ProviderError(f"Relationship classification failed: {e}") from e

        assessments = [
            ConnectionAssessment(
                note_id=proposal.note_id,
                label=proposal.label,  # type: ignore[arg-type]
                strength=proposal.strength,
                reasoning=proposal.reasoning,
            )
            for proposal in response.relationships
            if is_valid_proposal(proposal)
        ]
        dropped = len(response.relationships) - len(assessments)
        if dropped:
            logger.debug(f"Dropped {dropped} invalid relationship proposal(s)")
        return assessments
