from typing import List

from pydantic import BaseModel, Field


class ProposedRelationship(BaseModel):
    """A relationship between the new note and one candidate note"""

    note_id: str = Field(..., description="The id of the candidate note, exactly as given")
    label: str = Field(
        ...,
        description="One of: supports, contradicts, follows_from, expands_on, related_to",
    )
    strength: float = Field(..., description="How strong the relationship is, from 0.0 to 1.0")
    reasoning: str = Field("", description="One short sentence explaining the relationship")


class ProposedRelationships(BaseModel):
    """Relationships found between the new note and the candidate notes"""

    relationships: List[ProposedRelationship] = Field(
        default_factory=list,
        description="Only genuinely meaningful relationships. Leave empty if there are none.",
    )
