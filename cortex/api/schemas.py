"""Request bodies accepted by the HTTP surface."""

from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field

from cortex.domain.note import NoteSource

Tag = Annotated[str, Field(max_length=50)]


class SaveNoteRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, max_length=200, description="Short title for the note")
    content: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="The note content: an idea, insight, decision, or any thought worth remembering",
    )
    tags: List[Tag] = Field(
        default_factory=list,
        max_length=10,
        description="Tags for this note, for example ['strategy', 'launch', 'decision']",
    )
    source: NoteSource = Field("manual", description="Where this note originated from")
