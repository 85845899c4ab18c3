"""Note domain models."""

from datetime import datetime, timezone
from typing import Annotated, Literal
from uuid import uuid4

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer

NoteSource = Literal["manual", "auto", "conversation"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class Note(BaseModel):
    """Represents a stored note.

    Attributes:
        id: Unique identifier (uuid4 string)
        title: Optional short title
        content: The note text
        tags: Tags attached to the note, order is not significant
        source: Where the note originated from
        created_at: Creation timestamp (UTC)
        updated_at: Last update timestamp (UTC)
    """

    id: str = Field(default_factory=new_id)
    title: str | None = Field(default=None, max_length=200)
    content: str = Field(min_length=1, max_length=10000)
    tags: list[Annotated[str, Field(max_length=50)]] = Field(default=[], max_length=10)
    source: NoteSource = "manual"
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def embedding_text(self) -> str:
        """Text that gets embedded for this note."""
        return f"{self.title}\n{self.content}" if self.title else self.content


def nd_array_before_validator(x: list[float]) -> NDArray[np.float32]:
    return np.array(x, dtype=np.float32)


def nd_array_serializer(x: NDArray[np.float32]) -> list[float]:
    return x.tolist()  # type: ignore


NumPyArray = Annotated[
    np.ndarray,
    BeforeValidator(nd_array_before_validator),
    PlainSerializer(nd_array_serializer, return_type=list),
]


class EmbeddedNote(Note):
    vector: NumPyArray

    model_config = {"arbitrary_types_allowed": True}

    def to_note(self) -> Note:
        return Note(**self.model_dump(exclude={"vector"}))


class SimilarNote(BaseModel):
    """A note returned by similarity search, scored against a query vector."""

    id: str
    title: str | None
    content: str
    tags: list[str] = []
    similarity: float = Field(ge=0.0, le=1.0)


class TagCount(BaseModel):
    tag: str
    count: int
