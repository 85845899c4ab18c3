"""Connection (graph edge) domain models."""

from datetime import datetime
from typing import Literal, get_args

from pydantic import BaseModel, Field

from cortex.domain.note import Note, new_id, utc_now

ConnectionLabel = Literal["supports", "contradicts", "follows_from", "expands_on", "related_to"]

CONNECTION_LABELS: frozenset[str] = frozenset(get_args(ConnectionLabel))


def clamp_strength(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class Connection(BaseModel):
    """A directed, labeled, weighted edge between two notes.

    The triple (source_id, target_id, label) is unique within a store.
    """

    id: str = Field(default_factory=new_id)
    source_id: str
    target_id: str
    label: ConnectionLabel
    strength: float = Field(default=1.0, ge=0.0, le=1.0)
    reasoning: str | None = None
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source_id, self.target_id, self.label)

    def other_end(self, note_id: str) -> str:
        """Return the endpoint opposite to note_id."""
        return self.target_id if self.source_id == note_id else self.source_id


class ConnectionAssessment(BaseModel):
    """A proposed relationship between a new note and an existing one."""

    note_id: str
    label: ConnectionLabel
    strength: float = Field(ge=0.0, le=1.0)
    reasoning: str


class CreatedConnection(BaseModel):
    target_id: str
    target_title: str | None
    label: ConnectionLabel
    strength: float
    reasoning: str | None


class ConnectResult(BaseModel):
    """Outcome of relationship discovery for a freshly saved note."""

    connections: list[CreatedConnection] = []
    warning: str | None = None
    failed: int = 0


class GraphNode(BaseModel):
    """A note reached by graph traversal, with the edge it was reached through."""

    id: str
    title: str | None
    content: str
    tags: list[str] = []
    depth: int
    connection_label: ConnectionLabel
    connection_strength: float


class InterestGraph(BaseModel):
    nodes: list[Note] = []
    edges: list[Connection] = []
