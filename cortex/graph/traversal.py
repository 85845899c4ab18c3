"""One-hop and multi-hop traversal of the note graph."""

import logging
from typing import List

from cortex.domain.connections import Connection, GraphNode
from cortex.domain.note import Note
from cortex.errors import InvalidRequestError
from cortex.vector_dbs.base import VectorDB

logger = logging.getLogger(__name__)


def _edge_preference(connection: Connection) -> tuple[float, str, str]:
    # Strongest first, then label and id so equal-depth ties resolve deterministically
    return (-connection.strength, connection.label, connection.id)


def _graph_node(note: Note, depth: int, connection: Connection) -> GraphNode:
    return GraphNode(
        id=note.id,
        title=note.title,
        content=note.content,
        tags=note.tags,
        depth=depth,
        connection_label=connection.label,
        connection_strength=connection.strength,
    )


def _check_strength(min_strength: float) -> None:
    if not 0.0 <= min_strength <= 1.0:
        raise InvalidRequestError(f"min_strength must be between 0 and 1, got {min_strength}")


class GraphTraversal:
    """Answers "what is connected to this note" queries.

    Edges are followed regardless of direction. The root itself is never part of
    a result. Callers check that the root exists; an isolated root yields [].
    """

    def __init__(self, vector_db: VectorDB):
        self.vector_db = vector_db

    def related(self, root_id: str, depth: int, min_strength: float) -> List[GraphNode]:
        """Route to direct traversal for depth 1 and deep traversal otherwise."""
        if depth < 1:
            raise InvalidRequestError(f"depth must be at least 1, got {depth}")
        if depth == 1:
            return self.direct_connections(root_id, min_strength)
        return self.deep_connections(root_id, depth, min_strength)

    def direct_connections(self, root_id: str, min_strength: float) -> List[GraphNode]:
        """Get every note joined to the root by a qualifying edge, one entry per edge."""
        _check_strength(min_strength)
        edges = [
            edge
            for edge in self.vector_db.get_connections_for_notes([root_id], min_strength)
            if edge.other_end(root_id) != root_id
        ]
        edges.sort(key=_edge_preference)
        notes = self.vector_db.get_notes_by_ids({edge.other_end(root_id) for edge in edges})

        return [
            _graph_node(notes[edge.other_end(root_id)], 1, edge)
            for edge in edges
            if edge.other_end(root_id) in notes
        ]

    def deep_connections(
        self, root_id: str, max_depth: int, min_strength: float
    ) -> List[GraphNode]:
        """Breadth-first traversal up to max_depth hops.

        Each reachable note is reported once, at the shortest depth it was found,
        with the edge that reached it at that depth.
        """
        if max_depth < 2:
            raise InvalidRequestError(f"max_depth must be at least 2, got {max_depth}")
        _check_strength(min_strength)

        reached: dict[str, tuple[int, Connection]] = {}
        seen = {root_id}
        frontier = [root_id]

        for depth in range(1, max_depth + 1):
            if not frontier:
                break
            frontier_ids = set(frontier)
            best: dict[str, Connection] = {}
            for edge in self.vector_db.get_connections_for_notes(frontier, min_strength):
                for endpoint in (edge.source_id, edge.target_id):
                    if endpoint not in frontier_ids:
                        continue
                    neighbor = edge.other_end(endpoint)
                    if neighbor in seen:
                        continue
                    current = best.get(neighbor)
                    if current is None or _edge_preference(edge) < _edge_preference(current):
                        best[neighbor] = edge

            for neighbor, edge in best.items():
                reached[neighbor] = (depth, edge)
            seen.update(best)
            frontier = sorted(best)

        notes = self.vector_db.get_notes_by_ids(reached)
        missing = set(reached) - set(notes)
        if missing:
            logger.warning(f"Skipping {len(missing)} connected note(s) missing from the store")

        results = [
            _graph_node(notes[note_id], depth, edge)
            for note_id, (depth, edge) in reached.items()
            if note_id in notes
        ]
        results.sort(key=lambda node: (node.depth, -node.connection_strength, node.id))
        return results
