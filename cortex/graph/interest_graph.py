from cortex.domain.connections import InterestGraph
from cortex.errors import InvalidRequestError
from cortex.vector_dbs.base import VectorDB


class InterestGraphExtractor:
    """Builds the node/edge projection rendered by the interest graph view."""

    def __init__(self, vector_db: VectorDB):
        self.vector_db = vector_db

    def interest_graph(
        self, limit: int, min_strength: float, tag: str | None = None
    ) -> InterestGraph:
        """Get the most recent notes and the edges among them.

        Only edges with both endpoints inside the selected notes are returned, so
        strong edges leading outside the window are dropped.
        """
        if limit < 1:
            raise InvalidRequestError(f"limit must be at least 1, got {limit}")
        if not 0.0 <= min_strength <= 1.0:
            raise InvalidRequestError(f"min_strength must be between 0 and 1, got {min_strength}")

        nodes = self.vector_db.get_recent_notes(limit, tag=tag)
        if not nodes:
            return InterestGraph()

        node_ids = {node.id for node in nodes}
        edges = [
            edge
            for edge in self.vector_db.get_connections_for_notes(node_ids, min_strength)
            if edge.source_id in node_ids and edge.target_id in node_ids
        ]
        edges.sort(key=lambda edge: (-edge.strength, edge.id))
        return InterestGraph(nodes=nodes, edges=edges)
