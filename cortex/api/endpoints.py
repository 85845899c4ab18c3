from typing import List
from uuid import UUID

from fastapi import APIRouter, Query

from cortex.api.schemas import SaveNoteRequest
from cortex.service import NoteService


def _create_save_note_endpoint(service: NoteService):
    """Create the save note endpoint handler."""

    def save_note(body: SaveNoteRequest):
        """Save a note, embed it and auto-connect it to related notes."""
        return service.save_note(
            title=body.title, content=body.content, tags=body.tags, source=body.source
        )

    return save_note


def _create_search_endpoint(service: NoteService):
    """Create the semantic search endpoint handler."""

    def search_notes(
        query: str = Query(..., min_length=1, max_length=500),
        limit: int = Query(5, ge=1, le=20),
        tags: List[str] | None = Query(None),
    ):
        results = service.search_notes(query, limit=limit, tags=tags)
        return {"query": query, "count": len(results), "results": results}

    return search_notes


def _create_related_endpoint(service: NoteService):
    """Create the graph traversal endpoint handler."""

    def get_related(
        note_id: UUID,
        depth: int = Query(1, ge=1, le=3),
        min_strength: float = Query(0.3, ge=0.0, le=1.0),
    ):
        related = service.get_related(str(note_id), depth=depth, min_strength=min_strength)
        return {
            "root": related.root,
            "depth": related.depth,
            "min_strength": related.min_strength,
            "connections_count": len(related.connections),
            "connections": related.connections,
        }

    return get_related


def _create_interest_graph_endpoint(service: NoteService):
    """Create the interest graph endpoint handler."""

    def visualize_interests(
        limit: int = Query(50, ge=1, le=200),
        min_similarity: float | None = Query(None, ge=0.0, le=1.0),
        min_strength: float | None = Query(None, ge=0.0, le=1.0),
        tag: str | None = Query(None, max_length=50),
    ):
        threshold = next(
            (value for value in (min_similarity, min_strength) if value is not None), 0.3
        )
        graph = service.visualize_interests(limit=limit, min_strength=threshold, tag=tag)
        return {
            "nodes": graph.nodes,
            "edges": graph.edges,
            "filters": {"requested_limit": limit, "min_similarity": threshold, "tag": tag},
            "message": (
                f"Loaded {len(graph.nodes)} concepts and {len(graph.edges)} connections "
                f"above similarity {threshold:.2f}."
            ),
        }

    return visualize_interests


def get_endpoints_router(*, service: NoteService) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    def health_check():
        return {"status": "healthy"}

    router.post("/api/notes")(_create_save_note_endpoint(service))
    router.get("/api/notes/search")(_create_search_endpoint(service))
    router.get("/api/notes/{note_id}/related")(_create_related_endpoint(service))
    router.get("/api/graph")(_create_interest_graph_endpoint(service))

    @router.get("/api/topics/summary")
    def summarize_topic(
        topic: str = Query(..., min_length=1, max_length=500),
        limit: int = Query(10, ge=1, le=20),
    ):
        summary = service.summarize_topic(topic, limit=limit)
        return {
            "topic": summary.topic,
            "notes_found": len(summary.notes),
            "notes": summary.notes,
            "instruction": summary.instruction,
        }

    @router.get("/api/digest")
    def daily_digest(
        days: int = Query(7, ge=1, le=30),
        limit: int = Query(10, ge=1, le=20),
    ):
        return service.daily_digest(days=days, limit=limit)

    @router.delete("/api/notes/{note_id}")
    def delete_note(note_id: UUID):
        note = service.delete_note(str(note_id))
        return {
            "deleted": True,
            "note_id": note.id,
            "title": note.title,
            "message": f'Deleted note "{note.title or "Untitled"}" and related connections.',
        }

    @router.get("/api/tags")
    def list_tags(limit: int = Query(50, ge=1, le=100)):
        tags = service.list_tags(limit)
        return {"total_tags": len(tags), "tags": tags}

    return router
