"""Tests for one-hop and multi-hop graph traversal."""

import pytest

from cortex.errors import InvalidRequestError
from cortex.graph.traversal import GraphTraversal
from cortex.vector_dbs.local_db import LocalVectorDB
from tests.conftest import make_edge, make_note


def _traversal(note_ids: list[str], edges) -> GraphTraversal:  # noqa: ANN001
    vector_db = LocalVectorDB.from_data(
        notes=[make_note(note_id) for note_id in note_ids], connections=edges
    )
    return GraphTraversal(vector_db)


def test_direct_connections_filter_by_strength() -> None:
    traversal = _traversal(
        ["root", "X", "Y"],
        [make_edge("root", "X", 0.6), make_edge("root", "Y", 0.2)],
    )

    results = traversal.direct_connections("root", 0.3)

    assert [r.id for r in results] == ["X"]
    assert results[0].depth == 1
    assert results[0].connection_strength == 0.6


def test_direct_connections_follow_incoming_edges() -> None:
    traversal = _traversal(
        ["root", "in", "out"],
        [make_edge("in", "root", 0.5, "supports"), make_edge("root", "out", 0.4)],
    )

    results = traversal.direct_connections("root", 0.3)

    assert {r.id for r in results} == {"in", "out"}
    incoming = next(r for r in results if r.id == "in")
    assert incoming.connection_label == "supports"


def test_direct_connections_keep_one_entry_per_edge() -> None:
    traversal = _traversal(
        ["root", "X"],
        [make_edge("root", "X", 0.8, "supports"), make_edge("X", "root", 0.5, "expands_on")],
    )

    results = traversal.direct_connections("root", 0.3)

    assert [(r.id, r.connection_label) for r in results] == [
        ("X", "supports"),
        ("X", "expands_on"),
    ]


def test_direct_connections_never_include_root() -> None:
    traversal = _traversal(
        ["root", "X"],
        [make_edge("root", "root", 0.9), make_edge("root", "X", 0.9)],
    )

    results = traversal.direct_connections("root", 0.0)

    assert [r.id for r in results] == ["X"]


def test_isolated_note_returns_empty_results() -> None:
    traversal = _traversal(["root", "other"], [])

    assert traversal.direct_connections("root", 0.3) == []
    assert traversal.deep_connections("root", 3, 0.3) == []


def test_deep_connections_report_shortest_depth() -> None:
    """root->P->Q plus root->Q directly: Q appears once, at depth 1."""
    traversal = _traversal(
        ["root", "P", "Q"],
        [
            make_edge("root", "P", 0.5),
            make_edge("P", "Q", 0.5),
            make_edge("root", "Q", 0.5),
        ],
    )

    results = traversal.deep_connections("root", 2, 0.3)

    assert sorted((r.id, r.depth) for r in results) == [("P", 1), ("Q", 1)]


def test_deep_connections_walk_multiple_hops_in_either_direction() -> None:
    traversal = _traversal(
        ["root", "a", "b", "c", "d"],
        [
            make_edge("root", "a", 0.9),
            make_edge("b", "a", 0.8, "follows_from"),
            make_edge("b", "c", 0.7),
            make_edge("c", "d", 0.7),
        ],
    )

    results = traversal.deep_connections("root", 3, 0.3)

    assert [(r.id, r.depth) for r in results] == [("a", 1), ("b", 2), ("c", 3)]
    assert results[1].connection_label == "follows_from"
    assert results[1].connection_strength == 0.8


def test_deep_connections_exclude_root_and_duplicates_in_cycles() -> None:
    traversal = _traversal(
        ["root", "a", "b"],
        [
            make_edge("root", "a", 0.9),
            make_edge("a", "b", 0.9),
            make_edge("b", "root", 0.9),
            make_edge("a", "b", 0.6, "supports"),
        ],
    )

    results = traversal.deep_connections("root", 3, 0.3)
    ids = [r.id for r in results]

    assert "root" not in ids
    assert len(ids) == len(set(ids))
    assert {(r.id, r.depth) for r in results} == {("a", 1), ("b", 1)}


def test_deep_connections_ignore_weak_edges() -> None:
    traversal = _traversal(
        ["root", "a", "b", "c"],
        [
            make_edge("root", "a", 0.9),
            make_edge("a", "b", 0.1),
            make_edge("root", "c", 0.29),
        ],
    )

    results = traversal.deep_connections("root", 3, 0.3)

    assert [r.id for r in results] == ["a"]


def test_deep_connections_weak_shortcut_does_not_shorten_depth() -> None:
    traversal = _traversal(
        ["root", "a", "b"],
        [
            make_edge("root", "a", 0.9),
            make_edge("a", "b", 0.9),
            make_edge("root", "b", 0.1),
        ],
    )

    results = traversal.deep_connections("root", 2, 0.3)

    assert [(r.id, r.depth) for r in results] == [("a", 1), ("b", 2)]


def test_deep_connections_respect_max_depth() -> None:
    traversal = _traversal(
        ["root", "a", "b", "c"],
        [make_edge("root", "a", 0.9), make_edge("a", "b", 0.9), make_edge("b", "c", 0.9)],
    )

    results = traversal.deep_connections("root", 2, 0.3)

    assert [r.id for r in results] == ["a", "b"]


def test_equal_depth_tie_resolves_to_strongest_edge() -> None:
    traversal = _traversal(
        ["root", "p1", "p2", "q"],
        [
            make_edge("root", "p1", 0.9),
            make_edge("root", "p2", 0.9),
            make_edge("p1", "q", 0.4, "supports"),
            make_edge("p2", "q", 0.8, "expands_on"),
        ],
    )

    results = traversal.deep_connections("root", 2, 0.3)
    q = [r for r in results if r.id == "q"]

    assert len(q) == 1
    assert q[0].depth == 2
    assert (q[0].connection_label, q[0].connection_strength) == ("expands_on", 0.8)


def test_related_routes_by_depth() -> None:
    traversal = _traversal(
        ["root", "X"],
        [make_edge("root", "X", 0.8, "supports"), make_edge("X", "root", 0.5)],
    )

    assert len(traversal.related("root", 1, 0.3)) == 2
    assert len(traversal.related("root", 2, 0.3)) == 1


@pytest.mark.parametrize("max_depth", [0, 1])
def test_deep_connections_require_depth_of_two(max_depth: int) -> None:
    traversal = _traversal(["root"], [])

    with pytest.raises(InvalidRequestError):
        traversal.deep_connections("root", max_depth, 0.3)


def test_out_of_range_strength_is_rejected() -> None:
    traversal = _traversal(["root"], [])

    with pytest.raises(InvalidRequestError):
        traversal.direct_connections("root", 1.5)
