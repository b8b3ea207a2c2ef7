from __future__ import annotations

import pytest

from ticketref.domain.model import Comment, ReferenceEdge, Ticket


def test_reference_edge_rejects_self_reference() -> None:
    with pytest.raises(ValueError, match="itself"):
        ReferenceEdge("T1", "T1")


def test_reference_edges_compare_by_value() -> None:
    assert ReferenceEdge("T1", "T2") == ReferenceEdge("T1", "T2")
    assert len({ReferenceEdge("T1", "T2"), ReferenceEdge("T1", "T2")}) == 1


def test_comment_edit_returns_previous_body_and_touches_timestamp() -> None:
    comment = Comment(ticket_id="T1", content="first")
    before = comment.updated_at

    previous = comment.edit("second")

    assert previous == "first"
    assert comment.content == "second"
    assert comment.updated_at >= before


def test_entities_get_distinct_identifiers() -> None:
    assert Ticket().id != Ticket().id
    assert Comment(ticket_id="T1").id != Comment(ticket_id="T1").id
