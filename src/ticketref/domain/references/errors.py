"""Failure conditions raised while reconciling the reference graph."""

from __future__ import annotations


class TicketReferenceError(RuntimeError):
    """Base class for reference reconciliation failures."""


class CommentNotFound(TicketReferenceError):
    """The triggering comment could not be loaded."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(f"Comment not found: {comment_id}")
        self.comment_id = comment_id


class TicketNotFound(TicketReferenceError):
    """The ticket owning the mutated comment does not exist."""

    def __init__(self, ticket_id: str) -> None:
        super().__init__(f"Ticket not found: {ticket_id}")
        self.ticket_id = ticket_id


class TransactionConflict(TicketReferenceError):
    """Another reconciliation of the same ticket committed first."""

    def __init__(self, ticket_id: str, *, expected_fence: int | None = None) -> None:
        detail = "" if expected_fence is None else f" (expected fence {expected_fence})"
        super().__init__(f"Concurrent reconciliation on ticket {ticket_id}{detail}")
        self.ticket_id = ticket_id
        self.expected_fence = expected_fence


class GraphStoreFailure(TicketReferenceError):
    """The reference graph store rejected or failed a write."""
