"""Public domain model surface."""

from __future__ import annotations

from ticketref.domain.model.enums import MutationKind
from ticketref.domain.model.tickets import Comment, ReferenceEdge, Ticket, new_id

__all__ = [
    "Comment",
    "MutationKind",
    "ReferenceEdge",
    "Ticket",
    "new_id",
]
