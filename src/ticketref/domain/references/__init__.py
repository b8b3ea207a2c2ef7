"""Derived ticket -> ticket reference graph maintained from comment text.

Flow per comment mutation:
1) the trigger receives the mutation from the comment-persistence layer
2) the reconciler reads the ticket fence, the prior text and the sibling comments
3) mentions are extracted and turned into an add/remove delta
4) the delta is written through the graph store and the fence advanced,
   all in one unit of work
"""

from __future__ import annotations

from .delta import ReferenceDelta, apply_delta, compute_delta, expected_targets
from .errors import (
    CommentNotFound,
    GraphStoreFailure,
    TicketNotFound,
    TicketReferenceError,
    TransactionConflict,
)
from .extract import DEFAULT_PATTERN, ReferencePattern, extract_from_texts, extract_ticket_ids
from .mutations import CommentEvent, CommentMutation
from .rebuild import find_drift
from .reconciler import ReconcileResult, ReferenceReconciler
from .trigger import ReferenceTrigger

__all__ = [
    "DEFAULT_PATTERN",
    "CommentEvent",
    "CommentMutation",
    "CommentNotFound",
    "GraphStoreFailure",
    "ReconcileResult",
    "ReferenceDelta",
    "ReferencePattern",
    "ReferenceReconciler",
    "ReferenceTrigger",
    "TicketNotFound",
    "TicketReferenceError",
    "TransactionConflict",
    "apply_delta",
    "compute_delta",
    "expected_targets",
    "extract_from_texts",
    "extract_ticket_ids",
    "find_drift",
]
