"""Hooks called by the comment-persistence layer after a comment changes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ticketref.domain.model import MutationKind

from .mutations import CommentEvent, CommentMutation

if TYPE_CHECKING:
    from ticketref.domain.model import Comment

    from .reconciler import ReconcileResult, ReferenceReconciler


@dataclass(slots=True)
class ReferenceTrigger:
    """Entry point that turns comment writes into reference reconciliations."""

    reconciler: ReferenceReconciler

    def on_comment_mutation(
        self,
        ticket_id: str,
        comment_id: str | None,
        old_text: str | None,
        new_text: str | None,
    ) -> ReconcileResult:
        return self.reconciler.reconcile(
            CommentMutation(
                ticket_id=ticket_id,
                comment_id=comment_id,
                old_text=old_text,
                new_text=new_text,
            )
        )

    def on_comment_event(self, event: CommentEvent) -> ReconcileResult:
        return self.reconciler.reconcile(event)

    def on_comment_created(self, comment: Comment) -> ReconcileResult:
        return self.reconciler.reconcile(CommentMutation.created(comment))

    def on_comment_updated(self, comment: Comment, previous_text: str) -> ReconcileResult:
        return self.reconciler.reconcile(CommentMutation.updated(comment, previous_text))

    def on_comment_deleted(self, comment: Comment) -> ReconcileResult:
        return self.reconciler.reconcile(CommentMutation.deleted(comment))

    def notify(
        self,
        comment_id: str,
        kind: MutationKind | str,
        *,
        previous_text: str | None = None,
    ) -> ReconcileResult:
        """Identifier form; the comment is loaded inside the reconciliation scope."""

        event = CommentEvent(
            comment_id=comment_id,
            kind=MutationKind(kind),
            previous_text=previous_text,
        )
        return self.on_comment_event(event)
