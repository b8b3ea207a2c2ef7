"""Keep one ticket's outgoing references consistent with its comments.

Every reconciliation of ticket ``T`` runs inside one unit of work:

1. read ``T``'s fence
2. claim ``T`` by advancing the fence from the value read in step 1
3. read the mutated comment's siblings and ``T``'s connected targets
4. compute the delta and apply it, connect before disconnect

The claim is a compare-and-set write on ``T``'s row, so it holds the row (or
database) write lock until the unit of work ends. A second reconciliation of
``T`` waits at step 2 and then sees a moved fence. It raises
``TransactionConflict``, the unit of work rolls back, and the whole sequence is
retried with fresh reads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt

from ticketref.config import ReconcilerSettings

from .delta import ReferenceDelta, apply_delta, collect_mentions, delta_from_mentions
from .errors import CommentNotFound, TransactionConflict
from .extract import DEFAULT_PATTERN, ReferencePattern, extract_from_texts
from .mutations import CommentEvent, CommentMutation
from .rebuild import drift_for_ticket

if TYPE_CHECKING:
    from collections.abc import Callable

    from ticketref.domain.ports.unit_of_work import ReferenceRepositories, ReferenceUnitOfWork

    from .mutations import ReconcileRequest

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconcileResult:
    """Delta committed by a reconciliation and the attempts it took."""

    delta: ReferenceDelta
    attempts: int = 1


@dataclass(slots=True)
class ReferenceReconciler:
    """Apply comment mutations to the reference graph."""

    unit_of_work_factory: Callable[[], ReferenceUnitOfWork]
    settings: ReconcilerSettings = field(default_factory=ReconcilerSettings)
    pattern: ReferencePattern = DEFAULT_PATTERN

    def reconcile(self, request: ReconcileRequest) -> ReconcileResult:
        """Reconcile in a unit of work of our own, retrying on conflict."""

        return self._with_retry(
            _request_label(request),
            lambda uow: self.reconcile_within(uow, request),
        )

    def rebuild(self, ticket_id: str) -> ReconcileResult:
        """Recompute ``ticket_id``'s targets from all of its comments."""

        return self._with_retry(
            f"rebuild of ticket {ticket_id}",
            lambda uow: self.rebuild_within(uow, ticket_id),
        )

    def reconcile_within(
        self,
        uow: ReferenceUnitOfWork,
        request: ReconcileRequest,
    ) -> ReferenceDelta:
        """Run one reconciliation inside a unit of work owned by the caller.

        Nothing is committed here, and ``TransactionConflict`` propagates so the
        caller can retry its own transaction.
        """

        repositories = uow.repositories
        mutation = _resolve(repositories, request)
        ticket_id = mutation.ticket_id
        fence = repositories.tickets.read_fence(ticket_id)

        mentioned = extract_from_texts(
            (mutation.old_text, mutation.new_text),
            pattern=self.pattern,
        )
        if not mentioned - {ticket_id}:
            log.debug("No mentions in comment %s on ticket %s", mutation.comment_id, ticket_id)
            return ReferenceDelta(ticket_id=ticket_id)

        repositories.tickets.advance_fence(ticket_id, fence)

        siblings = repositories.comments.list_other_comments(ticket_id, mutation.comment_id)
        mentions = collect_mentions(
            ticket_id,
            mutation.old_text,
            mutation.new_text,
            [sibling.content for sibling in siblings],
            existing=repositories.tickets.existing_ids,
            pattern=self.pattern,
        )
        delta = delta_from_mentions(
            ticket_id,
            mentions,
            connected=repositories.references.targets_of(ticket_id),
        )
        apply_delta(repositories.references, delta)

        log.debug(
            "Reconciled ticket %s: +%s -%s",
            ticket_id,
            sorted(delta.to_add),
            sorted(delta.to_remove),
        )
        return delta

    def rebuild_within(self, uow: ReferenceUnitOfWork, ticket_id: str) -> ReferenceDelta:
        repositories = uow.repositories
        fence = repositories.tickets.read_fence(ticket_id)
        repositories.tickets.advance_fence(ticket_id, fence)
        delta = drift_for_ticket(repositories, ticket_id, pattern=self.pattern)
        apply_delta(repositories.references, delta)
        if not delta.is_empty:
            log.info(
                "Rebuilt references of ticket %s: +%s -%s",
                ticket_id,
                sorted(delta.to_add),
                sorted(delta.to_remove),
            )
        return delta

    def _with_retry(
        self,
        label: str,
        operation: Callable[[ReferenceUnitOfWork], ReferenceDelta],
    ) -> ReconcileResult:
        retrying = Retrying(
            stop=stop_after_attempt(self.settings.max_attempts),
            retry=retry_if_exception_type(TransactionConflict),
            before_sleep=before_sleep_log(log, logging.WARNING),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt, self.unit_of_work_factory() as uow:
                    delta = operation(uow)
                    uow.commit()
        except TransactionConflict:
            log.error("Giving up on %s after %s attempts", label, self.settings.max_attempts)
            raise
        return ReconcileResult(delta=delta, attempts=attempt.retry_state.attempt_number)


def _resolve(repositories: ReferenceRepositories, request: ReconcileRequest) -> CommentMutation:
    if isinstance(request, CommentMutation):
        return request
    comment = repositories.comments.get_comment(request.comment_id)
    if comment is None:
        raise CommentNotFound(request.comment_id)
    return request.resolve(comment)


def _request_label(request: ReconcileRequest) -> str:
    if isinstance(request, CommentEvent):
        return f"{request.kind} comment {request.comment_id}"
    return f"comment {request.comment_id} on ticket {request.ticket_id}"
