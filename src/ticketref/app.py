"""Application wiring for the reference subsystem."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from ticketref.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from ticketref.config import get_reconciler_settings, get_reference_settings
from ticketref.domain.ports.unit_of_work import ReferenceUnitOfWork
from ticketref.domain.references import (
    ReferencePattern,
    ReferenceReconciler,
    ReferenceTrigger,
    find_drift,
)

if TYPE_CHECKING:
    from ticketref.config import ReconcilerSettings, ReferenceSettings
    from ticketref.domain.model import Ticket
    from ticketref.domain.references import ReconcileResult, ReferenceDelta

UnitOfWorkFactory = Callable[[], ReferenceUnitOfWork]


log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def build_reconciler(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    settings: ReconcilerSettings | None = None,
    reference_settings: ReferenceSettings | None = None,
) -> ReferenceReconciler:
    """Create a reconciler bound to the configured store."""

    effective_settings = settings or get_reconciler_settings()
    pattern = ReferencePattern.from_settings(reference_settings or get_reference_settings())
    return ReferenceReconciler(
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        settings=effective_settings,
        pattern=pattern,
    )


def build_trigger(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    settings: ReconcilerSettings | None = None,
    reference_settings: ReferenceSettings | None = None,
) -> ReferenceTrigger:
    """Create the hook object the comment-persistence layer calls after each write."""

    return ReferenceTrigger(
        reconciler=build_reconciler(
            unit_of_work_factory=unit_of_work_factory,
            settings=settings,
            reference_settings=reference_settings,
        )
    )


def referenced_tickets(
    ticket_id: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[Ticket]:
    """Tickets referenced from ``ticket_id``'s comments, ordered by title."""

    factory = unit_of_work_factory or _default_unit_of_work_factory()
    with factory() as uow:
        repositories = uow.repositories
        tickets = repositories.tickets.get_many(repositories.references.targets_of(ticket_id))
    return sorted(tickets, key=lambda ticket: (ticket.title, ticket.id))


def check_ticket_references(
    ticket_id: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    reference_settings: ReferenceSettings | None = None,
) -> ReferenceDelta:
    """Report how ``ticket_id``'s stored edges differ from its comments."""

    factory = unit_of_work_factory or _default_unit_of_work_factory()
    pattern = ReferencePattern.from_settings(reference_settings or get_reference_settings())
    with factory() as uow:
        delta = find_drift(uow, ticket_id, pattern=pattern)
    if not delta.is_empty:
        log.warning(
            "Ticket %s references drifted: missing=%s stale=%s",
            ticket_id,
            sorted(delta.to_add),
            sorted(delta.to_remove),
        )
    return delta


def rebuild_ticket_references(
    ticket_ids: list[str],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    settings: ReconcilerSettings | None = None,
    reference_settings: ReferenceSettings | None = None,
) -> dict[str, ReconcileResult]:
    """Recompute the references of each ticket from scratch."""

    reconciler = build_reconciler(
        unit_of_work_factory=unit_of_work_factory,
        settings=settings,
        reference_settings=reference_settings,
    )
    log.info("Rebuilding references for %s tickets", len(ticket_ids))
    results = {ticket_id: reconciler.rebuild(ticket_id) for ticket_id in ticket_ids}
    changed = sum(1 for result in results.values() if not result.delta.is_empty)
    log.info("Finished rebuild: changed=%s, total=%s", changed, len(results))
    return results
