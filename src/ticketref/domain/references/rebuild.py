"""Full recomputation of a ticket's references, for backfills and audits.

The incremental reconciler only looks at the comment that changed. These
helpers recompute the complete target set from every comment of a ticket and
compare it with the stored edges.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .delta import ReferenceDelta, expected_targets
from .extract import DEFAULT_PATTERN

if TYPE_CHECKING:
    from ticketref.domain.ports.unit_of_work import ReferenceRepositories, ReferenceUnitOfWork

    from .extract import ReferencePattern


def drift_for_ticket(
    repositories: ReferenceRepositories,
    ticket_id: str,
    *,
    pattern: ReferencePattern = DEFAULT_PATTERN,
) -> ReferenceDelta:
    comments = repositories.comments.list_other_comments(ticket_id, None)
    expected = expected_targets(
        ticket_id,
        [comment.content for comment in comments],
        existing=repositories.tickets.existing_ids,
        pattern=pattern,
    )
    stored = frozenset(repositories.references.targets_of(ticket_id))
    return ReferenceDelta(
        ticket_id=ticket_id,
        to_add=expected - stored,
        to_remove=stored - expected,
    )


def find_drift(
    uow: ReferenceUnitOfWork,
    ticket_id: str,
    *,
    pattern: ReferencePattern = DEFAULT_PATTERN,
) -> ReferenceDelta:
    """Return the edits that would make ``ticket_id``'s edges match its comments.

    An empty delta means the ticket is consistent. Nothing is written.
    """

    repositories = uow.repositories
    repositories.tickets.read_fence(ticket_id)
    return drift_for_ticket(repositories, ticket_id, pattern=pattern)
