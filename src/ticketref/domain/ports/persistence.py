"""Ports for reading tickets and comments and persisting the reference graph."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ticketref.domain.model import Comment, Ticket

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class CommentProvider(Repository[Comment], Protocol):
    """Read access to comments. The reference subsystem never edits them."""

    def get_comment(self, comment_id: str) -> Comment | None: ...

    def list_other_comments(
        self,
        ticket_id: str,
        excluding_comment_id: str | None,
    ) -> Sequence[Comment]: ...


@runtime_checkable
class TicketDirectory(Repository[Ticket], Protocol):
    """Ticket existence checks plus the per-ticket reconciliation fence."""

    def get(self, ticket_id: str) -> Ticket | None: ...

    def get_many(self, ticket_ids: Iterable[str]) -> list[Ticket]: ...

    def existing_ids(self, ticket_ids: Iterable[str]) -> set[str]: ...

    def read_fence(self, ticket_id: str) -> int:
        """Return the current fence; raise ``TicketNotFound`` for unknown tickets."""
        ...

    def advance_fence(self, ticket_id: str, expected: int) -> int:
        """Bump the fence if it still equals ``expected``; raise ``TransactionConflict`` if not."""
        ...


@runtime_checkable
class ReferenceGraphStore(Protocol):
    """Directed ticket -> ticket edges. Both write primitives are idempotent."""

    def connect(self, ticket_id: str, target_ids: Iterable[str]) -> None: ...

    def disconnect(self, ticket_id: str, target_ids: Iterable[str]) -> None: ...

    def targets_of(self, ticket_id: str) -> set[str]: ...
