"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from ticketref.adapters.sqlalchemy.mappings import (
    comment_table,
    ticket_reference_table,
    ticket_table,
)
from ticketref.domain.model import Comment, Ticket
from ticketref.domain.references.errors import (
    GraphStoreFailure,
    TicketNotFound,
    TransactionConflict,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy import CursorResult
    from sqlalchemy.orm import Session


class SqlAlchemyCommentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Comment) -> None:
        self.session.add(entity)

    def get_comment(self, comment_id: str) -> Comment | None:
        return self.session.get(Comment, comment_id)

    def list_other_comments(
        self,
        ticket_id: str,
        excluding_comment_id: str | None,
    ) -> Sequence[Comment]:
        stmt = (
            select(Comment)
            .where(comment_table.c.ticket_id == ticket_id)
            .order_by(comment_table.c.updated_at, comment_table.c.id)
        )
        if excluding_comment_id is not None:
            stmt = stmt.where(comment_table.c.id != excluding_comment_id)
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyTicketRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Ticket) -> None:
        self.session.add(entity)

    def get(self, ticket_id: str) -> Ticket | None:
        return self.session.get(Ticket, ticket_id)

    def get_many(self, ticket_ids: Iterable[str]) -> list[Ticket]:
        wanted = set(ticket_ids)
        if not wanted:
            return []
        stmt = select(Ticket).where(ticket_table.c.id.in_(sorted(wanted)))
        return list(self.session.execute(stmt).scalars())

    def existing_ids(self, ticket_ids: Iterable[str]) -> set[str]:
        wanted = set(ticket_ids)
        if not wanted:
            return set()
        stmt = select(ticket_table.c.id).where(ticket_table.c.id.in_(sorted(wanted)))
        return set(self.session.execute(stmt).scalars())

    def read_fence(self, ticket_id: str) -> int:
        # flush so tickets added in this session are visible to the Core query
        self.session.flush()
        stmt = select(ticket_table.c.reference_fence).where(ticket_table.c.id == ticket_id)
        fence = self.session.execute(stmt).scalar_one_or_none()
        if fence is None:
            raise TicketNotFound(ticket_id)
        return fence

    def advance_fence(self, ticket_id: str, expected: int) -> int:
        stmt = (
            update(ticket_table)
            .where(ticket_table.c.id == ticket_id)
            .where(ticket_table.c.reference_fence == expected)
            .values(reference_fence=expected + 1)
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        if result.rowcount != 1:
            raise TransactionConflict(ticket_id, expected_fence=expected)
        return expected + 1


class SqlAlchemyReferenceGraph:
    """Reference edges stored in the ``ticket_reference`` association table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def targets_of(self, ticket_id: str) -> set[str]:
        stmt = select(ticket_reference_table.c.target_ticket_id).where(
            ticket_reference_table.c.source_ticket_id == ticket_id
        )
        return set(self.session.execute(stmt).scalars())

    def connect(self, ticket_id: str, target_ids: Iterable[str]) -> None:
        wanted = set(target_ids) - {ticket_id}
        if not wanted:
            return
        try:
            missing = wanted - self.targets_of(ticket_id)
            if missing:
                self.session.execute(
                    insert(ticket_reference_table),
                    [
                        {"source_ticket_id": ticket_id, "target_ticket_id": target}
                        for target in sorted(missing)
                    ],
                )
        except SQLAlchemyError as exc:
            raise GraphStoreFailure(
                f"Failed to connect ticket {ticket_id} to {sorted(wanted)}"
            ) from exc

    def disconnect(self, ticket_id: str, target_ids: Iterable[str]) -> None:
        unwanted = set(target_ids)
        if not unwanted:
            return
        stmt = (
            delete(ticket_reference_table)
            .where(ticket_reference_table.c.source_ticket_id == ticket_id)
            .where(ticket_reference_table.c.target_ticket_id.in_(sorted(unwanted)))
        )
        try:
            self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise GraphStoreFailure(
                f"Failed to disconnect ticket {ticket_id} from {sorted(unwanted)}"
            ) from exc


if TYPE_CHECKING:
    from ticketref.domain.ports.persistence import (
        CommentProvider,
        ReferenceGraphStore,
        TicketDirectory,
    )

    _session_stub = cast("Session", object())
    _comment_repo: CommentProvider = SqlAlchemyCommentRepository(_session_stub)
    _ticket_repo: TicketDirectory = SqlAlchemyTicketRepository(_session_stub)
    _reference_graph: ReferenceGraphStore = SqlAlchemyReferenceGraph(_session_stub)
