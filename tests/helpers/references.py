"""In-memory fakes for the reference-reconciliation ports."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Literal

from ticketref.domain.model import Comment, Ticket
from ticketref.domain.ports.unit_of_work import ReferenceRepositories
from ticketref.domain.references.errors import (
    GraphStoreFailure,
    TicketNotFound,
    TransactionConflict,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from types import TracebackType

type Operation = Callable[["StoreState"], None]


@dataclass(slots=True)
class StoreState:
    tickets: dict[str, Ticket] = field(default_factory=dict[str, Ticket])
    comments: dict[str, Comment] = field(default_factory=dict[str, Comment])
    edges: set[tuple[str, str]] = field(default_factory=set[tuple[str, str]])
    fences: dict[str, int] = field(default_factory=dict[str, int])

    def snapshot(self) -> StoreState:
        return StoreState(
            tickets=dict(self.tickets),
            comments={key: replace(value) for key, value in self.comments.items()},
            edges=set(self.edges),
            fences=dict(self.fences),
        )


@dataclass(slots=True)
class InMemoryDatabase:
    """Committed state shared by every unit of work created from it."""

    state: StoreState = field(default_factory=StoreState)
    commits: int = 0
    sibling_reads: int = 0
    fail_writes: bool = False
    sibling_read_hooks: list[Callable[[], None]] = field(
        default_factory=list["Callable[[], None]"]
    )

    def add_tickets(self, *ticket_ids: str) -> None:
        for ticket_id in ticket_ids:
            self.state.tickets[ticket_id] = Ticket(id=ticket_id, title=f"Ticket {ticket_id}")
            self.state.fences[ticket_id] = 0

    def add_comment(
        self,
        ticket_id: str,
        content: str,
        *,
        comment_id: str | None = None,
    ) -> Comment:
        comment = Comment(ticket_id=ticket_id, content=content)
        if comment_id is not None:
            comment.id = comment_id
        self.state.comments[comment.id] = comment
        return comment

    def remove_comment(self, comment_id: str) -> None:
        del self.state.comments[comment_id]

    def connect(self, source: str, *targets: str) -> None:
        self.state.edges.update((source, target) for target in targets)

    def targets_of(self, ticket_id: str) -> set[str]:
        return {target for source, target in self.state.edges if source == ticket_id}

    def fence(self, ticket_id: str) -> int:
        return self.state.fences[ticket_id]

    def unit_of_work(self) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self)


class _Session:
    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database
        self.working = database.state.snapshot()
        self.operations: list[Operation] = []
        self.claims: dict[str, int] = {}

    def record(self, operation: Operation) -> None:
        operation(self.working)
        self.operations.append(operation)


class FakeCommentProvider:
    def __init__(self, session: _Session) -> None:
        self._session = session

    def add(self, entity: Comment) -> None:
        self._session.record(lambda state: state.comments.__setitem__(entity.id, entity))

    def get_comment(self, comment_id: str) -> Comment | None:
        return self._session.working.comments.get(comment_id)

    def list_other_comments(
        self,
        ticket_id: str,
        excluding_comment_id: str | None,
    ) -> Sequence[Comment]:
        database = self._session.database
        database.sibling_reads += 1
        if database.sibling_read_hooks:
            database.sibling_read_hooks.pop(0)()
        return [
            comment
            for comment in self._session.working.comments.values()
            if comment.ticket_id == ticket_id and comment.id != excluding_comment_id
        ]


class FakeTicketDirectory:
    def __init__(self, session: _Session) -> None:
        self._session = session

    def add(self, entity: Ticket) -> None:
        def _add(state: StoreState) -> None:
            state.tickets[entity.id] = entity
            state.fences.setdefault(entity.id, 0)

        self._session.record(_add)

    def get(self, ticket_id: str) -> Ticket | None:
        return self._session.working.tickets.get(ticket_id)

    def get_many(self, ticket_ids: Iterable[str]) -> list[Ticket]:
        tickets = self._session.working.tickets
        return [tickets[ticket_id] for ticket_id in set(ticket_ids) if ticket_id in tickets]

    def existing_ids(self, ticket_ids: Iterable[str]) -> set[str]:
        return set(ticket_ids) & set(self._session.working.tickets)

    def read_fence(self, ticket_id: str) -> int:
        try:
            return self._session.working.fences[ticket_id]
        except KeyError:
            raise TicketNotFound(ticket_id) from None

    def advance_fence(self, ticket_id: str, expected: int) -> int:
        committed = self._session.database.state.fences.get(ticket_id)
        if committed != expected or self._session.working.fences.get(ticket_id) != expected:
            raise TransactionConflict(ticket_id, expected_fence=expected)
        self._session.claims[ticket_id] = expected
        self._session.record(lambda state: state.fences.__setitem__(ticket_id, expected + 1))
        return expected + 1


class FakeReferenceGraph:
    def __init__(self, session: _Session) -> None:
        self._session = session

    def targets_of(self, ticket_id: str) -> set[str]:
        return {target for source, target in self._session.working.edges if source == ticket_id}

    def connect(self, ticket_id: str, target_ids: Iterable[str]) -> None:
        self._check_available()
        pairs = {(ticket_id, target) for target in target_ids if target != ticket_id}
        self._session.record(lambda state: state.edges.update(pairs))

    def disconnect(self, ticket_id: str, target_ids: Iterable[str]) -> None:
        self._check_available()
        pairs = {(ticket_id, target) for target in target_ids}
        self._session.record(lambda state: state.edges.difference_update(pairs))

    def _check_available(self) -> None:
        if self._session.database.fail_writes:
            raise GraphStoreFailure("reference store unavailable")


class InMemoryUnitOfWork:
    """Snapshot-isolated unit of work; commit replays recorded writes."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database
        self._session: _Session | None = None
        self._repositories: ReferenceRepositories | None = None

    def __enter__(self) -> InMemoryUnitOfWork:
        self._begin()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self._session = None
        self._repositories = None
        return False

    @property
    def repositories(self) -> ReferenceRepositories:
        if self._repositories is None:
            raise RuntimeError("Unit of work not entered")
        return self._repositories

    def commit(self) -> None:
        if self._session is None:
            raise RuntimeError("Unit of work not entered")
        # first committer wins: a claimed fence must not have moved since the claim
        for ticket_id, expected in self._session.claims.items():
            if self.database.state.fences.get(ticket_id) != expected:
                raise TransactionConflict(ticket_id, expected_fence=expected)
        for operation in self._session.operations:
            operation(self.database.state)
        self._session.operations.clear()
        self._session.claims.clear()
        self.database.commits += 1

    def rollback(self) -> None:
        self._begin()

    def _begin(self) -> None:
        session = _Session(self.database)
        self._session = session
        self._repositories = ReferenceRepositories(
            comments=FakeCommentProvider(session),
            tickets=FakeTicketDirectory(session),
            references=FakeReferenceGraph(session),
        )


def seed_scenario(database: InMemoryDatabase) -> tuple[Comment, Comment]:
    """Ticket T1 with ``C1 = "see #T2 and #T3"`` and ``C2 = "follow up on #T2"``."""

    database.add_tickets("T1", "T2", "T3", "T4")
    first = database.add_comment("T1", "see #T2 and #T3", comment_id="C1")
    second = database.add_comment("T1", "follow up on #T2", comment_id="C2")
    database.connect("T1", "T2", "T3")
    return first, second
