"""
Tickets, their comments, and the derived reference edges between tickets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4


def new_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class Ticket:
    """Addressable entity that owns comments and can be referenced."""

    id: str = field(default_factory=new_id)
    title: str = ""


@dataclass(eq=False, kw_only=True)
class Comment:
    """Free-text entry attached to exactly one ticket."""

    id: str = field(default_factory=new_id)
    ticket_id: str
    content: str = ""
    updated_at: datetime = field(default_factory=_utcnow)

    def edit(self, content: str) -> str:
        """Replace the body and return the previous one."""
        previous = self.content
        self.content = content
        self.updated_at = _utcnow()
        return previous


@dataclass(frozen=True, slots=True)
class ReferenceEdge:
    """Directed ``source -> target`` relation justified by comment text."""

    source_ticket_id: str
    target_ticket_id: str

    def __post_init__(self) -> None:
        if self.source_ticket_id == self.target_ticket_id:
            raise ValueError("a ticket cannot reference itself")
