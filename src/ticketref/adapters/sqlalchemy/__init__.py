"""SQLAlchemy adapter package for ticketref."""

from __future__ import annotations

from .mappings import (
    comment_table,
    mapper_registry,
    start_mappers,
    ticket_reference_table,
    ticket_table,
)
from .repositories import (
    SqlAlchemyCommentRepository,
    SqlAlchemyReferenceGraph,
    SqlAlchemyTicketRepository,
)

__all__ = [
    "SqlAlchemyCommentRepository",
    "SqlAlchemyReferenceGraph",
    "SqlAlchemyTicketRepository",
    "comment_table",
    "mapper_registry",
    "start_mappers",
    "ticket_reference_table",
    "ticket_table",
]
