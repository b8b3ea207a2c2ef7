"""SQLAlchemy mapping metadata for the ticket reference model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    orm,
    text,
)
from sqlalchemy.orm import configure_mappers

from ticketref.domain.model import Comment, Ticket

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

ticket_table = Table(
    "ticket",
    mapper_registry.metadata,
    Column("id", String(64), primary_key=True),
    Column("title", String, nullable=False, server_default=""),
    Column("reference_fence", Integer, nullable=False, server_default=text("0")),
)

comment_table = Table(
    "comment",
    mapper_registry.metadata,
    Column("id", String(64), primary_key=True),
    Column(
        "ticket_id",
        String(64),
        ForeignKey("ticket.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("content", Text, nullable=False, server_default=""),
    Column("updated_at", UTCDateTime(), nullable=False),
    Index("ix_comment_ticket_id", "ticket_id"),
)

ticket_reference_table = Table(
    "ticket_reference",
    mapper_registry.metadata,
    Column(
        "source_ticket_id",
        String(64),
        ForeignKey("ticket.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "target_ticket_id",
        String(64),
        ForeignKey("ticket.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    CheckConstraint("source_ticket_id <> target_ticket_id", name="no_self_reference"),
    Index("ix_ticket_reference_target", "target_ticket_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(
        Ticket,
        ticket_table,
        exclude_properties={"reference_fence"},
    )

    mapper_registry.map_imperatively(
        Comment,
        comment_table,
    )

    configure_mappers()
    return mapper_registry

