"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import CommentProvider, ReferenceGraphStore, Repository, TicketDirectory
from .unit_of_work import (
    ReferenceRepositories,
    ReferenceUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CommentProvider",
    "ReferenceGraphStore",
    "ReferenceRepositories",
    "ReferenceUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "TicketDirectory",
    "UnitOfWork",
]
