"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class MutationKind(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
