"""Reconciliation defaults for the ticket reference graph."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .env import optional_int_env_var
from .errors import ConfigurationError

DEFAULT_MAX_ATTEMPTS: Final[int] = 3
KNOWN_MARKERS: Final[frozenset[str]] = frozenset({"hash", "link"})
DEFAULT_MARKERS: Final[tuple[str, ...]] = ("hash", "link")


@dataclass(frozen=True, slots=True)
class ReconcilerSettings:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")


@dataclass(frozen=True, slots=True)
class ReferenceSettings:
    markers: tuple[str, ...] = DEFAULT_MARKERS

    def __post_init__(self) -> None:
        if not self.markers:
            raise ConfigurationError("At least one reference marker must be enabled")
        unknown = set(self.markers) - KNOWN_MARKERS
        if unknown:
            unknown_list = ", ".join(sorted(unknown))
            raise ConfigurationError(f"Unknown reference markers: {unknown_list}")


def get_reconciler_settings() -> ReconcilerSettings:
    return ReconcilerSettings(
        max_attempts=optional_int_env_var(
            "TICKETREF_MAX_ATTEMPTS",
            default=DEFAULT_MAX_ATTEMPTS,
            minimum=1,
        )
    )


def get_reference_settings() -> ReferenceSettings:
    raw = os.getenv("TICKETREF_REFERENCE_MARKERS")
    if raw is None or not raw.strip():
        return ReferenceSettings()
    markers = tuple(part.strip().lower() for part in raw.split(",") if part.strip())
    return ReferenceSettings(markers=markers)
