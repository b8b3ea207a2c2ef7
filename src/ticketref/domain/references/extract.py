"""Scan free text for ticket mentions.

Two mention forms are recognised:

- hash form: ``#T42`` (the marker must not be glued to a preceding word)
- link form: ``/tickets/T42`` as produced by pasting a ticket URL

Markers match case-insensitively; identifiers are returned verbatim. Tokens
whose marker is not followed by a valid identifier are skipped, so extraction
is total and never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ticketref.config import ReferenceSettings

# a trailing "-" or "_" is punctuation, not part of the identifier
IDENTIFIER: Final[str] = r"(?P<id>[A-Za-z0-9]+(?:[_-][A-Za-z0-9]+)*)"

MARKER_EXPRESSIONS: Final[dict[str, str]] = {
    "hash": rf"(?<![\w#])#{IDENTIFIER}",
    "link": rf"/tickets/{IDENTIFIER}",
}


@dataclass(frozen=True, slots=True)
class ReferencePattern:
    """Compiled set of mention markers."""

    expressions: tuple[re.Pattern[str], ...]

    @classmethod
    def for_markers(cls, markers: Iterable[str]) -> ReferencePattern:
        compiled: list[re.Pattern[str]] = []
        for marker in markers:
            try:
                expression = MARKER_EXPRESSIONS[marker]
            except KeyError as exc:
                raise ValueError(f"Unknown reference marker: {marker}") from exc
            compiled.append(re.compile(expression, re.IGNORECASE))
        return cls(expressions=tuple(compiled))

    @classmethod
    def from_settings(cls, settings: ReferenceSettings) -> ReferencePattern:
        return cls.for_markers(settings.markers)

    def scan(self, text: str) -> frozenset[str]:
        found: set[str] = set()
        for expression in self.expressions:
            found.update(match.group("id") for match in expression.finditer(text))
        return frozenset(found)


DEFAULT_PATTERN: Final[ReferencePattern] = ReferencePattern.for_markers(MARKER_EXPRESSIONS)


def extract_ticket_ids(
    text: str | None,
    *,
    pattern: ReferencePattern = DEFAULT_PATTERN,
) -> frozenset[str]:
    """Return the set of ticket identifiers mentioned in ``text``."""

    if not text:
        return frozenset()
    return pattern.scan(text)


def extract_from_texts(
    texts: Iterable[str | None],
    *,
    pattern: ReferencePattern = DEFAULT_PATTERN,
) -> frozenset[str]:
    """Union of the mentions found in every text."""

    found: set[str] = set()
    for text in texts:
        found.update(extract_ticket_ids(text, pattern=pattern))
    return frozenset(found)
