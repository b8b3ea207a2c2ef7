"""Set algebra turning one comment mutation into an edge delta.

For a ticket ``T`` and a single comment going from ``old_text`` to ``new_text``::

    to_add    = (new - old) - connected
    to_remove = ((old - new) - siblings) & connected

where every set has ``T`` itself and unknown tickets removed. A mention that a
sibling comment still carries is never removed, so creation (``old_text == ""``),
edit and deletion (``new_text == ""``) all go through the same computation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ticketref.domain.model import ReferenceEdge

from .extract import DEFAULT_PATTERN, extract_from_texts, extract_ticket_ids

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ticketref.domain.ports.persistence import ReferenceGraphStore

    from .extract import ReferencePattern

type ExistenceFilter = Callable[[Iterable[str]], set[str]]


@dataclass(frozen=True, slots=True)
class ReferenceDelta:
    """Targets to connect to and disconnect from one source ticket."""

    ticket_id: str
    to_add: frozenset[str] = frozenset()
    to_remove: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove

    @property
    def edges_to_add(self) -> frozenset[ReferenceEdge]:
        return frozenset(ReferenceEdge(self.ticket_id, target) for target in self.to_add)

    @property
    def edges_to_remove(self) -> frozenset[ReferenceEdge]:
        return frozenset(ReferenceEdge(self.ticket_id, target) for target in self.to_remove)


@dataclass(frozen=True, slots=True)
class MentionSets:
    """Filtered mentions of the mutated comment before/after, and of its siblings."""

    old: frozenset[str]
    new: frozenset[str]
    siblings: frozenset[str]


def collect_mentions(
    ticket_id: str,
    old_text: str | None,
    new_text: str | None,
    sibling_texts: Iterable[str | None],
    *,
    existing: ExistenceFilter | None = None,
    pattern: ReferencePattern = DEFAULT_PATTERN,
) -> MentionSets:
    old = extract_ticket_ids(old_text, pattern=pattern) - {ticket_id}
    new = extract_ticket_ids(new_text, pattern=pattern) - {ticket_id}
    siblings = extract_from_texts(sibling_texts, pattern=pattern) - {ticket_id}
    if existing is not None and (old or new):
        # siblings only subtract from old, so old | new bounds the lookup
        known = frozenset(existing(old | new))
        old &= known
        new &= known
        siblings &= known
    return MentionSets(old=old, new=new, siblings=siblings)


def delta_from_mentions(
    ticket_id: str,
    mentions: MentionSets,
    *,
    connected: Iterable[str] | None = None,
) -> ReferenceDelta:
    to_add = mentions.new - mentions.old
    to_remove = (mentions.old - mentions.new) - mentions.siblings
    if connected is not None:
        current = frozenset(connected)
        to_add -= current
        to_remove &= current
    return ReferenceDelta(ticket_id=ticket_id, to_add=to_add, to_remove=to_remove)


def compute_delta(
    ticket_id: str,
    old_text: str | None,
    new_text: str | None,
    sibling_texts: Iterable[str | None],
    *,
    existing: ExistenceFilter | None = None,
    connected: Iterable[str] | None = None,
    pattern: ReferencePattern = DEFAULT_PATTERN,
) -> ReferenceDelta:
    """Compute the edge delta caused by one comment mutation on ``ticket_id``.

    ``existing`` filters identifiers down to real tickets; ``connected`` holds the
    targets currently linked from ``ticket_id``. When omitted, every mentioned
    ticket is assumed to exist and no edge is assumed present.
    """

    mentions = collect_mentions(
        ticket_id,
        old_text,
        new_text,
        sibling_texts,
        existing=existing,
        pattern=pattern,
    )
    return delta_from_mentions(ticket_id, mentions, connected=connected)


def expected_targets(
    ticket_id: str,
    texts: Iterable[str | None],
    *,
    existing: ExistenceFilter | None = None,
    pattern: ReferencePattern = DEFAULT_PATTERN,
) -> frozenset[str]:
    """Full target set implied by all comment bodies of ``ticket_id``."""

    mentioned = extract_from_texts(texts, pattern=pattern) - {ticket_id}
    if existing is None or not mentioned:
        return mentioned
    return mentioned & frozenset(existing(mentioned))


def apply_delta(store: ReferenceGraphStore, delta: ReferenceDelta) -> None:
    """Connect first, then disconnect."""

    if delta.to_add:
        store.connect(delta.ticket_id, delta.to_add)
    if delta.to_remove:
        store.disconnect(delta.ticket_id, delta.to_remove)
