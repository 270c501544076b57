"""Conflict policy for library entries.

Responsibilities of this stage:
- decide, per candidate entry, whether it is inserted, replaces the local entry,
  or is discarded in favour of the local entry
- stay deterministic: the decision depends only on the two entries and the method

Media records never pass through here; they are upserted unconditionally.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from kioku.domain.model import ImportMethod

if TYPE_CHECKING:
    from kioku.domain.model import LibraryEntry


class MergeDecision(StrEnum):
    INSERT = "insert"
    REPLACE = "replace"
    KEEP = "keep"


def is_newer(candidate: LibraryEntry, existing: LibraryEntry) -> bool:
    """Return whether ``candidate`` finished strictly later than ``existing``.

    An absent ``finish_date`` is older than any present one, so two absent dates
    (or two equal dates) are a tie and never count as newer.
    """

    if candidate.finish_date is None:
        return False
    if existing.finish_date is None:
        return True
    return candidate.finish_date > existing.finish_date


def decide(
    candidate: LibraryEntry,
    existing: LibraryEntry | None,
    *,
    method: ImportMethod,
) -> MergeDecision:
    if existing is None:
        return MergeDecision.INSERT
    match method:
        case ImportMethod.OVERRIDE:
            return MergeDecision.REPLACE
        case ImportMethod.KEEP:
            return MergeDecision.KEEP
        case ImportMethod.LATEST:
            return MergeDecision.REPLACE if is_newer(candidate, existing) else MergeDecision.KEEP
