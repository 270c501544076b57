"""Merge a freshly normalized provider list into the local store.

The engine takes one batch of ``(Media, LibraryEntry)`` candidates from a single
provider/media-type import and applies it in two steps:

1) upsert every candidate ``Media`` (cache semantics, freshest wins)
2) merge every candidate ``LibraryEntry`` according to the import method

Media for a batch is written before any library entry of the same batch, so a
library row never references a missing media row. Each store call is atomic on
its own; records written before a failure stay committed.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from kioku.domain.model import ImportMethod
from kioku.domain.ports.store import DuplicateKeyError

from .policy import MergeDecision, decide

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kioku.domain.model import LibraryEntry, Media
    from kioku.domain.ports.store import LocalStore

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImportCandidate:
    """A remote media record and the user's remote entry for it."""

    media: Media
    entry: LibraryEntry

    def __post_init__(self) -> None:
        if self.media.mapping != self.entry.mapping:
            raise ValueError(
                f"Candidate mapping mismatch: {self.media.mapping} != {self.entry.mapping}"
            )

    @property
    def mapping(self) -> str:
        return self.media.mapping


@dataclass(slots=True)
class ReconciliationResult:
    """Summary of the writes performed for one batch."""

    media_upserted: int = 0
    inserted: int = 0
    replaced: int = 0
    kept: int = 0

    def record(self, decision: MergeDecision) -> None:
        match decision:
            case MergeDecision.INSERT:
                self.inserted += 1
            case MergeDecision.REPLACE:
                self.replaced += 1
            case MergeDecision.KEEP:
                self.kept += 1


@dataclass(slots=True)
class ReconciliationEngine:
    store: LocalStore

    def reconcile(
        self,
        candidates: Sequence[ImportCandidate],
        *,
        method: ImportMethod,
    ) -> ReconciliationResult:
        result = ReconciliationResult()
        if not candidates:
            return result

        self.store.media.upsert_all([candidate.media for candidate in candidates])
        result.media_upserted = len(candidates)

        entries = [candidate.entry for candidate in candidates]
        if method is ImportMethod.KEEP:
            self._insert_missing(entries, result)
        else:
            self._merge_each(entries, method, result)

        log.info(
            "Reconciled %s candidates with method=%s: inserted=%s, replaced=%s, kept=%s",
            len(candidates),
            method,
            result.inserted,
            result.replaced,
            result.kept,
        )
        return result

    def _insert_missing(self, entries: list[LibraryEntry], result: ReconciliationResult) -> None:
        try:
            self.store.library.insert_all(entries)
        except DuplicateKeyError as exc:
            log.debug("Batch insert rejected (%s); inserting entries one by one", exc)
        else:
            result.inserted += len(entries)
            return

        for entry in entries:
            try:
                self.store.library.insert_if_absent(entry)
            except DuplicateKeyError:
                log.debug("Keeping local entry %s", entry.mapping)
                result.record(MergeDecision.KEEP)
            else:
                result.record(MergeDecision.INSERT)

    def _merge_each(
        self,
        entries: list[LibraryEntry],
        method: ImportMethod,
        result: ReconciliationResult,
    ) -> None:
        for entry in entries:
            existing = self.store.library.get(entry.mapping)
            decision = decide(entry, existing, method=method)
            if decision is not MergeDecision.KEEP:
                self.store.library.upsert(entry)
            log.debug("Library entry %s: %s", entry.mapping, decision)
            result.record(decision)
