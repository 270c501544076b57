"""Reconciliation of imported provider lists against the local library.

Flow for one batch:
1) upsert candidate media records
2) decide insert/replace/keep per library entry (``policy``)
3) write the decided entries (``engine``)
"""

from __future__ import annotations

from .engine import ImportCandidate, ReconciliationEngine, ReconciliationResult
from .policy import MergeDecision, decide, is_newer

__all__ = [
    "ImportCandidate",
    "MergeDecision",
    "ReconciliationEngine",
    "ReconciliationResult",
    "decide",
    "is_newer",
]
