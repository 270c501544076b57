from __future__ import annotations

from datetime import date

import pytest

from kioku.domain.model import ImportMethod
from kioku.domain.reconciliation import MergeDecision, decide, is_newer
from tests.helpers.library import make_entry


@pytest.mark.parametrize("method", list(ImportMethod))
def test_missing_local_entry_is_inserted(method: ImportMethod) -> None:
    assert decide(make_entry(1), None, method=method) is MergeDecision.INSERT


def test_override_always_replaces() -> None:
    local = make_entry(1, finish_date=date(2024, 1, 1))
    remote = make_entry(1, finish_date=None)

    assert decide(remote, local, method=ImportMethod.OVERRIDE) is MergeDecision.REPLACE


def test_keep_never_replaces() -> None:
    assert decide(make_entry(1, score=95), make_entry(1), method=ImportMethod.KEEP) is (
        MergeDecision.KEEP
    )


@pytest.mark.parametrize(
    ("remote_finish", "local_finish", "expected"),
    [
        (date(2023, 1, 1), None, MergeDecision.REPLACE),
        (date(2023, 1, 1), date(2023, 1, 1), MergeDecision.KEEP),
        (None, None, MergeDecision.KEEP),
        (None, date(2023, 1, 1), MergeDecision.KEEP),
        (date(2023, 1, 2), date(2023, 1, 1), MergeDecision.REPLACE),
        (date(2022, 12, 31), date(2023, 1, 1), MergeDecision.KEEP),
    ],
)
def test_latest_prefers_later_finish_date(
    remote_finish: date | None,
    local_finish: date | None,
    expected: MergeDecision,
) -> None:
    remote = make_entry(1, finish_date=remote_finish)
    local = make_entry(1, finish_date=local_finish)

    assert decide(remote, local, method=ImportMethod.LATEST) is expected


def test_is_newer_is_strict() -> None:
    entry = make_entry(1, finish_date=date(2023, 1, 1))

    assert not is_newer(entry, entry)
