from __future__ import annotations

from datetime import date

import pytest

from kioku.domain.model import ImportMethod, MediaType
from kioku.domain.reconciliation import ImportCandidate, ReconciliationEngine
from tests.helpers.library import FakeLocalStore, make_entry, make_media, mapping_for


def _candidate(native_id: int, **entry_fields: object) -> ImportCandidate:
    return ImportCandidate(
        media=make_media(native_id),
        entry=make_entry(native_id, **entry_fields),  # type: ignore[arg-type]
    )


def _seed(store: FakeLocalStore, native_id: int, **entry_fields: object) -> None:
    store.media.upsert(make_media(native_id, title="Local"))
    store.library.upsert(make_entry(native_id, **entry_fields))  # type: ignore[arg-type]


def test_candidate_rejects_mismatched_mapping() -> None:
    with pytest.raises(ValueError, match="mismatch"):
        ImportCandidate(media=make_media(1), entry=make_entry(2))


def test_empty_batch_touches_nothing() -> None:
    store = FakeLocalStore()

    result = ReconciliationEngine(store).reconcile([], method=ImportMethod.KEEP)

    assert result.media_upserted == 0
    assert store.library.insert_all_calls == 0


def test_keep_scenario_preserves_local_and_adds_new() -> None:
    store = FakeLocalStore()
    _seed(store, 42, score=80)

    result = ReconciliationEngine(store).reconcile(
        [_candidate(42, score=95), _candidate(7, score=60)],
        method=ImportMethod.KEEP,
    )

    kept = store.library.get(mapping_for(42))
    added = store.library.get(mapping_for(7))
    assert kept is not None
    assert kept.score == 80
    assert added is not None
    assert added.score == 60
    assert (result.inserted, result.kept, result.replaced) == (1, 1, 0)


def test_override_scenario_replaces_local() -> None:
    store = FakeLocalStore()
    _seed(store, 42, score=80)

    result = ReconciliationEngine(store).reconcile(
        [_candidate(42, score=95), _candidate(7, score=60)],
        method=ImportMethod.OVERRIDE,
    )

    replaced = store.library.get(mapping_for(42))
    assert replaced is not None
    assert replaced.score == 95
    assert store.library.get(mapping_for(7)) is not None
    assert (result.inserted, result.kept, result.replaced) == (1, 0, 1)


def test_keep_uses_single_batch_insert_without_collisions() -> None:
    store = FakeLocalStore()

    result = ReconciliationEngine(store).reconcile(
        [_candidate(1), _candidate(2), _candidate(3)],
        method=ImportMethod.KEEP,
    )

    assert result.inserted == 3
    assert store.library.insert_all_calls == 1
    assert store.library.insert_if_absent_calls == 0


def test_keep_falls_back_to_per_record_inserts() -> None:
    store = FakeLocalStore()
    _seed(store, 2, notes="local")

    result = ReconciliationEngine(store).reconcile(
        [_candidate(1), _candidate(2), _candidate(3)],
        method=ImportMethod.KEEP,
    )

    assert store.library.insert_all_calls == 1
    assert store.library.insert_if_absent_calls == 3
    assert result.inserted == 2
    assert result.kept == 1
    local = store.library.get(mapping_for(2))
    assert local is not None
    assert local.notes == "local"


def test_keep_with_all_existing_leaves_library_unchanged() -> None:
    store = FakeLocalStore()
    for native_id in (1, 2):
        _seed(store, native_id, score=50, notes=f"local {native_id}")
    before = dict(store.library.rows)

    result = ReconciliationEngine(store).reconcile(
        [_candidate(1, score=90), _candidate(2, score=10)],
        method=ImportMethod.KEEP,
    )

    assert store.library.rows == before
    assert result.kept == 2


def test_override_is_idempotent() -> None:
    candidates = [_candidate(1, score=70), _candidate(2, finish_date=date(2022, 3, 1))]
    once = FakeLocalStore()
    twice = FakeLocalStore()

    ReconciliationEngine(once).reconcile(candidates, method=ImportMethod.OVERRIDE)
    engine = ReconciliationEngine(twice)
    engine.reconcile(candidates, method=ImportMethod.OVERRIDE)
    engine.reconcile(candidates, method=ImportMethod.OVERRIDE)

    assert once.library.rows == twice.library.rows
    assert once.media.rows == twice.media.rows


def test_latest_tie_break() -> None:
    store = FakeLocalStore()
    _seed(store, 1, finish_date=None, notes="local 1")
    _seed(store, 2, finish_date=date(2023, 1, 1), notes="local 2")

    result = ReconciliationEngine(store).reconcile(
        [
            _candidate(1, finish_date=date(2023, 1, 1), notes="remote 1"),
            _candidate(2, finish_date=date(2023, 1, 1), notes="remote 2"),
        ],
        method=ImportMethod.LATEST,
    )

    first = store.library.get(mapping_for(1))
    second = store.library.get(mapping_for(2))
    assert first is not None
    assert first.notes == "remote 1"
    assert second is not None
    assert second.notes == "local 2"
    assert (result.replaced, result.kept) == (1, 1)


@pytest.mark.parametrize("method", list(ImportMethod))
def test_media_is_upserted_before_entries(method: ImportMethod) -> None:
    store = FakeLocalStore()
    _seed(store, 1)

    result = ReconciliationEngine(store).reconcile(
        [_candidate(1), _candidate(2)],
        method=method,
    )

    assert result.media_upserted == 2
    media = store.media.get(mapping_for(1))
    assert media is not None
    assert media.title.romaji == "Example Show"
    for entry in store.library.all():
        assert store.media.get(entry.mapping) is not None
    assert all(entry.type is MediaType.ANIME for entry in store.library.all())
