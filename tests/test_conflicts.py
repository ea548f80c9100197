from datetime import date

from rosterx.domain.models import Assignment, BatchRequest, PivotType, Recurrence
from rosterx.domain.store import AssignmentStore
from rosterx.rules.conflicts import (
    ALREADY_ASSIGNED,
    exists,
    is_row_date_saturated,
    partition_pairs,
)

MON = date(2024, 6, 3)
TUE = date(2024, 6, 4)


def make(aid: str, staff: str, shift: str, day: date = MON) -> Assignment:
    return Assignment(id=aid, staff_id=staff, shift_id=shift, work_date=day)


def test_store_rejects_duplicate_triples_and_keeps_order():
    store = AssignmentStore()
    assert store.add(make("1", "alice", "night"))
    assert store.add(make("2", "alice", "morning"))
    assert not store.add(make("3", "alice", "night"))
    assert [a.id for a in store[MON]] == ["1", "2"]
    assert store.size == 2
    assert MON in store and TUE not in store


def test_store_len_counts_dates_and_size_counts_assignments():
    store = AssignmentStore(
        [make("1", "alice", "night"), make("2", "bob", "night"), make("3", "alice", "night", TUE)]
    )
    assert len(store) == 2
    assert store.size == 3


def test_store_remove_only_touches_one_record():
    store = AssignmentStore([make("1", "alice", "night"), make("2", "alice", "night", TUE)])
    removed = store.remove("1")
    assert removed is not None and removed.id == "1"
    assert store.remove("1") is None
    assert not store.contains("alice", "night", MON)
    assert store.contains("alice", "night", TUE)
    assert list(store) == [TUE]


def test_exists_checks_store_and_pending():
    store = AssignmentStore([make("1", "alice", "morning")])
    assert exists(store, "alice", "morning", MON)
    assert not exists(store, "bob", "morning", MON)
    assert exists(store, "bob", "morning", MON, pending={("bob", "morning", MON)})


def test_saturation_by_staff_row():
    store = AssignmentStore([make("1", "alice", "morning")])
    active = ["morning", "night"]
    assert not is_row_date_saturated(store, PivotType.STAFF, "alice", MON, active)
    store.add(make("2", "alice", "night"))
    assert is_row_date_saturated(store, PivotType.STAFF, "alice", MON, active)
    assert not is_row_date_saturated(store, PivotType.STAFF, "alice", TUE, active)


def test_saturation_by_shift_row_ignores_inactive_extra_assignments():
    store = AssignmentStore([make("1", "alice", "night"), make("2", "dan", "night")])
    assert is_row_date_saturated(store, PivotType.SHIFT, "night", MON, ["alice"])
    assert not is_row_date_saturated(store, PivotType.SHIFT, "night", MON, ["alice", "bob"])


def test_empty_active_set_is_saturated():
    assert is_row_date_saturated(AssignmentStore(), PivotType.STAFF, "alice", MON, [])


def test_saturation_is_monotonic_under_additions():
    store = AssignmentStore()
    active = ["morning", "night"]
    seen_true = False
    for idx, shift in enumerate(["morning", "morning", "night", "night"]):
        store.add(make(str(idx), "alice", shift))
        saturated = is_row_date_saturated(store, PivotType.STAFF, "alice", MON, active)
        assert not (seen_true and not saturated)
        seen_true = seen_true or saturated
    assert seen_true


def test_partition_skips_existing_pairs_only():
    store = AssignmentStore([make("1", "alice", "morning", TUE)])
    request = BatchRequest(
        pivot=PivotType.STAFF,
        row_id="alice",
        counterpart_ids=("morning", "night"),
        work_date=MON,
        recurrence=Recurrence(frozenset({1, 2}), TUE),
    )
    accepted, skipped = partition_pairs(store, request, [MON, TUE])
    assert accepted == [
        ("alice", "morning", MON),
        ("alice", "night", MON),
        ("alice", "night", TUE),
    ]
    assert [(s.staff_id, s.shift_id, s.work_date, s.reason) for s in skipped] == [
        ("alice", "morning", TUE, ALREADY_ASSIGNED)
    ]


def test_partition_for_shift_pivot_maps_triples():
    request = BatchRequest(PivotType.SHIFT, "night", ("bob", "bob"), MON)
    accepted, skipped = partition_pairs(AssignmentStore(), request, [MON])
    assert accepted == [("bob", "night", MON)]
    assert len(skipped) == 1
