from leave_tracker.schemas.leave_type import LeaveTypeCreate
from leave_tracker.services import leave_type_service
from leave_tracker.utils import generator
from leave_tracker.utils.generator import generate_record_id


def test_ids_minted_back_to_back_sort_in_creation_order():
    ids = [generate_record_id("LR") for _ in range(200)]
    assert sorted(ids) == ids
    assert len(set(ids)) == len(ids)


def test_ids_keep_increasing_when_the_clock_stands_still(monkeypatch):
    monkeypatch.setattr(generator.time, "time", lambda: 1_750_000_000.0)
    ids = [generate_record_id("LT") for _ in range(20)]
    assert sorted(ids) == ids


def test_store_lists_records_in_creation_order(store, admin):
    created = [
        leave_type_service.create_leave_type(store, LeaveTypeCreate(name=f"Type {i}"), admin)
        for i in range(30)
    ]
    assert [lt.id for lt in leave_type_service.list_leave_types(store)] == [lt.id for lt in created]
