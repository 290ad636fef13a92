from datetime import date

import pytest

from conftest import make_request
from leave_tracker.core.exceptions import NotFoundError
from leave_tracker.schemas.leave_type import LeaveTypeRecord
from leave_tracker.services.ledger_service import LeaveLedger, quota_warning

CASUAL = LeaveTypeRecord(id="LT-CASUAL", name="Casual Leave", max_days=20)
EARNED = LeaveTypeRecord(id="LT-EARNED", name="Earned Leave", max_days=None)


def test_pending_requests_do_not_count():
    records = [
        make_request(id="LR1", approved_days=3),
        make_request(id="LR2", approved_days=4, status="Pending"),
        make_request(id="LR3", approved_days=2, status="Rejected"),
    ]
    ledger = LeaveLedger(records, [CASUAL])
    assert ledger.used_days("E1", "LT-CASUAL") == 3
    assert ledger.used_days("E1", "LT-CASUAL", status="Pending") == 4
    assert ledger.used_days("E1", "LT-CASUAL", status=None) == 9


def test_used_days_is_additive_over_partitions():
    records = [
        make_request(id=f"LR{i}", approved_days=i, employee_id="E1" if i % 2 else "E2")
        for i in range(1, 9)
    ]
    whole = LeaveLedger(records).used_days("E1", "LT-CASUAL")
    parts = LeaveLedger(records[:3]).used_days("E1", "LT-CASUAL") + LeaveLedger(records[3:]).used_days("E1", "LT-CASUAL")
    assert whole == parts == 1 + 3 + 5 + 7


def test_used_days_separates_leave_types():
    records = [
        make_request(id="LR1", approved_days=5),
        make_request(id="LR2", approved_days=7, leave_type_id="LT-EARNED", leave_type_name="Earned Leave"),
    ]
    ledger = LeaveLedger(records, [CASUAL, EARNED])
    assert ledger.used_days("E1", "LT-CASUAL") == 5
    assert ledger.used_days("E1", "LT-EARNED") == 7


def test_check_quota_reports_overrun():
    records = [make_request(id="LR1", approved_days=18)]
    quota = LeaveLedger(records, [CASUAL]).check_quota("E1", "LT-CASUAL", 5)
    assert quota.within_limit is False
    assert quota.used == 18
    assert quota.limit == 20
    assert quota.requested == 5


def test_check_quota_allows_exact_fit():
    records = [make_request(id="LR1", approved_days=15)]
    assert LeaveLedger(records, [CASUAL]).check_quota("E1", "LT-CASUAL", 5).within_limit


@pytest.mark.parametrize("used,requested", [(0, 1), (400, 1000)])
def test_unlimited_type_is_always_within_limit(used, requested):
    records = [make_request(id="LR1", leave_type_id="LT-EARNED", approved_days=used)] if used else []
    quota = LeaveLedger(records, [EARNED]).check_quota("E1", "LT-EARNED", requested)
    assert quota.within_limit
    assert quota.limit is None


def test_check_quota_for_unknown_type():
    with pytest.raises(NotFoundError):
        LeaveLedger([], [CASUAL]).check_quota("E1", "LT-MISSING", 1)


def test_remaining_days():
    records = [make_request(id="LR1", approved_days=8), make_request(id="LR2", approved_days=30, end_date=date(2025, 2, 3))]
    ledger = LeaveLedger(records, [CASUAL, EARNED])
    assert ledger.remaining_days("E1", "LT-CASUAL") == 0
    assert ledger.remaining_days("E2", "LT-CASUAL") == 20
    assert ledger.remaining_days("E1", "LT-EARNED") is None


def test_quota_warning_only_when_over_limit():
    ledger = LeaveLedger([make_request(id="LR1", approved_days=18)], [CASUAL])
    assert quota_warning("Asha Rao", "Casual Leave", ledger.check_quota("E1", "LT-CASUAL", 2)) is None
    message = quota_warning("Asha Rao", "Casual Leave", ledger.check_quota("E1", "LT-CASUAL", 5))
    assert "Asha Rao" in message
    assert "18" in message and "20" in message
