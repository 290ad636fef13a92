from datetime import timedelta
from typing import Iterable

from leave_tracker.schemas.leave_request import APPROVED, LeaveRequestRecord
from leave_tracker.schemas.report import OnLeaveEntry
from leave_tracker.utils.dates import DateLike, parse_date


def on_leave_today(records: Iterable[LeaveRequestRecord], as_of: DateLike) -> list[OnLeaveEntry]:
    """
    Employees with an approved leave covering ``as_of``.

    One entry per employee, in order of the employee's first matching record.
    When approved spans overlap, the one with the earliest start date wins,
    then the earliest in record order.
    """
    day = parse_date(as_of)
    chosen: dict[str, LeaveRequestRecord] = {}
    for record in records:
        if record.status != APPROVED:
            continue
        if not parse_date(record.start_date) <= day <= parse_date(record.end_date):
            continue
        current = chosen.get(record.employee_id)
        if current is None or parse_date(record.start_date) < parse_date(current.start_date):
            chosen[record.employee_id] = record

    return [
        OnLeaveEntry(employee_id=employee_id, leave_request=record)
        for employee_id, record in chosen.items()
    ]


def upcoming_leaves(
    records: Iterable[LeaveRequestRecord],
    as_of: DateLike,
    horizon_days: int,
    limit: int = 5,
) -> list[LeaveRequestRecord]:
    """Approved leaves starting after ``as_of`` and within the horizon, soonest first."""
    day = parse_date(as_of)
    horizon = day + timedelta(days=horizon_days)
    upcoming = [
        record
        for record in records
        if record.status == APPROVED and day < parse_date(record.start_date) <= horizon
    ]
    upcoming.sort(key=lambda record: parse_date(record.start_date))
    return upcoming[:limit]
