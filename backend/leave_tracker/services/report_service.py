"""
Reports derived from a snapshot of leave requests.

All functions are pure: they take freshly fetched records and return new
values. Only approved requests count towards usage figures. An empty record
set is valid input and yields empty or zero-valued results.
"""

import csv
import io
from datetime import date
from typing import Iterable, Optional

from leave_tracker.schemas.employee import EmployeeRecord
from leave_tracker.schemas.leave_request import APPROVED, PENDING, LeaveRequestRecord
from leave_tracker.schemas.leave_type import LeaveTypeRecord
from leave_tracker.schemas.report import (
    CasualLeaveSummary,
    DashboardStats,
    EmployeeLeaveSummary,
    LeaveTypeBreakdown,
    MonthlyBucket,
    TopLeaveTaker,
)
from leave_tracker.services.attendance_service import on_leave_today, upcoming_leaves
from leave_tracker.services.leave_type_service import CASUAL_LEAVE
from leave_tracker.services.ledger_service import LeaveLedger
from leave_tracker.utils.dates import DateLike, month_start, parse_date, spans_overlap, trailing_months


def _approved(records: Iterable[LeaveRequestRecord]) -> list[LeaveRequestRecord]:
    return [record for record in records if record.status == APPROVED]


# ─── ANALYTICS ────────────────────────────────────────────────────────────────

def top_leave_takers(
    records: Iterable[LeaveRequestRecord],
    employees: Iterable[EmployeeRecord],
    n: int = 10,
) -> list[TopLeaveTaker]:
    names = {employee.id: employee.name for employee in employees}
    totals: dict[str, int] = {}
    snapshot_names: dict[str, str] = {}
    for record in _approved(records):
        totals[record.employee_id] = totals.get(record.employee_id, 0) + record.approved_days
        snapshot_names.setdefault(record.employee_id, record.employee_name)

    takers = [
        TopLeaveTaker(
            employee_id=employee_id,
            # removed employees fall back to the name captured on their requests
            employee_name=names.get(employee_id) or snapshot_names.get(employee_id) or "Unknown",
            total_days=total,
        )
        for employee_id, total in totals.items()
    ]
    # stable sort: ties keep first-seen order
    takers.sort(key=lambda taker: taker.total_days, reverse=True)
    return takers[:n]


def monthly_series(
    records: Iterable[LeaveRequestRecord],
    months_back: int,
    as_of: DateLike,
    employee_id: Optional[str] = None,
) -> list[MonthlyBucket]:
    """
    One bucket per month for the trailing ``months_back`` months, oldest first.

    A request belongs to the month it starts in, even when it runs into the
    next month.
    """
    months = trailing_months(as_of, months_back)
    grouped: dict[date, list[LeaveRequestRecord]] = {month: [] for month in months}
    for record in _approved(records):
        if employee_id is not None and record.employee_id != employee_id:
            continue
        bucket = grouped.get(month_start(record.start_date))
        if bucket is not None:
            bucket.append(record)

    return [
        MonthlyBucket(
            month=month.strftime("%Y-%m"),
            label=month.strftime("%b %Y"),
            total_days=sum(record.approved_days for record in grouped[month]),
            unique_employee_count=len({record.employee_id for record in grouped[month]}),
            request_count=len(grouped[month]),
        )
        for month in months
    ]


def peak_month(buckets: Iterable[MonthlyBucket]) -> Optional[MonthlyBucket]:
    peak = None
    for bucket in buckets:
        if bucket.total_days > (peak.total_days if peak else 0):
            peak = bucket
    return peak


def leave_type_distribution(records: Iterable[LeaveRequestRecord]) -> dict[str, int]:
    """Number of approved requests (not days) per leave type name."""
    distribution: dict[str, int] = {}
    for record in _approved(records):
        distribution[record.leave_type_name] = distribution.get(record.leave_type_name, 0) + 1
    return distribution


def employee_leave_breakdown(
    records: Iterable[LeaveRequestRecord],
    employee_id: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> EmployeeLeaveSummary:
    groups: dict[str, LeaveTypeBreakdown] = {}
    total_days = 0
    for record in _approved(records):
        if record.employee_id != employee_id:
            continue
        if not spans_overlap(parse_date(record.start_date), parse_date(record.end_date), start, end):
            continue
        group = groups.get(record.leave_type_name)
        if group is None:
            group = groups[record.leave_type_name] = LeaveTypeBreakdown(
                leave_type_name=record.leave_type_name,
                days=0,
                records=[],
            )
        group.days += record.approved_days
        group.records.append(record)
        total_days += record.approved_days

    return EmployeeLeaveSummary(
        employee_id=employee_id,
        total_days=total_days,
        by_type=list(groups.values()),
    )


# ─── REQUEST LISTS ────────────────────────────────────────────────────────────

def filter_requests(
    records: Iterable[LeaveRequestRecord],
    search: Optional[str] = None,
    employee_id: Optional[str] = None,
    status: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[LeaveRequestRecord]:
    term = (search or "").strip().lower()
    return [
        record
        for record in records
        if (not term or term in record.employee_name.lower())
        and (not employee_id or record.employee_id == employee_id)
        and (not status or record.status == status)
        and spans_overlap(parse_date(record.start_date), parse_date(record.end_date), start, end)
    ]


# ─── DASHBOARD ────────────────────────────────────────────────────────────────

def casual_leave_summaries(
    records: Iterable[LeaveRequestRecord],
    employees: Iterable[EmployeeRecord],
    leave_types: Iterable[LeaveTypeRecord],
) -> list[CasualLeaveSummary]:
    leave_types = list(leave_types)
    casual = next((lt for lt in leave_types if lt.name == CASUAL_LEAVE), None)
    if casual is None:
        return []

    ledger = LeaveLedger(records, leave_types)
    return [
        CasualLeaveSummary(
            employee_id=employee.id,
            employee_name=employee.name,
            used=ledger.used_days(employee.id, casual.id),
            remaining=ledger.remaining_days(employee.id, casual.id),
            limit=casual.max_days,
        )
        for employee in employees
    ]


def dashboard_stats(
    records: Iterable[LeaveRequestRecord],
    employees: Iterable[EmployeeRecord],
    leave_types: Iterable[LeaveTypeRecord],
    as_of: DateLike,
    horizon_days: int,
    upcoming_limit: int,
) -> DashboardStats:
    records = list(records)
    employees = list(employees)
    on_leave = on_leave_today(records, as_of)
    return DashboardStats(
        as_of=parse_date(as_of),
        total_employees=len(employees),
        employees_on_leave=len(on_leave),
        pending_requests=sum(1 for record in records if record.status == PENDING),
        on_leave=on_leave,
        upcoming=upcoming_leaves(records, as_of, horizon_days, upcoming_limit),
        casual_leave=casual_leave_summaries(records, employees, leave_types),
    )


# ─── CSV EXPORT ───────────────────────────────────────────────────────────────

def requests_to_csv(records: Iterable[LeaveRequestRecord]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["ID", "Employee", "Designation", "Department", "Leave Type",
                     "Start Date", "End Date", "Days", "Status", "Comments"])
    for r in records:
        writer.writerow([r.id, r.employee_name, r.designation, r.department, r.leave_type_name,
                         str(r.start_date), str(r.end_date), r.approved_days, r.status, r.comments])
    return output.getvalue()


def employee_summary_to_csv(employee_name: str, summary: EmployeeLeaveSummary) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["Employee", "Leave Type", "Start Date", "End Date", "Days"])
    for group in summary.by_type:
        for r in group.records:
            writer.writerow([employee_name, group.leave_type_name, str(r.start_date), str(r.end_date), r.approved_days])
    writer.writerow([])
    writer.writerow(["Total", "", "", "", summary.total_days])
    return output.getvalue()
