from datetime import date
from typing import Optional

from pydantic import BaseModel

from leave_tracker.schemas.leave_request import LeaveRequestRecord


class TopLeaveTaker(BaseModel):
    employee_id: str
    employee_name: str
    total_days: int


class MonthlyBucket(BaseModel):
    month: str  # YYYY-MM
    label: str  # e.g. "Jan 2025"
    total_days: int
    unique_employee_count: int
    request_count: int


class MonthlySeries(BaseModel):
    buckets: list[MonthlyBucket]
    peak_month: Optional[MonthlyBucket] = None


class LeaveTypeBreakdown(BaseModel):
    leave_type_name: str
    days: int
    records: list[LeaveRequestRecord]


class EmployeeLeaveSummary(BaseModel):
    employee_id: str
    total_days: int
    by_type: list[LeaveTypeBreakdown]


class OnLeaveEntry(BaseModel):
    employee_id: str
    leave_request: LeaveRequestRecord


class CasualLeaveSummary(BaseModel):
    employee_id: str
    employee_name: str
    used: int
    remaining: Optional[int] = None
    limit: Optional[int] = None


class DashboardStats(BaseModel):
    as_of: date
    total_employees: int
    employees_on_leave: int
    pending_requests: int
    on_leave: list[OnLeaveEntry]
    upcoming: list[LeaveRequestRecord]
    casual_leave: list[CasualLeaveSummary]
