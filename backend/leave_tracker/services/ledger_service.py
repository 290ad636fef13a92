"""
Leave usage accounting over a snapshot of leave requests.

The ledger never mutates records; it answers how many days an employee has
used per leave type and whether a new request would fit that type's quota.
"""

from typing import Iterable, Optional

from leave_tracker.core.exceptions import NotFoundError
from leave_tracker.schemas.leave_request import APPROVED, LeaveRequestRecord, QuotaCheck
from leave_tracker.schemas.leave_type import LeaveTypeRecord


class LeaveLedger:
    def __init__(
        self,
        records: Iterable[LeaveRequestRecord],
        leave_types: Iterable[LeaveTypeRecord] = (),
    ):
        self.records = list(records)
        self.leave_types = {leave_type.id: leave_type for leave_type in leave_types}

    def used_days(
        self,
        employee_id: str,
        leave_type_id: str,
        status: Optional[str] = APPROVED,
    ) -> int:
        """Sum of approved_days for the employee and type; status=None counts every status."""
        return sum(
            record.approved_days
            for record in self.records
            if record.employee_id == employee_id
            and record.leave_type_id == leave_type_id
            and (status is None or record.status == status)
        )

    def limit_for(self, leave_type_id: str) -> Optional[int]:
        leave_type = self.leave_types.get(leave_type_id)
        if leave_type is None:
            raise NotFoundError("Leave type not found")
        return leave_type.max_days

    def check_quota(self, employee_id: str, leave_type_id: str, requested_days: int) -> QuotaCheck:
        limit = self.limit_for(leave_type_id)
        used = self.used_days(employee_id, leave_type_id)
        within_limit = limit is None or used + requested_days <= limit
        return QuotaCheck(
            within_limit=within_limit,
            used=used,
            limit=limit,
            requested=requested_days,
        )

    def remaining_days(self, employee_id: str, leave_type_id: str) -> Optional[int]:
        limit = self.limit_for(leave_type_id)
        if limit is None:
            return None
        return max(0, limit - self.used_days(employee_id, leave_type_id))


def quota_warning(employee_name: str, leave_type_name: str, quota: QuotaCheck) -> Optional[str]:
    if quota.within_limit:
        return None
    return (
        f"{employee_name} has already used {quota.used} {leave_type_name} days. "
        f"Limit is {quota.limit}; this request adds {quota.requested}."
    )
