from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from leave_tracker.core.dependencies import get_actor, get_admin_actor, get_current_user, get_leave_request_service
from leave_tracker.core.exceptions import ValidationError
from leave_tracker.schemas.leave_request import (
    BulkDeleteResult,
    LeaveRequestBulkDeleteRequest,
    LeaveRequestDraft,
    LeaveRequestEdit,
    LeaveRequestRecord,
    LeaveRequestResult,
    LeaveStatus,
    QuotaCheck,
)
from leave_tracker.schemas.user import Actor
from leave_tracker.services import report_service
from leave_tracker.services.leave_request_service import LeaveRequestService
from leave_tracker.utils.dates import calculate_days

router = APIRouter(prefix="/leave-requests", tags=["Leave Requests"])


# ======================================
# LIST / FILTER
# ======================================
@router.get("/", response_model=list[LeaveRequestRecord])
def list_leave_requests(
    search: Optional[str] = Query(default=None),
    employee_id: Optional[str] = Query(default=None),
    status: Optional[LeaveStatus] = Query(default=None),
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    service: LeaveRequestService = Depends(get_leave_request_service),
    current_user=Depends(get_current_user),
):
    return service.list_requests(search, employee_id, status, start_date, end_date)


# ======================================
# SUBMIT
# ======================================
@router.post("/", response_model=LeaveRequestResult, status_code=201)
def create_leave_request(
    draft: LeaveRequestDraft,
    service: LeaveRequestService = Depends(get_leave_request_service),
    actor: Actor = Depends(get_actor),
):
    return service.create(draft, actor)


# ======================================
# BULK DELETE
# ======================================
@router.delete("/", response_model=BulkDeleteResult)
def bulk_delete_leave_requests(
    payload: LeaveRequestBulkDeleteRequest,
    service: LeaveRequestService = Depends(get_leave_request_service),
    current_user=Depends(get_current_user),
):
    return service.bulk_delete(payload.ids)


# ======================================
# QUOTA PREVIEW
# ======================================
@router.get("/quota", response_model=QuotaCheck)
def check_quota(
    employee_id: str,
    leave_type_id: str,
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    days: Optional[int] = Query(default=None, ge=1),
    service: LeaveRequestService = Depends(get_leave_request_service),
    current_user=Depends(get_current_user),
):
    if days is None:
        if start_date is None or end_date is None:
            raise ValidationError("Provide either days or both start_date and end_date")
        if end_date < start_date:
            raise ValidationError("End date cannot be before start date")
        days = calculate_days(start_date, end_date)
    return service.check_quota(employee_id, leave_type_id, days)


# ======================================
# EXPORT CSV
# ======================================
@router.get("/export/csv")
def export_leave_requests_csv(
    search: Optional[str] = Query(default=None),
    employee_id: Optional[str] = Query(default=None),
    status: Optional[LeaveStatus] = Query(default=None),
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    service: LeaveRequestService = Depends(get_leave_request_service),
    current_user=Depends(get_current_user),
):
    records = service.list_requests(search, employee_id, status, start_date, end_date)
    return StreamingResponse(
        iter([report_service.requests_to_csv(records)]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=leave_requests.csv"},
    )


# ======================================
# SINGLE REQUEST
# ======================================
@router.get("/{request_id}", response_model=LeaveRequestRecord)
def get_leave_request(
    request_id: str,
    service: LeaveRequestService = Depends(get_leave_request_service),
    current_user=Depends(get_current_user),
):
    return service.get(request_id)


@router.put("/{request_id}", response_model=LeaveRequestResult)
def edit_leave_request(
    request_id: str,
    draft: LeaveRequestEdit,
    service: LeaveRequestService = Depends(get_leave_request_service),
    actor: Actor = Depends(get_actor),
):
    return service.edit(request_id, draft, actor)


@router.delete("/{request_id}", status_code=204)
def delete_leave_request(
    request_id: str,
    service: LeaveRequestService = Depends(get_leave_request_service),
    current_user=Depends(get_current_user),
):
    service.delete(request_id)


# ======================================
# ADMIN APPROVE / REJECT
# ======================================
@router.put("/{request_id}/approve", response_model=LeaveRequestRecord)
def approve_leave_request(
    request_id: str,
    service: LeaveRequestService = Depends(get_leave_request_service),
    actor: Actor = Depends(get_admin_actor),
):
    return service.approve(request_id, actor)


@router.put("/{request_id}/reject", response_model=LeaveRequestRecord)
def reject_leave_request(
    request_id: str,
    service: LeaveRequestService = Depends(get_leave_request_service),
    actor: Actor = Depends(get_admin_actor),
):
    return service.reject(request_id, actor)
