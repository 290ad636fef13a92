from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from leave_tracker.config import settings
from leave_tracker.core.dependencies import get_current_user, get_store
from leave_tracker.database.store import DocumentStore, Kind
from leave_tracker.schemas.report import DashboardStats, EmployeeLeaveSummary, MonthlySeries, TopLeaveTaker
from leave_tracker.services import employee_service, report_service

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(
    as_of: Optional[date] = Query(default=None),
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return report_service.dashboard_stats(
        store.get_all(Kind.leave_requests),
        store.get_all(Kind.employees),
        store.get_all(Kind.leave_types),
        as_of or date.today(),
        settings.UPCOMING_LEAVE_HORIZON_DAYS,
        settings.UPCOMING_LEAVE_LIMIT,
    )


@router.get("/top-leave-takers", response_model=list[TopLeaveTaker])
def top_leave_takers(
    limit: int = Query(default=settings.TOP_LEAVE_TAKERS, ge=1, le=100),
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return report_service.top_leave_takers(
        store.get_all(Kind.leave_requests),
        store.get_all(Kind.employees),
        limit,
    )


@router.get("/monthly", response_model=MonthlySeries)
def monthly(
    months: int = Query(default=settings.ANALYTICS_MONTHS, ge=1, le=120),
    employee_id: Optional[str] = Query(default=None),
    as_of: Optional[date] = Query(default=None),
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    buckets = report_service.monthly_series(
        store.get_all(Kind.leave_requests),
        months,
        as_of or date.today(),
        employee_id=employee_id,
    )
    return MonthlySeries(buckets=buckets, peak_month=report_service.peak_month(buckets))


@router.get("/leave-types", response_model=dict[str, int])
def leave_type_distribution(
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return report_service.leave_type_distribution(store.get_all(Kind.leave_requests))


@router.get("/employees/{employee_id}/summary", response_model=EmployeeLeaveSummary)
def employee_summary(
    employee_id: str,
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return report_service.employee_leave_breakdown(
        store.get_all(Kind.leave_requests),
        employee_id,
        start_date,
        end_date,
    )


@router.get("/employees/{employee_id}/summary/csv")
def employee_summary_csv(
    employee_id: str,
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    employee = employee_service.get_employee(store, employee_id)
    summary = report_service.employee_leave_breakdown(
        store.get_all(Kind.leave_requests),
        employee_id,
        start_date,
        end_date,
    )
    return StreamingResponse(
        iter([report_service.employee_summary_to_csv(employee.name, summary)]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=leave_summary_{employee_id}.csv"},
    )
