from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from fastapi.responses import StreamingResponse

from leave_tracker.core.dependencies import get_actor, get_current_user, get_store
from leave_tracker.database.store import DocumentStore
from leave_tracker.schemas.holiday import HolidayCreate, HolidayUpdate, HolidayRecord, HolidayBulkDeleteRequest
from leave_tracker.schemas.user import Actor
from leave_tracker.services import holiday_service

router = APIRouter(prefix="/holidays", tags=["Holidays"])


# ─── LIST ──────────────────────────────────────────────────────────────────────
@router.get("/", response_model=list[HolidayRecord])
def list_holidays(
    year: Optional[int] = Query(default=None),
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return holiday_service.get_all_holidays(store, year=year)


# ─── CREATE ────────────────────────────────────────────────────────────────────
@router.post("/", response_model=HolidayRecord, status_code=201)
def create_holiday(
    data: HolidayCreate,
    store: DocumentStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    return holiday_service.create_holiday(store, data, actor)


# ─── BULK DELETE ───────────────────────────────────────────────────────────────
@router.delete("/", status_code=200)
def bulk_delete_holidays(
    payload: HolidayBulkDeleteRequest,
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    deleted = holiday_service.bulk_delete_holidays(store, payload.ids)
    return {"deleted": deleted}


# ─── EXPORT CSV ────────────────────────────────────────────────────────────────
@router.get("/export/csv")
def export_holidays_csv(
    year: Optional[int] = Query(default=None),
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    holidays = holiday_service.get_all_holidays(store, year=year)
    return StreamingResponse(
        iter([holiday_service.holidays_to_csv(holidays)]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=holidays_{year or 'all'}.csv"},
    )


# ─── GET ONE ───────────────────────────────────────────────────────────────────
@router.get("/{holiday_id}", response_model=HolidayRecord)
def get_holiday(
    holiday_id: str,
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return holiday_service.get_holiday_by_id(store, holiday_id)


# ─── UPDATE ────────────────────────────────────────────────────────────────────
@router.put("/{holiday_id}", response_model=HolidayRecord)
def update_holiday(
    holiday_id: str,
    data: HolidayUpdate,
    store: DocumentStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    return holiday_service.update_holiday(store, holiday_id, data, actor)


# ─── DELETE ONE ────────────────────────────────────────────────────────────────
@router.delete("/{holiday_id}", status_code=204)
def delete_holiday(
    holiday_id: str,
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    success = holiday_service.delete_holiday(store, holiday_id)
    if not success:
        raise HTTPException(status_code=404, detail="Holiday not found")
