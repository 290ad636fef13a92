import csv
import io
from datetime import date
from typing import Iterable, Optional

from leave_tracker.core.exceptions import NotFoundError, ValidationError
from leave_tracker.database.store import DocumentStore, Kind
from leave_tracker.schemas.holiday import HolidayCreate, HolidayRecord, HolidayUpdate
from leave_tracker.schemas.user import Actor
from leave_tracker.utils.dates import calculate_days, spans_overlap
from leave_tracker.utils.generator import generate_record_id


# ─── HELPERS ──────────────────────────────────────────────────────────────────

def _validate_span(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise ValidationError("End date cannot be before start date")


# ─── CRUD ─────────────────────────────────────────────────────────────────────

def get_all_holidays(store: DocumentStore, year: Optional[int] = None) -> list[HolidayRecord]:
    holidays = store.get_all(Kind.holidays)
    if year:
        # holidays running over new year belong to both years
        holidays = [
            h for h in holidays
            if spans_overlap(h.start_date, h.end_date, date(year, 1, 1), date(year, 12, 31))
        ]
    return sorted(holidays, key=lambda h: h.start_date)


def get_holiday_by_id(store: DocumentStore, holiday_id: str) -> HolidayRecord:
    holiday = store.get_by_id(Kind.holidays, holiday_id)
    if holiday is None:
        raise NotFoundError("Holiday not found")
    return holiday


def create_holiday(store: DocumentStore, data: HolidayCreate, actor: Actor) -> HolidayRecord:
    _validate_span(data.start_date, data.end_date)
    holiday = HolidayRecord(
        id=generate_record_id("H"),
        name=data.name,
        start_date=data.start_date,
        end_date=data.end_date,
        total_days=calculate_days(data.start_date, data.end_date),
        done_by=actor.id,
    )
    store.put(Kind.holidays, holiday)
    return holiday


def update_holiday(store: DocumentStore, holiday_id: str, data: HolidayUpdate, actor: Actor) -> HolidayRecord:
    holiday = get_holiday_by_id(store, holiday_id)
    changes = {field: value for field, value in data.model_dump(exclude_unset=True).items() if value is not None}
    updated = holiday.model_copy(update=changes)

    _validate_span(updated.start_date, updated.end_date)
    updated = updated.model_copy(
        update={
            "total_days": calculate_days(updated.start_date, updated.end_date),
            "done_by": actor.id,
        }
    )
    store.put(Kind.holidays, updated)
    return updated


def delete_holiday(store: DocumentStore, holiday_id: str) -> bool:
    return store.delete(Kind.holidays, holiday_id)


def bulk_delete_holidays(store: DocumentStore, ids: list[str]) -> int:
    deleted = 0
    for hid in ids:
        if delete_holiday(store, hid):
            deleted += 1
    return deleted


def holidays_to_csv(holidays: Iterable[HolidayRecord]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["ID", "Holiday Name", "Start Date", "End Date", "Total Days"])

    for h in holidays:
        writer.writerow([h.id, h.name, str(h.start_date), str(h.end_date), h.total_days])

    return output.getvalue()
