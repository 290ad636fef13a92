from pydantic import BaseModel, field_validator
from datetime import date
from typing import Optional


class HolidayRecord(BaseModel):
    id: str
    name: str
    start_date: date
    end_date: date
    total_days: int
    done_by: Optional[str] = None

    class Config:
        from_attributes = True


class HolidayCreate(BaseModel):
    name: str
    start_date: date
    end_date: date

    @field_validator("name")
    @classmethod
    def validate_non_empty(cls, value: str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("This field is required")
        return cleaned


class HolidayUpdate(BaseModel):
    name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def validate_optional_non_empty(cls, value: Optional[str]):
        if value is None:
            return value
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("This field is required")
        return cleaned


class HolidayBulkDeleteRequest(BaseModel):
    ids: list[str]
