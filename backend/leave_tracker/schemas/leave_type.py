from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LeaveTypeRecord(BaseModel):
    id: str
    name: str
    max_days: Optional[int] = None
    done_by: Optional[str] = None

    class Config:
        from_attributes = True


class LeaveTypeCreate(BaseModel):
    name: str
    max_days: Optional[int] = Field(default=None, ge=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Leave type name is required")
        return cleaned


class LeaveTypeUpdate(BaseModel):
    name: Optional[str] = None
    max_days: Optional[int] = Field(default=None, ge=1)

    @field_validator("name")
    @classmethod
    def validate_optional_name(cls, value: Optional[str]):
        if value is None:
            return value
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Leave type name is required")
        return cleaned
