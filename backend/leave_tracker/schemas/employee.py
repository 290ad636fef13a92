from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

Gender = Literal["Male", "Female", "Other"]


class EmployeeRecord(BaseModel):
    id: str
    name: str
    designation: str = ""
    department: str = ""
    gender: Gender
    last_edited: Optional[datetime] = None
    done_by: Optional[str] = None

    model_config = {
        "from_attributes": True
    }


class EmployeeCreate(BaseModel):
    id: Optional[str] = None
    name: str
    designation: str = ""
    department: str = ""
    gender: Gender

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Name is required")
        return cleaned

    @field_validator("id", "designation", "department")
    @classmethod
    def strip_text(cls, value: Optional[str]):
        return value.strip() if value is not None else value


class EmployeeUpdate(BaseModel):
    name: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    gender: Optional[Gender] = None

    @field_validator("name")
    @classmethod
    def validate_optional_name(cls, value: Optional[str]):
        if value is None:
            return value
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Name is required")
        return cleaned


class EmployeeBulkDeleteRequest(BaseModel):
    ids: list[str]
