import base64
import binascii
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

LeaveStatus = Literal["Pending", "Approved", "Rejected"]

PENDING = "Pending"
APPROVED = "Approved"
REJECTED = "Rejected"


class LeaveRequestRecord(BaseModel):
    id: str
    employee_id: str
    employee_name: str
    designation: str = ""
    department: str = ""
    leave_type_id: str
    leave_type_name: str
    start_date: date
    end_date: date
    approved_days: int
    comments: str = ""
    status: LeaveStatus = PENDING
    timestamp: Optional[datetime] = None
    done_by: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    attachment_file_id: Optional[str] = None
    attachment_url: Optional[str] = None
    attachment_file_name: Optional[str] = None

    class Config:
        from_attributes = True


class AttachmentPayload(BaseModel):
    """An image sent inline with a leave request, base64 encoded."""

    file_name: str
    mime_type: str
    base64_data: str

    @field_validator("file_name", "mime_type")
    @classmethod
    def validate_non_empty(cls, value: str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("This field is required")
        return cleaned

    def decode(self) -> bytes:
        # accepts both raw base64 and "data:image/png;base64,..." urls
        content = self.base64_data.split(",", 1)[1] if "," in self.base64_data else self.base64_data
        try:
            return base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("Attachment is not valid base64 data") from exc


class LeaveRequestDraft(BaseModel):
    employee_id: str
    leave_type_id: str
    start_date: date
    end_date: date
    # None derives the count from the date span
    approved_days: Optional[int] = Field(default=None, ge=1)
    comments: str = ""
    attachment: Optional[AttachmentPayload] = None


class LeaveRequestEdit(LeaveRequestDraft):
    remove_attachment: bool = False


class QuotaCheck(BaseModel):
    within_limit: bool
    used: int
    limit: Optional[int] = None
    requested: int


class LeaveRequestResult(BaseModel):
    request: LeaveRequestRecord
    quota: QuotaCheck
    warning: Optional[str] = None


class LeaveRequestBulkDeleteRequest(BaseModel):
    ids: list[str]


class BulkDeleteFailure(BaseModel):
    id: str
    detail: str


class BulkDeleteResult(BaseModel):
    deleted: list[str]
    failed: list[BulkDeleteFailure]
