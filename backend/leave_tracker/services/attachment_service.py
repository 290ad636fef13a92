"""
Attachment rules and storage reporting on top of the Drive client.
"""

import logging
from typing import Optional

from leave_tracker.config import settings
from leave_tracker.core.exceptions import CollaboratorError, ValidationError
from leave_tracker.database.store import DocumentStore, Kind
from leave_tracker.integrations.google_drive import GoogleDriveClient, extract_file_id
from leave_tracker.schemas.attachment import AttachmentUploadOut, StorageUsage
from leave_tracker.schemas.leave_request import LeaveRequestRecord
from leave_tracker.utils.best_effort import run_best_effort

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {"image/png", "image/jpg", "image/jpeg", "image/gif", "image/webp"}


def validate_attachment(file_name: str, mime_type: str, size: Optional[int] = None) -> None:
    if not (file_name or "").strip():
        raise ValidationError("Attachment file name is required")
    if (mime_type or "").lower() not in ALLOWED_MIME_TYPES:
        raise ValidationError("Only image attachments (PNG, JPG, GIF, WEBP) are allowed")
    if size is not None:
        if size == 0:
            raise ValidationError("Attachment is empty")
        if size > settings.MAX_ATTACHMENT_BYTES:
            raise ValidationError(
                f"Attachment exceeds the {settings.MAX_ATTACHMENT_BYTES // (1024 * 1024)} MB limit"
            )


def require_drive(drive: Optional[GoogleDriveClient]) -> GoogleDriveClient:
    if drive is None:
        raise CollaboratorError("Attachment storage is not configured")
    return drive


def upload_attachment(
    drive: Optional[GoogleDriveClient],
    content: bytes,
    file_name: str,
    mime_type: str,
) -> AttachmentUploadOut:
    validate_attachment(file_name, mime_type, len(content))
    uploaded = require_drive(drive).upload(content, file_name, mime_type.lower())
    return AttachmentUploadOut(**uploaded.model_dump(), file_name=file_name)


def delete_attachment(drive: Optional[GoogleDriveClient], file_id: str) -> None:
    require_drive(drive).delete(file_id)


def attachment_file_id(record: LeaveRequestRecord) -> Optional[str]:
    """The Drive id of a request's attachment, recovered from its URL for older records."""
    if record.attachment_file_id:
        return record.attachment_file_id
    if record.attachment_url:
        return extract_file_id(record.attachment_url)
    return None


def discard_attachment(drive: Optional[GoogleDriveClient], file_id: Optional[str]) -> bool:
    """Best-effort removal of an attachment that is no longer referenced."""
    if not file_id:
        return True
    if drive is None:
        logger.warning("Attachment %s left in storage: Google Drive is not configured", file_id)
        return False
    return run_best_effort(f"delete of attachment {file_id}", drive.delete, file_id)


def storage_usage(store: DocumentStore, drive: Optional[GoogleDriveClient]) -> StorageUsage:
    record_counts = {kind.value: store.count(kind) for kind in Kind}
    capacity = settings.IMAGE_CAPACITY_GB * 1024 ** 3

    total_bytes = 0
    file_count = 0
    exact = False
    if drive is not None:
        try:
            files = drive.list_files()
            total_bytes = sum(f.size_bytes for f in files)
            file_count = len(files)
            exact = True
        except CollaboratorError:
            logger.warning("Could not list Google Drive files, estimating storage usage", exc_info=True)

    if not exact:
        file_count = sum(1 for record in store.get_all(Kind.leave_requests) if attachment_file_id(record))
        total_bytes = file_count * settings.ATTACHMENT_ESTIMATE_BYTES

    return StorageUsage(
        total_bytes=total_bytes,
        file_count=file_count,
        exact=exact,
        image_capacity_bytes=capacity,
        image_usage_percent=round(total_bytes / capacity * 100, 2) if capacity else 0.0,
        record_counts=record_counts,
    )
