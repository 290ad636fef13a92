from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from leave_tracker.core.dependencies import get_current_user, get_drive_client, get_store
from leave_tracker.database.store import DocumentStore
from leave_tracker.integrations.google_drive import GoogleDriveClient
from leave_tracker.schemas.attachment import AttachmentUploadOut, StorageUsage
from leave_tracker.services import attachment_service

router = APIRouter(prefix="/attachments", tags=["Attachments"])


@router.post("/", response_model=AttachmentUploadOut, status_code=201)
def upload_attachment(
    file: UploadFile = File(...),
    drive: Optional[GoogleDriveClient] = Depends(get_drive_client),
    current_user=Depends(get_current_user),
):
    # type is checked before the body is read
    attachment_service.validate_attachment(file.filename or "", file.content_type or "")
    content = file.file.read()
    return attachment_service.upload_attachment(drive, content, file.filename, file.content_type)


@router.get("/storage", response_model=StorageUsage)
def storage_usage(
    store: DocumentStore = Depends(get_store),
    drive: Optional[GoogleDriveClient] = Depends(get_drive_client),
    current_user=Depends(get_current_user),
):
    return attachment_service.storage_usage(store, drive)


@router.delete("/{file_id}")
def delete_attachment(
    file_id: str,
    drive: Optional[GoogleDriveClient] = Depends(get_drive_client),
    current_user=Depends(get_current_user),
):
    attachment_service.delete_attachment(drive, file_id)
    return {"message": "Attachment deleted"}
