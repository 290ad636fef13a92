from pydantic import BaseModel


class UploadedFile(BaseModel):
    file_id: str
    web_view_link: str
    web_content_link: str


class AttachmentUploadOut(UploadedFile):
    file_name: str


class DriveFile(BaseModel):
    id: str
    name: str
    size_bytes: int = 0


class StorageUsage(BaseModel):
    total_bytes: int
    file_count: int
    # False when Drive could not be reached and the size is an estimate
    exact: bool
    image_capacity_bytes: int
    image_usage_percent: float
    record_counts: dict[str, int]
