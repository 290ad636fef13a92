from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./leave_tracker.db"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    SESSION_EXPIRE_DAYS: int = 7

    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:5000"

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["standard", "json"] = "standard"

    # Google Drive attachment storage
    GOOGLE_DRIVE_FOLDER_ID: str = ""
    GOOGLE_SERVICE_ACCOUNT: str = ""
    GOOGLE_SERVICE_ACCOUNT_EMAIL: str = ""
    GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY: str = ""
    GOOGLE_DRIVE_TIMEOUT_SECONDS: float = 30.0
    MAX_ATTACHMENT_BYTES: int = 5 * 1024 * 1024

    # approval | advisory | submission
    QUOTA_POLICY: Literal["approval", "advisory", "submission"] = "approval"

    UPCOMING_LEAVE_HORIZON_DAYS: int = 30
    UPCOMING_LEAVE_LIMIT: int = 5
    TOP_LEAVE_TAKERS: int = 10
    ANALYTICS_MONTHS: int = 12

    ATTACHMENT_ESTIMATE_BYTES: int = 512 * 1024
    IMAGE_CAPACITY_GB: int = 10

    class Config:
        env_file = ".env"

    @property
    def cors_origins(self) -> list[str]:
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        return list(dict.fromkeys(origins))


settings = Settings()
