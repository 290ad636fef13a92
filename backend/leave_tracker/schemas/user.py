from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Literal, Optional

UserRole = Literal["Admin", "CoAdmin"]

ADMIN = "Admin"
CO_ADMIN = "CoAdmin"


class Actor(BaseModel):
    """The signed-in user on whose behalf a service operation runs."""

    id: str
    name: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


class UserRecord(BaseModel):
    id: str
    name: str
    password_hash: str
    role: UserRole
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    name: str
    password: str


class UserInfo(BaseModel):
    id: str
    name: str
    role: UserRole


class TokenResponse(BaseModel):
    access_token: str
    token_type: str
    user: UserInfo


class UserCreate(BaseModel):
    name: str
    password: str
    role: UserRole = CO_ADMIN

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Name is required")
        return cleaned

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str):
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value


class UserOut(BaseModel):
    id: str
    name: str
    role: UserRole
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str):
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value


class HashPasswordRequest(BaseModel):
    password: str


class HashPasswordResponse(BaseModel):
    hashed_password: str


class VerifyPasswordRequest(BaseModel):
    password: str
    hashed_password: str


class VerifyPasswordResponse(BaseModel):
    is_valid: bool
