from fastapi import APIRouter

from leave_tracker.core.security import hash_password, verify_password
from leave_tracker.core.validation import require_non_empty_text
from leave_tracker.schemas.user import (
    HashPasswordRequest,
    HashPasswordResponse,
    VerifyPasswordRequest,
    VerifyPasswordResponse,
)

router = APIRouter(prefix="/credentials", tags=["Credentials"])


@router.post("/hash", response_model=HashPasswordResponse)
def hash_credential(data: HashPasswordRequest):
    password = require_non_empty_text(data.password, "Password")
    return HashPasswordResponse(hashed_password=hash_password(password))


@router.post("/verify", response_model=VerifyPasswordResponse)
def verify_credential(data: VerifyPasswordRequest):
    return VerifyPasswordResponse(is_valid=verify_password(data.password, data.hashed_password))
