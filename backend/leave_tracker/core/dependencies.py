from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from leave_tracker.config import settings
from leave_tracker.database.session import get_db
from leave_tracker.database.store import DocumentStore, Kind
from leave_tracker.core.security import decode_token
from leave_tracker.integrations.google_drive import GoogleDriveClient
from leave_tracker.schemas.user import ADMIN, Actor, UserRecord
from leave_tracker.services.auth_service import get_active_session, touch_session
from leave_tracker.services.leave_request_service import LeaveRequestService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


@lru_cache
def get_drive_client() -> Optional[GoogleDriveClient]:
    return GoogleDriveClient.from_settings(settings)


def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(oauth2_scheme)
) -> UserRecord:
    payload = decode_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token"
        )

    if payload.get("token_type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type"
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload"
        )

    user = DocumentStore(db).get_by_id(Kind.users, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    session_id = payload.get("sid")
    if not session_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session not found"
        )

    session = get_active_session(db, user_id, session_id)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired"
        )

    touch_session(db, session)
    return user


def get_current_session_id(token: str = Depends(oauth2_scheme)) -> Optional[str]:
    payload = decode_token(token)
    return payload.get("sid") if payload else None


def get_current_admin(
    current_user: UserRecord = Depends(get_current_user)
) -> UserRecord:
    if current_user.role != ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user


def get_actor(current_user: UserRecord = Depends(get_current_user)) -> Actor:
    return Actor(id=current_user.id, name=current_user.name, role=current_user.role)


def get_admin_actor(current_user: UserRecord = Depends(get_current_admin)) -> Actor:
    return Actor(id=current_user.id, name=current_user.name, role=current_user.role)


def get_leave_request_service(
    store: DocumentStore = Depends(get_store),
    drive: Optional[GoogleDriveClient] = Depends(get_drive_client),
) -> LeaveRequestService:
    return LeaveRequestService(store, drive, settings.QUOTA_POLICY)
