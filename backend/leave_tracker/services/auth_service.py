"""
Sign-in and sessions.

Users sign in with their name and password. Each sign-in opens a
``UserSession`` row whose id travels in the access token, so signing out
revokes the token server side.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from leave_tracker.config import settings
from leave_tracker.core.exceptions import AuthenticationError, ValidationError
from leave_tracker.core.security import as_utc, create_access_token, hash_password, verify_password
from leave_tracker.database.store import DocumentStore, Kind
from leave_tracker.models.user_session import UserSession
from leave_tracker.schemas.user import Actor, TokenResponse, UserInfo, UserRecord

logger = logging.getLogger(__name__)


def _create_user_session(user_id: str, db: Session, now: datetime) -> UserSession:
    session = UserSession(
        session_id=f"{int(now.timestamp())}_{secrets.token_hex(8)}",
        user_id=user_id,
        created_at=now,
        last_seen_at=now,
        expires_at=now + timedelta(days=settings.SESSION_EXPIRE_DAYS),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def find_user_by_name(store: DocumentStore, name: str) -> Optional[UserRecord]:
    wanted = name.strip().lower()
    for user in store.get_all(Kind.users):
        if user.name.lower() == wanted:
            return user
    return None


def sign_in(store: DocumentStore, name: str, password: str) -> tuple[UserRecord, UserSession]:
    user = find_user_by_name(store, name or "")
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed sign-in for %r", name)
        raise AuthenticationError("Invalid credentials")

    session = _create_user_session(user.id, store.db, datetime.now(timezone.utc))
    logger.info("User %s signed in", user.name)
    return user, session


def build_token_response(user: UserRecord, session_id: str) -> TokenResponse:
    token_payload = {
        "sub": user.id,
        "role": user.role,
        "sid": session_id,
    }
    return TokenResponse(
        access_token=create_access_token(token_payload),
        token_type="bearer",
        user=UserInfo(id=user.id, name=user.name, role=user.role),
    )


def get_active_session(db: Session, user_id: str, session_id: str) -> Optional[UserSession]:
    session = db.query(UserSession).filter(
        UserSession.session_id == session_id,
        UserSession.user_id == user_id,
        UserSession.revoked_at == None  # noqa: E711
    ).first()
    if not session or as_utc(session.expires_at) < datetime.now(timezone.utc):
        return None
    return session


def touch_session(db: Session, session: UserSession) -> None:
    session.last_seen_at = datetime.now(timezone.utc)
    db.commit()


def sign_out(db: Session, user_id: str, session_id: Optional[str]) -> None:
    if not session_id:
        return
    session = get_active_session(db, user_id, session_id)
    if session:
        session.revoked_at = datetime.now(timezone.utc)
        db.commit()
        logger.info("Session %s revoked", session_id)


def delete_user_sessions(db: Session, user_id: str, commit: bool = True) -> int:
    deleted = db.query(UserSession).filter(UserSession.user_id == user_id).delete(synchronize_session=False)
    if commit:
        db.commit()
    return deleted


def change_password(store: DocumentStore, actor: Actor, current_password: str, new_password: str) -> None:
    user = store.get_by_id(Kind.users, actor.id)
    if user is None:
        raise AuthenticationError("User not found")
    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")

    store.put(Kind.users, user.model_copy(update={"password_hash": hash_password(new_password)}))
    logger.info("Password changed for %s", user.name)
