from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from leave_tracker.core.dependencies import get_actor, get_current_session_id, get_current_user, get_store
from leave_tracker.database.session import get_db
from leave_tracker.database.store import DocumentStore
from leave_tracker.schemas.user import Actor, ChangePasswordRequest, LoginRequest, TokenResponse, UserOut, UserRecord
from leave_tracker.services import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, store: DocumentStore = Depends(get_store)):
    user, session = auth_service.sign_in(store, data.name, data.password)
    return auth_service.build_token_response(user, session.session_id)


@router.post("/logout")
def logout(
    db: Session = Depends(get_db),
    session_id: Optional[str] = Depends(get_current_session_id),
    current_user: UserRecord = Depends(get_current_user)
):
    auth_service.sign_out(db, current_user.id, session_id)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserOut)
def me(current_user: UserRecord = Depends(get_current_user)):
    return current_user


@router.post("/change-password")
def change_password(
    data: ChangePasswordRequest,
    actor: Actor = Depends(get_actor),
    store: DocumentStore = Depends(get_store)
):
    auth_service.change_password(store, actor, data.current_password, data.new_password)
    return {"message": "Password updated successfully"}
