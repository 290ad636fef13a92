from fastapi import APIRouter, Depends

from leave_tracker.core.dependencies import get_admin_actor, get_current_admin, get_store
from leave_tracker.database.store import DocumentStore
from leave_tracker.schemas.user import Actor, UserCreate, UserOut
from leave_tracker.services import user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/", response_model=list[UserOut])
def list_users(
    store: DocumentStore = Depends(get_store),
    current_admin=Depends(get_current_admin),
):
    return user_service.list_users(store)


@router.post("/", response_model=UserOut, status_code=201)
def create_user(
    data: UserCreate,
    store: DocumentStore = Depends(get_store),
    current_admin=Depends(get_current_admin),
):
    return user_service.create_user(store, data)


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    store: DocumentStore = Depends(get_store),
    actor: Actor = Depends(get_admin_actor),
):
    reassigned = user_service.delete_user(store, user_id, actor)
    return {"message": "User deleted", "reassigned": reassigned}
