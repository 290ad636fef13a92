from fastapi import APIRouter, Depends

from leave_tracker.core.dependencies import get_actor, get_current_user, get_store
from leave_tracker.database.store import DocumentStore
from leave_tracker.schemas.leave_type import LeaveTypeCreate, LeaveTypeRecord, LeaveTypeUpdate
from leave_tracker.schemas.user import Actor
from leave_tracker.services import leave_type_service

router = APIRouter(prefix="/leave-types", tags=["Leave Types"])


@router.get("/", response_model=list[LeaveTypeRecord])
def list_leave_types(
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return leave_type_service.list_leave_types(store)


@router.post("/", response_model=LeaveTypeRecord, status_code=201)
def create_leave_type(
    data: LeaveTypeCreate,
    store: DocumentStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    return leave_type_service.create_leave_type(store, data, actor)


@router.put("/{leave_type_id}", response_model=LeaveTypeRecord)
def update_leave_type(
    leave_type_id: str,
    data: LeaveTypeUpdate,
    store: DocumentStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    return leave_type_service.update_leave_type(store, leave_type_id, data, actor)


@router.delete("/{leave_type_id}", status_code=204)
def delete_leave_type(
    leave_type_id: str,
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    leave_type_service.delete_leave_type(store, leave_type_id)
