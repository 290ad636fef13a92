from fastapi import APIRouter, Depends

from leave_tracker.core.dependencies import get_actor, get_current_user, get_store
from leave_tracker.database.store import DocumentStore
from leave_tracker.schemas.employee import EmployeeBulkDeleteRequest, EmployeeCreate, EmployeeRecord, EmployeeUpdate
from leave_tracker.schemas.user import Actor
from leave_tracker.services import employee_service

router = APIRouter(prefix="/employees", tags=["Employees"])


# ─── LIST ──────────────────────────────────────────────────────────────────────
@router.get("/", response_model=list[EmployeeRecord])
def list_employees(
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return employee_service.list_employees(store)


# ─── CREATE ────────────────────────────────────────────────────────────────────
@router.post("/", response_model=EmployeeRecord, status_code=201)
def create_employee(
    data: EmployeeCreate,
    store: DocumentStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    return employee_service.create_employee(store, data, actor)


# ─── BULK DELETE ───────────────────────────────────────────────────────────────
@router.delete("/", status_code=200)
def bulk_delete_employees(
    payload: EmployeeBulkDeleteRequest,
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    deleted = employee_service.bulk_delete_employees(store, payload.ids)
    return {"deleted": deleted}


# ─── GET ONE ───────────────────────────────────────────────────────────────────
@router.get("/{employee_id}", response_model=EmployeeRecord)
def get_employee(
    employee_id: str,
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    return employee_service.get_employee(store, employee_id)


# ─── UPDATE ────────────────────────────────────────────────────────────────────
@router.put("/{employee_id}", response_model=EmployeeRecord)
def update_employee(
    employee_id: str,
    data: EmployeeUpdate,
    store: DocumentStore = Depends(get_store),
    actor: Actor = Depends(get_actor),
):
    return employee_service.update_employee(store, employee_id, data, actor)


# ─── DELETE ONE ────────────────────────────────────────────────────────────────
@router.delete("/{employee_id}", status_code=204)
def delete_employee(
    employee_id: str,
    store: DocumentStore = Depends(get_store),
    current_user=Depends(get_current_user),
):
    employee_service.delete_employee(store, employee_id)
