import logging
from datetime import datetime, timezone

from leave_tracker.core.exceptions import NotFoundError, ValidationError
from leave_tracker.core.validation import require_non_empty_list
from leave_tracker.database.store import DocumentStore, Kind
from leave_tracker.schemas.employee import EmployeeCreate, EmployeeRecord, EmployeeUpdate
from leave_tracker.schemas.user import Actor
from leave_tracker.utils.generator import generate_record_id

logger = logging.getLogger(__name__)


def list_employees(store: DocumentStore) -> list[EmployeeRecord]:
    return store.get_all(Kind.employees)


def get_employee(store: DocumentStore, employee_id: str) -> EmployeeRecord:
    employee = store.get_by_id(Kind.employees, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


def create_employee(store: DocumentStore, data: EmployeeCreate, actor: Actor) -> EmployeeRecord:
    # callers may bring their own employee code
    employee_id = data.id or generate_record_id("EMP")
    if store.get_by_id(Kind.employees, employee_id) is not None:
        raise ValidationError(f"Employee id {employee_id} already exists")

    employee = EmployeeRecord(
        id=employee_id,
        name=data.name,
        designation=data.designation,
        department=data.department,
        gender=data.gender,
        last_edited=datetime.now(timezone.utc),
        done_by=actor.id,
    )
    store.put(Kind.employees, employee)
    logger.info("Employee %s created by %s", employee.id, actor.name)
    return employee


def update_employee(
    store: DocumentStore,
    employee_id: str,
    data: EmployeeUpdate,
    actor: Actor,
) -> EmployeeRecord:
    employee = get_employee(store, employee_id)
    changes = {field: value for field, value in data.model_dump(exclude_unset=True).items() if value is not None}
    updated = employee.model_copy(
        update={
            **changes,
            "last_edited": datetime.now(timezone.utc),
            "done_by": actor.id,
        }
    )
    store.put(Kind.employees, updated)
    return updated


def delete_employee(store: DocumentStore, employee_id: str) -> None:
    """Leave requests of the employee are kept; they carry their own name snapshot."""
    if not store.delete(Kind.employees, employee_id):
        raise NotFoundError("Employee not found")
    logger.info("Employee %s deleted", employee_id)


def bulk_delete_employees(store: DocumentStore, ids: list[str]) -> int:
    ids = require_non_empty_list(ids, "Select at least one employee to delete")
    deleted = store.batch_delete(Kind.employees, ids)
    logger.info("Bulk deleted %d employees", deleted)
    return deleted
