import logging
from typing import Optional

from leave_tracker.core.exceptions import NotFoundError, ValidationError
from leave_tracker.database.store import DocumentStore, Kind
from leave_tracker.schemas.leave_type import LeaveTypeCreate, LeaveTypeRecord, LeaveTypeUpdate
from leave_tracker.schemas.user import Actor
from leave_tracker.utils.generator import generate_record_id

logger = logging.getLogger(__name__)

CASUAL_LEAVE = "Casual Leave"

DEFAULT_LEAVE_TYPES = [
    (CASUAL_LEAVE, 20),
    ("Sick Leave", 10),
    ("Earned Leave", None),
]


# ─── HELPERS ──────────────────────────────────────────────────────────────────

def _ensure_unique_name(store: DocumentStore, name: str, exclude_id: Optional[str] = None) -> None:
    for leave_type in store.get_all(Kind.leave_types):
        if leave_type.id != exclude_id and leave_type.name.lower() == name.lower():
            raise ValidationError(f"Leave type '{name}' already exists")


def is_protected(leave_type: LeaveTypeRecord) -> bool:
    return leave_type.name == CASUAL_LEAVE


# ─── CRUD ─────────────────────────────────────────────────────────────────────

def list_leave_types(store: DocumentStore) -> list[LeaveTypeRecord]:
    return store.get_all(Kind.leave_types)


def get_leave_type(store: DocumentStore, leave_type_id: str) -> LeaveTypeRecord:
    leave_type = store.get_by_id(Kind.leave_types, leave_type_id)
    if leave_type is None:
        raise NotFoundError("Leave type not found")
    return leave_type


def create_leave_type(store: DocumentStore, data: LeaveTypeCreate, actor: Actor) -> LeaveTypeRecord:
    _ensure_unique_name(store, data.name)
    leave_type = LeaveTypeRecord(
        id=generate_record_id("LT"),
        name=data.name,
        max_days=data.max_days,
        done_by=actor.id,
    )
    store.put(Kind.leave_types, leave_type)
    logger.info("Leave type %s created by %s", leave_type.name, actor.name)
    return leave_type


def update_leave_type(
    store: DocumentStore,
    leave_type_id: str,
    data: LeaveTypeUpdate,
    actor: Actor,
) -> LeaveTypeRecord:
    leave_type = get_leave_type(store, leave_type_id)
    changes = data.model_dump(exclude_unset=True)

    new_name = changes.get("name")
    if new_name is not None and new_name != leave_type.name:
        if is_protected(leave_type):
            raise ValidationError(f"{CASUAL_LEAVE} cannot be renamed")
        _ensure_unique_name(store, new_name, exclude_id=leave_type.id)
    elif "name" in changes:
        changes.pop("name")

    updated = leave_type.model_copy(update={**changes, "done_by": actor.id})
    store.put(Kind.leave_types, updated)
    return updated


def delete_leave_type(store: DocumentStore, leave_type_id: str) -> None:
    leave_type = get_leave_type(store, leave_type_id)
    if is_protected(leave_type):
        raise ValidationError(f"{CASUAL_LEAVE} cannot be deleted")
    store.delete(Kind.leave_types, leave_type_id)
    logger.info("Leave type %s deleted", leave_type.name)


def seed_default_leave_types(store: DocumentStore, actor_id: Optional[str] = None) -> list[LeaveTypeRecord]:
    """Create the default leave types that do not exist yet. Returns the ones created."""
    existing = {leave_type.name.lower() for leave_type in store.get_all(Kind.leave_types)}
    created = []
    for name, max_days in DEFAULT_LEAVE_TYPES:
        if name.lower() in existing:
            continue
        leave_type = LeaveTypeRecord(
            id=generate_record_id("LT"),
            name=name,
            max_days=max_days,
            done_by=actor_id,
        )
        store.put(Kind.leave_types, leave_type)
        created.append(leave_type)
    return created
