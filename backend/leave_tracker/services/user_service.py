import logging
from datetime import datetime, timezone

from leave_tracker.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from leave_tracker.core.security import hash_password
from leave_tracker.database.store import DocumentStore, Kind
from leave_tracker.schemas.user import ADMIN, Actor, UserCreate, UserRecord
from leave_tracker.services.auth_service import delete_user_sessions, find_user_by_name
from leave_tracker.utils.generator import generate_record_id

logger = logging.getLogger(__name__)

# record kinds whose rows remember who last touched them
_AUDITED_KINDS = [Kind.employees, Kind.holidays, Kind.leave_types, Kind.leave_requests]


def list_users(store: DocumentStore) -> list[UserRecord]:
    return store.get_all(Kind.users)


def create_user(store: DocumentStore, data: UserCreate) -> UserRecord:
    if find_user_by_name(store, data.name):
        raise ValidationError("A user with this name already exists")

    user = UserRecord(
        id=generate_record_id("USER"),
        name=data.name,
        password_hash=hash_password(data.password),
        role=data.role,
        created_at=datetime.now(timezone.utc),
    )
    store.put(Kind.users, user)
    logger.info("User %s created with role %s", user.name, user.role)
    return user


def ensure_admin(store: DocumentStore, name: str, password: str) -> tuple[UserRecord, bool]:
    """Return the named user, creating it as Admin if missing. The flag tells whether it was created."""
    existing = find_user_by_name(store, name)
    if existing:
        return existing, False
    return create_user(store, UserCreate(name=name, password=password, role=ADMIN)), True


def delete_user(store: DocumentStore, user_id: str, actor: Actor) -> int:
    """
    Delete a user and hand their records over to the acting Admin.

    Returns the number of records whose ``done_by`` or ``updated_by`` was
    reassigned. The whole deletion commits as one transaction.
    """
    if not actor.is_admin:
        raise PermissionDeniedError("Admin access required")
    if user_id == actor.id:
        raise ValidationError("You cannot delete your own account")

    user = store.get_by_id(Kind.users, user_id)
    if user is None:
        raise NotFoundError("User not found")

    reassigned = 0
    with store.transaction():
        for kind in _AUDITED_KINDS:
            for record in store.get_all(kind):
                changes = {
                    field: actor.id
                    for field in ("done_by", "updated_by")
                    if getattr(record, field, None) == user_id
                }
                if changes:
                    store.put(kind, record.model_copy(update=changes))
                    reassigned += 1

        delete_user_sessions(store.db, user_id, commit=False)
        store.delete(Kind.users, user_id)
    logger.info("User %s deleted by %s, %d records reassigned", user.name, actor.name, reassigned)
    return reassigned
