"""
Document-style access to the leave tracker tables.

Every record kind maps to one SQLAlchemy model and one pydantic record
schema. Rows are validated into the schema on the way out and written back
from it on the way in, so services only ever see typed records.
"""

import enum
import logging
from contextlib import contextmanager
from typing import Iterable, Iterator

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leave_tracker.core.exceptions import CollaboratorError
from leave_tracker.models.employee import Employee
from leave_tracker.models.holiday import Holiday
from leave_tracker.models.leave_request import LeaveRequest
from leave_tracker.models.leave_type import LeaveType
from leave_tracker.models.user import User
from leave_tracker.schemas.employee import EmployeeRecord
from leave_tracker.schemas.holiday import HolidayRecord
from leave_tracker.schemas.leave_request import LeaveRequestRecord
from leave_tracker.schemas.leave_type import LeaveTypeRecord
from leave_tracker.schemas.user import UserRecord

logger = logging.getLogger(__name__)


class Kind(str, enum.Enum):
    users = "users"
    employees = "employees"
    holidays = "holidays"
    leave_types = "leaveTypes"
    leave_requests = "leaveRequests"


_REGISTRY = {
    Kind.users: (User, UserRecord),
    Kind.employees: (Employee, EmployeeRecord),
    Kind.holidays: (Holiday, HolidayRecord),
    Kind.leave_types: (LeaveType, LeaveTypeRecord),
    Kind.leave_requests: (LeaveRequest, LeaveRequestRecord),
}


class DocumentStore:
    def __init__(self, db: Session):
        self.db = db
        self._transaction_depth = 0

    @contextmanager
    def transaction(self) -> Iterator["DocumentStore"]:
        """
        Group several writes into one commit.

        Writes inside the block are flushed but not committed. Any exception
        rolls all of them back and propagates.
        """
        self._transaction_depth += 1
        try:
            yield self
        except Exception:
            self._transaction_depth -= 1
            if self._transaction_depth == 0:
                self.db.rollback()
            raise
        self._transaction_depth -= 1
        if self._transaction_depth == 0:
            try:
                self.db.commit()
            except SQLAlchemyError as exc:
                self._fail("Failed to commit transaction", exc)

    @property
    def in_transaction(self) -> bool:
        return self._transaction_depth > 0

    def _commit(self) -> None:
        if self.in_transaction:
            self.db.flush()
        else:
            self.db.commit()

    def get_all(self, kind: Kind) -> list:
        model, schema = _REGISTRY[kind]
        try:
            # generated ids carry a strictly increasing timestamp, so this is creation order
            rows = self.db.query(model).order_by(model.id).all()
        except SQLAlchemyError as exc:
            self._fail(f"Failed to load {kind.value}", exc)
        return [schema.model_validate(row) for row in rows]

    def get_by_id(self, kind: Kind, record_id: str):
        model, schema = _REGISTRY[kind]
        try:
            row = self.db.get(model, record_id)
        except SQLAlchemyError as exc:
            self._fail(f"Failed to load {kind.value} record", exc)
        return schema.model_validate(row) if row is not None else None

    def put(self, kind: Kind, record: BaseModel) -> None:
        model, schema = _REGISTRY[kind]
        if not isinstance(record, schema):
            raise TypeError(f"{kind.value} expects {schema.__name__}, got {type(record).__name__}")
        try:
            self.db.merge(model(**record.model_dump()))
            self._commit()
        except SQLAlchemyError as exc:
            self._fail(f"Failed to save {kind.value} record", exc)

    def delete(self, kind: Kind, record_id: str) -> bool:
        model, _ = _REGISTRY[kind]
        try:
            deleted = self.db.query(model).filter(model.id == record_id).delete(synchronize_session=False)
            self._commit()
        except SQLAlchemyError as exc:
            self._fail(f"Failed to delete {kind.value} record", exc)
        return deleted > 0

    def batch_delete(self, kind: Kind, record_ids: Iterable[str]) -> int:
        """Delete all ids in one transaction; nothing is deleted if it fails."""
        model, _ = _REGISTRY[kind]
        ids = list(dict.fromkeys(record_ids))
        if not ids:
            return 0
        try:
            deleted = self.db.query(model).filter(model.id.in_(ids)).delete(synchronize_session=False)
            self._commit()
        except SQLAlchemyError as exc:
            self._fail(f"Failed to delete {kind.value} records", exc)
        return deleted

    def count(self, kind: Kind) -> int:
        model, _ = _REGISTRY[kind]
        try:
            return self.db.query(model).count()
        except SQLAlchemyError as exc:
            self._fail(f"Failed to count {kind.value}", exc)

    def _fail(self, message: str, exc: Exception) -> None:
        self.db.rollback()
        logger.error("%s: %s", message, exc)
        raise CollaboratorError(message) from exc

