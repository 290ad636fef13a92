import os

from leave_tracker.database.base import Base
from leave_tracker.database.session import SessionLocal, engine
from leave_tracker.database.store import DocumentStore
from leave_tracker.models.employee import Employee  # noqa: F401
from leave_tracker.models.holiday import Holiday  # noqa: F401
from leave_tracker.models.leave_request import LeaveRequest  # noqa: F401
from leave_tracker.models.leave_type import LeaveType  # noqa: F401
from leave_tracker.models.user import User  # noqa: F401
from leave_tracker.models.user_session import UserSession  # noqa: F401
from leave_tracker.services.leave_type_service import seed_default_leave_types
from leave_tracker.services.user_service import ensure_admin


def create_admin():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        store = DocumentStore(db)
        admin, created = ensure_admin(
            store,
            os.getenv("ADMIN_NAME", "Admin"),
            os.getenv("ADMIN_PASSWORD", "Admin@123"),
        )
        print("Admin created successfully" if created else "Admin already exists")

        for leave_type in seed_default_leave_types(store, admin.id):
            print(f"Leave type created: {leave_type.name}")
    finally:
        db.close()


if __name__ == "__main__":
    create_admin()
