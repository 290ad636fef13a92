from datetime import date
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leave_tracker.core.dependencies import get_drive_client
from leave_tracker.core.exceptions import CollaboratorError
from leave_tracker.database.base import Base
from leave_tracker.database.session import get_db
from leave_tracker.database.store import DocumentStore
from leave_tracker.main import app
from leave_tracker.schemas.attachment import DriveFile, UploadedFile
from leave_tracker.schemas.employee import EmployeeCreate
from leave_tracker.schemas.leave_request import LeaveRequestRecord
from leave_tracker.schemas.leave_type import LeaveTypeCreate
from leave_tracker.schemas.user import ADMIN, CO_ADMIN, Actor, UserCreate
from leave_tracker.services import employee_service, leave_type_service, user_service
from leave_tracker.services.leave_request_service import LeaveRequestService

ADMIN_PASSWORD = "admin-secret"
CO_ADMIN_PASSWORD = "coadmin-secret"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


class FakeDriveClient:
    """In-memory stand-in for GoogleDriveClient."""

    def __init__(self):
        self.files: dict[str, tuple[str, bytes]] = {}
        self.deleted: list[str] = []
        self.fail_delete = False
        self.fail_list = False
        self._next = 0

    def upload(self, content: bytes, file_name: str, mime_type: str) -> UploadedFile:
        self._next += 1
        file_id = f"file{self._next}"
        self.files[file_id] = (file_name, content)
        return UploadedFile(
            file_id=file_id,
            web_view_link=f"https://drive.google.com/file/d/{file_id}/view",
            web_content_link=f"https://drive.google.com/uc?export=view&id={file_id}",
        )

    def delete(self, file_id: str) -> None:
        if self.fail_delete:
            raise CollaboratorError("Google Drive returned 500: backend error")
        self.deleted.append(file_id)
        self.files.pop(file_id, None)

    def list_files(self, folder_id: Optional[str] = None) -> list[DriveFile]:
        if self.fail_list:
            raise CollaboratorError("Google Drive request failed: timed out")
        return [
            DriveFile(id=file_id, name=name, size_bytes=len(content))
            for file_id, (name, content) in self.files.items()
        ]


def make_request(**overrides) -> LeaveRequestRecord:
    """A leave request record with sensible defaults, for pure engine tests."""
    fields = {
        "id": "LR1",
        "employee_id": "E1",
        "employee_name": "Asha Rao",
        "designation": "Engineer",
        "department": "R&D",
        "leave_type_id": "LT-CASUAL",
        "leave_type_name": "Casual Leave",
        "start_date": date(2025, 1, 1),
        "end_date": date(2025, 1, 5),
        "approved_days": 5,
        "status": "Approved",
    }
    fields.update(overrides)
    return LeaveRequestRecord(**fields)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db):
    return DocumentStore(db)


@pytest.fixture
def drive():
    return FakeDriveClient()


@pytest.fixture
def admin_user(store):
    return user_service.create_user(store, UserCreate(name="Admin", password=ADMIN_PASSWORD, role=ADMIN))


@pytest.fixture
def co_admin_user(store):
    return user_service.create_user(store, UserCreate(name="Helper", password=CO_ADMIN_PASSWORD, role=CO_ADMIN))


@pytest.fixture
def admin(admin_user):
    return Actor(id=admin_user.id, name=admin_user.name, role=admin_user.role)


@pytest.fixture
def co_admin(co_admin_user):
    return Actor(id=co_admin_user.id, name=co_admin_user.name, role=co_admin_user.role)


@pytest.fixture
def employee(store, admin):
    return employee_service.create_employee(
        store,
        EmployeeCreate(id="E1", name="Asha Rao", designation="Engineer", department="R&D", gender="Female"),
        admin,
    )


@pytest.fixture
def casual_leave(store, admin):
    return leave_type_service.create_leave_type(store, LeaveTypeCreate(name="Casual Leave", max_days=20), admin)


@pytest.fixture
def earned_leave(store, admin):
    return leave_type_service.create_leave_type(store, LeaveTypeCreate(name="Earned Leave"), admin)


@pytest.fixture
def service(store, drive):
    return LeaveRequestService(store, drive, "approval")


@pytest.fixture
def client(db, drive):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_drive_client] = lambda: drive
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def login(client: TestClient, name: str, password: str) -> dict:
    response = client.post("/auth/login", json={"name": name, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, admin_user):
    return login(client, "Admin", ADMIN_PASSWORD)


@pytest.fixture
def co_admin_headers(client, co_admin_user):
    return login(client, "Helper", CO_ADMIN_PASSWORD)
