import base64

from conftest import ADMIN_PASSWORD, login


def create_employee(client, headers, employee_id="E1", name="Asha Rao"):
    response = client.post(
        "/employees/",
        json={"id": employee_id, "name": name, "designation": "Engineer", "department": "R&D", "gender": "Female"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def create_leave_type(client, headers, name="Casual Leave", max_days=20):
    response = client.post("/leave-types/", json={"name": name, "max_days": max_days}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def submit_leave(client, headers, employee_id, leave_type_id, start="2025-01-01", end="2025-01-05", **extra):
    response = client.post(
        "/leave-requests/",
        json={"employee_id": employee_id, "leave_type_id": leave_type_id, "start_date": start, "end_date": end, **extra},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


# ─── AUTH ─────────────────────────────────────────────────────────────────────

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_login_and_me(client, admin_headers):
    response = client.get("/auth/me", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Admin"
    assert response.json()["role"] == "Admin"
    assert "password_hash" not in response.json()


def test_bad_login(client, admin_user):
    response = client.post("/auth/login", json={"name": "Admin", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_requests_without_token_are_refused(client):
    assert client.get("/employees/").status_code == 401


def test_logout_revokes_token(client, admin_headers):
    assert client.post("/auth/logout", headers=admin_headers).status_code == 200
    response = client.get("/auth/me", headers=admin_headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Session expired"


def test_change_password(client, admin_headers):
    response = client.post(
        "/auth/change-password",
        json={"current_password": ADMIN_PASSWORD, "new_password": "fresh-password"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    login(client, "Admin", "fresh-password")


def test_credentials_hash_and_verify(client):
    hashed = client.post("/credentials/hash", json={"password": "s3cret"}).json()["hashed_password"]
    assert hashed != "s3cret"

    verify = client.post("/credentials/verify", json={"password": "s3cret", "hashed_password": hashed})
    assert verify.json() == {"is_valid": True}
    verify = client.post("/credentials/verify", json={"password": "other", "hashed_password": hashed})
    assert verify.json() == {"is_valid": False}
    verify = client.post("/credentials/verify", json={"password": "other", "hashed_password": "not-a-hash"})
    assert verify.json() == {"is_valid": False}


# ─── USERS ────────────────────────────────────────────────────────────────────

def test_users_are_admin_only(client, admin_headers, co_admin_headers):
    assert client.get("/users/", headers=co_admin_headers).status_code == 403

    response = client.post("/users/", json={"name": "Nina", "password": "nina-pass"}, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["role"] == "CoAdmin"
    assert {u["name"] for u in client.get("/users/", headers=admin_headers).json()} == {"Admin", "Helper", "Nina"}


def test_short_password_is_a_formatted_422(client, admin_headers):
    response = client.post("/users/", json={"name": "Nina", "password": "123"}, headers=admin_headers)
    assert response.status_code == 422
    assert "Password must be at least 6 characters" in response.json()["detail"]


def test_delete_user_reassigns_records(client, admin_headers, co_admin_headers, admin_user, co_admin_user):
    employee = create_employee(client, co_admin_headers)
    assert employee["done_by"] == co_admin_user.id

    response = client.delete(f"/users/{co_admin_user.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["reassigned"] == 1
    assert client.get("/employees/E1", headers=admin_headers).json()["done_by"] == admin_user.id


# ─── EMPLOYEES / HOLIDAYS / LEAVE TYPES ───────────────────────────────────────

def test_employee_crud(client, admin_headers):
    create_employee(client, admin_headers)
    create_employee(client, admin_headers, employee_id="E2", name="Ben Cole")

    response = client.put("/employees/E1", json={"designation": "Lead"}, headers=admin_headers)
    assert response.json()["designation"] == "Lead"
    assert response.json()["name"] == "Asha Rao"

    assert client.delete("/employees/E2", headers=admin_headers).status_code == 204
    assert client.get("/employees/E2", headers=admin_headers).status_code == 404

    response = client.request("DELETE", "/employees/", json={"ids": ["E1"]}, headers=admin_headers)
    assert response.json() == {"deleted": 1}
    assert client.get("/employees/", headers=admin_headers).json() == []


def test_employee_requires_name(client, admin_headers):
    response = client.post("/employees/", json={"name": "  ", "gender": "Male"}, headers=admin_headers)
    assert response.status_code == 422


def test_holidays(client, admin_headers):
    response = client.post(
        "/holidays/",
        json={"name": "Pongal", "start_date": "2025-01-14", "end_date": "2025-01-16"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    holiday = response.json()
    assert holiday["total_days"] == 3

    bad = client.post(
        "/holidays/",
        json={"name": "Backwards", "start_date": "2025-01-16", "end_date": "2025-01-14"},
        headers=admin_headers,
    )
    assert bad.status_code == 400

    csv_response = client.get("/holidays/export/csv?year=2025", headers=admin_headers)
    assert csv_response.headers["content-type"].startswith("text/csv")
    assert "Pongal" in csv_response.text

    assert client.delete(f"/holidays/{holiday['id']}", headers=admin_headers).status_code == 204
    assert client.delete(f"/holidays/{holiday['id']}", headers=admin_headers).status_code == 404


def test_casual_leave_cannot_be_deleted(client, admin_headers):
    casual = create_leave_type(client, admin_headers)
    response = client.delete(f"/leave-types/{casual['id']}", headers=admin_headers)
    assert response.status_code == 400
    assert "cannot be deleted" in response.json()["detail"]

    sick = create_leave_type(client, admin_headers, name="Sick Leave", max_days=10)
    assert client.delete(f"/leave-types/{sick['id']}", headers=admin_headers).status_code == 204


# ─── LEAVE REQUESTS ───────────────────────────────────────────────────────────

def test_leave_request_lifecycle(client, admin_headers, co_admin_headers):
    create_employee(client, admin_headers)
    casual = create_leave_type(client, admin_headers)

    created = submit_leave(client, co_admin_headers, "E1", casual["id"])
    request = created["request"]
    assert request["status"] == "Pending"
    assert request["approved_days"] == 5
    assert created["warning"] is None

    # CoAdmins cannot decide
    assert client.put(f"/leave-requests/{request['id']}/approve", headers=co_admin_headers).status_code == 403

    approved = client.put(f"/leave-requests/{request['id']}/approve", headers=admin_headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "Approved"

    edit = client.put(
        f"/leave-requests/{request['id']}",
        json={"employee_id": "E1", "leave_type_id": casual["id"], "start_date": "2025-01-01", "end_date": "2025-01-02"},
        headers=admin_headers,
    )
    assert edit.status_code == 409

    assert client.delete(f"/leave-requests/{request['id']}", headers=admin_headers).status_code == 409
    assert client.get(f"/leave-requests/{request['id']}", headers=admin_headers).json()["approved_days"] == 5


def test_over_quota_warning_then_blocked_approval(client, admin_headers):
    create_employee(client, admin_headers)
    casual = create_leave_type(client, admin_headers)
    first = submit_leave(client, admin_headers, "E1", casual["id"], approved_days=18)["request"]
    client.put(f"/leave-requests/{first['id']}/approve", headers=admin_headers)

    quota = client.get(
        f"/leave-requests/quota?employee_id=E1&leave_type_id={casual['id']}&start_date=2025-03-03&end_date=2025-03-07",
        headers=admin_headers,
    ).json()
    assert quota == {"within_limit": False, "used": 18, "limit": 20, "requested": 5}

    second = submit_leave(client, admin_headers, "E1", casual["id"], start="2025-03-03", end="2025-03-07")
    assert second["warning"]
    assert second["quota"]["within_limit"] is False

    response = client.put(f"/leave-requests/{second['request']['id']}/approve", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["context"]["used"] == 18


def test_inverted_dates_rejected(client, admin_headers):
    create_employee(client, admin_headers)
    casual = create_leave_type(client, admin_headers)
    response = client.post(
        "/leave-requests/",
        json={"employee_id": "E1", "leave_type_id": casual["id"], "start_date": "2025-01-05", "end_date": "2025-01-01"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "End date cannot be before start date"
    assert client.get("/leave-requests/", headers=admin_headers).json() == []


def test_filter_and_export(client, admin_headers):
    create_employee(client, admin_headers)
    create_employee(client, admin_headers, employee_id="E2", name="Ben Cole")
    casual = create_leave_type(client, admin_headers)
    submit_leave(client, admin_headers, "E1", casual["id"])
    submit_leave(client, admin_headers, "E2", casual["id"], start="2025-02-01", end="2025-02-01")

    listed = client.get("/leave-requests/?search=ben", headers=admin_headers).json()
    assert [r["employee_id"] for r in listed] == ["E2"]
    listed = client.get("/leave-requests/?start_date=2025-01-05&end_date=2025-01-31", headers=admin_headers).json()
    assert [r["employee_id"] for r in listed] == ["E1"]

    exported = client.get("/leave-requests/export/csv?status=Pending", headers=admin_headers)
    assert exported.status_code == 200
    assert "Asha Rao" in exported.text and "Ben Cole" in exported.text


def test_bulk_delete_reports_per_item(client, admin_headers):
    create_employee(client, admin_headers)
    casual = create_leave_type(client, admin_headers)
    pending = submit_leave(client, admin_headers, "E1", casual["id"])["request"]
    approved = submit_leave(client, admin_headers, "E1", casual["id"])["request"]
    client.put(f"/leave-requests/{approved['id']}/approve", headers=admin_headers)

    response = client.request("DELETE", "/leave-requests/", json={"ids": [pending["id"], approved["id"]]}, headers=admin_headers)

    body = response.json()
    assert body["deleted"] == [pending["id"]]
    assert [f["id"] for f in body["failed"]] == [approved["id"]]


def test_inline_attachment_lifecycle(client, admin_headers, drive):
    create_employee(client, admin_headers)
    casual = create_leave_type(client, admin_headers)
    attachment = {"file_name": "cert.png", "mime_type": "image/png", "base64_data": base64.b64encode(b"img").decode()}

    request = submit_leave(client, admin_headers, "E1", casual["id"], attachment=attachment)["request"]
    assert request["attachment_file_name"] == "cert.png"
    assert request["attachment_file_id"] in drive.files

    assert client.delete(f"/leave-requests/{request['id']}", headers=admin_headers).status_code == 204
    assert drive.deleted == [request["attachment_file_id"]]


# ─── ANALYTICS ────────────────────────────────────────────────────────────────

def test_analytics(client, admin_headers):
    create_employee(client, admin_headers)
    casual = create_leave_type(client, admin_headers)
    request = submit_leave(client, admin_headers, "E1", casual["id"], start="2025-06-02", end="2025-06-04")["request"]
    client.put(f"/leave-requests/{request['id']}/approve", headers=admin_headers)

    dashboard = client.get("/analytics/dashboard?as_of=2025-06-03", headers=admin_headers).json()
    assert dashboard["total_employees"] == 1
    assert dashboard["employees_on_leave"] == 1
    assert dashboard["casual_leave"][0]["remaining"] == 17

    monthly = client.get("/analytics/monthly?months=12&as_of=2025-06-15", headers=admin_headers).json()
    assert len(monthly["buckets"]) == 12
    assert monthly["buckets"][0]["month"] == "2024-07"
    assert monthly["peak_month"]["month"] == "2025-06"

    top = client.get("/analytics/top-leave-takers", headers=admin_headers).json()
    assert top == [{"employee_id": "E1", "employee_name": "Asha Rao", "total_days": 3}]

    assert client.get("/analytics/leave-types", headers=admin_headers).json() == {"Casual Leave": 1}

    summary = client.get("/analytics/employees/E1/summary", headers=admin_headers).json()
    assert summary["total_days"] == 3
    assert summary["by_type"][0]["leave_type_name"] == "Casual Leave"

    summary_csv = client.get("/analytics/employees/E1/summary/csv", headers=admin_headers)
    assert "Total" in summary_csv.text


# ─── ATTACHMENTS ──────────────────────────────────────────────────────────────

def test_attachment_upload_and_delete(client, admin_headers, drive):
    response = client.post(
        "/attachments/",
        files={"file": ("scan.jpg", b"jpeg-bytes", "image/jpeg")},
        headers=admin_headers,
    )
    assert response.status_code == 201
    uploaded = response.json()
    assert uploaded["file_name"] == "scan.jpg"

    storage = client.get("/attachments/storage", headers=admin_headers).json()
    assert storage["exact"] is True
    assert storage["file_count"] == 1

    assert client.delete(f"/attachments/{uploaded['file_id']}", headers=admin_headers).status_code == 200
    assert drive.deleted == [uploaded["file_id"]]


def test_attachment_rejects_non_images(client, admin_headers, drive):
    response = client.post(
        "/attachments/",
        files={"file": ("doc.pdf", b"%PDF", "application/pdf")},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert drive.files == {}
