# tests/test_staff.py - Staff records, login accounts and leave workflow
import re
from datetime import date

from sqlalchemy import func, select

from schooldesk.models import Staff, User
from schooldesk.services.staff import StaffService
from tests.conftest import create, login


def teacher_role_id(client):
    roles = client.get("/api/roles", params={"search": "teacher"}).json()["data"]
    return next(r["id"] for r in roles if r["name"] == "Teacher")


def staff_payload(**overrides):
    payload = {"employee_id": "EMP-1", "first_name": "Jane", "last_name": "Doe", "email": "jane@alpha-academy.org"}
    payload.update(overrides)
    return payload


def test_create_staff_with_references(client_a):
    department = create(client_a, "/api/staff/departments", {"name": "Science"})
    designation = create(client_a, "/api/staff/designations", {"name": "Teacher"})

    staff = create(client_a, "/api/staff", staff_payload(
        department_id=department["id"], designation_id=designation["id"], role_id=teacher_role_id(client_a),
    ))

    assert staff["full_name"] == "Jane Doe"
    assert staff["department_name"] == "Science"
    assert staff["designation_name"] == "Teacher"
    assert staff["role_name"] == "Teacher"
    assert staff["has_login"] is False


def test_unknown_department_is_rejected(client_a, client_b):
    foreign = create(client_b, "/api/staff/departments", {"name": "Arts"})

    response = client_a.post("/api/staff", json=staff_payload(department_id=foreign["id"]))

    assert response.status_code == 400
    assert response.json()["error"] == "Department not found"


def test_duplicate_employee_id_and_email(client_a):
    create(client_a, "/api/staff", staff_payload())

    by_id = client_a.post("/api/staff", json=staff_payload(email="other@alpha-academy.org"))
    assert by_id.status_code == 400
    assert by_id.json()["error"] == "Staff with this employee ID already exists"

    by_email = client_a.post("/api/staff", json=staff_payload(employee_id="EMP-2", email="JANE@alpha-academy.org"))
    assert by_email.status_code == 400
    assert by_email.json()["error"] == "Staff with this email already exists"


def test_create_with_login_creates_working_account(client_a):
    staff = create(client_a, "/api/staff", staff_payload(
        role_id=teacher_role_id(client_a), create_login=True, username="jane", password="teach123",
    ))

    assert staff["has_login"] is True
    teacher = login("jane", "teach123")
    assert teacher.get("/api/auth/me").json()["data"]["role_name"] == "Teacher"


def test_create_with_login_requires_password(client_a):
    response = client_a.post("/api/staff", json=staff_payload(
        role_id=teacher_role_id(client_a), create_login=True, username="jane",
    ))

    assert response.status_code == 400
    assert "Password must be at least 6 characters" in response.json()["error"]


def test_taken_username_creates_nothing(client_a, db):
    response = client_a.post("/api/staff", json=staff_payload(
        role_id=teacher_role_id(client_a), create_login=True, username="admin_b", password="teach123",
    ))

    assert response.status_code == 400
    assert response.json()["error"] == "User with this username already exists"
    assert db.execute(select(func.count(Staff.id))).scalar_one() == 0


def test_login_failure_in_database_rolls_back_staff_row(client_a, db, monkeypatch):
    # Skip the pre-check so the unique index on users.username is what fails
    monkeypatch.setattr(StaffService, "_check_login_available", lambda self, username: None)

    response = client_a.post("/api/staff", json=staff_payload(
        role_id=teacher_role_id(client_a), create_login=True, username="admin_b", password="teach123",
    ))

    assert response.status_code == 400
    assert response.json()["error"] == "User with this username already exists"
    assert db.execute(select(func.count(Staff.id))).scalar_one() == 0
    assert db.execute(select(func.count(User.id)).where(User.username == "admin_b")).scalar_one() == 1


def test_deleting_staff_removes_login(client_a, db):
    staff = create(client_a, "/api/staff", staff_payload(
        role_id=teacher_role_id(client_a), create_login=True, username="jane", password="teach123",
    ))

    assert client_a.delete(f"/api/staff/{staff['id']}").status_code == 200
    assert db.execute(select(func.count(User.id)).where(User.username == "jane")).scalar_one() == 0


def test_generate_employee_id(client_a):
    response = client_a.get("/api/staff/generate-id")

    assert response.status_code == 200
    employee_id = response.json()["data"]["employee_id"]
    assert re.fullmatch(rf"ALPHA-{date.today():%y}-0001", employee_id)

    create(client_a, "/api/staff", staff_payload(employee_id=employee_id))
    following = client_a.get("/api/staff/generate-id").json()["data"]["employee_id"]
    assert following.endswith("-0002")


def test_department_with_staff_cannot_be_deleted(client_a):
    department = create(client_a, "/api/staff/departments", {"name": "Science"})
    create(client_a, "/api/staff", staff_payload(department_id=department["id"]))

    response = client_a.delete(f"/api/staff/departments/{department['id']}")

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete department. 1 staff member(s) are assigned to it."


def test_staff_filters(client_a):
    science = create(client_a, "/api/staff/departments", {"name": "Science"})
    create(client_a, "/api/staff", staff_payload(department_id=science["id"]))
    create(client_a, "/api/staff", staff_payload(employee_id="EMP-2", email="john@alpha-academy.org", first_name="John"))

    filtered = client_a.get("/api/staff", params={"department_id": science["id"]}).json()["data"]
    assert [s["first_name"] for s in filtered] == ["Jane"]

    searched = client_a.get("/api/staff", params={"search": "john"}).json()["data"]
    assert [s["first_name"] for s in searched] == ["John"]

    bad = client_a.get("/api/staff", params={"department_id": "not-a-uuid"})
    assert bad.status_code == 400


def test_leave_can_be_decided_once(client_a):
    staff = create(client_a, "/api/staff", staff_payload())
    leave = create(client_a, "/api/staff/leave", {
        "staff_id": staff["id"], "leave_type": "Sick", "from_date": "2026-03-02", "to_date": "2026-03-04",
    })
    assert leave["status"] == "pending"
    assert leave["days"] == 3

    approved = client_a.post(f"/api/staff/leave/{leave['id']}/approve")
    assert approved.status_code == 200
    assert approved.json()["data"]["status"] == "approved"

    again = client_a.post(f"/api/staff/leave/{leave['id']}/reject")
    assert again.status_code == 400
    assert again.json()["error"] == "Leave request is already approved"

    pending = client_a.get("/api/staff/leave", params={"status": "pending"}).json()["data"]
    assert pending == []
