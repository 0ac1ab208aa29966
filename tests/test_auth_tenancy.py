# tests/test_auth_tenancy.py - Sessions, tenant isolation and permissions
import uuid

from fastapi.testclient import TestClient

from schooldesk.core.security import create_session_token
from schooldesk.main import app
from tests.conftest import PASSWORD, create, login


def test_login_returns_token_and_principal(schools):
    client = TestClient(app)
    response = client.post("/api/auth/login", json={"username": "ADMIN_A", "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["token"]
    user = body["data"]["user"]
    assert user["username"] == "admin_a"
    assert user["role_name"] == "Super Admin"
    assert "academics.create" in user["permissions"]
    assert "schooldesk_session" in response.cookies


def test_login_with_wrong_password_is_rejected(schools, anonymous):
    response = anonymous.post("/api/auth/login", json={"username": "admin_a", "password": "nope-nope"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid username or password"}


def test_session_cookie_authenticates_and_logout_clears_it(schools):
    client = TestClient(app)
    client.post("/api/auth/login", json={"username": "admin_a", "password": PASSWORD})

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["data"]["school_name"] == "Alpha Academy"

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_requests_without_session_are_unauthorized(anonymous):
    response = anonymous.get("/api/academics/sections")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_garbage_token_is_unauthorized(anonymous):
    response = anonymous.get("/api/academics/sections", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid session"


def test_token_claiming_another_school_is_rejected(schools, db):
    from sqlalchemy import select
    from schooldesk.models import User

    user = db.execute(select(User).where(User.username == "admin_a")).scalar_one()
    forged = create_session_token(user.id, schools["beta"].id)

    client = TestClient(app)
    response = client.get("/api/academics/sections", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401


def test_records_of_other_schools_are_invisible(client_a, client_b):
    section = create(client_a, "/api/academics/sections", {"name": "A"})

    assert client_b.get(f"/api/academics/sections/{section['id']}").status_code == 404
    assert client_b.put(f"/api/academics/sections/{section['id']}", json={"name": "Hijack"}).status_code == 404
    assert client_b.delete(f"/api/academics/sections/{section['id']}").status_code == 404

    listed = client_b.get("/api/academics/sections").json()
    assert listed["data"] == []
    assert listed["pagination"]["total"] == 0

    still_there = client_a.get(f"/api/academics/sections/{section['id']}").json()["data"]
    assert still_there["name"] == "A"


def test_same_name_is_allowed_in_different_schools(client_a, client_b):
    create(client_a, "/api/academics/sections", {"name": "Blue"})
    create(client_b, "/api/academics/sections", {"name": "Blue"})


def test_references_to_other_schools_are_not_found(client_a, client_b):
    foreign_route = create(client_b, "/api/transport/routes", {"title": "North"})

    response = client_a.post("/api/transport/pickup-points", json={"route_id": foreign_route["id"], "name": "Gate"})

    assert response.status_code == 400
    assert response.json()["error"] == "Route not found"


def test_missing_permission_is_forbidden(client_a):
    permissions = client_a.get("/api/permissions", params={"module": "students"}).json()["data"]
    view_only = [p["id"] for p in permissions if p["slug"] == "students.view"]
    role = create(client_a, "/api/roles", {"name": "Observer", "permission_ids": view_only})
    create(client_a, "/api/users", {"username": "watcher", "password": "watch123", "role_id": role["id"]})

    watcher = login("watcher", "watch123")
    assert watcher.get("/api/students").status_code == 200

    response = watcher.post("/api/academics/sections", json={"name": "Z"})
    assert response.status_code == 403
    assert response.json()["error"] == "Missing permission: academics.create"


def test_change_password(client_a):
    response = client_a.post(
        "/api/auth/change-password", json={"current_password": PASSWORD, "new_password": "fresh-pass"}
    )
    assert response.status_code == 200

    login("admin_a", "fresh-pass")


def test_change_password_requires_current_password(client_a):
    response = client_a.post(
        "/api/auth/change-password", json={"current_password": "wrong-one", "new_password": "fresh-pass"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Current password is incorrect"


def test_unknown_record_id_is_not_found(client_a):
    response = client_a.get(f"/api/academics/classes/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Class not found"}
