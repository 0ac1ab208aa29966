# tests/test_crud_guards.py - Validation, uniqueness, delete guards and listing
from tests.conftest import create


def test_blank_required_field_is_a_validation_error(client_a):
    response = client_a.post("/api/academics/sections", json={"name": "   "})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("name:")


def test_malformed_json_is_a_validation_error(client_a):
    response = client_a.post(
        "/api/academics/sections", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Request body is not valid JSON"


def test_duplicate_name_is_rejected_case_insensitively(client_a):
    create(client_a, "/api/academics/sections", {"name": "Section A"})

    response = client_a.post("/api/academics/sections", json={"name": "section a"})

    assert response.status_code == 400
    assert response.json()["error"] == "Section with this name already exists"


def test_update_into_existing_name_is_rejected(client_a):
    create(client_a, "/api/academics/sections", {"name": "A"})
    b = create(client_a, "/api/academics/sections", {"name": "B"})

    response = client_a.put(f"/api/academics/sections/{b['id']}", json={"name": "A"})

    assert response.status_code == 400
    assert response.json()["error"] == "Section with this name already exists"


def test_update_keeping_own_name_is_allowed(client_a):
    a = create(client_a, "/api/academics/sections", {"name": "A"})

    response = client_a.put(f"/api/academics/sections/{a['id']}", json={"name": "A", "is_active": False})

    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False
    assert response.json()["message"] == "Section updated successfully"


def test_section_in_use_cannot_be_deleted(client_a):
    section = create(client_a, "/api/academics/sections", {"name": "A"})
    create(client_a, "/api/academics/classes", {"name": "Grade 1", "section_ids": [section["id"]]})

    response = client_a.delete(f"/api/academics/sections/{section['id']}")

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete section. It is assigned to 1 class(es)."
    assert client_a.get(f"/api/academics/sections/{section['id']}").json()["data"]["class_count"] == 1


def test_unused_section_can_be_deleted(client_a):
    section = create(client_a, "/api/academics/sections", {"name": "A"})

    response = client_a.delete(f"/api/academics/sections/{section['id']}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": None, "message": "Section deleted successfully"}
    assert client_a.get(f"/api/academics/sections/{section['id']}").status_code == 404


def test_deleting_a_class_removes_its_section_links(client_a):
    section = create(client_a, "/api/academics/sections", {"name": "A"})
    grade = create(client_a, "/api/academics/classes", {"name": "Grade 1", "section_ids": [section["id"]]})

    assert client_a.delete(f"/api/academics/classes/{grade['id']}").status_code == 200
    assert client_a.delete(f"/api/academics/sections/{section['id']}").status_code == 200


def test_class_sort_order_and_sections(client_a):
    a = create(client_a, "/api/academics/sections", {"name": "B"})
    b = create(client_a, "/api/academics/sections", {"name": "A"})

    first = create(client_a, "/api/academics/classes", {"name": "Grade 1", "section_ids": [a["id"], b["id"]]})
    second = create(client_a, "/api/academics/classes", {"name": "Grade 2"})

    assert first["sort_order"] == 1
    assert second["sort_order"] == 2
    assert [s["name"] for s in first["sections"]] == ["A", "B"]

    updated = client_a.put(f"/api/academics/classes/{first['id']}", json={"section_ids": [a["id"]]}).json()["data"]
    assert [s["name"] for s in updated["sections"]] == ["B"]


def test_subject_code_is_uppercased_and_unique(client_a):
    subject = create(client_a, "/api/academics/subjects", {"name": "Mathematics", "code": " math101 "})

    assert subject["code"] == "MATH101"
    fetched = client_a.get(f"/api/academics/subjects/{subject['id']}").json()["data"]
    assert fetched["name"] == "Mathematics"
    assert fetched["subject_type"] == "theory"

    response = client_a.post("/api/academics/subjects", json={"name": "Maths", "code": "Math101"})
    assert response.status_code == 400
    assert response.json()["error"] == "Subject with this code already exists"


def test_pagination_metadata(client_a):
    for index in range(5):
        create(client_a, "/api/academics/sections", {"name": f"S{index}"})

    body = client_a.get("/api/academics/sections", params={"page": 2, "limit": 2}).json()

    assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "totalPages": 3}
    assert [s["name"] for s in body["data"]] == ["S2", "S3"]


def test_limit_above_maximum_is_rejected(client_a):
    response = client_a.get("/api/academics/sections", params={"limit": 1000})

    assert response.status_code == 400


def test_search_and_status_filters(client_a):
    create(client_a, "/api/academics/sections", {"name": "Red"})
    create(client_a, "/api/academics/sections", {"name": "Reed"})
    create(client_a, "/api/academics/sections", {"name": "Green", "is_active": False})

    searched = client_a.get("/api/academics/sections", params={"search": "RE"}).json()["data"]
    assert sorted(s["name"] for s in searched) == ["Green", "Red", "Reed"]

    inactive = client_a.get("/api/academics/sections", params={"status": "inactive"}).json()["data"]
    assert [s["name"] for s in inactive] == ["Green"]

    bad = client_a.get("/api/academics/sections", params={"status": "archived"})
    assert bad.status_code == 400


def test_search_treats_wildcards_literally(client_a):
    create(client_a, "/api/academics/sections", {"name": "Room_1"})
    create(client_a, "/api/academics/sections", {"name": "Room21"})

    found = client_a.get("/api/academics/sections", params={"search": "m_"}).json()["data"]

    assert [s["name"] for s in found] == ["Room_1"]


def test_only_one_active_session(client_a):
    first = create(client_a, "/api/sessions", {"name": "2025-26", "is_active": True})
    second = create(client_a, "/api/sessions", {"name": "2026-27"})

    activated = client_a.post(f"/api/sessions/{second['id']}/activate")
    assert activated.status_code == 200
    assert activated.json()["data"]["is_active"] is True
    assert client_a.get(f"/api/sessions/{first['id']}").json()["data"]["is_active"] is False

    response = client_a.delete(f"/api/sessions/{second['id']}")
    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete session. It is the active session."


def test_session_dates_are_validated(client_a):
    response = client_a.post(
        "/api/sessions", json={"name": "Bad", "start_date": "2026-06-01", "end_date": "2026-01-01"}
    )

    assert response.status_code == 400


def test_last_page_holds_the_remainder(client_a):
    for index in range(5):
        create(client_a, "/api/academics/sections", {"name": f"S{index}"})

    body = client_a.get("/api/academics/sections", params={"page": 3, "limit": 2}).json()

    assert body["pagination"] == {"page": 3, "limit": 2, "total": 5, "totalPages": 3}
    assert [s["name"] for s in body["data"]] == ["S4"]


def test_page_past_the_end_is_empty(client_a):
    for index in range(5):
        create(client_a, "/api/academics/sections", {"name": f"S{index}"})

    response = client_a.get("/api/academics/sections", params={"page": 4, "limit": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["pagination"] == {"page": 4, "limit": 2, "total": 5, "totalPages": 3}


def test_staff_fields_survive_create_and_fetch(client_a):
    department = create(client_a, "/api/staff/departments", {"name": "Science"})
    designation = create(client_a, "/api/staff/designations", {"name": "Senior Teacher"})
    payload = {
        "employee_id": " EMP-7 ",
        "first_name": "Amara",
        "last_name": "Okafor",
        "gender": "female",
        "dob": "1990-04-12",
        "email": "amara@alpha-academy.org",
        "phone": "+1 555 0100",
        "qualification": "MSc Physics",
        "joining_date": "2024-08-01",
        "contract_type": "permanent",
        "basic_salary": "25000.50",
        "address": "12 Elm Street",
        "is_active": True,
        "department_id": department["id"],
        "designation_id": designation["id"],
    }
    created = create(client_a, "/api/staff", payload)

    fetched = client_a.get(f"/api/staff/{created['id']}").json()["data"]

    expected = dict(payload, employee_id="EMP-7", basic_salary=25000.5)
    for field, value in expected.items():
        assert fetched[field] == value, field
    assert fetched["department_name"] == "Science"
    assert fetched["designation_name"] == "Senior Teacher"


def test_fee_type_fields_survive_create_update_and_fetch(client_a):
    created = create(client_a, "/api/fees/types", {"name": "Tuition", "code": "tui", "description": "Term tuition"})

    fetched = client_a.get(f"/api/fees/types/{created['id']}").json()["data"]
    assert (fetched["name"], fetched["code"], fetched["description"]) == ("Tuition", "TUI", "Term tuition")

    client_a.put(f"/api/fees/types/{created['id']}", json={"name": "Tuition Fee", "code": " tf ", "description": ""})
    fetched = client_a.get(f"/api/fees/types/{created['id']}").json()["data"]
    assert (fetched["name"], fetched["code"], fetched["description"]) == ("Tuition Fee", "TF", None)


def test_delete_guard_counts_only_rows_of_the_same_school(client_a, schools, db):
    import uuid
    from schooldesk.core.context import TenantContext
    from schooldesk.models import Department, Staff
    from schooldesk.services.staff import DepartmentService

    department = create(client_a, "/api/staff/departments", {"name": "Science"})
    create(client_a, "/api/staff", {"first_name": "Jane", "employee_id": "E1", "department_id": department["id"]})
    db.add(Staff(
        school_id=schools["beta"].id, employee_id="E1", first_name="Eve", department_id=uuid.UUID(department["id"]),
    ))
    db.commit()

    ctx = TenantContext(school_id=schools["alpha"].id, user_id=uuid.uuid4(), username="admin_a")
    counts = DepartmentService(db, ctx).count_dependents(db.get(Department, uuid.UUID(department["id"])))

    assert counts == [(1, "{count} staff member(s) are assigned to it")]
