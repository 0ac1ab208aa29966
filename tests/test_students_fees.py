# tests/test_students_fees.py - Enrollment, fee assignment, collection, dues and dashboard
from datetime import date, timedelta

import pytest

from tests.conftest import create


@pytest.fixture
def school(client_a):
    """Active session, Grade 1 with section A, and an unlinked section B"""
    session = create(client_a, "/api/sessions", {"name": "2026-27", "is_active": True})
    section_a = create(client_a, "/api/academics/sections", {"name": "A"})
    section_b = create(client_a, "/api/academics/sections", {"name": "B"})
    grade = create(client_a, "/api/academics/classes", {"name": "Grade 1", "section_ids": [section_a["id"]]})
    return {"session": session, "grade": grade, "section_a": section_a, "section_b": section_b}


def enroll(client, school, first_name="Ada", **extra):
    payload = {
        "first_name": first_name,
        "class_id": school["grade"]["id"],
        "section_id": school["section_a"]["id"],
    }
    payload.update(extra)
    return create(client, "/api/students", payload)


def test_student_is_enrolled_in_active_session(client_a, school):
    student = enroll(client_a, school)

    assert student["class_name"] == "Grade 1"
    assert student["section_name"] == "A"
    assert student["session_id"] == school["session"]["id"]
    assert student["admission_no"] == f"{date.today():%Y}0001"

    grade = client_a.get(f"/api/academics/classes/{school['grade']['id']}").json()["data"]
    assert grade["student_count"] == 1


def test_section_not_assigned_to_class_is_rejected(client_a, school):
    response = client_a.post("/api/students", json={
        "first_name": "Ada", "class_id": school["grade"]["id"], "section_id": school["section_b"]["id"],
    })

    assert response.status_code == 400
    assert response.json()["error"] == "section_id: Section is not assigned to the selected class"


def test_enrolled_class_cannot_be_deleted(client_a, school):
    enroll(client_a, school)

    response = client_a.delete(f"/api/academics/classes/{school['grade']['id']}")

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete class. 1 student(s) are enrolled in it."


def test_generate_admission_number_and_duplicates(client_a, school):
    number = client_a.get("/api/students/generate-admission-no").json()["data"]["admission_no"]
    create(client_a, "/api/students", {"first_name": "Ada", "admission_no": number})

    response = client_a.post("/api/students", json={"first_name": "Bob", "admission_no": number})
    assert response.status_code == 400
    assert response.json()["error"] == "Student with this admission number already exists"

    following = client_a.get("/api/students/generate-admission-no").json()["data"]["admission_no"]
    assert int(following) == int(number) + 1


def test_filter_students_by_class_and_section(client_a, school):
    enroll(client_a, school, "Ada")
    create(client_a, "/api/students", {"first_name": "Unplaced"})

    in_class = client_a.get("/api/students", params={"class_id": school["grade"]["id"]}).json()["data"]
    assert [s["first_name"] for s in in_class] == ["Ada"]

    in_b = client_a.get("/api/students", params={"section_id": school["section_b"]["id"]}).json()["data"]
    assert in_b == []


def test_parent_with_students_cannot_be_deleted(client_a, school):
    parent = create(client_a, "/api/parents", {"guardian_name": "Grace", "guardian_phone": "555-0100"})
    enroll(client_a, school, parent_id=parent["id"])

    assert client_a.get(f"/api/parents/{parent['id']}").json()["data"]["student_count"] == 1
    response = client_a.delete(f"/api/parents/{parent['id']}")
    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete parent. 1 student(s) are linked to it."


def test_full_hostel_room_is_rejected(client_a, school):
    hostel = create(client_a, "/api/hostel/hostels", {"name": "East"})
    room = create(client_a, "/api/hostel/rooms", {"hostel_id": hostel["id"], "room_no": "101", "beds": 1})
    enroll(client_a, school, "Ada", hostel_room_id=room["id"])

    response = client_a.post("/api/students", json={"first_name": "Bob", "hostel_room_id": room["id"]})

    assert response.status_code == 400
    assert response.json()["error"] == "Hostel room 101 is full"
    assert client_a.get(f"/api/hostel/rooms/{room['id']}").json()["data"]["occupied"] == 1
    assert client_a.get(f"/api/hostel/hostels/{hostel['id']}").json()["data"]["room_count"] == 1


@pytest.fixture
def tuition(client_a, school):
    fee_type = create(client_a, "/api/fees/types", {"name": "Tuition", "code": "tui"})
    group = create(client_a, "/api/fees/groups", {"name": "Term 1"})
    master = create(client_a, "/api/fees/master", {
        "class_id": school["grade"]["id"],
        "fee_group_id": group["id"],
        "fee_type_id": fee_type["id"],
        "amount": "1000.00",
        "due_date": str(date.today() - timedelta(days=10)),
        "fine_type": "percentage",
        "fine_percentage": 5,
    })
    return {"type": fee_type, "group": group, "master": master}


def test_fee_type_code_is_uppercased(tuition):
    assert tuition["type"]["code"] == "TUI"
    assert tuition["master"]["amount"] == 1000.0
    assert tuition["master"]["class_name"] == "Grade 1"


def test_duplicate_fee_master_is_rejected(client_a, school, tuition):
    response = client_a.post("/api/fees/master", json={
        "class_id": school["grade"]["id"],
        "fee_group_id": tuition["group"]["id"],
        "fee_type_id": tuition["type"]["id"],
        "amount": 50,
    })

    assert response.status_code == 400
    assert response.json()["error"] == "Fee master with this class, fee group and fee type already exists"


def test_fee_type_in_use_cannot_be_deleted(client_a, tuition):
    response = client_a.delete(f"/api/fees/types/{tuition['type']['id']}")

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete fee type. 1 fee master(s) use it."


def test_assign_is_idempotent(client_a, school, tuition):
    enroll(client_a, school, "Ada")
    enroll(client_a, school, "Bob")
    master_id = tuition["master"]["id"]

    first = client_a.post("/api/fees/assign", json={"fee_master_id": master_id}).json()["data"]
    assert first == {"fee_master_id": master_id, "assigned": 2, "already_assigned": 0}

    again = client_a.post("/api/fees/assign", json={"fee_master_id": master_id}).json()["data"]
    assert again["assigned"] == 0
    assert again["already_assigned"] == 2


def _assignment_for(db, student_id):
    import uuid
    from sqlalchemy import select
    from schooldesk.models import StudentFeeAssignment

    return db.execute(
        select(StudentFeeAssignment.id).where(StudentFeeAssignment.student_id == uuid.UUID(student_id))
    ).scalar_one()


def test_collect_and_dues(client_a, school, tuition, db):
    student = enroll(client_a, school, "Ada")
    client_a.post("/api/fees/assign", json={"fee_master_id": tuition["master"]["id"]})
    assignment_id = str(_assignment_for(db, student["id"]))

    payment = create(client_a, "/api/fees/collect", {
        "student_id": student["id"], "assignment_id": assignment_id, "amount": 400, "discount": 100,
    })
    assert payment["payment_mode"] == "Cash"
    assert payment["payment_date"] == str(date.today())

    over = client_a.post("/api/fees/collect", json={
        "student_id": student["id"], "assignment_id": assignment_id, "amount": 600,
    })
    assert over.status_code == 400
    assert over.json()["error"] == "amount: Payment exceeds the remaining balance of 500.00"

    dues = client_a.get("/api/fees/due").json()
    row = dues["data"]["items"][0]
    assert row["assigned"] == 1000.0
    assert row["paid"] == 500.0
    assert row["fine"] == 50.0
    assert row["balance"] == 550.0
    assert dues["data"]["summary"]["students"] == 1
    assert dues["pagination"]["total"] == 1

    listed = client_a.get("/api/fees/collect", params={"student_id": student["id"]}).json()["data"]
    assert len(listed) == 1


def test_only_due_drops_settled_students(client_a, school, tuition, db):
    paid_up = enroll(client_a, school, "Ada")
    enroll(client_a, school, "Bob")
    client_a.post("/api/fees/assign", json={"fee_master_id": tuition["master"]["id"]})

    create(client_a, "/api/fees/collect", {
        "student_id": paid_up["id"], "assignment_id": str(_assignment_for(db, paid_up["id"])), "amount": 1000,
    })

    due = client_a.get("/api/fees/due", params={"only_due": "true"}).json()["data"]["items"]
    assert [row["student_name"] for row in due] == ["Bob"]


def test_payment_for_another_students_assignment_is_rejected(client_a, school, tuition, db):
    ada = enroll(client_a, school, "Ada")
    bob = enroll(client_a, school, "Bob")
    client_a.post("/api/fees/assign", json={"fee_master_id": tuition["master"]["id"]})

    response = client_a.post("/api/fees/collect", json={
        "student_id": bob["id"], "assignment_id": str(_assignment_for(db, ada["id"])), "amount": 10,
    })

    assert response.status_code == 400
    assert response.json()["error"] == "assignment_id: Fee assignment does not belong to the student"


def test_student_with_payments_cannot_be_deleted(client_a, school, tuition, db):
    student = enroll(client_a, school, "Ada")
    client_a.post("/api/fees/assign", json={"fee_master_id": tuition["master"]["id"]})
    create(client_a, "/api/fees/collect", {
        "student_id": student["id"], "assignment_id": str(_assignment_for(db, student["id"])), "amount": 10,
    })

    response = client_a.delete(f"/api/students/{student['id']}")

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete student. 1 fee payment(s) are recorded for it."


def test_dashboard_stats(client_a, school, tuition, db):
    student = enroll(client_a, school, "Ada")
    client_a.post("/api/fees/assign", json={"fee_master_id": tuition["master"]["id"]})
    create(client_a, "/api/fees/collect", {
        "student_id": student["id"], "assignment_id": str(_assignment_for(db, student["id"])), "amount": 300,
    })
    create(client_a, "/api/finance/income", {
        "head": "Donation", "name": "Alumni", "entry_date": str(date.today()), "amount": 250,
    })

    stats = client_a.get("/api/dashboard/stats").json()["data"]

    assert stats["total_students"] == 1
    assert stats["total_classes"] == 1
    assert stats["active_session"] == "2026-27"
    assert stats["fees_collected"] == 300.0
    assert stats["pending_fees"] == 300.0
    assert stats["outstanding_fees"] == 700.0
    assert stats["income_total"] == 250.0


def test_income_date_range_filter(client_a):
    create(client_a, "/api/finance/income", {"head": "Fees", "name": "Jan", "entry_date": "2026-01-15", "amount": 10})
    create(client_a, "/api/finance/income", {"head": "Fees", "name": "Mar", "entry_date": "2026-03-15", "amount": 10})

    found = client_a.get("/api/finance/income", params={"from_date": "2026-02-01"}).json()["data"]
    assert [entry["name"] for entry in found] == ["Mar"]

    reversed_range = client_a.get("/api/finance/income", params={"from_date": "2026-03-01", "to_date": "2026-01-01"})
    assert reversed_range.status_code == 400


def test_fine_collected_is_netted_from_dues(client_a, school, tuition, db):
    student = enroll(client_a, school, "Ada")
    client_a.post("/api/fees/assign", json={"fee_master_id": tuition["master"]["id"]})
    create(client_a, "/api/fees/collect", {
        "student_id": student["id"], "assignment_id": str(_assignment_for(db, student["id"])),
        "amount": 500, "fine": 50,
    })

    row = client_a.get("/api/fees/due").json()["data"]["items"][0]
    assert row["paid"] == 500.0
    assert row["fine"] == 0.0
    assert row["balance"] == 500.0


def test_fee_master_amount_cannot_drop_below_paid(client_a, school, tuition, db):
    student = enroll(client_a, school, "Ada")
    client_a.post("/api/fees/assign", json={"fee_master_id": tuition["master"]["id"]})
    create(client_a, "/api/fees/collect", {
        "student_id": student["id"], "assignment_id": str(_assignment_for(db, student["id"])), "amount": 800,
    })
    master_id = tuition["master"]["id"]

    response = client_a.put(f"/api/fees/master/{master_id}", json={"amount": 100})

    assert response.status_code == 400
    assert response.json()["error"] == "amount: Cannot be less than the 800.00 already paid by a student"
    assert client_a.put(f"/api/fees/master/{master_id}", json={"amount": 800}).status_code == 200


def test_assigned_fee_master_keeps_its_class(client_a, school, tuition):
    enroll(client_a, school, "Ada")
    client_a.post("/api/fees/assign", json={"fee_master_id": tuition["master"]["id"]})
    other = create(client_a, "/api/academics/classes", {"name": "Grade 2"})

    response = client_a.put(f"/api/fees/master/{tuition['master']['id']}", json={"class_id": other["id"]})

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot change the class of a fee master assigned to 1 student(s)"
    fetched = client_a.get(f"/api/fees/master/{tuition['master']['id']}").json()["data"]
    assert fetched["class_name"] == "Grade 1"


def test_unassigned_fee_master_can_change_class(client_a, school, tuition):
    other = create(client_a, "/api/academics/classes", {"name": "Grade 2"})

    response = client_a.put(f"/api/fees/master/{tuition['master']['id']}", json={"class_id": other["id"], "amount": 10})

    assert response.status_code == 200
    assert response.json()["data"]["class_name"] == "Grade 2"
