# tests/test_academic_records.py - Categories, houses, exams, attendance, homework, front office and events
from datetime import date, timedelta

import pytest

from tests.conftest import create, login
from tests.test_students_fees import enroll, school  # noqa: F401

TODAY = date.today()


@pytest.fixture
def subjects(client_a):
    return {
        "math": create(client_a, "/api/academics/subjects", {"name": "Mathematics", "code": "math"}),
        "english": create(client_a, "/api/academics/subjects", {"name": "English"}),
    }


def _user_with(client, name, slugs):
    permissions = client.get("/api/permissions").json()["data"]
    wanted = [p["id"] for p in permissions if p["slug"] in slugs]
    role = create(client, "/api/roles", {"name": name, "permission_ids": wanted})
    username = name.lower().replace(" ", "_")
    create(client, "/api/users", {"username": username, "password": "pass1234", "role_id": role["id"]})
    return login(username, "pass1234")


# ------------------------------------------------------------------ categories and houses

def test_category_and_house_are_shown_on_the_student(client_a, school):
    category = create(client_a, "/api/students/categories", {"name": "General"})
    house = create(client_a, "/api/students/houses", {"name": "Red", "description": "Mars"})

    student = enroll(client_a, school, "Ada", category_id=category["id"], house_id=house["id"])
    enroll(client_a, school, "Bob")

    assert student["category_name"] == "General"
    assert student["house_name"] == "Red"
    assert house["is_active"] is True

    in_house = client_a.get("/api/students", params={"house_id": house["id"]}).json()["data"]
    assert [s["first_name"] for s in in_house] == ["Ada"]
    assert client_a.get(f"/api/students/categories/{category['id']}").json()["data"]["student_count"] == 1


def test_category_in_use_cannot_be_deleted(client_a, school):
    category = create(client_a, "/api/students/categories", {"name": "General"})
    enroll(client_a, school, "Ada", category_id=category["id"])

    response = client_a.delete(f"/api/students/categories/{category['id']}")

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete category. 1 student(s) belong to it."


def test_house_names_are_unique_per_school(client_a):
    create(client_a, "/api/students/houses", {"name": "Blue"})

    response = client_a.post("/api/students/houses", json={"name": "Blue"})

    assert response.status_code == 400
    assert response.json()["error"] == "House with this name already exists"


def test_unknown_category_is_rejected(client_a, client_b):
    foreign = create(client_b, "/api/students/categories", {"name": "General"})

    response = client_a.post("/api/students", json={"first_name": "Ada", "category_id": foreign["id"]})

    assert response.status_code == 400
    assert response.json()["error"] == "Category not found"


# ------------------------------------------------------------------ exams

def _midterm(client, subjects):
    return create(client, "/api/exams", {
        "name": "Midterm",
        "subjects": [
            {
                "subject_id": subjects["math"]["id"], "exam_date": str(TODAY), "start_time": "09:00",
                "end_time": "11:00", "max_marks": 50, "min_marks": 20,
            },
            {"subject_id": subjects["english"]["id"]},
        ],
    })


def _paper(exam, subject):
    return next(paper for paper in exam["subjects"] if paper["subject_id"] == subject["id"])


def test_exam_is_created_with_its_subjects(client_a, school, subjects):
    group = create(client_a, "/api/exams/groups", {"name": "Term 1"})
    exam = create(client_a, "/api/exams", {
        "name": "Unit Test", "exam_group_id": group["id"], "subjects": [{"subject_id": subjects["math"]["id"]}],
    })

    assert exam["session_name"] == "2026-27"
    assert exam["exam_group_name"] == "Term 1"
    assert exam["subjects"][0]["subject_name"] == "Mathematics"
    assert exam["subjects"][0]["max_marks"] == 100.0
    assert exam["subjects"][0]["min_marks"] == 33.0
    assert client_a.get(f"/api/exams/groups/{group['id']}").json()["data"]["exam_count"] == 1

    duplicate = client_a.post("/api/exams", json={"name": "Unit Test"})
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "Exam with this name already exists"


def test_exam_needs_a_session(client_a):
    response = client_a.post("/api/exams", json={"name": "Midterm"})

    assert response.status_code == 400
    assert response.json()["error"] == "session_id: No active session. Create or activate a session first"


def test_exam_subjects_must_be_distinct(client_a, school, subjects):
    math = subjects["math"]["id"]

    repeated = client_a.post("/api/exams", json={"name": "Midterm", "subjects": [{"subject_id": math}, {"subject_id": math}]})
    assert repeated.status_code == 400
    assert repeated.json()["error"] == "subjects: Each subject can appear only once"

    inverted = client_a.post("/api/exams", json={
        "name": "Midterm", "subjects": [{"subject_id": math, "max_marks": 20, "min_marks": 40}],
    })
    assert inverted.status_code == 400


def test_results_are_saved_and_overwritten(client_a, school, subjects):
    ada = enroll(client_a, school, "Ada")
    bob = enroll(client_a, school, "Bob")
    exam = _midterm(client_a, subjects)
    paper = _paper(exam, subjects["math"])

    response = client_a.post("/api/exams/results", json={
        "exam_subject_id": paper["id"],
        "results": [
            {"student_id": ada["id"], "marks_obtained": 45},
            {"student_id": bob["id"], "marks_obtained": 10, "is_absent": True},
        ],
    })
    assert response.status_code == 200
    assert response.json()["message"] == "2 result(s) saved"
    saved = {row["student_name"]: row for row in response.json()["data"]}
    assert saved["Ada"]["marks_obtained"] == 45.0
    assert saved["Ada"]["passed"] is True
    assert saved["Bob"]["marks_obtained"] is None
    assert saved["Bob"]["passed"] is False

    client_a.post("/api/exams/results", json={
        "exam_subject_id": paper["id"], "results": [{"student_id": ada["id"], "marks_obtained": 15}],
    })
    listed = client_a.get("/api/exams/results", params={"exam_id": exam["id"]}).json()
    assert listed["pagination"]["total"] == 2
    ada_row = next(row for row in listed["data"] if row["student_id"] == ada["id"])
    assert ada_row["marks_obtained"] == 15.0
    assert ada_row["passed"] is False
    assert client_a.get(f"/api/exams/{exam['id']}").json()["data"]["result_count"] == 2


def test_marks_above_the_maximum_are_rejected(client_a, school, subjects):
    ada = enroll(client_a, school, "Ada")
    paper = _paper(_midterm(client_a, subjects), subjects["math"])

    response = client_a.post("/api/exams/results", json={
        "exam_subject_id": paper["id"], "results": [{"student_id": ada["id"], "marks_obtained": 51}],
    })

    assert response.status_code == 400
    assert response.json()["error"].startswith("marks_obtained: Cannot exceed the maximum of 50")


def test_papers_with_results_are_protected(client_a, school, subjects):
    ada = enroll(client_a, school, "Ada")
    exam = _midterm(client_a, subjects)
    paper = _paper(exam, subjects["math"])
    client_a.post("/api/exams/results", json={
        "exam_subject_id": paper["id"], "results": [{"student_id": ada["id"], "marks_obtained": 30}],
    })

    dropped = client_a.put(f"/api/exams/{exam['id']}", json={"subjects": [{"subject_id": subjects["english"]["id"]}]})
    assert dropped.status_code == 400
    assert dropped.json()["error"] == "Cannot remove subjects from exam. 1 result(s) are recorded for them."

    lowered = client_a.put(f"/api/exams/{exam['id']}", json={
        "subjects": [{"subject_id": subjects["math"]["id"], "max_marks": 25, "min_marks": 10}],
    })
    assert lowered.status_code == 400
    assert lowered.json()["error"].startswith("max_marks: Cannot be less than the 30")

    deleted = client_a.delete(f"/api/exams/{exam['id']}")
    assert deleted.status_code == 400
    assert deleted.json()["error"] == "Cannot delete exam. 1 result(s) are recorded for it."

    used = client_a.delete(f"/api/academics/subjects/{subjects['math']['id']}")
    assert used.status_code == 400
    assert used.json()["error"] == "Cannot delete subject. 1 exam paper(s) use it."


def test_exam_timetable_is_replaced_on_update(client_a, school, subjects):
    exam = _midterm(client_a, subjects)

    updated = client_a.put(f"/api/exams/{exam['id']}", json={
        "subjects": [{"subject_id": subjects["math"]["id"], "max_marks": 80, "room_no": "12"}],
    }).json()["data"]

    assert len(updated["subjects"]) == 1
    assert updated["subjects"][0]["max_marks"] == 80.0
    assert updated["subjects"][0]["room_no"] == "12"
    assert updated["subjects"][0]["id"] == _paper(exam, subjects["math"])["id"]


# ------------------------------------------------------------------ attendance

def _register_params(school, on=TODAY):
    return {"date": str(on), "class_id": school["grade"]["id"], "section_id": school["section_a"]["id"]}


def _mark(client, school, marks, on=TODAY):
    params = _register_params(school, on)
    return client.post("/api/attendance/students", json={
        "date": params["date"], "class_id": params["class_id"], "section_id": params["section_id"],
        "attendances": marks,
    })


def test_student_register_lists_the_class_section(client_a, school):
    enroll(client_a, school, "Ada")
    enroll(client_a, school, "Bob")

    register = client_a.get("/api/attendance/students", params=_register_params(school)).json()["data"]

    assert [row["full_name"] for row in register["students"]] == ["Ada", "Bob"]
    assert all(row["status"] is None for row in register["students"])
    assert register["summary"]["total"] == 2
    assert register["summary"]["marked"] == 0


def test_student_attendance_is_saved_and_overwritten(client_a, school):
    ada = enroll(client_a, school, "Ada")
    bob = enroll(client_a, school, "Bob")

    first = _mark(client_a, school, [
        {"student_id": ada["id"], "status": "present"},
        {"student_id": bob["id"], "status": "absent", "remark": "Sick"},
    ])
    assert first.status_code == 200
    assert first.json()["message"] == "Attendance saved successfully"
    summary = first.json()["data"]["summary"]
    assert (summary["present"], summary["absent"], summary["marked"]) == (1, 1, 2)

    again = _mark(client_a, school, [{"student_id": bob["id"], "status": "late"}]).json()["data"]
    statuses = {row["full_name"]: row["status"] for row in again["students"]}
    assert statuses == {"Ada": "present", "Bob": "late"}
    assert again["summary"]["marked"] == 2
    assert again["summary"]["absent"] == 0


def test_attendance_cannot_be_marked_ahead(client_a, school):
    ada = enroll(client_a, school, "Ada")

    response = _mark(client_a, school, [{"student_id": ada["id"], "status": "present"}], on=TODAY + timedelta(days=1))

    assert response.status_code == 400
    assert response.json()["error"] == "date: Attendance cannot be marked for a future date"


def test_only_enrolled_students_can_be_marked(client_a, school):
    enroll(client_a, school, "Ada")
    outsider = create(client_a, "/api/students", {"first_name": "Zed"})

    response = _mark(client_a, school, [{"student_id": outsider["id"], "status": "present"}])

    assert response.status_code == 400
    assert response.json()["error"] == (
        "attendances: One or more students are not enrolled in the selected class and section"
    )


def test_changing_marked_attendance_needs_edit_permission(client_a, school):
    ada = enroll(client_a, school, "Ada")
    clerk = _user_with(client_a, "Register Clerk", {"attendance.view", "attendance.create"})
    yesterday = TODAY - timedelta(days=1)

    assert _mark(clerk, school, [{"student_id": ada["id"], "status": "present"}], on=yesterday).status_code == 200

    response = _mark(clerk, school, [{"student_id": ada["id"], "status": "absent"}], on=yesterday)
    assert response.status_code == 403
    assert response.json()["error"] == "Missing permission: attendance.edit"

    cleared = clerk.delete("/api/attendance/students", params=_register_params(school, yesterday))
    assert cleared.status_code == 403
    assert cleared.json()["error"] == "Missing permission: attendance.delete"


def test_clearing_a_day_removes_its_marks(client_a, school):
    ada = enroll(client_a, school, "Ada")
    _mark(client_a, school, [{"student_id": ada["id"], "status": "present"}])

    cleared = client_a.delete("/api/attendance/students", params=_register_params(school))
    assert cleared.status_code == 200
    assert cleared.json()["data"]["deleted"] == 1

    register = client_a.get("/api/attendance/students", params=_register_params(school)).json()["data"]
    assert register["students"][0]["status"] is None


def test_staff_attendance(client_a):
    jane = create(client_a, "/api/staff", {"first_name": "Jane", "employee_id": "E1"})
    create(client_a, "/api/staff", {"first_name": "Raj", "employee_id": "E2"})

    saved = client_a.post("/api/attendance/staff", json={
        "date": str(TODAY),
        "attendances": [{"staff_id": jane["id"], "status": "present", "check_in": "09:00", "check_out": "17:30"}],
    })
    assert saved.status_code == 200
    assert saved.json()["data"]["saved"] == 1
    assert saved.json()["data"]["summary"]["present"] == 1

    register = client_a.get("/api/attendance/staff", params={"date": str(TODAY)}).json()["data"]
    rows = {row["employee_id"]: row for row in register["staff"]}
    assert rows["E1"]["check_in"] == "09:00"
    assert rows["E2"]["status"] is None
    assert register["summary"]["total"] == 2

    backwards = client_a.post("/api/attendance/staff", json={
        "date": str(TODAY),
        "attendances": [{"staff_id": jane["id"], "status": "present", "check_in": "17:00", "check_out": "09:00"}],
    })
    assert backwards.status_code == 400

    cleared = client_a.delete("/api/attendance/staff", params={"date": str(TODAY)}).json()["data"]
    assert cleared["deleted"] == 1


def test_unknown_staff_cannot_be_marked(client_a, client_b):
    foreign = create(client_b, "/api/staff", {"first_name": "Eve", "employee_id": "E9"})

    response = client_a.post("/api/attendance/staff", json={
        "date": str(TODAY), "attendances": [{"staff_id": foreign["id"], "status": "present"}],
    })

    assert response.status_code == 400
    assert response.json()["error"] == "attendances: One or more staff members were not found"


# ------------------------------------------------------------------ homework

@pytest.fixture
def fractions(client_a, school, subjects):
    return create(client_a, "/api/homework", {
        "class_id": school["grade"]["id"],
        "section_id": school["section_a"]["id"],
        "subject_id": subjects["math"]["id"],
        "title": "Fractions",
        "submission_date": str(TODAY + timedelta(days=3)),
        "max_marks": 10,
    })


def test_homework_defaults_and_dates(client_a, school, subjects, fractions):
    assert fractions["homework_date"] == str(TODAY)
    assert fractions["class_name"] == "Grade 1"
    assert fractions["subject_name"] == "Mathematics"

    backwards = client_a.post("/api/homework", json={
        "class_id": school["grade"]["id"], "section_id": school["section_a"]["id"],
        "subject_id": subjects["math"]["id"], "title": "Decimals",
        "submission_date": str(TODAY - timedelta(days=1)),
    })
    assert backwards.status_code == 400
    assert backwards.json()["error"] == "submission_date: Cannot be before the homework date"

    unlinked = client_a.post("/api/homework", json={
        "class_id": school["grade"]["id"], "section_id": school["section_b"]["id"],
        "subject_id": subjects["math"]["id"], "title": "Decimals", "submission_date": str(TODAY),
    })
    assert unlinked.status_code == 400
    assert unlinked.json()["error"] == "section_id: Section is not assigned to the selected class"


def test_submission_and_evaluation(client_a, school, fractions):
    ada = enroll(client_a, school, "Ada")
    payload = {"homework_id": fractions["id"], "student_id": ada["id"], "message": "Done"}

    first = client_a.post("/api/homework/submissions", json=payload)
    assert first.status_code == 201
    assert first.json()["message"] == "Homework submitted"
    assert first.json()["data"]["status"] == "pending"
    assert first.json()["data"]["is_late"] is False

    resubmitted = client_a.post("/api/homework/submissions", json={**payload, "message": "Fixed"})
    assert resubmitted.status_code == 200
    assert resubmitted.json()["message"] == "Submission updated"
    submission_id = resubmitted.json()["data"]["id"]
    assert submission_id == first.json()["data"]["id"]

    too_high = client_a.post(f"/api/homework/submissions/{submission_id}/evaluate", json={"status": "accepted", "marks": 12})
    assert too_high.status_code == 400
    assert too_high.json()["error"].startswith("marks: Cannot exceed the maximum of 10")

    accepted = client_a.post(f"/api/homework/submissions/{submission_id}/evaluate", json={"status": "accepted", "marks": 8})
    assert accepted.json()["message"] == "Submission accepted"
    assert accepted.json()["data"]["marks"] == 8.0

    locked = client_a.post("/api/homework/submissions", json=payload)
    assert locked.status_code == 400
    assert locked.json()["error"] == "Submission has already been accepted"

    assert client_a.get(f"/api/homework/{fractions['id']}").json()["data"]["submission_count"] == 1
    deleted = client_a.delete(f"/api/homework/{fractions['id']}")
    assert deleted.status_code == 400
    assert deleted.json()["error"] == "Cannot delete homework. 1 submission(s) are recorded for it."


def test_only_the_class_can_submit(client_a, fractions):
    outsider = create(client_a, "/api/students", {"first_name": "Zed"})

    response = client_a.post("/api/homework/submissions", json={"homework_id": fractions["id"], "student_id": outsider["id"]})

    assert response.status_code == 400
    assert response.json()["error"] == "student_id: Student is not in the class and section this homework was set for"


# ------------------------------------------------------------------ front office

def test_postal_reference_numbers_follow_direction(client_a):
    first_in = create(client_a, "/api/front-office/postal", {"postal_type": "receive", "from_title": "Board"})
    second_in = create(client_a, "/api/front-office/postal", {"postal_type": "receive"})
    first_out = create(client_a, "/api/front-office/postal", {"postal_type": "dispatch", "to_title": "Council"})

    assert [first_in["reference_no"], second_in["reference_no"], first_out["reference_no"]] == [
        "IN-00001", "IN-00002", "OUT-00001",
    ]
    assert first_out["postal_date"] == str(TODAY)


def test_enquiry_follow_up_and_staff(client_a):
    jane = create(client_a, "/api/staff", {"first_name": "Jane", "employee_id": "E1"})

    enquiry = create(client_a, "/api/front-office/enquiries", {
        "name": "Mrs Rao", "phone": "555-0101", "class_interested": "Grade 1", "assigned_staff_id": jane["id"],
    })
    assert enquiry["enquiry_date"] == str(TODAY)
    assert enquiry["status"] == "active"
    assert enquiry["assigned_staff_name"] == "Jane"

    early = client_a.put(f"/api/front-office/enquiries/{enquiry['id']}", json={
        "follow_up_date": str(TODAY - timedelta(days=1)),
    })
    assert early.status_code == 400
    assert early.json()["error"] == "follow_up_date: Cannot be before the enquiry date"

    won = client_a.put(f"/api/front-office/enquiries/{enquiry['id']}", json={"status": "won"}).json()["data"]
    assert won["status"] == "won"
    assert client_a.get("/api/front-office/enquiries", params={"status": "active"}).json()["data"] == []


def test_complaints_and_phone_calls(client_a):
    complaint = create(client_a, "/api/front-office/complaints", {"name": "Mr Lee", "description": "Bus was late"})
    assert complaint["complaint_type"] == "General"
    assert complaint["status"] == "pending"
    assert complaint["complaint_date"] == str(TODAY)

    resolved = client_a.put(f"/api/front-office/complaints/{complaint['id']}", json={
        "status": "resolved", "action_taken": "Spoke to driver",
    }).json()["data"]
    assert resolved["status"] == "resolved"

    call = create(client_a, "/api/front-office/phone-calls", {"name": "Mr Lee", "phone": "555-0102"})
    assert call["call_type"] == "incoming"
    assert call["call_date"] == str(TODAY)


# ------------------------------------------------------------------ events and notices

def test_event_dates(client_a):
    event = create(client_a, "/api/events", {"title": "Sports Day", "start_date": "2026-11-05"})
    assert event["end_date"] == "2026-11-05"
    assert event["event_for"] == "all"

    backwards = client_a.post("/api/events", json={"title": "Fair", "start_date": "2026-11-05", "end_date": "2026-11-04"})
    assert backwards.status_code == 400
    assert backwards.json()["error"] == "end_date: Cannot be before the start date"

    moved = client_a.put(f"/api/events/{event['id']}", json={"start_date": "2026-11-06"})
    assert moved.status_code == 400


def test_notices_wait_for_their_publish_date(client_a):
    create(client_a, "/api/events/notices", {"title": "Holiday", "description": "School closed"})
    create(client_a, "/api/events/notices", {
        "title": "Exams", "description": "Timetable", "publish_on": str(TODAY + timedelta(days=2)),
    })

    published = client_a.get("/api/events/notices", params={"published": "true"}).json()["data"]
    pending = client_a.get("/api/events/notices", params={"published": "false"}).json()["data"]

    assert [notice["title"] for notice in published] == ["Holiday"]
    assert [notice["title"] for notice in pending] == ["Exams"]
    assert published[0]["notice_date"] == str(TODAY)
