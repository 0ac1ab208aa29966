# tests/test_operations.py - Library, inventory, front office, roles, hostel, transport and settings
from datetime import date, timedelta

from tests.conftest import create


def test_health(anonymous):
    body = anonymous.get("/health").json()

    assert body["status"] == "healthy"
    assert body["database"]["status"] == "healthy"


def test_book_issue_and_return(client_a):
    book = create(client_a, "/api/library/books", {"title": "Dune", "book_no": "B-1", "quantity": 1})
    staff = create(client_a, "/api/staff", {"first_name": "Jane", "employee_id": "E1", "email": "jane@alpha-academy.org"})
    member = create(client_a, "/api/library/members", {
        "member_type": "staff", "library_card_no": "C-1", "staff_id": staff["id"],
    })

    issue = create(client_a, "/api/library/issues", {"book_id": book["id"], "member_id": member["id"]})
    assert issue["status"] == "issued"
    assert issue["due_date"] == str(date.today() + timedelta(days=14))
    assert client_a.get(f"/api/library/books/{book['id']}").json()["data"]["available"] == 0

    second = client_a.post("/api/library/issues", json={"book_id": book["id"], "member_id": member["id"]})
    assert second.status_code == 400
    assert second.json()["error"] == "book_id: No copies of this book are available"

    shrink = client_a.put(f"/api/library/books/{book['id']}", json={"quantity": 0})
    assert shrink.status_code == 400

    returned = client_a.post(f"/api/library/issues/{issue['id']}/return")
    assert returned.json()["data"]["status"] == "returned"
    assert client_a.get(f"/api/library/books/{book['id']}").json()["data"]["available"] == 1

    again = client_a.post(f"/api/library/issues/{issue['id']}/return")
    assert again.status_code == 400
    assert again.json()["error"] == "Book has already been returned"


def test_due_date_before_today_is_rejected_without_issue_date(client_a):
    book = create(client_a, "/api/library/books", {"title": "Ivanhoe", "book_no": "B-9", "quantity": 1})
    student = create(client_a, "/api/students", {"first_name": "Ada"})
    member = create(client_a, "/api/library/members", {
        "member_type": "student", "library_card_no": "C-9", "student_id": student["id"],
    })

    response = client_a.post("/api/library/issues", json={
        "book_id": book["id"], "member_id": member["id"], "due_date": str(date.today() - timedelta(days=1)),
    })

    assert response.status_code == 400
    assert response.json()["error"] == "due_date: Due date cannot be before the issue date"
    assert client_a.get(f"/api/library/books/{book['id']}").json()["data"]["available"] == 1


def test_quantity_cannot_drop_below_copies_on_loan(client_a):
    book = create(client_a, "/api/library/books", {"title": "Emma", "book_no": "B-2", "quantity": 3})
    student = create(client_a, "/api/students", {"first_name": "Ada"})
    member = create(client_a, "/api/library/members", {
        "member_type": "student", "library_card_no": "C-2", "student_id": student["id"],
    })
    create(client_a, "/api/library/issues", {"book_id": book["id"], "member_id": member["id"]})
    create(client_a, "/api/library/issues", {"book_id": book["id"], "member_id": member["id"]})

    response = client_a.put(f"/api/library/books/{book['id']}", json={"quantity": 1})
    assert response.status_code == 400
    assert response.json()["error"] == "Cannot reduce quantity below the 2 copies on loan"

    grown = client_a.put(f"/api/library/books/{book['id']}", json={"quantity": 5}).json()["data"]
    assert grown["available"] == 3


def test_member_needs_matching_person(client_a):
    response = client_a.post("/api/library/members", json={"member_type": "student", "library_card_no": "C-9"})

    assert response.status_code == 400
    assert response.json()["error"] == "A student member needs student_id and no staff_id"


def test_item_issue_keeps_stock_consistent(client_a):
    store = create(client_a, "/api/inventory/stores", {"name": "Main", "code": "main"})
    item = create(client_a, "/api/inventory/items", {"name": "Chalk", "quantity": 5, "store_id": store["id"]})

    too_many = client_a.post("/api/inventory/issues", json={"item_id": item["id"], "issue_to": "Lab", "quantity": 6})
    assert too_many.status_code == 400
    assert too_many.json()["error"] == "quantity: Only 5 unit(s) of Chalk in stock"
    assert client_a.get("/api/inventory/issues").json()["data"] == []

    issue = create(client_a, "/api/inventory/issues", {"item_id": item["id"], "issue_to": "Lab", "quantity": 2})
    assert issue["issue_date"] == str(date.today())
    assert client_a.get(f"/api/inventory/items/{item['id']}").json()["data"]["quantity"] == 3

    client_a.post(f"/api/inventory/issues/{issue['id']}/return")
    assert client_a.get(f"/api/inventory/items/{item['id']}").json()["data"]["quantity"] == 5

    again = client_a.post(f"/api/inventory/issues/{issue['id']}/return")
    assert again.status_code == 400
    assert again.json()["error"] == "Item has already been returned"

    blocked = client_a.delete(f"/api/inventory/stores/{store['id']}")
    assert blocked.json()["error"] == "Cannot delete store. 1 item(s) are kept in it."


def test_visitor_checkout_once(client_a):
    visitor = create(client_a, "/api/front-office/visitors", {"name": "Sam", "purpose": "Admission enquiry"})
    assert visitor["checked_out"] is False

    done = client_a.post(f"/api/front-office/visitors/{visitor['id']}/checkout").json()["data"]
    assert done["checked_out"] is True

    again = client_a.post(f"/api/front-office/visitors/{visitor['id']}/checkout")
    assert again.status_code == 400
    assert again.json()["error"] == "Visitor has already checked out"


def _system_role(client, name):
    roles = client.get("/api/roles", params={"search": name, "limit": 100}).json()["data"]
    return next(role for role in roles if role["name"] == name)


def test_system_roles_are_read_only(client_a):
    admin = _system_role(client_a, "Admin")
    assert admin["is_system"] is True

    update = client_a.put(f"/api/roles/{admin['id']}", json={"description": "changed"})
    assert update.status_code == 400
    assert update.json()["error"] == "Cannot modify system role"

    delete = client_a.delete(f"/api/roles/{admin['id']}")
    assert delete.status_code == 400
    assert delete.json()["error"] == "Cannot delete system role"


def test_custom_role_gets_permissions(client_a):
    permissions = client_a.get("/api/permissions").json()["data"]
    wanted = [p["id"] for p in permissions if p["module"] == "library"]

    role = create(client_a, "/api/roles", {"name": "Library Aide", "permission_ids": wanted})

    assert role["slug"] == "library-aide"
    assert role["is_system"] is False
    assert sorted(role["permission_ids"]) == sorted(wanted)
    assert client_a.delete(f"/api/roles/{role['id']}").status_code == 200


def test_admin_cannot_delete_own_account(client_a):
    me = client_a.get("/api/auth/me").json()["data"]

    response = client_a.delete(f"/api/users/{me['id']}")

    assert response.status_code == 400
    assert response.json()["error"] == "You cannot delete your own account"


def test_room_with_students_cannot_be_deleted(client_a):
    hostel = create(client_a, "/api/hostel/hostels", {"name": "West"})
    room = create(client_a, "/api/hostel/rooms", {"hostel_id": hostel["id"], "room_no": "7", "beds": 2})
    student = create(client_a, "/api/students", {"first_name": "Ada", "hostel_room_id": room["id"]})

    blocked = client_a.delete(f"/api/hostel/rooms/{room['id']}")
    assert blocked.status_code == 400
    assert blocked.json()["error"] == "Cannot delete room. 1 student(s) are staying in it."

    duplicate = client_a.post("/api/hostel/rooms", json={"hostel_id": hostel["id"], "room_no": "7"})
    assert duplicate.json()["error"] == "Room with this room number already exists"

    client_a.put(f"/api/students/{student['id']}", json={"hostel_room_id": None})
    assert client_a.delete(f"/api/hostel/rooms/{room['id']}").status_code == 200


def test_route_with_pickup_points_cannot_be_deleted(client_a):
    route = create(client_a, "/api/transport/routes", {"title": "North", "fare": 20})
    create(client_a, "/api/transport/pickup-points", {"route_id": route["id"], "name": "Market", "pickup_time": "07:15"})

    bad_time = client_a.post("/api/transport/pickup-points", json={
        "route_id": route["id"], "name": "Depot", "pickup_time": "7:75",
    })
    assert bad_time.status_code == 400

    listed = client_a.get(f"/api/transport/routes/{route['id']}").json()["data"]
    assert listed["pickup_point_count"] == 1

    response = client_a.delete(f"/api/transport/routes/{route['id']}")
    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete route. 1 pickup point(s) are on it."


def test_school_settings(client_a, client_b):
    school = client_a.get("/api/settings/school").json()["data"]
    assert school["code"] == "ALPHA"

    updated = client_a.put("/api/settings/school", json={
        "name": "Alpha Academy East", "currency_code": "eur", "code": "HACKED",
    }).json()["data"]
    assert updated["name"] == "Alpha Academy East"
    assert updated["currency_code"] == "EUR"
    assert updated["code"] == "ALPHA"

    bad_zone = client_a.put("/api/settings/school", json={"timezone": "Mars/Olympus"})
    assert bad_zone.status_code == 400

    assert client_b.get("/api/settings/school").json()["data"]["name"] == "Beta High"
