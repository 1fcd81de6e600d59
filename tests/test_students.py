from __future__ import annotations

import pytest

from app import create_app
from extensions import db
from models import Group, Parent, Student, User


@pytest.fixture()
def setup():
    app = create_app("test")
    with app.app_context():
        db.create_all()
        admin = User(name="Admin", email="admin@example.com", role="admin")
        admin.set_password("adminpass")
        teacher = User(name="Teacher", email="teacher@example.com", role="teacher")
        teacher.set_password("teachpass")
        beginners = Group(name="Beginners")
        advanced = Group(name="Advanced")
        beginners.teachers.append(teacher)
        smith = Parent(first_name="Anna", last_name="Smith")
        tamm = Parent(first_name="Mari", last_name="Tamm")
        db.session.add_all([admin, teacher, beginners, advanced, smith, tamm])
        db.session.flush()
        bob = Student(first_name="Bob", last_name="Smith", age=8, group=beginners, parent=smith)
        anna = Student(first_name="Anna", last_name="Smith", age=6, group=beginners, parent=smith)
        liis = Student(first_name="Liis", last_name="Tamm", age=12, group=advanced, parent=tamm)
        db.session.add_all([bob, anna, liis])
        db.session.commit()
        ids = {"admin": admin.id, "beginners": beginners.id, "advanced": advanced.id,
               "smith": smith.id, "tamm": tamm.id, "bob": bob.id, "anna": anna.id, "liis": liis.id}
    yield app, ids
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app(setup):
    return setup[0]


@pytest.fixture()
def ids(setup):
    return setup[1]


def login(app, email, password):
    client = app.test_client()
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.get_json()
    return client


@pytest.fixture()
def admin(app):
    return login(app, "admin@example.com", "adminpass")


@pytest.fixture()
def teacher(app):
    return login(app, "teacher@example.com", "teachpass")


def names(resp):
    return [f"{s['firstName']} {s['lastName']}" for s in resp.get_json()["data"]]


def test_admin_list_sorted_by_last_then_first(admin):
    r = admin.get("/api/students")
    assert r.status_code == 200
    assert names(r) == ["Anna Smith", "Bob Smith", "Liis Tamm"]


def test_teacher_list_is_scoped(teacher, ids):
    assert names(teacher.get("/api/students")) == ["Anna Smith", "Bob Smith"]
    assert teacher.get(f"/api/students?group={ids['advanced']}").status_code == 403
    assert teacher.get(f"/api/students/{ids['liis']}").status_code == 403
    assert teacher.get(f"/api/students/{ids['bob']}").status_code == 200


def test_search_is_case_insensitive_on_both_names(admin):
    assert names(admin.get("/api/students?search=SMI")) == ["Anna Smith", "Bob Smith"]
    assert names(admin.get("/api/students?search=lii")) == ["Liis Tamm"]
    # спецсимволы LIKE ищутся буквально
    assert names(admin.get("/api/students?search=%25")) == []


def test_get_student_shape(admin, ids):
    data = admin.get(f"/api/students/{ids['bob']}").get_json()["data"]
    assert data["firstName"] == "Bob"
    assert data["groupId"] == ids["beginners"]
    assert data["group"]["name"] == "Beginners"
    assert data["parent"]["id"] == ids["smith"]
    assert admin.get("/api/students/9999").status_code == 404


def test_create_student_with_missing_group_creates_nothing(app, admin, ids):
    r = admin.post("/api/students", json={"firstName": "Karl", "lastName": "Tamm",
                                          "groupId": 9999, "parentId": ids["tamm"]})
    assert r.status_code == 404
    assert r.get_json() == {"success": False, "message": "Group not found"}

    r = admin.post("/api/students", json={"firstName": "Karl", "lastName": "Tamm",
                                          "groupId": ids["beginners"], "parentId": 9999})
    assert r.status_code == 404
    assert r.get_json()["message"] == "Parent not found"

    with app.app_context():
        assert db.session.query(Student).count() == 3


def test_create_student_validation(admin, ids):
    r = admin.post("/api/students", json={"firstName": "Karl", "groupId": ids["beginners"],
                                          "parentId": ids["tamm"], "age": -1})
    assert r.status_code == 400
    fields = {e["loc"][0] for e in r.get_json()["errors"]}
    assert {"lastName", "age"} <= fields


def test_teacher_cannot_mutate_students(teacher, ids):
    r = teacher.post("/api/students", json={"firstName": "Karl", "lastName": "Tamm",
                                            "groupId": ids["beginners"], "parentId": ids["tamm"]})
    assert r.status_code == 403
    assert teacher.put(f"/api/students/{ids['bob']}", json={"age": 9}).status_code == 403
    assert teacher.delete(f"/api/students/{ids['bob']}").status_code == 403


def test_enrollment_flow_links_group_and_parent(admin):
    g = admin.post("/api/groups", json={"name": "Beginners"}).get_json()["data"]
    p = admin.post("/api/parents", json={"firstName": "A.", "lastName": "Smith"}).get_json()["data"]
    r = admin.post("/api/students", json={"firstName": "Bob", "lastName": "Smith",
                                          "groupId": g["id"], "parentId": p["id"]})
    assert r.status_code == 201
    sid = r.get_json()["data"]["id"]

    group = admin.get(f"/api/groups/{g['id']}").get_json()["data"]
    assert group["studentIds"] == [sid]
    assert group["students"][0]["firstName"] == "Bob"
    parent = admin.get(f"/api/parents/{p['id']}").get_json()["data"]
    assert parent["studentIds"] == [sid]


def test_move_student_between_groups_and_parents(admin, ids):
    r = admin.put(f"/api/students/{ids['bob']}",
                  json={"groupId": ids["advanced"], "parentId": ids["tamm"], "age": 9})
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert (data["groupId"], data["parentId"], data["age"]) == (ids["advanced"], ids["tamm"], 9)

    beginners = admin.get(f"/api/groups/{ids['beginners']}").get_json()["data"]
    advanced = admin.get(f"/api/groups/{ids['advanced']}").get_json()["data"]
    assert ids["bob"] not in beginners["studentIds"]
    assert ids["bob"] in advanced["studentIds"]
    assert admin.get(f"/api/parents/{ids['smith']}").get_json()["data"]["studentIds"] == [ids["anna"]]


def test_update_student_with_missing_refs(admin, ids):
    assert admin.put(f"/api/students/{ids['bob']}", json={"groupId": 9999}).status_code == 404
    assert admin.put(f"/api/students/{ids['bob']}", json={"parentId": 9999}).status_code == 404
    assert admin.put(f"/api/students/{ids['bob']}", json={"groupId": None}).status_code == 400
    assert admin.put("/api/students/9999", json={"age": 3}).status_code == 404
    data = admin.get(f"/api/students/{ids['bob']}").get_json()["data"]
    assert data["groupId"] == ids["beginners"]


def test_delete_student_prunes_back_references(app, admin, ids):
    r = admin.delete(f"/api/students/{ids['bob']}")
    assert r.status_code == 200
    assert r.get_json()["message"] == "Student deleted successfully"

    group = admin.get(f"/api/groups/{ids['beginners']}").get_json()["data"]
    assert group["studentIds"] == [ids["anna"]]
    parent = admin.get(f"/api/parents/{ids['smith']}").get_json()["data"]
    assert parent["studentIds"] == [ids["anna"]]
    with app.app_context():
        assert db.session.get(Student, ids["bob"]) is None
    assert admin.delete(f"/api/students/{ids['bob']}").status_code == 404
