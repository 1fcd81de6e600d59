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
        smith = Parent(first_name="Anna", last_name="Smith", email="anna@example.com")
        tamm = Parent(first_name="Mari", last_name="Tamm")
        lonely = Parent(first_name="Jaan", last_name="Kask")
        db.session.add_all([admin, teacher, beginners, advanced, smith, tamm, lonely])
        db.session.flush()
        bob = Student(first_name="Bob", last_name="Smith", group=beginners, parent=smith)
        karl = Student(first_name="Karl", last_name="Tamm", group=beginners, parent=tamm)
        liis = Student(first_name="Liis", last_name="Tamm", group=advanced, parent=tamm)
        db.session.add_all([bob, karl, liis])
        db.session.commit()
        ids = {"smith": smith.id, "tamm": tamm.id, "lonely": lonely.id,
               "bob": bob.id, "karl": karl.id, "liis": liis.id}
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


def test_admin_lists_all_parents(admin, ids):
    data = admin.get("/api/parents").get_json()["data"]
    assert [p["lastName"] for p in data] == ["Kask", "Smith", "Tamm"]
    tamm = data[2]
    assert tamm["studentIds"] == [ids["karl"], ids["liis"]]


def test_teacher_sees_parents_of_own_students_only(teacher, ids):
    data = teacher.get("/api/parents").get_json()["data"]
    assert [p["lastName"] for p in data] == ["Smith", "Tamm"]
    # ребёнок из чужой группы не показывается
    assert data[1]["studentIds"] == [ids["karl"]]

    assert teacher.get(f"/api/parents/{ids['lonely']}").status_code == 403
    assert teacher.get(f"/api/parents/{ids['smith']}").status_code == 200


def test_search(admin):
    data = admin.get("/api/parents?search=tAm").get_json()["data"]
    assert [p["firstName"] for p in data] == ["Mari"]


def test_create_and_update_parent(admin):
    r = admin.post("/api/parents", json={"firstName": "Kati", "lastName": "Mets",
                                         "email": " Kati@Example.COM ", "phone": "+372 5555 0003"})
    assert r.status_code == 201
    data = r.get_json()["data"]
    assert data["email"] == "kati@example.com"
    assert data["studentIds"] == []

    r = admin.put(f"/api/parents/{data['id']}", json={"phone": None, "lastName": "Metsa"})
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert data["phone"] is None
    assert data["lastName"] == "Metsa"
    assert data["firstName"] == "Kati"


def test_parent_validation(admin):
    assert admin.post("/api/parents", json={"firstName": "Kati"}).status_code == 400
    r = admin.post("/api/parents", json={"firstName": "Kati", "lastName": "Mets", "email": "nope"})
    assert r.status_code == 400
    assert admin.put("/api/parents/9999", json={"phone": "1"}).status_code == 404


def test_teacher_cannot_mutate_parents(teacher, ids):
    assert teacher.post("/api/parents", json={"firstName": "A", "lastName": "B"}).status_code == 403
    assert teacher.put(f"/api/parents/{ids['smith']}", json={"phone": "1"}).status_code == 403
    assert teacher.delete(f"/api/parents/{ids['lonely']}").status_code == 403


def test_delete_parent_with_students_conflicts(app, admin, ids):
    r = admin.delete(f"/api/parents/{ids['smith']}")
    assert r.status_code == 409
    assert r.get_json()["success"] is False
    with app.app_context():
        assert db.session.get(Parent, ids["smith"]) is not None
        assert db.session.get(Student, ids["bob"]) is not None


def test_delete_parent_without_students(app, admin, ids):
    r = admin.delete(f"/api/parents/{ids['lonely']}")
    assert r.status_code == 200
    with app.app_context():
        assert db.session.get(Parent, ids["lonely"]) is None
    assert admin.get(f"/api/parents/{ids['lonely']}").status_code == 404
