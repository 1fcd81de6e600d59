from __future__ import annotations
from datetime import time, timedelta

import pytest

from app import create_app
from extensions import db
from models import Group, Parent, Schedule, Student, User
from blueprints.core.clock import school_today


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
        parent = Parent(first_name="Anna", last_name="Smith")
        db.session.add_all([admin, teacher, beginners, advanced, parent])
        db.session.flush()
        db.session.add(Student(first_name="Bob", last_name="Smith", group=beginners, parent=parent))
        db.session.commit()
        ids = {"admin": admin.id, "teacher": teacher.id,
               "beginners": beginners.id, "advanced": advanced.id}
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


def test_admin_endpoints_reject_teachers(app):
    teacher = login(app, "teacher@example.com", "teachpass")
    for url in ("/api/admin/users", "/api/admin/stats"):
        r = teacher.get(url)
        assert r.status_code == 403
        assert r.get_json()["message"] == "Admin access required"


def test_list_users_and_filter_by_role(admin):
    data = admin.get("/api/admin/users").get_json()["data"]
    assert [u["email"] for u in data] == ["admin@example.com", "teacher@example.com"]
    assert "password" not in data[0] and "passwordHash" not in data[0]
    data = admin.get("/api/admin/users?role=teacher").get_json()["data"]
    assert [u["role"] for u in data] == ["teacher"]


def test_create_teacher_with_groups_and_login(app, admin, ids):
    r = admin.post("/api/admin/users", json={
        "name": "Kati", "email": "KATI@example.com", "password": "secret1",
        "role": "teacher", "assignedGroups": [ids["advanced"], ids["beginners"]],
    })
    assert r.status_code == 201
    data = r.get_json()["data"]
    assert data["email"] == "kati@example.com"
    assert data["assignedGroups"] == sorted([ids["advanced"], ids["beginners"]])

    kati = login(app, "kati@example.com", "secret1")
    assert len(kati.get("/api/groups").get_json()["data"]) == 2
    teachers = admin.get(f"/api/groups/{ids['advanced']}").get_json()["data"]["teachers"]
    assert [t["name"] for t in teachers] == ["Kati"]


def test_create_user_conflicts_and_validation(admin, ids):
    r = admin.post("/api/admin/users", json={"name": "Dup", "email": "teacher@example.com",
                                             "password": "secret1"})
    assert r.status_code == 409
    r = admin.post("/api/admin/users", json={"name": "X", "email": "x@example.com",
                                             "password": "123"})
    assert r.status_code == 400
    r = admin.post("/api/admin/users", json={"name": "X", "email": "x@example.com",
                                             "password": "secret1", "role": "parent"})
    assert r.status_code == 400
    r = admin.post("/api/admin/users", json={"name": "X", "email": "x@example.com",
                                             "password": "secret1", "assignedGroups": [9999]})
    assert r.status_code == 404


def test_update_user_groups_and_deactivate(app, admin, ids):
    r = admin.put(f"/api/admin/users/{ids['teacher']}", json={"assignedGroups": [ids["beginners"]]})
    assert r.status_code == 200
    assert r.get_json()["data"]["assignedGroups"] == [ids["beginners"]]

    teacher = login(app, "teacher@example.com", "teachpass")
    assert [g["name"] for g in teacher.get("/api/groups").get_json()["data"]] == ["Beginners"]

    r = admin.put(f"/api/admin/users/{ids['teacher']}", json={"isActive": False})
    assert r.get_json()["data"]["isActive"] is False
    r = app.test_client().post("/api/auth/login",
                               json={"email": "teacher@example.com", "password": "teachpass"})
    assert r.status_code == 403

    assert admin.put("/api/admin/users/9999", json={"name": "x"}).status_code == 404
    r = admin.put(f"/api/admin/users/{ids['teacher']}", json={"email": "admin@example.com"})
    assert r.status_code == 409


def test_change_password(app, admin, ids):
    admin.put(f"/api/admin/users/{ids['teacher']}", json={"password": "newpass1"})
    r = app.test_client().post("/api/auth/login",
                               json={"email": "teacher@example.com", "password": "teachpass"})
    assert r.status_code == 401
    login(app, "teacher@example.com", "newpass1")


def test_stats(app, admin, ids):
    with app.app_context():
        today = school_today()
        db.session.add(Schedule(group_id=ids["beginners"], title="Hommik", date=today,
                                start_time=time(0, 0), end_time=time(0, 1)))
        for offset in (1, 3, 30):
            db.session.add(Schedule(group_id=ids["beginners"], title="Trenn",
                                    date=today + timedelta(days=offset),
                                    start_time=time(17, 0), end_time=time(18, 0)))
        db.session.commit()
    data = admin.get("/api/admin/stats").get_json()["data"]
    assert data["groups"] == 2
    assert data["students"] == 1
    assert data["parents"] == 1
    assert data["teachers"] == 1
    # утреннее занятие уже началось и в предстоящие не входит
    assert data["upcomingTrainings"] == 2
    assert data["period"]["start"] == today.isoformat()


def test_groups_only_for_teachers(admin, ids):
    r = admin.post("/api/admin/users", json={
        "name": "Boss", "email": "boss@example.com", "password": "secret1",
        "role": "admin", "assignedGroups": [ids["beginners"]],
    })
    assert r.status_code == 400
    assert r.get_json()["message"] == "assignedGroups is only allowed for teachers"

    r = admin.put(f"/api/admin/users/{ids['admin']}", json={"assignedGroups": [ids["beginners"]]})
    assert r.status_code == 400

    # пустой список для администратора допустим
    r = admin.put(f"/api/admin/users/{ids['admin']}", json={"assignedGroups": []})
    assert r.status_code == 200


def test_role_change_from_teacher_clears_groups(admin, ids):
    admin.put(f"/api/admin/users/{ids['teacher']}", json={"assignedGroups": [ids["beginners"]]})
    r = admin.put(f"/api/admin/users/{ids['teacher']}", json={"role": "admin"})
    assert r.status_code == 200
    assert r.get_json()["data"]["assignedGroups"] == []

    group = admin.get(f"/api/groups/{ids['beginners']}").get_json()["data"]
    assert group["teachers"] == []
    # состав преподавателей группы можно отправить обратно без ошибки
    r = admin.put(f"/api/groups/{ids['beginners']}",
                  json={"teachers": [t["id"] for t in group["teachers"]]})
    assert r.status_code == 200

    r = admin.put(f"/api/admin/users/{ids['teacher']}",
                  json={"role": "teacher", "assignedGroups": [ids["advanced"]]})
    assert r.get_json()["data"]["assignedGroups"] == [ids["advanced"]]
