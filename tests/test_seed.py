from __future__ import annotations

import pytest

from app import create_app
from extensions import db
from models import Parent, User
from seed import ADMIN_EMAIL, seed_demo


@pytest.fixture()
def app():
    app = create_app("test")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


def test_seed_is_idempotent(app):
    first = seed_demo()
    second = seed_demo()
    assert first == second
    assert first["groups"] == 2
    assert first["students"] == 3
    assert db.session.query(User).filter_by(email=ADMIN_EMAIL).count() == 1
    tamm = db.session.query(Parent).filter_by(last_name="Tamm").one()
    assert len(tamm.students) == 2


def test_seeded_admin_can_log_in(app):
    seed_demo()
    r = app.test_client().post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "admin123"})
    assert r.status_code == 200
