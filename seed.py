"""
Idempotent seed-скрипт.
Запуск:
  python seed.py --reset         # дропнуть и пересоздать БД + демо-данные
  python seed.py --ensure-admin  # создать только администратора (без сидов)
  python seed.py                 # мягкое наполнение недостающих данных (idempotent)
"""
from datetime import time, timedelta
import argparse

from app import create_app
from blueprints.core.clock import school_today
from extensions import db
from models import Group, Parent, Role, Schedule, Student, User

ADMIN_EMAIL = "admin@tantsukool.ee"
ADMIN_PASSWORD = "admin123"
TEACHER_PASSWORD = "teacher123"

def get_or_create(model, defaults=None, **filters):
    """Идемпотентное создание по уникальным ключам."""
    inst = db.session.query(model).filter_by(**filters).first()
    if inst:
        return inst, False
    data = dict(filters)
    if defaults:
        data.update(defaults)
    inst = model(**data)
    db.session.add(inst)
    db.session.flush()
    return inst, True

def ensure_user(email: str, name: str, role: str, password: str) -> User:
    user, created = get_or_create(User, email=email, defaults={
        "name": name, "role": role, "is_active_flag": True, "password_hash": "",
    })
    if created:
        user.set_password(password)
    return user

def ensure_admin() -> User:
    return ensure_user(ADMIN_EMAIL, "Admin User", Role.ADMIN.value, ADMIN_PASSWORD)

def seed_demo() -> dict:
    """Администратор, преподаватели, группы, родители, ученики и тренировки на две недели."""
    ensure_admin()
    teachers = [
        ensure_user(f"teacher{i}@tantsukool.ee", f"Õpetaja {i}", Role.TEACHER.value, TEACHER_PASSWORD)
        for i in range(1, 3)
    ]

    beginners, _ = get_or_create(Group, name="Beginners",
                                 defaults={"location": "Saal 1", "description": "Algajad 6-9 a."})
    advanced, _ = get_or_create(Group, name="Advanced",
                                defaults={"location": "Saal 2", "description": "Edasijõudnud"})
    if teachers[0] not in beginners.teachers:
        beginners.teachers.append(teachers[0])
    if teachers[1] not in advanced.teachers:
        advanced.teachers.append(teachers[1])

    smith, _ = get_or_create(Parent, first_name="Anna", last_name="Smith",
                             defaults={"email": "anna.smith@example.com", "phone": "+372 5555 0001"})
    tamm, _ = get_or_create(Parent, first_name="Mari", last_name="Tamm",
                            defaults={"email": "mari.tamm@example.com", "phone": "+372 5555 0002"})

    get_or_create(Student, first_name="Bob", last_name="Smith",
                  defaults={"age": 8, "group_id": beginners.id, "parent_id": smith.id})
    get_or_create(Student, first_name="Liis", last_name="Tamm",
                  defaults={"age": 12, "group_id": advanced.id, "parent_id": tamm.id})
    get_or_create(Student, first_name="Karl", last_name="Tamm",
                  defaults={"age": 7, "group_id": beginners.id, "parent_id": tamm.id})

    start = school_today()
    for offset in range(0, 14, 3):
        d = start + timedelta(days=offset)
        get_or_create(Schedule, group_id=beginners.id, date=d, start_time=time(17, 0),
                      defaults={"title": "Trenn", "end_time": time(18, 0), "location": "Saal 1"})
        get_or_create(Schedule, group_id=advanced.id, date=d, start_time=time(18, 15),
                      defaults={"title": "Trenn", "end_time": time(19, 45), "location": "Saal 2"})

    db.session.commit()
    return {
        "groups": db.session.query(Group).count(),
        "students": db.session.query(Student).count(),
        "schedules": db.session.query(Schedule).count(),
    }

def main():
    parser = argparse.ArgumentParser(description="Seed dance school demo data")
    parser.add_argument("--reset", action="store_true", help="drop & create all tables before seeding")
    parser.add_argument("--ensure-admin", action="store_true", help="only create the admin user")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.reset:
            db.drop_all()
        db.create_all()
        if args.ensure_admin:
            ensure_admin()
            db.session.commit()
            print(f"admin: {ADMIN_EMAIL} / {ADMIN_PASSWORD}")
            return
        counts = seed_demo()
        print(f"seeded: {counts}")
        print(f"admin: {ADMIN_EMAIL} / {ADMIN_PASSWORD}; teachers: teacher1..2@tantsukool.ee / {TEACHER_PASSWORD}")

if __name__ == "__main__":
    main()
