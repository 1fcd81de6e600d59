# blueprints/admin/services.py
from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from extensions import db
from models import Group, Parent, Role, Schedule, Student, User
from blueprints.core.errors import Conflict, ValidationFailed
from blueprints.core.formatting import fmt_dt
from blueprints.core.lookups import get_or_404, load_groups
from blueprints.groups.services import upcoming_clause
from .schemas import UserCreateIn, UserUpdateIn

log = logging.getLogger(__name__)

def user_to_dict(u: User) -> Dict:
    return {
        "id": u.id,
        "name": u.name,
        "email": u.email,
        "role": u.role,
        "isActive": u.is_active,
        "assignedGroups": sorted(u.assigned_group_ids),
        "createdAt": fmt_dt(u.created_at),
    }

def list_users(role: Optional[str] = None) -> List[Dict]:
    q = db.session.query(User)
    if role:
        q = q.filter(User.role == role)
    return [user_to_dict(u) for u in q.order_by(User.name.asc(), User.id.asc()).all()]

def _email_taken(email: str, exclude_id: Optional[int] = None) -> bool:
    q = db.session.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        q = q.filter(User.id != exclude_id)
    return q.first() is not None

def _check_groups_for_role(role: str, group_ids) -> None:
    # группы назначаются только преподавателям
    if group_ids and role != Role.TEACHER.value:
        raise ValidationFailed("assignedGroups is only allowed for teachers")

def create_user(data: UserCreateIn) -> User:
    if _email_taken(data.email):
        raise Conflict("User with this email already exists")
    _check_groups_for_role(data.role, data.assigned_groups)
    groups = load_groups(data.assigned_groups)
    user = User(name=data.name, email=data.email, role=data.role, is_active_flag=True)
    user.set_password(data.password)
    user.assigned_groups = groups
    db.session.add(user)
    db.session.commit()
    log.info("user %s created (role=%s, groups=%s)", user.id, user.role, sorted(user.assigned_group_ids))
    return user

def update_user(user_id: int, data: UserUpdateIn) -> User:
    user = get_or_404(User, user_id, "User not found")
    changes = data.changes()
    if "email" in changes and _email_taken(changes["email"], exclude_id=user.id):
        raise Conflict("User with this email already exists")
    role = changes.get("role", user.role)
    if "assigned_groups" in changes:
        _check_groups_for_role(role, changes["assigned_groups"])
        user.assigned_groups = load_groups(changes.pop("assigned_groups"))
    if role != Role.TEACHER.value:
        # не преподаватель: в Group.teachers его быть не должно
        user.assigned_groups = []
    if "password" in changes:
        user.set_password(changes.pop("password"))
    if "is_active" in changes:
        user.is_active_flag = changes.pop("is_active")
    for field, value in changes.items():
        setattr(user, field, value)
    db.session.commit()
    log.info("user %s updated", user.id)
    return user

def dashboard_stats(now: datetime) -> Dict:
    today = now.date()
    week_to = today + timedelta(days=6)
    upcoming = (db.session.query(Schedule)
                .filter(upcoming_clause(now), Schedule.date <= week_to)
                .count())
    return {
        "groups": db.session.query(Group).count(),
        "students": db.session.query(Student).count(),
        "parents": db.session.query(Parent).count(),
        "teachers": db.session.query(User).filter(User.role == Role.TEACHER.value).count(),
        "upcomingTrainings": upcoming,
        "period": {"start": today.isoformat(), "end": week_to.isoformat()},
    }
