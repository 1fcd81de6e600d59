# blueprints/groups/services.py
from __future__ import annotations
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from flask import current_app
from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import selectinload

from extensions import db
from models import Group, Role, Schedule, Student, User
from blueprints.auth.policy import ensure_group_access, resolve_group_filter
from blueprints.core.errors import NotFound, ValidationFailed
from blueprints.core.formatting import fmt_date, fmt_dt, fmt_time
from blueprints.core.lookups import get_or_404
from .schemas import GroupIn, GroupPatch

log = logging.getLogger(__name__)

# ---------- сериализация ----------
def teacher_brief(u: User) -> Dict:
    return {"id": u.id, "name": u.name, "email": u.email}

def parent_brief(p) -> Optional[Dict]:
    if p is None:
        return None
    return {"id": p.id, "firstName": p.first_name, "lastName": p.last_name,
            "email": p.email, "phone": p.phone}

def student_brief(s: Student, with_parent: bool = False) -> Dict:
    out = {"id": s.id, "firstName": s.first_name, "lastName": s.last_name, "age": s.age}
    if with_parent:
        out["parent"] = parent_brief(s.parent)
    return out

def group_brief(g: Optional[Group]) -> Optional[Dict]:
    if g is None:
        return None
    return {"id": g.id, "name": g.name, "location": g.location}

def group_to_dict(g: Group, *, preview: int, with_parents: bool = False) -> Dict:
    students = list(g.students)
    return {
        "id": g.id,
        "name": g.name,
        "location": g.location,
        "description": g.description,
        "teachers": [teacher_brief(t) for t in g.teachers],
        "students": [student_brief(s, with_parent=with_parents) for s in students[:preview]],
        "studentCount": len(students),
        "createdAt": fmt_dt(g.created_at),
    }

# ---------- ближайшая тренировка ----------
def upcoming_clause(now: datetime):
    """Занятия, которые ещё не начались: позже сегодня или в следующие дни."""
    today = now.date()
    return or_(
        Schedule.date > today,
        and_(Schedule.date == today, Schedule.start_time >= now.time()),
    )

def next_trainings(group_ids: Iterable[int], now: datetime) -> Dict[int, Optional[Dict]]:
    """Ближайшее ещё не начавшееся занятие для каждой группы одним запросом."""
    ids = list(group_ids)
    out: Dict[int, Optional[Dict]] = {gid: None for gid in ids}
    if not ids:
        return out
    upcoming = upcoming_clause(now)
    first_day = (
        select(Schedule.group_id.label("group_id"), func.min(Schedule.date).label("day"))
        .where(Schedule.group_id.in_(ids), upcoming)
        .group_by(Schedule.group_id)
        .subquery()
    )
    rows = (
        db.session.query(Schedule)
        .join(first_day, and_(Schedule.group_id == first_day.c.group_id,
                              Schedule.date == first_day.c.day))
        .filter(upcoming)
        .order_by(Schedule.group_id, Schedule.start_time.asc(), Schedule.id.asc())
        .all()
    )
    for sch in rows:
        if out.get(sch.group_id) is None:
            out[sch.group_id] = {
                "id": sch.id,
                "date": fmt_date(sch.date),
                "startTime": fmt_time(sch.start_time),
            }
    return out

# ---------- CRUD ----------
def _load_teachers(ids: Iterable[int]) -> List[User]:
    wanted = list(dict.fromkeys(ids))
    if not wanted:
        return []
    found = {u.id: u for u in db.session.query(User).filter(User.id.in_(wanted)).all()}
    for uid in wanted:
        if uid not in found:
            raise NotFound(f"Teacher not found: {uid}")
        if found[uid].role != Role.TEACHER.value:
            raise ValidationFailed(f"User {uid} is not a teacher")
    return [found[uid] for uid in wanted]

def list_groups(principal, *, group_id: Optional[int], now: datetime) -> List[Dict]:
    scope = resolve_group_filter(principal, group_id)
    q = (db.session.query(Group)
         .options(selectinload(Group.teachers), selectinload(Group.students)))
    if scope is not None:
        q = q.filter(Group.id.in_(scope))
    groups = q.order_by(Group.name.asc(), Group.id.asc()).all()

    preview = current_app.config.get("GROUP_LIST_STUDENT_PREVIEW", 5)
    upcoming = next_trainings([g.id for g in groups], now)
    out = []
    for g in groups:
        item = group_to_dict(g, preview=preview)
        item["nextTraining"] = upcoming.get(g.id)
        out.append(item)
    return out

def get_group(principal, group_id: int) -> Dict:
    g = get_or_404(Group, group_id, "Group not found")
    ensure_group_access(principal, g.id)
    preview = current_app.config.get("GROUP_DETAIL_STUDENT_PREVIEW", 50)
    out = group_to_dict(g, preview=preview, with_parents=True)
    out["studentIds"] = [s.id for s in g.students]
    return out

def create_group(data: GroupIn) -> Group:
    teachers = _load_teachers(data.teachers)
    g = Group(name=data.name, location=data.location, description=data.description)
    g.teachers = teachers
    db.session.add(g)
    db.session.commit()
    log.info("group %s created (%s)", g.id, g.name)
    return g

def update_group(group_id: int, data: GroupPatch) -> Group:
    g = get_or_404(Group, group_id, "Group not found")
    changes = data.changes()
    if "teachers" in changes:
        g.teachers = _load_teachers(changes.pop("teachers"))
    for field, value in changes.items():
        setattr(g, field, value)
    db.session.commit()
    log.info("group %s updated: %s", g.id, sorted(data.model_fields_set))
    return g

def delete_group(group_id: int) -> Dict:
    g = get_or_404(Group, group_id, "Group not found")
    summary = {
        "students": db.session.query(Student).filter(Student.group_id == g.id).count(),
        "schedules": db.session.query(Schedule).filter(Schedule.group_id == g.id).count(),
    }
    # ученики, расписание и новости группы удаляются каскадом в той же транзакции
    db.session.delete(g)
    db.session.commit()
    log.info("group %s deleted with %s", group_id, summary)
    return summary
