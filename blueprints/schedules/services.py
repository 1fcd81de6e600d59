# blueprints/schedules/services.py
from __future__ import annotations
import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import joinedload

from extensions import db
from models import Group, Schedule
from blueprints.auth.policy import ensure_group_access, resolve_group_filter
from blueprints.core.errors import ValidationFailed
from blueprints.core.formatting import fmt_date, fmt_dt, fmt_time
from blueprints.core.lookups import get_or_404
from blueprints.groups.services import group_brief
from .schemas import ScheduleIn, SchedulePatch

log = logging.getLogger(__name__)

def schedule_to_dict(s: Schedule) -> Dict:
    return {
        "id": s.id,
        "groupId": s.group_id,
        "group": group_brief(s.group),
        "title": s.title,
        "date": fmt_date(s.date),
        "startTime": fmt_time(s.start_time),
        "endTime": fmt_time(s.end_time),
        "location": s.location,
        "description": s.description,
        "createdAt": fmt_dt(s.created_at),
        "updatedAt": fmt_dt(s.updated_at),
    }

def list_schedules(principal, *, group_id: Optional[int],
                   start: Optional[date], end: Optional[date]) -> List[Dict]:
    if start and end and start > end:
        raise ValidationFailed("startDate must not be after endDate")
    scope = resolve_group_filter(principal, group_id)
    q = db.session.query(Schedule).options(joinedload(Schedule.group))
    if scope is not None:
        q = q.filter(Schedule.group_id.in_(scope))
    # границы включительно
    if start:
        q = q.filter(Schedule.date >= start)
    if end:
        q = q.filter(Schedule.date <= end)
    q = q.order_by(Schedule.date.asc(), Schedule.start_time.asc(), Schedule.id.asc())
    return [schedule_to_dict(s) for s in q.all()]

def get_schedule(principal, schedule_id: int) -> Schedule:
    s = get_or_404(Schedule, schedule_id, "Schedule not found")
    ensure_group_access(principal, s.group_id, "Not authorized to access this schedule")
    return s

def create_schedule(principal, data: ScheduleIn) -> Schedule:
    group = get_or_404(Group, data.group_id, "Group not found")
    ensure_group_access(principal, group.id, "Not authorized to create schedules for this group")
    s = Schedule(
        title=data.title,
        date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        location=data.location,
        description=data.description,
    )
    s.group = group
    db.session.add(s)
    db.session.commit()
    log.info("schedule %s created for group %s on %s", s.id, group.id, s.date)
    return s

def update_schedule(principal, schedule_id: int, data: SchedulePatch) -> Schedule:
    s = get_or_404(Schedule, schedule_id, "Schedule not found")
    # доступ проверяем по текущей группе занятия, а не по телу запроса
    ensure_group_access(principal, s.group_id, "Not authorized to update this schedule")

    changes = data.changes()
    new_group_id = changes.pop("group_id", None)
    if new_group_id is not None and new_group_id != s.group_id:
        group = get_or_404(Group, new_group_id, "Group not found")
        ensure_group_access(principal, group.id, "Not authorized to move schedules to this group")
        s.group = group

    start = changes.get("start_time", s.start_time)
    end = changes.get("end_time", s.end_time)
    if end <= start:
        raise ValidationFailed("endTime must be after startTime")

    for field, value in changes.items():
        setattr(s, field, value)
    db.session.commit()
    log.info("schedule %s updated: %s", s.id, sorted(data.model_fields_set))
    return s

def delete_schedule(principal, schedule_id: int) -> None:
    s = get_or_404(Schedule, schedule_id, "Schedule not found")
    ensure_group_access(principal, s.group_id, "Not authorized to delete this schedule")
    db.session.delete(s)
    db.session.commit()
    log.info("schedule %s deleted", schedule_id)
