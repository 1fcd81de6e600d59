# blueprints/schedules/routes.py
from __future__ import annotations
from flask import Blueprint, url_for
from flask_login import current_user, login_required

from blueprints.auth.policy import staff_required
from blueprints.core.params import date_arg, int_arg, parse_body
from blueprints.core.responses import created, ok
from . import services as svc
from .schemas import ScheduleIn, SchedulePatch

api_bp = Blueprint("schedules_api", __name__)

@api_bp.get("/schedules")
@login_required
def schedules_list():
    return ok(svc.list_schedules(
        current_user,
        group_id=int_arg("group"),
        start=date_arg("startDate"),
        end=date_arg("endDate"),
    ))

@api_bp.get("/schedules/<int:id>")
@login_required
def schedules_get(id: int):
    return ok(svc.schedule_to_dict(svc.get_schedule(current_user, id)))

@api_bp.post("/schedules")
@staff_required
def schedules_create():
    s = svc.create_schedule(current_user, parse_body(ScheduleIn))
    return created(url_for("schedules_api.schedules_get", id=s.id), svc.schedule_to_dict(s))

@api_bp.put("/schedules/<int:id>")
@staff_required
def schedules_update(id: int):
    s = svc.update_schedule(current_user, id, parse_body(SchedulePatch))
    return ok(svc.schedule_to_dict(s))

@api_bp.delete("/schedules/<int:id>")
@staff_required
def schedules_delete(id: int):
    svc.delete_schedule(current_user, id)
    return ok(message="Schedule deleted successfully")
