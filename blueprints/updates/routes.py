# blueprints/updates/routes.py
from __future__ import annotations
from flask import Blueprint, url_for
from flask_login import current_user, login_required

from blueprints.auth.policy import staff_required
from blueprints.core.params import int_arg, parse_body
from blueprints.core.responses import created, ok
from . import services as svc
from .schemas import UpdateIn, UpdatePatch

api_bp = Blueprint("updates_api", __name__)

@api_bp.get("/updates")
@login_required
def updates_list():
    return ok(svc.list_updates(current_user, group_id=int_arg("group")))

@api_bp.get("/updates/<int:id>")
@login_required
def updates_get(id: int):
    return ok(svc.update_to_dict(svc.get_update(current_user, id)))

@api_bp.post("/updates")
@staff_required
def updates_create():
    u = svc.create_update(current_user, parse_body(UpdateIn))
    return created(url_for("updates_api.updates_get", id=u.id), svc.update_to_dict(u))

@api_bp.put("/updates/<int:id>")
@staff_required
def updates_update(id: int):
    u = svc.edit_update(current_user, id, parse_body(UpdatePatch))
    return ok(svc.update_to_dict(u))

@api_bp.delete("/updates/<int:id>")
@staff_required
def updates_delete(id: int):
    svc.delete_update(current_user, id)
    return ok(message="Update deleted successfully")
