# blueprints/groups/routes.py
from __future__ import annotations
from flask import Blueprint, url_for
from flask_login import current_user, login_required

from models import Role
from blueprints.auth.policy import require_roles
from blueprints.core.clock import school_now
from blueprints.core.params import int_arg, parse_body
from blueprints.core.responses import created, ok
from . import services as svc
from .schemas import GroupIn, GroupPatch

api_bp = Blueprint("groups_api", __name__)

ADMIN = Role.ADMIN.value

@api_bp.get("/groups")
@login_required
def groups_list():
    return ok(svc.list_groups(current_user, group_id=int_arg("group"), now=school_now()))

@api_bp.get("/groups/<int:id>")
@login_required
def groups_get(id: int):
    return ok(svc.get_group(current_user, id))

@api_bp.post("/groups")
@require_roles(ADMIN, message="Not authorized to create groups")
def groups_create():
    g = svc.create_group(parse_body(GroupIn))
    return created(url_for("groups_api.groups_get", id=g.id), svc.get_group(current_user, g.id))

@api_bp.put("/groups/<int:id>")
@require_roles(ADMIN, message="Not authorized to update groups")
def groups_update(id: int):
    g = svc.update_group(id, parse_body(GroupPatch))
    return ok(svc.get_group(current_user, g.id))

@api_bp.delete("/groups/<int:id>")
@require_roles(ADMIN, message="Not authorized to delete groups")
def groups_delete(id: int):
    removed = svc.delete_group(id)
    return ok({"removed": removed}, message="Group deleted successfully")
