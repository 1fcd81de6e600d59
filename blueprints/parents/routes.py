# blueprints/parents/routes.py
from __future__ import annotations
from flask import Blueprint, url_for
from flask_login import current_user, login_required

from blueprints.auth.policy import admin_required
from blueprints.core.params import parse_body, str_arg
from blueprints.core.responses import created, ok
from . import services as svc
from .schemas import ParentIn, ParentPatch

api_bp = Blueprint("parents_api", __name__)

@api_bp.get("/parents")
@login_required
def parents_list():
    return ok(svc.list_parents(current_user, search=str_arg("search")))

@api_bp.get("/parents/<int:id>")
@login_required
def parents_get(id: int):
    return ok(svc.get_parent(current_user, id))

@api_bp.post("/parents")
@admin_required
def parents_create():
    p = svc.create_parent(parse_body(ParentIn))
    return created(url_for("parents_api.parents_get", id=p.id), svc.get_parent(current_user, p.id))

@api_bp.put("/parents/<int:id>")
@admin_required
def parents_update(id: int):
    p = svc.update_parent(id, parse_body(ParentPatch))
    return ok(svc.get_parent(current_user, p.id))

@api_bp.delete("/parents/<int:id>")
@admin_required
def parents_delete(id: int):
    svc.delete_parent(id)
    return ok(message="Parent deleted successfully")
