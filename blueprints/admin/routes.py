from __future__ import annotations
from flask import Blueprint, url_for

from blueprints.auth.policy import admin_required
from blueprints.core.clock import school_now
from blueprints.core.params import parse_body, str_arg
from blueprints.core.responses import created, ok
from . import services as svc
from .schemas import UserCreateIn, UserUpdateIn

api_bp = Blueprint("admin_api", __name__)

@api_bp.get("/admin/users")
@admin_required
def users_list():
    return ok(svc.list_users(role=str_arg("role")))

@api_bp.post("/admin/users")
@admin_required
def users_create():
    user = svc.create_user(parse_body(UserCreateIn))
    return created(url_for("admin_api.users_list"), svc.user_to_dict(user))

@api_bp.put("/admin/users/<int:id>")
@admin_required
def users_update(id: int):
    user = svc.update_user(id, parse_body(UserUpdateIn))
    return ok(svc.user_to_dict(user))

@api_bp.get("/admin/stats")
@admin_required
def stats():
    return ok(svc.dashboard_stats(school_now()))
