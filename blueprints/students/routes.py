# blueprints/students/routes.py
from __future__ import annotations
from flask import Blueprint, url_for
from flask_login import current_user, login_required

from models import Role
from blueprints.auth.policy import require_roles
from blueprints.core.params import int_arg, parse_body, str_arg
from blueprints.core.responses import created, ok
from . import services as svc
from .schemas import StudentIn, StudentPatch

api_bp = Blueprint("students_api", __name__)

ADMIN = Role.ADMIN.value

@api_bp.get("/students")
@login_required
def students_list():
    return ok(svc.list_students(current_user, group_id=int_arg("group"), search=str_arg("search")))

@api_bp.get("/students/<int:id>")
@login_required
def students_get(id: int):
    return ok(svc.student_to_dict(svc.get_student(current_user, id)))

@api_bp.post("/students")
@require_roles(ADMIN, message="Not authorized to create students")
def students_create():
    s = svc.create_student(parse_body(StudentIn))
    return created(url_for("students_api.students_get", id=s.id), svc.student_to_dict(s))

@api_bp.put("/students/<int:id>")
@require_roles(ADMIN, message="Not authorized to update students")
def students_update(id: int):
    s = svc.update_student(id, parse_body(StudentPatch))
    return ok(svc.student_to_dict(s))

@api_bp.delete("/students/<int:id>")
@require_roles(ADMIN, message="Not authorized to delete students")
def students_delete(id: int):
    svc.delete_student(id)
    return ok(message="Student deleted successfully")
