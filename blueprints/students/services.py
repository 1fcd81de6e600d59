# blueprints/students/services.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from extensions import db
from models import Group, Parent, Student
from blueprints.auth.policy import ensure_group_access, resolve_group_filter
from blueprints.core.formatting import fmt_dt
from blueprints.core.lookups import get_or_404
from blueprints.groups.services import group_brief, parent_brief
from .schemas import StudentIn, StudentPatch

log = logging.getLogger(__name__)

def student_to_dict(s: Student) -> Dict:
    return {
        "id": s.id,
        "firstName": s.first_name,
        "lastName": s.last_name,
        "age": s.age,
        "groupId": s.group_id,
        "parentId": s.parent_id,
        "group": group_brief(s.group),
        "parent": parent_brief(s.parent),
        "createdAt": fmt_dt(s.created_at),
    }

def list_students(principal, *, group_id: Optional[int], search: Optional[str]) -> List[Dict]:
    scope = resolve_group_filter(principal, group_id)
    q = (db.session.query(Student)
         .options(joinedload(Student.group), joinedload(Student.parent)))
    if scope is not None:
        q = q.filter(Student.group_id.in_(scope))
    if search:
        q = q.filter(or_(
            Student.first_name.icontains(search, autoescape=True),
            Student.last_name.icontains(search, autoescape=True),
        ))
    q = q.order_by(Student.last_name.asc(), Student.first_name.asc(), Student.id.asc())
    return [student_to_dict(s) for s in q.all()]

def get_student(principal, student_id: int) -> Student:
    s = get_or_404(Student, student_id, "Student not found")
    ensure_group_access(principal, s.group_id, "Not authorized to access this student")
    return s

def create_student(data: StudentIn) -> Student:
    # ссылки проверяем до записи: при 404 ученик не создаётся
    group = get_or_404(Group, data.group_id, "Group not found")
    parent = get_or_404(Parent, data.parent_id, "Parent not found")
    s = Student(first_name=data.first_name, last_name=data.last_name, age=data.age)
    s.group = group
    s.parent = parent
    db.session.add(s)
    # Group.students и Parent.students строятся по этой же строке, поэтому один commit
    db.session.commit()
    log.info("student %s created in group %s, parent %s", s.id, group.id, parent.id)
    return s

def update_student(student_id: int, data: StudentPatch) -> Student:
    s = get_or_404(Student, student_id, "Student not found")
    changes = data.changes()
    if "group_id" in changes:
        s.group = get_or_404(Group, changes.pop("group_id"), "Group not found")
    if "parent_id" in changes:
        s.parent = get_or_404(Parent, changes.pop("parent_id"), "Parent not found")
    for field, value in changes.items():
        setattr(s, field, value)
    db.session.commit()
    log.info("student %s updated: %s", s.id, sorted(data.model_fields_set))
    return s

def delete_student(student_id: int) -> None:
    s = get_or_404(Student, student_id, "Student not found")
    group_id, parent_id = s.group_id, s.parent_id
    db.session.delete(s)
    db.session.commit()
    log.info("student %s deleted (group %s, parent %s)", student_id, group_id, parent_id)
