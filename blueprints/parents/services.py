# blueprints/parents/services.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from extensions import db
from models import Parent, Student
from blueprints.auth.policy import scope_group_ids
from blueprints.core.errors import Conflict, Forbidden
from blueprints.core.formatting import fmt_dt
from blueprints.core.lookups import get_or_404
from .schemas import ParentIn, ParentPatch

log = logging.getLogger(__name__)

def parent_to_dict(p: Parent, scope: Optional[set[int]] = None) -> Dict:
    # преподаватель видит только детей из своих групп
    children = [s for s in p.students if scope is None or s.group_id in scope]
    return {
        "id": p.id,
        "firstName": p.first_name,
        "lastName": p.last_name,
        "email": p.email,
        "phone": p.phone,
        "students": [
            {"id": s.id, "firstName": s.first_name, "lastName": s.last_name, "groupId": s.group_id}
            for s in children
        ],
        "studentIds": [s.id for s in children],
        "createdAt": fmt_dt(p.created_at),
    }

def list_parents(principal, *, search: Optional[str]) -> List[Dict]:
    scope = scope_group_ids(principal)
    q = db.session.query(Parent).options(selectinload(Parent.students))
    if scope is not None:
        q = q.filter(Parent.students.any(Student.group_id.in_(scope)))
    if search:
        q = q.filter(or_(
            Parent.first_name.icontains(search, autoescape=True),
            Parent.last_name.icontains(search, autoescape=True),
        ))
    q = q.order_by(Parent.last_name.asc(), Parent.first_name.asc(), Parent.id.asc())
    return [parent_to_dict(p, scope) for p in q.all()]

def get_parent(principal, parent_id: int) -> Dict:
    p = get_or_404(Parent, parent_id, "Parent not found")
    scope = scope_group_ids(principal)
    if scope is not None and not any(s.group_id in scope for s in p.students):
        raise Forbidden("Not authorized to access this parent")
    return parent_to_dict(p, scope)

def create_parent(data: ParentIn) -> Parent:
    p = Parent(first_name=data.first_name, last_name=data.last_name,
               email=data.email, phone=data.phone)
    db.session.add(p)
    db.session.commit()
    log.info("parent %s created", p.id)
    return p

def update_parent(parent_id: int, data: ParentPatch) -> Parent:
    p = get_or_404(Parent, parent_id, "Parent not found")
    for field, value in data.changes().items():
        setattr(p, field, value)
    db.session.commit()
    log.info("parent %s updated: %s", p.id, sorted(data.model_fields_set))
    return p

def delete_parent(parent_id: int) -> None:
    p = get_or_404(Parent, parent_id, "Parent not found")
    if p.students:
        raise Conflict("Parent still has students; delete or move them first")
    db.session.delete(p)
    db.session.commit()
    log.info("parent %s deleted", parent_id)
