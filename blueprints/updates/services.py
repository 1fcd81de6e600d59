# blueprints/updates/services.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from extensions import db
from models import Group, Update
from blueprints.auth.policy import (
    ensure_group_access, is_admin, resolve_group_filter, scope_group_ids,
)
from blueprints.core.errors import Forbidden, ValidationFailed
from blueprints.core.formatting import fmt_dt
from blueprints.core.lookups import get_or_404
from blueprints.groups.services import group_brief
from .schemas import UpdateIn, UpdatePatch

log = logging.getLogger(__name__)

def update_to_dict(u: Update) -> Dict:
    return {
        "id": u.id,
        "title": u.title,
        "content": u.content,
        "groupId": u.group_id,
        "group": group_brief(u.group),
        "author": ({"id": u.author.id, "name": u.author.name} if u.author else None),
        "createdAt": fmt_dt(u.created_at),
    }

def list_updates(principal, *, group_id: Optional[int]) -> List[Dict]:
    q = db.session.query(Update).options(joinedload(Update.group), joinedload(Update.author))
    if group_id is not None:
        resolve_group_filter(principal, group_id)
        q = q.filter(Update.group_id == group_id)
    else:
        scope = scope_group_ids(principal)
        if scope is not None:
            # общешкольные новости видят все
            q = q.filter(or_(Update.group_id.is_(None), Update.group_id.in_(scope)))
    q = q.order_by(Update.created_at.desc(), Update.id.desc())
    return [update_to_dict(u) for u in q.all()]

def get_update(principal, update_id: int) -> Update:
    u = get_or_404(Update, update_id, "Update not found")
    if u.group_id is not None:
        ensure_group_access(principal, u.group_id, "Not authorized to access this update")
    return u

def create_update(principal, data: UpdateIn) -> Update:
    group = None
    if data.group_id is not None:
        group = get_or_404(Group, data.group_id, "Group not found")
    elif not is_admin(principal):
        raise ValidationFailed("group is required")
    if group is not None:
        ensure_group_access(principal, group.id, "Not authorized to post updates for this group")
    u = Update(title=data.title, content=data.content, author_id=principal.id)
    u.group = group
    db.session.add(u)
    db.session.commit()
    log.info("update %s posted by user %s (group %s)", u.id, principal.id, u.group_id)
    return u

def _ensure_can_edit(principal, u: Update) -> None:
    if is_admin(principal):
        return
    if u.author_id != getattr(principal, "id", None):
        raise Forbidden("Only the author or an admin may change this update")
    ensure_group_access(principal, u.group_id, "Not authorized to change this update")

def edit_update(principal, update_id: int, data: UpdatePatch) -> Update:
    u = get_or_404(Update, update_id, "Update not found")
    _ensure_can_edit(principal, u)
    for field, value in data.changes().items():
        setattr(u, field, value)
    db.session.commit()
    log.info("update %s edited", u.id)
    return u

def delete_update(principal, update_id: int) -> None:
    u = get_or_404(Update, update_id, "Update not found")
    _ensure_can_edit(principal, u)
    db.session.delete(u)
    db.session.commit()
    log.info("update %s deleted", update_id)
