# blueprints/auth/policy.py
"""Единая проверка доступа к группам и всему, что к ним привязано.

Принципал: текущий пользователь (role, assigned_group_ids).
ADMIN видит и меняет всё, TEACHER работает только со своими группами,
любая другая роль не получает ничего.
"""
from __future__ import annotations
from functools import wraps
from typing import Callable, Iterable, Optional

from flask_login import current_user, login_required

from blueprints.core.errors import Forbidden
from models import Role

def role_of(principal) -> Optional[str]:
    return getattr(principal, "role", None)

def is_admin(principal) -> bool:
    return role_of(principal) == Role.ADMIN.value

def is_teacher(principal) -> bool:
    return role_of(principal) == Role.TEACHER.value

def scope_group_ids(principal) -> Optional[set[int]]:
    """None, если ограничений нет; иначе множество доступных групп."""
    if is_admin(principal):
        return None
    if is_teacher(principal):
        return set(getattr(principal, "assigned_group_ids", set()) or set())
    return set()

def can_access_group(principal, group_id: Optional[int]) -> bool:
    scope = scope_group_ids(principal)
    if scope is None:
        return True
    return group_id is not None and group_id in scope

def ensure_group_access(principal, group_id: Optional[int],
                        message: str = "Not authorized to access this group") -> None:
    if not can_access_group(principal, group_id):
        raise Forbidden(message)

def resolve_group_filter(principal, requested: Optional[int]) -> Optional[set[int]]:
    """Какие группы фильтровать в списках.

    Явный фильтр вне области доступа даёт 403, а не пустой список.
    Без фильтра: None для админа, область доступа для преподавателя.
    """
    if requested is not None:
        ensure_group_access(principal, requested)
        return {requested}
    return scope_group_ids(principal)

def ensure_roles(principal, roles: Iterable[str], message: str) -> None:
    if role_of(principal) not in set(roles):
        raise Forbidden(message)

# ---------- декораторы ролей ----------
def require_roles(*roles: str, message: str = "Not authorized for this action"):
    def decorator(fn: Callable):
        @wraps(fn)
        @login_required
        def wrapper(*args, **kwargs):
            ensure_roles(current_user, roles, message)
            return fn(*args, **kwargs)
        return wrapper
    return decorator

def admin_required(fn: Callable):
    return require_roles(Role.ADMIN.value, message="Admin access required")(fn)

def staff_required(fn: Callable):
    # пускаем TEACHER и ADMIN
    return require_roles(Role.ADMIN.value, Role.TEACHER.value)(fn)
