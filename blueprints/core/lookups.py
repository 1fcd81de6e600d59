from __future__ import annotations
from typing import Iterable, TypeVar

from extensions import db
from models import Group
from .errors import NotFound

T = TypeVar("T")

def get_or_404(model: type[T], id_: int | None, message: str) -> T:
    obj = db.session.get(model, id_) if id_ is not None else None
    if obj is None:
        raise NotFound(message)
    return obj

def load_groups(ids: Iterable[int]) -> list[Group]:
    """Группы по списку id в исходном порядке; 404, если какой-то нет."""
    wanted = list(dict.fromkeys(ids))
    if not wanted:
        return []
    found = {g.id: g for g in db.session.query(Group).filter(Group.id.in_(wanted)).all()}
    missing = [i for i in wanted if i not in found]
    if missing:
        raise NotFound(f"Group not found: {', '.join(map(str, missing))}")
    return [found[i] for i in wanted]
