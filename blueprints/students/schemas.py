from __future__ import annotations
from typing import Optional

from pydantic import Field

from blueprints.core.schemas import ApiModel, PatchModel

class StudentIn(ApiModel):
    first_name: str = Field(min_length=1, max_length=120)
    last_name: str = Field(min_length=1, max_length=120)
    age: Optional[int] = Field(None, ge=0, le=120)
    group_id: int
    parent_id: int

class StudentPatch(PatchModel):
    NOT_NULL = ("first_name", "last_name", "group_id", "parent_id")

    first_name: Optional[str] = Field(None, min_length=1, max_length=120)
    last_name: Optional[str] = Field(None, min_length=1, max_length=120)
    age: Optional[int] = Field(None, ge=0, le=120)
    group_id: Optional[int] = None
    parent_id: Optional[int] = None
