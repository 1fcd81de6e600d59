from __future__ import annotations
from typing import Optional

from pydantic import Field

from blueprints.core.schemas import ApiModel, PatchModel

class GroupIn(ApiModel):
    name: str = Field(min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    teachers: list[int] = Field(default_factory=list)

class GroupPatch(PatchModel):
    NOT_NULL = ("name", "teachers")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    teachers: Optional[list[int]] = None
