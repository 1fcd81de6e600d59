from __future__ import annotations
from typing import Optional

from pydantic import AliasChoices, Field

from blueprints.core.schemas import ApiModel, PatchModel

class UpdateIn(ApiModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1, max_length=20000)
    group_id: Optional[int] = Field(None, validation_alias=AliasChoices("groupId", "group", "group_id"))

class UpdatePatch(PatchModel):
    NOT_NULL = ("title", "content")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1, max_length=20000)
