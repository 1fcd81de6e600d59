from __future__ import annotations
from typing import Optional

from pydantic import Field

from blueprints.core.schemas import ApiModel, Email, PatchModel

class ParentIn(ApiModel):
    first_name: str = Field(min_length=1, max_length=120)
    last_name: str = Field(min_length=1, max_length=120)
    email: Optional[Email] = None
    phone: Optional[str] = Field(None, max_length=50)

class ParentPatch(PatchModel):
    NOT_NULL = ("first_name", "last_name")

    first_name: Optional[str] = Field(None, min_length=1, max_length=120)
    last_name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[Email] = None
    phone: Optional[str] = Field(None, max_length=50)
