from __future__ import annotations
from typing import Literal, Optional

from pydantic import Field

from blueprints.core.schemas import ApiModel, Email, PatchModel

RoleName = Literal["admin", "teacher"]

class UserCreateIn(ApiModel):
    name: str = Field(min_length=1, max_length=255)
    email: Email
    password: str = Field(min_length=6, max_length=128)
    role: RoleName = "teacher"
    assigned_groups: list[int] = Field(default_factory=list)

class UserUpdateIn(PatchModel):
    NOT_NULL = ("name", "email", "role", "assigned_groups", "is_active")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[Email] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    role: Optional[RoleName] = None
    assigned_groups: Optional[list[int]] = None
    is_active: Optional[bool] = None
