from __future__ import annotations
from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

class ApiModel(BaseModel):
    """JSON в camelCase (firstName, groupId), в Python snake_case."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

class PatchModel(ApiModel):
    """Частичное обновление: переданы только изменяемые поля.

    Поля из NOT_NULL можно не передавать, но нельзя передать как null.
    """
    NOT_NULL: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def check_not_null(self):
        for name in self.NOT_NULL:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} may not be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)

def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    local, _, domain = v.partition("@")
    if not local or "." not in domain:
        raise ValueError("invalid email")
    return v

Email = Annotated[str, Field(max_length=255), AfterValidator(_normalize_email)]
