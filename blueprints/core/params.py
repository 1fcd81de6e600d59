from __future__ import annotations
from datetime import date
from typing import Any, TypeVar

from flask import request
from pydantic import BaseModel

from .errors import ValidationFailed

M = TypeVar("M", bound=BaseModel)

def json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationFailed("JSON object expected")
    return payload

def parse_body(schema: type[M]) -> M:
    # pydantic.ValidationError уходит в общий обработчик -> 400
    return schema.model_validate(json_body())

def int_arg(name: str) -> int | None:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationFailed(f"Invalid {name} id") from None

def date_arg(name: str) -> date | None:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        # допускаем и "2024-01-31T00:00:00.000Z" от фронта
        return date.fromisoformat(raw[:10])
    except ValueError:
        raise ValidationFailed(f"Invalid {name}, expected YYYY-MM-DD") from None

def str_arg(name: str) -> str | None:
    raw = (request.args.get(name) or "").strip()
    return raw or None
