from __future__ import annotations
from typing import Any

from pydantic import ValidationError

class ApiError(Exception):
    """Ошибка, которую обработчик приложения превращает в JSON-ответ
    вида {"success": false, "message": ...} с нужным HTTP-статусом."""
    status = 400

    def __init__(self, message: str, status: int | None = None, errors: list | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.errors = errors

class ValidationFailed(ApiError):
    status = 400

class Forbidden(ApiError):
    status = 403

class NotFound(ApiError):
    status = 404

class Conflict(ApiError):
    status = 409

def pydantic_errors_safe(ve: ValidationError) -> list[dict[str, Any]]:
    errs = ve.errors(include_url=False)
    for e in errs:
        if "ctx" in e and isinstance(e["ctx"], dict):
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
        # input может быть чем угодно, в JSON он не нужен
        e.pop("input", None)
    return errs
