from __future__ import annotations
from typing import Any

from flask import jsonify

def ok(data: Any = None, status: int = 200, message: str | None = None):
    payload: dict[str, Any] = {"success": True}
    if data is not None:
        payload["data"] = data
    if message:
        payload["message"] = message
    return jsonify(payload), status

def created(location: str, data: Any):
    resp = jsonify({"success": True, "data": data})
    resp.status_code = 201
    resp.headers["Location"] = location
    return resp

def fail(message: str, status: int = 400, errors: list | None = None):
    payload: dict[str, Any] = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    return jsonify(payload), status
