from __future__ import annotations
import json, logging
import time
from datetime import datetime, UTC

from flask import current_app, g, request
from flask_login import current_user
from flask_wtf.csrf import CSRFError
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers.response import Response

from extensions import db
from . import bp
from .errors import ApiError, pydantic_errors_safe
from .responses import fail, ok

log = logging.getLogger(__name__)

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in ("event", "path", "method", "status", "duration_ms", "user_id"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _setup_structured_logging(app):
    level = app.config.get("LOG_LEVEL", logging.INFO)
    for logger in (app.logger, logging.getLogger("blueprints")):
        has_json = any(
            isinstance(h, logging.StreamHandler)
            and isinstance(getattr(h, "formatter", None), JSONFormatter)
            for h in logger.handlers
        )
        if not has_json:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)
        logger.setLevel(level)

@bp.record_once
def _on_register(state):
    _setup_structured_logging(state.app)

@bp.before_app_request
def _start_timer():
    g._req_start = time.perf_counter()

@bp.after_app_request
def _log_request(response: Response):
    try:
        duration_ms = int((time.perf_counter() - g._req_start) * 1000)
    except AttributeError:
        duration_ms = None
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
        "user_id": current_user.get_id() if current_user and current_user.is_authenticated else None,
    }
    current_app.logger.info("request handled", extra=extra)
    return response

# ---------- обработчики ошибок: всё отдаём в едином конверте ----------
@bp.app_errorhandler(ApiError)
def _api_error(e: ApiError):
    return fail(e.message, e.status, e.errors)

@bp.app_errorhandler(ValidationError)
def _validation_error(e: ValidationError):
    return fail("Validation failed", 400, pydantic_errors_safe(e))

@bp.app_errorhandler(CSRFError)
def _csrf_error(e: CSRFError):
    return fail(e.description or "CSRF token missing or invalid", 400)

@bp.app_errorhandler(HTTPException)
def _http_error(e: HTTPException):
    return fail(e.description or e.name, e.code or 500)

@bp.app_errorhandler(Exception)
def _unexpected(e: Exception):
    # подробности только в лог, клиенту общее сообщение
    log.exception("unhandled error on %s %s", request.method, request.path)
    db.session.rollback()
    return fail("Server error", 500)

@bp.get("/api/health")
def health():
    return ok({
        "status": "ok",
        "ts": datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z"),
    })
