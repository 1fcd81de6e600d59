# blueprints/auth/routes.py
from __future__ import annotations
import logging
import time
from typing import Optional

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from extensions import csrf, db, login_manager
from models import User
from blueprints.admin.services import user_to_dict
from blueprints.core.responses import fail, ok

api_bp = Blueprint("auth_api", __name__)
log = logging.getLogger(__name__)

# ---- безопасные значения по умолчанию
DEFAULT_RL_MAX = 5
DEFAULT_RL_WIN = 300  # 5 минут
_login_attempts: dict[str, list[float]] = {}  # ключ: ip|email -> [timestamps]

# ---------- rate limit ----------
def _rl_key(email: str) -> str:
    # X-Forwarded-For учитывается только через ProxyFix (PROXY_FIX_X_FOR)
    ip = request.remote_addr or "0.0.0.0"
    return f"{ip}|{(email or '').lower()}"

def _rl_purge(cutoff: float) -> None:
    for key in list(_login_attempts):
        bucket = _login_attempts[key]
        while bucket and bucket[0] < cutoff:
            bucket.pop(0)
        if not bucket:
            del _login_attempts[key]

def _rl_check_and_hit(email: str) -> bool:
    now = time.time()
    win = current_app.config.get("AUTH_RL_WINDOW", DEFAULT_RL_WIN)
    mx = current_app.config.get("AUTH_RL_MAX", DEFAULT_RL_MAX)
    _rl_purge(now - win)
    bucket = _login_attempts.setdefault(_rl_key(email), [])
    if len(bucket) >= mx:
        return False
    bucket.append(now)
    return True

def reset_rate_limits() -> None:
    _login_attempts.clear()

# ---------- 401 ----------
@login_manager.unauthorized_handler
def _unauth():
    # только JSON: фронт сам уводит на форму логина
    return fail("Not authorized, please log in", 401)

# ---------- API ----------
@api_bp.get("/csrf")
def api_csrf():
    token = generate_csrf()
    resp = jsonify({"success": True, "data": {"csrfToken": token}})
    resp.set_cookie("csrf_token", token, samesite="Lax", httponly=False, path="/")
    return resp

@api_bp.post("/auth/login")
@csrf.exempt
def api_login():
    payload = request.get_json(silent=True) or request.form or {}
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""

    if not email or not password:
        return fail("Please provide email and password", 400)

    if not _rl_check_and_hit(email):
        return fail("Too many login attempts, try again later", 429)

    user: Optional[User] = db.session.query(User).filter_by(email=email).first()
    if not user or not user.check_password(password):
        log.info("login failed for %s", email)
        return fail("Invalid credentials", 401)

    if not user.is_active:
        return fail("Account is disabled", 403)

    login_user(user, remember=True)
    log.info("user %s logged in", user.id)
    return ok(user_to_dict(user))

@api_bp.post("/auth/logout")
@login_required
def api_logout():
    logout_user()
    return ok(message="Logged out")

@api_bp.get("/auth/me")
@login_required
def api_me():
    return ok(user_to_dict(current_user))
