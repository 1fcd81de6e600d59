from __future__ import annotations
import os
from pathlib import Path

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # сколько доверенных прокси стоит перед приложением (0 = X-Forwarded-For игнорируется)
    PROXY_FIX_X_FOR = int(os.getenv("PROXY_FIX_X_FOR", "0"))

    # "сегодня" для ближайшей тренировки считается в часовом поясе школы
    SCHOOL_TIMEZONE = os.getenv("SCHOOL_TIMEZONE", "Europe/Tallinn")
    GROUP_LIST_STUDENT_PREVIEW = 5
    GROUP_DETAIL_STUDENT_PREVIEW = 50

    SEED_TEST_DATA = False
    DEFAULT_USERS: list[dict] = []

    AUTH_RL_MAX = 5
    AUTH_RL_WINDOW = 300

class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True
    DEFAULT_USERS = [
        {"name": "Admin User", "email": "admin@tantsukool.ee", "password": "admin123", "role": "admin"},
        {"name": "Õpetaja 1", "email": "teacher1@tantsukool.ee", "password": "teacher123", "role": "teacher"},
    ]

class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False
    AUTH_RL_MAX = 1000

class ProdConfig(BaseConfig):
    DEBUG = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = "Lax"

config_map = {
    "dev": DevConfig,
    "test": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
