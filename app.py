from __future__ import annotations
import os
from flask import Flask
from config import config_map
from extensions import db, migrate, login_manager, csrf
from sqlalchemy import inspect
from werkzeug.middleware.proxy_fix import ProxyFix

def _seed_from_config(app):
    if not app.config.get("SEED_TEST_DATA"):
        return
    with app.app_context():
        # таблица users может ещё не быть создана (alembic upgrade и т.п.)
        if not inspect(db.engine).has_table("users"):
            return

        from models import User  # локальный импорт, чтобы избежать циклов
        created = 0
        for u in app.config.get("DEFAULT_USERS", []):
            email = u["email"].strip().lower()
            if db.session.query(User).filter_by(email=email).first():
                continue
            user = User(name=u.get("name") or email, email=email, role=u["role"], is_active_flag=True)
            user.set_password(u["password"])
            db.session.add(user)
            created += 1
        if created:
            db.session.commit()
            app.logger.info("seeded %d default users", created)

def register_blueprints(app: Flask) -> None:
    from blueprints.core import bp as core_bp
    from blueprints.auth.routes import api_bp as auth_api_bp
    from blueprints.groups.routes import api_bp as groups_api_bp
    from blueprints.students.routes import api_bp as students_api_bp
    from blueprints.parents.routes import api_bp as parents_api_bp
    from blueprints.schedules.routes import api_bp as schedules_api_bp
    from blueprints.updates.routes import api_bp as updates_api_bp
    from blueprints.admin.routes import api_bp as admin_api_bp

    # core без префикса: /api/health и обработчики ошибок на всё приложение
    app.register_blueprint(core_bp)
    app.register_blueprint(auth_api_bp, url_prefix="/api")
    app.register_blueprint(groups_api_bp, url_prefix="/api")
    app.register_blueprint(students_api_bp, url_prefix="/api")
    app.register_blueprint(parents_api_bp, url_prefix="/api")
    app.register_blueprint(schedules_api_bp, url_prefix="/api")
    app.register_blueprint(updates_api_bp, url_prefix="/api")
    app.register_blueprint(admin_api_bp, url_prefix="/api")

def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    # --- ВАЖНО: изоляция БД в тестах ---
    # pytest всегда выставляет переменную окружения PYTEST_CURRENT_TEST.
    # Делаем БД в памяти, чтобы никакие изменения из одного теста не протекали в другой.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {"connect_args": {"check_same_thread": False}})
    app.config.setdefault("WTF_CSRF_TIME_LIMIT", None)
    app.config.setdefault("WTF_CSRF_HEADERS", ["X-CSRF-Token", "X-CSRFToken"])
    # ответы в порядке полей сериализаторов
    app.json.sort_keys = False

    x_for = int(app.config.get("PROXY_FIX_X_FOR") or 0)
    if x_for:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=x_for, x_proto=1)

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    register_blueprints(app)
    _seed_from_config(app)
    return app

if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=int(os.getenv("PORT", 5000)))
