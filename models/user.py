from __future__ import annotations
from datetime import datetime
from enum import Enum

from flask_login import UserMixin
from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from werkzeug.security import generate_password_hash, check_password_hash

from extensions import db, login_manager

class Role(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"

# один и тот же набор строк читается как Group.teachers и как User.assigned_groups
group_teachers = db.Table(
    "group_teachers",
    db.Column("group_id", db.Integer, db.ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    db.Column("user_id", db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

class User(UserMixin, db.Model):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    # строковое поле, чтобы не зависеть от конкретного типа БД
    role: Mapped[str] = mapped_column(db.String(16), index=True, nullable=False, default=Role.TEACHER.value)
    is_active_flag: Mapped[bool] = mapped_column(db.Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    assigned_groups = relationship(
        "Group", secondary=group_teachers, back_populates="teachers", order_by="Group.name",
    )

    # helpers
    def set_password(self, raw: str):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password_hash, raw)

    @property
    def assigned_group_ids(self) -> set[int]:
        return {g.id for g in self.assigned_groups}

    # Flask-Login ожидает .is_active
    @property
    def is_active(self):
        return bool(self.is_active_flag)

    def __repr__(self):
        return f"<User {self.email} {self.role}>"

@login_manager.user_loader
def load_user(user_id: str):
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None
