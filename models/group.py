from __future__ import annotations
from datetime import datetime

from sqlalchemy import DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from extensions import db
from .user import group_teachers

class Group(db.Model):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False, index=True)
    location: Mapped[str | None] = mapped_column(db.String(255))
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    teachers = relationship(
        "User", secondary=group_teachers, back_populates="assigned_groups", order_by="User.name",
    )
    # удаление группы удаляет её учеников, но не родителей
    students = relationship(
        "Student", back_populates="group", cascade="all", order_by="Student.id",
    )
    schedules = relationship("Schedule", back_populates="group", cascade="all")
    updates = relationship("Update", back_populates="group", cascade="all")

    def __repr__(self):
        return f"<Group {self.name}>"
