"""
SQLAlchemy ORM models for the users and tasks tables.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128))
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(32))
    password_hash = Column(String(255), nullable=False)
    children = Column(JSON().with_variant(JSONB(), "postgresql"), default=list)
    teacher_code = Column(String(9), unique=True, nullable=False)
    subscription_status = Column(String(32), default="trial", server_default="trial")
    trial_start_date = Column(DateTime(timezone=True), default=_utcnow)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    child_name = Column(String(128))
    category = Column(String(64))
    due_date = Column(Date)
    completed = Column(Boolean, default=False, server_default="false", nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    points = Column(Integer, default=10, server_default="10")
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    user = relationship("User", back_populates="tasks")

    __table_args__ = (
        Index("ix_tasks_user_created", "user_id", "created_at"),
    )
