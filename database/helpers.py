"""
Database helper functions — one parameterized statement per call.

Task helpers always filter on the owning ``user_id`` so a row owned by
someone else is indistinguishable from a missing one.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Task, User
from utils.errors import EmailTaken

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class TeacherCodeTaken(Exception):
    """The generated teacher code collided with an existing one."""


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return code == UNIQUE_VIOLATION
    return "unique" in str(orig).lower()


def _constraint_name(orig) -> Optional[str]:
    # asyncpg's own error, which carries constraint_name, sits behind
    # SQLAlchemy's adapted exception.
    for candidate in (orig, getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return str(name)
    return None


def _violated_column(exc: IntegrityError) -> Optional[str]:
    orig = exc.orig
    text = _constraint_name(orig)
    if text is None:
        # Only the headline: the DETAIL line echoes the duplicate key value.
        lines = str(orig).splitlines()
        text = lines[0] if lines else ""
    text = text.lower()
    if "teacher_code" in text:
        return "teacher_code"
    if "email" in text:
        return "email"
    return None


# ── Users ──────────────────────────────────────────────────────────────


async def insert_user(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    phone: Optional[str],
    password_hash: str,
    children: List[str],
    teacher_code: str,
) -> User:
    """
    Insert a new account and return it.

    Raises ``EmailTaken`` or ``TeacherCodeTaken`` on a unique violation.
    The insert runs in a savepoint so the caller may retry on the same
    session.
    """
    stmt = (
        insert(User)
        .values(
            name=name,
            email=email,
            phone=phone,
            password_hash=password_hash,
            children=children,
            teacher_code=teacher_code,
        )
        .returning(User)
    )
    try:
        async with session.begin_nested():
            result = await session.execute(stmt)
            user = result.scalar_one()
    except IntegrityError as exc:
        if not _is_unique_violation(exc):
            raise
        column = _violated_column(exc)
        if column == "teacher_code":
            raise TeacherCodeTaken(teacher_code) from exc
        # The original service reported every unique violation as a taken email.
        raise EmailTaken() from exc
    return user


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_teacher_code(session: AsyncSession, teacher_code: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.teacher_code == teacher_code)
    )
    return result.scalar_one_or_none()


# ── Tasks ──────────────────────────────────────────────────────────────


async def list_tasks(session: AsyncSession, user_id: int) -> List[Task]:
    """All tasks owned by ``user_id``, newest first."""
    result = await session.execute(
        select(Task)
        .where(Task.user_id == user_id)
        .order_by(Task.created_at.desc(), Task.id.desc())
    )
    return list(result.scalars().all())


async def insert_task(
    session: AsyncSession,
    user_id: int,
    *,
    title: str,
    child_name: Optional[str] = None,
    category: Optional[str] = None,
    due_date: Optional[date] = None,
) -> Task:
    result = await session.execute(
        insert(Task)
        .values(
            user_id=user_id,
            title=title,
            child_name=child_name,
            category=category,
            due_date=due_date,
            completed=False,
        )
        .returning(Task)
    )
    return result.scalar_one()


async def set_task_completed(
    session: AsyncSession,
    user_id: int,
    task_id: int,
    completed: bool,
    now: datetime,
) -> Optional[Task]:
    """
    Set the completion flag and stamp/clear ``completed_at`` in one UPDATE.

    Returns ``None`` when no task with that id belongs to ``user_id``.
    """
    result = await session.execute(
        update(Task)
        .where(Task.id == task_id, Task.user_id == user_id)
        .values(completed=completed, completed_at=now if completed else None)
        .returning(Task)
        .execution_options(synchronize_session=False, populate_existing=True)
    )
    return result.scalar_one_or_none()


async def delete_task(session: AsyncSession, user_id: int, task_id: int) -> bool:
    """Delete a task owned by ``user_id``; ``False`` if nothing matched."""
    result = await session.execute(
        delete(Task)
        .where(Task.id == task_id, Task.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0
