"""
REST API routes — health check and task CRUD.

Every task route requires a verified identity and scopes its statement by
the identity's account id.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_identity
from auth.jwt import SessionClaims
from database.helpers import delete_task, insert_task, list_tasks, set_task_completed
from utils.errors import NotFound
from utils.schemas import (
    CompleteTaskRequest,
    CreateTaskRequest,
    StatusResponse,
    TaskListResponse,
    TaskOut,
    TaskResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()
tasks_router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/health", response_model=StatusResponse)
async def health() -> Dict[str, Any]:
    return {"success": True, "message": "EasyHomework API is running!"}


@tasks_router.get("", response_model=TaskListResponse)
async def get_tasks(
    session: AsyncSession = Depends(db_session),
    identity: SessionClaims = Depends(get_current_identity),
) -> Dict[str, Any]:
    tasks = await list_tasks(session, identity.user_id)
    return {"success": True, "tasks": [TaskOut.model_validate(t) for t in tasks]}


@tasks_router.post("", response_model=TaskResponse)
async def create_task(
    req: CreateTaskRequest,
    session: AsyncSession = Depends(db_session),
    identity: SessionClaims = Depends(get_current_identity),
) -> Dict[str, Any]:
    task = await insert_task(
        session,
        identity.user_id,
        title=req.title,
        child_name=req.child_name,
        category=req.category,
        due_date=req.due_date,
    )
    logger.info("Task %s created for user %s", task.id, identity.user_id)
    return {"success": True, "task": TaskOut.model_validate(task)}


@tasks_router.patch("/{task_id}", response_model=TaskResponse)
async def complete_task(
    task_id: int,
    req: CompleteTaskRequest,
    session: AsyncSession = Depends(db_session),
    identity: SessionClaims = Depends(get_current_identity),
) -> Dict[str, Any]:
    """Toggle completion; ``completed_at`` follows the flag."""
    task = await set_task_completed(
        session,
        identity.user_id,
        task_id,
        req.completed,
        datetime.now(timezone.utc),
    )
    if task is None:
        raise NotFound()
    logger.info("Task %s completed=%s", task_id, req.completed)
    return {"success": True, "task": TaskOut.model_validate(task)}


@tasks_router.delete("/{task_id}", response_model=StatusResponse, response_model_exclude_none=True)
async def remove_task(
    task_id: int,
    session: AsyncSession = Depends(db_session),
    identity: SessionClaims = Depends(get_current_identity),
) -> Dict[str, Any]:
    if not await delete_task(session, identity.user_id, task_id):
        raise NotFound()
    logger.info("Task %s deleted", task_id)
    return {"success": True}
