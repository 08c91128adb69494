"""
Auth API routes — register, login, teacher login.

None of these routes sit behind the auth gate: they are what issues tokens.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from auth.delegation import (
    generate_teacher_code,
    normalize_teacher_code,
    teacher_claims,
    teacher_identity,
)
from auth.dependencies import db_session, get_token_service
from auth.jwt import SessionClaims, TokenService
from auth.password import hash_password, verify_password
from database.helpers import (
    TeacherCodeTaken,
    get_user_by_email,
    get_user_by_teacher_code,
    insert_user,
)
from database.models import User
from utils.errors import InvalidCredentials, InvalidTeacherCode, TeacherCodeUnavailable
from utils.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TeacherAuthResponse,
    TeacherLoginRequest,
    UserOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])
teacher_router = APIRouter(tags=["teacher"])


def _primary_session(user: User, tokens: TokenService) -> Dict[str, Any]:
    token = tokens.issue(SessionClaims(user_id=user.id, email=user.email))
    return {
        "success": True,
        "user": UserOut.model_validate(user),
        "access_token": token,
    }


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse)
async def register(
    req: RegisterRequest,
    request: Request,
    session: AsyncSession = Depends(db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Register a new parent account."""
    settings = request.app.state.settings
    password_hash = await run_in_threadpool(
        hash_password, req.password, settings.bcrypt_rounds
    )

    user = None
    for attempt in range(1, settings.teacher_code_max_attempts + 1):
        code = generate_teacher_code(settings.teacher_code_length)
        try:
            user = await insert_user(
                session,
                name=req.name,
                email=req.email,
                phone=req.phone,
                password_hash=password_hash,
                children=req.children,
                teacher_code=code,
            )
            break
        except TeacherCodeTaken:
            logger.warning("Teacher code collision (attempt %d)", attempt)
    if user is None:
        raise TeacherCodeUnavailable()

    logger.info("Registered user %s", user.id)
    return _primary_session(user, tokens)


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Login with email + password."""
    user = await get_user_by_email(session, req.email)
    if user is None:
        raise InvalidCredentials()

    valid = await run_in_threadpool(verify_password, req.password, user.password_hash)
    if not valid:
        raise InvalidCredentials()

    logger.info("Login: user %s", user.id)
    return _primary_session(user, tokens)


@teacher_router.post("/login", response_model=TeacherAuthResponse)
async def teacher_login(
    req: TeacherLoginRequest,
    session: AsyncSession = Depends(db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Open a delegated session on the account that owns ``teacher_code``."""
    parent = await get_user_by_teacher_code(session, normalize_teacher_code(req.teacher_code))
    if parent is None:
        raise InvalidTeacherCode()

    token = tokens.issue(teacher_claims(parent, req.name, req.phone))
    logger.info("Teacher login on behalf of user %s", parent.id)
    return {
        "success": True,
        "user": teacher_identity(parent, req.name, req.phone, req.teacher_code),
        "access_token": token,
    }
