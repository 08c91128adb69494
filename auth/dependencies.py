"""
FastAPI dependencies for authentication.

Provides ``db_session`` and ``get_current_identity`` dependencies that
are used across all protected routes.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import SessionClaims, TokenError, TokenService
from database.session import get_db_session
from utils.errors import Forbidden, Unauthenticated

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token of a ``Bearer <token>`` header, else ``None``."""
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX):].strip()
    return token or None


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    tokens: TokenService = Depends(get_token_service),
) -> SessionClaims:
    """
    Extract and verify the Bearer token, returning the decoded claims.

    The claims are also attached to ``request.state.identity``.  Handlers
    must take the owning account id from here and nowhere else.
    """
    token = bearer_token(authorization)
    if token is None:
        raise Unauthenticated()

    try:
        claims = tokens.verify(token)
    except TokenError as exc:
        logger.info("Rejected token on %s: %s", request.url.path, type(exc).__name__)
        raise Forbidden() from exc

    request.state.identity = claims
    return claims
