"""
Session token creation and verification.

Tokens are compact HS256 JWTs (``header.payload.signature``).  The payload
is only base64url-encoded JSON, so it must never carry secrets.

Wire payload::

    {"userId": 42, "email": "a@b.c", "iat": ..., "exp": ...}

Teacher sessions add ``userType: "teacher"``, ``teacherName`` and
``teacherPhone``.  The last two are whatever the caller typed at teacher
login; they are kept in ``SessionClaims.teacher`` and never used to decide
access.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import jwt
from pydantic import BaseModel, ConfigDict

TEACHER_USER_TYPE = "teacher"


# ── Errors ─────────────────────────────────────────────────────────────


class TokenError(Exception):
    """Base class for every token rejection."""


class InvalidSignature(TokenError):
    pass


class TokenExpired(TokenError):
    pass


class MalformedToken(TokenError):
    pass


# ── Claims ─────────────────────────────────────────────────────────────


class TeacherProfile(BaseModel):
    """Self-asserted display data of a delegated teacher session."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    phone: Optional[str] = None


class SessionClaims(BaseModel):
    """Decoded identity of a session token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    email: str
    teacher: Optional[TeacherProfile] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    @property
    def is_teacher(self) -> bool:
        return self.teacher is not None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"userId": self.user_id, "email": self.email}
        if self.teacher is not None:
            payload["userType"] = TEACHER_USER_TYPE
            payload["teacherName"] = self.teacher.name
            payload["teacherPhone"] = self.teacher.phone
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "SessionClaims":
        try:
            user_id = int(payload["userId"])
            email = str(payload["email"])
            exp = int(payload["exp"])
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedToken(f"missing or invalid claim: {exc}") from exc

        teacher = None
        if payload.get("userType") == TEACHER_USER_TYPE:
            teacher = TeacherProfile(
                name=payload.get("teacherName"),
                phone=payload.get("teacherPhone"),
            )
        iat = payload.get("iat")
        return cls(
            user_id=user_id,
            email=email,
            teacher=teacher,
            issued_at=_from_timestamp(iat) if isinstance(iat, (int, float)) else None,
            expires_at=_from_timestamp(exp),
        )


def _from_timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


# ── Issuer / verifier ──────────────────────────────────────────────────


class TokenService:
    """Signs and verifies session tokens with one process-wide secret."""

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._ttl_seconds = ttl_seconds
        self._algorithm = algorithm
        self._clock = clock

    @classmethod
    def from_settings(cls, settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            ttl_seconds=settings.jwt_expiry_seconds,
            algorithm=settings.jwt_algorithm,
        )

    def issue(self, claims: SessionClaims) -> str:
        """Create a signed token for ``claims`` expiring ``ttl`` from now."""
        now = int(self._clock())
        payload = claims.to_payload()
        payload["iat"] = now
        payload["exp"] = now + self._ttl_seconds
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> SessionClaims:
        """
        Verify ``token`` and return its claims.

        Raises ``InvalidSignature``, ``TokenExpired`` or ``MalformedToken``.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": ["exp"],
                },
            )
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignature(str(exc)) from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedToken(str(exc)) from exc

        claims = SessionClaims.from_payload(payload)
        if self._clock() >= claims.expires_at.timestamp():
            raise TokenExpired("token expired")
        return claims
