"""
Teacher delegation codes.

Each parent account owns one uppercase alphanumeric code.  Whoever presents
it at ``/teacher/login`` receives a session for the *parent's* account: the
token carries the parent's id and email, so it grants exactly the parent's
data access.  The teacher's name and phone are self-asserted and only ride
along as display data.
"""

from __future__ import annotations

import secrets
import string
from typing import Any, Dict, Optional

from auth.jwt import SessionClaims, TeacherProfile

TEACHER_CODE_ALPHABET = string.ascii_uppercase + string.digits
TEACHER_ID_PREFIX = "teacher_"


def generate_teacher_code(length: int = 9) -> str:
    """Draw a fresh random delegation code."""
    return "".join(secrets.choice(TEACHER_CODE_ALPHABET) for _ in range(length))


def normalize_teacher_code(code: str) -> str:
    return code.strip().upper()


def teacher_claims(parent, name: Optional[str], phone: Optional[str]) -> SessionClaims:
    """Claims for a delegated session on behalf of ``parent``."""
    return SessionClaims(
        user_id=parent.id,
        email=parent.email,
        teacher=TeacherProfile(name=name, phone=phone),
    )


def teacher_identity(
    parent,
    name: Optional[str],
    phone: Optional[str],
    supplied_code: str,
) -> Dict[str, Any]:
    """Synthetic user object returned to the teacher's client."""
    return {
        "id": f"{TEACHER_ID_PREFIX}{parent.id}",
        "name": name,
        "phone": phone,
        "teacher_code": supplied_code,
        "parent_id": parent.id,
        "parent_name": parent.name,
        "parent_email": parent.email,
        "children": list(parent.children or []),
    }
