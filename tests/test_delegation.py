"""
Tests for teacher delegation codes and delegated identities.
"""

from types import SimpleNamespace

from auth.delegation import (
    TEACHER_CODE_ALPHABET,
    generate_teacher_code,
    normalize_teacher_code,
    teacher_claims,
    teacher_identity,
)


def _parent():
    return SimpleNamespace(
        id=12,
        name="Pat Parent",
        email="parent@example.com",
        children=["Ana", "Ben"],
        teacher_code="AB12CD34E",
    )


class TestTeacherCodes:
    def test_generated_codes_are_uppercase_alphanumeric(self):
        code = generate_teacher_code()
        assert len(code) == 9
        assert all(ch in TEACHER_CODE_ALPHABET for ch in code)

    def test_length_is_configurable(self):
        assert len(generate_teacher_code(8)) == 8

    def test_codes_are_random(self):
        assert len({generate_teacher_code() for _ in range(50)}) > 1

    def test_normalize(self):
        assert normalize_teacher_code("  ab12cd34e ") == "AB12CD34E"


class TestDelegatedIdentity:
    def test_claims_carry_parent_identity(self):
        claims = teacher_claims(_parent(), "Ms. Frizzle", "555-0199")
        assert claims.user_id == 12
        assert claims.email == "parent@example.com"
        assert claims.is_teacher
        assert claims.teacher.name == "Ms. Frizzle"

    def test_identity_is_prefixed_and_shares_children(self):
        user = teacher_identity(_parent(), "Ms. Frizzle", "555-0199", "ab12cd34e")
        assert user["id"] == "teacher_12"
        assert user["parent_id"] == 12
        assert user["parent_email"] == "parent@example.com"
        assert user["children"] == ["Ana", "Ben"]
        assert user["teacher_code"] == "ab12cd34e"
        assert "password_hash" not in user
