"""
Pydantic schemas for the EasyHomework API.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ═══════════════════════════════════════════════════════════════════════════════
# Auth — requests
# ═══════════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=255)
    phone: Optional[str] = Field(None, max_length=32)
    password: str = Field(..., min_length=1, max_length=128)
    children: List[str] = Field(default_factory=list)


class LoginRequest(BaseModel):
    email: str
    password: str


class TeacherLoginRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=128)
    phone: Optional[str] = Field(None, max_length=32)
    teacher_code: str = Field(..., min_length=1, max_length=32)


# ═══════════════════════════════════════════════════════════════════════════════
# Auth — responses
# ═══════════════════════════════════════════════════════════════════════════════


class UserOut(BaseModel):
    """Account as shown to its owner.  Never includes the password digest."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    children: Optional[List[str]] = Field(default_factory=list)
    teacher_code: str
    subscription_status: Optional[str] = None
    trial_start_date: Optional[datetime] = None

    @field_validator("children", mode="before")
    @classmethod
    def _null_children(cls, value):
        # Older rows were written with a NULL children column.
        return [] if value is None else value


class TeacherOut(BaseModel):
    id: str
    name: Optional[str] = None
    phone: Optional[str] = None
    teacher_code: str
    parent_id: int
    parent_name: Optional[str] = None
    parent_email: str
    children: List[str] = Field(default_factory=list)


class AuthResponse(BaseModel):
    success: bool = True
    user: UserOut
    access_token: str


class TeacherAuthResponse(BaseModel):
    success: bool = True
    user: TeacherOut
    access_token: str


# ═══════════════════════════════════════════════════════════════════════════════
# Tasks
# ═══════════════════════════════════════════════════════════════════════════════


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1)
    child_name: Optional[str] = None
    category: Optional[str] = None
    due_date: Optional[date] = None


class CompleteTaskRequest(BaseModel):
    completed: bool


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    child_name: Optional[str] = None
    category: Optional[str] = None
    due_date: Optional[date] = None
    completed: bool = False
    completed_at: Optional[datetime] = None
    points: Optional[int] = None
    created_at: Optional[datetime] = None


class TaskResponse(BaseModel):
    success: bool = True
    task: TaskOut


class TaskListResponse(BaseModel):
    success: bool = True
    tasks: List[TaskOut]


class StatusResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
