"""Pydantic schemas for user profile endpoints."""

from datetime import datetime

from pydantic import Field

from educonnect.schemas.auth import NotificationPreferences, Password, Username
from educonnect.schemas.base import CamelModel
from educonnect.schemas.category import CategoryResponse
from educonnect.schemas.question import QuestionResponse


class BadgeData(CamelModel):
    badges_earned: int = 0
    badge_levels: list[str] = []
    progress: dict[str, float] = {}


class PublicUserResponse(CamelModel):
    """What anyone may see about a user."""

    id: int
    username: str
    bio: str | None = None
    avatar: str | None = None
    role: str
    gender: str | None = None
    age: int | None = None
    class_grade: str | None = None
    school_name: str | None = None
    badge_data: BadgeData
    created_at: datetime


class UserResponse(PublicUserResponse):
    """The account holder's own view. Never carries the password hash."""

    email: str
    verified: bool
    credential_account: bool
    notification_preferences: NotificationPreferences
    preferred_categories: list[CategoryResponse] = []
    last_login_at: datetime | None = None


class RegisterResponse(CamelModel):
    message: str
    user: UserResponse


class ProfileResponse(CamelModel):
    message: str
    user: UserResponse
    questions: list[QuestionResponse]


class PublicProfileResponse(CamelModel):
    message: str
    user: PublicUserResponse
    questions: list[QuestionResponse]


class UpdatePasswordRequest(CamelModel):
    old_password: str
    new_password: Password


class UpdateRoleRequest(CamelModel):
    new_role: str


class UpdateRoleResponse(CamelModel):
    message: str
    username: str
    role: str


class UpdateInfoRequest(CamelModel):
    """Self-service profile changes. ``role`` and ``password`` are rejected."""

    username: Username | None = None
    email: str | None = None
    gender: str | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    bio: str | None = Field(default=None, max_length=150)
    avatar: str | None = None
    class_grade: str | None = None
    school_name: str | None = None
    notification_preferences: NotificationPreferences | None = None
    role: str | None = None
    password: str | None = None


class UpdateInfoResponse(CamelModel):
    message: str
    user: UserResponse
