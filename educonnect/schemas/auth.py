"""Pydantic schemas for authentication endpoints."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, EmailStr, Field, StringConstraints

from educonnect.schemas.base import CamelModel
from educonnect.services.passwords import MAX_PASSWORD_BYTES


def _fits_bcrypt(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


Password = Annotated[str, Field(min_length=1), AfterValidator(_fits_bcrypt)]
Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]


class NotificationPreferences(CamelModel):
    new_answers: bool = True
    upvotes: bool = True
    badges: bool = True


class ProfileFields(CamelModel):
    """Optional profile data accepted at sign-up."""

    bio: str | None = Field(default=None, max_length=150)
    avatar: str | None = None
    gender: Literal["Male", "Female", "Other"] | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    class_grade: str | None = None
    school_name: str | None = None
    notification_preferences: NotificationPreferences | None = None
    preferred_categories: list[int] | None = None

    def profile(self) -> dict:
        return self.model_dump(
            include={
                "bio",
                "avatar",
                "gender",
                "age",
                "class_grade",
                "school_name",
                "notification_preferences",
                "preferred_categories",
            }
        )


class RegisterRequest(ProfileFields):
    username: Username
    email: EmailStr
    password: Password


class FederatedAuthRequest(ProfileFields):
    id_token: str = Field(min_length=1)
    email: EmailStr
    username: Username | None = None


class LoginRequest(CamelModel):
    email: str | None = None
    username: str | None = None
    password: str | None = None


class LoginUser(CamelModel):
    last_login: datetime | None


class LoginResponse(CamelModel):
    message: str
    user: LoginUser


class ForgotPasswordRequest(CamelModel):
    email: str


class ResetPasswordRequest(CamelModel):
    new_password: Password
    confirm_password: Password


class MessageResponse(CamelModel):
    message: str
