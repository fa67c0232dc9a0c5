"""User profile service."""

import logging
from typing import Any

from email_validator import EmailNotValidError, validate_email
from fastapi import BackgroundTasks
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from educonnect.errors import ErrorKind, ServiceResult
from educonnect.models.user import GENDERS, ROLES, User, normalize_email, username_key
from educonnect.services.auth import find_user_by_email, find_user_by_username, get_auth_service
from educonnect.services.passwords import check_password

logger = logging.getLogger("educonnect.users")

ROLE_MANAGERS = ("admin", "superAdmin")
PROFILE_FIELDS = ("bio", "avatar", "age", "class_grade", "school_name")
NOTIFICATION_COLUMNS = {"new_answers": "notify_new_answers", "upvotes": "notify_upvotes", "badges": "notify_badges"}


class UserService:
    """Handles profile reads and self-service account updates."""

    def get_user(self, db: Session, user_id: int) -> User | None:
        return db.get(User, user_id)

    def get_user_by_username(self, db: Session, username: str) -> User | None:
        return find_user_by_username(db, username)

    def update_password(self, db: Session, user_id: int, old_password: str, new_password: str) -> ServiceResult[None]:
        """Change the caller's password after checking the current one."""
        user = db.get(User, user_id)
        if not user:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "User not found")
        if user.is_federated:
            return ServiceResult.fail(ErrorKind.VALIDATION, "This account signs in with Google and has no password")
        if not check_password(old_password, user.password_hash):
            return ServiceResult.fail(ErrorKind.VALIDATION, "Old password does not match")
        if old_password == new_password:
            return ServiceResult.fail(ErrorKind.VALIDATION, "New password cannot be the same as the old one")

        user.password = new_password
        db.commit()
        logger.info("Password updated for user %s", user.username)
        return ServiceResult.ok()

    def update_role(self, db: Session, caller_role: str, username: str, new_role: str) -> ServiceResult[User]:
        """Change another user's role. Only admins and super admins may do this."""
        if new_role not in ROLES:
            return ServiceResult.fail(ErrorKind.VALIDATION, "Invalid role provided")
        if caller_role not in ROLE_MANAGERS:
            return ServiceResult.fail(ErrorKind.FORBIDDEN, "You don't have permission to update roles")

        user = find_user_by_username(db, username)
        if not user:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "User not found")

        user.role = new_role
        db.commit()
        logger.info("Role of %s set to %s", user.username, new_role)
        return ServiceResult.ok(user)

    def update_info(
        self,
        db: Session,
        user_id: int,
        changes: dict[str, Any],
        tasks: BackgroundTasks | None = None,
    ) -> ServiceResult[User]:
        """Apply profile changes submitted by the user themselves."""
        if changes.get("role") is not None or changes.get("password") is not None:
            return ServiceResult.fail(
                ErrorKind.VALIDATION, "Updating role or password is not allowed via this endpoint"
            )

        user = db.get(User, user_id)
        if not user:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "User not found")

        updates: dict[str, Any] = {}

        gender = changes.get("gender")
        if gender:
            if gender not in GENDERS:
                return ServiceResult.fail(ErrorKind.VALIDATION, "Invalid gender value")
            updates["gender"] = gender

        email = changes.get("email")
        email_changed = False
        if email:
            try:
                validate_email(email, check_deliverability=False)
            except EmailNotValidError:
                return ServiceResult.fail(ErrorKind.VALIDATION, "Invalid email format")
            existing = find_user_by_email(db, email)
            if existing and existing.id != user.id:
                return ServiceResult.fail(ErrorKind.CONFLICT, "Email already exists")
            email_changed = normalize_email(email) != user.email
            updates["email"] = normalize_email(email)

        username = changes.get("username")
        if username:
            existing = find_user_by_username(db, username)
            if existing and existing.id != user.id:
                return ServiceResult.fail(ErrorKind.CONFLICT, "Username already exists")
            updates["username"] = username.strip()
            updates["username_key"] = username_key(username)

        for field in PROFILE_FIELDS:
            if changes.get(field) is not None:
                updates[field] = changes[field]

        prefs = changes.get("notification_preferences")
        if prefs:
            for key, column in NOTIFICATION_COLUMNS.items():
                if prefs.get(key) is not None:
                    updates[column] = prefs[key]

        if not updates:
            return ServiceResult.fail(ErrorKind.VALIDATION, "No valid fields to update")

        for column, value in updates.items():
            setattr(user, column, value)
        if email_changed:
            user.verified = False

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            return ServiceResult.fail(ErrorKind.CONFLICT, "Email or username already exists")
        db.refresh(user)

        if email_changed:
            get_auth_service().queue_verification(tasks, user)
        return ServiceResult.ok(user)


_user_service: UserService | None = None


def get_user_service() -> UserService:
    """Get singleton user service instance."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
