"""Authentication service."""

import hashlib
import logging
from dataclasses import dataclass
from typing import Any

from email_validator import EmailNotValidError, validate_email
from fastapi import BackgroundTasks
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from educonnect.config import ConfigError
from educonnect.database import utcnow
from educonnect.errors import ErrorKind, ServiceResult
from educonnect.models.category import Category
from educonnect.models.user import User, normalize_email, username_key
from educonnect.services.identity import (
    GoogleIdentityVerifier,
    IdentityError,
    IdentityProviderError,
    get_identity_verifier,
)
from educonnect.services.jwt import RESET_PASSWORD, SESSION, VERIFY_EMAIL, JWTService, get_jwt_service
from educonnect.services.mailer import MailService, get_mail_service
from educonnect.services.passwords import check_password

logger = logging.getLogger("educonnect.auth")

DUPLICATE_EMAIL = "User already exists"
DUPLICATE_USERNAME = "Username not available"
INVALID_RESET = "Invalid or expired reset link"


@dataclass
class AuthResult(ServiceResult[User]):
    """Result of an authentication flow step.

    ``token`` is the session token to hand back in the cookie and
    ``created`` tells the router whether a new account was made.
    """

    token: str | None = None
    created: bool = False


def looks_like_email(identifier: str) -> bool:
    """True when ``identifier`` is a syntactically valid address."""
    try:
        validate_email(identifier, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def fingerprint(value: str | None) -> str:
    """Short digest binding an emailed token to the state it was issued for."""
    return hashlib.sha256((value or "").encode("utf-8")).hexdigest()[:16]


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def find_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username_key == username_key(username)).first()


class AuthService:
    """Handles registration, sign-in, email verification and password reset."""

    def __init__(
        self,
        jwt_service: JWTService,
        mail_service: MailService,
        identity_verifier: GoogleIdentityVerifier,
    ) -> None:
        self.jwt = jwt_service
        self.mail = mail_service
        self.identity = identity_verifier

    # --- helpers ---

    def _duplicate(self, db: Session, email: str, username: str) -> AuthResult | None:
        if find_user_by_email(db, email):
            return AuthResult.fail(ErrorKind.CONFLICT, DUPLICATE_EMAIL)
        if find_user_by_username(db, username):
            return AuthResult.fail(ErrorKind.CONFLICT, DUPLICATE_USERNAME)
        return None

    def _save_new_user(self, db: Session, user: User) -> AuthResult:
        """Insert ``user`` and sign it in.

        The unique constraints are the authoritative duplicate guard. The
        session token is issued before the commit so a token failure leaves
        no account behind.
        """
        db.add(user)
        try:
            db.flush()
            token = self.jwt.create_session_token(user)
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info("Registration for %s lost a uniqueness race", user.email)
            conflict = self._duplicate(db, user.email, user.username)
            return conflict or AuthResult.fail(ErrorKind.CONFLICT, DUPLICATE_EMAIL)
        except ConfigError:
            db.rollback()
            raise
        db.refresh(user)
        return AuthResult(success=True, value=user, token=token, created=True)

    def queue_verification(self, tasks: BackgroundTasks | None, user: User) -> None:
        token = self.jwt.create_email_token(user, VERIFY_EMAIL, fingerprint=fingerprint(user.email))
        if tasks is None:
            self.mail.send_verification_email(user.email, user.username, token)
        else:
            tasks.add_task(self.mail.send_verification_email, user.email, user.username, token)

    def _signed_in(self, user: User) -> AuthResult:
        return AuthResult(success=True, value=user, token=self.jwt.create_session_token(user))

    def _resolve_categories(self, db: Session, category_ids: list[int] | None) -> list[Category] | None:
        """Load categories by id. Returns None when any id is unknown."""
        if not category_ids:
            return []
        wanted = set(category_ids)
        categories = db.query(Category).filter(Category.id.in_(wanted)).all()
        if len(categories) != len(wanted):
            return None
        return categories

    def _new_user(self, db: Session, username: str, email: str, profile: dict[str, Any]) -> User | None:
        profile = dict(profile)
        categories = self._resolve_categories(db, profile.pop("preferred_categories", None))
        if categories is None:
            return None
        prefs = profile.pop("notification_preferences", None) or {}
        user = User(
            username=username.strip(),
            username_key=username_key(username),
            email=normalize_email(email),
            role="student",
            verified=False,
            notify_new_answers=prefs.get("new_answers", True),
            notify_upvotes=prefs.get("upvotes", True),
            notify_badges=prefs.get("badges", True),
            **{k: v for k, v in profile.items() if v is not None},
        )
        user.preferred_categories = categories
        return user

    # --- flows ---

    def register(
        self,
        db: Session,
        username: str,
        email: str,
        password: str,
        profile: dict[str, Any] | None = None,
        tasks: BackgroundTasks | None = None,
    ) -> AuthResult:
        """Register a password account and sign it in."""
        conflict = self._duplicate(db, email, username)
        if conflict:
            return conflict

        user = self._new_user(db, username, email, profile or {})
        if user is None:
            return AuthResult.fail(ErrorKind.VALIDATION, "Unknown category in preferred categories")
        user.password = password
        user.credential_account = False

        result = self._save_new_user(db, user)
        if not result.success:
            return result

        logger.info("Registered user %s (id=%s)", user.username, user.id)
        self.queue_verification(tasks, user)
        return result

    def federated_sign_in(
        self,
        db: Session,
        assertion: str,
        username: str | None,
        email: str,
        profile: dict[str, Any] | None = None,
        tasks: BackgroundTasks | None = None,
    ) -> AuthResult:
        """Sign in or sign up with a third-party identity assertion."""
        try:
            identity = self.identity.verify(assertion)
        except IdentityError as e:
            return AuthResult.fail(ErrorKind.AUTH, str(e))
        except IdentityProviderError as e:
            return AuthResult.fail(ErrorKind.DEPENDENCY, str(e))

        if identity.email and normalize_email(identity.email) != normalize_email(email):
            return AuthResult.fail(ErrorKind.VALIDATION, "Identity token does not match the provided email")

        existing = find_user_by_email(db, email)
        if existing:
            if not existing.is_federated:
                return AuthResult.fail(
                    ErrorKind.CONFLICT, "Illegal parameters: User already exists as a password account"
                )
            if existing.external_identity_id and existing.external_identity_id != identity.subject:
                return AuthResult.fail(ErrorKind.AUTH, "Identity does not match this account")
            existing.last_login_at = utcnow()
            db.commit()
            logger.info("Federated login for user %s", existing.username)
            return self._signed_in(existing)

        if not username:
            return AuthResult.fail(ErrorKind.VALIDATION, "Username is required to create an account")
        if find_user_by_username(db, username):
            return AuthResult.fail(ErrorKind.CONFLICT, DUPLICATE_USERNAME)
        if db.query(User).filter(User.external_identity_id == identity.subject).first():
            return AuthResult.fail(ErrorKind.CONFLICT, "Identity is already linked to another account")

        user = self._new_user(db, username, email, profile or {})
        if user is None:
            return AuthResult.fail(ErrorKind.VALIDATION, "Unknown category in preferred categories")
        user.credential_account = True
        user.external_identity_id = identity.subject
        user.password_hash = None

        result = self._save_new_user(db, user)
        if not result.success:
            return result

        logger.info("Registered federated user %s (id=%s)", user.username, user.id)
        self.queue_verification(tasks, user)
        return result

    def authenticate(self, db: Session, identifier: str | None, password: str | None) -> AuthResult:
        """Authenticate by email or username."""
        if not identifier:
            return AuthResult.fail(ErrorKind.VALIDATION, "Email or username is required")

        if looks_like_email(identifier):
            user = find_user_by_email(db, identifier)
        else:
            user = find_user_by_username(db, identifier)
        if not user:
            return AuthResult.fail(ErrorKind.NOT_FOUND, "User not found")

        # Federated accounts have no local password to compare
        if not user.is_federated and not check_password(password or "", user.password_hash):
            logger.info("Failed password login for user %s", user.username)
            return AuthResult.fail(ErrorKind.AUTH, "Invalid credentials")

        user.last_login_at = utcnow()
        db.commit()
        return self._signed_in(user)

    def verify_email(self, db: Session, link_token: str | None, session_token: str | None) -> ServiceResult[User]:
        """Mark the account behind the verification link (or session cookie) verified."""
        claims = self.jwt.decode_token(link_token, VERIFY_EMAIL) if link_token else None
        user = db.get(User, claims.subject_id) if claims else None
        # A link issued for an earlier email address no longer counts
        if user and claims.fingerprint != fingerprint(user.email):
            logger.info("Stale verification link for user %s", user.username)
            claims = user = None
        # Links opened in the browser that registered also carry the session cookie
        if claims is None and session_token:
            claims = self.jwt.decode_token(session_token, SESSION)
            if claims is None:
                return ServiceResult.fail(ErrorKind.VALIDATION, "Invalid or expired token")
            user = db.get(User, claims.subject_id)
        if claims is None:
            if not link_token:
                return ServiceResult.fail(ErrorKind.VALIDATION, "We couldn't find your token")
            return ServiceResult.fail(ErrorKind.VALIDATION, "Invalid or expired token")

        if not user:
            return ServiceResult.fail(
                ErrorKind.NOT_FOUND,
                "Hmm, we couldn't find your account. Are you sure you're using the correct email?",
            )
        if user.verified:
            return ServiceResult.fail(
                ErrorKind.CONFLICT,
                "Great news! Your email is already verified. You can log in and start exploring.",
            )

        user.verified = True
        db.commit()
        logger.info("Verified email for user %s", user.username)
        return ServiceResult.ok(user)

    def request_password_reset(
        self, db: Session, email: str, tasks: BackgroundTasks | None = None
    ) -> ServiceResult[str]:
        """Email a one-hour reset link to the account holder.

        Unknown emails are reported as not found, which reveals whether an
        account exists.
        """
        user = find_user_by_email(db, email)
        if not user:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "User not found")
        if user.is_federated:
            return ServiceResult.fail(ErrorKind.VALIDATION, "This account signs in with Google and has no password")

        token = self.jwt.create_email_token(user, RESET_PASSWORD, fingerprint=fingerprint(user.password_hash))
        if tasks is None:
            self.mail.send_password_reset_email(user.email, user.username, token)
        else:
            tasks.add_task(self.mail.send_password_reset_email, user.email, user.username, token)
        return ServiceResult.ok(token)

    def reset_password(
        self, db: Session, token: str, new_password: str, confirm_password: str
    ) -> ServiceResult[User]:
        """Set a new password from a reset link."""
        claims = self.jwt.decode_token(token, RESET_PASSWORD)
        if claims is None:
            return ServiceResult.fail(ErrorKind.VALIDATION, INVALID_RESET)

        user = db.get(User, claims.subject_id)
        # A changed password hash invalidates links issued before the change
        if not user or user.is_federated or claims.fingerprint != fingerprint(user.password_hash):
            return ServiceResult.fail(ErrorKind.VALIDATION, INVALID_RESET)

        if new_password != confirm_password:
            return ServiceResult.fail(ErrorKind.VALIDATION, "Passwords do not match")
        if check_password(new_password, user.password_hash):
            return ServiceResult.fail(ErrorKind.VALIDATION, "New password cannot be the same as the old one")

        user.password = new_password
        db.commit()
        logger.info("Password reset for user %s", user.username)
        return ServiceResult.ok(user)


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(get_jwt_service(), get_mail_service(), get_identity_verifier())
    return _auth_service
