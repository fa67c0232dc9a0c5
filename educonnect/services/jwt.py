"""JWT Token Service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from educonnect.config import ConfigError, Settings, get_settings

logger = logging.getLogger("educonnect.tokens")

SESSION = "session"
VERIFY_EMAIL = "verify_email"
RESET_PASSWORD = "reset_password"


class TokenError(Exception):
    """Base class for token verification failures."""


class MalformedTokenError(TokenError):
    """The token could not be decoded at all."""


class InvalidSignatureError(TokenError):
    """The token was tampered with, signed with another key or has bad claims."""


class ExpiredTokenError(TokenError):
    """The token is past its expiry."""


@dataclass(frozen=True)
class TokenClaims:
    """Verified identity claims carried by a token."""

    subject_id: int
    role: str
    username: str
    issued_at: datetime
    expires_at: datetime
    purpose: str = SESSION
    fingerprint: str | None = None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JWTService:
    """Handles JWT token creation and validation."""

    def __init__(self, settings: Settings, clock: Callable[[], datetime] = _utc_now) -> None:
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.session_ttl = timedelta(hours=settings.SESSION_TOKEN_HOURS)
        self.email_ttl = timedelta(minutes=settings.EMAIL_TOKEN_MINUTES)
        self._clock = clock

    def issue(
        self,
        subject_id: int,
        role: str,
        username: str,
        ttl: timedelta | None = None,
        purpose: str = SESSION,
        fingerprint: str | None = None,
    ) -> str:
        """Sign a claim set that expires ``ttl`` from now."""
        if not self.secret_key:
            raise ConfigError("JWT_SECRET_KEY is not set")

        issued_at = self._clock()
        expires_at = issued_at + (ttl if ttl is not None else self.session_ttl)
        payload = {
            "sub": str(subject_id),
            "role": role,
            "username": username,
            "purpose": purpose,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        if fingerprint is not None:
            payload["pwv"] = fingerprint
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def create_session_token(self, user) -> str:
        return self.issue(user.id, user.role, user.username)

    def create_email_token(self, user, purpose: str, fingerprint: str | None = None) -> str:
        return self.issue(user.id, user.role, user.username, ttl=self.email_ttl, purpose=purpose, fingerprint=fingerprint)

    def verify(self, token: str, purpose: str = SESSION) -> TokenClaims:
        """Verify a token and return its claims.

        Raises:
            MalformedTokenError: the token is not a decodable JWT.
            InvalidSignatureError: signature, claims or purpose are wrong.
            ExpiredTokenError: the token is past its ``exp``.
        """
        if not self.secret_key:
            raise ConfigError("JWT_SECRET_KEY is not set")

        try:
            jwt.get_unverified_header(token)
        except JWTError as e:
            raise MalformedTokenError("Token could not be decoded") from e

        try:
            # Expiry is checked below against our own clock
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as e:
            raise InvalidSignatureError("Token signature verification failed") from e

        try:
            claims = TokenClaims(
                subject_id=int(payload["sub"]),
                role=str(payload["role"]),
                username=str(payload["username"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
                purpose=str(payload.get("purpose", SESSION)),
                fingerprint=payload.get("pwv"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidSignatureError("Token claims are incomplete") from e

        if claims.purpose != purpose:
            raise InvalidSignatureError(f"Expected a {purpose} token, got {claims.purpose}")
        if self._clock() >= claims.expires_at:
            raise ExpiredTokenError("Token has expired")
        return claims

    def decode_token(self, token: str, purpose: str = SESSION) -> TokenClaims | None:
        """Verify a token, returning None instead of raising."""
        try:
            return self.verify(token, purpose)
        except TokenError as e:
            logger.info("Rejected %s token: %s", purpose, e)
            return None


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService(get_settings())
    return _jwt_service
