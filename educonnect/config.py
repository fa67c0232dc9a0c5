"""Configuration settings for EduConnect."""

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class ConfigError(RuntimeError):
    """Raised when a required setting is missing or unusable."""


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = field(default_factory=lambda: _env("DATABASE_URL", "sqlite:///./educonnect.db"))

    # JWT
    JWT_SECRET_KEY: str = field(default_factory=lambda: _env("JWT_SECRET_KEY"))
    JWT_ALGORITHM: str = field(default_factory=lambda: _env("JWT_ALGORITHM", "HS256"))
    SESSION_TOKEN_HOURS: int = field(default_factory=lambda: int(_env("SESSION_TOKEN_HOURS", "24")))
    EMAIL_TOKEN_MINUTES: int = field(default_factory=lambda: int(_env("EMAIL_TOKEN_MINUTES", "60")))

    # Cookies
    COOKIE_SAMESITE: str = field(default_factory=lambda: _env("COOKIE_SAMESITE", "lax").lower())

    # Mail
    SMTP_HOST: str = field(default_factory=lambda: _env("SMTP_HOST", "smtp.gmail.com"))
    SMTP_PORT: int = field(default_factory=lambda: int(_env("SMTP_PORT", "587")))
    EMAIL: str = field(default_factory=lambda: _env("EMAIL"))
    EMAIL_PASSWORD: str = field(default_factory=lambda: _env("EMAIL_PASSWORD"))
    MAIL_TIMEOUT_SECONDS: float = field(default_factory=lambda: float(_env("MAIL_TIMEOUT_SECONDS", "10")))
    BASE_URL: str = field(default_factory=lambda: _env("BASE_URL", "http://localhost:8000").rstrip("/"))

    # Federated identity (Google)
    GOOGLE_CLIENT_ID: str = field(default_factory=lambda: _env("GOOGLE_CLIENT_ID"))
    IDENTITY_TIMEOUT_SECONDS: float = field(default_factory=lambda: float(_env("IDENTITY_TIMEOUT_SECONDS", "5")))

    # Application
    APP_ENV: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    DEBUG: bool = field(default_factory=lambda: _env("DEBUG", "false").lower() == "true")
    LOG_LEVEL: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO").upper())
    CORS_ORIGINS: tuple[str, ...] = field(
        default_factory=lambda: tuple(o.strip() for o in _env("CORS_ORIGINS").split(",") if o.strip())
    )

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def cookie_secure(self) -> bool:
        # Browsers drop SameSite=None cookies that are not Secure
        return self.is_production or self.COOKIE_SAMESITE == "none"

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if not self.JWT_SECRET_KEY:
            errors.append("JWT_SECRET_KEY is not set - token issuance will fail")
        if self.COOKIE_SAMESITE not in ("lax", "strict", "none"):
            errors.append(f"COOKIE_SAMESITE must be lax, strict or none (got '{self.COOKIE_SAMESITE}')")
        if not self.GOOGLE_CLIENT_ID:
            errors.append("GOOGLE_CLIENT_ID is not set - federated sign-in is disabled")
        if not (self.EMAIL and self.EMAIL_PASSWORD):
            errors.append("EMAIL/EMAIL_PASSWORD not set - mail links will only be logged")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
