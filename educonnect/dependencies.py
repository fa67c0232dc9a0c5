"""Authentication dependencies for FastAPI routes."""

import logging

from fastapi import HTTPException, Request, Response

from educonnect.config import get_settings
from educonnect.services.jwt import ExpiredTokenError, TokenClaims, TokenError, get_jwt_service

logger = logging.getLogger("educonnect.access")

AUTH_COOKIE_NAME = "user_token"

# Handlers receive the verified token claims as the current user
CurrentUser = TokenClaims


def _request_token(request: Request) -> str | None:
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if token:
        return token
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]
    return None


def get_current_user(request: Request) -> CurrentUser:
    """Validate the session token and attach its claims to the request. Raises 401 if invalid."""
    token = _request_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Authentication token missing")

    try:
        claims = get_jwt_service().verify(token)
    except ExpiredTokenError:
        logger.info("Expired session token on %s", request.url.path)
        raise HTTPException(status_code=401, detail="Invalid or expired token") from None
    except TokenError as e:
        logger.warning("Rejected session token on %s: %s", request.url.path, e)
        raise HTTPException(status_code=401, detail="Invalid or expired token") from None

    request.state.user = claims
    return claims


def session_token_from_cookie(request: Request) -> str | None:
    return request.cookies.get(AUTH_COOKIE_NAME)


def set_auth_cookie(response: Response, token: str) -> None:
    """Set the session cookie."""
    settings = get_settings()
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite=settings.COOKIE_SAMESITE,
        secure=settings.cookie_secure,
        max_age=settings.SESSION_TOKEN_HOURS * 60 * 60,
    )


def clear_auth_cookie(response: Response) -> None:
    """Clear the session cookie."""
    settings = get_settings()
    response.delete_cookie(
        key=AUTH_COOKIE_NAME,
        httponly=True,
        samesite=settings.COOKIE_SAMESITE,
        secure=settings.cookie_secure,
    )
