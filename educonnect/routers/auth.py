"""Authentication API endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from sqlalchemy.orm import Session

from educonnect.database import get_db
from educonnect.dependencies import (
    CurrentUser,
    clear_auth_cookie,
    get_current_user,
    session_token_from_cookie,
    set_auth_cookie,
)
from educonnect.errors import http_error
from educonnect.rate_limit import limiter
from educonnect.schemas.auth import (
    FederatedAuthRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    LoginUser,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
)
from educonnect.schemas.user import RegisterResponse, UserResponse
from educonnect.services.auth import get_auth_service

router = APIRouter(tags=["Authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limiter.limit("5/minute")
def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> RegisterResponse:
    """Register a password account, sign it in and send the verification email."""
    auth_service = get_auth_service()
    result = auth_service.register(db, body.username, body.email, body.password, body.profile(), tasks)

    if not result.success:
        raise http_error(result)

    set_auth_cookie(response, result.token)  # type: ignore[arg-type]
    return RegisterResponse(
        message="Registration successful, please verify your email.",
        user=UserResponse.model_validate(result.value),
    )


@router.post("/login", response_model=LoginResponse)
@limiter.limit("10/minute")
def login(request: Request, response: Response, body: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """Sign in with email or username."""
    auth_service = get_auth_service()
    result = auth_service.authenticate(db, body.email or body.username, body.password)

    if not result.success:
        raise http_error(result)

    set_auth_cookie(response, result.token)  # type: ignore[arg-type]
    return LoginResponse(message="Login successful", user=LoginUser(last_login=result.value.last_login_at))


@router.post("/auth", response_model=MessageResponse)
@limiter.limit("10/minute")
def federated_auth(
    request: Request,
    response: Response,
    body: FederatedAuthRequest,
    tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Sign in or sign up with a Google ID token."""
    auth_service = get_auth_service()
    result = auth_service.federated_sign_in(db, body.id_token, body.username, body.email, body.profile(), tasks)

    if not result.success:
        raise http_error(result)

    set_auth_cookie(response, result.token)  # type: ignore[arg-type]
    if result.created:
        response.status_code = 201
        return MessageResponse(message="User created and login successful")
    return MessageResponse(message="Login successful")


@router.get("/verify-email/{token}", response_model=MessageResponse)
def verify_email(token: str, request: Request, db: Session = Depends(get_db)) -> MessageResponse:
    """Verify an email address from the emailed link."""
    auth_service = get_auth_service()
    result = auth_service.verify_email(db, token, session_token_from_cookie(request))

    if not result.success:
        raise http_error(result)

    user = result.value
    return MessageResponse(
        message=f"Welcome aboard, {user.username}! Your email has been verified successfully. "
        "You can now log in and enjoy the full experience."
    )


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit("3/minute")
def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Email a password reset link."""
    auth_service = get_auth_service()
    result = auth_service.request_password_reset(db, body.email, tasks)

    if not result.success:
        raise http_error(result)

    return MessageResponse(message="A password reset link has been sent to your email.")


@router.post("/reset-password/{token}", response_model=MessageResponse)
@limiter.limit("5/minute")
def reset_password(
    request: Request,
    token: str,
    body: ResetPasswordRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Set a new password using the emailed reset token."""
    auth_service = get_auth_service()
    result = auth_service.reset_password(db, token, body.new_password, body.confirm_password)

    if not result.success:
        raise http_error(result)

    return MessageResponse(message="Password has been reset successfully. You can now log in.")


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, user: CurrentUser = Depends(get_current_user)) -> MessageResponse:
    """Clear the session cookie. The token itself stays valid until it expires."""
    clear_auth_cookie(response)
    return MessageResponse(message=f"Successfully logged out, {user.username}")
