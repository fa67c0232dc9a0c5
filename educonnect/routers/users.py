"""User profile API endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from educonnect.database import get_db
from educonnect.dependencies import CurrentUser, get_current_user
from educonnect.errors import http_error
from educonnect.schemas.auth import MessageResponse
from educonnect.schemas.question import QuestionResponse
from educonnect.schemas.user import (
    ProfileResponse,
    PublicProfileResponse,
    PublicUserResponse,
    UpdateInfoRequest,
    UpdateInfoResponse,
    UpdatePasswordRequest,
    UpdateRoleRequest,
    UpdateRoleResponse,
    UserResponse,
)
from educonnect.services.question import get_question_service
from educonnect.services.user import get_user_service

router = APIRouter(tags=["Users"])


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """The caller's own profile and questions, oldest first."""
    record = get_user_service().get_user(db, user.subject_id)
    if not record:
        raise HTTPException(status_code=404, detail="User not found")
    questions = get_question_service().get_user_questions(db, record.id)
    return ProfileResponse(
        message="User profile and questions fetched successfully",
        user=UserResponse.model_validate(record),
        questions=[QuestionResponse.model_validate(q) for q in questions],
    )


@router.get("/get-user/{username}", response_model=PublicProfileResponse)
def get_user(username: str, db: Session = Depends(get_db)) -> PublicProfileResponse:
    """Public profile of any user."""
    record = get_user_service().get_user_by_username(db, username)
    if not record:
        raise HTTPException(status_code=404, detail="User not found")
    questions = get_question_service().get_user_questions(db, record.id)
    return PublicProfileResponse(
        message="User and questions fetched successfully",
        user=PublicUserResponse.model_validate(record),
        questions=[QuestionResponse.model_validate(q) for q in questions],
    )


@router.put("/update-password", response_model=MessageResponse)
def update_password(
    body: UpdatePasswordRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Change the caller's password."""
    result = get_user_service().update_password(db, user.subject_id, body.old_password, body.new_password)
    if not result.success:
        raise http_error(result)
    return MessageResponse(message="Password successfully updated")


@router.put("/update-role/{username}", response_model=UpdateRoleResponse)
def update_role(
    username: str,
    body: UpdateRoleRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UpdateRoleResponse:
    """Change a user's role. Admins only."""
    result = get_user_service().update_role(db, user.role, username, body.new_role)
    if not result.success:
        raise http_error(result)
    return UpdateRoleResponse(
        message="User role updated successfully",
        username=result.value.username,
        role=result.value.role,
    )


@router.put("/update-info", response_model=UpdateInfoResponse)
def update_info(
    body: UpdateInfoRequest,
    tasks: BackgroundTasks,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UpdateInfoResponse:
    """Update the caller's profile fields."""
    changes = body.model_dump(exclude_unset=True)
    result = get_user_service().update_info(db, user.subject_id, changes, tasks)
    if not result.success:
        raise http_error(result)
    return UpdateInfoResponse(message="User info updated successfully", user=UserResponse.model_validate(result.value))
