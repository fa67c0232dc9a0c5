"""Timeline API endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from educonnect.database import get_db
from educonnect.dependencies import CurrentUser, get_current_user
from educonnect.errors import http_error
from educonnect.schemas.question import QuestionResponse, TimelineResponse
from educonnect.services.timeline import get_timeline_service

router = APIRouter(tags=["Timeline"])


@router.get("/timeline", response_model=TimelineResponse)
def get_timeline(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TimelineResponse:
    """Questions from the caller's preferred categories, newest first."""
    service = get_timeline_service()
    result = service.get_timeline(db, user.subject_id)
    if not result.success:
        raise http_error(result)
    return TimelineResponse(
        message="Timeline fetched successfully",
        questions=[QuestionResponse.model_validate(q) for q in result.value],
    )
