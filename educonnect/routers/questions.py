"""Question API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from educonnect.database import get_db
from educonnect.dependencies import CurrentUser, get_current_user
from educonnect.errors import http_error
from educonnect.schemas.question import (
    QuestionCreateRequest,
    QuestionEnvelope,
    QuestionListResponse,
    QuestionResponse,
    QuestionUpdateRequest,
)
from educonnect.services.question import get_question_service

router = APIRouter(tags=["Questions"])


@router.post("/create-question", response_model=QuestionEnvelope, status_code=201)
def create_question(
    body: QuestionCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> QuestionEnvelope:
    """Post a question as the current user."""
    service = get_question_service()
    result = service.create_question(db, user.subject_id, body.content, body.subject, list(body.tags))
    if not result.success:
        raise http_error(result)
    return QuestionEnvelope(
        message="Question posted successfully.",
        question=QuestionResponse.model_validate(result.value),
    )


@router.get("/questions", response_model=QuestionListResponse)
def list_questions(
    search: str | None = None,
    subject: str | None = None,
    tags: str | None = None,
    db: Session = Depends(get_db),
) -> QuestionListResponse:
    """List questions, newest first. ``tags`` is a comma separated list."""
    service = get_question_service()
    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else None
    questions = service.get_questions(db, search=search, subject=subject, tags=tag_list)
    return QuestionListResponse(questions=[QuestionResponse.model_validate(q) for q in questions])


@router.get("/question/{question_id}")
def get_question(question_id: int, db: Session = Depends(get_db)) -> dict:
    """Get a single question by ID."""
    service = get_question_service()
    question = service.get_question(db, question_id)
    if not question:
        raise HTTPException(status_code=404, detail="Question not found.")
    return {"question": QuestionResponse.model_validate(question).model_dump(by_alias=True)}


@router.put("/update-question/{question_id}", response_model=QuestionEnvelope)
def update_question(
    question_id: int,
    body: QuestionUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> QuestionEnvelope:
    """Update a question. Owner only."""
    service = get_question_service()
    tags = list(body.tags) if body.tags is not None else None
    result = service.update_question(db, question_id, user.subject_id, body.content, body.subject, tags)
    if not result.success:
        raise http_error(result)
    return QuestionEnvelope(
        message="Question updated successfully",
        question=QuestionResponse.model_validate(result.value),
    )


@router.delete("/delete-question/{question_id}")
def delete_question(
    question_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Delete a question. Owner only."""
    service = get_question_service()
    result = service.delete_question(db, question_id, user.subject_id)
    if not result.success:
        raise http_error(result)
    return {"message": "Question deleted successfully"}
