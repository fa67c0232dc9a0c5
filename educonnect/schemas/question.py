"""Pydantic schemas for question and timeline endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from educonnect.models.question import MAX_CONTENT_LENGTH, MAX_TAGS
from educonnect.schemas.base import CamelModel
from educonnect.schemas.category import CategoryResponse

Tag = Literal[
    "Algebra",
    "Equations",
    "Photosynthesis",
    "Newtonian",
    "Grammar",
    "Shakespeare",
    "Economics",
    "World History",
]


class QuestionCreateRequest(CamelModel):
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    subject: int
    tags: list[Tag] = Field(default=[], max_length=MAX_TAGS)


class QuestionUpdateRequest(CamelModel):
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    subject: int
    tags: list[Tag] | None = Field(default=None, max_length=MAX_TAGS)


class QuestionAuthor(CamelModel):
    id: int
    username: str
    avatar: str | None = None


class QuestionResponse(CamelModel):
    id: int
    content: str
    subject: CategoryResponse
    tags: list[str]
    user: QuestionAuthor
    created_at: datetime


class QuestionEnvelope(CamelModel):
    message: str
    question: QuestionResponse


class QuestionListResponse(CamelModel):
    success: bool = True
    questions: list[QuestionResponse]


class TimelineResponse(CamelModel):
    message: str
    questions: list[QuestionResponse]
