"""Pydantic schemas for category endpoints."""

from educonnect.schemas.base import CamelModel


class CategoryCreateRequest(CamelModel):
    name: str = ""


class CategoryResponse(CamelModel):
    id: int
    name: str


class UpdateCategoriesRequest(CamelModel):
    category_id: int | None = None
