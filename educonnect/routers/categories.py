"""Category API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from educonnect.database import get_db
from educonnect.dependencies import CurrentUser, get_current_user
from educonnect.errors import http_error
from educonnect.schemas.category import CategoryCreateRequest, CategoryResponse, UpdateCategoriesRequest
from educonnect.services.category import get_category_service

router = APIRouter(tags=["Categories"])


@router.post("/add-category", status_code=201)
def add_category(body: CategoryCreateRequest, db: Session = Depends(get_db)) -> dict:
    """Create a subject category."""
    service = get_category_service()
    result = service.create_category(db, body.name)
    if not result.success:
        raise http_error(result)
    return {
        "success": True,
        "message": "Category created successfully",
        "category": CategoryResponse.model_validate(result.value).model_dump(by_alias=True),
    }


@router.get("/all-categories")
def all_categories(db: Session = Depends(get_db)) -> dict:
    """List every category."""
    service = get_category_service()
    categories = service.get_all_categories(db)
    return {
        "success": True,
        "categories": [CategoryResponse.model_validate(c).model_dump(by_alias=True) for c in categories],
    }


@router.post("/update-categories")
def update_categories(
    body: UpdateCategoriesRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Toggle a category in the caller's preferences."""
    if body.category_id is None:
        raise HTTPException(status_code=400, detail="Category ID is required.")

    service = get_category_service()
    result = service.toggle_preferred_category(db, user.subject_id, body.category_id)
    if not result.success:
        raise http_error(result)
    return {
        "success": True,
        "message": result.value["message"],
        "preferredCategories": [
            CategoryResponse.model_validate(c).model_dump(by_alias=True) for c in result.value["preferred_categories"]
        ],
    }


@router.get("/categories-preferences")
def categories_preferences(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """List the caller's preferred categories."""
    service = get_category_service()
    result = service.get_user_preferences(db, user.subject_id)
    if not result.success:
        raise http_error(result)
    return {
        "success": True,
        "preferredCategories": [CategoryResponse.model_validate(c).model_dump(by_alias=True) for c in result.value],
    }
