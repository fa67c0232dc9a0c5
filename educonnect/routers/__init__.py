"""API routers."""

from educonnect.routers.auth import router as auth_router
from educonnect.routers.categories import router as categories_router
from educonnect.routers.questions import router as questions_router
from educonnect.routers.timeline import router as timeline_router
from educonnect.routers.users import router as users_router

__all__ = ["auth_router", "categories_router", "questions_router", "timeline_router", "users_router"]
