"""SQLAlchemy models."""

from educonnect.models.category import Category, user_category
from educonnect.models.question import Question
from educonnect.models.user import User

__all__ = ["Category", "Question", "User", "user_category"]
