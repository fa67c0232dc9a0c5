"""Category service for subject tags and user preferences."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from educonnect.errors import ErrorKind, ServiceResult
from educonnect.models.category import Category
from educonnect.models.user import User


class CategoryService:
    """Handles category creation, listing and preference toggling."""

    def create_category(self, db: Session, name: str) -> ServiceResult[Category]:
        """Create a category with a unique name."""
        name = (name or "").strip()
        if not name:
            return ServiceResult.fail(ErrorKind.VALIDATION, "Category name is required.")
        if db.query(Category).filter(Category.name == name).first():
            return ServiceResult.fail(ErrorKind.CONFLICT, f"Category '{name}' already exists.")

        category = Category(name=name)
        db.add(category)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            return ServiceResult.fail(ErrorKind.CONFLICT, f"Category '{name}' already exists.")
        db.refresh(category)
        return ServiceResult.ok(category)

    def get_all_categories(self, db: Session) -> list[Category]:
        return db.query(Category).order_by(Category.name).all()

    def get_user_preferences(self, db: Session, user_id: int) -> ServiceResult[list[Category]]:
        user = db.get(User, user_id)
        if not user:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "User not found.")
        return ServiceResult.ok(list(user.preferred_categories))

    def toggle_preferred_category(self, db: Session, user_id: int, category_id: int) -> ServiceResult[dict]:
        """Add the category to the user's preferences, or remove it if already there."""
        user = db.get(User, user_id)
        if not user:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "User not found.")
        category = db.get(Category, category_id)
        if not category:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Category not found.")

        removed = category in user.preferred_categories
        if removed:
            user.preferred_categories.remove(category)
            message = f"{category.name} removed from preferred categories."
        else:
            user.preferred_categories.append(category)
            message = f"{category.name} added to preferred categories."
        db.commit()
        db.refresh(user)
        return ServiceResult.ok({"message": message, "preferred_categories": list(user.preferred_categories)})


_category_service: CategoryService | None = None


def get_category_service() -> CategoryService:
    """Get singleton category service instance."""
    global _category_service
    if _category_service is None:
        _category_service = CategoryService()
    return _category_service
