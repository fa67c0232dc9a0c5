"""Personalized question timeline."""

from sqlalchemy.orm import Session

from educonnect.errors import ErrorKind, ServiceResult
from educonnect.models.question import Question
from educonnect.models.user import User


class TimelineService:
    """Builds a user's timeline from their preferred categories."""

    def get_timeline(self, db: Session, user_id: int) -> ServiceResult[list[Question]]:
        """Questions in the user's preferred categories, newest first."""
        user = db.get(User, user_id)
        if not user:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "User not found")

        category_ids = [c.id for c in user.preferred_categories]
        if not category_ids:
            return ServiceResult.fail(ErrorKind.VALIDATION, "No preferred categories set")

        questions = (
            db.query(Question)
            .filter(Question.subject_id.in_(category_ids))
            .order_by(Question.created_at.desc(), Question.id.desc())
            .all()
        )
        return ServiceResult.ok(questions)


_timeline_service: TimelineService | None = None


def get_timeline_service() -> TimelineService:
    """Get singleton timeline service instance."""
    global _timeline_service
    if _timeline_service is None:
        _timeline_service = TimelineService()
    return _timeline_service
