"""Question service for posting, search and owner-only edits."""

import logging

from sqlalchemy.orm import Session

from educonnect.errors import ErrorKind, ServiceResult
from educonnect.models.category import Category
from educonnect.models.question import Question

logger = logging.getLogger("educonnect.questions")


class QuestionService:
    """Handles question CRUD."""

    def _subject(self, db: Session, subject_id: int) -> Category | None:
        return db.get(Category, subject_id)

    def create_question(
        self, db: Session, user_id: int, content: str, subject_id: int, tags: list[str]
    ) -> ServiceResult[Question]:
        """Post a question under an existing subject category."""
        if not self._subject(db, subject_id):
            return ServiceResult.fail(ErrorKind.VALIDATION, "Subject category does not exist.")

        question = Question(content=content, subject_id=subject_id, tags=list(tags), user_id=user_id)
        db.add(question)
        db.commit()
        db.refresh(question)
        return ServiceResult.ok(question)

    def get_questions(
        self,
        db: Session,
        search: str | None = None,
        subject: str | None = None,
        tags: list[str] | None = None,
    ) -> list[Question]:
        """List questions newest first, optionally filtered.

        ``subject`` matches a category name or id. Every tag in ``tags`` must
        be present on a question for it to match.
        """
        query = db.query(Question)

        if search:
            query = query.filter(Question.content.ilike(f"%{search}%"))

        if subject:
            query = query.join(Category, Question.subject_id == Category.id)
            if subject.isdigit():
                query = query.filter(Category.id == int(subject))
            else:
                query = query.filter(Category.name == subject)

        questions = query.order_by(Question.created_at.desc(), Question.id.desc()).all()

        # Tags live in a JSON column, so the containment check happens here
        if tags:
            wanted = set(tags)
            questions = [q for q in questions if wanted.issubset(q.tags or [])]
        return questions

    def get_question(self, db: Session, question_id: int) -> Question | None:
        return db.get(Question, question_id)

    def get_user_questions(self, db: Session, user_id: int) -> list[Question]:
        """All questions posted by a user, oldest first."""
        return (
            db.query(Question)
            .filter(Question.user_id == user_id)
            .order_by(Question.created_at.asc(), Question.id.asc())
            .all()
        )

    def update_question(
        self,
        db: Session,
        question_id: int,
        user_id: int,
        content: str,
        subject_id: int,
        tags: list[str] | None,
    ) -> ServiceResult[Question]:
        """Update a question. Only its owner may do so."""
        question = db.get(Question, question_id)
        if not question:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Question not found.")
        if question.user_id != user_id:
            logger.info("User %s denied update of question %s", user_id, question_id)
            return ServiceResult.fail(ErrorKind.FORBIDDEN, "You are not authorized to update this question.")
        if not self._subject(db, subject_id):
            return ServiceResult.fail(ErrorKind.VALIDATION, "Subject category does not exist.")

        question.content = content
        question.subject_id = subject_id
        if tags is not None:
            question.tags = list(tags)
        db.commit()
        db.refresh(question)
        return ServiceResult.ok(question)

    def delete_question(self, db: Session, question_id: int, user_id: int) -> ServiceResult[None]:
        """Delete a question. Only its owner may do so."""
        question = db.get(Question, question_id)
        if not question:
            return ServiceResult.fail(ErrorKind.NOT_FOUND, "Question not found")
        if question.user_id != user_id:
            logger.info("User %s denied delete of question %s", user_id, question_id)
            return ServiceResult.fail(ErrorKind.FORBIDDEN, "You are not authorized to delete this question.")

        db.delete(question)
        db.commit()
        return ServiceResult.ok()


_question_service: QuestionService | None = None


def get_question_service() -> QuestionService:
    """Get singleton question service instance."""
    global _question_service
    if _question_service is None:
        _question_service = QuestionService()
    return _question_service
