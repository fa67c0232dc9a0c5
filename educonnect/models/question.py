"""Question model."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from educonnect.database import Base, utcnow

TAG_VOCABULARY = (
    "Algebra",
    "Equations",
    "Photosynthesis",
    "Newtonian",
    "Grammar",
    "Shakespeare",
    "Economics",
    "World History",
)
MAX_TAGS = 3
MAX_CONTENT_LENGTH = 300


class Question(Base):
    """Question posted by a user under a subject category."""

    __tablename__ = "question"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(String(MAX_CONTENT_LENGTH), nullable=False)
    subject_id = Column(Integer, ForeignKey("category.id"), nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    subject = relationship("Category", lazy="joined")
    user = relationship("User", lazy="joined")
