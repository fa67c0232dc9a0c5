"""User model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from educonnect.database import Base, utcnow
from educonnect.models.category import user_category
from educonnect.services.passwords import hash_password

ROLES = ("student", "admin", "superAdmin")
GENDERS = ("Male", "Female", "Other")
DEFAULT_AVATAR = "https://default-avatar-url.com/avatar.png"


class User(Base):
    """Application user.

    A password account carries ``password_hash`` and has
    ``credential_account`` false. A federated account has
    ``credential_account`` true, an ``external_identity_id`` and no password.
    """

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), nullable=False)
    username_key = Column(String(64), unique=True, nullable=False, index=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=True)
    role = Column(String(16), nullable=False, default="student")
    verified = Column(Boolean, nullable=False, default=False)
    credential_account = Column(Boolean, nullable=False, default=False)
    external_identity_id = Column(String(256), unique=True, nullable=True)

    # Profile
    gender = Column(String(16), nullable=True)
    age = Column(Integer, nullable=True)
    bio = Column(String(150), nullable=True)
    avatar = Column(String(512), nullable=False, default=DEFAULT_AVATAR)
    class_grade = Column(String(64), nullable=True)
    school_name = Column(String(256), nullable=True)
    notify_new_answers = Column(Boolean, nullable=False, default=True)
    notify_upvotes = Column(Boolean, nullable=False, default=True)
    notify_badges = Column(Boolean, nullable=False, default=True)
    badges_earned = Column(Integer, nullable=False, default=0)
    badge_levels = Column(JSON, nullable=False, default=list)
    badge_progress = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    last_login_at = Column(DateTime, nullable=True)

    preferred_categories = relationship("Category", secondary=user_category, lazy="selectin", order_by="Category.name")

    @property
    def password(self) -> None:
        raise AttributeError("password is write-only")

    @password.setter
    def password(self, raw_password: str) -> None:
        # Every path that stores a password goes through here
        self.password_hash = hash_password(raw_password)

    @property
    def is_federated(self) -> bool:
        return bool(self.credential_account)

    @property
    def notification_preferences(self) -> dict:
        return {
            "newAnswers": self.notify_new_answers,
            "upvotes": self.notify_upvotes,
            "badges": self.notify_badges,
        }

    @property
    def badge_data(self) -> dict:
        return {
            "badgesEarned": self.badges_earned,
            "badgeLevels": self.badge_levels or [],
            "progress": self.badge_progress or {},
        }


def username_key(username: str) -> str:
    """Case-folded form used for the uniqueness constraint."""
    return username.strip().casefold()


def normalize_email(email: str) -> str:
    return email.strip().lower()
