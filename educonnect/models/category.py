"""Category model and the user preference association."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table

from educonnect.database import Base

user_category = Table(
    "user_category",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("category.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base):
    """Subject tag that questions are filed under."""

    __tablename__ = "category"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), unique=True, nullable=False, index=True)
