from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy import Enum as SQLEnum

from bookcafe.database.db import Base
from bookcafe.models.enum import BookStatus


# ---------- Book ---------- #
class Book(Base):
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_books_rating_range"),
        {"sqlite_autoincrement": True},
    )
    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    author = Column(String, nullable=False)
    status = Column(
        SQLEnum(BookStatus, name="book_status", native_enum=False, length=6),
        nullable=False,
        default=BookStatus.UNREAD,
        server_default=BookStatus.UNREAD.value,
    )
    # column name shared with databases created before the rating migration
    created_at = Column(
        "createdAt",
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    rating = Column(Integer, nullable=False, default=0, server_default="0")

    def __repr__(self):
        return f"<Book {self.id} {self.title!r} {self.status.value} {self.rating}/5>"
