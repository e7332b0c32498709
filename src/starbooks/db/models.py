"""SQLAlchemy ORM models for local SQLite database.

Tables:
- books: Book records with their shelf and position on it
- settings: Key/value preferences (e.g. Hangar sort order)
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..shelves.schemas import Book, Shelf


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class BookRecord(Base):
    """Book row - one per book, on exactly one shelf."""

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    author: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Shelf membership and order within the shelf
    shelf: Mapped[str] = mapped_column(
        String(20), nullable=False, default=Shelf.WISHLIST.value, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)
    updated_at: Mapped[str] = mapped_column(String(32), default=utc_now, onupdate=utc_now)

    def __repr__(self) -> str:
        return f"<BookRecord(id={self.id}, title='{self.title}', shelf={self.shelf})>"

    def to_book(self) -> Book:
        """Convert to a Book schema. Ratings are clamped on the way in."""
        return Book(
            id=self.id,
            title=self.title or "",
            author=self.author or "",
            notes=self.notes or "",
            rating=self.rating or 0,
        )


class Setting(Base):
    """Key/value user preference."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[str] = mapped_column(String(32), default=utc_now, onupdate=utc_now)
