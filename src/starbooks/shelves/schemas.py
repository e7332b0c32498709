"""Pydantic schemas for books and shelves.

A book lives on exactly one of three shelves (Wishlist, Archives, Hangar).
The shelf order is the storage order; the Hangar additionally has a display
sort order that does not touch storage.
"""

from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MIN_RATING = 0
MAX_RATING = 5


def clamp_rating(value: int) -> int:
    """Clamp a rating into the 0-5 range (0 means unrated).

    Raises:
        ValueError: If value is not a finite number
    """
    try:
        rating = int(value)
    except (TypeError, OverflowError) as e:
        raise ValueError(f"Invalid rating: {value!r}") from e
    return max(MIN_RATING, min(MAX_RATING, rating))


class Shelf(str, Enum):
    """The three book shelves."""

    WISHLIST = "wishlist"
    ARCHIVES = "archives"
    HANGAR = "hangar"

    @property
    def display_name(self) -> str:
        names = {
            Shelf.WISHLIST: "Jedi Wishlist",
            Shelf.ARCHIVES: "Empire Archives",
            Shelf.HANGAR: "In The Hangar",
        }
        return names[self]


class HangarSortOrder(str, Enum):
    """Display orders for the Hangar."""

    DEFAULT = "default"  # Storage (insertion) order
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"
    RATING_ASC = "rating_asc"
    RATING_DESC = "rating_desc"

    @property
    def display_name(self) -> str:
        names = {
            HangarSortOrder.DEFAULT: "Default",
            HangarSortOrder.TITLE_ASC: "Title (A-Z)",
            HangarSortOrder.TITLE_DESC: "Title (Z-A)",
            HangarSortOrder.RATING_ASC: "Rating (Low-High)",
            HangarSortOrder.RATING_DESC: "Rating (High-Low)",
        }
        return names[self]


class Book(BaseModel):
    """A tracked book. Books are frozen; changes produce a new Book."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    title: str
    author: str
    notes: str = ""
    rating: int = MIN_RATING

    @field_validator("rating", mode="before")
    @classmethod
    def _clamp_rating(cls, value: Any) -> int:
        return clamp_rating(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _none_notes(cls, value: Any) -> str:
        return "" if value is None else value

    @property
    def is_selectable(self) -> bool:
        """Whether the book has both a title and an author."""
        return bool(self.title.strip() and self.author.strip())

    @property
    def stars(self) -> str:
        """Rating as five stars, e.g. '★★★☆☆'."""
        return "★" * self.rating + "☆" * (MAX_RATING - self.rating)

    @property
    def display_title(self) -> str:
        if self.author:
            return f"{self.title} by {self.author}"
        return self.title


class BookCreate(BaseModel):
    """Schema for adding a book to the wishlist."""

    title: str
    author: str
    notes: str = ""
    rating: int = MIN_RATING

    @field_validator("rating", mode="before")
    @classmethod
    def _clamp_rating(cls, value: Any) -> int:
        return clamp_rating(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _none_notes(cls, value: Any) -> str:
        return "" if value is None else value


class BookUpdate(BaseModel):
    """Schema for editing a book in place. Only set fields are applied."""

    title: Optional[str] = None
    author: Optional[str] = None
    notes: Optional[str] = None
    rating: Optional[int] = None

    @field_validator("rating", mode="before")
    @classmethod
    def _clamp_rating(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        return clamp_rating(value)


class ShelfSnapshot(BaseModel):
    """Immutable copy of all three shelves."""

    model_config = ConfigDict(frozen=True)

    wishlist: tuple[Book, ...] = ()
    archives: tuple[Book, ...] = ()
    hangar: tuple[Book, ...] = ()
    hangar_sort_order: HangarSortOrder = HangarSortOrder.DEFAULT

    @model_validator(mode="after")
    def _unique_ids(self) -> "ShelfSnapshot":
        seen: set[UUID] = set()
        for shelf in Shelf:
            for book in self.shelf(shelf):
                if book.id in seen:
                    raise ValueError(f"Duplicate book id across shelves: {book.id}")
                seen.add(book.id)
        return self

    def shelf(self, shelf: Shelf) -> tuple[Book, ...]:
        """Get the books on one shelf."""
        return getattr(self, shelf.value)

    @property
    def total_books(self) -> int:
        return len(self.wishlist) + len(self.archives) + len(self.hangar)
