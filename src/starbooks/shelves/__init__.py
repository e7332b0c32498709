"""Wishlist, Archives and Hangar shelf management module."""

from .manager import BookNotFoundError, ShelfManager
from .ordering import move_items, sort_books
from .schemas import (
    Book,
    BookCreate,
    BookUpdate,
    HangarSortOrder,
    Shelf,
    ShelfSnapshot,
    clamp_rating,
)

__all__ = [
    "ShelfManager",
    "BookNotFoundError",
    "Book",
    "BookCreate",
    "BookUpdate",
    "HangarSortOrder",
    "Shelf",
    "ShelfSnapshot",
    "clamp_rating",
    "move_items",
    "sort_books",
]
