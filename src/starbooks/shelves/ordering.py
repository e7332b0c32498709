"""Sorting and manual reordering of shelf contents."""

from typing import Iterable, Sequence, TypeVar

from .schemas import Book, HangarSortOrder

T = TypeVar("T")


def _title_key(book: Book) -> str:
    return book.title.casefold()


def sort_books(books: Iterable[Book], order: HangarSortOrder) -> list[Book]:
    """Return books in display order.

    Title sorts are case-insensitive. Rating sorts break ties by title
    ascending in both directions.

    Args:
        books: Books in storage order
        order: Display order to apply

    Returns:
        New list; the input is not modified
    """
    books = list(books)

    if order == HangarSortOrder.DEFAULT:
        return books
    if order == HangarSortOrder.TITLE_ASC:
        return sorted(books, key=_title_key)
    if order == HangarSortOrder.TITLE_DESC:
        return sorted(books, key=_title_key, reverse=True)
    if order == HangarSortOrder.RATING_ASC:
        return sorted(books, key=lambda b: (b.rating, _title_key(b)))
    if order == HangarSortOrder.RATING_DESC:
        return sorted(books, key=lambda b: (-b.rating, _title_key(b)))

    raise ValueError(f"Unknown sort order: {order}")


def move_items(items: Sequence[T], from_indices: Iterable[int], to_index: int) -> list[T]:
    """Move a subset of items to a new position.

    The moved items keep their relative order and are inserted at
    ``to_index`` in the list that remains after removing them. ``to_index``
    is clamped to that list's bounds.

    Example:
        >>> move_items(["A", "B", "C"], {0}, 2)
        ['B', 'C', 'A']

    Raises:
        IndexError: If a source index is out of range
        ValueError: If no source indices are given
    """
    indices = sorted(set(from_indices))
    if not indices:
        raise ValueError("No items to move")
    for index in indices:
        if index < 0 or index >= len(items):
            raise IndexError(f"Index {index} out of range for {len(items)} items")

    selected = set(indices)
    moving = [items[i] for i in indices]
    remaining = [item for i, item in enumerate(items) if i not in selected]

    position = max(0, min(to_index, len(remaining)))
    return remaining[:position] + moving + remaining[position:]
