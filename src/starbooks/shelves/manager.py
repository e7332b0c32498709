"""Manager for moving and editing books across the three shelves."""

import logging
from typing import Callable, Iterable, Optional, Union
from uuid import UUID

from .ordering import move_items, sort_books
from .schemas import (
    MAX_RATING,
    MIN_RATING,
    Book,
    BookCreate,
    BookUpdate,
    HangarSortOrder,
    Shelf,
    ShelfSnapshot,
    clamp_rating,
)

logger = logging.getLogger(__name__)

Listener = Callable[[ShelfSnapshot], None]


def _as_uuid(book_id: Union[UUID, str]) -> Union[UUID, str]:
    """Accept ids as UUID or string. Unparseable strings match nothing."""
    if isinstance(book_id, UUID):
        return book_id
    try:
        return UUID(str(book_id))
    except ValueError:
        return book_id


class BookNotFoundError(LookupError):
    """A book id is not on the shelf it was expected on."""

    def __init__(self, book_id: UUID, shelf: Shelf):
        self.book_id = book_id
        self.shelf = shelf
        super().__init__(f"Book {book_id} not found in {shelf.value}")


class ShelfManager:
    """Owns the Wishlist, Archives and Hangar shelves.

    Every mutation runs to completion before listeners are told about it.
    Missing books are logged and turn the operation into a no-op.
    """

    # (source, destination) -> whether the move clears the rating
    TRANSITIONS: dict[tuple[Shelf, Shelf], bool] = {
        (Shelf.WISHLIST, Shelf.ARCHIVES): True,
        (Shelf.ARCHIVES, Shelf.WISHLIST): False,
        (Shelf.ARCHIVES, Shelf.HANGAR): False,
        (Shelf.HANGAR, Shelf.ARCHIVES): False,
        (Shelf.HANGAR, Shelf.WISHLIST): False,
        (Shelf.WISHLIST, Shelf.HANGAR): False,
    }

    def __init__(self, snapshot: Optional[ShelfSnapshot] = None):
        """Initialize the manager.

        Args:
            snapshot: Initial shelves. Empty shelves if omitted.
        """
        self._shelves: dict[Shelf, list[Book]] = {shelf: [] for shelf in Shelf}
        self._sort_order = HangarSortOrder.DEFAULT
        self._listeners: list[Listener] = []

        if snapshot is not None:
            self._replace(snapshot)

    # ========================================================================
    # Reading
    # ========================================================================

    def books(self, shelf: Shelf) -> tuple[Book, ...]:
        """Get a shelf's books in storage order."""
        return tuple(self._shelves[shelf])

    @property
    def wishlist(self) -> tuple[Book, ...]:
        return self.books(Shelf.WISHLIST)

    @property
    def archives(self) -> tuple[Book, ...]:
        return self.books(Shelf.ARCHIVES)

    @property
    def hangar(self) -> tuple[Book, ...]:
        return self.books(Shelf.HANGAR)

    @property
    def sort_order(self) -> HangarSortOrder:
        return self._sort_order

    def sorted_hangar(self) -> list[Book]:
        """Get the Hangar in the current display order."""
        return sort_books(self.hangar, self._sort_order)

    def selectable_wishlist(self) -> list[Book]:
        """Get wishlist books that have both a title and an author."""
        return [book for book in self.wishlist if book.is_selectable]

    def find(self, book_id: UUID) -> Optional[tuple[Shelf, Book]]:
        """Find which shelf a book is on.

        Returns:
            (shelf, book) or None if the id is unknown
        """
        book_id = _as_uuid(book_id)
        for shelf, books in self._shelves.items():
            for book in books:
                if book.id == book_id:
                    return shelf, book
        return None

    def snapshot(self) -> ShelfSnapshot:
        """Get an immutable copy of all shelves."""
        return ShelfSnapshot(
            wishlist=self.wishlist,
            archives=self.archives,
            hangar=self.hangar,
            hangar_sort_order=self._sort_order,
        )

    # ========================================================================
    # Listeners
    # ========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with a snapshot after each mutation.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # ========================================================================
    # Mutations
    # ========================================================================

    def load(self, snapshot: ShelfSnapshot) -> None:
        """Replace all shelves with the contents of a snapshot."""
        self._replace(snapshot)
        logger.debug("Loaded %d books", snapshot.total_books)
        self._notify()

    def add_book(self, book: BookCreate) -> Book:
        """Add a new book to the end of the wishlist.

        Args:
            book: Book data

        Returns:
            The created book, with a fresh id
        """
        new_book = Book(
            title=book.title,
            author=book.author,
            notes=book.notes,
            rating=book.rating,
        )
        self._shelves[Shelf.WISHLIST].append(new_book)
        logger.debug("Added %s to wishlist", new_book.id)
        self._notify()
        return new_book

    def move_wishlist_to_archive(self, book_id: UUID) -> Optional[Book]:
        """Mark a wishlist book as read. Its rating is cleared."""
        return self._transfer(book_id, Shelf.WISHLIST, Shelf.ARCHIVES)

    def move_archive_to_wishlist(self, book_id: UUID) -> Optional[Book]:
        """Mark an archived book as unread."""
        return self._transfer(book_id, Shelf.ARCHIVES, Shelf.WISHLIST)

    def move_archive_to_hangar(self, book_id: UUID) -> Optional[Book]:
        """Start re-reading an archived book."""
        return self._transfer(book_id, Shelf.ARCHIVES, Shelf.HANGAR)

    def move_hangar_to_archive(self, book_id: UUID) -> Optional[Book]:
        """Mark a book in progress as finished."""
        return self._transfer(book_id, Shelf.HANGAR, Shelf.ARCHIVES)

    def move_hangar_to_wishlist(self, book_id: UUID) -> Optional[Book]:
        """Put a book in progress back on the wishlist."""
        return self._transfer(book_id, Shelf.HANGAR, Shelf.WISHLIST)

    def move_wishlist_to_hangar(self, book_id: UUID) -> Optional[Book]:
        """Start reading a wishlist book."""
        return self._transfer(book_id, Shelf.WISHLIST, Shelf.HANGAR)

    def move(self, book_id: UUID, source: Shelf, destination: Shelf) -> Optional[Book]:
        """Move a book along one of the six shelf transitions.

        Raises:
            ValueError: If source -> destination is not a valid transition
        """
        if (source, destination) not in self.TRANSITIONS:
            raise ValueError(f"Cannot move from {source.value} to {destination.value}")
        return self._transfer(book_id, source, destination)

    def set_rating(self, shelf: Shelf, book_id: UUID, value: int) -> Optional[Book]:
        """Set a book's rating, clamped to 0-5.

        Returns:
            Updated book or None if not found on the shelf
        """
        try:
            book = self._locate(shelf, book_id)
        except BookNotFoundError as e:
            logger.error("set_rating: %s", e)
            return None

        book = self._store(shelf, book.model_copy(update={"rating": clamp_rating(value)}))
        logger.debug("Rated %s %d", book_id, book.rating)
        self._notify()
        return book

    def tap_star(self, shelf: Shelf, book_id: UUID, star: int) -> Optional[Book]:
        """Apply a tap on star 1-5: tapping the current rating clears it.

        Raises:
            ValueError: If star is outside 1-5
        """
        if not MIN_RATING < star <= MAX_RATING:
            raise ValueError(f"Star must be between 1 and {MAX_RATING}, got {star}")

        try:
            book = self._locate(shelf, book_id)
        except BookNotFoundError as e:
            logger.error("tap_star: %s", e)
            return None

        return self.set_rating(shelf, book_id, MIN_RATING if star == book.rating else star)

    def edit_book(self, shelf: Shelf, book_id: UUID, updates: BookUpdate) -> Optional[Book]:
        """Edit a book's fields in place.

        Returns:
            Updated book or None if not found on the shelf
        """
        try:
            book = self._locate(shelf, book_id)
        except BookNotFoundError as e:
            logger.error("edit_book: %s", e)
            return None

        changes = {
            field: value
            for field, value in updates.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not changes:
            return book

        book = self._store(shelf, book.model_copy(update=changes))
        logger.debug("Edited %s", book_id)
        self._notify()
        return book

    def reorder(self, shelf: Shelf, from_indices: Iterable[int], to_index: int) -> bool:
        """Move books within the Hangar.

        Only allowed on the Hangar while it is in default sort order, since
        any other order does not match what is stored.

        Returns:
            True if the shelf was reordered
        """
        if shelf != Shelf.HANGAR:
            logger.warning("reorder: %s cannot be reordered", shelf.value)
            return False
        if self._sort_order != HangarSortOrder.DEFAULT:
            logger.warning("reorder: ignored while hangar is sorted by %s", self._sort_order.value)
            return False

        try:
            reordered = move_items(self._shelves[shelf], from_indices, to_index)
        except (IndexError, ValueError) as e:
            logger.warning("reorder: %s", e)
            return False

        self._shelves[shelf] = reordered
        self._notify()
        return True

    def set_sort_order(self, order: HangarSortOrder) -> None:
        """Change the Hangar display order."""
        if order == self._sort_order:
            return
        self._sort_order = order
        logger.debug("Hangar sort order set to %s", order.value)
        self._notify()

    # ========================================================================
    # Helpers
    # ========================================================================

    def _replace(self, snapshot: ShelfSnapshot) -> None:
        self._shelves = {
            shelf: list(snapshot.shelf(shelf)) for shelf in Shelf
        }
        self._sort_order = snapshot.hangar_sort_order

    def _index(self, shelf: Shelf, book_id: UUID) -> int:
        book_id = _as_uuid(book_id)
        for index, book in enumerate(self._shelves[shelf]):
            if book.id == book_id:
                return index
        raise BookNotFoundError(book_id, shelf)

    def _locate(self, shelf: Shelf, book_id: UUID) -> Book:
        return self._shelves[shelf][self._index(shelf, book_id)]

    def _store(self, shelf: Shelf, book: Book) -> Book:
        self._shelves[shelf][self._index(shelf, book.id)] = book
        return book

    def _transfer(self, book_id: UUID, source: Shelf, destination: Shelf) -> Optional[Book]:
        try:
            index = self._index(source, book_id)
        except BookNotFoundError as e:
            logger.error("move %s -> %s: %s", source.value, destination.value, e)
            return None

        book = self._shelves[source].pop(index)
        if self.TRANSITIONS[(source, destination)]:
            book = book.model_copy(update={"rating": MIN_RATING})
        self._shelves[destination].append(book)

        logger.debug("Moved %s from %s to %s", book_id, source.value, destination.value)
        self._notify()
        return book
