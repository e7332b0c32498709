"""Application root tying the shelf manager to storage.

StarBooks loads the shelves once and, with autosave on, writes a snapshot
after every completed mutation.
"""

import logging
from typing import Callable, Optional

from .db.sqlite import Database, get_db
from .shelves.manager import ShelfManager
from .shelves.schemas import ShelfSnapshot

logger = logging.getLogger(__name__)


class StarBooks:
    """Owns the database and the shelf manager."""

    def __init__(self, db: Optional[Database] = None, autosave: bool = True):
        """Load shelves from storage.

        Args:
            db: Database instance. Uses the global database if omitted.
            autosave: Save after every mutation
        """
        self.db = db or get_db()
        self.shelves = ShelfManager(self.db.load_snapshot())
        self._unsubscribe: Optional[Callable[[], None]] = None

        if autosave:
            self._unsubscribe = self.shelves.subscribe(self._save)

        logger.debug("Loaded %d books", self.shelves.snapshot().total_books)

    def _save(self, snapshot: ShelfSnapshot) -> None:
        self.db.save_snapshot(snapshot)

    def save(self) -> None:
        """Save the current shelves."""
        self._save(self.shelves.snapshot())

    def reload(self) -> None:
        """Replace in-memory shelves with what is stored."""
        self.shelves.load(self.db.load_snapshot())

    @property
    def autosave(self) -> bool:
        return self._unsubscribe is not None

    def close(self) -> None:
        """Stop saving after mutations."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> "StarBooks":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
