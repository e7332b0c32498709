"""SQLite database operations.

Handles database connection, session management, and loading/saving the
three shelves as a single snapshot.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..shelves.schemas import HangarSortOrder, Shelf, ShelfSnapshot
from .models import Base, BookRecord, Setting

logger = logging.getLogger(__name__)

SORT_ORDER_KEY = "hangar_sort_order"


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file, or ":memory:". If None,
                     uses the configured STARBOOKS_DB_PATH.
        """
        if db_path is None:
            from ..config import get_config

            db_path = str(get_config().db_path)

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        # In-memory databases share one connection so every session sees the same data
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self._ensure_directory()
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Shelf Operations
    # ========================================================================

    def load_snapshot(self) -> ShelfSnapshot:
        """Load all shelves.

        Rows with an unknown shelf name are skipped with a warning.
        """
        with self.get_session() as s:
            stmt = select(BookRecord).order_by(BookRecord.position, BookRecord.created_at)
            records = list(s.execute(stmt).scalars().all())

            shelves: dict[Shelf, list] = {shelf: [] for shelf in Shelf}
            for record in records:
                try:
                    shelf = Shelf(record.shelf)
                except ValueError:
                    logger.warning("Skipping book %s on unknown shelf %r", record.id, record.shelf)
                    continue
                shelves[shelf].append(record.to_book())

            sort_value = self._get_setting(s, SORT_ORDER_KEY)

        try:
            sort_order = HangarSortOrder(sort_value) if sort_value else HangarSortOrder.DEFAULT
        except ValueError:
            logger.warning("Unknown hangar sort order %r, using default", sort_value)
            sort_order = HangarSortOrder.DEFAULT

        return ShelfSnapshot(
            wishlist=tuple(shelves[Shelf.WISHLIST]),
            archives=tuple(shelves[Shelf.ARCHIVES]),
            hangar=tuple(shelves[Shelf.HANGAR]),
            hangar_sort_order=sort_order,
        )

    def save_snapshot(self, snapshot: ShelfSnapshot) -> None:
        """Save all shelves in one transaction.

        Books missing from the snapshot are deleted.
        """
        with self.get_session() as s:
            existing = {record.id: record for record in s.execute(select(BookRecord)).scalars()}
            seen: set[str] = set()

            for shelf in Shelf:
                for position, book in enumerate(snapshot.shelf(shelf)):
                    book_id = str(book.id)
                    seen.add(book_id)

                    record = existing.get(book_id)
                    if record is None:
                        record = BookRecord(id=book_id)
                        s.add(record)

                    record.title = book.title
                    record.author = book.author
                    record.notes = book.notes
                    record.rating = book.rating
                    record.shelf = shelf.value
                    record.position = position

            for book_id, record in existing.items():
                if book_id not in seen:
                    s.delete(record)

            self._set_setting(s, SORT_ORDER_KEY, snapshot.hangar_sort_order.value)

        logger.debug("Saved %d books", snapshot.total_books)

    def count_books(self, shelf: Optional[Shelf] = None) -> int:
        """Count stored books, optionally on one shelf."""
        with self.get_session() as s:
            query = s.query(BookRecord)
            if shelf is not None:
                query = query.filter(BookRecord.shelf == shelf.value)
            return query.count()

    # ========================================================================
    # Settings
    # ========================================================================

    def get_setting(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a stored setting value."""
        with self.get_session() as s:
            value = self._get_setting(s, key)
        return default if value is None else value

    def set_setting(self, key: str, value: str) -> None:
        """Store a setting value."""
        with self.get_session() as s:
            self._set_setting(s, key, value)

    def _get_setting(self, s: Session, key: str) -> Optional[str]:
        setting = s.get(Setting, key)
        return setting.value if setting else None

    def _set_setting(self, s: Session, key: str, value: str) -> None:
        setting = s.get(Setting, key)
        if setting is None:
            s.add(Setting(key=key, value=value))
        else:
            setting.value = value


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
