"""Pytest configuration and shared fixtures.

This module provides fixtures for testing starbooks, including in-memory
and file-backed databases and pre-populated shelves.
"""

import os
from pathlib import Path
from typing import Generator

import pytest

from starbooks.config import reset_config
from starbooks.db.sqlite import Database, reset_db
from starbooks.shelves.manager import ShelfManager
from starbooks.shelves.schemas import Book, BookCreate, ShelfSnapshot


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def memory_db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


@pytest.fixture
def db(tmp_path: Path) -> Generator[Database, None, None]:
    """Create a file-backed test database and make it the configured one."""
    reset_db()
    reset_config()

    db_path = tmp_path / "starbooks.db"
    os.environ["STARBOOKS_DB_PATH"] = str(db_path)

    database = Database(str(db_path))
    database.create_tables()
    yield database

    # Cleanup
    reset_db()
    reset_config()
    if "STARBOOKS_DB_PATH" in os.environ:
        del os.environ["STARBOOKS_DB_PATH"]


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_book_data() -> BookCreate:
    """Create sample book data for testing."""
    return BookCreate(
        title="Heir to the Empire",
        author="Timothy Zahn",
        notes="Thrawn trilogy, book one",
        rating=4,
    )


@pytest.fixture
def manager() -> ShelfManager:
    """Create an empty shelf manager."""
    return ShelfManager()


@pytest.fixture
def sample_snapshot() -> ShelfSnapshot:
    """Create a snapshot with books on every shelf."""
    return ShelfSnapshot(
        wishlist=(
            Book(title="Shadows of the Empire", author="Steve Perry"),
            Book(title="Dark Force Rising", author="Timothy Zahn", rating=2),
        ),
        archives=(
            Book(title="Lost Stars", author="Claudia Gray", rating=5, notes="Loved it"),
        ),
        hangar=(
            Book(title="Bloodline", author="Claudia Gray", rating=3),
            Book(title="ahsoka", author="E. K. Johnston", rating=4),
            Book(title="Thrawn", author="Timothy Zahn", rating=3),
        ),
    )


@pytest.fixture
def populated_manager(sample_snapshot: ShelfSnapshot) -> ShelfManager:
    """Create a shelf manager loaded with the sample snapshot."""
    return ShelfManager(sample_snapshot)
