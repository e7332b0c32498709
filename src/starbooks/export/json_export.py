"""JSON export functionality.

Provides a full backup of all three shelves and restores one.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..db.sqlite import Database, get_db
from ..shelves.schemas import ShelfSnapshot

EXPORT_VERSION = "1.0"


@dataclass
class JSONExportResult:
    """Result of a JSON export or import operation."""

    success: bool
    file_path: Optional[Path] = None
    books_exported: int = 0
    error: Optional[str] = None


class JSONExporter:
    """Exports and imports shelf data as JSON."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize exporter.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def export_all(self, output_path: Path, pretty: bool = True) -> JSONExportResult:
        """Export all shelves to a JSON file.

        Args:
            output_path: Path for output file
            pretty: Pretty-print JSON output

        Returns:
            JSONExportResult with success status
        """
        try:
            snapshot = self.db.load_snapshot()

            export_data = {
                "version": EXPORT_VERSION,
                "exported_at": datetime.now(timezone.utc).isoformat(),
                "shelves": snapshot.model_dump(mode="json"),
            }

            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(export_data, f, indent=2 if pretty else None, ensure_ascii=False)

            return JSONExportResult(
                success=True,
                file_path=output_path,
                books_exported=snapshot.total_books,
            )

        except OSError as e:
            return JSONExportResult(success=False, error=str(e))

    def import_all(self, input_path: Path) -> JSONExportResult:
        """Replace all stored shelves with the contents of an export file.

        Args:
            input_path: Path to a file written by export_all

        Returns:
            JSONExportResult with the number of books imported
        """
        input_path = Path(input_path)
        try:
            with open(input_path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            return JSONExportResult(success=False, file_path=input_path, error=str(e))
        except json.JSONDecodeError as e:
            return JSONExportResult(
                success=False, file_path=input_path, error=f"Invalid JSON: {e}"
            )

        if not isinstance(data, dict) or "shelves" not in data:
            return JSONExportResult(
                success=False, file_path=input_path, error="Missing 'shelves' section"
            )

        try:
            snapshot = ShelfSnapshot.model_validate(data["shelves"])
        except ValidationError as e:
            return JSONExportResult(
                success=False, file_path=input_path, error=f"Invalid shelf data: {e}"
            )

        self.db.save_snapshot(snapshot)
        return JSONExportResult(
            success=True,
            file_path=input_path,
            books_exported=snapshot.total_books,
        )
