"""Export module for backing up and restoring shelves."""

from .json_export import JSONExporter, JSONExportResult

__all__ = [
    "JSONExporter",
    "JSONExportResult",
]
