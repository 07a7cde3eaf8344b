"""Data export."""

from .json_export import JSONExporter, JSONExportResult

__all__ = [
    "JSONExporter",
    "JSONExportResult",
]
