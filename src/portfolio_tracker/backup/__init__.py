"""Backup export and import file handling."""

from portfolio_tracker.backup.exporter import BackupExporter, CSV_COLUMNS, export_filename
from portfolio_tracker.backup.reader import parse_payload, read_payload

__all__ = [
    "BackupExporter",
    "CSV_COLUMNS",
    "export_filename",
    "parse_payload",
    "read_payload",
]
