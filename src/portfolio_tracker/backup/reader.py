"""Reading import files into raw payloads."""

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, Optional

from portfolio_tracker.backup.exporter import CSV_COLUMNS
from portfolio_tracker.core.exceptions import ImportPayloadError

logger = logging.getLogger(__name__)

REQUIRED_CSV_COLUMNS = {"date", "type", "shares", "price"}


def read_payload(path: str) -> Any:
    """Read a JSON or CSV import file from disk."""
    file_path = Path(path)
    if not file_path.exists():
        raise ImportPayloadError(f"File not found: {path}")
    return parse_payload(file_path.read_bytes(), file_path.name)


def parse_payload(raw: bytes, filename: Optional[str] = None) -> Any:
    """
    Decode uploaded file content into a raw payload for the ImportReconciler.

    JSON is returned as parsed. CSV becomes a list of transaction dicts keyed
    by the export column names.
    """
    if not raw:
        raise ImportPayloadError("Import file is empty")
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ImportPayloadError("Import file is not UTF-8 text") from e

    name = (filename or "").lower()
    if name.endswith(".csv"):
        return _parse_csv(text)
    if name.endswith(".json") or text.lstrip()[:1] in ("[", "{"):
        return _parse_json(text)
    return _parse_csv(text)


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportPayloadError(f"Invalid JSON at line {e.lineno}: {e.msg}") from e


def _parse_csv(text: str) -> list[dict[str, Any]]:
    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        raise ImportPayloadError("CSV file has no header row")

    header = {column.strip() for column in reader.fieldnames}
    missing = REQUIRED_CSV_COLUMNS - header
    if missing:
        raise ImportPayloadError(f"Missing required columns: {', '.join(sorted(missing))}")
    unknown = header - set(CSV_COLUMNS)
    if unknown:
        logger.debug(f"Ignoring unknown CSV columns: {', '.join(sorted(unknown))}")

    rows: list[dict[str, Any]] = []
    for row in reader:
        cleaned = {
            (key or "").strip(): (value or "").strip()
            for key, value in row.items()
            if key and key.strip() in CSV_COLUMNS
        }
        if not any(cleaned.values()):
            continue
        # Empty notes are absent, not blank
        if not cleaned.get("notes"):
            cleaned.pop("notes", None)
        rows.append(cleaned)
    return rows
