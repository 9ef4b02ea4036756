"""Drive file search: query building and result formatting."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

DEFAULT_MAX_RESULTS = 10
MAX_RESULTS_LIMIT = 100

NO_FILES_FOUND = "No files found matching your query."

MIME_TYPE_LABELS: dict[str, str] = {
    "application/vnd.google-apps.document": "Google Doc",
    "application/vnd.google-apps.spreadsheet": "Google Sheet",
    "application/vnd.google-apps.presentation": "Google Slides",
    "application/vnd.google-apps.form": "Google Form",
    "application/vnd.google-apps.folder": "Folder",
    "application/pdf": "PDF",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": (
        "Word Document"
    ),
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": (
        "Excel Spreadsheet"
    ),
    "text/plain": "Text File",
    "image/jpeg": "JPEG Image",
    "image/png": "PNG Image",
}

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def build_search_query(query: str) -> str:
    """Turn free text into a Drive query; Drive query syntax passes through.

    Anything containing ``:`` is treated as already written in the Drive
    query language (``mimeType:...``, ``modifiedTime > '...'`` with a colon
    in the timestamp, and so on).
    """
    if ":" in query:
        return query
    escaped = query.replace("\\", "\\\\").replace("'", "\\'")
    return f"fullText contains '{escaped}' or name contains '{escaped}'"


def clamp_max_results(max_results: int | None) -> int:
    if max_results is None:
        return DEFAULT_MAX_RESULTS
    return max(1, min(MAX_RESULTS_LIMIT, max_results))


def mime_type_label(mime_type: str) -> str:
    return MIME_TYPE_LABELS.get(mime_type, mime_type)


def format_file_size(size: int) -> str:
    """Human readable size with up to two decimals, e.g. ``1.5 KB``."""
    if size <= 0:
        return "0 Bytes"
    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(_SIZE_UNITS) - 1:
        exponent += 1
    value = round(size / 1024**exponent, 2)
    return f"{value:g} {_SIZE_UNITS[exponent]}"


def format_modified_date(timestamp: str | None) -> str:
    if not timestamp:
        return "Unknown"
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    return parsed.date().isoformat()


def format_search_results(files: Sequence[dict[str, Any]]) -> str:
    """Render a ``files.list`` result as the text returned to the caller."""
    if not files:
        return NO_FILES_FOUND

    lines = [f"Found {len(files)} file(s):", ""]
    for file in files:
        owners = file.get("owners") or [{}]
        size = file.get("size")
        lines.extend(
            [
                f"📄 {file.get('name')}",
                f"   Type: {mime_type_label(file.get('mimeType') or 'unknown')}",
                f"   ID: {file.get('id')}",
                f"   Modified: {format_modified_date(file.get('modifiedTime'))}",
                f"   Owner: {owners[0].get('displayName') or 'Unknown'}",
                f"   Size: {format_file_size(int(size)) if size else 'N/A'}",
                f"   Link: {file.get('webViewLink')}",
                "",
            ]
        )
    return "\n".join(lines)
