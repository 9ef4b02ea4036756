"""Parse Google Docs / Sheets URLs and bare file IDs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from gdrive_mcp.exceptions import InvalidDocumentReference

DOCUMENT_MIME_TYPE = "application/vnd.google-apps.document"
SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"

_DOCUMENT_URL = re.compile(r"/document/d/([a-zA-Z0-9_-]+)")
_SPREADSHEET_URL = re.compile(r"/spreadsheets/d/([a-zA-Z0-9_-]+)")
_BARE_ID = re.compile(r"^[a-zA-Z0-9_-]+$")


class FileKind(Enum):
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    UNKNOWN = "unknown"

    @classmethod
    def from_mime_type(cls, mime_type: str | None) -> FileKind:
        if mime_type == DOCUMENT_MIME_TYPE:
            return cls.DOCUMENT
        if mime_type == SPREADSHEET_MIME_TYPE:
            return cls.SPREADSHEET
        return cls.UNKNOWN


@dataclass(frozen=True)
class FileReference:
    """A file ID plus what the reference told us about its type."""

    file_id: str
    kind: FileKind


def extract_document_id(reference: str) -> str:
    """Extract a document ID from a Docs URL or return a bare ID unchanged.

    Args:
        reference: ``https://docs.google.com/document/d/<id>/edit`` or ``<id>``

    Returns:
        The document ID

    Raises:
        InvalidDocumentReference: Neither a Docs URL nor a valid bare ID
    """
    reference = reference.strip()
    match = _DOCUMENT_URL.search(reference)
    if match:
        return match.group(1)
    if _BARE_ID.match(reference):
        return reference
    raise InvalidDocumentReference(reference)


def parse_file_reference(reference: str) -> FileReference:
    """Like ``extract_document_id`` but also accepts Sheets URLs.

    A bare ID yields ``FileKind.UNKNOWN``; the caller resolves it from the
    file's Drive metadata.
    """
    reference = reference.strip()
    match = _DOCUMENT_URL.search(reference)
    if match:
        return FileReference(match.group(1), FileKind.DOCUMENT)
    match = _SPREADSHEET_URL.search(reference)
    if match:
        return FileReference(match.group(1), FileKind.SPREADSHEET)
    if _BARE_ID.match(reference):
        return FileReference(reference, FileKind.UNKNOWN)
    raise InvalidDocumentReference(reference)
