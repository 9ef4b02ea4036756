"""Shared fixtures backed by the golden files in ``tests/golden``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from gdrive_mcp.document import Document
from gdrive_mcp.service import DocsService
from gdrive_mcp.transport import LocalFileTransport

GOLDEN_DIR = Path(__file__).parent / "golden"

SAMPLE_DOC_ID = "sample_doc"
NOTES_DOC_ID = "notes_doc"
SHEET_ID = "budget_sheet"


def load_golden(name: str) -> dict[str, Any]:
    data: dict[str, Any] = json.loads((GOLDEN_DIR / name).read_text(encoding="utf-8"))
    return data


@pytest.fixture
def golden_dir() -> Path:
    """Path to golden test files."""
    return GOLDEN_DIR


@pytest.fixture
def sample_raw() -> dict[str, Any]:
    """Raw ``documents.get`` response of the sample document."""
    return load_golden(f"{SAMPLE_DOC_ID}.json")


@pytest.fixture
def sample_document(sample_raw: dict[str, Any]) -> Document:
    return Document.from_raw(sample_raw)


@pytest.fixture
def sample_markdown() -> str:
    """Expected Markdown rendering of the sample document."""
    return (GOLDEN_DIR / f"{SAMPLE_DOC_ID}.md").read_text(encoding="utf-8")


@pytest.fixture
def notes_document() -> Document:
    return Document.from_raw(load_golden(f"{NOTES_DOC_ID}.json"))


@pytest.fixture
def local_transport(golden_dir: Path) -> LocalFileTransport:
    """Create a transport that reads from golden files."""
    return LocalFileTransport(golden_dir)


@pytest.fixture
def service(local_transport: LocalFileTransport) -> DocsService:
    """Create a DocsService with local file transport."""
    return DocsService(local_transport)
