"""Builders for Google Docs batchUpdate request dicts (mutation instructions).

Each function returns one tagged request object exactly as the Docs API
expects it inside ``{"requests": [...]}``.
"""

from __future__ import annotations

from typing import Any

from gdrive_mcp.styles import StyleUpdate

DEFAULT_BULLET_PRESET = "BULLET_DISC_CIRCLE_SQUARE"


def _range(start_index: int, end_index: int) -> dict[str, int]:
    return {"startIndex": start_index, "endIndex": end_index}


def insert_text(index: int, text: str) -> dict[str, Any]:
    return {"insertText": {"location": {"index": index}, "text": text}}


def delete_content_range(start_index: int, end_index: int) -> dict[str, Any]:
    return {"deleteContentRange": {"range": _range(start_index, end_index)}}


def update_paragraph_style(
    start_index: int, end_index: int, update: StyleUpdate
) -> dict[str, Any]:
    return {
        "updateParagraphStyle": {
            "range": _range(start_index, end_index),
            "paragraphStyle": update.payload,
            "fields": update.mask,
        }
    }


def update_text_style(
    start_index: int, end_index: int, update: StyleUpdate
) -> dict[str, Any]:
    return {
        "updateTextStyle": {
            "range": _range(start_index, end_index),
            "textStyle": update.payload,
            "fields": update.mask,
        }
    }


def named_style(start_index: int, end_index: int, style: str) -> dict[str, Any]:
    """Set only ``namedStyleType`` over a range."""
    return update_paragraph_style(
        start_index,
        end_index,
        StyleUpdate(payload={"namedStyleType": style}, fields=("namedStyleType",)),
    )


def create_paragraph_bullets(
    start_index: int, end_index: int, preset: str = DEFAULT_BULLET_PRESET
) -> dict[str, Any]:
    return {
        "createParagraphBullets": {
            "range": _range(start_index, end_index),
            "bulletPreset": preset,
        }
    }


def request_kind(request: dict[str, Any]) -> str:
    """The tag of a request object, e.g. ``"insertText"``."""
    return next(iter(request), "unknown")
