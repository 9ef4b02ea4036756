"""Compile one edit intent into an ordered list of batchUpdate requests.

All indices are computed against the snapshot the target was resolved
from. When the compiler chains its own requests (insert text, then style
the inserted span) it tracks the shift itself with an insertion cursor that
lives only for one compilation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from gdrive_mcp import instructions
from gdrive_mcp.document import utf16_len
from gdrive_mcp.exceptions import InvalidEditIntent, MissingRequiredPayload
from gdrive_mcp.intents import (
    BulletListItem,
    Delete,
    HeadingItem,
    InsertAfter,
    InsertBefore,
    Intent,
    ParagraphItem,
    Replace,
    UpdateParagraphStyle,
    UpdateTextStyle,
)
from gdrive_mcp.locator import Target
from gdrive_mcp.styles import (
    PARAGRAPH_STYLE_PROPS,
    TEXT_STYLE_PROPS,
    build_style_update,
)

ContentItem = HeadingItem | ParagraphItem | BulletListItem


@dataclass
class CompiledEdit:
    """Requests for one intent plus a one-line description of the edit."""

    requests: list[dict[str, Any]] = field(default_factory=list)
    description: str = ""


def compile_intent(intent: Intent, target: Target) -> CompiledEdit:
    """Translate ``intent`` against its resolved ``target``.

    Nothing is emitted unless every precondition holds, so a failing intent
    never produces a partial batch.

    Raises:
        MissingRequiredPayload: Style patch or content absent or empty
        TargetNotRangeable: Target lacks the indices the operation needs
    """
    match intent:
        case UpdateTextStyle():
            return _compile_text_style(intent, target)
        case UpdateParagraphStyle():
            return _compile_paragraph_style(intent, target)
        case Delete():
            start, end = target.require_range("delete")
            return CompiledEdit(
                requests=[instructions.delete_content_range(start, end)],
                description=f"Deleted element from index {start} to {end}",
            )
        case Replace():
            content = _require_content(intent.content, "Replace")
            start, end = target.require_range("replace")
            return CompiledEdit(
                requests=[
                    instructions.delete_content_range(start, end),
                    *generate_content_requests(content, start),
                ],
                description=f"Replaced element at index {start}-{end}",
            )
        case InsertAfter():
            content = _require_content(intent.content, "insertAfter")
            index = target.require_index("endIndex", "insertAfter")
            return CompiledEdit(
                requests=generate_content_requests(content, index),
                description=f"Insert index: {index}",
            )
        case InsertBefore():
            content = _require_content(intent.content, "insertBefore")
            index = target.require_index("startIndex", "insertBefore")
            return CompiledEdit(
                requests=generate_content_requests(content, index),
                description=f"Insert index: {index}",
            )

    raise InvalidEditIntent(f"Unsupported edit intent: {type(intent).__name__}")


def generate_content_requests(
    content: Sequence[ContentItem], start_index: int
) -> list[dict[str, Any]]:
    """Insert requests for ``content``, laid out from ``start_index`` onward.

    Each item's requests are computed from the cursor before it and the
    cursor then advances by the UTF-16 length of the inserted text.
    """
    requests: list[dict[str, Any]] = []
    cursor = start_index
    for item in content:
        item_requests, cursor = content_item_requests(item, cursor)
        requests.extend(item_requests)
    return requests


def content_item_requests(
    item: ContentItem, cursor: int
) -> tuple[list[dict[str, Any]], int]:
    """Requests for one content item at ``cursor`` and the cursor after it."""
    match item:
        case HeadingItem():
            text = f"{item.text}\n"
            end = cursor + utf16_len(text)
            return [
                instructions.insert_text(cursor, text),
                instructions.named_style(cursor, end, f"HEADING_{item.level}"),
            ], end

        case ParagraphItem():
            text = f"{item.text}\n"
            return [instructions.insert_text(cursor, text)], cursor + utf16_len(text)

        case BulletListItem():
            requests: list[dict[str, Any]] = []
            for entry in item.items:
                text = f"{entry}\n"
                end = cursor + utf16_len(text)
                requests.append(instructions.insert_text(cursor, text))
                # Reset first so the item does not inherit a preceding heading
                requests.append(instructions.named_style(cursor, end, "NORMAL_TEXT"))
                requests.append(instructions.create_paragraph_bullets(cursor, end))
                cursor = end
            return requests, cursor

    raise InvalidEditIntent(f"Unsupported content item: {type(item).__name__}")


def _compile_text_style(intent: UpdateTextStyle, target: Target) -> CompiledEdit:
    if intent.text_style is None:
        raise MissingRequiredPayload(
            "updateTextStyle operation requires textStyle to be provided"
        )
    update = build_style_update(intent.text_style, TEXT_STYLE_PROPS)
    if not update:
        raise MissingRequiredPayload(
            "updateTextStyle operation requires at least one textStyle attribute"
        )
    start, end = target.require_range("updateTextStyle")
    return CompiledEdit(
        requests=[instructions.update_text_style(start, end, update)],
        description=f"Updated text style from index {start} to {end}",
    )


def _compile_paragraph_style(
    intent: UpdateParagraphStyle, target: Target
) -> CompiledEdit:
    if intent.paragraph_style is None:
        raise MissingRequiredPayload(
            "updateParagraphStyle operation requires paragraphStyle to be provided"
        )
    update = build_style_update(intent.paragraph_style, PARAGRAPH_STYLE_PROPS)
    if not update:
        raise MissingRequiredPayload(
            "updateParagraphStyle operation requires at least one paragraphStyle attribute"
        )
    start, end = target.require_range("updateParagraphStyle")
    return CompiledEdit(
        requests=[instructions.update_paragraph_style(start, end, update)],
        description=f"Updated paragraph style from index {start} to {end}",
    )


def _require_content(
    content: list[ContentItem] | None, operation: str
) -> list[ContentItem]:
    if not content:
        raise MissingRequiredPayload(
            f"{operation} operation requires content to be provided"
        )
    # An empty list inserts nothing
    if any(isinstance(item, BulletListItem) and not item.items for item in content):
        raise MissingRequiredPayload(
            f"{operation} operation requires bulletList content to have at least one item"
        )
    return content
