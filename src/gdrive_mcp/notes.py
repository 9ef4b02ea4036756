"""Numbered, highlighted note blocks inside a document.

A note is its own paragraph reading ``📝 NOTE <n>: <text>``. Numbers are
assigned max + 1 over the notes already in the document. The planners here
are pure: they read a snapshot and return the batch to submit.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from gdrive_mcp import instructions
from gdrive_mcp.document import (
    Document,
    Paragraph,
    StructuralElement,
    iter_paragraphs,
    utf16_len,
)
from gdrive_mcp.exceptions import TextNotFound
from gdrive_mcp.styles import StyleUpdate, points, rgb

NOTE_MARKER = "📝 NOTE"

_NOTE_NUMBER = re.compile(r"📝 NOTE (\d+):")

NOTE_PARAGRAPH_STYLE = StyleUpdate(
    payload={
        "namedStyleType": "NORMAL_TEXT",
        "shading": {"backgroundColor": rgb(1.0, 0.95, 0.8)},
        "indentStart": points(20),
        "indentEnd": points(20),
        "spaceAbove": points(8),
        "spaceBelow": points(8),
    },
    fields=(
        "namedStyleType",
        "shading",
        "indentStart",
        "indentEnd",
        "spaceAbove",
        "spaceBelow",
    ),
)
NOTE_TEXT_STYLE = StyleUpdate(payload={"fontSize": points(11)}, fields=("fontSize",))
NOTE_LABEL_STYLE = StyleUpdate(
    payload={"bold": True, "foregroundColor": rgb(0.8, 0.4, 0.0)},
    fields=("bold", "foregroundColor"),
)


@dataclass
class NoteEdit:
    """The batch for one note operation plus what the report needs."""

    note_number: int
    text: str
    requests: list[dict[str, Any]] = field(default_factory=list)
    previous_text: str = ""


def note_label(number: int) -> str:
    return f"{NOTE_MARKER} {number}:"


def next_note_number(document: Document) -> int:
    """One more than the highest note number in the document, or 1."""
    highest = 0
    for _, paragraph in iter_paragraphs(document.content):
        for element in paragraph.elements or []:
            content = element.text_run.content if element.text_run else None
            for match in _NOTE_NUMBER.finditer(content or ""):
                highest = max(highest, int(match.group(1)))
    return highest + 1


def plan_insert_note(document: Document, search_text: str, note: str) -> NoteEdit:
    """Insert a new note after the first paragraph containing ``search_text``.

    Raises:
        TextNotFound: No text run contains ``search_text``
    """
    block = _find_block(document, lambda p: _any_run_contains(p, search_text))
    if block is None or block.end_index is None:
        raise TextNotFound(
            f"Could not find the text \"{search_text}\" in the document. "
            "Please provide exact text that exists in the document."
        )

    number = next_note_number(document)
    anchor = block.end_index
    text = f"\n{note_label(number)} {note}\n\n"

    # Skip the leading newline and the two trailing ones
    span_start = anchor + 1
    span_end = anchor + utf16_len(text) - 2
    label_end = span_start + utf16_len(note_label(number))

    return NoteEdit(
        note_number=number,
        text=text,
        requests=[
            instructions.insert_text(anchor, text),
            instructions.update_paragraph_style(
                span_start, span_end, NOTE_PARAGRAPH_STYLE
            ),
            instructions.update_text_style(span_start, span_end, NOTE_TEXT_STYLE),
            instructions.update_text_style(span_start, label_end, NOTE_LABEL_STYLE),
        ],
    )


def plan_update_note(document: Document, number: int, text: str) -> NoteEdit:
    """Replace the body of note ``number``, keeping its label and styling.

    Raises:
        TextNotFound: The document has no note with that number
    """
    prefix = f"{note_label(number)} "
    block = _find_block(document, lambda p: prefix in p.plain_text())
    if block is None or block.paragraph is None or block.start_index is None:
        raise _note_not_found(number)

    paragraph_text = block.paragraph.plain_text()
    body_start = paragraph_text.index(prefix) + len(prefix)
    newline = paragraph_text.find("\n", body_start)
    body_end = newline if newline != -1 else len(paragraph_text)
    previous = paragraph_text[body_start:body_end]

    start = block.start_index + utf16_len(paragraph_text[:body_start])
    end = start + utf16_len(previous)

    requests: list[dict[str, Any]] = []
    if end > start:
        requests.append(instructions.delete_content_range(start, end))
    requests.append(instructions.insert_text(start, text))

    return NoteEdit(
        note_number=number,
        text=text,
        requests=requests,
        previous_text=previous,
    )


def plan_remove_note(document: Document, number: int) -> NoteEdit:
    """Delete note ``number`` together with the newline in front of it.

    Raises:
        TextNotFound: The document has no note with that number
    """
    label = note_label(number)
    block = _find_block(document, lambda p: _any_run_contains(p, label))
    if (
        block is None
        or block.paragraph is None
        or block.start_index is None
        or block.end_index is None
    ):
        raise _note_not_found(number)

    start = max(block.start_index - 1, 1)
    return NoteEdit(
        note_number=number,
        text=block.paragraph.plain_text().strip(),
        requests=[instructions.delete_content_range(start, block.end_index)],
    )


def _find_block(
    document: Document, predicate: Callable[[Paragraph], bool]
) -> StructuralElement | None:
    # First match in document order wins
    for block, paragraph in iter_paragraphs(document.content):
        if predicate(paragraph):
            return block
    return None


def _any_run_contains(paragraph: Paragraph, needle: str) -> bool:
    return any(
        needle in (element.text_run.content or "")
        for element in paragraph.elements or []
        if element.text_run is not None
    )


def _note_not_found(number: int) -> TextNotFound:
    return TextNotFound(f"Could not find NOTE {number} in the document.")
