"""Render a document snapshot as Markdown.

The transform is pure: the same snapshot always yields the same string.
Markdown-special characters in document text are passed through as-is.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from gdrive_mcp.document import (
    Document,
    Paragraph,
    StructuralElement,
    Table,
)
from gdrive_mcp.styles import compose_run

HORIZONTAL_RULE = "\n---\n\n"

# Block prefixes by named paragraph style
HEADING_PREFIXES: dict[str, str] = {
    "HEADING_1": "# ",
    "HEADING_2": "## ",
    "HEADING_3": "### ",
    "HEADING_4": "#### ",
    "HEADING_5": "##### ",
    "HEADING_6": "###### ",
    "TITLE": "# ",
    "SUBTITLE": "## ",
}

_TRAILING_NEWLINES = re.compile(r"\n+$")


def render_markdown(document: Document) -> str:
    """Render the document body as Markdown, trimmed at both ends."""
    return "".join(render_block(block) for block in document.content).strip()


def render_block(block: StructuralElement) -> str:
    if block.paragraph is not None:
        return render_paragraph(block.paragraph)
    if block.table is not None:
        return render_table(block.table)
    if block.section_break is not None:
        return HORIZONTAL_RULE
    return ""


def render_paragraph(paragraph: Paragraph) -> str:
    text = "".join(
        compose_run(element.text_run)
        for element in paragraph.elements or []
        if element.text_run is not None
    )
    text = _TRAILING_NEWLINES.sub("", text)

    # Empty paragraphs keep the document's vertical spacing
    if not text:
        return "\n"

    prefix = HEADING_PREFIXES.get(paragraph.named_style or "")
    if prefix is not None:
        return f"{prefix}{text}\n\n"

    if paragraph.bullet is not None:
        level = paragraph.bullet.nesting_level or 0
        marker = "1." if level == 0 else "-"
        return f"{'  ' * level}{marker} {text}\n"

    return f"{text}\n\n"


def render_table(table: Table) -> str:
    rows = table.table_rows or []
    if not rows:
        return ""

    lines: list[str] = []
    for i, row in enumerate(rows):
        cells = [_cell_text(cell.content or []) for cell in row.table_cells or []]
        lines.append(f"| {' | '.join(cells)} |")
        if i == 0:
            lines.append(f"| {' | '.join('---' for _ in cells)} |")

    return "\n" + "\n".join(lines) + "\n\n"


def _cell_text(content: Sequence[StructuralElement]) -> str:
    # Only the cell's own paragraphs; nested tables are not flattened in
    text = "".join(
        (el.text_run.content or "").replace("\n", " ").strip()
        for block in content
        if block.paragraph is not None
        for el in block.paragraph.elements or []
        if el.text_run is not None
    )
    return text or " "
