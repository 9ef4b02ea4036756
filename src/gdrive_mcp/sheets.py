"""Render spreadsheet cell values as a Markdown table."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

EMPTY_SPREADSHEET = "*(empty spreadsheet)*"
DEFAULT_SHEET = "Sheet1"


def default_range(sheet_titles: Sequence[str]) -> str:
    """The first sheet's title, or ``Sheet1`` when the spreadsheet has none."""
    if sheet_titles and sheet_titles[0]:
        return sheet_titles[0]
    return DEFAULT_SHEET


def values_to_markdown(values: Sequence[Sequence[Any]]) -> str:
    """Render rows of cell values with the first row as the header.

    Short rows are padded to the widest row and empty cells render as a
    single space so every row has the same number of pipes.
    """
    if not values:
        return EMPTY_SPREADSHEET

    width = max(len(row) for row in values)
    rows = [
        [_cell(value) for value in row] + [" "] * (width - len(row))
        for row in values
    ]

    lines = [_row(rows[0]), _row(["---"] * width)]
    lines.extend(_row(row) for row in rows[1:])
    return "\n".join(lines) + "\n"


def _cell(value: Any) -> str:
    if value is None:
        return " "
    text = str(value)
    return text if text else " "


def _row(cells: Sequence[str]) -> str:
    return f"| {' | '.join(cells)} |"
