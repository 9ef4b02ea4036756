"""Human-readable change log for an executed batch."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from gdrive_mcp.instructions import request_kind

PREVIEW_LENGTH = 50


def build_update_summary(
    requests: Sequence[dict[str, Any]],
    replies: Sequence[dict[str, Any]] | None = None,
) -> str:
    """One line per request, in submission order.

    ``replies`` are the per-request replies from batchUpdate; they are used
    when present and ignored otherwise.
    """
    lines: list[str] = []
    replies = replies or []

    for i, request in enumerate(requests):
        if not request:
            continue
        kind = request_kind(request)
        reply = replies[i] if i < len(replies) else {}
        describe = _DESCRIBERS.get(kind)
        if describe is None:
            lines.append(f"- Executed operation: {kind}")
        else:
            lines.append(describe(request[kind] or {}, reply or {}))

    if not lines:
        return "No operations described"
    return "Operations performed:\n" + "\n".join(lines)


def _preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return f"{text[:PREVIEW_LENGTH]}..."
    return text


def _range(body: dict[str, Any]) -> tuple[Any, Any]:
    rng = body.get("range") or {}
    return rng.get("startIndex"), rng.get("endIndex")


def _insert_text(body: dict[str, Any], _reply: dict[str, Any]) -> str:
    index = (body.get("location") or {}).get("index")
    if index is None and "endOfSegmentLocation" in body:
        index = "end of segment"
    return f'- Inserted text at index {index}: "{_preview(body.get("text") or "")}"'


def _delete_content_range(body: dict[str, Any], _reply: dict[str, Any]) -> str:
    start, end = _range(body)
    return f"- Deleted content from index {start} to {end}"


def _update_text_style(body: dict[str, Any], _reply: dict[str, Any]) -> str:
    start, end = _range(body)
    return f"- Updated text style from index {start} to {end}"


def _update_paragraph_style(body: dict[str, Any], _reply: dict[str, Any]) -> str:
    start, end = _range(body)
    return f"- Updated paragraph style from index {start} to {end}"


def _insert_table(body: dict[str, Any], _reply: dict[str, Any]) -> str:
    index = (body.get("location") or {}).get("index")
    return (
        f"- Inserted table with {body.get('rows')} rows and "
        f"{body.get('columns')} columns at index {index}"
    )


def _insert_table_row(body: dict[str, Any], _reply: dict[str, Any]) -> str:
    side = "below" if body.get("insertBelow") else "above"
    return f"- Inserted table row {side}"


def _insert_table_column(body: dict[str, Any], _reply: dict[str, Any]) -> str:
    side = "right" if body.get("insertRight") else "left"
    return f"- Inserted table column to the {side}"


def _delete_table_row(_body: dict[str, Any], _reply: dict[str, Any]) -> str:
    return "- Deleted table row"


def _delete_table_column(_body: dict[str, Any], _reply: dict[str, Any]) -> str:
    return "- Deleted table column"


def _replace_all_text(body: dict[str, Any], reply: dict[str, Any]) -> str:
    search = (body.get("containsText") or {}).get("text")
    line = f'- Replaced all occurrences of "{search}" with "{body.get("replaceText")}"'
    changed = (reply.get("replaceAllText") or {}).get("occurrencesChanged")
    if changed is not None:
        line += f" ({changed} changed)"
    return line


def _create_paragraph_bullets(body: dict[str, Any], _reply: dict[str, Any]) -> str:
    start, end = _range(body)
    return f"- Created paragraph bullets from index {start} to {end}"


def _delete_paragraph_bullets(body: dict[str, Any], _reply: dict[str, Any]) -> str:
    start, end = _range(body)
    return f"- Deleted paragraph bullets from index {start} to {end}"


_DESCRIBERS: dict[str, Callable[[dict[str, Any], dict[str, Any]], str]] = {
    "insertText": _insert_text,
    "deleteContentRange": _delete_content_range,
    "updateTextStyle": _update_text_style,
    "updateParagraphStyle": _update_paragraph_style,
    "insertTable": _insert_table,
    "insertTableRow": _insert_table_row,
    "insertTableColumn": _insert_table_column,
    "deleteTableRow": _delete_table_row,
    "deleteTableColumn": _delete_table_column,
    "replaceAllText": _replace_all_text,
    "createParagraphBullets": _create_paragraph_bullets,
    "deleteParagraphBullets": _delete_paragraph_bullets,
}
