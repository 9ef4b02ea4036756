"""Text reports for Drive comment threads."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

THREAD_SEPARATOR = "─" * 80
NO_COMMENTS = "No comments found on this document."

UNANCHORED_NOTE = (
    "Note: This comment appears as an unanchored comment in the document's "
    '"All Comments" view.\n'
    "The Drive API does not support creating comments anchored to specific "
    "text in Google Docs."
)
ASSIGNEE_NOTE = (
    "Note: Assigning comments is not supported by the Drive API; "
    "the assignee {email} was not set."
)


def _author(item: dict[str, Any]) -> dict[str, Any]:
    author: dict[str, Any] = item.get("author") or {}
    return author


def format_comment_threads(comments: Sequence[dict[str, Any]]) -> str:
    """Render every thread with its status, quoted text and replies."""
    if not comments:
        return NO_COMMENTS

    lines = [f"Found {len(comments)} comment thread(s):", ""]
    for comment in comments:
        author = _author(comment)
        lines.append(THREAD_SEPARATOR)
        lines.append(f"Comment ID: {comment.get('id')}")
        lines.append(f"Created: {comment.get('createdTime')}")
        lines.append(f"Modified: {comment.get('modifiedTime')}")
        lines.append(
            f"Author: {author.get('displayName') or 'Unknown'} "
            f"({author.get('emailAddress') or 'N/A'})"
        )
        lines.append(f"Status: {'RESOLVED' if comment.get('resolved') else 'OPEN'}")

        quoted = (comment.get("quotedFileContent") or {}).get("value")
        if quoted:
            lines.extend(["", f'Quoted text: "{quoted}"'])
        if comment.get("anchor"):
            lines.append(f"Anchor: {comment['anchor']}")

        lines.extend(["", f"Comment: {comment.get('content')}"])

        replies = comment.get("replies") or []
        if replies:
            lines.extend(["", f"Replies ({len(replies)}):"])
            for reply in replies:
                name = _author(reply).get("displayName") or "Unknown"
                lines.append(f"  • {name} ({reply.get('createdTime')}):")
                lines.append(f"    {reply.get('content')}")
        lines.append("")

    return "\n".join(lines)


def format_created_comment(comment: dict[str, Any]) -> str:
    return "\n".join(
        [
            "Comment created successfully!",
            "",
            f"Comment ID: {comment.get('id')}",
            f"Author: {_author(comment).get('displayName')}",
            f"Created: {comment.get('createdTime')}",
            f"Content: {comment.get('content')}",
            "",
            UNANCHORED_NOTE,
        ]
    )


def format_reply(
    reply: dict[str, Any],
    *,
    resolved: bool = False,
    assignee_email: str | None = None,
) -> str:
    lines = [
        "Reply added successfully!",
        "",
        f"Reply ID: {reply.get('id')}",
        f"Author: {_author(reply).get('displayName')}",
        f"Created: {reply.get('createdTime')}",
        f"Content: {reply.get('content')}",
    ]
    if resolved:
        lines.extend(["", "Thread marked as RESOLVED."])
    if assignee_email:
        lines.extend(["", ASSIGNEE_NOTE.format(email=assignee_email)])
    return "\n".join(lines)
