"""Exception hierarchy for gdrive-mcp.

Every failure a tool call can surface derives from ``GdriveMcpError``.
Nothing here is retried; the caller re-fetches and tries again with
corrected input.
"""

from __future__ import annotations


class GdriveMcpError(Exception):
    """Base class for all gdrive-mcp errors."""


class EditError(GdriveMcpError):
    """Base class for errors raised while compiling an edit intent."""


class TargetNotFound(EditError):
    """Raised when a target expression matches no node in the snapshot."""

    def __init__(self, expression: str, detail: str = "") -> None:
        message = f"No element found at JSONPath: {expression}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)
        self.expression = expression


class AmbiguousTarget(EditError):
    """Raised when a target expression matches more than one node."""

    def __init__(self, expression: str, paths: list[str]) -> None:
        shown = ", ".join(paths[:5])
        if len(paths) > 5:
            shown += ", ..."
        super().__init__(
            f"Multiple elements found at JSONPath: {expression}. "
            f"Path must be unique ({len(paths)} matches: {shown})"
        )
        self.expression = expression
        self.paths = paths


class TargetNotRangeable(EditError):
    """Raised when a target lacks the startIndex/endIndex an operation needs."""


class MissingRequiredPayload(EditError):
    """Raised when an operation is missing its content or style patch."""


class InvalidEditIntent(EditError):
    """Raised when an edit request does not validate as a known intent."""


class InvalidDocumentReference(GdriveMcpError):
    """Raised when a document ID or URL cannot be parsed."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"Invalid document ID or URL: {reference!r}")
        self.reference = reference


class UpstreamServiceError(GdriveMcpError):
    """Raised when a Google API rejects or fails a request."""


class CredentialsError(GdriveMcpError):
    """Raised when no usable Google credentials are available."""


class TextNotFound(EditError):
    """Raised when a note anchor or note number is absent from the document."""


class UnsupportedFileType(GdriveMcpError):
    """Raised when a Drive file is neither a Google Doc nor a Google Sheet."""

    def __init__(self, mime_type: str | None) -> None:
        super().__init__(f"Unsupported file type: {mime_type}")
        self.mime_type = mime_type
