"""gdrive-mcp - Google Docs and Drive tools for MCP clients.

Reads Google Docs as Markdown, compiles semantic edit intents addressed
with JSONPath into Docs ``batchUpdate`` requests, and exposes Drive search,
comments and note blocks as MCP tools.
"""

__version__ = "0.1.0"

from gdrive_mcp.compiler import CompiledEdit, compile_intent, generate_content_requests
from gdrive_mcp.document import Document, check_contiguity, utf16_len, walk
from gdrive_mcp.exceptions import (
    AmbiguousTarget,
    CredentialsError,
    EditError,
    GdriveMcpError,
    InvalidDocumentReference,
    InvalidEditIntent,
    MissingRequiredPayload,
    TargetNotFound,
    TargetNotRangeable,
    TextNotFound,
    UnsupportedFileType,
    UpstreamServiceError,
)
from gdrive_mcp.intents import parse_intent
from gdrive_mcp.locator import Target, locate
from gdrive_mcp.markdown import render_markdown
from gdrive_mcp.service import DocsService
from gdrive_mcp.summary import build_update_summary
from gdrive_mcp.transport import (
    APIError,
    AuthenticationError,
    GoogleWorkspaceTransport,
    LocalFileTransport,
    NotFoundError,
    Transport,
    TransportError,
)

__all__ = [
    "APIError",
    "AmbiguousTarget",
    "AuthenticationError",
    "CompiledEdit",
    "CredentialsError",
    "DocsService",
    "Document",
    "EditError",
    "GdriveMcpError",
    "GoogleWorkspaceTransport",
    "InvalidDocumentReference",
    "InvalidEditIntent",
    "LocalFileTransport",
    "MissingRequiredPayload",
    "NotFoundError",
    "Target",
    "TargetNotFound",
    "TargetNotRangeable",
    "TextNotFound",
    "Transport",
    "TransportError",
    "UnsupportedFileType",
    "UpstreamServiceError",
    "__version__",
    "build_update_summary",
    "check_contiguity",
    "compile_intent",
    "generate_content_requests",
    "locate",
    "parse_intent",
    "render_markdown",
    "utf16_len",
    "walk",
]
