"""MCP server exposing the Google Docs / Drive tools over stdio.

Every tool opens a ``DocsService`` on a freshly authorized transport, runs a
single operation and closes it again. Known failures become MCP tool errors
whose text starts with ``Error:``.
"""

from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from functools import partial
from typing import Annotated, Any, Literal

from loguru import logger
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import Field

from gdrive_mcp.config import Settings
from gdrive_mcp.exceptions import GdriveMcpError
from gdrive_mcp.service import DocsService, open_service

ServiceFactory = Callable[[], AbstractAsyncContextManager[DocsService]]

DocReference = Annotated[
    str,
    Field(
        description=(
            "Google Docs URL (e.g., https://docs.google.com/document/d/...) "
            "or document ID"
        )
    ),
]
OutputFormat = Annotated[
    Literal["markdown", "json"],
    Field(
        description=(
            "Output format: 'markdown' (default) for formatted text with "
            "structure, 'json' for full document structure"
        )
    ),
]

READ_ONLY = ToolAnnotations(readOnlyHint=True, idempotentHint=True)
MUTATING = ToolAnnotations(
    readOnlyHint=False, idempotentHint=False, destructiveHint=True
)
ADDITIVE = ToolAnnotations(
    readOnlyHint=False, idempotentHint=False, destructiveHint=False
)


async def run_tool(
    name: str,
    service_factory: ServiceFactory,
    action: Callable[[DocsService], Awaitable[str]],
) -> str:
    """Run ``action`` on a fresh service and map known errors to ``ToolError``."""
    try:
        async with service_factory() as service:
            return await action(service)
    except GdriveMcpError as e:
        logger.warning("{} failed: {}", name, e)
        raise ToolError(f"Error: {e}") from e


def register_read_tools(mcp_server: FastMCP, service_factory: ServiceFactory) -> None:
    """Register the tools that read documents and spreadsheets."""

    @mcp_server.tool(name="gdrive_get_doc_contents", annotations=READ_ONLY)
    async def get_doc_contents(
        doc_id_or_url: DocReference,
        format: OutputFormat = "markdown",
    ) -> str:
        """Get the contents of a Google Doc in different formats.

        Supports markdown (default, preserves structure like headings, lists,
        tables, formatting) or JSON (full document structure).
        """
        return await run_tool(
            "gdrive_get_doc_contents",
            service_factory,
            lambda service: service.get_doc_contents(doc_id_or_url, format),
        )

    @mcp_server.tool(name="gdrive_get_contents", annotations=READ_ONLY)
    async def get_contents(
        doc_id_or_url: Annotated[
            str,
            Field(description="Google Docs or Google Sheets URL, or file ID"),
        ],
        format: OutputFormat = "markdown",
        range: Annotated[
            str | None,
            Field(
                description=(
                    "Spreadsheet range in A1 notation (e.g., 'Sheet1!A1:D10'). "
                    "Defaults to the first sheet. Ignored for documents."
                )
            ),
        ] = None,
    ) -> str:
        """Get the contents of a Google Doc or Google Sheet.

        The file type is detected from the URL, or from Drive metadata when a
        bare ID is given. Spreadsheets render as a Markdown table.
        """
        return await run_tool(
            "gdrive_get_contents",
            service_factory,
            lambda service: service.get_contents(doc_id_or_url, format, range),
        )


def register_edit_tools(mcp_server: FastMCP, service_factory: ServiceFactory) -> None:
    """Register the structured document update tool."""

    @mcp_server.tool(name="gdrive_update_doc_content", annotations=MUTATING)
    async def update_doc_content(
        doc_id_or_url: DocReference,
        operation: Annotated[
            Literal[
                "insertAfter",
                "insertBefore",
                "replace",
                "delete",
                "updateTextStyle",
                "updateParagraphStyle",
            ]
            | None,
            Field(description="Edit to apply at the target element"),
        ] = None,
        target: Annotated[
            str | None,
            Field(
                description=(
                    "JSONPath expression matching exactly one element, e.g. "
                    "'$.body.content[1]' for a paragraph or "
                    "'$.body.content[1].paragraph.elements[0]' for a text run"
                )
            ),
        ] = None,
        content: Annotated[
            list[dict[str, Any]] | None,
            Field(
                description=(
                    "Content items for insert/replace: "
                    '{"type": "heading", "level": 1-6, "text": ...}, '
                    '{"type": "paragraph", "text": ...}, '
                    '{"type": "bulletList", "items": [...]}'
                )
            ),
        ] = None,
        text_style: Annotated[
            dict[str, Any] | None,
            Field(
                description=(
                    "For updateTextStyle: bold, italic, underline, strikethrough, "
                    "fontSize, foregroundColor/backgroundColor {red, green, blue} "
                    "(0-1), link {url}, fontFamily"
                )
            ),
        ] = None,
        paragraph_style: Annotated[
            dict[str, Any] | None,
            Field(
                description=(
                    "For updateParagraphStyle: headingLevel, alignment, "
                    "lineSpacing, direction, indentStart, indentEnd, "
                    "indentFirstLine, spaceAbove, spaceBelow"
                )
            ),
        ] = None,
        requests: Annotated[
            list[dict[str, Any]] | None,
            Field(
                description=(
                    "Advanced: raw Google Docs API batchUpdate request objects, "
                    "used when no operation is given"
                )
            ),
        ] = None,
    ) -> str:
        """Add, modify, or delete content in a Google Doc.

        WORKFLOW: (1) call gdrive_get_doc_contents with format='json' to get
        the document structure, (2) make ONE operation per call, (3) for the
        next operation use the UPDATED DOCUMENT STRUCTURE returned by this
        tool. Indices shift after every modification, so never reuse paths
        from an older structure. Several content items can be inserted in one
        operation.
        """
        return await run_tool(
            "gdrive_update_doc_content",
            service_factory,
            lambda service: service.update_doc_content(
                doc_id_or_url,
                operation=operation,
                target=target,
                content=content,
                text_style=text_style,
                paragraph_style=paragraph_style,
                requests=requests,
            ),
        )


def register_note_tools(mcp_server: FastMCP, service_factory: ServiceFactory) -> None:
    """Register the numbered note block tools."""

    @mcp_server.tool(name="gdrive_insert_doc_note", annotations=ADDITIVE)
    async def insert_doc_note(
        doc_id_or_url: DocReference,
        search_text: Annotated[
            str,
            Field(description="Exact text of the paragraph to insert the note after"),
        ],
        note: Annotated[
            str,
            Field(description="The note text; the '📝 NOTE #:' label is added"),
        ],
    ) -> str:
        """Insert a styled, auto-numbered note block after a paragraph."""
        return await run_tool(
            "gdrive_insert_doc_note",
            service_factory,
            lambda service: service.insert_note(doc_id_or_url, search_text, note),
        )

    @mcp_server.tool(name="gdrive_update_doc_note", annotations=MUTATING)
    async def update_doc_note(
        doc_id_or_url: DocReference,
        note_number: Annotated[int, Field(ge=1, description="Number of the note")],
        new_text: Annotated[
            str, Field(description="The new note text, without the label")
        ],
    ) -> str:
        """Update the text of an existing note, keeping its number and styling."""
        return await run_tool(
            "gdrive_update_doc_note",
            service_factory,
            lambda service: service.update_note(doc_id_or_url, note_number, new_text),
        )

    @mcp_server.tool(name="gdrive_remove_doc_note", annotations=MUTATING)
    async def remove_doc_note(
        doc_id_or_url: DocReference,
        note_number: Annotated[int, Field(ge=1, description="Number of the note")],
    ) -> str:
        """Remove a note block from the document."""
        return await run_tool(
            "gdrive_remove_doc_note",
            service_factory,
            lambda service: service.remove_note(doc_id_or_url, note_number),
        )


def register_comment_tools(
    mcp_server: FastMCP, service_factory: ServiceFactory
) -> None:
    """Register the Drive comment tools."""

    @mcp_server.tool(name="gdrive_list_doc_comments", annotations=READ_ONLY)
    async def list_doc_comments(doc_id_or_url: DocReference) -> str:
        """List all comment threads on a Google Doc with their replies."""
        return await run_tool(
            "gdrive_list_doc_comments",
            service_factory,
            lambda service: service.list_comments(doc_id_or_url),
        )

    @mcp_server.tool(name="gdrive_create_doc_comment", annotations=ADDITIVE)
    async def create_doc_comment(
        doc_id_or_url: DocReference,
        content: Annotated[str, Field(description="The comment text")],
    ) -> str:
        """Create a new UNANCHORED comment on a Google Doc.

        The Drive API cannot anchor comments to text in Google Docs; the
        comment appears in the document's 'All Comments' view.
        """
        return await run_tool(
            "gdrive_create_doc_comment",
            service_factory,
            lambda service: service.create_comment(doc_id_or_url, content),
        )

    @mcp_server.tool(name="gdrive_reply_to_comment", annotations=ADDITIVE)
    async def reply_to_comment(
        doc_id_or_url: DocReference,
        comment_id: Annotated[str, Field(description="ID of the comment thread")],
        reply: Annotated[str, Field(description="The reply text")],
        resolve: Annotated[
            bool, Field(description="Mark the thread as resolved after replying")
        ] = False,
        assignee_email: Annotated[
            str | None,
            Field(description="Not supported by the Drive API; reported only"),
        ] = None,
    ) -> str:
        """Reply to a comment thread, optionally resolving it."""
        return await run_tool(
            "gdrive_reply_to_comment",
            service_factory,
            lambda service: service.reply_to_comment(
                doc_id_or_url,
                comment_id,
                reply,
                resolve=resolve,
                assignee_email=assignee_email,
            ),
        )


def register_drive_tools(mcp_server: FastMCP, service_factory: ServiceFactory) -> None:
    """Register the Drive search tool."""

    @mcp_server.tool(name="gdrive_search_drive", annotations=READ_ONLY)
    async def search_drive(
        query: Annotated[
            str,
            Field(
                description=(
                    "Text to search for in file names and contents, or a Drive "
                    "query (e.g., \"mimeType='application/vnd.google-apps.document'\")"
                )
            ),
        ],
        max_results: Annotated[
            int | None,
            Field(ge=1, le=100, description="Maximum number of files (1-100)"),
        ] = None,
    ) -> str:
        """Search Google Drive for files, newest first."""
        return await run_tool(
            "gdrive_search_drive",
            service_factory,
            lambda service: service.search_drive(query, max_results),
        )


def create_server(
    settings: Settings, service_factory: ServiceFactory | None = None
) -> FastMCP:
    """Build the MCP server with every tool registered.

    Args:
        settings: Process settings
        service_factory: Opens a service per tool call; defaults to a live
            Google transport authorized from stored credentials
    """
    factory = service_factory or partial(open_service, settings)

    mcp_server = FastMCP("gdrive-mcp")
    register_read_tools(mcp_server, factory)
    register_edit_tools(mcp_server, factory)
    register_note_tools(mcp_server, factory)
    register_comment_tools(mcp_server, factory)
    register_drive_tools(mcp_server, factory)
    return mcp_server
