"""One tool call, end to end.

``DocsService`` wires a transport to the pure pieces of the package: it
parses the file reference, fetches a fresh snapshot, resolves and compiles
the edit, submits a single batch and formats the text report. It holds no
state between calls besides the transport it was given.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, Literal

from loguru import logger

from gdrive_mcp import comments, drive, notes, sheets
from gdrive_mcp.compiler import compile_intent
from gdrive_mcp.config import Settings
from gdrive_mcp.credentials import get_access_token
from gdrive_mcp.document import Document
from gdrive_mcp.exceptions import InvalidEditIntent, UnsupportedFileType
from gdrive_mcp.intents import Intent, parse_intent
from gdrive_mcp.locator import locate
from gdrive_mcp.markdown import render_markdown
from gdrive_mcp.notes import NoteEdit
from gdrive_mcp.references import (
    FileKind,
    extract_document_id,
    parse_file_reference,
)
from gdrive_mcp.summary import build_update_summary
from gdrive_mcp.transport import APIError, GoogleWorkspaceTransport, Transport

OutputFormat = Literal["markdown", "json"]

# Batch rejections that get a hint prepended, keyed by a fragment of the API error
_BATCH_ERROR_HINTS = {
    "Invalid requests": (
        "Invalid update request. Make sure you're using valid Google Docs "
        "API request objects."
    ),
    "Invalid range": (
        "Invalid range in update request. Ensure the startIndex and endIndex "
        "are within the document bounds."
    ),
}


class DocsService:
    """Runs tool operations against one transport."""

    def __init__(
        self,
        transport: Transport,
        search_max_results: int = drive.DEFAULT_MAX_RESULTS,
    ) -> None:
        self._transport = transport
        self._search_max_results = search_max_results

    # --- Reading ---

    async def get_doc_contents(
        self, reference: str, output_format: OutputFormat = "markdown"
    ) -> str:
        """A Google Doc as Markdown, or its full JSON structure."""
        document_id = extract_document_id(reference)
        return await self._render_document(document_id, output_format)

    async def get_contents(
        self,
        reference: str,
        output_format: OutputFormat = "markdown",
        range_name: str | None = None,
    ) -> str:
        """A Google Doc or Google Sheet, detected from the URL or Drive metadata."""
        file_ref = parse_file_reference(reference)
        kind = file_ref.kind
        if kind is FileKind.UNKNOWN:
            metadata = await self._transport.get_file_metadata(file_ref.file_id)
            kind = FileKind.from_mime_type(metadata.get("mimeType"))
            if kind is FileKind.UNKNOWN:
                raise UnsupportedFileType(metadata.get("mimeType"))
            logger.debug("Detected {} as {}", file_ref.file_id, kind.value)

        if kind is FileKind.DOCUMENT:
            return await self._render_document(file_ref.file_id, output_format)
        return await self._render_spreadsheet(
            file_ref.file_id, output_format, range_name
        )

    async def _render_document(
        self, document_id: str, output_format: OutputFormat
    ) -> str:
        data = await self._transport.get_document(document_id)
        if output_format == "json":
            if not (data.raw.get("body") or {}).get("content"):
                return json.dumps({"content": []}, indent=2)
            return json.dumps(data.raw, indent=2, ensure_ascii=False)
        return render_markdown(Document.from_raw(data.raw))

    async def _render_spreadsheet(
        self,
        spreadsheet_id: str,
        output_format: OutputFormat,
        range_name: str | None,
    ) -> str:
        if not range_name:
            titles = await self._transport.get_sheet_titles(spreadsheet_id)
            range_name = sheets.default_range(titles)
        values = await self._transport.get_sheet_values(spreadsheet_id, range_name)
        if output_format == "json":
            return json.dumps(
                {
                    "spreadsheetId": spreadsheet_id,
                    "range": range_name,
                    "values": values,
                },
                indent=2,
                ensure_ascii=False,
            )
        return sheets.values_to_markdown(values)

    # --- Editing ---

    async def update_doc_content(
        self,
        reference: str,
        *,
        operation: str | None = None,
        target: str | None = None,
        content: list[dict[str, Any]] | None = None,
        text_style: dict[str, Any] | None = None,
        paragraph_style: dict[str, Any] | None = None,
        requests: list[dict[str, Any]] | None = None,
    ) -> str:
        """Apply one edit intent, or a raw request list when no operation is given.

        Raises:
            InvalidEditIntent: Neither an operation with a target nor requests
        """
        document_id = extract_document_id(reference)

        if operation is not None and target is not None:
            raw_intent: dict[str, Any] = {"operation": operation, "target": target}
            if content is not None:
                raw_intent["content"] = content
            if text_style is not None:
                raw_intent["textStyle"] = text_style
            if paragraph_style is not None:
                raw_intent["paragraphStyle"] = paragraph_style
            return await self.apply_intent(document_id, parse_intent(raw_intent))

        if requests is not None:
            return await self.apply_raw_requests(document_id, requests)

        raise InvalidEditIntent(
            "Invalid arguments: must provide either operation/target or requests"
        )

    async def apply_intent(self, document_id: str, intent: Intent) -> str:
        """Resolve, compile and submit one intent; return the report.

        The report ends with the document structure fetched after the batch
        so the caller can address the next edit without re-fetching.
        """
        snapshot = await self._transport.get_document(document_id)
        target = locate(snapshot.raw, intent.target)
        compiled = compile_intent(intent, target)

        logger.info(
            "{} on {} at {}: {} request(s)",
            intent.operation,
            document_id,
            target.path,
            len(compiled.requests),
        )
        response = await self._submit(document_id, compiled.requests)
        summary = build_update_summary(compiled.requests, response.get("replies"))
        updated = await self._transport.get_document(document_id)

        return (
            "Document updated successfully using JSONPath targeting.\n\n"
            f"Target: {intent.target}\n"
            f"Operation: {intent.operation}\n"
            f"{compiled.description}\n\n"
            f"{summary}\n\n"
            "UPDATED DOCUMENT STRUCTURE (use this for next operations):\n"
            f"{json.dumps(updated.raw, indent=2, ensure_ascii=False)}"
        )

    async def apply_raw_requests(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> str:
        """Submit pre-built batchUpdate requests unchanged.

        Raises:
            InvalidEditIntent: ``requests`` is empty
        """
        if not requests:
            raise InvalidEditIntent("No update requests provided")

        logger.info("Raw batch on {}: {} request(s)", document_id, len(requests))
        response = await self._submit(document_id, requests)
        summary = build_update_summary(requests, response.get("replies"))
        return f"Document updated successfully.\n\n{summary}"

    async def _submit(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        try:
            return await self._transport.batch_update(document_id, requests)
        except APIError as e:
            for fragment, hint in _BATCH_ERROR_HINTS.items():
                if fragment in str(e):
                    raise APIError(f"{hint} Error: {e}", e.status_code) from e
            raise

    # --- Notes ---

    async def insert_note(self, reference: str, search_text: str, note: str) -> str:
        edit = await self._plan_note(
            reference, lambda doc: notes.plan_insert_note(doc, search_text, note)
        )
        return (
            f'Note inserted successfully after the text: "{search_text}"\n\n'
            f"Note content: {edit.text}"
        )

    async def update_note(self, reference: str, note_number: int, text: str) -> str:
        edit = await self._plan_note(
            reference, lambda doc: notes.plan_update_note(doc, note_number, text)
        )
        return (
            f"Note {note_number} updated successfully!\n\n"
            f"Old text: {edit.previous_text}\n"
            f"New text: {edit.text}"
        )

    async def remove_note(self, reference: str, note_number: int) -> str:
        edit = await self._plan_note(
            reference, lambda doc: notes.plan_remove_note(doc, note_number)
        )
        return f"Note {note_number} removed successfully!\n\nRemoved text: {edit.text}"

    async def _plan_note(
        self, reference: str, plan: Callable[[Document], NoteEdit]
    ) -> NoteEdit:
        document_id = extract_document_id(reference)
        snapshot = await self._transport.get_document(document_id)
        edit = plan(Document.from_raw(snapshot.raw))
        logger.info(
            "Note {} on {}: {} request(s)",
            edit.note_number,
            document_id,
            len(edit.requests),
        )
        await self._submit(document_id, edit.requests)
        return edit

    # --- Comments ---

    async def list_comments(self, reference: str) -> str:
        document_id = extract_document_id(reference)
        threads = await self._transport.list_comments(document_id)
        return comments.format_comment_threads(threads)

    async def create_comment(self, reference: str, content: str) -> str:
        document_id = extract_document_id(reference)
        comment = await self._transport.create_comment(document_id, content)
        return comments.format_created_comment(comment)

    async def reply_to_comment(
        self,
        reference: str,
        comment_id: str,
        reply: str,
        *,
        resolve: bool = False,
        assignee_email: str | None = None,
    ) -> str:
        """Reply to a thread, optionally resolving it.

        Drive has no API for assigning a comment, so ``assignee_email`` is
        reported as not applied rather than silently dropped.
        """
        document_id = extract_document_id(reference)
        created = await self._transport.create_reply(document_id, comment_id, reply)
        if resolve:
            await self._transport.resolve_comment(document_id, comment_id)
        if assignee_email:
            logger.warning("Ignoring assignee {}: not supported", assignee_email)
        return comments.format_reply(
            created, resolved=resolve, assignee_email=assignee_email
        )

    # --- Drive ---

    async def search_drive(self, query: str, max_results: int | None = None) -> str:
        page_size = drive.clamp_max_results(
            self._search_max_results if max_results is None else max_results
        )
        files = await self._transport.search_files(
            drive.build_search_query(query), page_size
        )
        return drive.format_search_results(files)


@asynccontextmanager
async def open_service(settings: Settings) -> AsyncIterator[DocsService]:
    """A service over a freshly authorized transport, closed on exit."""
    access_token = await get_access_token(settings)
    transport = GoogleWorkspaceTransport(access_token, timeout=settings.http_timeout)
    try:
        yield DocsService(transport, search_max_results=settings.search_max_results)
    finally:
        await transport.close()
