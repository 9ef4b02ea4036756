"""Tests for DocsService: tool operations end to end over golden files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from gdrive_mcp.exceptions import (
    AmbiguousTarget,
    InvalidDocumentReference,
    InvalidEditIntent,
    MissingRequiredPayload,
    TextNotFound,
    UnsupportedFileType,
)
from gdrive_mcp.service import DocsService
from gdrive_mcp.transport import APIError, LocalFileTransport

DOC_URL = "https://docs.google.com/document/d/sample_doc/edit"


class RejectingTransport(LocalFileTransport):
    """Golden-file transport whose batchUpdate always fails."""

    async def batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        raise APIError(
            'API error (400): Invalid requests[0].deleteContentRange: Invalid range',
            status_code=400,
        )


class TestReading:
    @pytest.mark.asyncio
    async def test_doc_as_markdown(
        self, service: DocsService, sample_markdown: str
    ) -> None:
        assert await service.get_doc_contents(DOC_URL) == sample_markdown

    @pytest.mark.asyncio
    async def test_doc_as_json(self, service: DocsService) -> None:
        text = await service.get_doc_contents("sample_doc", "json")

        data = json.loads(text)
        assert data["documentId"] == "sample_doc"
        assert len(data["body"]["content"]) == 9
        assert text.startswith('{\n  "documentId"')

    @pytest.mark.asyncio
    async def test_empty_doc_as_json(self, tmp_path: Path) -> None:
        (tmp_path / "blank.json").write_text(json.dumps({"documentId": "blank"}))
        service = DocsService(LocalFileTransport(tmp_path))

        assert await service.get_doc_contents("blank", "json") == '{\n  "content": []\n}'
        assert await service.get_doc_contents("blank") == ""

    @pytest.mark.asyncio
    async def test_invalid_reference(self, service: DocsService) -> None:
        with pytest.raises(InvalidDocumentReference):
            await service.get_doc_contents("not a valid id")

    @pytest.mark.asyncio
    async def test_contents_detects_doc_from_metadata(
        self, service: DocsService, sample_markdown: str
    ) -> None:
        assert await service.get_contents("sample_doc") == sample_markdown

    @pytest.mark.asyncio
    async def test_contents_sheet_defaults_to_first_sheet(
        self, service: DocsService
    ) -> None:
        text = await service.get_contents("budget_sheet")

        assert text.startswith("| Item | Cost | Notes |\n| --- | --- | --- |\n")
        assert text.count("| Rent |") == 1

    @pytest.mark.asyncio
    async def test_contents_sheet_url_with_range(self, service: DocsService) -> None:
        text = await service.get_contents(
            "https://docs.google.com/spreadsheets/d/budget_sheet/edit",
            "json",
            "Archive!A1:B2",
        )

        assert json.loads(text) == {
            "spreadsheetId": "budget_sheet",
            "range": "Archive!A1:B2",
            "values": [["Year", "Total"], ["2023", "15000"]],
        }

    @pytest.mark.asyncio
    async def test_contents_empty_range(self, service: DocsService) -> None:
        text = await service.get_contents("budget_sheet", range_name="Empty!A1:A1")
        assert text == "*(empty spreadsheet)*"

    @pytest.mark.asyncio
    async def test_contents_unsupported_type(self, service: DocsService) -> None:
        with pytest.raises(UnsupportedFileType, match="application/pdf"):
            await service.get_contents("report_pdf")


class TestUpdateDocContent:
    @pytest.mark.asyncio
    async def test_update_text_style(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        report = await service.update_doc_content(
            DOC_URL,
            operation="updateTextStyle",
            target="$.body.content[2]",
            text_style={"bold": True},
        )

        assert local_transport.batch_updates == [
            (
                "sample_doc",
                [
                    {
                        "updateTextStyle": {
                            "range": {"startIndex": 7, "endIndex": 19},
                            "textStyle": {"bold": True},
                            "fields": "bold",
                        }
                    }
                ],
            )
        ]
        assert report.startswith(
            "Document updated successfully using JSONPath targeting.\n\n"
            "Target: $.body.content[2]\n"
            "Operation: updateTextStyle\n"
            "Updated text style from index 7 to 19\n\n"
            "Operations performed:\n"
            "- Updated text style from index 7 to 19\n\n"
            "UPDATED DOCUMENT STRUCTURE (use this for next operations):\n"
        )
        structure = report.split("(use this for next operations):\n", 1)[1]
        assert json.loads(structure)["documentId"] == "sample_doc"

    @pytest.mark.asyncio
    async def test_insert_after_heading(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        await service.update_doc_content(
            "sample_doc",
            operation="insertAfter",
            target="$.body.content[1]",
            content=[
                {"type": "paragraph", "text": "Intro"},
                {"type": "bulletList", "items": ["a", "b"]},
            ],
        )

        _, requests = local_transport.batch_updates[0]
        inserts = [r["insertText"] for r in requests if "insertText" in r]
        assert [(i["location"]["index"], i["text"]) for i in inserts] == [
            (7, "Intro\n"),
            (13, "a\n"),
            (15, "b\n"),
        ]

    @pytest.mark.asyncio
    async def test_failed_intent_sends_nothing(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        with pytest.raises(AmbiguousTarget):
            await service.update_doc_content(
                "sample_doc", operation="delete", target="$.body.content[*]"
            )
        with pytest.raises(MissingRequiredPayload):
            await service.update_doc_content(
                "sample_doc",
                operation="updateParagraphStyle",
                target="$.body.content[1]",
                paragraph_style={},
            )
        for operation in ("insertAfter", "replace"):
            with pytest.raises(MissingRequiredPayload):
                await service.update_doc_content(
                    "sample_doc",
                    operation=operation,
                    target="$.body.content[1]",
                    content=[{"type": "bulletList", "items": []}],
                )

        assert local_transport.batch_updates == []

    @pytest.mark.asyncio
    async def test_raw_requests(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        requests = [
            {
                "replaceAllText": {
                    "containsText": {"text": "Foo", "matchCase": True},
                    "replaceText": "Bar",
                }
            }
        ]
        local_transport.batch_replies = [{"replaceAllText": {"occurrencesChanged": 1}}]

        report = await service.update_doc_content("sample_doc", requests=requests)

        assert local_transport.batch_updates == [("sample_doc", requests)]
        assert report == (
            "Document updated successfully.\n\n"
            "Operations performed:\n"
            '- Replaced all occurrences of "Foo" with "Bar" (1 changed)'
        )

    @pytest.mark.asyncio
    async def test_operation_takes_precedence_over_requests(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        await service.update_doc_content(
            "sample_doc",
            operation="delete",
            target="$.body.content[8]",
            requests=[{"insertText": {"location": {"index": 1}, "text": "x"}}],
        )

        _, requests = local_transport.batch_updates[0]
        assert requests == [
            {"deleteContentRange": {"range": {"startIndex": 86, "endIndex": 87}}}
        ]

    @pytest.mark.asyncio
    async def test_empty_raw_requests(self, service: DocsService) -> None:
        with pytest.raises(InvalidEditIntent, match="No update requests provided"):
            await service.update_doc_content("sample_doc", requests=[])

    @pytest.mark.asyncio
    async def test_no_arguments(self, service: DocsService) -> None:
        with pytest.raises(InvalidEditIntent, match="must provide either"):
            await service.update_doc_content("sample_doc", operation="delete")

    @pytest.mark.asyncio
    async def test_rejected_batch_gets_hint(self, golden_dir: Path) -> None:
        service = DocsService(RejectingTransport(golden_dir))

        with pytest.raises(APIError) as exc_info:
            await service.update_doc_content(
                "sample_doc", operation="delete", target="$.body.content[8]"
            )

        assert str(exc_info.value).startswith("Invalid update request.")
        assert exc_info.value.status_code == 400


class TestNotes:
    @pytest.mark.asyncio
    async def test_insert_note(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        report = await service.insert_note("notes_doc", "Closing", "Check it")

        assert report == (
            'Note inserted successfully after the text: "Closing"\n\n'
            "Note content: \n📝 NOTE 4: Check it\n\n"
        )
        _, requests = local_transport.batch_updates[0]
        assert len(requests) == 4

    @pytest.mark.asyncio
    async def test_update_note(self, service: DocsService) -> None:
        report = await service.update_note("notes_doc", 1, "Fixed")
        assert report == (
            "Note 1 updated successfully!\n\nOld text: Check this\nNew text: Fixed"
        )

    @pytest.mark.asyncio
    async def test_remove_note(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        report = await service.remove_note("notes_doc", 3)

        assert report == "Note 3 removed successfully!\n\nRemoved text: 📝 NOTE 3: Later"
        assert local_transport.batch_updates[0][1] == [
            {"deleteContentRange": {"range": {"startIndex": 47, "endIndex": 65}}}
        ]

    @pytest.mark.asyncio
    async def test_missing_note_sends_nothing(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        with pytest.raises(TextNotFound):
            await service.remove_note("notes_doc", 2)
        assert local_transport.batch_updates == []


class TestComments:
    @pytest.mark.asyncio
    async def test_list_comments(self, service: DocsService) -> None:
        text = await service.list_comments(DOC_URL)
        assert text.startswith("Found 2 comment thread(s):")

    @pytest.mark.asyncio
    async def test_list_without_comments(self, service: DocsService) -> None:
        text = await service.list_comments("notes_doc")
        assert text == "No comments found on this document."

    @pytest.mark.asyncio
    async def test_create_comment(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        text = await service.create_comment("sample_doc", "Please review")

        assert local_transport.created_comments == [("sample_doc", "Please review")]
        assert "Comment ID: mock_comment_id" in text

    @pytest.mark.asyncio
    async def test_reply_and_resolve(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        text = await service.reply_to_comment(
            "sample_doc", "c1", "Done", resolve=True, assignee_email="x@example.com"
        )

        assert local_transport.created_replies == [("sample_doc", "c1", "Done")]
        assert local_transport.resolved_comments == [("sample_doc", "c1")]
        assert "Thread marked as RESOLVED." in text
        assert "x@example.com was not set" in text

    @pytest.mark.asyncio
    async def test_reply_without_resolve(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        await service.reply_to_comment("sample_doc", "c2", "Thanks")
        assert local_transport.resolved_comments == []


class TestSearchDrive:
    @pytest.mark.asyncio
    async def test_free_text(
        self, service: DocsService, local_transport: LocalFileTransport
    ) -> None:
        text = await service.search_drive("budget")

        assert local_transport.search_queries == [
            "fullText contains 'budget' or name contains 'budget'"
        ]
        assert text.startswith("Found 3 file(s):")

    @pytest.mark.asyncio
    async def test_max_results_clamped(self, golden_dir: Path) -> None:
        service = DocsService(LocalFileTransport(golden_dir), search_max_results=2)

        default = await service.search_drive("x")
        single = await service.search_drive("x", max_results=0)

        assert default.startswith("Found 2 file(s):")
        assert single.startswith("Found 1 file(s):")

    @pytest.mark.asyncio
    async def test_no_results(self, tmp_path: Path) -> None:
        service = DocsService(LocalFileTransport(tmp_path))
        assert await service.search_drive("x") == "No files found matching your query."
