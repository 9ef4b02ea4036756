"""Tests for the batch change log."""

from __future__ import annotations

from gdrive_mcp import instructions
from gdrive_mcp.styles import StyleUpdate
from gdrive_mcp.summary import build_update_summary


class TestBuildUpdateSummary:
    def test_empty(self) -> None:
        assert build_update_summary([]) == "No operations described"
        assert build_update_summary([{}]) == "No operations described"

    def test_core_requests(self) -> None:
        bold = StyleUpdate(payload={"bold": True}, fields=("bold",))
        summary = build_update_summary(
            [
                instructions.insert_text(10, "Hello\n"),
                instructions.delete_content_range(20, 30),
                instructions.update_text_style(1, 5, bold),
                instructions.named_style(1, 5, "HEADING_1"),
                instructions.create_paragraph_bullets(5, 9),
            ]
        )

        assert summary == (
            "Operations performed:\n"
            '- Inserted text at index 10: "Hello\n"\n'
            "- Deleted content from index 20 to 30\n"
            "- Updated text style from index 1 to 5\n"
            "- Updated paragraph style from index 1 to 5\n"
            "- Created paragraph bullets from index 5 to 9"
        )

    def test_long_insert_is_truncated(self) -> None:
        summary = build_update_summary([instructions.insert_text(1, "x" * 60)])
        assert f'"{"x" * 50}..."' in summary

    def test_table_requests(self) -> None:
        summary = build_update_summary(
            [
                {"insertTable": {"rows": 2, "columns": 3, "location": {"index": 4}}},
                {"insertTableRow": {"insertBelow": True}},
                {"insertTableRow": {"insertBelow": False}},
                {"insertTableColumn": {"insertRight": True}},
                {"insertTableColumn": {}},
                {"deleteTableRow": {}},
                {"deleteTableColumn": {}},
            ]
        )

        assert summary.splitlines()[1:] == [
            "- Inserted table with 2 rows and 3 columns at index 4",
            "- Inserted table row below",
            "- Inserted table row above",
            "- Inserted table column to the right",
            "- Inserted table column to the left",
            "- Deleted table row",
            "- Deleted table column",
        ]

    def test_replace_all_text_uses_reply(self) -> None:
        request = {
            "replaceAllText": {
                "containsText": {"text": "foo", "matchCase": True},
                "replaceText": "bar",
            }
        }

        without_reply = build_update_summary([request])
        with_reply = build_update_summary(
            [request], [{"replaceAllText": {"occurrencesChanged": 3}}]
        )

        assert without_reply.endswith('- Replaced all occurrences of "foo" with "bar"')
        assert with_reply.endswith('with "bar" (3 changed)')

    def test_unknown_request(self) -> None:
        summary = build_update_summary(
            [
                {"deleteParagraphBullets": {"range": {"startIndex": 1, "endIndex": 4}}},
                {"createNamedRange": {"name": "x"}},
            ]
        )
        assert summary.splitlines()[1:] == [
            "- Deleted paragraph bullets from index 1 to 4",
            "- Executed operation: createNamedRange",
        ]

    def test_end_of_segment_insert(self) -> None:
        summary = build_update_summary(
            [{"insertText": {"endOfSegmentLocation": {}, "text": "tail"}}]
        )
        assert '- Inserted text at index end of segment: "tail"' in summary
