"""Tests for spreadsheet Markdown rendering."""

from __future__ import annotations

from gdrive_mcp.sheets import EMPTY_SPREADSHEET, default_range, values_to_markdown


class TestDefaultRange:
    def test_first_sheet(self) -> None:
        assert default_range(["Budget", "Archive"]) == "Budget"

    def test_no_sheets(self) -> None:
        assert default_range([]) == "Sheet1"
        assert default_range([""]) == "Sheet1"


class TestValuesToMarkdown:
    def test_empty(self) -> None:
        assert values_to_markdown([]) == EMPTY_SPREADSHEET

    def test_pads_short_rows(self) -> None:
        values = [["Item", "Cost", "Notes"], ["Rent", "1200"], ["Food", "", "weekly"]]

        assert values_to_markdown(values) == (
            "| Item | Cost | Notes |\n"
            "| --- | --- | --- |\n"
            "| Rent | 1200 |   |\n"
            "| Food |   | weekly |\n"
        )

    def test_each_row_once(self) -> None:
        markdown = values_to_markdown([["h"], ["a"], ["b"]])
        assert markdown.count("| a |") == 1
        assert markdown.count("| b |") == 1

    def test_header_only(self) -> None:
        assert values_to_markdown([["A", "B"]]) == "| A | B |\n| --- | --- |\n"

    def test_non_string_values(self) -> None:
        assert values_to_markdown([["n", "x"], [1, None]]) == (
            "| n | x |\n| --- | --- |\n| 1 |   |\n"
        )

    def test_header_shorter_than_body(self) -> None:
        assert values_to_markdown([["A"], ["1", "2"]]) == (
            "| A |   |\n| --- | --- |\n| 1 | 2 |\n"
        )
