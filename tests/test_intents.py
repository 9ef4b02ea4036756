"""Tests for edit intent validation."""

from __future__ import annotations

import pytest

from gdrive_mcp.exceptions import InvalidEditIntent
from gdrive_mcp.intents import (
    BulletListItem,
    Delete,
    HeadingItem,
    InsertAfter,
    ParagraphItem,
    UpdateTextStyle,
    parse_intent,
)


class TestParseIntent:
    def test_insert_after_with_content(self) -> None:
        intent = parse_intent(
            {
                "operation": "insertAfter",
                "target": "$.body.content[1]",
                "content": [
                    {"type": "heading", "level": 2, "text": "Intro"},
                    {"type": "paragraph", "text": "Body"},
                    {"type": "bulletList", "items": ["a", "b"]},
                ],
            }
        )

        assert isinstance(intent, InsertAfter)
        assert intent.content is not None
        assert [type(item) for item in intent.content] == [
            HeadingItem,
            ParagraphItem,
            BulletListItem,
        ]

    def test_delete_ignores_extra_fields(self) -> None:
        intent = parse_intent(
            {"operation": "delete", "target": "$.body.content[2]", "content": None}
        )
        assert isinstance(intent, Delete)

    def test_text_style_alias(self) -> None:
        intent = parse_intent(
            {
                "operation": "updateTextStyle",
                "target": "$.body.content[2]",
                "textStyle": {"bold": True, "fontSize": 12},
            }
        )

        assert isinstance(intent, UpdateTextStyle)
        assert intent.text_style is not None
        assert intent.text_style.model_fields_set == {"bold", "font_size"}

    def test_unknown_operation(self) -> None:
        with pytest.raises(InvalidEditIntent, match="Unknown operation 'move'"):
            parse_intent({"operation": "move", "target": "$.body.content[1]"})

    def test_missing_operation(self) -> None:
        with pytest.raises(InvalidEditIntent, match="Unknown operation None"):
            parse_intent({"target": "$.body.content[1]"})

    def test_empty_target(self) -> None:
        with pytest.raises(InvalidEditIntent, match="Invalid delete request"):
            parse_intent({"operation": "delete", "target": ""})

    def test_heading_level_out_of_range(self) -> None:
        with pytest.raises(InvalidEditIntent):
            parse_intent(
                {
                    "operation": "replace",
                    "target": "$.body.content[1]",
                    "content": [{"type": "heading", "level": 7, "text": "x"}],
                }
            )

    def test_unknown_content_type(self) -> None:
        with pytest.raises(InvalidEditIntent):
            parse_intent(
                {
                    "operation": "insertBefore",
                    "target": "$.body.content[1]",
                    "content": [{"type": "image", "url": "x"}],
                }
            )

    def test_color_channel_out_of_range(self) -> None:
        with pytest.raises(InvalidEditIntent):
            parse_intent(
                {
                    "operation": "updateTextStyle",
                    "target": "$.body.content[2]",
                    "textStyle": {"foregroundColor": {"red": 2}},
                }
            )
