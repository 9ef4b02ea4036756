"""Edit intents accepted by ``gdrive_update_doc_content``.

Content items and intents are tagged unions: ``type`` selects the content
item, ``operation`` selects the intent. Requests are validated here, at the
tool boundary, so the compiler only ever sees known variants.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from gdrive_mcp.exceptions import InvalidEditIntent

NamedStyle = Literal[
    "NORMAL_TEXT",
    "HEADING_1",
    "HEADING_2",
    "HEADING_3",
    "HEADING_4",
    "HEADING_5",
    "HEADING_6",
    "TITLE",
    "SUBTITLE",
]


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- Content items ---


class HeadingItem(_Model):
    type: Literal["heading"]
    level: int = Field(ge=1, le=6)
    text: str


class ParagraphItem(_Model):
    type: Literal["paragraph"]
    text: str


class BulletListItem(_Model):
    type: Literal["bulletList"]
    items: list[str]


ContentItem = Annotated[
    Union[HeadingItem, ParagraphItem, BulletListItem],
    Field(discriminator="type"),
]


# --- Style patches ---


class RgbPatch(_Model):
    red: float | None = Field(None, ge=0, le=1)
    green: float | None = Field(None, ge=0, le=1)
    blue: float | None = Field(None, ge=0, le=1)


class LinkPatch(_Model):
    url: str


class TextStylePatch(_Model):
    """Text attributes to change. Omitted attributes are left untouched."""

    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    strikethrough: bool | None = None
    font_size: float | None = Field(None, alias="fontSize", gt=0)
    foreground_color: RgbPatch | None = Field(None, alias="foregroundColor")
    background_color: RgbPatch | None = Field(None, alias="backgroundColor")
    link: LinkPatch | None = None
    font_family: str | None = Field(None, alias="fontFamily")


class ParagraphStylePatch(_Model):
    """Paragraph attributes to change. Omitted attributes are left untouched."""

    heading_level: NamedStyle | None = Field(None, alias="headingLevel")
    alignment: Literal["START", "CENTER", "END", "JUSTIFIED"] | None = None
    line_spacing: float | None = Field(None, alias="lineSpacing")
    direction: Literal["LEFT_TO_RIGHT", "RIGHT_TO_LEFT"] | None = None
    indent_start: float | None = Field(None, alias="indentStart")
    indent_end: float | None = Field(None, alias="indentEnd")
    indent_first_line: float | None = Field(None, alias="indentFirstLine")
    space_above: float | None = Field(None, alias="spaceAbove")
    space_below: float | None = Field(None, alias="spaceBelow")


# --- Intents ---


class _TargetedIntent(_Model):
    target: str = Field(min_length=1)


class InsertAfter(_TargetedIntent):
    operation: Literal["insertAfter"]
    content: list[ContentItem] | None = None


class InsertBefore(_TargetedIntent):
    operation: Literal["insertBefore"]
    content: list[ContentItem] | None = None


class Replace(_TargetedIntent):
    operation: Literal["replace"]
    content: list[ContentItem] | None = None


class Delete(_TargetedIntent):
    operation: Literal["delete"]


class UpdateTextStyle(_TargetedIntent):
    operation: Literal["updateTextStyle"]
    text_style: TextStylePatch | None = Field(None, alias="textStyle")


class UpdateParagraphStyle(_TargetedIntent):
    operation: Literal["updateParagraphStyle"]
    paragraph_style: ParagraphStylePatch | None = Field(None, alias="paragraphStyle")


Intent = Union[
    InsertAfter,
    InsertBefore,
    Replace,
    Delete,
    UpdateTextStyle,
    UpdateParagraphStyle,
]

EditIntent = Annotated[Intent, Field(discriminator="operation")]

OPERATIONS: tuple[str, ...] = (
    "insertAfter",
    "insertBefore",
    "replace",
    "delete",
    "updateTextStyle",
    "updateParagraphStyle",
)


class RawRequests(_Model):
    """Pre-built batchUpdate requests passed through without compilation."""

    requests: list[dict[str, Any]]


_INTENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(EditIntent)


def parse_intent(data: dict[str, Any]) -> Intent:
    """Validate a raw request dict as one edit intent.

    Raises:
        InvalidEditIntent: Unknown ``operation`` tag or malformed fields
    """
    operation = data.get("operation")
    if operation not in OPERATIONS:
        raise InvalidEditIntent(
            f"Unknown operation {operation!r}. Expected one of: {', '.join(OPERATIONS)}"
        )
    try:
        return _INTENT_ADAPTER.validate_python(data)  # type: ignore[no-any-return]
    except ValidationError as e:
        raise InvalidEditIntent(f"Invalid {operation} request: {e}") from e
