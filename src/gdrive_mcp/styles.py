"""Style composition in both directions.

Reading: ``compose_run`` turns a text run's style flags into inline
Markdown markers, applied in a fixed order so the output does not depend on
which flags happen to be set.

Writing: ``build_style_update`` turns a style patch from an edit intent into
the ``(payload, fields)`` pair of an ``updateTextStyle`` or
``updateParagraphStyle`` request, using declarative property tables.

Usage:
    from gdrive_mcp.styles import build_style_update, TEXT_STYLE_PROPS

    update = build_style_update(TextStylePatch(bold=True, fontSize=14), TEXT_STYLE_PROPS)
    # update.payload == {"bold": True, "fontSize": {"magnitude": 14.0, "unit": "PT"}}
    # update.mask == "bold,fontSize"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel

from gdrive_mcp.document import TextRun

# Font family substrings that mark a run as code
MONOSPACE_MARKERS: tuple[str, ...] = ("Courier", "Mono")


def compose_run(text_run: TextRun) -> str:
    """Render one text run as inline Markdown.

    Order: emphasis, underline, strikethrough, link, code. The link wraps the
    already decorated text and code wraps everything.
    """
    text = text_run.content or ""
    style = text_run.text_style

    if style is None:
        return text

    # Never wrap a bare newline in markers
    if text == "\n":
        return text

    formatted = text

    if style.bold and style.italic:
        formatted = f"***{formatted}***"
    elif style.bold:
        formatted = f"**{formatted}**"
    elif style.italic:
        formatted = f"*{formatted}*"

    if style.underline:
        formatted = f"__{formatted}__"

    if style.strikethrough:
        formatted = f"~~{formatted}~~"

    if style.link is not None and style.link.url:
        formatted = f"[{formatted}]({style.link.url})"

    font = style.weighted_font_family
    if font is not None and font.font_family:
        if any(marker in font.font_family for marker in MONOSPACE_MARKERS):
            formatted = f"`{formatted}`"

    return formatted


class StyleType(Enum):
    """Conversions applied to a patch value."""

    BOOL = "bool"  # True -> True
    PT = "pt"  # 12 -> {"magnitude": 12.0, "unit": "PT"}
    FLOAT = "float"  # 1.5 -> 1.5
    COLOR = "color"  # {red, green, blue} -> {"color": {"rgbColor": {...}}}
    ENUM = "enum"  # "CENTER" -> "CENTER"
    FONT = "font"  # "Courier New" -> {"fontFamily": "Courier New"}
    LINK = "link"  # {url} -> {"url": ...}


@dataclass
class StyleProp:
    """Mapping of one patch attribute to one API style field.

    Attributes:
        attr: Attribute name on the patch model (python name)
        api_field: Field name in the API style object and the fields mask
        style_type: The conversion to apply
    """

    attr: str
    api_field: str
    style_type: StyleType


TEXT_STYLE_PROPS: list[StyleProp] = [
    StyleProp("bold", "bold", StyleType.BOOL),
    StyleProp("italic", "italic", StyleType.BOOL),
    StyleProp("underline", "underline", StyleType.BOOL),
    StyleProp("strikethrough", "strikethrough", StyleType.BOOL),
    StyleProp("font_size", "fontSize", StyleType.PT),
    StyleProp("foreground_color", "foregroundColor", StyleType.COLOR),
    StyleProp("background_color", "backgroundColor", StyleType.COLOR),
    StyleProp("link", "link", StyleType.LINK),
    StyleProp("font_family", "weightedFontFamily", StyleType.FONT),
]


PARAGRAPH_STYLE_PROPS: list[StyleProp] = [
    StyleProp("heading_level", "namedStyleType", StyleType.ENUM),
    StyleProp("alignment", "alignment", StyleType.ENUM),
    StyleProp("line_spacing", "lineSpacing", StyleType.FLOAT),
    StyleProp("direction", "direction", StyleType.ENUM),
    StyleProp("indent_start", "indentStart", StyleType.PT),
    StyleProp("indent_end", "indentEnd", StyleType.PT),
    StyleProp("indent_first_line", "indentFirstLine", StyleType.PT),
    StyleProp("space_above", "spaceAbove", StyleType.PT),
    StyleProp("space_below", "spaceBelow", StyleType.PT),
]


@dataclass(frozen=True)
class StyleUpdate:
    """A sparse style payload and the names of the fields it sets.

    Only fields named in ``fields`` are changed by the service; anything else
    in the document keeps its current value.
    """

    payload: dict[str, Any] = field(default_factory=dict)
    fields: tuple[str, ...] = ()

    @property
    def mask(self) -> str:
        return ",".join(self.fields)

    def __bool__(self) -> bool:
        return bool(self.fields)


def build_style_update(patch: BaseModel, prop_defs: list[StyleProp]) -> StyleUpdate:
    """Convert a style patch into a sparse payload and field mask in one pass.

    An attribute takes part only when the caller explicitly set it to a
    non-null value; defaults and omitted attributes never reach the mask.
    """
    payload: dict[str, Any] = {}
    fields: list[str] = []

    for prop in prop_defs:
        if prop.attr not in patch.model_fields_set:
            continue
        value = getattr(patch, prop.attr)
        if value is None:
            continue
        payload[prop.api_field] = _convert_value(value, prop.style_type)
        if prop.api_field not in fields:
            fields.append(prop.api_field)

    return StyleUpdate(payload=payload, fields=tuple(fields))


def points(magnitude: float) -> dict[str, Any]:
    """A dimension in points."""
    return {"magnitude": float(magnitude), "unit": "PT"}


def rgb(red: float, green: float, blue: float) -> dict[str, Any]:
    """An opaque API color."""
    return {"color": {"rgbColor": {"red": red, "green": green, "blue": blue}}}


def _convert_value(value: Any, style_type: StyleType) -> Any:
    match style_type:
        case StyleType.BOOL:
            return bool(value)

        case StyleType.PT:
            return points(value)

        case StyleType.FLOAT:
            return float(value)

        case StyleType.COLOR:
            channels = _dump(value)
            return {"color": {"rgbColor": channels}}

        case StyleType.ENUM:
            return str(value)

        case StyleType.FONT:
            return {"fontFamily": value}

        case StyleType.LINK:
            return _dump(value)

    raise ValueError(f"Unsupported style type: {style_type}")


def _dump(value: Any) -> dict[str, Any]:
    if isinstance(value, BaseModel):
        dumped: dict[str, Any] = value.model_dump(by_alias=True, exclude_none=True)
        return dumped
    return dict(value)
