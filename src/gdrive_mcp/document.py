"""Typed model of a Google Docs snapshot.

A subset of the Docs API ``Document`` resource, enough to walk the body,
render it and reason about its index space. Unknown fields are kept
(``extra="allow"``) so a snapshot survives a validate/dump round trip.

Indexing rules the rest of the package relies on:
1. Indexes are UTF-16 code unit offsets shared by the whole body,
   including table cell contents
2. The body starts with a section break that only carries ``endIndex``
3. Sibling elements are contiguous: ``a.endIndex == b.startIndex``
4. Paragraphs end with a newline included in their index range
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field


def utf16_len(text: str) -> int:
    """Calculate the length of a string in UTF-16 code units.

    Characters outside the BMP (code points > 0xFFFF) use surrogate pairs
    in UTF-16 and consume 2 code units.
    """
    length = 0
    for char in text:
        if ord(char) > 0xFFFF:
            length += 2
        else:
            length += 1
    return length


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Dimension(_ApiModel):
    """A magnitude in a single direction in the specified units."""

    magnitude: float | None = Field(None)
    unit: str | None = Field(None)


class RgbColor(_ApiModel):
    """An RGB color, each channel between 0.0 and 1.0."""

    red: float | None = Field(None)
    green: float | None = Field(None)
    blue: float | None = Field(None)


class Color(_ApiModel):
    rgb_color: RgbColor | None = Field(None, alias="rgbColor")


class OptionalColor(_ApiModel):
    """A color that can either be fully opaque or fully transparent."""

    color: Color | None = Field(None)


class WeightedFontFamily(_ApiModel):
    font_family: str | None = Field(None, alias="fontFamily")
    weight: int | None = Field(None)


class Link(_ApiModel):
    """A reference to another portion of a document or an external URL."""

    url: str | None = Field(None)
    bookmark_id: str | None = Field(None, alias="bookmarkId")
    heading_id: str | None = Field(None, alias="headingId")


class TextStyle(_ApiModel):
    """Styling applied to a run. Unset fields are inherited, not false."""

    bold: bool | None = Field(None)
    italic: bool | None = Field(None)
    underline: bool | None = Field(None)
    strikethrough: bool | None = Field(None)
    font_size: Dimension | None = Field(None, alias="fontSize")
    foreground_color: OptionalColor | None = Field(None, alias="foregroundColor")
    background_color: OptionalColor | None = Field(None, alias="backgroundColor")
    link: Link | None = Field(None)
    weighted_font_family: WeightedFontFamily | None = Field(
        None, alias="weightedFontFamily"
    )


class TextRun(_ApiModel):
    """A run of text that all has the same styling."""

    content: str | None = Field(None)
    text_style: TextStyle | None = Field(None, alias="textStyle")


class ParagraphElement(_ApiModel):
    """Content within a paragraph: a text run or an inline object."""

    start_index: int | None = Field(None, alias="startIndex")
    end_index: int | None = Field(None, alias="endIndex")
    text_run: TextRun | None = Field(None, alias="textRun")

    def children(self) -> list[Node]:
        return []


class Bullet(_ApiModel):
    list_id: str | None = Field(None, alias="listId")
    nesting_level: int | None = Field(None, alias="nestingLevel")


class ParagraphStyle(_ApiModel):
    named_style_type: str | None = Field(None, alias="namedStyleType")
    alignment: str | None = Field(None)
    heading_id: str | None = Field(None, alias="headingId")


class Paragraph(_ApiModel):
    """A range of content terminated with a newline character."""

    bullet: Bullet | None = Field(None)
    elements: list[ParagraphElement] | None = Field(None)
    paragraph_style: ParagraphStyle | None = Field(None, alias="paragraphStyle")

    @property
    def named_style(self) -> str | None:
        if self.paragraph_style is None:
            return None
        return self.paragraph_style.named_style_type

    def plain_text(self) -> str:
        """Concatenated run contents, unstyled."""
        return "".join(
            el.text_run.content or ""
            for el in self.elements or []
            if el.text_run is not None
        )


class SectionBreak(_ApiModel):
    """Start of a new section. The body always begins with one."""


class TableCell(_ApiModel):
    content: list[StructuralElement] | None = Field(None)
    start_index: int | None = Field(None, alias="startIndex")
    end_index: int | None = Field(None, alias="endIndex")

    def children(self) -> list[Node]:
        return list(self.content or [])


class TableRow(_ApiModel):
    start_index: int | None = Field(None, alias="startIndex")
    end_index: int | None = Field(None, alias="endIndex")
    table_cells: list[TableCell] | None = Field(None, alias="tableCells")

    def children(self) -> list[Node]:
        return list(self.table_cells or [])


class Table(_ApiModel):
    columns: int | None = Field(None)
    rows: int | None = Field(None)
    table_rows: list[TableRow] | None = Field(None, alias="tableRows")


class TableOfContents(_ApiModel):
    content: list[StructuralElement] | None = Field(None)


class StructuralElement(_ApiModel):
    """A block: paragraph, table, section break or table of contents."""

    start_index: int | None = Field(None, alias="startIndex")
    end_index: int | None = Field(None, alias="endIndex")
    paragraph: Paragraph | None = Field(None)
    section_break: SectionBreak | None = Field(None, alias="sectionBreak")
    table: Table | None = Field(None)
    table_of_contents: TableOfContents | None = Field(None, alias="tableOfContents")

    def children(self) -> list[Node]:
        if self.paragraph is not None:
            return list(self.paragraph.elements or [])
        if self.table is not None:
            return list(self.table.table_rows or [])
        if self.table_of_contents is not None:
            return list(self.table_of_contents.content or [])
        return []


class Body(_ApiModel):
    content: list[StructuralElement] | None = Field(None)


class Document(_ApiModel):
    """A Google Docs document snapshot."""

    document_id: str | None = Field(None, alias="documentId")
    title: str | None = Field(None)
    revision_id: str | None = Field(None, alias="revisionId")
    body: Body | None = Field(None)

    @property
    def content(self) -> list[StructuralElement]:
        if self.body is None:
            return []
        return self.body.content or []

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> Document:
        return cls.model_validate(raw)


class Node(Protocol):
    """Uniform interface shared by every indexed node of the body tree."""

    start_index: int | None
    end_index: int | None

    def children(self) -> list[Node]: ...


def walk(nodes: Sequence[Node]) -> Iterator[Node]:
    """Yield every node of the tree rooted at ``nodes`` in document order."""
    for node in nodes:
        yield node
        yield from walk(node.children())


def iter_text_runs(nodes: Sequence[Node]) -> Iterator[TextRun]:
    """Yield every text run below ``nodes`` in document order."""
    for node in walk(nodes):
        if isinstance(node, ParagraphElement) and node.text_run is not None:
            yield node.text_run


def iter_paragraphs(
    nodes: Sequence[Node],
) -> Iterator[tuple[StructuralElement, Paragraph]]:
    """Yield ``(block, paragraph)`` pairs, including paragraphs in tables."""
    for node in walk(nodes):
        if isinstance(node, StructuralElement) and node.paragraph is not None:
            yield node, node.paragraph


@dataclass
class IndexMismatch:
    """Two siblings whose indices do not meet."""

    path: str
    expected: int
    actual: int

    def __str__(self) -> str:
        return f"{self.path}: startIndex expected={self.expected}, actual={self.actual}"


def check_contiguity(
    nodes: Sequence[Node], path: str = "body.content"
) -> list[IndexMismatch]:
    """Check that every pair of siblings satisfies ``a.end == b.start``.

    Recurses into paragraphs, tables, rows and cells. An empty result means
    the snapshot's index space is contiguous.
    """
    mismatches: list[IndexMismatch] = []
    previous_end: int | None = None
    for i, node in enumerate(nodes):
        node_path = f"{path}[{i}]"
        if (
            previous_end is not None
            and node.start_index is not None
            and node.start_index != previous_end
        ):
            mismatches.append(IndexMismatch(node_path, previous_end, node.start_index))
        previous_end = node.end_index
        mismatches.extend(check_contiguity(node.children(), f"{node_path}.children"))
    return mismatches


StructuralElement.model_rebuild()
TableCell.model_rebuild()
TableOfContents.model_rebuild()
