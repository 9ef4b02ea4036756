"""Resolve a JSONPath expression to exactly one node of a snapshot.

Expressions run against the raw ``documents.get`` JSON, e.g.
``$.body.content[1]`` or ``$.body.content[1].paragraph.elements[0]``.
The extended jsonpath-ng grammar is used, so filters such as
``$.body.content[?(@.paragraph.paragraphStyle.namedStyleType == 'HEADING_1')]``
work too. Zero or several matches are errors; nothing is guessed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse
from loguru import logger

from gdrive_mcp.exceptions import AmbiguousTarget, TargetNotFound, TargetNotRangeable


@dataclass(frozen=True)
class Target:
    """The single node an expression resolved to."""

    expression: str
    path: str
    value: Any

    def _index(self, key: str) -> int | None:
        if not isinstance(self.value, dict):
            return None
        index = self.value.get(key)
        return index if isinstance(index, int) else None

    @property
    def start_index(self) -> int | None:
        return self._index("startIndex")

    @property
    def end_index(self) -> int | None:
        return self._index("endIndex")

    def require_range(self, operation: str) -> tuple[int, int]:
        """Return ``(start, end)`` or fail if either index is missing."""
        start, end = self.start_index, self.end_index
        if start is None or end is None:
            raise TargetNotRangeable(
                f"Target element must have startIndex and endIndex for {operation} "
                f"operation (matched {self.path})"
            )
        return start, end

    def require_index(self, key: str, operation: str) -> int:
        """Return ``startIndex`` or ``endIndex`` or fail if it is missing."""
        index = self._index(key)
        if index is None:
            raise TargetNotRangeable(
                f"Target element does not have a {key} for {operation} "
                f"operation (matched {self.path})"
            )
        return index


def locate(document: dict[str, Any], expression: str) -> Target:
    """Resolve ``expression`` against ``document``.

    Raises:
        TargetNotFound: The expression is invalid or matches nothing
        AmbiguousTarget: The expression matches more than one node
    """
    try:
        compiled = parse(expression)
    except JSONPathError as e:
        raise TargetNotFound(expression, f"invalid expression: {e}") from e

    matches = compiled.find(document)
    logger.debug("JSONPath {} matched {} node(s)", expression, len(matches))

    if not matches:
        raise TargetNotFound(expression)
    if len(matches) > 1:
        raise AmbiguousTarget(expression, [str(m.full_path) for m in matches])

    match = matches[0]
    return Target(expression=expression, path=str(match.full_path), value=match.value)
