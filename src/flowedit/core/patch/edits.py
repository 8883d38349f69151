"""Text edits: replacements of exact character spans.

Every patch is expressed as a list of TextEdits against one snapshot and
applied in a single pass, so bytes outside the edited spans are copied
through unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from xml.sax.saxutils import escape

_ATTRIBUTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}
_INLINE_WHITESPACE = " \t"


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Replace text[start:end] with ``replacement`` (start == end inserts)."""

    start: int
    end: int
    replacement: str

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid edit span [{self.start}, {self.end})")


def apply_edits(text: str, edits: Sequence[TextEdit]) -> str:
    """Apply non-overlapping edits to one snapshot.

    Raises:
        ValueError: If two edits overlap or an edit lies outside the text
    """
    ordered = sorted(edits, key=lambda edit: (edit.start, edit.end))
    previous_end = 0
    for edit in ordered:
        if edit.end > len(text):
            raise ValueError(f"Edit [{edit.start}, {edit.end}) outside text of length {len(text)}")
        if edit.start < previous_end:
            raise ValueError(f"Overlapping edits at offset {edit.start}")
        previous_end = edit.end

    pieces: list[str] = []
    cursor = 0
    for edit in ordered:
        pieces.append(text[cursor : edit.start])
        pieces.append(edit.replacement)
        cursor = edit.end
    pieces.append(text[cursor:])
    return "".join(pieces)


def changed_span(edits: Sequence[TextEdit]) -> tuple[int, int] | None:
    """Smallest input span covering every edit, or None for no edits."""
    if not edits:
        return None
    return min(edit.start for edit in edits), max(edit.end for edit in edits)


def escape_value(value: str) -> str:
    """Escape an attribute value for either quote style."""
    return escape(value, _ATTRIBUTE_ENTITIES)


def line_start(text: str, offset: int) -> int:
    return text.rfind("\n", 0, offset) + 1


def line_indent(text: str, offset: int) -> str:
    """Leading whitespace of the line containing ``offset``."""
    start = line_start(text, offset)
    end = start
    while end < len(text) and text[end] in _INLINE_WHITESPACE:
        end += 1
    return text[start:end]


def starts_line(text: str, offset: int) -> bool:
    """True when only indentation precedes ``offset`` on its line."""
    return not text[line_start(text, offset) : offset].strip(_INLINE_WHITESPACE)


def removal_span(text: str, start: int, end: int) -> tuple[int, int]:
    """Span to delete for an element at [start, end).

    An element alone on its line takes the whole line with it, newline
    included; otherwise only the element itself is removed.
    """
    if not starts_line(text, start):
        return start, end
    rest = end
    while rest < len(text) and text[rest] in _INLINE_WHITESPACE:
        rest += 1
    if rest == len(text):
        return line_start(text, start), rest
    if text.startswith("\r\n", rest):
        return line_start(text, start), rest + 2
    if text[rest] == "\n":
        return line_start(text, start), rest + 1
    return start, end
