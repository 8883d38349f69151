"""Offset <-> line/column conversion for a text snapshot.

Lines and columns are 1-based, matching what text editor surfaces show.
"""

from __future__ import annotations

from bisect import bisect_right


class LineIndex:
    """Precomputed line starts for one immutable text snapshot."""

    __slots__ = ("_length", "_starts")

    def __init__(self, text: str) -> None:
        starts = [0]
        index = text.find("\n")
        while index != -1:
            starts.append(index + 1)
            index = text.find("\n", index + 1)
        self._starts = starts
        self._length = len(text)

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def position(self, offset: int) -> tuple[int, int]:
        """Return (line, column) for an offset, both 1-based."""
        if offset < 0 or offset > self._length:
            raise ValueError(f"offset {offset} outside text of length {self._length}")
        line = bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1

    def line_of(self, offset: int) -> int:
        return self.position(offset)[0]

    def offset(self, line: int, column: int) -> int:
        """Return the offset for a 1-based (line, column) pair."""
        if line < 1 or line > len(self._starts):
            raise ValueError(f"line {line} outside text with {len(self._starts)} lines")
        offset = self._starts[line - 1] + column - 1
        if offset < 0 or offset > self._length:
            raise ValueError(f"column {column} outside line {line}")
        return offset

    def line_start(self, offset: int) -> int:
        """Offset of the first character of the line containing offset."""
        return self._starts[self.line_of(offset) - 1]
