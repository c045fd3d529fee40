"""
Greedy line wrapping.

Text is buffered one line at a time as a list of segments: every plain space
may become a line break, `·` is a space that never breaks. When the line is
flushed, segments are packed greedily up to the column limit; a segment that
does not fit starts a new continuation line carrying the indentation and
line prefix in effect when its space was appended. Segments are never split,
so a single segment longer than the limit overflows.
"""

from __future__ import annotations

import re
from typing import List, TextIO

# A continuation line must not start with a binary `+` or `-` (it would parse as
# a unary operator), but `->` is fine.
_UNSAFE_LINE_START = re.compile(r"\s*[-+][^>]*")
_SPECIAL_CHARACTERS = re.compile("[ \n·]")


class LineWrapper:
    """Writes text to `out`, breaking lines longer than `column_limit` at spaces."""

    def __init__(self, out: TextIO, indent: str, column_limit: int):
        if column_limit < 2:
            raise ValueError(f"column_limit must be at least 2, was {column_limit}")
        self._out = out
        self._indent = indent
        self._column_limit = column_limit
        self._closed = False
        self._segments: List[str] = [""]
        self._indent_level = -1
        self._line_prefix = ""

    @property
    def has_pending_segments(self) -> bool:
        return len(self._segments) != 1 or bool(self._segments[0])

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("closed")

    def append(self, s: str, indent_level: int = -1, line_prefix: str = "") -> None:
        """Emit `s`. Its spaces may be replaced by a newline, `indent_level` indents and `line_prefix`."""
        self._check_open()
        pos = 0
        while pos < len(s):
            ch = s[pos]
            if ch == " ":
                # Each space starts a new empty segment.
                self._indent_level = indent_level
                self._line_prefix = line_prefix
                self._segments.append("")
                pos += 1
            elif ch == "\n":
                self.newline()
                pos += 1
            elif ch == "·":
                self._segments[-1] += " "
                pos += 1
            else:
                match = _SPECIAL_CHARACTERS.search(s, pos)
                end = match.start() if match else len(s)
                self._segments[-1] += s[pos:end]
                pos = end

    def append_non_wrapping(self, s: str) -> None:
        """Emit `s` verbatim; it must not contain newlines."""
        self._check_open()
        if "\n" in s:
            raise ValueError(f"non-wrapping text must not contain newlines: {s!r}")
        self._segments[-1] += s

    def newline(self) -> None:
        self._check_open()
        self._emit_current_line()
        self._out.write("\n")
        self._indent_level = -1

    def close(self) -> None:
        """Flush the pending line. Any later write raises."""
        if self._closed:
            return
        self._emit_current_line()
        self._closed = True

    def _emit_current_line(self) -> None:
        self._fold_unsafe_breaks()

        start = 0
        column = len(self._segments[0])
        for index in range(1, len(self._segments)):
            segment = self._segments[index]
            new_column = column + 1 + len(segment)

            # If this segment doesn't fit in the current run, print the run and start a new one.
            if new_column > self._column_limit:
                self._emit_segment_range(start, index)
                start = index
                column = len(segment) + self._continuation_width()
                continue

            column = new_column

        self._emit_segment_range(start, len(self._segments))
        self._segments = [""]

    def _continuation_width(self) -> int:
        return len(self._indent) * max(self._indent_level, 0) + len(self._line_prefix)

    def _emit_segment_range(self, start: int, end: int) -> None:
        # A wrapped line needs a newline and an indent.
        if start > 0:
            self._out.write("\n")
            self._out.write(self._indent * max(self._indent_level, 0))
            self._out.write(self._line_prefix)

        self._out.write(" ".join(self._segments[start:end]))

    def _fold_unsafe_breaks(self) -> None:
        index = 1
        while index < len(self._segments):
            if _UNSAFE_LINE_START.fullmatch(self._segments[index]):
                self._segments[index - 1] += " " + self._segments[index]
                del self._segments[index]
                if index > 1:
                    index -= 1
            else:
                index += 1


__all__ = ["LineWrapper"]
