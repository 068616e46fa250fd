from __future__ import annotations
import re

from nestcss.source_map import SourceMapBuilder
from nestcss.span import Span

__all__ = ["Buffer"]

NEW_LINE = re.compile(r"\r\n|\n")

def _utf16_length(text: str) -> int:
    return sum(2 if ord(c) > 0xFFFF else 1 for c in text)

class Buffer:
    """Append only output text that renderers write into.

    Tracks the current output line and column (columns in utf-16 code units). When a
    `SourceMapBuilder` is attached every write is forwarded to it so that mappings added with
    `add_mapping` point at the right generated position.

    Args
        source_map (SourceMapBuilder | None): Builder to forward positions to. Defaults to `None`.
    """

    __slots__ = ("__BUFFER__", "_line_", "_column_", "_source_map_")

    def __init__(self, source_map: SourceMapBuilder | None = None) -> None:
        self.__BUFFER__: list[str] = []
        self._line_ = 0
        self._column_ = 0
        self._source_map_ = source_map

    @property
    def line(self) -> int:
        """Current zero based output line."""
        return self._line_

    @property
    def column(self) -> int:
        """Current zero based output column."""
        return self._column_

    @property
    def source_map(self) -> SourceMapBuilder | None:
        return self._source_map_

    def push(self, char: str):
        """Write a single character that is not a newline."""
        self.push_str(char)

    def push_str(self, text: str):
        """Write text that contains no newlines."""
        length = _utf16_length(text)
        self.__BUFFER__.append(text)
        self._column_ += length
        if self._source_map_ is not None:
            self._source_map_.add_to_column(length)

    def push_new_line(self):
        self.__BUFFER__.append("\n")
        self._line_ += 1
        self._column_ = 0
        if self._source_map_ is not None:
            self._source_map_.add_new_line()

    def push_str_contains_new_line(self, text: str):
        """Write text that may span several lines, e.g. a comment. A carriage return before a newline is dropped."""
        lines = NEW_LINE.split(text)
        self.push_str(lines[0])
        for line in lines[1:]:
            self.push_new_line()
            self.push_str(line)

    def add_mapping(self, span: Span | None):
        """Map the current output position back to the start of `span`. Does nothing without a source map."""
        if self._source_map_ is not None and span is not None:
            self._source_map_.add_mapping(span.start.line, span.start.column, span.source_id)

    def __len__(self) -> int:
        return sum(len(chunk) for chunk in self.__BUFFER__)

    def __repr__(self) -> str:
        return f"Buffer({str(self)!r})"

    def __str__(self) -> str:
        return "".join(self.__BUFFER__)
