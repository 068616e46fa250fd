from __future__ import annotations
from dataclasses import dataclass
from itertools import count
from threading import Lock

__all__ = ["Position", "Span", "SourceRegistry", "NULL_SOURCE"]

NULL_SOURCE = 0

@dataclass(frozen=True, slots=True)
class Position:
    """A location in a source buffer.

    `offset` is a utf-8 byte offset, `line` is 1-based and `column` is 1-based
    counted in utf-16 code units (the unit source maps use).
    """

    offset: int = 0
    line: int = 1
    column: int = 1

@dataclass(frozen=True, slots=True)
class Span:
    """Half open range `[start, end)` in the source with id `source_id`."""

    start: Position
    end: Position
    source_id: int = NULL_SOURCE

    def is_adjacent(self, other: Span) -> bool:
        """True when `other` starts exactly where this span ends."""
        return self.source_id == other.source_id and self.end.offset == other.start.offset

    def union(self, other: Span) -> Span:
        start = self.start if self.start.offset <= other.start.offset else other.start
        end = self.end if self.end.offset >= other.end.offset else other.end
        return Span(start, end, self.source_id)

    def __str__(self) -> str:
        return f"{self.start.line}:{self.start.column}"

class SourceRegistry:
    """Maps source ids to their display name and original text.

    Owned by a single build. Id `0` is reserved for anonymous input.
    """

    def __init__(self) -> None:
        self._ids_ = count(NULL_SOURCE + 1)
        self._lock_ = Lock()
        self._sources_: dict[int, tuple[str, str]] = {NULL_SOURCE: ("<anonymous>", "")}

    def add(self, name: str, content: str) -> int:
        with self._lock_:
            source_id = next(self._ids_)
            self._sources_[source_id] = (name, content)
        return source_id

    def get(self, source_id: int) -> tuple[str, str]:
        try:
            return self._sources_[source_id]
        except KeyError:
            raise KeyError(f"Unknown source id {source_id}") from None

    def name(self, source_id: int) -> str:
        return self.get(source_id)[0]

    def content(self, source_id: int) -> str:
        return self.get(source_id)[1]

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._sources_

    def __len__(self) -> int:
        return len(self._sources_) - 1
