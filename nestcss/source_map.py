"""Builder for [source maps (v3)](https://sourcemaps.info/spec.html).

Every segment of the `mappings` string stores deltas against the previous segment: the
generated column (relative to the previous segment on the same generated line), the source
index, the original line and the original column.
"""

from __future__ import annotations
import json

from nestcss.span import SourceRegistry

__all__ = ["BASE64_ALPHABET", "vlq_encode", "vlq_encode_to", "SourceMapBuilder"]

BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

def vlq_encode_to(buf: list[str], value: int) -> None:
    """Append the base64 VLQ form of `value` to `buf`."""
    if value < 0:
        value = (-value << 1) | 1
    else:
        value <<= 1

    while True:
        clamped = value & 31
        value >>= 5
        if value > 0:
            clamped |= 32
        buf.append(BASE64_ALPHABET[clamped])
        if value <= 0:
            break

def vlq_encode(value: int) -> str:
    buf: list[str] = []
    vlq_encode_to(buf, value)
    return "".join(buf)

class SourceMapBuilder:
    def __init__(self, registry: SourceRegistry) -> None:
        self.registry = registry
        self._mappings_: list[str] = []
        self.line = 0
        self.column = 0
        # Whether the current generated line already has a segment, decides the ',' separator
        self._segment_on_line_ = False
        self._last_column_ = 0
        self._last_source_ = 0
        self._last_original_line_ = 0
        self._last_original_column_ = 0
        self._sources_: list[int] = []
        self._source_indexes_: dict[int, int] = {}

    @property
    def sources(self) -> list[str]:
        return [self.registry.name(source_id) for source_id in self._sources_]

    @property
    def mappings(self) -> str:
        return "".join(self._mappings_)

    def _source_index_(self, source_id: int) -> int:
        if source_id not in self._source_indexes_:
            self._source_indexes_[source_id] = len(self._sources_)
            self._sources_.append(source_id)
        return self._source_indexes_[source_id]

    def add_mapping(self, original_line: int, original_column: int, source_id: int) -> None:
        """Map the current output position to a position in `source_id`.

        `original_line` and `original_column` are one indexed, as in `nestcss.span.Position`.
        """
        if self._segment_on_line_:
            self._mappings_.append(",")
        self._segment_on_line_ = True

        source = self._source_index_(source_id)
        line = original_line - 1
        column = original_column - 1

        vlq_encode_to(self._mappings_, self.column - self._last_column_)
        vlq_encode_to(self._mappings_, source - self._last_source_)
        vlq_encode_to(self._mappings_, line - self._last_original_line_)
        vlq_encode_to(self._mappings_, column - self._last_original_column_)

        self._last_column_ = self.column
        self._last_source_ = source
        self._last_original_line_ = line
        self._last_original_column_ = column

    def add_to_column(self, length: int) -> None:
        self.column += length

    def add_new_line(self) -> None:
        self.line += 1
        self.column = 0
        self._last_column_ = 0
        self._segment_on_line_ = False
        self._mappings_.append(";")

    def to_dict(self) -> dict:
        return {
            "version": 3,
            "sources": self.sources,
            "sourcesContent": [self.registry.content(source_id) for source_id in self._sources_],
            "names": [],
            "mappings": self.mappings,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
