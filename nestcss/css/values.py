"""Declaration values.

Numbers keep their literal text (`.2`, `010`) so that rendering gives back exactly what was
parsed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from typing_extensions import TypeAliasType

from nestcss.span import Span

if TYPE_CHECKING:
    from nestcss.buffer import Buffer
    from nestcss.settings import Settings

__all__ = [
    "CSSValue",
    "Keyword",
    "Function",
    "StringLiteral",
    "Number",
    "NumberWithUnit",
    "Percentage",
    "Color",
    "List",
    "CommaSeparatedList",
]

def _separator(buf: Buffer, settings: Settings):
    buf.push(",")
    if not settings["minify"]:
        buf.push(" ")

@dataclass
class Keyword:
    name: str
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        buf.add_mapping(self.span)
        buf.push_str(self.name)

@dataclass
class Function:
    """`name(arguments, ...)`, e.g. `rgba(0, 0, 0, .5)`."""

    name: str
    arguments: list[CSSValue] = field(default_factory=list)
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        buf.add_mapping(self.span)
        buf.push_str(self.name)
        buf.push("(")
        for i, argument in enumerate(self.arguments):
            if i > 0:
                _separator(buf, settings)
            argument.render(buf, settings, depth)
        buf.push(")")

@dataclass
class StringLiteral:
    content: str
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        buf.add_mapping(self.span)
        buf.push('"')
        buf.push_str_contains_new_line(self.content)
        buf.push('"')

@dataclass
class Number:
    number: str
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        buf.add_mapping(self.span)
        buf.push_str(self.number)

@dataclass
class NumberWithUnit:
    number: str
    unit: str
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        buf.add_mapping(self.span)
        buf.push_str(self.number)
        buf.push_str(self.unit)

@dataclass
class Percentage:
    number: str
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        buf.add_mapping(self.span)
        buf.push_str(self.number)
        buf.push("%")

@dataclass
class Color:
    """Hash prefixed value, stored without the `#`."""

    hex: str
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        buf.add_mapping(self.span)
        buf.push("#")
        buf.push_str(self.hex)

@dataclass
class List:
    """Space separated values, `2px solid #00ff00`."""

    values: list[CSSValue] = field(default_factory=list)
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        # The spaces are significant so they survive minification
        for i, value in enumerate(self.values):
            if i > 0:
                buf.push(" ")
            value.render(buf, settings, depth)

@dataclass
class CommaSeparatedList:
    values: list[CSSValue] = field(default_factory=list)
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        for i, value in enumerate(self.values):
            if i > 0:
                _separator(buf, settings)
            value.render(buf, settings, depth)

CSSValue = TypeAliasType(
    "CSSValue",
    Keyword
    | Function
    | StringLiteral
    | Number
    | NumberWithUnit
    | Percentage
    | Color
    | List
    | CommaSeparatedList,
)
