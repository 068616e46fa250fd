"""Stylesheet tree: `StyleSheet` -> `Rule` | `Comment`, `Rule` -> `Selector` + declarations.

Each node renders itself into a `nestcss.buffer.Buffer`, mirroring how it was parsed.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from typing_extensions import TypeAliasType

from nestcss.buffer import Buffer
from nestcss.settings import OptionalSettings, Settings, default_settings
from nestcss.source_map import SourceMapBuilder
from nestcss.span import SourceRegistry, Span
from nestcss.css.values import CSSValue

__all__ = ["Selector", "Rule", "Comment", "Entry", "StyleSheet"]

@dataclass
class Selector:
    """A compound selector optionally followed by one combinator.

    `div.card#main > h1` is `Selector("div", "main", ["card"], child=Selector("h1"))`. At most
    one of `descendant` and `child` is set, so longer selectors form a chain.
    """

    tag_name: str | None = None  # `*` for universal
    identifier: str | None = None
    class_names: list[str] = field(default_factory=list)
    descendant: Selector | None = None
    child: Selector | None = None
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        buf.add_mapping(self.span)
        if self.tag_name is not None:
            buf.push_str(self.tag_name)
        if self.identifier is not None:
            buf.push("#")
            buf.push_str(self.identifier)
        for class_name in self.class_names:
            buf.push(".")
            buf.push_str(class_name)

        if self.descendant is not None:
            buf.push(" ")
            self.descendant.render(buf, settings, depth)
        elif self.child is not None:
            if not settings["minify"]:
                buf.push(" ")
            buf.push(">")
            if not settings["minify"]:
                buf.push(" ")
            self.child.render(buf, settings, depth)

@dataclass
class Rule:
    selectors: list[Selector]
    declarations: list[tuple[str, CSSValue]] = field(default_factory=list)
    # Only populated before `nestcss.nesting.raise_nested_rules` has run
    nested_rules: list[Rule] | None = None
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        minify = settings["minify"]
        for i, selector in enumerate(self.selectors):
            if i > 0:
                buf.push(",")
                if not minify:
                    buf.push(" ")
            selector.render(buf, settings, depth)

        if not minify:
            buf.push(" ")
        buf.push("{")

        indent = settings["indent_with"]
        nested_rules = self.nested_rules or []
        for i, (name, value) in enumerate(self.declarations):
            if minify:
                if i > 0:
                    buf.push(";")
            else:
                buf.push_new_line()
                buf.push_str(indent * (depth + 1))
            buf.push_str(name)
            buf.push(":")
            if not minify:
                buf.push(" ")
            value.render(buf, settings, depth)
            if not minify:
                buf.push(";")

        if minify and self.declarations and nested_rules:
            buf.push(";")
        for rule in nested_rules:
            if not minify:
                buf.push_new_line()
                buf.push_str(indent * (depth + 1))
            rule.render(buf, settings, depth + 1)

        if not minify and (self.declarations or nested_rules):
            buf.push_new_line()
            buf.push_str(indent * depth)
        buf.push("}")

@dataclass
class Comment:
    text: str
    span: Span | None = field(default=None, compare=False, repr=False)

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        if settings["minify"]:
            return
        buf.add_mapping(self.span)
        buf.push_str("/*")
        buf.push_str_contains_new_line(self.text)
        buf.push_str("*/")

Entry = TypeAliasType("Entry", Rule | Comment)

@dataclass
class StyleSheet:
    entries: list[Entry] = field(default_factory=list)

    @property
    def rules(self) -> list[Rule]:
        return [entry for entry in self.entries if isinstance(entry, Rule)]

    def render(self, buf: Buffer, settings: Settings, depth: int = 0):
        entries = self.entries
        if settings["minify"]:
            entries = [entry for entry in entries if not isinstance(entry, Comment)]
        for i, entry in enumerate(entries):
            if i > 0 and not settings["minify"]:
                buf.push_new_line()
                buf.push_new_line()
            entry.render(buf, settings, depth)

    def to_string(self, settings: OptionalSettings | None = None) -> str:
        buf = Buffer()
        self.render(buf, default_settings(settings))
        return str(buf)

    def to_string_with_source_map(
        self, registry: SourceRegistry, settings: OptionalSettings | None = None
    ) -> tuple[str, str]:
        """Render the stylesheet and the json source map linking the output back to its sources."""
        source_map = SourceMapBuilder(registry)
        buf = Buffer(source_map)
        self.render(buf, default_settings(settings))
        return str(buf), source_map.to_json()
