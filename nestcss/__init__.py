from __future__ import annotations
import logging
from typing import NamedTuple

from nestcss.css import Parse, ParseError, StyleSheet
from nestcss.nesting import raise_nested_rules
from nestcss.settings import OptionalSettings, Settings, default_settings
from nestcss.span import SourceRegistry

__version__ = "0.2.0"

__all__ = [
    "CompileResult",
    "ParseError",
    "Settings",
    "SourceRegistry",
    "StyleSheet",
    "compile_stylesheet",
    "parse_stylesheet",
    "raise_nested_rules",
]

logger = logging.getLogger(__name__)

class CompileResult(NamedTuple):
    css: str
    source_map: str | None = None

def parse_stylesheet(source: str, name: str = "<input>", registry: SourceRegistry | None = None) -> StyleSheet:
    """Register `source` under `name` and parse it. Raises `ParseError` on the first problem found."""
    registry = registry if registry is not None else SourceRegistry()
    source_id = registry.add(name, source)
    return Parse.parse_stylesheet(source, source_id)

def compile_stylesheet(
    source: str,
    name: str = "<input>",
    settings: OptionalSettings | None = None,
    *,
    map_name: str | None = None,
    registry: SourceRegistry | None = None,
    flatten: bool = True,
) -> CompileResult:
    """Parse, unnest and render a stylesheet.

    With `generate_source_map` set the result carries the source map json and the css ends
    with a `sourceMappingURL` comment naming `map_name` (defaults to `name + ".map"`).
    """
    options = default_settings(settings)
    registry = registry if registry is not None else SourceRegistry()

    stylesheet = parse_stylesheet(source, name, registry)
    if flatten:
        raise_nested_rules(stylesheet)

    if not options["generate_source_map"]:
        return CompileResult(stylesheet.to_string(options))

    css, source_map = stylesheet.to_string_with_source_map(registry, options)
    map_name = map_name if map_name is not None else f"{name}.map"
    css += f"\n/*# sourceMappingURL={map_name} */"
    logger.debug("Generated source map %s for %s", map_name, name)
    return CompileResult(css, source_map)
