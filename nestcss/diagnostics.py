"""Human readable rendering of a `ParseError` with the offending source line.

    error: Could not find end to string
      --> style.css:3:12
       |
     3 |     color: "red;
       |            ^^^^^
"""

from __future__ import annotations

from conterm.pretty import Markup

from nestcss.css.lexer import ParseError
from nestcss.span import SourceRegistry

__all__ = ["format_error", "source_line"]

def _escape(text: str) -> str:
    # Markup treats square brackets as style macros
    return text.replace("[", "\\[")

def source_line(content: str, line: int) -> str:
    """The 1-based `line` of `content`, without its line ending."""
    lines = content.split("\n")
    if 0 < line <= len(lines):
        return lines[line - 1].rstrip("\r")
    return ""

def format_error(error: ParseError, registry: SourceRegistry | None = None, color: bool = True) -> str:
    """Describe `error`, pointing at its span in the source it came from.

    Without a registry (or for an unknown source id) only the message and position are given.
    """
    span = error.position
    start, end = span.start, span.end

    name, content = "<input>", None
    if registry is not None and span.source_id in registry:
        name, content = registry.get(span.source_id)

    location = f"{name}:{start.line}:{start.column}"
    gutter = " " * len(str(start.line))

    if content is None:
        lines = [
            f"[bold red]error[/]: {_escape(error.reason)}" if color else f"error: {error.reason}",
            f"{gutter}[blue]-->[/] {_escape(location)}" if color else f"{gutter}--> {location}",
        ]
    else:
        text = source_line(content, start.line)
        # Spans may cover several lines, underline to the end of the first one
        width = (end.column - start.column) if end.line == start.line else len(text) - start.column + 1
        underline = " " * (start.column - 1) + "^" * max(width, 1)
        if color:
            lines = [
                f"[bold red]error[/]: {_escape(error.reason)}",
                f"{gutter}[blue]-->[/] {_escape(location)}",
                f"{gutter} [blue]|[/]",
                f"[blue]{start.line} |[/] {_escape(text)}",
                f"{gutter} [blue]|[/] [red]{underline}[/]",
            ]
        else:
            lines = [
                f"error: {error.reason}",
                f"{gutter}--> {location}",
                f"{gutter} |",
                f"{start.line} | {text}",
                f"{gutter} | {underline}",
            ]

    if color:
        return Markup.parse(*lines, sep="\n", mar=False)
    return "\n".join(lines)
