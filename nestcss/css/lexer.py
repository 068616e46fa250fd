""" CSS LEXING

Single pass over the source producing `nestcss.css.tokens` with spans. Tokens are either
collected (`Lexer.process`) or pushed one by one into a sender (`Lexer.lex`), which lets a
parser on another thread consume them while lexing is still in progress.

States:
    none    | between tokens, whitespace is skipped here
    ident   | `[A-Za-z_][A-Za-z0-9_-]*`
    hash    | `#` followed by ident characters
    number  | digits and at most one `.`
    dot     | a `.` that is either a class prefix or the start of `.2`
    string  | `"..."`, `\\` escapes the next character
    comment | `/* ... */`
"""

from __future__ import annotations
import logging
from collections.abc import Iterator
from enum import Enum, auto
from typing import TYPE_CHECKING

from nestcss.span import NULL_SOURCE, Position, Span
from nestcss.css.tokens import *

if TYPE_CHECKING:
    from nestcss.css.channel import TokenSender

__all__ = ["Check", "Lexer", "ParseError"]

logger = logging.getLogger(__name__)

class ParseError(Exception):
    """Raised by the lexer and parser. The first error aborts the whole parse."""

    reason: str
    position: Span

    def __init__(self, reason: str, position: Span) -> None:
        self.reason = reason
        self.position = position
        super().__init__(reason)

    def __repr__(self) -> str:
        return f"ParseError({self.reason!r}, {self.position!r})"

class Check:
    @staticmethod
    def letter(current: str | None) -> bool:
        return current is not None and current.isalpha()

    @staticmethod
    def digit(current: str | None) -> bool:
        return current is not None and current in "0123456789"

    @staticmethod
    def whitespace(current: str | None) -> bool:
        return current is not None and current.isspace()

    @staticmethod
    def ident_start(current: str | None) -> bool:
        return current is not None and (Check.letter(current) or current == "_")

    @staticmethod
    def ident(current: str | None) -> bool:
        return current is not None and (Check.ident_start(current) or Check.digit(current) or current == "-")

    @staticmethod
    def utf16_length(current: str) -> int:
        """Code units `current` occupies in utf-16, which is how source map columns are counted."""
        return 2 if ord(current) > 0xFFFF else 1

    @staticmethod
    def utf8_length(current: str) -> int:
        o = ord(current)
        if o < 0x80:
            return 1
        elif o < 0x800:
            return 2
        elif o < 0x10000:
            return 3
        return 4

class State(Enum):
    NONE = auto()
    IDENT = auto()
    HASH = auto()
    NUMBER = auto()
    DOT = auto()
    STRING = auto()
    COMMENT = auto()

class Lexer:
    column_start: int = 1

    def __init__(self, source: str, source_id: int = NULL_SOURCE, offset: int = 0) -> None:
        self.source = source
        self.source_id = source_id
        self.offset = offset

    def __iter__(self) -> Iterator[Token]:
        return self._tokens_()

    def process(self) -> list[Token]:
        """Lex the entire source at once."""
        return [token for token in self]

    def lex(self, sender: TokenSender) -> None:
        """Push every token into `sender`.

        Stops without error when `sender.push` returns False, which means the consumer has gone away.
        """
        for token in self:
            if not sender.push(token):
                logger.debug("Token consumer closed, stopping lexer at %s", token.span)
                return

    def _advance_(self, position: Position, current: str) -> Position:
        if current == "\n":
            return Position(position.offset + 1, position.line + 1, self.column_start)
        return Position(
            position.offset + Check.utf8_length(current),
            position.line,
            position.column + Check.utf16_length(current),
        )

    def _span_(self, start: Position, end: Position) -> Span:
        return Span(start, end, self.source_id)

    def _tokens_(self) -> Iterator[Token]:
        source = self.source
        state = State.NONE
        escaped = False
        found_asterisk = False
        found_dot = False

        position = Position(self.offset, 1, self.column_start)
        start = position
        begin = 0

        index = 0
        while index < len(source):
            current = source[index]

            if state is State.IDENT:
                if Check.ident(current):
                    position = self._advance_(position, current)
                    index += 1
                    continue
                yield Ident(source[begin:index], self._span_(start, position))
                state = State.NONE
            elif state is State.HASH:
                if Check.ident(current):
                    position = self._advance_(position, current)
                    index += 1
                    continue
                yield Hash(source[begin + 1:index], self._span_(start, position))
                state = State.NONE
            elif state is State.DOT:
                if Check.digit(current):
                    state = State.NUMBER
                    found_dot = True
                    position = self._advance_(position, current)
                    index += 1
                    continue
                yield Dot(".", self._span_(start, position))
                state = State.NONE
            elif state is State.NUMBER:
                if Check.digit(current) or (current == "." and not found_dot):
                    # A second `.` ends the number, `1.2.3` is `1.2` then `.3`
                    found_dot = found_dot or current == "."
                    position = self._advance_(position, current)
                    index += 1
                    continue
                yield Number(source[begin:index], self._span_(start, position))
                state = State.NONE
            elif state is State.STRING:
                position = self._advance_(position, current)
                if escaped:
                    escaped = False
                elif current == "\\":
                    escaped = True
                elif current == '"':
                    yield String(source[begin + 1:index], self._span_(start, position))
                    state = State.NONE
                index += 1
                continue
            elif state is State.COMMENT:
                position = self._advance_(position, current)
                if current == "/" and found_asterisk:
                    yield Comment(source[begin + 2:index - 1], self._span_(start, position))
                    state = State.NONE
                else:
                    found_asterisk = current == "*"
                index += 1
                continue

            # State.NONE, possibly reprocessing the character that ended the previous token
            following = self._advance_(position, current)
            if Check.ident_start(current):
                state, start, begin = State.IDENT, position, index
            elif current == "#":
                state, start, begin = State.HASH, position, index
            elif Check.digit(current):
                state, start, begin = State.NUMBER, position, index
                found_dot = False
            elif current == ".":
                state, start, begin = State.DOT, position, index
            elif current == '"':
                state, start, begin = State.STRING, position, index
                escaped = False
            elif current == "/":
                if index + 1 < len(source) and source[index + 1] == "*":
                    state, start, begin = State.COMMENT, position, index
                    found_asterisk = False
                    position = self._advance_(following, "*")
                    index += 2
                    continue
                raise ParseError("Invalid character '/'", self._span_(position, following))
            elif Check.whitespace(current):
                pass
            elif current in PUNCTUATION:
                yield PUNCTUATION[current](current, self._span_(position, following))
            else:
                raise ParseError(f"Invalid character {current!r}", self._span_(position, following))
            position = following
            index += 1

        if state is State.IDENT:
            yield Ident(source[begin:], self._span_(start, position))
        elif state is State.HASH:
            yield Hash(source[begin + 1:], self._span_(start, position))
        elif state is State.NUMBER:
            yield Number(source[begin:], self._span_(start, position))
        elif state is State.COMMENT:
            raise ParseError("Could not find end to comment", self._span_(start, position))
        elif state is State.STRING:
            raise ParseError("Could not find end to string", self._span_(start, position))
        elif state is State.DOT:
            raise ParseError("Found trailing '.'", self._span_(start, position))

        yield EOF(self._span_(position, position))
