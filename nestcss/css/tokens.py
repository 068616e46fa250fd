"""
Tokens produced by `nestcss.css.lexer.Lexer`.

<comment>/* text */</comment>
<rule>
    <selector/>, <selector/> {
        <property/>: <value/>;
        <rule/>
    }
</rule>

ident    => tag names, classes, property names, keywords and units,
hash     => `#id` selectors and `#ffffff` colors,
number   => literal text, `10`, `1.5`, `.2`,
string   => `"..."` with escapes kept verbatim,
punctuation => `{ } ( ) : ; . > , * %`,
eof      => always the last token of a stream,
"""
from __future__ import annotations
from typing import Literal

from nestcss.span import Span

__all__ = [
    "Token",
    "Ident",
    "Comment",
    "Hash",
    "Number",
    "String",

    "Delim",
    "Colon",
    "Semicolon",
    "Comma",
    "Dot",
    "CloseAngle",
    "Asterisk",
    "Percent",

    "LCurlyBracket",
    "RCurlyBracket",
    "LParantheses",
    "RParantheses",

    "EOF",
    "PUNCTUATION",
]

class Token:
    raw: str
    span: Span
    def __init__(self, raw: str, span: Span):
        self.raw = raw
        self.span = span

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.raw!r})'

    def __str__(self) -> str:
        return self.raw

    def __eq__(self, __value: object) -> bool:
        if isinstance(__value, Token):
            return type(self) is type(__value) and self.raw == __value.raw and self.span == __value.span
        return False

    def __hash__(self) -> int:
        return hash((type(self), self.raw, self.span))

class Ident(Token): pass
class Number(Token): pass

class Comment(Token):
    def __str__(self) -> str:
        return f"/*{self.raw}*/"

class Hash(Token):
    def __str__(self) -> str:
        return f"#{self.raw}"

class String(Token):
    def __str__(self) -> str:
        return f'"{self.raw}"'

class Delim(Token):
    def __init__(self, raw: str, span: Span):
        if len(raw) > 1:
            raise ValueError("Delimiters may only be one codepoint long")
        super().__init__(raw, span)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.raw!r})'

class Colon(Delim):
    @staticmethod
    def value() -> Literal[':']:
        return ':'
class Semicolon(Delim):
    @staticmethod
    def value() -> Literal[';']:
        return ';'
class Comma(Delim):
    @staticmethod
    def value() -> Literal[',']:
        return ','
class Dot(Delim):
    @staticmethod
    def value() -> Literal['.']:
        return '.'
class CloseAngle(Delim):
    @staticmethod
    def value() -> Literal['>']:
        return '>'
class Asterisk(Delim):
    @staticmethod
    def value() -> Literal['*']:
        return '*'
class Percent(Delim):
    @staticmethod
    def value() -> Literal['%']:
        return '%'

class LCurlyBracket(Delim):
    @property
    def alt(self) -> type:
        return RCurlyBracket
    @staticmethod
    def value() -> Literal['{']:
        return '{'
class RCurlyBracket(Delim):
    @property
    def alt(self) -> type:
        return LCurlyBracket
    @staticmethod
    def value() -> Literal['}']:
        return '}'
class LParantheses(Delim):
    @property
    def alt(self) -> type:
        return RParantheses
    @staticmethod
    def value() -> Literal['(']:
        return '('
class RParantheses(Delim):
    @property
    def alt(self) -> type:
        return LParantheses
    @staticmethod
    def value() -> Literal[')']:
        return ')'

class EOF(Token):
    def __init__(self, span: Span):
        super().__init__('', span)

    def __repr__(self) -> str:
        return 'EOF()'

PUNCTUATION: dict[str, type[Delim]] = {
    cls.value(): cls
    for cls in (
        LCurlyBracket, RCurlyBracket, LParantheses, RParantheses,
        Colon, Semicolon, Comma, Dot, CloseAngle, Asterisk, Percent,
    )
}
