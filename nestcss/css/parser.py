""" CSS Parser

Recursive descent over a `TokenReader`, with one token of lookahead plus `TokenReader.scan`
to tell a nested rule (`.title {`) from a declaration (`color: red`) before consuming
anything.
"""

from __future__ import annotations
import logging
import time
from collections.abc import Callable
from threading import Thread
from typing import TypeVar

from nestcss.span import NULL_SOURCE, Position, Span
from nestcss.css import nodes, values
from nestcss.css.channel import BufferedTokenQueue, ParallelTokenQueue, TokenReader, describe
from nestcss.css.lexer import Lexer, ParseError
from nestcss.css.tokens import *

__all__ = ["Parser", "Parse", "PARALLEL_THRESHOLD"]

logger = logging.getLogger(__name__)

# Inputs longer than this (in characters) are lexed on a worker thread while parsing
PARALLEL_THRESHOLD = 2048

T = TypeVar("T")

Tokens = str | list[Token]

VALUE_ENDS: tuple[type[Token], ...] = (EOF, Semicolon, RCurlyBracket)
ARGUMENT_ENDS: tuple[type[Token], ...] = (EOF, Semicolon, RCurlyBracket, RParantheses)

def _union(first: Span | None, last: Span | None) -> Span | None:
    if first is None:
        return last
    if last is None:
        return first
    return first.union(last)

class Parser:
    def __init__(self, reader: TokenReader) -> None:
        self.reader = reader

    def _skip_comments_(self):
        while isinstance(self.reader.peek(), Comment):
            self.reader.next()

    def peek(self) -> Token:
        """The next token that is not a comment. Only top level comments are kept."""
        self._skip_comments_()
        return self.reader.peek()

    def next(self) -> Token:
        self._skip_comments_()
        return self.reader.next()

    def expect(self, kind: type[T]) -> T:
        self._skip_comments_()
        return self.reader.expect_next(kind)  # type: ignore[type-var]

    def consume_stylesheet(self) -> nodes.StyleSheet:
        stylesheet = nodes.StyleSheet()
        while not isinstance(self.reader.peek(), EOF):
            if isinstance(self.reader.peek(), Comment):
                comment = self.reader.next()
                stylesheet.entries.append(nodes.Comment(comment.raw, comment.span))
            else:
                stylesheet.entries.append(self.consume_rule())
        return stylesheet

    def _starts_nested_rule_(self) -> bool:
        """Scan ahead: a `{` before any `:`, `;` or `}` means a nested rule follows."""
        is_rule: bool | None = None

        def check(token: Token) -> bool:
            nonlocal is_rule
            if isinstance(token, (Colon, Semicolon, RCurlyBracket)):
                is_rule = False
            elif isinstance(token, LCurlyBracket):
                is_rule = True
            return is_rule is not None

        self.reader.scan(check)
        return bool(is_rule)

    def consume_rule(self) -> nodes.Rule:
        rule = nodes.Rule([self.consume_selector()])
        while isinstance(self.peek(), Comma):
            self.next()
            rule.selectors.append(self.consume_selector())
        first = rule.selectors[0].span
        self.expect(LCurlyBracket)

        while not isinstance(self.peek(), RCurlyBracket):
            if self._starts_nested_rule_():
                if rule.nested_rules is None:
                    rule.nested_rules = []
                rule.nested_rules.append(self.consume_rule())
                continue

            name = self.expect(Ident)
            self.expect(Colon)
            rule.declarations.append((name.raw, self.consume_value()))

            end = self.next()
            if isinstance(end, RCurlyBracket):
                # The last declaration does not need a `;`
                rule.span = _union(first, end.span)
                return rule
            elif not isinstance(end, Semicolon):
                raise ParseError(f"Expected ';' or '}}' found {describe(end)}", end.span)

        last = self.expect(RCurlyBracket)
        rule.span = _union(first, last.span)
        return rule

    def consume_selector(self) -> nodes.Selector:
        selector = nodes.Selector()
        span: Span | None = None
        while True:
            # A gap before the next token (other than `>`) starts a descendant selector
            peek = self.peek()
            if span is not None and not isinstance(peek, CloseAngle) and not span.is_adjacent(peek.span):
                descendant = self.consume_selector()
                selector.descendant = descendant
                span = _union(span, descendant.span)
                break

            token = self.next()
            if isinstance(token, (Ident, Asterisk)):
                if selector.tag_name is not None:
                    raise ParseError("Tag name specified twice", token.span)
                selector.tag_name = token.raw
                token_span = token.span
            elif isinstance(token, Dot):
                name = self.expect(Ident)
                if not token.span.is_adjacent(name.span):
                    raise ParseError("Expected class name directly after '.'", name.span)
                selector.class_names.append(name.raw)
                token_span = token.span.union(name.span)
            elif isinstance(token, Hash):
                if selector.identifier is not None:
                    raise ParseError("Cannot specify two id selectors", token.span)
                selector.identifier = token.raw
                token_span = token.span
            elif isinstance(token, CloseAngle):
                if span is None:
                    raise ParseError("Expected selector start, found '>'", token.span)
                child = self.consume_selector()
                selector.child = child
                span = _union(span, child.span)
                break
            else:
                raise ParseError(f"Expected selector found {describe(token)}", token.span)

            span = _union(span, token_span)
            if isinstance(self.peek(), (LCurlyBracket, EOF, Comma)):
                break

        selector.span = span
        return selector

    def consume_value(self, ends: tuple[type[Token], ...] = VALUE_ENDS) -> values.CSSValue:
        """A value up to one of `ends`: single, space separated or comma separated."""
        ends = ends + (Comma,)
        groups = [self._consume_space_list_(ends)]
        while isinstance(self.peek(), Comma):
            self.next()
            groups.append(self._consume_space_list_(ends))
        if len(groups) == 1:
            return groups[0]
        return values.CommaSeparatedList(groups, span=_union(groups[0].span, groups[-1].span))

    def _consume_space_list_(self, ends: tuple[type[Token], ...]) -> values.CSSValue:
        value = self.consume_single_value()
        if isinstance(self.peek(), ends):
            return value
        items = [value]
        while not isinstance(self.peek(), ends):
            items.append(self.consume_single_value())
        return values.List(items, span=_union(items[0].span, items[-1].span))

    def consume_single_value(self) -> values.CSSValue:
        token = self.next()
        if isinstance(token, Ident):
            peek = self.peek()
            if isinstance(peek, LParantheses) and token.span.is_adjacent(peek.span):
                self.next()
                return self._consume_function_(token)
            return values.Keyword(token.raw, span=token.span)
        elif isinstance(token, Hash):
            return values.Color(token.raw, span=token.span)
        elif isinstance(token, String):
            return values.StringLiteral(token.raw, span=token.span)
        elif isinstance(token, Number):
            peek = self.peek()
            if token.span.is_adjacent(peek.span):
                if isinstance(peek, Percent):
                    self.next()
                    return values.Percentage(token.raw, span=token.span.union(peek.span))
                elif isinstance(peek, Ident):
                    self.next()
                    return values.NumberWithUnit(token.raw, peek.raw, span=token.span.union(peek.span))
            return values.Number(token.raw, span=token.span)
        raise ParseError(f"Expected value found {describe(token)}", token.span)

    def _consume_function_(self, name: Ident) -> values.Function:
        function = values.Function(name.raw)
        if not isinstance(self.peek(), RParantheses):
            ends = ARGUMENT_ENDS + (Comma,)
            function.arguments.append(self._consume_space_list_(ends))
            while isinstance(self.peek(), Comma):
                self.next()
                function.arguments.append(self._consume_space_list_(ends))
        close = self.expect(RParantheses)
        function.span = name.span.union(close.span)
        return function

class Parse:
    """Entry points that parse a whole input into one node, requiring nothing to be left over."""

    @staticmethod
    def normalize(_input_: Tokens, source_id: int = NULL_SOURCE, offset: int = 0) -> BufferedTokenQueue:
        """Eagerly turn the input into a filled token queue."""
        reader = BufferedTokenQueue()
        if isinstance(_input_, str):
            Lexer(_input_, source_id, offset).lex(reader)
        elif isinstance(_input_, list):
            for token in _input_:
                reader.push(token)
            if not _input_ or not isinstance(_input_[-1], EOF):
                end = _input_[-1].span.end if _input_ else Position(offset)
                reader.push(EOF(Span(end, end, source_id)))
        else:
            raise TypeError(
                "Unexpected input to parse. Expected string or list of tokens."
            )
        return reader

    @staticmethod
    def _complete_(reader: TokenReader, consume: Callable[[Parser], T]) -> T:
        parser = Parser(reader)
        result = consume(parser)
        parser.expect(EOF)
        return result

    @staticmethod
    def _sequential_(source: str, consume: Callable[[Parser], T], source_id: int, offset: int) -> T:
        reader = BufferedTokenQueue()
        try:
            Lexer(source, source_id, offset).lex(reader)
        except ParseError as lexer_error:
            # Parse what was lexed, a grammar error before the lexer error is reported instead
            try:
                Parse._complete_(reader, consume)
            except ParseError as parse_error:
                if not reader.truncated:
                    raise parse_error from None
            raise lexer_error
        return Parse._complete_(reader, consume)

    @staticmethod
    def _parallel_(source: str, consume: Callable[[Parser], T], source_id: int, offset: int) -> T:
        sender, reader = ParallelTokenQueue.new()
        lexer_errors: list[ParseError] = []

        def lex():
            try:
                Lexer(source, source_id, offset).lex(sender)
            except ParseError as error:
                lexer_errors.append(error)
            finally:
                sender.close()

        logger.debug("Lexing %d characters on a worker thread", len(source))
        thread = Thread(target=lex, name="nestcss-lexer", daemon=True)
        thread.start()

        parse_error: ParseError | None = None
        try:
            result = Parse._complete_(reader, consume)
        except ParseError as error:
            parse_error = error
        finally:
            reader.close()
            thread.join()

        # A lexer error explains a token stream that ended early
        if lexer_errors and (parse_error is None or reader.truncated):
            raise lexer_errors[0]
        if parse_error is not None:
            raise parse_error
        return result

    @staticmethod
    def _run_(_input_: Tokens, consume: Callable[[Parser], T], source_id: int, offset: int) -> T:
        started = time.perf_counter()
        if isinstance(_input_, str) and len(_input_) > PARALLEL_THRESHOLD:
            result = Parse._parallel_(_input_, consume, source_id, offset)
        elif isinstance(_input_, str):
            result = Parse._sequential_(_input_, consume, source_id, offset)
        else:
            result = Parse._complete_(Parse.normalize(_input_, source_id, offset), consume)
        logger.debug("Parsed input in %.2fms", (time.perf_counter() - started) * 1000)
        return result

    @staticmethod
    def parse_stylesheet(source: Tokens, source_id: int = NULL_SOURCE, offset: int = 0) -> nodes.StyleSheet:
        return Parse._run_(source, Parser.consume_stylesheet, source_id, offset)

    @staticmethod
    def parse_rule(source: Tokens, source_id: int = NULL_SOURCE, offset: int = 0) -> nodes.Rule:
        return Parse._run_(source, Parser.consume_rule, source_id, offset)

    @staticmethod
    def parse_selector(source: Tokens, source_id: int = NULL_SOURCE, offset: int = 0) -> nodes.Selector:
        return Parse._run_(source, Parser.consume_selector, source_id, offset)

    @staticmethod
    def parse_value(source: Tokens, source_id: int = NULL_SOURCE, offset: int = 0) -> values.CSSValue:
        return Parse._run_(source, Parser.consume_value, source_id, offset)
