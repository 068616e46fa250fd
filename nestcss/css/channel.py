"""Token queues connecting the lexer (sender side) and the parser (reader side).

`BufferedTokenQueue` is filled completely before parsing starts. `ParallelTokenQueue` is a
bounded queue shared between a lexer thread and the parser: the lexer blocks while the queue
is full and stops once the parser closes its end.
"""

from __future__ import annotations
import queue
from collections import deque
from collections.abc import Callable
from threading import Event
from typing import Protocol, TypeVar, runtime_checkable

from nestcss.span import Position, Span
from nestcss.css.lexer import ParseError
from nestcss.css.tokens import *

__all__ = [
    "TokenSender",
    "TokenReader",
    "BufferedTokenQueue",
    "ParallelTokenQueue",
    "ParallelTokenSender",
    "ParallelTokenReader",
    "describe",
]

T = TypeVar("T", bound=Token)

POLL_INTERVAL = 0.05
DEFAULT_CAPACITY = 512

def describe(kind: type[Token] | Token) -> str:
    """Human readable name of a token or token kind for error messages."""
    if isinstance(kind, Token):
        if isinstance(kind, EOF):
            return "end of source"
        if isinstance(kind, Delim):
            return repr(kind.raw)
        return f"{kind.__class__.__name__} {str(kind)!r}"
    if kind is EOF:
        return "end of source"
    if issubclass(kind, Delim) and hasattr(kind, "value"):
        return repr(getattr(kind, "value")())
    return kind.__name__

@runtime_checkable
class TokenSender(Protocol):
    def push(self, token: Token) -> bool:
        """Hand a token to the consumer. False means the consumer is gone and lexing should stop."""
        raise NotImplementedError

class TokenReader:
    """Lookahead over a token stream.

    Subclasses feed tokens through `_pull_`, which returns None once the stream has no more
    tokens. Tokens that have been pulled but not consumed wait in `_buffer_`.
    """

    truncated: bool

    def __init__(self) -> None:
        self._buffer_: deque[Token] = deque()
        self._last_: Span = Span(Position(), Position())
        self.truncated = False

    def _pull_(self) -> Token | None:
        raise NotImplementedError

    def _fill_(self, size: int) -> bool:
        while len(self._buffer_) < size:
            token = self._pull_()
            if token is None:
                return False
            self._buffer_.append(token)
            self._last_ = token.span
        return True

    def _exhausted_(self) -> ParseError:
        self.truncated = True
        return ParseError("Token stream ended before the end of source", self._last_)

    def peek(self) -> Token:
        """The next token, without consuming it."""
        if not self._fill_(1):
            raise self._exhausted_()
        return self._buffer_[0]

    def next(self) -> Token:
        token = self.peek()
        self._buffer_.popleft()
        return token

    def expect_next(self, kind: type[T]) -> T:
        """Consume the next token, which must be a `kind`."""
        token = self.next()
        if not isinstance(token, kind):
            raise ParseError(f"Expected {describe(kind)} found {describe(token)}", token.span)
        return token

    def scan(self, predicate: Callable[[Token], bool]) -> None:
        """Run `predicate` over upcoming tokens without consuming them.

        Stops at the first token `predicate` accepts, at `EOF`, or when the stream runs out.
        """
        index = 0
        while self._fill_(index + 1):
            token = self._buffer_[index]
            if predicate(token) or isinstance(token, EOF):
                return
            index += 1

class BufferedTokenQueue(TokenReader, TokenSender):
    """Reader and sender in one, for lexing eagerly then parsing on the same thread."""

    def push(self, token: Token) -> bool:
        self._buffer_.append(token)
        self._last_ = token.span
        return True

    def _pull_(self) -> Token | None:
        return None

    def __len__(self) -> int:
        return len(self._buffer_)

class _End:
    """Marks the end of production on a parallel queue."""

_END = _End()

class ParallelTokenSender(TokenSender):
    def __init__(self, channel: queue.Queue[Token | _End], closed: Event) -> None:
        self._channel_ = channel
        self._closed_ = closed

    def _put_(self, item: Token | _End) -> bool:
        while not self._closed_.is_set():
            try:
                self._channel_.put(item, timeout=POLL_INTERVAL)
                return True
            except queue.Full:
                continue
        return False

    def push(self, token: Token) -> bool:
        return self._put_(token)

    def close(self) -> None:
        """Signal that no more tokens will be sent."""
        self._put_(_END)

class ParallelTokenReader(TokenReader):
    def __init__(self, channel: queue.Queue[Token | _End], closed: Event) -> None:
        super().__init__()
        self._channel_ = channel
        self._closed_ = closed
        self._finished_ = False

    def _pull_(self) -> Token | None:
        if self._finished_:
            return None
        item = self._channel_.get()
        if isinstance(item, _End):
            self._finished_ = True
            return None
        return item

    @property
    def closed(self) -> bool:
        return self._closed_.is_set()

    def close(self) -> None:
        """Stop consuming. A sender blocked on a full queue gives up within `POLL_INTERVAL`."""
        self._closed_.set()
        while True:
            try:
                self._channel_.get_nowait()
            except queue.Empty:
                break

class ParallelTokenQueue:
    @staticmethod
    def new(capacity: int = DEFAULT_CAPACITY) -> tuple[ParallelTokenSender, ParallelTokenReader]:
        channel: queue.Queue[Token | _End] = queue.Queue(maxsize=capacity)
        closed = Event()
        return ParallelTokenSender(channel, closed), ParallelTokenReader(channel, closed)
