"""
Lexer for the specification language (Layer 1: Raw Text -> Tokens).

The lexer is a state machine. Each state is a bound method that
consumes characters and either emits a token (the text since the last
emission) or hands back the next state. Running out of states ends the
stream.

Declarations:
    name = a e i o u;               phoneme group
    %name = 50C V 25N;              syllable template
    ! name name;                    disallowed sequence
    #name = 12;                     config value
    ( ... )                         comment, wherever blanks are allowed

The first lexical error produces a single ERROR token carrying a
message with line and column, and the stream closes.

Two ways to consume tokens:
    - Lexer(source).tokens(): lazy, synchronous generator
    - TokenStream(source): the same state machine on a producer thread,
      handing tokens over through a single-slot queue
"""

import bisect
import logging
import queue
import threading
from collections import deque
from typing import Callable, Deque, Iterator, List, Optional, Union

from lexipoeia.tokens import Token, TokenType

logger = logging.getLogger(__name__)

EOF_CHAR = ""

# Characters with syntactic meaning; never part of an identifier.
RESERVED_CHARS = frozenset(";()#!%=:")

State = Callable[[], Optional["State"]]


def is_identifier_char(char: str) -> bool:
    """Any character that is not blank, a decimal digit or reserved."""
    if char == EOF_CHAR:
        return False
    return not (char.isspace() or char.isdecimal() or char in RESERVED_CHARS)


def _is_digit(char: str) -> bool:
    return char != EOF_CHAR and char.isdecimal()


def _is_space(char: str) -> bool:
    return char != EOF_CHAR and char.isspace()


class _LexError(Exception):
    """Raised inside a state to stop the machine with an ERROR token."""

    def __init__(self, message: str, offset: int):
        super().__init__(message)
        self.message = message
        self.offset = offset


class Lexer:
    """
    State-machine tokenizer over a specification source string.

    Properties:
        source: Text being scanned
        start: Offset where the pending token begins
        current: Offset of the next unread character
    """

    def __init__(self, source: str):
        self.source = source
        self.start = 0
        self.current = 0
        self._width = 0
        self._pending: Deque[Token] = deque()
        self._line_starts = [0]
        for index, char in enumerate(source):
            if char == "\n":
                self._line_starts.append(index + 1)

    # =========================================================================
    # DRIVER
    # =========================================================================

    def tokens(self) -> Iterator[Token]:
        """Run the state machine, yielding tokens as states emit them."""
        state: Optional[State] = self._lex_declaration
        while state is not None:
            try:
                state = state()
            except _LexError as e:
                line, column = self.location(e.offset)
                message = f"line {line}, column {column}: {e.message}"
                logger.debug("Lexical error at %d:%d: %s", line, column, e.message)
                self._pending.append(Token(TokenType.ERROR, message, line, column))
                state = None
            while self._pending:
                yield self._pending.popleft()

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def location(self, offset: int) -> tuple:
        """Translate a character offset into a 1-based (line, column)."""
        index = bisect.bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index] + 1

    # =========================================================================
    # CHARACTER PRIMITIVES
    # =========================================================================

    def _emit(self, token_type: TokenType) -> None:
        line, column = self.location(self.start)
        value = self.source[self.start:self.current]
        self._pending.append(Token(token_type, value, line, column))
        self.start = self.current

    def _next(self) -> str:
        if self.current >= len(self.source):
            self._width = 0
            return EOF_CHAR
        char = self.source[self.current]
        self._width = 1
        self.current += 1
        return char

    def _backup(self) -> None:
        # Only valid once per call of _next
        self.current -= self._width

    def _peek(self) -> str:
        char = self._next()
        self._backup()
        return char

    def _ignore(self) -> None:
        self.start = self.current

    def _accept(self, valid: str) -> bool:
        char = self._next()
        if char != EOF_CHAR and char in valid:
            return True
        self._backup()
        return False

    def _accept_pred(self, valid: Callable[[str], bool]) -> bool:
        if valid(self._next()):
            return True
        self._backup()
        return False

    def _accept_pred_run(self, valid: Callable[[str], bool]) -> None:
        while valid(self._next()):
            pass
        self._backup()

    def _skip_blank(self) -> None:
        """Skip whitespace and ( ... ) comments, then drop them."""
        while True:
            self._accept_pred_run(_is_space)
            if not self._accept("("):
                break
            opened_at = self.current - 1
            while True:
                char = self._next()
                if char == ")":
                    break
                if char == EOF_CHAR:
                    raise _LexError("unterminated comment", opened_at)
        self._ignore()

    def _error(self, message: str) -> None:
        raise _LexError(message, self.current)

    # =========================================================================
    # STATES
    # =========================================================================

    def _lex_declaration(self) -> Optional[State]:
        self._skip_blank()
        char = self._peek()
        if char == EOF_CHAR:
            self._emit(TokenType.EOF)
            return None
        if is_identifier_char(char):
            return self._lex_phoneme_variable
        if self._accept("%"):
            self._ignore()
            return self._lex_syllable_variable
        if self._accept("!"):
            self._emit(TokenType.DISALLOWED)
            return self._lex_disallowed
        if self._accept("#"):
            self._ignore()
            return self._lex_config_variable
        self._error(f"bad beginning of declaration: {char!r}")

    def _lex_name(self, token_type: TokenType, what: str) -> None:
        self._accept_pred_run(is_identifier_char)
        if self.current == self.start:
            self._error(f"expected a {what} name")
        name = self.source[self.start:self.current]
        self._emit(token_type)
        self._skip_blank()
        if not self._accept("=:"):
            self._error(f"expected '=' or ':' after {what} name {name!r}")
        self._ignore()
        self._skip_blank()

    def _end_declaration(self, what: str) -> Optional[State]:
        if self._accept(";"):
            self._emit(TokenType.END_DECLARATION)
            return self._lex_declaration
        char = self._peek()
        if char == EOF_CHAR:
            self._error(f"unterminated {what} declaration, expected ';'")
        self._error(f"unexpected {char!r} in {what} declaration")

    def _lex_phoneme_variable(self) -> Optional[State]:
        self._lex_name(TokenType.PHONEME_VARIABLE, "phoneme group")
        return self._lex_phonemes

    def _lex_phonemes(self) -> Optional[State]:
        if self._accept_pred(is_identifier_char):
            self._accept_pred_run(is_identifier_char)
            self._emit(TokenType.VARIABLE)
            if self._accept_pred(_is_digit):
                self._accept_pred_run(_is_digit)
                self._emit(TokenType.NUMBER)
            self._skip_blank()
            return self._lex_phonemes
        return self._end_declaration("phoneme group")

    def _lex_syllable_variable(self) -> Optional[State]:
        self._lex_name(TokenType.SYLLABLE_VARIABLE, "syllable template")
        return self._lex_slots

    def _lex_slots(self) -> Optional[State]:
        if self._accept_pred(_is_digit):
            self._accept_pred_run(_is_digit)
            chance = self.source[self.start:self.current]
            self._emit(TokenType.NUMBER)
            self._skip_blank()
            if not is_identifier_char(self._peek()):
                self._error(f"expected a phoneme group name after chance {chance}")
        if self._accept_pred(is_identifier_char):
            self._accept_pred_run(is_identifier_char)
            self._emit(TokenType.VARIABLE)
            self._skip_blank()
            return self._lex_slots
        return self._end_declaration("syllable template")

    def _lex_disallowed(self) -> Optional[State]:
        self._skip_blank()
        if self._accept_pred(is_identifier_char):
            self._accept_pred_run(is_identifier_char)
            self._emit(TokenType.VARIABLE)
            return self._lex_disallowed
        return self._end_declaration("disallowed sequence")

    def _lex_config_variable(self) -> Optional[State]:
        self._lex_name(TokenType.CONFIG_VARIABLE, "config")
        if not self._accept_pred(_is_digit):
            self._error("config values must be non-negative integers")
        self._accept_pred_run(_is_digit)
        self._emit(TokenType.NUMBER)
        self._skip_blank()
        return self._end_declaration("config")


def tokenize(source: str) -> List[Token]:
    """Lex `source` completely and return the token list."""
    return list(Lexer(source).tokens())


# Marks the end of the producer's output inside the handoff queue.
_END_OF_STREAM = object()

# How often a blocked producer re-checks whether the consumer closed.
_POLL_INTERVAL = 0.05


class TokenStream:
    """
    Lexer running on its own thread, one token in flight at a time.

    The producer blocks while the single queue slot is full and the
    consumer blocks while it is empty, so tokens arrive in exactly the
    order the state machine emits them.

    Use as an iterator. Call close() (or use as a context manager)
    when abandoning the stream early so the producer thread exits.
    """

    def __init__(self, source: Union[str, Lexer]):
        self._lexer = source if isinstance(source, Lexer) else Lexer(source)
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=1)
        self._closed = threading.Event()
        self._finished = False
        self._thread = threading.Thread(
            target=self._produce, name="lexipoeia-lexer", daemon=True
        )
        self._thread.start()

    def _put(self, item: object) -> bool:
        while not self._closed.is_set():
            try:
                self._queue.put(item, timeout=_POLL_INTERVAL)
                return True
            except queue.Full:
                continue
        return False

    def _produce(self) -> None:
        try:
            for token in self._lexer.tokens():
                if not self._put(token):
                    return
        except Exception as e:
            self._put(e)
            return
        self._put(_END_OF_STREAM)

    def __iter__(self) -> "TokenStream":
        return self

    def __next__(self) -> Token:
        if self._finished:
            raise StopIteration
        item = self._queue.get()
        if item is _END_OF_STREAM:
            self._finished = True
            raise StopIteration
        if isinstance(item, Exception):
            self._finished = True
            raise item
        return item

    def close(self) -> None:
        """Stop the producer and wait for its thread to exit."""
        self._finished = True
        self._closed.set()
        self._thread.join()

    def __enter__(self) -> "TokenStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
