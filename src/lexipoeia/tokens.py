"""
Token types produced by the specification lexer.

Tokens are plain immutable values. The lexer decides the kind,
the spec builder decides what the kind means in context.
"""

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """
    Kinds of tokens in the specification language.

    Declaration starters:
        PHONEME_VARIABLE, SYLLABLE_VARIABLE, CONFIG_VARIABLE, DISALLOWED

    Declaration bodies:
        VARIABLE (phoneme symbol, group name or template name, by context)
        NUMBER (decimal digit run)
        END_DECLARATION (';')

    Stream control:
        EOF, ERROR (value is a human-readable message)
    """

    PHONEME_VARIABLE = "phoneme_variable"
    SYLLABLE_VARIABLE = "syllable_variable"
    CONFIG_VARIABLE = "config_variable"
    VARIABLE = "variable"
    DISALLOWED = "disallowed"
    NUMBER = "number"
    END_DECLARATION = "end_declaration"
    EOF = "eof"
    ERROR = "error"


@dataclass(frozen=True)
class Token:
    """
    A single lexeme.

    Properties:
        type: TokenType
        value: Source text of the token (or the message for ERROR)
        line: 1-based line of the first character
        column: 1-based column of the first character
    """

    type: TokenType
    value: str
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        if self.type == TokenType.EOF:
            return "EOF"
        if self.type == TokenType.ERROR:
            return self.value
        return repr(self.value)
