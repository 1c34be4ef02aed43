"""
Spec Builder (Layer 2: Tokens -> Specification).

Drains the lexer's token stream, assembles the phoneme-group,
syllable-template, disallowed-sequence and config tables, and
validates the cross references between them.

Dispatch on declaration-starting tokens:
    PHONEME_VARIABLE  -> members until ';' (a NUMBER right after a
                         member is that member's tag)
    SYLLABLE_VARIABLE -> ([NUMBER] VARIABLE) slot pairs until ';'
    DISALLOWED        -> template names until ';'
    CONFIG_VARIABLE   -> one NUMBER, dispatched by config name

Any ERROR token aborts the load with the message it carries.

Validation:
    - Disallowed sequence names that are not declared templates
      produce a UserWarning; the load proceeds.
    - Slots naming an undeclared phoneme group are fatal.
"""

import logging
import warnings
from typing import Dict, Iterable, Iterator, List

from lexipoeia.lexer import TokenStream
from lexipoeia.model import (
    CONFIG_KEYS,
    MAX_PERCENT,
    DisallowedSequence,
    Phoneme,
    PhonemeGroup,
    Slot,
    SpecConfig,
    Specification,
    Syllable,
)
from lexipoeia.tokens import Token, TokenType

logger = logging.getLogger(__name__)


class SpecParseError(Exception):
    """Raised when a specification cannot be loaded."""
    pass


def _parse_number(token: Token) -> int:
    try:
        return int(token.value)
    except ValueError:
        raise SpecParseError(
            f"line {token.line}, column {token.column}: bad number format: {token.value!r}"
        )


class SpecBuilder:
    """
    Consumes tokens in order and builds a Specification.

    The builder pulls exactly the tokens it needs, one at a time, so it
    works the same over a synchronous token generator or a TokenStream.

    Usage:
        spec = SpecBuilder(TokenStream(source)).build()
    """

    def __init__(self, tokens: Iterable[Token]):
        self._tokens: Iterator[Token] = iter(tokens)
        self._groups: Dict[str, PhonemeGroup] = {}
        self._syllables: Dict[str, Syllable] = {}
        self._syllable_names: List[str] = []
        self._disallowed: List[DisallowedSequence] = []
        self._config: Dict[str, int] = {}

    def _next_token(self) -> Token:
        try:
            token = next(self._tokens)
        except StopIteration:
            raise SpecParseError("unexpected end of input")
        if token.type == TokenType.ERROR:
            raise SpecParseError(token.value)
        return token

    def build(self) -> Specification:
        """
        Read every declaration and return the assembled Specification.

        Raises:
            SpecParseError: On a lexical error or a fatal semantic error
        """
        while True:
            token = self._next_token()
            if token.type == TokenType.EOF:
                break
            if token.type == TokenType.PHONEME_VARIABLE:
                self._add_group(token)
            elif token.type == TokenType.SYLLABLE_VARIABLE:
                self._add_syllable(token)
            elif token.type == TokenType.DISALLOWED:
                self._add_disallowed(token)
            elif token.type == TokenType.CONFIG_VARIABLE:
                self._set_config(token)
            else:
                raise SpecParseError(
                    f"line {token.line}, column {token.column}: "
                    f"expected a declaration, got {token}"
                )

        return Specification(
            config=SpecConfig(**self._config),
            phoneme_groups=dict(self._groups),
            syllables=dict(self._syllables),
            syllable_names=tuple(self._syllable_names),
            disallowed=tuple(self._disallowed),
        )

    def _add_group(self, name_token: Token) -> None:
        phonemes: List[Phoneme] = []
        while True:
            token = self._next_token()
            if token.type == TokenType.END_DECLARATION:
                break
            if token.type == TokenType.VARIABLE:
                phonemes.append(Phoneme(token.value))
            elif token.type == TokenType.NUMBER and phonemes and phonemes[-1].tag is None:
                # Trailing digits tag the preceding symbol
                phonemes[-1] = Phoneme(phonemes[-1].symbol, _parse_number(token))
            else:
                raise SpecParseError(
                    f"line {token.line}, column {token.column}: unexpected {token} "
                    f"in phoneme group '{name_token.value}'"
                )

        name = name_token.value
        if name in self._groups:
            warnings.warn(f"Phoneme group '{name}' redeclared; earlier definition replaced", UserWarning)
        self._groups[name] = PhonemeGroup(name=name, phonemes=tuple(phonemes))
        logger.debug("Phoneme group %s: %d members", name, len(phonemes))

    def _add_syllable(self, name_token: Token) -> None:
        slots: List[Slot] = []
        while True:
            token = self._next_token()
            if token.type == TokenType.END_DECLARATION:
                break
            chance = MAX_PERCENT
            if token.type == TokenType.NUMBER:
                chance = _parse_number(token)
                if chance > MAX_PERCENT:
                    raise SpecParseError(
                        f"line {token.line}, column {token.column}: "
                        f"chance of phoneme can't be greater than {MAX_PERCENT}% (got {chance})"
                    )
                token = self._next_token()
            if token.type != TokenType.VARIABLE:
                raise SpecParseError(
                    f"line {token.line}, column {token.column}: "
                    f"expected a phoneme group name, but got {token}"
                )
            slots.append(Slot(group=token.value, chance=chance))

        name = name_token.value
        if name in self._syllables:
            warnings.warn(f"Syllable template '{name}' redeclared; earlier definition replaced", UserWarning)
        else:
            self._syllable_names.append(name)
        self._syllables[name] = Syllable(name=name, slots=tuple(slots))
        logger.debug("Syllable template %s: %d slots", name, len(slots))

    def _add_disallowed(self, start_token: Token) -> None:
        names: List[str] = []
        while True:
            token = self._next_token()
            if token.type == TokenType.END_DECLARATION:
                break
            if token.type != TokenType.VARIABLE:
                raise SpecParseError(
                    f"line {token.line}, column {token.column}: "
                    f"expected a syllable template name, but got {token}"
                )
            names.append(token.value)

        if not names:
            warnings.warn(
                f"Empty disallowed sequence at line {start_token.line} ignored", UserWarning
            )
            return
        self._disallowed.append(DisallowedSequence(names=tuple(names)))
        logger.debug("Disallowed sequence: %s", " ".join(names))

    def _set_config(self, name_token: Token) -> None:
        token = self._next_token()
        if token.type != TokenType.NUMBER:
            raise SpecParseError(
                f"line {token.line}, column {token.column}: "
                f"expected a number for config variable '{name_token.value}', but got {token}"
            )
        value = _parse_number(token)

        key = CONFIG_KEYS.get(name_token.value)
        if key is None:
            raise SpecParseError(
                f"line {name_token.line}, column {name_token.column}: "
                f"unknown config variable '{name_token.value}'"
            )
        self._config[key] = value

        end = self._next_token()
        if end.type != TokenType.END_DECLARATION:
            raise SpecParseError(
                f"line {end.line}, column {end.column}: "
                f"expected ';' after config variable '{name_token.value}', but got {end}"
            )


def validate_specification(spec: Specification) -> None:
    """
    Check cross references between declarations.

    Raises:
        SpecParseError: If a slot names an undeclared or empty phoneme group
    """
    declared_syllables = set(spec.syllable_names)
    for seq in spec.disallowed:
        for name in seq.names:
            if name not in declared_syllables:
                warnings.warn(
                    f"Name '{name}' in a disallowed sequence is not a syllable template name",
                    UserWarning,
                )

    for syllable_name in spec.syllable_names:
        for slot in spec.syllables[syllable_name].slots:
            group = spec.get_group(slot.group)
            if group is None:
                raise SpecParseError(
                    f"Name '{slot.group}' in syllable template '{syllable_name}' "
                    f"is not a defined phoneme group name"
                )
            if len(group) == 0:
                raise SpecParseError(
                    f"Phoneme group '{slot.group}' used in syllable template "
                    f"'{syllable_name}' has no members"
                )


def parse_spec_string(source: str) -> Specification:
    """
    Lex, build and validate a specification from its source text.

    Args:
        source: Specification text

    Returns:
        Validated Specification

    Raises:
        SpecParseError: On any lexical or fatal semantic error
    """
    if source.startswith("\ufeff"):
        source = source[1:]
    with TokenStream(source) as stream:
        spec = SpecBuilder(stream).build()
    validate_specification(spec)
    logger.info(
        "Loaded specification: %d phoneme groups, %d syllable templates, %d disallowed sequences",
        len(spec.phoneme_groups),
        len(spec.syllable_names),
        len(spec.disallowed),
    )
    return spec


def parse_spec_file(filepath: str) -> Specification:
    """
    Load a specification file (UTF-8, with or without a byte-order mark).

    Raises:
        OSError: If the file can't be read
        SpecParseError: If the file isn't UTF-8 or the specification is invalid
    """
    try:
        with open(filepath, "r", encoding="utf-8-sig") as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise SpecParseError(f"{filepath} is not valid UTF-8: {e}")
    logger.debug("Read %d characters from %s", len(content), filepath)
    return parse_spec_string(content)


__all__ = [
    "SpecBuilder",
    "SpecParseError",
    "parse_spec_string",
    "parse_spec_file",
    "validate_specification",
]
