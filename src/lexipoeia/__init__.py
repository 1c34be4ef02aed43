"""
lexipoeia - word generation for constructed languages.

A specification file declares phoneme groups, syllable templates,
disallowed syllable sequences and a handful of numeric settings.
This package compiles that file into a read-only Specification and
draws pronounceable words from it.

PIPELINE:
---------
    text -> tokens (lexer) -> Specification (spec_builder) -> words (generator)

The Specification is the single hand-off point between loading and
generation. Nothing downstream mutates it.
"""

__version__ = "0.1.0"
