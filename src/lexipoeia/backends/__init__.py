"""Backends that consume a compiled Specification (word generation)."""

from .word_generator import GenerationError, WordGenerator, generate_words, save_words_file

__all__ = ["GenerationError", "WordGenerator", "generate_words", "save_words_file"]
