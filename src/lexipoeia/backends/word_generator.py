"""
Word generator for compiled specifications.

Turns a Specification plus a random source into words.

Per word:
    1. Syllable count:
        low  = mean - U(0, lowDeviation)    (no draw if the deviation is 0)
        high = mean + U(0, highDeviation)   (no draw if the deviation is 0)
        count = low if low == high else uniform in [low, high)
    2. Syllable sequence:
        Draw `count` template names uniformly with replacement. If any
        disallowed sequence occurs contiguously, throw the whole
        candidate away and draw again. There is no retry limit: an
        exclusion set that bans every possible sequence never returns.
    3. Realization:
        For every slot of every template, roll [0, 100). A roll below
        the slot's chance draws one member of the slot's group.

All draws come from one random.Random owned by the generator, so a
fixed seed gives identical output.
"""

import logging
import random
from typing import IO, Iterator, List, Optional

from lexipoeia.model import MAX_PERCENT, Specification

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when the specification can't produce words at all."""
    pass


class WordGenerator:
    """
    Draws words from a Specification.

    Args:
        spec: Validated Specification (read-only)
        rng: Random source. Defaults to random.Random(spec.config.seed).
    """

    def __init__(self, spec: Specification, rng: Optional[random.Random] = None):
        self.spec = spec
        self.rng = rng if rng is not None else random.Random(spec.config.seed)

    def check(self, count: Optional[int] = None) -> None:
        """
        Fail early if `count` words can't be generated.

        Raises:
            GenerationError: If words need syllables but no templates are declared
        """
        if count is None:
            count = self.spec.config.words
        if count > 0 and self.spec.config.max_syllables > 0 and not self.spec.syllable_names:
            raise GenerationError("No syllable templates declared; can't generate syllables")

    def next_syllable_count(self) -> int:
        """Draw the number of syllables for the next word."""
        config = self.spec.config
        low = config.mean
        if config.low_deviation != 0:
            low = config.mean - self.rng.randint(0, config.low_deviation)

        high = config.mean
        if config.high_deviation != 0:
            high = config.mean + self.rng.randint(0, config.high_deviation)

        if low == high:
            return low
        return self.rng.randrange(low, high)

    def next_syllable(self) -> str:
        """Draw one template name uniformly from the pool."""
        return self.rng.choice(self.spec.syllable_names)

    def is_allowed(self, sequence: List[str]) -> bool:
        return not any(seq.occurs_in(sequence) for seq in self.spec.disallowed)

    def generate_sequence(self, count: int) -> List[str]:
        """
        Draw a sequence of `count` template names free of disallowed runs.

        Raises:
            GenerationError: If count > 0 and no templates are declared
        """
        if count > 0 and not self.spec.syllable_names:
            raise GenerationError("No syllable templates declared; can't generate syllables")

        attempts = 0
        while True:
            attempts += 1
            sequence = [self.next_syllable() for _ in range(count)]
            if self.is_allowed(sequence):
                if attempts > 1:
                    logger.debug("Sequence accepted after %d attempts", attempts)
                return sequence

    def generate_phoneme(self, group_name: str) -> str:
        """Draw one member of a phoneme group uniformly."""
        group = self.spec.phoneme_groups[group_name]
        return self.rng.choice(group.symbols)

    def generate_syllable(self, syllable_name: str) -> str:
        """Realize one syllable template."""
        result = []
        for slot in self.spec.syllables[syllable_name].slots:
            roll = self.rng.randrange(MAX_PERCENT)
            if roll < slot.chance:
                result.append(self.generate_phoneme(slot.group))
        return "".join(result)

    def next_word(self) -> str:
        count = self.next_syllable_count()
        sequence = self.generate_sequence(count)
        word = "".join(self.generate_syllable(name) for name in sequence)
        logger.debug("Word %r from %s", word, sequence)
        return word

    def generate(self, count: Optional[int] = None) -> Iterator[str]:
        """
        Lazily yield words.

        Args:
            count: Number of words (defaults to the 'words' config value)
        """
        if count is None:
            count = self.spec.config.words
        for _ in range(count):
            yield self.next_word()

    def write_words(self, out: IO[str], count: Optional[int] = None) -> int:
        """
        Write one word per line to `out`.

        Returns:
            Number of words written
        """
        written = 0
        for word in self.generate(count):
            out.write(word + "\n")
            written += 1
        logger.info("Generated %d words", written)
        return written


def generate_words(spec: Specification, count: Optional[int] = None,
                   rng: Optional[random.Random] = None) -> List[str]:
    """Generate words into a list (seeded from the spec unless `rng` is given)."""
    return list(WordGenerator(spec, rng=rng).generate(count))


def save_words_file(spec: Specification, filename: str, count: Optional[int] = None) -> int:
    """
    Generate words and save them to a file, one per line (UTF-8).

    Returns:
        Number of words written
    """
    with open(filename, "w", encoding="utf-8") as f:
        return WordGenerator(spec).write_words(f, count)


__all__ = ["GenerationError", "WordGenerator", "generate_words", "save_words_file"]
