"""
Core Specification Model Objects

Defines the data structures a loaded specification compiles into:
    - Phonemes and phoneme groups (symbol inventories)
    - Slots and syllables (syllable templates)
    - Disallowed sequences (phonotactic exclusions)
    - Config (numeric generation settings)
    - Specification (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about the source text they came from
        - Know nothing about random draws
        - Are immutable once built
        - Are fully serializable
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple


MAX_PERCENT = 100


@dataclass(frozen=True)
class Phoneme:
    """
    One member of a phoneme group.

    Properties:
        symbol: The text emitted when this member is drawn (e.g. "a", "th")
        tag: Digit run written right after the symbol, if any.
             Metadata only, never consulted by the generator.
    """

    symbol: str
    tag: Optional[int] = None


@dataclass(frozen=True)
class PhonemeGroup:
    """
    A named set of interchangeable phonemes.

    Example:
        V = a e i o u;

    Becomes:
        PhonemeGroup(name="V", phonemes=(Phoneme("a"), ..., Phoneme("u")))

    Members are drawn uniformly at generation time.
    """

    name: str
    phonemes: Tuple[Phoneme, ...] = ()

    @property
    def symbols(self) -> Tuple[str, ...]:
        return tuple(p.symbol for p in self.phonemes)

    def __len__(self) -> int:
        return len(self.phonemes)


@dataclass(frozen=True)
class Slot:
    """
    One position inside a syllable template.

    Properties:
        group: Name of the phoneme group the slot draws from
        chance: Inclusion probability in percent (0-100)

    A chance of 100 always realizes, a chance of 0 never does.
    """

    group: str
    chance: int = MAX_PERCENT


@dataclass(frozen=True)
class Syllable:
    """
    A syllable template: an ordered sequence of slots.

    Example:
        %cv = 75C V;

    Becomes:
        Syllable(name="cv", slots=(Slot("C", 75), Slot("V", 100)))
    """

    name: str
    slots: Tuple[Slot, ...] = ()

    @property
    def group_names(self) -> List[str]:
        return [slot.group for slot in self.slots]


@dataclass(frozen=True)
class DisallowedSequence:
    """
    Syllable template names that may not appear back to back in a word.

    Example:
        ! cv cv;

    forbids any word whose syllable sequence contains "cv", "cv"
    as a contiguous run.
    """

    names: Tuple[str, ...] = ()

    def occurs_in(self, sequence: Sequence[str]) -> bool:
        """
        Check whether this sequence appears contiguously in `sequence`.

        Args:
            sequence: Syllable template names of a candidate word

        Returns:
            True if some window of `sequence` equals `names` exactly
        """
        size = len(self.names)
        if size == 0 or size > len(sequence):
            return False
        names = list(self.names)
        for start in range(len(sequence) - size + 1):
            if list(sequence[start:start + size]) == names:
                return True
        return False

    def __len__(self) -> int:
        return len(self.names)


@dataclass(frozen=True)
class SpecConfig:
    """
    Numeric settings declared with '#name = value;'.

    Properties:
        mean: Mean syllable count per word
        low_deviation: How far below the mean a word may fall
        high_deviation: How far above the mean a word may reach
        words: Number of words to generate
        seed: Seed for the random source

    Undeclared settings stay at zero.
    """

    mean: int = 0
    low_deviation: int = 0
    high_deviation: int = 0
    words: int = 0
    seed: int = 0

    @property
    def min_syllables(self) -> int:
        return self.mean - self.low_deviation

    @property
    def max_syllables(self) -> int:
        return self.mean + self.high_deviation


# Names used in the specification language for each SpecConfig field.
CONFIG_KEYS: Dict[str, str] = {
    "mean": "mean",
    "lowDeviation": "low_deviation",
    "highDeviation": "high_deviation",
    "words": "words",
    "seed": "seed",
}


@dataclass(frozen=True)
class Specification:
    """
    Root container for a compiled specification.

    This is what the generator consumes. Everything the generator
    needs MUST be derivable from this object alone.

    Properties:
        config:
            Numeric generation settings

        phoneme_groups:
            Group name -> PhonemeGroup, in declaration order

        syllables:
            Template name -> Syllable

        syllable_names:
            Ordered template-name pool the generator draws from

        disallowed:
            Sequences forbidden from appearing contiguously

    INVARIANTS (checked by spec_builder.validate_specification):
        - Every slot names a declared phoneme group
        - Every slot chance is within 0-100
        - Disallowed names should be declared templates (warning only)
    """

    config: SpecConfig = field(default_factory=SpecConfig)
    phoneme_groups: Dict[str, PhonemeGroup] = field(default_factory=dict)
    syllables: Dict[str, Syllable] = field(default_factory=dict)
    syllable_names: Tuple[str, ...] = ()
    disallowed: Tuple[DisallowedSequence, ...] = ()

    @property
    def phoneme_names(self) -> List[str]:
        return list(self.phoneme_groups)

    def get_group(self, name: str) -> Optional[PhonemeGroup]:
        """
        Retrieve a phoneme group by name.

        Returns:
            PhonemeGroup or None if not declared
        """
        return self.phoneme_groups.get(name)

    def get_syllable(self, name: str) -> Optional[Syllable]:
        """
        Retrieve a syllable template by name.

        Returns:
            Syllable or None if not declared
        """
        return self.syllables.get(name)
