"""
Example specification for a small Polynesian-flavoured language.

Provided twice: as specification source text, and built directly from
model objects. Both describe the same Specification.
"""
from lexipoeia.model import (
    DisallowedSequence,
    Phoneme,
    PhonemeGroup,
    Slot,
    SpecConfig,
    Specification,
    Syllable,
)

EXAMPLE_SOURCE = """\
( Consonants and vowels )
C = p t m n k h ' w v l;
V = i u e o a;

( Onset is optional in the starred template )
%cv = C V;
%*cv = 75C V;

( Never two optional-onset syllables in a row )
! *cv *cv;

#mean = 3;
#lowDeviation = 2;
#highDeviation = 4;
#words = 100;
#seed = 12345;
"""


def build_example_specification(words: int = 100, seed: int = 12345) -> Specification:
    consonants = PhonemeGroup(
        name="C",
        phonemes=tuple(Phoneme(s) for s in ["p", "t", "m", "n", "k", "h", "'", "w", "v", "l"]),
    )
    vowels = PhonemeGroup(name="V", phonemes=tuple(Phoneme(s) for s in ["i", "u", "e", "o", "a"]))

    cv = Syllable(name="cv", slots=(Slot("C"), Slot("V")))
    optional_cv = Syllable(name="*cv", slots=(Slot("C", 75), Slot("V")))

    return Specification(
        config=SpecConfig(mean=3, low_deviation=2, high_deviation=4, words=words, seed=seed),
        phoneme_groups={"C": consonants, "V": vowels},
        syllables={"cv": cv, "*cv": optional_cv},
        syllable_names=("cv", "*cv"),
        disallowed=(DisallowedSequence(names=("*cv", "*cv")),),
    )
