"""
Tests for the word generator backend.

Tests cover:
    - Syllable counts stay inside the configured bounds
    - Generated sequences never contain a disallowed run
    - Slot chances of 0 and 100 behave absolutely
    - Fixed seeds give byte-identical output
    - Output is one newline-terminated word per requested word
"""

import io
import random

import pytest
from lexipoeia.backends import GenerationError, WordGenerator, generate_words, save_words_file
from lexipoeia.examples import build_example_specification
from lexipoeia.spec_builder import parse_spec_string


VOWELS = "v = a e i o u;\n%cv = 100v;\n#mean = 1;\n#words = 200;\n"


class TestSyllableCount:
    """Test syllable count draws."""

    def test_fixed_count_without_deviation(self):
        spec = parse_spec_string("v = a;\n%s = v;\n#mean = 3;")
        generator = WordGenerator(spec)
        assert all(generator.next_syllable_count() == 3 for _ in range(100))

    def test_count_within_bounds(self):
        spec = build_example_specification()
        generator = WordGenerator(spec, rng=random.Random(7))
        counts = [generator.next_syllable_count() for _ in range(2000)]
        assert min(counts) >= spec.config.min_syllables
        assert max(counts) <= spec.config.max_syllables

    def test_only_low_deviation(self):
        spec = parse_spec_string("v = a;\n%s = v;\n#mean = 4;\n#lowDeviation = 2;")
        generator = WordGenerator(spec, rng=random.Random(3))
        counts = {generator.next_syllable_count() for _ in range(500)}
        assert counts <= {2, 3, 4}
        assert 2 in counts

    def test_only_high_deviation(self):
        spec = parse_spec_string("v = a;\n%s = v;\n#mean = 2;\n#highDeviation = 3;")
        generator = WordGenerator(spec, rng=random.Random(3))
        counts = {generator.next_syllable_count() for _ in range(500)}
        # high bound is exclusive once it differs from the mean
        assert counts <= {2, 3, 4}
        assert 4 in counts


class TestSequences:
    """Test rejection sampling of syllable sequences."""

    def test_no_disallowed_runs(self):
        spec = build_example_specification()
        generator = WordGenerator(spec, rng=random.Random(11))
        for _ in range(500):
            sequence = generator.generate_sequence(generator.next_syllable_count())
            assert not any(seq.occurs_in(sequence) for seq in spec.disallowed)

    def test_single_name_exclusion_removes_template(self):
        spec = parse_spec_string("v = a;\nc = k;\n%a = v;\n%b = c;\n! a;\n#mean = 3;")
        generator = WordGenerator(spec, rng=random.Random(5))
        for _ in range(100):
            assert generator.generate_sequence(3) == ["b", "b", "b"]

    def test_repeated_element_exclusion(self):
        spec = parse_spec_string("v = a;\nc = k;\n%a = v;\n%b = c;\n! a a b;")
        generator = WordGenerator(spec, rng=random.Random(2))
        for _ in range(300):
            sequence = generator.generate_sequence(5)
            joined = " ".join(sequence)
            assert "a a b" not in joined

    def test_zero_count_is_empty(self):
        spec = parse_spec_string("v = a;\n%s = v;")
        assert WordGenerator(spec).generate_sequence(0) == []

    def test_empty_pool_raises(self):
        spec = parse_spec_string("v = a;\n#mean = 1;\n#words = 1;")
        with pytest.raises(GenerationError, match="No syllable templates"):
            generate_words(spec)

    def test_empty_pool_fine_for_empty_words(self):
        spec = parse_spec_string("#words = 3;")
        assert generate_words(spec) == ["", "", ""]


class TestRealization:
    """Test slot chances and phoneme draws."""

    def test_single_vowel_words(self):
        spec = parse_spec_string(VOWELS)
        words = generate_words(spec)
        assert len(words) == 200
        assert set(words) <= {"a", "e", "i", "o", "u"}
        assert all(len(w) == 1 for w in words)

    def test_zero_chance_never_contributes(self):
        spec = parse_spec_string("c = k;\nv = a;\n%s = 0c v;\n#mean = 2;\n#words = 300;")
        assert set(generate_words(spec)) == {"aa"}

    def test_full_chance_always_contributes(self):
        spec = parse_spec_string("c = k;\n%s = 100c;\n#mean = 1;\n#words = 300;")
        assert set(generate_words(spec)) == {"k"}

    def test_partial_chance_sometimes_contributes(self):
        spec = parse_spec_string("c = k;\nv = a;\n%s = 50c v;\n#mean = 1;\n#words = 400;")
        assert set(generate_words(spec)) == {"ka", "a"}

    def test_slots_concatenate_in_order(self):
        spec = parse_spec_string("c = k;\nv = a;\nn = n;\n%s = c v n;\n#mean = 2;\n#words = 3;")
        assert generate_words(spec) == ["kankan"] * 3

    def test_every_member_reachable(self):
        spec = parse_spec_string(VOWELS)
        assert set(generate_words(spec, count=2000)) == {"a", "e", "i", "o", "u"}

    def test_multi_character_symbols(self):
        spec = parse_spec_string("c = th ng;\n%s = c;\n#mean = 1;\n#words = 50;")
        assert set(generate_words(spec)) <= {"th", "ng"}


class TestDeterminism:
    """Fixed seeds give identical output."""

    def test_same_seed_same_words(self):
        spec = build_example_specification()
        assert generate_words(spec) == generate_words(spec)

    def test_same_seed_identical_bytes(self):
        spec = build_example_specification()
        first, second = io.StringIO(), io.StringIO()
        WordGenerator(spec).write_words(first)
        WordGenerator(spec).write_words(second)
        assert first.getvalue().encode("utf-8") == second.getvalue().encode("utf-8")

    def test_different_seeds_differ(self):
        assert generate_words(build_example_specification(seed=1)) != generate_words(
            build_example_specification(seed=2)
        )

    def test_injected_rng(self):
        spec = build_example_specification()
        words = generate_words(spec, count=20, rng=random.Random(42))
        assert words == generate_words(spec, count=20, rng=random.Random(42))


class TestOutput:
    """Test writing words out."""

    def test_one_line_per_word(self):
        spec = build_example_specification(words=37)
        out = io.StringIO()
        written = WordGenerator(spec).write_words(out)
        assert written == 37
        text = out.getvalue()
        assert text.endswith("\n")
        assert len(text.splitlines()) == 37

    def test_count_override(self):
        spec = build_example_specification(words=37)
        out = io.StringIO()
        assert WordGenerator(spec).write_words(out, count=5) == 5
        assert out.getvalue().count("\n") == 5

    def test_generate_is_lazy(self):
        spec = parse_spec_string("#words = 3;")
        iterator = WordGenerator(spec).generate()
        assert next(iterator) == ""

    def test_save_words_file(self, tmp_path):
        spec = build_example_specification(words=10)
        path = tmp_path / "out.words"
        assert save_words_file(spec, str(path)) == 10
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines == generate_words(spec)


class TestCheck:
    """Test the up-front generation check."""

    def test_empty_pool_with_syllables_fails(self):
        spec = parse_spec_string("v = a;\n#mean = 1;\n#words = 2;")
        with pytest.raises(GenerationError, match="No syllable templates"):
            WordGenerator(spec).check()

    def test_empty_pool_without_syllables_passes(self):
        WordGenerator(parse_spec_string("#words = 2;")).check()

    def test_no_words_passes(self):
        WordGenerator(parse_spec_string("v = a;\n#mean = 1;")).check()

    def test_valid_spec_passes(self):
        WordGenerator(build_example_specification()).check()
