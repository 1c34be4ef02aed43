#!/usr/bin/env python3
"""
Complete Pipeline Demo: Source -> Tokens -> Specification -> Analysis -> Words

Shows the full workflow:
1. Lex the example specification
2. Build and validate the Specification
3. Analyze it
4. Generate words
"""

from lexipoeia.analyzer import analyze_specification
from lexipoeia.backends import WordGenerator
from lexipoeia.examples import EXAMPLE_SOURCE
from lexipoeia.lexer import tokenize
from lexipoeia.spec_builder import parse_spec_string


def main():
    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Source -> Specification -> Analysis -> Words")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Lex
    # =========================================================================
    print("\n1. LEXING SOURCE...")
    tokens = tokenize(EXAMPLE_SOURCE)
    print(f"   Tokens: {len(tokens)}")
    for token in tokens[:8]:
        print(f"      {token.line}:{token.column} {token.type.value} {token}")

    # =========================================================================
    # STEP 2: Build
    # =========================================================================
    print("\n2. BUILDING SPECIFICATION...")
    spec = parse_spec_string(EXAMPLE_SOURCE)
    print(f"   Phoneme groups: {', '.join(spec.phoneme_names)}")
    print(f"   Syllable templates: {', '.join(spec.syllable_names)}")
    print(f"   Disallowed sequences: {len(spec.disallowed)}")

    # =========================================================================
    # STEP 3: Analyze
    # =========================================================================
    print("\n3. ANALYZING SPECIFICATION...")
    report = analyze_specification(spec)
    print(f"   Syllables per word: {report.min_syllables}-{report.max_syllables}")
    print(f"   Exhaustible pool: {report.exhaustible}")
    for warning in report.warnings:
        print(f"      - {warning}")

    # =========================================================================
    # STEP 4: Generate
    # =========================================================================
    print("\n4. GENERATING WORDS...")
    generator = WordGenerator(spec)
    for word in generator.generate(10):
        print(f"   {word}")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
