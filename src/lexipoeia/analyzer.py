"""
Specification Analyzer: early diagnostics and inventory.

This module provides lightweight analysis of Specification objects:
    - Inventory counts
    - Phoneme group usage (unused, undefined)
    - Disallowed sequence coverage
    - Syllable templates that can realize empty
    - Pools the exclusions exhaust (generation would never finish)

IMPORTANT: This is read-only. It does NOT modify the specification.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Set

from lexipoeia.model import MAX_PERCENT, Specification


@dataclass
class SpecReport:
    """Analysis report for a specification."""

    total_phoneme_groups: int = 0
    total_syllables: int = 0
    total_disallowed: int = 0
    total_phonemes: int = 0

    # Syllable count bounds from the config
    min_syllables: int = 0
    max_syllables: int = 0

    # Phoneme group usage
    group_usage: Dict[str, int] = field(default_factory=dict)
    unused_groups: Set[str] = field(default_factory=set)
    undefined_groups: Set[str] = field(default_factory=set)

    # Disallowed sequences
    unknown_disallowed_names: Set[str] = field(default_factory=set)
    banned_syllables: Set[str] = field(default_factory=set)
    exhaustible: bool = False

    # Templates whose every slot is optional
    optional_syllables: Set[str] = field(default_factory=set)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_specification(spec: Specification) -> SpecReport:
    """
    Perform analysis of a Specification.

    Returns a SpecReport with inventory counts and warnings.
    """
    report = SpecReport()

    report.total_phoneme_groups = len(spec.phoneme_groups)
    report.total_syllables = len(spec.syllable_names)
    report.total_disallowed = len(spec.disallowed)
    report.total_phonemes = sum(len(g) for g in spec.phoneme_groups.values())
    report.min_syllables = spec.config.min_syllables
    report.max_syllables = spec.config.max_syllables

    # =========================================================================
    # 1. PHONEME GROUP USAGE
    # =========================================================================

    usage: Dict[str, int] = defaultdict(int)
    for name in spec.phoneme_groups:
        usage[name] = 0
    for syllable_name in spec.syllable_names:
        syllable = spec.syllables[syllable_name]
        for group in syllable.group_names:
            usage[group] += 1
        if syllable.slots and all(slot.chance < MAX_PERCENT for slot in syllable.slots):
            report.optional_syllables.add(syllable_name)

    report.group_usage = dict(usage)
    report.unused_groups = {name for name, count in usage.items() if count == 0}
    report.undefined_groups = set(usage) - set(spec.phoneme_groups)

    # =========================================================================
    # 2. DISALLOWED SEQUENCES
    # =========================================================================

    declared = set(spec.syllable_names)
    for seq in spec.disallowed:
        report.unknown_disallowed_names.update(n for n in seq.names if n not in declared)
        if len(seq) == 1 and seq.names[0] in declared:
            report.banned_syllables.add(seq.names[0])

    report.exhaustible = bool(declared) and report.banned_syllables == declared

    # =========================================================================
    # 3. WARNING FLAGS
    # =========================================================================

    if report.undefined_groups:
        report.add_warning(
            f"Undefined phoneme groups: {', '.join(sorted(report.undefined_groups))}"
        )

    if report.unused_groups:
        report.add_warning(
            f"Unused phoneme groups: {', '.join(sorted(report.unused_groups))}"
        )

    if report.unknown_disallowed_names:
        report.add_warning(
            f"Disallowed sequences name unknown templates: "
            f"{', '.join(sorted(report.unknown_disallowed_names))}"
        )

    if report.exhaustible and report.max_syllables > 0:
        report.add_warning(
            "Every syllable template is disallowed on its own; "
            "words with one or more syllables can never be generated"
        )

    if report.optional_syllables:
        report.add_warning(
            f"Templates that may realize empty: {', '.join(sorted(report.optional_syllables))}"
        )

    if not spec.syllable_names:
        report.add_warning("No syllable templates declared")

    if spec.config.words == 0:
        report.add_warning("Word count is 0; set '#words' to generate output")

    if report.max_syllables <= 0:
        report.add_warning(
            f"Syllable count never exceeds {report.max_syllables}; every word will be empty"
        )

    return report


def format_report(report: SpecReport) -> str:
    """Render a report as indented text lines."""
    lines = [
        f"Phoneme groups: {report.total_phoneme_groups} ({report.total_phonemes} phonemes)",
        f"Syllable templates: {report.total_syllables}",
        f"Disallowed sequences: {report.total_disallowed}",
        f"Syllables per word: {report.min_syllables}-{report.max_syllables}",
    ]
    if report.warnings:
        lines.append(f"Warnings ({len(report.warnings)}):")
        lines.extend(f"  - {w}" for w in report.warnings)
    return "\n".join(lines)
