"""
Serialization helpers for compiled specifications.

Provides lossless JSON/YAML round-trip via intermediate dict representation.
Config keys use the same names as the specification language.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from lexipoeia.model import (
    CONFIG_KEYS,
    DisallowedSequence,
    Phoneme,
    PhonemeGroup,
    Slot,
    SpecConfig,
    Specification,
    Syllable,
)


def phoneme_to_dict(p: Phoneme) -> Dict[str, Any]:
    return {"symbol": p.symbol, "tag": p.tag}


def phoneme_from_dict(d: Dict[str, Any]) -> Phoneme:
    return Phoneme(symbol=d["symbol"], tag=d.get("tag"))


def group_to_dict(g: PhonemeGroup) -> Dict[str, Any]:
    return {"name": g.name, "phonemes": [phoneme_to_dict(p) for p in g.phonemes]}


def group_from_dict(d: Dict[str, Any]) -> PhonemeGroup:
    return PhonemeGroup(
        name=d["name"],
        phonemes=tuple(phoneme_from_dict(p) for p in d.get("phonemes", [])),
    )


def syllable_to_dict(s: Syllable) -> Dict[str, Any]:
    return {
        "name": s.name,
        "slots": [{"group": slot.group, "chance": slot.chance} for slot in s.slots],
    }


def syllable_from_dict(d: Dict[str, Any]) -> Syllable:
    slots = tuple(Slot(group=slot["group"], chance=slot.get("chance", 100)) for slot in d.get("slots", []))
    return Syllable(name=d["name"], slots=slots)


def config_to_dict(c: SpecConfig) -> Dict[str, int]:
    return {key: getattr(c, attr) for key, attr in CONFIG_KEYS.items()}


def config_from_dict(d: Dict[str, Any]) -> SpecConfig:
    return SpecConfig(**{attr: int(d[key]) for key, attr in CONFIG_KEYS.items() if key in d})


def spec_to_dict(s: Specification) -> Dict[str, Any]:
    return {
        "config": config_to_dict(s.config),
        "phoneme_groups": [group_to_dict(g) for g in s.phoneme_groups.values()],
        "syllables": [syllable_to_dict(s.syllables[name]) for name in s.syllable_names],
        "disallowed": [list(seq.names) for seq in s.disallowed],
    }


def spec_from_dict(d: Dict[str, Any]) -> Specification:
    groups = [group_from_dict(g) for g in d.get("phoneme_groups", [])]
    syllables = [syllable_from_dict(s) for s in d.get("syllables", [])]
    return Specification(
        config=config_from_dict(d.get("config", {})),
        phoneme_groups={g.name: g for g in groups},
        syllables={s.name: s for s in syllables},
        syllable_names=tuple(s.name for s in syllables),
        disallowed=tuple(DisallowedSequence(names=tuple(names)) for names in d.get("disallowed", [])),
    )


def spec_to_json(s: Specification) -> str:
    return json.dumps(spec_to_dict(s), sort_keys=True, ensure_ascii=False)


def spec_from_json(s: str) -> Specification:
    d = json.loads(s)
    return spec_from_dict(d)


def spec_to_yaml(s: Specification) -> str:
    return yaml.safe_dump(spec_to_dict(s), allow_unicode=True, sort_keys=False)


def spec_from_yaml(s: str) -> Specification:
    d = yaml.safe_load(s)
    return spec_from_dict(d)
