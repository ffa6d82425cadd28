# File: crouton_gen/seeds.py
"""
Crouton Gen - Seed Value Heuristics
=====================================
Maps a field to a drizzle-seed generator expression (``f.email()``,
``f.int({ ... })``...).

Resolution is an explicit, ordered list of ``SeedRule`` entries evaluated
top to bottom against the lower-cased field name; the first match wins.
Exact-name rules and substring rules are interleaved in priority order (so
``userEmail`` hits the ``email`` substring rule before anything else).  When
no name rule matches, the field type decides.  Every input yields a
non-empty expression.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Union

from crouton_gen.models import FieldDefinition
from crouton_gen.type_mapping import FieldType, map_type

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.seeds")

LOREM_SENTENCE: str = "f.loremIpsum({ sentencesCount: 1 })"
LOREM_PARAGRAPH: str = "f.loremIpsum({ sentencesCount: 3 })"


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SeedRule:
    """A name predicate and the generator expression it selects."""

    label: str
    matches: Callable[[str], bool]
    generator: str


def _exact(*names: str) -> Callable[[str], bool]:
    allowed: FrozenSet[str] = frozenset(names)
    return lambda n: n in allowed


def _contains(*parts: str) -> Callable[[str], bool]:
    return lambda n: any(p in n for p in parts)


SEED_RULES: List[SeedRule] = [
    SeedRule("email", _contains("email"), "f.email()"),
    SeedRule("full name", _exact("name", "fullname", "full_name"), "f.fullName()"),
    SeedRule("first name", _exact("firstname", "first_name"), "f.firstName()"),
    SeedRule("last name", _exact("lastname", "last_name"), "f.lastName()"),
    SeedRule("title", _exact("title"), LOREM_SENTENCE),
    SeedRule(
        "long text",
        _exact("description", "bio", "content", "summary"),
        LOREM_PARAGRAPH,
    ),
    SeedRule("phone", _contains("phone"), "f.phoneNumber()"),
    SeedRule(
        "url",
        _contains("url", "website", "link"),
        'f.valuesFromArray({ values: ["https://example.com"] })',
    ),
    SeedRule("slug", _exact("slug"), LOREM_SENTENCE),
    SeedRule(
        "money",
        _contains("price", "amount", "cost", "total"),
        "f.number({ minValue: 1, maxValue: 1000, precision: 100 })",
    ),
    SeedRule(
        "quantity",
        _contains("quantity", "count", "stock"),
        "f.int({ minValue: 0, maxValue: 100 })",
    ),
    SeedRule("address", _contains("address"), "f.streetAddress()"),
    SeedRule("city", _exact("city"), "f.city()"),
    SeedRule("country", _exact("country"), "f.country()"),
    SeedRule("state", _exact("state", "province"), "f.state()"),
    SeedRule("postcode", _contains("zip", "postal"), "f.postcode()"),
    SeedRule(
        "status",
        _exact("status"),
        'f.valuesFromArray({ values: ["active", "inactive", "pending"] })',
    ),
    SeedRule(
        "category",
        _exact("type", "category"),
        'f.valuesFromArray({ values: ["type_a", "type_b", "type_c"] })',
    ),
]

TYPE_FALLBACKS: Dict[str, str] = {
    FieldType.STRING.value: LOREM_SENTENCE,
    FieldType.TEXT.value: LOREM_PARAGRAPH,
    FieldType.NUMBER.value: "f.int({ minValue: 0, maxValue: 100 })",
    FieldType.DECIMAL.value: "f.number({ minValue: 0, maxValue: 1000, precision: 100 })",
    FieldType.BOOLEAN.value: (
        "f.weightedRandom([{ value: true, weight: 0.5 }, { value: false, weight: 0.5 }])"
    ),
    FieldType.DATE.value: 'f.date({ minDate: "2020-01-01", maxDate: "2025-12-31" })',
    FieldType.JSON.value: "f.valuesFromArray({ values: [{}] })",
    FieldType.REPEATER.value: "f.valuesFromArray({ values: [[]] })",
    FieldType.ARRAY.value: "f.valuesFromArray({ values: [[]] })",
}


def get_seed_generator(field: Union[FieldDefinition, Mapping[str, Any]]) -> str:
    """
    Return the drizzle-seed expression for *field*.

    *field* is a ``FieldDefinition`` or any mapping with ``name`` and
    ``type`` keys.
    A dependent ``FieldDefinition`` always seeds an empty id list.

        >>> get_seed_generator({"name": "userEmail", "type": "string"})
        'f.email()'
        >>> get_seed_generator({"name": "unknownField", "type": "text"})
        'f.loremIpsum({ sentencesCount: 3 })'
    """
    if isinstance(field, FieldDefinition):
        if field.is_dependent:
            return TYPE_FALLBACKS[FieldType.ARRAY.value]
        name, field_type = field.name, field.type
    else:
        name, field_type = str(field.get("name") or ""), field.get("type")

    lowered: str = name.lower()
    for rule in SEED_RULES:
        if rule.matches(lowered):
            logger.debug("Seed rule '%s' matched field '%s'.", rule.label, name)
            return rule.generator

    return TYPE_FALLBACKS.get(map_type(field_type), LOREM_SENTENCE)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "LOREM_PARAGRAPH",
    "LOREM_SENTENCE",
    "SEED_RULES",
    "SeedRule",
    "TYPE_FALLBACKS",
    "get_seed_generator",
]
