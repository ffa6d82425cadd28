# File: crouton_gen/type_mapping.py
"""
Crouton Gen - Field Type Mapping Table
========================================
The one table that knows what every abstract field type looks like in each
generated artifact: the raw SQL type, the Drizzle builder family, the Zod
validator, the form default literal and the TypeScript type.

The schema generator reads ``db``/``drizzle``; the composable and types
generators read ``zod``/``default``/``ts_type``.  Nothing else in the package
keeps its own copy of type knowledge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, List

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.type_mapping")


# ---------------------------------------------------------------------------
# Canonical field types
# ---------------------------------------------------------------------------


class FieldType(str, Enum):
    """The nine canonical field types a schema file may use."""

    STRING = "string"
    TEXT = "text"
    NUMBER = "number"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    JSON = "json"
    REPEATER = "repeater"
    ARRAY = "array"


CANONICAL_TYPES: FrozenSet[str] = frozenset(t.value for t in FieldType)


@dataclass(frozen=True, slots=True)
class TypeSpec:
    """Syntax fragments for one field type."""

    db: str
    drizzle: str
    zod: str
    default: str
    ts_type: str


TYPE_MAPPING: Dict[str, TypeSpec] = {
    FieldType.STRING.value: TypeSpec(
        db="VARCHAR(255)",
        drizzle="text",
        zod="z.string()",
        default="''",
        ts_type="string",
    ),
    FieldType.TEXT.value: TypeSpec(
        db="TEXT",
        drizzle="text",
        zod="z.string()",
        default="''",
        ts_type="string",
    ),
    FieldType.NUMBER.value: TypeSpec(
        db="INTEGER",
        drizzle="integer",
        zod="z.number()",
        default="0",
        ts_type="number",
    ),
    FieldType.DECIMAL.value: TypeSpec(
        db="DECIMAL(10,2)",
        drizzle="decimal",
        zod="z.number()",
        default="0",
        ts_type="number",
    ),
    FieldType.BOOLEAN.value: TypeSpec(
        db="BOOLEAN",
        drizzle="boolean",
        zod="z.boolean()",
        default="false",
        ts_type="boolean",
    ),
    FieldType.DATE.value: TypeSpec(
        db="TIMESTAMP",
        drizzle="timestamp",
        zod="z.date()",
        default="null",
        ts_type="Date | null",
    ),
    FieldType.JSON.value: TypeSpec(
        db="JSON",
        drizzle="json",
        zod="z.record(z.string(), z.any())",
        default="{}",
        ts_type="Record<string, any>",
    ),
    FieldType.REPEATER.value: TypeSpec(
        db="JSON",
        drizzle="json",
        zod="z.array(z.any())",
        default="[]",
        ts_type="any[]",
    ),
    FieldType.ARRAY.value: TypeSpec(
        db="TEXT",
        drizzle="text",
        zod="z.array(z.string())",
        default="[]",
        ts_type="string[]",
    ),
}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def map_type(raw: Any) -> str:
    """
    Normalise a raw schema type to one of the canonical names.

    Anything that is not exactly a canonical name (unknown strings, empty
    input, ``None``) becomes ``"string"``.  This never raises.

        >>> map_type("decimal")
        'decimal'
        >>> map_type("uuid")
        'string'
    """
    if isinstance(raw, FieldType):
        return raw.value
    if isinstance(raw, str) and raw in CANONICAL_TYPES:
        return raw
    if raw not in (None, ""):
        logger.debug("Unknown field type %r normalised to 'string'.", raw)
    return FieldType.STRING.value


def type_spec(field_type: str) -> TypeSpec:
    """Return the table entry for *field_type* after normalisation."""
    return TYPE_MAPPING[map_type(field_type)]


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CANONICAL_TYPES",
    "FieldType",
    "TYPE_MAPPING",
    "TypeSpec",
    "map_type",
    "type_spec",
]
