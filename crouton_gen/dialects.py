# File: crouton_gen/dialects.py
"""
Crouton Gen - SQL Dialect Adapters
====================================
One ``DialectProfile`` per supported database.  A profile knows the Drizzle
core module to import from, the table function, the builder names to import,
and how to turn a ``FieldDefinition`` into a column declaration.

Column builders are a dispatch table keyed by canonical field type.  Both
tables must cover every ``FieldType``; a gap is caught when this module is
imported.

Constraint order is fixed: ``.notNull()`` first, then ``.unique()``.
Primary keys always use the dialect's own id strategy and take no extra
constraints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Tuple, Union

from crouton_gen.models import Dialect, FieldDefinition
from crouton_gen.type_mapping import CANONICAL_TYPES, FieldType
from crouton_gen.utils import boolean_literal

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.dialects")

ColumnBuilder = Callable[[FieldDefinition], str]
FieldLike = Union[FieldDefinition, Mapping[str, Any]]


def as_field(value: FieldLike) -> FieldDefinition:
    """Accept a ``FieldDefinition`` or a plain mapping with the same keys."""
    if isinstance(value, FieldDefinition):
        return value
    return FieldDefinition.model_validate(dict(value))


# ---------------------------------------------------------------------------
# SQLite builders
# ---------------------------------------------------------------------------


def _sqlite_text(f: FieldDefinition) -> str:
    return f"text('{f.name}')"


def _sqlite_json(f: FieldDefinition) -> str:
    return f"text('{f.name}', {{ mode: 'json' }})"


_SQLITE_BUILDERS: Dict[str, ColumnBuilder] = {
    FieldType.STRING.value: _sqlite_text,
    FieldType.TEXT.value: _sqlite_text,
    FieldType.NUMBER.value: lambda f: f"integer('{f.name}')",
    FieldType.DECIMAL.value: lambda f: f"real('{f.name}')",
    FieldType.BOOLEAN.value: lambda f: f"integer('{f.name}', {{ mode: 'boolean' }})",
    FieldType.DATE.value: lambda f: f"integer('{f.name}', {{ mode: 'timestamp' }})",
    FieldType.JSON.value: _sqlite_json,
    FieldType.REPEATER.value: _sqlite_json,
    FieldType.ARRAY.value: _sqlite_json,
}


# ---------------------------------------------------------------------------
# PostgreSQL builders
# ---------------------------------------------------------------------------


def _pg_varchar(f: FieldDefinition) -> str:
    length: int = f.meta.max_length or 255
    return f"varchar('{f.name}', {{ length: {length} }})"


def _pg_numeric(f: FieldDefinition) -> str:
    precision = f.meta.precision
    scale = f.meta.scale
    if precision is not None and scale is not None:
        return f"numeric('{f.name}', {{ precision: {precision}, scale: {scale} }})"
    if precision is not None:
        return f"numeric('{f.name}', {{ precision: {precision} }})"
    return f"numeric('{f.name}')"


def _pg_jsonb(f: FieldDefinition) -> str:
    return f"jsonb('{f.name}')"


_PG_BUILDERS: Dict[str, ColumnBuilder] = {
    FieldType.STRING.value: _pg_varchar,
    FieldType.TEXT.value: lambda f: f"text('{f.name}')",
    FieldType.NUMBER.value: lambda f: f"integer('{f.name}')",
    FieldType.DECIMAL.value: _pg_numeric,
    FieldType.BOOLEAN.value: lambda f: f"boolean('{f.name}')",
    FieldType.DATE.value: lambda f: f"timestamp('{f.name}', {{ withTimezone: true }})",
    FieldType.JSON.value: _pg_jsonb,
    FieldType.REPEATER.value: _pg_jsonb,
    FieldType.ARRAY.value: _pg_jsonb,
}


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DialectProfile:
    """Static description of one SQL dialect."""

    name: str
    import_from: str
    table_fn: str
    imports: Tuple[str, ...]
    builders: Dict[str, ColumnBuilder] = field(repr=False)
    primary_key_template: str = ""
    id_column: str = ""
    extra_imports: Tuple[str, ...] = ()
    timestamp_template: str = ""
    json_template: str = ""
    default_template: str = ""

    def make_col(self, value: FieldLike) -> str:
        """
        Build the column declaration for one field.

        ``meta`` may be missing; every flag then counts as off.

        Dependent fields hold a list of ids and are stored as JSON whatever
        their declared type, defaulting to ``null``.  A boolean with
        ``meta.default`` set gets a matching column default.
        """
        f: FieldDefinition = as_field(value)
        if f.meta.primary_key:
            return self.primary_key_template.format(name=f.name)

        if f.is_dependent:
            col: str = self.json_column(f.name)
        else:
            col = self.builders[f.type](f)
        if f.meta.required:
            col += ".notNull()"
        if f.meta.unique:
            col += ".unique()"

        if f.is_dependent:
            col += self.with_default("null")
        elif f.type == FieldType.BOOLEAN.value and f.meta.default is not None:
            col += self.with_default(boolean_literal(f.meta.default))
        return col

    def timestamp(self, name: str) -> str:
        """Timestamp column used for audit fields."""
        return self.timestamp_template.format(name=name)

    def json_column(self, name: str) -> str:
        return self.json_template.format(name=name)

    def with_default(self, value: str) -> str:
        """Client-side default clause (``$default`` on sqlite, ``default`` on pg)."""
        return self.default_template.format(value=value)

    def import_lines(self) -> List[str]:
        """Import statements at the top of a schema file."""
        lines: List[str] = list(self.extra_imports)
        lines.append(
            f"import {{ {', '.join(self.imports)} }} from '{self.import_from}'"
        )
        return lines


SQLITE: DialectProfile = DialectProfile(
    name=Dialect.SQLITE.value,
    import_from="drizzle-orm/sqlite-core",
    table_fn="sqliteTable",
    imports=("sqliteTable", "text", "integer", "real"),
    builders=_SQLITE_BUILDERS,
    primary_key_template="text('{name}').primaryKey()",
    id_column="text('id').primaryKey().$default(() => nanoid())",
    extra_imports=("import { nanoid } from 'nanoid'",),
    timestamp_template="integer('{name}', {{ mode: 'timestamp' }})",
    json_template="text('{name}', {{ mode: 'json' }})",
    default_template=".$default(() => {value})",
)

POSTGRES: DialectProfile = DialectProfile(
    name=Dialect.POSTGRES.value,
    import_from="drizzle-orm/pg-core",
    table_fn="pgTable",
    imports=(
        "pgTable",
        "varchar",
        "text",
        "integer",
        "numeric",
        "boolean",
        "timestamp",
        "jsonb",
        "uuid",
    ),
    builders=_PG_BUILDERS,
    primary_key_template="uuid('{name}').primaryKey().defaultRandom()",
    id_column="uuid('id').primaryKey().defaultRandom()",
    timestamp_template="timestamp('{name}', {{ withTimezone: true }})",
    json_template="jsonb('{name}')",
    default_template=".default({value})",
)

DIALECTS: Dict[str, DialectProfile] = {
    SQLITE.name: SQLITE,
    POSTGRES.name: POSTGRES,
}

for _profile in DIALECTS.values():
    _missing = CANONICAL_TYPES - set(_profile.builders)
    if _missing:
        raise RuntimeError(
            f"Dialect '{_profile.name}' has no column builder for: {sorted(_missing)}"
        )


def get_dialect(name: str) -> DialectProfile:
    """Return the profile for ``sqlite`` or ``pg``."""
    try:
        return DIALECTS[name]
    except KeyError:
        raise ValueError(
            f"Unknown dialect '{name}'. Expected one of: {', '.join(DIALECTS)}."
        ) from None


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DIALECTS",
    "DialectProfile",
    "POSTGRES",
    "SQLITE",
    "as_field",
    "get_dialect",
]

logger.debug("crouton_gen.dialects loaded — %d dialects.", len(DIALECTS))
