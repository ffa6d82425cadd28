"""
tests/test_type_mapping.py
Tests for the canonical field-type table and the SQL dialect adapters.
"""

from __future__ import annotations

import pytest

from crouton_gen.dialects import DIALECTS, POSTGRES, SQLITE, get_dialect
from crouton_gen.models import FieldDefinition
from crouton_gen.type_mapping import CANONICAL_TYPES, TYPE_MAPPING, FieldType, map_type, type_spec


class TestMapType:

    @pytest.mark.parametrize("name", sorted(CANONICAL_TYPES))
    def test_canonical_names_pass_through(self, name: str) -> None:
        assert map_type(name) == name

    @pytest.mark.parametrize("raw", ["uuid", "varchar", "", None, 42, "String"])
    def test_everything_else_is_string(self, raw) -> None:
        assert map_type(raw) == "string"

    def test_enum_member(self) -> None:
        assert map_type(FieldType.DATE) == "date"

    def test_table_covers_every_type(self) -> None:
        assert set(TYPE_MAPPING) == CANONICAL_TYPES

    def test_type_spec_fragments(self) -> None:
        spec = type_spec("decimal")
        assert spec.zod == "z.number()"
        assert spec.ts_type == "number"
        assert type_spec("unknown").zod == "z.string()"


class TestMakeCol:

    @pytest.mark.parametrize("dialect", sorted(DIALECTS))
    @pytest.mark.parametrize("field_type", sorted(CANONICAL_TYPES))
    def test_every_type_builds_a_column(self, dialect: str, field_type: str) -> None:
        col = get_dialect(dialect).make_col({"name": "value", "type": field_type})
        assert col
        assert "'value'" in col

    def test_constraint_order(self) -> None:
        col = SQLITE.make_col({"name": "sku", "type": "string", "meta": {"required": True, "unique": True}})
        assert col == "text('sku').notNull().unique()"

    def test_missing_meta_means_no_flags(self) -> None:
        assert SQLITE.make_col({"name": "note", "type": "text"}) == "text('note')"

    def test_primary_key_uses_dialect_strategy(self) -> None:
        field = {"name": "id", "type": "string", "meta": {"primaryKey": True, "required": True}}
        assert SQLITE.make_col(field) == "text('id').primaryKey()"
        assert POSTGRES.make_col(field) == "uuid('id').primaryKey().defaultRandom()"

    def test_dependent_field_is_a_json_column(self) -> None:
        field = {
            "name": "options",
            "type": "string",
            "meta": {"required": True, "dependsOn": "category", "dependsOnCollection": "categories"},
        }
        assert SQLITE.make_col(field) == "text('options', { mode: 'json' }).notNull().$default(() => null)"
        assert POSTGRES.make_col(field) == "jsonb('options').notNull().default(null)"

    def test_slot_button_group_is_dependent(self) -> None:
        field = {"name": "slot", "type": "string", "meta": {"displayAs": "slotButtonGroup"}}
        assert SQLITE.make_col(field) == "text('slot', { mode: 'json' }).$default(() => null)"

    @pytest.mark.parametrize("value, literal", [(True, "true"), (False, "false"), ("true", "true")])
    def test_boolean_default(self, value, literal: str) -> None:
        field = {"name": "active", "type": "boolean", "meta": {"default": value}}
        assert SQLITE.make_col(field) == (
            f"integer('active', {{ mode: 'boolean' }}).$default(() => {literal})"
        )
        assert POSTGRES.make_col(field) == f"boolean('active').default({literal})"

    def test_boolean_without_default_has_no_clause(self) -> None:
        assert POSTGRES.make_col({"name": "active", "type": "boolean"}) == "boolean('active')"

    def test_default_ignored_for_other_types(self) -> None:
        assert SQLITE.make_col({"name": "note", "type": "text", "meta": {"default": "x"}}) == "text('note')"

    def test_sqlite_specifics(self) -> None:
        assert SQLITE.make_col({"name": "done", "type": "boolean"}) == (
            "integer('done', { mode: 'boolean' })"
        )
        assert SQLITE.make_col({"name": "at", "type": "date"}) == (
            "integer('at', { mode: 'timestamp' })"
        )
        assert SQLITE.make_col({"name": "data", "type": "json"}) == (
            "text('data', { mode: 'json' })"
        )
        assert SQLITE.make_col({"name": "price", "type": "decimal"}) == "real('price')"

    def test_pg_varchar_length(self) -> None:
        assert POSTGRES.make_col({"name": "title", "type": "string"}) == (
            "varchar('title', { length: 255 })"
        )
        assert POSTGRES.make_col(
            {"name": "code", "type": "string", "meta": {"maxLength": 12}}
        ) == "varchar('code', { length: 12 })"

    def test_pg_numeric_precision(self) -> None:
        field = FieldDefinition(name="price", type="decimal", meta={"precision": 10, "scale": 2})
        assert POSTGRES.make_col(field) == "numeric('price', { precision: 10, scale: 2 })"
        assert POSTGRES.make_col({"name": "p", "type": "decimal"}) == "numeric('p')"

    def test_pg_json_types_use_jsonb(self) -> None:
        for t in ("json", "repeater", "array"):
            assert POSTGRES.make_col({"name": "x", "type": t}) == "jsonb('x')"

    def test_unknown_type_falls_back_to_string(self) -> None:
        assert SQLITE.make_col({"name": "ref", "type": "uuid"}) == "text('ref')"


class TestDialectProfiles:

    def test_get_dialect_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown dialect"):
            get_dialect("mysql")

    def test_import_lines(self) -> None:
        assert SQLITE.import_lines()[0] == "import { nanoid } from 'nanoid'"
        assert SQLITE.import_lines()[-1].endswith("from 'drizzle-orm/sqlite-core'")
        assert POSTGRES.import_lines() == [
            "import { pgTable, varchar, text, integer, numeric, boolean, timestamp, jsonb, uuid }"
            " from 'drizzle-orm/pg-core'"
        ]

    def test_defaults(self) -> None:
        assert SQLITE.with_default("0") == ".$default(() => 0)"
        assert POSTGRES.with_default("0") == ".default(0)"
