"""
tests/test_templates.py
Tests for crouton_gen.templates: schema, composable, types and seed files.

Covers:
- Byte-identical output for identical input
- Reserved field names never duplicated
- Hierarchy taking precedence over sortable
- Translation wiring across schema and composable
- Dialect-specific output
"""

from __future__ import annotations

import pytest

from crouton_gen.models import CollectionSpec, GenerationConfig
from crouton_gen.seeds import LOREM_SENTENCE
from crouton_gen.templates import (
    TemplateGenerator,
    generate_composable,
    generate_schema,
    generate_seed_file,
    generate_types,
    reserved_field_names,
    translatable_field_names,
    user_fields,
)


# ===========================================================================
# Helpers
# ===========================================================================


class TestHelpers:

    def test_reserved_names_follow_config(self) -> None:
        assert reserved_field_names(GenerationConfig(use_metadata=False)) == ["id", "teamId", "owner"]
        names = reserved_field_names(GenerationConfig(hierarchy=True))
        assert {"createdAt", "parentId", "path", "depth", "order"} <= set(names)
        assert "order" in reserved_field_names(GenerationConfig(sortable=True))

    def test_user_fields_skip_reserved(self, collection_factory) -> None:
        collection = collection_factory({"id": "string", "teamId": "string", "title": "string"})
        assert [f.name for f in user_fields(collection, GenerationConfig())] == ["title"]

    def test_translatable_union_in_field_order(self, collection_factory) -> None:
        collection = collection_factory({
            "title": "string",
            "body": {"type": "text", "meta": {"translatable": True}},
            "slug": "string",
        })
        config = GenerationConfig(translatable_fields=["slug"])
        assert translatable_field_names(collection, config) == ["body", "slug"]

    def test_translations_off_means_no_translatable(self, collection_factory) -> None:
        collection = collection_factory({"body": {"type": "text", "meta": {"translatable": True}}})
        assert translatable_field_names(collection, GenerationConfig()) == []


# ===========================================================================
# Schema
# ===========================================================================


class TestSchema:

    def test_sqlite_schema(self, products: CollectionSpec, sqlite_config: GenerationConfig) -> None:
        schema = generate_schema(products, sqlite_config)
        assert schema.startswith("// @crouton-generated schema for shop/products\n")
        assert "import { nanoid } from 'nanoid'" in schema
        assert "export const shopProducts = sqliteTable('shop_products', {" in schema
        assert "  id: text('id').primaryKey().$default(() => nanoid())," in schema
        assert "  teamId: text('teamId').notNull()," in schema
        assert "  title: text('title').notNull()," in schema
        assert "  price: real('price')," in schema
        assert "  inStock: integer('inStock', { mode: 'boolean' })," in schema
        assert "export type ShopProduct = typeof shopProducts.$inferSelect" in schema
        assert "export type NewShopProduct = typeof shopProducts.$inferInsert" in schema

    def test_pg_schema(self, products: CollectionSpec, pg_config: GenerationConfig) -> None:
        schema = generate_schema(products, pg_config)
        assert "from 'drizzle-orm/pg-core'" in schema
        assert "nanoid" not in schema
        assert "export const shopProducts = pgTable('shop_products', {" in schema
        assert "  id: uuid('id').primaryKey().defaultRandom()," in schema
        assert "  title: varchar('title', { length: 255 }).notNull()," in schema
        assert "  price: numeric('price', { precision: 10, scale: 2 })," in schema
        assert (
            "createdAt: timestamp('createdAt', { withTimezone: true })"
            ".notNull().$default(() => new Date())"
        ) in schema

    def test_dialect_override(self, products: CollectionSpec, sqlite_config: GenerationConfig) -> None:
        assert "pgTable" in generate_schema(products, sqlite_config, dialect="pg")

    def test_deterministic(self, products: CollectionSpec, sqlite_config: GenerationConfig) -> None:
        gen = TemplateGenerator(sqlite_config)
        assert gen.generate_schema(products) == gen.generate_schema(products)
        assert gen.generate_composable(products) == gen.generate_composable(products)
        assert gen.generate_seed_file(products) == gen.generate_seed_file(products)

    def test_reserved_fields_appear_once(self, collection_factory) -> None:
        collection = collection_factory({
            "id": "string",
            "teamId": "string",
            "createdAt": "date",
            "order": "number",
            "title": "string",
        })
        schema = generate_schema(collection, GenerationConfig(sortable=True))
        for name in ("id", "teamId", "createdAt", "order"):
            assert schema.count(f"  {name}: ") == 1, name

    def test_no_metadata(self, products: CollectionSpec) -> None:
        schema = generate_schema(products, GenerationConfig(use_metadata=False))
        assert "createdAt" not in schema
        assert "updatedBy" not in schema

    def test_hierarchy_columns(self, products: CollectionSpec) -> None:
        schema = generate_schema(products, GenerationConfig(hierarchy=True))
        assert "// Hierarchy fields for tree structure" in schema
        assert "  parentId: text('parentId')," in schema
        assert "  path: text('path').notNull().$default(() => '/')," in schema
        assert "  depth: integer('depth').notNull().$default(() => 0)," in schema

    def test_hierarchy_wins_over_sortable(self, products: CollectionSpec) -> None:
        config = GenerationConfig(hierarchy=True, sortable=True)
        assert config.hierarchy.enabled
        assert not config.sortable.enabled
        schema = generate_schema(products, config)
        assert schema.count("  order: ") == 1
        assert "sortable" not in generate_composable(products, config)

    def test_hierarchy_assigned_later_still_wins(self, products: CollectionSpec) -> None:
        config = GenerationConfig(sortable=True)
        config.hierarchy = {"enabled": True}
        assert config.hierarchy.enabled
        assert not config.sortable.enabled
        assert config.sortable.order_field == "order"
        assert "sortable" not in generate_composable(products, config)

    def test_sortable_column(self, products: CollectionSpec, pg_config: GenerationConfig) -> None:
        config = GenerationConfig(dialect="pg", sortable=True)
        schema = generate_schema(products, config)
        assert "  order: integer('order').notNull().default(0)," in schema
        assert "parentId" not in schema

    def test_translations_column(self, products: CollectionSpec) -> None:
        config = GenerationConfig(translatable_fields=["title", "description"])
        schema = generate_schema(products, config)
        assert "// Translatable fields: title, description" in schema
        assert "translations: text('translations', { mode: 'json' }).$type<{" in schema
        assert "      title?: string" in schema
        assert "      description?: string" in schema

    def test_sections_are_ordered(self, products: CollectionSpec, sqlite_config: GenerationConfig) -> None:
        names = [name for name, _ in TemplateGenerator(sqlite_config).schema_sections(products)]
        assert names == ["imports", "primary_key", "team", "metadata", "features", "translations", "fields"]


# ===========================================================================
# Composable
# ===========================================================================


class TestComposable:

    def test_basic_composable(self, products: CollectionSpec, sqlite_config: GenerationConfig) -> None:
        text = generate_composable(products, sqlite_config)
        assert " * @collection products" in text
        assert "import { z } from 'zod'" in text
        assert "export const shopProductSchema = z.object({" in text
        assert "  title: z.string().min(1, 'title is required')," in text
        assert "  description: z.string().optional()," in text
        assert "  publishedAt: z.date().optional()," in text
        assert "export const shopProductsColumns = [" in text
        assert "{ accessorKey: 'title', header: 'Title' }" in text
        assert "name: 'shopProducts'" in text
        assert "apiPath: 'shop-products'" in text
        assert "componentName: 'ShopProductsForm'" in text
        assert "category: 'categories'" in text
        assert "export const useShopProducts = () => shopProductsConfig" in text
        assert "sortable" not in text
        assert "hierarchy" not in text

    def test_schema_is_not_enumerable(self, products: CollectionSpec, sqlite_config: GenerationConfig) -> None:
        text = generate_composable(products, sqlite_config)
        assert "Object.defineProperty(_shopProductsConfig, 'schema', {" in text
        assert "  enumerable: false," in text

    def test_required_date_and_nullable(self, collection_factory) -> None:
        collection = collection_factory({
            "startsAt": {"type": "date", "meta": {"required": True}},
            "qty": {"type": "number", "meta": {"required": True}},
            "note": {"type": "text", "meta": {"nullable": True}},
        })
        text = generate_composable(collection, GenerationConfig())
        assert "startsAt: z.date({ required_error: 'startsAt is required' })" in text
        assert "note: z.string().nullish()" in text
        assert "qty: z.number()," in text

    def test_label_override(self, collection_factory) -> None:
        collection = collection_factory({"sku": {"type": "string", "meta": {"label": "SKU code"}}})
        text = generate_composable(collection, GenerationConfig())
        assert "{ accessorKey: 'sku', header: 'SKU code' }" in text

    def test_hierarchy_config(self, products: CollectionSpec) -> None:
        text = generate_composable(products, GenerationConfig(hierarchy=True))
        assert "parentId: z.string().nullable().optional()" in text
        assert "parentId: null" in text
        assert "hierarchy: {" in text
        assert "parentField: 'parentId'" in text
        assert "orderField: 'order'" in text

    def test_sortable_config(self, products: CollectionSpec) -> None:
        text = generate_composable(products, GenerationConfig(sortable=True))
        assert "sortable: {" in text
        assert "hierarchy" not in text

    def test_translations(self, products: CollectionSpec) -> None:
        text = generate_composable(products, GenerationConfig(translatable_fields=["title"]))
        assert "  title: z.string().optional()," in text
        assert "translations: z.record(z.string(), z.object({" in text
        assert "title: z.string().min(1, 'Title is required')" in text
        assert "(translations) => translations.en && translations.en.title," in text
        assert "translations: {}" in text
        assert "{ accessorKey: 'translations', header: 'Translations' }" in text

    def test_optional_translations_have_no_refine(self, products: CollectionSpec) -> None:
        text = generate_composable(products, GenerationConfig(translatable_fields=["description"]))
        assert "translations: z.record(z.string(), z.object({" in text
        assert ".refine(" not in text

    def test_repeater_components(self, collection_factory) -> None:
        collection = collection_factory({"tags": {"type": "repeater"}})
        text = generate_composable(collection, GenerationConfig())
        assert "dependentFieldComponents: {" in text
        assert "tags: 'ShopProductsTagSelect'" in text

    def test_dependent_field(self, collection_factory) -> None:
        collection = collection_factory({
            "options": {
                "type": "string",
                "meta": {"required": True, "dependsOn": "category", "dependsOnCollection": "categories"},
            },
        })
        text = generate_composable(collection, GenerationConfig())
        assert "options: z.array(z.string()).min(1, 'options is required')" in text
        assert "options: null" in text

    @pytest.mark.parametrize(
        "dialect, column",
        [
            ("sqlite", "options: text('options', { mode: 'json' }).$default(() => null)"),
            ("pg", "options: jsonb('options').default(null)"),
        ],
    )
    def test_dependent_field_schema_matches_composable(
        self, collection_factory, dialect: str, column: str
    ) -> None:
        collection = collection_factory({
            "options": {
                "type": "string",
                "meta": {"dependsOn": "category", "dependsOnCollection": "categories"},
            },
        })
        config = GenerationConfig(dialect=dialect)
        assert column in generate_schema(collection, config)
        composable = generate_composable(collection, config)
        assert "options: z.array(z.string())" in composable
        assert "options: null" in composable
        assert "options: f.valuesFromArray({ values: [[]] })" in generate_seed_file(collection, config)

    @pytest.mark.parametrize("dialect", ["sqlite", "pg"])
    def test_boolean_default_reaches_form_defaults(self, collection_factory, dialect: str) -> None:
        collection = collection_factory({
            "active": {"type": "boolean", "meta": {"default": True}},
            "archived": {"type": "boolean"},
        })
        config = GenerationConfig(dialect=dialect)
        schema = generate_schema(collection, config)
        if dialect == "sqlite":
            assert "active: integer('active', { mode: 'boolean' }).$default(() => true)" in schema
        else:
            assert "active: boolean('active').default(true)" in schema
        composable = generate_composable(collection, config)
        assert "active: true" in composable
        assert "archived: false" in composable

    def test_generated_at_header(self, products: CollectionSpec) -> None:
        text = generate_composable(products, GenerationConfig(generated_at="2026-01-01T00:00:00Z"))
        assert " * @generated 2026-01-01T00:00:00Z" in text
        assert "@generated 20" not in generate_composable(products, GenerationConfig())


# ===========================================================================
# Types
# ===========================================================================


class TestTypes:

    def test_entity_interface(self, products: CollectionSpec, sqlite_config: GenerationConfig) -> None:
        text = generate_types(products, sqlite_config)
        assert "export interface ShopProduct {" in text
        assert "  title: string" in text
        assert "  description?: string" in text
        assert "  price?: number" in text
        assert "  publishedAt?: Date | null" in text
        assert "  createdAt: Date" in text
        assert "export type NewShopProduct = Omit<ShopProduct, 'id' | 'createdAt' | 'updatedAt'>" in text
        assert "export interface ShopProductFormProps {" in text

    def test_without_metadata(self, products: CollectionSpec) -> None:
        text = generate_types(products, GenerationConfig(use_metadata=False))
        assert "createdAt" not in text
        assert "Omit<ShopProduct, 'id'>" in text

    def test_hierarchy_members(self, products: CollectionSpec) -> None:
        text = generate_types(products, GenerationConfig(hierarchy=True))
        assert "  parentId: string | null" in text
        assert "  depth: number" in text


# ===========================================================================
# Seed
# ===========================================================================


class TestSeed:

    def test_sqlite_seed(self, products: CollectionSpec, sqlite_config: GenerationConfig) -> None:
        text = generate_seed_file(products, sqlite_config)
        assert "import { seed, reset } from 'drizzle-seed'" in text
        assert "import { drizzle } from 'drizzle-orm/libsql'" in text
        assert "import { createClient } from '@libsql/client'" in text
        assert "import { shopProducts } from './schema'" in text
        assert "export async function seedShopProducts(options: SeedOptions = {}) {" in text
        assert "  const count = options.count ?? 6" in text
        assert "  const teamId = options.teamId ?? 'placeholder-team'" in text
        assert "teamId: f.valuesFromArray({ values: [teamId] })" in text
        assert "owner: f.valuesFromArray({ values: ['seed-script'] })" in text
        assert "createdBy: f.valuesFromArray({ values: ['seed-script'] })" in text
        assert "// Collection fields" in text
        assert f"title: {LOREM_SENTENCE}" in text
        assert "category: f.valuesFromArray({ values: ['placeholder-categories-id'] })" in text
        assert "// NOTE: category references 'categories'" in text
        assert "console.log('Seed complete!')" in text

    def test_pg_seed(self, products: CollectionSpec, pg_config: GenerationConfig) -> None:
        text = generate_seed_file(products, pg_config)
        assert "import { drizzle } from 'drizzle-orm/node-postgres'" in text
        assert "@libsql/client" not in text

    def test_seed_options(self, products: CollectionSpec) -> None:
        config = GenerationConfig(seed_count=25, team_id="team-42", use_metadata=False)
        text = generate_seed_file(products, config)
        assert "  const count = options.count ?? 25" in text
        assert "  const teamId = options.teamId ?? 'team-42'" in text
        assert "createdBy" not in text

    def test_hierarchy_note(self, products: CollectionSpec) -> None:
        text = generate_seed_file(products, GenerationConfig(hierarchy=True))
        assert "// All seeded records will be root items (parentId: null)." in text

    def test_no_generated_line_by_default(self, products: CollectionSpec, sqlite_config: GenerationConfig) -> None:
        assert "// Generated:" not in generate_seed_file(products, sqlite_config)
        with_stamp = generate_seed_file(products, GenerationConfig(generated_at="2026-10-18"))
        assert "// Generated: 2026-10-18" in with_stamp


@pytest.mark.parametrize("dialect", ["sqlite", "pg"])
@pytest.mark.parametrize("feature", [{}, {"hierarchy": True}, {"sortable": True}])
@pytest.mark.parametrize("translations", [[], ["title"]])
@pytest.mark.parametrize("metadata", [True, False])
def test_every_combination_generates(
    products: CollectionSpec, dialect: str, feature, translations, metadata: bool
) -> None:
    config = GenerationConfig(
        dialect=dialect, translatable_fields=translations, use_metadata=metadata, **feature
    )
    gen = TemplateGenerator(config)
    for text in (
        gen.generate_schema(products),
        gen.generate_composable(products),
        gen.generate_types(products),
        gen.generate_seed_file(products),
    ):
        assert text.endswith("\n")
        assert text.count("{") == text.count("}")
