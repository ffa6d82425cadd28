# File: crouton_gen/templates.py
"""
Crouton Gen - Collection Template Engine
==========================================
Turns a ``CollectionSpec`` plus a ``GenerationConfig`` into TypeScript source
text for the data side of a collection:

    1. Drizzle table definition        (server/database/schema.ts)
    2. Zod schema / columns / config   (app/composables/use<Layer><Plural>.ts)
    3. Entity interfaces               (types.ts)
    4. drizzle-seed script             (server/database/seed.ts)

Every file is assembled from an ordered list of *section producers*.  Each
producer returns its own lines (or column entries), so tests can look at a
single section without matching a whole file.

Contract:
    - Same inputs, same bytes.  The only time-dependent text is the optional
      ``GenerationConfig.generated_at`` header value supplied by the caller.
    - Producers never mutate their inputs.
    - String assembly uses ``List[str]`` + ``"\\n".join()``.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from crouton_gen.dialects import DialectProfile, get_dialect
from crouton_gen.models import CollectionSpec, FieldDefinition, GenerationConfig
from crouton_gen.seeds import get_seed_generator
from crouton_gen.type_mapping import FieldType
from crouton_gen.utils import boolean_literal, join_entries, to_case, to_label, ts_string

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TEAM_FIELDS: Tuple[str, ...] = ("teamId", "owner")
METADATA_FIELDS: Tuple[str, ...] = ("createdAt", "updatedAt", "createdBy", "updatedBy")
SEED_SENTINEL: str = "seed-script"

Section = Tuple[str, List[str]]


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def reserved_field_names(config: GenerationConfig) -> List[str]:
    """Column names the generators emit themselves for this config."""
    names: List[str] = ["id", *TEAM_FIELDS]
    if config.use_metadata:
        names.extend(METADATA_FIELDS)
    if config.hierarchy.enabled:
        names.extend(config.hierarchy.field_names())
    elif config.sortable.enabled:
        names.append(config.sortable.order_field)
    return names


def translatable_field_names(
    collection: CollectionSpec, config: GenerationConfig
) -> List[str]:
    """
    Fields stored per locale, in field order.

    Union of ``config.translatable_fields`` and fields flagged
    ``meta.translatable``; empty when translations are off.
    """
    if not config.translations_enabled:
        return []
    wanted = set(config.translatable_fields)
    return [
        f.name
        for f in collection.fields
        if f.name in wanted or f.meta.translatable
    ]


def user_fields(collection: CollectionSpec, config: GenerationConfig) -> List[FieldDefinition]:
    """Schema-file fields that are not generated automatically."""
    reserved = set(reserved_field_names(config))
    return [f for f in collection.fields if f.name not in reserved]


# ---------------------------------------------------------------------------
# TemplateGenerator
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Stateless source generator bound to one ``GenerationConfig``.

    Usage::

        gen = TemplateGenerator(config)
        schema_ts = gen.generate_schema(collection)
        composable_ts = gen.generate_composable(collection)
    """

    def __init__(self, config: GenerationConfig, dialect: Optional[str] = None) -> None:
        self._config: GenerationConfig = config
        self._dialect: DialectProfile = get_dialect(dialect or config.dialect)
        logger.debug(
            "TemplateGenerator initialised: dialect=%s, metadata=%s, "
            "translations=%s, hierarchy=%s, sortable=%s.",
            self._dialect.name,
            config.use_metadata,
            config.translations_enabled,
            config.hierarchy.enabled,
            config.sortable.enabled,
        )

    @property
    def config(self) -> GenerationConfig:
        return self._config

    @property
    def dialect(self) -> DialectProfile:
        return self._dialect

    # =====================================================================
    # 1. Drizzle schema
    # =====================================================================

    def schema_sections(self, collection: CollectionSpec) -> List[Section]:
        """
        Ordered sections of the table definition.

        ``imports`` holds source lines; every other section holds column
        entries (``name: builder(...)``, optionally preceded by a comment).
        """
        return [
            ("imports", self._schema_imports()),
            ("primary_key", self._schema_primary_key()),
            ("team", self._schema_team_columns()),
            ("metadata", self._schema_metadata_columns()),
            ("features", self._schema_feature_columns()),
            ("translations", self._schema_translations_column(collection)),
            ("fields", self._schema_field_columns(collection)),
        ]

    def generate_schema(self, collection: CollectionSpec) -> str:
        """Generate the Drizzle table definition file."""
        sections: List[Section] = self.schema_sections(collection)
        imports: List[str] = sections[0][1]
        columns: List[str] = [entry for _, entries in sections[1:] for entry in entries]

        lines: List[str] = [
            f"// @crouton-generated schema for {collection.layer}/{collection.cases.plural}",
        ]
        lines.extend(imports)
        lines.append("")

        translatable: List[str] = translatable_field_names(collection, self._config)
        if translatable:
            lines.append(
                f"// Translatable fields: {', '.join(translatable)}"
            )

        lines.append(
            f"export const {collection.export_name} = "
            f"{self._dialect.table_fn}('{collection.table_name}', {{"
        )
        lines.extend(join_entries(columns))
        lines.append("})")
        lines.append("")
        lines.append(
            f"export type {collection.prefixed_pascal_case} = "
            f"typeof {collection.export_name}.$inferSelect"
        )
        lines.append(
            f"export type New{collection.prefixed_pascal_case} = "
            f"typeof {collection.export_name}.$inferInsert"
        )
        lines.append("")

        content: str = "\n".join(lines)
        logger.debug(
            "Generated schema for %s (%d columns, %d lines).",
            collection.export_name,
            len(columns),
            len(lines),
        )
        return content

    def _schema_imports(self) -> List[str]:
        return self._dialect.import_lines()

    def _schema_primary_key(self) -> List[str]:
        return [f"id: {self._dialect.id_column}"]

    @staticmethod
    def _schema_team_columns() -> List[str]:
        return [
            "teamId: text('teamId').notNull()",
            "owner: text('owner').notNull()",
        ]

    def _schema_metadata_columns(self) -> List[str]:
        if not self._config.use_metadata:
            return []
        d: DialectProfile = self._dialect
        return [
            f"createdAt: {d.timestamp('createdAt')}.notNull().$default(() => new Date())",
            f"updatedAt: {d.timestamp('updatedAt')}.notNull().$onUpdate(() => new Date())",
            "createdBy: text('createdBy').notNull()",
            "updatedBy: text('updatedBy').notNull()",
        ]

    def _schema_feature_columns(self) -> List[str]:
        d: DialectProfile = self._dialect
        hierarchy = self._config.hierarchy
        if hierarchy.enabled:
            return [
                "// Hierarchy fields for tree structure\n"
                f"{hierarchy.parent_field}: text('{hierarchy.parent_field}')",
                f"{hierarchy.path_field}: text('{hierarchy.path_field}').notNull()"
                f"{d.with_default(ts_string('/'))}",
                f"{hierarchy.depth_field}: integer('{hierarchy.depth_field}').notNull()"
                f"{d.with_default('0')}",
                f"{hierarchy.order_field}: integer('{hierarchy.order_field}').notNull()"
                f"{d.with_default('0')}",
            ]
        sortable = self._config.sortable
        if sortable.enabled:
            return [
                f"{sortable.order_field}: integer('{sortable.order_field}').notNull()"
                f"{d.with_default('0')}",
            ]
        return []

    def _schema_translations_column(self, collection: CollectionSpec) -> List[str]:
        if not self._config.translations_enabled:
            return []
        column: str = self._dialect.json_column("translations")
        names: List[str] = translatable_field_names(collection, self._config)
        if not names:
            return [
                f"translations: {column}"
                ".$type<{ [locale: string]: { [key: string]: string } }>()"
            ]
        type_lines: List[str] = [f"translations: {column}.$type<{{"]
        type_lines.append("  [locale: string]: {")
        type_lines.extend(f"    {name}?: string" for name in names)
        type_lines.append("  }")
        type_lines.append("}>()")
        return ["\n".join(type_lines)]

    def _schema_field_columns(self, collection: CollectionSpec) -> List[str]:
        return [
            f"{f.name}: {self._dialect.make_col(f)}"
            for f in user_fields(collection, self._config)
        ]

    # =====================================================================
    # 2. Composable (Zod schema, columns, config)
    # =====================================================================

    def composable_sections(self, collection: CollectionSpec) -> List[Section]:
        return [
            ("header", self._composable_header(collection)),
            ("schema", self._composable_schema(collection)),
            ("columns", self._composable_columns(collection)),
            ("config", self._composable_config(collection)),
            ("exports", self._composable_exports(collection)),
        ]

    def generate_composable(self, collection: CollectionSpec) -> str:
        """Generate the client-side composable file."""
        blocks: List[str] = [
            "\n".join(lines)
            for _, lines in self.composable_sections(collection)
            if lines
        ]
        content: str = "\n\n".join(blocks) + "\n"
        logger.debug(
            "Generated composable %s (%d bytes).",
            collection.composable_name,
            len(content),
        )
        return content

    def schema_const(self, collection: CollectionSpec) -> str:
        """Name of the exported Zod schema, e.g. ``shopProductSchema``."""
        return f"{collection.layer_camel_case}{collection.cases.pascal_case}Schema"

    def _composable_header(self, collection: CollectionSpec) -> List[str]:
        cases = collection.cases
        lines: List[str] = [
            "/**",
            " * @crouton-generated",
            f" * @collection {cases.plural}",
            f" * @layer {collection.layer}",
        ]
        if self._config.generated_at:
            lines.append(f" * @generated {self._config.generated_at}")
        lines.extend([
            " *",
            f" * API endpoint: /api/teams/[id]/{collection.api_path}",
            f" * Table: {collection.table_name}",
            f" * Fields: {', '.join(collection.field_names) or '(none)'}",
            " */",
            "import { z } from 'zod'",
        ])
        return lines

    def zod_entries(self, collection: CollectionSpec) -> List[str]:
        """One ``name: validator`` entry per field, in schema order."""
        translatable: List[str] = translatable_field_names(collection, self._config)
        entries: List[str] = []
        fields: List[FieldDefinition] = user_fields(collection, self._config)

        for f in fields:
            if f.name in translatable:
                continue
            entries.append(f"{f.name}: {self._zod_for(f)}")

        for f in fields:
            if f.name in translatable:
                entries.append(f"{f.name}: {f.spec.zod}.optional()")

        if self._config.hierarchy.enabled:
            entries.append(
                f"{self._config.hierarchy.parent_field}: z.string().nullable().optional()"
            )

        if translatable:
            entries.append(self._zod_translations(collection, translatable))

        return entries

    @staticmethod
    def _zod_for(f: FieldDefinition) -> str:
        base: str = "z.array(z.string())" if f.is_dependent else f.spec.zod
        if not f.meta.required:
            return base + (".nullish()" if f.meta.nullable else ".optional()")

        message: str = ts_string(f"{f.name} is required")
        if f.is_dependent:
            return f"{base}.min(1, {message})"
        if f.type == FieldType.DATE.value:
            return f"z.date({{ required_error: {message} }})"
        if f.type in (FieldType.STRING.value, FieldType.TEXT.value):
            return f"{base}.min(1, {message})"
        return base

    @staticmethod
    def _zod_translations(collection: CollectionSpec, names: List[str]) -> str:
        by_name: Dict[str, FieldDefinition] = {f.name: f for f in collection.fields}
        inner: List[str] = []
        for name in names:
            if by_name[name].meta.required:
                message: str = ts_string(f"{to_label(name)} is required")
                inner.append(f"{name}: z.string().min(1, {message})")
            else:
                inner.append(f"{name}: z.string().optional()")

        lines: List[str] = ["translations: z.record(z.string(), z.object({"]
        lines.extend(join_entries(inner))

        required: List[str] = [n for n in names if by_name[n].meta.required]
        if not required:
            lines.append("}))")
            return "\n".join(lines)

        checks: str = " && ".join(f"translations.en.{n}" for n in required)
        lines.append("})).refine(")
        lines.append(f"  (translations) => translations.en && {checks},")
        lines.append(
            f"  {{ message: 'English translations for {', '.join(required)} are required' }}"
        )
        lines.append(")")
        return "\n".join(lines)

    def _composable_schema(self, collection: CollectionSpec) -> List[str]:
        lines: List[str] = [f"export const {self.schema_const(collection)} = z.object({{"]
        lines.extend(join_entries(self.zod_entries(collection)))
        lines.append("})")
        return lines

    def column_entries(self, collection: CollectionSpec) -> List[str]:
        entries: List[str] = [
            f"{{ accessorKey: '{f.name}', header: {ts_string(f.meta.label or to_label(f.name))} }}"
            for f in user_fields(collection, self._config)
        ]
        if translatable_field_names(collection, self._config):
            entries.append("{ accessorKey: 'translations', header: 'Translations' }")
        return entries

    def _composable_columns(self, collection: CollectionSpec) -> List[str]:
        lines: List[str] = [f"export const {collection.export_name}Columns = ["]
        lines.extend(join_entries(self.column_entries(collection)))
        lines.append("]")
        return lines

    def default_entries(self, collection: CollectionSpec) -> List[str]:
        entries: List[str] = [
            f"{f.name}: {self._default_value(f)}"
            for f in user_fields(collection, self._config)
        ]
        if self._config.hierarchy.enabled:
            entries.append(f"{self._config.hierarchy.parent_field}: null")
        if translatable_field_names(collection, self._config):
            entries.append("translations: {}")
        return entries

    @staticmethod
    def _default_value(f: FieldDefinition) -> str:
        if f.is_dependent:
            return "null"
        if f.type == FieldType.BOOLEAN.value and f.meta.default is not None:
            return boolean_literal(f.meta.default)
        return f.spec.default

    def config_entries(self, collection: CollectionSpec) -> List[str]:
        """
        Entries of the collection config object.

        ``hierarchy`` and ``sortable`` never both appear; hierarchy wins.
        """
        cases = collection.cases
        cfg: GenerationConfig = self._config
        entries: List[str] = [
            f"name: '{collection.export_name}'",
            f"layer: {ts_string(collection.layer)}",
            f"apiPath: '{collection.api_path}'",
            f"componentName: '{collection.prefixed_pascal_case_plural}Form'",
        ]

        references: List[str] = [
            f"{f.name}: {ts_string(f.ref_target)}" for f in collection.fields if f.ref_target
        ]
        entries.append(self._object_literal("references", references))

        if cfg.hierarchy.enabled:
            h = cfg.hierarchy
            entries.append(self._object_literal("hierarchy", [
                "enabled: true",
                f"parentField: '{h.parent_field}'",
                f"pathField: '{h.path_field}'",
                f"depthField: '{h.depth_field}'",
                f"orderField: '{h.order_field}'",
            ]))
        elif cfg.sortable.enabled:
            entries.append(self._object_literal("sortable", [
                "enabled: true",
                f"orderField: '{cfg.sortable.order_field}'",
            ]))

        dependent: List[str] = []
        for f in collection.fields:
            if f.type == FieldType.REPEATER.value or f.is_dependent:
                component: str = (
                    f"{collection.prefixed_pascal_case_plural}{to_case(f.name).pascal_case}Select"
                )
                dependent.append(f"{f.name}: '{component}'")
        if dependent:
            entries.append(self._object_literal("dependentFieldComponents", dependent))

        entries.append(self._object_literal("defaultValues", self.default_entries(collection)))
        entries.append(f"columns: {collection.export_name}Columns")
        return entries

    @staticmethod
    def _object_literal(key: str, entries: List[str]) -> str:
        if not entries:
            return f"{key}: {{}}"
        lines: List[str] = [f"{key}: {{"]
        lines.extend(join_entries(entries))
        lines.append("}")
        return "\n".join(lines)

    def _composable_config(self, collection: CollectionSpec) -> List[str]:
        name: str = collection.export_name
        schema: str = self.schema_const(collection)
        lines: List[str] = [f"const _{name}Config = {{"]
        lines.extend(join_entries(self.config_entries(collection)))
        lines.append("}")
        lines.append("")
        lines.append("// The Zod schema is attached non-enumerably so key iteration skips it.")
        lines.append(f"Object.defineProperty(_{name}Config, 'schema', {{")
        lines.append(f"  value: {schema},")
        lines.append("  enumerable: false,")
        lines.append("  configurable: false,")
        lines.append("  writable: false")
        lines.append("})")
        lines.append("")
        lines.append(f"export const {name}Config = _{name}Config as typeof _{name}Config & {{")
        lines.append(f"  schema: typeof {schema}")
        lines.append("}")
        return lines

    def _composable_exports(self, collection: CollectionSpec) -> List[str]:
        name: str = collection.export_name
        return [
            f"export const {collection.composable_name} = () => {name}Config",
            "",
            "export default function () {",
            "  return {",
            f"    defaultValue: {name}Config.defaultValues,",
            f"    schema: {self.schema_const(collection)},",
            f"    columns: {name}Columns,",
            f"    collection: {name}Config.name",
            "  }",
            "}",
        ]

    # =====================================================================
    # 3. Types
    # =====================================================================

    def generate_types(self, collection: CollectionSpec) -> str:
        """Generate ``types.ts`` with the entity and insert types."""
        cfg: GenerationConfig = self._config
        entity: str = collection.prefixed_pascal_case

        members: List[str] = ["id: string", "teamId: string", "owner: string"]
        for f in user_fields(collection, cfg):
            ts_type: str = "string[] | null" if f.is_dependent else f.spec.ts_type
            optional: str = "" if f.meta.required else "?"
            members.append(f"{f.name}{optional}: {ts_type}")

        if cfg.hierarchy.enabled:
            h = cfg.hierarchy
            members.extend([
                f"{h.parent_field}: string | null",
                f"{h.path_field}: string",
                f"{h.depth_field}: number",
                f"{h.order_field}: number",
            ])
        elif cfg.sortable.enabled:
            members.append(f"{cfg.sortable.order_field}: number")

        if cfg.translations_enabled:
            members.append("translations?: Record<string, Record<string, string>>")

        generated: List[str] = ["id"]
        if cfg.use_metadata:
            members.extend([
                "createdAt: Date",
                "updatedAt: Date",
                "createdBy: string",
                "updatedBy: string",
            ])
            generated.extend(["createdAt", "updatedAt"])

        lines: List[str] = [
            "// @crouton-generated types",
            f"// Layer: {collection.layer}",
            f"// Collection: {collection.cases.plural}",
            "",
            f"export interface {entity} {{",
        ]
        lines.extend(f"  {m}" for m in members)
        lines.append("}")
        lines.append("")
        omitted: str = " | ".join(f"'{g}'" for g in generated)
        lines.append(f"export type New{entity} = Omit<{entity}, {omitted}>")
        lines.append("")
        lines.extend([
            f"export interface {entity}FormProps {{",
            f"  items: {entity}[]",
            f"  activeItem: {entity} | null",
            "  action: 'create' | 'update' | 'delete'",
            "  loading?: string",
            "  collection: string",
            "}",
            "",
        ])
        return "\n".join(lines)

    # =====================================================================
    # 4. Seed script
    # =====================================================================

    def seed_column_entries(self, collection: CollectionSpec) -> List[str]:
        """``columns`` entries for ``seed().refine()``, comments included."""
        cfg: GenerationConfig = self._config
        entries: List[str] = [
            "// Team scoping (required)\n"
            "teamId: f.valuesFromArray({ values: [teamId] })",
            f"owner: f.valuesFromArray({{ values: ['{SEED_SENTINEL}'] }})",
        ]
        if cfg.use_metadata:
            entries.append(
                "// Audit fields\n"
                f"createdBy: f.valuesFromArray({{ values: ['{SEED_SENTINEL}'] }})"
            )
            entries.append(f"updatedBy: f.valuesFromArray({{ values: ['{SEED_SENTINEL}'] }})")

        first: bool = True
        for f in user_fields(collection, cfg):
            if f.ref_target:
                entry: str = (
                    f"// NOTE: {f.name} references '{f.ref_target}' - seed "
                    f"{f.ref_target} first, then update this\n"
                    f"{f.name}: f.valuesFromArray({{ values: ['placeholder-{f.ref_target}-id'] }})"
                )
            else:
                entry = f"{f.name}: {get_seed_generator(f)}"
            if first:
                entry = "// Collection fields\n" + entry
                first = False
            entries.append(entry)
        return entries

    def generate_seed_file(self, collection: CollectionSpec) -> str:
        """Generate a standalone drizzle-seed script for the collection."""
        cfg: GenerationConfig = self._config
        plural: str = collection.cases.plural
        table: str = collection.export_name
        fn: str = f"seed{collection.prefixed_pascal_case_plural}"

        lines: List[str] = [
            "// @crouton-generated seed file",
            f"// Layer: {collection.layer}",
            f"// Collection: {plural}",
        ]
        if cfg.generated_at:
            lines.append(f"// Generated: {cfg.generated_at}")
        lines.extend([
            "//",
            "// Usage (from Nuxt server context):",
            f"//   import {{ {fn} }} from '~/{collection.base_dir()}/server/database/seed'",
            f"//   await {fn}({{ count: 50, teamId: 'your-team-id' }})",
            "//",
            "// Or run standalone (requires DATABASE_URL env var):",
            "//   DATABASE_URL=... npx tsx seed.ts",
        ])

        if cfg.hierarchy.enabled:
            h = cfg.hierarchy
            lines.append("")
            lines.append(
                f"// NOTE: Hierarchy fields ({h.parent_field}, {h.path_field}, "
                f"{h.depth_field}, {h.order_field}) are handled automatically."
            )
            lines.append(f"// All seeded records will be root items ({h.parent_field}: null).")

        lines.append("")
        lines.extend(self._seed_imports(table))
        lines.append("")
        lines.extend([
            "export interface SeedOptions {",
            f"  /** Number of records to seed (default: {cfg.seed_count}) */",
            "  count?: number",
            f"  /** Team ID for seeded records (default: '{cfg.team_id}') */",
            "  teamId?: string",
            "  /** Reset (delete all) before seeding */",
            "  reset?: boolean",
            "  /** Optional: pass existing db instance (for use within Nuxt server context) */",
            "  db?: ReturnType<typeof drizzle>",
            "}",
            "",
        ])
        lines.extend(self._seed_create_db())
        lines.append("")
        lines.extend([
            "/**",
            f" * Seed {plural} with test data",
            " */",
            f"export async function {fn}(options: SeedOptions = {{}}) {{",
            "  const db = options.db ?? createDb()",
            f"  const count = options.count ?? {cfg.seed_count}",
            f"  const teamId = options.teamId ?? {ts_string(cfg.team_id)}",
            "",
            f"  console.log(`Seeding ${{count}} {plural}...`)",
            "",
            "  if (options.reset) {",
            f"    console.log('Resetting {plural} table...')",
            f"    await reset(db, {{ {table} }})",
            "  }",
            "",
            f"  await seed(db, {{ {table} }}).refine((f) => ({{",
            f"    {table}: {{",
            "      count,",
            "      columns: {",
        ])
        lines.extend(join_entries(self.seed_column_entries(collection), level=4))
        lines.extend([
            "      }",
            "    }",
            "  }))",
            "",
            f"  console.log(`Seeded ${{count}} {plural}`)",
            "}",
            "",
            "// Allow direct execution: npx tsx seed.ts",
            "const isMainModule = typeof Bun !== 'undefined'",
            "  ? Bun.main === import.meta.path",
            "  : import.meta.url === `file://${process.argv[1]}`",
            "",
            "if (isMainModule) {",
            f"  {fn}()",
            "    .then(() => {",
            "      console.log('Seed complete!')",
            "      process.exit(0)",
            "    })",
            "    .catch((err) => {",
            "      console.error('Seed failed:', err)",
            "      process.exit(1)",
            "    })",
            "}",
            "",
        ])

        content: str = "\n".join(lines)
        logger.debug("Generated seed file for %s (%d lines).", table, len(lines))
        return content

    def _seed_imports(self, table: str) -> List[str]:
        lines: List[str] = ["import { seed, reset } from 'drizzle-seed'"]
        if self._dialect.name == "pg":
            lines.append("import { drizzle } from 'drizzle-orm/node-postgres'")
        else:
            lines.append("import { drizzle } from 'drizzle-orm/libsql'")
            lines.append("import { createClient } from '@libsql/client'")
        lines.append(f"import {{ {table} }} from './schema'")
        return lines

    def _seed_create_db(self) -> List[str]:
        if self._dialect.name == "pg":
            connect: List[str] = ["  return drizzle(url)"]
        else:
            connect = [
                "  const client = createClient({ url })",
                "  return drizzle(client)",
            ]
        return [
            "/**",
            " * Create a database connection for standalone execution",
            " */",
            "function createDb() {",
            "  const url = process.env.DATABASE_URL",
            "  if (!url) {",
            "    throw new Error('DATABASE_URL environment variable is required for standalone seed execution')",
            "  }",
            *connect,
            "}",
        ]


# ---------------------------------------------------------------------------
# Functional shortcuts
# ---------------------------------------------------------------------------


def generate_schema(
    collection: CollectionSpec,
    config: GenerationConfig,
    dialect: Optional[str] = None,
) -> str:
    return TemplateGenerator(config, dialect).generate_schema(collection)


def generate_composable(collection: CollectionSpec, config: GenerationConfig) -> str:
    return TemplateGenerator(config).generate_composable(collection)


def generate_types(collection: CollectionSpec, config: GenerationConfig) -> str:
    return TemplateGenerator(config).generate_types(collection)


def generate_seed_file(collection: CollectionSpec, config: GenerationConfig) -> str:
    return TemplateGenerator(config).generate_seed_file(collection)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "METADATA_FIELDS",
    "SEED_SENTINEL",
    "TEAM_FIELDS",
    "TemplateGenerator",
    "generate_composable",
    "generate_schema",
    "generate_seed_file",
    "generate_types",
    "reserved_field_names",
    "translatable_field_names",
    "user_fields",
]

logger.debug("crouton_gen.templates loaded — %d public symbols.", len(__all__))
