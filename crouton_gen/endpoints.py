# File: crouton_gen/endpoints.py
"""
Crouton Gen - API Endpoint & Query Generators
===============================================
Generates the team-scoped Nitro handlers for a collection and the Drizzle
query module they call.

Handler layout under ``server/api/teams/[id]/{layer}-{plural}/``::

    index.get.ts               list, or ``?ids=a,b`` lookup
    index.post.ts              create
    [{camel}Id].patch.ts       update
    [{camel}Id].delete.ts      delete
    [{camel}Id]/move.patch.ts  hierarchy only
    reorder.patch.ts           hierarchy or sortable

Every handler calls ``resolveTeamAndCheckMembership(event)`` before touching
data and never catches what it throws.  Reads and writes are filtered by
``team.id``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping

from crouton_gen.dialects import get_dialect
from crouton_gen.models import CollectionSpec, FieldDefinition, GenerationConfig
from crouton_gen.paths import PATH_CONFIG, PathConfig, nested
from crouton_gen.templates import translatable_field_names, user_fields
from crouton_gen.type_mapping import FieldType
from crouton_gen.utils import pascal, to_camel_case, to_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.endpoints")

AUTH_MODULE: str = "@fyit/crouton-auth/server/utils/team"

_HANDLER_HEADER: List[str] = [
    "// Team-based endpoint - requires @fyit/crouton-auth package",
    "// The resolveTeamAndCheckMembership utility handles team resolution and auth",
]

_JSON_TYPES = (FieldType.JSON.value, FieldType.REPEATER.value)

# App-level schema that exports the auth ``user`` table and external tables.
APP_SCHEMA_MODULE: str = "~~/server/db/schema"

_EXTERNAL_SCOPES = ("external", "adapter")
_USER_COLUMNS = ("id", "name", "email", "image")


@dataclass(frozen=True, slots=True)
class QueryReference:
    """A column holding the id (or a list of ids) of records in another table."""

    field_name: str
    target: str
    external: bool = False
    self_reference: bool = False
    many: bool = False

    @property
    def is_user(self) -> bool:
        return self.external and self.target == "users"

    @property
    def import_name(self) -> str:
        """Name exported by the app schema; the auth table is ``user``."""
        return "user" if self.target == "users" else self.target

    @property
    def alias(self) -> str:
        """Table alias used by the join, or ``""`` when none is needed."""
        if self.many:
            return ""
        if self.is_user:
            return f"{self.field_name}User"
        if self.self_reference:
            return f"{self.field_name}Ref"
        return ""


class EndpointGenerator:
    """Builds handler and query sources for one ``GenerationConfig``."""

    def __init__(self, config: GenerationConfig, path_config: PathConfig = PATH_CONFIG) -> None:
        self._config: GenerationConfig = config
        self._paths: PathConfig = path_config

    # ------------------------------------------------------------------
    # Naming helpers
    # ------------------------------------------------------------------

    @staticmethod
    def id_param(collection: CollectionSpec) -> str:
        """Router parameter name, e.g. ``productId``."""
        return f"{collection.cases.camel_case}Id"

    def handler_dir(self, collection: CollectionSpec) -> str:
        return f"{collection.base_dir()}/server/api/teams/[id]/{collection.api_path}"

    def _path_variables(self, collection: CollectionSpec) -> Dict[str, str]:
        return {
            "layerName": collection.layer,
            "collectionName": collection.cases.plural,
            "composableName": collection.composable_name,
        }

    def import_path(self, key: str, collection: CollectionSpec, depth: int = 0) -> str:
        """Resolve an import path, adjusted for handlers *depth* levels deeper."""
        path: str = self._paths.get_import_path(
            key, self._path_variables(collection), self._config.use_layer_aliases
        )
        return nested(path, depth) if depth else path

    def _import_line(
        self, names: List[str], key: str, collection: CollectionSpec, depth: int = 0,
        type_only: bool = False,
    ) -> List[str]:
        path: str = self.import_path(key, collection, depth)
        if not path:
            logger.warning("No import path for %s; import of %s omitted.", key, ", ".join(names))
            return []
        keyword: str = "import type" if type_only else "import"
        return [f"{keyword} {{ {', '.join(names)} }} from '{path}'"]

    def _stamp_lines(self, indent: str, owner: bool = True) -> List[str]:
        lines: List[str] = [f"{indent}teamId: team.id"]
        if owner:
            lines.append(f"{indent}owner: user.id")
        if self._config.use_metadata:
            lines.append(f"{indent}createdBy: user.id")
            lines.append(f"{indent}updatedBy: user.id")
        return lines

    def _missing_id_guard(self, collection: CollectionSpec) -> List[str]:
        param: str = self.id_param(collection)
        return [
            f"  const {{ {param} }} = getRouterParams(event)",
            f"  if (!{param}) {{",
            f"    throw createError({{ status: 400, statusText: 'Missing {collection.cases.singular} ID' }})",
            "  }",
        ]

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def generate_get(self, collection: CollectionSpec) -> str:
        plural: str = collection.prefixed_pascal_case_plural
        lines: List[str] = list(_HANDLER_HEADER)
        lines.extend(self._import_line(
            [f"getAll{plural}", f"get{plural}ByIds"], "fromApiToQueries", collection
        ))
        lines.append(f"import {{ resolveTeamAndCheckMembership }} from '{AUTH_MODULE}'")
        lines.extend([
            "",
            "export default defineEventHandler(async (event) => {",
            "  const { team } = await resolveTeamAndCheckMembership(event)",
            "",
            "  const query = getQuery(event)",
        ])
        if translatable_field_names(collection, self._config):
            lines.extend([
                "  // Locale of the translations the client is reading",
                "  const locale = String(query.locale || 'en')",
            ])
        lines.extend([
            "  if (query.ids) {",
            "    const ids = String(query.ids).split(',')",
            f"    return await get{plural}ByIds(team.id, ids)",
            "  }",
            "",
            f"  return await getAll{plural}(team.id)",
            "})",
            "",
        ])
        return "\n".join(lines)

    def generate_post(self, collection: CollectionSpec) -> str:
        single: str = collection.prefixed_pascal_case
        plural: str = collection.prefixed_pascal_case_plural
        hierarchy = self._config.hierarchy

        names: List[str] = [f"create{single}"]
        if hierarchy.enabled:
            names.append(f"get{plural}ByIds")

        lines: List[str] = list(_HANDLER_HEADER)
        lines.extend(self._import_line(names, "fromApiToQueries", collection))
        if hierarchy.enabled:
            lines.append("import { nanoid } from 'nanoid'")
        lines.append(f"import {{ resolveTeamAndCheckMembership }} from '{AUTH_MODULE}'")
        lines.extend([
            "",
            "export default defineEventHandler(async (event) => {",
            "  const { team, user } = await resolveTeamAndCheckMembership(event)",
            "",
            "  const body = await readBody(event)",
            "",
        ])

        if hierarchy.enabled:
            p, path, depth = hierarchy.parent_field, hierarchy.path_field, hierarchy.depth_field
            lines.extend([
                "  // The id is generated here so the path can include it",
                "  const { id, ...dataWithoutId } = body",
                "",
                "  const recordId = nanoid()",
                f"  let {path} = `/${{recordId}}/`",
                f"  let {depth} = 0",
                "",
                f"  if (dataWithoutId.{p}) {{",
                f"    const [parent] = await get{plural}ByIds(team.id, [dataWithoutId.{p}])",
                "    if (parent) {",
                f"      {path} = `${{parent.{path}}}${{recordId}}/`",
                f"      {depth} = (parent.{depth} || 0) + 1",
                "    }",
                "  }",
            ])
        else:
            lines.append("  // The database generates the id")
            lines.append("  const { id, ...dataWithoutId } = body")

        for f in self._date_fields(collection):
            lines.extend([
                f"  if (dataWithoutId.{f.name}) {{",
                f"    dataWithoutId.{f.name} = new Date(dataWithoutId.{f.name})",
                "  }",
            ])

        values: List[str] = ["    ...dataWithoutId"]
        if hierarchy.enabled:
            values.extend([
                "    id: recordId",
                f"    {hierarchy.path_field}",
                f"    {hierarchy.depth_field}",
            ])
        values.extend(self._stamp_lines("    "))

        lines.append("")
        lines.append(f"  return await create{single}({{")
        lines.append(",\n".join(values))
        lines.extend(["  })", "})", ""])
        return "\n".join(lines)

    def generate_patch(self, collection: CollectionSpec) -> str:
        single: str = collection.prefixed_pascal_case
        plural: str = collection.prefixed_pascal_case_plural
        param: str = self.id_param(collection)
        translated: bool = bool(translatable_field_names(collection, self._config))

        names: List[str] = [f"update{single}"]
        if translated:
            names.append(f"get{plural}ByIds")

        lines: List[str] = list(_HANDLER_HEADER)
        lines.extend(self._import_line(names, "fromApiToQueries", collection))
        lines.append(f"import {{ resolveTeamAndCheckMembership }} from '{AUTH_MODULE}'")
        lines.extend(self._import_line([single], "fromApiToTypes", collection, type_only=True))
        lines.append("")
        lines.append("export default defineEventHandler(async (event) => {")
        lines.extend(self._missing_id_guard(collection))
        lines.append("  const { team, user } = await resolveTeamAndCheckMembership(event)")
        lines.append("")
        lines.append(f"  const body = await readBody<Partial<{single}> & {{ locale?: string }}>(event)")

        if translated:
            lines.extend([
                "",
                "  // Merge the incoming locale into the stored translations",
                "  if (body.translations && body.locale) {",
                f"    const [existing] = await get{plural}ByIds(team.id, [{param}]) as any[]",
                "    if (existing) {",
                "      body.translations = {",
                "        ...existing.translations,",
                "        [body.locale]: {",
                "          ...existing.translations?.[body.locale],",
                "          ...body.translations[body.locale]",
                "        }",
                "      }",
                "    }",
                "  }",
            ])

        selection: List[str] = []
        for f in user_fields(collection, self._config):
            if f.type == FieldType.DATE.value:
                selection.append(
                    f"    {f.name}: body.{f.name} ? new Date(body.{f.name}) : body.{f.name}"
                )
            else:
                selection.append(f"    {f.name}: body.{f.name}")
        if self._config.translations_enabled:
            selection.append("    translations: body.translations")

        lines.append("")
        if selection:
            lines.append(f"  return await update{single}({param}, team.id, user.id, {{")
            lines.append(",\n".join(selection))
            lines.append("  })")
        else:
            lines.append(f"  return await update{single}({param}, team.id, user.id, {{}})")
        lines.extend(["})", ""])
        return "\n".join(lines)

    def generate_delete(self, collection: CollectionSpec) -> str:
        single: str = collection.prefixed_pascal_case
        lines: List[str] = list(_HANDLER_HEADER)
        lines.extend(self._import_line([f"delete{single}"], "fromApiToQueries", collection))
        lines.append(f"import {{ resolveTeamAndCheckMembership }} from '{AUTH_MODULE}'")
        lines.append("")
        lines.append("export default defineEventHandler(async (event) => {")
        lines.extend(self._missing_id_guard(collection))
        lines.extend([
            "  const { team, user } = await resolveTeamAndCheckMembership(event)",
            "",
            f"  return await delete{single}({self.id_param(collection)}, team.id, user.id)",
            "})",
            "",
        ])
        return "\n".join(lines)

    def generate_move(self, collection: CollectionSpec) -> str:
        """``[{camel}Id]/move.patch.ts``: re-parent and reposition a tree node."""
        single: str = collection.prefixed_pascal_case
        hierarchy = self._config.hierarchy
        order: str = hierarchy.order_field
        parent: str = hierarchy.parent_field

        lines: List[str] = list(_HANDLER_HEADER)
        lines.extend(self._import_line(
            [f"updatePosition{single}"], "fromApiToQueries", collection, depth=1
        ))
        lines.append(f"import {{ resolveTeamAndCheckMembership }} from '{AUTH_MODULE}'")
        lines.append("")
        lines.append("export default defineEventHandler(async (event) => {")
        lines.extend(self._missing_id_guard(collection))
        lines.extend([
            "  const { team } = await resolveTeamAndCheckMembership(event)",
            "",
            "  const body = await readBody(event)",
            "",
            f"  if (body.{order} === undefined || typeof body.{order} !== 'number') {{",
            f"    throw createError({{ status: 400, statusText: '{order} is required and must be a number' }})",
            "  }",
            "",
            "  // null moves the item to the root",
            f"  const {parent} = body.{parent} ?? null",
            "",
            f"  return await updatePosition{single}(team.id, {self.id_param(collection)}, "
            f"{parent}, body.{order})",
            "})",
            "",
        ])
        return "\n".join(lines)

    def generate_reorder(self, collection: CollectionSpec) -> str:
        """``reorder.patch.ts``: bulk order update for siblings."""
        plural: str = collection.prefixed_pascal_case_plural
        order: str = self._order_field()

        lines: List[str] = list(_HANDLER_HEADER)
        lines.extend(self._import_line(
            [f"reorderSiblings{plural}"], "fromApiToQueries", collection
        ))
        lines.append(f"import {{ resolveTeamAndCheckMembership }} from '{AUTH_MODULE}'")
        lines.extend([
            "",
            "export default defineEventHandler(async (event) => {",
            "  const { team } = await resolveTeamAndCheckMembership(event)",
            "",
            "  const body = await readBody(event)",
            "",
            f"  // Expects {{ updates: [{{ id, {order} }}] }}",
            "  if (!Array.isArray(body.updates)) {",
            "    throw createError({ status: 400, statusText: 'updates must be an array' })",
            "  }",
            "",
            "  for (const update of body.updates) {",
            f"    if (!update.id || typeof update.{order} !== 'number') {{",
            "      throw createError({",
            "        status: 400,",
            f"        statusText: 'Each update must have id and {order} (number)'",
            "      })",
            "    }",
            "  }",
            "",
            f"  return await reorderSiblings{plural}(team.id, body.updates)",
            "})",
            "",
        ])
        return "\n".join(lines)

    def generate_handlers(self, collection: CollectionSpec) -> Dict[str, str]:
        """All handlers for *collection*, keyed by path relative to the project root."""
        base: str = self.handler_dir(collection)
        param: str = self.id_param(collection)
        files: Dict[str, str] = {
            f"{base}/index.get.ts": self.generate_get(collection),
            f"{base}/index.post.ts": self.generate_post(collection),
            f"{base}/[{param}].patch.ts": self.generate_patch(collection),
            f"{base}/[{param}].delete.ts": self.generate_delete(collection),
        }
        if self._config.hierarchy.enabled:
            files[f"{base}/[{param}]/move.patch.ts"] = self.generate_move(collection)
        if self._config.hierarchy.enabled or self._config.sortable.enabled:
            files[f"{base}/reorder.patch.ts"] = self.generate_reorder(collection)
        logger.debug("Generated %d handlers for %s.", len(files), collection.export_name)
        return files

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def generate_queries(self, collection: CollectionSpec) -> str:
        """Generate ``server/database/queries.ts``."""
        cfg: GenerationConfig = self._config
        single: str = collection.prefixed_pascal_case
        plural: str = collection.prefixed_pascal_case_plural
        table: str = f"tables.{collection.export_name}"
        var: str = collection.cases.camel_case_plural
        item: str = collection.cases.camel_case

        operators: List[str] = ["eq", "and"]
        order_by: str = ""
        if cfg.sortable.enabled:
            operators.append("asc")
            order_by = f"asc({table}.{cfg.sortable.order_field})"
        if cfg.use_metadata:
            operators.append("desc")
            created: str = f"desc({table}.createdAt)"
            order_by = f"{order_by}, {created}" if order_by else created
        operators.append("inArray")
        if cfg.hierarchy.enabled:
            operators.append("sql")

        lines: List[str] = [
            f"// @crouton-generated queries for {collection.layer}/{collection.cases.plural}",
            f"import {{ {', '.join(operators)} }} from 'drizzle-orm'",
            "import * as tables from './schema'",
        ]
        lines.extend(self._import_line(
            [single, f"New{single}"], "fromQueriesToTypes", collection, type_only=True
        ))
        refs: List[QueryReference] = self.query_references(collection)
        lines.extend(self._reference_imports(collection, refs))

        aliases: List[str] = self._alias_definitions(collection, refs)
        select: List[str] = self._select_clause(collection, refs)
        joins: List[str] = self._left_joins(collection, refs)
        resolve_arrays: List[str] = self._array_reference_processing(collection, refs, var)

        order_clause: List[str] = [f"    .orderBy({order_by})"] if order_by else []
        json_parsing: List[str] = self._json_parsing(collection, var)

        lines.extend([
            "",
            f"export async function getAll{plural}(teamId: string) {{",
            "  const db = useDB()",
            *aliases,
            "",
            f"  const {var} = await (db as any)",
            *select,
            f"    .from({table})",
            *joins,
            f"    .where(eq({table}.teamId, teamId))",
            *order_clause,
            *json_parsing,
            *resolve_arrays,
            "",
            f"  return {var}",
            "}",
            "",
            f"export async function get{plural}ByIds(teamId: string, {item}Ids: string[]) {{",
            "  const db = useDB()",
            *aliases,
            "",
            f"  const {var} = await (db as any)",
            *select,
            f"    .from({table})",
            *joins,
            "    .where(",
            "      and(",
            f"        eq({table}.teamId, teamId),",
            f"        inArray({table}.id, {item}Ids)",
            "      )",
            "    )",
            *order_clause,
            *json_parsing,
            *resolve_arrays,
            "",
            f"  return {var}",
            "}",
            "",
            f"export async function create{single}(data: New{single}) {{",
            "  const db = useDB()",
            "",
            f"  const [{item}] = await (db as any)",
            f"    .insert({table})",
            "    .values(data)",
            "    .returning()",
            "",
            f"  return {item}",
            "}",
            "",
            f"export async function update{single}(",
            "  recordId: string,",
            "  teamId: string,",
            "  ownerId: string,",
            f"  updates: Partial<{single}>",
            ") {",
            "  const db = useDB()",
            "",
            f"  const [{item}] = await (db as any)",
            f"    .update({table})",
        ])
        if cfg.use_metadata:
            lines.extend([
                "    .set({",
                "      ...updates,",
                "      updatedBy: ownerId",
                "    })",
            ])
        else:
            lines.append("    .set(updates)")
        lines.extend([
            *self._owned_where(table),
            "    .returning()",
            "",
            f"  if (!{item}) {{",
            "    throw createError({",
            "      status: 404,",
            f"      statusText: '{single} not found or unauthorized'",
            "    })",
            "  }",
            "",
            f"  return {item}",
            "}",
            "",
            f"export async function delete{single}(",
            "  recordId: string,",
            "  teamId: string,",
            "  ownerId: string",
            ") {",
            "  const db = useDB()",
            "",
            "  const [deleted] = await (db as any)",
            f"    .delete({table})",
            *self._owned_where(table),
            "    .returning()",
            "",
            "  if (!deleted) {",
            "    throw createError({",
            "      status: 404,",
            f"      statusText: '{single} not found or unauthorized'",
            "    })",
            "  }",
            "",
            "  return { success: true }",
            "}",
        ])

        if cfg.hierarchy.enabled:
            lines.extend(self._tree_queries(collection, table))
        elif cfg.sortable.enabled:
            lines.extend(self._sortable_queries(collection, table))
        if any(r.many for r in refs):
            lines.extend(self._parse_ids_helper())
        lines.append("")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Reference resolution for list queries
    # ------------------------------------------------------------------

    def query_references(self, collection: CollectionSpec) -> List[QueryReference]:
        """
        References resolved by ``getAll``/``getByIds``, in select order.

        ``refTarget`` fields come first.  ``owner`` (and, with metadata,
        ``createdBy``/``updatedBy``) are always joined to the auth ``user``
        table.  Array and dependent fields hold several ids and are resolved
        after the main query instead of joined.
        """
        refs: List[QueryReference] = []
        for f in user_fields(collection, self._config):
            if not f.ref_target:
                continue
            external: bool = (f.ref_scope or "") in _EXTERNAL_SCOPES
            refs.append(QueryReference(
                field_name=f.name,
                target=f.ref_target,
                external=external,
                self_reference=(
                    not external and to_case(f.ref_target).plural == collection.cases.plural
                ),
                many=f.type == FieldType.ARRAY.value or f.is_dependent,
            ))

        user_columns: List[str] = ["owner"]
        if self._config.use_metadata:
            user_columns.extend(["createdBy", "updatedBy"])
        refs.extend(QueryReference(name, "users", external=True) for name in user_columns)
        return refs

    def _ref_table(self, collection: CollectionSpec, ref: QueryReference) -> str:
        if ref.alias:
            return ref.alias
        if ref.self_reference:
            return f"tables.{collection.export_name}"
        if ref.external:
            return ref.import_name
        target_table: str = (
            f"{collection.layer_camel_case}{to_case(ref.target).pascal_case_plural}"
        )
        return f"{to_camel_case(ref.target)}Schema.{target_table}"

    def _sibling_schema_path(self, collection: CollectionSpec, target: str) -> str:
        plural: str = to_case(target).plural
        if self._config.use_layer_aliases:
            return self._paths.get_import_path(
                "fromApiToSchema",
                {"layerName": collection.layer, "collectionName": plural},
                True,
            )
        return f"../../../{plural}/server/database/schema"

    def _reference_imports(
        self, collection: CollectionSpec, refs: List[QueryReference]
    ) -> List[str]:
        lines: List[str] = []
        if any(r.alias for r in refs):
            core: str = get_dialect(self._config.dialect).import_from
            lines.append(f"import {{ alias }} from '{core}'")

        external: List[str] = list(dict.fromkeys(r.import_name for r in refs if r.external))
        if external:
            lines.append(f"import {{ {', '.join(external)} }} from '{APP_SCHEMA_MODULE}'")

        local: List[str] = list(dict.fromkeys(
            r.target for r in refs if not r.external and not r.self_reference
        ))
        for target in local:
            lines.append(
                f"import * as {to_camel_case(target)}Schema from "
                f"'{self._sibling_schema_path(collection, target)}'"
            )
        return lines

    def _alias_definitions(
        self, collection: CollectionSpec, refs: List[QueryReference]
    ) -> List[str]:
        lines: List[str] = []
        for ref in refs:
            if ref.is_user and ref.alias:
                lines.append(f"  const {ref.alias} = alias(user as any, '{ref.alias}')")
            elif ref.alias:
                lines.append(
                    f"  const {ref.alias} = alias(tables.{collection.export_name}, '{ref.alias}')"
                )
        return lines

    def _select_clause(
        self, collection: CollectionSpec, refs: List[QueryReference]
    ) -> List[str]:
        joined: List[QueryReference] = [r for r in refs if not r.many]
        if not joined:
            return ["    .select()"]
        entries: List[str] = [f"      ...tables.{collection.export_name}"]
        for ref in joined:
            expr: str = self._ref_table(collection, ref)
            if ref.is_user:
                columns: str = ",\n".join(f"        {c}: {expr}.{c}" for c in _USER_COLUMNS)
                entries.append(f"      {ref.alias}: {{\n{columns}\n      }}")
            else:
                entries.append(f"      {ref.field_name}Data: {expr}")
        return ["    .select({", ",\n".join(entries), "    } as any)"]

    def _left_joins(
        self, collection: CollectionSpec, refs: List[QueryReference]
    ) -> List[str]:
        table: str = f"tables.{collection.export_name}"
        lines: List[str] = []
        for ref in refs:
            if ref.many:
                continue
            expr: str = self._ref_table(collection, ref)
            lines.append(f"    .leftJoin({expr}, eq({table}.{ref.field_name}, {expr}.id))")
        return lines

    def _array_reference_processing(
        self, collection: CollectionSpec, refs: List[QueryReference], var: str
    ) -> List[str]:
        groups: Dict[str, List[QueryReference]] = {}
        for ref in refs:
            if ref.many:
                groups.setdefault(ref.target, []).append(ref)
        if not groups:
            return []

        lines: List[str] = ["", f"  if ({var}.length > 0) {{"]
        for index, (target, group) in enumerate(groups.items()):
            name: str = pascal(to_camel_case(target))
            ids: str = f"all{name}Ids"
            related: str = f"related{name}"
            expr: str = self._ref_table(collection, group[0])
            if index:
                lines.append("")
            lines.extend([
                f"    // Resolve ids that point at {target}",
                f"    const {ids} = new Set<string>()",
                f"    {var}.forEach((item: any) => {{",
            ])
            for ref in group:
                lines.extend([
                    f"      for (const id of parseIds(item.{ref.field_name})) {{",
                    f"        {ids}.add(id)",
                    "      }",
                ])
            lines.extend([
                "    })",
                "",
                f"    if ({ids}.size > 0) {{",
                f"      const {related} = await (db as any)",
                "        .select()",
                f"        .from({expr})",
                f"        .where(inArray({expr}.id, Array.from({ids})))",
                "",
                f"      {var}.forEach((item: any) => {{",
            ])
            for ref in group:
                lines.extend([
                    f"        const {ref.field_name}Ids = parseIds(item.{ref.field_name})",
                    f"        item.{ref.field_name}Data = {related}.filter("
                    f"(row: any) => {ref.field_name}Ids.includes(row.id))",
                ])
            lines.extend(["      })", "    }"])
        lines.append("  }")
        return lines

    @staticmethod
    def _parse_ids_helper() -> List[str]:
        return [
            "",
            "function parseIds(value: unknown): string[] {",
            "  if (!value) {",
            "    return []",
            "  }",
            "  try {",
            "    const ids = typeof value === 'string' ? JSON.parse(value) : value",
            "    return Array.isArray(ids) ? ids : []",
            "  } catch (e) {",
            "    console.error('Error parsing reference ids:', e)",
            "    return []",
            "  }",
            "}",
        ]

    @staticmethod
    def _owned_where(table: str) -> List[str]:
        return [
            "    .where(",
            "      and(",
            f"        eq({table}.id, recordId),",
            f"        eq({table}.teamId, teamId),",
            f"        eq({table}.owner, ownerId)",
            "      )",
            "    )",
        ]

    def _json_parsing(self, collection: CollectionSpec, var: str) -> List[str]:
        # libsql hands JSON columns back as strings when written raw.
        if self._config.dialect != "sqlite":
            return []
        json_fields: List[FieldDefinition] = [
            f for f in user_fields(collection, self._config)
            if f.type in _JSON_TYPES or f.is_dependent
        ]
        if not json_fields:
            return []
        lines: List[str] = ["", f"  {var}.forEach((item: any) => {{"]
        for f in json_fields:
            fallback: str = "[]" if f.type == FieldType.REPEATER.value else "null"
            lines.extend([
                f"    if (typeof item.{f.name} === 'string') {{",
                "      try {",
                f"        item.{f.name} = JSON.parse(item.{f.name})",
                "      } catch (e) {",
                f"        console.error('Error parsing {f.name}:', e)",
                f"        item.{f.name} = {fallback}",
                "      }",
                "    }",
                f"    if (item.{f.name} === null || item.{f.name} === undefined) {{",
                f"      item.{f.name} = {fallback}",
                "    }",
            ])
        lines.append("  })")
        return lines

    def _tree_queries(self, collection: CollectionSpec, table: str) -> List[str]:
        h = self._config.hierarchy
        single: str = collection.prefixed_pascal_case
        plural: str = collection.prefixed_pascal_case_plural
        var: str = collection.cases.camel_case_plural
        return [
            "",
            "// Tree hierarchy queries",
            "",
            "interface TreeItem {",
            "  id: string",
            f"  {h.path_field}: string",
            f"  {h.depth_field}: number",
            f"  {h.order_field}: number",
            "  [key: string]: any",
            "}",
            "",
            f"export async function getTreeData{plural}(teamId: string) {{",
            "  const db = useDB()",
            "",
            f"  const {var} = await (db as any)",
            "    .select()",
            f"    .from({table})",
            f"    .where(eq({table}.teamId, teamId))",
            f"    .orderBy({table}.{h.path_field}, {table}.{h.order_field})",
            "",
            f"  return {var} as TreeItem[]",
            "}",
            "",
            f"export async function updatePosition{single}(",
            "  teamId: string,",
            "  id: string,",
            "  newParentId: string | null,",
            "  newOrder: number",
            ") {",
            "  const db = useDB()",
            "",
            "  const [current] = await (db as any)",
            "    .select()",
            f"    .from({table})",
            f"    .where(and(eq({table}.id, id), eq({table}.teamId, teamId))) as TreeItem[]",
            "",
            "  if (!current) {",
            f"    throw createError({{ status: 404, statusText: '{single} not found' }})",
            "  }",
            "",
            "  let newPath: string",
            "  let newDepth: number",
            "",
            "  if (newParentId) {",
            "    const [parent] = await (db as any)",
            "      .select()",
            f"      .from({table})",
            f"      .where(and(eq({table}.id, newParentId), eq({table}.teamId, teamId))) as TreeItem[]",
            "",
            "    if (!parent) {",
            f"      throw createError({{ status: 400, statusText: 'Parent {single} not found' }})",
            "    }",
            "",
            f"    if (parent.{h.path_field}.startsWith(current.{h.path_field})) {{",
            "      throw createError({ status: 400, statusText: 'Cannot move item to its own descendant' })",
            "    }",
            "",
            f"    newPath = `${{parent.{h.path_field}}}${{id}}/`",
            f"    newDepth = parent.{h.depth_field} + 1",
            "  } else {",
            "    newPath = `/${id}/`",
            "    newDepth = 0",
            "  }",
            "",
            f"  const oldPath = current.{h.path_field}",
            "",
            "  const [updated] = await (db as any)",
            f"    .update({table})",
            "    .set({",
            f"      {h.parent_field}: newParentId,",
            f"      {h.path_field}: newPath,",
            f"      {h.depth_field}: newDepth,",
            f"      {h.order_field}: newOrder",
            "    })",
            f"    .where(and(eq({table}.id, id), eq({table}.teamId, teamId)))",
            "    .returning()",
            "",
            "  if (oldPath !== newPath) {",
            "    const descendants = await (db as any)",
            "      .select()",
            f"      .from({table})",
            "      .where(",
            "        and(",
            f"          eq({table}.teamId, teamId),",
            f"          sql`${{{table}.{h.path_field}}} LIKE ${{oldPath + '%'}} AND ${{{table}.id}} != ${{id}}`",
            "        )",
            "      ) as TreeItem[]",
            "",
            f"    const depthDiff = newDepth - current.{h.depth_field}",
            "    for (const descendant of descendants) {",
            "      await (db as any)",
            f"        .update({table})",
            "        .set({",
            f"          {h.path_field}: descendant.{h.path_field}.replace(oldPath, newPath),",
            f"          {h.depth_field}: descendant.{h.depth_field} + depthDiff",
            "        })",
            f"        .where(eq({table}.id, descendant.id))",
            "    }",
            "  }",
            "",
            "  return updated",
            "}",
            *self._reorder_query(plural, table, h.order_field),
        ]

    def _sortable_queries(self, collection: CollectionSpec, table: str) -> List[str]:
        return [
            "",
            "// Sortable reorder queries",
            *self._reorder_query(
                collection.prefixed_pascal_case_plural, table, self._config.sortable.order_field
            ),
        ]

    @staticmethod
    def _reorder_query(plural: str, table: str, order: str) -> List[str]:
        return [
            "",
            f"export async function reorderSiblings{plural}(",
            "  teamId: string,",
            f"  updates: {{ id: string; {order}: number }}[]",
            ") {",
            "  const db = useDB()",
            "",
            "  const results = []",
            "",
            "  for (const update of updates) {",
            "    const [updated] = await (db as any)",
            f"      .update({table})",
            f"      .set({{ {order}: update.{order} }})",
            f"      .where(and(eq({table}.id, update.id), eq({table}.teamId, teamId)))",
            "      .returning()",
            "",
            "    if (updated) {",
            "      results.push(updated)",
            "    }",
            "  }",
            "",
            "  return results",
            "}",
        ]

    def _order_field(self) -> str:
        if self._config.hierarchy.enabled:
            return self._config.hierarchy.order_field
        return self._config.sortable.order_field

    def _date_fields(self, collection: CollectionSpec) -> List[FieldDefinition]:
        return [
            f for f in user_fields(collection, self._config)
            if f.type == FieldType.DATE.value
        ]


def generate_handlers(
    collection: CollectionSpec, config: GenerationConfig
) -> Mapping[str, str]:
    return EndpointGenerator(config).generate_handlers(collection)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "APP_SCHEMA_MODULE",
    "AUTH_MODULE",
    "EndpointGenerator",
    "QueryReference",
    "generate_handlers",
]

logger.debug("crouton_gen.endpoints loaded — %d public symbols.", len(__all__))
