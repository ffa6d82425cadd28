# File: crouton_gen/models.py
"""
Crouton Gen - Core Data Models
================================
Pydantic V2 models for everything the generators consume: field definitions
read from a schema file, the per-run generation options, the collection
being generated and the project-wide configuration used in config mode.

Defaults are applied here and nowhere else.  A generator receiving a
``GenerationConfig`` never has to guess at a missing option, and a
``FieldDefinition`` always carries a canonical type and a ``FieldMeta``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from crouton_gen.type_mapping import FieldType, TypeSpec, map_type, type_spec
from crouton_gen.utils import CaseForms, pascal, to_camel_case, to_case, to_snake_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.models")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Dialect(str, Enum):
    """Target SQL dialects."""

    SQLITE = "sqlite"
    POSTGRES = "pg"


_DIALECT_ALIASES: Dict[str, str] = {
    "sqlite": Dialect.SQLITE.value,
    "pg": Dialect.POSTGRES.value,
    "postgres": Dialect.POSTGRES.value,
    "postgresql": Dialect.POSTGRES.value,
}


def normalise_dialect(value: Any) -> str:
    """Map accepted dialect spellings to ``sqlite`` / ``pg``."""
    if value is None or value == "":
        return Dialect.SQLITE.value
    if isinstance(value, Dialect):
        return value.value
    key: str = str(value).strip().lower()
    if key not in _DIALECT_ALIASES:
        raise ValueError(
            f"Unsupported dialect '{value}'. Expected one of: sqlite, pg."
        )
    return _DIALECT_ALIASES[key]


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    use_enum_values=True,
    frozen=False,
    extra="forbid",
)

# Schema and project files carry UI hints this package does not use.
_INPUT_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    use_enum_values=True,
    frozen=False,
    extra="ignore",
)


# ---------------------------------------------------------------------------
# Field definitions
# ---------------------------------------------------------------------------


class FieldMeta(BaseModel):
    """Per-field flags.  Every flag is optional and defaults to off."""

    model_config = _INPUT_CONFIG

    required: bool = Field(default=False, description="Value must be present.")
    unique: bool = Field(default=False, description="Add a uniqueness constraint.")
    primary_key: bool = Field(
        default=False, alias="primaryKey", description="Column is the primary key."
    )
    max_length: Optional[int] = Field(
        default=None, ge=1, alias="maxLength", description="VARCHAR length (pg)."
    )
    precision: Optional[int] = Field(
        default=None, ge=1, description="Total digits for decimal columns (pg)."
    )
    scale: Optional[int] = Field(
        default=None, ge=0, description="Digits after the point for decimals (pg)."
    )
    label: Optional[str] = Field(default=None, description="Human label.")
    translatable: bool = Field(
        default=False, description="Value is stored per locale in translations."
    )
    nullable: bool = Field(
        default=False, description="Optional value that may also be null."
    )
    default: Any = Field(default=None, description="Default value for booleans.")
    area: str = Field(default="main", description="Form area the field renders in.")
    repeater_component: Optional[str] = Field(
        default=None, alias="repeaterComponent", description="Item editor component."
    )
    depends_on: Optional[str] = Field(default=None, alias="dependsOn")
    depends_on_collection: Optional[str] = Field(
        default=None, alias="dependsOnCollection"
    )
    display_as: Optional[str] = Field(default=None, alias="displayAs")


class FieldDefinition(BaseModel):
    """One field of a collection, with its type normalised on the way in."""

    model_config = _INPUT_CONFIG

    name: str = Field(..., min_length=1, description="Field identifier (camelCase).")
    type: FieldType = Field(default=FieldType.STRING.value, description="Canonical type.")
    meta: FieldMeta = Field(default_factory=FieldMeta, description="Field flags.")
    ref_target: Optional[str] = Field(
        default=None, alias="refTarget", description="Referenced collection."
    )
    ref_scope: Optional[str] = Field(
        default=None, alias="refScope", description="'local' or 'external'."
    )
    raw_type: Optional[str] = Field(
        default=None,
        alias="rawType",
        exclude=True,
        description="Type string as written in the schema file.",
    )

    @model_validator(mode="before")
    @classmethod
    def _keep_raw_type(cls, data: Any) -> Any:
        if isinstance(data, dict) and "type" in data and data.get("rawType") is None:
            data = dict(data)
            raw: Any = data["type"]
            if isinstance(raw, Enum):
                raw = raw.value
            data["rawType"] = None if raw is None else str(raw)
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _normalise_type(cls, v: Any) -> str:
        return map_type(v)

    @field_validator("meta", mode="before")
    @classmethod
    def _default_meta(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def spec(self) -> TypeSpec:
        """Type-table entry for this field."""
        return type_spec(self.type)

    @property
    def is_dependent(self) -> bool:
        """Field holds ids selected from another collection."""
        meta: FieldMeta = self.meta
        return bool(meta.depends_on and meta.depends_on_collection) or (
            meta.display_as == "slotButtonGroup"
        )

    def __repr__(self) -> str:
        req: str = " required" if self.meta.required else ""
        return f"<Field {self.name}: {self.type}{req}>"


# ---------------------------------------------------------------------------
# Feature configuration
# ---------------------------------------------------------------------------


class HierarchyConfig(BaseModel):
    """Tree structure columns (parent, materialised path, depth, order)."""

    model_config = _SHARED_CONFIG

    enabled: bool = False
    parent_field: str = Field(default="parentId", min_length=1, alias="parentField")
    path_field: str = Field(default="path", min_length=1, alias="pathField")
    depth_field: str = Field(default="depth", min_length=1, alias="depthField")
    order_field: str = Field(default="order", min_length=1, alias="orderField")

    def field_names(self) -> List[str]:
        return [self.parent_field, self.path_field, self.depth_field, self.order_field]


class SortableConfig(BaseModel):
    """Flat drag-reorder support (a single order column)."""

    model_config = _SHARED_CONFIG

    enabled: bool = False
    order_field: str = Field(default="order", min_length=1, alias="orderField")


def _coerce_feature(v: Any) -> Any:
    """Accept ``true``/``false`` shorthand for feature blocks."""
    if v is None:
        return {}
    if isinstance(v, bool):
        return {"enabled": v}
    return v


class GenerationConfig(BaseModel):
    """
    Options shared by every generator for one collection.

    ``hierarchy`` wins over ``sortable``: when both are enabled the sortable
    block is switched off here, so the generators only ever see one of them.
    """

    model_config = _SHARED_CONFIG

    dialect: Dialect = Field(default=Dialect.SQLITE.value, description="sqlite or pg.")
    use_metadata: bool = Field(
        default=True, alias="useMetadata", description="Emit audit columns."
    )
    use_translations: bool = Field(
        default=False, alias="useTranslations", description="Emit translations."
    )
    translatable_fields: List[str] = Field(
        default_factory=list,
        alias="translatableFields",
        description="Field names stored per locale.",
    )
    hierarchy: HierarchyConfig = Field(default_factory=HierarchyConfig)
    sortable: SortableConfig = Field(default_factory=SortableConfig)
    seed_count: int = Field(default=6, ge=1, alias="seedCount")
    team_id: str = Field(default="placeholder-team", min_length=1, alias="teamId")
    use_layer_aliases: bool = Field(
        default=False,
        alias="useLayerAliases",
        description="Import through #layers aliases instead of relative paths.",
    )
    generated_at: Optional[str] = Field(
        default=None,
        alias="generatedAt",
        description="Timestamp written into file headers; omitted when None.",
    )

    @field_validator("dialect", mode="before")
    @classmethod
    def _normalise_dialect(cls, v: Any) -> str:
        return normalise_dialect(v)

    @field_validator("hierarchy", "sortable", mode="before")
    @classmethod
    def _feature_shorthand(cls, v: Any) -> Any:
        return _coerce_feature(v)

    @model_validator(mode="after")
    def _hierarchy_wins(self) -> "GenerationConfig":
        # Also runs on assignment (validate_assignment).
        if self.hierarchy.enabled and self.sortable.enabled:
            logger.warning(
                "Both hierarchy and sortable are enabled; hierarchy takes "
                "precedence and sortable is disabled."
            )
            object.__setattr__(
                self,
                "sortable",
                SortableConfig(enabled=False, order_field=self.sortable.order_field),
            )
        return self

    @property
    def translations_enabled(self) -> bool:
        """Translations are on when requested or when any field is translatable."""
        return self.use_translations or bool(self.translatable_fields)


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------


class CollectionSpec(BaseModel):
    """A collection inside a layer, with every derived identifier."""

    model_config = _SHARED_CONFIG

    layer: str = Field(..., min_length=1, description="Layer name (e.g. 'shop').")
    collection: str = Field(..., min_length=1, description="Collection name.")
    fields: List[FieldDefinition] = Field(default_factory=list)

    @property
    def cases(self) -> CaseForms:
        return to_case(self.collection)

    @computed_field  # type: ignore[misc]
    @property
    def layer_camel_case(self) -> str:
        return to_camel_case(self.layer)

    @computed_field  # type: ignore[misc]
    @property
    def layer_pascal_case(self) -> str:
        return pascal(self.layer)

    @computed_field  # type: ignore[misc]
    @property
    def export_name(self) -> str:
        """Table binding, e.g. ``shopProducts``."""
        return f"{self.layer_camel_case}{self.cases.pascal_case_plural}"

    @computed_field  # type: ignore[misc]
    @property
    def table_name(self) -> str:
        """Physical table name, e.g. ``shop_products``."""
        return to_snake_case(f"{self.layer}_{self.cases.plural}")

    @computed_field  # type: ignore[misc]
    @property
    def api_path(self) -> str:
        """API directory / route segment, e.g. ``shop-products``."""
        return f"{self.layer}-{self.cases.plural}"

    @computed_field  # type: ignore[misc]
    @property
    def prefixed_pascal_case(self) -> str:
        return f"{self.layer_pascal_case}{self.cases.pascal_case}"

    @computed_field  # type: ignore[misc]
    @property
    def prefixed_pascal_case_plural(self) -> str:
        return f"{self.layer_pascal_case}{self.cases.pascal_case_plural}"

    @computed_field  # type: ignore[misc]
    @property
    def composable_name(self) -> str:
        return f"use{self.prefixed_pascal_case_plural}"

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def base_dir(self) -> str:
        """Collection root relative to the project root."""
        return f"layers/{self.layer}/collections/{self.cases.plural}"

    def __repr__(self) -> str:
        return f"<Collection {self.layer}/{self.collection} ({len(self.fields)} fields)>"


# ---------------------------------------------------------------------------
# Generated output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GeneratedArtifact:
    """One generated file: path relative to the project root plus its text."""

    path: str
    content: str
    kind: str = ""


# ---------------------------------------------------------------------------
# Project configuration (config mode)
# ---------------------------------------------------------------------------


class CollectionEntry(BaseModel):
    """A collection declared in the project config."""

    model_config = _INPUT_CONFIG

    name: str = Field(..., min_length=1)
    fields_file: str = Field(..., min_length=1, alias="fieldsFile")
    hierarchy: HierarchyConfig = Field(default_factory=HierarchyConfig)
    sortable: SortableConfig = Field(default_factory=SortableConfig)
    seed: bool = True
    seed_count: Optional[int] = Field(default=None, ge=1, alias="seedCount")
    translatable: List[str] = Field(default_factory=list)

    @field_validator("hierarchy", "sortable", mode="before")
    @classmethod
    def _feature_shorthand(cls, v: Any) -> Any:
        return _coerce_feature(v)


class TargetEntry(BaseModel):
    """A layer and the collections generated into it."""

    model_config = _INPUT_CONFIG

    layer: str = Field(..., min_length=1)
    collections: List[str] = Field(default_factory=list)


class TranslationsConfig(BaseModel):
    model_config = _INPUT_CONFIG

    collections: Dict[str, List[str]] = Field(default_factory=dict)


class ProjectFlags(BaseModel):
    model_config = _INPUT_CONFIG

    use_metadata: bool = Field(default=True, alias="useMetadata")
    use_layer_aliases: bool = Field(default=False, alias="useLayerAliases")
    no_translations: bool = Field(default=False, alias="noTranslations")
    force: bool = False
    no_db: bool = Field(default=False, alias="noDb")
    dry_run: bool = Field(default=False, alias="dryRun")


class SeedDefaults(BaseModel):
    model_config = _INPUT_CONFIG

    default_count: int = Field(default=6, ge=1, alias="defaultCount")
    default_team_id: str = Field(
        default="placeholder-team", min_length=1, alias="defaultTeamId"
    )


class ProjectConfig(BaseModel):
    """Contents of ``crouton.config.json`` / ``.yaml``."""

    model_config = _INPUT_CONFIG

    dialect: Dialect = Dialect.SQLITE.value
    collections: List[CollectionEntry] = Field(default_factory=list)
    targets: List[TargetEntry] = Field(default_factory=list)
    translations: TranslationsConfig = Field(default_factory=TranslationsConfig)
    flags: ProjectFlags = Field(default_factory=ProjectFlags)
    seed: SeedDefaults = Field(default_factory=SeedDefaults)

    @field_validator("dialect", mode="before")
    @classmethod
    def _normalise_dialect(cls, v: Any) -> str:
        return normalise_dialect(v)

    def collection_entry(self, name: str) -> Optional[CollectionEntry]:
        for entry in self.collections:
            if entry.name == name:
                return entry
        return None


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CaseForms",
    "CollectionEntry",
    "CollectionSpec",
    "Dialect",
    "FieldDefinition",
    "FieldMeta",
    "FieldType",
    "GeneratedArtifact",
    "GenerationConfig",
    "HierarchyConfig",
    "ProjectConfig",
    "ProjectFlags",
    "SeedDefaults",
    "SortableConfig",
    "TargetEntry",
    "TranslationsConfig",
    "normalise_dialect",
]

logger.debug("crouton_gen.models loaded — %d public symbols.", len(__all__))
