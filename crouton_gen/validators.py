# File: crouton_gen/validators.py
"""
Crouton Gen - Collection & Configuration Validators
=====================================================
Pydantic enforces the shape of every input model.  This module adds the
semantic checks that span several fields or the config: identifier
validity, duplicate names, reserved names, translatable fields that do not
exist, colliding hierarchy columns and project-config cross references.

Every check returns a ``ValidationResult``; ``validate_full`` merges them.

Usage:
    from crouton_gen.validators import validate_full
    result = validate_full(collection, config)
    if not result.is_valid:
        print(result.format_report())
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Any, Callable, Dict, List, Optional, Set

from crouton_gen.models import (
    CollectionSpec,
    FieldDefinition,
    GenerationConfig,
    ProjectConfig,
)
from crouton_gen.templates import METADATA_FIELDS, TEAM_FIELDS, reserved_field_names
from crouton_gen.type_mapping import CANONICAL_TYPES, FieldType
from crouton_gen.utils import is_identifier

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.validators")


# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """A single finding: level, machine-readable code, message, context."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ValidationResult:
    """Accumulates ``ValidationError`` items from the individual checks."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    def add_error(
        self, code: str, message: str, context: Optional[Dict[str, Any]] = None
    ) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(
        self, code: str, message: str, context: Optional[Dict[str, Any]] = None
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def add_info(
        self, code: str, message: str, context: Optional[Dict[str, Any]] = None
    ) -> None:
        self._items.append(ValidationError("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def all_items(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self._items if e.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self._items if e.is_warning)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {self.error_count} error(s), "
            f"{self.warning_count} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are no errors."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            if not include_info and item.level == "info":
                continue
            prefix: str = {
                "error": "❌",
                "warning": "⚠️",
                "info": "ℹ️",
            }.get(item.level, "•")
            lines.append(f"  {prefix} [{item.code}] {item.message}")
            for k, v in item.context.items():
                lines.append(f"       {k}: {v}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# Layers and collections end up in directory names, route segments and
# (after case conversion) identifiers.
_LAYER_RE: re.Pattern[str] = re.compile(r"^[a-z][a-z0-9]*([-_][a-z0-9]+)*$")
_COLLECTION_RE: re.Pattern[str] = re.compile(r"^[a-zA-Z][a-zA-Z0-9]*([-_][a-zA-Z0-9]+)*$")

_TEXT_TYPES: Set[str] = {FieldType.STRING.value, FieldType.TEXT.value}


# ---------------------------------------------------------------------------
# Collection checks
# ---------------------------------------------------------------------------


def validate_names(collection: CollectionSpec) -> ValidationResult:
    """Layer and collection names must be usable as path segments and identifiers."""
    result: ValidationResult = ValidationResult()
    if not _LAYER_RE.match(collection.layer):
        result.add_error(
            "INVALID_LAYER_NAME",
            f"Layer name '{collection.layer}' must be lowercase letters/digits, "
            f"optionally separated by '-' or '_'.",
            {"layer": collection.layer},
        )
    if not _COLLECTION_RE.match(collection.collection):
        result.add_error(
            "INVALID_COLLECTION_NAME",
            f"Collection name '{collection.collection}' must start with a letter "
            f"and contain only letters, digits, '-' or '_'.",
            {"collection": collection.collection},
        )
    return result


def validate_field_names(collection: CollectionSpec) -> ValidationResult:
    """Non-empty field list of unique, valid TypeScript identifiers."""
    result: ValidationResult = ValidationResult()

    if not collection.fields:
        result.add_error(
            "NO_FIELDS",
            f"Collection '{collection.collection}' defines no fields.",
            {"collection": collection.collection},
        )
        return result

    for f in collection.fields:
        if not is_identifier(f.name):
            result.add_error(
                "INVALID_FIELD_NAME",
                f"Field name '{f.name}' is not a valid TypeScript identifier.",
                {"field": f.name},
            )

    counts: Counter[str] = Counter(f.name for f in collection.fields)
    for name, count in counts.items():
        if count > 1:
            result.add_error(
                "DUPLICATE_FIELD_NAME",
                f"Field '{name}' is defined {count} times.",
                {"field": name},
            )
    return result


def validate_field_types(collection: CollectionSpec) -> ValidationResult:
    """Warn about raw types that were normalised to ``string``."""
    result: ValidationResult = ValidationResult()
    for f in collection.fields:
        raw: Optional[str] = f.raw_type
        if raw and raw not in CANONICAL_TYPES:
            result.add_warning(
                "UNKNOWN_FIELD_TYPE",
                f"Field '{f.name}' has unknown type '{raw}'; it is generated as 'string'.",
                {"field": f.name, "type": raw},
            )
    return result


def validate_reserved_fields(
    collection: CollectionSpec, config: GenerationConfig
) -> ValidationResult:
    """Fields named like generated columns are skipped; say so."""
    result: ValidationResult = ValidationResult()
    reserved: Set[str] = set(reserved_field_names(config))
    for f in collection.fields:
        if f.name in reserved:
            result.add_warning(
                "RESERVED_FIELD_NAME",
                f"Field '{f.name}' is generated automatically and will be skipped.",
                {"field": f.name},
            )
    return result


def validate_field_constraints(collection: CollectionSpec) -> ValidationResult:
    result: ValidationResult = ValidationResult()
    for f in collection.fields:
        meta = f.meta
        if (
            meta.precision is not None
            and meta.scale is not None
            and meta.scale > meta.precision
        ):
            result.add_error(
                "INVALID_DECIMAL_SCALE",
                f"Field '{f.name}': scale ({meta.scale}) exceeds precision "
                f"({meta.precision}).",
                {"field": f.name},
            )
        if meta.primary_key and f.name != "id":
            result.add_warning(
                "EXTRA_PRIMARY_KEY",
                f"Field '{f.name}' is marked primaryKey; the table already has "
                f"a generated 'id' primary key.",
                {"field": f.name},
            )
        if f.ref_target and f.ref_target == collection.collection:
            result.add_info(
                "SELF_REFERENCE",
                f"Field '{f.name}' references its own collection.",
                {"field": f.name},
            )
    return result


def validate_translations(
    collection: CollectionSpec, config: GenerationConfig
) -> ValidationResult:
    """Every translatable name must exist; non-text translatables get a warning."""
    result: ValidationResult = ValidationResult()
    by_name: Dict[str, FieldDefinition] = {f.name: f for f in collection.fields}

    for name in config.translatable_fields:
        if name not in by_name:
            result.add_error(
                "UNKNOWN_TRANSLATABLE_FIELD",
                f"Translatable field '{name}' is not defined in the collection.",
                {"field": name},
            )

    wanted: Set[str] = set(config.translatable_fields)
    for f in collection.fields:
        if (f.name in wanted or f.meta.translatable) and f.type not in _TEXT_TYPES:
            result.add_warning(
                "NON_TEXT_TRANSLATABLE",
                f"Translatable field '{f.name}' has type '{f.type}'; translations "
                f"are stored as strings.",
                {"field": f.name},
            )
    return result


def validate_generation_config(config: GenerationConfig) -> ValidationResult:
    """Feature column names must not collide with each other or fixed columns."""
    result: ValidationResult = ValidationResult()
    fixed: List[str] = ["id", *TEAM_FIELDS]
    if config.use_metadata:
        fixed.extend(METADATA_FIELDS)

    if config.hierarchy.enabled:
        names: List[str] = config.hierarchy.field_names()
        counts: Counter[str] = Counter(names)
        for name, count in counts.items():
            if count > 1:
                result.add_error(
                    "HIERARCHY_FIELD_CONFLICT",
                    f"Hierarchy column name '{name}' is used for {count} roles.",
                    {"field": name},
                )
        for name in names:
            if name in fixed:
                result.add_error(
                    "HIERARCHY_FIELD_CONFLICT",
                    f"Hierarchy column '{name}' collides with a generated column.",
                    {"field": name},
                )
    elif config.sortable.enabled and config.sortable.order_field in fixed:
        result.add_error(
            "SORTABLE_FIELD_CONFLICT",
            f"Sortable column '{config.sortable.order_field}' collides with a "
            f"generated column.",
            {"field": config.sortable.order_field},
        )
    return result


# ---------------------------------------------------------------------------
# Project config checks
# ---------------------------------------------------------------------------


def validate_project_config(project: ProjectConfig) -> ValidationResult:
    """
    Cross-reference collections and targets.

    The dialect itself is checked when the file is loaded.
    """
    result: ValidationResult = ValidationResult()

    if not project.collections:
        result.add_error("NO_COLLECTIONS", "Config declares no collections.")
    if not project.targets:
        result.add_error("NO_TARGETS", "Config declares no targets.")

    counts: Counter[str] = Counter(c.name for c in project.collections)
    for name, count in counts.items():
        if count > 1:
            result.add_error(
                "DUPLICATE_COLLECTION",
                f"Collection '{name}' is declared {count} times.",
                {"collection": name},
            )

    declared: Set[str] = set(counts)
    for target in project.targets:
        if not _LAYER_RE.match(target.layer):
            result.add_error(
                "INVALID_LAYER_NAME",
                f"Target layer '{target.layer}' is not a valid layer name.",
                {"layer": target.layer},
            )
        if not target.collections:
            result.add_warning(
                "EMPTY_TARGET",
                f"Target layer '{target.layer}' lists no collections.",
                {"layer": target.layer},
            )
        for name in target.collections:
            if name not in declared:
                result.add_error(
                    "UNKNOWN_TARGET_COLLECTION",
                    f"Target '{target.layer}' references undeclared collection '{name}'.",
                    {"layer": target.layer, "collection": name},
                )
    logger.info("Project config validation complete: %s", result.summary())
    return result


# ---------------------------------------------------------------------------
# Aggregate entry point
# ---------------------------------------------------------------------------


def validate_full(collection: CollectionSpec, config: GenerationConfig) -> ValidationResult:
    """
    Run every collection and config check.

    This is what the orchestrator calls before generating anything.
    """
    logger.info(
        "Starting validation of %s/%s — %d fields, dialect=%s",
        collection.layer,
        collection.collection,
        len(collection.fields),
        config.dialect,
    )
    result: ValidationResult = ValidationResult()

    collection_checks: List[Callable[[CollectionSpec], ValidationResult]] = [
        validate_names,
        validate_field_names,
        validate_field_types,
        validate_field_constraints,
    ]
    for check in collection_checks:
        logger.debug("Running validator: %s", check.__name__)
        result.merge(check(collection))

    result.merge(validate_reserved_fields(collection, config))
    result.merge(validate_translations(collection, config))
    result.merge(validate_generation_config(config))

    if result.has_errors:
        logger.error(
            "Validation FAILED with %d error(s). %s",
            result.error_count,
            result.summary(),
        )
    else:
        logger.info("Validation PASSED. %s", result.summary())
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_field_constraints",
    "validate_field_names",
    "validate_field_types",
    "validate_full",
    "validate_generation_config",
    "validate_names",
    "validate_project_config",
    "validate_reserved_fields",
    "validate_translations",
]

logger.debug("crouton_gen.validators loaded — %d public symbols.", len(__all__))
