# File: crouton_gen/__init__.py
"""
Crouton Gen — Collection Code Generator
=========================================

Turns a collection's field list (JSON/YAML) into a consistent set of
TypeScript sources for a layered Nuxt application: Drizzle table schema,
Zod-validated composable, entity types, queries, a seed script and
team-scoped CRUD handlers, for SQLite or PostgreSQL.

Architecture overview::

    ┌──────────────┐     ┌─────────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ CollectionGenerator │────▶│ TemplateGenerator│
    │   (cli.py)   │     │   (generator.py)    │     │ EndpointGenerator│
    └──────────────┘     └──────────┬──────────┘     └──────────────────┘
                                    │
                    ┌───────────────┼───────────────┐
                    ▼               ▼               ▼
             ┌──────────┐    ┌───────────┐    ┌───────────┐
             │validators│    │  models   │    │ exporters │
             └──────────┘    └───────────┘    └───────────┘

Usage::

    # As a library
    from crouton_gen import CollectionGenerator, GenerationConfig
    gen = CollectionGenerator(Path("."))
    report = gen.generate_from_file("shop", "products", Path("products.json"),
                                    GenerationConfig(dialect="pg"))

    # From the command line
    crouton-generate shop products --fields-file products.json --dry-run
    python -m crouton_gen config ./crouton.config.yaml
"""

from __future__ import annotations

__version__: str = "0.1.0"
__license__: str = "MIT"

from crouton_gen.models import (
    CollectionSpec,
    Dialect,
    FieldDefinition,
    FieldMeta,
    GeneratedArtifact,
    GenerationConfig,
    HierarchyConfig,
    ProjectConfig,
    SortableConfig,
)
from crouton_gen.type_mapping import FieldType, TypeSpec, map_type
from crouton_gen.validators import ValidationResult, validate_full
from crouton_gen.templates import (
    TemplateGenerator,
    generate_composable,
    generate_schema,
    generate_seed_file,
    generate_types,
)
from crouton_gen.endpoints import EndpointGenerator, generate_handlers
from crouton_gen.exporters import ExportManifest, ExportResult, ProjectExporter
from crouton_gen.generator import (
    CollectionGenerator,
    GenerationReport,
    build_artifacts,
    load_fields_file,
    load_project_config,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    "__version__",
    "__license__",
    # Orchestrator
    "CollectionGenerator",
    "GenerationReport",
    "build_artifacts",
    "load_fields_file",
    "load_project_config",
    # Models
    "CollectionSpec",
    "Dialect",
    "FieldDefinition",
    "FieldMeta",
    "FieldType",
    "GeneratedArtifact",
    "GenerationConfig",
    "HierarchyConfig",
    "ProjectConfig",
    "SortableConfig",
    "TypeSpec",
    "map_type",
    # Validation
    "ValidationResult",
    "validate_full",
    # Generators
    "EndpointGenerator",
    "TemplateGenerator",
    "generate_composable",
    "generate_handlers",
    "generate_schema",
    "generate_seed_file",
    "generate_types",
    # Export
    "ExportManifest",
    "ExportResult",
    "ProjectExporter",
]
