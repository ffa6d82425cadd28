# File: crouton_gen/generator.py
"""
Crouton Gen - Collection Generation Pipeline (Orchestrator)
=============================================================
Connects the phases of one run:

    Fields file → CollectionSpec → Validation → Generation → Export

``CollectionGenerator`` backs both CLI modes:

    - single collection: ``generate_from_file(layer, name, fields_file, config)``
    - project config:    ``generate_from_config(config_path, only=None)``

All file-system work happens here and in ``exporters``; the generators in
``templates`` and ``endpoints`` are pure functions of their inputs.

Error handling:
    - Unreadable or malformed input is an *input* error (nothing generated).
    - Validation errors stop the run before generation; warnings do not.
    - A generator exception is recorded as a generation error and nothing
      is exported for that collection.
    - Write conflicts and I/O failures are export errors.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml
from pydantic import ValidationError as PydanticValidationError

from crouton_gen import __version__
from crouton_gen.endpoints import EndpointGenerator
from crouton_gen.exporters import ExportManifest, ExportResult, ProjectExporter
from crouton_gen.models import (
    CollectionEntry,
    CollectionSpec,
    FieldDefinition,
    GeneratedArtifact,
    GenerationConfig,
    ProjectConfig,
)
from crouton_gen.templates import TemplateGenerator
from crouton_gen.utils import Timer, count_lines, to_case
from crouton_gen.validators import (
    ValidationResult,
    validate_full,
    validate_project_config,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.generator")

CONFIG_FILE_NAMES: Tuple[str, ...] = (
    "crouton.config.json",
    "crouton.config.yaml",
    "crouton.config.yml",
)


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """Outcome of one collection run."""

    success: bool = False
    layer: str = ""
    collection: str = ""
    output_directory: str = ""
    dry_run: bool = False

    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    input_errors: List[str] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)
    conflicts: List[str] = field(default_factory=list)
    planned_paths: List[str] = field(default_factory=list)

    manifest: Optional[ExportManifest] = None

    @property
    def name(self) -> str:
        return f"{self.layer}/{self.collection}" if self.layer else self.collection

    def summary(self) -> str:
        """Human-readable summary."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        if self.dry_run and self.success:
            status = "✅ DRY RUN"
        lines.append("=" * 60)
        lines.append("  Crouton Gen — Generation Report")
        lines.append("=" * 60)
        lines.append(f"  Status:           {status}")
        lines.append(f"  Collection:       {self.name}")
        lines.append(f"  Output:           {self.output_directory}")
        lines.append(f"  Files:            {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append("─" * 60)

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<28s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        sections: List[Tuple[str, str, List[str]]] = [
            ("Input Errors", "✗", self.input_errors),
            ("Validation Errors", "✗", self.validation_errors),
            ("Validation Warnings", "⚠", self.validation_warnings),
            ("Generation Errors", "✗", self.generation_errors),
            ("Export Errors", "✗", self.export_errors),
        ]
        if self.dry_run:
            sections.append(("Would write", "•", self.planned_paths))
        for title, icon, items in sections:
            if not items:
                continue
            lines.append("─" * 60)
            lines.append(f"  {title} ({len(items)}):")
            for item in items:
                lines.append(f"    {icon} {item}")

        lines.append("=" * 60)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def _load_yaml_file(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc


def load_schema_file(path: Path) -> Any:
    """
    Load a JSON or YAML file, dispatching on the extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the path is not a file or can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s' — trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


def parse_fields(raw: Any, source: str = "<fields>") -> List[FieldDefinition]:
    """
    Turn raw schema data into ``FieldDefinition`` objects, keeping order.

    Accepted shapes::

        {"name": {"type": "string", "meta": {...}}, ...}
        {"name": "string", ...}
        [{"name": "name", "type": "string", "meta": {...}}, ...]
    """
    items: List[Dict[str, Any]] = []
    if isinstance(raw, dict):
        for name, spec in raw.items():
            if isinstance(spec, str):
                spec = {"type": spec}
            elif spec is None:
                spec = {}
            elif not isinstance(spec, dict):
                raise ValueError(
                    f"{source}: field '{name}' must be a mapping or a type name, "
                    f"got {type(spec).__name__}."
                )
            items.append({**spec, "name": str(name)})
    elif isinstance(raw, list):
        for index, spec in enumerate(raw):
            if not isinstance(spec, dict) or "name" not in spec:
                raise ValueError(f"{source}: item {index} must be a mapping with a 'name'.")
            items.append(spec)
    else:
        raise ValueError(
            f"{source}: expected a mapping of fields or a list, got {type(raw).__name__}."
        )

    fields: List[FieldDefinition] = []
    for item in items:
        try:
            fields.append(FieldDefinition.model_validate(item))
        except PydanticValidationError as exc:
            raise ValueError(f"{source}: invalid field '{item.get('name')}': {exc}") from exc
    return fields


def load_fields_file(path: Path) -> List[FieldDefinition]:
    """Load a fields file (JSON or YAML) in declaration order."""
    fields: List[FieldDefinition] = parse_fields(load_schema_file(path), str(path))
    logger.info("Loaded %d field(s) from %s.", len(fields), path)
    return fields


def load_project_config(path: Path) -> ProjectConfig:
    raw: Any = load_schema_file(path)
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(raw).__name__}.")
    try:
        project: ProjectConfig = ProjectConfig.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValueError(f"Invalid project config {path}: {exc}") from exc
    logger.info(
        "Loaded project config %s: %d collection(s), %d target(s).",
        path,
        len(project.collections),
        len(project.targets),
    )
    return project


def find_project_config(directory: Path) -> Optional[Path]:
    """First ``crouton.config.*`` file found in *directory*."""
    for name in CONFIG_FILE_NAMES:
        candidate: Path = directory / name
        if candidate.is_file():
            return candidate
    return None


def translatable_names(
    fields: Sequence[FieldDefinition],
    explicit: Sequence[str] = (),
    disabled: bool = False,
) -> List[str]:
    """Explicit names plus fields flagged ``meta.translatable``, unless disabled."""
    if disabled:
        return []
    names: List[str] = list(dict.fromkeys(explicit))
    for f in fields:
        if f.meta.translatable and f.name not in names:
            names.append(f.name)
    return names


# ---------------------------------------------------------------------------
# Artifact assembly
# ---------------------------------------------------------------------------


def build_artifacts(
    collection: CollectionSpec,
    config: GenerationConfig,
    include_seed: bool = True,
) -> List[GeneratedArtifact]:
    """Every file for *collection*, paths relative to the project root."""
    templates: TemplateGenerator = TemplateGenerator(config)
    endpoints: EndpointGenerator = EndpointGenerator(config)
    base: str = collection.base_dir()

    artifacts: List[GeneratedArtifact] = [
        GeneratedArtifact(f"{base}/types.ts", templates.generate_types(collection), "types"),
        GeneratedArtifact(
            f"{base}/app/composables/{collection.composable_name}.ts",
            templates.generate_composable(collection),
            "composable",
        ),
        GeneratedArtifact(
            schema_path(collection), templates.generate_schema(collection), "schema"
        ),
        GeneratedArtifact(
            f"{base}/server/database/queries.ts",
            endpoints.generate_queries(collection),
            "queries",
        ),
    ]
    if include_seed:
        artifacts.append(GeneratedArtifact(
            f"{base}/server/database/seed.ts",
            templates.generate_seed_file(collection),
            "seed",
        ))
    for path, content in endpoints.generate_handlers(collection).items():
        artifacts.append(GeneratedArtifact(path, content, "api"))
    return artifacts


def schema_path(collection: CollectionSpec) -> str:
    return f"{collection.base_dir()}/server/database/schema.ts"


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class CollectionGenerator:
    """
    Runs validation, generation and export for collections.

    Usage::

        gen = CollectionGenerator(Path("."), dry_run=True)
        report = gen.generate_from_file("shop", "products", Path("products.json"), config)
        print(report.summary())
    """

    def __init__(
        self,
        output_dir: Path,
        *,
        force: bool = False,
        dry_run: bool = False,
        update_schema_index: bool = True,
        fail_on_warnings: bool = False,
    ) -> None:
        self._output_dir: Path = output_dir
        self._force: bool = force
        self._dry_run: bool = dry_run
        self._update_schema_index: bool = update_schema_index
        self._fail_on_warnings: bool = fail_on_warnings

        logger.debug(
            "CollectionGenerator initialised: output=%s, force=%s, dry_run=%s, "
            "schema_index=%s.",
            output_dir,
            force,
            dry_run,
            update_schema_index,
        )

    # -----------------------------------------------------------------
    # Public: single collection
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        layer: str,
        collection: str,
        fields_file: Path,
        config: GenerationConfig,
        *,
        include_seed: bool = True,
        auto_translatable: bool = False,
    ) -> GenerationReport:
        """
        Load *fields_file* and run the pipeline.

        With *auto_translatable*, fields flagged ``meta.translatable`` join
        ``config.translatable_fields``.
        """
        report: GenerationReport = self._new_report(layer, collection)

        with Timer("load_fields") as t_load:
            try:
                fields: List[FieldDefinition] = load_fields_file(fields_file)
            except (FileNotFoundError, ValueError) as exc:
                fields = []
                report.input_errors.append(str(exc))
                logger.error("%s", exc)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Load Fields File",
            success=not report.input_errors,
            elapsed_seconds=t_load.elapsed,
            detail=report.input_errors[0] if report.input_errors else f"{len(fields)} fields",
        ))
        if report.input_errors:
            return self._finalise_report(report, t_load.elapsed)

        if auto_translatable:
            config = config.model_copy(update={
                "translatable_fields": translatable_names(fields, config.translatable_fields),
            })

        spec: CollectionSpec = CollectionSpec(layer=layer, collection=collection, fields=fields)
        return self._run_pipeline(spec, config, report, include_seed)

    def generate(
        self,
        collection: CollectionSpec,
        config: GenerationConfig,
        *,
        include_seed: bool = True,
    ) -> GenerationReport:
        """Pipeline for an in-memory ``CollectionSpec``."""
        report: GenerationReport = self._new_report(collection.layer, collection.collection)
        return self._run_pipeline(collection, config, report, include_seed)

    # -----------------------------------------------------------------
    # Public: project config mode
    # -----------------------------------------------------------------

    def generate_from_config(
        self,
        config_path: Path,
        only: Optional[str] = None,
    ) -> List[GenerationReport]:
        """
        Generate every target collection declared in *config_path*.

        ``flags.force``/``dryRun``/``noDb`` in the file add to the options
        this generator was created with.
        """
        try:
            project: ProjectConfig = load_project_config(config_path)
        except (FileNotFoundError, ValueError) as exc:
            report: GenerationReport = self._new_report("", str(config_path))
            report.input_errors.append(str(exc))
            logger.error("%s", exc)
            return [self._finalise_report(report, 0.0)]

        check: ValidationResult = validate_project_config(project)
        if not check.is_valid:
            report = self._new_report("", str(config_path))
            report.validation_errors.extend(str(e) for e in check.errors)
            report.validation_warnings.extend(str(w) for w in check.warnings)
            return [self._finalise_report(report, 0.0)]

        runner: CollectionGenerator = CollectionGenerator(
            self._output_dir,
            force=self._force or project.flags.force,
            dry_run=self._dry_run or project.flags.dry_run,
            update_schema_index=self._update_schema_index and not project.flags.no_db,
            fail_on_warnings=self._fail_on_warnings,
        )

        base_dir: Path = config_path.parent
        reports: List[GenerationReport] = []
        for target in project.targets:
            for name in target.collections:
                if only is not None and name != only:
                    continue
                entry: Optional[CollectionEntry] = project.collection_entry(name)
                if entry is None:
                    continue
                reports.append(runner._generate_entry(project, target.layer, entry, base_dir))

        if only is not None and not reports:
            report = self._new_report("", only)
            report.input_errors.append(
                f"Collection '{only}' is not part of any target in {config_path}."
            )
            reports.append(self._finalise_report(report, 0.0))
        return reports

    def _generate_entry(
        self,
        project: ProjectConfig,
        layer: str,
        entry: CollectionEntry,
        base_dir: Path,
    ) -> GenerationReport:
        fields_file: Path = Path(entry.fields_file)
        if not fields_file.is_absolute():
            fields_file = base_dir / fields_file

        per_collection: List[str] = (
            project.translations.collections.get(to_case(entry.name).plural)
            or project.translations.collections.get(entry.name)
            or []
        )
        explicit: List[str] = list(dict.fromkeys([*entry.translatable, *per_collection]))

        try:
            fields: List[FieldDefinition] = load_fields_file(fields_file)
        except (FileNotFoundError, ValueError) as exc:
            report: GenerationReport = self._new_report(layer, entry.name)
            report.input_errors.append(str(exc))
            logger.error("%s", exc)
            return self._finalise_report(report, 0.0)

        config: GenerationConfig = GenerationConfig(
            dialect=project.dialect,
            use_metadata=project.flags.use_metadata,
            translatable_fields=translatable_names(
                fields, explicit, disabled=project.flags.no_translations
            ),
            hierarchy=entry.hierarchy,
            sortable=entry.sortable,
            seed_count=entry.seed_count or project.seed.default_count,
            team_id=project.seed.default_team_id,
            use_layer_aliases=project.flags.use_layer_aliases,
        )
        spec: CollectionSpec = CollectionSpec(layer=layer, collection=entry.name, fields=fields)
        report = self._new_report(layer, entry.name)
        return self._run_pipeline(spec, config, report, entry.seed)

    # -----------------------------------------------------------------
    # Internal: pipeline
    # -----------------------------------------------------------------

    def _new_report(self, layer: str, collection: str) -> GenerationReport:
        return GenerationReport(
            layer=layer,
            collection=collection,
            output_directory=str(self._output_dir.resolve()),
            dry_run=self._dry_run,
        )

    def _run_pipeline(
        self,
        collection: CollectionSpec,
        config: GenerationConfig,
        report: GenerationReport,
        include_seed: bool,
    ) -> GenerationReport:
        start: float = time.perf_counter()

        if not self._step_validate(collection, config, report):
            return self._finalise_report(report, time.perf_counter() - start)

        artifacts: List[GeneratedArtifact] = self._step_generate(
            collection, config, report, include_seed
        )
        if report.generation_errors:
            return self._finalise_report(report, time.perf_counter() - start)

        self._step_export(collection, artifacts, report)
        return self._finalise_report(report, time.perf_counter() - start)

    def _step_validate(
        self,
        collection: CollectionSpec,
        config: GenerationConfig,
        report: GenerationReport,
    ) -> bool:
        with Timer("validation") as t:
            result: ValidationResult = validate_full(collection, config)

        report.validation_errors.extend(str(e) for e in result.errors)
        report.validation_warnings.extend(str(w) for w in result.warnings)

        if result.errors:
            detail: str = f"{len(result.errors)} error(s)"
        elif result.warnings:
            detail = f"{len(result.warnings)} warning(s)"
        else:
            detail = "all checks passed"

        ok: bool = result.is_valid
        if ok and self._fail_on_warnings and result.warnings:
            report.validation_errors.extend(
                f"Warning treated as error: {w}" for w in result.warnings
            )
            ok = False

        report.step_metrics.append(GenerationStepMetric(
            step_name="Validate Collection",
            success=ok,
            elapsed_seconds=t.elapsed,
            detail=detail,
        ))

        for err in result.errors:
            logger.error("  ✗ %s", err)
        for warn in result.warnings:
            logger.warning("  ⚠ %s", warn)
        return ok

    def _step_generate(
        self,
        collection: CollectionSpec,
        config: GenerationConfig,
        report: GenerationReport,
        include_seed: bool,
    ) -> List[GeneratedArtifact]:
        artifacts: List[GeneratedArtifact] = []
        with Timer("code_generation") as t:
            try:
                artifacts = build_artifacts(collection, config, include_seed)
            except Exception as exc:
                error_msg: str = f"Fatal generation error: {type(exc).__name__}: {exc}"
                report.generation_errors.append(error_msg)
                logger.error(error_msg, exc_info=True)

        total_lines: int = sum(count_lines(a.content) for a in artifacts)
        detail: str = f"{len(artifacts)} files, ~{total_lines:,} lines"
        report.step_metrics.append(GenerationStepMetric(
            step_name="Code Generation",
            success=not report.generation_errors,
            elapsed_seconds=t.elapsed,
            detail=detail,
        ))
        logger.info("Code generation for %s: %s in %.3fs.", collection.export_name, detail, t.elapsed)
        return artifacts

    def _step_export(
        self,
        collection: CollectionSpec,
        artifacts: List[GeneratedArtifact],
        report: GenerationReport,
    ) -> None:
        with Timer("export") as t:
            exporter: ProjectExporter = ProjectExporter(
                self._output_dir,
                force=self._force,
                dry_run=self._dry_run,
                update_schema_index=self._update_schema_index,
                generator_version=__version__,
            )
            result: ExportResult = exporter.export(
                artifacts,
                schema_exports=[(collection.export_name, schema_path(collection))],
            )

        manifest: ExportManifest = result.manifest
        report.manifest = manifest
        report.total_files = manifest.total_files
        report.total_bytes = manifest.total_bytes
        report.total_lines = manifest.total_lines
        report.export_errors.extend(result.errors)
        report.conflicts.extend(result.conflicts)
        report.planned_paths.extend(manifest.paths())

        report.step_metrics.append(GenerationStepMetric(
            step_name="Dry Run" if self._dry_run else "Export to Filesystem",
            success=result.success,
            elapsed_seconds=t.elapsed,
            detail=f"{manifest.total_files} files, {manifest.total_bytes:,} bytes",
        ))

    @staticmethod
    def _finalise_report(report: GenerationReport, total_elapsed: float) -> GenerationReport:
        report.total_elapsed_seconds = total_elapsed
        report.success = not (
            report.input_errors
            or report.validation_errors
            or report.generation_errors
            or report.export_errors
        )
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CONFIG_FILE_NAMES",
    "CollectionGenerator",
    "GenerationReport",
    "GenerationStepMetric",
    "build_artifacts",
    "find_project_config",
    "load_fields_file",
    "load_project_config",
    "load_schema_file",
    "parse_fields",
    "schema_path",
    "translatable_names",
]

logger.debug("crouton_gen.generator loaded — %d public symbols.", len(__all__))
