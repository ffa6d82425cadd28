# File: crouton_gen/exporters.py
"""
Crouton Gen - File Exporter
=============================
Writes generated artifacts under a project root.

Export runs in two passes:

    1. Plan: compare every artifact with what is on disk and classify it as
       ``create``, ``update``, ``unchanged`` or ``conflict``.
    2. Write: only when the plan has no conflicts (or ``force`` is set).

A conflict is an existing file whose content differs from the regenerated
text.  Identical content is ``unchanged`` and never blocks an export.  When
any conflict blocks the run nothing is written, so a collection is never
left half-generated.  Each individual write is atomic (temp file + rename).

The app-level schema index (``server/db/schema.ts``) is planned the same
way: one ``export { name } from '<path>'`` line per collection.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from crouton_gen.models import GeneratedArtifact
from crouton_gen.utils import Timer, count_lines, read_file, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.exporters")

SCHEMA_INDEX_PATH: str = "server/db/schema.ts"

STATUS_CREATE: str = "create"
STATUS_UPDATE: str = "update"
STATUS_UNCHANGED: str = "unchanged"
STATUS_CONFLICT: str = "conflict"

_EXPORT_LINE_RE: re.Pattern[str] = re.compile(
    r"^export\s*\{\s*(\w+)\s*\}\s*from\s*['\"]([^'\"]+)['\"]"
)


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Outcome for one file."""

    relative_path: str
    absolute_path: str
    status: str
    size_bytes: int
    line_count: int
    sha256: str
    written: bool = False


@dataclass(frozen=False, slots=True)
class ExportManifest:
    """Every file the export touched or would touch."""

    generator_version: str = ""
    output_directory: str = ""
    dry_run: bool = False
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    files: List[FileRecord] = field(default_factory=list)

    def paths(self, status: Optional[str] = None) -> List[str]:
        return [
            f.relative_path for f in self.files if status is None or f.status == status
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generator_version": self.generator_version,
            "output_directory": self.output_directory,
            "dry_run": self.dry_run,
            "total_files": self.total_files,
            "total_bytes": self.total_bytes,
            "total_lines": self.total_lines,
            "files": [
                {
                    "relative_path": f.relative_path,
                    "status": f.status,
                    "size_bytes": f.size_bytes,
                    "line_count": f.line_count,
                    "sha256": f.sha256,
                    "written": f.written,
                }
                for f in self.files
            ],
        }

    def to_json(self, indent_size: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent_size, ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Returned by ``ProjectExporter.export()``."""

    success: bool
    manifest: ExportManifest
    errors: Tuple[str, ...]
    warnings: Tuple[str, ...]
    conflicts: Tuple[str, ...]
    elapsed_seconds: float


# ---------------------------------------------------------------------------
# Schema index
# ---------------------------------------------------------------------------


def schema_index_line(export_name: str, schema_path: str) -> str:
    """Index line for a collection schema given its project-relative path."""
    module: str = schema_path[:-3] if schema_path.endswith(".ts") else schema_path
    return f"export {{ {export_name} }} from '../../{module}'"


def merge_schema_index(
    existing: str,
    exports: Sequence[Tuple[str, str]],
    force: bool = False,
) -> Tuple[str, List[str]]:
    """
    Add one export line per ``(export_name, schema_path)`` to *existing*.

    Returns the new text and the names whose existing export points
    somewhere else.  Those lines are replaced only when *force* is set.
    """
    lines: List[str] = existing.splitlines() if existing else []
    conflicts: List[str] = []

    for export_name, schema_path in exports:
        wanted: str = schema_index_line(export_name, schema_path)
        found: Optional[int] = None
        for i, line in enumerate(lines):
            match = _EXPORT_LINE_RE.match(line.strip())
            if match and match.group(1) == export_name:
                found = i
                break

        if found is None:
            lines.append(wanted)
        elif lines[found].strip() != wanted:
            if force:
                lines[found] = wanted
            else:
                conflicts.append(export_name)

    text: str = "\n".join(lines)
    return (text + "\n" if text else text), conflicts


# ---------------------------------------------------------------------------
# Exporter
# ---------------------------------------------------------------------------


class ProjectExporter:
    """
    Writes artifacts under *output_dir*.

    Usage::

        exporter = ProjectExporter(Path("."), force=False)
        result = exporter.export(artifacts, schema_exports=[("shopProducts", path)])

    Not thread-safe; use one exporter per run.
    """

    def __init__(
        self,
        output_dir: Path,
        *,
        force: bool = False,
        dry_run: bool = False,
        update_schema_index: bool = True,
        generator_version: str = "",
    ) -> None:
        self._output_dir: Path = output_dir.resolve()
        self._force: bool = force
        self._dry_run: bool = dry_run
        self._update_schema_index: bool = update_schema_index
        self._generator_version: str = generator_version

        self._errors: List[str] = []
        self._warnings: List[str] = []
        self._conflicts: List[str] = []

        logger.debug(
            "ProjectExporter initialised: output_dir=%s, force=%s, dry_run=%s.",
            self._output_dir,
            force,
            dry_run,
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def export(
        self,
        artifacts: Sequence[GeneratedArtifact],
        schema_exports: Sequence[Tuple[str, str]] = (),
    ) -> ExportResult:
        """Plan, then write unless blocked by conflicts or ``dry_run``."""
        self._errors, self._warnings, self._conflicts = [], [], []
        records: List[FileRecord] = []

        with Timer("export") as timer:
            planned: List[Tuple[GeneratedArtifact, str]] = [
                (artifact, self._classify(artifact)) for artifact in artifacts
            ]

            if self._update_schema_index and schema_exports:
                index: Optional[GeneratedArtifact] = self._plan_schema_index(schema_exports)
                if index is not None:
                    planned.append((index, self._classify(index)))

            for artifact, status in planned:
                if status == STATUS_CONFLICT:
                    self._conflicts.append(artifact.path)

            blocked: bool = bool(self._conflicts) and not self._force
            if blocked:
                for path in self._conflicts:
                    msg: str = f"Refusing to overwrite modified file {path} (use --force)."
                    if self._dry_run:
                        self._warnings.append(msg)
                        logger.warning(msg)
                    else:
                        self._errors.append(msg)
                        logger.error(msg)

            for artifact, status in planned:
                written: bool = False
                if not (blocked or self._dry_run) and status != STATUS_UNCHANGED:
                    written = self._write(artifact)
                records.append(self._record(artifact, status, written))

        manifest: ExportManifest = self._build_manifest(records)
        success: bool = not self._errors
        result: ExportResult = ExportResult(
            success=success,
            manifest=manifest,
            errors=tuple(self._errors),
            warnings=tuple(self._warnings),
            conflicts=tuple(self._conflicts),
            elapsed_seconds=timer.elapsed,
        )

        if self._dry_run:
            logger.info("Dry run: %d file(s) planned, nothing written.", len(records))
        elif success:
            logger.info(
                "Export completed: %d file(s), %d written, %.3fs.",
                manifest.total_files,
                sum(1 for r in records if r.written),
                timer.elapsed,
            )
        else:
            logger.error(
                "Export completed with %d error(s) in %.3fs.",
                len(self._errors),
                timer.elapsed,
            )
        return result

    # -----------------------------------------------------------------
    # Internal
    # -----------------------------------------------------------------

    def _target(self, rel_path: str) -> Path:
        return self._output_dir / rel_path

    def _classify(self, artifact: GeneratedArtifact) -> str:
        target: Path = self._target(artifact.path)
        if not target.exists():
            return STATUS_CREATE
        try:
            current: str = read_file(target)
        except (OSError, UnicodeDecodeError) as exc:
            self._warnings.append(f"Could not read {artifact.path}: {exc}")
            logger.warning("Could not read %s: %s", artifact.path, exc)
            return STATUS_CONFLICT
        if current == artifact.content:
            return STATUS_UNCHANGED
        # The index is merged line by line; its own conflicts are found there.
        if self._force or artifact.kind == "schema-index":
            return STATUS_UPDATE
        return STATUS_CONFLICT

    def _plan_schema_index(
        self, schema_exports: Sequence[Tuple[str, str]]
    ) -> Optional[GeneratedArtifact]:
        target: Path = self._target(SCHEMA_INDEX_PATH)
        existing: str = read_file(target) if target.exists() else ""
        content, conflicts = merge_schema_index(existing, schema_exports, self._force)
        for name in conflicts:
            self._conflicts.append(f"{SCHEMA_INDEX_PATH} ({name})")
        if conflicts:
            logger.warning(
                "Schema index already exports %s from another path.", ", ".join(conflicts)
            )
        return GeneratedArtifact(path=SCHEMA_INDEX_PATH, content=content, kind="schema-index")

    def _write(self, artifact: GeneratedArtifact) -> bool:
        try:
            write_file(self._target(artifact.path), artifact.content)
        except OSError as exc:
            msg: str = f"Failed to write {artifact.path}: {type(exc).__name__}: {exc}"
            self._errors.append(msg)
            logger.error(msg)
            return False
        logger.debug("Wrote %s.", artifact.path)
        return True

    def _record(self, artifact: GeneratedArtifact, status: str, written: bool) -> FileRecord:
        return FileRecord(
            relative_path=artifact.path,
            absolute_path=str(self._target(artifact.path)),
            status=status,
            size_bytes=len(artifact.content.encode("utf-8")),
            line_count=count_lines(artifact.content),
            sha256=sha256_hex(artifact.content),
            written=written,
        )

    def _build_manifest(self, records: List[FileRecord]) -> ExportManifest:
        return ExportManifest(
            generator_version=self._generator_version,
            output_directory=str(self._output_dir),
            dry_run=self._dry_run,
            total_files=len(records),
            total_bytes=sum(r.size_bytes for r in records),
            total_lines=sum(r.line_count for r in records),
            files=records,
        )


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ExportManifest",
    "ExportResult",
    "FileRecord",
    "ProjectExporter",
    "SCHEMA_INDEX_PATH",
    "STATUS_CONFLICT",
    "STATUS_CREATE",
    "STATUS_UNCHANGED",
    "STATUS_UPDATE",
    "merge_schema_index",
    "schema_index_line",
]

logger.debug("crouton_gen.exporters loaded — %d public symbols.", len(__all__))
