"""
tests/test_exporters.py
Tests for crouton_gen.exporters: conflict planning, writes and the schema index.
"""

from __future__ import annotations

import json
import pathlib

from crouton_gen.exporters import (
    SCHEMA_INDEX_PATH,
    STATUS_CONFLICT,
    STATUS_CREATE,
    STATUS_UNCHANGED,
    STATUS_UPDATE,
    ProjectExporter,
    merge_schema_index,
    schema_index_line,
)
from crouton_gen.models import GeneratedArtifact

SCHEMA = "layers/shop/collections/products/server/database/schema.ts"


def _artifacts(content: str = "export {}\n"):
    return [
        GeneratedArtifact("layers/shop/a.ts", content, "types"),
        GeneratedArtifact("layers/shop/b.ts", "b\n", "types"),
    ]


class TestSchemaIndex:

    def test_line_format(self) -> None:
        assert schema_index_line("shopProducts", SCHEMA) == (
            "export { shopProducts } from "
            "'../../layers/shop/collections/products/server/database/schema'"
        )

    def test_appends_new_export(self) -> None:
        text, conflicts = merge_schema_index("// index\n", [("shopProducts", SCHEMA)])
        assert conflicts == []
        assert text.splitlines() == ["// index", schema_index_line("shopProducts", SCHEMA)]

    def test_identical_line_left_alone(self) -> None:
        existing = schema_index_line("shopProducts", SCHEMA) + "\n"
        text, conflicts = merge_schema_index(existing, [("shopProducts", SCHEMA)])
        assert text == existing
        assert conflicts == []

    def test_other_path_is_conflict(self) -> None:
        existing = "export { shopProducts } from './elsewhere'\n"
        text, conflicts = merge_schema_index(existing, [("shopProducts", SCHEMA)])
        assert conflicts == ["shopProducts"]
        assert text == existing

    def test_force_replaces(self) -> None:
        existing = "export { shopProducts } from './elsewhere'\n"
        text, conflicts = merge_schema_index(existing, [("shopProducts", SCHEMA)], force=True)
        assert conflicts == []
        assert "./elsewhere" not in text


class TestProjectExporter:

    def test_creates_files(self, tmp_path: pathlib.Path) -> None:
        result = ProjectExporter(tmp_path).export(_artifacts())
        assert result.success
        assert (tmp_path / "layers/shop/a.ts").read_text(encoding="utf-8") == "export {}\n"
        assert result.manifest.paths(STATUS_CREATE) == ["layers/shop/a.ts", "layers/shop/b.ts"]
        assert all(r.written for r in result.manifest.files)

    def test_rerun_is_unchanged(self, tmp_path: pathlib.Path) -> None:
        ProjectExporter(tmp_path).export(_artifacts())
        result = ProjectExporter(tmp_path).export(_artifacts())
        assert result.success
        assert result.conflicts == ()
        assert result.manifest.paths(STATUS_UNCHANGED) == ["layers/shop/a.ts", "layers/shop/b.ts"]
        assert not any(r.written for r in result.manifest.files)

    def test_modified_file_is_conflict(self, tmp_path: pathlib.Path) -> None:
        ProjectExporter(tmp_path).export(_artifacts())
        (tmp_path / "layers/shop/a.ts").write_text("// edited by hand\n", encoding="utf-8")

        result = ProjectExporter(tmp_path).export(_artifacts("export const x = 1\n"))
        assert not result.success
        assert result.conflicts == ("layers/shop/a.ts",)
        assert "use --force" in result.errors[0]
        assert (tmp_path / "layers/shop/a.ts").read_text(encoding="utf-8") == "// edited by hand\n"
        assert result.manifest.paths(STATUS_CONFLICT) == ["layers/shop/a.ts"]

    def test_conflict_blocks_every_write(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "layers/shop/a.ts"
        target.parent.mkdir(parents=True)
        target.write_text("mine\n", encoding="utf-8")
        ProjectExporter(tmp_path).export(_artifacts())
        assert not (tmp_path / "layers/shop/b.ts").exists()

    def test_force_overwrites(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "layers/shop/a.ts"
        target.parent.mkdir(parents=True)
        target.write_text("mine\n", encoding="utf-8")
        result = ProjectExporter(tmp_path, force=True).export(_artifacts())
        assert result.success
        assert target.read_text(encoding="utf-8") == "export {}\n"
        assert result.manifest.paths(STATUS_UPDATE) == ["layers/shop/a.ts"]

    def test_dry_run_writes_nothing(self, tmp_path: pathlib.Path) -> None:
        result = ProjectExporter(tmp_path, dry_run=True).export(
            _artifacts(), schema_exports=[("shopProducts", SCHEMA)]
        )
        assert result.success
        assert result.manifest.dry_run
        assert list(tmp_path.iterdir()) == []
        assert SCHEMA_INDEX_PATH in result.manifest.paths()

    def test_dry_run_conflicts_are_warnings(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "layers/shop/a.ts"
        target.parent.mkdir(parents=True)
        target.write_text("mine\n", encoding="utf-8")
        result = ProjectExporter(tmp_path, dry_run=True).export(_artifacts())
        assert result.success
        assert result.conflicts == ("layers/shop/a.ts",)
        assert result.warnings

    def test_schema_index_written_and_extended(self, tmp_path: pathlib.Path) -> None:
        ProjectExporter(tmp_path).export(_artifacts(), schema_exports=[("shopProducts", SCHEMA)])
        other = "layers/shop/collections/orders/server/database/schema.ts"
        result = ProjectExporter(tmp_path).export([], schema_exports=[("shopOrders", other)])
        assert result.success
        index = (tmp_path / SCHEMA_INDEX_PATH).read_text(encoding="utf-8").splitlines()
        assert index == [
            schema_index_line("shopProducts", SCHEMA),
            schema_index_line("shopOrders", other),
        ]

    def test_schema_index_conflict(self, tmp_path: pathlib.Path) -> None:
        index = tmp_path / SCHEMA_INDEX_PATH
        index.parent.mkdir(parents=True)
        index.write_text("export { shopProducts } from './legacy'\n", encoding="utf-8")
        result = ProjectExporter(tmp_path).export(_artifacts(), schema_exports=[("shopProducts", SCHEMA)])
        assert not result.success
        assert result.conflicts == (f"{SCHEMA_INDEX_PATH} (shopProducts)",)
        assert not (tmp_path / "layers/shop/a.ts").exists()

    def test_schema_index_skipped(self, tmp_path: pathlib.Path) -> None:
        ProjectExporter(tmp_path, update_schema_index=False).export(
            _artifacts(), schema_exports=[("shopProducts", SCHEMA)]
        )
        assert not (tmp_path / SCHEMA_INDEX_PATH).exists()

    def test_manifest_json(self, tmp_path: pathlib.Path) -> None:
        result = ProjectExporter(tmp_path, generator_version="0.1.0").export(_artifacts())
        data = json.loads(result.manifest.to_json())
        assert data["generator_version"] == "0.1.0"
        assert data["total_files"] == 2
        assert data["files"][0]["status"] == STATUS_CREATE
