"""
tests/test_cli.py
End-to-end tests for the crouton-generate command line.
"""

from __future__ import annotations

import json
import logging
import pathlib

import pytest

from crouton_gen.cli import (
    EXIT_EXPORT_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    cli_main,
)

BASE = "layers/shop/collections/products"


def _run(argv) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


class TestSingleMode:

    def test_success(self, fields_json_path: pathlib.Path, tmp_path: pathlib.Path, capsys) -> None:
        out = tmp_path / "app"
        code = _run(["shop", "products", "--fields-file", str(fields_json_path), "-o", str(out)])
        assert code == EXIT_SUCCESS
        assert (out / BASE / "types.ts").is_file()
        assert "Crouton Gen — Generation Report" in capsys.readouterr().out

    def test_dry_run_lists_paths(self, fields_yaml_path: pathlib.Path, tmp_path: pathlib.Path, capsys) -> None:
        out = tmp_path / "app"
        code = _run([
            "shop", "products", "-f", str(fields_yaml_path), "-o", str(out),
            "--dialect", "pg", "--dry-run",
        ])
        assert code == EXIT_SUCCESS
        assert not out.exists()
        printed = capsys.readouterr().out
        assert f"{BASE}/server/database/schema.ts" in printed
        assert "server/db/schema.ts" in printed

    def test_conflict_exit_code(self, fields_json_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        argv = ["shop", "products", "-f", str(fields_json_path), "-o", str(tmp_path / "app")]
        assert _run(argv) == EXIT_SUCCESS
        (tmp_path / "app" / BASE / "types.ts").write_text("// mine\n", encoding="utf-8")
        assert _run(argv) == EXIT_EXPORT_ERROR
        assert _run(argv + ["--force"]) == EXIT_SUCCESS

    def test_validation_exit_code(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "empty.json"
        path.write_text("{}", encoding="utf-8")
        code = _run(["shop", "products", "-f", str(path), "-o", str(tmp_path / "app")])
        assert code == EXIT_VALIDATION_ERROR

    def test_unknown_translatable_is_validation_error(
        self, fields_json_path: pathlib.Path, tmp_path: pathlib.Path
    ) -> None:
        code = _run([
            "shop", "products", "-f", str(fields_json_path), "-o", str(tmp_path / "app"),
            "--translatable", "title,subtitle",
        ])
        assert code == EXIT_VALIDATION_ERROR

    def test_missing_fields_file(self, tmp_path: pathlib.Path) -> None:
        code = _run(["shop", "products", "-f", str(tmp_path / "nope.json"), "-o", str(tmp_path)])
        assert code == EXIT_INPUT_ERROR

    def test_feature_flags(self, fields_json_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        out = tmp_path / "app"
        code = _run([
            "shop", "products", "-f", str(fields_json_path), "-o", str(out),
            "--hierarchy", "--no-seed", "--no-db", "--no-metadata", "--count", "3",
        ])
        assert code == EXIT_SUCCESS
        assert not (out / BASE / "server/database/seed.ts").exists()
        assert not (out / "server/db/schema.ts").exists()
        handlers = out / BASE / "server/api/teams/[id]/shop-products"
        assert (handlers / "[productId]" / "move.patch.ts").is_file()
        assert "createdAt" not in (out / BASE / "server/database/schema.ts").read_text(encoding="utf-8")

    def test_hierarchy_and_sortable_are_exclusive(self, fields_json_path: pathlib.Path) -> None:
        assert _run(["shop", "products", "-f", str(fields_json_path), "--hierarchy", "--sortable"]) == 2

    def test_missing_required_argument(self, capsys) -> None:
        assert _run(["shop"]) == 2
        assert "usage:" in capsys.readouterr().err

    def test_version(self, capsys) -> None:
        assert _run(["--version"]) == 0
        assert "Crouton Gen v" in capsys.readouterr().out

    def test_quiet_silences_logging(self, fields_json_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        _run(["shop", "products", "-f", str(fields_json_path), "-o", str(tmp_path), "-q"])
        assert logging.getLogger("crouton_gen").level > logging.CRITICAL

    def test_verbose_sets_debug(self, fields_json_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        _run(["shop", "products", "-f", str(fields_json_path), "-o", str(tmp_path), "--dry-run", "-vv"])
        root = logging.getLogger("crouton_gen")
        assert root.level == logging.DEBUG
        assert root.propagate is False


class TestConfigMode:

    def test_explicit_path(self, project_dir: pathlib.Path, capsys) -> None:
        code = _run(["config", str(project_dir / "crouton.config.yaml"), "-o", str(project_dir)])
        assert code == EXIT_SUCCESS
        assert (project_dir / BASE / "types.ts").is_file()
        assert "2/2 collection(s) generated." in capsys.readouterr().out

    def test_discovers_config_in_cwd(self, project_dir: pathlib.Path, monkeypatch) -> None:
        monkeypatch.chdir(project_dir)
        assert _run(["config", "--only", "products", "--dry-run"]) == EXIT_SUCCESS
        assert not (project_dir / "layers").exists()

    def test_no_config_found(self, tmp_path: pathlib.Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert _run(["config"]) == EXIT_INPUT_ERROR

    def test_invalid_config(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "crouton.config.json"
        path.write_text(json.dumps({"collections": [], "targets": []}), encoding="utf-8")
        assert _run(["config", str(path), "-o", str(tmp_path)]) == EXIT_VALIDATION_ERROR
