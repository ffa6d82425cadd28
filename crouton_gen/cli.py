# File: crouton_gen/cli.py
"""
Crouton Gen - Command-Line Interface
======================================

CLI built on the standard-library ``argparse`` module.

Usage examples::

    # One collection from a fields file
    crouton-generate shop products --fields-file products.json

    # Postgres, no translations, preview only
    crouton-generate shop products --fields-file products.yaml \\
        --dialect pg --no-translations --dry-run

    # Every target in crouton.config.json (or .yaml/.yml) in the cwd
    crouton-generate config

    # One collection from an explicit config file
    crouton-generate config ./crouton.config.yaml --only products

Exit codes:
    0 — success
    1 — validation error
    2 — generation error
    3 — export error or write conflict
    4 — input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root crouton_gen logger based on verbosity level.

    Args:
        verbosity: -1 = silent, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.CRITICAL + 1

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("crouton_gen")
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parsers
# ---------------------------------------------------------------------------


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    from crouton_gen import __version__

    parser.add_argument(
        "--version",
        action="version",
        version=f"Crouton Gen v{__version__}",
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "-o", "--output",
        type=str,
        default=".",
        metavar="DIR",
        help="Project root the files are written under (default: cwd).",
    )
    output_group.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite files that differ from the generated text.",
    )
    output_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="List the files that would be written and write nothing.",
    )
    output_group.add_argument(
        "--no-db",
        action="store_true",
        default=False,
        help="Do not touch the app-level schema index (server/db/schema.ts).",
    )
    output_group.add_argument(
        "--fail-on-warnings",
        action="store_true",
        default=False,
        help="Treat validation warnings as errors.",
    )

    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all log output.",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Parser for single-collection mode."""
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="crouton-generate",
        description=(
            "Crouton Gen — collection code generator.\n\n"
            "Turns a fields file (JSON/YAML) into the schema, composable, types,\n"
            "queries, seed script and team-scoped API handlers of one collection.\n"
            "Run '%(prog)s config [PATH]' to generate from a project config."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s shop products --fields-file products.json\n"
            "  %(prog)s shop products --fields-file p.yaml --dialect pg --dry-run\n"
            "  %(prog)s config ./crouton.config.json --only products\n"
        ),
    )
    parser.add_argument("layer", help="Layer name (e.g. 'shop').")
    parser.add_argument("collection", help="Collection name (e.g. 'products').")
    parser.add_argument(
        "-f", "--fields-file",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the fields file (JSON or YAML).",
    )

    gen_group = parser.add_argument_group("generation options")
    gen_group.add_argument(
        "--dialect",
        type=str,
        default="sqlite",
        choices=["sqlite", "pg", "postgres", "postgresql"],
        help="Target SQL dialect (default: sqlite).",
    )
    gen_group.add_argument(
        "--no-translations",
        action="store_true",
        default=False,
        help="Ignore translatable fields.",
    )
    gen_group.add_argument(
        "--translatable",
        type=str,
        default="",
        metavar="A,B",
        help="Comma-separated list of translatable field names.",
    )
    gen_group.add_argument(
        "--no-metadata",
        action="store_true",
        default=False,
        help="Skip createdAt/updatedAt/createdBy/updatedBy columns.",
    )
    feature = gen_group.add_mutually_exclusive_group()
    feature.add_argument(
        "--hierarchy",
        action="store_true",
        default=False,
        help="Generate tree columns, tree queries and the move handler.",
    )
    feature.add_argument(
        "--sortable",
        action="store_true",
        default=False,
        help="Generate an order column and the reorder handler.",
    )
    gen_group.add_argument(
        "--no-seed",
        action="store_true",
        default=False,
        help="Do not generate seed.ts.",
    )
    gen_group.add_argument(
        "--count",
        type=int,
        default=6,
        metavar="N",
        help="Default number of seed rows (default: 6).",
    )
    gen_group.add_argument(
        "--team-id",
        type=str,
        default="placeholder-team",
        metavar="ID",
        help="Default team id used by the seed script.",
    )
    gen_group.add_argument(
        "--layer-aliases",
        action="store_true",
        default=False,
        help="Use #layers/<layer>/... import aliases where available.",
    )

    _add_common_arguments(parser)
    return parser


def _build_config_parser() -> argparse.ArgumentParser:
    """Parser for ``crouton-generate config``."""
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="crouton-generate config",
        description="Generate every target collection declared in a project config.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Config file (default: crouton.config.json|yaml|yml in the cwd).",
    )
    parser.add_argument(
        "--only",
        type=str,
        default=None,
        metavar="COLLECTION",
        help="Generate only this collection.",
    )
    _add_common_arguments(parser)
    return parser


# ---------------------------------------------------------------------------
# Exit code mapping
# ---------------------------------------------------------------------------


def exit_code_for(report) -> int:
    """Exit code for one ``GenerationReport``."""
    if report.success:
        return EXIT_SUCCESS
    if report.input_errors:
        return EXIT_INPUT_ERROR
    if report.validation_errors:
        return EXIT_VALIDATION_ERROR
    if report.generation_errors:
        return EXIT_GENERATION_ERROR
    if report.export_errors:
        return EXIT_EXPORT_ERROR
    return EXIT_GENERATION_ERROR


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def _run_single(args: argparse.Namespace) -> int:
    from crouton_gen.generator import CollectionGenerator, GenerationReport
    from crouton_gen.models import GenerationConfig

    explicit: List[str] = [n.strip() for n in args.translatable.split(",") if n.strip()]
    fields_file: Path = Path(args.fields_file).resolve()

    try:
        config: GenerationConfig = GenerationConfig(
            dialect=args.dialect,
            use_metadata=not args.no_metadata,
            translatable_fields=[] if args.no_translations else explicit,
            hierarchy=args.hierarchy,
            sortable=args.sortable,
            seed_count=args.count,
            team_id=args.team_id,
            use_layer_aliases=args.layer_aliases,
        )
    except (PydanticValidationError, ValueError) as exc:
        logger.error("Invalid options: %s", exc)
        return EXIT_INPUT_ERROR

    generator: CollectionGenerator = CollectionGenerator(
        Path(args.output),
        force=args.force,
        dry_run=args.dry_run,
        update_schema_index=not args.no_db,
        fail_on_warnings=args.fail_on_warnings,
    )
    report: GenerationReport = generator.generate_from_file(
        args.layer,
        args.collection,
        fields_file,
        config,
        include_seed=not args.no_seed,
        auto_translatable=not args.no_translations,
    )
    print(report.summary())
    return exit_code_for(report)


def _run_config(args: argparse.Namespace) -> int:
    from crouton_gen.generator import CollectionGenerator, find_project_config

    if args.path is not None:
        config_path: Path = Path(args.path).resolve()
    else:
        found: Optional[Path] = find_project_config(Path.cwd())
        if found is None:
            logger.error(
                "No crouton.config.json, crouton.config.yaml or crouton.config.yml "
                "found in %s.",
                Path.cwd(),
            )
            return EXIT_INPUT_ERROR
        config_path = found.resolve()

    logger.info("Config:  %s", config_path)
    generator: CollectionGenerator = CollectionGenerator(
        Path(args.output),
        force=args.force,
        dry_run=args.dry_run,
        update_schema_index=not args.no_db,
        fail_on_warnings=args.fail_on_warnings,
    )
    reports = generator.generate_from_config(config_path, only=args.only)

    exit_code: int = EXIT_SUCCESS
    for report in reports:
        print(report.summary())
        code: int = exit_code_for(report)
        if exit_code == EXIT_SUCCESS:
            exit_code = code

    failed: int = sum(1 for r in reports if not r.success)
    print(f"\n  {len(reports) - failed}/{len(reports)} collection(s) generated.")
    return exit_code


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    arguments: List[str] = list(sys.argv[1:] if argv is None else argv)
    config_mode: bool = bool(arguments) and arguments[0] == "config"

    if config_mode:
        args: argparse.Namespace = _build_config_parser().parse_args(arguments[1:])
    else:
        args = _build_parser().parse_args(arguments)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    logger.info("Output:  %s", Path(args.output).resolve())
    logger.info("Force:   %s", args.force)
    logger.info("Dry run: %s", args.dry_run)

    exit_code: int = _run_config(args) if config_mode else _run_single(args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "exit_code_for",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("crouton_gen.cli loaded.")
