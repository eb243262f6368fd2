"""Command-line interface for patch-validator."""

from __future__ import annotations

import argparse
import logging
import time
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from console import configure_logging, console
from external.frameworks import FrameworkCache, FrameworkDownloadError
from report.annotations import Annotation, build_annotations
from report.summary import RunSummary, build_summary
from report.table import resource_table, summary_table
from report.write import write_results
from rules.checks import validate_unit
from rules.config import ConfigError, format_filters, load_inputs
from rules.resources import ResourceCategory, validate_resources
from scan.sources import ParseUnit, UnsupportedWildcardError, resolve

logger = logging.getLogger(__name__)

FATAL_ERRORS = (ConfigError, UnsupportedWildcardError, FrameworkDownloadError)


@dataclass
class RunResult:
    summary: RunSummary
    annotations: list[Annotation] = field(default_factory=list)
    units: list[ParseUnit] = field(default_factory=list)
    resources: list[ResourceCategory] = field(default_factory=list)


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Repository root (default: .)",
    )
    parser.add_argument(
        "--patch-name",
        default=None,
        help="Patch name (default: name of the repository root directory)",
    )
    parser.add_argument(
        "--root-path",
        default="",
        help="Patch root relative to the repository root (default: repository root)",
    )
    parser.add_argument(
        "--jobs",
        type=int,
        default=1,
        help="Number of root source lists parsed concurrently (default: 1)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="patch-validator")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Validate a patch")
    _add_common_paths(validate_parser)
    validate_parser.add_argument(
        "--out-dir",
        default=None,
        help="Write summary.json and annotations.jsonl to this directory",
    )

    symbols_parser = subparsers.add_parser(
        "symbols", help="List the symbols declared by a patch"
    )
    _add_common_paths(symbols_parser)

    return parser


def run_validation(
    root: Path,
    *,
    patch_name: str | None = None,
    root_path: str = "",
    jobs: int = 1,
    cache: FrameworkCache | None = None,
) -> RunResult:
    """Load inputs, parse every root source list and run all checks.

    Args:
        root: Repository root
        patch_name: Patch name; defaults to the repository directory name
        root_path: Patch root relative to ``root``
        jobs: Number of root units parsed concurrently
        cache: Framework download cache; a temporary one is used if omitted

    Raises:
        ConfigError: On unusable inputs
        UnsupportedWildcardError: If a patch source list uses wildcards
        FrameworkDownloadError: If a framework cannot be fetched
    """
    start = time.perf_counter()
    inputs = load_inputs(root, patch_name=patch_name, root_path=root_path)
    filters = format_filters(
        inputs.patch_name,
        inputs.config.prefix,
        inputs.config.ignore_declaration,
        inputs.config.ignore_resource,
        inputs.base_path,
    )

    with ExitStack() as stack:
        if cache is None:
            cache = stack.enter_context(FrameworkCache())
        units = resolve(
            inputs.patch_name,
            inputs.base_path,
            inputs.working_dir,
            cache=cache,
            jobs=jobs,
        )

    for unit in units:
        validate_unit(unit, filters.prefix, filters.ignore_declaration)

    resources = validate_resources(
        inputs.working_dir, inputs.base_path, filters.prefix, filters.ignore_resource
    )

    summary = build_summary(
        inputs.patch_name,
        units,
        resources,
        filters.prefix,
        time.perf_counter() - start,
    )
    annotations = build_annotations(units, resources, filters.prefix, inputs.working_dir)
    return RunResult(
        summary=summary, annotations=annotations, units=units, resources=resources
    )


def _handle_validate(args: argparse.Namespace, root: Path) -> int:
    result = run_validation(
        root, patch_name=args.patch_name, root_path=args.root_path, jobs=args.jobs
    )

    console.print(summary_table(result.summary))
    if result.summary.resources:
        console.print(resource_table(result.summary))
    for annotation in result.annotations:
        logger.warning(
            "%s:%d %s", annotation.path, annotation.start_line, annotation.title
        )

    if args.out_dir is not None:
        out_dir = Path(args.out_dir).expanduser().resolve()
        paths = write_results(out_dir, result.summary, result.annotations)
        logger.info("Wrote %s", ", ".join(str(p) for p in paths.values()))

    logger.info(
        "Violations: %d/%d",
        result.summary.num_violations,
        result.summary.num_symbols,
    )
    return 0 if result.summary.passed else 1


def _handle_symbols(args: argparse.Namespace, root: Path) -> int:
    inputs = load_inputs(root, patch_name=args.patch_name, root_path=args.root_path)
    with FrameworkCache() as cache:
        units = resolve(
            inputs.patch_name,
            inputs.base_path,
            inputs.working_dir,
            cache=cache,
            jobs=args.jobs,
        )
    out = Console()
    for unit in units:
        out.print(f"[bold]{unit.filename}[/bold] ({unit.num_symbols} symbols)")
        for symbol in unit.symbol_table:
            if symbol.in_patch:
                out.print(f"  {symbol.name}  {symbol.source_file}:{symbol.line}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "validate":
            return _handle_validate(args, root)

        if args.command == "symbols":
            return _handle_symbols(args, root)
    except FATAL_ERRORS as e:
        logger.error("%s", e)
        return 2
    except Exception:
        logger.exception("Unexpected error during %s", args.command)
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
