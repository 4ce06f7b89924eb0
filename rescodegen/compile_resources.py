"""Compile YAML resource descriptions into an importable Python package.

Resource files are discovered under an input directory, compiled through
the normalization, graph, numeric, template and reference passes, and
emitted as a nested package plus a flattened alias module.
"""

import argparse
import logging
from pathlib import Path
from typing import Any

from rescodegen.compute_config_hash import compute_config_hash
from rescodegen.diagnostics import DiagnosticsReport
from rescodegen.errors import BuildFailedError, ResourceFileError
from rescodegen.load_config import (
    compile_options_from_config,
    emit_options_from_config,
    load_config,
)
from rescodegen.load_resource_file import find_resource_files, load_resource_file
from rescodegen.parsed_record import ParsedRecord
from rescodegen.pipeline import compile_records
from rescodegen.write_units import write_units

logger = logging.getLogger(__name__)


def _init_config(args: argparse.Namespace) -> dict[str, Any]:
    """Load the configuration file and apply command line overrides."""
    config = load_config(args.config)
    build = config["build"]
    if args.duplicates_as_errors:
        build["duplicates_as_errors"] = True
    if args.include_tests:
        build["include_tests"] = True
    if args.profile:
        build["profile"] = args.profile
    if args.workers:
        build["workers"] = args.workers
    if args.package_name:
        config["output"]["package_name"] = args.package_name
    if args.alias_module:
        config["output"]["alias_module"] = args.alias_module
    return config


def _load_records(yml_dir: Path, yml_files: list[Path]) -> list[ParsedRecord]:
    records: list[ParsedRecord] = []
    for f in yml_files:
        try:
            records.extend(load_resource_file(f, yml_dir))
        except ResourceFileError as e:
            raise SystemExit(str(e)) from e
    return records


def run_compilation(args: argparse.Namespace) -> int:
    """Execute the full compilation pipeline."""
    yml_files = find_resource_files(args.yml_dir)
    if not yml_files:
        msg = f"No .yml/.yaml files found under: {args.yml_dir}"
        raise SystemExit(msg)

    config = _init_config(args)
    logger.debug("Using configuration %s", config)
    report = DiagnosticsReport(compute_config_hash(config))
    records = _load_records(args.yml_dir, yml_files)
    print(f"Loaded {len(records)} resource records from {len(yml_files)} files")

    result = compile_records(
        records,
        compile_options_from_config(config),
        emit_options_from_config(config),
        report,
    )

    if args.report:
        report.generate_report(args.report)
        print(f"Diagnostics report generated at {args.report}")

    try:
        result.raise_for_errors()
    except BuildFailedError as e:
        print(e)
        return 1

    warnings = len(report.warnings())
    if warnings:
        print(f"Build succeeded with {warnings} warning(s)")

    if args.dry_run:
        print(f"Dry run complete. {len(result.units)} units would be written.")
        return 0

    out_root = args.out_dir.resolve()
    out_root.mkdir(parents=True, exist_ok=True)
    written = write_units(result.units, out_root)
    print(f"Generated {written} source units into: {out_root}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the compiler."""
    ap = argparse.ArgumentParser(
        description="Compile YAML resource descriptions into a Python package.",
    )
    ap.add_argument(
        "yml_dir",
        type=Path,
        help="Directory containing resource *.yml/*.yaml files",
    )
    ap.add_argument(
        "out_dir",
        type=Path,
        help="Output directory for the generated package and alias module",
    )
    ap.add_argument("--config", help="Path to configuration file")
    ap.add_argument(
        "--duplicates-as-errors",
        action="store_true",
        help="Treat duplicate resource keys as fatal",
    )
    ap.add_argument(
        "--include-tests",
        action="store_true",
        help="Include test-scoped resources",
    )
    ap.add_argument("--profile", help="Active build profile (e.g. debug, release)")
    ap.add_argument(
        "--workers",
        type=int,
        help="Number of threads used to normalize files",
    )
    ap.add_argument("--package-name", help="Name of the generated package")
    ap.add_argument("--alias-module", help="Name of the flattened alias module")
    ap.add_argument("--report", help="Write a JSON diagnostics report to this path")
    ap.add_argument(
        "--dry-run",
        action="store_true",
        help="Compile and report without writing files",
    )
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run_compilation(args)


if __name__ == "__main__":
    raise SystemExit(main())
