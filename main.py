"""Main orchestration script for compiling resource descriptions into Python."""

import argparse
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path


def run_command(cmd_list: Sequence[str | Path], cwd: Path | str | None = None) -> None:
    """Run a command and exit if it fails."""
    cmd_str = " ".join(str(x) for x in cmd_list)
    print(f"Running: {cmd_str}")
    try:
        subprocess.run(cmd_list, check=True, cwd=cwd)
    except subprocess.CalledProcessError as e:
        print(f"Error executing command: {cmd_str}")
        sys.exit(e.returncode)


def main() -> None:
    """Run the full resource compilation pipeline."""
    parser = argparse.ArgumentParser(
        description="Compile resource descriptions into a Python resource package."
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Run development checks (linting, tests) before compiling",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compile and report without writing files",
    )
    parser.add_argument(
        "--duplicates-as-errors",
        action="store_true",
        help="Treat duplicate resource keys as fatal",
    )
    parser.add_argument(
        "--include-tests",
        action="store_true",
        help="Include test-scoped resources",
    )
    parser.add_argument(
        "--profile",
        help="Active build profile",
    )
    parser.add_argument(
        "--config",
        help="Path to configuration file",
    )
    args = parser.parse_args()

    root_dir = Path(__file__).parent
    python_exe = sys.executable

    if args.dev:
        print("--- Running Development Checks ---")
        run_command([python_exe, str(root_dir / "dev.py"), "--ci"])
        print("\nDevelopment checks passed. Proceeding with compilation.\n")

    print("--- Compiling resources ---")
    yml_dir = root_dir / "resources"
    out_dir = root_dir / "generated"

    cmd = [
        python_exe,
        "-m",
        "rescodegen.compile_resources",
        str(yml_dir),
        str(out_dir),
        "--report",
        str(out_dir / "diagnostics_report.json"),
    ]

    if args.dry_run:
        cmd.append("--dry-run")
    if args.duplicates_as_errors:
        cmd.append("--duplicates-as-errors")
    if args.include_tests:
        cmd.append("--include-tests")
    if args.profile:
        cmd.extend(["--profile", args.profile])
    if args.config:
        cmd.extend(["--config", args.config])

    out_dir.mkdir(parents=True, exist_ok=True)
    run_command(cmd, cwd=root_dir)

    print(f"\nSUCCESS: Resources generated in {out_dir}")


if __name__ == "__main__":
    main()
