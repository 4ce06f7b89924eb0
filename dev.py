"""Development script to run checks (linting, tests) and the main application."""

import argparse
import subprocess
import sys


def run_command(command: list[str], step_name: str) -> None:
    """Run a shell command as a step in the development process."""
    print(f"\n--- Running Step: {step_name} ---")
    print(f"$ {' '.join(command)}")
    try:
        subprocess.run(command, check=True)
    except subprocess.CalledProcessError:
        print(f"\n❌ Failed: {step_name}")
        sys.exit(1)


def run_ci_gate() -> None:
    """Verify formatting, lint and tests without modifying files."""
    run_command(["ruff", "format", "--check"], "Ruff Format Check")
    run_command(["ruff", "check"], "Ruff Lint")
    run_command([sys.executable, "-m", "pytest"], "Pytest")


def main() -> None:
    """Run the development checks and optionally the main script."""
    parser = argparse.ArgumentParser(
        description="Run development checks and main script."
    )
    parser.add_argument(
        "--ci", action="store_true", help="Run checks and tests only, skipping main.py"
    )
    args = parser.parse_args()

    if args.ci:
        run_ci_gate()
        print("\n✅ CI checks passed successfully. Skipping execution of main.py.")
        return

    # Run auto-formatting and fixing
    run_command(["ruff", "format"], "Ruff Formatting")
    run_command(["ruff", "check", "--fix"], "Ruff Linting & Fixes")

    # Run the CI gate to verify everything
    run_ci_gate()

    run_command([sys.executable, "main.py"], "Main Entry Point")

    print("\n✅ All development checks and main script passed successfully.")


if __name__ == "__main__":
    main()
