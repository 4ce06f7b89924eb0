"""Logic for loading and merging configuration files."""

import copy
from pathlib import Path
from typing import Any

import yaml

from rescodegen.compile_options import CompileOptions, EmitOptions
from rescodegen.deep_merge import deep_merge

DEFAULT_CONFIG: dict[str, Any] = {
    "build": {
        "duplicates_as_errors": False,
        "include_tests": False,
        "profile": None,
        "workers": 1,
    },
    "output": {
        "package_name": "r",
        "alias_module": "r_flat",
    },
    "reserved_identifiers": [],
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            config = deep_merge(config, user_config)
    return config


def compile_options_from_config(config: dict[str, Any]) -> CompileOptions:
    """Build the caller side compile switches from a merged configuration."""
    build = config.get("build") or {}
    return CompileOptions(
        duplicates_as_errors=bool(build.get("duplicates_as_errors", False)),
        include_tests=bool(build.get("include_tests", False)),
        active_profile=build.get("profile") or None,
        workers=max(1, int(build.get("workers") or 1)),
    )


def emit_options_from_config(config: dict[str, Any]) -> EmitOptions:
    """Build the emission names from a merged configuration."""
    output = config.get("output") or {}
    return EmitOptions(
        package_name=str(output.get("package_name") or "r"),
        alias_module=str(output.get("alias_module") or "r_flat"),
        reserved_identifiers=frozenset(config.get("reserved_identifiers") or []),
    )
