"""Caller supplied switches for a compilation run."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CompileOptions:
    """Build policy; the core never reads these from the environment."""

    duplicates_as_errors: bool = False
    include_tests: bool = False
    active_profile: str | None = None
    workers: int = 1


@dataclass(frozen=True)
class EmitOptions:
    """Names used for the generated package and its flattened alias module."""

    package_name: str = "r"
    alias_module: str = "r_flat"
    reserved_identifiers: frozenset[str] = field(default_factory=frozenset)
