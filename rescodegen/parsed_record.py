"""Data models for records handed over by the parsing front end."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RecordOrigin:
    """Where a record was declared."""

    file: str
    line: int | None = None
    is_test: bool = False


@dataclass
class ParsedRecord:
    """A flat attribute record describing one resource declaration."""

    namespace_path: tuple[str, ...]
    name: str
    kind_tag: str
    raw_value: str | None = None
    raw_values: list[str] | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    origin: RecordOrigin = field(default_factory=lambda: RecordOrigin("<memory>"))

    @property
    def profile(self) -> str | None:
        """Return the profile attribute, if any."""
        value = self.attributes.get("profile")
        return str(value) if value else None
