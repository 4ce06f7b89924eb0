"""Collection of warnings and errors produced by every pass."""

import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from rescodegen.errors import BuildFailedError, ResourceError
from rescodegen.resource_node import NodeOrigin

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Severity of a diagnostic."""

    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """One reported problem, tagged with the pass that found it."""

    severity: Severity
    kind: str
    message: str
    pass_name: str
    origins: tuple[NodeOrigin, ...] = field(default_factory=tuple)

    @property
    def fatal(self) -> bool:
        """Return True for diagnostics that abort emission."""
        return self.severity is Severity.ERROR

    def format(self) -> str:
        """Render as a single line."""
        text = f"{self.severity.value}[{self.kind}] {self.message}"
        if self.origins:
            text += f" (at {', '.join(o.describe() for o in self.origins)})"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON report."""
        return {
            "severity": self.severity.value,
            "kind": self.kind,
            "pass": self.pass_name,
            "message": self.message,
            "origins": [o.to_dict() for o in self.origins],
        }


class DiagnosticsReport:
    """Ordered report of every diagnostic, deciding whether emission may proceed."""

    def __init__(self, config_hash: str = "") -> None:
        """Initialize an empty report."""
        self.config_hash = config_hash
        self.diagnostics: list[Diagnostic] = []
        self.start_time = time.time()

    def add(self, diagnostic: Diagnostic) -> None:
        """Append a diagnostic, logging it as it arrives."""
        self.diagnostics.append(diagnostic)
        if diagnostic.fatal:
            logger.error("%s", diagnostic.format())
        else:
            logger.warning("%s", diagnostic.format())

    def add_error(self, error: ResourceError, pass_name: str) -> None:
        """Record a resource error; its ``fatal`` flag picks the severity."""
        severity = Severity.ERROR if error.fatal else Severity.WARNING
        self.add(
            Diagnostic(severity, error.kind, error.message, pass_name, error.origins)
        )

    def warn(
        self,
        kind: str,
        message: str,
        pass_name: str,
        origins: tuple[NodeOrigin, ...] = (),
    ) -> None:
        """Record a non-fatal diagnostic."""
        self.add(Diagnostic(Severity.WARNING, kind, message, pass_name, origins))

    def errors(self) -> list[Diagnostic]:
        """Return the fatal diagnostics."""
        return [d for d in self.diagnostics if d.fatal]

    def warnings(self) -> list[Diagnostic]:
        """Return the non-fatal diagnostics."""
        return [d for d in self.diagnostics if not d.fatal]

    def of_kind(self, kind: str) -> list[Diagnostic]:
        """Return diagnostics of one kind, in report order."""
        return [d for d in self.diagnostics if d.kind == kind]

    def has_fatal(self) -> bool:
        """Return True when emission must be aborted."""
        return any(d.fatal for d in self.diagnostics)

    def gate(self) -> None:
        """Raise ``BuildFailedError`` if any fatal diagnostic was collected."""
        if self.has_fatal():
            raise BuildFailedError(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the report."""
        return {
            "meta": {
                "timestamp": time.time(),
                "duration": time.time() - self.start_time,
                "config_hash": self.config_hash,
                "total": len(self.diagnostics),
            },
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "stats": self._compute_stats(),
        }

    def generate_report(self, path: str) -> None:
        """Write the report to a JSON file."""
        Path(path).write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    def _compute_stats(self) -> dict[str, Any]:
        by_kind: dict[str, int] = {}
        by_severity: dict[str, int] = {}
        for d in self.diagnostics:
            by_kind[d.kind] = by_kind.get(d.kind, 0) + 1
            by_severity[d.severity.value] = by_severity.get(d.severity.value, 0) + 1
        return {
            "by_kind": by_kind,
            "by_severity": by_severity,
            "fatal": self.has_fatal(),
        }
