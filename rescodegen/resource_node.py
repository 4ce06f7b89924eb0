"""Data models for normalized resource nodes."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from rescodegen.reference_expression import ReferenceExpression
from rescodegen.resource_key import ResourceKey
from rescodegen.resource_kind import KindSpec


class ResolutionStatus(Enum):
    """Lifecycle of a node; each node leaves UNRESOLVED at most once."""

    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class NodeOrigin:
    """Source location of a node plus the profile it was declared under."""

    file: str
    line: int | None = None
    profile: str | None = None
    is_test: bool = False

    def describe(self) -> str:
        """Return ``file:line`` (or just the file when the line is unknown)."""
        return f"{self.file}:{self.line}" if self.line is not None else self.file

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the diagnostics report."""
        return {"file": self.file, "line": self.line, "profile": self.profile}


@dataclass(frozen=True)
class TemplateParam:
    """A declared template parameter."""

    name: str
    type_name: str


@dataclass(frozen=True)
class TemplateDefinition:
    """Ordered parameter list plus a format string referring to them by name."""

    params: tuple[TemplateParam, ...]
    format_string: str


@dataclass
class ResourceNode:
    """One definition of a resource.

    ``raw`` holds the literal(s) as written; ``value`` is filled in by the
    pass that owns the kind (numeric classifier, reference resolver, template
    expander) when the node reaches RESOLVED.
    """

    key: ResourceKey
    spec: KindSpec
    raw: str | tuple[str, ...]
    origin: NodeOrigin
    expression: ReferenceExpression | None = None
    number_type: str | None = None
    template: TemplateDefinition | None = None
    value: Any = None
    status: ResolutionStatus = ResolutionStatus.UNRESOLVED
    index: int = -1  # arena position, assigned by the graph

    @property
    def is_resolved(self) -> bool:
        """Return True once the node carries its final value."""
        return self.status is ResolutionStatus.RESOLVED

    def mark(self, status: ResolutionStatus) -> None:
        """Move to ``status``; terminal states are never left."""
        if self.status in {ResolutionStatus.RESOLVED, ResolutionStatus.FAILED}:
            msg = f"{self.key.display_name()} is already {self.status.value}"
            raise RuntimeError(msg)
        self.status = status
