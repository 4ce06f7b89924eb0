"""Exception taxonomy shared by every compilation pass."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rescodegen.diagnostics import DiagnosticsReport
    from rescodegen.resource_key import ResourceKey
    from rescodegen.resource_node import NodeOrigin


class ResourceError(Exception):
    """Base class for problems attributable to one or more resources."""

    kind = "ResourceError"
    fatal = True

    def __init__(
        self, message: str, origins: tuple[NodeOrigin, ...] | list[NodeOrigin] = ()
    ) -> None:
        """Store the message and the source locations it refers to."""
        super().__init__(message)
        self.message = message
        self.origins = tuple(origins)


class MalformedRecordError(ResourceError):
    """A parsed record could not be turned into a resource node."""

    kind = "MalformedRecord"
    fatal = False


class DuplicateKeyError(ResourceError):
    """The same resource key is declared more than once."""

    kind = "DuplicateKey"

    def __init__(
        self,
        key: ResourceKey,
        origins: tuple[NodeOrigin, ...] | list[NodeOrigin],
        *,
        fatal: bool = False,
    ) -> None:
        """Describe the duplicate using the winner and every losing origin."""
        winner, *losers = origins
        message = (
            f"Duplicate resource key '{key.display_name()}' defined "
            f"{len(origins)} times. Using {winner.describe()} (first occurrence). "
            f"Duplicates in: {', '.join(o.describe() for o in losers)}"
        )
        super().__init__(message, origins)
        self.key = key
        self.fatal = fatal


class UnresolvedReferenceError(ResourceError):
    """A reference token names a key that has no winner in the graph."""

    kind = "UnresolvedReference"

    def __init__(
        self, source: ResourceKey, target: ResourceKey, origin: NodeOrigin
    ) -> None:
        """Name the missing target and the node that referenced it."""
        super().__init__(
            f"Unresolved reference in {source.display_name()}: "
            f"@{target.kind_tag()}/{target.path()} does not exist",
            (origin,),
        )
        self.source = source
        self.target = target


class CyclicReferenceError(ResourceError):
    """References form a loop; ``cycle`` starts and ends with the same key."""

    kind = "CyclicReference"

    def __init__(
        self, cycle: list[ResourceKey], origins: list[NodeOrigin]
    ) -> None:
        """Render the cycle as an arrow-joined path of keys."""
        path = " -> ".join(k.display_name() for k in cycle)
        super().__init__(f"Cyclic reference: {path}", origins)
        self.cycle = tuple(cycle)


class ReferenceTypeMismatchError(ResourceError):
    """A reference points at a node whose value is not a literal string."""

    kind = "ReferenceTypeMismatch"

    def __init__(
        self, source: ResourceKey, target: ResourceKey, origin: NodeOrigin
    ) -> None:
        """Name the offending target kind."""
        super().__init__(
            f"Reference in {source.display_name()} points at "
            f"{target.display_name()} of kind '{target.kind_tag()}', "
            "which is not a string value",
            (origin,),
        )
        self.source = source
        self.target = target


class NumericTypeRangeError(ResourceError):
    """A numeric literal does not fit the requested representation."""

    kind = "NumericTypeRangeError"

    def __init__(
        self,
        literal: str,
        type_name: str,
        name: str = "",
        origins: tuple[NodeOrigin, ...] | list[NodeOrigin] = (),
    ) -> None:
        """Name the node (when known) and the requested type."""
        subject = f"'{literal}'" + (f" in {name}" if name else "")
        super().__init__(f"{subject} does not fit in {type_name}", origins)
        self.literal = literal
        self.type_name = type_name


class InvalidTemplateError(ResourceError):
    """A template declaration is inconsistent with its format string."""

    kind = "InvalidTemplate"


class TemplateArityError(ResourceError, TypeError):
    """A template was invoked with the wrong number of arguments."""

    kind = "TemplateArityError"


class TemplateTypeMismatchError(ResourceError, TypeError):
    """A template argument does not match the declared parameter type."""

    kind = "TemplateTypeMismatchError"


class InvalidIdentifierError(ResourceError):
    """A namespace segment or name cannot become an emitted identifier."""

    kind = "InvalidIdentifier"


class ResourceFileError(Exception):
    """A resource description file does not have the expected structure."""


class BuildFailedError(Exception):
    """Raised by the diagnostics gate when fatal diagnostics were collected."""

    def __init__(self, report: DiagnosticsReport) -> None:
        """Summarize the fatal diagnostics in the exception message."""
        errors = report.errors()
        lines = [f"Build failed with {len(errors)} error(s):"]
        lines.extend(f"  {d.format()}" for d in errors)
        super().__init__("\n".join(lines))
        self.report = report
