"""Identity of a resource inside the graph."""

from dataclasses import dataclass

from rescodegen.resource_kind import KindSpec


@dataclass(frozen=True)
class ResourceKey:
    """(namespace path, name, kind) triple, optionally qualified by a profile."""

    namespace: tuple[str, ...]
    name: str
    kind: KindSpec
    profile: str | None = None

    @classmethod
    def from_path(
        cls, path: str, kind: KindSpec, profile: str | None = None
    ) -> "ResourceKey":
        """Build a key from a slash separated path such as ``auth/error/title``."""
        parts = [p for p in path.split("/") if p]
        name = parts.pop() if parts else ""
        return cls(tuple(parts), name, kind, profile)

    def path(self) -> str:
        """Return the slash separated qualified name."""
        return "/".join((*self.namespace, self.name))

    def segments(self) -> tuple[str, ...]:
        """Return namespace segments followed by the leaf name."""
        return (*self.namespace, self.name)

    def kind_tag(self) -> str:
        """Return the canonical kind tag."""
        return self.kind.tag

    def display_name(self) -> str:
        """Human readable form used in diagnostics."""
        text = f"{self.kind.tag}/{self.path()}"
        if self.profile:
            text += f" [{self.profile}]"
        return text
