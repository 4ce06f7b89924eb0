"""Closed set of resource kinds plus the tag lookup table."""

from dataclasses import dataclass
from enum import Enum


class ResourceKind(Enum):
    """Variant tag of a resource node."""

    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    COLOR = "color"
    ARRAY = "array"
    TEMPLATE = "template"
    CUSTOM = "custom"


# Kinds whose resolved value is a literal string usable in interpolation.
STRING_VALUED_KINDS = frozenset({ResourceKind.STRING, ResourceKind.COLOR})


@dataclass(frozen=True)
class KindSpec:
    """A resolved kind tag.

    ``tag`` is the canonical spelling used in keys, aliases and references.
    Arrays carry their element kind and, for numeric arrays, the numeric
    override applied to every element.
    """

    tag: str
    kind: ResourceKind
    element: ResourceKind | None = None
    element_type: str | None = None

    @property
    def is_custom(self) -> bool:
        """Return True for kinds registered through ``register_kind``."""
        return self.kind is ResourceKind.CUSTOM


STRING = KindSpec("string", ResourceKind.STRING)
NUMBER = KindSpec("number", ResourceKind.NUMBER)
BOOL = KindSpec("bool", ResourceKind.BOOL)
COLOR = KindSpec("color", ResourceKind.COLOR)
TEMPLATE = KindSpec("template", ResourceKind.TEMPLATE)

KIND_TABLE: dict[str, KindSpec] = {
    "string": STRING,
    "text": STRING,
    "number": NUMBER,
    "int": NUMBER,
    "integer": NUMBER,
    "float": NUMBER,
    "double": NUMBER,
    "bool": BOOL,
    "boolean": BOOL,
    "color": COLOR,
    "colour": COLOR,
    "template": TEMPLATE,
    "string-array": KindSpec("string-array", ResourceKind.ARRAY, ResourceKind.STRING),
    "int-array": KindSpec("int-array", ResourceKind.ARRAY, ResourceKind.NUMBER, "i64"),
    "float-array": KindSpec(
        "float-array", ResourceKind.ARRAY, ResourceKind.NUMBER, "f64"
    ),
    "number-array": KindSpec("number-array", ResourceKind.ARRAY, ResourceKind.NUMBER),
    "bool-array": KindSpec("bool-array", ResourceKind.ARRAY, ResourceKind.BOOL),
    "color-array": KindSpec("color-array", ResourceKind.ARRAY, ResourceKind.COLOR),
}

# Element names accepted by the generic "array" tag through its ``type`` attribute.
ARRAY_TYPE_TAGS: dict[str, str] = {
    "string": "string-array",
    "str": "string-array",
    "int": "int-array",
    "integer": "int-array",
    "float": "float-array",
    "number": "number-array",
    "bool": "bool-array",
    "boolean": "bool-array",
    "color": "color-array",
}


def register_kind(tag: str, name: str | None = None) -> KindSpec:
    """Register a custom kind tag and return its spec.

    Custom kinds carry their raw value through as a literal string.
    """
    key = tag.strip().lower()
    existing = KIND_TABLE.get(key)
    if existing and not existing.is_custom:
        msg = f"Tag '{tag}' is already bound to built-in kind '{existing.tag}'"
        raise ValueError(msg)
    spec = KindSpec(name or key, ResourceKind.CUSTOM)
    KIND_TABLE[key] = spec
    return spec


def lookup_kind(tag: str, array_type: str | None = None) -> KindSpec | None:
    """Map a record kind tag to its spec, or None when the tag is unknown."""
    key = tag.strip().lower()
    if key == "array":
        if not array_type:
            return None
        mapped = ARRAY_TYPE_TAGS.get(array_type.strip().lower())
        return KIND_TABLE.get(mapped) if mapped else None
    return KIND_TABLE.get(key)
