"""Logic for rendering one namespace of the nested view as a Python module."""

from dataclasses import dataclass, field

from rescodegen.render_values import (
    DECIMAL_MODULE,
    GENERATED_HEADER,
    DecimalPool,
    render_annotation,
    render_literal,
)
from rescodegen.resource_kind import ResourceKind
from rescodegen.resource_node import NodeOrigin, ResourceNode


@dataclass
class UnitEntry:
    """A winner placed in a unit under its emitted identifier."""

    identifier: str
    node: ResourceNode
    duplicates: list[NodeOrigin] = field(default_factory=list)


def _render_entry(entry: UnitEntry, pool: DecimalPool, used: set[str]) -> list[str]:
    lines: list[str] = []
    if entry.duplicates:
        ignored = ", ".join(o.describe() for o in entry.duplicates)
        lines.append(f"# Duplicate definitions ignored: {ignored}")
    node = entry.node
    if node.spec.kind is ResourceKind.TEMPLATE and node.template is not None:
        params = tuple((p.name, p.type_name) for p in node.template.params)
        lines.append(
            f"{entry.identifier} = _TemplateFunction("
            f"{entry.identifier!r}, {params!r}, {node.template.format_string!r})"
        )
    else:
        literal = render_literal(node.value, pool, used)
        annotation = render_annotation(node)
        lines.append(f"{entry.identifier}: _Final[{annotation}] = {literal}")
    return lines


def render_namespace_unit(
    path: tuple[str, ...],
    entries: list[UnitEntry],
    child_modules: list[str],
    package_name: str,
    pool: DecimalPool,
) -> str:
    """Render the ``__init__`` module of one namespace."""
    title = "/".join(path)
    doc = f"Resources in namespace ``{title}``." if title else "Generated resources."

    used: set[str] = set()
    body: list[str] = []
    for entry in entries:
        body.extend(_render_entry(entry, pool, used))

    has_constants = any(e.node.spec.kind is not ResourceKind.TEMPLATE for e in entries)
    has_templates = any(e.node.spec.kind is ResourceKind.TEMPLATE for e in entries)

    imports: list[str] = []
    if used:
        imports.append("from decimal import Decimal as _Decimal")
    if has_constants:
        imports.append("from typing import Final as _Final")
    if has_templates:
        imports.append(
            "from rescodegen.template_function import "
            "TemplateFunction as _TemplateFunction"
        )
    imports.extend(
        f"from {package_name}.{DECIMAL_MODULE} import {name} as _{name}"
        for name in sorted(used)
    )
    imports.extend(f"from . import {child}" for child in child_modules)

    exported = sorted([e.identifier for e in entries] + child_modules)
    parts = [f'"""{doc}"""', "", GENERATED_HEADER]
    if imports:
        parts += ["", *imports]
    if body:
        parts += ["", *body]
    parts += ["", f"__all__ = {exported!r}"]
    return "\n".join(parts) + "\n"
