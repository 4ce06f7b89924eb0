"""Python literal and annotation rendering for resolved resource values."""

from rescodegen.numeric_classifier import NumberRepr, NumberValue
from rescodegen.resource_kind import ResourceKind
from rescodegen.resource_node import ResourceNode

DECIMAL_MODULE = "_decimals"
GENERATED_HEADER = "# Generated by rescodegen. Do not edit."

_NUMBER_ANNOTATIONS = {
    NumberRepr.INTEGER: "int",
    NumberRepr.FLOAT: "float",
    NumberRepr.DECIMAL: "_Decimal",
}


class DecimalPool:
    """Shared storage for arbitrary precision values, one slot per literal."""

    def __init__(self) -> None:
        """Create an empty pool."""
        self.names: dict[str, str] = {}

    def name_for(self, literal: str) -> str:
        """Return the storage name of ``literal``, allocating it on first use."""
        if literal not in self.names:
            self.names[literal] = f"DECIMAL_{len(self.names)}"
        return self.names[literal]

    def __bool__(self) -> bool:
        """Return True once any value was stored."""
        return bool(self.names)

    def render(self) -> str:
        """Render the storage module."""
        lines = [
            '"""Arbitrary precision values shared by every resource module."""',
            "",
            GENERATED_HEADER,
            "",
            "from decimal import Decimal",
            "",
        ]
        lines.extend(
            f'{name} = Decimal("{literal}")' for literal, name in self.names.items()
        )
        return "\n".join(lines) + "\n"


def render_literal(value: object, pool: DecimalPool, used: set[str]) -> str:
    """Render ``value`` as a Python expression.

    Decimal values render as the local alias of their pool slot; the slot
    name is added to ``used``.
    """
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, str):
        return repr(value)
    if isinstance(value, NumberValue):
        if value.repr is NumberRepr.DECIMAL:
            name = pool.name_for(value.literal)
            used.add(name)
            return f"_{name}"
        return value.literal
    if isinstance(value, tuple):
        items = [render_literal(v, pool, used) for v in value]
        if len(items) == 1:
            return f"({items[0]},)"
        return "(" + ", ".join(items) + ")"
    msg = f"Cannot render value of type {type(value).__name__}"
    raise TypeError(msg)


def _number_annotation(values: list[NumberValue]) -> str:
    names: list[str] = []
    for v in values:
        name = _NUMBER_ANNOTATIONS[v.repr]
        if name not in names:
            names.append(name)
    return " | ".join(names) or "int"


def render_annotation(node: ResourceNode) -> str:
    """Return the type annotation of a resolved constant."""
    kind = node.spec.kind
    if kind is ResourceKind.BOOL:
        return "bool"
    if kind is ResourceKind.NUMBER:
        return _number_annotation([node.value])
    if kind is ResourceKind.ARRAY:
        if node.spec.element is ResourceKind.NUMBER:
            return f"tuple[{_number_annotation(list(node.value))}, ...]"
        if node.spec.element is ResourceKind.BOOL:
            return "tuple[bool, ...]"
        return "tuple[str, ...]"
    return "str"
