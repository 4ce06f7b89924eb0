"""Decide the storage representation of numeric literals."""

import logging
import math
import re
import sys
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from rescodegen.diagnostics import DiagnosticsReport
from rescodegen.errors import NumericTypeRangeError
from rescodegen.resource_graph import ResourceGraph
from rescodegen.resource_kind import ResourceKind
from rescodegen.resource_node import ResolutionStatus, ResourceNode

logger = logging.getLogger(__name__)

PASS_NAME = "numeric"

NUMBER_LITERAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

INTEGER_RANGES: dict[str, tuple[int, int]] = {
    "i8": (-(2**7), 2**7 - 1),
    "i16": (-(2**15), 2**15 - 1),
    "i32": (-(2**31), 2**31 - 1),
    "i64": (-(2**63), 2**63 - 1),
    "u8": (0, 2**8 - 1),
    "u16": (0, 2**16 - 1),
    "u32": (0, 2**32 - 1),
    "u64": (0, 2**64 - 1),
}

FLOAT_LIMITS: dict[str, float] = {
    "f32": 3.4028234663852886e38,
    "f64": sys.float_info.max,
}

DECIMAL_TYPES = {"decimal", "bigdecimal"}

NUMBER_TYPES = set(INTEGER_RANGES) | set(FLOAT_LIMITS) | DECIMAL_TYPES

DEFAULT_INTEGER_TYPE = "i64"
DEFAULT_FLOAT_TYPE = "f64"

# Digits a 64-bit float reproduces exactly; more selects a decimal.
MAX_FLOAT_DIGITS = 15


class NumberRepr(Enum):
    """Storage representation chosen for a number."""

    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"


@dataclass(frozen=True)
class NumberValue:
    """A classified number: representation, canonical literal and width."""

    repr: NumberRepr
    literal: str
    type_name: str
    explicit: bool = False

    def python_value(self) -> int | float | Decimal:
        """Return the value as a Python object."""
        if self.repr is NumberRepr.INTEGER:
            return int(self.literal)
        if self.repr is NumberRepr.FLOAT:
            return float(self.literal)
        return Decimal(self.literal)


def is_number_literal(text: str) -> bool:
    """Check the shape of a numeric literal."""
    return NUMBER_LITERAL_RE.fullmatch(text.strip()) is not None


def normalize_number_type(type_name: str | None) -> str | None:
    """Lower-case an override name; returns None for a missing override."""
    if type_name is None or not str(type_name).strip():
        return None
    return str(type_name).strip().lower()


def looks_like_integer(literal: str) -> bool:
    """Return True when the literal has neither a fraction nor an exponent."""
    return not any(c in literal for c in ".eE")


def count_significant_digits(literal: str) -> int:
    """Count mantissa digits, ignoring leading zeros."""
    mantissa = re.split(r"[eE]", literal, maxsplit=1)[0]
    digits = re.sub(r"\D", "", mantissa).lstrip("0")
    return len(digits)


def format_float(value: float) -> str:
    """Render a float so that it always carries a fractional marker."""
    text = repr(float(value))
    if not math.isfinite(value):
        return text
    mantissa, sep, exponent = text.partition("e")
    if "." not in mantissa:
        mantissa += ".0"
    return mantissa + sep + exponent


def _decimal(literal: str, type_name: str, *, explicit: bool) -> NumberValue:
    try:
        value = Decimal(literal)
    except InvalidOperation as e:
        msg = f"Invalid number literal '{literal}'"
        raise ValueError(msg) from e
    return NumberValue(NumberRepr.DECIMAL, str(value), type_name, explicit=explicit)


def _fits_integer(literal: str, type_name: str) -> bool:
    # int() refuses literals longer than 4300 digits; range check first.
    low, high = INTEGER_RANGES[type_name]
    return low <= Decimal(literal) <= high


def _explicit(literal: str, type_name: str) -> NumberValue:
    if type_name in DECIMAL_TYPES:
        return _decimal(literal, "decimal", explicit=True)

    if type_name in INTEGER_RANGES:
        if not looks_like_integer(literal) or not _fits_integer(literal, type_name):
            raise NumericTypeRangeError(literal, type_name)
        value = int(literal)
        return NumberValue(NumberRepr.INTEGER, str(value), type_name, explicit=True)

    if type_name in FLOAT_LIMITS:
        value = float(literal)
        if not math.isfinite(value) or abs(value) > FLOAT_LIMITS[type_name]:
            raise NumericTypeRangeError(literal, type_name)
        return NumberValue(
            NumberRepr.FLOAT, format_float(value), type_name, explicit=True
        )

    msg = f"Unsupported number type '{type_name}'"
    raise ValueError(msg)


def classify_number(text: str, type_name: str | None = None) -> NumberValue:
    """Classify a numeric literal, honoring an explicit type override.

    Without an override: integers that fit i64 stay integers, fractional
    literals that a 64-bit float holds exactly become floats, everything
    else becomes an arbitrary precision decimal. Raises
    ``NumericTypeRangeError`` when the literal does not fit the override
    and ``ValueError`` for malformed input.
    """
    literal = text.strip()
    if not is_number_literal(literal):
        msg = f"Invalid number literal '{text}'"
        raise ValueError(msg)

    override = normalize_number_type(type_name)
    if override is not None:
        return _explicit(literal, override)

    if looks_like_integer(literal):
        if _fits_integer(literal, DEFAULT_INTEGER_TYPE):
            value = int(literal)
            return NumberValue(NumberRepr.INTEGER, str(value), DEFAULT_INTEGER_TYPE)
        return _decimal(literal, "decimal", explicit=False)

    if count_significant_digits(literal) > MAX_FLOAT_DIGITS:
        return _decimal(literal, "decimal", explicit=False)

    value = float(literal)
    if not math.isfinite(value) or (value == 0.0 and Decimal(literal) != 0):
        # Overflow or underflow: keep the exact value.
        return _decimal(literal, "decimal", explicit=False)
    return NumberValue(NumberRepr.FLOAT, format_float(value), DEFAULT_FLOAT_TYPE)


def _classify_node(node: ResourceNode) -> NumberValue | tuple[NumberValue, ...]:
    if node.spec.kind is ResourceKind.NUMBER:
        return classify_number(str(node.raw), node.number_type)
    type_name = node.number_type or node.spec.element_type
    return tuple(classify_number(v, type_name) for v in node.raw)


def classify_graph_numbers(graph: ResourceGraph, report: DiagnosticsReport) -> int:
    """Classify every numeric winner in ``graph``; returns the number classified.

    Range violations are reported against the node and leave it FAILED.
    """
    classified = 0
    for node in graph.winners():
        is_number_array = (
            node.spec.kind is ResourceKind.ARRAY
            and node.spec.element is ResourceKind.NUMBER
        )
        if node.spec.kind is not ResourceKind.NUMBER and not is_number_array:
            continue
        if node.status is not ResolutionStatus.UNRESOLVED:
            continue
        try:
            node.value = _classify_node(node)
        except NumericTypeRangeError as e:
            report.add_error(
                NumericTypeRangeError(
                    e.literal, e.type_name, node.key.display_name(), (node.origin,)
                ),
                PASS_NAME,
            )
            node.mark(ResolutionStatus.FAILED)
            continue
        node.mark(ResolutionStatus.RESOLVED)
        classified += 1
    logger.info("Classified %d numeric resources", classified)
    return classified
