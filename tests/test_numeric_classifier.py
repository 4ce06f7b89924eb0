"""Tests for numeric literal classification."""

from collections.abc import Callable
from decimal import Decimal

import pytest

from rescodegen.compile_options import CompileOptions
from rescodegen.diagnostics import DiagnosticsReport
from rescodegen.errors import NumericTypeRangeError
from rescodegen.graph_builder import build_graph
from rescodegen.numeric_classifier import (
    NumberRepr,
    classify_graph_numbers,
    classify_number,
    count_significant_digits,
    format_float,
)
from rescodegen.parsed_record import ParsedRecord
from rescodegen.record_normalizer import normalize_records
from rescodegen.resource_node import ResolutionStatus

I64_MAX = "9223372036854775807"


def test_i64_boundary() -> None:
    """Verify that i64 max stays an integer and one more becomes a decimal."""
    at_max = classify_number(I64_MAX)
    assert at_max.repr is NumberRepr.INTEGER
    assert at_max.literal == I64_MAX
    assert at_max.type_name == "i64"

    above = classify_number("9223372036854775808")
    assert above.repr is NumberRepr.DECIMAL
    assert above.python_value() == Decimal("9223372036854775808")

    assert classify_number("-9223372036854775808").repr is NumberRepr.INTEGER
    assert classify_number("-9223372036854775809").repr is NumberRepr.DECIMAL


def test_large_literal_without_type_is_decimal() -> None:
    """Verify that a 20 digit literal selects arbitrary precision."""
    value = classify_number("99999999999999999999")
    assert value.repr is NumberRepr.DECIMAL
    assert value.literal == "99999999999999999999"
    assert value.explicit is False


def test_very_long_integer_literal() -> None:
    """Verify that literals past the int() digit limit are still classified."""
    literal = "9" * 5000
    value = classify_number(literal)
    assert value.repr is NumberRepr.DECIMAL
    assert value.literal == literal

    with pytest.raises(NumericTypeRangeError):
        classify_number(literal, "i64")
    with pytest.raises(NumericTypeRangeError):
        classify_number("-" + literal, "u8")


def test_float_literals_keep_fraction_marker() -> None:
    """Verify that floats always render with a fractional marker."""
    assert classify_number("3.0").literal == "3.0"
    assert classify_number("3.").literal == "3.0"
    assert classify_number("1e3").literal == "1000.0"
    assert classify_number("2.5").literal == "2.5"
    assert classify_number("3", "f64").literal == "3.0"
    assert format_float(1e20) == "1.0e+20"
    assert format_float(-0.5) == "-0.5"


def test_precision_selects_decimal() -> None:
    """Verify that more than 15 significant digits select a decimal."""
    assert count_significant_digits("0.00123") == 3  # noqa: PLR2004
    assert classify_number("0.123456789012345").repr is NumberRepr.FLOAT
    assert classify_number("0.1234567890123456").repr is NumberRepr.DECIMAL


def test_float_range_overflow_and_underflow_select_decimal() -> None:
    """Verify that values outside the float range keep their exact value."""
    assert classify_number("1e400").repr is NumberRepr.DECIMAL
    assert classify_number("1e-400").repr is NumberRepr.DECIMAL
    assert classify_number("0.0").repr is NumberRepr.FLOAT


def test_explicit_override_range() -> None:
    """Verify that explicit overrides are range checked."""
    value = classify_number("255", "u8")
    assert value.repr is NumberRepr.INTEGER
    assert value.explicit is True
    assert value.type_name == "u8"

    with pytest.raises(NumericTypeRangeError):
        classify_number("256", "u8")
    with pytest.raises(NumericTypeRangeError):
        classify_number("-1", "U8")
    with pytest.raises(NumericTypeRangeError):
        classify_number("1.5", "i32")
    with pytest.raises(NumericTypeRangeError):
        classify_number("1e39", "f32")

    assert classify_number("12", "bigdecimal").repr is NumberRepr.DECIMAL
    assert classify_number("1e38", "f32").repr is NumberRepr.FLOAT


def test_malformed_input_raises_value_error() -> None:
    """Verify that malformed literals and unknown overrides are rejected."""
    with pytest.raises(ValueError, match="Invalid number literal"):
        classify_number("12abc")
    with pytest.raises(ValueError, match="Unsupported number type"):
        classify_number("12", "i128")


def test_classification_is_deterministic() -> None:
    """Verify that the same literal and override always classify the same."""
    for literal, override in [("42", None), ("1.5", "f32"), ("1" * 30, None)]:
        assert classify_number(literal, override) == classify_number(literal, override)


def test_classify_graph_numbers_reports_range_errors(
    make_record: Callable[..., ParsedRecord],
) -> None:
    """Verify that the graph pass names the node and its requested type."""
    records = [
        make_record("port", "number", "70000", line=1, type="u16"),
        make_record("timeout", "float", "30", line=2),
        make_record("sizes", "int-array", values=["1", "2"], line=3),
    ]
    report = DiagnosticsReport()
    options = CompileOptions()
    graph = build_graph(normalize_records(records, options, report), options, report)

    assert classify_graph_numbers(graph, report) == 2  # noqa: PLR2004

    errors = report.errors()
    assert len(errors) == 1
    assert errors[0].kind == "NumericTypeRangeError"
    assert "number/port" in errors[0].message
    assert "u16" in errors[0].message
    assert errors[0].origins[0].line == 1

    by_name = {n.key.name: n for n in graph.winners()}
    assert by_name["port"].status is ResolutionStatus.FAILED
    assert by_name["timeout"].value.literal == "30.0"
    assert [v.literal for v in by_name["sizes"].value] == ["1", "2"]


def test_long_literal_overrides_are_reported_not_raised(
    make_record: Callable[..., ParsedRecord],
) -> None:
    """Verify that an oversized i64 literal becomes a diagnostic."""
    records = [
        make_record("huge", "number", "9" * 5000, line=1),
        make_record("capped", "number", "9" * 5000, line=2, type="i64"),
    ]
    report = DiagnosticsReport()
    options = CompileOptions()
    graph = build_graph(normalize_records(records, options, report), options, report)

    assert classify_graph_numbers(graph, report) == 1

    assert [d.kind for d in report.errors()] == ["NumericTypeRangeError"]
    by_name = {n.key.name: n for n in graph.winners()}
    assert by_name["huge"].value.repr is NumberRepr.DECIMAL
    assert by_name["capped"].status is ResolutionStatus.FAILED
