"""Tests for splitting string values into literal and reference segments."""

from rescodegen.reference_expression import (
    LiteralSegment,
    ReferenceToken,
    parse_reference_expression,
)


def test_trailing_slash_is_literal() -> None:
    """Verify that a slash between two tokens stays literal text."""
    expr = parse_reference_expression("@string/base_url/@string/api_version")
    assert expr.segments == (
        ReferenceToken("string", "base_url"),
        LiteralSegment("/"),
        ReferenceToken("string", "api_version"),
    )


def test_plain_text_is_single_literal() -> None:
    """Verify that text without tokens becomes one literal segment."""
    expr = parse_reference_expression("mail me at user@example.com")
    assert expr.segments == (LiteralSegment("mail me at user@example.com"),)
    assert not expr.has_references()
    assert parse_reference_expression("").segments == ()


def test_nested_path_and_kind_case() -> None:
    """Verify that namespaced paths are captured and kind tags lower-cased."""
    expr = parse_reference_expression("Go to @String/auth/error/title now")
    assert expr.segments == (
        LiteralSegment("Go to "),
        ReferenceToken("string", "auth/error/title"),
        LiteralSegment(" now"),
    )
    assert expr.literal_text() == "Go to @string/auth/error/title now"
