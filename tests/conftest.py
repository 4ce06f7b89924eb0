"""Shared fixtures for building parsed records."""

from collections.abc import Callable
from typing import Any

import pytest

from rescodegen.parsed_record import ParsedRecord, RecordOrigin

RecordFactory = Callable[..., ParsedRecord]


def _make_record(
    name: str,
    kind: str = "string",
    value: str | None = None,
    *,
    values: list[str] | None = None,
    namespace: tuple[str, ...] = (),
    file: str = "a.yml",
    line: int | None = 1,
    is_test: bool = False,
    **attributes: Any,
) -> ParsedRecord:
    return ParsedRecord(
        namespace_path=namespace,
        name=name,
        kind_tag=kind,
        raw_value=value,
        raw_values=values,
        attributes=attributes,
        origin=RecordOrigin(file, line, is_test),
    )


@pytest.fixture
def make_record() -> RecordFactory:
    """Return a factory building a ParsedRecord from keyword shorthand."""
    return _make_record
