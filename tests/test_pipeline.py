"""End-to-end tests: compile, write and import the generated package."""

import importlib
from collections.abc import Callable
from decimal import Decimal
from pathlib import Path

import pytest

from rescodegen.compile_options import CompileOptions, EmitOptions
from rescodegen.errors import BuildFailedError
from rescodegen.parsed_record import ParsedRecord
from rescodegen.pipeline import compile_records
from rescodegen.write_units import write_units

RecordFactory = Callable[..., ParsedRecord]


def _records(make_record: RecordFactory) -> list[ParsedRecord]:
    return [
        make_record("app_name", value="My App"),
        make_record("base_url", value="https://api.example.com", line=2),
        make_record("api_version", value="v2", line=3),
        make_record("api_url", value="@string/base_url/@string/api_version", line=4),
        make_record("ratio", "float", "3", line=5),
        make_record("big", "number", "99999999999999999999", line=6),
        make_record("sizes", "int-array", values=["1", "2", "3"], line=7),
        make_record(
            "greeting",
            "template",
            "Hello, {name}!",
            line=8,
            params=[{"name": "name", "type": "string"}],
        ),
        make_record("app_name", value="UI App", namespace=("ui",), file="b.yml"),
        make_record("enabled", "bool", "true", namespace=("ui",), file="b.yml", line=2),
    ]


def test_generated_package_imports(
    make_record: RecordFactory, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Verify that the emitted modules import and expose the resolved values."""
    result = compile_records(
        _records(make_record),
        CompileOptions(workers=2),
        EmitOptions(package_name="e2e_res", alias_module="e2e_res_flat"),
    )
    assert result.ok
    assert write_units(result.units, tmp_path) == len(result.units)

    monkeypatch.syspath_prepend(str(tmp_path))
    res = importlib.import_module("e2e_res")
    flat = importlib.import_module("e2e_res_flat")

    assert res.APP_NAME == "My App"
    assert res.API_URL == "https://api.example.com/v2"
    assert res.RATIO == 3.0  # noqa: PLR2004
    assert isinstance(res.RATIO, float)
    assert res.BIG == Decimal("99999999999999999999")
    assert res.SIZES == (1, 2, 3)
    assert res.greeting("World") == "Hello, World!"
    assert res.ui.APP_NAME == "UI App"
    assert res.ui.ENABLED is True

    assert flat.APP_NAME == "My App"
    assert flat.UI_APP_NAME == "UI App"
    assert flat.API_URL == res.API_URL
    assert not hasattr(flat, "greeting")
    assert "greeting" in res.__all__


def test_fatal_diagnostics_block_emission(make_record: RecordFactory) -> None:
    """Verify that no unit is produced once any error was collected."""
    records = [
        *_records(make_record),
        make_record("port", "number", "70000", line=9, type="u16"),
        make_record("loop", value="@string/loop", line=10),
    ]
    result = compile_records(records)
    assert not result.ok
    assert result.units == []
    assert [d.kind for d in result.report.errors()] == [
        "NumericTypeRangeError",
        "CyclicReference",
    ]
    with pytest.raises(BuildFailedError):
        result.raise_for_errors()


def test_warnings_do_not_block_emission(make_record: RecordFactory) -> None:
    """Verify that duplicates and malformed records only warn by default."""
    records = [
        *_records(make_record),
        make_record("app_name", value="Again", file="c.yml"),
        make_record("flag", "bool", "maybe", file="c.yml", line=2),
    ]
    result = compile_records(records)
    assert result.ok
    assert result.units
    kinds = sorted(d.kind for d in result.report.warnings())
    assert kinds == ["DuplicateKey", "MalformedRecord"]
