"""Tests for rendering the nested package and the alias module."""

from collections.abc import Callable
from pathlib import Path

from rescodegen.compile_options import CompileOptions, EmitOptions
from rescodegen.namespace_emitter import ALIAS_VIEW, NESTED_VIEW, STORAGE_VIEW
from rescodegen.parsed_record import ParsedRecord
from rescodegen.pipeline import CompileResult, compile_records
from rescodegen.render_values import GENERATED_HEADER

RecordFactory = Callable[..., ParsedRecord]

BIG = "99999999999999999999"


def _compile(records: list[ParsedRecord], **emit: object) -> CompileResult:
    return compile_records(records, CompileOptions(), EmitOptions(**emit))


def _texts(result: CompileResult) -> dict[str, str]:
    return {unit.relative_file.as_posix(): unit.text for unit in result.units}


def test_units_cover_every_namespace(make_record: RecordFactory) -> None:
    """Verify the unit files of the nested, storage and alias views."""
    result = _compile(
        [
            make_record("app_name", value="My App"),
            make_record("app_name", value="UI App", namespace=("ui",), line=2),
            make_record("title", value="Hi", namespace=("ui", "settings"), line=3),
            make_record("big", "number", BIG, line=4),
        ]
    )
    assert result.ok
    assert [(u.view, u.relative_file) for u in result.units] == [
        (NESTED_VIEW, Path("r/__init__.py")),
        (NESTED_VIEW, Path("r/ui/__init__.py")),
        (NESTED_VIEW, Path("r/ui/settings/__init__.py")),
        (STORAGE_VIEW, Path("r/_decimals.py")),
        (ALIAS_VIEW, Path("r_flat.py")),
    ]
    for unit in result.units:
        assert GENERATED_HEADER in unit.text


def test_constant_lines(make_record: RecordFactory) -> None:
    """Verify annotated constant rendering for every literal kind."""
    texts = _texts(
        _compile(
            [
                make_record("app_name", value="My App"),
                make_record("ratio", "float", "3", line=2),
                make_record("retries", "number", "3", line=3),
                make_record("enabled", "bool", "True", line=4),
                make_record("sizes", "int-array", values=["1", "2"], line=5),
                make_record("tabs", "string-array", values=["Home"], line=6),
                make_record("primary", "color", "#336699", line=7),
            ]
        )
    )
    lines = texts["r/__init__.py"].splitlines()
    assert "APP_NAME: _Final[str] = 'My App'" in lines
    assert "RATIO: _Final[float] = 3.0" in lines
    assert "RETRIES: _Final[int] = 3" in lines
    assert "ENABLED: _Final[bool] = True" in lines
    assert "SIZES: _Final[tuple[int, ...]] = (1, 2)" in lines
    assert "TABS: _Final[tuple[str, ...]] = ('Home',)" in lines
    assert "PRIMARY: _Final[str] = '#336699'" in lines
    assert "from typing import Final as _Final" in lines
    assert lines[-1].startswith("__all__ = ['APP_NAME', 'ENABLED'")


def test_decimal_values_share_one_slot(make_record: RecordFactory) -> None:
    """Verify that equal decimal literals are stored once."""
    texts = _texts(
        _compile(
            [
                make_record("big", "number", BIG),
                make_record("huge", "number", BIG, namespace=("ui",), line=2),
            ]
        )
    )
    storage = texts["r/_decimals.py"]
    assert storage.count("Decimal(") == 1
    assert f'DECIMAL_0 = Decimal("{BIG}")' in storage
    root = texts["r/__init__.py"].splitlines()
    assert "from r._decimals import DECIMAL_0 as _DECIMAL_0" in root
    assert "from decimal import Decimal as _Decimal" in root
    assert "BIG: _Final[_Decimal] = _DECIMAL_0" in root
    assert "HUGE: _Final[_Decimal] = _DECIMAL_0" in texts["r/ui/__init__.py"]


def test_duplicates_and_templates(make_record: RecordFactory) -> None:
    """Verify the duplicate comment and the template function line."""
    texts = _texts(
        _compile(
            [
                make_record("title", value="First", file="a.yml"),
                make_record("title", value="Second", file="b.yml", line=7),
                make_record(
                    "greeting",
                    "template",
                    "Hello, {name}!",
                    line=2,
                    params=[{"name": "name", "type": "string"}],
                ),
            ]
        )
    )
    root = texts["r/__init__.py"].splitlines()
    index = root.index("TITLE: _Final[str] = 'First'")
    assert root[index - 1] == "# Duplicate definitions ignored: b.yml:7"
    assert (
        "greeting = _TemplateFunction('greeting', (('name', 'string'),), "
        "'Hello, {name}!')"
    ) in root
    flat = texts["r_flat.py"]
    assert "from r import TITLE as TITLE" in flat
    assert "greeting" not in flat


def test_alias_module_imports(make_record: RecordFactory) -> None:
    """Verify the flattened aliases point at the nested modules."""
    texts = _texts(
        _compile(
            [
                make_record("app_name", value="My App"),
                make_record("app_name", value="UI App", namespace=("ui",), line=2),
            ],
            package_name="res",
            alias_module="res_all",
        )
    )
    lines = texts["res_all.py"].splitlines()
    assert "from res import APP_NAME as APP_NAME" in lines
    assert "from res.ui import APP_NAME as UI_APP_NAME" in lines
    assert lines[-1] == "__all__ = ['APP_NAME', 'UI_APP_NAME']"
    assert "from . import ui" in texts["res/__init__.py"]


def test_same_unit_collisions_take_kind_suffix(make_record: RecordFactory) -> None:
    """Verify kind suffixes for same-named keys of different kinds."""
    texts = _texts(
        _compile(
            [
                make_record("title", value="Title"),
                make_record("title", "color", "#fff", line=2),
            ]
        )
    )
    root = texts["r/__init__.py"]
    assert "TITLE_STRING: _Final[str] = 'Title'" in root
    assert "TITLE_COLOR: _Final[str] = '#fff'" in root


def test_invalid_identifier_blocks_emission(make_record: RecordFactory) -> None:
    """Verify that a name that cannot become an identifier is fatal."""
    result = _compile(
        [
            make_record("app_name", value="ok"),
            make_record("123", value="bad", line=2),
        ]
    )
    assert result.units == []
    [error] = result.report.errors()
    assert error.kind == "InvalidIdentifier"
    assert error.origins[0].line == 2  # noqa: PLR2004


def test_template_colliding_with_module_is_fatal(make_record: RecordFactory) -> None:
    """Verify that a template may not share a name with a child namespace."""
    result = _compile(
        [
            make_record("ui", "template", "x"),
            make_record("title", value="Hi", namespace=("ui",), line=2),
        ]
    )
    assert result.units == []
    assert "child namespace module 'ui'" in result.report.errors()[0].message


def test_reserved_and_invalid_output_names(make_record: RecordFactory) -> None:
    """Verify configured reserved identifiers and output module names."""
    records = [make_record("app_name", value="My App")]
    reserved = _compile(records, reserved_identifiers=frozenset({"APP_NAME"}))
    assert reserved.units == []
    assert "reserved" in reserved.report.errors()[0].message

    clash = _compile(records, package_name="res", alias_module="res")
    assert clash.units == []
    bad = _compile(records, package_name="my-res")
    assert "not a module name" in bad.report.errors()[0].message
