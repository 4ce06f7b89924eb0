"""Tests for the diagnostics report."""

import json
from pathlib import Path

import pytest

from rescodegen.diagnostics import DiagnosticsReport, Severity
from rescodegen.errors import BuildFailedError, DuplicateKeyError, MalformedRecordError
from rescodegen.resource_key import ResourceKey
from rescodegen.resource_kind import STRING
from rescodegen.resource_node import NodeOrigin


def test_severity_follows_error_flag() -> None:
    """Verify that fatal errors and warnings are told apart."""
    report = DiagnosticsReport()
    origins = [NodeOrigin("a.yml", 1), NodeOrigin("b.yml", 2)]
    key = ResourceKey((), "title", STRING)

    report.add_error(DuplicateKeyError(key, origins), "graph")
    report.add_error(MalformedRecordError("bad shape", origins[:1]), "normalize")
    assert not report.has_fatal()
    report.gate()

    report.add_error(DuplicateKeyError(key, origins, fatal=True), "graph")
    assert report.has_fatal()
    assert [d.severity for d in report.diagnostics] == [
        Severity.WARNING,
        Severity.WARNING,
        Severity.ERROR,
    ]
    with pytest.raises(BuildFailedError, match=r"1 error\(s\)"):
        report.gate()


def test_format_names_every_origin() -> None:
    """Verify the one line rendering of a diagnostic."""
    report = DiagnosticsReport()
    report.warn("UnusedTemplateParameter", "unused", "template", (NodeOrigin("t.yml"),))
    assert report.diagnostics[0].format() == (
        "warning[UnusedTemplateParameter] unused (at t.yml)"
    )


def test_generate_report(tmp_path: Path) -> None:
    """Verify the JSON report layout."""
    report = DiagnosticsReport(config_hash="abc")
    report.warn("Kind", "first", "normalize", (NodeOrigin("a.yml", 3, "debug"),))
    report.warn("Kind", "second", "graph")

    out = tmp_path / "report.json"
    report.generate_report(str(out))
    data = json.loads(out.read_text(encoding="utf-8"))

    assert data["meta"]["config_hash"] == "abc"
    assert data["meta"]["total"] == 2  # noqa: PLR2004
    assert data["diagnostics"][0] == {
        "severity": "warning",
        "kind": "Kind",
        "pass": "normalize",
        "message": "first",
        "origins": [{"file": "a.yml", "line": 3, "profile": "debug"}],
    }
    assert data["stats"] == {
        "by_kind": {"Kind": 2},
        "by_severity": {"warning": 2},
        "fatal": False,
    }
