"""Orchestration of the compilation passes over a batch of parsed records."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from rescodegen.compile_options import CompileOptions, EmitOptions
from rescodegen.diagnostics import DiagnosticsReport
from rescodegen.graph_builder import build_graph
from rescodegen.namespace_emitter import RenderedUnit, emit_units
from rescodegen.numeric_classifier import classify_graph_numbers
from rescodegen.parsed_record import ParsedRecord
from rescodegen.record_normalizer import normalize_records
from rescodegen.reference_resolver import resolve_references
from rescodegen.resource_graph import ResourceGraph
from rescodegen.template_expander import expand_templates

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Outcome of one build: the graph, its diagnostics and the rendered units.

    ``units`` is empty whenever a fatal diagnostic was collected.
    """

    graph: ResourceGraph
    report: DiagnosticsReport
    units: list[RenderedUnit] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return True when emission was allowed."""
        return not self.report.has_fatal()

    def raise_for_errors(self) -> None:
        """Raise ``BuildFailedError`` when the build failed."""
        self.report.gate()


def compile_records(
    records: Iterable[ParsedRecord],
    options: CompileOptions | None = None,
    emit_options: EmitOptions | None = None,
    report: DiagnosticsReport | None = None,
) -> CompileResult:
    """Run every pass over ``records``.

    Passes collect problems into the report rather than raising, so a
    single run reports every problem. Nothing is emitted once a fatal
    diagnostic exists.
    """
    options = options or CompileOptions()
    emit_options = emit_options or EmitOptions()
    report = report or DiagnosticsReport()

    nodes = normalize_records(records, options, report)
    graph = build_graph(nodes, options, report)
    classify_graph_numbers(graph, report)
    expand_templates(graph, report)
    resolve_references(graph, report)

    result = CompileResult(graph, report)
    if report.has_fatal():
        logger.error("Build failed with %d error(s)", len(report.errors()))
        return result

    units = emit_units(graph, emit_options, report)
    if not report.has_fatal():
        result.units = units
    return result
