"""Fold normalized nodes into the resource graph."""

import logging
from collections.abc import Iterable

from rescodegen.compile_options import CompileOptions
from rescodegen.diagnostics import DiagnosticsReport
from rescodegen.errors import DuplicateKeyError
from rescodegen.resource_graph import ResourceGraph
from rescodegen.resource_node import ResourceNode

logger = logging.getLogger(__name__)

PASS_NAME = "graph"


def build_graph(
    nodes: Iterable[ResourceNode],
    options: CompileOptions,
    report: DiagnosticsReport,
) -> ResourceGraph:
    """Insert ``nodes`` in the given order and report duplicate keys.

    ``nodes`` must already be in sorted file order, then declaration order;
    the first definition of each key wins.
    """
    graph = ResourceGraph()
    for node in nodes:
        if graph.insert(node):
            logger.debug(
                "%s redefined at %s", node.key.display_name(), node.origin.describe()
            )

    duplicates = 0
    for key, definitions in graph.duplicates():
        duplicates += 1
        report.add_error(
            DuplicateKeyError(
                key,
                [d.origin for d in definitions],
                fatal=options.duplicates_as_errors,
            ),
            PASS_NAME,
        )
    logger.info(
        "Built resource graph: %d keys, %d duplicated", len(graph), duplicates
    )
    return graph
