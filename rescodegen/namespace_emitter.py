"""Build the nested and flattened views of a resolved graph and render them."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from rescodegen.alias_table import AliasTable, build_alias_table
from rescodegen.compile_options import EmitOptions
from rescodegen.diagnostics import DiagnosticsReport
from rescodegen.errors import InvalidIdentifierError
from rescodegen.namespace_tree import NamespaceTree, build_namespace_tree
from rescodegen.render_alias_module import render_alias_module
from rescodegen.render_namespace_unit import UnitEntry, render_namespace_unit
from rescodegen.render_values import DECIMAL_MODULE, DecimalPool
from rescodegen.resource_graph import ResourceGraph
from rescodegen.resource_key import ResourceKey
from rescodegen.resource_kind import ResourceKind
from rescodegen.resource_node import NodeOrigin
from rescodegen.sanitizer import Sanitizer

logger = logging.getLogger(__name__)

PASS_NAME = "emit"

NESTED_VIEW = "nested"
ALIAS_VIEW = "alias"
STORAGE_VIEW = "storage"

# Names the rendered modules define themselves.
GENERATED_NAMES = {"__all__", "_Final", "_Decimal", "_TemplateFunction"}


@dataclass(frozen=True)
class RenderedUnit:
    """Generated source text plus the qualified path it represents."""

    view: str
    path: str
    relative_file: Path
    text: str


def _first_origin(tree: NamespaceTree, graph: ResourceGraph) -> tuple[NodeOrigin, ...]:
    for node in tree.walk():
        for key in node.keys:
            winner = graph.winner(key)
            if winner is not None:
                return (winner.origin,)
    return ()


class NamespaceEmitter:
    """Render the nested package units and the flattened alias module."""

    def __init__(
        self,
        graph: ResourceGraph,
        options: EmitOptions,
        report: DiagnosticsReport,
    ) -> None:
        """Bind the emitter to a resolved graph."""
        self.graph = graph
        self.options = options
        self.report = report
        self.sanitizer = Sanitizer(options.reserved_identifiers)
        self.modules: dict[tuple[str, ...], tuple[str, ...]] = {(): ()}
        self.entries: dict[tuple[str, ...], list[UnitEntry]] = {}
        self.children: dict[tuple[str, ...], list[str]] = {}

    def emit(self) -> list[RenderedUnit]:
        """Return every rendered unit, or nothing when an identifier is invalid."""
        failures = len(self.report.errors())
        self._check_output_names()
        tree = build_namespace_tree(n.key for n in self.graph.winners())
        for node in tree.walk():
            self._assign_modules(node)
            self._assign_identifiers(node)
        if len(self.report.errors()) > failures:
            return []
        table = self._alias_table()
        if table is None:
            return []

        pool = DecimalPool()
        package = self.options.package_name
        units: list[RenderedUnit] = []
        for node in tree.walk():
            module_path = self.modules[node.path]
            units.append(
                RenderedUnit(
                    NESTED_VIEW,
                    "/".join(node.path),
                    Path(package, *module_path, "__init__.py"),
                    render_namespace_unit(
                        module_path,
                        self.entries.get(node.path, []),
                        self.children.get(node.path, []),
                        package,
                        pool,
                    ),
                )
            )
        if pool:
            units.append(
                RenderedUnit(
                    STORAGE_VIEW,
                    DECIMAL_MODULE,
                    Path(package, f"{DECIMAL_MODULE}.py"),
                    pool.render(),
                )
            )
        units.append(self._alias_unit(table))
        logger.info("Rendered %d units", len(units))
        return units

    def _fail(
        self, error: InvalidIdentifierError, origins: tuple[NodeOrigin, ...]
    ) -> None:
        self.report.add_error(
            InvalidIdentifierError(error.message, origins or error.origins), PASS_NAME
        )

    def _check_output_names(self) -> None:
        for name in (self.options.package_name, self.options.alias_module):
            try:
                if self.sanitizer.normalize(name) != name:
                    msg = f"'{name}' is not a module name"
                    raise InvalidIdentifierError(msg)
            except InvalidIdentifierError as e:
                self._fail(e, ())
        if self.options.package_name == self.options.alias_module:
            msg = f"Package and alias module share a name: {self.options.alias_module}"
            self._fail(InvalidIdentifierError(msg), ())

    def _assign_modules(self, node: NamespaceTree) -> None:
        parent = self.modules.get(node.path)
        if parent is None:
            return
        taken: dict[str, str] = {}
        if not node.path:
            taken[DECIMAL_MODULE] = DECIMAL_MODULE
        names: list[str] = []
        for segment in sorted(node.children):
            child = node.children[segment]
            try:
                module = self.sanitizer.module(segment)
                if module in taken:
                    msg = (
                        f"Namespaces '{segment}' and '{taken[module]}' both map to "
                        f"module '{module}'"
                    )
                    raise InvalidIdentifierError(msg)
            except InvalidIdentifierError as e:
                self._fail(e, _first_origin(child, self.graph))
                continue
            taken[module] = segment
            names.append(module)
            self.modules[child.path] = (*parent, module)
        self.children[node.path] = names

    def _identifier(self, key: ResourceKey) -> str:
        if key.kind.kind is ResourceKind.TEMPLATE:
            return self.sanitizer.function(key.name, key.profile)
        return self.sanitizer.constant(key.name, key.profile)

    def _assign_identifiers(self, node: NamespaceTree) -> None:
        if node.path not in self.modules:
            return
        modules = set(self.children.get(node.path, []))
        entries: list[UnitEntry] = []
        for key in node.keys:
            winner = self.graph.winner(key)
            if winner is None:
                continue
            try:
                identifier = self._identifier(key)
            except InvalidIdentifierError as e:
                self._fail(e, (winner.origin,))
                continue
            losers = [d.origin for d in self.graph.definitions(key)[1:]]
            entries.append(UnitEntry(identifier, winner, losers))

        counts: dict[str, int] = {}
        for entry in entries:
            counts[entry.identifier] = counts.get(entry.identifier, 0) + 1
        for entry in entries:
            is_template = entry.node.spec.kind is ResourceKind.TEMPLATE
            if counts[entry.identifier] > 1 or (
                entry.identifier in modules and not is_template
            ):
                suffix = re.sub(r"\W", "_", entry.node.key.kind_tag()).upper()
                entry.identifier = f"{entry.identifier}_{suffix}"

        seen: set[str] = set()
        for entry in entries:
            problem = None
            if entry.identifier in modules:
                problem = f"collides with child namespace module '{entry.identifier}'"
            elif entry.identifier in seen:
                problem = f"collides with another definition as '{entry.identifier}'"
            elif entry.identifier in GENERATED_NAMES or entry.identifier.startswith(
                "_DECIMAL_"
            ):
                problem = f"shadows generated name '{entry.identifier}'"
            seen.add(entry.identifier)
            if problem:
                msg = f"{entry.node.key.display_name()} {problem}"
                self._fail(InvalidIdentifierError(msg), (entry.node.origin,))
        self.entries[node.path] = entries

    def _alias_table(self) -> AliasTable | None:
        keys = [
            n.key
            for n in self.graph.winners()
            if n.spec.kind is not ResourceKind.TEMPLATE
        ]
        try:
            return build_alias_table(keys, self.sanitizer)
        except InvalidIdentifierError as e:
            self._fail(e, ())
            return None

    def _alias_unit(self, table: AliasTable) -> RenderedUnit:
        identifiers = {
            e.node.key: e.identifier
            for entries in self.entries.values()
            for e in entries
        }
        package = self.options.package_name
        imports = [
            (
                alias,
                ".".join((package, *self.modules[key.namespace])),
                identifiers[key],
            )
            for alias, key in table.aliases.items()
        ]
        alias_module = self.options.alias_module
        return RenderedUnit(
            ALIAS_VIEW,
            alias_module,
            Path(f"{alias_module}.py"),
            render_alias_module(package, imports),
        )


def emit_units(
    graph: ResourceGraph, options: EmitOptions, report: DiagnosticsReport
) -> list[RenderedUnit]:
    """Render the nested package and the alias module of ``graph``."""
    return NamespaceEmitter(graph, options, report).emit()
