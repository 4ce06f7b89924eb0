"""Resolve ``@kind/path`` references into fully literal values."""

import logging
from dataclasses import dataclass, field

from rescodegen.diagnostics import DiagnosticsReport
from rescodegen.errors import (
    CyclicReferenceError,
    ReferenceTypeMismatchError,
    UnresolvedReferenceError,
)
from rescodegen.reference_expression import LiteralSegment, ReferenceToken
from rescodegen.resource_graph import ResourceGraph
from rescodegen.resource_key import ResourceKey
from rescodegen.resource_kind import (
    STRING_VALUED_KINDS,
    KindSpec,
    ResourceKind,
    lookup_kind,
)
from rescodegen.resource_node import ResolutionStatus, ResourceNode

logger = logging.getLogger(__name__)

PASS_NAME = "resolve"


@dataclass
class _Frame:
    """A node on the active resolution path."""

    node: ResourceNode
    pos: int = 0
    parts: list[str] = field(default_factory=list)
    failed: bool = False


def target_key(token: ReferenceToken, profile: str | None = None) -> ResourceKey:
    """Return the key a token names, optionally qualified by ``profile``."""
    spec = lookup_kind(token.kind_tag) or KindSpec(token.kind_tag, ResourceKind.CUSTOM)
    return ResourceKey.from_path(token.path, spec, profile)


def literal_value(node: ResourceNode) -> object:
    """Return the value of a node that needs no reference resolution."""
    kind = node.spec.kind
    if kind is ResourceKind.BOOL:
        return node.raw == "true"
    if kind is ResourceKind.ARRAY:
        if node.spec.element is ResourceKind.BOOL:
            return tuple(v == "true" for v in node.raw)
        return tuple(node.raw)
    return node.raw


class ReferenceResolver:
    """Depth-first resolution over the winner graph with an explicit stack.

    Every node is computed at most once; later references reuse the cached
    value, so resolving again adds no diagnostics.
    """

    def __init__(self, graph: ResourceGraph, report: DiagnosticsReport) -> None:
        """Bind the resolver to a fully built graph."""
        self.graph = graph
        self.report = report

    def lookup(
        self, token: ReferenceToken, source: ResourceNode
    ) -> ResourceNode | None:
        """Find the winner a token refers to.

        A key carrying the referencing node's profile takes precedence over
        the unqualified key.
        """
        if source.key.profile:
            node = self.graph.winner(target_key(token, source.key.profile))
            if node is not None:
                return node
        return self.graph.winner(target_key(token))

    def resolve_all(self) -> int:
        """Resolve every pending winner; returns the number newly resolved."""
        resolved = 0
        for node in self.graph.winners():
            if node.status is not ResolutionStatus.UNRESOLVED:
                continue
            if node.spec.kind in {ResourceKind.NUMBER, ResourceKind.TEMPLATE}:
                continue
            if node.spec.kind is ResourceKind.ARRAY and (
                node.spec.element is ResourceKind.NUMBER
            ):
                continue
            if self.resolve(node) is not None:
                resolved += 1
        logger.info("Resolved %d literal resources", resolved)
        return resolved

    def resolve(self, node: ResourceNode) -> object:
        """Resolve ``node`` and everything it depends on; returns its value.

        Returns None when the node failed.
        """
        if node.status is ResolutionStatus.UNRESOLVED:
            if node.expression is None:
                node.value = literal_value(node)
                node.mark(ResolutionStatus.RESOLVED)
            else:
                self._walk(node)
        return node.value if node.is_resolved else None

    def _walk(self, root: ResourceNode) -> None:
        root.mark(ResolutionStatus.RESOLVING)
        stack = [_Frame(root)]
        while stack:
            frame = stack[-1]
            segments = frame.node.expression.segments if frame.node.expression else ()
            if frame.pos == len(segments):
                stack.pop()
                self._finish(frame)
                if stack:
                    parent = stack[-1]
                    if frame.failed:
                        parent.failed = True
                    else:
                        parent.parts.append(frame.node.value)
                    parent.pos += 1
                continue

            segment = segments[frame.pos]
            if isinstance(segment, LiteralSegment):
                frame.parts.append(segment.text)
                frame.pos += 1
                continue

            target = self._check_target(frame, segment)
            if target is None:
                frame.failed = True
            elif target.status is ResolutionStatus.UNRESOLVED and target.expression:
                target.mark(ResolutionStatus.RESOLVING)
                stack.append(_Frame(target))
                continue
            elif target.status is ResolutionStatus.UNRESOLVED:
                frame.parts.append(str(self.resolve(target)))
            elif target.status is ResolutionStatus.RESOLVING:
                self._report_cycle(stack, target)
            elif target.status is ResolutionStatus.FAILED:
                frame.failed = True
            else:
                frame.parts.append(target.value)
            frame.pos += 1

    def _check_target(
        self, frame: _Frame, token: ReferenceToken
    ) -> ResourceNode | None:
        source = frame.node
        target = self.lookup(token, source)
        if target is None:
            self.report.add_error(
                UnresolvedReferenceError(source.key, target_key(token), source.origin),
                PASS_NAME,
            )
            return None
        if target.spec.kind not in STRING_VALUED_KINDS:
            self.report.add_error(
                ReferenceTypeMismatchError(source.key, target.key, source.origin),
                PASS_NAME,
            )
            return None
        return target

    def _report_cycle(self, stack: list[_Frame], target: ResourceNode) -> None:
        start = next(i for i, f in enumerate(stack) if f.node is target)
        members = stack[start:]
        for f in members:
            f.failed = True
        self.report.add_error(
            CyclicReferenceError(
                [f.node.key for f in members] + [target.key],
                [f.node.origin for f in members],
            ),
            PASS_NAME,
        )

    def _finish(self, frame: _Frame) -> None:
        if frame.failed:
            frame.node.mark(ResolutionStatus.FAILED)
            return
        frame.node.value = "".join(frame.parts)
        frame.node.mark(ResolutionStatus.RESOLVED)


def resolve_references(graph: ResourceGraph, report: DiagnosticsReport) -> int:
    """Resolve every string-like winner of ``graph``."""
    return ReferenceResolver(graph, report).resolve_all()
