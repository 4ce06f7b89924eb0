"""Validate template resources and lower them to callable definitions."""

import logging
import string

from rescodegen.diagnostics import DiagnosticsReport
from rescodegen.errors import InvalidTemplateError
from rescodegen.resource_graph import ResourceGraph
from rescodegen.resource_kind import ResourceKind
from rescodegen.resource_node import (
    ResolutionStatus,
    ResourceNode,
    TemplateDefinition,
    TemplateParam,
)
from rescodegen.template_function import TemplateFunction, canonical_param_type

logger = logging.getLogger(__name__)

PASS_NAME = "template"
UNUSED_PARAMETER = "UnusedTemplateParameter"


def placeholder_names(format_string: str) -> list[str]:
    """Return the ``{name}`` placeholders of ``format_string`` in order.

    ``{{`` and ``}}`` are literal braces. Raises ``ValueError`` for
    positional fields, conversions, format specs, attribute or index access
    and unbalanced braces.
    """
    names: list[str] = []
    for _, field_name, format_spec, conversion in string.Formatter().parse(
        format_string
    ):
        if field_name is None:
            continue
        if not field_name.isidentifier():
            msg = f"placeholder '{{{field_name}}}' must be a parameter name"
            raise ValueError(msg)
        if conversion or format_spec:
            msg = f"placeholder '{{{field_name}}}' may not carry a conversion or spec"
            raise ValueError(msg)
        names.append(field_name)
    return names


def lower_template(node: ResourceNode) -> tuple[TemplateDefinition, list[str]]:
    """Check a template node; returns the canonical definition and unused params.

    Raises ``InvalidTemplateError`` when the declaration is inconsistent.
    """
    if node.template is None:
        msg = f"{node.key.display_name()} has no template definition"
        raise InvalidTemplateError(msg, (node.origin,))
    label = node.key.display_name()

    params: list[TemplateParam] = []
    seen: set[str] = set()
    for p in node.template.params:
        type_name = canonical_param_type(p.type_name)
        if type_name is None:
            msg = f"{label}: parameter '{p.name}' has unsupported type '{p.type_name}'"
            raise InvalidTemplateError(msg, (node.origin,))
        if not p.name.isidentifier():
            msg = f"{label}: '{p.name}' is not a valid parameter name"
            raise InvalidTemplateError(msg, (node.origin,))
        if p.name in seen:
            msg = f"{label}: parameter '{p.name}' is declared more than once"
            raise InvalidTemplateError(msg, (node.origin,))
        seen.add(p.name)
        params.append(TemplateParam(p.name, type_name))

    try:
        used = placeholder_names(node.template.format_string)
    except ValueError as e:
        msg = f"{label}: {e}"
        raise InvalidTemplateError(msg, (node.origin,)) from e

    unknown = [name for name in used if name not in seen]
    if unknown:
        msg = f"{label}: placeholder '{{{unknown[0]}}}' matches no declared parameter"
        raise InvalidTemplateError(msg, (node.origin,))

    unused = [p.name for p in params if p.name not in used]
    return TemplateDefinition(tuple(params), node.template.format_string), unused


def expand_templates(graph: ResourceGraph, report: DiagnosticsReport) -> int:
    """Lower every template winner to a ``TemplateFunction``."""
    lowered = 0
    for node in graph.winners():
        if node.spec.kind is not ResourceKind.TEMPLATE:
            continue
        if node.status is not ResolutionStatus.UNRESOLVED:
            continue
        try:
            definition, unused = lower_template(node)
        except InvalidTemplateError as e:
            report.add_error(e, PASS_NAME)
            node.mark(ResolutionStatus.FAILED)
            continue
        for name in unused:
            report.warn(
                UNUSED_PARAMETER,
                f"{node.key.display_name()}: parameter '{name}' is never used",
                PASS_NAME,
                (node.origin,),
            )
        node.template = definition
        node.value = TemplateFunction(
            node.key.name,
            tuple((p.name, p.type_name) for p in definition.params),
            definition.format_string,
        )
        node.mark(ResolutionStatus.RESOLVED)
        lowered += 1
    logger.info("Lowered %d templates", lowered)
    return lowered
