"""Turn parsed records into typed candidate nodes, validating shape only."""

import logging
import re
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

from rescodegen.compile_options import CompileOptions
from rescodegen.diagnostics import DiagnosticsReport
from rescodegen.errors import MalformedRecordError
from rescodegen.numeric_classifier import (
    NUMBER_TYPES,
    is_number_literal,
    normalize_number_type,
)
from rescodegen.parsed_record import ParsedRecord
from rescodegen.reference_expression import parse_reference_expression
from rescodegen.resource_key import ResourceKey
from rescodegen.resource_kind import KindSpec, ResourceKind, lookup_kind
from rescodegen.resource_node import (
    NodeOrigin,
    ResourceNode,
    TemplateDefinition,
    TemplateParam,
)

logger = logging.getLogger(__name__)

PASS_NAME = "normalize"

COLOR_RE = re.compile(r"#(?:[0-9A-Fa-f]{3,4}|[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})")
BOOL_LITERALS = {"true", "false"}
TEST_PROFILE = "test"

# Number tags that imply a default width when no ``type`` is given.
TAG_NUMBER_TYPES = {"int": "i64", "integer": "i64", "float": "f64", "double": "f64"}


def _origin(record: ParsedRecord) -> NodeOrigin:
    profile = record.profile
    return NodeOrigin(
        record.origin.file,
        record.origin.line,
        profile,
        record.origin.is_test or profile == TEST_PROFILE,
    )


def _malformed(record: ParsedRecord, reason: str) -> MalformedRecordError:
    label = "/".join((*record.namespace_path, record.name)) or "<unnamed>"
    return MalformedRecordError(
        f"Record '{label}' ({record.kind_tag}): {reason}", (_origin(record),)
    )


def _split_name(record: ParsedRecord) -> tuple[tuple[str, ...], str]:
    parts = record.name.strip().split("/") if record.name else []
    if not parts or any(not p.strip() for p in parts):
        raise _malformed(record, "missing or empty name segment")
    namespace = tuple(s.strip() for s in (*record.namespace_path, *parts[:-1]))
    if any(not s for s in namespace):
        raise _malformed(record, "empty namespace segment")
    return namespace, parts[-1].strip()


def _single_value(record: ParsedRecord) -> str:
    if record.raw_values is not None:
        raise _malformed(record, "a list of values is only valid for arrays")
    if record.raw_value is None:
        raise _malformed(record, "missing value")
    return str(record.raw_value)


def _number_type(record: ParsedRecord, default: str | None) -> str | None:
    override = normalize_number_type(record.attributes.get("type")) or default
    if override is not None and override not in NUMBER_TYPES:
        raise _malformed(record, f"unsupported number type '{override}'")
    return override


def _check_element(record: ParsedRecord, element: ResourceKind, text: str) -> str:
    if element is ResourceKind.NUMBER:
        if not is_number_literal(text):
            raise _malformed(record, f"invalid number literal '{text}'")
        return text.strip()
    if element is ResourceKind.BOOL:
        if text.strip().lower() not in BOOL_LITERALS:
            raise _malformed(record, f"invalid boolean literal '{text}'")
        return text.strip().lower()
    if element is ResourceKind.COLOR:
        if not COLOR_RE.fullmatch(text.strip()):
            raise _malformed(record, f"invalid color '{text}'")
        return text.strip()
    return text


def _template(record: ParsedRecord) -> TemplateDefinition:
    fmt: Any = record.raw_value
    if fmt is None:
        fmt = record.attributes.get("template")
    if fmt is None:
        raise _malformed(record, "template has no format string")
    params = record.attributes.get("params") or []
    if not isinstance(params, list):
        raise _malformed(record, "template params must be a list")
    declared: list[TemplateParam] = []
    for p in params:
        if not isinstance(p, dict) or not p.get("name") or not p.get("type"):
            raise _malformed(record, "each template param needs a name and a type")
        declared.append(TemplateParam(str(p["name"]).strip(), str(p["type"]).strip()))
    return TemplateDefinition(tuple(declared), str(fmt))


def _build_node(
    record: ParsedRecord, spec: KindSpec, key: ResourceKey, origin: NodeOrigin
) -> ResourceNode:
    kind = spec.kind
    if kind is ResourceKind.ARRAY:
        if record.raw_values is None:
            raise _malformed(record, "array requires a list of values")
        element = spec.element or ResourceKind.STRING
        values = tuple(
            _check_element(record, element, str(v)) for v in record.raw_values
        )
        number_type = None
        if element is ResourceKind.NUMBER:
            tag = record.kind_tag.strip().lower()
            default = spec.element_type
            number_type = default if tag == "array" else _number_type(record, default)
        return ResourceNode(key, spec, values, origin, number_type=number_type)

    if kind is ResourceKind.TEMPLATE:
        template = _template(record)
        return ResourceNode(
            key, spec, template.format_string, origin, template=template
        )

    raw = _single_value(record)
    if kind is ResourceKind.NUMBER:
        tag = record.kind_tag.strip().lower()
        number_type = _number_type(record, TAG_NUMBER_TYPES.get(tag))
        return ResourceNode(
            key,
            spec,
            _check_element(record, kind, raw),
            origin,
            number_type=number_type,
        )
    if kind is ResourceKind.BOOL:
        return ResourceNode(key, spec, _check_element(record, kind, raw), origin)
    if kind in {ResourceKind.STRING, ResourceKind.COLOR}:
        expression = parse_reference_expression(raw)
        if kind is ResourceKind.COLOR and not expression.has_references():
            raw = _check_element(record, kind, raw)
            expression = parse_reference_expression(raw)
        return ResourceNode(key, spec, raw, origin, expression=expression)
    return ResourceNode(key, spec, raw, origin)


def normalize_record(
    record: ParsedRecord, options: CompileOptions | None = None
) -> ResourceNode | None:
    """Map one record to a candidate node.

    Returns None for records filtered out by profile or test scope and raises
    ``MalformedRecordError`` for records that cannot become a node.
    """
    options = options or CompileOptions()
    origin = _origin(record)
    if origin.profile and options.active_profile and (
        origin.profile != options.active_profile
    ):
        logger.debug(
            "Skipping %s: profile %s is not active", record.name, origin.profile
        )
        return None
    if origin.is_test and not options.include_tests:
        logger.debug("Skipping test-scoped record %s", record.name)
        return None

    array_type = record.attributes.get("type")
    spec = lookup_kind(record.kind_tag or "", str(array_type) if array_type else None)
    if spec is None:
        raise _malformed(record, f"unknown resource kind '{record.kind_tag}'")
    namespace, name = _split_name(record)
    key = ResourceKey(namespace, name, spec, origin.profile)
    return _build_node(record, spec, key, origin)


def normalize_batch(
    records: Iterable[ParsedRecord], options: CompileOptions | None = None
) -> tuple[list[ResourceNode], list[MalformedRecordError]]:
    """Normalize records in declaration order, collecting malformed ones."""
    nodes: list[ResourceNode] = []
    problems: list[MalformedRecordError] = []
    for record in records:
        try:
            node = normalize_record(record, options)
        except MalformedRecordError as e:
            problems.append(e)
            continue
        if node is not None:
            nodes.append(node)
    return nodes, problems


def _declaration_order(record: ParsedRecord) -> int:
    return record.origin.line if record.origin.line is not None else 0


def normalize_records(
    records: Iterable[ParsedRecord],
    options: CompileOptions,
    report: DiagnosticsReport,
) -> list[ResourceNode]:
    """Normalize every record, grouped by file.

    Files are processed concurrently when ``options.workers > 1``; results
    are always merged in sorted file order, then declaration order.
    """
    by_file: dict[str, list[ParsedRecord]] = {}
    for record in records:
        by_file.setdefault(record.origin.file, []).append(record)
    for batch in by_file.values():
        batch.sort(key=_declaration_order)

    results: dict[str, tuple[list[ResourceNode], list[MalformedRecordError]]] = {}
    if options.workers > 1 and len(by_file) > 1:
        with ThreadPoolExecutor(max_workers=options.workers) as executor:
            futures = {
                executor.submit(normalize_batch, batch, options): file
                for file, batch in by_file.items()
            }
            for future in as_completed(futures):
                results[futures[future]] = future.result()
    else:
        for file, batch in by_file.items():
            results[file] = normalize_batch(batch, options)

    nodes: list[ResourceNode] = []
    for file in sorted(results):
        file_nodes, problems = results[file]
        for problem in problems:
            report.add_error(problem, PASS_NAME)
        nodes.extend(file_nodes)
    logger.info("Normalized %d resources from %d files", len(nodes), len(results))
    return nodes
