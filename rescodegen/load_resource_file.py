"""Load YAML resource description files into parsed records."""

from pathlib import Path
from typing import Any

import yaml

from rescodegen.errors import ResourceFileError
from rescodegen.parsed_record import ParsedRecord, RecordOrigin

LINE_KEY = "__line__"
TESTS_DIR = "tests"
RECORD_ATTRIBUTES = ("type", "template", "params", "profile")


class ResourceLoader(yaml.BaseLoader):
    """Keeps every scalar as a string and records the line of each mapping."""

    def construct_mapping(
        self, node: yaml.MappingNode, deep: bool = False
    ) -> dict[Any, Any]:
        """Construct a mapping and tag it with its 1-based source line."""
        mapping = super().construct_mapping(node, deep=deep)
        mapping[LINE_KEY] = node.start_mark.line + 1
        return mapping


def _strip_lines(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _strip_lines(v) for k, v in value.items() if k != LINE_KEY}
    if isinstance(value, list):
        return [_strip_lines(v) for v in value]
    return value


def _split_namespace(value: Any) -> tuple[str, ...]:
    return tuple(p for p in str(value or "").split("/") if p)


def _record(
    entry: dict[str, Any],
    namespace: tuple[str, ...],
    profile: str | None,
    origin: RecordOrigin,
) -> ParsedRecord:
    value = entry.get("value")
    values = entry.get("values")
    if isinstance(value, list):
        value, values = None, value
    if values is not None and not isinstance(values, list):
        msg = f"{origin.file}:{origin.line}: 'values' must be a list"
        raise ResourceFileError(msg)
    attributes = {k: _strip_lines(entry[k]) for k in RECORD_ATTRIBUTES if k in entry}
    if profile and "profile" not in attributes:
        attributes["profile"] = profile
    return ParsedRecord(
        namespace_path=namespace,
        name=str(entry.get("name") or ""),
        kind_tag=str(entry.get("kind") or ""),
        raw_value=None if value is None else str(value),
        raw_values=None if values is None else [str(v) for v in values],
        attributes=attributes,
        origin=origin,
    )


def _walk(
    entries: Any,
    namespace: tuple[str, ...],
    profile: str | None,
    file_id: str,
    is_test: bool,
    records: list[ParsedRecord],
) -> None:
    if not isinstance(entries, list):
        msg = f"{file_id}: 'resources' must be a list"
        raise ResourceFileError(msg)
    for entry in entries:
        if not isinstance(entry, dict):
            msg = f"{file_id}: resource entries must be mappings, got {entry!r}"
            raise ResourceFileError(msg)
        line = entry.get(LINE_KEY)
        if "resources" in entry:
            _walk(
                entry["resources"],
                (*namespace, *_split_namespace(entry.get("namespace"))),
                entry.get("profile") or profile,
                file_id,
                is_test,
                records,
            )
            continue
        origin = RecordOrigin(file_id, line, is_test)
        records.append(_record(entry, namespace, profile, origin))


def load_resource_file(path: Path, root: Path | None = None) -> list[ParsedRecord]:
    """Parse one resource file into records in declaration order.

    ``root`` is the directory the file was discovered under; origins are
    reported relative to it and files below a ``tests`` directory are
    marked as test-scoped.
    """
    rel = path.relative_to(root) if root else path
    file_id = rel.as_posix()
    is_test = TESTS_DIR in rel.parts[:-1]

    loader = ResourceLoader(path.read_text(encoding="utf-8"))
    try:
        doc = loader.get_single_data()
    except yaml.YAMLError as e:
        msg = f"{file_id}: invalid YAML: {e}"
        raise ResourceFileError(msg) from e
    finally:
        loader.dispose()

    if doc is None or doc == "":
        return []
    if not isinstance(doc, dict) or "resources" not in doc:
        msg = f"{file_id}: expected a mapping with a 'resources' list"
        raise ResourceFileError(msg)

    records: list[ParsedRecord] = []
    _walk(
        doc["resources"],
        _split_namespace(doc.get("namespace")),
        doc.get("profile") or None,
        file_id,
        is_test,
        records,
    )
    return records


def find_resource_files(resource_dir: Path) -> list[Path]:
    """Return every ``*.yml``/``*.yaml`` file below ``resource_dir``, sorted."""
    return sorted([*resource_dir.rglob("*.yml"), *resource_dir.rglob("*.yaml")])


def load_resource_dir(resource_dir: Path) -> list[ParsedRecord]:
    """Load every resource file below ``resource_dir`` in sorted file order."""
    records: list[ParsedRecord] = []
    for f in find_resource_files(resource_dir):
        records.extend(load_resource_file(f, resource_dir))
    return records
