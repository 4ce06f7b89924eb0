"""Logic for rendering the flattened alias module."""

from rescodegen.render_values import GENERATED_HEADER


def render_alias_module(
    package_name: str, imports: list[tuple[str, str, str]]
) -> str:
    """Render the alias module from (alias, module path, identifier) triples."""
    parts = [
        f'"""Flattened aliases for every resource in ``{package_name}``."""',
        "",
        GENERATED_HEADER,
    ]
    if imports:
        parts.append("")
        parts.extend(
            f"from {module} import {identifier} as {alias}"
            for alias, module, identifier in imports
        )
    parts += ["", f"__all__ = {sorted(alias for alias, _, _ in imports)!r}"]
    return "\n".join(parts) + "\n"
