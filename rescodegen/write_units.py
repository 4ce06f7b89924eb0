"""Logic for writing rendered units to disk."""

from collections.abc import Iterable
from pathlib import Path

from rescodegen.namespace_emitter import RenderedUnit


def output_file_for_unit(out_root: Path, unit: RenderedUnit) -> Path:
    """Determine the output file path for a rendered unit."""
    # ui/settings -> out_root/r/ui/settings/__init__.py
    p = out_root / unit.relative_file
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def write_units(units: Iterable[RenderedUnit], out_root: Path) -> int:
    """Write all units under ``out_root``."""
    units = list(units)
    total = len(units)
    print(f"Writing {total} source units...")
    written = 0
    for unit in units:
        out_file = output_file_for_unit(out_root, unit)
        out_file.write_text(unit.text, encoding="utf-8")
        written += 1
        if written % 50 == 0:
            print(f"  ... wrote {written}/{total} units")
    return written
