"""CSV / JSON export of a normalised table."""

from __future__ import annotations

import re
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Literal

from excel_extractor.io import dump_json, write_json, write_text
from excel_extractor.models import CellValue, NormalizedTable
from excel_extractor.pipeline import cell_to_text

if TYPE_CHECKING:
    from excel_extractor.session import Session

ExportFormat = Literal["csv", "json"]

_LAST_EXTENSION_RE = re.compile(r"\.[^/.]+$")

# ── Serialisers ──────────────────────────────────────────────────


def to_csv(table: NormalizedTable) -> str:
    """Render *table* as comma-separated text.

    Fields are joined verbatim: there is no quoting or escaping, so a cell
    containing a comma or newline corrupts its line. Lines are joined with
    ``\\n`` and there is no trailing newline.
    """
    lines = [",".join(table.headers)]
    lines.extend(",".join(cell_to_text(cell) for cell in row) for row in table.rows)
    return "\n".join(lines)


def to_records(table: NormalizedTable) -> list[dict[str, CellValue]]:
    """Map every row to ``{header: cell}`` by position.

    Missing cells map to ``None``; cells past the last header are not
    represented. With duplicate headers the later column wins.
    """
    records: list[dict[str, CellValue]] = []
    for row in table.rows:
        record: dict[str, CellValue] = {}
        for index, header in enumerate(table.headers):
            record[header] = row[index] if index < len(row) else None
        records.append(record)
    return records


def to_json(table: NormalizedTable) -> str:
    """Render :func:`to_records` as 2-space indented JSON (header order kept)."""
    return dump_json(to_records(table))


# ── Artifacts ────────────────────────────────────────────────────


def export_filename(file_name: str, sheet_name: str, ext: str) -> str:
    """Return ``{base}_{sheet}.{ext}``, *base* being *file_name* minus its last extension."""
    base = _LAST_EXTENSION_RE.sub("", PurePath(file_name).name)
    return f"{base}_{sheet_name}.{ext}"


def write_export(out_dir: Path, session: Session, fmt: ExportFormat) -> Path:
    """Write the active table of *session* into *out_dir* and return the path.

    Raises
    ------
    ValueError
        If nothing is loaded or *fmt* is unknown.
    """
    if fmt not in ("csv", "json"):
        raise ValueError(f"Unsupported export format: {fmt!r}. Use csv or json.")

    path = Path(out_dir) / session.export_filename(fmt)
    if fmt == "csv":
        return write_text(path, session.to_csv())
    return write_json(path, session.to_records())
