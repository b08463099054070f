"""Sheet normalisation + stats — pure functions, no side effects."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

from excel_extractor.models import CellValue, NormalizedTable, RawSheet, Stats

EMPTY_STATE_TEXT = "No data found"

# Integral floats at or above this magnitude keep exponent notation.
_MAX_PLAIN_INTEGRAL = 1e21
_EXPONENT_RE = re.compile(r"e([+-])0*(\d)")

# ── Cell display ─────────────────────────────────────────────────


def cell_to_text(value: CellValue) -> str:
    """Return the canonical display string of a cell.

    Empty cells render as ``""``, booleans as ``true``/``false`` and
    integral floats without a fractional part (``30.0`` -> ``"30"``).
    Very large or small floats use exponent notation without zero
    padding (``1e+21``, ``1e-7``).
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < _MAX_PLAIN_INTEGRAL:
            return str(int(value))
        return _EXPONENT_RE.sub(r"e\1\2", repr(value))
    return str(value)


# ── Normaliser ───────────────────────────────────────────────────


def normalize(raw_sheet: RawSheet) -> NormalizedTable:
    """Split *raw_sheet* into header labels and data rows.

    The first row becomes ``headers`` (display strings, empty cells stay
    ``""``); every other row is kept as-is, in order, without padding or
    truncation. An empty sheet gives an empty table.
    """
    if not raw_sheet:
        return NormalizedTable(headers=[], rows=[])

    headers = [cell_to_text(cell) for cell in raw_sheet[0]]
    rows = [list(row) for row in raw_sheet[1:]]
    return NormalizedTable(headers=headers, rows=rows)


def derive_stats(table: NormalizedTable, total_sheets: int) -> Stats:
    """Derive display stats from *table*; *total_sheets* passes through."""
    return Stats(
        total_rows=len(table.rows),
        total_columns=len(table.headers),
        total_sheets=total_sheets,
    )


# ── Display grid ─────────────────────────────────────────────────


def column_label(header: str, index: int) -> str:
    """Return the label shown for column *index* (0-based)."""
    return header or f"Column {index + 1}"


def display_headers(table: NormalizedTable) -> list[str]:
    """Header labels widened to the widest row.

    Columns past ``headers`` exist only because some row overflows; they
    get an empty label rather than a placeholder.
    """
    labels = [column_label(h, i) for i, h in enumerate(table.headers)]
    labels.extend("" for _ in range(table.width - len(labels)))
    return labels


def display_row(row: Sequence[CellValue], width: int) -> list[str]:
    """Render *row* as strings, padding missing trailing cells with ``""``.

    Cells beyond *width* are kept.
    """
    cells = [cell_to_text(cell) for cell in row]
    if len(cells) < width:
        cells.extend("" for _ in range(width - len(cells)))
    return cells


def display_rows(table: NormalizedTable, limit: int | None = None) -> list[list[str]]:
    """Render the rows of *table* (at most *limit*) as a rectangular grid.

    Every row is padded to :attr:`NormalizedTable.width`, matching
    :func:`display_headers`.
    """
    width = table.width
    rows = table.rows if limit is None else table.rows[:limit]
    return [display_row(row, width) for row in rows]
