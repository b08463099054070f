"""Data models shared by the decoder, pipeline, exporter and session."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from numbers import Integral
from typing import Any, Union

CellValue = Union[str, int, float, bool, None]
"""A resolved cell: string, number, boolean, or ``None`` for an empty cell."""

RawSheet = list[list[CellValue]]
"""Decoded sheet rows. Rows are ragged: they end at their last non-empty cell."""


def _to_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    result = int(value)
    if result < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return result


def _to_string_list(values: Sequence[Any] | None, field_name: str) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        raise TypeError(f"{field_name} must be a sequence of strings")
    normalized: list[str] = []
    for item in values:
        if not isinstance(item, str):
            raise TypeError(f"{field_name} items must be strings")
        normalized.append(item)
    return normalized


@dataclass
class RawWorkbook:
    """Sheet names in workbook order plus the sheets decoded so far."""

    sheet_names: list[str] = field(default_factory=list)
    sheets: dict[str, RawSheet] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.sheet_names = _to_string_list(self.sheet_names, "sheet_names")
        unknown = [name for name in self.sheets if name not in self.sheet_names]
        if unknown:
            raise ValueError(f"sheets contains unknown sheet names: {', '.join(unknown)}")

    @property
    def first_sheet_name(self) -> str | None:
        return self.sheet_names[0] if self.sheet_names else None


@dataclass
class NormalizedTable:
    """Header labels plus data rows, decoupled from the decoder's representation.

    Rows keep their source length: they may be shorter or longer than
    ``headers``.
    """

    headers: list[str] = field(default_factory=list)
    rows: list[list[CellValue]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.headers = _to_string_list(self.headers, "headers")

    @property
    def width(self) -> int:
        """Number of display columns: headers plus any overflow cells."""
        return max([len(self.headers), *(len(row) for row in self.rows)])

    def to_dict(self) -> dict[str, Any]:
        return {
            "headers": list(self.headers),
            "rows": [list(row) for row in self.rows],
        }


@dataclass
class Stats:
    """Display statistics. Always derived, never edited in place."""

    total_rows: int = 0
    total_columns: int = 0
    total_sheets: int = 0

    def __post_init__(self) -> None:
        self.total_rows = _to_non_negative_int(self.total_rows, "total_rows")
        self.total_columns = _to_non_negative_int(self.total_columns, "total_columns")
        self.total_sheets = _to_non_negative_int(self.total_sheets, "total_sheets")

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "total_columns": self.total_columns,
            "total_sheets": self.total_sheets,
        }
