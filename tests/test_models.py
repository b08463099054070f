from __future__ import annotations

import pytest

from excel_extractor.models import NormalizedTable, RawWorkbook, Stats


def test_stats_to_dict_uses_all_counts() -> None:
    stats = Stats(total_rows=2, total_columns=3, total_sheets=1)

    assert stats.to_dict() == {"total_rows": 2, "total_columns": 3, "total_sheets": 1}


def test_stats_rejects_negative_and_non_integer_counts() -> None:
    with pytest.raises(ValueError, match="total_rows"):
        Stats(total_rows=-1)

    with pytest.raises(TypeError, match="total_columns"):
        Stats(total_columns=True)  # type: ignore[arg-type]

    with pytest.raises(TypeError, match="total_sheets"):
        Stats(total_sheets=1.5)  # type: ignore[arg-type]


def test_table_headers_must_be_strings() -> None:
    with pytest.raises(TypeError, match="headers"):
        NormalizedTable(headers=["a", 1])  # type: ignore[list-item]

    with pytest.raises(TypeError, match="headers"):
        NormalizedTable(headers="ab")  # type: ignore[arg-type]


def test_table_width_counts_overflow_cells() -> None:
    table = NormalizedTable(headers=["A", "B"], rows=[["x"], ["1", "2", "3"]])

    assert table.width == 3
    assert NormalizedTable().width == 0


def test_table_to_dict_returns_copies() -> None:
    table = NormalizedTable(headers=["A"], rows=[["x"]])

    payload = table.to_dict()
    payload["headers"].append("B")
    payload["rows"][0].append("y")

    assert table.headers == ["A"]
    assert table.rows == [["x"]]


def test_raw_workbook_rejects_sheets_missing_from_names() -> None:
    with pytest.raises(ValueError, match="Other"):
        RawWorkbook(sheet_names=["Sheet1"], sheets={"Other": []})


def test_raw_workbook_first_sheet_name() -> None:
    assert RawWorkbook(sheet_names=["B", "A"]).first_sheet_name == "B"
    assert RawWorkbook().first_sheet_name is None
