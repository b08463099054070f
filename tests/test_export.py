"""Tests for the CSV / JSON serialisers and export artifacts."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path

import pytest

from excel_extractor.export import export_filename, to_csv, to_json, to_records, write_export
from excel_extractor.models import NormalizedTable
from excel_extractor.pipeline import normalize
from excel_extractor.session import Session


def test_to_csv_joins_headers_and_rows_without_trailing_newline() -> None:
    table = normalize([["Name", "Age"], ["Alice", "30"], ["Bob", "25"]])

    assert to_csv(table) == "Name,Age\nAlice,30\nBob,25"


def test_to_csv_renders_cells_with_display_strings() -> None:
    table = NormalizedTable(headers=["a", "b", "c"], rows=[[1, None, True], [2.0], []])

    assert to_csv(table) == "a,b,c\n1,,true\n2\n"


def test_to_csv_does_not_quote_embedded_delimiters() -> None:
    table = NormalizedTable(headers=["city"], rows=[["Paris, FR"]])

    assert to_csv(table) == "city\nParis, FR"


def test_to_csv_reparses_to_the_same_table() -> None:
    table = NormalizedTable(
        headers=["id", "name", "note"],
        rows=[["1", "Alice", "hello"], ["2", "Bob", "world"]],
    )

    parsed = list(csv.reader(io.StringIO(to_csv(table))))

    assert parsed[0] == table.headers
    assert parsed[1:] == table.rows


def test_to_records_maps_headers_by_position() -> None:
    sheet = [["Name", "Age"], ["Alice", 30], ["Bob", 25]]
    table = normalize(sheet)

    records = to_records(table)

    assert records == [{"Name": "Alice", "Age": 30}, {"Name": "Bob", "Age": 25}]
    for i, record in enumerate(records):
        for j, header in enumerate(table.headers):
            assert record[header] == sheet[i + 1][j]


def test_to_records_fills_missing_cells_with_none() -> None:
    table = normalize([["A", "B"], ["x"]])

    assert to_records(table) == [{"A": "x", "B": None}]


def test_to_records_drops_cells_past_the_headers() -> None:
    table = normalize([["A"], ["x", "overflow"]])

    assert to_records(table) == [{"A": "x"}]


def test_to_records_duplicate_headers_last_column_wins() -> None:
    table = normalize([["k", "k", "v"], ["first", "second", 1]])

    assert to_records(table) == [{"k": "second", "v": 1}]


def test_to_json_is_indented_and_keeps_header_order() -> None:
    table = normalize([["z", "a"], ["é", None]])

    text = to_json(table)

    assert text == '[\n  {\n    "z": "é",\n    "a": null\n  }\n]'
    assert json.loads(text) == [{"z": "é", "a": None}]


def test_to_json_empty_rows_gives_empty_array() -> None:
    assert to_json(normalize([["A"]])) == "[]"


@pytest.mark.parametrize(
    ("file_name", "expected"),
    [
        ("sales.xlsx", "sales_Sheet1.csv"),
        ("report.final.xls", "report.final_Sheet1.csv"),
        ("noext", "noext_Sheet1.csv"),
        ("dir/data.csv", "data_Sheet1.csv"),
    ],
)
def test_export_filename_strips_last_extension(file_name: str, expected: str) -> None:
    assert export_filename(file_name, "Sheet1", "csv") == expected


def test_write_export_writes_csv_and_json_artifacts(tmp_path: Path) -> None:
    session = Session()
    outcome = session.load_file(b"Name,Age\nAlice,30\n", "people.csv")
    assert outcome.ok

    csv_path = write_export(tmp_path, session, "csv")
    json_path = write_export(tmp_path, session, "json")

    assert csv_path == tmp_path / "people_Sheet1.csv"
    assert csv_path.read_text(encoding="utf-8") == "Name,Age\nAlice,30"
    assert json_path == tmp_path / "people_Sheet1.json"
    assert json.loads(json_path.read_text(encoding="utf-8")) == [{"Name": "Alice", "Age": "30"}]
    assert not (tmp_path / "people_Sheet1.csv.tmp").exists()


def test_write_export_requires_a_loaded_table(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="No table loaded"):
        write_export(tmp_path, Session(), "csv")


def test_write_export_rejects_unknown_format(tmp_path: Path) -> None:
    session = Session()
    session.load_file(b"a\n1\n", "x.csv")

    with pytest.raises(ValueError, match="Unsupported export format"):
        write_export(tmp_path, session, "xml")  # type: ignore[arg-type]
