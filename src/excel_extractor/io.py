"""I/O helpers — detect file kinds, decode workbooks, write artifacts."""

from __future__ import annotations

import csv
import io
import json
import math
from collections.abc import Iterable
from datetime import date, datetime, time
from pathlib import Path, PurePath
from typing import Any, Callable, Literal, cast

import pandas as pd

from excel_extractor import CSV_SHEET_NAME, MIME_TYPES, SUPPORTED_EXTENSIONS
from excel_extractor.errors import DecodeFailure, UnsupportedFileType
from excel_extractor.models import CellValue, RawSheet, RawWorkbook

FileKind = Literal["xlsx", "xls", "csv"]

_CSV_ENCODINGS = ("utf-8-sig", "utf-8", "latin-1")
_CSV_DELIMITERS = ",;\t|"
_SNIFF_SAMPLE_CHARS = 64 * 1024
_EXCEL_ENGINES: dict[str, str] = {"xlsx": "openpyxl", "xls": "xlrd"}

# ── File kind ────────────────────────────────────────────────────


def detect_file_type(file_name: str, mime_type: str | None = None) -> FileKind:
    """Return the file kind of *file_name*.

    The extension wins; *mime_type* is only consulted when the extension
    is not one of ``.xlsx``, ``.xls`` or ``.csv``.

    Raises
    ------
    UnsupportedFileType
        If neither signal names a supported kind.
    """
    suffix = PurePath(file_name).suffix.lower()
    kind = SUPPORTED_EXTENSIONS.get(suffix)
    if kind is None and mime_type:
        kind = MIME_TYPES.get(mime_type.split(";", 1)[0].strip().lower())
    if kind is None:
        raise UnsupportedFileType()
    return cast(FileKind, kind)


# ── Cell conversion ──────────────────────────────────────────────


def _to_cell(value: Any) -> CellValue:
    if value is None or value is pd.NaT or value is pd.NA:
        return None
    if isinstance(value, str):
        return value or None
    item = getattr(value, "item", None)
    if callable(item):
        # numpy scalar -> Python scalar
        value = item()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    return str(value)


def _trim_row(cells: Iterable[CellValue]) -> list[CellValue]:
    row = list(cells)
    while row and row[-1] is None:
        row.pop()
    return row


def _used_range(df: pd.DataFrame) -> pd.DataFrame:
    filled = df.notna()
    rows_with_data = filled.any(axis=1).to_numpy()
    if not rows_with_data.any():
        return df.iloc[0:0, 0:0]
    first_row = int(rows_with_data.argmax())
    first_col = int(filled.any(axis=0).to_numpy().argmax())
    return df.iloc[first_row:, first_col:]


def frame_to_sheet(df: pd.DataFrame) -> RawSheet:
    """Convert a header-less DataFrame into ragged sheet rows.

    Leading empty rows and columns are outside the sheet's used range and
    are dropped, so the first row always holds data. Blank rows after it
    are kept as ``[]``.
    """
    df = _used_range(df)
    return [
        _trim_row(_to_cell(value) for value in record)
        for record in df.itertuples(index=False, name=None)
    ]


# ── Decoding ─────────────────────────────────────────────────────


def _decode_text(data: bytes) -> str:
    last_exc: Exception | None = None
    for encoding in _CSV_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as exc:
            last_exc = exc
    raise DecodeFailure("Could not decode CSV text") from last_exc


def _sniff_delimiter(text: str) -> str:
    try:
        dialect = csv.Sniffer().sniff(text[:_SNIFF_SAMPLE_CHARS], delimiters=_CSV_DELIMITERS)
    except csv.Error:
        return ","
    return dialect.delimiter


def read_csv_sheet(data: bytes) -> RawSheet:
    """Decode CSV bytes into ragged rows.

    Rows keep their own length, so files with uneven field counts are
    read without padding. Empty fields become empty cells.
    """
    text = _decode_text(data)
    if not text.strip():
        return []
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=_sniff_delimiter(text))
    try:
        rows = [_trim_row(field if field != "" else None for field in record) for record in reader]
    except csv.Error as exc:
        raise DecodeFailure(f"Error reading file: {exc}") from exc
    while rows and not rows[-1]:
        rows.pop()
    return rows


def _missing_xlrd() -> DecodeFailure:
    return DecodeFailure(
        "Reading .xls files needs 'xlrd'. "
        "Either convert to .xlsx or add dependency: pip install xlrd"
    )


def _open_excel(data: bytes, kind: FileKind) -> pd.ExcelFile:
    try:
        return pd.ExcelFile(io.BytesIO(data), engine=_EXCEL_ENGINES[kind])
    except ImportError as exc:
        raise _missing_xlrd() from exc
    except Exception as exc:
        raise DecodeFailure(f"Error reading file: {exc}") from exc


def _read_excel(source: Any, kind: FileKind, sheet_name: Any) -> pd.DataFrame:
    """Read one sheet from *source* (a byte stream or an open ``ExcelFile``)."""
    read_excel = cast(Callable[..., pd.DataFrame], getattr(pd, "read_excel"))
    try:
        return read_excel(
            source,
            sheet_name=sheet_name,
            header=None,
            dtype=object,
            keep_default_na=False,
            na_values=[""],
            engine=_EXCEL_ENGINES[kind],
        )
    except ImportError as exc:
        raise _missing_xlrd() from exc
    except Exception as exc:
        raise DecodeFailure(f"Error reading file: {exc}") from exc


def decode_workbook(data: bytes, kind: FileKind) -> RawWorkbook:
    """Read the sheet names of *data* and decode its first sheet only.

    Other sheets are decoded on demand with :func:`read_sheet`.

    Raises
    ------
    DecodeFailure
        If the bytes are not a readable workbook of *kind*.
    """
    if kind == "csv":
        sheet = read_csv_sheet(data)
        return RawWorkbook(sheet_names=[CSV_SHEET_NAME], sheets={CSV_SHEET_NAME: sheet})

    book = _open_excel(data, kind)
    try:
        names = list(book.sheet_names)
        if not names:
            raise DecodeFailure("Workbook has no sheets")
        first = frame_to_sheet(_read_excel(book, kind, names[0]))
    finally:
        book.close()
    sheet_names = [str(name) for name in names]
    return RawWorkbook(sheet_names=sheet_names, sheets={sheet_names[0]: first})


def read_sheet(data: bytes, kind: FileKind, sheet_name: str) -> RawSheet:
    """Decode only *sheet_name* from *data*.

    Raises
    ------
    DecodeFailure
        If the sheet does not exist or the bytes cannot be read.
    """
    if kind == "csv":
        if sheet_name != CSV_SHEET_NAME:
            raise DecodeFailure(f"Sheet {sheet_name!r} not found")
        return read_csv_sheet(data)

    return frame_to_sheet(_read_excel(io.BytesIO(data), kind, sheet_name))


# ── Writing ──────────────────────────────────────────────────────


def _json_default(obj: Any) -> Any:
    if isinstance(obj, PurePath):
        return str(obj)
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    item = getattr(obj, "item", None)
    if callable(item):
        converted = item()
        if isinstance(converted, (str, int, float, bool)) or converted is None:
            return converted
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dump_json(data: Any, *, sort_keys: bool = False) -> str:
    """Serialise *data* as 2-space indented JSON, keeping non-ASCII text."""
    return json.dumps(
        data,
        indent=2,
        sort_keys=sort_keys,
        ensure_ascii=False,
        default=_json_default,
    )


def write_text(path: Path, text: str) -> Path:
    """Write *text* to *path* atomically and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(text, encoding="utf-8", newline="")
    tmp_path.replace(path)
    return path


def write_json(path: Path, data: Any, *, sort_keys: bool = False) -> Path:
    """Write *data* as pretty-printed JSON to *path* (atomic)."""
    return write_text(path, dump_json(data, sort_keys=sort_keys) + "\n")
