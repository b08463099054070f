"""excel-extractor — View and export spreadsheet sheets as CSV or JSON."""

__version__ = "0.1.0"

SUPPORTED_EXTENSIONS: dict[str, str] = {".xlsx": "xlsx", ".xls": "xls", ".csv": "csv"}
"""File extension -> file kind. The extension is authoritative."""

MIME_TYPES: dict[str, str] = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/vnd.ms-excel": "xls",
    "text/csv": "csv",
}
"""MIME type -> file kind, consulted only when the extension is unknown."""

CSV_SHEET_NAME = "Sheet1"
