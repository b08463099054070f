"""Error kinds surfaced to the host as a single human-readable message."""

from __future__ import annotations


class ExtractorError(Exception):
    """Base class for every failure reported at the session boundary."""

    default_message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UnsupportedFileType(ExtractorError):
    """The file is neither xlsx, xls nor csv (by extension or MIME type)."""

    default_message = "Please choose a valid Excel file (.xlsx, .xls, .csv)"


class DecodeFailure(ExtractorError):
    """The workbook bytes could not be parsed, or a sheet could not be read."""

    default_message = "Error reading file"


class EmptySheet(ExtractorError):
    """The first sheet of a freshly loaded workbook has zero rows."""

    default_message = "File is empty"
