"""Session state — the loaded file, the active sheet and its table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from excel_extractor.errors import DecodeFailure, EmptySheet, ExtractorError
from excel_extractor.export import export_filename, to_csv, to_json, to_records
from excel_extractor.io import FileKind, decode_workbook, detect_file_type, read_sheet
from excel_extractor.models import CellValue, NormalizedTable, Stats
from excel_extractor.pipeline import derive_stats, normalize


class SessionState(str, Enum):
    empty = "empty"
    loading = "loading"
    loaded = "loaded"
    switching = "switching"


@dataclass(frozen=True)
class Outcome:
    """Result of a session operation: the session plus an optional error."""

    session: Session
    error: ExtractorError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return self.error.message if self.error is not None else ""


class Session:
    """Holds one loaded workbook and the table of its active sheet.

    The raw bytes are kept for the lifetime of the session so that
    :meth:`switch_sheet` can re-decode a sheet without asking for the file
    again. Operations are expected to run one at a time; :attr:`busy` lets
    a host show a progress indicator and refuse overlapping requests.
    """

    def __init__(self) -> None:
        self.state = SessionState.empty
        self.file_name: str | None = None
        self.kind: FileKind | None = None
        self.sheet_names: list[str] = []
        self.active_sheet: str | None = None
        self.table: NormalizedTable | None = None
        self.stats: Stats | None = None
        self.error: ExtractorError | None = None
        self._data: bytes | None = None

    @property
    def busy(self) -> bool:
        """True while a load or sheet switch is decoding.

        The operations are synchronous, so only code running during the
        decode sees ``True``: a host that runs them on a worker thread, or a
        read hook called by the decoder.
        """
        return self.state in (SessionState.loading, SessionState.switching)

    @property
    def loaded(self) -> bool:
        return self.state is SessionState.loaded and self.table is not None

    # ── Lifecycle ────────────────────────────────────────────────

    def reset(self) -> None:
        """Drop the file, table, active sheet and error."""
        self.state = SessionState.empty
        self.file_name = None
        self.kind = None
        self.sheet_names = []
        self.active_sheet = None
        self.table = None
        self.stats = None
        self.error = None
        self._data = None

    def _fail(self, error: ExtractorError) -> Outcome:
        self.reset()
        self.error = error
        return Outcome(self, error)

    def load_file(self, data: bytes, file_name: str, mime_type: str | None = None) -> Outcome:
        """Load *data* and activate its first sheet.

        Any failure leaves the session empty with :attr:`error` set.
        """
        self.reset()
        try:
            kind = detect_file_type(file_name, mime_type)
        except ExtractorError as exc:
            return self._fail(exc)

        self.state = SessionState.loading
        try:
            workbook = decode_workbook(data, kind)
        except ExtractorError as exc:
            return self._fail(exc)

        first = workbook.first_sheet_name
        raw_sheet = workbook.sheets.get(first, []) if first is not None else []
        if not raw_sheet:
            return self._fail(EmptySheet())

        table = normalize(raw_sheet)
        self._data = data
        self.file_name = file_name
        self.kind = kind
        self.sheet_names = list(workbook.sheet_names)
        self.active_sheet = first
        self.table = table
        self.stats = derive_stats(table, len(workbook.sheet_names))
        self.state = SessionState.loaded
        return Outcome(self)

    def switch_sheet(self, name: str) -> Outcome:
        """Re-read sheet *name* from the retained bytes and make it active.

        On failure the previous table, stats and active sheet are kept.
        """
        if self._data is None or self.kind is None or self.stats is None:
            self.error = DecodeFailure("No file loaded")
            return Outcome(self, self.error)

        if name not in self.sheet_names:
            self.error = DecodeFailure(f"Error loading sheet {name!r}: not found")
            return Outcome(self, self.error)

        self.state = SessionState.switching
        try:
            raw_sheet = read_sheet(self._data, self.kind, name)
        except ExtractorError as exc:
            self.state = SessionState.loaded
            self.error = DecodeFailure(f"Error loading sheet {name!r}")
            self.error.__cause__ = exc
            return Outcome(self, self.error)

        table = normalize(raw_sheet)
        self.table = table
        self.stats = derive_stats(table, self.stats.total_sheets)
        self.active_sheet = name
        self.error = None
        self.state = SessionState.loaded
        return Outcome(self)

    # ── Export ───────────────────────────────────────────────────

    def _require_table(self) -> NormalizedTable:
        if self.table is None:
            raise ValueError("No table loaded; load a file before exporting")
        return self.table

    def to_csv(self) -> str:
        return to_csv(self._require_table())

    def to_records(self) -> list[dict[str, CellValue]]:
        return to_records(self._require_table())

    def to_json(self) -> str:
        return to_json(self._require_table())

    def export_filename(self, ext: str) -> str:
        if self.file_name is None or self.active_sheet is None:
            raise ValueError("No table loaded; load a file before exporting")
        return export_filename(self.file_name, self.active_sheet, ext)
