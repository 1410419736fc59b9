# backend/split_service.py
import logging
import threading
from concurrent.futures import Executor, Future
from typing import Optional, Tuple

from configurations.config import Settings
from backend.archiver import build_archive
from backend.csv_parser import parse
from backend.csv_writer import build_generated_files
from backend.errors import (
    ArchiveBusyError,
    InputValidationError,
    SchemaError,
    SplitterError,
    INVALID_FILE_TYPE,
    NO_FILE_SELECTED,
    UNKNOWN_ERROR,
)
from backend.grouping import partition, resolve_grouping_column
from backend.models import GeneratedFile, SplitResult

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv"


def validate_upload(filename: str, content_type: Optional[str]) -> None:
    """Accept a file when either its media type or its extension says CSV."""
    if (content_type or "") != CSV_MEDIA_TYPE and not (filename or "").lower().endswith(".csv"):
        raise InputValidationError(INVALID_FILE_TYPE)


def split_csv(raw_bytes: bytes, settings: Optional[Settings] = None) -> SplitResult:
    """
    Run the whole pipeline over one uploaded file: parse with encoding fallback,
    find the grouping column, bucket the rows and serialize one CSV per bucket.
    """
    settings = settings or Settings()
    parsed = parse(
        raw_bytes,
        candidates=settings.grouping_columns,
        primary_encoding=settings.primary_encoding,
        fallback_encoding=settings.fallback_encoding,
    )

    column = resolve_grouping_column(parsed.rows, settings.grouping_columns)
    if column is None:
        raise SchemaError(settings.grouping_columns)

    groups = partition(parsed.rows, column)
    files = build_generated_files(groups, parsed.columns)
    kept = sum(len(g.rows) for g in groups)

    logger.info(
        "Split %d rows on %r into %d files (%d rows without a value dropped)",
        len(parsed.rows), column, len(files), len(parsed.rows) - kept,
    )
    return SplitResult(
        grouping_column=column,
        encoding=parsed.encoding,
        files=tuple(files),
        source_rows=len(parsed.rows),
        dropped_rows=len(parsed.rows) - kept,
    )


class SplitSession:
    """
    Per-user state for the splitter page: the selected file, the latest results,
    the error to show, and the loading/zipping flags.

    Splitting and zipping run as two independent operations on an executor and
    hand back Futures. A new split does not cancel one already running; only the
    most recent run may update the session.

    The executor is shared between sessions and owned by the caller, which is
    also responsible for shutting it down.
    """

    def __init__(self, settings: Settings, executor: Executor):
        self._settings = settings
        self._executor = executor
        self._lock = threading.Lock()
        self._run_id = 0

        self.source_name: Optional[str] = None
        self.source_type: Optional[str] = None
        self._source_bytes: Optional[bytes] = None

        self.result: Optional[SplitResult] = None
        self.error: Optional[str] = None
        self.is_loading = False
        self.is_zipping = False

    # ---------- Selection ----------

    @property
    def has_file(self) -> bool:
        return self._source_bytes is not None

    @property
    def generated_files(self) -> Tuple[GeneratedFile, ...]:
        return self.result.files if self.result else ()

    def select_file(self, name: str, content_type: Optional[str], data: bytes) -> None:
        try:
            validate_upload(name, content_type)
        except InputValidationError as e:
            with self._lock:
                self.error = str(e)
                self._set_source(None, None, None)
            raise
        with self._lock:
            self.error = None
            self.result = None
            self._set_source(name, content_type, data)

    def clear(self) -> None:
        with self._lock:
            self._set_source(None, None, None)
            self.result = None
            self.error = None

    def _set_source(self, name, content_type, data) -> None:
        self.source_name = name
        self.source_type = content_type
        self._source_bytes = data

    # ---------- Split ----------

    def start_processing(self) -> Future:
        with self._lock:
            if self._source_bytes is None:
                self.error = NO_FILE_SELECTED
                raise InputValidationError(NO_FILE_SELECTED)
            self._run_id += 1
            run_id = self._run_id
            data = self._source_bytes
            name = self.source_name
            self.is_loading = True
            self.error = None
            self.result = None
        return self._executor.submit(self._run_split, run_id, name, data)

    def _run_split(self, run_id: int, name: str, data: bytes) -> SplitResult:
        try:
            result = split_csv(data, self._settings)
        except SplitterError as e:
            logger.error("Splitting %s failed: %s", name, e)
            self._finish_split(run_id, None, str(e))
            raise
        except Exception:
            logger.exception("Unexpected error while splitting %s", name)
            self._finish_split(run_id, None, UNKNOWN_ERROR)
            raise
        self._finish_split(run_id, result, None)
        return result

    def _finish_split(self, run_id: int, result: Optional[SplitResult], error: Optional[str]) -> None:
        with self._lock:
            if run_id != self._run_id:
                # superseded by a newer run
                return
            self.result = result
            self.error = error
            self.is_loading = False

    # ---------- Archive ----------

    def start_archive(self) -> Optional[Future]:
        """Zip the current results. Returns None when there is nothing to zip."""
        with self._lock:
            if self.is_zipping:
                raise ArchiveBusyError()
            files = self.generated_files
            if not files:
                return None
            self.is_zipping = True
        return self._executor.submit(self._run_archive, files)

    def _run_archive(self, files: Tuple[GeneratedFile, ...]) -> bytes:
        try:
            return build_archive(files)
        except SplitterError as e:
            with self._lock:
                self.error = str(e)
            raise
        finally:
            with self._lock:
                self.is_zipping = False
