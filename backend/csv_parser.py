# backend/csv_parser.py
import logging
import re
from io import StringIO
from typing import List, Sequence

import pandas as pd
from pandas.errors import EmptyDataError, ParserError

from configurations.config import DEFAULT_GROUPING_COLUMNS
from backend.errors import ParseError
from backend.grouping import resolve_grouping_column
from backend.models import ParseIssue, ParseResult, make_row

logger = logging.getLogger(__name__)

_LINE_NUMBER = re.compile(r"\b(?:line|row) (\d+)", re.IGNORECASE)


class _RaggedRows:
    """
    on_bad_lines hook: keeps records that have more fields than the header,
    cut down to the header width, and remembers the original field lists.
    """

    def __init__(self, width: int):
        self.width = width
        self.lines: List[List[str]] = []

    def __call__(self, bad_line: List[str]) -> List[str]:
        self.lines.append(bad_line)
        return bad_line[: self.width]

    def issues(self, records: List[List[str]], first_data: int) -> List[ParseIssue]:
        # Hook calls arrive in file order, so one forward scan finds each record.
        issues: List[ParseIssue] = []
        pos = first_data
        for line in self.lines:
            kept = line[: self.width]
            while pos < len(records) and records[pos] != kept:
                pos += 1
            issues.append(ParseIssue(
                row=max(pos - first_data, 0),
                message=f"Too many fields: expected {self.width} fields but parsed {len(line)}",
            ))
            pos += 1
        return issues


def _issue_from_error(exc: Exception, header: bool) -> ParseIssue:
    message = str(exc).strip()
    m = _LINE_NUMBER.search(message)
    if not m:
        return ParseIssue(row=0, message=message)
    # tokenizer line numbers are 1-based and count the header line
    row = int(m.group(1)) - 1 - (1 if header else 0)
    return ParseIssue(row=max(row, 0), message=message)


def _dedupe_headers(names: List[str]) -> List[str]:
    seen = {}
    out = []
    for name in names:
        if name in seen:
            seen[name] += 1
            candidate = f"{name}_{seen[name]}"
            while candidate in seen:
                seen[name] += 1
                candidate = f"{name}_{seen[name]}"
            name = candidate
        seen.setdefault(name, 0)
        out.append(name)
    return out


def _read_kwargs(skip_empty_lines: bool) -> dict:
    return dict(
        sep=",",
        header=None,
        dtype=object,
        keep_default_na=False,
        na_filter=False,
        skip_blank_lines=skip_empty_lines,
        engine="python",
    )


def read_csv_text(text: str, header: bool = True, skip_empty_lines: bool = True, encoding: str = "") -> ParseResult:
    """
    Parse decoded CSV text into string-only rows.

    The field count of the first record fixes the width. Longer records are
    kept, cut to that width, and reported as issues; short records are padded
    with "". Without a header, columns are named "0", "1", ...
    Issue rows are 0-based data-row indexes.
    """
    try:
        width = pd.read_csv(StringIO(text), nrows=1, **_read_kwargs(skip_empty_lines)).shape[1]
        ragged = _RaggedRows(width)
        df = pd.read_csv(StringIO(text), on_bad_lines=ragged, **_read_kwargs(skip_empty_lines))
    except EmptyDataError:
        return ParseResult(encoding=encoding)
    except ParserError as e:
        return ParseResult(issues=(_issue_from_error(e, header),), encoding=encoding)

    df = df.fillna("")
    first_data = 1 if header else 0
    issues = ragged.issues(df.values.tolist(), first_data)

    if header:
        columns = _dedupe_headers([str(c) for c in df.iloc[0].tolist()])
        df = df.iloc[1:]
    else:
        columns = [str(c) for c in df.columns]
    df.columns = columns

    rows = tuple(make_row(record) for record in df.to_dict(orient="records"))
    return ParseResult(rows=rows, columns=tuple(columns), issues=tuple(issues), encoding=encoding)


def _attempt(raw_bytes: bytes, encoding: str, header: bool, skip_empty_lines: bool) -> ParseResult:
    try:
        text = raw_bytes.decode(encoding)
    except UnicodeDecodeError as e:
        return ParseResult(
            issues=(ParseIssue(row=0, message=f"Could not decode file as {encoding} ({e.reason} at byte {e.start})"),),
            encoding=encoding,
        )
    return read_csv_text(text, header=header, skip_empty_lines=skip_empty_lines, encoding=encoding)


def _is_conclusive(result: ParseResult, candidates: Sequence[str]) -> bool:
    if not result.rows:
        return False
    return resolve_grouping_column(result.rows, candidates) is not None


def parse(
    raw_bytes: bytes,
    header: bool = True,
    skip_empty_lines: bool = True,
    candidates: Sequence[str] = DEFAULT_GROUPING_COLUMNS,
    primary_encoding: str = "utf-8-sig",
    fallback_encoding: str = "latin-1",
) -> ParseResult:
    """
    Decode and parse raw CSV bytes, retrying once with the fallback encoding.

    The primary attempt is kept only when it yields rows whose first row carries
    one of the candidate grouping headers. Otherwise the fallback attempt is used
    as-is. Issues alongside rows are only logged; issues with no rows at all
    raise ParseError for the first one.
    """
    result = _attempt(raw_bytes, primary_encoding, header, skip_empty_lines)
    if not _is_conclusive(result, candidates):
        reason = result.issues[0].message if result.issues else "no candidate grouping header"
        logger.warning(
            "Parsing with %s was inconclusive (%d rows, %d issues: %s), falling back to %s; "
            "accented characters may not be decoded correctly",
            primary_encoding, len(result.rows), len(result.issues), reason, fallback_encoding,
        )
        result = _attempt(raw_bytes, fallback_encoding, header, skip_empty_lines)

    if result.issues:
        if not result.rows:
            first = result.issues[0]
            raise ParseError(first.row, first.message)
        logger.warning("CSV parsing produced non-critical issues: %s", list(result.issues))

    logger.info("Parsed %d rows with %s", len(result.rows), result.encoding)
    return result
