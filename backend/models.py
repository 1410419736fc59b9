# backend/models.py
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

# Ordered header -> cell mapping. Read-only once parsed.
Row = Mapping[str, str]

def make_row(values: Dict[str, str]) -> Row:
    return MappingProxyType(dict(values))

@dataclass(frozen=True)
class ParseIssue:
    """A row-level diagnostic from the CSV reader. row is the 0-based data-row index (0 when unknown)."""
    row: int
    message: str

@dataclass(frozen=True)
class ParseResult:
    rows: Tuple[Row, ...] = ()
    columns: Tuple[str, ...] = ()
    issues: Tuple[ParseIssue, ...] = ()
    encoding: str = ""

@dataclass
class Group:
    key: str
    rows: List[Row] = field(default_factory=list)

@dataclass(frozen=True)
class GeneratedFile:
    filename: str
    content: str
    row_count: int = 0

@dataclass(frozen=True)
class SplitResult:
    """Output of one pipeline run over a single uploaded file."""
    grouping_column: str
    encoding: str
    files: Tuple[GeneratedFile, ...]
    source_rows: int
    dropped_rows: int
