# backend/csv_writer.py
from typing import List, Optional, Sequence, Set

import pandas as pd

from backend.models import GeneratedFile, Group, Row
from backend.utils import sanitize_filename, unique_filename


def serialize_rows(rows: Sequence[Row], columns: Optional[Sequence[str]] = None) -> str:
    """
    Write rows back to CSV text with the header row first.
    Column order follows `columns` when given, else the first row's keys.
    """
    if columns is None:
        columns = list(rows[0].keys()) if rows else []
    df = pd.DataFrame([dict(r) for r in rows], columns=list(columns), dtype=object)
    return df.fillna("").to_csv(index=False, lineterminator="\r\n")


def build_generated_files(groups: Sequence[Group], columns: Optional[Sequence[str]] = None) -> List[GeneratedFile]:
    files: List[GeneratedFile] = []
    taken: Set[str] = set()
    for group in groups:
        filename = unique_filename(sanitize_filename(group.key), taken)
        files.append(
            GeneratedFile(
                filename=filename,
                content=serialize_rows(group.rows, columns),
                row_count=len(group.rows),
            )
        )
    return files
