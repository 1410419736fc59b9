# backend/grouping.py
from typing import Dict, List, Optional, Sequence

from backend.models import Group, Row


def resolve_grouping_column(rows: Sequence[Row], candidates: Sequence[str]) -> Optional[str]:
    """
    Return the first candidate header present in the first row, or None.
    Only key presence counts; an empty value in the first row still resolves.
    """
    if not rows:
        return None
    first_row = rows[0]
    for name in candidates:
        if name in first_row:
            return name
    return None


def partition(rows: Sequence[Row], column: str) -> List[Group]:
    """
    Bucket rows by the trimmed value at `column`, keeping first-seen group order.
    Rows with an empty or missing value are left out.
    """
    groups: Dict[str, Group] = {}
    for row in rows:
        key = (row.get(column) or "").strip()
        if not key:
            continue
        if key not in groups:
            groups[key] = Group(key=key)
        groups[key].rows.append(row)
    return list(groups.values())
