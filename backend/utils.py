# backend/utils.py
import re
from typing import Set

CSV_EXTENSION = ".csv"

def sanitize_filename(name: str) -> str:
    """
    Turn a group value into a file name: keep ASCII letters, digits, whitespace
    and hyphens, collapse whitespace runs into "_" and add the .csv extension.
    Accented letters are dropped ("Café & Cia!" -> "Caf_Cia.csv").
    """
    s = re.sub(r"[^A-Za-z0-9\s-]", "", name or "")
    s = re.sub(r"\s+", "_", s)
    return s.strip() + CSV_EXTENSION

def unique_filename(filename: str, taken: Set[str]) -> str:
    """
    Return filename, or filename with a numeric suffix (A.csv -> A_2.csv) when
    it is already in `taken`. The returned name is added to `taken`.
    """
    candidate = filename
    if candidate in taken:
        base = filename[: -len(CSV_EXTENSION)] if filename.endswith(CSV_EXTENSION) else filename
        n = 2
        while f"{base}_{n}{CSV_EXTENSION}" in taken:
            n += 1
        candidate = f"{base}_{n}{CSV_EXTENSION}"
    taken.add(candidate)
    return candidate
