# configurations/config.py
import codecs
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple
from dotenv import load_dotenv

DEFAULT_GROUPING_COLUMNS = (
    "Nome da operadora:",
    "Nome do restaurante:",
    "Nome da empresa:",
)

@dataclass(frozen=True)
class Settings:
    # Grouping
    grouping_columns: Tuple[str, ...] = DEFAULT_GROUPING_COLUMNS

    # Decoding
    primary_encoding: str = "utf-8-sig"
    fallback_encoding: str = "latin-1"

    # Output
    archive_name: str = "planilhas_por_operadora.zip"

    # Diagnostics
    log_level: str = "INFO"

def _is_known_encoding(name: str) -> bool:
    try:
        codecs.lookup(name)
    except LookupError:
        return False
    return True

def load_settings(env_path: Optional[str] = None) -> Settings:
    load_dotenv(dotenv_path=env_path)

    raw_columns = os.getenv("SPLITTER_GROUPING_COLUMNS", "").strip()
    grouping_columns = tuple(c.strip() for c in raw_columns.split(";") if c.strip()) if raw_columns \
        else DEFAULT_GROUPING_COLUMNS
    primary_encoding = os.getenv("SPLITTER_PRIMARY_ENCODING", "utf-8-sig").strip()
    fallback_encoding = os.getenv("SPLITTER_FALLBACK_ENCODING", "latin-1").strip()
    archive_name = os.getenv("SPLITTER_ARCHIVE_NAME", "planilhas_por_operadora.zip").strip()
    log_level = os.getenv("SPLITTER_LOG_LEVEL", "INFO").strip().upper()

    # Minimal validation
    if not grouping_columns:
        raise RuntimeError("SPLITTER_GROUPING_COLUMNS must name at least one column")
    for enc in (primary_encoding, fallback_encoding):
        if not _is_known_encoding(enc):
            raise RuntimeError(f"Unknown text encoding in .env: {enc!r}")
    if not archive_name.lower().endswith(".zip"):
        raise RuntimeError("SPLITTER_ARCHIVE_NAME must end with .zip")
    if not isinstance(logging.getLevelName(log_level), int):
        raise RuntimeError(f"Unknown SPLITTER_LOG_LEVEL: {log_level!r}")

    return Settings(
        grouping_columns=grouping_columns,
        primary_encoding=primary_encoding,
        fallback_encoding=fallback_encoding,
        archive_name=archive_name,
        log_level=log_level,
    )

def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
