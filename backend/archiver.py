# backend/archiver.py
import logging
import zipfile
from io import BytesIO
from typing import Sequence

from backend.errors import ArchiveError
from backend.models import GeneratedFile

logger = logging.getLogger(__name__)


def build_archive(files: Sequence[GeneratedFile]) -> bytes:
    """
    Bundle the generated CSVs into one in-memory zip, one top-level entry per file.
    Any failure raises ArchiveError; no partial archive is returned.
    """
    buffer = BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for f in files:
                zf.writestr(f.filename, f.content.encode("utf-8"))
    except Exception as e:
        logger.exception("Error creating ZIP file")
        raise ArchiveError() from e
    data = buffer.getvalue()
    logger.info("Built ZIP with %d entries (%d bytes)", len(files), len(data))
    return data
