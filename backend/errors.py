# backend/errors.py
from typing import Iterable

INVALID_FILE_TYPE = "Invalid file type. Please upload a CSV file."
NO_FILE_SELECTED = "Please select a file to process."
ARCHIVE_FAILED = "Could not create the ZIP file. Please try downloading files individually."
UNKNOWN_ERROR = "An unknown error occurred."


class SplitterError(Exception):
    """Base class. str(exc) is the message shown to the user."""


class InputValidationError(SplitterError):
    pass


class ParseError(SplitterError):
    def __init__(self, row: int, message: str):
        self.row = row
        self.message = message
        super().__init__(
            f"Error parsing CSV file on line {row}: {message}. Please check the file format."
        )


class SchemaError(SplitterError):
    def __init__(self, candidates: Iterable[str]):
        self.candidates = tuple(candidates)
        expected = ", ".join(f"'{name}'" for name in self.candidates)
        super().__init__(f"CSV must contain one of the following columns: {expected}")


class ArchiveError(SplitterError):
    def __init__(self, message: str = ARCHIVE_FAILED):
        super().__init__(message)


class ArchiveBusyError(SplitterError):
    def __init__(self, message: str = "A ZIP file is already being created."):
        super().__init__(message)
