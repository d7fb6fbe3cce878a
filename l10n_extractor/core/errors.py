"""Exceptions raised by the extraction and rewrite pipeline."""

from .models import TextEdit


class ExtractorError(Exception):
    """Base class for pipeline errors."""


class SourceMismatchError(ExtractorError):
    """Raised when a syntax tree was not parsed from the text it is used with."""


class OverlappingEditsError(ExtractorError):
    """
    Raised when two edits for one file touch the same bytes.

    This is fatal for the file: applying either edit could corrupt code,
    so the rewrite is abandoned and the source is left untouched.
    """

    def __init__(self, first: TextEdit, second: TextEdit, file: str = ''):
        self.first = first
        self.second = second
        self.file = file
        where = f" in {file}" if file else ''
        super().__init__(
            f"Overlapping edits{where}: bytes {first.byte_offset}-{first.end} "
            f"and {second.byte_offset}-{second.end}"
        )
