"""Pipeline orchestration features."""

from .key_generator import KeyGenerator, KeyGenerationError
from .file_processor import FileProcessor, FileSummary, ProcessingSummary, SkipNote

__all__ = [
    'KeyGenerator',
    'KeyGenerationError',
    'FileProcessor',
    'FileSummary',
    'ProcessingSummary',
    'SkipNote',
]
