"""
l10n-extractor
==============

Find hardcoded, user-facing strings in Flutter/Dart code, classify them by
UI role and replace them with localization accessor calls.

Usage:
    from l10n_extractor import FileProcessor, FlutterAdapter

    processor = FileProcessor(FlutterAdapter(), dry_run=True)
    summary = processor.process(processor.find_source_files(Path('lib')))
    print(f"{summary.total_applied} strings would be replaced")

CLI:
    l10n-extractor init
    l10n-extractor extract lib/
    l10n-extractor rewrite --dry-run
"""

from .__version__ import __version__, __author__, __description__

# Core pipeline
from .core.literal_filter import should_extract
from .core.extractor import SyntaxExtractor, extract_from_file
from .core.classifier import ContextClassifier, classify
from .core.rewriter import RewriteEngine, rewrite_file
from .core.errors import ExtractorError, OverlappingEditsError, SourceMismatchError

# Framework adapters
from .frameworks.base import BaseAdapter
from .frameworks.flutter import FlutterAdapter

# Features
from .features.key_generator import KeyGenerator
from .features.file_processor import FileProcessor

__all__ = [
    '__version__',
    '__author__',
    '__description__',
    'should_extract',
    'SyntaxExtractor',
    'extract_from_file',
    'ContextClassifier',
    'classify',
    'RewriteEngine',
    'rewrite_file',
    'ExtractorError',
    'OverlappingEditsError',
    'SourceMismatchError',
    'BaseAdapter',
    'FlutterAdapter',
    'KeyGenerator',
    'FileProcessor',
]
