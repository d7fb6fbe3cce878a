"""Core extraction, classification and rewrite modules."""

from .models import (
    StringRole,
    SourceLocation,
    ExtractionRecord,
    ClassificationResult,
    ClassifiedRecord,
    BoundRecord,
    TextEdit,
    RewriteResult,
)
from .syntax_tree import NodeKind, SyntaxTree
from .errors import ExtractorError, OverlappingEditsError, SourceMismatchError

__all__ = [
    'StringRole',
    'SourceLocation',
    'ExtractionRecord',
    'ClassificationResult',
    'ClassifiedRecord',
    'BoundRecord',
    'TextEdit',
    'RewriteResult',
    'NodeKind',
    'SyntaxTree',
    'ExtractorError',
    'OverlappingEditsError',
    'SourceMismatchError',
]
