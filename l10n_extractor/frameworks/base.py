"""Base adapter interface for different frameworks."""

from abc import ABC, abstractmethod
from fnmatch import fnmatch
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.syntax_tree import SyntaxTree


class BaseAdapter(ABC):
    """Base adapter for framework-specific parsing and code generation."""

    exclude_dirs = {
        'build', 'Build', '.build', '.git', 'node_modules', 'dist',
        'coverage', 'vendor', 'Pods',
    }

    def __init__(self, exclude_patterns: Optional[List[str]] = None):
        self.exclude_patterns: List[str] = list(exclude_patterns or [])

    @abstractmethod
    def get_file_extensions(self) -> List[str]:
        """Return list of file extensions to process (e.g., ['.dart'])."""
        pass

    @abstractmethod
    def parse(self, source_text: str, path: str = '') -> SyntaxTree:
        """
        Parse source text into a syntax tree.

        Args:
            source_text: Full file content
            path: File path recorded on the tree

        Returns:
            SyntaxTree; syntax problems are reported in ``tree.errors``
        """
        pass

    @abstractmethod
    def get_accessor_import(self) -> str:
        """Return the import line that makes the localization accessor available."""
        pass

    @abstractmethod
    def generate_localized_code(self, key: str, template: Optional[str] = None) -> str:
        """
        Generate the expression that replaces a literal.

        Args:
            key: Localization key
            template: Optional expression template containing ``{key}``

        Returns:
            Code snippet for the localized string
        """
        pass

    def parse_file(self, file_path: Path) -> Tuple[str, SyntaxTree]:
        """Read and parse a file, returning its text and tree."""
        source_text = file_path.read_text(encoding='utf-8')
        return source_text, self.parse(source_text, str(file_path))

    def should_exclude_file(self, file_path: Path) -> bool:
        """
        Check if file should be excluded from processing.

        Args:
            file_path: File path to check

        Returns:
            True if file should be excluded
        """
        # Check if any excluded directory in path
        if any(excluded in file_path.parts for excluded in self.exclude_dirs):
            return True

        # Check if generated file
        if 'Generated' in file_path.parts or 'generated' in file_path.name:
            return True

        posix = file_path.as_posix()
        for pattern in self.exclude_patterns:
            if pattern.endswith('/'):
                if pattern.rstrip('/') in file_path.parts:
                    return True
            elif fnmatch(file_path.name, pattern) or fnmatch(posix, pattern):
                return True

        return False
