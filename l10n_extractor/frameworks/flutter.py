"""Flutter/Dart framework adapter."""

from pathlib import Path
from typing import List, Optional

from .base import BaseAdapter
from .dart_syntax import DartSyntaxBuilder
from ..core.syntax_tree import SyntaxTree


class FlutterAdapter(BaseAdapter):
    """Adapter for Flutter projects using the gen_l10n ``AppLocalizations`` class."""

    DEFAULT_IMPORT_LINE = "import 'package:flutter_gen/gen_l10n/app_localizations.dart';"
    DEFAULT_TEMPLATE = 'AppLocalizations.of(context)!.{key}'

    # Code generators (json_serializable, freezed, auto_route, mockito, injectable)
    GENERATED_SUFFIXES = ('.g.dart', '.freezed.dart', '.gr.dart', '.mocks.dart', '.config.dart')

    exclude_dirs = BaseAdapter.exclude_dirs | {'.dart_tool', '.pub-cache', 'gen_l10n'}

    def __init__(
        self,
        exclude_patterns: Optional[List[str]] = None,
        import_line: Optional[str] = None,
        template: Optional[str] = None
    ):
        super().__init__(exclude_patterns)
        self.import_line = import_line or self.DEFAULT_IMPORT_LINE
        self.template = template or self.DEFAULT_TEMPLATE

    def get_file_extensions(self) -> List[str]:
        """Return Dart file extensions."""
        return ['.dart']

    def parse(self, source_text: str, path: str = '') -> SyntaxTree:
        return DartSyntaxBuilder(source_text, path).build()

    def get_accessor_import(self) -> str:
        return self.import_line

    def generate_localized_code(self, key: str, template: Optional[str] = None) -> str:
        """
        Build the accessor expression for a key.

        Example:
            >>> FlutterAdapter().generate_localized_code('loginTitle')
            'AppLocalizations.of(context)!.loginTitle'
        """
        return (template or self.template).format(key=key)

    def should_exclude_file(self, file_path: Path) -> bool:
        if file_path.name.endswith(self.GENERATED_SUFFIXES):
            return True
        # Output of flutter gen-l10n
        if file_path.name.startswith('app_localizations'):
            return True
        return super().should_exclude_file(file_path)
