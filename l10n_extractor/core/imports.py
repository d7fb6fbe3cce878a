"""Insert the localization accessor import into Dart source text."""

import re
from typing import List, Optional, Tuple

IMPORT_DIRECTIVE = re.compile(r'^\s*(?:import|export)\s+[\'"]')
LIBRARY_DIRECTIVE = re.compile(r'^\s*library\b')
PART_OF_DIRECTIVE = re.compile(r'^\s*part\s+of\b', re.MULTILINE)
_URI = re.compile(r'[\'"]([^\'"]+)[\'"]')


def import_uri(import_line: str) -> Optional[str]:
    """Return the quoted URI of an import line."""
    match = _URI.search(import_line)
    return match.group(1) if match else None


def has_import(text: str, import_line: str) -> bool:
    """True if ``text`` already imports the URI of ``import_line``."""
    uri = import_uri(import_line)
    if uri is None:
        return import_line.strip() in text
    pattern = re.compile(r'^\s*import\s+[\'"]' + re.escape(uri) + r'[\'"]', re.MULTILINE)
    return bool(pattern.search(text))


def is_part_file(text: str) -> bool:
    """``part of`` files may not declare imports of their own."""
    return bool(PART_OF_DIRECTIVE.search(text))


def _directive_end(lines: List[str], start: int) -> int:
    """Index of the line holding the ``;`` that closes a directive."""
    index = start
    while index < len(lines) and ';' not in lines[index].split('//', 1)[0]:
        index += 1
    return min(index, len(lines) - 1)


def find_insertion_index(lines: List[str]) -> int:
    """
    Pick the line index at which a new import is inserted.

    After the last import/export directive; otherwise after the library
    directive; otherwise the top of the file.
    """
    last_import_end = None
    index = 0
    while index < len(lines):
        if IMPORT_DIRECTIVE.match(lines[index]):
            last_import_end = _directive_end(lines, index)
            index = last_import_end + 1
            continue
        index += 1

    if last_import_end is not None:
        return last_import_end + 1

    for index, line in enumerate(lines):
        if LIBRARY_DIRECTIVE.match(line):
            return _directive_end(lines, index) + 1

    return 0


def ensure_import(text: str, import_line: str) -> Tuple[str, bool]:
    """
    Make sure ``import_line`` is present exactly once.

    Args:
        text: Dart source text
        import_line: Full import directive, e.g. ``import 'package:x/y.dart';``

    Returns:
        Tuple of (new text, whether the import was added)
    """
    if has_import(text, import_line):
        return text, False

    newline = '\r\n' if '\r\n' in text else '\n'
    lines = text.splitlines(keepends=True)
    index = find_insertion_index(lines)

    if index > 0 and not lines[index - 1].endswith(('\n', '\r')):
        lines[index - 1] += newline
    lines.insert(index, import_line.strip() + newline)
    return ''.join(lines), True
