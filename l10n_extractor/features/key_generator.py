"""Derive localization keys and replacement expressions from literal values."""

import re
import threading
import unicodedata
from typing import Dict, List, Optional

from ..core.models import ExtractionRecord, StringRole
from ..frameworks.base import BaseAdapter

# Dart keywords cannot be used as getter names on the generated class
DART_RESERVED_WORDS = frozenset({
    'abstract', 'as', 'assert', 'async', 'await', 'break', 'case', 'catch',
    'class', 'const', 'continue', 'covariant', 'default', 'deferred', 'do',
    'dynamic', 'else', 'enum', 'export', 'extends', 'extension', 'external',
    'factory', 'false', 'final', 'finally', 'for', 'function', 'get', 'hide',
    'if', 'implements', 'import', 'in', 'interface', 'is', 'late', 'library',
    'mixin', 'new', 'null', 'on', 'operator', 'part', 'required', 'rethrow',
    'return', 'set', 'show', 'static', 'super', 'switch', 'sync', 'this',
    'throw', 'true', 'try', 'typedef', 'var', 'void', 'while', 'with', 'yield',
})


class KeyGenerationError(ValueError):
    """Raised when no usable key can be derived from a value."""


class KeyGenerator:
    """
    Build stable, unique keys for extracted strings.

    Keys are derived from the value alone, so repeated runs produce the same
    key. A value seen before reuses its key; a different value that derives
    to an existing key gets a numeric suffix. The registry is shared by all
    threads processing a project.
    """

    # Special characters to ASCII, applied before NFKD folding
    CHAR_MAP = {
        'ç': 'c', 'Ç': 'C', 'ğ': 'g', 'Ğ': 'G', 'ı': 'i', 'İ': 'I',
        'ö': 'o', 'Ö': 'O', 'ş': 's', 'Ş': 'S', 'ü': 'u', 'Ü': 'U',
        'ä': 'a', 'Ä': 'A', 'ß': 'ss',
        'æ': 'ae', 'Æ': 'AE', 'œ': 'oe', 'Œ': 'OE',
        'ł': 'l', 'Ł': 'L', 'ø': 'o', 'Ø': 'O',
        'ð': 'd', 'Ð': 'D', 'þ': 'th', 'Þ': 'TH',
    }

    _WORD_SPLIT = re.compile(r'[^a-zA-Z0-9]+')

    def __init__(
        self,
        adapter: BaseAdapter,
        naming: str = 'camelCase',
        max_length: int = 35,
        template: Optional[str] = None
    ):
        """
        Args:
            adapter: Builds the accessor expression for a key
            naming: ``camelCase`` or ``snake_case``
            max_length: Longest key produced before a uniqueness suffix
            template: Accessor template overriding the adapter's default
        """
        if naming not in ('camelCase', 'snake_case'):
            raise ValueError(f"Unknown key naming style: {naming}")
        self.adapter = adapter
        self.naming = naming
        self.max_length = max_length
        self.template = template
        self._lock = threading.Lock()
        self._key_by_value: Dict[str, str] = {}
        self._value_by_key: Dict[str, str] = {}

    @classmethod
    def from_config(cls, adapter: BaseAdapter, config) -> 'KeyGenerator':
        return cls(
            adapter=adapter,
            naming=config.keys.naming,
            max_length=config.keys.max_length,
            template=config.accessor.template,
        )

    @property
    def entries(self) -> Dict[str, str]:
        """Key to value mapping of everything generated so far."""
        with self._lock:
            return dict(self._value_by_key)

    def words(self, text: str) -> List[str]:
        for char, replacement in self.CHAR_MAP.items():
            text = text.replace(char, replacement)
        text = unicodedata.normalize('NFKD', text)
        text = ''.join(c for c in text if not unicodedata.combining(c))
        return [w for w in self._WORD_SPLIT.split(text) if w]

    def base_key(self, value: str, role: Optional[StringRole] = None) -> str:
        """
        Derive a key from a value without registering it.

        Raises:
            KeyGenerationError: If the value has no ASCII-foldable letters or digits
        """
        words = self.words(value)
        if not words:
            raise KeyGenerationError(f"Cannot derive a key from {value!r}")

        if self.naming == 'snake_case':
            key = '_'.join(w.lower() for w in words)
            key = key[:self.max_length].rstrip('_')
        else:
            key = words[0].lower() + ''.join(w[:1].upper() + w[1:].lower() for w in words[1:])
            key = key[:self.max_length]

        if key[0].isdigit():
            key = ('text_' if self.naming == 'snake_case' else 'text') + key

        if key in DART_RESERVED_WORDS:
            suffix = (role or StringRole.UNKNOWN).value
            key = f"{key}_{suffix}" if self.naming == 'snake_case' else key + suffix.capitalize()

        return key

    def generate_key(self, record: ExtractionRecord, role: Optional[StringRole] = None) -> str:
        """Return the registered key for a record's value, creating it if needed."""
        value = record.value
        with self._lock:
            existing = self._key_by_value.get(value)
            if existing:
                return existing

            base = self.base_key(value, role)
            key = base
            counter = 2
            while key in self._value_by_key:
                key = f"{base}_{counter}" if self.naming == 'snake_case' else f"{base}{counter}"
                counter += 1

            self._key_by_value[value] = key
            self._value_by_key[key] = value
            return key

    def generate_replacement(self, record: ExtractionRecord, role: Optional[StringRole] = None) -> str:
        """Accessor expression replacing the record's literal."""
        return self.adapter.generate_localized_code(self.generate_key(record, role), self.template)
