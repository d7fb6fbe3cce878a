"""Assign UI roles, screen groups and confidence to extraction records."""

import re
from pathlib import PurePath
from typing import Iterable, List, Optional

from .models import ClassificationResult, ClassifiedRecord, ExtractionRecord, StringRole
from .rules import is_text_wrapper, role_for_parameter, role_for_text, role_for_widget

SCREEN_CLASS_SUFFIXES = ('Screen', 'Page', 'View', 'Dialog', 'Sheet')
SCREEN_FILE_SUFFIXES = (
    '_screen', '_page', '_view', '_dialog', '_sheet', '_widget',
    'Screen', 'Page', 'View', 'Dialog', 'Sheet', 'Widget',
)
COMMON_SCREEN_WORDS = (
    'login', 'signup', 'register', 'home', 'profile', 'settings', 'dashboard',
    'welcome', 'onboarding', 'splash', 'about', 'help', 'contact', 'search',
    'details', 'cart', 'checkout', 'payment', 'notifications', 'chat',
)

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')


def humanize_identifier(name: str) -> str:
    """``userProfile`` / ``user_profile`` -> ``User Profile``."""
    spaced = _CAMEL_BOUNDARY.sub(' ', name)
    words = re.split(r'[\s_\-]+', spaced)
    return ' '.join(w.capitalize() for w in words if w)


def _strip_suffix(name: str, suffixes: Iterable[str]) -> Optional[str]:
    for suffix in suffixes:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[:-len(suffix)]
    return None


def infer_screen_group(file_path: str, enclosing_class: Optional[str] = None) -> Optional[str]:
    """
    Infer a screen name for grouping strings.

    Order: an enclosing ``...Screen``/``...Page`` class (State classes are
    unwrapped), then the file name with its container suffix removed, then a
    well-known screen word anywhere in the path.

    Args:
        file_path: Path of the source file
        enclosing_class: Name of the class declaring the literal, if any

    Returns:
        Title-cased screen name, or None
    """
    if enclosing_class:
        name = enclosing_class.lstrip('_')
        if name.endswith('State') and len(name) > len('State'):
            name = name[:-len('State')]
        base = _strip_suffix(name, SCREEN_CLASS_SUFFIXES)
        if base:
            return humanize_identifier(base)

    if not file_path:
        return None

    stem = PurePath(file_path).stem
    base = _strip_suffix(stem, SCREEN_FILE_SUFFIXES)
    if base:
        return humanize_identifier(base)

    lowered = file_path.replace('\\', '/').lower()
    for word in COMMON_SCREEN_WORDS:
        if re.search(rf'(?<![a-z]){word}(?![a-z])', lowered):
            return humanize_identifier(word)

    return None


class ContextClassifier:
    """
    Classify extraction records by UI role.

    The structural signal wins over wording: first the enclosing call and
    its parameter, then the parameter alone, then the text itself.
    """

    HIGH_CERTAINTY_ROLES = frozenset({StringRole.BUTTON, StringRole.TITLE, StringRole.ERROR})
    MEDIUM_CERTAINTY_ROLES = frozenset({StringRole.HINT, StringRole.LABEL})
    # Roles that lexical fallback reaches by default
    LOW_CERTAINTY_ROLES = frozenset({StringRole.MESSAGE})

    def classify(self, record: ExtractionRecord) -> ClassificationResult:
        role = self.determine_role(record)
        return ClassificationResult(
            role=role,
            screen_group=infer_screen_group(record.location.file, record.enclosing_class),
            confidence=self.calculate_confidence(record, role),
        )

    def classify_record(self, record: ExtractionRecord) -> ClassifiedRecord:
        return ClassifiedRecord(record=record, context=self.classify(record))

    def classify_all(self, records: Iterable[ExtractionRecord]) -> List[ClassifiedRecord]:
        return [self.classify_record(r) for r in records]

    def determine_role(self, record: ExtractionRecord) -> StringRole:
        role = role_for_widget(record.structural_type, record.parameter_name)

        # Text('Retry') inside ElevatedButton(child: ...) takes the button's role
        if role is not None and is_text_wrapper(record.structural_type) and not record.parameter_name:
            outer = (role_for_widget(record.enclosing_type, record.enclosing_parameter)
                     or role_for_parameter(record.enclosing_parameter))
            if outer is not None:
                return outer

        if role is not None:
            return role

        role = role_for_parameter(record.parameter_name)
        if role is not None:
            return role

        return role_for_text(record.value)

    def calculate_confidence(self, record: ExtractionRecord, role: StringRole) -> float:
        confidence = 0.5
        if record.structural_type:
            confidence += 0.3
        if record.parameter_name:
            confidence += 0.2

        if role in self.HIGH_CERTAINTY_ROLES:
            confidence += 0.1
        elif role in self.MEDIUM_CERTAINTY_ROLES:
            confidence += 0.05
        elif role in self.LOW_CERTAINTY_ROLES and not (record.structural_type or record.parameter_name):
            confidence -= 0.1
        elif role == StringRole.UNKNOWN:
            confidence -= 0.2

        return round(min(1.0, max(0.0, confidence)), 2)


_default_classifier = ContextClassifier()


def classify(record: ExtractionRecord) -> ClassificationResult:
    """Classify a single record with the default classifier."""
    return _default_classifier.classify(record)
