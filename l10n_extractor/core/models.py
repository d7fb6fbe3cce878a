"""Records passed between pipeline stages.

Each stage produces a new immutable value instead of mutating the previous
one: extraction yields ``ExtractionRecord``, classification wraps it in a
``ClassifiedRecord`` and binding a replacement wraps that in a ``BoundRecord``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class StringRole(str, Enum):
    """UI role of an extracted string."""

    TITLE = 'title'
    MESSAGE = 'message'
    BUTTON = 'button'
    LABEL = 'label'
    ERROR = 'error'
    HINT = 'hint'
    PLACEHOLDER = 'placeholder'
    DESCRIPTION = 'description'
    CONFIRMATION = 'confirmation'
    NAVIGATION = 'navigation'
    UNKNOWN = 'unknown'

    @property
    def display_name(self) -> str:
        return _ROLE_DISPLAY_NAMES[self]


_ROLE_DISPLAY_NAMES = {
    StringRole.TITLE: 'Title',
    StringRole.MESSAGE: 'Message',
    StringRole.BUTTON: 'Button',
    StringRole.LABEL: 'Label',
    StringRole.ERROR: 'Error Message',
    StringRole.HINT: 'Hint',
    StringRole.PLACEHOLDER: 'Placeholder',
    StringRole.DESCRIPTION: 'Description',
    StringRole.CONFIRMATION: 'Confirmation',
    StringRole.NAVIGATION: 'Navigation',
    StringRole.UNKNOWN: 'Unknown',
}


@dataclass(frozen=True)
class SourceLocation:
    """Where a literal lives; byte_length includes the quotes."""
    file: str
    line: int
    column: int
    byte_offset: int
    byte_length: int

    @property
    def end_offset(self) -> int:
        return self.byte_offset + self.byte_length


@dataclass(frozen=True)
class ExtractionRecord:
    """A literal accepted as a localization candidate."""
    value: str
    location: SourceLocation
    structural_type: Optional[str] = None
    parameter_name: Optional[str] = None
    surrounding_text: str = ''
    already_localized: bool = False
    enclosing_type: Optional[str] = None
    enclosing_parameter: Optional[str] = None
    enclosing_class: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'value': self.value,
            'file': self.location.file,
            'line': self.location.line,
            'column': self.location.column,
            'byte_offset': self.location.byte_offset,
            'byte_length': self.location.byte_length,
            'structural_type': self.structural_type,
            'parameter_name': self.parameter_name,
            'surrounding_text': self.surrounding_text,
            'enclosing_type': self.enclosing_type,
            'enclosing_parameter': self.enclosing_parameter,
            'enclosing_class': self.enclosing_class,
        }


@dataclass(frozen=True)
class ClassificationResult:
    """Role, screen grouping and advisory confidence for one record."""
    role: StringRole
    screen_group: Optional[str] = None
    confidence: float = 0.5


@dataclass(frozen=True)
class ClassifiedRecord:
    """An extraction record together with its classification."""
    record: ExtractionRecord
    context: ClassificationResult

    @property
    def value(self) -> str:
        return self.record.value

    @property
    def location(self) -> SourceLocation:
        return self.record.location

    @property
    def role(self) -> StringRole:
        return self.context.role

    def bind(self, replacement: str, candidate_key: Optional[str] = None) -> 'BoundRecord':
        return BoundRecord(
            record=self.record,
            replacement=replacement,
            candidate_key=candidate_key,
            context=self.context,
        )


@dataclass(frozen=True)
class BoundRecord:
    """A record bound to the expression that will replace its literal."""
    record: ExtractionRecord
    replacement: str
    candidate_key: Optional[str] = None
    context: Optional[ClassificationResult] = None

    @property
    def value(self) -> str:
        return self.record.value

    @property
    def location(self) -> SourceLocation:
        return self.record.location


@dataclass(frozen=True)
class TextEdit:
    """Replace ``byte_length`` bytes at ``byte_offset`` with ``replacement_text``."""
    byte_offset: int
    byte_length: int
    replacement_text: str

    @property
    def end(self) -> int:
        return self.byte_offset + self.byte_length

    def overlaps(self, other: 'TextEdit') -> bool:
        """True when both edits touch a common byte or insert at the same point."""
        if self.byte_offset == other.byte_offset:
            return True
        return self.byte_offset < other.end and other.byte_offset < self.end


@dataclass(frozen=True)
class SkippedRecord:
    """A bound record the rewrite engine could not apply."""
    record: BoundRecord
    reason: str


@dataclass
class RewriteResult:
    """Outcome of rewriting one file."""
    modified_text: str
    applied_count: int = 0
    skipped: List[SkippedRecord] = field(default_factory=list)
    import_added: bool = False
    changed: bool = False
    warnings: List[str] = field(default_factory=list)
