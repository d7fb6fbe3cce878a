"""Extract localization candidates from a parsed source file."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .context_resolver import DEFAULT_WINDOW, resolve
from .errors import SourceMismatchError
from .literal_filter import DEFAULT_MAX_LENGTH, DEFAULT_MIN_LENGTH, rejection_reason
from .models import ExtractionRecord, SourceLocation
from .syntax_tree import NodeKind, ParseError, SyntaxTree
from ..utils.logging import get_logger

DEFAULT_ACCESSOR_MARKERS = ('AppLocalizations', 'l10n.', '.of(context)')

logger = get_logger()


@dataclass
class ExtractionOutcome:
    """Records accepted from one file plus what was left out and why."""
    records: List[ExtractionRecord] = field(default_factory=list)
    rejected: Dict[str, int] = field(default_factory=dict)
    interpolated: int = 0
    parse_errors: List[ParseError] = field(default_factory=list)


class SyntaxExtractor:
    """
    Visit every string literal of a parsed file and keep the translatable ones.

    Adjacent literals (``'Hello ' 'World'``) are handled as one value.
    Interpolated literals are skipped: their runtime value differs from the
    source text, so replacing them would change behaviour.
    """

    def __init__(
        self,
        accessor_markers: Sequence[str] = DEFAULT_ACCESSOR_MARKERS,
        min_length: int = DEFAULT_MIN_LENGTH,
        max_length: int = DEFAULT_MAX_LENGTH,
        context_window: int = DEFAULT_WINDOW
    ):
        self.accessor_markers = tuple(accessor_markers)
        self.min_length = min_length
        self.max_length = max_length
        self.context_window = context_window

    @classmethod
    def from_config(cls, extraction_config) -> 'SyntaxExtractor':
        return cls(
            accessor_markers=extraction_config.accessor_markers,
            min_length=extraction_config.min_length,
            max_length=extraction_config.max_length,
            context_window=extraction_config.context_window,
        )

    def extract(
        self,
        tree: SyntaxTree,
        source_text: str,
        file_path: Optional[str] = None
    ) -> List[ExtractionRecord]:
        """
        Return extraction records in document order.

        Args:
            tree: Tree parsed from ``source_text``
            source_text: The exact text the tree was parsed from
            file_path: Path stored in record locations (defaults to the tree's path)

        Returns:
            List of ExtractionRecord
        """
        return self.scan(tree, source_text, file_path).records

    def scan(
        self,
        tree: SyntaxTree,
        source_text: str,
        file_path: Optional[str] = None
    ) -> ExtractionOutcome:
        """Like ``extract`` but also report rejections and parse problems."""
        if tree.source != source_text.encode('utf-8'):
            raise SourceMismatchError(
                f"Syntax tree for {file_path or tree.path or '<source>'} was parsed from different text"
            )

        path = file_path if file_path is not None else tree.path
        outcome = ExtractionOutcome(parse_errors=list(tree.errors))
        for error in tree.errors:
            logger.warning(f"{path}: {error}")

        rejected = Counter()
        for node_id in tree.literals():
            if self._in_directive(tree, node_id):
                continue

            if tree.is_interpolated(node_id):
                outcome.interpolated += 1
                line = tree.line_index.line_of(tree.node(node_id).start)
                logger.debug(f"{path}:{line}: skipping interpolated string")
                continue

            value = tree.literal_value(node_id)
            if value is None:
                continue

            already_localized = self.is_already_localized(tree, node_id)
            context = resolve(tree, node_id, self.context_window)
            reason = rejection_reason(
                value,
                context.surrounding_text,
                already_localized,
                min_length=self.min_length,
                max_length=self.max_length,
            )
            if reason:
                rejected[reason] += 1
                continue

            node = tree.node(node_id)
            line, column = tree.position(node.start)
            outcome.records.append(ExtractionRecord(
                value=value,
                location=SourceLocation(
                    file=path,
                    line=line,
                    column=column,
                    byte_offset=node.start,
                    byte_length=node.length,
                ),
                structural_type=context.structural_type,
                parameter_name=context.parameter_name,
                surrounding_text=context.surrounding_text,
                already_localized=already_localized,
                enclosing_type=context.enclosing_type,
                enclosing_parameter=context.enclosing_parameter,
                enclosing_class=context.enclosing_class,
            ))

        outcome.rejected = dict(rejected)
        return outcome

    def is_already_localized(self, tree: SyntaxTree, node_id: int) -> bool:
        """
        Check whether the nearest enclosing call already goes through the accessor.

        Only the callee chain of that call is inspected
        (``AppLocalizations.of(context).translate``), not its arguments, so
        a localized sibling does not mark its neighbours and
        ``ScaffoldMessenger.of(context).showSnackBar(...)`` does not mark
        the widgets passed to it. This is a textual check, not name resolution.
        """
        if not self.accessor_markers:
            return False
        for ancestor_id in tree.ancestors(node_id):
            ancestor = tree.node(ancestor_id)
            if ancestor.kind != NodeKind.CALL:
                continue
            start, end = ancestor.attrs.get('callee_span', (ancestor.start, ancestor.start))
            callee = tree.slice(start, end)
            return any(marker in callee for marker in self.accessor_markers)
        return False

    @staticmethod
    def _in_directive(tree: SyntaxTree, node_id: int) -> bool:
        return any(tree.kind(a) == NodeKind.DIRECTIVE for a in tree.ancestors(node_id))


_default_extractor = SyntaxExtractor()


def extract_from_file(
    tree: SyntaxTree,
    source_text: str,
    file_path: Optional[str] = None
) -> List[ExtractionRecord]:
    """Extract candidates with default settings."""
    return _default_extractor.extract(tree, source_text, file_path)
