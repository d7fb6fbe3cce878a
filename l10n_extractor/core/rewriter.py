"""Replace selected literals with localization accessor expressions."""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .errors import OverlappingEditsError
from .imports import ensure_import, is_part_file
from .models import BoundRecord, RewriteResult, SkippedRecord, TextEdit
from .syntax_tree import NodeKind, SyntaxTree
from ..frameworks.base import BaseAdapter
from ..utils.logging import get_logger

logger = get_logger()


def find_overlap(edits: Sequence[TextEdit]) -> Optional[Tuple[TextEdit, TextEdit]]:
    """Return the first pair of overlapping edits, if any."""
    ordered = sorted(edits, key=lambda e: (e.byte_offset, e.end))
    for previous, current in zip(ordered, ordered[1:]):
        if previous.overlaps(current):
            return previous, current
    return None


def apply_edits(source: bytes, edits: Sequence[TextEdit], file: str = '') -> bytes:
    """
    Apply non-overlapping edits to a byte string.

    Edits are applied from the highest offset down, so every edit still
    addresses the original offsets of the bytes it replaces.

    Raises:
        OverlappingEditsError: If two edits touch the same bytes
        ValueError: If an edit reaches past the end of the source
    """
    overlap = find_overlap(edits)
    if overlap:
        raise OverlappingEditsError(overlap[0], overlap[1], file)

    buffer = bytearray(source)
    for edit in sorted(edits, key=lambda e: e.byte_offset, reverse=True):
        if edit.end > len(buffer):
            raise ValueError(f"Edit {edit.byte_offset}-{edit.end} is outside the source ({len(buffer)} bytes)")
        buffer[edit.byte_offset:edit.end] = edit.replacement_text.encode('utf-8')
    return bytes(buffer)


class _LiteralIndex:
    """Literal nodes of a tree keyed by exact span and by value."""

    def __init__(self, tree: SyntaxTree):
        self.by_span: Dict[Tuple[int, int], int] = {}
        self.by_value: Dict[str, List[int]] = defaultdict(list)
        for node_id in tree.literals():
            self.by_span[tree.span(node_id)] = node_id
            value = tree.literal_value(node_id)
            if value is not None:
                self.by_value[value].append(node_id)


class RewriteEngine:
    """
    Rewrite one file's literals into accessor calls.

    The file is re-parsed and every bound record is matched to a literal,
    by exact span first and otherwise by value within a few lines, onto a
    literal no other record has claimed. Records that cannot be matched are
    skipped with a reason. Two records landing on the same bytes abort the
    whole file.
    """

    LINE_TOLERANCE = 2

    def __init__(
        self,
        adapter: BaseAdapter,
        import_line: Optional[str] = None,
        remove_const: bool = True
    ):
        """
        Args:
            adapter: Framework adapter used to re-parse the source
            import_line: Accessor import to ensure; None uses the adapter's, '' disables it
            remove_const: Drop ``const`` from expressions enclosing replaced literals
        """
        self.adapter = adapter
        self.import_line = adapter.get_accessor_import() if import_line is None else import_line
        self.remove_const = remove_const

    @classmethod
    def from_config(cls, adapter: BaseAdapter, accessor_config) -> 'RewriteEngine':
        return cls(
            adapter=adapter,
            import_line=accessor_config.import_line,
            remove_const=accessor_config.remove_const,
        )

    def rewrite(
        self,
        source_text: str,
        bound_records: Sequence[BoundRecord],
        file_path: str = ''
    ) -> RewriteResult:
        """
        Replace bound literals and add the accessor import.

        Args:
            source_text: Text the records were extracted from
            bound_records: Records with their replacement expressions
            file_path: Used in log messages and errors

        Returns:
            RewriteResult; ``modified_text`` equals ``source_text`` when nothing applied

        Raises:
            OverlappingEditsError: If two records resolve to overlapping bytes
        """
        if not bound_records:
            return RewriteResult(modified_text=source_text)

        tree = self.adapter.parse(source_text, file_path)
        index = _LiteralIndex(tree)

        # Exact spans are claimed first so relocation never takes a literal another record owns
        located: List[Optional[int]] = [self._exact(tree, index, bound) for bound in bound_records]
        claimed = {node_id for node_id in located if node_id is not None}

        edits: List[TextEdit] = []
        targets: List[int] = []
        skipped: List[SkippedRecord] = []
        for bound, node_id in zip(bound_records, located):
            if node_id is None:
                node_id, reason = self._relocate(tree, index, bound, claimed)
                if node_id is None:
                    logger.warning(f"{file_path or bound.location.file}: skipped {reason}")
                    skipped.append(SkippedRecord(record=bound, reason=reason))
                    continue
                claimed.add(node_id)
            start, length = tree.span(node_id)
            edits.append(TextEdit(start, length, bound.replacement))
            targets.append(node_id)

        if not edits:
            return RewriteResult(modified_text=source_text, skipped=skipped)

        if self.remove_const:
            edits.extend(self._const_edits(tree, targets))

        modified = apply_edits(tree.source, edits, file_path).decode('utf-8')

        warnings = []
        import_added = False
        if self.import_line:
            if is_part_file(modified):
                warnings.append("'part of' file: add the localization import to the owning library")
            else:
                modified, import_added = ensure_import(modified, self.import_line)

        return RewriteResult(
            modified_text=modified,
            applied_count=len(targets),
            skipped=skipped,
            import_added=import_added,
            changed=modified != source_text,
            warnings=warnings,
        )

    @staticmethod
    def _exact(tree: SyntaxTree, index: _LiteralIndex, bound: BoundRecord) -> Optional[int]:
        """The literal at the recorded span, if it still holds the recorded value."""
        location = bound.location
        exact = index.by_span.get((location.byte_offset, location.byte_length))
        if exact is not None and tree.literal_value(exact) == bound.value:
            return exact
        return None

    def _relocate(
        self,
        tree: SyntaxTree,
        index: _LiteralIndex,
        bound: BoundRecord,
        claimed: Set[int]
    ) -> Tuple[Optional[int], Optional[str]]:
        """Find an unclaimed literal with the record's value nearby, or explain why it is gone."""
        location = bound.location
        exact = index.by_span.get((location.byte_offset, location.byte_length))

        nearby = []
        taken = 0
        for node_id in index.by_value.get(bound.value, []):
            start = tree.node(node_id).start
            line_delta = abs(tree.line_index.line_of(start) - location.line)
            if line_delta > self.LINE_TOLERANCE:
                continue
            if node_id in claimed:
                taken += 1
                continue
            nearby.append((line_delta, abs(start - location.byte_offset), node_id))
        if nearby:
            node_id = min(nearby)[2]
            logger.debug(
                f"{location.file}:{location.line}: relocated {bound.value!r} "
                f"to offset {tree.node(node_id).start}"
            )
            return node_id, None

        if exact is not None:
            found = tree.literal_value(exact)
            found_text = repr(found) if found is not None else tree.text(exact)
            return None, f"content drift at line {location.line}: expected {bound.value!r}, found {found_text}"
        if taken:
            return None, (
                f"content drift at line {location.line}: every {bound.value!r} nearby "
                f"belongs to another record"
            )
        return None, f"literal {bound.value!r} not found near line {location.line}"

    @staticmethod
    def _const_edits(tree: SyntaxTree, targets: Sequence[int]) -> List[TextEdit]:
        """
        Drop ``const`` from calls and lists enclosing replaced literals.

        Accessor lookups are not constant expressions. The walk stops at the
        nearest block or declaration.
        """
        spans = set()
        for node_id in targets:
            for ancestor_id in tree.ancestors(node_id):
                ancestor = tree.node(ancestor_id)
                if ancestor.kind in (NodeKind.BLOCK, NodeKind.CLASS, NodeKind.UNIT):
                    break
                const_span = ancestor.attrs.get('const_span')
                if const_span:
                    spans.add(const_span)
        return [TextEdit(start, end - start, '') for start, end in sorted(spans)]


def rewrite_file(
    source_text: str,
    bound_records: Sequence[BoundRecord],
    adapter: BaseAdapter,
    **options
) -> RewriteResult:
    """Rewrite with a one-off engine; ``options`` are passed to RewriteEngine."""
    return RewriteEngine(adapter, **options).rewrite(source_text, bound_records)
