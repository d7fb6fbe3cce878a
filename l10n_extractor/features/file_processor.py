"""Run the extraction and rewrite pipeline over project files."""

import os
import shutil
import tempfile
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional

from tqdm import tqdm

from ..core.classifier import ContextClassifier
from ..core.errors import OverlappingEditsError
from ..core.extractor import SyntaxExtractor
from ..core.models import BoundRecord, ClassifiedRecord, ExtractionRecord
from ..core.rewriter import RewriteEngine
from ..frameworks.base import BaseAdapter
from ..utils.config import Config
from ..utils.logging import get_logger
from .key_generator import KeyGenerator

logger = get_logger()

ReplacementProvider = Callable[[ExtractionRecord], str]
RecordFilter = Callable[[ClassifiedRecord], bool]


class SkipNote(NamedTuple):
    """A record that was selected but not replaced."""
    line: int
    value: str
    reason: str


@dataclass
class FileSummary:
    """What happened to one file."""
    file: str
    extracted: int = 0
    roles: Dict[str, int] = field(default_factory=dict)
    rejected: Dict[str, int] = field(default_factory=dict)
    interpolated: int = 0
    applied: int = 0
    skipped: List[SkipNote] = field(default_factory=list)
    parse_warnings: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None
    changed: bool = False
    import_added: bool = False
    entries: Dict[str, str] = field(default_factory=dict)
    records: List[ClassifiedRecord] = field(default_factory=list)
    source_text: str = field(default='', repr=False)

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class ProcessingSummary:
    """Aggregate over all processed files, in input order."""
    files: List[FileSummary] = field(default_factory=list)
    dry_run: bool = False
    backup_dir: Optional[Path] = None

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def total_extracted(self) -> int:
        return sum(f.extracted for f in self.files)

    @property
    def total_applied(self) -> int:
        return sum(f.applied for f in self.files)

    @property
    def total_skipped(self) -> int:
        return sum(len(f.skipped) for f in self.files)

    @property
    def failed_files(self) -> List[FileSummary]:
        return [f for f in self.files if f.failed]

    @property
    def changed_files(self) -> List[FileSummary]:
        return [f for f in self.files if f.changed]

    @property
    def role_counts(self) -> Dict[str, int]:
        counts = Counter()
        for summary in self.files:
            counts.update(summary.roles)
        return dict(counts.most_common())

    @property
    def entries(self) -> Dict[str, str]:
        merged: Dict[str, str] = {}
        for summary in self.files:
            merged.update(summary.entries)
        return merged


def write_atomic(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` through a temporary file in the same directory."""
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f'.{path.name}.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class FileProcessor:
    """
    Extract, classify, bind and rewrite the strings of many files.

    Files are analyzed independently (in parallel for larger projects), keys
    are then assigned sequentially in path order so they do not depend on
    thread scheduling, and finally each file is rewritten. A failure in one
    file is recorded on its summary and never stops the run.
    """

    THREAD_THRESHOLD = 20
    MAX_WORKERS = 4

    def __init__(
        self,
        adapter: BaseAdapter,
        config: Optional[Config] = None,
        replacement_provider: Optional[ReplacementProvider] = None,
        select: Optional[RecordFilter] = None,
        dry_run: bool = False,
        use_threads: bool = True,
        show_progress: bool = False
    ):
        """
        Initialize processor.

        Args:
            adapter: Framework adapter (parsing, accessor code)
            config: Project configuration (defaults when omitted)
            replacement_provider: Custom ``record -> expression`` callable
                replacing the built-in key generator
            select: Extra predicate choosing which classified records to rewrite
            dry_run: Compute everything but write nothing
            use_threads: Enable multi-threaded processing
            show_progress: Show tqdm progress bars
        """
        self.adapter = adapter
        self.config = config or Config()
        self.replacement_provider = replacement_provider
        self.select = select
        self.dry_run = dry_run
        self.use_threads = use_threads
        self.show_progress = show_progress

        self.extractor = SyntaxExtractor.from_config(self.config.extraction)
        self.classifier = ContextClassifier()
        self.key_generator = KeyGenerator.from_config(adapter, self.config)
        self.engine = RewriteEngine.from_config(adapter, self.config.accessor)

        self._lock = Lock()

    def find_source_files(self, root: Path) -> List[Path]:
        """Source files under ``root`` that the adapter and config do not exclude."""
        root = Path(root)
        if root.is_file():
            return [root]

        files = set()
        for ext in self.adapter.get_file_extensions():
            for file_path in root.rglob(f'*{ext}'):
                if not file_path.is_file():
                    continue
                if self.adapter.should_exclude_file(file_path.relative_to(root)):
                    continue
                files.add(file_path)
        return sorted(files)

    def analyze_file(self, file_path: Path) -> FileSummary:
        """Parse, extract and classify one file. Never raises for file-level problems."""
        summary = FileSummary(file=str(file_path))
        try:
            source_text, tree = self.adapter.parse_file(Path(file_path))
        except (OSError, UnicodeDecodeError) as e:
            summary.error = f"Cannot read file: {e}"
            logger.error(f"{file_path}: {summary.error}")
            return summary

        outcome = self.extractor.scan(tree, source_text, str(file_path))
        records = self.classifier.classify_all(outcome.records)

        summary.source_text = source_text
        summary.parse_warnings = [str(e) for e in outcome.parse_errors]
        summary.rejected = outcome.rejected
        summary.interpolated = outcome.interpolated
        summary.records = records
        summary.extracted = len(records)
        summary.roles = dict(Counter(r.role.value for r in records))

        logger.debug(f"{file_path}: {len(records)} candidate(s), {sum(outcome.rejected.values())} rejected")
        return summary

    def is_selected(self, record: ClassifiedRecord) -> bool:
        if record.context.confidence < self.config.processing.min_confidence:
            return False
        if self.select is not None and not self.select(record):
            return False
        return True

    def bind_records(self, summary: FileSummary) -> List[BoundRecord]:
        """
        Attach replacement expressions to the selected records of a file.

        Generator failures skip the record they concern.
        """
        bound = []
        for item in summary.records:
            if not self.is_selected(item):
                continue
            key = None
            try:
                if self.replacement_provider is not None:
                    replacement = self.replacement_provider(item.record)
                else:
                    key = self.key_generator.generate_key(item.record, item.role)
                    replacement = self.adapter.generate_localized_code(key, self.config.accessor.template)
            except Exception as e:
                reason = f"no replacement: {e}"
                logger.warning(f"{summary.file}:{item.location.line}: {reason}")
                summary.skipped.append(SkipNote(item.location.line, item.value, reason))
                continue
            bound.append(item.bind(replacement, key))
        return bound

    def rewrite_file(self, summary: FileSummary, bound: List[BoundRecord]) -> FileSummary:
        """Apply bound records to the file of ``summary`` and write it unless dry-run."""
        if summary.failed or not bound:
            return summary

        try:
            result = self.engine.rewrite(summary.source_text, bound, summary.file)
        except OverlappingEditsError as e:
            summary.error = str(e)
            logger.error(summary.error)
            return summary

        skipped_ids = {id(s.record) for s in result.skipped}
        for item in bound:
            if id(item) not in skipped_ids and item.candidate_key:
                summary.entries[item.candidate_key] = item.value

        summary.applied = result.applied_count
        summary.skipped.extend(
            SkipNote(s.record.location.line, s.record.value, s.reason) for s in result.skipped
        )
        summary.warnings.extend(result.warnings)
        summary.import_added = result.import_added

        if result.changed and not self.dry_run:
            try:
                write_atomic(Path(summary.file), result.modified_text)
            except OSError as e:
                summary.error = f"Cannot write file: {e}"
                logger.error(f"{summary.file}: {summary.error}")
                return summary
        summary.changed = result.changed
        return summary

    def process_file(self, file_path: Path) -> FileSummary:
        """Run the whole pipeline for a single file."""
        summary = self.analyze_file(file_path)
        return self.rewrite_file(summary, self.bind_records(summary))

    def extract(self, paths: Iterable[Path]) -> ProcessingSummary:
        """Analyze files without binding or writing anything."""
        return ProcessingSummary(files=self._map(self.analyze_file, list(paths), 'Extracting'), dry_run=True)

    def process(self, paths: Iterable[Path]) -> ProcessingSummary:
        """Process files; results keep the order of ``paths``."""
        paths = list(paths)
        summaries = self._map(self.analyze_file, paths, 'Extracting')
        bindings = [self.bind_records(s) for s in summaries]
        pairs = list(zip(summaries, bindings))
        summaries = self._map(lambda pair: self.rewrite_file(*pair), pairs, 'Rewriting')
        return ProcessingSummary(files=summaries, dry_run=self.dry_run)

    def _map(self, func, items: List, desc: str) -> List:
        """Apply ``func`` to every item, threaded above the file threshold."""
        results: Dict[int, object] = {}
        progress = tqdm(total=len(items), desc=desc, unit='file', disable=not self.show_progress)

        def run(index, item):
            result = func(item)
            with self._lock:
                results[index] = result
                progress.update(1)

        if self.use_threads and len(items) > self.THREAD_THRESHOLD:
            with ThreadPoolExecutor(max_workers=self.MAX_WORKERS) as executor:
                futures = [executor.submit(run, i, item) for i, item in enumerate(items)]
                for future in as_completed(futures):
                    future.result()
        else:
            for i, item in enumerate(items):
                run(i, item)

        progress.close()
        return [results[i] for i in range(len(items))]
