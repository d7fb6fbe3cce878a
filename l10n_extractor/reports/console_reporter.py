"""Console report generator."""

from pathlib import Path
from typing import Optional

from ..features.file_processor import FileSummary, ProcessingSummary
from ..utils.colors import Colors


class ConsoleReporter:
    """Print extraction and rewrite summaries to the terminal."""

    @staticmethod
    def print_extraction_report(summary: ProcessingSummary, root: Optional[Path] = None, show_details: bool = True):
        """
        Print the candidates found without rewriting.

        Args:
            summary: Result of ``FileProcessor.extract``
            root: Directory file paths are shown relative to
            show_details: List every candidate with its role and confidence
        """
        ConsoleReporter._print_header('LOCALIZATION CANDIDATES')

        for file_summary in summary.files:
            if not file_summary.extracted and not file_summary.failed and not file_summary.parse_warnings:
                continue
            ConsoleReporter._print_file_heading(file_summary, root)
            ConsoleReporter._print_problems(file_summary)
            if show_details:
                for item in file_summary.records:
                    context = item.context
                    screen = f" [{context.screen_group}]" if context.screen_group else ''
                    print(f"   {item.location.line:>5}:{item.location.column:<4} "
                          f"{context.role.display_name:<14} {Colors.confidence(context.confidence)} "
                          f"{ConsoleReporter._shorten(item.value)!r}{Colors.dim(screen)}")

        ConsoleReporter._print_roles(summary)
        ConsoleReporter._print_totals(summary)

    @staticmethod
    def print_rewrite_report(summary: ProcessingSummary, root: Optional[Path] = None):
        """Print what a rewrite run changed, skipped and failed."""
        title = 'REWRITE PREVIEW (dry run)' if summary.dry_run else 'REWRITE REPORT'
        ConsoleReporter._print_header(title)

        for file_summary in summary.files:
            if not (file_summary.applied or file_summary.skipped or file_summary.failed
                    or file_summary.warnings or file_summary.parse_warnings):
                continue
            ConsoleReporter._print_file_heading(file_summary, root)
            ConsoleReporter._print_problems(file_summary)
            if file_summary.applied:
                verb = 'would replace' if summary.dry_run else 'replaced'
                extra = ', import added' if file_summary.import_added else ''
                print(f"   {Colors.success('✓')} {verb} {file_summary.applied} string(s){extra}")
            for note in file_summary.skipped:
                print(f"   {Colors.warning('!')} line {note.line}: "
                      f"{ConsoleReporter._shorten(note.value)!r} skipped ({note.reason})")
            for warning in file_summary.warnings:
                print(f"   {Colors.warning('!')} {warning}")

        ConsoleReporter._print_roles(summary)
        ConsoleReporter._print_totals(summary)

        if summary.backup_dir:
            print(f"\nBackup: {summary.backup_dir}")

    @staticmethod
    def _print_header(title: str):
        print("\n" + "=" * 70)
        print(Colors.bold(title))
        print("=" * 70)

    @staticmethod
    def _print_file_heading(file_summary: FileSummary, root: Optional[Path]):
        path = Path(file_summary.file)
        if root is not None:
            try:
                path = path.relative_to(root)
            except ValueError:
                pass
        print(f"\n{Colors.bold(str(path))} ({file_summary.extracted} candidate(s))")

    @staticmethod
    def _print_problems(file_summary: FileSummary):
        if file_summary.error:
            print(f"   {Colors.error('✗')} {file_summary.error}")
        for warning in file_summary.parse_warnings:
            print(f"   {Colors.warning('!')} parse: {warning}")

    @staticmethod
    def _print_roles(summary: ProcessingSummary):
        roles = summary.role_counts
        if not roles:
            return
        print(f"\n{Colors.bold('ROLES')}")
        print("-" * 70)
        for role, count in roles.items():
            print(f"{role:<15} {count:>6}")

    @staticmethod
    def _print_totals(summary: ProcessingSummary):
        print(f"\n{Colors.bold('SUMMARY')}")
        print("-" * 70)
        print(f"Files scanned:     {summary.total_files}")
        print(f"Strings extracted: {summary.total_extracted}")
        if not summary.dry_run or summary.total_applied:
            print(f"Strings replaced:  {summary.total_applied}")
            print(f"Files changed:     {len(summary.changed_files)}")
        if summary.total_skipped:
            print(f"Skipped:           {Colors.warning(str(summary.total_skipped))}")
        if summary.failed_files:
            print(f"Failed files:      {Colors.error(str(len(summary.failed_files)))}")

    @staticmethod
    def _shorten(text: str, limit: int = 50) -> str:
        return text if len(text) <= limit else text[:limit - 3] + '...'
