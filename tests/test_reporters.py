"""Tests for report generators (console and JSON)."""

import pytest
import json
import tempfile
from pathlib import Path

from l10n_extractor.core.models import (
    ClassificationResult,
    ClassifiedRecord,
    ExtractionRecord,
    SourceLocation,
    StringRole,
)
from l10n_extractor.features.file_processor import FileSummary, ProcessingSummary, SkipNote
from l10n_extractor.frameworks.flutter import FlutterAdapter
from l10n_extractor.reports.console_reporter import ConsoleReporter
from l10n_extractor.reports.json_reporter import JSONReporter
from l10n_extractor.utils.colors import Colors


def make_item(value, line, role, file='/app/lib/login_screen.dart', confidence=0.9):
    record = ExtractionRecord(
        value=value,
        location=SourceLocation(file, line, 12, line * 40, len(value) + 2),
        structural_type='Text',
    )
    return ClassifiedRecord(
        record=record,
        context=ClassificationResult(role=role, screen_group='Login', confidence=confidence),
    )


def make_summary(dry_run=False):
    login = FileSummary(
        file='/app/lib/login_screen.dart',
        extracted=2,
        roles={'title': 1, 'button': 1},
        rejected={'debug or logging context': 1},
        applied=1,
        skipped=[SkipNote(9, 'Continue', "content drift at line 9: expected 'Continue', found 'Next'")],
        changed=True,
        import_added=True,
        entries={'signIn': 'Sign in'},
        records=[
            make_item('Sign in', 5, StringRole.TITLE),
            make_item('Continue', 9, StringRole.BUTTON),
        ],
    )
    broken = FileSummary(file='/app/lib/broken.dart', error='Cannot read file: invalid utf-8')
    empty = FileSummary(file='/app/lib/empty.dart')
    return ProcessingSummary(files=[broken, empty, login], dry_run=dry_run)


class TestConsoleReporter:
    """Test cases for ConsoleReporter."""

    def setup_method(self):
        Colors.disable()

    def teardown_method(self):
        Colors.enable()

    def test_extraction_report(self, capsys):
        """Candidates are listed with role and screen."""
        ConsoleReporter.print_extraction_report(make_summary(dry_run=True), root=Path('/app'))
        out = capsys.readouterr().out

        assert 'LOCALIZATION CANDIDATES' in out
        assert 'lib/login_screen.dart (2 candidate(s))' in out
        assert "'Sign in'" in out
        assert "'Continue'" in out
        assert '[Login]' in out
        assert 'ROLES' in out
        assert 'Files scanned:     3' in out
        assert 'Strings extracted: 2' in out

    def test_extraction_report_skips_empty_files(self, capsys):
        """Files without candidates or problems are not listed."""
        ConsoleReporter.print_extraction_report(make_summary(dry_run=True), root=Path('/app'))
        out = capsys.readouterr().out
        assert 'empty.dart' not in out
        assert 'broken.dart' in out
        assert 'Cannot read file: invalid utf-8' in out

    def test_extraction_summary_only(self, capsys):
        """Without details only file headings remain."""
        ConsoleReporter.print_extraction_report(make_summary(dry_run=True), show_details=False)
        out = capsys.readouterr().out
        assert '/app/lib/login_screen.dart' in out
        assert "'Sign in'" not in out

    def test_rewrite_report(self, capsys):
        """Applied, skipped and failed files are reported."""
        summary = make_summary()
        summary.backup_dir = Path('/app/l10n_backup_20240101_120000')
        ConsoleReporter.print_rewrite_report(summary, root=Path('/app'))
        out = capsys.readouterr().out

        assert 'REWRITE REPORT' in out
        assert 'replaced 1 string(s), import added' in out
        assert "line 9: 'Continue' skipped (content drift at line 9" in out
        assert 'Strings replaced:  1' in out
        assert 'Files changed:     1' in out
        assert 'Failed files:      1' in out
        assert 'Backup: /app/l10n_backup_20240101_120000' in out

    def test_rewrite_preview(self, capsys):
        """Dry runs say what would happen."""
        ConsoleReporter.print_rewrite_report(make_summary(dry_run=True))
        out = capsys.readouterr().out
        assert 'REWRITE PREVIEW (dry run)' in out
        assert 'would replace 1 string(s)' in out
        assert 'Backup:' not in out

    def test_empty_summary(self, capsys):
        """An empty run still prints totals."""
        ConsoleReporter.print_rewrite_report(ProcessingSummary())
        out = capsys.readouterr().out
        assert 'Files scanned:     0' in out
        assert 'ROLES' not in out

    def test_long_values_shortened(self, capsys):
        """Long literals are cut in the listing."""
        summary = ProcessingSummary(files=[FileSummary(
            file='a.dart',
            extracted=1,
            records=[make_item('x' * 80, 1, StringRole.MESSAGE, file='a.dart')],
        )], dry_run=True)
        ConsoleReporter.print_extraction_report(summary)
        out = capsys.readouterr().out
        assert 'x' * 47 + '...' in out
        assert 'x' * 80 not in out


class TestJSONReporter:
    """Test cases for JSONReporter."""

    def test_build_structure(self):
        """The report has metadata, totals, files and entries."""
        report = JSONReporter.build(make_summary(), FlutterAdapter())

        assert set(report) == {'metadata', 'summary', 'files', 'entries'}
        assert report['metadata']['framework'] == 'flutter'
        assert report['metadata']['dry_run'] is False
        assert report['summary'] == {
            'files': 3,
            'extracted': 2,
            'applied': 1,
            'skipped': 1,
            'failed': 1,
            'changed': 1,
            'roles': {'title': 1, 'button': 1},
        }
        assert report['entries'] == {'signIn': 'Sign in'}

    def test_file_records(self):
        """Records carry location, role and the bound key."""
        report = JSONReporter.build(make_summary(), FlutterAdapter())
        login = report['files'][2]

        assert login['file'] == '/app/lib/login_screen.dart'
        first, second = login['records']
        assert first['value'] == 'Sign in'
        assert first['line'] == 5
        assert first['role'] == 'title'
        assert first['screen_group'] == 'Login'
        assert first['key'] == 'signIn'
        assert second['key'] is None
        assert login['skipped'][0]['line'] == 9
        assert login['rejected'] == {'debug or logging context': 1}

    def test_failed_file_entry(self):
        """Failed files report their error."""
        report = JSONReporter.build(make_summary(), FlutterAdapter())
        assert report['files'][0]['error'] == 'Cannot read file: invalid utf-8'

    def test_generate_and_load(self, capsys):
        """Written reports load back to the same data."""
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / 'reports' / 'l10n.json'
            path = JSONReporter.generate(make_summary(), FlutterAdapter(), output)

            assert path == output
            assert 'JSON report:' in capsys.readouterr().out
            data = JSONReporter.load(output)
            assert data['summary']['applied'] == 1
            assert data['files'][2]['records'][0]['value'] == 'Sign in'

    def test_compact_output(self):
        """pretty=False writes a single line."""
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / 'l10n.json'
            JSONReporter.generate(make_summary(), FlutterAdapter(), output, pretty=False)
            assert '\n' not in output.read_text(encoding='utf-8')

    def test_non_ascii_kept(self):
        """Values are written without escaping."""
        summary = ProcessingSummary(files=[FileSummary(
            file='a.dart',
            extracted=1,
            records=[make_item('Giriş yap', 1, StringRole.BUTTON, file='a.dart')],
        )])
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / 'l10n.json'
            JSONReporter.generate(summary, FlutterAdapter(), output)
            assert 'Giriş yap' in output.read_text(encoding='utf-8')
            assert json.loads(output.read_text(encoding='utf-8'))['files'][0]['records'][0]['role'] == 'button'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
