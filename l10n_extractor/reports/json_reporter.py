"""JSON report generator."""

import json
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Optional

from ..__version__ import __version__
from ..features.file_processor import FileSummary, ProcessingSummary
from ..frameworks.base import BaseAdapter
from ..utils.colors import Colors


class JSONReporter:
    """Generate JSON reports for extraction and rewrite runs."""

    @staticmethod
    def build(summary: ProcessingSummary, adapter: BaseAdapter) -> Dict[str, Any]:
        """Report structure as plain data."""
        return {
            'metadata': {
                'generated_at': datetime.now().isoformat(),
                'version': __version__,
                'framework': adapter.__class__.__name__.replace('Adapter', '').lower(),
                'dry_run': summary.dry_run,
            },
            'summary': {
                'files': summary.total_files,
                'extracted': summary.total_extracted,
                'applied': summary.total_applied,
                'skipped': summary.total_skipped,
                'failed': len(summary.failed_files),
                'changed': len(summary.changed_files),
                'roles': summary.role_counts,
            },
            'files': [JSONReporter._file_entry(f) for f in summary.files],
            'entries': summary.entries,
        }

    @staticmethod
    def _file_entry(file_summary: FileSummary) -> Dict[str, Any]:
        keys_by_value = {value: key for key, value in file_summary.entries.items()}
        return {
            'file': file_summary.file,
            'extracted': file_summary.extracted,
            'applied': file_summary.applied,
            'changed': file_summary.changed,
            'error': file_summary.error,
            'parse_warnings': file_summary.parse_warnings,
            'warnings': file_summary.warnings,
            'rejected': file_summary.rejected,
            'interpolated': file_summary.interpolated,
            'records': [
                {
                    'value': item.value,
                    'line': item.location.line,
                    'column': item.location.column,
                    'byte_offset': item.location.byte_offset,
                    'byte_length': item.location.byte_length,
                    'structural_type': item.record.structural_type,
                    'parameter_name': item.record.parameter_name,
                    'role': item.role.value,
                    'screen_group': item.context.screen_group,
                    'confidence': item.context.confidence,
                    'key': keys_by_value.get(item.value),
                }
                for item in file_summary.records
            ],
            'skipped': [note._asdict() for note in file_summary.skipped],
        }

    @staticmethod
    def generate(
        summary: ProcessingSummary,
        adapter: BaseAdapter,
        output_path: Optional[Path] = None,
        pretty: bool = True
    ) -> Path:
        """
        Write the JSON report.

        Args:
            summary: Processing summary
            adapter: Framework adapter
            output_path: Output file path (default: ``l10n_report.json`` in the working directory)
            pretty: Pretty print JSON

        Returns:
            Path to generated report
        """
        if output_path is None:
            output_path = Path.cwd() / 'l10n_report.json'

        report = JSONReporter.build(summary, adapter)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            if pretty:
                json.dump(report, f, indent=2, ensure_ascii=False)
            else:
                json.dump(report, f, ensure_ascii=False)

        print(f"\n{Colors.success('✓')} JSON report: {output_path}")

        return output_path

    @staticmethod
    def load(report_path: Path) -> dict:
        """Load a JSON report from file."""
        with open(report_path, 'r', encoding='utf-8') as f:
            return json.load(f)
