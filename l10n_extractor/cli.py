"""Command-line interface for l10n-extractor."""

import sys
import argparse
from pathlib import Path

import yaml

from .__version__ import __version__
from .utils.colors import Colors
from .utils.config import CONFIG_FILENAME, Config, ConfigValidationError, create_default_config
from .utils.backup import backup_source_root, create_backup, list_backups, restore_backup
from .utils.logging import configure_logging
from .frameworks import ADAPTERS
from .frameworks.base import BaseAdapter
from .features.file_processor import FileProcessor
from .reports.json_reporter import JSONReporter
from .reports.console_reporter import ConsoleReporter


def load_and_validate_config(validate: bool = True, verbose: bool = False) -> Config:
    """
    Load configuration and optionally validate it.

    Args:
        validate: Whether to validate the config
        verbose: Whether to print warnings

    Returns:
        Loaded Config object

    Raises:
        ConfigValidationError: If loading or validation fails
    """
    try:
        config = Config.from_file()
    except yaml.YAMLError as e:
        print(f"{Colors.error('✗')} Cannot parse {CONFIG_FILENAME}: {e}")
        raise ConfigValidationError([str(e)])
    except ConfigValidationError as e:
        print(f"{Colors.error('✗')} Configuration errors:")
        for error in e.errors:
            print(f"   • {error}")
        raise

    if validate:
        errors, warnings = config.validate()

        if verbose and warnings:
            for warning in warnings:
                print(f"{Colors.warning('!')} Config warning: {warning}")

        if errors:
            print(f"{Colors.error('✗')} Configuration errors:")
            for error in errors:
                print(f"   • {error}")
            raise ConfigValidationError(errors)

    return config


def create_adapter(config: Config) -> BaseAdapter:
    """Instantiate the adapter for the configured framework."""
    adapter_cls = ADAPTERS[config.project.framework]
    return adapter_cls(
        exclude_patterns=config.paths.exclude,
        import_line=config.accessor.import_line,
        template=config.accessor.template,
    )


def cmd_init(args):
    """Initialize configuration file."""
    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists() and not args.force:
        print(f"{Colors.error('✗')} Config already exists: {config_path}")
        print("   Use --force to overwrite")
        return 1

    config = create_default_config(args.framework)
    config.save(config_path)

    print(f"{Colors.success('✓')} Created: {config_path}")
    print(f"\n{Colors.bold('Next steps:')}")
    print(f"1. Edit {CONFIG_FILENAME} to configure your project")
    print("2. Run: l10n-extractor extract")
    print("3. Run: l10n-extractor rewrite --dry-run")

    return 0


def _source_files(processor: FileProcessor, root: Path):
    if not root.exists():
        print(f"{Colors.error('✗')} Source path does not exist: {root}")
        return None
    files = processor.find_source_files(root)
    if not files:
        print(f"{Colors.warning('!')} No source files found in {root}")
    return files


def cmd_extract(args):
    """List localization candidates without changing any file."""
    configure_logging(verbose=args.verbose, quiet=args.quiet, use_colors=Colors.enabled())
    try:
        config = load_and_validate_config(validate=True, verbose=args.verbose)
    except ConfigValidationError:
        return 1

    adapter = create_adapter(config)
    processor = FileProcessor(
        adapter,
        config,
        use_threads=config.processing.threads and not args.no_threads,
        show_progress=not args.quiet,
    )

    root = Path(args.path or config.paths.source)
    files = _source_files(processor, root)
    if files is None:
        return 1
    if not files:
        return 0

    summary = processor.extract(files)

    if not args.quiet:
        ConsoleReporter.print_extraction_report(summary, root=root, show_details=not args.summary)

    if args.json:
        JSONReporter.generate(summary, adapter, Path(args.json))

    return 0


def cmd_rewrite(args):
    """Replace hardcoded strings with accessor calls."""
    configure_logging(verbose=args.verbose, quiet=args.quiet, use_colors=Colors.enabled())
    try:
        config = load_and_validate_config(validate=True, verbose=args.verbose)
    except ConfigValidationError:
        return 1

    if args.min_confidence is not None:
        config.processing.min_confidence = args.min_confidence

    adapter = create_adapter(config)
    processor = FileProcessor(
        adapter,
        config,
        dry_run=args.dry_run,
        use_threads=config.processing.threads and not args.no_threads,
        show_progress=not args.quiet,
    )

    root = Path(args.path or config.paths.source)
    files = _source_files(processor, root)
    if files is None:
        return 1
    if not files:
        return 0

    backup_dir = None
    if config.processing.backup and not args.no_backup and not args.dry_run:
        backup_dir = create_backup(source_dir=root if root.is_dir() else root.parent, files=files)

    if args.dry_run:
        print(f"{Colors.info('[DRY RUN - No changes will be made]')}")

    summary = processor.process(files)
    summary.backup_dir = backup_dir

    if not args.quiet:
        ConsoleReporter.print_rewrite_report(summary, root=root)

    if args.json:
        JSONReporter.generate(summary, adapter, Path(args.json))

    return 1 if summary.failed_files else 0


def cmd_restore(args):
    """Restore sources from a backup made by ``rewrite``."""
    try:
        config = load_and_validate_config(validate=False)
    except ConfigValidationError:
        return 1

    if args.backup:
        backup_dir = Path(args.backup)
    else:
        backups = list_backups(Path.cwd())
        if not backups:
            print(f"{Colors.error('✗')} No backups found in {Path.cwd()}")
            return 1
        backup_dir = backups[0]

    # Backups remember the root they were taken from; older ones fall back to the configured source
    target_dir = backup_source_root(backup_dir) or Path(config.paths.source)
    return 0 if restore_backup(backup_dir, target_dir) else 1


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='l10n-extractor',
        description='Extract hardcoded UI strings from Flutter code and replace them with localization lookups'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # init command
    init_parser = subparsers.add_parser('init', help='Initialize configuration file')
    init_parser.add_argument('--framework', choices=sorted(ADAPTERS), default='flutter',
                             help='Project framework (default: flutter)')
    init_parser.add_argument('--force', action='store_true', help='Overwrite existing config')

    # extract command
    extract_parser = subparsers.add_parser('extract', help='List hardcoded strings')
    extract_parser.add_argument('path', nargs='?', help='File or directory (default: paths.source)')
    extract_parser.add_argument('--json', metavar='PATH', help='Output JSON report')
    extract_parser.add_argument('--summary', action='store_true', help='Only show per-file counts')
    extract_parser.add_argument('--verbose', action='store_true', help='Show detailed output')
    extract_parser.add_argument('--quiet', action='store_true', help='Minimal output')
    extract_parser.add_argument('--no-threads', action='store_true', help='Disable multi-threading')

    # rewrite command
    rewrite_parser = subparsers.add_parser('rewrite', help='Replace hardcoded strings with localization lookups')
    rewrite_parser.add_argument('path', nargs='?', help='File or directory (default: paths.source)')
    rewrite_parser.add_argument('--dry-run', action='store_true', help='Preview changes only')
    rewrite_parser.add_argument('--no-backup', action='store_true', help='Skip backup creation')
    rewrite_parser.add_argument('--min-confidence', type=float, metavar='X',
                                help='Only rewrite strings classified with at least this confidence')
    rewrite_parser.add_argument('--json', metavar='PATH', help='Output JSON report')
    rewrite_parser.add_argument('--verbose', action='store_true', help='Show detailed output')
    rewrite_parser.add_argument('--quiet', action='store_true', help='Minimal output')
    rewrite_parser.add_argument('--no-threads', action='store_true', help='Disable multi-threading')

    # restore command
    restore_parser = subparsers.add_parser('restore', help='Restore sources from a backup')
    restore_parser.add_argument('--backup', metavar='DIR', help='Backup directory (default: most recent)')

    args = parser.parse_args(argv)
    Colors.auto()

    if args.command == 'init':
        return cmd_init(args)
    elif args.command == 'extract':
        return cmd_extract(args)
    elif args.command == 'rewrite':
        return cmd_rewrite(args)
    elif args.command == 'restore':
        return cmd_restore(args)
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())
