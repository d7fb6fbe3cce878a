"""Backup utilities for safe rewrites."""

import json
import shutil
from pathlib import Path
from datetime import datetime
from typing import List, Optional, Sequence

from .colors import Colors

BACKUP_PREFIX = 'l10n_backup_'
# Written into every backup; records where the files were copied from
MANIFEST_NAME = '.l10n_backup.json'


def create_backup(
    source_dir: Path,
    files: Sequence[Path],
    backup_root: Optional[Path] = None,
    backup_name: Optional[str] = None
) -> Path:
    """
    Copy the files about to be rewritten into a timestamped directory.

    Args:
        source_dir: Root the file paths are made relative to
        files: Files to copy
        backup_root: Where the backup directory is created (default: current directory)
        backup_name: Custom backup name (default: timestamp)

    Returns:
        Path to backup directory
    """
    if backup_name is None:
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        backup_name = f'{BACKUP_PREFIX}{timestamp}'

    backup_dir = (backup_root or Path.cwd()) / backup_name
    backup_dir.mkdir(parents=True, exist_ok=True)

    print(f"\nCreating backup: {Colors.bold(backup_name)}")

    for file_path in files:
        try:
            relative_path = file_path.resolve().relative_to(source_dir.resolve())
        except ValueError:
            relative_path = Path(file_path.name)
        dest_path = backup_dir / relative_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(file_path, dest_path)

    manifest = {
        'source_root': str(source_dir.resolve()),
        'created': datetime.now().isoformat(timespec='seconds'),
        'files': len(files),
    }
    (backup_dir / MANIFEST_NAME).write_text(json.dumps(manifest, indent=2), encoding='utf-8')

    print(f"   {Colors.success('✓')} {len(files)} file(s) saved to {backup_dir}")

    return backup_dir


def backup_source_root(backup_dir: Path) -> Optional[Path]:
    """Source root recorded in a backup's manifest, or None for backups without one."""
    manifest_path = backup_dir / MANIFEST_NAME
    if not manifest_path.is_file():
        return None
    try:
        manifest = json.loads(manifest_path.read_text(encoding='utf-8'))
    except (OSError, ValueError):
        return None
    root = manifest.get('source_root') if isinstance(manifest, dict) else None
    return Path(root) if root else None


def restore_backup(backup_dir: Path, target_dir: Optional[Path] = None) -> bool:
    """
    Copy a backup back over the source tree.

    Args:
        backup_dir: Backup directory
        target_dir: Where to restore (default: the source root recorded in the backup)

    Returns:
        Success status
    """
    if not backup_dir.exists():
        print(f"{Colors.error('✗')} Backup not found: {backup_dir}")
        return False

    if target_dir is None:
        target_dir = backup_source_root(backup_dir)
        if target_dir is None:
            print(f"{Colors.error('✗')} Backup has no recorded source root: {backup_dir}")
            return False

    print(f"\nRestoring from backup: {Colors.bold(backup_dir.name)}")
    print(f"   Target: {target_dir}")

    try:
        shutil.copytree(
            backup_dir, target_dir, dirs_exist_ok=True,
            ignore=shutil.ignore_patterns(MANIFEST_NAME)
        )
    except OSError as e:
        print(f"   {Colors.error('✗')} Restore failed: {e}")
        return False

    print(f"   {Colors.success('✓')} Restored successfully")
    return True


def list_backups(directory: Path) -> List[Path]:
    """Backups in ``directory``, newest first."""
    return sorted(
        directory.glob(f'{BACKUP_PREFIX}*'),
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )
