"""Utility modules."""

from .colors import Colors
from .config import Config, ConfigValidationError, create_default_config
from .backup import backup_source_root, create_backup, restore_backup, list_backups
from .logging import get_logger, configure_logging

__all__ = [
    'Colors',
    'Config',
    'ConfigValidationError',
    'create_default_config',
    'backup_source_root',
    'create_backup',
    'restore_backup',
    'list_backups',
    'get_logger',
    'configure_logging',
]
