"""Structured logging for l10n-extractor."""

import logging
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .colors import Colors

LOGGER_NAME = 'l10n_extractor'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors console output by level.

    File output uses a plain ``logging.Formatter`` so log files stay free
    of ANSI codes.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.OKCYAN,
        logging.INFO: '',
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.FAIL,
        logging.CRITICAL: Colors.FAIL + Colors.BOLD,
    }

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, '')
            if color:
                message = f"{color}{message}{Colors.ENDC}"
        return message


class TqdmHandler(logging.StreamHandler):
    """Console handler that writes through ``tqdm.write`` so progress bars stay intact."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record))
            self.flush()
        except Exception:
            self.handleError(record)


class Logger:
    """
    Process-wide logger for the extractor.

    A single instance owns the ``l10n_extractor`` logger and its handlers;
    modules fetch it through :func:`get_logger`.
    """

    _instance: Optional['Logger'] = None
    _initialized: bool = False

    def __new__(cls) -> 'Logger':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if Logger._initialized:
            return

        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False
        self._logger.handlers = []

        self._console_handler = self._create_console_handler()
        self._logger.addHandler(self._console_handler)

        self._file_handler: Optional[logging.FileHandler] = None

        Logger._initialized = True

    def _create_console_handler(
        self,
        level: int = logging.INFO,
        use_colors: bool = True
    ) -> logging.Handler:
        """
        Create the console handler.

        Args:
            level: Minimum log level for console output
            use_colors: Whether to use ANSI colors

        Returns:
            Configured handler
        """
        handler = TqdmHandler()
        handler.setLevel(level)
        handler.setFormatter(ColoredFormatter(fmt='%(message)s', use_colors=use_colors))
        return handler

    def _create_file_handler(
        self,
        file_path: Path,
        level: int = logging.DEBUG
    ) -> logging.FileHandler:
        file_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(file_path, encoding='utf-8')
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        return handler

    def configure(
        self,
        verbose: bool = False,
        quiet: bool = False,
        log_file: Optional[Path] = None,
        use_colors: bool = True
    ) -> None:
        """
        Configure console verbosity and optional file logging.

        Args:
            verbose: Show DEBUG messages (relocations, per-file details)
            quiet: Show WARNING and above only
            log_file: Optional file receiving every message
            use_colors: Whether to use colors in console
        """
        if quiet:
            console_level = logging.WARNING
        elif verbose:
            console_level = logging.DEBUG
        else:
            console_level = logging.INFO

        self._logger.removeHandler(self._console_handler)
        self._console_handler = self._create_console_handler(
            level=console_level,
            use_colors=use_colors
        )
        self._logger.addHandler(self._console_handler)

        if log_file:
            if self._file_handler:
                self._logger.removeHandler(self._file_handler)
                self._file_handler.close()
            self._file_handler = self._create_file_handler(log_file)
            self._logger.addHandler(self._file_handler)

    @property
    def console_level(self) -> int:
        return self._console_handler.level

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Return the package logger, or a child logger for ``name``."""
        if name:
            return logging.getLogger(f'{LOGGER_NAME}.{name}')
        return self._logger

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs) -> None:
        self._logger.critical(msg, *args, **kwargs)

    def success(self, msg: str) -> None:
        """Log a green success line."""
        self._logger.info(Colors.success(msg))

    def fail(self, msg: str) -> None:
        """Log a red failure line."""
        self._logger.error(Colors.error(msg))

    def hint(self, msg: str) -> None:
        """Log a cyan hint line."""
        self._logger.info(Colors.info(msg))

    def section(self, title: str, char: str = '=', width: int = 70) -> None:
        """Log a section header."""
        self._logger.info(f"\n{Colors.bold(title)}")
        self._logger.info(char * width)


_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Return the global logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def configure_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    use_colors: bool = True
) -> None:
    """Configure the global logger; see :meth:`Logger.configure`."""
    get_logger().configure(
        verbose=verbose,
        quiet=quiet,
        log_file=log_file,
        use_colors=use_colors
    )


def reset_logger() -> None:
    """Reset the global logger (mainly for testing)."""
    global _logger
    if _logger is not None:
        for handler in _logger._logger.handlers[:]:
            handler.close()
            _logger._logger.removeHandler(handler)
    _logger = None
    Logger._instance = None
    Logger._initialized = False
