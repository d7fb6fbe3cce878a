"""ANSI color codes for terminal output."""

import os
import sys


class Colors:
    """ANSI color codes for terminal output."""

    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    DIM = '\033[2m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'

    _enabled = True

    @classmethod
    def disable(cls) -> None:
        """Turn coloring off (``--no-color`` or a non-tty stdout)."""
        cls._enabled = False

    @classmethod
    def enable(cls) -> None:
        cls._enabled = True

    @classmethod
    def enabled(cls) -> bool:
        return cls._enabled

    @classmethod
    def auto(cls) -> None:
        """Follow ``NO_COLOR`` and whether stdout is a terminal."""
        if os.environ.get('NO_COLOR') or not sys.stdout.isatty():
            cls.disable()
        else:
            cls.enable()

    @classmethod
    def paint(cls, text: str, code: str) -> str:
        if not cls._enabled or not code:
            return text
        return f"{code}{text}{cls.ENDC}"

    @classmethod
    def success(cls, text: str) -> str:
        """Return text in green color."""
        return cls.paint(text, cls.OKGREEN)

    @classmethod
    def error(cls, text: str) -> str:
        """Return text in red color."""
        return cls.paint(text, cls.FAIL)

    @classmethod
    def warning(cls, text: str) -> str:
        """Return text in yellow color."""
        return cls.paint(text, cls.WARNING)

    @classmethod
    def info(cls, text: str) -> str:
        """Return text in cyan color."""
        return cls.paint(text, cls.OKCYAN)

    @classmethod
    def bold(cls, text: str) -> str:
        """Return text in bold."""
        return cls.paint(text, cls.BOLD)

    @classmethod
    def dim(cls, text: str) -> str:
        return cls.paint(text, cls.DIM)

    @classmethod
    def confidence(cls, value: float) -> str:
        """Format a classification confidence, colored by how sure it is."""
        text = f"{value:.2f}"
        if value >= 0.8:
            return cls.success(text)
        if value >= 0.5:
            return cls.warning(text)
        return cls.error(text)
