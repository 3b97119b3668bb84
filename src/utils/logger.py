import atexit
import logging
import os
from typing import Dict, Optional

from rich import get_console
from rich.console import Console
from rich.logging import RichHandler

_NAME_WIDTH = 12

# loggers handed out by get_logger, so configure_logging can reach them
_loggers: Dict[str, logging.Logger] = {}
_level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO
_log_console: Optional[Console] = None


class PaddedNameFormatter(logging.Formatter):
    """Pads logger names so messages line up, growing with the longest name seen."""

    width = _NAME_WIDTH

    def format(self, record):
        PaddedNameFormatter.width = max(PaddedNameFormatter.width, len(record.name))
        record.name = record.name.ljust(PaddedNameFormatter.width)
        return super().format(record)


def close_log_file() -> None:
    global _log_console
    if _log_console is not None:
        _log_console.file.close()
        _log_console = None


atexit.register(close_log_file)


def _open_log_file(log_file: Optional[str]) -> Optional[Console]:
    # the TUI owns the terminal, so logs may be diverted to a file
    global _log_console
    close_log_file()
    if log_file:
        _log_console = Console(file=open(log_file, "a"), width=120)
    return _log_console


_open_log_file(os.getenv("ATELIER_LOG_FILE"))


def _apply(logger: logging.Logger) -> None:
    logger.setLevel(_level)
    for handler in logger.handlers:
        handler.setLevel(_level)
        if isinstance(handler, RichHandler):
            handler.console = _log_console or get_console()


def configure_logging(debug: bool = False, log_file: Optional[str] = None) -> None:
    """
    Re-point every logger at the level and destination from the app settings.
    Loggers created before this call are updated too.
    """
    global _level
    _level = logging.DEBUG if debug else logging.INFO
    _open_log_file(log_file)
    for logger in _loggers.values():
        _apply(logger)


def get_logger(name=None) -> logging.Logger:
    """
    Creates and returns a logger configured with RichHandler for rich output.
    """
    if name is None:
        name = "atelier"
    logger = logging.getLogger(name)

    created = not logger.handlers
    if created:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(PaddedNameFormatter("[%(name)s]  %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    _loggers[name] = logger
    _apply(logger)
    if created:
        logger.debug(f"Logger for '{name}' ready.")
    return logger
