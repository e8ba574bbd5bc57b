"""
Logging configuration for the Angular i18n text extractor.

Records go to a Rich console handler on stderr and, when a log file is
configured, to a JSON lines file. While a source file is being processed,
every record carries its path as ``source_file``.
"""

import functools
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message"}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, context values included."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextFilter(logging.Filter):
    """Copies the current context values onto each record."""

    def __init__(self) -> None:
        super().__init__()
        self.context: dict[str, Any] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.context.items():
            setattr(record, key, value)
        return True


context_filter = ContextFilter()


def setup_logging(
    log_level: str,
    log_file_path: Optional[Path] = None,
    dev_mode: bool = False,
) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Level name, case-insensitive
        log_file_path: Also write JSON lines here
        dev_mode: Show local variables in Rich tracebacks
    """
    log_level = log_level.upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=dev_mode,
    )
    console_handler.setLevel(log_level)
    console_handler.addFilter(context_filter)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.addFilter(context_filter)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    # bs4 warns about markup that looks like a filename or URL
    logging.getLogger("bs4").setLevel(logging.ERROR)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """Temporarily attach values (``source_file=...``) to every record."""

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs
        self.old_context: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        for key in self.context:
            if key in context_filter.context:
                self.old_context[key] = context_filter.context[key]
        context_filter.context.update(self.context)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        for key in self.context:
            context_filter.context.pop(key, None)
        context_filter.context.update(self.old_context)


def log_performance(func):
    """
    Log how long a coroutine took, and whether it failed.

    Usage:
        @log_performance
        async def run(self, directory: Path) -> ExtractionArtifact:
            ...
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        start_time = time.perf_counter()
        try:
            result = await func(*args, **kwargs)
        except Exception:
            logger.error(f"Failed {func.__name__} after {time.perf_counter() - start_time:.2f}s")
            raise
        logger.debug(f"Completed {func.__name__} in {time.perf_counter() - start_time:.2f}s")
        return result

    return wrapper
