"""Log handlers used by ``get_logger``, plus an in-memory buffer for tests."""

from __future__ import annotations

import logging
import sys
from collections import deque
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO

from rich.console import Console
from rich.text import Text


class RichConsoleHandler(logging.Handler):
    """Print records to a Rich console, coloured by level.

    Goes to stderr so log lines never mix with the tables the CLI prints.
    """

    LEVEL_STYLES = {
        "DEBUG": "dim",
        "INFO": "blue",
        "WARNING": "yellow",
        "ERROR": "red bold",
        "CRITICAL": "red bold reverse",
    }

    def __init__(self, console: Console | None = None, show_path: bool = False) -> None:
        super().__init__()
        self.console = console or Console(stderr=True)
        self.show_path = show_path

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = Text(self.format(record), style=self.LEVEL_STYLES.get(record.levelname, ""))
            if self.show_path:
                line.append(f" ({record.filename}:{record.lineno})", style="dim")
            self.console.print(line)
        except Exception:
            self.handleError(record)


class SafeRotatingFileHandler(RotatingFileHandler):
    """Rotating UTF-8 log file whose parent directory is created on demand."""

    DEFAULT_MAX_BYTES = 10 * 1024 * 1024
    DEFAULT_BACKUP_COUNT = 5

    def __init__(
        self,
        filename: str | Path,
        max_bytes: int = DEFAULT_MAX_BYTES,
        backup_count: int = DEFAULT_BACKUP_COUNT,
        encoding: str = "utf-8",
    ) -> None:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(filename=str(path), maxBytes=max_bytes, backupCount=backup_count, encoding=encoding)


class BufferingHandler(logging.Handler):
    """Keep the last ``capacity`` records in memory.

    Attach it to a logger to see what an operation logged, e.g. which
    failure a cache mutation reported.
    """

    def __init__(self, capacity: int = 1000) -> None:
        super().__init__()
        self.capacity = capacity
        self.buffer: deque[logging.LogRecord] = deque(maxlen=capacity)

    def emit(self, record: logging.LogRecord) -> None:
        self.buffer.append(record)

    def get_records(self) -> list[logging.LogRecord]:
        return list(self.buffer)

    def messages(self, level: int = logging.NOTSET) -> list[str]:
        """Rendered messages of buffered records at or above ``level``."""
        return [r.getMessage() for r in self.buffer if r.levelno >= level]

    def clear(self) -> None:
        self.buffer.clear()


class StreamHandlerWithFlush(logging.StreamHandler):
    """Stream handler that flushes after every record (CI consoles buffer otherwise)."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        super().__init__(stream or sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()
