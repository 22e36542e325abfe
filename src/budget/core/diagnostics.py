#!/usr/bin/env python3
"""
Diagnostics Buffer

Keeps the most recent log records in memory so a caller can show or export
them after an import or projection run. The buffer is an explicit object
owned by whichever component wants diagnostics; there is no process-wide
instance.

Example:
    >>> buffer = LogBuffer(max_entries=50)
    >>> with capture_logs(buffer, parse_debug_categories("imports")):
    ...     parse_up_csv(text)
    >>> entries = buffer.drain()
"""

import logging
from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

from .json_utils import format_json

ALL_CATEGORIES = frozenset({"*"})


@dataclass(frozen=True)
class LogEntry:
    """One buffered diagnostic record."""

    timestamp: str
    level: str
    category: str
    message: str
    data: Any = None


class LogBuffer:
    """Bounded FIFO of LogEntry values; the oldest entry is evicted first."""

    def __init__(self, max_entries: int = 100):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    def append(self, entry: LogEntry) -> None:
        """Add an entry, evicting the oldest one when full."""
        self._entries.append(entry)

    def entries(self) -> list[LogEntry]:
        """Snapshot of the buffered entries, oldest first."""
        return list(self._entries)

    def drain(self) -> list[LogEntry]:
        """Return all buffered entries and empty the buffer."""
        drained = list(self._entries)
        self._entries.clear()
        return drained

    def clear(self) -> None:
        """Discard all buffered entries."""
        self._entries.clear()

    def export_json(self) -> str:
        """Buffered entries as a pretty-printed JSON array."""
        return format_json([asdict(e) for e in self._entries])

    def __len__(self) -> int:
        return len(self._entries)


def parse_debug_categories(setting: str | None) -> frozenset[str]:
    """
    Parse a debug setting such as "true", "*" or "imports,balances".

    Returns:
        ALL_CATEGORIES for "true"/"*", the named categories otherwise
        (empty when unset)
    """
    if not setting:
        return frozenset()
    setting = setting.strip()
    if setting.lower() == "true" or setting == "*":
        return ALL_CATEGORIES
    return frozenset(part.strip() for part in setting.split(",") if part.strip())


def category_for_logger(name: str) -> str:
    """Category of a logger: the subpackage under budget ("budget.imports.up_csv" -> "imports")."""
    parts = name.split(".")
    if len(parts) >= 2 and parts[0] == "budget":
        return parts[1]
    return parts[0]


def category_enabled(categories: frozenset[str], category: str) -> bool:
    """Whether verbose output was switched on for a category."""
    return "*" in categories or category in categories


class BufferHandler(logging.Handler):
    """
    Logging handler that records into a LogBuffer.

    Every record reaching the handler is buffered, whatever its category.
    The categories only decide what is also echoed to the console (see
    ConsoleCategoryFilter).
    """

    def __init__(self, buffer: LogBuffer, categories: frozenset[str] = frozenset(), level: int = logging.DEBUG):
        super().__init__(level=level)
        self.buffer = buffer
        self.categories = categories

    def is_enabled(self, category: str) -> bool:
        """Whether verbose output is enabled for a category."""
        return category_enabled(self.categories, category)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = LogEntry(
                timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                level=record.levelname.lower(),
                category=category_for_logger(record.name),
                message=record.getMessage(),
                data=getattr(record, "data", None),
            )
        except Exception:
            self.handleError(record)
            return
        self.buffer.append(entry)


class ConsoleCategoryFilter(logging.Filter):
    """
    Handler filter for console output.

    Package records at or above threshold always pass; quieter ones pass only
    when their category is enabled. Records from other packages are untouched.
    """

    def __init__(self, categories: frozenset[str], threshold: int = logging.INFO):
        super().__init__()
        self.categories = categories
        self.threshold = threshold

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= self.threshold or not record.name.startswith("budget"):
            return True
        return category_enabled(self.categories, category_for_logger(record.name))


@contextmanager
def capture_logs(
    buffer: LogBuffer, categories: frozenset[str] = frozenset(), logger_name: str = "budget"
) -> Iterator[BufferHandler]:
    """
    Buffer every record of the package logger, debug included, for the block.

    The logger is lowered to DEBUG while the block runs. The root handlers get
    a ConsoleCategoryFilter so the console keeps its previous level except for
    the enabled categories. Level, handler and filters are restored on exit.

    Args:
        buffer: Buffer receiving the records
        categories: Categories whose debug output is also shown on the console
        logger_name: Logger to capture

    Yields:
        The attached BufferHandler
    """
    package_logger = logging.getLogger(logger_name)
    previous_level = package_logger.level
    handler = BufferHandler(buffer, categories)
    console_filter = ConsoleCategoryFilter(categories, package_logger.getEffectiveLevel())
    console_handlers = list(logging.getLogger().handlers)

    for console_handler in console_handlers:
        console_handler.addFilter(console_filter)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
    try:
        yield handler
    finally:
        package_logger.setLevel(previous_level)
        package_logger.removeHandler(handler)
        for console_handler in console_handlers:
            console_handler.removeFilter(console_filter)
