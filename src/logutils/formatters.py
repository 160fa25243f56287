"""Log formatters.

JSONFormatter writes one object per line for files and log shippers,
StandardFormatter writes timestamped lines tagged with the correlation
ID and CompactFormatter writes short ``[LEVEL] message`` lines for the
interactive shell.
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any

from .context import get_context
from .masking import mask_dict, mask_sensitive_string


class _MaskingMixin:
    mask_sensitive: bool

    def _scrub(self, text: str) -> str:
        return mask_sensitive_string(text) if self.mask_sensitive else text


class JSONFormatter(_MaskingMixin, logging.Formatter):
    """Serialize each record, its roster context and any ``extra_data``."""

    def __init__(
        self,
        include_timestamp: bool = True,
        include_context: bool = True,
        mask_sensitive: bool = True,
        extra_fields: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_context = include_context
        self.mask_sensitive = mask_sensitive
        # Merged into every line, e.g. {"service": "roster"}
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": self._scrub(record.getMessage()),
            "source": {"file": record.pathname, "line": record.lineno, "function": record.funcName},
        }
        if self.include_timestamp:
            payload["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        if self.include_context:
            payload["context"] = get_context().to_dict()
        if record.exc_info and record.exc_info[0]:
            payload["exception"] = self._exception_fields(record.exc_info)

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            payload["extra"] = mask_dict(extra_data) if self.mask_sensitive and isinstance(extra_data, dict) else extra_data

        payload.update(self.extra_fields)
        return json.dumps(payload, default=str)

    @staticmethod
    def _exception_fields(exc_info) -> dict[str, str]:
        exc_type, exc, tb = exc_info
        return {
            "type": exc_type.__name__,
            "message": str(exc),
            "traceback": "".join(traceback.format_exception(exc_type, exc, tb)),
        }


class StandardFormatter(_MaskingMixin, logging.Formatter):
    """``TIMESTAMP - LEVEL - LOGGER - [CORRELATION_ID] - MESSAGE``"""

    DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - [%(correlation_id)s] - %(message)s"
    DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(self, fmt: str | None = None, datefmt: str | None = None, mask_sensitive: bool = True) -> None:
        super().__init__(fmt=fmt or self.DEFAULT_FORMAT, datefmt=datefmt or self.DEFAULT_DATE_FORMAT)
        self.mask_sensitive = mask_sensitive

    def format(self, record: logging.LogRecord) -> str:
        record.correlation_id = get_context().correlation_id
        return self._scrub(super().format(record))


class CompactFormatter(_MaskingMixin, logging.Formatter):
    """``[LEVEL] MESSAGE (sno)`` where the sno comes from the active context."""

    # Padded to five characters so messages line up
    LEVEL_LABELS = {"DEBUG": "DEBUG", "INFO": "INFO ", "WARNING": "WARN ", "ERROR": "ERROR", "CRITICAL": "CRIT "}

    def __init__(self, mask_sensitive: bool = True) -> None:
        super().__init__()
        self.mask_sensitive = mask_sensitive

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelname, record.levelname)
        line = f"[{label}] {self._scrub(record.getMessage())}"
        sno = get_context().record_id
        return f"{line} ({sno})" if sno else line
