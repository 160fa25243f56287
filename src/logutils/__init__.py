"""Roster logging infrastructure.

Provides:
- Structured JSON logging for production
- Rich console output for development
- Correlation IDs and operation context for tracing cache/storage round trips
- Masking of credentials in messages and structured extras

Usage:
    from src.logutils import get_logger, with_context

    logger = get_logger(__name__)

    with with_context(operation="add", record_id="S1"):
        logger.info("Inserting record")

    # With extra structured data
    logger.info("Cache loaded", extra={"extra_data": {"records": 42}})
"""

from .config import Environment, LogConfig, LogOutput, get_config, reset_config, set_config
from .context import (
    ContextManager,
    LogContext,
    clear_context,
    get_context,
    get_correlation_id,
    update_context,
    with_context,
)
from .formatters import CompactFormatter, JSONFormatter, StandardFormatter
from .handlers import BufferingHandler, RichConsoleHandler, SafeRotatingFileHandler, StreamHandlerWithFlush
from .logger import configure_root_logger, get_logger, reset_logging
from .masking import MASK, is_sensitive_key, mask_dict, mask_sensitive_string

__all__ = [
    # Core logger functions
    "get_logger",
    "configure_root_logger",
    "reset_logging",
    # Context management
    "with_context",
    "get_context",
    "clear_context",
    "get_correlation_id",
    "update_context",
    "LogContext",
    "ContextManager",
    # Configuration
    "LogConfig",
    "LogOutput",
    "Environment",
    "get_config",
    "set_config",
    "reset_config",
    # Formatters
    "JSONFormatter",
    "StandardFormatter",
    "CompactFormatter",
    # Handlers
    "RichConsoleHandler",
    "SafeRotatingFileHandler",
    "BufferingHandler",
    "StreamHandlerWithFlush",
    # Masking
    "mask_sensitive_string",
    "mask_dict",
    "is_sensitive_key",
    "MASK",
]
