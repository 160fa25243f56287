"""Logger factory for the roster.

Every module obtains its logger with ``get_logger(__name__)``; handlers
are attached once per logger according to the active LogConfig.
"""

from __future__ import annotations

import logging
import sys

from .config import LogConfig, LogOutput, get_config
from .formatters import CompactFormatter, JSONFormatter, StandardFormatter
from .handlers import RichConsoleHandler, SafeRotatingFileHandler, StreamHandlerWithFlush

# Track configured loggers
_configured_loggers: set[str] = set()
_root_configured: bool = False


def get_logger(name: str | None = None, config: LogConfig | None = None) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name (usually __name__)
        config: Optional LogConfig to use instead of the global one

    Returns:
        Configured Logger instance
    """
    logger = logging.getLogger(name)

    if (name or "root") not in _configured_loggers:
        _configure_logger(logger, config or get_config())
        _configured_loggers.add(name or "root")

    return logger


def _configure_logger(logger: logging.Logger, config: LogConfig) -> None:
    level = config.module_levels.get(logger.name, config.level)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    logger.handlers.clear()

    # Named loggers own their handlers; only the root logger propagates
    if logger.name != "root":
        logger.propagate = False

    for handler in _create_handlers(config):
        logger.addHandler(handler)


def _create_handlers(config: LogConfig) -> list[logging.Handler]:
    """Create handlers based on configuration.

    Args:
        config: Log configuration

    Returns:
        List of configured handlers
    """
    handlers: list[logging.Handler] = []
    json_formatter = JSONFormatter(mask_sensitive=config.mask_sensitive)

    if config.output in (LogOutput.CONSOLE, LogOutput.BOTH, LogOutput.JSON):
        handler: logging.Handler
        if config.json_format or config.output == LogOutput.JSON:
            handler = StreamHandlerWithFlush(sys.stderr)
            handler.setFormatter(json_formatter)
        elif config.use_rich:
            handler = RichConsoleHandler()
            handler.setFormatter(CompactFormatter(mask_sensitive=config.mask_sensitive))
        else:
            handler = StreamHandlerWithFlush(sys.stderr)
            handler.setFormatter(StandardFormatter(mask_sensitive=config.mask_sensitive))
        handlers.append(handler)

    # File output is always JSON
    if config.output in (LogOutput.FILE, LogOutput.BOTH) and config.log_file:
        handler = SafeRotatingFileHandler(
            filename=config.log_file,
            max_bytes=config.max_file_size,
            backup_count=config.backup_count,
        )
        handler.setFormatter(json_formatter)
        handlers.append(handler)

    return handlers


def configure_root_logger(config: LogConfig | None = None) -> None:
    """Configure the root logger. Call once at application startup."""
    global _root_configured

    if _root_configured:
        return

    _configure_logger(logging.getLogger(), config or get_config())
    _root_configured = True


def reset_logging(config: LogConfig | None = None) -> None:
    """Reconfigure every logger handed out so far.

    With no config the loggers lose their handlers and are configured
    afresh the next time ``get_logger`` is called for them. Module-level
    loggers obtained at import time keep their identity, so passing a
    config reapplies it to them immediately.
    """
    global _root_configured

    for name in list(_configured_loggers):
        logger = logging.getLogger(name if name != "root" else None)
        logger.handlers.clear()
        if config is not None:
            _configure_logger(logger, config)

    if config is None:
        _configured_loggers.clear()
    _root_configured = False
