"""Logging configuration for the roster.

Defaults depend on where the process runs (development shell, test run,
CI, production) and can be overridden with ``LOG_*`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


class Environment(Enum):
    """Application environment enumeration."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"
    CI = "ci"


class LogOutput(Enum):
    """Log output destination enumeration."""

    CONSOLE = "console"
    FILE = "file"
    BOTH = "both"
    JSON = "json"


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


@dataclass
class LogConfig:
    """Logging configuration container."""

    # DEBUG, INFO, WARNING, ERROR, CRITICAL
    level: str = "INFO"

    output: LogOutput = LogOutput.CONSOLE

    # Structured JSON on the console
    json_format: bool = False

    use_rich: bool = True

    mask_sensitive: bool = True

    # Used when output is FILE or BOTH
    log_file: Path | None = None

    # Rotation threshold in bytes (default 10MB)
    max_file_size: int = 10 * 1024 * 1024

    backup_count: int = 5

    # Per-logger level overrides, e.g. {"src.database.gateway": "WARNING"}
    module_levels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> LogConfig:
        """Create configuration from environment variables.

        Environment variables:
            LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            LOG_OUTPUT: Output destination (console, file, both, json)
            LOG_JSON: Use JSON format (true/false)
            LOG_RICH: Use Rich console (true/false)
            LOG_MASK_SENSITIVE: Mask credentials (true/false)
            LOG_FILE: Log file path
            LOG_MAX_SIZE: Max file size in bytes
            LOG_BACKUP_COUNT: Number of backup files
        """
        config = _ENV_DEFAULTS[cls._detect_environment()]
        config = replace(config, module_levels={})

        if level := os.getenv("LOG_LEVEL"):
            config.level = level.upper()

        if output := os.getenv("LOG_OUTPUT"):
            try:
                config.output = LogOutput(output.lower())
            except ValueError:
                pass

        if json_format := os.getenv("LOG_JSON"):
            config.json_format = _truthy(json_format)

        if use_rich := os.getenv("LOG_RICH"):
            config.use_rich = _truthy(use_rich)

        if mask_sensitive := os.getenv("LOG_MASK_SENSITIVE"):
            config.mask_sensitive = _truthy(mask_sensitive)

        if log_file := os.getenv("LOG_FILE"):
            config.log_file = Path(log_file)

        for name, attr in (("LOG_MAX_SIZE", "max_file_size"), ("LOG_BACKUP_COUNT", "backup_count")):
            if raw := os.getenv(name):
                try:
                    setattr(config, attr, int(raw))
                except ValueError:
                    pass

        return config

    @staticmethod
    def _detect_environment() -> Environment:
        if os.getenv("CI") or os.getenv("GITHUB_ACTIONS"):
            return Environment.CI

        env_name = os.getenv("ENVIRONMENT", os.getenv("ENV", "")).lower()
        if env_name in ("prod", "production"):
            return Environment.PRODUCTION
        if env_name in ("test", "testing"):
            return Environment.TESTING

        if os.getenv("PYTEST_CURRENT_TEST"):
            return Environment.TESTING

        return Environment.DEVELOPMENT


_ENV_DEFAULTS: dict[Environment, LogConfig] = {
    Environment.PRODUCTION: LogConfig(level="INFO", output=LogOutput.BOTH, json_format=True, use_rich=False),
    Environment.CI: LogConfig(level="INFO", use_rich=False),
    Environment.TESTING: LogConfig(level="DEBUG", use_rich=False),
    Environment.DEVELOPMENT: LogConfig(level="WARNING", use_rich=True),
}


# Global configuration instance
_config: LogConfig | None = None


def get_config() -> LogConfig:
    """Get the current logging configuration, reading the environment on first use."""
    global _config
    if _config is None:
        _config = LogConfig.from_env()
    return _config


def set_config(config: LogConfig) -> None:
    global _config
    _config = config


def reset_config() -> None:
    """Reset to default configuration from environment."""
    global _config
    _config = None
