"""
Core Module - Configuration.

============================================================
CONFIGURATION SOURCES
============================================================

Configuration is loaded from:
- Default values
- Environment variables
- A .env file in the working directory (via python-dotenv)

Environment variables:
- MOVE_INDEXER_DATABASE_URL (fallback: DATABASE_URL)
- MOVE_INDEXER_DB_POOL_SIZE
- MOVE_INDEXER_DB_ECHO
- MOVE_INDEXER_LOG_LEVEL
- MOVE_INDEXER_LOG_FORMAT
- MOVE_INDEXER_ERROR_POLICY

============================================================
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from core.exceptions import InvalidConfigError


logger = logging.getLogger(__name__)


DEFAULT_DATABASE_URL = "sqlite:///move_resources.db"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


class ErrorPolicy(Enum):
    """What a write-set processor does with a change it cannot build."""
    RAISE = "raise"
    SKIP = "skip"


# =============================================================
# HELPERS
# =============================================================


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidConfigError(key, raw, "expected an integer") from e


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise InvalidConfigError(key, raw, "expected a boolean")


# =============================================================
# SECTIONS
# =============================================================


@dataclass
class DatabaseConfig:
    """Connection settings for the record store."""
    url: str = DEFAULT_DATABASE_URL
    pool_size: int = 5
    echo: bool = False

    def __post_init__(self) -> None:
        if self.pool_size < 1:
            raise InvalidConfigError("pool_size", self.pool_size, "must be >= 1")

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        url = os.getenv("MOVE_INDEXER_DATABASE_URL") or os.getenv("DATABASE_URL")
        if not url:
            url = DEFAULT_DATABASE_URL
            logger.warning(f"Database URL not set, using default: {url}")
        return cls(
            url=url,
            pool_size=_env_int("MOVE_INDEXER_DB_POOL_SIZE", 5),
            echo=_env_bool("MOVE_INDEXER_DB_ECHO", False),
        )

    def safe_url(self) -> str:
        """URL with credentials stripped, for logging."""
        return self.url.split("@")[-1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.safe_url(),
            "pool_size": self.pool_size,
            "echo": self.echo,
        }


@dataclass
class LoggingConfig:
    """Root logger settings."""
    level: str = "INFO"
    format: str = "json"

    def __post_init__(self) -> None:
        self.level = self.level.upper()
        if self.level not in _LOG_LEVELS:
            raise InvalidConfigError("level", self.level, f"must be one of {_LOG_LEVELS}")
        if self.format not in ("json", "text"):
            raise InvalidConfigError("format", self.format, "must be 'json' or 'text'")

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("MOVE_INDEXER_LOG_LEVEL", "INFO"),
            format=os.getenv("MOVE_INDEXER_LOG_FORMAT", "json"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level, "format": self.format}


@dataclass
class ProcessorConfig:
    """Write-set processing behaviour."""
    error_policy: ErrorPolicy = ErrorPolicy.RAISE

    @classmethod
    def from_env(cls) -> "ProcessorConfig":
        raw = os.getenv("MOVE_INDEXER_ERROR_POLICY", ErrorPolicy.RAISE.value)
        try:
            policy = ErrorPolicy(raw.strip().lower())
        except ValueError as e:
            raise InvalidConfigError(
                "MOVE_INDEXER_ERROR_POLICY", raw, "must be 'raise' or 'skip'"
            ) from e
        return cls(error_policy=policy)

    def to_dict(self) -> Dict[str, Any]:
        return {"error_policy": self.error_policy.value}


# =============================================================
# MAIN CONFIGURATION
# =============================================================


@dataclass
class IndexerConfig:
    """Combines all configuration sections."""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    processor: ProcessorConfig = field(default_factory=ProcessorConfig)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "IndexerConfig":
        """
        Load configuration from the environment.

        Values already present in the process environment win over
        those in the .env file.
        """
        load_dotenv(dotenv_path)
        return cls(
            database=DatabaseConfig.from_env(),
            logging=LoggingConfig.from_env(),
            processor=ProcessorConfig.from_env(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "database": self.database.to_dict(),
            "logging": self.logging.to_dict(),
            "processor": self.processor.to_dict(),
        }


# =============================================================
# GLOBAL CONFIG SINGLETON
# =============================================================


_default_config: Optional[IndexerConfig] = None


def get_config() -> IndexerConfig:
    """Get the global indexer configuration."""
    global _default_config
    if _default_config is None:
        _default_config = IndexerConfig.from_env()
    return _default_config


def set_config(config: Optional[IndexerConfig]) -> None:
    """Set (or clear, with None) the global indexer configuration."""
    global _default_config
    _default_config = config
