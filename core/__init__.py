"""
Core Module Package.

Infrastructure shared by the indexer packages.

Components:
- clock: Injectable UTC time source
- config: Environment-driven configuration
- exceptions: Base exception hierarchy
- logging_setup: Root logger configuration
"""

from core.clock import ClockFactory, ClockProtocol, MockClock, SystemClock
from core.config import ErrorPolicy, IndexerConfig, get_config
from core.exceptions import IndexerException


__all__ = [
    "ClockFactory",
    "ClockProtocol",
    "MockClock",
    "SystemClock",
    "ErrorPolicy",
    "IndexerConfig",
    "get_config",
    "IndexerException",
]
