"""Common utilities for the Photo Taker app."""

from phototaker.common.logging import get_logger, setup_logging
from phototaker.common.health import HealthChecker, HealthStatus

__all__ = [
    "get_logger",
    "setup_logging",
    "HealthChecker",
    "HealthStatus",
]
