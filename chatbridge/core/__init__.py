"""
Core module - Configuration, logging, and cross-cutting utilities.
"""
from chatbridge.core.config import Settings, get_settings
from chatbridge.core.logging_config import setup_logging, get_logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "LoggerMixin",
]
