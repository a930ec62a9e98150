"""Core infrastructure: configuration, logging and errors."""

from .config import Settings, TranspileOptions, get_settings, settings
from .errors import LexError, ZenoscriptError, ZenoscriptSyntaxError
from .logging import get_stage_logger, setup_logging

__all__ = [
    "Settings",
    "TranspileOptions",
    "get_settings",
    "settings",
    "ZenoscriptError",
    "LexError",
    "ZenoscriptSyntaxError",
    "setup_logging",
    "get_stage_logger",
]
