"""Shared utilities for XMP packet loading.

This module provides the error taxonomy, diagnostic types, configuration
objects and logging helpers used by every loading stage.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    TreeConfig,
    XmlParserConfig,
    XmpeekConfig,
)
from .errors import (
    ErrorKind,
    PacketIOError,
    PacketNotFoundError,
    XmlParseError,
    XmpeekError,
)
from .logging import (
    ContextLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "TreeConfig",
    "XmlParserConfig",
    "XmpeekConfig",
    "ErrorKind",
    "PacketIOError",
    "PacketNotFoundError",
    "XmlParseError",
    "XmpeekError",
    "ContextLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
