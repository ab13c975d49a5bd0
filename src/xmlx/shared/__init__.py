"""Shared utilities for XML node tree construction.

This module provides the configuration objects, error types, diagnostics and
logging helpers used across the tokenization, tree and API layers.
"""

from .errors import (
    EmptyDocumentError,
    MalformedInputError,
    TruncatedInputError,
    XMLNodeError,
)
from .result import (
    BuildMetrics,
    DiagnosticEntry,
    DiagnosticSeverity,
)
from .config import (
    BuilderConfig,
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    QueryConfig,
    SourceConfig,
    XMLNodeConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "BuildMetrics",
    "BuilderConfig",
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "EmptyDocumentError",
    "GlobalConfig",
    "MalformedInputError",
    "QueryConfig",
    "SourceConfig",
    "TruncatedInputError",
    "XMLNodeConfig",
    "XMLNodeError",
    "configure_logging",
    "get_logger",
]
