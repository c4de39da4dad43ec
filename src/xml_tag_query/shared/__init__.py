"""Shared utilities for xml_tag_query.

Configuration objects, diagnostic/result primitives and the correlation-aware
logger used by every layer.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)
from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    QueryConfig,
    TreeConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "QueryConfig",
    "TreeConfig",
    "CorrelationLogger",
    "get_logger",
]
