"""Utility modules."""

from .exceptions import (
    ReconciliationError,
    LedgerLoadError,
    ConfigurationError,
    ReportGenerationError,
)
from .logging_config import setup_logging

__all__ = [
    "ReconciliationError",
    "LedgerLoadError",
    "ConfigurationError",
    "ReportGenerationError",
    "setup_logging",
]
