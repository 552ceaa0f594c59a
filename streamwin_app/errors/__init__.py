"""
Error classification system for stream window allocation.

This module provides the structured exception hierarchy for malformed caller
input, payload data quality problems and repository-level failures.
"""

from .data_quality import (
    DataQualityError,
    MissingDataError,
    MalformedDataError,
)
from .input_errors import (
    InputError,
    InvalidSymbolError,
    InvalidWindowError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    WindowConflictError,
    OverlappingWindowsError,
)

__all__ = [
    # Input Errors
    "InputError",
    "InvalidSymbolError",
    "InvalidWindowError",
    # Data Quality Errors
    "DataQualityError",
    "MissingDataError",
    "MalformedDataError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
    "WindowConflictError",
    "OverlappingWindowsError",
]
