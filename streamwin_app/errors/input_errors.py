"""
Input error classifications for malformed allocator calls.

These exceptions are raised synchronously, before any computation or
repository access, when a caller hands the allocator a value it must not.
"""

from datetime import datetime
from typing import Optional, Dict, Any


class InputError(ValueError):
    """Base class for rejected caller input."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class InvalidSymbolError(InputError):
    """Symbol is empty, blank or not a string."""

    def __init__(self, message: str, symbol: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol


class InvalidWindowError(InputError):
    """Window whose start lies after its end, or with unusable bounds."""

    def __init__(self, message: str, start: Optional[datetime] = None,
                 end: Optional[datetime] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.start = start
        self.end = end
