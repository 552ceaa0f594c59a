"""
System failure error classifications for unrecoverable errors.

These exceptions represent repository-level failures and broken storage
invariants. The allocator never catches them; they reach the caller as-is.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PersistenceError(SystemFailureError):
    """Database or file system persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class WindowConflictError(SystemFailureError):
    """Conditional insert rejected because the window is already taken."""

    def __init__(self, message: str, symbol: Optional[str] = None,
                 conflict_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.symbol = symbol
        self.conflict_id = conflict_id


class OverlappingWindowsError(SystemFailureError):
    """Stored windows for a symbol overlap each other."""

    def __init__(self, message: str, first_id: Optional[str] = None,
                 second_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.first_id = first_id
        self.second_id = second_id
