"""
Stream window allocator.

Capacity rules, interval arithmetic, free-window search and availability
messages, tied together by the repository-backed WindowAllocator.
"""

from .capacity import CapacityOverride, CapacityRule
from .intervals import ensure_disjoint, overlaps
from .search import SearchOutcome, search_available_window
from .service import WindowAllocator

__all__ = [
    "CapacityOverride",
    "CapacityRule",
    "ensure_disjoint",
    "overlaps",
    "SearchOutcome",
    "search_available_window",
    "WindowAllocator",
]
