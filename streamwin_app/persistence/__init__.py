"""Window repositories: storage of raw streams and their windows."""

from .base import StoredStream, WindowRepository
from .memory_store import InMemoryWindowRepository
from .window_store import WindowStore

__all__ = [
    "StoredStream",
    "WindowRepository",
    "InMemoryWindowRepository",
    "WindowStore",
]
