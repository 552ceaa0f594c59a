"""
Canonical data models for stream window allocation.

This module defines immutable data structures that represent calendar
windows, the windows already stored for a symbol, and the transient results
the allocator hands back to its callers.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from streamwin_app.errors import InvalidWindowError
from streamwin_app.utils.time import format_instant, to_utc, whole_days


class MarketType(str, Enum):
    """Classification of the traded instrument."""
    STOCK = "STOCK"
    CRYPTOCURRENCY = "CRYPTOCURRENCY"
    COMMODITY = "COMMODITY"
    INDEX = "INDEX"


@dataclass(frozen=True)
class Window:
    """Closed calendar interval occupied by a stream, bounds in UTC."""
    start: datetime
    end: datetime

    def __post_init__(self):
        """Normalize bounds to UTC and enforce start <= end."""
        start = to_utc(self.start)
        end = to_utc(self.end)
        if start > end:
            raise InvalidWindowError(
                f"Window start {format_instant(start)} is after end {format_instant(end)}",
                start=start,
                end=end
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    def overlaps(self, other: "Window") -> bool:
        """Closed-interval overlap; touching endpoints overlap."""
        return self.start <= other.end and other.start <= self.end

    def describe(self) -> str:
        """ISO range used in conflict reasons and logs."""
        return f"{format_instant(self.start)} -> {format_instant(self.end)}"


@dataclass(frozen=True)
class ExistingWindow:
    """Window already committed for a symbol by the repository."""
    id: str
    symbol: str
    market_type: MarketType
    window: Window
    total_points: int

    @property
    def start(self) -> datetime:
        return self.window.start

    @property
    def end(self) -> datetime:
        return self.window.end


@dataclass(frozen=True)
class AvailableWindow:
    """Free window proposed for a new stream."""
    start: datetime
    end: datetime
    max_days: int
    suggested_days: int

    @property
    def window(self) -> Window:
        """Plain window view, suitable for validation or truncation."""
        return Window(self.start, self.end)

    @classmethod
    def spanning(cls, start: datetime, end: datetime, max_days: int) -> "AvailableWindow":
        """Create a result whose day count is derived from its bounds."""
        return cls(
            start=start,
            end=end,
            max_days=max_days,
            suggested_days=whole_days(start, end) + 1
        )


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a proposed window against stored windows."""
    valid: bool
    reason: Optional[str] = None
    conflict_id: Optional[str] = None

    @classmethod
    def ok(cls):
        """Create result for a free window."""
        return cls(valid=True)

    @classmethod
    def conflict(cls, existing: ExistingWindow):
        """Create result naming the first conflicting stored window."""
        return cls(
            valid=False,
            reason=(
                f'Proposed window overlaps existing stream "{existing.id}" '
                f"({existing.window.describe()})"
            ),
            conflict_id=existing.id
        )


@dataclass(frozen=True)
class IngestionResult:
    """Result of running a fetched payload through the ingestion workflow."""

    symbol: str
    success: bool
    message: str

    # Persisted stream metadata (None when nothing was written)
    stream_id: Optional[str] = None
    total_points: int = 0
    window: Optional[Window] = None

    # Processing metadata
    truncated: bool = False
    needs_date_range: bool = False

    @classmethod
    def stored(cls, symbol: str, stream_id: str, total_points: int, window: Window,
               truncated: bool = False):
        """Create successful result for a persisted stream."""
        if truncated:
            message = f"Stream created for {symbol} with truncated data ({total_points} points)"
        else:
            message = f"Stream created for {symbol} ({total_points} points)"
        return cls(
            symbol=symbol,
            success=True,
            message=message,
            stream_id=stream_id,
            total_points=total_points,
            window=window,
            truncated=truncated
        )

    @classmethod
    def rejected(cls, symbol: str, message: str, needs_date_range: bool = False):
        """Create failed result; nothing was written."""
        return cls(
            symbol=symbol,
            success=False,
            message=message,
            needs_date_range=needs_date_range
        )
