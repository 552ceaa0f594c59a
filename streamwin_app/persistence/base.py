"""Base classes for window repositories."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from streamwin_app.data.models import ExistingWindow, MarketType, Window
from streamwin_app.data.parsers import count_points, extract_window
from streamwin_app.errors import MissingDataError, WindowConflictError


@dataclass(frozen=True)
class StoredStream:
    """Raw stream record with the window derived from its payload."""
    id: str
    symbol: str
    market_type: MarketType
    window: Window
    payload: dict[str, Any]
    total_points: int
    created_at: str

    def to_existing_window(self) -> ExistingWindow:
        """Project the record onto the view the allocator reads."""
        return ExistingWindow(
            id=self.id,
            symbol=self.symbol,
            market_type=self.market_type,
            window=self.window,
            total_points=self.total_points
        )


class WindowRepository(ABC):
    """
    Storage of streams keyed by symbol.

    Implementations must make insert_stream a conditional insert: the
    overlap check against the symbol's stored windows and the write happen
    atomically with respect to other writers.
    """

    @abstractmethod
    def list_windows(self, symbol: str) -> list[ExistingWindow]:
        """Return every stored window for a symbol, newest stream first."""
        pass

    @abstractmethod
    def insert_stream(
        self,
        symbol: str,
        market_type: MarketType,
        payload: dict[str, Any]
    ) -> str:
        """
        Persist a stream unless its window overlaps a stored one.

        Args:
            symbol: Stream symbol
            market_type: Market type of the symbol
            payload: Raw time-keyed payload

        Returns:
            Identifier of the new stream

        Raises:
            MissingDataError: If the payload holds no samples
            WindowConflictError: If the window overlaps a stored window
        """
        pass

    @abstractmethod
    def get_stream(self, stream_id: str) -> Optional[StoredStream]:
        """Get a stream by id."""
        pass

    @abstractmethod
    def delete_stream(self, stream_id: str) -> bool:
        """Delete a stream; returns False when it did not exist."""
        pass

    def count_streams(self, symbol: str) -> int:
        """Count the streams stored for a symbol."""
        return len(self.list_windows(symbol))

    @staticmethod
    def describe_payload(payload: dict[str, Any]) -> tuple[Window, int]:
        """
        Derive the window and point count of a payload about to be stored.

        Raises:
            MissingDataError: If the payload holds no samples
        """
        window = extract_window(payload)
        if window is None:
            raise MissingDataError(
                "Stream payload contains no timestamped samples",
                data_type="stream_payload"
            )
        return window, count_points(payload)

    @staticmethod
    def check_conflict(symbol: str, window: Window, existing: Sequence[ExistingWindow]) -> None:
        """
        Reject a window overlapping any stored window of the symbol.

        Raises:
            WindowConflictError: Naming the first conflicting stream
        """
        for stored in existing:
            if window.overlaps(stored.window):
                raise WindowConflictError(
                    f'Window {window.describe()} for {symbol} overlaps stored stream '
                    f'"{stored.id}" ({stored.window.describe()})',
                    symbol=symbol,
                    conflict_id=stored.id
                )
