"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

from streamwin_app.data.models import ExistingWindow, MarketType, Window
from streamwin_app.persistence.memory_store import InMemoryWindowRepository


def _day_start(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def _day_end(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, 23, 59, 59, 999000, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Reference instant used across allocator tests: 2024-01-20 15:30 UTC."""
    return datetime(2024, 1, 20, 15, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def day_window() -> Callable[..., Window]:
    """Build a window covering whole days of January 2024 (or any month)."""
    def _make(first_day: int, last_day: int, month: int = 1, year: int = 2024) -> Window:
        return Window(_day_start(year, month, first_day), _day_end(year, month, last_day))
    return _make


@pytest.fixture
def make_existing() -> Callable[..., ExistingWindow]:
    """Build stored windows for a symbol."""
    def _make(
        stream_id: str,
        window: Window,
        symbol: str = "AAPL",
        market_type: MarketType = MarketType.STOCK,
        total_points: int = 48
    ) -> ExistingWindow:
        return ExistingWindow(
            id=stream_id,
            symbol=symbol,
            market_type=market_type,
            window=window,
            total_points=total_points
        )
    return _make


@pytest.fixture
def make_payload() -> Callable[..., Dict[str, Any]]:
    """Build an hourly OHLCV payload keyed like the upstream market data API."""
    def _make(start: datetime, end: datetime, step: timedelta = timedelta(hours=1)) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        ts = start
        price = 100.0
        while ts <= end:
            payload[ts.strftime("%Y-%m-%d %H:%M:%S")] = {
                "1. open": f"{price:.2f}",
                "2. high": f"{price + 1:.2f}",
                "3. low": f"{price - 1:.2f}",
                "4. close": f"{price + 0.5:.2f}",
                "5. volume": "1000",
            }
            ts += step
            price += 0.25
        return payload
    return _make


@pytest.fixture
def memory_repository() -> InMemoryWindowRepository:
    """Empty in-memory window repository."""
    return InMemoryWindowRepository()
