"""
Error handling tests for the stream window allocator.

Tests cover the error hierarchy, input rejection before repository access,
and propagation of repository failures.
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import Mock

from streamwin_app.allocator.service import WindowAllocator
from streamwin_app.data.models import MarketType, Window
from streamwin_app.errors import (
    DataQualityError,
    InputError,
    InvalidSymbolError,
    InvalidWindowError,
    MalformedDataError,
    MissingDataError,
    OverlappingWindowsError,
    PersistenceError,
    SystemFailureError,
    WindowConflictError,
)
from streamwin_app.persistence.base import WindowRepository


class TestErrorClassification:
    """Test error classification system."""

    def test_input_error_hierarchy(self):
        """Test that input errors are recoverable ValueErrors."""
        base_error = InputError("bad input")
        assert isinstance(base_error, ValueError)
        assert base_error.recoverable is True
        assert base_error.context == {}

        symbol_error = InvalidSymbolError("empty", symbol="")
        assert isinstance(symbol_error, InputError)
        assert symbol_error.symbol == ""

        start = datetime(2024, 1, 2, tzinfo=timezone.utc)
        window_error = InvalidWindowError("reversed", start=start, end=None)
        assert window_error.start == start
        assert window_error.end is None

    def test_data_quality_error_hierarchy(self):
        """Test that data quality errors have proper hierarchy."""
        base_error = DataQualityError("base error", context={"symbol": "AAPL"})
        assert base_error.recoverable is True
        assert base_error.context == {"symbol": "AAPL"}

        missing_error = MissingDataError("missing data", data_type="stream_payload")
        assert isinstance(missing_error, DataQualityError)
        assert missing_error.data_type == "stream_payload"

        malformed_error = MalformedDataError("bad key", raw_data="x", expected_format="%Y")
        assert malformed_error.raw_data == "x"
        assert malformed_error.expected_format == "%Y"

    def test_system_failure_error_hierarchy(self):
        """Test that system failure errors have proper hierarchy."""
        persistence_error = PersistenceError("db down", operation="insert_stream", target="AAPL")
        assert isinstance(persistence_error, SystemFailureError)
        assert persistence_error.recoverable is False
        assert persistence_error.operation == "insert_stream"

        conflict_error = WindowConflictError("taken", symbol="AAPL", conflict_id="s-1")
        assert conflict_error.recoverable is False
        assert conflict_error.conflict_id == "s-1"

        overlap_error = OverlappingWindowsError("corrupt", first_id="a", second_id="b")
        assert (overlap_error.first_id, overlap_error.second_id) == ("a", "b")

    def test_error_families_are_distinct(self):
        """Test that families do not catch each other."""
        assert not issubclass(PersistenceError, DataQualityError)
        assert not issubclass(MissingDataError, InputError)
        assert not issubclass(InvalidSymbolError, SystemFailureError)


class TestAllocatorErrorHandling:
    """Test where the allocator raises and where it lets errors pass."""

    def setup_method(self):
        self.repository = Mock(spec=WindowRepository)
        self.repository.list_windows.return_value = []
        self.allocator = WindowAllocator(self.repository)

    @pytest.mark.parametrize("symbol", ["", "   ", None])
    def test_invalid_symbol_before_repository(self, symbol):
        """Test that bad symbols never reach the repository."""
        with pytest.raises(InvalidSymbolError):
            self.allocator.find_available_window(symbol, MarketType.STOCK)
        with pytest.raises(InvalidSymbolError):
            self.allocator.describe_availability(symbol, MarketType.STOCK)

        self.repository.list_windows.assert_not_called()

    def test_unknown_market_type(self):
        """Test that unknown market types are rejected."""
        with pytest.raises(ValueError):
            self.allocator.max_days("AAPL", "BONDS")

    def test_persistence_error_is_not_wrapped(self):
        """Test that the original repository error reaches the caller."""
        self.repository.list_windows.side_effect = PersistenceError("locked", operation="list_windows")

        with pytest.raises(PersistenceError, match="locked"):
            self.allocator.describe_availability("AAPL", MarketType.STOCK)

    def test_overlapping_storage_detected(self, make_existing):
        """Test that overlapping stored windows are reported, not searched around."""
        self.repository.list_windows.return_value = [
            make_existing("a", Window(datetime(2024, 1, 1), datetime(2024, 1, 5))),
            make_existing("b", Window(datetime(2024, 1, 3), datetime(2024, 1, 8))),
        ]

        with pytest.raises(OverlappingWindowsError) as exc_info:
            self.allocator.find_available_window("AAPL", MarketType.STOCK)

        assert {exc_info.value.first_id, exc_info.value.second_id} == {"a", "b"}
