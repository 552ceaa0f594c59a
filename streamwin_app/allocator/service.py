"""
Repository-backed stream window allocator.

Exposes the three allocator operations over the windows a WindowRepository
holds for a symbol: validating a proposed window, finding the best free
window, and describing availability to an end user. The allocator keeps no
state between calls; each call reads the repository once and recomputes.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional, Sequence

import structlog

from streamwin_app.config.defaults import DisplayParams, SearchParams
from streamwin_app.data.models import (
    AvailableWindow,
    ExistingWindow,
    MarketType,
    ValidationResult,
    Window,
)
from streamwin_app.data.parsers import normalize_symbol
from streamwin_app.errors import InvalidWindowError
from streamwin_app.logging.config import (
    get_allocator_logger,
    log_allocation_decision,
    log_validation_decision,
)
from streamwin_app.utils.time import reference_today

from .capacity import CapacityRule
from .intervals import first_conflict
from .messages import format_available_message, format_unavailable_message
from .search import SearchOutcome, search_available_window

if TYPE_CHECKING:
    from streamwin_app.persistence.base import WindowRepository

logger = structlog.get_logger(__name__)
allocator_logger = get_allocator_logger(__name__)


class WindowAllocator:
    """
    Decides which calendar window a new stream for a symbol may occupy.

    The repository is only read. Closing the race between finding a window
    and storing a stream in it is the repository's job, through its
    conditional insert.
    """

    def __init__(
        self,
        repository: "WindowRepository",
        capacity_rule: Optional[CapacityRule] = None,
        lookback_days: int = SearchParams.lookback_days,
        date_format: str = DisplayParams.date_format
    ) -> None:
        """
        Initialize the allocator.

        Args:
            repository: Source of the windows stored per symbol
            capacity_rule: Capacity per symbol, built-in table by default
            lookback_days: Oldest day, counted back from today, a window may start on
            date_format: strftime pattern used in availability messages
        """
        self.repository = repository
        self.capacity_rule = capacity_rule or CapacityRule()
        self.lookback_days = lookback_days
        self.date_format = date_format
        self.logger = logger
        self.allocator_logger = allocator_logger

    @classmethod
    def from_config(cls, repository: "WindowRepository", config: dict[str, Any]) -> "WindowAllocator":
        """Create an allocator from a merged configuration dictionary."""
        return cls(
            repository=repository,
            capacity_rule=CapacityRule.from_config(config),
            lookback_days=config.get("search", {}).get("lookback_days", SearchParams.lookback_days),
            date_format=config.get("display", {}).get("date_format", DisplayParams.date_format),
        )

    def max_days(self, symbol: str, market_type: MarketType) -> int:
        """Capacity in days for a new stream of this symbol."""
        return self.capacity_rule.max_days(normalize_symbol(symbol), MarketType(market_type))

    def validate_window(self, symbol: str, proposed: Window) -> ValidationResult:
        """
        Check a proposed window against the windows stored for a symbol.

        Args:
            symbol: Symbol the window is proposed for
            proposed: Candidate window, start <= end

        Returns:
            ValidationResult naming the first conflicting stream, if any

        Raises:
            InvalidSymbolError: If symbol is empty
            InvalidWindowError: If proposed is not a Window
        """
        symbol = normalize_symbol(symbol)
        if not isinstance(proposed, Window):
            raise InvalidWindowError(f"Proposed window must be a Window, got {type(proposed).__name__}")

        existing = self.repository.list_windows(symbol)
        conflict = first_conflict(proposed, existing)

        if conflict is None:
            result = ValidationResult.ok()
        else:
            result = ValidationResult.conflict(conflict)

        log_validation_decision(
            self.allocator_logger,
            symbol=symbol,
            valid=result.valid,
            reason=result.reason,
            context={"proposed": proposed.describe(), "existing_count": len(existing)}
        )
        return result

    def find_available_window(
        self,
        symbol: str,
        market_type: MarketType,
        now: Optional[datetime] = None
    ) -> Optional[AvailableWindow]:
        """
        Find the best free window for a new stream of a symbol.

        Args:
            symbol: Symbol to allocate for
            market_type: Market type driving the capacity
            now: Reference instant, wall clock by default

        Returns:
            AvailableWindow, or None when no capacity remains

        Raises:
            InvalidSymbolError: If symbol is empty
            OverlappingWindowsError: If stored windows overlap each other
        """
        symbol = normalize_symbol(symbol)
        existing = self.repository.list_windows(symbol)
        outcome, _ = self._search(symbol, MarketType(market_type), existing, now)
        return outcome.window

    def describe_availability(
        self,
        symbol: str,
        market_type: MarketType,
        now: Optional[datetime] = None
    ) -> str:
        """
        Describe to an end user where a new stream for a symbol can go.

        Returns:
            Suggested dates and length when a window is free, otherwise the
            list of stored windows and the capacity limit
        """
        symbol = normalize_symbol(symbol)
        existing = self.repository.list_windows(symbol)
        outcome, max_days = self._search(symbol, MarketType(market_type), existing, now)

        if outcome.window is None:
            return format_unavailable_message(symbol, existing, max_days, self.date_format)

        return format_available_message(symbol, outcome.window, self.date_format)

    def _search(
        self,
        symbol: str,
        market_type: MarketType,
        existing: Sequence[ExistingWindow],
        now: Optional[datetime]
    ) -> tuple[SearchOutcome, int]:
        max_days = self.capacity_rule.max_days(symbol, market_type)
        today = reference_today(now)

        self.logger.debug(
            "Searching available window",
            symbol=symbol,
            market_type=market_type.value,
            existing_count=len(existing),
            max_days=max_days
        )

        outcome = search_available_window(existing, max_days, today, self.lookback_days)

        context: dict[str, Any] = {"existing_count": len(existing)}
        if outcome.window is not None:
            context.update(
                start=outcome.window.start.isoformat(),
                end=outcome.window.end.isoformat(),
                suggested_days=outcome.window.suggested_days
            )

        log_allocation_decision(
            self.allocator_logger,
            symbol=symbol,
            strategy=outcome.strategy.value,
            found=outcome.found,
            max_days=max_days,
            context=context
        )
        return outcome, max_days
