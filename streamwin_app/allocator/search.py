"""
Free-window search over the windows already stored for a symbol.

The search is a pure function of the stored windows, the capacity and the
reference day. Candidates are tried in a fixed order and the first one that
fits wins:

1. no stored window: the most recent ``max_days`` days, ending today
2. after the newest window, anchored right after it
3. between two stored windows, newest gap first, anchored at the gap's
   recent side
4. before the oldest window, within the lookback horizon

All bounds are day-aligned: starts at 00:00:00.000 and ends at
23:59:59.999 UTC.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence

from streamwin_app.config.defaults import SearchParams
from streamwin_app.data.models import AvailableWindow, ExistingWindow
from streamwin_app.utils.time import add_days, days_between, end_of_day, start_of_day

from .intervals import ensure_disjoint, sort_most_recent_first


class SearchStrategy(str, Enum):
    """Search branch that produced an outcome."""
    EMPTY = "empty"
    AFTER_LATEST = "after_latest"
    BETWEEN = "between"
    BEFORE_OLDEST = "before_oldest"
    NONE = "none"


@dataclass(frozen=True)
class SearchOutcome:
    """Window found by the search, with the branch that found it."""
    strategy: SearchStrategy
    window: Optional[AvailableWindow] = None

    @property
    def found(self) -> bool:
        return self.window is not None


def _after_latest(latest: ExistingWindow, today: datetime, max_days: int) -> Optional[AvailableWindow]:
    if days_between(latest.end, today) < 1:
        return None

    start = add_days(start_of_day(latest.end), 1)
    if start > today:
        return None

    suggested_days = min(days_between(start, today), max_days)
    end = end_of_day(add_days(start, suggested_days - 1))
    return AvailableWindow.spanning(start, end, max_days)


def _between(ordered: Sequence[ExistingWindow], max_days: int) -> Optional[AvailableWindow]:
    for current, following in zip(ordered, ordered[1:]):
        gap_start = add_days(start_of_day(following.end), 1)
        gap_end = add_days(end_of_day(current.start), -1)

        # Windows on consecutive days leave no gap
        if gap_start > gap_end:
            continue

        gap_days = days_between(gap_start, gap_end)
        if gap_days < 1:
            continue

        suggested_days = min(gap_days, max_days)
        start = add_days(start_of_day(gap_end), -(suggested_days - 1))
        return AvailableWindow.spanning(start, gap_end, max_days)

    return None


def _before_oldest(
    oldest: ExistingWindow,
    today: datetime,
    max_days: int,
    lookback_days: int
) -> Optional[AvailableWindow]:
    before_oldest = add_days(end_of_day(oldest.start), -1)
    # Horizon is measured from the end of today
    min_historical = add_days(today, -lookback_days)

    if before_oldest < min_historical:
        return None

    start = add_days(start_of_day(before_oldest), -(max_days - 1))
    if start < min_historical:
        return None

    return AvailableWindow.spanning(start, before_oldest, max_days)


def search_available_window(
    existing: Sequence[ExistingWindow],
    max_days: int,
    today: datetime,
    lookback_days: int = SearchParams.lookback_days
) -> SearchOutcome:
    """
    Find the best free window for a new stream.

    Args:
        existing: Windows already stored for the symbol
        max_days: Capacity for the symbol
        today: Reference instant; the search runs up to the end of its day
        lookback_days: How far back before today a window may start

    Returns:
        SearchOutcome whose window is None when no capacity remains

    Raises:
        OverlappingWindowsError: If the stored windows overlap each other
    """
    today = end_of_day(today)

    if not existing:
        start = add_days(start_of_day(today), -(max_days - 1))
        return SearchOutcome(
            strategy=SearchStrategy.EMPTY,
            window=AvailableWindow.spanning(start, today, max_days)
        )

    ordered = sort_most_recent_first(existing)
    ensure_disjoint(ordered)

    window = _after_latest(ordered[0], today, max_days)
    if window is not None:
        return SearchOutcome(strategy=SearchStrategy.AFTER_LATEST, window=window)

    window = _between(ordered, max_days)
    if window is not None:
        return SearchOutcome(strategy=SearchStrategy.BETWEEN, window=window)

    window = _before_oldest(ordered[-1], today, max_days, lookback_days)
    if window is not None:
        return SearchOutcome(strategy=SearchStrategy.BEFORE_OLDEST, window=window)

    return SearchOutcome(strategy=SearchStrategy.NONE)
