"""Interval overlap arithmetic over closed calendar windows."""

from typing import Optional, Sequence

from streamwin_app.data.models import ExistingWindow, Window
from streamwin_app.errors import OverlappingWindowsError


def overlaps(first: Window, second: Window) -> bool:
    """Closed-interval overlap test; symmetric, touching endpoints count."""
    return first.start <= second.end and second.start <= first.end


def sort_most_recent_first(windows: Sequence[ExistingWindow]) -> list[ExistingWindow]:
    """Order stored windows by end, newest first."""
    return sorted(windows, key=lambda existing: existing.end, reverse=True)


def find_overlapping_pair(
    windows: Sequence[ExistingWindow]
) -> Optional[tuple[ExistingWindow, ExistingWindow]]:
    """
    Find two stored windows that overlap.

    Once sorted by end, any overlap implies an overlap between neighbours,
    so a single pass over adjacent pairs is enough.
    """
    ordered = sort_most_recent_first(windows)
    for current, following in zip(ordered, ordered[1:]):
        if overlaps(current.window, following.window):
            return current, following
    return None


def ensure_disjoint(windows: Sequence[ExistingWindow]) -> None:
    """
    Check that stored windows are pairwise non-overlapping.

    Raises:
        OverlappingWindowsError: If two stored windows overlap
    """
    pair = find_overlapping_pair(windows)
    if pair is None:
        return

    first, second = pair
    raise OverlappingWindowsError(
        f'Stored streams "{first.id}" ({first.window.describe()}) and '
        f'"{second.id}" ({second.window.describe()}) overlap',
        first_id=first.id,
        second_id=second.id,
        context={"symbol": first.symbol}
    )


def first_conflict(proposed: Window, windows: Sequence[ExistingWindow]) -> Optional[ExistingWindow]:
    """Return the first stored window overlapping proposed, if any."""
    for existing in windows:
        if overlaps(proposed, existing.window):
            return existing
    return None
