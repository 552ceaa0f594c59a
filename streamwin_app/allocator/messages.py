"""User-facing availability messages."""

from typing import Sequence

from streamwin_app.config.defaults import DisplayParams
from streamwin_app.data.models import AvailableWindow, ExistingWindow
from streamwin_app.utils.time import format_day

DEFAULT_DATE_FORMAT = DisplayParams.date_format


def format_unavailable_message(
    symbol: str,
    existing: Sequence[ExistingWindow],
    max_days: int,
    date_format: str = DEFAULT_DATE_FORMAT
) -> str:
    """
    Explain that no free window remains for a symbol.

    Args:
        symbol: Symbol the search ran for
        existing: Stored windows, listed in the order given
        max_days: Capacity that applied to the search
        date_format: strftime pattern for window bounds

    Returns:
        Multi-line message enumerating every stored window
    """
    lines = [
        f"❌ Unable to create a new stream for {symbol}.",
        "",
        f"{len(existing)} existing stream(s) already cover every available window.",
        f"Maximum length: {max_days} day(s) per stream.",
        "",
        "Existing windows:",
    ]
    for index, stored in enumerate(existing, start=1):
        lines.append(
            f"{index}. {format_day(stored.start, date_format)} → "
            f"{format_day(stored.end, date_format)} ({stored.total_points} points)"
        )
    return "\n".join(lines)


def format_available_message(
    symbol: str,
    available: AvailableWindow,
    date_format: str = DEFAULT_DATE_FORMAT
) -> str:
    """Describe the window a new stream for symbol will occupy."""
    return (
        f"✅ An available window was found for {symbol}:\n\n"
        f"📅 From {format_day(available.start, date_format)} to {format_day(available.end, date_format)}\n"
        f"📊 Length: {available.suggested_days} day(s)\n\n"
        f"The new stream will be created with these dates."
    )
