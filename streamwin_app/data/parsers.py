"""
Raw stream payload parsers.

Stream payloads are JSON objects keyed by "YYYY-MM-DD HH:MM:SS" sample
timestamps. This module reads the window a payload spans, counts its samples,
truncates it to an allocated window and classifies symbols by market type.
"""

import re
from datetime import datetime
from typing import Any, Optional

import structlog

from streamwin_app.errors import InvalidSymbolError, MalformedDataError

from .models import MarketType, Window
from ..utils.time import start_of_day, to_utc

logger = structlog.get_logger(__name__)

TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Euronext Paris listings carry this suffix
FRENCH_SUFFIX = ".PA"

SYMBOL_MARKET_TYPES: dict[str, MarketType] = {
    "BTC": MarketType.CRYPTOCURRENCY,
    "ETH": MarketType.CRYPTOCURRENCY,
    "GLD": MarketType.COMMODITY,
    "USO": MarketType.COMMODITY,
    "SPY": MarketType.INDEX,
}


class InvalidTimestampError(MalformedDataError):
    """Raised when a payload key is not a sample timestamp."""
    pass


def normalize_symbol(symbol: Any) -> str:
    """
    Normalize a ticker for storage and lookup.

    Raises:
        InvalidSymbolError: If symbol is not a non-blank string
    """
    if not isinstance(symbol, str) or not symbol.strip():
        raise InvalidSymbolError("Symbol is required", symbol=symbol)
    return symbol.strip().upper()


def detect_market_type(symbol: str) -> MarketType:
    """Classify a symbol; unknown tickers are treated as stocks."""
    normalized = normalize_symbol(symbol)
    if normalized.endswith(FRENCH_SUFFIX):
        return MarketType.STOCK
    return SYMBOL_MARKET_TYPES.get(normalized, MarketType.STOCK)


def is_timestamp_key(key: Any) -> bool:
    """Check whether a payload key names a sample."""
    return isinstance(key, str) and TIMESTAMP_PATTERN.match(key) is not None


def parse_timestamp(key: str) -> datetime:
    """
    Parse a payload key into a UTC datetime.

    Raises:
        InvalidTimestampError: If the key does not match the sample format
    """
    if not is_timestamp_key(key):
        raise InvalidTimestampError(
            f"Invalid sample timestamp: {key!r}",
            raw_data=str(key),
            expected_format=TIMESTAMP_FORMAT
        )
    try:
        return to_utc(datetime.strptime(key, TIMESTAMP_FORMAT))
    except ValueError as e:
        # Matches the pattern but is not a calendar date, e.g. 2024-02-30
        raise InvalidTimestampError(
            f"Invalid sample timestamp: {key!r}: {e}",
            raw_data=key,
            expected_format=TIMESTAMP_FORMAT
        ) from e


def timestamp_keys(payload: dict[str, Any]) -> list[str]:
    """Return the sample keys of a payload in chronological order."""
    if not payload or not isinstance(payload, dict):
        return []
    # Fixed-width keys sort chronologically as strings
    return sorted(key for key in payload if is_timestamp_key(key))


def count_points(payload: dict[str, Any]) -> int:
    """Count the samples held by a payload."""
    return len(timestamp_keys(payload))


def extract_window(payload: dict[str, Any]) -> Optional[Window]:
    """
    Find the window spanned by a payload's samples.

    Args:
        payload: Raw time-keyed payload

    Returns:
        Window from the earliest to the latest sample, None without samples
    """
    keys = timestamp_keys(payload)
    if not keys:
        return None

    return Window(parse_timestamp(keys[0]), parse_timestamp(keys[-1]))


def truncate_payload(payload: dict[str, Any], window: Window) -> dict[str, Any]:
    """
    Keep only the samples whose calendar day falls inside a window.

    Time of day is ignored on both sides, so every sample of the window's
    first and last days is kept. Non-sample keys are dropped.

    Args:
        payload: Raw time-keyed payload
        window: Target window

    Returns:
        New payload holding the retained samples in their original order
    """
    first_day = start_of_day(window.start)
    last_day = start_of_day(window.end)

    truncated: dict[str, Any] = {}
    for key, value in payload.items():
        if not is_timestamp_key(key):
            continue
        try:
            sample_day = start_of_day(parse_timestamp(key))
        except InvalidTimestampError:
            logger.warning("Skipping unparseable sample", key=key)
            continue
        if first_day <= sample_day <= last_day:
            truncated[key] = value

    logger.debug(
        "Payload truncated",
        original_points=count_points(payload),
        kept_points=len(truncated),
        window=window.describe()
    )

    return truncated
