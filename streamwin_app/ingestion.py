"""
Stream ingestion coordinator.

Runs a freshly fetched payload through the allocator before it is stored:
the payload's natural window is validated against the symbol's stored
windows, relocated and truncated on conflict, and finally persisted through
the repository's conditional insert.
"""

from datetime import datetime
from typing import Any, Optional

import structlog

from .allocator.service import WindowAllocator
from .config.loader import ConfigLoader
from .data.models import IngestionResult, MarketType
from .data.parsers import (
    count_points,
    detect_market_type,
    extract_window,
    normalize_symbol,
    truncate_payload,
)
from .errors import DataQualityError, MalformedDataError, WindowConflictError
from .persistence.base import WindowRepository
from .utils.time import format_day

logger = structlog.get_logger(__name__)


class StreamIngestionService:
    """
    Coordinates allocation and persistence of new streams.

    Manages the ingestion pipeline:
    Payload → Window extraction → Validation → Relocation/Truncation → Storage
    """

    def __init__(
        self,
        repository: WindowRepository,
        allocator: Optional[WindowAllocator] = None,
        config: Optional[dict[str, Any]] = None
    ) -> None:
        """
        Initialize the ingestion service.

        Args:
            repository: Window repository streams are read from and written to
            allocator: Allocator over the same repository, built from config by default
            config: Merged configuration, loaded with ConfigLoader by default
        """
        self.logger = logger
        self.repository = repository

        if allocator is None:
            if config is None:
                config = ConfigLoader.create().merge_config()
            allocator = WindowAllocator.from_config(repository, config)
        self.allocator = allocator

    def ingest(
        self,
        symbol: str,
        payload: dict[str, Any],
        market_type: Optional[MarketType] = None,
        now: Optional[datetime] = None
    ) -> IngestionResult:
        """
        Store a fetched payload as a new stream for a symbol.

        Args:
            symbol: Symbol the payload was fetched for
            payload: Raw time-keyed payload
            market_type: Market type, detected from the symbol when omitted
            now: Reference instant for window search, wall clock by default

        Returns:
            IngestionResult; unsuccessful results mean nothing was written

        Raises:
            InvalidSymbolError: If symbol is empty
            PersistenceError: If the repository fails
        """
        symbol = normalize_symbol(symbol)
        market_type = MarketType(market_type) if market_type is not None else detect_market_type(symbol)

        try:
            if not isinstance(payload, dict):
                raise MalformedDataError(
                    f"Stream payload must be dict, got {type(payload)}",
                    raw_data=str(payload)[:100]
                )

            natural_window = extract_window(payload)
            if natural_window is None:
                return IngestionResult.rejected(
                    symbol, f"Unable to extract dates from the data fetched for {symbol}"
                )

            self.logger.info(
                "Ingesting stream",
                symbol=symbol,
                market_type=market_type.value,
                window=natural_window.describe(),
                points=count_points(payload)
            )

            truncated = False
            if self.repository.count_streams(symbol) > 0:
                validation = self.allocator.validate_window(symbol, natural_window)

                if not validation.valid:
                    available = self.allocator.find_available_window(symbol, market_type, now=now)

                    if available is None:
                        message = self.allocator.describe_availability(symbol, market_type, now=now)
                        return IngestionResult.rejected(symbol, message, needs_date_range=True)

                    kept = truncate_payload(payload, available.window)
                    self.logger.info(
                        "Payload truncated to available window",
                        symbol=symbol,
                        original_window=natural_window.describe(),
                        target_window=available.window.describe(),
                        original_points=count_points(payload),
                        kept_points=len(kept)
                    )

                    if not kept:
                        date_format = self.allocator.date_format
                        message = (
                            f"⚠️ The fetched data has no samples in the available window.\n\n"
                            f"📅 Available window: {format_day(available.start, date_format)} "
                            f"to {format_day(available.end, date_format)}\n"
                            f"📊 Fetched data: {format_day(natural_window.start, date_format)} "
                            f"to {format_day(natural_window.end, date_format)}\n\n"
                            f"Try again once new data is available in that window."
                        )
                        return IngestionResult.rejected(symbol, message, needs_date_range=True)

                    payload = kept
                    truncated = True

            stream_id = self.repository.insert_stream(symbol, market_type, payload)

        except WindowConflictError as e:
            self.logger.warning(
                "Window taken by a concurrent ingestion",
                symbol=symbol,
                conflict_id=e.conflict_id
            )
            return IngestionResult.rejected(symbol, str(e), needs_date_range=True)

        except DataQualityError as e:
            self.logger.warning(
                "Data quality issue during ingestion",
                symbol=symbol,
                error=str(e),
                error_type=type(e).__name__,
                context=getattr(e, 'context', {})
            )
            return IngestionResult.rejected(symbol, f"Invalid data for {symbol}: {e}")

        window = extract_window(payload)
        result = IngestionResult.stored(
            symbol,
            stream_id=stream_id,
            total_points=count_points(payload),
            window=window,
            truncated=truncated
        )
        self.logger.info(
            "Stream ingested",
            symbol=symbol,
            stream_id=stream_id,
            total_points=result.total_points,
            truncated=truncated
        )
        return result
