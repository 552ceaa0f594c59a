"""In-process window repository."""

import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from streamwin_app.data.models import ExistingWindow, MarketType
from streamwin_app.data.parsers import normalize_symbol
from streamwin_app.logging.config import get_repository_logger

from .base import StoredStream, WindowRepository


class InMemoryWindowRepository(WindowRepository):
    """Dictionary-backed repository guarded by a lock."""

    def __init__(self):
        self.logger = get_repository_logger(__name__)
        self._lock = threading.Lock()
        self._streams: dict[str, StoredStream] = {}
        self._sequence = 0
        self._order: dict[str, int] = {}

    def list_windows(self, symbol: str) -> list[ExistingWindow]:
        symbol = normalize_symbol(symbol)
        with self._lock:
            streams = sorted(
                (s for s in self._streams.values() if s.symbol == symbol),
                key=lambda s: self._order[s.id],
                reverse=True
            )
        return [stream.to_existing_window() for stream in streams]

    def insert_stream(
        self,
        symbol: str,
        market_type: MarketType,
        payload: dict[str, Any],
        stream_id: Optional[str] = None
    ) -> str:
        symbol = normalize_symbol(symbol)
        window, total_points = self.describe_payload(payload)

        with self._lock:
            existing = [
                s.to_existing_window() for s in self._streams.values() if s.symbol == symbol
            ]
            self.check_conflict(symbol, window, existing)

            stream_id = stream_id or str(uuid.uuid4())
            self._streams[stream_id] = StoredStream(
                id=stream_id,
                symbol=symbol,
                market_type=MarketType(market_type),
                window=window,
                payload=dict(payload),
                total_points=total_points,
                created_at=datetime.now(timezone.utc).isoformat()
            )
            self._sequence += 1
            self._order[stream_id] = self._sequence

        self.logger.info(
            "Stream stored",
            symbol=symbol,
            stream_id=stream_id,
            window=window.describe(),
            total_points=total_points
        )
        return stream_id

    def get_stream(self, stream_id: str) -> Optional[StoredStream]:
        with self._lock:
            return self._streams.get(stream_id)

    def delete_stream(self, stream_id: str) -> bool:
        with self._lock:
            removed = self._streams.pop(stream_id, None)
            self._order.pop(stream_id, None)
        return removed is not None
