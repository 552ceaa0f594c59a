"""SQLite-backed window repository."""

import json
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from streamwin_app.config.defaults import StoreParams
from streamwin_app.data.models import ExistingWindow, MarketType, Window
from streamwin_app.data.parsers import normalize_symbol
from streamwin_app.errors import PersistenceError
from streamwin_app.logging.config import get_repository_logger
from streamwin_app.utils.time import format_instant

from .base import StoredStream, WindowRepository


class WindowStore(WindowRepository):
    """
    SQLite-based stream persistence layer.

    Window bounds are stored alongside the raw payload when a stream is
    written so that listing windows never rescans payloads. Writers are
    serialized by a process-wide lock and by an immediate transaction, which
    takes SQLite's write lock before the overlap check is made.
    """

    def __init__(self, db_path: str = StoreParams.db_path,
                 timeout_seconds: float = StoreParams.timeout_seconds):
        self.db_path = Path(db_path)
        self.timeout_seconds = timeout_seconds
        self.logger = get_repository_logger(__name__)
        self._lock = threading.Lock()

        self._init_database()

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "WindowStore":
        """Create a store from a merged configuration dictionary."""
        store_config = config.get("store", {})
        return cls(
            db_path=store_config.get("db_path", StoreParams.db_path),
            timeout_seconds=store_config.get("timeout_seconds", StoreParams.timeout_seconds),
        )

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection("init", str(self.db_path)) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS streams (
                    id TEXT PRIMARY KEY,
                    symbol TEXT NOT NULL,
                    market_type TEXT NOT NULL,
                    start_ts TEXT NOT NULL,
                    end_ts TEXT NOT NULL,
                    data TEXT NOT NULL,
                    total_points INTEGER NOT NULL CHECK (total_points > 0),
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_streams_symbol ON streams(symbol)
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_streams_created_at ON streams(created_at)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str, target: Optional[str] = None):
        """Get database connection, translating driver errors."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout_seconds)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", operation=operation, target=target, error=str(e))
            raise PersistenceError(
                f"Database error during {operation}: {e}",
                operation=operation,
                target=target
            ) from e
        finally:
            if conn:
                conn.close()

    def list_windows(self, symbol: str) -> list[ExistingWindow]:
        symbol = normalize_symbol(symbol)
        with self._get_connection("list_windows", symbol) as conn:
            rows = conn.execute("""
                SELECT id, symbol, market_type, start_ts, end_ts, total_points
                FROM streams WHERE symbol = ?
                ORDER BY created_at DESC, rowid DESC
            """, (symbol,)).fetchall()

        return [self._row_to_existing_window(row) for row in rows]

    def insert_stream(
        self,
        symbol: str,
        market_type: MarketType,
        payload: dict[str, Any],
        stream_id: Optional[str] = None
    ) -> str:
        symbol = normalize_symbol(symbol)
        market_type = MarketType(market_type)
        window, total_points = self.describe_payload(payload)
        stream_id = stream_id or str(uuid.uuid4())

        with self._lock:
            with self._get_connection("insert_stream", symbol) as conn:
                conn.execute("BEGIN IMMEDIATE")

                rows = conn.execute("""
                    SELECT id, symbol, market_type, start_ts, end_ts, total_points
                    FROM streams WHERE symbol = ?
                """, (symbol,)).fetchall()
                existing = [self._row_to_existing_window(row) for row in rows]

                try:
                    self.check_conflict(symbol, window, existing)
                except Exception:
                    conn.rollback()
                    raise

                conn.execute("""
                    INSERT INTO streams (
                        id, symbol, market_type, start_ts, end_ts,
                        data, total_points, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    stream_id,
                    symbol,
                    market_type.value,
                    format_instant(window.start),
                    format_instant(window.end),
                    json.dumps(payload),
                    total_points,
                    datetime.now(timezone.utc).isoformat()
                ))

                conn.commit()

        self.logger.info(
            "Stream stored",
            symbol=symbol,
            stream_id=stream_id,
            window=window.describe(),
            total_points=total_points
        )
        return stream_id

    def get_stream(self, stream_id: str) -> Optional[StoredStream]:
        with self._get_connection("get_stream", stream_id) as conn:
            row = conn.execute("""
                SELECT * FROM streams WHERE id = ?
            """, (stream_id,)).fetchone()

        if row:
            return self._row_to_stored_stream(row)
        return None

    def delete_stream(self, stream_id: str) -> bool:
        with self._lock:
            with self._get_connection("delete_stream", stream_id) as conn:
                cursor = conn.execute("DELETE FROM streams WHERE id = ?", (stream_id,))
                conn.commit()
                deleted = cursor.rowcount > 0

        if deleted:
            self.logger.info("Stream deleted", stream_id=stream_id)
        return deleted

    def count_streams(self, symbol: str) -> int:
        symbol = normalize_symbol(symbol)
        with self._get_connection("count_streams", symbol) as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM streams WHERE symbol = ?", (symbol,)
            ).fetchone()[0]

    def _row_window(self, row: sqlite3.Row) -> Window:
        return Window(
            datetime.fromisoformat(row["start_ts"]),
            datetime.fromisoformat(row["end_ts"])
        )

    def _row_to_existing_window(self, row: sqlite3.Row) -> ExistingWindow:
        """Convert database row to ExistingWindow object."""
        return ExistingWindow(
            id=row["id"],
            symbol=row["symbol"],
            market_type=MarketType(row["market_type"]),
            window=self._row_window(row),
            total_points=row["total_points"]
        )

    def _row_to_stored_stream(self, row: sqlite3.Row) -> StoredStream:
        """Convert database row to StoredStream object."""
        return StoredStream(
            id=row["id"],
            symbol=row["symbol"],
            market_type=MarketType(row["market_type"]),
            window=self._row_window(row),
            payload=json.loads(row["data"]),
            total_points=row["total_points"],
            created_at=row["created_at"]
        )
