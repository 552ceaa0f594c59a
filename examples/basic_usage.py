#!/usr/bin/env python3
"""
Basic Usage Example - Stream Window Allocator

This script walks a symbol through several ingestions against a temporary
SQLite store. It shows how to:
- Build the store, allocator and ingestion service from configuration
- Store a first stream unchanged
- Relocate and truncate a payload that overlaps a stored stream
- Report availability once capacity runs out

Run: python examples/basic_usage.py
"""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict

from streamwin_app.config.loader import ConfigLoader
from streamwin_app.data.models import MarketType
from streamwin_app.ingestion import StreamIngestionService
from streamwin_app.logging import configure_logging
from streamwin_app.persistence import WindowStore


def create_hourly_payload(start: datetime, hours: int) -> Dict[str, Any]:
    """Create a payload keyed like the upstream intraday API."""
    payload = {}
    for i in range(hours):
        ts = start + timedelta(hours=i)
        price = 100.0 + i * 0.1
        payload[ts.strftime("%Y-%m-%d %H:%M:%S")] = {
            "1. open": f"{price:.2f}",
            "2. high": f"{price + 0.5:.2f}",
            "3. low": f"{price - 0.5:.2f}",
            "4. close": f"{price + 0.2:.2f}",
            "5. volume": "1200",
        }
    return payload


def main():
    """Run the example."""
    configure_logging(level="WARNING")

    now = datetime(2024, 1, 14, 18, 0, tzinfo=timezone.utc)

    with tempfile.TemporaryDirectory() as temp_dir:
        config = ConfigLoader.create().merge_config({
            "store": {"db_path": str(Path(temp_dir) / "streams.db")},
        })
        store = WindowStore.from_config(config)
        service = StreamIngestionService(store, config=config)

        print("📥 First stream for AAPL")
        first = service.ingest("AAPL", create_hourly_payload(datetime(2024, 1, 10, 9, tzinfo=timezone.utc), 32), now=now)
        print(f"   {first.message}")

        print("\n📥 Overlapping fetch for AAPL")
        second = service.ingest("AAPL", create_hourly_payload(datetime(2024, 1, 10, tzinfo=timezone.utc), 120), now=now)
        print(f"   {second.message}")
        if second.window is not None:
            print(f"   Window: {second.window.describe()}")

        print("\n🔎 Availability for AAPL")
        print(service.allocator.describe_availability("AAPL", MarketType.STOCK, now=now))

        print("\n📥 Euronext Paris listing")
        french = service.ingest("mc.pa", create_hourly_payload(datetime(2024, 1, 1, tzinfo=timezone.utc), 24 * 14), now=now)
        print(f"   {french.message}")

        print("\n📋 Stored windows")
        for symbol in ("AAPL", "MC.PA"):
            for existing in store.list_windows(symbol):
                print(f"   {symbol}: {existing.window.describe()} ({existing.total_points} points)")


if __name__ == "__main__":
    main()
