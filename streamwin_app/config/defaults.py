"""Default configuration parameters for the stream window allocator."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CapacityParams:
    """Maximum window length in days per market type."""
    STOCK: int = 2                      # Intraday equities, ~2 days of data
    CRYPTOCURRENCY: int = 7             # Round-the-clock markets
    COMMODITY: int = 2
    INDEX: int = 2
    fallback: int = 2                   # Unknown market types


@dataclass(frozen=True)
class CapacityOverrideParams:
    """Capacity override for a family of tickers within one market type."""
    name: str
    market_type: str
    max_days: int
    suffix: str = ""                                     # Exchange suffix, e.g. ".PA"
    tickers: tuple[str, ...] = field(default_factory=tuple)  # Base tickers without suffix


EURONEXT_PARIS_OVERRIDE = CapacityOverrideParams(
    name="euronext_paris",
    market_type="STOCK",
    max_days=15,
    suffix=".PA",
    tickers=("MC", "HO", "DSY", "BN", "AI", "OR", "SU", "CA", "GLE", "SAN"),
)


@dataclass(frozen=True)
class SearchParams:
    """Free-window search parameters."""
    lookback_days: int = 365            # Oldest day a window may start on


@dataclass(frozen=True)
class DisplayParams:
    """User-facing message parameters."""
    date_format: str = "%d/%m/%Y"       # French short date


@dataclass(frozen=True)
class StoreParams:
    """SQLite window store parameters."""
    db_path: str = "streams.db"
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    capacity: CapacityParams
    overrides: tuple[CapacityOverrideParams, ...]
    search: SearchParams
    display: DisplayParams
    store: StoreParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        capacity=CapacityParams(),
        overrides=(EURONEXT_PARIS_OVERRIDE,),
        search=SearchParams(),
        display=DisplayParams(),
        store=StoreParams(),
    )
