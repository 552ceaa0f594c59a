"""
Capacity rules: the longest window a new stream may occupy.

A base table gives one capacity per market type. An override table raises
or lowers it for families of tickers, such as listings on a given exchange,
without code changes.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from streamwin_app.config.defaults import CapacityParams, EURONEXT_PARIS_OVERRIDE
from streamwin_app.data.models import MarketType


@dataclass(frozen=True)
class CapacityOverride:
    """Capacity applied to matching tickers of one market type."""
    name: str
    market_type: MarketType
    max_days: int
    suffix: str = ""
    tickers: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "market_type", MarketType(self.market_type))
        object.__setattr__(self, "suffix", self.suffix.upper())
        object.__setattr__(self, "tickers", frozenset(t.upper() for t in self.tickers))

    def base_ticker(self, symbol: str) -> str:
        """Strip the exchange suffix, case-insensitively."""
        normalized = symbol.strip().upper()
        if self.suffix and normalized.endswith(self.suffix):
            return normalized[:-len(self.suffix)]
        return normalized

    def matches(self, symbol: str, market_type: MarketType) -> bool:
        """Check whether this override applies to a symbol."""
        if market_type != self.market_type:
            return False

        normalized = symbol.strip().upper()
        if self.suffix and normalized.endswith(self.suffix):
            return True

        return self.base_ticker(normalized) in self.tickers

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CapacityOverride":
        """Build an override from a configuration entry."""
        return cls(
            name=data["name"],
            market_type=MarketType(data["market_type"]),
            max_days=int(data["max_days"]),
            suffix=data.get("suffix", "") or "",
            tickers=frozenset(data.get("tickers", ()) or ()),
        )


def _default_base() -> dict[MarketType, int]:
    params = CapacityParams()
    return {market: getattr(params, market.value) for market in MarketType}


def _default_overrides() -> tuple[CapacityOverride, ...]:
    return (CapacityOverride(
        name=EURONEXT_PARIS_OVERRIDE.name,
        market_type=MarketType(EURONEXT_PARIS_OVERRIDE.market_type),
        max_days=EURONEXT_PARIS_OVERRIDE.max_days,
        suffix=EURONEXT_PARIS_OVERRIDE.suffix,
        tickers=frozenset(EURONEXT_PARIS_OVERRIDE.tickers),
    ),)


class CapacityRule:
    """Pure, total mapping from (symbol, market type) to a day capacity."""

    def __init__(
        self,
        base: Optional[Mapping[MarketType, int]] = None,
        overrides: Optional[tuple[CapacityOverride, ...]] = None,
        fallback_days: int = CapacityParams.fallback
    ):
        """
        Initialize the rule.

        Args:
            base: Capacity per market type, defaults to the built-in table
            overrides: Override table checked in order, first match wins
            fallback_days: Capacity for market types missing from base
        """
        self.base = dict(base) if base is not None else _default_base()
        self.overrides = tuple(overrides) if overrides is not None else _default_overrides()
        self.fallback_days = fallback_days

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "CapacityRule":
        """Build a rule from a merged configuration dictionary."""
        capacity = dict(config.get("capacity", {}))
        fallback = int(capacity.pop("fallback", CapacityParams.fallback))
        base = {MarketType(key): int(value) for key, value in capacity.items()}

        overrides = None
        if "overrides" in config:
            overrides = tuple(CapacityOverride.from_dict(entry) for entry in config["overrides"] or ())

        return cls(base=base or None, overrides=overrides, fallback_days=fallback)

    def find_override(self, symbol: str, market_type: MarketType) -> Optional[CapacityOverride]:
        """Return the first override matching a symbol, if any."""
        market_type = MarketType(market_type)
        for override in self.overrides:
            if override.matches(symbol, market_type):
                return override
        return None

    def max_days(self, symbol: str, market_type: MarketType) -> int:
        """Capacity in days for a new stream of this symbol."""
        override = self.find_override(symbol, market_type)
        if override is not None:
            return override.max_days

        return self.base.get(MarketType(market_type), self.fallback_days)
