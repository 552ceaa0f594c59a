"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from streamwin_app.data.models import MarketType


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_positive_int(value: Any) -> bool:
    # bool is an int subclass but never a valid day count
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_capacity_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate per-market capacities."""
        errors = []
        known = {market.value for market in MarketType} | {"fallback"}

        for key, value in params.items():
            if key not in known:
                errors.append(ValidationError(
                    field=f"capacity.{key}",
                    message="Unknown market type",
                    value=key
                ))
            elif not _is_positive_int(value):
                errors.append(ValidationError(
                    field=f"capacity.{key}",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_override(index: int, override: Any) -> list[ValidationError]:
        """Validate a single capacity override entry."""
        prefix = f"overrides[{index}]"

        if not isinstance(override, dict):
            return [ValidationError(
                field=prefix,
                message="Must be a mapping",
                value=override
            )]

        errors = []

        if not isinstance(override.get("name"), str) or not override.get("name"):
            errors.append(ValidationError(
                field=f"{prefix}.name",
                message="Must be a non-empty string",
                value=override.get("name")
            ))

        market_type = override.get("market_type")
        if market_type not in {market.value for market in MarketType}:
            errors.append(ValidationError(
                field=f"{prefix}.market_type",
                message="Must be one of STOCK, CRYPTOCURRENCY, COMMODITY, INDEX",
                value=market_type
            ))

        if not _is_positive_int(override.get("max_days")):
            errors.append(ValidationError(
                field=f"{prefix}.max_days",
                message="Must be a positive integer",
                value=override.get("max_days")
            ))

        suffix = override.get("suffix", "")
        if not isinstance(suffix, str):
            errors.append(ValidationError(
                field=f"{prefix}.suffix",
                message="Must be a string",
                value=suffix
            ))

        tickers = override.get("tickers", [])
        if not isinstance(tickers, (list, tuple)) or not all(isinstance(t, str) and t for t in tickers):
            errors.append(ValidationError(
                field=f"{prefix}.tickers",
                message="Must be a list of non-empty strings",
                value=tickers
            ))
        elif not suffix and not tickers:
            errors.append(ValidationError(
                field=prefix,
                message="Needs a suffix or at least one ticker",
                value=override
            ))

        return errors

    @staticmethod
    def validate_search_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate search parameters."""
        errors = []

        if "lookback_days" in params:
            value = params["lookback_days"]
            if not _is_positive_int(value):
                errors.append(ValidationError(
                    field="search.lookback_days",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_store_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate window store parameters."""
        errors = []

        if "db_path" in params:
            value = params["db_path"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="store.db_path",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="store.timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "capacity" in config:
            errors.extend(ConfigValidator.validate_capacity_params(config["capacity"]))

        if "overrides" in config:
            overrides = config["overrides"]
            if not isinstance(overrides, (list, tuple)):
                errors.append(ValidationError(
                    field="overrides",
                    message="Must be a list",
                    value=overrides
                ))
            else:
                for index, override in enumerate(overrides):
                    errors.extend(ConfigValidator.validate_override(index, override))

        if "search" in config:
            errors.extend(ConfigValidator.validate_search_params(config["search"]))

        if "store" in config:
            errors.extend(ConfigValidator.validate_store_params(config["store"]))

        return errors
