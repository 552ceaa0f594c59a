#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from streamwin_app.allocator.capacity import CapacityRule
from streamwin_app.config.loader import ConfigLoader
from streamwin_app.config.validation import ConfigValidator, ValidationError
from streamwin_app.data.parsers import detect_market_type


def report(label: str, errors: List[ValidationError]) -> bool:
    """Print validation errors; returns True when there are none."""
    if errors:
        print(f"❌ {label}: found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        return False

    print(f"✅ {label} is valid")
    return True


def main():
    """Main validation function."""
    print("🔍 Validating stream window allocator configuration...")

    loader = ConfigLoader.create()
    all_valid = True

    try:
        config = loader.merge_config()
        all_valid = report("Deployment configuration", ConfigValidator.validate_config(config)) and all_valid
    except Exception as e:
        print(f"❌ Error loading configuration: {e}")
        sys.exit(1)

    # Capacity resolved for a few representative symbols
    print(f"\n📊 Resolved capacities:")
    rule = CapacityRule.from_config(config)
    for symbol in ["AAPL", "MC.PA", "MC", "BTC", "GLD", "SPY"]:
        market_type = detect_market_type(symbol)
        print(f"  • {symbol} ({market_type.value}): {rule.max_days(symbol, market_type)} day(s)")

    print(f"\n📋 Testing per-call overrides...")
    test_overrides = {
        "capacity": {"STOCK": 5},
        "search": {"lookback_days": 90},
    }
    try:
        config = loader.merge_config(test_overrides)
        all_valid = report("Override configuration", ConfigValidator.validate_config(config)) and all_valid
    except Exception as e:
        print(f"❌ Error testing overrides: {e}")
        all_valid = False

    if all_valid:
        print(f"\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print(f"\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
