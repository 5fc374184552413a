#!/usr/bin/env python3
"""Compare financing structures for one property.

Usage:
    python examples/compare_structures.py

Runs the property under all cash, conventional, bridge-to-refi, assumable
and syndication terms, then shows how the conventional deal responds to a
lower LTV.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from deal_engine.models.structures import CapRateEstimate, DealStructureType, StructureBaseInputs
from deal_engine.calculations.structures import compare_deal_structures
from deal_engine.scenarios import comparison_frame, format_comparison_table


def main():
    """Run the structure comparison."""
    base = StructureBaseInputs(
        purchase_price=5_000_000,
        units=16,
        gross_rental_income=585_600,
        other_income=9_600,
        renovation_budget=250_000,
        current_market_rate=6.75,
        cap_rate_estimate=CapRateEstimate(market_cap_rate=5.25, confidence="medium"),
    )

    analyses = compare_deal_structures(base, list(DealStructureType), parallel=True)
    print(format_comparison_table(analyses))

    print("\nExit sensitivity (market cap rate 5.25%):")
    for analysis in analyses:
        if analysis.exit_sensitivity is None:
            continue
        points = analysis.exit_sensitivity
        print(
            f"  {analysis.label:<15} "
            f"{points.optimistic.irr:>7.2f}% / {points.base.irr:>7.2f}% / {points.conservative.irr:>7.2f}%"
        )

    print("\nConventional at 60% vs 75% LTV:")
    low_leverage = compare_deal_structures(
        base,
        [DealStructureType.CONVENTIONAL],
        overrides={DealStructureType.CONVENTIONAL: {"ltv_pct": 60}},
    )
    frame = comparison_frame([analyses[1]] + low_leverage)
    frame.columns = ["75% LTV", "60% LTV"]
    print(frame.round(2).to_string())


if __name__ == "__main__":
    main()
