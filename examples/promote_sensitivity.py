#!/usr/bin/env python3
"""GP/LP waterfall sensitivity across exit cap and rent growth.

Usage:
    python examples/promote_sensitivity.py

Runs every built-in waterfall template on the default deal, then prints
the LP and GP IRR grids for the standard template.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from deal_engine.models.deal import DealInputs
from deal_engine.models.lookups import WATERFALL_TEMPLATES, get_waterfall_template
from deal_engine.calculations.deal import calculate_all
from deal_engine.calculations.promote import calculate_promote, calculate_promote_sensitivity


def main():
    """Run the waterfall templates and the sensitivity grid."""
    inputs = DealInputs(hold_period_years=7)
    outputs = calculate_all(inputs, include_sensitivity=False)

    print("=" * 70)
    print("WATERFALL TEMPLATES")
    print("=" * 70)
    print(f"{'Template':<22} {'LP IRR':>10} {'GP IRR':>10} {'LP Multiple':>12} {'GP Promote':>13}")
    print("-" * 70)
    for template in WATERFALL_TEMPLATES:
        result = calculate_promote(inputs, outputs, template.to_promote_inputs())
        print(
            f"{template.name:<22} {result.lp_irr:>9.2f}% {result.gp_irr:>9.2f}% "
            f"{result.lp_equity_multiple:>11.2f}x ${result.gp_promote_earned:>12,.0f}"
        )

    promote_inputs = get_waterfall_template("Standard 70/30").to_promote_inputs()
    grid = calculate_promote_sensitivity(inputs, promote_inputs, parallel=True)

    print("\nLP IRR (%):")
    print(grid.to_frame("lp_irr").round(1).to_string())
    print("\nGP IRR (%):")
    print(grid.to_frame("gp_irr").round(1).to_string())


if __name__ == "__main__":
    main()
