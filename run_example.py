#!/usr/bin/env python3
"""Example script to underwrite the reference 16-unit deal."""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from deal_engine.models.deal import DealInputs, UnitMixRow
from deal_engine.models.lookups import get_waterfall_template
from deal_engine.models.structures import StructureBaseInputs
from deal_engine.calculations.deal import calculate_all
from deal_engine.calculations.promote import calculate_promote
from deal_engine.scenarios import format_comparison_table, run_structure_comparison


def get_example_inputs() -> DealInputs:
    """Get the reference deal inputs."""
    return DealInputs(
        purchase_price=5_000_000,
        closing_costs=150_000,
        unit_mix=[
            UnitMixRow("Studio", count=4, monthly_rent=2000),
            UnitMixRow("1BR", count=8, monthly_rent=2500),
            UnitMixRow("2BR", count=4, monthly_rent=3200),
        ],
        ltv_pct=65,
        interest_rate=7,
        amortization_years=30,
        residential_vacancy_rate=5,
        hold_period_years=5,
        exit_cap_rate=5.5,
    )


def run_base_deal(parallel: bool):
    """Run the base underwriting and print the headline numbers."""
    print("\n" + "=" * 60)
    print("DEAL UNDERWRITING")
    print("=" * 60 + "\n")

    inputs = get_example_inputs()
    outputs = calculate_all(inputs, parallel=parallel)

    print(f"{'Gross Potential Rent':<25} ${outputs.gross_potential_rent:>13,.0f}")
    print(f"{'Total Income':<25} ${outputs.total_income:>13,.0f}")
    print(f"{'Total Expenses':<25} ${outputs.total_expenses:>13,.0f}")
    print(f"{'NOI':<25} ${outputs.noi:>13,.0f}")
    print()
    print(f"{'Loan Amount':<25} ${outputs.loan_amount:>13,.0f}")
    print(f"{'Annual Debt Service':<25} ${outputs.annual_debt_service:>13,.0f}")
    print(f"{'Total Equity':<25} ${outputs.total_equity:>13,.0f}")
    print()
    print(f"{'Cap Rate':<25} {outputs.cap_rate:>13.2f}%")
    print(f"{'Cash-on-Cash':<25} {outputs.cash_on_cash:>13.2f}%")
    print(f"{'DSCR':<25} {outputs.dscr:>13.2f}x")
    print(f"{'IRR':<25} {outputs.irr:>13.2f}%")
    print(f"{'Equity Multiple':<25} {outputs.equity_multiple:>13.2f}x")

    print("\nCash flow projection:")
    print(outputs.cash_flow_frame()[["egi", "expenses", "noi", "cash_flow"]].round(0).to_string())

    print("\nIRR sensitivity (exit cap x purchase price):")
    print(outputs.sensitivity.to_frame().to_string())

    return inputs, outputs


def run_waterfall(inputs: DealInputs, outputs):
    """Split the base deal between GP and LP."""
    print("\n" + "=" * 60)
    print("GP/LP WATERFALL (Standard 70/30)")
    print("=" * 60 + "\n")

    promote = calculate_promote(inputs, outputs, get_waterfall_template("Standard 70/30").to_promote_inputs())
    print(promote.distributions_frame()[["distributable_cash", "lp_total", "gp_total"]].round(0).to_string())
    print()
    print(f"{'LP IRR':<25} {promote.lp_irr:>13.2f}%")
    print(f"{'GP IRR':<25} {promote.gp_irr:>13.2f}%")
    print(f"{'GP Promote Earned':<25} ${promote.gp_promote_earned:>13,.0f}")


def run_structures(parallel: bool):
    """Compare the same property under every financing structure."""
    analyses = run_structure_comparison(StructureBaseInputs(), parallel=parallel)
    print("\n" + format_comparison_table(analyses))


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Deal underwriting example")
    parser.add_argument(
        "--structures",
        action="store_true",
        help="Also compare financing structures",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Compute grids on a thread pool",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    inputs, outputs = run_base_deal(args.parallel)
    run_waterfall(inputs, outputs)

    if args.structures:
        run_structures(args.parallel)

    print("\nDone.")


if __name__ == "__main__":
    main()
