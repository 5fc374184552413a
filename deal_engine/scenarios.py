"""Side-by-side reporting for financing structure comparisons.

Builds on ``compare_deal_structures`` to lay the per-structure
``DealAnalysis`` results out as a DataFrame or a fixed-width text table.
"""

import logging
from typing import List, Optional, Sequence

import pandas as pd

from .calculations.structures import DealAnalysis, compare_deal_structures
from .models.structures import DealStructureType, StructureBaseInputs

logger = logging.getLogger(__name__)

# (row label, DealAnalysis attribute)
COMPARISON_METRICS = [
    ("Total Project Cost", "total_project_cost"),
    ("Total Debt", "total_debt"),
    ("Total Equity", "total_equity"),
    ("NOI", "noi"),
    ("Debt Service", "debt_service"),
    ("Cash Flow", "cash_flow"),
    ("Cash-on-Cash (%)", "cash_on_cash"),
    ("Cap Rate (%)", "cap_rate"),
    ("DSCR", "dscr"),
    ("Sale Price", "projected_sale_price"),
    ("Total Profit", "total_profit"),
    ("Equity Multiple", "equity_multiple"),
    ("IRR (%)", "irr"),
    ("Annualized Return (%)", "annualized_return"),
    ("Break-Even Occupancy (%)", "break_even_occupancy"),
]


def run_structure_comparison(
    base: StructureBaseInputs,
    structure_types: Optional[Sequence[DealStructureType]] = None,
    parallel: bool = False,
) -> List[DealAnalysis]:
    """Analyze ``base`` under every structure (or the ones given) with default terms.

    Args:
        base: Property inputs shared by all structures.
        structure_types: Structures to include. Defaults to all five.
        parallel: Compute structures on a thread pool.

    Returns:
        One DealAnalysis per structure, in order.
    """
    structure_types = list(structure_types) if structure_types is not None else list(DealStructureType)
    logger.debug("Comparing %d structures", len(structure_types))
    return compare_deal_structures(base, structure_types, parallel=parallel)


def comparison_frame(analyses: Sequence[DealAnalysis]) -> pd.DataFrame:
    """Return headline metrics with one column per structure.

    Example:
        >>> frame = comparison_frame(run_structure_comparison(StructureBaseInputs()))
        >>> frame.loc["Total Debt", "All Cash"]
        0.0
    """
    data = {
        analysis.label: [getattr(analysis, attr) for _, attr in COMPARISON_METRICS]
        for analysis in analyses
    }
    frame = pd.DataFrame(data, index=[label for label, _ in COMPARISON_METRICS])
    frame.index.name = "Metric"
    return frame


def format_comparison_table(analyses: Sequence[DealAnalysis]) -> str:
    """Format structure analyses as a text table.

    Args:
        analyses: Results from ``compare_deal_structures``.

    Returns:
        Formatted string table.
    """
    width = 28 + 16 * len(analyses)
    header = f"{'Metric':<28}" + "".join(f"{a.label[:15]:>16}" for a in analyses)

    def money_row(label: str, attr: str) -> str:
        return f"{label:<28}" + "".join(f"{'$' + format(getattr(a, attr), ',.0f'):>16}" for a in analyses)

    def pct_row(label: str, attr: str) -> str:
        return f"{label:<28}" + "".join(f"{getattr(a, attr):>15.2f}%" for a in analyses)

    def ratio_row(label: str, attr: str) -> str:
        return f"{label:<28}" + "".join(f"{getattr(a, attr):>15.2f}x" for a in analyses)

    lines = [
        "=" * width,
        "DEAL STRUCTURE COMPARISON",
        "=" * width,
        "",
        header,
        "-" * width,
        money_row("Total Project Cost", "total_project_cost"),
        money_row("Total Debt", "total_debt"),
        money_row("Total Equity", "total_equity"),
        "",
        money_row("NOI", "noi"),
        money_row("Debt Service", "debt_service"),
        money_row("Cash Flow", "cash_flow"),
        pct_row("Cash-on-Cash", "cash_on_cash"),
        pct_row("Cap Rate", "cap_rate"),
        ratio_row("DSCR", "dscr"),
        "",
        money_row("Sale Price", "projected_sale_price"),
        money_row("Total Profit", "total_profit"),
        ratio_row("Equity Multiple", "equity_multiple"),
        pct_row("IRR", "irr"),
        pct_row("Annualized Return", "annualized_return"),
        pct_row("Break-Even Occupancy", "break_even_occupancy"),
        "=" * width,
    ]

    return "\n".join(lines)
