"""Multi-tier GP/LP promote waterfall on top of the base deal projection.

Each year's distributable cash (operating cash flow, plus net exit proceeds
in the final year) runs through the tiers in order:

- Preferred return tier: LP receives its annual pref plus any unpaid pref
  carried from prior years
- Catch-up tier: GP receives a percentage of what remains
- Split tier: remaining cash is split GP/LP and the tier consumes it

A tier with an IRR hurdle is skipped unless the LP's IRR on distributions
received so far, plus this year's pending allocation, reaches the hurdle.
Cash left after the last tier is split pro-rata by equity.
"""

import concurrent.futures
import logging
import multiprocessing
from dataclasses import asdict, dataclass, field, replace
from typing import List, Optional, Sequence

import pandas as pd

from ..models.deal import DealInputs
from ..models.lookups import PROMOTE_EXIT_CAP_DELTAS, PROMOTE_RENT_GROWTH_DELTAS
from ..models.promote import PromoteInputs
from .deal import DealOutputs, calculate_all
from .numeric import calculate_irr

logger = logging.getLogger(__name__)

# LP IRR-to-date while nothing has been distributed to the LP
NO_HISTORY_IRR = -100.0


def _lp_irr_to_date(lp_flows: List[float], pending: float) -> float:
    """LP IRR (whole percent) on flows received so far plus this year's pending amount."""
    trial = lp_flows + [pending]
    if not any(flow > 0 for flow in trial[1:]):
        return NO_HISTORY_IRR
    return calculate_irr(trial) * 100


@dataclass
class YearDistribution:
    """How one year's distributable cash was allocated."""

    year: int
    distributable_cash: float
    lp_pref: float
    gp_catch_up: float
    lp_share: float
    gp_share: float
    gp_promote: float  # GP total above its pro-rata share
    lp_total: float
    gp_total: float
    pref_shortfall: float  # Unpaid pref carried into next year
    lp_cumulative: float
    gp_cumulative: float


@dataclass
class PromoteOutputs:
    """GP/LP returns under a waterfall. IRRs are whole percent."""

    gp_irr: float
    lp_irr: float
    gp_equity_multiple: float
    lp_equity_multiple: float
    gp_promote_earned: float
    gp_equity: float
    lp_equity: float
    year_distributions: List[YearDistribution] = field(default_factory=list)
    gp_cash_flows: List[float] = field(default_factory=list)  # [-gp_equity, yr1, ...]
    lp_cash_flows: List[float] = field(default_factory=list)  # [-lp_equity, yr1, ...]

    def distributions_frame(self) -> pd.DataFrame:
        """Return the yearly distributions as a DataFrame indexed by year."""
        frame = pd.DataFrame([asdict(d) for d in self.year_distributions])
        if frame.empty:
            return frame
        return frame.set_index("year")


@dataclass
class SensitivityCell:
    """GP/LP outcome for one exit cap / rent growth combination."""

    gp_irr: float
    lp_irr: float
    gp_multiple: float
    lp_multiple: float


@dataclass
class PromoteSensitivity:
    """Waterfall outcomes by exit cap rate (rows) and rent growth (columns)."""

    rows: List[List[SensitivityCell]] = field(default_factory=list)
    exit_cap_labels: List[str] = field(default_factory=list)
    rent_growth_labels: List[str] = field(default_factory=list)

    def to_frame(self, metric: str = "lp_irr") -> pd.DataFrame:
        """Return one metric of the grid as a labelled DataFrame.

        Args:
            metric: "gp_irr", "lp_irr", "gp_multiple" or "lp_multiple".

        Raises:
            ValueError: If ``metric`` is not a SensitivityCell field.
        """
        if metric not in SensitivityCell.__dataclass_fields__:
            raise ValueError(f"Unknown sensitivity metric: {metric}")
        values = [[getattr(cell, metric) for cell in row] for row in self.rows]
        frame = pd.DataFrame(values, index=self.exit_cap_labels, columns=self.rent_growth_labels)
        frame.index.name = "Exit Cap Rate"
        frame.columns.name = "Rent Growth"
        return frame


def calculate_promote(
    deal_inputs: DealInputs,
    deal_outputs: DealOutputs,
    promote_inputs: PromoteInputs,
) -> PromoteOutputs:
    """Run the waterfall over the deal's hold period.

    Args:
        deal_inputs: Deal inputs (hold period).
        deal_outputs: Base calculation results (equity, cash flows, exit).
        promote_inputs: Equity split and tiers.

    Returns:
        PromoteOutputs with per-year allocations and GP/LP returns.

    Example:
        >>> outputs = calculate_all(inputs)
        >>> result = calculate_promote(inputs, outputs, template.to_promote_inputs())
        >>> result.gp_promote_earned > 0
        True
    """
    gp_pct = promote_inputs.gp_equity_pct / 100
    lp_pct = promote_inputs.lp_equity_pct / 100
    gp_equity = deal_outputs.total_equity * gp_pct
    lp_equity = deal_outputs.total_equity * lp_pct
    hold_years = deal_inputs.hold_period_years
    cash_flows = deal_outputs.cash_flows

    distributions = []
    pref_owed = 0.0
    lp_cumulative = 0.0
    gp_cumulative = 0.0
    total_gp_promote = 0.0
    running_lp_flows = [-lp_equity]

    for y in range(hold_years):
        cf = cash_flows[y].cash_flow if y < len(cash_flows) else 0.0
        exit_cash = deal_outputs.exit_proceeds if y == hold_years - 1 else 0.0
        distributable = max(0.0, cf + exit_cash)

        lp_pref = 0.0
        gp_catch_up = 0.0
        lp_share = 0.0
        gp_share = 0.0
        remaining = distributable

        for tier in promote_inputs.waterfall_tiers:
            if remaining <= 0:
                break

            if tier.irr_hurdle is not None:
                # Pending: LP allocations so far this year plus its pro-rata share of the rest
                pending = lp_pref + lp_share + remaining * lp_pct
                if _lp_irr_to_date(running_lp_flows, pending) < tier.irr_hurdle:
                    continue

            if tier.pref_rate is not None and tier.pref_rate > 0:
                pref_due = lp_equity * (tier.pref_rate / 100) + pref_owed
                pref_paid = min(remaining, pref_due)
                lp_pref += pref_paid
                pref_owed = pref_due - pref_paid
                remaining -= pref_paid
                continue

            if tier.catch_up_pct is not None and tier.catch_up_pct > 0:
                catch_up = min(remaining, remaining * (tier.catch_up_pct / 100))
                gp_catch_up += catch_up
                remaining -= catch_up
                continue

            gp_share += remaining * (tier.gp_split_pct / 100)
            lp_share += remaining * (tier.lp_split_pct / 100)
            remaining = 0.0

        if remaining > 0:
            gp_share += remaining * gp_pct
            lp_share += remaining * lp_pct

        lp_total = lp_pref + lp_share
        gp_total = gp_catch_up + gp_share

        gp_promote = max(0.0, gp_total - distributable * gp_pct)
        total_gp_promote += gp_promote

        lp_cumulative += lp_total
        gp_cumulative += gp_total
        running_lp_flows.append(lp_total)

        distributions.append(
            YearDistribution(
                year=y + 1,
                distributable_cash=distributable,
                lp_pref=lp_pref,
                gp_catch_up=gp_catch_up,
                lp_share=lp_share,
                gp_share=gp_share,
                gp_promote=gp_promote,
                lp_total=lp_total,
                gp_total=gp_total,
                pref_shortfall=pref_owed,
                lp_cumulative=lp_cumulative,
                gp_cumulative=gp_cumulative,
            )
        )

    gp_flows = [-gp_equity] + [d.gp_total for d in distributions]
    lp_flows = [-lp_equity] + [d.lp_total for d in distributions]

    return PromoteOutputs(
        gp_irr=calculate_irr(gp_flows) * 100 if gp_equity > 0 else 0.0,
        lp_irr=calculate_irr(lp_flows) * 100 if lp_equity > 0 else 0.0,
        gp_equity_multiple=gp_cumulative / gp_equity if gp_equity > 0 else 0.0,
        lp_equity_multiple=lp_cumulative / lp_equity if lp_equity > 0 else 0.0,
        gp_promote_earned=total_gp_promote,
        gp_equity=gp_equity,
        lp_equity=lp_equity,
        year_distributions=distributions,
        gp_cash_flows=gp_flows,
        lp_cash_flows=lp_flows,
    )


def calculate_promote_sensitivity_cell(
    deal_inputs: DealInputs,
    promote_inputs: PromoteInputs,
    exit_cap_delta: float,
    rent_growth_delta: float,
) -> SensitivityCell:
    """Re-run the deal and the waterfall with shifted exit cap and rent growth."""
    tweaked = replace(
        deal_inputs,
        exit_cap_rate=deal_inputs.exit_cap_rate + exit_cap_delta,
        annual_rent_growth=deal_inputs.annual_rent_growth + rent_growth_delta,
    )
    outputs = calculate_all(tweaked, include_sensitivity=False)
    result = calculate_promote(tweaked, outputs, promote_inputs)
    return SensitivityCell(
        gp_irr=result.gp_irr,
        lp_irr=result.lp_irr,
        gp_multiple=result.gp_equity_multiple,
        lp_multiple=result.lp_equity_multiple,
    )


def calculate_promote_sensitivity(
    deal_inputs: DealInputs,
    promote_inputs: PromoteInputs,
    exit_cap_deltas: Optional[Sequence[float]] = None,
    rent_growth_deltas: Optional[Sequence[float]] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> PromoteSensitivity:
    """Build the exit cap x rent growth grid of GP/LP outcomes.

    Args:
        deal_inputs: Base deal inputs.
        promote_inputs: Equity split and tiers.
        exit_cap_deltas: Row offsets in percentage points (default -1..+1).
        rent_growth_deltas: Column offsets in percentage points (default -1..+1).
        parallel: Run cells on a ThreadPoolExecutor.
        max_workers: Max parallel workers (None = CPU count, capped at 8).

    Returns:
        PromoteSensitivity.
    """
    cap_deltas = list(exit_cap_deltas) if exit_cap_deltas is not None else PROMOTE_EXIT_CAP_DELTAS
    growth_deltas = (
        list(rent_growth_deltas) if rent_growth_deltas is not None else PROMOTE_RENT_GROWTH_DELTAS
    )
    cells = [(cd, gd) for cd in cap_deltas for gd in growth_deltas]

    logger.debug("Running %dx%d promote sensitivity (parallel=%s)", len(cap_deltas), len(growth_deltas), parallel)

    if parallel:
        workers = max_workers or min(multiprocessing.cpu_count(), 8)
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(calculate_promote_sensitivity_cell, deal_inputs, promote_inputs, cd, gd)
                for cd, gd in cells
            ]
            values = [future.result() for future in futures]
    else:
        values = [
            calculate_promote_sensitivity_cell(deal_inputs, promote_inputs, cd, gd)
            for cd, gd in cells
        ]

    width = len(growth_deltas)
    rows = [values[i * width:(i + 1) * width] for i in range(len(cap_deltas))]

    return PromoteSensitivity(
        rows=rows,
        exit_cap_labels=[f"{deal_inputs.exit_cap_rate + d:.1f}%" for d in cap_deltas],
        rent_growth_labels=[f"{deal_inputs.annual_rent_growth + d:.1f}%" for d in growth_deltas],
    )
