"""Result types produced by the structure calculators."""

from dataclasses import asdict, dataclass, field
from typing import List, Optional

import pandas as pd

from ...models.structures import (
    ClosingCostBreakdown,
    DealStructureType,
    TaxReassessment,
)


@dataclass
class YearlyProjection:
    """One year of a structure's operating projection."""

    year: int  # 1-indexed
    gross_income: float
    vacancy: float
    effective_income: float
    opex: float
    noi: float
    debt_service: float
    cash_flow: float
    cumulative_cash_flow: float
    property_value: float  # Forward NOI capped at the exit cap rate
    equity: float  # Property value less loan balance


@dataclass
class ExitScenarioPoint:
    """Sale outcome at one exit cap rate."""

    cap_rate: float
    sale_price: float
    irr: float


@dataclass
class ExitSensitivity:
    """Three-point exit sensitivity around the market cap rate."""

    optimistic: ExitScenarioPoint
    base: ExitScenarioPoint
    conservative: ExitScenarioPoint


@dataclass
class MarketCapRateMeta:
    """Market cap-rate context echoed from the supplied estimate."""

    market_cap_rate: float
    confidence: str
    trend: str
    trend_bps_per_year: float


@dataclass
class PenaltyExposure:
    """Regulatory penalty exposure over the hold."""

    total_penalty_over_hold: float
    avg_annual_penalty: float
    compliance_status: str  # "compliant" | "non_compliant"


@dataclass
class StabilizedUnitImpact:
    """Rent-stabilized unit share and its (unmodeled) upside."""

    stabilized_pct: float
    blended_growth_rate: float
    mci_upside_annual: float = 0.0
    iai_upside_annual: float = 0.0


@dataclass
class DealAnalysis:
    """Comparable result of any financing structure.

    Percentages are whole percent. Structure-specific fields are None for
    structures that don't produce them.
    """

    structure: DealStructureType
    label: str
    total_project_cost: float
    total_debt: float
    total_equity: float

    # Year 1
    noi: float
    debt_service: float
    cash_flow: float
    cash_on_cash: float
    cap_rate: float
    dscr: float

    # Hold period
    projected_sale_price: float
    total_cash_flow: float
    total_profit: float
    equity_multiple: float
    irr: float
    annualized_return: float
    break_even_occupancy: float

    yearly_projections: List[YearlyProjection] = field(default_factory=list)

    # Bridge -> refi
    cash_out_on_refi: Optional[float] = None
    cash_left_in_deal: Optional[float] = None
    refi_loan_amount: Optional[float] = None
    total_bridge_cost: Optional[float] = None

    # Assumable
    annual_rate_savings: Optional[float] = None
    total_rate_savings: Optional[float] = None
    blended_rate: Optional[float] = None
    mrt_savings: Optional[float] = None

    # Syndication
    gp_total_return: Optional[float] = None
    lp_total_return: Optional[float] = None
    gp_irr: Optional[float] = None
    lp_irr: Optional[float] = None
    gp_equity_multiple: Optional[float] = None
    lp_equity_multiple: Optional[float] = None
    total_fees: Optional[float] = None

    # Passed through from collaborators
    closing_cost_detail: Optional[ClosingCostBreakdown] = None
    tax_reassessment: Optional[TaxReassessment] = None

    # Benchmark-derived context
    exit_sensitivity: Optional[ExitSensitivity] = None
    market_cap_rate_meta: Optional[MarketCapRateMeta] = None
    penalty_exposure: Optional[PenaltyExposure] = None
    stabilized_unit_impact: Optional[StabilizedUnitImpact] = None

    def projections_frame(self) -> pd.DataFrame:
        """Return the yearly projections as a DataFrame indexed by year."""
        frame = pd.DataFrame([asdict(p) for p in self.yearly_projections])
        if frame.empty:
            return frame
        return frame.set_index("year")
