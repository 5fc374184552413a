"""Structured deal inputs, one variant per financing structure.

``StructuredDealInputs`` is a closed union of five dataclasses. Each variant
carries the shared ``StructureBaseInputs`` in ``base`` and is tagged with a
``DealStructureType`` class constant that the dispatcher switches on.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Union


class DealStructureType(str, Enum):
    """Supported capital stacks."""

    ALL_CASH = "all_cash"
    CONVENTIONAL = "conventional"
    BRIDGE_REFI = "bridge_refi"
    ASSUMABLE = "assumable"
    SYNDICATION = "syndication"


@dataclass
class ClosingCostBreakdown:
    """Itemized buyer closing costs resolved by an external calculator.

    Only ``total_buyer_costs`` and ``mrt_savings`` feed the arithmetic;
    the line items are carried through for display.
    """

    total_buyer_costs: float
    mortgage_recording_tax: float = 0.0
    total_transfer_tax: float = 0.0
    title_insurance: float = 0.0
    buyer_attorney_fee: float = 0.0
    misc_fees: float = 0.0
    mrt_savings: float = 0.0  # Recording tax avoided by assuming a loan


@dataclass
class TaxReassessment:
    """Projected post-sale tax reassessment (opaque, passed through)."""

    current_tax_bill: float
    estimated_new_tax_bill: float
    tax_increase_pct: float
    phase_in_years: int = 5
    year_by_year_tax: List[float] = field(default_factory=list)


@dataclass
class CapRateEstimate:
    """Market cap-rate estimate with its confidence band."""

    market_cap_rate: float
    confidence: str = "medium"  # "high" | "medium" | "low"
    trend: str = "stable"
    trend_bps_per_year: float = 0.0


@dataclass
class StructureBaseInputs:
    """Property-level assumptions shared by every structure.

    Rates are whole percent. Income and expense amounts are annual.
    """

    purchase_price: float = 5_000_000.0
    units: int = 16
    gross_rental_income: float = 585_600.0
    other_income: float = 0.0  # Laundry, parking, storage
    vacancy_rate: float = 5.0
    operating_expenses: float = 150_000.0
    capex_reserve: float = 8_000.0
    property_taxes: float = 80_000.0
    insurance: float = 25_600.0
    hold_period: int = 5
    exit_cap_rate: float = 5.5
    annual_rent_growth: float = 3.0
    annual_expense_growth: float = 3.0
    renovation_budget: float = 0.0
    closing_costs_pct: float = 3.0

    # Resolved by external collaborators
    closing_cost_breakdown: Optional[ClosingCostBreakdown] = None
    tax_reassessment: Optional[TaxReassessment] = None
    current_market_rate: Optional[float] = None
    cap_rate_estimate: Optional[CapRateEstimate] = None

    # Optional benchmark data; flat growth is used when absent
    rent_projection: List[float] = field(default_factory=list)  # Total annual rent per year
    annual_penalties: List[float] = field(default_factory=list)  # Regulatory penalty per year
    stabilized_unit_pct: Optional[float] = None

    @property
    def gross_potential_income(self) -> float:
        """Rental plus other income before vacancy."""
        return self.gross_rental_income + self.other_income

    @property
    def total_opex(self) -> float:
        """All operating costs including reserves, taxes and insurance."""
        return self.operating_expenses + self.capex_reserve + self.property_taxes + self.insurance


@dataclass
class AllCashInputs:
    """No leverage."""

    structure: ClassVar[DealStructureType] = DealStructureType.ALL_CASH

    base: StructureBaseInputs = field(default_factory=StructureBaseInputs)


@dataclass
class ConventionalInputs:
    """Single senior loan."""

    structure: ClassVar[DealStructureType] = DealStructureType.CONVENTIONAL

    base: StructureBaseInputs = field(default_factory=StructureBaseInputs)
    ltv_pct: float = 75.0
    interest_rate: float = 7.0
    amortization_years: int = 30
    loan_term_years: int = 10
    is_interest_only: bool = False
    loan_origination_pct: float = 1.0
    io_years: Optional[int] = None
    prepayment_penalty_pct: Optional[float] = None


@dataclass
class BridgeRefiInputs:
    """Bridge acquisition loan, renovation, then permanent refinance."""

    structure: ClassVar[DealStructureType] = DealStructureType.BRIDGE_REFI

    base: StructureBaseInputs = field(default_factory=StructureBaseInputs)

    # Phase 1: Bridge
    bridge_ltv_pct: float = 80.0
    bridge_rate: float = 10.0
    bridge_term_months: int = 24
    bridge_origination_pts: float = 2.0
    bridge_interest_only: bool = True

    # Phase 2: Stabilization (rent bump applied instantly)
    stabilization_months: int = 6
    post_rehab_rent_bump: float = 20.0

    # Phase 3: Permanent refi
    refi_ltv_pct: float = 75.0
    refi_rate: float = 7.0
    refi_amortization: int = 30
    refi_term_years: int = 10
    arv_override: Optional[float] = None
    use_cema: bool = True  # Recording-tax relief is priced by the closing-cost calculator


@dataclass
class AssumableInputs:
    """Buyer takes over the seller's existing mortgage."""

    structure: ClassVar[DealStructureType] = DealStructureType.ASSUMABLE

    base: StructureBaseInputs = field(default_factory=StructureBaseInputs)
    existing_loan_balance: float = 3_000_000.0
    existing_rate: float = 3.5
    existing_term_remaining: int = 300  # Months
    existing_amortization: int = 30  # Original amortization in years
    assumption_fee: float = 1.0  # % of assumed balance
    supplemental_loan_amount: float = 0.0
    supplemental_rate: float = 0.0
    supplemental_term_years: int = 10


@dataclass
class SyndicationInputs:
    """GP/LP partnership with sponsor fees and an inline 2-tier waterfall."""

    structure: ClassVar[DealStructureType] = DealStructureType.SYNDICATION

    base: StructureBaseInputs = field(default_factory=StructureBaseInputs)

    # Equity split
    gp_equity_pct: float = 10.0
    lp_equity_pct: float = 90.0

    # Fees
    acquisition_fee_pct: float = 2.0  # Of purchase price
    asset_management_fee_pct: float = 1.5  # Of gross income, per year
    disposition_fee_pct: float = 1.0  # Of sale price
    refinance_fee_pct: float = 0.5
    construction_mgmt_fee_pct: float = 5.0  # Of renovation budget

    # Waterfall
    preferred_return: float = 8.0
    gp_promote_above_pref: float = 20.0
    irr_hurdle: float = 15.0
    gp_promote_above_hurdle: float = 30.0

    # Senior debt
    ltv_pct: float = 65.0
    interest_rate: float = 7.0
    amortization_years: int = 30
    loan_term_years: int = 10


StructuredDealInputs = Union[
    AllCashInputs,
    ConventionalInputs,
    BridgeRefiInputs,
    AssumableInputs,
    SyndicationInputs,
]
