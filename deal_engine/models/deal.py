"""Deal data model containing all inputs for an acquisition underwriting."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class ExpenseSource(str, Enum):
    """Where an expense figure came from (display only)."""

    ESTIMATE = "estimate"
    T12 = "t12"  # Trailing 12-month actual
    MANUAL = "manual"
    MARKET_BENCHMARK = "market_benchmark"


@dataclass
class UnitMixRow:
    """Single row of the residential unit mix."""

    unit_type: str  # "Studio", "1BR", "2BR", ...
    count: int
    monthly_rent: float


@dataclass
class ExpenseLineMeta:
    """Audit metadata attached to an expense field."""

    source: ExpenseSource
    methodology: str  # e.g. "T-12 + 3%", "$1,200/unit"
    t12_actual: Optional[float] = None
    growth_factor: Optional[float] = None  # e.g. 1.03


@dataclass
class CustomLineItem:
    """User-added income or expense line (annual amount)."""

    id: str
    name: str
    amount: float
    source: Optional[ExpenseSource] = None
    methodology: Optional[str] = None


@dataclass
class CommercialTenant:
    """Itemized commercial tenant."""

    id: str
    name: str
    rent_annual: float


def _default_unit_mix() -> List[UnitMixRow]:
    return [
        UnitMixRow("Studio", count=4, monthly_rent=2000),
        UnitMixRow("1BR", count=8, monthly_rent=2500),
        UnitMixRow("2BR", count=4, monthly_rent=3200),
    ]


@dataclass
class DealInputs:
    """Complete input parameters for an acquisition.

    All rates and percentages are whole percent (65.0 means 65%).
    Dollar amounts are annual unless noted. The calculation engine
    never mutates an instance; what-if variants are built with
    ``dataclasses.replace``.
    """

    # === Acquisition ===
    purchase_price: float = 5_000_000.0
    closing_costs: float = 150_000.0  # Flat dollar amount
    renovation_budget: float = 0.0

    # === Financing ===
    ltv_pct: float = 65.0
    interest_rate: float = 7.0
    amortization_years: int = 30
    loan_term_years: int = 30
    interest_only: bool = False
    origination_fee_pct: float = 1.0

    # === Income: Residential ===
    unit_mix: List[UnitMixRow] = field(default_factory=_default_unit_mix)
    residential_vacancy_rate: float = 5.0
    concessions: float = 0.0

    # === Income: Commercial ===
    commercial_rent_annual: float = 0.0
    commercial_vacancy_rate: float = 10.0
    commercial_concessions: float = 0.0
    # Overrides commercial_rent_annual when non-empty
    commercial_tenants: List[CommercialTenant] = field(default_factory=list)

    # === Income: Other ===
    late_fees: float = 0.0
    parking_income: float = 0.0
    storage_income: float = 0.0
    pet_deposits: float = 0.0
    pet_rent: float = 0.0
    ev_charging: float = 0.0
    trash_rubs: float = 0.0
    water_rubs: float = 0.0
    cam_recoveries: float = 0.0
    other_misc_income: float = 0.0

    # === Custom line items ===
    custom_income_items: List[CustomLineItem] = field(default_factory=list)
    custom_expense_items: List[CustomLineItem] = field(default_factory=list)

    # === Growth Rates (Annual) ===
    annual_rent_growth: float = 3.0
    annual_expense_growth: float = 2.0

    # === Expenses: Fixed ===
    real_estate_taxes: float = 80_000.0
    insurance: float = 25_600.0
    license_fees: float = 8_800.0
    fire_meter: float = 3_200.0

    # === Expenses: Utilities ===
    electricity_gas: float = 8_800.0
    water_sewer: float = 12_000.0

    # === Expenses: Management & Personnel ===
    management_fee_pct: float = 3.0  # Of total income
    payroll: float = 19_200.0

    # === Expenses: Professional ===
    accounting: float = 4_000.0
    legal: float = 2_000.0
    marketing: float = 15_000.0

    # === Expenses: R&M / Admin ===
    rm_general: float = 28_800.0
    rm_capex_reserve: float = 5_600.0
    general_admin: float = 3_500.0

    # === Expenses: Contract Services ===
    exterminating: float = 2_080.0
    landscaping: float = 16_000.0
    snow_removal: float = 10_000.0
    elevator: float = 0.0
    alarm_monitoring: float = 5_000.0
    telephone_internet: float = 9_000.0
    cleaning: float = 9_600.0
    trash_removal: float = 13_600.0
    other_contract_services: float = 0.0

    # === Exit Assumptions ===
    hold_period_years: int = 5
    exit_cap_rate: float = 5.5
    selling_cost_pct: float = 5.0

    # Audit metadata keyed by expense field name (never affects arithmetic)
    expense_meta: Dict[str, ExpenseLineMeta] = field(default_factory=dict)

    @property
    def total_units(self) -> int:
        """Total residential unit count."""
        return sum(row.count for row in self.unit_mix)
