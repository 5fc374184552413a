"""Shared arithmetic for the structure calculators.

Property-level operations (NOI, projections, exit sale, break-even) depend
only on ``StructureBaseInputs``; financing enters through the annual debt
service and a loan-balance callback.
"""

from typing import Any, Callable, Dict, List, Sequence

import numpy as np

from ...models.lookups import (
    EXIT_CAP_FLOOR,
    EXIT_SPREAD_BASE,
    EXIT_SPREAD_CONSERVATIVE,
    EXIT_SPREAD_OPTIMISTIC,
    STRUCTURE_SELLING_COST_PCT,
)
from ...models.structures import StructureBaseInputs
from ..numeric import calculate_irr, safe_divide
from .analysis import (
    ExitScenarioPoint,
    ExitSensitivity,
    MarketCapRateMeta,
    PenaltyExposure,
    StabilizedUnitImpact,
    YearlyProjection,
)

LoanBalanceFn = Callable[[int], float]


def no_debt(year: int) -> float:
    """Loan balance callback for unlevered structures."""
    return 0.0


def resolve_closing_costs(base: StructureBaseInputs) -> float:
    """Itemized buyer costs when a breakdown is supplied, else price x closing %."""
    if base.closing_cost_breakdown is not None:
        return base.closing_cost_breakdown.total_buyer_costs
    return base.purchase_price * (base.closing_costs_pct / 100)


def compute_noi(base: StructureBaseInputs) -> float:
    """Year-1 NOI = (gross + other) x (1 - vacancy) - total opex."""
    gross = base.gross_potential_income
    effective_income = gross - gross * (base.vacancy_rate / 100)
    return effective_income - base.total_opex


def cap_rate(noi: float, purchase_price: float) -> float:
    """Going-in cap rate in whole percent."""
    return safe_divide(noi, purchase_price) * 100


def selling_costs(sale_price: float) -> float:
    """Broker and transfer costs on sale."""
    return sale_price * (STRUCTURE_SELLING_COST_PCT / 100)


def _gross_income(base: StructureBaseInputs, year_index: int, periods: int) -> float:
    """Gross income for a year, preferring the rent projection when present.

    ``periods`` is the number of growth periods applied to the flat
    baseline and to other income.
    """
    growth = (1 + base.annual_rent_growth / 100) ** periods
    if 0 <= year_index < len(base.rent_projection):
        return base.rent_projection[year_index] + base.other_income * growth
    return base.gross_potential_income * growth


def build_projections(
    base: StructureBaseInputs,
    annual_debt_service: float,
    loan_balance: LoanBalanceFn,
) -> List[YearlyProjection]:
    """Project operations for years 1..hold.

    Income grows at the rent growth rate (or follows the rent projection),
    opex at the expense growth rate plus that year's regulatory penalty.
    Property value caps the following year's NOI at the exit cap rate.

    Args:
        base: Property inputs.
        annual_debt_service: Constant annual debt service.
        loan_balance: Outstanding balance at the end of a given year.

    Returns:
        One YearlyProjection per hold year.
    """
    projections = []
    cumulative = 0.0
    rent_growth = base.annual_rent_growth / 100
    expense_growth = base.annual_expense_growth / 100

    for year in range(1, base.hold_period + 1):
        gross = _gross_income(base, year - 1, year - 1)
        vacancy = gross * (base.vacancy_rate / 100)
        effective_income = gross - vacancy

        opex = base.total_opex * (1 + expense_growth) ** (year - 1)
        if year - 1 < len(base.annual_penalties):
            opex += base.annual_penalties[year - 1]

        noi = effective_income - opex
        cash_flow = noi - annual_debt_service
        cumulative += cash_flow

        forward_noi = noi * (1 + rent_growth)
        property_value = forward_noi / (base.exit_cap_rate / 100) if base.exit_cap_rate > 0 else 0.0

        projections.append(
            YearlyProjection(
                year=year,
                gross_income=gross,
                vacancy=vacancy,
                effective_income=effective_income,
                opex=opex,
                noi=noi,
                debt_service=annual_debt_service,
                cash_flow=cash_flow,
                cumulative_cash_flow=cumulative,
                property_value=property_value,
                equity=property_value - loan_balance(year),
            )
        )

    return projections


def exit_sale_price(base: StructureBaseInputs) -> float:
    """Sale price = year hold+1 NOI / exit cap rate (0 with no cap rate)."""
    hold = base.hold_period
    gross = _gross_income(base, hold - 1, hold)
    effective_income = gross - gross * (base.vacancy_rate / 100)
    opex = base.total_opex * (1 + base.annual_expense_growth / 100) ** hold
    exit_noi = effective_income - opex
    if base.exit_cap_rate <= 0:
        return 0.0
    return exit_noi / (base.exit_cap_rate / 100)


def break_even_occupancy(base: StructureBaseInputs, annual_debt_service: float) -> float:
    """Occupancy needed to cover opex and debt service, clamped to [0, 100]."""
    gross = base.gross_potential_income
    if gross <= 0:
        return 100.0
    required = base.total_opex + annual_debt_service
    return min(100.0, max(0.0, required / gross * 100))


def annualized_return(equity_multiple: float, hold_years: int, floor: bool = True) -> float:
    """Compound annual return implied by an equity multiple.

    With ``floor`` the multiple is clamped at 0.01 first. Unfloored, a
    negative multiple has no real root and is reported as 0.
    """
    if hold_years <= 0:
        return 0.0
    multiple = max(0.01, equity_multiple) if floor else equity_multiple
    with np.errstate(invalid="ignore"):
        value = float((np.power(multiple, 1 / hold_years) - 1) * 100)
    if not np.isfinite(value):
        return 0.0
    return value


def hold_irr_flows(equity: float, cash_flows: Sequence[float], hold_years: int, net_sale: float) -> List[float]:
    """[-equity, cf_1, ..., cf_n + net sale]; missing years count as 0."""
    flows = [-equity]
    for y in range(hold_years):
        cf = cash_flows[y] if y < len(cash_flows) else 0.0
        if y == hold_years - 1:
            cf += net_sale
        flows.append(cf)
    return flows


def exit_noi_estimate(base: StructureBaseInputs, projections: List[YearlyProjection], noi: float) -> float:
    """Forward NOI after the last projected year (year-1 NOI if none)."""
    if not projections:
        return noi
    return projections[-1].noi * (1 + base.annual_rent_growth / 100)


def build_exit_sensitivity(
    market_cap_rate: float,
    exit_noi: float,
    irr_for_sale_price: Callable[[float], float],
) -> ExitSensitivity:
    """Price the exit at optimistic, base and conservative cap rates."""

    def point(cap: float) -> ExitScenarioPoint:
        sale_price = exit_noi / (cap / 100)
        return ExitScenarioPoint(cap_rate=cap, sale_price=sale_price, irr=irr_for_sale_price(sale_price))

    return ExitSensitivity(
        optimistic=point(max(EXIT_CAP_FLOOR, market_cap_rate + EXIT_SPREAD_OPTIMISTIC)),
        base=point(market_cap_rate + EXIT_SPREAD_BASE),
        conservative=point(market_cap_rate + EXIT_SPREAD_CONSERVATIVE),
    )


def benchmark_context(
    base: StructureBaseInputs,
    exit_noi: float,
    equity: float,
    cash_flows: Sequence[float],
    net_sale_for_price: Callable[[float], float],
) -> Dict[str, Any]:
    """Build the optional benchmark fields of a DealAnalysis.

    Returns a dict of keyword arguments: stabilized-unit impact, penalty
    exposure, market cap-rate meta and the exit sensitivity (only with a
    cap-rate estimate, a positive exit NOI and non-zero equity).
    """
    context: Dict[str, Any] = {}

    if base.stabilized_unit_pct is not None and base.stabilized_unit_pct > 0:
        context["stabilized_unit_impact"] = StabilizedUnitImpact(
            stabilized_pct=base.stabilized_unit_pct,
            blended_growth_rate=base.annual_rent_growth,
        )

    if base.annual_penalties:
        total = sum(base.annual_penalties)
        context["penalty_exposure"] = PenaltyExposure(
            total_penalty_over_hold=total,
            avg_annual_penalty=round(total / len(base.annual_penalties)),
            compliance_status="non_compliant" if total > 0 else "compliant",
        )

    estimate = base.cap_rate_estimate
    if estimate is not None:
        context["market_cap_rate_meta"] = MarketCapRateMeta(
            market_cap_rate=estimate.market_cap_rate,
            confidence=estimate.confidence,
            trend=estimate.trend,
            trend_bps_per_year=estimate.trend_bps_per_year,
        )

        if exit_noi > 0 and equity != 0:
            hold = len(cash_flows)

            def irr_for_sale_price(sale_price: float) -> float:
                flows = hold_irr_flows(equity, cash_flows, hold, net_sale_for_price(sale_price))
                return calculate_irr(flows) * 100

            context["exit_sensitivity"] = build_exit_sensitivity(
                estimate.market_cap_rate, exit_noi, irr_for_sale_price
            )

    return context
