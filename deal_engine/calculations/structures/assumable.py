"""Assumable mortgage: take over the seller's loan, optionally add a second."""

from ...models.lookups import DEFAULT_MARKET_RATE, STRUCTURE_LABELS
from ...models.structures import AssumableInputs
from ..numeric import calculate_irr, monthly_payment, remaining_balance
from .analysis import DealAnalysis
from .common import (
    annualized_return,
    benchmark_context,
    break_even_occupancy,
    build_projections,
    cap_rate,
    compute_noi,
    exit_noi_estimate,
    exit_sale_price,
    hold_irr_flows,
    resolve_closing_costs,
    selling_costs,
)

DEFAULT_SUPPLEMENTAL_TERM_YEARS = 10


def calculate_assumable(inputs: AssumableInputs) -> DealAnalysis:
    """Analyze a purchase that assumes the existing mortgage.

    The assumed loan keeps its original rate and amortization. Rate savings
    compare its payment with a market-rate payment on the same balance,
    counted for the shorter of the hold and the remaining loan term.

    Args:
        inputs: Assumable structure inputs.

    Returns:
        DealAnalysis with the rate-savings fields populated.
    """
    base = inputs.base
    assumed_balance = inputs.existing_loan_balance
    assumption_fee = assumed_balance * (inputs.assumption_fee / 100)

    assumed_annual_ds = (
        monthly_payment(assumed_balance, inputs.existing_rate, inputs.existing_amortization) * 12
    )

    supp_loan = inputs.supplemental_loan_amount or 0.0
    supp_rate = inputs.supplemental_rate or 0.0
    supp_term = inputs.supplemental_term_years or DEFAULT_SUPPLEMENTAL_TERM_YEARS
    supp_annual_ds = monthly_payment(supp_loan, supp_rate, supp_term) * 12 if supp_loan > 0 else 0.0

    total_debt = assumed_balance + supp_loan
    total_annual_ds = assumed_annual_ds + supp_annual_ds
    total_project_cost = (
        base.purchase_price + resolve_closing_costs(base) + base.renovation_budget + assumption_fee
    )
    total_equity = total_project_cost - total_debt

    # === Rate savings vs. market ===
    market_rate = base.current_market_rate or DEFAULT_MARKET_RATE
    market_annual_ds = monthly_payment(assumed_balance, market_rate, inputs.existing_amortization) * 12
    annual_rate_savings = market_annual_ds - assumed_annual_ds
    total_rate_savings = annual_rate_savings * min(base.hold_period, inputs.existing_term_remaining / 12)

    if total_debt > 0:
        blended_rate = (assumed_balance * inputs.existing_rate + supp_loan * supp_rate) / total_debt
    else:
        blended_rate = inputs.existing_rate

    def loan_balance(year: int) -> float:
        months = year * 12
        balance = remaining_balance(assumed_balance, inputs.existing_rate, inputs.existing_amortization, months)
        if supp_loan > 0:
            balance += remaining_balance(supp_loan, supp_rate, supp_term, months)
        return balance

    def net_sale_for_price(sale_price: float) -> float:
        return sale_price - selling_costs(sale_price) - loan_balance(base.hold_period)

    noi = compute_noi(base)
    cash_flow = noi - total_annual_ds

    projections = build_projections(base, total_annual_ds, loan_balance)
    cash_flows = [p.cash_flow for p in projections]
    total_cash_flow = sum(cash_flows)

    sale_price = exit_sale_price(base)
    net_sale = net_sale_for_price(sale_price)

    equity_multiple = (total_cash_flow + net_sale) / total_equity if total_equity > 0 else 0.0
    irr_flows = hold_irr_flows(total_equity, cash_flows, base.hold_period, net_sale)

    breakdown = base.closing_cost_breakdown

    return DealAnalysis(
        structure=inputs.structure,
        label=STRUCTURE_LABELS[inputs.structure],
        total_project_cost=total_project_cost,
        total_debt=total_debt,
        total_equity=total_equity,
        noi=noi,
        debt_service=total_annual_ds,
        cash_flow=cash_flow,
        cash_on_cash=cash_flow / total_equity * 100 if total_equity > 0 else 0.0,
        cap_rate=cap_rate(noi, base.purchase_price),
        dscr=noi / total_annual_ds if total_annual_ds > 0 else 0.0,
        projected_sale_price=sale_price,
        total_cash_flow=total_cash_flow,
        total_profit=net_sale + total_cash_flow - total_equity,
        equity_multiple=equity_multiple,
        irr=calculate_irr(irr_flows) * 100,
        annualized_return=annualized_return(equity_multiple, base.hold_period),
        break_even_occupancy=break_even_occupancy(base, total_annual_ds),
        yearly_projections=projections,
        annual_rate_savings=annual_rate_savings,
        total_rate_savings=total_rate_savings,
        blended_rate=blended_rate,
        mrt_savings=breakdown.mrt_savings if breakdown is not None else 0.0,
        closing_cost_detail=breakdown,
        tax_reassessment=base.tax_reassessment,
        **benchmark_context(
            base,
            exit_noi_estimate(base, projections, noi),
            total_equity,
            cash_flows,
            net_sale_for_price,
        ),
    )
