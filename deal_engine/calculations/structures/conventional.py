"""Conventional financing: a single senior loan sized off LTV."""

from ...models.lookups import STRUCTURE_LABELS
from ...models.structures import ConventionalInputs
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


def calculate_conventional(inputs: ConventionalInputs) -> DealAnalysis:
    """Analyze a purchase with one senior mortgage.

    Loan = price x LTV. The origination fee is part of the project cost.
    Interest-only loans pay loan x rate per year and never amortize.

    Args:
        inputs: Conventional structure inputs.

    Returns:
        DealAnalysis.
    """
    base = inputs.base
    loan_amount = base.purchase_price * (inputs.ltv_pct / 100)
    origination_fee = loan_amount * (inputs.loan_origination_pct / 100)
    total_project_cost = (
        base.purchase_price + resolve_closing_costs(base) + base.renovation_budget + origination_fee
    )
    total_equity = total_project_cost - loan_amount

    if inputs.is_interest_only:
        annual_ds = loan_amount * (inputs.interest_rate / 100)
    else:
        annual_ds = monthly_payment(loan_amount, inputs.interest_rate, inputs.amortization_years) * 12

    def loan_balance(year: int) -> float:
        if inputs.is_interest_only:
            return loan_amount
        return remaining_balance(loan_amount, inputs.interest_rate, inputs.amortization_years, year * 12)

    def net_sale_for_price(sale_price: float) -> float:
        return sale_price - selling_costs(sale_price) - loan_balance(base.hold_period)

    noi = compute_noi(base)
    cash_flow = noi - annual_ds

    projections = build_projections(base, annual_ds, loan_balance)
    cash_flows = [p.cash_flow for p in projections]
    total_cash_flow = sum(cash_flows)

    sale_price = exit_sale_price(base)
    net_sale = net_sale_for_price(sale_price)

    equity_multiple = (total_cash_flow + net_sale) / total_equity if total_equity > 0 else 0.0
    irr_flows = hold_irr_flows(total_equity, cash_flows, base.hold_period, net_sale)

    return DealAnalysis(
        structure=inputs.structure,
        label=STRUCTURE_LABELS[inputs.structure],
        total_project_cost=total_project_cost,
        total_debt=loan_amount,
        total_equity=total_equity,
        noi=noi,
        debt_service=annual_ds,
        cash_flow=cash_flow,
        cash_on_cash=cash_flow / total_equity * 100 if total_equity > 0 else 0.0,
        cap_rate=cap_rate(noi, base.purchase_price),
        dscr=noi / annual_ds if annual_ds > 0 else 0.0,
        projected_sale_price=sale_price,
        total_cash_flow=total_cash_flow,
        total_profit=net_sale + total_cash_flow - total_equity,
        equity_multiple=equity_multiple,
        irr=calculate_irr(irr_flows) * 100,
        annualized_return=annualized_return(equity_multiple, base.hold_period),
        break_even_occupancy=break_even_occupancy(base, annual_ds),
        yearly_projections=projections,
        closing_cost_detail=base.closing_cost_breakdown,
        tax_reassessment=base.tax_reassessment,
        **benchmark_context(
            base,
            exit_noi_estimate(base, projections, noi),
            total_equity,
            cash_flows,
            net_sale_for_price,
        ),
    )
