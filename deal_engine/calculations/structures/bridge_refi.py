"""Bridge-to-refinance (BRRRR): buy with a bridge loan, renovate, refinance.

The bridge period is not modeled month by month. The post-rehab rent bump
applies immediately and the refinance cash-out lands in year 1, so the
whole bridge phase collapses into the year-0/year-1 transition.
"""

from dataclasses import replace

from ...models.lookups import STRUCTURE_LABELS
from ...models.structures import BridgeRefiInputs
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
    resolve_closing_costs,
    selling_costs,
)

# ARV fallback when no exit cap rate is available
RENOVATION_VALUE_MULTIPLIER = 1.5


def calculate_bridge_refi(inputs: BridgeRefiInputs) -> DealAnalysis:
    """Analyze a bridge acquisition followed by a permanent refinance.

    Phase 1: bridge loan = price x bridge LTV, interest-only, plus points.
    Phase 2: gross rent rises by the post-rehab bump.
    Phase 3: refi loan = ARV x refi LTV; cash-out = refi loan - bridge loan.

    Operations, projections and exit all run on the stabilized rent. The
    going-in cap rate uses the pre-rehab NOI.

    Args:
        inputs: Bridge/refi structure inputs.

    Returns:
        DealAnalysis with the refinance fields populated.
    """
    base = inputs.base

    # === Phase 1: Bridge ===
    bridge_loan = base.purchase_price * (inputs.bridge_ltv_pct / 100)
    bridge_points = bridge_loan * (inputs.bridge_origination_pts / 100)
    bridge_monthly_interest = bridge_loan * (inputs.bridge_rate / 100 / 12)
    total_bridge_cost = bridge_monthly_interest * inputs.bridge_term_months + bridge_points

    total_project_cost = (
        base.purchase_price + resolve_closing_costs(base) + base.renovation_budget + bridge_points
    )
    initial_equity = total_project_cost - bridge_loan

    # === Phase 2: Stabilization ===
    stabilized = replace(
        base,
        gross_rental_income=base.gross_rental_income * (1 + inputs.post_rehab_rent_bump / 100),
    )
    stabilized_noi = compute_noi(stabilized)

    # === Phase 3: Permanent refinance ===
    if inputs.arv_override:
        arv = inputs.arv_override
    elif base.exit_cap_rate > 0:
        arv = stabilized_noi / (base.exit_cap_rate / 100)
    else:
        arv = base.purchase_price + base.renovation_budget * RENOVATION_VALUE_MULTIPLIER

    refi_loan = arv * (inputs.refi_ltv_pct / 100)
    cash_out = refi_loan - bridge_loan  # Negative leaves cash in the deal
    cash_left_in_deal = max(0.0, initial_equity - max(0.0, cash_out))

    perm_annual_ds = monthly_payment(refi_loan, inputs.refi_rate, inputs.refi_amortization) * 12

    def loan_balance(year: int) -> float:
        return remaining_balance(refi_loan, inputs.refi_rate, inputs.refi_amortization, year * 12)

    def net_sale_for_price(sale_price: float) -> float:
        return sale_price - selling_costs(sale_price) - loan_balance(base.hold_period)

    cash_flow = stabilized_noi - perm_annual_ds
    effective_equity = cash_left_in_deal if cash_left_in_deal > 0 else 1.0

    projections = build_projections(stabilized, perm_annual_ds, loan_balance)
    cash_flows = [p.cash_flow for p in projections]
    total_cash_flow = sum(cash_flows)

    sale_price = exit_sale_price(stabilized)
    net_sale = net_sale_for_price(sale_price)

    # Year 1 receives the refinance cash-out
    first_cf = cash_flows[0] if cash_flows else 0.0
    irr_flows = [-initial_equity, first_cf + max(0.0, cash_out)]
    for y in range(1, base.hold_period):
        cf = cash_flows[y] if y < len(cash_flows) else 0.0
        if y == base.hold_period - 1:
            cf += net_sale
        irr_flows.append(cf)
    if base.hold_period == 1:
        irr_flows[-1] += net_sale

    equity_multiple = sum(irr_flows[1:]) / initial_equity if initial_equity > 0 else 0.0

    return DealAnalysis(
        structure=inputs.structure,
        label=STRUCTURE_LABELS[inputs.structure],
        total_project_cost=total_project_cost,
        total_debt=refi_loan,
        total_equity=initial_equity,
        noi=stabilized_noi,
        debt_service=perm_annual_ds,
        cash_flow=cash_flow,
        cash_on_cash=cash_flow / effective_equity * 100,
        cap_rate=cap_rate(compute_noi(base), base.purchase_price),
        dscr=stabilized_noi / perm_annual_ds if perm_annual_ds > 0 else 0.0,
        projected_sale_price=sale_price,
        total_cash_flow=total_cash_flow,
        total_profit=net_sale + total_cash_flow - initial_equity,
        equity_multiple=equity_multiple,
        irr=calculate_irr(irr_flows) * 100,
        annualized_return=annualized_return(equity_multiple, base.hold_period),
        break_even_occupancy=break_even_occupancy(stabilized, perm_annual_ds),
        yearly_projections=projections,
        cash_out_on_refi=max(0.0, cash_out),
        cash_left_in_deal=cash_left_in_deal,
        refi_loan_amount=refi_loan,
        total_bridge_cost=total_bridge_cost,
        closing_cost_detail=base.closing_cost_breakdown,
        tax_reassessment=base.tax_reassessment,
        **benchmark_context(
            base,
            exit_noi_estimate(base, projections, stabilized_noi),
            initial_equity,
            cash_flows,
            net_sale_for_price,
        ),
    )
