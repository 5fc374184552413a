"""Syndication: GP/LP partnership with sponsor fees and a simple waterfall.

The waterfall here is a fixed two-tier model (LP preferred return, then a
GP promote on the excess, raised at exit if the LP clears an IRR hurdle).
The configurable multi-tier waterfall lives in ``calculations.promote``.
"""

from typing import List

from ...models.lookups import STRUCTURE_LABELS
from ...models.structures import SyndicationInputs
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


def calculate_syndication(inputs: SyndicationInputs) -> DealAnalysis:
    """Analyze a syndicated purchase and split returns between GP and LP.

    Fees:
    - Acquisition fee (% of price) and construction-management fee
      (% of renovation) are capitalized into the project cost
    - Asset-management fee (% of that year's gross income) comes out of
      each year's cash flow
    - Disposition fee (% of sale price) is added to selling costs

    Each year the LP receives its preferred return first; the excess is
    split with the GP taking ``gp_promote_above_pref``. At exit, capital
    is returned LP first, then GP, and the remaining profit is split at
    ``gp_promote_above_hurdle`` if a trial LP IRR beats ``irr_hurdle``.
    The GP receives the acquisition fee in year 1.

    Args:
        inputs: Syndication structure inputs.

    Returns:
        DealAnalysis with the GP/LP and fee fields populated.
    """
    base = inputs.base
    gross_income = base.gross_potential_income

    loan_amount = base.purchase_price * (inputs.ltv_pct / 100)
    acquisition_fee = base.purchase_price * (inputs.acquisition_fee_pct / 100)
    construction_mgmt_fee = base.renovation_budget * (inputs.construction_mgmt_fee_pct / 100)
    total_project_cost = (
        base.purchase_price
        + resolve_closing_costs(base)
        + base.renovation_budget
        + acquisition_fee
        + construction_mgmt_fee
    )
    total_equity = total_project_cost - loan_amount
    gp_equity = total_equity * (inputs.gp_equity_pct / 100)
    lp_equity = total_equity * (inputs.lp_equity_pct / 100)

    annual_ds = monthly_payment(loan_amount, inputs.interest_rate, inputs.amortization_years) * 12
    noi = compute_noi(base)
    asset_mgmt_fee = gross_income * (inputs.asset_management_fee_pct / 100)
    cash_flow_after_fees = noi - annual_ds - asset_mgmt_fee

    def loan_balance(year: int) -> float:
        return remaining_balance(loan_amount, inputs.interest_rate, inputs.amortization_years, year * 12)

    projections = build_projections(base, annual_ds, loan_balance)
    cash_flows = [p.cash_flow for p in projections]
    total_cash_flow = sum(cash_flows)

    sale_price = exit_sale_price(base)
    disposition_fee = sale_price * (inputs.disposition_fee_pct / 100)
    net_sale = sale_price - selling_costs(sale_price) - disposition_fee - loan_balance(base.hold_period)

    total_fees = (
        acquisition_fee
        + construction_mgmt_fee
        + asset_mgmt_fee * base.hold_period
        + disposition_fee
    )

    # === Inline waterfall ===
    lp_flows: List[float] = [-lp_equity]
    gp_flows: List[float] = [-gp_equity]
    annual_pref = lp_equity * (inputs.preferred_return / 100)

    for y in range(base.hold_period):
        year_gross = gross_income * (1 + base.annual_rent_growth / 100) ** y
        year_asset_fee = year_gross * (inputs.asset_management_fee_pct / 100)
        year_cf = (cash_flows[y] if y < len(cash_flows) else 0.0) - year_asset_fee

        lp_from_pref = min(max(0.0, year_cf), annual_pref)
        excess = max(0.0, year_cf - annual_pref)
        gp_promote = excess * (inputs.gp_promote_above_pref / 100)
        lp_from_excess = excess - gp_promote
        gp_fee = acquisition_fee if y == 0 else 0.0

        if y == base.hold_period - 1:
            lp_capital = min(net_sale, lp_equity)
            gp_capital = min(max(0.0, net_sale - lp_equity), gp_equity)
            exit_excess = max(0.0, net_sale - lp_equity - gp_equity)

            # Trial LP IRR with the excess split at the above-hurdle share
            trial_lp_share = (100 - inputs.gp_promote_above_hurdle) / 100
            trial_flows = lp_flows + [lp_from_pref + lp_from_excess + lp_capital + exit_excess * trial_lp_share]
            above_hurdle = calculate_irr(trial_flows) * 100 > inputs.irr_hurdle

            exit_gp_pct = inputs.gp_promote_above_hurdle if above_hurdle else inputs.gp_promote_above_pref
            gp_from_exit = exit_excess * (exit_gp_pct / 100)
            lp_from_exit = exit_excess - gp_from_exit

            lp_flows.append(lp_from_pref + lp_from_excess + lp_capital + lp_from_exit)
            gp_flows.append(gp_promote + gp_capital + gp_from_exit + gp_fee)
        else:
            lp_flows.append(lp_from_pref + lp_from_excess)
            gp_flows.append(gp_promote + gp_fee)

    gp_total_return = sum(gp_flows[1:])
    lp_total_return = sum(lp_flows[1:])

    equity_multiple = (total_cash_flow + net_sale) / total_equity if total_equity > 0 else 0.0
    irr_flows = hold_irr_flows(total_equity, cash_flows, base.hold_period, net_sale)

    def net_sale_for_price(price: float) -> float:
        # Exit sensitivity ignores the disposition fee
        return price - selling_costs(price) - loan_balance(base.hold_period)

    return DealAnalysis(
        structure=inputs.structure,
        label=STRUCTURE_LABELS[inputs.structure],
        total_project_cost=total_project_cost,
        total_debt=loan_amount,
        total_equity=total_equity,
        noi=noi,
        debt_service=annual_ds,
        cash_flow=cash_flow_after_fees,
        cash_on_cash=cash_flow_after_fees / total_equity * 100 if total_equity > 0 else 0.0,
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
        gp_total_return=gp_total_return,
        lp_total_return=lp_total_return,
        gp_irr=calculate_irr(gp_flows) * 100,
        lp_irr=calculate_irr(lp_flows) * 100,
        gp_equity_multiple=gp_total_return / gp_equity if gp_equity > 0 else 0.0,
        lp_equity_multiple=lp_total_return / lp_equity if lp_equity > 0 else 0.0,
        total_fees=total_fees,
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
