"""All-cash acquisition: no leverage, equity funds the full project cost."""

from ...models.lookups import STRUCTURE_LABELS
from ...models.structures import AllCashInputs
from ..numeric import calculate_irr
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
    no_debt,
    resolve_closing_costs,
    selling_costs,
)


def _net_sale(sale_price: float) -> float:
    return sale_price - selling_costs(sale_price)


def calculate_all_cash(inputs: AllCashInputs) -> DealAnalysis:
    """Analyze an unlevered purchase.

    Equity = price + closing costs + renovation, debt service is zero and
    cash flow equals NOI. The IRR is the unlevered IRR.

    Args:
        inputs: All-cash structure inputs.

    Returns:
        DealAnalysis.
    """
    base = inputs.base
    total_project_cost = base.purchase_price + resolve_closing_costs(base) + base.renovation_budget
    total_equity = total_project_cost

    noi = compute_noi(base)
    sale_price = exit_sale_price(base)
    net_sale = _net_sale(sale_price)

    projections = build_projections(base, 0.0, no_debt)
    cash_flows = [p.cash_flow for p in projections]
    total_cash_flow = sum(cash_flows)

    equity_multiple = (total_cash_flow + net_sale) / total_equity if total_equity > 0 else 0.0
    irr_flows = hold_irr_flows(total_equity, cash_flows, base.hold_period, net_sale)

    return DealAnalysis(
        structure=inputs.structure,
        label=STRUCTURE_LABELS[inputs.structure],
        total_project_cost=total_project_cost,
        total_debt=0.0,
        total_equity=total_equity,
        noi=noi,
        debt_service=0.0,
        cash_flow=noi,
        cash_on_cash=noi / total_equity * 100 if total_equity > 0 else 0.0,
        cap_rate=cap_rate(noi, base.purchase_price),
        dscr=0.0,
        projected_sale_price=sale_price,
        total_cash_flow=total_cash_flow,
        total_profit=net_sale + total_cash_flow - total_equity,
        equity_multiple=equity_multiple,
        irr=calculate_irr(irr_flows) * 100,
        # An unlevered multiple is reported without the 0.01 floor
        annualized_return=annualized_return(equity_multiple, base.hold_period, floor=False),
        break_even_occupancy=break_even_occupancy(base, 0.0),
        yearly_projections=projections,
        closing_cost_detail=base.closing_cost_breakdown,
        tax_reassessment=base.tax_reassessment,
        **benchmark_context(
            base,
            exit_noi_estimate(base, projections, noi),
            total_equity,
            cash_flows,
            _net_sale,
        ),
    )
