"""Return metrics: cap rate, cash-on-cash, DSCR, debt yield, IRR and exit."""

from dataclasses import dataclass, field
from typing import List

from ..models.deal import DealInputs
from .cashflow import CashFlowYear, build_cash_flow_series
from .debt import calculate_debt_service, loan_balance_at
from .expenses import calculate_noi
from .numeric import calculate_irr, equity_multiple, safe_divide


@dataclass
class ReturnMetrics:
    """Return metrics for a deal. Percentages are whole percent."""

    cap_rate: float
    cash_on_cash_io: float
    cash_on_cash_amort: float
    cash_on_cash: float  # Reported default (amortizing)
    irr: float
    dscr: float  # On amortizing debt service
    debt_yield: float
    equity_multiple: float
    net_income_io: float
    net_income_amort: float

    # Exit
    exit_noi: float
    exit_value: float
    selling_costs: float
    loan_balance_at_exit: float
    exit_proceeds: float

    irr_cash_flows: List[float] = field(default_factory=list)


def build_irr_cash_flows(
    total_equity: float,
    cash_flows: List[CashFlowYear],
    hold_years: int,
    exit_proceeds: float,
) -> List[float]:
    """Equity cash flow vector: [-equity, cf_1, ..., cf_n + exit proceeds]."""
    flows = [-total_equity]
    for y in range(hold_years):
        cf = cash_flows[y].cash_flow if y < len(cash_flows) else 0.0
        if y == hold_years - 1:
            cf += exit_proceeds
        flows.append(cf)
    return flows


def calculate_returns(inputs: DealInputs) -> ReturnMetrics:
    """Calculate year-1 yields and hold-period returns.

    Exit value = final-year NOI / exit cap rate. Exit proceeds are the
    exit value less selling costs and the outstanding loan balance.
    Every ratio with a zero denominator is reported as 0.

    Args:
        inputs: Deal inputs.

    Returns:
        ReturnMetrics including the IRR cash flow vector.
    """
    noi = calculate_noi(inputs).noi
    debt = calculate_debt_service(inputs)

    cap_rate = safe_divide(noi, inputs.purchase_price) * 100

    net_income_io = noi - debt.io_annual_payment
    net_income_amort = noi - debt.amort_annual_payment
    if debt.total_equity > 0:
        coc_io = net_income_io / debt.total_equity * 100
        coc_amort = net_income_amort / debt.total_equity * 100
    else:
        coc_io = coc_amort = 0.0

    dscr = safe_divide(noi, debt.amort_annual_payment)
    debt_yield = safe_divide(noi, debt.loan_amount) * 100

    # === Exit ===
    hold_years = inputs.hold_period_years
    cash_flows = build_cash_flow_series(inputs, debt)

    exit_noi = cash_flows[hold_years - 1].noi if cash_flows else noi
    exit_value = exit_noi / (inputs.exit_cap_rate / 100) if inputs.exit_cap_rate > 0 else 0.0
    selling_costs = exit_value * (inputs.selling_cost_pct / 100)
    balance = loan_balance_at(inputs, debt.loan_amount, hold_years * 12)
    exit_proceeds = exit_value - selling_costs - balance

    irr_flows = build_irr_cash_flows(debt.total_equity, cash_flows, hold_years, exit_proceeds)

    return ReturnMetrics(
        cap_rate=cap_rate,
        cash_on_cash_io=coc_io,
        cash_on_cash_amort=coc_amort,
        cash_on_cash=coc_amort,
        irr=calculate_irr(irr_flows) * 100,
        dscr=dscr,
        debt_yield=debt_yield,
        equity_multiple=equity_multiple(irr_flows[1:], debt.total_equity),
        net_income_io=net_income_io,
        net_income_amort=net_income_amort,
        exit_noi=exit_noi,
        exit_value=exit_value,
        selling_costs=selling_costs,
        loan_balance_at_exit=balance,
        exit_proceeds=exit_proceeds,
        irr_cash_flows=irr_flows,
    )
