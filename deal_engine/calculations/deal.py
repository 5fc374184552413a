"""Unified entry point for the base deal calculation.

``calculate_all`` runs income, expenses, NOI, debt, cash flow projection,
return metrics, the sensitivity grid and sources/uses for one set of
``DealInputs`` and returns a single ``DealOutputs``.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import List, Optional

import pandas as pd

from ..models.deal import DealInputs
from .cashflow import CashFlowYear, build_cash_flow_series
from .debt import calculate_debt_service
from .expenses import ExpenseDetailRow, calculate_noi
from .metrics import calculate_returns
from .sensitivity import SensitivityGrid, calculate_sensitivity
from .sources_uses import LineItem, SourcesUses, calculate_sources_uses

logger = logging.getLogger(__name__)


@dataclass
class DealOutputs:
    """Complete results of a deal calculation.

    Money values are annual dollars; percentages are whole percent.
    Values are unrounded, so NOI = total income - total expenses exactly.
    """

    # === Income ===
    gross_potential_residential_rent: float
    residential_vacancy_loss: float
    concessions_loss: float
    net_residential_income: float
    gross_potential_commercial_rent: float
    commercial_vacancy_loss: float
    commercial_concessions_loss: float
    net_commercial_income: float
    net_rentable_income: float
    total_other_income: float
    total_income: float

    # Aggregate aliases
    gross_potential_rent: float
    vacancy_loss: float
    effective_gross_income: float

    # === Expenses ===
    expense_details: List[ExpenseDetailRow]
    total_expenses: float
    management_fee: float

    noi: float

    # === Financing ===
    loan_amount: float
    annual_debt_service: float
    monthly_debt_service: float
    io_annual_payment: float
    amort_annual_payment: float
    total_equity: float
    origination_fee: float

    # === Returns ===
    cap_rate: float
    cash_on_cash_io: float
    cash_on_cash_amort: float
    cash_on_cash: float
    irr: float
    dscr: float
    debt_yield: float
    equity_multiple: float
    net_income_io: float
    net_income_amort: float

    cash_flows: List[CashFlowYear]

    # === Exit ===
    exit_noi: float
    exit_value: float
    selling_costs: float
    loan_balance_at_exit: float
    exit_proceeds: float

    sensitivity: SensitivityGrid
    sources_uses: SourcesUses = field(default_factory=SourcesUses)

    @property
    def sources(self) -> List[LineItem]:
        return self.sources_uses.sources

    @property
    def uses(self) -> List[LineItem]:
        return self.sources_uses.uses

    def cash_flow_frame(self) -> pd.DataFrame:
        """Return the annual projection as a DataFrame indexed by year."""
        frame = pd.DataFrame([asdict(cf) for cf in self.cash_flows])
        if frame.empty:
            return frame
        return frame.set_index("year")


def calculate_all(
    inputs: DealInputs,
    parallel: bool = False,
    max_workers: Optional[int] = None,
    include_sensitivity: bool = True,
) -> DealOutputs:
    """Run the full deal calculation.

    Args:
        inputs: Deal inputs (not modified).
        parallel: Compute sensitivity cells on a thread pool.
        max_workers: Max workers for the sensitivity grid.
        include_sensitivity: Build the sensitivity grid (an empty grid otherwise).

    Returns:
        DealOutputs.

    Example:
        >>> outputs = calculate_all(DealInputs())
        >>> outputs.loan_amount
        3250000.0
    """
    logger.debug("Calculating deal: price=%.0f hold=%d", inputs.purchase_price, inputs.hold_period_years)

    noi_result = calculate_noi(inputs)
    income = noi_result.income
    expenses = noi_result.expenses

    debt = calculate_debt_service(inputs)
    returns = calculate_returns(inputs)
    cash_flows = build_cash_flow_series(inputs, debt)
    if include_sensitivity:
        sensitivity = calculate_sensitivity(inputs, parallel=parallel, max_workers=max_workers)
    else:
        sensitivity = SensitivityGrid()

    return DealOutputs(
        gross_potential_residential_rent=income.gross_potential_residential_rent,
        residential_vacancy_loss=income.residential_vacancy_loss,
        concessions_loss=income.concessions_loss,
        net_residential_income=income.net_residential_income,
        gross_potential_commercial_rent=income.gross_potential_commercial_rent,
        commercial_vacancy_loss=income.commercial_vacancy_loss,
        commercial_concessions_loss=income.commercial_concessions_loss,
        net_commercial_income=income.net_commercial_income,
        net_rentable_income=income.net_rentable_income,
        total_other_income=income.total_other_income,
        total_income=income.total_income,
        gross_potential_rent=income.gross_potential_rent,
        vacancy_loss=income.vacancy_loss,
        effective_gross_income=income.effective_gross_income,
        expense_details=expenses.expense_details,
        total_expenses=expenses.total_expenses,
        management_fee=expenses.management_fee,
        noi=noi_result.noi,
        loan_amount=debt.loan_amount,
        annual_debt_service=debt.annual_debt_service,
        monthly_debt_service=debt.monthly_debt_service,
        io_annual_payment=debt.io_annual_payment,
        amort_annual_payment=debt.amort_annual_payment,
        total_equity=debt.total_equity,
        origination_fee=debt.origination_fee,
        cap_rate=returns.cap_rate,
        cash_on_cash_io=returns.cash_on_cash_io,
        cash_on_cash_amort=returns.cash_on_cash_amort,
        cash_on_cash=returns.cash_on_cash,
        irr=returns.irr,
        dscr=returns.dscr,
        debt_yield=returns.debt_yield,
        equity_multiple=returns.equity_multiple,
        net_income_io=returns.net_income_io,
        net_income_amort=returns.net_income_amort,
        cash_flows=cash_flows,
        exit_noi=returns.exit_noi,
        exit_value=returns.exit_value,
        selling_costs=returns.selling_costs,
        loan_balance_at_exit=returns.loan_balance_at_exit,
        exit_proceeds=returns.exit_proceeds,
        sensitivity=sensitivity,
        sources_uses=calculate_sources_uses(inputs, debt),
    )
