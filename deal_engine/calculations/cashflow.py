"""Year-by-year operating cash flow projection for the hold period."""

from dataclasses import dataclass
from typing import List, Optional

from ..models.deal import DealInputs
from .debt import DebtServiceResult, calculate_debt_service
from .expenses import calculate_expenses
from .revenue import calculate_income


@dataclass
class CashFlowYear:
    """Single year of the projected operating statement."""

    year: int  # 1-indexed
    gpr: float
    vacancy: float
    other_income: float
    egi: float
    expenses: float
    noi: float
    debt_service: float
    cash_flow: float
    cumulative_cash_flow: float


def build_cash_flow_series(
    inputs: DealInputs,
    debt: Optional[DebtServiceResult] = None,
) -> List[CashFlowYear]:
    """Project operating cash flow for each year of the hold.

    For year index y = 0..hold-1:
    - GPR, vacancy and other income grow at (1 + rent growth)^y
    - Non-management expenses grow at (1 + expense growth)^y
    - Management fee is recomputed on that year's EGI
    - Debt service is the active payment, held constant

    Args:
        inputs: Deal inputs.
        debt: Precomputed debt service (computed from inputs if omitted).

    Returns:
        One CashFlowYear per hold year (empty for a zero hold).
    """
    if debt is None:
        debt = calculate_debt_service(inputs)

    income = calculate_income(inputs)
    base_expenses = calculate_expenses(inputs, income.total_income)

    base_gpr = income.gross_potential_rent
    base_vacancy = income.vacancy_loss
    base_other = income.total_other_income
    base_non_mgmt = base_expenses.non_management_expenses

    rent_growth = inputs.annual_rent_growth / 100
    expense_growth = inputs.annual_expense_growth / 100
    mgmt_pct = inputs.management_fee_pct / 100

    series = []
    cumulative = 0.0

    for y in range(inputs.hold_period_years):
        rent_factor = (1 + rent_growth) ** y
        gpr = base_gpr * rent_factor
        vacancy = base_vacancy * rent_factor
        other_income = base_other * rent_factor
        egi = gpr - vacancy + other_income

        mgmt_fee = egi * mgmt_pct
        expenses = base_non_mgmt * (1 + expense_growth) ** y + mgmt_fee

        noi = egi - expenses
        cash_flow = noi - debt.annual_debt_service
        cumulative += cash_flow

        series.append(
            CashFlowYear(
                year=y + 1,
                gpr=gpr,
                vacancy=vacancy,
                other_income=other_income,
                egi=egi,
                expenses=expenses,
                noi=noi,
                debt_service=debt.annual_debt_service,
                cash_flow=cash_flow,
                cumulative_cash_flow=cumulative,
            )
        )

    return series
