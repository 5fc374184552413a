"""Senior debt sizing and debt service for the base deal model."""

from dataclasses import dataclass

from ..models.deal import DealInputs
from .numeric import interest_only_payment, monthly_payment, remaining_balance


@dataclass
class DebtServiceResult:
    """Senior loan sizing and payments.

    Both the interest-only and amortizing payments are always computed;
    ``interest_only`` on the inputs selects which one is active.
    """

    loan_amount: float
    origination_fee: float
    total_equity: float  # Price - loan + closing + renovation + fee

    io_monthly_payment: float
    io_annual_payment: float
    amort_monthly_payment: float
    amort_annual_payment: float

    # Active payment
    monthly_debt_service: float
    annual_debt_service: float


def calculate_debt_service(inputs: DealInputs) -> DebtServiceResult:
    """Size the senior loan from LTV and compute both payment forms.

    Loan = price x LTV
    Equity = price - loan + closing costs + renovation + origination fee

    Args:
        inputs: Deal inputs.

    Returns:
        DebtServiceResult with IO, amortizing and active payments.

    Example:
        >>> debt = calculate_debt_service(DealInputs())
        >>> debt.loan_amount
        3250000.0
    """
    loan_amount = inputs.purchase_price * (inputs.ltv_pct / 100)
    origination_fee = loan_amount * (inputs.origination_fee_pct / 100)
    total_equity = (
        inputs.purchase_price
        - loan_amount
        + inputs.closing_costs
        + inputs.renovation_budget
        + origination_fee
    )

    io_monthly = interest_only_payment(loan_amount, inputs.interest_rate)
    amort_monthly = monthly_payment(loan_amount, inputs.interest_rate, inputs.amortization_years)

    active_monthly = io_monthly if inputs.interest_only else amort_monthly

    return DebtServiceResult(
        loan_amount=loan_amount,
        origination_fee=origination_fee,
        total_equity=total_equity,
        io_monthly_payment=io_monthly,
        io_annual_payment=io_monthly * 12,
        amort_monthly_payment=amort_monthly,
        amort_annual_payment=amort_monthly * 12,
        monthly_debt_service=active_monthly,
        annual_debt_service=active_monthly * 12,
    )


def loan_balance_at(inputs: DealInputs, loan_amount: float, months_paid: int) -> float:
    """Outstanding senior balance after ``months_paid`` payments.

    An interest-only loan never amortizes, so its balance is the principal.
    """
    if inputs.interest_only:
        return loan_amount
    return remaining_balance(
        loan_amount, inputs.interest_rate, inputs.amortization_years, months_paid
    )
