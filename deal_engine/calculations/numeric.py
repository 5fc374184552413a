"""Shared numeric kernel: amortization, loan balances, NPV and IRR.

Every calculator in the package (base deal pipeline, structure calculators
and the promote waterfall) uses these functions, so there is exactly one
implementation of each formula.

Rates passed to the loan helpers are annual whole percent (7.0 for 7%).
IRR results are decimal periodic rates (0.12 for 12%).
"""

import logging
from typing import Sequence

import numpy as np
import numpy_financial as npf

logger = logging.getLogger(__name__)

# Newton-Raphson settings
IRR_GUESS = 0.1
IRR_MAX_ITERATIONS = 100
IRR_TOLERANCE = 1e-7
IRR_MIN_DERIVATIVE = 1e-12
IRR_RATE_FLOOR = -0.99
IRR_RATE_CEILING = 10.0
IRR_FLOOR_RESET = -0.5
IRR_CEILING_RESET = 5.0

# Bisection fallback settings
BISECTION_LOW = -0.5
BISECTION_HIGH = 5.0
BISECTION_MAX_ITERATIONS = 200
BISECTION_TOLERANCE = 1e-6


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` when the denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def monthly_rate(annual_rate_pct: float) -> float:
    """Convert an annual whole-percent rate to a decimal monthly rate."""
    return annual_rate_pct / 100 / 12


def monthly_payment(principal: float, annual_rate_pct: float, amortization_years: float) -> float:
    """Calculate the fully-amortizing monthly P&I payment.

    Uses the standard annuity formula. A zero rate spreads principal
    evenly over the amortization period.

    Args:
        principal: Loan amount.
        annual_rate_pct: Annual interest rate in whole percent.
        amortization_years: Amortization period in years.

    Returns:
        Monthly payment (0 for a non-positive principal or term).

    Example:
        >>> round(monthly_payment(1_000_000, 6.0, 30), 2)
        5995.51
    """
    n_payments = amortization_years * 12
    if principal <= 0 or n_payments <= 0:
        return 0.0

    rate = monthly_rate(annual_rate_pct)
    if rate == 0:
        return principal / n_payments

    return -float(npf.pmt(rate=rate, nper=n_payments, pv=principal, fv=0))


def interest_only_payment(principal: float, annual_rate_pct: float) -> float:
    """Calculate the monthly interest-only payment."""
    return principal * monthly_rate(annual_rate_pct)


def remaining_balance(
    principal: float,
    annual_rate_pct: float,
    amortization_years: float,
    months_paid: float,
) -> float:
    """Calculate the remaining balance after ``months_paid`` payments.

    Closed form anchored to the original schedule:
    Balance = P x ((1 + r)^n - (1 + r)^k) / ((1 + r)^n - 1)

    Args:
        principal: Original loan amount.
        annual_rate_pct: Annual interest rate in whole percent.
        amortization_years: Original amortization period in years.
        months_paid: Number of monthly payments made.

    Returns:
        Remaining balance, never negative.
    """
    n_payments = amortization_years * 12
    if principal <= 0 or n_payments <= 0:
        return 0.0

    rate = monthly_rate(annual_rate_pct)
    if rate == 0:
        return max(0.0, principal - (principal / n_payments) * months_paid)

    factor = (1 + rate) ** n_payments
    factor_paid = (1 + rate) ** months_paid
    return max(0.0, principal * (factor - factor_paid) / (factor - 1))


def npv(rate: float, cash_flows: Sequence[float]) -> float:
    """Net present value with the first cash flow at t=0."""
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        return float(np.sum(flows / (1 + rate) ** periods))


def _npv_and_derivative(rate: float, flows: np.ndarray, periods: np.ndarray) -> tuple[float, float]:
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        discount = (1 + rate) ** periods
        value = np.sum(flows / discount)
        derivative = -np.sum(periods[1:] * flows[1:] / (discount[1:] * (1 + rate)))
    return float(value), float(derivative)


def bisection_irr(
    cash_flows: Sequence[float],
    low: float = BISECTION_LOW,
    high: float = BISECTION_HIGH,
    max_iterations: int = BISECTION_MAX_ITERATIONS,
    tolerance: float = BISECTION_TOLERANCE,
) -> float:
    """Find an IRR by bisection over a fixed bracket.

    Narrows toward higher rates while NPV is positive. When no root lies in
    the bracket (e.g., flows without a sign change) the bracket collapses to
    one end and that edge value is returned.
    """
    for _ in range(max_iterations):
        mid = (low + high) / 2
        value = npv(mid, cash_flows)
        if abs(value) < tolerance:
            return mid
        if value > 0:
            low = mid
        else:
            high = mid
    return (low + high) / 2


def calculate_irr(
    cash_flows: Sequence[float],
    guess: float = IRR_GUESS,
    max_iterations: int = IRR_MAX_ITERATIONS,
    tolerance: float = IRR_TOLERANCE,
) -> float:
    """Calculate the internal rate of return of a periodic cash flow series.

    Newton-Raphson from ``guess`` with an analytic derivative. The rate is
    reset to -0.5 if it drops below -0.99 and to 5 if it rises above 10.
    A flat derivative or non-convergence falls back to bisection.

    This never raises and always returns a number. For flows with no sign
    change the result is a bracket edge and carries no economic meaning;
    callers are expected to validate their inputs.

    Args:
        cash_flows: Ordered flows, index 0 typically the (negative) equity.
        guess: Starting rate.
        max_iterations: Newton iteration cap.
        tolerance: |NPV| below which the rate is accepted.

    Returns:
        Periodic IRR as a decimal.

    Example:
        >>> round(calculate_irr([-1000, 1100]), 6)
        0.1
    """
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows), dtype=float)

    rate = guess
    for _ in range(max_iterations):
        value, derivative = _npv_and_derivative(rate, flows, periods)
        if abs(value) < tolerance:
            return rate
        if abs(derivative) < IRR_MIN_DERIVATIVE:
            break
        rate -= value / derivative
        if rate < IRR_RATE_FLOOR:
            rate = IRR_FLOOR_RESET
        if rate > IRR_RATE_CEILING:
            rate = IRR_CEILING_RESET

    logger.debug("Newton IRR did not converge for %d flows; using bisection", len(flows))
    return bisection_irr(cash_flows)


def equity_multiple(distributions: Sequence[float], equity: float) -> float:
    """Total distributions divided by equity invested (0 with no equity)."""
    if equity <= 0:
        return 0.0
    return float(sum(distributions)) / equity
