"""Tests for the shared numeric kernel."""

import math

import pytest

from deal_engine.calculations.numeric import (
    BISECTION_HIGH,
    BISECTION_LOW,
    bisection_irr,
    calculate_irr,
    equity_multiple,
    interest_only_payment,
    monthly_payment,
    npv,
    remaining_balance,
    safe_divide,
)


class TestMonthlyPayment:
    """Tests for the amortizing payment formula."""

    def test_standard_thirty_year_payment(self):
        """$1M at 6% over 30 years pays about $5,995.51 a month."""
        assert monthly_payment(1_000_000, 6.0, 30) == pytest.approx(5995.51, abs=0.01)

    def test_zero_rate_spreads_principal_evenly(self):
        """A zero rate falls back to principal / number of payments."""
        assert monthly_payment(120_000, 0.0, 10) == pytest.approx(1000.0)

    def test_non_positive_principal_or_term_pays_nothing(self):
        """No loan or no term means no payment."""
        assert monthly_payment(0, 7.0, 30) == 0.0
        assert monthly_payment(-5_000, 7.0, 30) == 0.0
        assert monthly_payment(1_000_000, 7.0, 0) == 0.0

    def test_interest_only_payment(self):
        """IO payment is principal x annual rate / 12."""
        assert interest_only_payment(3_250_000, 7.0) == pytest.approx(3_250_000 * 0.07 / 12)


class TestRemainingBalance:
    """Tests for loan balance after a number of payments."""

    @pytest.mark.parametrize("rate", [3.5, 7.0, 10.0])
    @pytest.mark.parametrize("years", [10, 25, 30])
    def test_balance_reaches_zero_at_maturity(self, rate, years):
        """A fully amortizing loan is repaid after amortization x 12 payments."""
        assert remaining_balance(2_000_000, rate, years, years * 12) == pytest.approx(0.0, abs=0.01)

    def test_balance_before_first_payment_is_principal(self):
        """No payments made leaves the full principal outstanding."""
        assert remaining_balance(3_250_000, 7.0, 30, 0) == pytest.approx(3_250_000)

    def test_balance_declines_over_time(self):
        """Balance decreases with every year of payments."""
        balances = [remaining_balance(3_250_000, 7.0, 30, y * 12) for y in range(0, 31, 5)]
        assert all(a > b for a, b in zip(balances, balances[1:]))

    def test_zero_rate_is_linear(self):
        """At 0% half the term repays half the principal."""
        assert remaining_balance(120_000, 0.0, 10, 60) == pytest.approx(60_000)

    def test_balance_never_negative(self):
        """Paying beyond the term is floored at zero."""
        assert remaining_balance(120_000, 0.0, 10, 200) == 0.0
        assert remaining_balance(1_000_000, 6.0, 30, 400) == 0.0

    def test_balance_matches_payment_schedule(self):
        """Closed form agrees with iterating the monthly schedule."""
        principal, rate, years = 1_000_000, 6.0, 30
        payment = monthly_payment(principal, rate, years)
        balance = principal
        for _ in range(60):
            balance = balance * (1 + rate / 100 / 12) - payment
        assert remaining_balance(principal, rate, years, 60) == pytest.approx(balance, abs=0.01)


class TestIRR:
    """Tests for the IRR solver."""

    def test_single_period_irr(self):
        """-1000 then +1100 is a 10% return."""
        assert calculate_irr([-1000, 1100]) == pytest.approx(0.10, abs=1e-6)

    @pytest.mark.parametrize(
        "flows",
        [
            [-1_000, 300, 400, 500, 200],
            [-1_932_500, 60_000, 65_000, 70_000, 75_000, 2_400_000],
            [-100, 10, 10, 10, 10, 110],
            [-500_000, -20_000, 50_000, 60_000, 900_000],
            [-1_000, 100, 100],  # Negative IRR
        ],
    )
    def test_npv_at_irr_is_zero(self, flows):
        """Discounting every flow at the returned rate nets to ~0."""
        rate = calculate_irr(flows)
        assert abs(npv(rate, flows)) < 1e-4

    def test_coupon_bond_irr_equals_coupon(self):
        """A par bond's IRR is its coupon rate."""
        assert calculate_irr([-100, 10, 10, 10, 10, 110]) == pytest.approx(0.10, abs=1e-6)

    def test_all_positive_flows_return_bracket_edge(self):
        """No sign change still returns a finite number (meaningless but unflagged)."""
        flows = [1_000, 100, 100]
        rate = calculate_irr(flows)
        assert isinstance(rate, float)
        assert math.isfinite(rate)
        assert BISECTION_LOW <= rate <= BISECTION_HIGH
        assert abs(npv(rate, flows)) > 1e-4

    def test_all_negative_flows_return_bracket_edge(self):
        """All-negative flows also return a finite rate inside the bracket."""
        rate = calculate_irr([-1_000, -100, -100])
        assert math.isfinite(rate)
        assert BISECTION_LOW <= rate <= BISECTION_HIGH

    def test_bisection_finds_root_inside_bracket(self):
        """The fallback solver agrees with Newton on a well-behaved vector."""
        flows = [-1_000, 300, 400, 500, 200]
        assert bisection_irr(flows) == pytest.approx(calculate_irr(flows), abs=1e-4)

    def test_irr_is_deterministic(self):
        """Same flows give the same rate."""
        flows = [-1_000, 300, 400, 500, 200]
        assert calculate_irr(flows) == calculate_irr(list(flows))


class TestRatios:
    """Tests for the guarded ratio helpers."""

    def test_safe_divide_zero_denominator(self):
        """Division by zero returns the default."""
        assert safe_divide(100, 0) == 0.0
        assert safe_divide(100, 0, default=-1.0) == -1.0
        assert safe_divide(100, 4) == 25.0

    def test_equity_multiple(self):
        """Distributions over equity, zero when no equity."""
        assert equity_multiple([500, 1_500], 1_000) == pytest.approx(2.0)
        assert equity_multiple([500, 1_500], 0) == 0.0

    def test_npv_at_zero_rate_is_sum(self):
        """At 0% NPV is the plain sum."""
        assert npv(0.0, [-100, 50, 50]) == pytest.approx(0.0)
