"""Tests for debt sizing, cash flow projection, returns and the unified deal run."""

import copy
from dataclasses import replace

import pytest

from deal_engine.calculations.cashflow import build_cash_flow_series
from deal_engine.calculations.deal import calculate_all
from deal_engine.calculations.debt import calculate_debt_service, loan_balance_at
from deal_engine.calculations.expenses import calculate_noi
from deal_engine.calculations.metrics import calculate_returns
from deal_engine.calculations.numeric import npv


class TestDebtService:
    """Tests for senior loan sizing."""

    def test_loan_and_equity(self, deal_inputs):
        """Loan is price x LTV; equity covers the rest plus costs."""
        debt = calculate_debt_service(deal_inputs)

        assert debt.loan_amount == pytest.approx(3_250_000)
        assert debt.origination_fee == pytest.approx(32_500)
        assert debt.total_equity == pytest.approx(1_932_500)

    def test_amortizing_is_active_by_default(self, deal_inputs):
        """Amortizing payment is active unless interest-only is set."""
        debt = calculate_debt_service(deal_inputs)

        assert debt.annual_debt_service == pytest.approx(debt.amort_annual_payment)
        assert debt.io_annual_payment == pytest.approx(227_500)
        assert debt.amort_annual_payment > debt.io_annual_payment

    def test_interest_only_selects_io_payment(self, deal_inputs):
        """Interest-only loans pay loan x rate."""
        debt = calculate_debt_service(replace(deal_inputs, interest_only=True))
        assert debt.annual_debt_service == pytest.approx(227_500)
        assert debt.monthly_debt_service == pytest.approx(227_500 / 12)

    def test_interest_only_balance_never_amortizes(self, deal_inputs):
        """An IO loan still owes the full principal at exit."""
        inputs = replace(deal_inputs, interest_only=True)
        assert loan_balance_at(inputs, 3_250_000, 60) == 3_250_000

    def test_zero_rate_loan(self, deal_inputs):
        """0% debt amortizes linearly with no interest."""
        debt = calculate_debt_service(replace(deal_inputs, interest_rate=0))
        assert debt.amort_annual_payment == pytest.approx(3_250_000 / 30)
        assert debt.io_annual_payment == 0.0


class TestSourcesUses:
    """Tests for the acquisition sources and uses table."""

    def test_sources_equal_uses(self, deal_inputs):
        """Both sides balance."""
        outputs = calculate_all(deal_inputs, include_sensitivity=False)
        assert outputs.sources_uses.is_balanced()
        assert outputs.sources_uses.total_uses == pytest.approx(5_000_000 + 150_000 + 32_500)

    def test_renovation_line_only_when_budgeted(self, deal_inputs):
        """Renovation appears in uses only when non-zero."""
        without = calculate_all(deal_inputs, include_sensitivity=False)
        with_reno = calculate_all(replace(deal_inputs, renovation_budget=250_000), include_sensitivity=False)

        assert [u.label for u in without.uses] == ["Purchase Price", "Closing Costs", "Origination Fee"]
        assert with_reno.uses[-1].label == "Renovation"
        assert with_reno.sources_uses.is_balanced()


class TestCashFlowSeries:
    """Tests for the hold-period projection."""

    def test_one_row_per_hold_year(self, deal_inputs):
        """Series length equals the hold period."""
        series = build_cash_flow_series(deal_inputs)
        assert [cf.year for cf in series] == [1, 2, 3, 4, 5]

    def test_zero_hold_is_empty(self, deal_inputs):
        """A zero hold produces no years."""
        assert build_cash_flow_series(replace(deal_inputs, hold_period_years=0)) == []

    def test_year_one_matches_current_noi(self, deal_inputs):
        """Without concessions or commercial space, year 1 NOI is today's NOI."""
        series = build_cash_flow_series(deal_inputs)
        assert series[0].noi == pytest.approx(calculate_noi(deal_inputs).noi)

    def test_precomputed_debt_matches_default(self, deal_inputs):
        """Passing the debt service explicitly gives the same series as omitting it."""
        debt = calculate_debt_service(deal_inputs)
        assert build_cash_flow_series(deal_inputs, debt=debt) == build_cash_flow_series(deal_inputs)

    def test_income_grows_at_rent_growth(self, deal_inputs):
        """GPR compounds at the annual rent growth rate."""
        series = build_cash_flow_series(deal_inputs)
        assert series[2].gpr == pytest.approx(585_600 * 1.03 ** 2)

    def test_management_fee_tracks_egi(self, deal_inputs):
        """Year expenses = grown non-management expenses + fee on that year's EGI."""
        inputs = replace(deal_inputs, annual_expense_growth=0)
        series = build_cash_flow_series(inputs)
        mgmt_pct = inputs.management_fee_pct / 100

        non_mgmt_y1 = series[0].expenses - series[0].egi * mgmt_pct
        non_mgmt_y4 = series[3].expenses - series[3].egi * mgmt_pct
        assert non_mgmt_y4 == pytest.approx(non_mgmt_y1)

    def test_cumulative_cash_flow(self, deal_inputs):
        """Cumulative cash flow is the running sum."""
        series = build_cash_flow_series(deal_inputs)
        assert series[-1].cumulative_cash_flow == pytest.approx(sum(cf.cash_flow for cf in series))

    def test_cash_flow_is_noi_less_debt_service(self, deal_inputs):
        """Each year's cash flow is NOI - debt service."""
        for cf in build_cash_flow_series(deal_inputs):
            assert cf.cash_flow == pytest.approx(cf.noi - cf.debt_service)


class TestReturns:
    """Tests for yields and exit returns."""

    def test_cap_rate(self, deal_inputs):
        """Cap rate = NOI / price, in whole percent."""
        returns = calculate_returns(deal_inputs)
        noi = calculate_noi(deal_inputs).noi
        assert returns.cap_rate == pytest.approx(noi / 5_000_000 * 100)

    def test_exit_value_uses_final_year_noi(self, deal_inputs):
        """Exit value = final-year NOI / exit cap rate."""
        returns = calculate_returns(deal_inputs)
        final_noi = build_cash_flow_series(deal_inputs)[-1].noi

        assert returns.exit_noi == pytest.approx(final_noi)
        assert returns.exit_value == pytest.approx(final_noi / 0.055)
        assert returns.exit_proceeds == pytest.approx(
            returns.exit_value - returns.selling_costs - returns.loan_balance_at_exit
        )

    def test_irr_cash_flow_vector(self, deal_inputs):
        """[-equity, cf_1, ..., cf_n + exit proceeds]."""
        returns = calculate_returns(deal_inputs)
        series = build_cash_flow_series(deal_inputs)
        flows = returns.irr_cash_flows

        assert len(flows) == 6
        assert flows[0] == pytest.approx(-1_932_500)
        assert flows[-1] == pytest.approx(series[-1].cash_flow + returns.exit_proceeds)

    def test_irr_discounts_to_zero(self, deal_inputs):
        """The reported IRR zeroes the NPV of the equity flows."""
        returns = calculate_returns(deal_inputs)
        assert abs(npv(returns.irr / 100, returns.irr_cash_flows)) < 1e-4

    def test_equity_multiple(self, deal_inputs):
        """Equity multiple is total distributions / equity."""
        returns = calculate_returns(deal_inputs)
        assert returns.equity_multiple == pytest.approx(sum(returns.irr_cash_flows[1:]) / 1_932_500)

    def test_unlevered_deal_guards_ratios(self, deal_inputs):
        """No debt gives zero DSCR and debt yield rather than an error."""
        returns = calculate_returns(replace(deal_inputs, ltv_pct=0))
        assert returns.dscr == 0.0
        assert returns.debt_yield == 0.0
        assert returns.cash_on_cash > 0

    def test_zero_price_guards_cap_rate(self, deal_inputs):
        """A zero price reports a zero cap rate."""
        assert calculate_returns(replace(deal_inputs, purchase_price=0)).cap_rate == 0.0

    def test_zero_hold_uses_current_noi(self, deal_inputs):
        """With no projection the exit is priced on today's NOI."""
        returns = calculate_returns(replace(deal_inputs, hold_period_years=0))
        assert returns.exit_noi == pytest.approx(calculate_noi(deal_inputs).noi)

    def test_exit_monotonicity(self, deal_inputs):
        """Higher exit cap rates lower exit value and never raise IRR."""
        results = [
            calculate_returns(replace(deal_inputs, exit_cap_rate=cap))
            for cap in [4.5, 5.0, 5.5, 6.0, 6.5, 7.0]
        ]
        for lower, higher in zip(results, results[1:]):
            assert higher.exit_value < lower.exit_value
            assert higher.irr <= lower.irr


class TestCalculateAll:
    """Tests for the unified deal calculation."""

    def test_scenario_a(self, deal_inputs):
        """Reference deal produces the expected headline figures."""
        outputs = calculate_all(deal_inputs)

        assert outputs.gross_potential_residential_rent == 585_600
        assert outputs.loan_amount == pytest.approx(3_250_000)
        assert outputs.noi == outputs.total_income - outputs.total_expenses
        assert outputs.cap_rate == pytest.approx(outputs.noi / 5_000_000 * 100)
        assert len(outputs.cash_flows) == 5

    def test_determinism(self, deal_inputs):
        """Identical inputs give identical outputs."""
        assert calculate_all(deal_inputs) == calculate_all(deal_inputs)

    def test_inputs_not_mutated(self, deal_inputs):
        """The calculation leaves its inputs untouched."""
        before = copy.deepcopy(deal_inputs)
        calculate_all(deal_inputs)
        assert deal_inputs == before

    def test_sensitivity_can_be_skipped(self, deal_inputs):
        """include_sensitivity=False leaves an empty grid and the same returns."""
        full = calculate_all(deal_inputs)
        light = calculate_all(deal_inputs, include_sensitivity=False)

        assert light.sensitivity.rows == []
        assert light.irr == full.irr

    def test_cash_flow_frame(self, deal_inputs):
        """Projection as a DataFrame indexed by year."""
        frame = calculate_all(deal_inputs, include_sensitivity=False).cash_flow_frame()

        assert list(frame.index) == [1, 2, 3, 4, 5]
        assert frame.index.name == "year"
        assert "noi" in frame.columns
