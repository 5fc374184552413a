"""Tests for the multi-tier GP/LP promote waterfall."""

from dataclasses import replace

import pytest

from deal_engine.calculations.cashflow import CashFlowYear
from deal_engine.calculations.deal import calculate_all
from deal_engine.calculations.promote import (
    calculate_promote,
    calculate_promote_sensitivity,
    calculate_promote_sensitivity_cell,
)
from deal_engine.models.lookups import WATERFALL_TEMPLATES, get_waterfall_template
from deal_engine.models.promote import PromoteInputs, WaterfallTier


def run_waterfall(deal_inputs, promote_inputs, yearly_cash, exit_proceeds=0.0, total_equity=1_000_000):
    """Run the waterfall over a hand-built cash flow schedule."""
    inputs = replace(deal_inputs, hold_period_years=len(yearly_cash))
    outputs = calculate_all(inputs, include_sensitivity=False)
    cash_flows = [
        CashFlowYear(
            year=i + 1, gpr=0, vacancy=0, other_income=0, egi=0, expenses=0, noi=cf,
            debt_service=0, cash_flow=cf, cumulative_cash_flow=0,
        )
        for i, cf in enumerate(yearly_cash)
    ]
    outputs = replace(outputs, cash_flows=cash_flows, exit_proceeds=exit_proceeds, total_equity=total_equity)
    return calculate_promote(inputs, outputs, promote_inputs)


class TestPrefAndSplit:
    """Tests for the preferred return followed by a profit split."""

    def test_scenario_b(self, deal_inputs, promote_inputs):
        """$900K LP at 8% pref then 30/70 on $100K of cash."""
        result = run_waterfall(deal_inputs, promote_inputs, [100_000])
        year = result.year_distributions[0]

        assert result.lp_equity == pytest.approx(900_000)
        assert year.lp_pref == pytest.approx(72_000)
        assert year.gp_share == pytest.approx(8_400)
        assert year.lp_share == pytest.approx(19_600)
        assert year.lp_total == pytest.approx(91_600)
        assert year.gp_total == pytest.approx(8_400)
        assert year.pref_shortfall == 0

    def test_shortfall_carries_forward(self, deal_inputs, promote_inputs):
        """Unpaid pref is owed the next year before any split."""
        result = run_waterfall(deal_inputs, promote_inputs, [50_000, 200_000])
        first, second = result.year_distributions

        assert first.lp_pref == pytest.approx(50_000)
        assert first.pref_shortfall == pytest.approx(22_000)
        assert first.gp_total == 0

        assert second.lp_pref == pytest.approx(94_000)
        assert second.pref_shortfall == pytest.approx(0)
        assert second.gp_share == pytest.approx(106_000 * 0.30)
        assert second.lp_share == pytest.approx(106_000 * 0.70)

    def test_negative_cash_distributes_nothing(self, deal_inputs, promote_inputs):
        """Distributable cash is floored at zero."""
        result = run_waterfall(deal_inputs, promote_inputs, [-25_000, 100_000])
        first = result.year_distributions[0]

        assert first.distributable_cash == 0
        assert first.lp_total == 0
        assert first.gp_total == 0

    def test_exit_proceeds_in_final_year(self, deal_inputs, promote_inputs):
        """Net sale proceeds join the last year's distributable cash."""
        result = run_waterfall(deal_inputs, promote_inputs, [80_000, 80_000], exit_proceeds=1_500_000)
        assert result.year_distributions[-1].distributable_cash == pytest.approx(1_580_000)

    def test_cash_flow_vectors(self, deal_inputs, promote_inputs):
        """GP/LP flows start with their negative equity."""
        result = run_waterfall(deal_inputs, promote_inputs, [100_000, 100_000], exit_proceeds=1_200_000)

        assert result.gp_cash_flows[0] == pytest.approx(-100_000)
        assert result.lp_cash_flows[0] == pytest.approx(-900_000)
        assert result.lp_cash_flows[1:] == [d.lp_total for d in result.year_distributions]
        assert result.lp_equity_multiple == pytest.approx(sum(result.lp_cash_flows[1:]) / 900_000)


class TestTiers:
    """Tests for catch-up, hurdles and leftover cash."""

    def test_catch_up(self, deal_inputs):
        """GP takes the catch-up share of what remains after the pref."""
        promote = get_waterfall_template("Standard 70/30").to_promote_inputs()
        year = run_waterfall(deal_inputs, promote, [100_000]).year_distributions[0]

        assert year.lp_pref == pytest.approx(72_000)
        assert year.gp_catch_up == pytest.approx(14_000)
        assert year.gp_share == pytest.approx(4_200)
        assert year.lp_share == pytest.approx(9_800)
        assert year.gp_promote == pytest.approx(18_200 - 10_000)

    def test_hurdle_tier_skipped_below_hurdle(self, deal_inputs):
        """A hurdle tier the LP cannot reach this year is skipped and the cash goes pro-rata."""
        promote = PromoteInputs(
            gp_equity_pct=10,
            lp_equity_pct=90,
            waterfall_tiers=[WaterfallTier("Above 15%", gp_split_pct=50, lp_split_pct=50, irr_hurdle=15)],
        )
        year = run_waterfall(deal_inputs, promote, [100_000]).year_distributions[0]

        assert year.gp_total == pytest.approx(10_000)
        assert year.lp_total == pytest.approx(90_000)
        assert year.gp_promote == pytest.approx(0)

    def test_hurdle_tier_activates_once_cleared(self, deal_inputs):
        """After the LP's IRR-to-date clears the hurdle the tier applies."""
        promote = PromoteInputs(
            gp_equity_pct=10,
            lp_equity_pct=90,
            waterfall_tiers=[WaterfallTier("Above 15%", gp_split_pct=50, lp_split_pct=50, irr_hurdle=15)],
        )
        # Year 1 pays the LP 1.2M on 900K of equity, well above 15%
        result = run_waterfall(deal_inputs, promote, [2_400_000, 100_000])
        first, second = result.year_distributions

        assert first.lp_total == pytest.approx(1_200_000)
        assert second.gp_total == pytest.approx(50_000)
        assert second.lp_total == pytest.approx(50_000)

    def test_hurdle_counts_current_year_in_one_year_hold(self, deal_inputs):
        """A single-year hold clears the hurdle on the LP's pending share of that year."""
        promote = PromoteInputs(
            gp_equity_pct=10,
            lp_equity_pct=90,
            waterfall_tiers=[WaterfallTier("Above 15%", gp_split_pct=50, lp_split_pct=50, irr_hurdle=15)],
        )
        # Pro-rata the LP would receive 1.35M on 900K, a 50% IRR
        year = run_waterfall(deal_inputs, promote, [1_500_000]).year_distributions[0]

        assert year.gp_total == pytest.approx(750_000)
        assert year.lp_total == pytest.approx(750_000)
        assert year.gp_promote == pytest.approx(600_000)

    def test_negative_hurdle_applies_to_losing_year(self, deal_inputs):
        """A negative hurdle is cleared once the pending LP share beats it, even at a loss."""
        promote = PromoteInputs(
            gp_equity_pct=10,
            lp_equity_pct=90,
            waterfall_tiers=[
                WaterfallTier("Above -10%", gp_split_pct=50, lp_split_pct=50, irr_hurdle=-10),
                WaterfallTier("Split", gp_split_pct=20, lp_split_pct=80),
            ],
        )
        # 900K pending on 900K of LP equity is a 0% IRR
        cleared = run_waterfall(deal_inputs, promote, [1_000_000]).year_distributions[0]
        assert cleared.gp_share == pytest.approx(500_000)
        assert cleared.lp_share == pytest.approx(500_000)

        # 450K pending is a -50% IRR, so the split tier takes everything
        skipped = run_waterfall(deal_inputs, promote, [500_000]).year_distributions[0]
        assert skipped.gp_share == pytest.approx(100_000)
        assert skipped.lp_share == pytest.approx(400_000)

    def test_pro_rata_earns_no_promote(self, deal_inputs):
        """Splitting at the equity ratio leaves no promote."""
        outputs = calculate_all(deal_inputs, include_sensitivity=False)
        promote = get_waterfall_template("Simple Pro-Rata").to_promote_inputs()
        result = calculate_promote(deal_inputs, outputs, promote)
        assert result.gp_promote_earned == pytest.approx(0, abs=1e-6)


class TestConservation:
    """Tests that every distributed dollar is accounted for."""

    @pytest.mark.parametrize("template", WATERFALL_TEMPLATES, ids=lambda t: t.name)
    def test_lp_plus_gp_equals_distributable(self, deal_inputs, template):
        """lp_total + gp_total == distributable cash every year."""
        outputs = calculate_all(deal_inputs, include_sensitivity=False)
        result = calculate_promote(deal_inputs, outputs, template.to_promote_inputs())

        assert len(result.year_distributions) == deal_inputs.hold_period_years
        for year in result.year_distributions:
            assert year.lp_total + year.gp_total == pytest.approx(year.distributable_cash)

    @pytest.mark.parametrize("template", WATERFALL_TEMPLATES, ids=lambda t: t.name)
    def test_shortfall_cleared_by_exit(self, deal_inputs, template):
        """Sale proceeds pay off any accrued pref."""
        outputs = calculate_all(deal_inputs, include_sensitivity=False)
        result = calculate_promote(deal_inputs, outputs, template.to_promote_inputs())
        assert result.year_distributions[-1].pref_shortfall == pytest.approx(0)

    def test_cumulative_totals(self, deal_inputs, promote_inputs):
        """Cumulative columns are running sums."""
        outputs = calculate_all(deal_inputs, include_sensitivity=False)
        result = calculate_promote(deal_inputs, outputs, promote_inputs)
        last = result.year_distributions[-1]

        assert last.lp_cumulative == pytest.approx(sum(d.lp_total for d in result.year_distributions))
        assert last.gp_cumulative == pytest.approx(sum(d.gp_total for d in result.year_distributions))

    def test_distributions_frame(self, deal_inputs, promote_inputs):
        """Distributions as a DataFrame indexed by year."""
        outputs = calculate_all(deal_inputs, include_sensitivity=False)
        frame = calculate_promote(deal_inputs, outputs, promote_inputs).distributions_frame()

        assert list(frame.index) == [1, 2, 3, 4, 5]
        assert "pref_shortfall" in frame.columns


class TestPromoteSensitivity:
    """Tests for the exit cap x rent growth promote grid."""

    def test_grid_shape_and_labels(self, deal_inputs, promote_inputs):
        """Five exit caps by five rent growth rates."""
        grid = calculate_promote_sensitivity(deal_inputs, promote_inputs)

        assert len(grid.rows) == 5
        assert all(len(row) == 5 for row in grid.rows)
        assert grid.exit_cap_labels == ["4.5%", "5.0%", "5.5%", "6.0%", "6.5%"]
        assert grid.rent_growth_labels == ["2.0%", "2.5%", "3.0%", "3.5%", "4.0%"]

    def test_center_cell_matches_base_run(self, deal_inputs, promote_inputs):
        """Zero deltas reproduce the base waterfall."""
        base = calculate_promote(deal_inputs, calculate_all(deal_inputs), promote_inputs)
        cell = calculate_promote_sensitivity_cell(deal_inputs, promote_inputs, 0, 0)

        assert cell.gp_irr == base.gp_irr
        assert cell.lp_irr == base.lp_irr
        assert cell.lp_multiple == base.lp_equity_multiple

    def test_parallel_matches_serial(self, deal_inputs, promote_inputs):
        """Thread-pool grid equals the serial grid."""
        serial = calculate_promote_sensitivity(deal_inputs, promote_inputs)
        parallel = calculate_promote_sensitivity(deal_inputs, promote_inputs, parallel=True, max_workers=4)
        assert parallel == serial

    def test_to_frame(self, deal_inputs, promote_inputs):
        """One metric as a labelled DataFrame."""
        grid = calculate_promote_sensitivity(deal_inputs, promote_inputs, [0], [-1, 0, 1])
        frame = grid.to_frame("gp_irr")

        assert frame.shape == (1, 3)
        assert frame.loc["5.5%", "3.0%"] == grid.rows[0][1].gp_irr

    def test_to_frame_unknown_metric(self, deal_inputs, promote_inputs):
        """Only SensitivityCell fields can be tabulated."""
        grid = calculate_promote_sensitivity(deal_inputs, promote_inputs, [0], [0])
        with pytest.raises(ValueError):
            grid.to_frame("npv")


class TestTemplates:
    """Tests for the built-in waterfall templates."""

    @pytest.mark.parametrize("template", WATERFALL_TEMPLATES, ids=lambda t: t.name)
    def test_equity_split_sums_to_100(self, template):
        assert template.gp_equity_pct + template.lp_equity_pct == 100

    def test_lookup_by_name(self):
        assert get_waterfall_template("JV 50/50").gp_equity_pct == 50

    def test_unknown_template_raises(self):
        with pytest.raises(KeyError):
            get_waterfall_template("Nonexistent")
