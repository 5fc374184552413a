"""Lookup tables and default terms for the deal engine."""

from dataclasses import dataclass
from typing import Dict, List

from .structures import DealStructureType
from .promote import PromoteInputs, WaterfallTier


STRUCTURE_LABELS: Dict[DealStructureType, str] = {
    DealStructureType.ALL_CASH: "All Cash",
    DealStructureType.CONVENTIONAL: "Conventional",
    DealStructureType.BRIDGE_REFI: "Bridge → Refi",
    DealStructureType.ASSUMABLE: "Assumable",
    DealStructureType.SYNDICATION: "Syndication",
}

STRUCTURE_DESCRIPTIONS: Dict[DealStructureType, str] = {
    DealStructureType.ALL_CASH: "No leverage, 100% equity",
    DealStructureType.CONVENTIONAL: "Standard bank financing",
    DealStructureType.BRIDGE_REFI: "Value-add: acquire, renovate, refinance",
    DealStructureType.ASSUMABLE: "Take over the seller’s low-rate mortgage",
    DealStructureType.SYNDICATION: "Multi-investor partnership structure",
}

# Used when no current market mortgage rate is supplied
DEFAULT_MARKET_RATE = 7.0

# Structure engine sells at a fixed broker/transfer cost
STRUCTURE_SELLING_COST_PCT = 5.0

# Base-engine sensitivity axes
EXIT_CAP_DELTAS: List[float] = [-1.0, -0.5, 0.0, 0.5, 1.0]
PRICE_DELTAS_PCT: List[float] = [-10.0, -5.0, 0.0, 5.0, 10.0]

# Promote sensitivity axes
PROMOTE_EXIT_CAP_DELTAS: List[float] = [-1.0, -0.5, 0.0, 0.5, 1.0]
PROMOTE_RENT_GROWTH_DELTAS: List[float] = [-1.0, -0.5, 0.0, 0.5, 1.0]

# Structure-engine exit sensitivity spreads over the market cap rate (pct points)
EXIT_SPREAD_OPTIMISTIC = -0.50
EXIT_SPREAD_BASE = 0.25
EXIT_SPREAD_CONSERVATIVE = 0.75
EXIT_CAP_FLOOR = 2.0


@dataclass
class WaterfallTemplate:
    """Named, ready-made waterfall."""

    name: str
    gp_equity_pct: float
    lp_equity_pct: float
    tiers: List[WaterfallTier]

    def to_promote_inputs(self) -> PromoteInputs:
        """Build PromoteInputs from this template."""
        return PromoteInputs(
            gp_equity_pct=self.gp_equity_pct,
            lp_equity_pct=self.lp_equity_pct,
            waterfall_tiers=list(self.tiers),
        )


WATERFALL_TEMPLATES: List[WaterfallTemplate] = [
    WaterfallTemplate(
        name="Standard 70/30",
        gp_equity_pct=10,
        lp_equity_pct=90,
        tiers=[
            WaterfallTier("LP Preferred Return", pref_rate=8, gp_split_pct=0, lp_split_pct=100),
            WaterfallTier("GP Catch-Up", catch_up_pct=50, gp_split_pct=100, lp_split_pct=0),
            WaterfallTier("Profit Split", gp_split_pct=30, lp_split_pct=70),
        ],
    ),
    WaterfallTemplate(
        name="Conservative 80/20",
        gp_equity_pct=5,
        lp_equity_pct=95,
        tiers=[
            WaterfallTier("LP Preferred Return", pref_rate=10, gp_split_pct=0, lp_split_pct=100),
            WaterfallTier("Profit Split", gp_split_pct=20, lp_split_pct=80),
        ],
    ),
    WaterfallTemplate(
        name="Aggressive GP",
        gp_equity_pct=20,
        lp_equity_pct=80,
        tiers=[
            WaterfallTier("LP Preferred Return", pref_rate=6, gp_split_pct=0, lp_split_pct=100),
            WaterfallTier("GP Catch-Up", catch_up_pct=100, gp_split_pct=100, lp_split_pct=0),
            WaterfallTier("Profit Split", gp_split_pct=40, lp_split_pct=60),
            WaterfallTier("Above 15% IRR", gp_split_pct=50, lp_split_pct=50, irr_hurdle=15),
        ],
    ),
    WaterfallTemplate(
        name="Simple Pro-Rata",
        gp_equity_pct=10,
        lp_equity_pct=90,
        tiers=[
            WaterfallTier("Pro-Rata Split", gp_split_pct=10, lp_split_pct=90),
        ],
    ),
    WaterfallTemplate(
        name="JV 50/50",
        gp_equity_pct=50,
        lp_equity_pct=50,
        tiers=[
            WaterfallTier("Preferred Return", pref_rate=8, gp_split_pct=0, lp_split_pct=100),
            WaterfallTier("Profit Split", gp_split_pct=50, lp_split_pct=50),
        ],
    ),
]


def get_waterfall_template(name: str) -> WaterfallTemplate:
    """Look up a waterfall template by name.

    Args:
        name: Template name (e.g., "Standard 70/30").

    Returns:
        The matching WaterfallTemplate.

    Raises:
        KeyError: If no template has that name.
    """
    for template in WATERFALL_TEMPLATES:
        if template.name == name:
            return template
    raise KeyError(f"Unknown waterfall template: {name}")
