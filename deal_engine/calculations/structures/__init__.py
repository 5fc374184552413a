"""Financing-structure calculators: all cash, conventional, bridge/refi,
assumable and syndication."""

from .analysis import (
    DealAnalysis,
    YearlyProjection,
    ExitScenarioPoint,
    ExitSensitivity,
    MarketCapRateMeta,
    PenaltyExposure,
    StabilizedUnitImpact,
)
from .all_cash import calculate_all_cash
from .conventional import calculate_conventional
from .bridge_refi import calculate_bridge_refi
from .assumable import calculate_assumable
from .syndication import calculate_syndication
from .dispatcher import (
    calculate_deal_structure,
    compare_deal_structures,
    get_default_structure_inputs,
    apply_overrides,
)

__all__ = [
    "DealAnalysis",
    "YearlyProjection",
    "ExitScenarioPoint",
    "ExitSensitivity",
    "MarketCapRateMeta",
    "PenaltyExposure",
    "StabilizedUnitImpact",
    "calculate_all_cash",
    "calculate_conventional",
    "calculate_bridge_refi",
    "calculate_assumable",
    "calculate_syndication",
    "calculate_deal_structure",
    "compare_deal_structures",
    "get_default_structure_inputs",
    "apply_overrides",
]
