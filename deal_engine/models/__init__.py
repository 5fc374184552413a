"""Data models for the deal underwriting engine."""

from .deal import (
    ExpenseSource,
    UnitMixRow,
    ExpenseLineMeta,
    CustomLineItem,
    CommercialTenant,
    DealInputs,
)
from .structures import (
    DealStructureType,
    ClosingCostBreakdown,
    TaxReassessment,
    CapRateEstimate,
    StructureBaseInputs,
    AllCashInputs,
    ConventionalInputs,
    BridgeRefiInputs,
    AssumableInputs,
    SyndicationInputs,
    StructuredDealInputs,
)
from .promote import WaterfallTier, PromoteInputs
from .lookups import (
    STRUCTURE_LABELS,
    STRUCTURE_DESCRIPTIONS,
    DEFAULT_MARKET_RATE,
    WaterfallTemplate,
    WATERFALL_TEMPLATES,
    get_waterfall_template,
)

__all__ = [
    "ExpenseSource",
    "UnitMixRow",
    "ExpenseLineMeta",
    "CustomLineItem",
    "CommercialTenant",
    "DealInputs",
    "DealStructureType",
    "ClosingCostBreakdown",
    "TaxReassessment",
    "CapRateEstimate",
    "StructureBaseInputs",
    "AllCashInputs",
    "ConventionalInputs",
    "BridgeRefiInputs",
    "AssumableInputs",
    "SyndicationInputs",
    "StructuredDealInputs",
    "WaterfallTier",
    "PromoteInputs",
    "STRUCTURE_LABELS",
    "STRUCTURE_DESCRIPTIONS",
    "DEFAULT_MARKET_RATE",
    "WaterfallTemplate",
    "WATERFALL_TEMPLATES",
    "get_waterfall_template",
]
