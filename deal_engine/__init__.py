"""Real-estate acquisition underwriting engine.

Base deal pipeline (NOI, debt, cash flow, returns, sensitivity), financing
structure comparison and GP/LP promote waterfalls. All calculations are
pure functions of dataclass inputs.
"""

import logging

from .models import (
    DealInputs,
    StructureBaseInputs,
    DealStructureType,
    PromoteInputs,
    WaterfallTier,
)
from .calculations import (
    calculate_all,
    DealOutputs,
    calculate_deal_structure,
    compare_deal_structures,
    get_default_structure_inputs,
    DealAnalysis,
    calculate_promote,
    calculate_promote_sensitivity,
    PromoteOutputs,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DealInputs",
    "StructureBaseInputs",
    "DealStructureType",
    "PromoteInputs",
    "WaterfallTier",
    "calculate_all",
    "DealOutputs",
    "calculate_deal_structure",
    "compare_deal_structures",
    "get_default_structure_inputs",
    "DealAnalysis",
    "calculate_promote",
    "calculate_promote_sensitivity",
    "PromoteOutputs",
]
