"""Structure dispatch, default terms and side-by-side comparison."""

import concurrent.futures
import logging
import multiprocessing
from dataclasses import fields, replace
from typing import Any, List, Mapping, Optional, Sequence, Union

from ...models.lookups import DEFAULT_MARKET_RATE
from ...models.structures import (
    AllCashInputs,
    AssumableInputs,
    BridgeRefiInputs,
    ConventionalInputs,
    DealStructureType,
    StructureBaseInputs,
    StructuredDealInputs,
    SyndicationInputs,
)
from .all_cash import calculate_all_cash
from .analysis import DealAnalysis
from .assumable import calculate_assumable
from .bridge_refi import calculate_bridge_refi
from .conventional import calculate_conventional
from .syndication import calculate_syndication

logger = logging.getLogger(__name__)

StructureKey = Union[DealStructureType, str]

# Share of price assumed to be the seller's outstanding balance
DEFAULT_ASSUMABLE_BALANCE_PCT = 0.6

_BASE_FIELDS = frozenset(f.name for f in fields(StructureBaseInputs))


def calculate_deal_structure(inputs: StructuredDealInputs) -> DealAnalysis:
    """Run the calculator matching the variant's structure tag.

    Args:
        inputs: One of the five structure input variants.

    Returns:
        DealAnalysis for that structure.

    Raises:
        ValueError: If ``inputs`` is not a known structure variant.
    """
    structure = getattr(inputs, "structure", None)
    logger.debug("Dispatching structure %s", structure)

    if structure == DealStructureType.ALL_CASH:
        return calculate_all_cash(inputs)
    elif structure == DealStructureType.CONVENTIONAL:
        return calculate_conventional(inputs)
    elif structure == DealStructureType.BRIDGE_REFI:
        return calculate_bridge_refi(inputs)
    elif structure == DealStructureType.ASSUMABLE:
        return calculate_assumable(inputs)
    elif structure == DealStructureType.SYNDICATION:
        return calculate_syndication(inputs)
    else:
        raise ValueError(f"Unknown deal structure: {structure!r}")


def get_default_structure_inputs(
    structure_type: StructureKey,
    base: StructureBaseInputs,
) -> StructuredDealInputs:
    """Build a structure variant with standard terms for ``base``.

    Debt is priced at ``base.current_market_rate`` (7% when absent).

    Args:
        structure_type: Structure to build.
        base: Property inputs shared by all structures.

    Returns:
        The structure's input variant.

    Raises:
        ValueError: If ``structure_type`` is not a known structure.
    """
    structure = DealStructureType(structure_type)
    market_rate = base.current_market_rate or DEFAULT_MARKET_RATE
    base = replace(base)

    if structure == DealStructureType.ALL_CASH:
        return AllCashInputs(base=base)

    elif structure == DealStructureType.CONVENTIONAL:
        return ConventionalInputs(
            base=base,
            ltv_pct=75,
            interest_rate=market_rate,
            amortization_years=30,
            loan_term_years=10,
            is_interest_only=False,
            loan_origination_pct=1,
        )

    elif structure == DealStructureType.BRIDGE_REFI:
        return BridgeRefiInputs(
            base=base,
            bridge_ltv_pct=80,
            bridge_rate=10,
            bridge_term_months=24,
            bridge_origination_pts=2,
            bridge_interest_only=True,
            stabilization_months=6,
            post_rehab_rent_bump=20,
            refi_ltv_pct=75,
            refi_rate=market_rate,
            refi_amortization=30,
            refi_term_years=10,
        )

    elif structure == DealStructureType.ASSUMABLE:
        return AssumableInputs(
            base=base,
            existing_loan_balance=round(base.purchase_price * DEFAULT_ASSUMABLE_BALANCE_PCT),
            existing_rate=3.5,
            existing_term_remaining=300,
            existing_amortization=30,
            assumption_fee=1,
        )

    else:
        return SyndicationInputs(
            base=base,
            gp_equity_pct=10,
            lp_equity_pct=90,
            acquisition_fee_pct=2,
            asset_management_fee_pct=1.5,
            disposition_fee_pct=1,
            refinance_fee_pct=0.5,
            construction_mgmt_fee_pct=5,
            preferred_return=8,
            gp_promote_above_pref=20,
            irr_hurdle=15,
            gp_promote_above_hurdle=30,
            ltv_pct=65,
            interest_rate=market_rate,
            amortization_years=30,
            loan_term_years=10,
        )


def apply_overrides(inputs: StructuredDealInputs, overrides: Mapping[str, Any]) -> StructuredDealInputs:
    """Return a copy of ``inputs`` with fields replaced by name.

    Names may refer to the variant's own fields or to any field of its
    ``base``.

    Raises:
        ValueError: If a name matches neither.
    """
    variant_fields = {f.name for f in fields(inputs)} - {"base"}
    variant_changes = {}
    base_changes = {}

    for name, value in overrides.items():
        if name in variant_fields:
            variant_changes[name] = value
        elif name in _BASE_FIELDS:
            base_changes[name] = value
        else:
            raise ValueError(f"Unknown override field for {inputs.structure.value}: {name}")

    if base_changes:
        variant_changes["base"] = replace(inputs.base, **base_changes)
    return replace(inputs, **variant_changes)


def compare_deal_structures(
    base: StructureBaseInputs,
    structure_types: Sequence[StructureKey],
    overrides: Optional[Mapping[StructureKey, Mapping[str, Any]]] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> List[DealAnalysis]:
    """Analyze the same property under several financing structures.

    Each structure starts from its default terms, then any per-structure
    overrides are applied.

    Args:
        base: Property inputs shared by all structures.
        structure_types: Structures to analyze, in output order.
        overrides: Optional field overrides keyed by structure.
        parallel: Compute structures on a ThreadPoolExecutor.
        max_workers: Max parallel workers (None = CPU count, capped at 8).

    Returns:
        One DealAnalysis per requested structure, in request order.
    """
    normalized = {
        DealStructureType(key): values for key, values in (overrides or {}).items()
    }

    variants = []
    for structure_type in structure_types:
        structure = DealStructureType(structure_type)
        variant = get_default_structure_inputs(structure, base)
        if structure in normalized:
            variant = apply_overrides(variant, normalized[structure])
        variants.append(variant)

    if parallel:
        workers = max_workers or min(multiprocessing.cpu_count(), 8)
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(calculate_deal_structure, v) for v in variants]
            return [future.result() for future in futures]

    return [calculate_deal_structure(v) for v in variants]

