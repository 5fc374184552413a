"""Sources and uses of funds at acquisition."""

from dataclasses import dataclass, field
from typing import List

from ..models.deal import DealInputs
from .debt import DebtServiceResult


@dataclass
class LineItem:
    """Labelled dollar amount."""

    label: str
    amount: float


@dataclass
class SourcesUses:
    """Capital stack at closing.

    Sources:
        Senior Debt, Equity

    Uses:
        Purchase Price, Closing Costs, Origination Fee, Renovation (if any)
    """

    sources: List[LineItem] = field(default_factory=list)
    uses: List[LineItem] = field(default_factory=list)

    @property
    def total_sources(self) -> float:
        return sum(item.amount for item in self.sources)

    @property
    def total_uses(self) -> float:
        return sum(item.amount for item in self.uses)

    def is_balanced(self, tolerance: float = 1.0) -> bool:
        """Check sources equal uses within ``tolerance`` dollars."""
        return abs(self.total_sources - self.total_uses) <= tolerance


def calculate_sources_uses(inputs: DealInputs, debt: DebtServiceResult) -> SourcesUses:
    """Build the acquisition sources and uses table.

    Equity already includes closing costs, renovation and the origination
    fee, so the two sides balance.

    Args:
        inputs: Deal inputs.
        debt: Debt sizing for the same inputs.

    Returns:
        SourcesUses.
    """
    sources = [
        LineItem("Senior Debt", debt.loan_amount),
        LineItem("Equity", debt.total_equity),
    ]

    uses = [
        LineItem("Purchase Price", inputs.purchase_price),
        LineItem("Closing Costs", inputs.closing_costs),
        LineItem("Origination Fee", debt.origination_fee),
    ]
    if inputs.renovation_budget > 0:
        uses.append(LineItem("Renovation", inputs.renovation_budget))

    return SourcesUses(sources=sources, uses=uses)
