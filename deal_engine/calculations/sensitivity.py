"""IRR sensitivity grid: exit cap rate vs purchase price."""

import concurrent.futures
import logging
import multiprocessing
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

import pandas as pd

from ..models.deal import DealInputs
from ..models.lookups import EXIT_CAP_DELTAS, PRICE_DELTAS_PCT
from .metrics import calculate_returns

logger = logging.getLogger(__name__)


@dataclass
class SensitivityGrid:
    """IRR (whole percent, one decimal) by exit cap rate row and price column."""

    rows: List[List[float]] = field(default_factory=list)
    row_labels: List[str] = field(default_factory=list)
    col_labels: List[str] = field(default_factory=list)
    row_param: str = "Exit Cap Rate"
    col_param: str = "Purchase Price"

    def to_frame(self) -> pd.DataFrame:
        """Return the grid as a labelled DataFrame."""
        frame = pd.DataFrame(self.rows, index=self.row_labels, columns=self.col_labels)
        frame.index.name = self.row_param
        frame.columns.name = self.col_param
        return frame


def format_price_label(pct: float) -> str:
    """Column label for a price delta: "Base", "+5%", "-10%"."""
    if pct == 0:
        return "Base"
    sign = "+" if pct > 0 else ""
    return f"{sign}{pct:g}%"


def calculate_sensitivity_cell(
    inputs: DealInputs,
    exit_cap_rate: float,
    price_delta_pct: float,
) -> float:
    """Re-run the returns calculation for one grid cell.

    Args:
        inputs: Base deal inputs (not modified).
        exit_cap_rate: Absolute exit cap rate for this row.
        price_delta_pct: Purchase price change in whole percent.

    Returns:
        IRR in whole percent, rounded to one decimal.
    """
    tweaked = replace(
        inputs,
        exit_cap_rate=exit_cap_rate,
        purchase_price=inputs.purchase_price * (1 + price_delta_pct / 100),
    )
    return round(calculate_returns(tweaked).irr, 1)


def calculate_sensitivity(
    inputs: DealInputs,
    exit_cap_deltas: Optional[Sequence[float]] = None,
    price_deltas_pct: Optional[Sequence[float]] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> SensitivityGrid:
    """Build the exit cap x purchase price IRR grid.

    Rows are the base exit cap rate plus each delta; columns scale the
    purchase price by each percentage. Every cell is an independent
    calculation, so ``parallel=True`` fans them out over a thread pool.
    Cell order is the same either way.

    Args:
        inputs: Base deal inputs.
        exit_cap_deltas: Row offsets in percentage points (default -1..+1).
        price_deltas_pct: Column price changes in percent (default -10..+10).
        parallel: Run cells on a ThreadPoolExecutor.
        max_workers: Max parallel workers (None = CPU count, capped at 8).

    Returns:
        SensitivityGrid.
    """
    cap_deltas = list(exit_cap_deltas) if exit_cap_deltas is not None else EXIT_CAP_DELTAS
    price_deltas = list(price_deltas_pct) if price_deltas_pct is not None else PRICE_DELTAS_PCT

    exit_caps = [inputs.exit_cap_rate + d for d in cap_deltas]
    cells = [(ecr, pct) for ecr in exit_caps for pct in price_deltas]

    logger.debug("Running %dx%d sensitivity grid (parallel=%s)", len(exit_caps), len(price_deltas), parallel)

    if parallel:
        workers = max_workers or min(multiprocessing.cpu_count(), 8)
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(calculate_sensitivity_cell, inputs, ecr, pct)
                for ecr, pct in cells
            ]
            values = [future.result() for future in futures]
    else:
        values = [calculate_sensitivity_cell(inputs, ecr, pct) for ecr, pct in cells]

    width = len(price_deltas)
    rows = [values[i * width:(i + 1) * width] for i in range(len(exit_caps))]

    return SensitivityGrid(
        rows=rows,
        row_labels=[f"{ecr:.1f}%" for ecr in exit_caps],
        col_labels=[format_price_label(pct) for pct in price_deltas],
    )
