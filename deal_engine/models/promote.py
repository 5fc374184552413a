"""GP/LP promote waterfall inputs."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class WaterfallTier:
    """One ordered tier of a distribution waterfall.

    A tier with ``pref_rate`` pays the LP preferred return, a tier with
    ``catch_up_pct`` pays the GP a catch-up, anything else splits the
    remaining cash by ``gp_split_pct``/``lp_split_pct``. ``irr_hurdle``
    keeps the tier inactive until the LP's IRR-to-date reaches it.
    """

    name: str
    gp_split_pct: float
    lp_split_pct: float
    pref_rate: Optional[float] = None
    catch_up_pct: Optional[float] = None
    irr_hurdle: Optional[float] = None


@dataclass
class PromoteInputs:
    """Equity split and tier list for a promote calculation."""

    gp_equity_pct: float = 10.0
    lp_equity_pct: float = 90.0
    waterfall_tiers: List[WaterfallTier] = field(default_factory=list)
