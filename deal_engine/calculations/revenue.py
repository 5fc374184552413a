"""Income calculations: residential, commercial and other income."""

from dataclasses import dataclass

from ..models.deal import DealInputs


# Fixed other-income fields, in display order
OTHER_INCOME_FIELDS = (
    "late_fees",
    "parking_income",
    "storage_income",
    "pet_deposits",
    "pet_rent",
    "ev_charging",
    "trash_rubs",
    "water_rubs",
    "cam_recoveries",
    "other_misc_income",
)


@dataclass
class IncomeResult:
    """Annual income breakdown for the current period."""

    # Residential
    gross_potential_residential_rent: float
    residential_vacancy_loss: float
    concessions_loss: float
    net_residential_income: float

    # Commercial
    gross_potential_commercial_rent: float
    commercial_vacancy_loss: float
    commercial_concessions_loss: float
    net_commercial_income: float

    net_rentable_income: float
    total_other_income: float  # Fixed lines plus custom income items
    total_income: float

    @property
    def gross_potential_rent(self) -> float:
        """Residential plus commercial GPR."""
        return self.gross_potential_residential_rent + self.gross_potential_commercial_rent

    @property
    def vacancy_loss(self) -> float:
        """Residential plus commercial vacancy."""
        return self.residential_vacancy_loss + self.commercial_vacancy_loss

    @property
    def effective_gross_income(self) -> float:
        """Alias of total income."""
        return self.total_income


def calculate_residential_gpr(inputs: DealInputs) -> float:
    """Annual residential GPR: sum of count x monthly rent x 12."""
    return sum(row.count * row.monthly_rent * 12 for row in inputs.unit_mix)


def calculate_commercial_gpr(inputs: DealInputs) -> float:
    """Annual commercial GPR.

    The tenant schedule wins when any tenants are listed; otherwise the
    flat ``commercial_rent_annual`` is used.
    """
    if inputs.commercial_tenants:
        return sum(tenant.rent_annual for tenant in inputs.commercial_tenants)
    return inputs.commercial_rent_annual


def calculate_other_income(inputs: DealInputs) -> float:
    """Sum of the fixed other-income lines plus custom income items."""
    fixed = sum(getattr(inputs, name) for name in OTHER_INCOME_FIELDS)
    custom = sum(item.amount for item in inputs.custom_income_items)
    return fixed + custom


def calculate_income(inputs: DealInputs) -> IncomeResult:
    """Calculate the current-period income statement top line.

    Net residential = GPR - GPR x vacancy% - concessions
    Net commercial  = GPR - GPR x vacancy% - commercial concessions
    Total income    = net residential + net commercial + other income

    Args:
        inputs: Deal inputs.

    Returns:
        IncomeResult with every intermediate line.

    Example:
        >>> income = calculate_income(DealInputs())
        >>> income.gross_potential_residential_rent
        585600.0
    """
    # Residential
    res_gpr = float(calculate_residential_gpr(inputs))
    res_vacancy = res_gpr * (inputs.residential_vacancy_rate / 100)
    net_residential = res_gpr - res_vacancy - inputs.concessions

    # Commercial
    com_gpr = float(calculate_commercial_gpr(inputs))
    com_vacancy = com_gpr * (inputs.commercial_vacancy_rate / 100)
    net_commercial = com_gpr - com_vacancy - inputs.commercial_concessions

    net_rentable = net_residential + net_commercial
    other_income = float(calculate_other_income(inputs))

    return IncomeResult(
        gross_potential_residential_rent=res_gpr,
        residential_vacancy_loss=res_vacancy,
        concessions_loss=inputs.concessions,
        net_residential_income=net_residential,
        gross_potential_commercial_rent=com_gpr,
        commercial_vacancy_loss=com_vacancy,
        commercial_concessions_loss=inputs.commercial_concessions,
        net_commercial_income=net_commercial,
        net_rentable_income=net_rentable,
        total_other_income=other_income,
        total_income=net_rentable + other_income,
    )
