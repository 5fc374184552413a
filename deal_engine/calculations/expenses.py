"""Operating expense itemization and NOI."""

from dataclasses import dataclass, field
from typing import List, Optional

from ..models.deal import DealInputs, ExpenseSource
from .revenue import IncomeResult, calculate_income


# (label, field name, category) for each fixed expense, in statement order.
# The management fee is inserted after the utilities.
FIXED_EXPENSE_LINES = [
    ("Real Estate Taxes", "real_estate_taxes", "fixed"),
    ("Property Insurance", "insurance", "fixed"),
    ("License/Permit/Inspection", "license_fees", "fixed"),
    ("Fire Meter Service", "fire_meter", "fixed"),
    ("Electricity + Gas", "electricity_gas", "utilities"),
    ("Water / Sewer", "water_sewer", "utilities"),
    ("Payroll", "payroll", "management"),
    ("Accounting", "accounting", "professional"),
    ("Legal", "legal", "professional"),
    ("Marketing / Leasing", "marketing", "professional"),
    ("R&M General", "rm_general", "maintenance"),
    ("R&M CapEx/Reserve", "rm_capex_reserve", "maintenance"),
    ("General Admin", "general_admin", "admin"),
    ("Exterminating", "exterminating", "contract"),
    ("Landscaping", "landscaping", "contract"),
    ("Snow Removal", "snow_removal", "contract"),
    ("Elevator", "elevator", "contract"),
    ("Alarm Monitoring", "alarm_monitoring", "contract"),
    ("Telephone/Internet", "telephone_internet", "contract"),
    ("Cleaning", "cleaning", "contract"),
    ("Trash Removal", "trash_removal", "contract"),
    ("Other Contract Services", "other_contract_services", "contract"),
]

MANAGEMENT_FEE_POSITION = 6
MANAGEMENT_FEE_FIELD = "management_fee"


@dataclass
class ExpenseDetailRow:
    """One itemized line of the operating statement."""

    label: str
    amount: float
    category: str  # fixed, utilities, management, ..., custom
    field: str
    per_unit: Optional[int] = None  # Whole dollars; None with zero units
    source: Optional[ExpenseSource] = None
    methodology: Optional[str] = None


@dataclass
class ExpenseResult:
    """Itemized expenses with the management fee broken out."""

    management_fee: float
    expense_details: List[ExpenseDetailRow] = field(default_factory=list)
    total_expenses: float = 0.0

    @property
    def non_management_expenses(self) -> float:
        """Total expenses excluding the income-based management fee."""
        return self.total_expenses - self.management_fee


@dataclass
class NOIResult:
    """Current-period NOI with its income and expense components."""

    income: IncomeResult
    expenses: ExpenseResult
    noi: float


def _per_unit(amount: float, total_units: int) -> Optional[int]:
    if total_units <= 0:
        return None
    return round(amount / total_units)


def calculate_expenses(inputs: DealInputs, total_income: float) -> ExpenseResult:
    """Itemize operating expenses.

    The management fee is ``total_income`` x fee %. Custom expense items
    follow the fixed lines with category ``custom``. Source and
    methodology annotations are copied from ``inputs.expense_meta``.

    Args:
        inputs: Deal inputs.
        total_income: Total income the management fee is charged on.

    Returns:
        ExpenseResult with rows in statement order.
    """
    management_fee = total_income * (inputs.management_fee_pct / 100)
    total_units = inputs.total_units
    meta = inputs.expense_meta

    details = []
    for label, field_name, category in FIXED_EXPENSE_LINES:
        amount = getattr(inputs, field_name)
        line_meta = meta.get(field_name)
        details.append(
            ExpenseDetailRow(
                label=label,
                amount=amount,
                category=category,
                field=field_name,
                per_unit=_per_unit(amount, total_units),
                source=line_meta.source if line_meta else None,
                methodology=line_meta.methodology if line_meta else None,
            )
        )

    details.insert(
        MANAGEMENT_FEE_POSITION,
        ExpenseDetailRow(
            label="Management Fee",
            amount=management_fee,
            category="management",
            field=MANAGEMENT_FEE_FIELD,
            per_unit=_per_unit(management_fee, total_units),
            methodology=f"{inputs.management_fee_pct:g}% of income",
        ),
    )

    for item in inputs.custom_expense_items:
        details.append(
            ExpenseDetailRow(
                label=item.name,
                amount=item.amount,
                category="custom",
                field=f"custom_{item.id}",
                per_unit=_per_unit(item.amount, total_units),
                source=item.source,
                methodology=item.methodology,
            )
        )

    return ExpenseResult(
        management_fee=management_fee,
        expense_details=details,
        total_expenses=sum(row.amount for row in details),
    )


def calculate_noi(inputs: DealInputs) -> NOIResult:
    """Calculate current-period NOI.

    NOI = total income - total expenses, with no rounding so the
    identity holds exactly.

    Args:
        inputs: Deal inputs.

    Returns:
        NOIResult carrying the income and expense breakdowns.
    """
    income = calculate_income(inputs)
    expenses = calculate_expenses(inputs, income.total_income)
    return NOIResult(
        income=income,
        expenses=expenses,
        noi=income.total_income - expenses.total_expenses,
    )
