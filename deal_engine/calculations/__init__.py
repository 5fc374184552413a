"""Calculation modules for the deal underwriting engine."""

from .numeric import (
    calculate_irr,
    bisection_irr,
    npv,
    monthly_payment,
    interest_only_payment,
    remaining_balance,
    equity_multiple,
    safe_divide,
)
from .revenue import calculate_income, IncomeResult
from .expenses import calculate_expenses, calculate_noi, ExpenseDetailRow, ExpenseResult, NOIResult
from .debt import calculate_debt_service, DebtServiceResult
from .cashflow import build_cash_flow_series, CashFlowYear
from .metrics import calculate_returns, ReturnMetrics
from .sensitivity import calculate_sensitivity, calculate_sensitivity_cell, SensitivityGrid
from .sources_uses import calculate_sources_uses, SourcesUses, LineItem

# Unified base calculation
from .deal import calculate_all, DealOutputs

# Financing structures
from .structures import (
    DealAnalysis,
    YearlyProjection,
    ExitSensitivity,
    calculate_deal_structure,
    compare_deal_structures,
    get_default_structure_inputs,
)

# GP/LP waterfall
from .promote import (
    calculate_promote,
    calculate_promote_sensitivity,
    calculate_promote_sensitivity_cell,
    PromoteOutputs,
    PromoteSensitivity,
    SensitivityCell,
    YearDistribution,
)

__all__ = [
    "calculate_irr",
    "bisection_irr",
    "npv",
    "monthly_payment",
    "interest_only_payment",
    "remaining_balance",
    "equity_multiple",
    "safe_divide",
    "calculate_income",
    "IncomeResult",
    "calculate_expenses",
    "calculate_noi",
    "ExpenseDetailRow",
    "ExpenseResult",
    "NOIResult",
    "calculate_debt_service",
    "DebtServiceResult",
    "build_cash_flow_series",
    "CashFlowYear",
    "calculate_returns",
    "ReturnMetrics",
    "calculate_sensitivity",
    "calculate_sensitivity_cell",
    "SensitivityGrid",
    "calculate_sources_uses",
    "SourcesUses",
    "LineItem",
    "calculate_all",
    "DealOutputs",
    "DealAnalysis",
    "YearlyProjection",
    "ExitSensitivity",
    "calculate_deal_structure",
    "compare_deal_structures",
    "get_default_structure_inputs",
    "calculate_promote",
    "calculate_promote_sensitivity",
    "calculate_promote_sensitivity_cell",
    "PromoteOutputs",
    "PromoteSensitivity",
    "SensitivityCell",
    "YearDistribution",
]
