"""
Core package — record types, configuration, and shared utilities.
No business logic lives here.
"""

from .schema import (
    LOAN_TAPE_COLUMNS,
    LOAN_MONTH_COLUMNS,
    MONTH_AGG_COLUMNS,
    Loan,
    LoanMonth,
    MonthAgg,
    ProjectionResult,
)
from .config import ProjectionConfig
from .utils import require_columns, annual_to_monthly_hazard, to_float, to_decimal

__all__ = [
    "LOAN_TAPE_COLUMNS",
    "LOAN_MONTH_COLUMNS",
    "MONTH_AGG_COLUMNS",
    "Loan",
    "LoanMonth",
    "MonthAgg",
    "ProjectionResult",
    "ProjectionConfig",
    "require_columns",
    "annual_to_monthly_hazard",
    "to_float",
    "to_decimal",
]
