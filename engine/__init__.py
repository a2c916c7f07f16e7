"""
Cashflow projection engine — amortization math, per-loan monthly simulation,
portfolio aggregation and the projection runner.
"""

from .amortization import pmt, annual_pd_to_monthly, cpr_to_smm
from .simulator import LoanState, simulate_loan_month
from .aggregator import aggregate_month, portfolio_balance
from .runner import run_projection, project_cashflows

__all__ = [
    "pmt",
    "annual_pd_to_monthly",
    "cpr_to_smm",
    "LoanState",
    "simulate_loan_month",
    "aggregate_month",
    "portfolio_balance",
    "run_projection",
    "project_cashflows",
]
