"""
PM (Portfolio Manager) outputs — portfolio risk inputs, totals and tables.
"""

from .metrics import WeightedRisk, weighted_average_risk, projection_totals
from .reporting import monthly_frame, loan_frame

__all__ = [
    "WeightedRisk",
    "weighted_average_risk",
    "projection_totals",
    "monthly_frame",
    "loan_frame",
]
