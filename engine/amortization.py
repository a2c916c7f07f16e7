"""
Amortization math — level payment and annual-to-monthly rate conversions.
"""

from __future__ import annotations

import numpy as np

from core.utils import annual_to_monthly_hazard

# Rates closer to zero than this amortize in straight line.
RATE_EPSILON = 1e-12


def pmt(rate: float, nper: int, pv: float) -> float:
    """
    Standard fully-amortizing level payment (PMT) with near-zero rate guard.

        pv * r / (1 - (1 + r)^-n)

    A zero (or near-zero) rate pays the balance down in straight line over
    max(nper, 1) months. A non-positive term leaves the whole balance due in
    one payment. Very long terms drive the discount factor to 0, so the
    payment tends to pv * r instead of overflowing.
    """
    if nper <= 0:
        return float(pv)
    if abs(rate) < RATE_EPSILON:
        return float(pv) / nper
    with np.errstate(over="ignore", divide="ignore", under="ignore"):
        discount = np.power(1.0 + rate, -float(nper))
        return float(pv * rate / (1.0 - discount))


def annual_pd_to_monthly(pd_annual):
    """Constant monthly default hazard consistent with an annual cumulative PD."""
    return annual_to_monthly_hazard(pd_annual)


def cpr_to_smm(cpr_annual):
    """Single-month mortality implied by an annual constant prepayment rate."""
    return annual_to_monthly_hazard(cpr_annual)
