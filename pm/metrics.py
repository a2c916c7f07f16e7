"""
Portfolio-level inputs and summaries around a projection run.

weighted_average_risk() turns loan-level PD/LGD on the tape into the
balance-weighted portfolio assumptions fed to project_cashflows();
projection_totals() sums a run's monthly aggregates over the horizon.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Union

import numpy as np

from core.schema import Loan, ProjectionResult
from core.utils import to_float


@dataclass(frozen=True)
class WeightedRisk:
    pd: float
    lgd: float
    total_balance: float


def weighted_average_risk(
    loans: Iterable[Union[Loan, Mapping[str, Any]]],
    pd_annual: float = 0.025,
    lgd: float = 0.725,
) -> WeightedRisk:
    """
    Opening-balance-weighted PD and LGD of a tape.

    Loans without their own pd/lgd are weighted in at the portfolio values.
    A weighted result above 1 is read as a percentage and divided by 100.
    With no positive total balance the portfolio values are returned as-is.
    """
    tape = [loan if isinstance(loan, Loan) else Loan.model_validate(loan) for loan in loans]
    if not tape:
        return WeightedRisk(pd=pd_annual, lgd=lgd, total_balance=0.0)

    ob = np.array([to_float(loan.opening_balance) for loan in tape], dtype=float)
    total = float(ob.sum())
    if total <= 0:
        return WeightedRisk(pd=pd_annual, lgd=lgd, total_balance=0.0)

    pds = np.array([pd_annual if loan.pd is None else loan.pd for loan in tape], dtype=float)
    lgds = np.array([lgd if loan.lgd is None else loan.lgd for loan in tape], dtype=float)

    wa_pd = float((pds * ob).sum() / total)
    wa_lgd = float((lgds * ob).sum() / total)
    if wa_pd > 1:
        wa_pd /= 100.0
    if wa_lgd > 1:
        wa_lgd /= 100.0

    return WeightedRisk(pd=wa_pd, lgd=wa_lgd, total_balance=total)


def projection_totals(result: ProjectionResult) -> Dict[str, float]:
    """Horizon totals of each monthly cash flow line."""
    m = result.monthly
    return {
        "interest_collected": float(sum(a.interest_collected for a in m)),
        "scheduled_principal": float(sum(a.scheduled_principal for a in m)),
        "prepayments": float(sum(a.prepayments for a in m)),
        "defaults": float(sum(a.defaults for a in m)),
        "recoveries": float(sum(a.recoveries for a in m)),
        "servicing_fee": float(sum(a.servicing_fee for a in m)),
        "net_cash_to_bank": float(sum(a.net_cash_to_bank for a in m)),
    }
