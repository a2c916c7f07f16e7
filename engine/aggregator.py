"""
Portfolio aggregation — per-month totals across all loans.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from core.schema import LoanMonth, MonthAgg

from .simulator import LoanState


def portfolio_balance(states: Iterable[LoanState]) -> float:
    """
    Live portfolio balance after every loan has been advanced for the month.

    Terminated loans contribute 0, matching their all-zero LoanMonth rows.
    """
    return float(sum(s.balance for s in states if not s.terminated))


def aggregate_month(month: int, rows: Sequence[LoanMonth], ending_balance: float) -> MonthAgg:
    """Sum one month of loan rows into a portfolio MonthAgg."""
    interest = sum(r.interest for r in rows)
    sched_prin = sum(r.scheduled_principal for r in rows)
    prepay = sum(r.prepayment for r in rows)
    default = sum(r.default for r in rows)
    recovery = sum(r.recovery for r in rows)
    servicing = sum(r.servicing_fee for r in rows)

    # defaults are a loss, not cash; recoveries on earlier defaults are cash
    net_cash = interest + sched_prin + prepay + recovery - servicing

    return MonthAgg(
        month=month,
        interest_collected=float(interest),
        scheduled_principal=float(sched_prin),
        prepayments=float(prepay),
        defaults=float(default),
        recoveries=float(recovery),
        servicing_fee=float(servicing),
        net_cash_to_bank=float(net_cash),
        ending_balance=float(ending_balance),
    )
