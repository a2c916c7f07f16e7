"""
Per-loan monthly simulation — expected-value default, prepayment and
deferred recovery applied to one loan's balance one month at a time.

Unlike a Monte Carlo path, no random draws are made: each month a loan loses
the monthly-PD share of its post-amortization balance to default and the SMM
share of what survives to prepayment. Recoveries on each default are booked
into a per-loan schedule keyed by absolute month and released when that
month is simulated.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from core.schema import BALANCE_EPSILON, PAYMENT_EPSILON, Loan, LoanMonth
from core.utils import to_float

from .amortization import annual_pd_to_monthly


@dataclass
class LoanState:
    """Mutable simulation state of one loan, owned by a single projection run."""

    loan_id: str
    balance: float
    monthly_rate: float
    payment: float
    months_remaining: int
    monthly_pd: float
    lgd: float
    # recovery cash pending per absolute month (index 0 unused)
    recoveries: np.ndarray = field(repr=False, compare=False, default_factory=lambda: np.zeros(1))
    terminated: bool = False

    @classmethod
    def from_loan(
        cls,
        loan: Loan,
        *,
        horizon: int,
        recovery_lag_months: int,
        pd_annual: float,
        lgd: float,
    ) -> "LoanState":
        """
        Build state from a normalized loan.

        The loan's own pd/lgd take precedence over the portfolio values. Both
        are decimals and are clipped to [0, 1].
        """
        pd_loan = to_float(loan.pd) if loan.pd is not None else pd_annual
        lgd_loan = to_float(loan.lgd) if loan.lgd is not None else lgd
        return cls(
            loan_id=loan.key,
            balance=to_float(loan.opening_balance),
            monthly_rate=to_float(loan.monthly_rate),
            payment=to_float(loan.monthly_payment),
            months_remaining=max(0, int(loan.remaining_term or 0)),
            monthly_pd=annual_pd_to_monthly(pd_loan),
            lgd=float(np.clip(lgd_loan, 0.0, 1.0)),
            recoveries=np.zeros(max(horizon, 0) + max(recovery_lag_months, 0) + 1, dtype=float),
        )

    @property
    def is_active(self) -> bool:
        return self.balance > BALANCE_EPSILON and self.months_remaining > 0


def simulate_loan_month(
    state: LoanState,
    month: int,
    *,
    smm: float,
    servicing_rate: float,
    recovery_lag_months: int,
) -> LoanMonth:
    """
    Advance one loan by one month and return that month's cash flows.

    Order within the month:
      1. clamp payment so it cannot overpay the balance plus interest
      2. interest on opening balance
      3. scheduled principal = payment - interest, within [0, opening balance]
      4. default on the post-amortization balance (monthly PD)
      5. prepayment on the surviving balance (SMM)
      6. servicing fee on the opening balance
      7. book recovery of this month's default at month + lag, then
         release whatever was booked for this month

    Once a loan is paid down (balance <= 1e-8) or out of term it stays
    terminated and every later month is an all-zero row.
    """
    if state.terminated or not state.is_active:
        state.terminated = True
        return LoanMonth.empty(month)

    ob = state.balance
    r = state.monthly_rate
    payment = min(state.payment, ob * (1.0 + r) + PAYMENT_EPSILON)

    interest = ob * r
    sched_prin = min(max(payment - interest, 0.0), ob)
    bal_after_sched = ob - sched_prin

    default_amt = min(bal_after_sched * state.monthly_pd, bal_after_sched)
    bal_after_default = bal_after_sched - default_amt

    prepay_amt = min(bal_after_default * smm, bal_after_default)
    end = bal_after_default - prepay_amt

    servicing_fee = ob * servicing_rate

    # With a zero lag the booking and the release hit the same month.
    if default_amt > 0:
        state.recoveries[month + recovery_lag_months] += default_amt * (1.0 - state.lgd)
    recovery = float(state.recoveries[month])
    state.recoveries[month] = 0.0

    state.balance = end
    state.months_remaining = max(0, state.months_remaining - 1)

    return LoanMonth(
        month=month,
        opening_balance=ob,
        interest=interest,
        scheduled_principal=sched_prin,
        prepayment=prepay_amt,
        default=default_amt,
        recovery=recovery,
        servicing_fee=servicing_fee,
        ending_balance=end,
    )
