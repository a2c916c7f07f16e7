"""
Projection runner — normalizes the tape and drives the monthly simulation.

Months are the outer loop and must run in order: balances carry forward and
month t releases recoveries booked by defaults in earlier months. Loans are
the inner loop and are independent of each other within a month; the month's
aggregate is taken only after every loan has been advanced.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Union

from core.config import ProjectionConfig
from core.logging import get_logger
from core.schema import Loan, LoanMonth, MonthAgg, ProjectionResult
from core.utils import to_float

from .aggregator import aggregate_month, portfolio_balance
from .amortization import cpr_to_smm
from .normalizer import normalize_loans
from .simulator import LoanState, simulate_loan_month

logger = get_logger(__name__)

LoanInput = Union[Loan, Mapping]


def run_projection(
    loans: Iterable[LoanInput],
    config: Optional[ProjectionConfig] = None,
) -> ProjectionResult:
    """
    Project monthly cash flows for every loan and for the portfolio.

    Parameters
    ----------
    loans : iterable of Loan or mapping
        Raw loan tape rows. Normalized internally; the caller's records are
        not modified.
    config : ProjectionConfig, optional
        Horizon and stress assumptions. Defaults to ProjectionConfig().

    Returns
    -------
    ProjectionResult with ``monthly`` (one MonthAgg per month) and
    ``by_loan`` (str(loan_id) -> one LoanMonth per month).

    Raises
    ------
    ValueError
        If two loans share the same loan id.
    """
    cfg = config or ProjectionConfig()

    tape = normalize_loans(loans)
    keys = [loan.key for loan in tape]
    dups = sorted(k for k, n in Counter(keys).items() if n > 1)
    if dups:
        raise ValueError(f"Duplicate loan ids in tape: {dups}")

    # malformed assumptions count as 0
    cfg = replace(
        cfg,
        months=int(to_float(cfg.months)),
        pd_annual=to_float(cfg.pd_annual),
        lgd=to_float(cfg.lgd),
        recovery_lag_months=max(0, int(to_float(cfg.recovery_lag_months))),
        cpr_annual=to_float(cfg.cpr_annual),
        servicing_bps_pa=to_float(cfg.servicing_bps_pa),
    )
    months = cfg.months
    lag = cfg.recovery_lag_months
    pd_annual = cfg.pd_annual
    lgd = cfg.lgd
    smm = cpr_to_smm(cfg.cpr_annual)
    serv_m = cfg.monthly_servicing_rate

    logger.info(
        "Projecting %d loans over %d months (pd=%.4f lgd=%.4f cpr=%.4f servicing=%.1fbps lag=%d)",
        len(tape), max(months, 0), pd_annual, lgd, cfg.cpr_annual, cfg.servicing_bps_pa, lag,
    )

    by_loan: Dict[str, List[LoanMonth]] = {key: [] for key in keys}
    if months <= 0:
        return ProjectionResult(monthly=[], by_loan=by_loan)

    states = [
        LoanState.from_loan(
            loan,
            horizon=months,
            recovery_lag_months=lag,
            pd_annual=pd_annual,
            lgd=lgd,
        )
        for loan in tape
    ]
    n_degenerate = sum(1 for s in states if not s.is_active)
    if n_degenerate:
        logger.debug("%d loans start terminated (no balance or no remaining term)", n_degenerate)

    monthly: List[MonthAgg] = []
    for t in range(1, months + 1):
        rows = []
        for state in states:
            row = simulate_loan_month(
                state,
                t,
                smm=smm,
                servicing_rate=serv_m,
                recovery_lag_months=lag,
            )
            by_loan[state.loan_id].append(row)
            rows.append(row)

        monthly.append(aggregate_month(t, rows, portfolio_balance(states)))

    return ProjectionResult(monthly=monthly, by_loan=by_loan)


def project_cashflows(
    loans: Iterable[LoanInput],
    months: int = 60,
    pd_annual: float = 0.025,
    lgd: float = 0.725,
    cpr_annual: float = 0.22,
    servicing_bps_pa: float = 100,
    recovery_lag_months: int = 12,
) -> ProjectionResult:
    """
    Deterministic cashflow projection of a loan tape under stress assumptions.

    pd_annual and lgd are portfolio-level fallbacks; a loan's own ``pd`` /
    ``lgd`` fields override them for that loan. cpr_annual is converted to a
    monthly SMM, servicing_bps_pa is charged monthly on opening balance, and
    recoveries of (1 - lgd) of each default arrive recovery_lag_months later.
    """
    return run_projection(
        loans,
        ProjectionConfig(
            months=months,
            pd_annual=pd_annual,
            lgd=lgd,
            cpr_annual=cpr_annual,
            servicing_bps_pa=servicing_bps_pa,
            recovery_lag_months=recovery_lag_months,
        ),
    )
