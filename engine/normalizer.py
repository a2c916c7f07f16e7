"""
Loan normalization — fill in monthly rate, remaining term and level payment
so the simulator can assume a complete record.

Supplied values are kept as-is; only missing fields are derived:
  monthly_rate    = annual rate (percent or fraction) / 12
  remaining_term  = round(maturity_months - months_elapsed), at least 1;
                    maturity defaults to 60 months, elapsed to 0
  monthly_payment = level payment over remaining_term at monthly_rate
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Union

from core.logging import get_logger
from core.schema import DEFAULT_MATURITY_MONTHS, Loan
from core.utils import round_half_up, to_decimal, to_float

from .amortization import pmt

logger = get_logger(__name__)


def normalize_loan(loan: Union[Loan, Mapping[str, Any]]) -> Loan:
    """Return a copy of ``loan`` with every derived field populated."""
    if not isinstance(loan, Loan):
        loan = Loan.model_validate(loan)

    updates: Dict[str, Any] = {}

    monthly_rate = loan.monthly_rate
    if monthly_rate is None:
        monthly_rate = to_decimal(loan.interest_rate_annual) / 12.0
        updates["monthly_rate"] = monthly_rate

    remaining_term = loan.remaining_term
    if remaining_term is None:
        maturity = to_float(loan.maturity_months) or DEFAULT_MATURITY_MONTHS
        elapsed = to_float(loan.months_elapsed)
        remaining_term = max(1, round_half_up(maturity - elapsed))
        updates["remaining_term"] = remaining_term

    if loan.monthly_payment is None:
        updates["monthly_payment"] = pmt(monthly_rate, remaining_term, loan.opening_balance)

    if not updates:
        return loan
    return loan.model_copy(update=updates)


def normalize_loans(loans: Iterable[Union[Loan, Mapping[str, Any]]]) -> List[Loan]:
    """Normalize every loan on a tape. An empty tape gives an empty list."""
    out = [normalize_loan(loan) for loan in loans]
    logger.debug("Normalized %d loans", len(out))
    return out
