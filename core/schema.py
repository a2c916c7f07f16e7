"""
Loan tape and projection output schema.

Loan is the validated tape row fed to the normalizer; LoanMonth, MonthAgg and
ProjectionResult are the immutable per-loan and portfolio outputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import round_half_up, to_float

DEFAULT_MATURITY_MONTHS = 60

# A loan whose balance falls to or below this is considered paid down.
BALANCE_EPSILON = 1e-8
# Slack on the payment clamp so a final payment clears the balance exactly.
PAYMENT_EPSILON = 1e-9

# Canonical loan tape fields. Spelling matches the tapes fed to the engine,
# including the "interest_rate (annual)" column header.
LOAN_TAPE_COLUMNS: Tuple[str, ...] = (
    "loan_id",
    "opening_balance",
    "interest_rate (annual)",
    "maturity_months",
    "months_elapsed",
    "monthly_rate",
    "remaining_term",
    "monthly_payment",
    "sched_principal_m1",
    "pd",
    "lgd",
)


class Loan(BaseModel):
    """
    One row of a loan tape.

    Only ``loan_id`` is required. The derived fields (monthly_rate,
    remaining_term, monthly_payment) are filled in by
    ``engine.normalizer.normalize_loans`` before projection.
    Optional ``pd`` (annual) and ``lgd`` override the portfolio assumptions
    for this loan only.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    loan_id: Union[str, int]
    opening_balance: float = 0.0
    interest_rate_annual: Optional[float] = Field(default=None, alias="interest_rate (annual)")
    maturity_months: Optional[float] = None
    months_elapsed: Optional[float] = None
    monthly_rate: Optional[float] = None
    remaining_term: Optional[int] = None
    monthly_payment: Optional[float] = None
    sched_principal_m1: Optional[float] = None
    pd: Optional[float] = None
    lgd: Optional[float] = None

    @field_validator("loan_id", mode="before")
    @classmethod
    def _coerce_loan_id(cls, v: Any) -> Union[str, int]:
        if isinstance(v, str):
            return v.strip()
        if isinstance(v, bool) or v is None:
            return str(v)
        if isinstance(v, int):
            return v
        x = to_float(v)
        if x == int(x):
            return int(x)
        return str(v)

    @field_validator("opening_balance", mode="before")
    @classmethod
    def _coerce_balance(cls, v: Any) -> float:
        return to_float(v)

    @field_validator(
        "interest_rate_annual",
        "maturity_months",
        "months_elapsed",
        "monthly_rate",
        "monthly_payment",
        "sched_principal_m1",
        "pd",
        "lgd",
        mode="before",
    )
    @classmethod
    def _coerce_optional(cls, v: Any) -> Optional[float]:
        if v is None:
            return None
        return to_float(v)

    @field_validator("remaining_term", mode="before")
    @classmethod
    def _coerce_term(cls, v: Any) -> Optional[int]:
        if v is None:
            return None
        return max(0, round_half_up(to_float(v)))

    @property
    def key(self) -> str:
        """String-normalized id used to key per-loan output."""
        return str(self.loan_id)


@dataclass(frozen=True)
class LoanMonth:
    """Cash flows of one loan for one projection month."""

    month: int
    opening_balance: float
    interest: float
    scheduled_principal: float
    prepayment: float
    default: float
    recovery: float
    servicing_fee: float
    ending_balance: float

    @classmethod
    def empty(cls, month: int) -> "LoanMonth":
        """All-zero row emitted for a loan that is paid down or defaulted out."""
        return cls(
            month=month,
            opening_balance=0.0,
            interest=0.0,
            scheduled_principal=0.0,
            prepayment=0.0,
            default=0.0,
            recovery=0.0,
            servicing_fee=0.0,
            ending_balance=0.0,
        )


@dataclass(frozen=True)
class MonthAgg:
    """Portfolio totals for one projection month."""

    month: int
    interest_collected: float
    scheduled_principal: float
    prepayments: float
    defaults: float
    recoveries: float
    servicing_fee: float
    net_cash_to_bank: float
    ending_balance: float


LOAN_MONTH_COLUMNS: Tuple[str, ...] = tuple(f.name for f in fields(LoanMonth))
MONTH_AGG_COLUMNS: Tuple[str, ...] = tuple(f.name for f in fields(MonthAgg))


@dataclass(frozen=True)
class ProjectionResult:
    """
    Output of one projection run.

    monthly: one MonthAgg per month, ordered 1..months
    by_loan: str(loan_id) -> one LoanMonth per month, ordered 1..months
    """

    monthly: List[MonthAgg] = field(default_factory=list)
    by_loan: Dict[str, List[LoanMonth]] = field(default_factory=dict)

    @property
    def months(self) -> int:
        return len(self.monthly)
