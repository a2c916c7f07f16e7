"""
Projection configuration.
Stress assumptions are portfolio-level fallbacks; loan-level pd/lgd on the
tape take precedence for that loan.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProjectionConfig:
    months: int = 60

    # default / recovery modeling
    pd_annual: float = 0.025
    lgd: float = 0.725
    recovery_lag_months: int = 12

    # prepayment (CPR convention)
    cpr_annual: float = 0.22

    # servicing fee charged on opening balance
    servicing_bps_pa: float = 100.0

    @property
    def monthly_servicing_rate(self) -> float:
        return (self.servicing_bps_pa / 10000.0) / 12.0
