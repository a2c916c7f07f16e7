"""
Tabular views of a projection run for display and export collaborators.
"""

from __future__ import annotations

from dataclasses import asdict

import pandas as pd

from core.schema import LOAN_MONTH_COLUMNS, MONTH_AGG_COLUMNS, ProjectionResult


def monthly_frame(result: ProjectionResult) -> pd.DataFrame:
    """One row per projection month with the portfolio aggregates."""
    return pd.DataFrame(
        [asdict(a) for a in result.monthly],
        columns=list(MONTH_AGG_COLUMNS),
    )


def loan_frame(result: ProjectionResult) -> pd.DataFrame:
    """
    Long-format loan-level cash flows: one row per (loan_id, month).

    Loans keep their tape order; months are ascending within each loan.
    """
    rows = [
        {"loan_id": loan_id, **asdict(row)}
        for loan_id, loan_rows in result.by_loan.items()
        for row in loan_rows
    ]
    return pd.DataFrame(rows, columns=["loan_id", *LOAN_MONTH_COLUMNS])
