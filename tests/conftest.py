"""Pytest configuration and fixtures."""

from typing import Any, Dict, List

import pytest

from core.schema import Loan


@pytest.fixture
def level_loan() -> Dict[str, Any]:
    """120k, 1% a month, 12 months left."""
    return {
        "loan_id": "L-001",
        "opening_balance": 120000.0,
        "monthly_rate": 0.01,
        "remaining_term": 12,
    }


@pytest.fixture
def no_stress() -> Dict[str, Any]:
    """Projection arguments with every stress switched off."""
    return {
        "pd_annual": 0.0,
        "lgd": 0.0,
        "cpr_annual": 0.0,
        "servicing_bps_pa": 0,
        "recovery_lag_months": 0,
    }


@pytest.fixture
def mixed_tape() -> List[Dict[str, Any]]:
    """Tape mixing derived fields, percent rates, overrides and degenerate rows."""
    return [
        {"loan_id": 1, "opening_balance": 250000, "interest_rate (annual)": 7.5, "maturity_months": 60, "months_elapsed": 12},
        {"loan_id": 2, "opening_balance": 90000, "interest_rate (annual)": 0.09, "maturity_months": 36},
        {"loan_id": "C-3", "opening_balance": 40000, "monthly_rate": 0.0, "remaining_term": 20, "pd": 0.08, "lgd": 0.5},
        {"loan_id": "D-4", "opening_balance": 15000, "monthly_rate": 0.012, "remaining_term": 6, "monthly_payment": 2700},
        {"loan_id": "E-5", "opening_balance": 0, "monthly_rate": 0.01, "remaining_term": 24},
        {"loan_id": "F-6", "opening_balance": 5000, "monthly_rate": 0.01, "remaining_term": 0},
    ]


@pytest.fixture
def loan_obj(level_loan: Dict[str, Any]) -> Loan:
    return Loan.model_validate(level_loan)
