"""Tests for loan normalization and Loan field coercion."""

import math

import pytest

from core.schema import Loan
from engine.amortization import pmt
from engine.normalizer import normalize_loan, normalize_loans


class TestMonthlyRate:
    def test_percentage_annual_rate(self) -> None:
        loan = normalize_loan({"loan_id": 1, "opening_balance": 1000, "interest_rate (annual)": 12})
        assert loan.monthly_rate == pytest.approx(0.01)

    def test_fraction_annual_rate(self) -> None:
        loan = normalize_loan({"loan_id": 1, "opening_balance": 1000, "interest_rate (annual)": 0.12})
        assert loan.monthly_rate == pytest.approx(0.01)

    def test_field_name_also_accepted(self) -> None:
        loan = normalize_loan({"loan_id": 1, "interest_rate_annual": 6})
        assert loan.monthly_rate == pytest.approx(0.005)

    def test_missing_annual_rate_is_zero(self) -> None:
        loan = normalize_loan({"loan_id": 1, "opening_balance": 1000})
        assert loan.monthly_rate == 0.0

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), "n/a"])
    def test_malformed_annual_rate_is_zero(self, bad) -> None:
        loan = normalize_loan({"loan_id": 1, "opening_balance": 1000, "interest_rate (annual)": bad})
        assert loan.monthly_rate == 0.0

    def test_supplied_monthly_rate_kept(self) -> None:
        loan = normalize_loan({"loan_id": 1, "monthly_rate": 0.02, "interest_rate (annual)": 12})
        assert loan.monthly_rate == 0.02


class TestRemainingTerm:
    def test_maturity_minus_elapsed(self) -> None:
        loan = normalize_loan({"loan_id": 1, "maturity_months": 36, "months_elapsed": 10})
        assert loan.remaining_term == 26

    def test_defaults_to_sixty(self) -> None:
        assert normalize_loan({"loan_id": 1}).remaining_term == 60

    def test_rounds_half_up(self) -> None:
        loan = normalize_loan({"loan_id": 1, "maturity_months": 36, "months_elapsed": 10.5})
        assert loan.remaining_term == 26

    def test_floored_at_one(self) -> None:
        loan = normalize_loan({"loan_id": 1, "maturity_months": 10, "months_elapsed": 15})
        assert loan.remaining_term == 1

    def test_supplied_zero_term_kept(self) -> None:
        assert normalize_loan({"loan_id": 1, "remaining_term": 0}).remaining_term == 0


class TestMonthlyPayment:
    def test_derived_level_payment(self, level_loan) -> None:
        loan = normalize_loan(level_loan)
        assert loan.monthly_payment == pytest.approx(pmt(0.01, 12, 120000))

    def test_zero_rate_payment(self) -> None:
        loan = normalize_loan({"loan_id": 1, "opening_balance": 40000, "monthly_rate": 0, "remaining_term": 20})
        assert loan.monthly_payment == pytest.approx(loan.opening_balance / loan.remaining_term)

    def test_supplied_payment_kept(self) -> None:
        loan = normalize_loan({"loan_id": 1, "opening_balance": 1000, "monthly_payment": 123.0})
        assert loan.monthly_payment == 123.0


class TestNormalizeLoans:
    def test_empty(self) -> None:
        assert normalize_loans([]) == []

    def test_every_record_complete(self, mixed_tape) -> None:
        for loan in normalize_loans(mixed_tape):
            assert loan.monthly_rate is not None
            assert loan.remaining_term is not None
            assert loan.monthly_payment is not None
            assert math.isfinite(loan.monthly_payment)

    def test_inputs_not_mutated(self, level_loan) -> None:
        raw = dict(level_loan)
        obj = Loan.model_validate(level_loan)
        normalize_loans([raw, {**level_loan, "loan_id": "x"}])
        normalize_loan(obj)
        assert raw == level_loan
        assert obj.monthly_payment is None


class TestLoanCoercion:
    def test_non_numeric_balance_is_zero(self) -> None:
        assert Loan(loan_id=1, opening_balance="abc").opening_balance == 0.0

    def test_nan_override_is_zero(self) -> None:
        assert Loan(loan_id=1, pd=float("nan")).pd == 0.0

    def test_integral_float_id(self) -> None:
        assert Loan(loan_id=7.0).key == "7"

    def test_string_id_stripped(self) -> None:
        assert Loan(loan_id="  A1 ").key == "A1"

    def test_extra_columns_ignored(self) -> None:
        loan = Loan.model_validate({"loan_id": 1, "borrower": "ACME"})
        assert not hasattr(loan, "borrower")
