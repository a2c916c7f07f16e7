"""
Data quality validation for loan tapes before they enter the engine.

The engine itself coerces bad numbers to 0 and treats degenerate loans as
already terminated; this check surfaces those cases to the caller instead
of letting them pass silently.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Union

from core.schema import Loan


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a tape."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def validate_loans(loans: Iterable[Union[Loan, Mapping[str, Any]]]) -> ValidationResult:
    """
    Run all validation checks on a loan tape.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    result = ValidationResult()
    tape = [loan if isinstance(loan, Loan) else Loan.model_validate(loan) for loan in loans]

    if not tape:
        result.warnings.append("Tape is empty (0 loans).")
        return result

    # --- Loan ID ---
    counts = Counter(loan.key for loan in tape)
    dups = sorted(k for k, n in counts.items() if n > 1)
    if dups:
        result.errors.append(f"{len(dups)} duplicate loan ids found: {dups[:10]}")

    # --- Balances ---
    n_nonpos = sum(1 for loan in tape if loan.opening_balance <= 0)
    if n_nonpos > 0:
        result.warnings.append(
            f"{n_nonpos} loans have zero or negative opening_balance and will project as all-zero rows."
        )

    # --- Interest Rate ---
    n_pct = sum(1 for loan in tape if loan.interest_rate_annual is not None and loan.interest_rate_annual > 1.0)
    if n_pct > 0:
        result.warnings.append(
            f"{n_pct} loans have annual interest rate > 1.0 — read as percent and divided by 100."
        )
    n_neg = sum(
        1 for loan in tape
        if (loan.interest_rate_annual is not None and loan.interest_rate_annual < 0)
        or (loan.monthly_rate is not None and loan.monthly_rate < 0)
    )
    if n_neg > 0:
        result.warnings.append(f"{n_neg} loans have a negative interest rate.")

    # --- Term ---
    n_zero_term = sum(1 for loan in tape if loan.remaining_term is not None and loan.remaining_term <= 0)
    if n_zero_term > 0:
        result.warnings.append(
            f"{n_zero_term} loans have zero remaining_term and will project as all-zero rows."
        )

    # --- Risk overrides ---
    for name in ("pd", "lgd"):
        vals = [getattr(loan, name) for loan in tape if getattr(loan, name) is not None]
        n_out = sum(1 for v in vals if v < 0 or v > 1.0)
        if n_out > 0:
            result.warnings.append(
                f"{n_out} loans have {name} outside [0, 1] and will be clipped."
            )

    return result
