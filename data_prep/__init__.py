"""
Data preparation — mapping parsed tape rows to Loan records, validation.
"""

from .tape_builder import (
    canonicalize_columns,
    loans_from_frame,
    loans_from_records,
)
from .validators import ValidationResult, validate_loans

__all__ = [
    "canonicalize_columns",
    "loans_from_frame",
    "loans_from_records",
    "ValidationResult",
    "validate_loans",
]
