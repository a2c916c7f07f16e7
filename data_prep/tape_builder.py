"""
Map already-parsed loan tape rows onto Loan records.

Spreadsheet parsing happens upstream; this module only canonicalizes column
names and turns rows (DataFrame or dicts) into validated Loan objects.
Blank cells are treated as absent fields so the normalizer derives them.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from core.schema import LOAN_TAPE_COLUMNS, Loan
from core.utils import require_columns


_COLUMN_ALIASES: Dict[str, str] = {
    # identifiers
    "LoanID": "loan_id",
    "Loan ID": "loan_id",
    "loan id": "loan_id",
    "id": "loan_id",
    # balances
    "OpeningBalance": "opening_balance",
    "Opening Balance": "opening_balance",
    "balance": "opening_balance",
    "Current Principal Balance": "opening_balance",
    # rates
    "interest_rate": "interest_rate (annual)",
    "interest_rate_annual": "interest_rate (annual)",
    "Interest Rate": "interest_rate (annual)",
    "Current Interest Rate": "interest_rate (annual)",
    "rate": "interest_rate (annual)",
    # terms
    "maturity": "maturity_months",
    "term": "maturity_months",
    "Original Term": "maturity_months",
    "elapsed": "months_elapsed",
    "age": "months_elapsed",
    "remaining_months": "remaining_term",
    "Remaining Term": "remaining_term",
    "payment": "monthly_payment",
    "Monthly Payment": "monthly_payment",
    # risk overrides
    "PD": "pd",
    "pd_annual": "pd",
    "LGD": "lgd",
}


def canonicalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with common column name aliases normalized and duplicates coalesced."""
    if df.empty:
        return df.copy()

    ren = {c: _COLUMN_ALIASES.get(str(c).strip(), str(c).strip()) for c in df.columns}
    out = df.rename(columns=ren).copy()

    # If renaming created duplicate column names (e.g. both "LoanID" and
    # "loan_id" existed), coalesce duplicates by taking first non-null.
    if out.columns.duplicated().any():
        new_cols: List[str] = []
        parts: List[pd.Series] = []
        seen: set[str] = set()
        cols = list(out.columns)
        for name in cols:
            if name in seen:
                continue
            idxs = [i for i, c in enumerate(cols) if c == name]
            s = out.iloc[:, idxs[0]]
            for j in idxs[1:]:
                s = s.combine_first(out.iloc[:, j])
            new_cols.append(name)
            parts.append(s)
            seen.add(name)
        out = pd.concat(parts, axis=1)
        out.columns = new_cols

    return out


def _clean_record(record: Mapping[str, Any], row_number: int) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for col in LOAN_TAPE_COLUMNS:
        value = record.get(col)
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            continue
        if isinstance(value, str) and not value.strip():
            continue
        out[col] = value
    out.setdefault("loan_id", row_number)
    return out


def loans_from_records(records: Iterable[Mapping[str, Any]]) -> List[Loan]:
    """
    Build Loan objects from row dicts keyed by tape column names.

    Missing loan ids fall back to the 1-based row number.
    """
    return [
        Loan.model_validate(_clean_record(r, i))
        for i, r in enumerate(records, start=1)
    ]


def loans_from_frame(df: pd.DataFrame, *, require_balance: bool = True) -> List[Loan]:
    """Canonicalize a loan tape DataFrame and map each row to a Loan."""
    tape = canonicalize_columns(df)
    if require_balance and not tape.empty:
        require_columns(tape, ["opening_balance"])
    present = [c for c in LOAN_TAPE_COLUMNS if c in tape.columns]
    records = tape.loc[:, present].to_dict(orient="records")
    return loans_from_records(records)
