from __future__ import annotations

from typing import Any, Iterable

import numpy as np
import pandas as pd


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def to_float(value: Any) -> float:
    """Cast to float; non-numeric, NaN and infinite values become 0.0."""
    try:
        x = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not np.isfinite(x):
        return 0.0
    return x


def to_decimal(value: Any) -> float:
    """
    Read a rate that may be quoted either as a percentage or a fraction.

    Values greater than 1 are percentages and are divided by 100
    (12 -> 0.12); anything else is already a fraction (0.12 -> 0.12).
    Missing or non-finite values resolve to 0.
    """
    x = to_float(value)
    return x / 100.0 if x > 1.0 else x


def annual_to_monthly_hazard(annual_rate):
    """Convert annualized hazard to a simple monthly probability via 1-(1-r)^(1/12)."""
    annual_rate = np.nan_to_num(np.asarray(annual_rate, dtype=float), nan=0.0, posinf=0.0, neginf=0.0)
    annual_rate = np.clip(annual_rate, 0.0, 1.0)
    monthly = 1.0 - np.power((1.0 - annual_rate), 1.0 / 12.0)
    return float(monthly) if monthly.ndim == 0 else monthly


def round_half_up(x: float) -> int:
    return int(np.floor(x + 0.5))
