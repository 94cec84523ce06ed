# bizdash/commission_dashboard/money.py
"""
Exact money arithmetic for BRL amounts.

Database drivers hand back Decimal (MySQL DECIMAL), float (SQLite REAL)
or str; everything is normalized through Decimal(str(value)) so that
sums never accumulate binary floating point drift. Column sums are done
on integer cents.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

import pandas as pd

from .constants import CENT, ZERO

logger = logging.getLogger(__name__)


def to_decimal(value: Any) -> Decimal:
    """Convert a raw column value to Decimal; None/NaN/garbage become 0."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        if pd.isna(value):
            return ZERO
    except (TypeError, ValueError):
        pass
    try:
        return Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        logger.warning(f"Unparseable money value {value!r}, using 0")
        return ZERO


def round_money(value: Decimal) -> Decimal:
    """Round half-up to cents."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: Any) -> int:
    return int(round_money(value) * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(int(cents)) / 100).quantize(CENT)


def cents_column(df: pd.DataFrame, column: str) -> pd.Series:
    """Integer-cents Series for a money column (0 where missing)."""
    if df.empty or column not in df.columns:
        return pd.Series(0, index=df.index, dtype='int64')
    return df[column].map(to_cents).astype('int64')


def sum_money(df: pd.DataFrame, column: str) -> Decimal:
    return from_cents(int(cents_column(df, column).sum()))
