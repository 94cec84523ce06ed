# bizdash/commission_dashboard/formatters.py
"""
Formatting utilities for BRL money, percentages and dates (pt-BR style)
"""
import logging
from datetime import datetime, date
from decimal import Decimal
from typing import Any, Union

import pandas as pd

from .constants import CURRENCY_SYMBOL
from .money import round_money

logger = logging.getLogger(__name__)


def format_brl(value: Any, with_symbol: bool = False) -> str:
    """
    Format money as pt-BR: thousands '.', decimals ','

    Args:
        value: Decimal/float/int/None
        with_symbol: Prefix with "R$ "

    Returns:
        e.g. "1.234,56" or "R$ 1.234,56"; None/NaN -> "0,00"
    """
    amount = round_money(value)
    sign = "-" if amount < 0 else ""
    text = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    formatted = f"{sign}{text}"
    return f"{CURRENCY_SYMBOL} {formatted}" if with_symbol else formatted


def format_percentage(value: Union[int, float, Decimal, None], decimals: int = None) -> str:
    """Format a whole-number percentage (10 -> "10%", 7.5 -> "7,5%")."""
    try:
        if value is None or pd.isna(value):
            return "-"
        if decimals is None:
            decimals = 0 if float(value).is_integer() else 1
        return f"{float(value):.{decimals}f}%".replace(".", ",")
    except (ValueError, TypeError):
        return "-"


def format_date_br(value: Union[str, datetime, date, None]) -> str:
    """YYYY-MM-DD (or date) -> DD/MM/YYYY"""
    try:
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return "-"
        if isinstance(value, str):
            if not value.strip():
                return "-"
            value = datetime.strptime(value[:10], "%Y-%m-%d")
        return value.strftime("%d/%m/%Y")
    except (ValueError, TypeError) as e:
        logger.debug(f"Error formatting date {value}: {e}")
        return str(value)


def plural_sales(count: int) -> str:
    """'1 venda concluída' / '3 vendas concluídas'"""
    if count == 1:
        return "1 venda concluída"
    return f"{count} vendas concluídas"
