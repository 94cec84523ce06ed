# bizdash/ledger/__init__.py
"""
Ledger Overview Module

Read-only summaries of a company's books: sales by status, receivables,
fixed costs, general costs, contracts and inventory.

Components:
- queries: SQL reads (LedgerQueries, LedgerData)
- metrics: summaries and search filters

Usage:
    from bizdash.ledger import LedgerQueries, LedgerMetrics

    data = LedgerQueries(company_id).load_ledger()
    summary = LedgerMetrics(data).sales_status_summary()
"""

from .queries import LedgerQueries, LedgerData
from .metrics import (
    LedgerMetrics,
    attach_sale_details,
    filter_sales,
    filter_contracts,
    remaining_balance,
    is_cash_sale,
    can_confirm_payment,
)

__all__ = [
    'LedgerQueries',
    'LedgerData',
    'LedgerMetrics',
    'attach_sale_details',
    'filter_sales',
    'filter_contracts',
    'remaining_balance',
    'is_cash_sale',
    'can_confirm_payment',
]
