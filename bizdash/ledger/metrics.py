# bizdash/ledger/metrics.py
"""
Ledger Summaries

Figures behind the ledger overview tabs:
- Sales by status (revenue, costs, net, count, items sold)
- Receivables (remaining balance per sale, company total)
- Sales / contracts search filters
- Fixed cost, general cost, contract and inventory totals

All money is Decimal, summed in integer cents.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional
import pandas as pd

from bizdash.commission_dashboard.constants import (
    STATUS_COMPLETED,
    STATUS_PENDING,
    PAYMENT_PAID,
    ZERO,
)
from bizdash.commission_dashboard.metrics import CommissionMetrics
from bizdash.commission_dashboard.money import (
    round_money,
    from_cents,
    cents_column,
    sum_money,
)
from .queries import LedgerData

logger = logging.getLogger(__name__)


# =============================================================================
# RECEIVABLES
# =============================================================================

def remaining_balance(total_price: Any, entry_value: Any, payment_status: Any) -> Decimal:
    """Amount still owed on a sale; 0 once paid."""
    if payment_status == PAYMENT_PAID:
        return ZERO
    remaining = round_money(total_price) - round_money(entry_value)
    return remaining if remaining > 0 else ZERO


def is_cash_sale(total_price: Any, entry_value: Any) -> bool:
    """Paid in full up front (entry equals the total)."""
    return round_money(entry_value) == round_money(total_price)


def can_confirm_payment(total_price: Any, entry_value: Any, payment_status: Any) -> bool:
    return (
        not is_cash_sale(total_price, entry_value)
        and payment_status != PAYMENT_PAID
        and remaining_balance(total_price, entry_value, payment_status) > 0
    )


# =============================================================================
# SALE DETAILS
# =============================================================================

def attach_sale_details(
    sales: pd.DataFrame,
    sale_items: pd.DataFrame,
    sale_costs: pd.DataFrame
) -> pd.DataFrame:
    """
    Sales enriched with product names, items sold, costs and receivable flags.

    Added columns:
        product_names, items_quantity, total_costs, net_profit,
        remaining, is_cash_sale, can_confirm_payment
    """
    columns = [
        'product_names', 'items_quantity', 'total_costs', 'net_profit',
        'remaining', 'is_cash_sale', 'can_confirm_payment'
    ]
    if sales.empty:
        return sales.reindex(columns=list(sales.columns) + columns)

    df = sales.copy()

    if sale_items.empty:
        df['product_names'] = ''
        df['items_quantity'] = 0
    else:
        names = (
            sale_items.dropna(subset=['product_name'])
            .groupby('sale_id')['product_name']
            .agg(lambda values: ', '.join(str(v) for v in values))
        )
        quantities = pd.to_numeric(sale_items['quantity'], errors='coerce').fillna(0)
        qty = quantities.groupby(sale_items['sale_id']).sum()
        df['product_names'] = df['id'].map(names).fillna('')
        df['items_quantity'] = df['id'].map(qty).fillna(0).astype(int)

    if sale_costs.empty:
        cost_cents = pd.Series(0, index=df.index, dtype='int64')
    else:
        by_sale = cents_column(sale_costs, 'amount').groupby(sale_costs['sale_id']).sum()
        cost_cents = df['id'].map(by_sale).fillna(0).astype('int64')

    price_cents = cents_column(df, 'total_price')
    df['total_costs'] = [from_cents(c) for c in cost_cents]
    df['net_profit'] = [from_cents(p - c) for p, c in zip(price_cents, cost_cents)]

    entries = df['entry_value'] if 'entry_value' in df.columns else [None] * len(df)
    payments = df['payment_status'] if 'payment_status' in df.columns else [None] * len(df)
    rows = list(zip(df['total_price'], entries, payments))
    df['remaining'] = [remaining_balance(t, e, p) for t, e, p in rows]
    df['is_cash_sale'] = [is_cash_sale(t, e) for t, e, _ in rows]
    df['can_confirm_payment'] = [can_confirm_payment(t, e, p) for t, e, p in rows]
    return df


def _year_month(values: pd.Series) -> pd.Series:
    return pd.to_datetime(values, errors='coerce').dt.strftime('%Y-%m').fillna('')


def filter_sales(
    details: pd.DataFrame,
    search: str = "",
    month: str = "",
    only_with_remaining: bool = False
) -> pd.DataFrame:
    """
    Filter sale details like the sales table does.

    Args:
        details: Output of attach_sale_details
        search: Case-insensitive substring of product names, customer or order number
        month: "YYYY-MM"; empty for all
        only_with_remaining: Keep only sales with an open balance
    """
    if details.empty:
        return details

    mask = pd.Series(True, index=details.index)

    term = (search or "").strip().lower()
    if term:
        matches = pd.Series(False, index=details.index)
        for column in ('product_names', 'customer_name', 'order_number'):
            if column in details.columns:
                matches |= details[column].fillna('').astype(str).str.lower().str.contains(term, regex=False)
        mask &= matches

    if month:
        mask &= _year_month(details['sale_date']) == month

    if only_with_remaining:
        mask &= details['remaining'].map(lambda value: value > 0).astype(bool)

    return details[mask]


# =============================================================================
# CONTRACTS
# =============================================================================

def filter_contracts(contracts: pd.DataFrame, search: str = "", month: str = "") -> pd.DataFrame:
    """Search name/description; month is "YYYY-MM" of start_date."""
    if contracts.empty:
        return contracts

    mask = pd.Series(True, index=contracts.index)
    term = (search or "").strip().lower()
    if term:
        name = contracts['name'].fillna('').astype(str).str.lower()
        description = contracts['description'].fillna('').astype(str).str.lower()
        mask &= name.str.contains(term, regex=False) | description.str.contains(term, regex=False)
    if month:
        mask &= _year_month(contracts['start_date']) == month
    return contracts[mask]


# =============================================================================
# SUMMARIES
# =============================================================================

class LedgerMetrics:
    """
    Summary figures for the ledger overview.

    Usage:
        metrics = LedgerMetrics(data)
        by_status = metrics.sales_status_summary()
        owed = metrics.total_receivable()
    """

    def __init__(self, data: LedgerData):
        self.data = data
        self._details: Optional[pd.DataFrame] = None

    def sale_details(self) -> pd.DataFrame:
        if self._details is None:
            self._details = attach_sale_details(
                self.data.sales, self.data.sale_items, self.data.sale_costs
            )
        return self._details

    # =========================================================================
    # SALES
    # =========================================================================

    def sales_status_summary(self) -> Dict[str, Dict[str, Any]]:
        """
        Completed and pending sales side by side.

        Returns:
            {
                'completed': {'revenue', 'costs', 'net_profit', 'count', 'items_sold'},
                'pending': {...}
            }
        """
        details = self.sale_details()
        return {
            'completed': self._status_block(details, STATUS_COMPLETED),
            'pending': self._status_block(details, STATUS_PENDING),
        }

    @staticmethod
    def _status_block(details: pd.DataFrame, status: str) -> Dict[str, Any]:
        if details.empty:
            subset = details
        else:
            subset = details[details['status'] == status]
        revenue = sum_money(subset, 'total_price')
        costs = sum_money(subset, 'total_costs')
        return {
            'revenue': revenue,
            'costs': costs,
            'net_profit': revenue - costs,
            'count': len(subset),
            'items_sold': int(subset['items_quantity'].sum()) if not subset.empty else 0,
        }

    def total_receivable(self) -> Decimal:
        """Σ remaining balance over every sale of the company."""
        details = self.sale_details()
        if details.empty:
            return ZERO
        return sum(details['remaining'], ZERO)

    # =========================================================================
    # FIXED COSTS
    # =========================================================================

    def fixed_cost_totals(self, reference: Optional[date] = None) -> Dict[str, Any]:
        """
        Monthly fixed cost burden for the reference month (default: today).

        Returns:
            {'monthly', 'annual', 'count', 'active_count', 'by_category'}
        """
        reference = reference or date.today()
        fixed_costs = self.data.fixed_costs
        result = {
            'monthly': ZERO,
            'annual': ZERO,
            'count': len(fixed_costs),
            'active_count': 0,
            'by_category': {},
        }
        if fixed_costs.empty:
            return result

        month = CommissionMetrics.absolute_month(reference)
        starts = pd.to_datetime(fixed_costs['start_date'], errors='coerce')
        active = []
        for start, duration in zip(starts, fixed_costs['qtdmonths']):
            if pd.isna(start):
                active.append(False)
                continue
            first = CommissionMetrics.absolute_month(start.date())
            last = first + CommissionMetrics.parse_duration(duration) - 1
            active.append(first <= month <= last)

        current = fixed_costs[pd.Series(active, index=fixed_costs.index)]
        monthly = sum_money(current, 'monthly_value')

        by_category: Dict[str, Decimal] = {}
        if not current.empty:
            cents = cents_column(current, 'monthly_value')
            categories = current['category'].fillna('').replace('', 'Sem categoria')
            for category, total in cents.groupby(categories).sum().sort_index().items():
                by_category[str(category)] = from_cents(int(total))

        result.update({
            'monthly': monthly,
            'annual': monthly * 12,
            'active_count': len(current),
            'by_category': by_category,
        })
        return result

    # =========================================================================
    # GENERAL COSTS
    # =========================================================================

    def cost_totals(self) -> Dict[str, Any]:
        """
        Totals over every general cost entry.

        top_category is the (category, total) with the largest total,
        ties going to the first category by name; None without entries.

        Returns:
            {'total', 'count', 'by_category', 'top_category'}
        """
        costs = self.data.costs
        if costs.empty:
            return {'total': ZERO, 'count': 0, 'by_category': {}, 'top_category': None}

        cents = cents_column(costs, 'amount')
        categories = costs['category'].fillna('').replace('', 'Sem categoria')
        by_category: Dict[str, Decimal] = {}
        for category, total in cents.groupby(categories).sum().sort_index().items():
            by_category[str(category)] = from_cents(int(total))

        top_category = max(by_category.items(), key=lambda item: item[1])
        return {
            'total': from_cents(int(cents.sum())),
            'count': len(costs),
            'by_category': by_category,
            'top_category': top_category,
        }

    # =========================================================================
    # CONTRACTS & INVENTORY
    # =========================================================================

    def contract_totals(self, contracts: Optional[pd.DataFrame] = None) -> Dict[str, Any]:
        """Gross / discount / net monthly value (optionally of a filtered frame)."""
        contracts = self.data.contracts if contracts is None else contracts
        gross = sum_money(contracts, 'monthly_value')
        discount = sum_money(contracts, 'discount')
        return {
            'gross_monthly': gross,
            'total_discount': discount,
            'net_monthly': gross - discount,
            'count': len(contracts),
        }

    def inventory_totals(self) -> Dict[str, Any]:
        inventory = self.data.inventory
        if inventory.empty:
            return {'total_value': ZERO, 'total_items': 0, 'product_count': 0}
        quantities = pd.to_numeric(inventory['quantity'], errors='coerce').fillna(0)
        return {
            'total_value': sum_money(inventory, 'total_value'),
            'total_items': int(quantities.sum()),
            'product_count': len(inventory),
        }


__all__ = [
    'LedgerMetrics',
    'attach_sale_details',
    'filter_sales',
    'filter_contracts',
    'remaining_balance',
    'is_cash_sale',
    'can_confirm_payment',
]
