# bizdash/commission_dashboard/metrics.py
"""
Commission & Profitability Calculations

Handles all dashboard figures for one company and one month window:
- Completed-sale revenue and per-sale extra costs
- Fixed cost proration over the selected months (year-aware)
- Per-salesperson breakdown joined onto the active roster
- Company net profit and total commissions

Money is summed in integer cents and returned as Decimal.

Rules:
- Only sales with status "concluída" count.
- A fixed cost is active for `qtdmonths` consecutive calendar months
  starting at its start_date month; months are compared as
  year*12 + month so a November start spills into the next year.
- Commission percentages are whole numbers (10 = 10%).
- total_commissions only adds salespersons whose roster percentage > 0.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
import pandas as pd

from .constants import STATUS_COMPLETED, DEFAULT_FIXED_COST_MONTHS, ZERO
from .models import (
    MonthWindow,
    DashboardInputs,
    SalespersonCommission,
    CommissionDashboard,
)
from .money import to_decimal, round_money, from_cents, cents_column

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    'salesperson_id',
    'salesperson_name',
    'sales_count',
    'total_sales',
    'total_costs',
    'net_profit',
    'total_commission',
]


# =============================================================================
# FRAME HELPERS
# =============================================================================

def completed_sales_in_window(sales: pd.DataFrame, window: MonthWindow) -> pd.DataFrame:
    """Completed sales whose sale_date falls in one of the window's months."""
    if sales.empty:
        return sales

    dates = pd.to_datetime(sales['sale_date'], errors='coerce')
    in_window = (
        (dates.dt.year == window.year)
        & (dates.dt.month - 1).isin(window.effective_months)
    )
    completed = sales['status'] == STATUS_COMPLETED
    return sales[in_window & completed]


def cost_cents_by_sale(sale_costs: pd.DataFrame) -> pd.Series:
    """Σ amount in cents, indexed by sale_id."""
    if sale_costs.empty:
        return pd.Series(dtype='int64')
    cents = cents_column(sale_costs, 'amount')
    return cents.groupby(sale_costs['sale_id']).sum()


def _is_missing(value) -> bool:
    return value is None or (not isinstance(value, str) and pd.isna(value))


def _percentages_by_salesperson(salespersons: pd.DataFrame) -> Dict:
    if salespersons.empty:
        return {}
    return {
        row.id: to_decimal(row.commission_percentage)
        for row in salespersons.itertuples(index=False)
    }


# =============================================================================
# PER-SALESPERSON SUMMARY (co-seller rule)
# =============================================================================

def summarize_sale_splits(
    sales: pd.DataFrame,
    sale_costs: pd.DataFrame,
    links: pd.DataFrame,
    salespersons: pd.DataFrame,
    window: MonthWindow
) -> pd.DataFrame:
    """
    Per-salesperson summary of completed sales in the window.

    Every salesperson linked to a sale is credited the whole sale:
    its revenue, its costs and one sale in sales_count. Their commission
    on that sale is the sale's net profit times the link percentage;
    a link without a percentage uses the salesperson's roster percentage.

    Args:
        sales: Sales rows (id, sale_date, status, total_price)
        sale_costs: SaleCost rows (sale_id, amount)
        links: SaleSalesperson rows (sale_id, salesperson_id, commission_percentage)
        salespersons: Roster rows (id, name, commission_percentage)
        window: Month window

    Returns:
        DataFrame with SUMMARY_COLUMNS, one row per linked salesperson
    """
    completed = completed_sales_in_window(sales, window)
    if completed.empty or links.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    costs = cost_cents_by_sale(sale_costs)
    sale_frame = pd.DataFrame({
        'sale_id': completed['id'].values,
        'price_cents': cents_column(completed, 'total_price').values,
    })
    sale_frame['cost_cents'] = sale_frame['sale_id'].map(costs).fillna(0).astype('int64')

    links = links.drop_duplicates(['sale_id', 'salesperson_id'])
    merged = links.merge(sale_frame, on='sale_id', how='inner')
    if merged.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    roster_pct = _percentages_by_salesperson(salespersons)
    names = {}
    if not salespersons.empty:
        names = dict(zip(salespersons['id'], salespersons['name']))

    rows = []
    for salesperson_id, group in merged.groupby('salesperson_id', sort=True):
        fallback = roster_pct.get(salesperson_id, ZERO)
        commission = ZERO
        for link in group.itertuples(index=False):
            raw_pct = getattr(link, 'commission_percentage', None)
            pct = fallback if raw_pct is None or pd.isna(raw_pct) else to_decimal(raw_pct)
            net = from_cents(link.price_cents - link.cost_cents)
            commission += net * pct / 100

        price = int(group['price_cents'].sum())
        cost = int(group['cost_cents'].sum())
        rows.append({
            'salesperson_id': salesperson_id,
            'salesperson_name': names.get(salesperson_id, ''),
            'sales_count': int(group['sale_id'].nunique()),
            'total_sales': from_cents(price),
            'total_costs': from_cents(cost),
            'net_profit': from_cents(price - cost),
            'total_commission': round_money(commission),
        })

    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


# =============================================================================
# AGGREGATOR
# =============================================================================

class CommissionMetrics:
    """
    Commission & profitability calculations for one DashboardInputs.

    Usage:
        metrics = CommissionMetrics(inputs)
        dashboard = metrics.calculate()

        fixed = metrics.calculate_fixed_costs()
        by_category = metrics.fixed_costs_by_category()
    """

    def __init__(self, inputs: DashboardInputs):
        self.inputs = inputs
        self.window = inputs.window

    # =========================================================================
    # FIXED COST PRORATION
    # =========================================================================

    @staticmethod
    def absolute_month(value: date) -> int:
        return value.year * 12 + value.month - 1

    @staticmethod
    def parse_duration(raw) -> int:
        """Duration in months; missing or non-positive counts as one month."""
        try:
            if raw is None or pd.isna(raw):
                raise ValueError("missing")
            months = int(raw)
        except (TypeError, ValueError):
            logger.warning(f"Fixed cost without duration ({raw!r}), assuming {DEFAULT_FIXED_COST_MONTHS} month")
            return DEFAULT_FIXED_COST_MONTHS
        if months < 1:
            logger.warning(f"Fixed cost with duration {months}, assuming {DEFAULT_FIXED_COST_MONTHS} month")
            return DEFAULT_FIXED_COST_MONTHS
        return months

    @classmethod
    def count_covered_months(cls, start: date, duration: int, window: MonthWindow) -> int:
        """
        Number of window months in which a fixed cost is active.

        Example:
            start 2025-11-01, 4 months covers Nov/2025 .. Feb/2026;
            window 2026 [Jan, Feb, Mar] -> 2
        """
        first = cls.absolute_month(start)
        last = first + duration - 1
        return sum(1 for month in window.absolute_months() if first <= month <= last)

    def prorate_fixed_costs(self) -> pd.DataFrame:
        """
        One row per fixed cost with covered months and prorated cents.

        Returns:
            DataFrame[id, category, covered_months, prorated_cents]
        """
        columns = ['id', 'category', 'covered_months', 'prorated_cents']
        fixed_costs = self.inputs.fixed_costs
        if fixed_costs.empty:
            return pd.DataFrame(columns=columns)

        starts = pd.to_datetime(fixed_costs['start_date'], errors='coerce')
        monthly_cents = cents_column(fixed_costs, 'monthly_value')
        durations = fixed_costs['qtdmonths'] if 'qtdmonths' in fixed_costs.columns else [None] * len(fixed_costs)
        categories = fixed_costs['category'] if 'category' in fixed_costs.columns else [''] * len(fixed_costs)

        rows = []
        for cost_id, start, duration, cents, category in zip(
            fixed_costs['id'], starts, durations, monthly_cents, categories
        ):
            if pd.isna(start):
                logger.warning(f"Fixed cost {cost_id} has no start date, skipped")
                continue
            covered = self.count_covered_months(start.date(), self.parse_duration(duration), self.window)
            rows.append({
                'id': cost_id,
                'category': category if isinstance(category, str) and category else 'Sem categoria',
                'covered_months': covered,
                'prorated_cents': int(cents) * covered,
            })

        return pd.DataFrame(rows, columns=columns)

    def calculate_fixed_costs(self) -> Decimal:
        prorated = self.prorate_fixed_costs()
        if prorated.empty:
            return ZERO
        return from_cents(int(prorated['prorated_cents'].sum()))

    def fixed_costs_by_category(self) -> Tuple[Tuple[str, Decimal], ...]:
        prorated = self.prorate_fixed_costs()
        if prorated.empty:
            return ()
        grouped = prorated.groupby('category', sort=True)['prorated_cents'].sum()
        return tuple((str(category), from_cents(int(cents))) for category, cents in grouped.items())

    # =========================================================================
    # SALES
    # =========================================================================

    def completed_sales(self) -> pd.DataFrame:
        return completed_sales_in_window(self.inputs.sales, self.window)

    def _completed_sale_costs(self, completed: pd.DataFrame) -> pd.DataFrame:
        costs = self.inputs.sale_costs
        if costs.empty or completed.empty:
            return costs.iloc[0:0]
        return costs[costs['sale_id'].isin(completed['id'])]

    # =========================================================================
    # PER-SALESPERSON BREAKDOWN
    # =========================================================================

    def salesperson_summary(self) -> pd.DataFrame:
        """Loaded summary, or one built from the sale_salespersons links."""
        if self.inputs.salesperson_summary is not None:
            return self.inputs.salesperson_summary
        return summarize_sale_splits(
            self.inputs.sales,
            self.inputs.sale_costs,
            self.inputs.sale_salespersons,
            self.inputs.salespersons,
            self.window
        )

    def build_breakdown(self) -> Tuple[SalespersonCommission, ...]:
        """
        Join the per-salesperson summary onto the active roster.

        Salespersons without sales in the window appear with zeros.
        Order: roster name, then id.
        """
        roster = self.inputs.salespersons
        if roster.empty:
            return ()

        if 'is_active' in roster.columns:
            roster = roster[roster['is_active'].fillna(False).astype(bool)]
        roster = roster.sort_values(['name', 'id'], kind='mergesort')

        summary = self.salesperson_summary()
        summary_by_id = {}
        if not summary.empty:
            summary_by_id = {row['salesperson_id']: row for row in summary.to_dict('records')}

        breakdown: List[SalespersonCommission] = []
        for person in roster.itertuples(index=False):
            pct = to_decimal(person.commission_percentage)
            row: Optional[Dict] = summary_by_id.get(person.id)

            if row is None:
                breakdown.append(SalespersonCommission(
                    salesperson_id=person.id,
                    name=person.name,
                    commission_percentage=pct,
                ))
                continue

            total_sales = round_money(row.get('total_sales'))
            total_cost = round_money(row.get('total_costs'))
            raw_net = row.get('net_profit')
            net_profit = total_sales - total_cost if _is_missing(raw_net) else round_money(raw_net)
            raw_commission = row.get('total_commission')
            if _is_missing(raw_commission):
                commission = round_money(net_profit * pct / 100)
            else:
                commission = round_money(raw_commission)

            breakdown.append(SalespersonCommission(
                salesperson_id=person.id,
                name=person.name,
                commission_percentage=pct,
                sales_count=0 if _is_missing(row.get('sales_count')) else int(row['sales_count']),
                total_sales=total_sales,
                total_cost=total_cost,
                net_profit=net_profit,
                commission=commission,
            ))

        return tuple(breakdown)

    # =========================================================================
    # DASHBOARD
    # =========================================================================

    def calculate(self) -> CommissionDashboard:
        """Compute every dashboard figure for the inputs."""
        completed = self.completed_sales()
        revenue_cents = int(cents_column(completed, 'total_price').sum())
        sale_cost_cents = int(cents_column(self._completed_sale_costs(completed), 'amount').sum())

        total_revenue = from_cents(revenue_cents)
        total_sale_costs = from_cents(sale_cost_cents)
        total_fixed_costs = self.calculate_fixed_costs()

        breakdown = self.build_breakdown()
        total_commissions = sum(
            (sp.commission for sp in breakdown if sp.earns_commission),
            ZERO
        )

        dashboard = CommissionDashboard(
            window=self.window,
            total_revenue=total_revenue,
            total_sale_costs=total_sale_costs,
            total_fixed_costs=total_fixed_costs,
            net_profit=total_revenue - total_sale_costs - total_fixed_costs,
            total_commissions=total_commissions,
            completed_sales=len(completed),
            salespersons=breakdown,
            fixed_costs_by_category=self.fixed_costs_by_category(),
        )

        logger.debug(
            f"Dashboard {self.window.label()}: revenue={total_revenue} "
            f"sale_costs={total_sale_costs} fixed={total_fixed_costs} "
            f"sellers={len(breakdown)}"
        )
        return dashboard


def empty_dashboard(window: MonthWindow, failed: bool = False) -> CommissionDashboard:
    """All-zero dashboard (no data, or a failed load)."""
    return CommissionDashboard(window=window, failed=failed)


def aggregate_commissions(inputs: DashboardInputs) -> CommissionDashboard:
    """
    Aggregator boundary: never raises.

    Any computation error is logged and degrades to the all-zero
    dashboard with failed=True.
    """
    try:
        return CommissionMetrics(inputs).calculate()
    except Exception:
        logger.exception(f"Error aggregating commissions for company {inputs.company_id}")
        return empty_dashboard(inputs.window, failed=True)
