# bizdash/commission_dashboard/models.py
"""
Data containers for the Commission Dashboard

- MonthWindow: selected year + month set (the reporting window)
- DashboardInputs: immutable bundle of the frames read for one window
- SalespersonCommission / CommissionDashboard: aggregator output
"""

import calendar
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple, Any, Iterable

import pandas as pd

from .constants import ALL_MONTHS, MONTH_NAMES_PT, ZERO
from .money import round_money


@dataclass(frozen=True)
class MonthWindow:
    """
    Reporting window: a year and a set of zero-based month indices.

    An empty month set means "no month filter": the whole year.
    """
    year: int
    months: Tuple[int, ...] = ()

    @classmethod
    def of(cls, year: int, months: Iterable[int] = ()) -> "MonthWindow":
        cleaned = sorted({int(m) for m in months})
        invalid = [m for m in cleaned if m < 0 or m > 11]
        if invalid:
            raise ValueError(f"Month index out of range (0-11): {invalid}")
        return cls(year=int(year), months=tuple(cleaned))

    @property
    def effective_months(self) -> Tuple[int, ...]:
        return self.months if self.months else ALL_MONTHS

    @property
    def is_whole_year(self) -> bool:
        return not self.months

    @property
    def start_date(self) -> date:
        return date(self.year, self.effective_months[0] + 1, 1)

    @property
    def end_date(self) -> date:
        last = self.effective_months[-1] + 1
        return date(self.year, last, calendar.monthrange(self.year, last)[1])

    def absolute_months(self) -> List[int]:
        """Months as year*12 + month0, comparable across years."""
        return [self.year * 12 + m for m in self.effective_months]

    def label(self) -> str:
        if self.is_whole_year:
            return f"Ano inteiro {self.year}"
        names = ", ".join(MONTH_NAMES_PT[m] for m in self.months)
        return f"{names} / {self.year}"


@dataclass(frozen=True)
class DashboardInputs:
    """
    Everything the aggregator needs for one company and one window.

    Frames are never mutated by the aggregator. When salesperson_summary
    is None the aggregator builds it from sale_salespersons.
    """
    company_id: Any
    window: MonthWindow
    sales: pd.DataFrame = field(default_factory=pd.DataFrame)
    sale_costs: pd.DataFrame = field(default_factory=pd.DataFrame)
    fixed_costs: pd.DataFrame = field(default_factory=pd.DataFrame)
    salespersons: pd.DataFrame = field(default_factory=pd.DataFrame)
    sale_salespersons: pd.DataFrame = field(default_factory=pd.DataFrame)
    salesperson_summary: Optional[pd.DataFrame] = None


@dataclass(frozen=True)
class SalespersonCommission:
    """One card of the per-salesperson breakdown."""
    salesperson_id: Any
    name: str
    commission_percentage: Decimal
    sales_count: int = 0
    total_sales: Decimal = ZERO
    total_cost: Decimal = ZERO
    net_profit: Decimal = ZERO
    commission: Decimal = ZERO

    @property
    def earns_commission(self) -> bool:
        return self.commission_percentage > 0

    @property
    def average_sale(self) -> Decimal:
        if self.sales_count == 0:
            return ZERO
        return round_money(self.total_sales / self.sales_count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'salesperson_id': self.salesperson_id,
            'name': self.name,
            'commission_percentage': self.commission_percentage,
            'sales_count': self.sales_count,
            'total_sales': self.total_sales,
            'total_cost': self.total_cost,
            'net_profit': self.net_profit,
            'commission': self.commission,
            'average_sale': self.average_sale,
        }


@dataclass(frozen=True)
class CommissionDashboard:
    """Aggregated commission & profitability figures for a window."""
    window: MonthWindow
    total_revenue: Decimal = ZERO
    total_sale_costs: Decimal = ZERO
    total_fixed_costs: Decimal = ZERO
    net_profit: Decimal = ZERO
    total_commissions: Decimal = ZERO
    completed_sales: int = 0
    salespersons: Tuple[SalespersonCommission, ...] = ()
    fixed_costs_by_category: Tuple[Tuple[str, Decimal], ...] = ()
    failed: bool = False

    @property
    def active_sellers(self) -> int:
        return sum(1 for sp in self.salespersons if sp.sales_count > 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'year': self.window.year,
            'months': list(self.window.months),
            'total_revenue': self.total_revenue,
            'total_sale_costs': self.total_sale_costs,
            'total_fixed_costs': self.total_fixed_costs,
            'net_profit': self.net_profit,
            'total_commissions': self.total_commissions,
            'completed_sales': self.completed_sales,
            'active_sellers': self.active_sellers,
            'fixed_costs_by_category': dict(self.fixed_costs_by_category),
            'salespersons': [sp.to_dict() for sp in self.salespersons],
            'failed': self.failed,
        }

    def breakdown_df(self) -> pd.DataFrame:
        """Per-salesperson breakdown as a DataFrame (for charts/export)."""
        columns = [
            'salesperson_id', 'name', 'commission_percentage', 'sales_count',
            'total_sales', 'total_cost', 'net_profit', 'commission', 'average_sale'
        ]
        return pd.DataFrame([sp.to_dict() for sp in self.salespersons], columns=columns)
