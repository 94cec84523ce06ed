# bizdash/commission_dashboard/__init__.py
"""
Commission & Profitability Dashboard Module

Self-contained utilities for the commission dashboard page.

Components:
- models: MonthWindow, DashboardInputs and the dashboard result types
- queries: SQL reads for one company (parallel load)
- metrics: revenue, cost, fixed cost proration and commission calculations
- filters: Sidebar filter components
- charts: KPI cards and Altair visualizations
- export: Formatted Excel report generation

Usage:
    from bizdash.commission_dashboard import (
        CommissionQueries,
        MonthWindow,
        aggregate_commissions,
    )

    inputs = CommissionQueries(company_id).load_dashboard_inputs(MonthWindow.of(2026, [0, 1]))
    dashboard = aggregate_commissions(inputs)
"""

from .models import (
    MonthWindow,
    DashboardInputs,
    SalespersonCommission,
    CommissionDashboard,
)
from .metrics import (
    CommissionMetrics,
    aggregate_commissions,
    empty_dashboard,
    summarize_sale_splits,
)
from .queries import CommissionQueries, list_companies, load_companies
from .filters import CommissionFilters
from .charts import CommissionCharts
from .export import CommissionExport
from .formatters import format_brl, format_percentage, format_date_br

# Constants
from .constants import (
    COLORS,
    MONTH_NAMES_PT,
    YEAR_OPTIONS,
    STATUS_COMPLETED,
    STATUS_PENDING,
    CHART_WIDTH,
    CHART_HEIGHT,
)

__all__ = [
    # Models
    'MonthWindow',
    'DashboardInputs',
    'SalespersonCommission',
    'CommissionDashboard',

    # Classes
    'CommissionQueries',
    'CommissionMetrics',
    'CommissionFilters',
    'CommissionCharts',
    'CommissionExport',

    # Functions
    'aggregate_commissions',
    'empty_dashboard',
    'summarize_sale_splits',
    'list_companies',
    'load_companies',
    'format_brl',
    'format_percentage',
    'format_date_br',

    # Constants
    'COLORS',
    'MONTH_NAMES_PT',
    'YEAR_OPTIONS',
    'STATUS_COMPLETED',
    'STATUS_PENDING',
    'CHART_WIDTH',
    'CHART_HEIGHT',
]

__version__ = '1.0.0'
