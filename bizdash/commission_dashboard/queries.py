# bizdash/commission_dashboard/queries.py
"""
SQL Queries and Data Loading for the Commission Dashboard

Handles all database reads for one company:
- Active salesperson roster
- Completed sales in the month window
- Sale costs for a set of sales
- Fixed costs (unfiltered, proration happens in metrics)
- Sale <-> salesperson links and the per-salesperson summary

Every read returns an empty DataFrame on failure (logged), so a broken
table degrades the dashboard to zeros instead of an exception.
Dashboard reads are not cached: any filter change re-fetches.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Optional, Sequence
import pandas as pd
import streamlit as st
from sqlalchemy.engine import Engine

from bizdash.config import config
from bizdash.db import get_db_engine, plain_value, plain_values, read_sql_df
from .constants import STATUS_COMPLETED
from .metrics import summarize_sale_splits
from .models import DashboardInputs, MonthWindow

logger = logging.getLogger(__name__)


class CommissionQueries:
    """
    Data loading class for the commission dashboard.

    Usage:
        queries = CommissionQueries(company_id)

        window = MonthWindow.of(2026, [0, 1])
        inputs = queries.load_dashboard_inputs(window)
        dashboard = aggregate_commissions(inputs)
    """

    def __init__(self, company_id: Any, engine: Optional[Engine] = None):
        """
        Initialize for one company.

        Args:
            company_id: Company every query is scoped to
            engine: Optional engine (defaults to the shared singleton)
        """
        self.company_id = plain_value(company_id)
        self._engine = engine

    @property
    def engine(self) -> Engine:
        """Lazy load database engine."""
        if self._engine is None:
            self._engine = get_db_engine()
        return self._engine

    # =========================================================================
    # ROSTER
    # =========================================================================

    def get_salespersons(self) -> pd.DataFrame:
        """Active salespersons of the company, ordered by name."""
        query = """
            SELECT
                id,
                company_id,
                name,
                commission_percentage,
                is_active
            FROM salespersons
            WHERE company_id = :company_id
              AND is_active = :is_active
            ORDER BY name, id
        """
        params = {'company_id': self.company_id, 'is_active': True}
        return self._execute_query(query, params, "salespersons")

    # =========================================================================
    # SALES
    # =========================================================================

    def get_sales(self, window: MonthWindow) -> pd.DataFrame:
        """
        Completed sales in the window.

        The SQL range covers first..last selected month; non-contiguous
        month sets are narrowed client-side.
        """
        query = """
            SELECT
                id,
                company_id,
                order_number,
                customer_name,
                sale_date,
                total_price,
                entry_value,
                status,
                payment_status
            FROM sales
            WHERE company_id = :company_id
              AND status = :status
              AND sale_date BETWEEN :start_date AND :end_date
            ORDER BY sale_date, id
        """
        params = {
            'company_id': self.company_id,
            'status': STATUS_COMPLETED,
            'start_date': window.start_date.isoformat(),
            'end_date': window.end_date.isoformat(),
        }
        df = self._execute_query(query, params, "sales")
        if df.empty or window.is_whole_year:
            return df

        months = pd.to_datetime(df['sale_date'], errors='coerce').dt.month - 1
        return df[months.isin(window.effective_months)].reset_index(drop=True)

    def get_sale_costs(self, sale_ids: Iterable[Any]) -> pd.DataFrame:
        """Costs attached to the given sales."""
        ids = plain_values(sale_ids)
        if not ids:
            return pd.DataFrame(columns=['id', 'sale_id', 'cost_type', 'description', 'amount'])

        query = """
            SELECT
                id,
                sale_id,
                cost_type,
                description,
                amount
            FROM sale_costs
            WHERE sale_id IN :sale_ids
            ORDER BY sale_id, id
        """
        return self._execute_query(query, {'sale_ids': ids}, "sale_costs", expanding=['sale_ids'])

    def get_sale_salespersons(self, sale_ids: Iterable[Any]) -> pd.DataFrame:
        """Sale <-> salesperson links (with per-sale commission percentage)."""
        ids = plain_values(sale_ids)
        if not ids:
            return pd.DataFrame(columns=['sale_id', 'salesperson_id', 'commission_percentage'])

        query = """
            SELECT
                sale_id,
                salesperson_id,
                commission_percentage
            FROM sale_salespersons
            WHERE sale_id IN :sale_ids
            ORDER BY sale_id, salesperson_id
        """
        return self._execute_query(query, {'sale_ids': ids}, "sale_salespersons", expanding=['sale_ids'])

    # =========================================================================
    # FIXED COSTS
    # =========================================================================

    def get_fixed_costs(self) -> pd.DataFrame:
        """All fixed costs of the company (no date filter)."""
        query = """
            SELECT
                id,
                company_id,
                name,
                category,
                monthly_value,
                start_date,
                qtdmonths,
                description
            FROM fixed_costs
            WHERE company_id = :company_id
            ORDER BY start_date, id
        """
        return self._execute_query(query, {'company_id': self.company_id}, "fixed_costs")

    # =========================================================================
    # PER-SALESPERSON SUMMARY
    # =========================================================================

    def get_salesperson_summary(
        self,
        window: MonthWindow,
        sales: pd.DataFrame = None,
        sale_costs: pd.DataFrame = None,
        salespersons: pd.DataFrame = None
    ) -> pd.DataFrame:
        """
        Per-salesperson summary for the window.

        Already-loaded frames can be passed in to avoid re-reading them.

        Returns:
            DataFrame[salesperson_id, salesperson_name, sales_count,
                      total_sales, total_costs, net_profit, total_commission]
        """
        if sales is None:
            sales = self.get_sales(window)
        if sale_costs is None:
            sale_costs = self.get_sale_costs(sales['id'] if not sales.empty else [])
        if salespersons is None:
            salespersons = self.get_salespersons()

        links = self.get_sale_salespersons(sales['id'] if not sales.empty else [])
        return summarize_sale_splits(sales, sale_costs, links, salespersons, window)

    # =========================================================================
    # DASHBOARD LOAD
    # =========================================================================

    def load_dashboard_inputs(self, window: MonthWindow) -> DashboardInputs:
        """
        Read everything the aggregator needs for one window.

        Roster, sales and fixed costs have no ordering dependency and are
        read in parallel; costs and links wait for the sale ids.
        """
        workers = config.get_app_setting("QUERY_WORKERS", 4)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dashboard-read") as pool:
            roster_future = pool.submit(self.get_salespersons)
            sales_future = pool.submit(self.get_sales, window)
            fixed_future = pool.submit(self.get_fixed_costs)

            sales = sales_future.result()
            sale_ids = sales['id'].tolist() if not sales.empty else []
            costs_future = pool.submit(self.get_sale_costs, sale_ids)
            links_future = pool.submit(self.get_sale_salespersons, sale_ids)

            salespersons = roster_future.result()
            sale_costs = costs_future.result()
            links = links_future.result()
            fixed_costs = fixed_future.result()

        logger.info(
            f"Loaded dashboard inputs for company {self.company_id} ({window.label()}): "
            f"{len(sales)} sales, {len(sale_costs)} costs, {len(fixed_costs)} fixed costs, "
            f"{len(salespersons)} salespersons"
        )

        return DashboardInputs(
            company_id=self.company_id,
            window=window,
            sales=sales,
            sale_costs=sale_costs,
            fixed_costs=fixed_costs,
            salespersons=salespersons,
            sale_salespersons=links,
        )

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _execute_query(
        self,
        query: str,
        params: dict,
        query_name: str = "query",
        expanding: Sequence[str] = ()
    ) -> pd.DataFrame:
        """
        Execute SQL query and return DataFrame.

        Args:
            query: SQL query string
            params: Query parameters
            query_name: Name for logging
            expanding: Parameter names bound as IN-lists

        Returns:
            DataFrame with results (empty on error)
        """
        try:
            logger.debug(f"Executing {query_name}")
            df = read_sql_df(query, params, engine=self.engine, expanding=expanding)
            logger.debug(f"{query_name} returned {len(df)} rows")
            return df
        except Exception as e:
            logger.error(f"Error executing {query_name}: {e}")
            return pd.DataFrame()


def list_companies(engine: Optional[Engine] = None) -> pd.DataFrame:
    """Companies available for selection, ordered by name."""
    query = "SELECT id, name, code FROM companies ORDER BY name, id"
    try:
        return read_sql_df(query, engine=engine)
    except Exception as e:
        logger.error(f"Error loading companies: {e}")
        return pd.DataFrame(columns=['id', 'name', 'code'])


@st.cache_data(ttl=config.get_app_setting("CACHE_TTL_SECONDS", 300), show_spinner=False)
def load_companies() -> pd.DataFrame:
    """Company list for the selectors (cached; dashboard reads are not)."""
    return list_companies()


__all__ = ['CommissionQueries', 'list_companies', 'load_companies']
