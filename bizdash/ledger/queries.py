# bizdash/ledger/queries.py
"""
SQL Queries for the Ledger Overview

Read-only loading of one company's books:
- Sales (all statuses) with their line items and extra costs
- Fixed costs
- General costs (one-off expense entries)
- Contracts
- Inventory

Same contract as the commission dashboard reads: every query returns
an empty DataFrame on failure and logs the error.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence
import pandas as pd
from sqlalchemy.engine import Engine

from bizdash.config import config
from bizdash.db import get_db_engine, plain_value, plain_values, read_sql_df

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerData:
    """Frames read for the ledger overview of one company."""
    company_id: Any
    sales: pd.DataFrame = field(default_factory=pd.DataFrame)
    sale_items: pd.DataFrame = field(default_factory=pd.DataFrame)
    sale_costs: pd.DataFrame = field(default_factory=pd.DataFrame)
    fixed_costs: pd.DataFrame = field(default_factory=pd.DataFrame)
    costs: pd.DataFrame = field(default_factory=pd.DataFrame)
    contracts: pd.DataFrame = field(default_factory=pd.DataFrame)
    inventory: pd.DataFrame = field(default_factory=pd.DataFrame)


class LedgerQueries:
    """
    Data loading class for the ledger overview page.

    Usage:
        queries = LedgerQueries(company_id)
        data = queries.load_ledger()
    """

    def __init__(self, company_id: Any, engine: Optional[Engine] = None):
        self.company_id = plain_value(company_id)
        self._engine = engine

    @property
    def engine(self) -> Engine:
        """Lazy load database engine."""
        if self._engine is None:
            self._engine = get_db_engine()
        return self._engine

    # =========================================================================
    # SALES
    # =========================================================================

    def get_sales(self) -> pd.DataFrame:
        """Every sale of the company, newest first."""
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
                payment_status,
                notes
            FROM sales
            WHERE company_id = :company_id
            ORDER BY sale_date DESC, id DESC
        """
        return self._execute_query(query, {'company_id': self.company_id}, "ledger_sales")

    def get_sale_items(self, sale_ids: Iterable[Any]) -> pd.DataFrame:
        ids = plain_values(sale_ids)
        if not ids:
            return pd.DataFrame(columns=['sale_id', 'product_name', 'quantity', 'unit_price'])

        query = """
            SELECT
                sale_id,
                product_name,
                quantity,
                unit_price
            FROM sale_items
            WHERE sale_id IN :sale_ids
            ORDER BY sale_id, id
        """
        return self._execute_query(query, {'sale_ids': ids}, "sale_items", expanding=['sale_ids'])

    def get_sale_costs(self, sale_ids: Iterable[Any]) -> pd.DataFrame:
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
        return self._execute_query(query, {'sale_ids': ids}, "ledger_sale_costs", expanding=['sale_ids'])

    # =========================================================================
    # FIXED & GENERAL COSTS, CONTRACTS, INVENTORY
    # =========================================================================

    def get_fixed_costs(self) -> pd.DataFrame:
        query = """
            SELECT
                id,
                name,
                category,
                monthly_value,
                start_date,
                qtdmonths,
                description
            FROM fixed_costs
            WHERE company_id = :company_id
            ORDER BY start_date DESC, id
        """
        return self._execute_query(query, {'company_id': self.company_id}, "ledger_fixed_costs")

    def get_costs(self) -> pd.DataFrame:
        """General cost entries of the company, newest first."""
        query = """
            SELECT
                id,
                category,
                description,
                amount,
                cost_date,
                payment_method
            FROM costs
            WHERE company_id = :company_id
            ORDER BY cost_date DESC, id DESC
        """
        return self._execute_query(query, {'company_id': self.company_id}, "costs")

    def get_contracts(self) -> pd.DataFrame:
        query = """
            SELECT
                id,
                name,
                monthly_value,
                start_date,
                discount,
                description
            FROM contracts
            WHERE company_id = :company_id
            ORDER BY start_date DESC, id
        """
        return self._execute_query(query, {'company_id': self.company_id}, "contracts")

    def get_inventory(self) -> pd.DataFrame:
        query = """
            SELECT
                id,
                product_name,
                quantity,
                unit_cost,
                total_value,
                location
            FROM inventory
            WHERE company_id = :company_id
            ORDER BY product_name, id
        """
        return self._execute_query(query, {'company_id': self.company_id}, "inventory")

    # =========================================================================
    # FULL LOAD
    # =========================================================================

    def load_ledger(self) -> LedgerData:
        """Read every ledger table of the company (independent reads in parallel)."""
        workers = config.get_app_setting("QUERY_WORKERS", 4)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ledger-read") as pool:
            sales_future = pool.submit(self.get_sales)
            fixed_future = pool.submit(self.get_fixed_costs)
            general_costs_future = pool.submit(self.get_costs)
            contracts_future = pool.submit(self.get_contracts)
            inventory_future = pool.submit(self.get_inventory)

            sales = sales_future.result()
            sale_ids = sales['id'].tolist() if not sales.empty else []
            items_future = pool.submit(self.get_sale_items, sale_ids)
            costs_future = pool.submit(self.get_sale_costs, sale_ids)

            data = LedgerData(
                company_id=self.company_id,
                sales=sales,
                sale_items=items_future.result(),
                sale_costs=costs_future.result(),
                fixed_costs=fixed_future.result(),
                costs=general_costs_future.result(),
                contracts=contracts_future.result(),
                inventory=inventory_future.result(),
            )

        logger.info(
            f"Loaded ledger for company {self.company_id}: {len(data.sales)} sales, "
            f"{len(data.fixed_costs)} fixed costs, {len(data.costs)} costs, {len(data.contracts)} contracts, "
            f"{len(data.inventory)} inventory items"
        )
        return data

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
        """Execute SQL query and return DataFrame (empty on error)."""
        try:
            df = read_sql_df(query, params, engine=self.engine, expanding=expanding)
            logger.debug(f"{query_name} returned {len(df)} rows")
            return df
        except Exception as e:
            logger.error(f"Error executing {query_name}: {e}")
            return pd.DataFrame()
