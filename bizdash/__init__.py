# bizdash/__init__.py
"""
Shared Package for the Business Dashboard Streamlit App

Common modules shared across all pages:
- config: Configuration management (local .env + Streamlit Cloud secrets)
- db: Database connection management with pooling

Feature packages:
- commission_dashboard: Commission & profitability aggregator
- ledger: Sales, fixed cost, general cost, contract and inventory summaries

Usage:
    from bizdash import config, get_db_engine, check_db_connection
"""

# Configuration
from .config import (
    config,
    Config,
)

# Database
from .db import (
    get_db_engine,
    check_db_connection,
    reset_db_engine,
    get_connection_pool_status,
    read_sql_df,
)

__all__ = [
    # Config
    'config',
    'Config',

    # Database
    'get_db_engine',
    'check_db_connection',
    'reset_db_engine',
    'get_connection_pool_status',
    'read_sql_df',
]

__version__ = '1.0.0'
