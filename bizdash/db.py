# bizdash/db.py
"""
Database Connection Management

Version: 1.0.0
Features:
- Singleton pattern with thread-safe double-checked locking
- Connection pooling with auto-reconnect (shared by parallel dashboard reads)
- Health check utilities
- Read-only query helpers
"""

import pandas as pd
from sqlalchemy import bindparam, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool
from sqlalchemy.exc import OperationalError
import logging
import threading
from typing import Tuple, Optional, Dict, Any, Iterable, List, Sequence

from .config import config

logger = logging.getLogger(__name__)

# ==================== SINGLETON ENGINE ====================

_engine = None
_engine_lock = threading.Lock()


def get_db_engine() -> Engine:
    """
    Get SQLAlchemy database engine (singleton pattern)

    Thread-safe implementation using double-checked locking.
    Reuses the same engine across all calls (and across the worker
    threads of a dashboard load) to prevent connection pool exhaustion.

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine

    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = _create_engine()

    return _engine


def _create_engine() -> Engine:
    """Create new database engine with configured settings"""
    url = config.get_database_url()
    app_config = config.app_config

    logger.info(f"🔌 Creating database engine: {config.get_masked_database_url()}")

    if url.startswith("sqlite"):
        # SQLite has no server-side pool to tune
        engine = create_engine(url, echo=False)
        logger.info("✅ Database engine created (sqlite)")
        return engine

    pool_size = app_config.get("DB_POOL_SIZE", 5)
    pool_recycle = app_config.get("DB_POOL_RECYCLE", 3600)

    engine = create_engine(
        url,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=pool_recycle,
        pool_pre_ping=True,  # Auto-reconnect on stale connections
        echo=False
    )

    logger.info(f"✅ Database engine created (pool_size={pool_size}, recycle={pool_recycle}s)")

    return engine


# ==================== CONNECTION MANAGEMENT ====================

def check_db_connection() -> Tuple[bool, Optional[str]]:
    """
    Check if database connection is healthy

    Returns:
        Tuple of (is_connected: bool, error_message: str or None)
    """
    try:
        engine = get_db_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, None
    except ValueError as e:
        logger.error(f"❌ Database not configured: {e}")
        return False, str(e)
    except OperationalError as e:
        error_msg = "Cannot connect to database. Please check your network connection."
        logger.error(f"❌ Database connection failed: {e}")
        return False, error_msg
    except Exception as e:
        error_msg = f"Database error: {str(e)}"
        logger.error(f"❌ Database error: {e}")
        return False, error_msg


def reset_db_engine():
    """
    Reset the database engine (force new connection)

    Call this after persistent connection errors or
    when you need to reconnect with different settings.
    """
    global _engine

    with _engine_lock:
        if _engine is not None:
            try:
                _engine.dispose()
                logger.info("🔄 Database engine disposed")
            except Exception as e:
                logger.error(f"Error disposing engine: {e}")
            _engine = None

    logger.info("🔄 Database engine reset - will reconnect on next query")


def get_connection_pool_status() -> Dict[str, Any]:
    """
    Get connection pool statistics for monitoring

    Returns:
        Dictionary with pool statistics
    """
    if _engine is None:
        return {"status": "not_initialized"}

    try:
        pool = _engine.pool
        if not isinstance(pool, QueuePool):
            return {"status": "active", "pool": type(pool).__name__}
        return {
            "status": "active",
            "pool_size": pool.size(),
            "checked_in": pool.checkedin(),
            "checked_out": pool.checkedout(),
            "overflow": pool.overflow(),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}


# ==================== QUERY HELPERS ====================

def plain_value(value: Any) -> Any:
    """numpy scalars -> Python scalars (DB drivers reject numpy.int64)."""
    return value.item() if hasattr(value, 'item') else value


def plain_values(values: Iterable[Any]) -> List[Any]:
    return [plain_value(v) for v in values]


def read_sql_df(
    query: str,
    params: Dict = None,
    engine: Optional[Engine] = None,
    expanding: Sequence[str] = ()
) -> pd.DataFrame:
    """
    Execute SELECT query and return results as DataFrame

    Args:
        query: SQL query string
        params: Query parameters
        engine: Engine to use (defaults to the shared singleton)
        expanding: Parameter names bound as IN-lists

    Returns:
        pandas DataFrame
    """
    statement = text(query)
    if expanding:
        statement = statement.bindparams(*[bindparam(name, expanding=True) for name in expanding])
    return pd.read_sql(statement, engine or get_db_engine(), params=params or {})


# ==================== EXPORTS ====================

__all__ = [
    'get_db_engine',
    'check_db_connection',
    'reset_db_engine',
    'get_connection_pool_status',
    'plain_value',
    'plain_values',
    'read_sql_df',
]
