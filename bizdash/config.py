# bizdash/config.py
"""
Centralized Configuration Management

Version: 1.0.0
Features:
- Support both local (.env) and Streamlit Cloud (secrets.toml)
- Singleton pattern for efficiency
- DATABASE_URL override for any SQLAlchemy backend
- Lazy validation (missing DB settings raise only when the engine is built)
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, Any, Optional
from dataclasses import dataclass
from urllib.parse import quote_plus
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Initialize logger
logger = logging.getLogger(__name__)


def is_running_on_streamlit_cloud() -> bool:
    """Detect if running on Streamlit Cloud"""
    try:
        import streamlit as st
        return hasattr(st, 'secrets') and len(st.secrets) > 0
    except Exception:
        return False


@dataclass
class DatabaseConfig:
    """Database configuration container"""
    host: str = ""
    port: int = 3306
    user: str = ""
    password: str = ""
    database: str = "bizdash"
    url: Optional[str] = None

    def is_configured(self) -> bool:
        if self.url:
            return True
        return bool(self.host and self.user and self.password)

    def to_url(self) -> str:
        """SQLAlchemy URL; an explicit url wins over the MySQL parts."""
        if self.url:
            return self.url
        if not self.is_configured():
            raise ValueError(
                "Missing required database configuration. "
                "Set DATABASE_URL or DB_HOST/DB_USER/DB_PASSWORD in .env"
            )
        password = quote_plus(str(self.password))
        return f"mysql+pymysql://{self.user}:{password}@{self.host}:{self.port}/{self.database}"

    def masked_url(self) -> str:
        if self.url:
            return self.url.split('@')[-1] if '@' in self.url else self.url
        return f"mysql+pymysql://{self.user}:***@{self.host}:{self.port}/{self.database}"


class Config:
    """
    Centralized configuration management

    Usage:
        from bizdash.config import config

        url = config.get_database_url()
        workers = config.get_app_setting("QUERY_WORKERS", 4)

        if config.is_feature_enabled("EXCEL_EXPORT"):
            ...
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.is_cloud = is_running_on_streamlit_cloud()
        self._load_config()
        self._initialized = True

    def _load_config(self):
        """Load configuration based on environment"""
        if self.is_cloud:
            self._load_cloud_config()
        else:
            self._load_local_config()

        self._load_app_config()
        self._log_config_status()

    def _load_cloud_config(self):
        """Load configuration from Streamlit Cloud secrets"""
        import streamlit as st

        db_secrets = st.secrets.get("DB_CONFIG", {})
        self._db_config = DatabaseConfig(
            host=db_secrets.get("host", ""),
            port=int(db_secrets.get("port", 3306)),
            user=db_secrets.get("user", ""),
            password=db_secrets.get("password", ""),
            database=db_secrets.get("database", "bizdash"),
            url=db_secrets.get("url") or st.secrets.get("DATABASE_URL"),
        )

        logger.info("☁️ Running in STREAMLIT CLOUD")

    def _load_local_config(self):
        """Load configuration from local .env file"""
        env_paths = [
            Path.cwd() / ".env",
            Path(__file__).parent.parent / ".env",
        ]

        for env_path in env_paths:
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded .env from: {env_path}")
                break

        self._db_config = DatabaseConfig(
            host=os.getenv("DB_HOST", ""),
            port=int(os.getenv("DB_PORT", "3306")),
            user=os.getenv("DB_USER", ""),
            password=os.getenv("DB_PASSWORD", ""),
            database=os.getenv("DB_NAME", os.getenv("DB_DATABASE", "bizdash")),
            url=os.getenv("DATABASE_URL") or None,
        )

        if not self._db_config.is_configured():
            logger.warning("Database configuration incomplete - engine creation will fail until .env is set")

        logger.info("💻 Running in LOCAL environment")

    def _load_app_config(self):
        """Load application-specific settings"""
        self._app_config = {
            # Database pool
            "DB_POOL_SIZE": int(os.getenv("DB_POOL_SIZE", "5")),
            "DB_POOL_RECYCLE": int(os.getenv("DB_POOL_RECYCLE", "3600")),

            # Parallel reads per dashboard load
            "QUERY_WORKERS": int(os.getenv("QUERY_WORKERS", "4")),

            # Cache (lookup lists only)
            "CACHE_TTL_SECONDS": int(os.getenv("CACHE_TTL_SECONDS", "300")),

            # Localization
            "TIMEZONE": os.getenv("TIMEZONE", "America/Sao_Paulo"),

            # Feature flags
            "ENABLE_EXCEL_EXPORT": os.getenv("ENABLE_EXCEL_EXPORT", "true").lower() == "true",
            "ENABLE_DEBUG_MODE": os.getenv("ENABLE_DEBUG_MODE", "false").lower() == "true",
        }

    def _log_config_status(self):
        """Log configuration status"""
        status = self._db_config.masked_url() if self._db_config.is_configured() else "Not configured"
        logger.info(f"✅ Database: {status}")

    # ==================== PUBLIC GETTERS ====================

    def get_database_url(self) -> str:
        """Get SQLAlchemy URL (raises ValueError when unconfigured)"""
        return self._db_config.to_url()

    def get_masked_database_url(self) -> str:
        return self._db_config.masked_url()

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        """Get application setting with default"""
        return self._app_config.get(key, default)

    def is_feature_enabled(self, feature: str) -> bool:
        """Check if feature is enabled"""
        key = f"ENABLE_{feature.upper()}"
        return self._app_config.get(key, True)

    # ==================== PROPERTIES ====================

    @property
    def app_config(self) -> Dict[str, Any]:
        return self._app_config.copy()


# ==================== SINGLETON INSTANCE ====================

config = Config()


def local_today() -> date:
    """Today in the configured TIMEZONE (falls back to the server clock)."""
    try:
        return datetime.now(ZoneInfo(config.get_app_setting("TIMEZONE", "UTC"))).date()
    except ZoneInfoNotFoundError:
        logger.warning("Unknown TIMEZONE setting, using server date")
        return date.today()


__all__ = [
    'config',
    'Config',
    'DatabaseConfig',
    'local_today',
]
