"""
Application Settings - Load from YAML configs + .env secrets

Design Philosophy:
- Service configs (hosts, ports, updater schedule, batch sizes) → YAML files (public, versioned in git)
- Secrets (passwords) → .env file (gitignored)

Uses Pydantic for validation and type safety
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils.config import load_yaml_safe


class Settings(BaseSettings):
    """
    Application settings

    Architecture:
    - Infrastructure configs → config/providers/*.yaml (public)
    - Secrets → .env (gitignored)

    Usage:
        from config.settings import get_settings

        settings = get_settings()
        print(settings.INDICATOR_PAGE_SIZE)  # From indicators.yaml
        print(settings.CLICKHOUSE_PASSWORD)  # From .env
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields in .env
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Load YAML configs from files (cached at class level)
        if not hasattr(Settings, "_yaml_loaded"):
            Settings._database_config = load_yaml_safe("config/providers/databases.yaml")
            Settings._indicators_config = load_yaml_safe("config/providers/indicators.yaml")
            Settings._yaml_loaded = True

    # ============================================
    # ENVIRONMENT (.env only)
    # ============================================
    ENVIRONMENT: str = Field(default="local", description="Environment: local, dev, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # ============================================
    # CLICKHOUSE (from YAML + .env)
    # ============================================
    @property
    def CLICKHOUSE_HOST(self) -> str:
        """ClickHouse host from databases.yaml"""
        return self._database_config.get("clickhouse", {}).get("host", "clickhouse")

    @property
    def CLICKHOUSE_PORT(self) -> int:
        """ClickHouse native port from databases.yaml"""
        return self._database_config.get("clickhouse", {}).get("port", 9000)

    @property
    def CLICKHOUSE_DB(self) -> str:
        """ClickHouse database from databases.yaml"""
        return self._database_config.get("clickhouse", {}).get("database", "market_data")

    @property
    def CLICKHOUSE_USER(self) -> str:
        """ClickHouse user from databases.yaml"""
        return self._database_config.get("clickhouse", {}).get("user", "default")

    @property
    def CLICKHOUSE_TIMEOUT_SECONDS(self) -> int:
        """ClickHouse send/receive timeout from databases.yaml"""
        return self._database_config.get("clickhouse", {}).get("timeout", 300)

    # ClickHouse password from .env (secret)
    CLICKHOUSE_PASSWORD: str = Field(default="")

    # Forward async_insert settings on indicator writes (errors are then not reported back)
    CLICKHOUSE_ASYNC_INSERT: bool = Field(default=False)

    # ============================================
    # POSTGRESQL (from YAML + .env)
    # ============================================
    @property
    def POSTGRES_HOST(self) -> str:
        """PostgreSQL host from databases.yaml"""
        return self._database_config.get("postgres", {}).get("host", "postgres")

    @property
    def POSTGRES_PORT(self) -> int:
        """PostgreSQL port from databases.yaml"""
        return self._database_config.get("postgres", {}).get("port", 5432)

    @property
    def POSTGRES_DB(self) -> str:
        """PostgreSQL database from databases.yaml"""
        return self._database_config.get("postgres", {}).get("database", "market_data")

    @property
    def POSTGRES_USER(self) -> str:
        """PostgreSQL user from databases.yaml"""
        return self._database_config.get("postgres", {}).get("user", "postgres")

    @property
    def POSTGRES_CONNECT_TIMEOUT_SECONDS(self) -> int:
        """PostgreSQL connect timeout from databases.yaml"""
        return self._database_config.get("postgres", {}).get("timeout", 10)

    # PostgreSQL password from .env (secret)
    POSTGRES_PASSWORD: str = Field(default="postgres")

    # Optional override
    POSTGRES_URL: str | None = Field(default=None)

    @property
    def postgres_dsn(self) -> str:
        """PostgreSQL connection string (libpq URI)"""
        if self.POSTGRES_URL:
            return self.POSTGRES_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # ============================================
    # INDICATORS UPDATER - schedule (from YAML)
    # ============================================
    @property
    def INDICATOR_UPDATER_ENABLED(self) -> bool:
        """Whether the scheduled updater runs at all"""
        return self._indicators_config.get("updater", {}).get("enabled", True)

    @property
    def INDICATOR_UPDATER_INTERVAL_SECONDS(self) -> int:
        """Seconds between scheduler ticks"""
        return self._indicators_config.get("updater", {}).get("interval_seconds", 60)

    @property
    def INDICATOR_UPDATER_START_TIME(self) -> str | None:
        """Daily window start (UTC, HH:MM:SS); None = always allowed"""
        return self._indicators_config.get("updater", {}).get("start_time")

    @property
    def INDICATOR_UPDATER_END_TIME(self) -> str | None:
        """Daily window end (UTC, HH:MM:SS); None = always allowed"""
        return self._indicators_config.get("updater", {}).get("end_time")

    @property
    def INDICATOR_UPDATER_INITIAL_DELAY_SECONDS(self) -> int:
        """Delay before the startup pass"""
        return self._indicators_config.get("updater", {}).get("initial_delay_seconds", 0)

    @property
    def INDICATOR_UPDATER_INSTRUMENT_DELAY_SECONDS(self) -> float:
        """Pause between instruments within a pass"""
        return self._indicators_config.get("updater", {}).get("instrument_delay_seconds", 0.1)

    # ============================================
    # INDICATORS - calculation (from YAML)
    # ============================================
    @property
    def INDICATOR_PAGE_SIZE(self) -> int:
        """Candles fetched per page"""
        return self._indicators_config.get("calculation", {}).get("page_size", 10000)

    @property
    def INDICATOR_WINDOW_SIZE(self) -> int:
        """Rolling window / warm-up lookback size"""
        return self._indicators_config.get("calculation", {}).get("window_size", 50)

    @property
    def INDICATOR_PAGE_DELAY_SECONDS(self) -> float:
        """Pause between pages of one instrument"""
        return self._indicators_config.get("calculation", {}).get("page_delay_seconds", 0.1)

    @property
    def INDICATOR_INSERT_BATCH_SIZE(self) -> int:
        """Rows per multi-row insert"""
        return self._indicators_config.get("calculation", {}).get("insert_batch_size", 10000)

    @property
    def INDICATOR_ROW_PAUSE_SECONDS(self) -> float:
        """Pause between rows in the row-by-row fallback"""
        return self._indicators_config.get("calculation", {}).get("row_pause_seconds", 0.01)

    @property
    def INDICATOR_EXHAUSTION_PAUSE_SECONDS(self) -> float:
        """Pause after a single-row write hits capacity exhaustion again"""
        return self._indicators_config.get("calculation", {}).get("exhaustion_pause_seconds", 1.0)


# Singleton pattern
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings (singleton)

    Returns:
        Settings instance

    Example:
        >>> settings = get_settings()
        >>> print(settings.INDICATOR_WINDOW_SIZE)
        50
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
