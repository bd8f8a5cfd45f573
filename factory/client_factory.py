"""
Client factory - Create store clients from configuration

Dependency injection: components receive explicit client handles built here,
never a process-wide global connection
"""

import logging

from config.settings import get_settings
from core.interfaces.checkpoint_store import BaseCheckpointStore
from domain.indicators.engine import WindowedIndicatorEngine
from services.indicator_service.calculator import IndicatorCalculator
from services.indicator_service.persistence import IndicatorSink
from services.indicator_service.scheduler import IndicatorsScheduler

logger = logging.getLogger(__name__)


def create_timeseries_db():
    """
    Create time-series database client (candle source + indicator destination)

    Returns:
        ClickHouseClient (not yet connected)
    """
    from providers.opensource.clickhouse import ClickHouseClient

    logger.info("Creating ClickHouseClient")
    return ClickHouseClient()


def create_checkpoint_store() -> BaseCheckpointStore:
    """
    Create checkpoint store client

    Returns:
        PostgresCheckpointStore (not yet connected)
    """
    from providers.opensource.postgres import PostgresCheckpointStore

    logger.info("Creating PostgresCheckpointStore")
    return PostgresCheckpointStore()


def create_indicator_scheduler(db, checkpoints: BaseCheckpointStore) -> IndicatorsScheduler:
    """
    Wire engine, sink, calculator and scheduler from settings

    Args:
        db: Candle source + indicator destination (e.g. ClickHouseClient)
        checkpoints: Checkpoint store

    Example:
        >>> db = create_timeseries_db()
        >>> checkpoints = create_checkpoint_store()
        >>> scheduler = create_indicator_scheduler(db, checkpoints)
        >>> await scheduler.trigger_update()
    """
    from providers.opensource.clickhouse import MAX_PAGE_SIZE

    settings = get_settings()

    page_size = settings.INDICATOR_PAGE_SIZE
    if page_size > MAX_PAGE_SIZE:
        logger.warning(
            f"⚠️ Configured page_size {page_size} exceeds {MAX_PAGE_SIZE}, using {MAX_PAGE_SIZE}"
        )
        page_size = MAX_PAGE_SIZE

    engine = WindowedIndicatorEngine(window_size=settings.INDICATOR_WINDOW_SIZE)
    sink = IndicatorSink(
        db,
        batch_size=settings.INDICATOR_INSERT_BATCH_SIZE,
        row_pause=settings.INDICATOR_ROW_PAUSE_SECONDS,
        exhaustion_pause=settings.INDICATOR_EXHAUSTION_PAUSE_SECONDS,
    )
    calculator = IndicatorCalculator(
        source=db,
        sink=sink,
        checkpoints=checkpoints,
        engine=engine,
        page_size=page_size,
        page_delay=settings.INDICATOR_PAGE_DELAY_SECONDS,
    )

    return IndicatorsScheduler(
        calculator=calculator,
        source=db,
        enabled=settings.INDICATOR_UPDATER_ENABLED,
        interval_seconds=settings.INDICATOR_UPDATER_INTERVAL_SECONDS,
        start_time=settings.INDICATOR_UPDATER_START_TIME,
        end_time=settings.INDICATOR_UPDATER_END_TIME,
        instrument_delay=settings.INDICATOR_UPDATER_INSTRUMENT_DELAY_SECONDS,
    )
