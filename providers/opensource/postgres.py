"""
PostgreSQL implementation of the checkpoint store

One row per instrument holding the latest processed candle time
"""

import logging

import psycopg2

from config.settings import get_settings
from core.interfaces.checkpoint_store import BaseCheckpointStore
from core.interfaces.database import BaseDatabase
from core.models.market_data import Checkpoint

logger = logging.getLogger(__name__)

STATUS_TABLE = "market_data.tinkoff_indicators_status"

_SELECT_CHECKPOINT = f"""
    SELECT instrument_uid, last_processed_time, update_time
    FROM {STATUS_TABLE}
    WHERE instrument_uid = %s
"""

# GREATEST keeps the cursor monotonically non-decreasing
_UPSERT_CHECKPOINT = f"""
    INSERT INTO {STATUS_TABLE} AS s (instrument_uid, last_processed_time, update_time)
    VALUES (%s, %s, NOW())
    ON CONFLICT (instrument_uid)
    DO UPDATE SET
        last_processed_time = GREATEST(s.last_processed_time, EXCLUDED.last_processed_time),
        update_time = NOW()
"""


class PostgresCheckpointStore(BaseDatabase, BaseCheckpointStore):
    """
    PostgreSQL checkpoint store

    Uses a single autocommit connection; every update is durable once the
    call returns.
    """

    def __init__(self):
        self.settings = get_settings()
        self.conn = None

    async def connect(self) -> None:
        """Establish connection to PostgreSQL"""
        try:
            self.conn = psycopg2.connect(
                self.settings.postgres_dsn,
                connect_timeout=self.settings.POSTGRES_CONNECT_TIMEOUT_SECONDS,
            )
            self.conn.autocommit = True
            logger.info(
                f"✓ Connected to PostgreSQL: "
                f"{self.settings.POSTGRES_HOST}:{self.settings.POSTGRES_PORT}"
            )
        except Exception as e:
            logger.error(f"✗ Failed to connect to PostgreSQL: {e}")
            raise

    async def ping(self) -> bool:
        """SELECT 1 round trip"""
        if not self.conn:
            return False

        try:
            with self.conn.cursor() as cur:
                cur.execute("SELECT 1")
                return cur.fetchone() == (1,)
        except Exception as e:
            logger.error(f"✗ PostgreSQL health check failed: {e}")
            return False

    def _require_conn(self):
        if not self.conn:
            raise RuntimeError("PostgreSQL client not connected")
        return self.conn

    async def get_checkpoint(self, instrument_uid: str) -> Checkpoint | None:
        """Get checkpoint for an instrument, None if never processed"""
        conn = self._require_conn()

        try:
            with conn.cursor() as cur:
                cur.execute(_SELECT_CHECKPOINT, (instrument_uid,))
                row = cur.fetchone()
        except Exception as e:
            logger.error(f"✗ Checkpoint read failed for {instrument_uid}: {e}")
            raise

        if row is None:
            logger.debug(f"No checkpoint for {instrument_uid}")
            return None

        checkpoint = Checkpoint(
            instrument_uid=row[0],
            last_processed_time=row[1],
            update_time=row[2],
        )
        logger.debug(f"Checkpoint for {instrument_uid}: {checkpoint.last_processed_time}")
        return checkpoint

    async def update_checkpoint(self, instrument_uid: str, last_processed_time: int) -> None:
        """Upsert checkpoint (never moves backwards)"""
        conn = self._require_conn()

        try:
            with conn.cursor() as cur:
                cur.execute(_UPSERT_CHECKPOINT, (instrument_uid, last_processed_time))
        except Exception as e:
            logger.error(f"✗ Checkpoint update failed for {instrument_uid}: {e}")
            raise

        logger.debug(f"Updated last processed time for {instrument_uid}: {last_processed_time}")

    async def close(self) -> None:
        """Close connection"""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("✓ PostgreSQL connection closed")
