"""
ClickHouse implementation of the candle source and indicator destination

Reads raw 1-minute candles (fixed-point prices) and appends indicator rows
"""

import logging
from typing import Any

from clickhouse_driver import Client

from config.settings import get_settings
from core.interfaces.candle_source import BaseCandleSource
from core.interfaces.database import BaseDatabase
from core.interfaces.indicator_db import BaseIndicatorDB
from core.models.market_data import INDICATOR_COLUMNS, Candle, RawCandle

logger = logging.getLogger(__name__)

CANDLES_TABLE = "market_data.tinkoff_candles_1min"
INDICATORS_TABLE = "market_data.tinkoff_indicators_1min"

# Largest page the factory will configure; the client itself honours any limit
MAX_PAGE_SIZE = 10000

_CANDLE_COLUMNS = """
    instrument_uid,
    time,
    open_units,
    open_nano,
    high_units,
    high_nano,
    low_units,
    low_nano,
    close_units,
    close_nano,
    volume
"""


class ClickHouseClient(BaseDatabase, BaseCandleSource, BaseIndicatorDB):
    """
    ClickHouse implementation

    One explicit client handle, created by the factory, connected once and
    shared by the candle source and indicator sink for the whole run.
    """

    def __init__(self):
        self.settings = get_settings()
        self.client: Client | None = None

    async def connect(self) -> None:
        """Establish connection to ClickHouse"""
        try:
            self.client = Client(
                host=self.settings.CLICKHOUSE_HOST,
                port=self.settings.CLICKHOUSE_PORT,
                database=self.settings.CLICKHOUSE_DB,
                user=self.settings.CLICKHOUSE_USER,
                password=self.settings.CLICKHOUSE_PASSWORD,
                send_receive_timeout=self.settings.CLICKHOUSE_TIMEOUT_SECONDS,
            )
            # Test connection
            self.client.execute("SELECT 1")
            logger.info(
                f"✓ Connected to ClickHouse: "
                f"{self.settings.CLICKHOUSE_HOST}:{self.settings.CLICKHOUSE_PORT}"
            )
        except Exception as e:
            logger.error(f"✗ Failed to connect to ClickHouse: {e}")
            raise

    async def ping(self) -> bool:
        """SELECT 1 round trip"""
        if not self.client:
            return False

        try:
            return self.client.execute("SELECT 1") == [(1,)]
        except Exception as e:
            logger.error(f"✗ ClickHouse health check failed: {e}")
            return False

    def _require_client(self) -> Client:
        if not self.client:
            raise RuntimeError("ClickHouse client not connected")
        return self.client

    async def get_instrument_uids(self) -> list[str]:
        """All instruments that have candles, ordered by identifier"""
        client = self._require_client()

        try:
            rows = client.execute(
                f"SELECT DISTINCT instrument_uid FROM {CANDLES_TABLE} ORDER BY instrument_uid"
            )
            uids = [row[0] for row in rows]
            logger.info(f"Fetched {len(uids)} instrument UIDs with candles")
            return uids

        except Exception as e:
            logger.error(f"✗ ClickHouse instrument query error: {e}")
            raise

    async def fetch_candles_after(
        self, instrument_uid: str, after_time: int, limit: int
    ) -> list[Candle]:
        """
        Next page of candles strictly after `after_time`, oldest first

        Example:
            >>> page = await clickhouse.fetch_candles_after("uid-1", 1700000000, 10000)
        """
        query = f"""
            SELECT {_CANDLE_COLUMNS}
            FROM {CANDLES_TABLE}
            WHERE instrument_uid = %(instrument_uid)s AND time > %(after_time)s
            ORDER BY time ASC
            LIMIT %(limit)s
        """
        candles = await self._fetch_candles(
            query,
            {"instrument_uid": instrument_uid, "after_time": after_time, "limit": limit},
        )

        logger.debug(
            f"Retrieved {len(candles)} candles for {instrument_uid} after time={after_time} "
            f"(limit={limit})"
        )
        return candles

    async def fetch_candles_until(
        self, instrument_uid: str, until_time: int, limit: int
    ) -> list[Candle]:
        """Warm-up candles at or before `until_time`, newest first"""
        query = f"""
            SELECT {_CANDLE_COLUMNS}
            FROM {CANDLES_TABLE}
            WHERE instrument_uid = %(instrument_uid)s AND time <= %(until_time)s
            ORDER BY time DESC
            LIMIT %(limit)s
        """
        candles = await self._fetch_candles(
            query,
            {"instrument_uid": instrument_uid, "until_time": until_time, "limit": limit},
        )

        logger.debug(
            f"Retrieved {len(candles)} warm-up candles for {instrument_uid} "
            f"until time={until_time}"
        )
        return candles

    async def _fetch_candles(self, query: str, params: dict[str, Any]) -> list[Candle]:
        client = self._require_client()

        try:
            rows, columns = client.execute(query, params, with_column_types=True)
            names = [col[0] for col in columns]
            return [RawCandle(**dict(zip(names, row))).to_candle() for row in rows]

        except Exception as e:
            logger.error(f"✗ ClickHouse candle query error: {e}")
            raise

    async def insert_indicators(self, rows: list[tuple]) -> int:
        """
        Multi-row insert into the indicators table

        Args:
            rows: Tuples in INDICATOR_COLUMNS order

        Returns:
            Number of rows inserted

        Raises:
            clickhouse_driver.errors.Error: Propagated unchanged so the sink can
            classify capacity exhaustion by error code
        """
        if not rows:
            return 0

        client = self._require_client()

        query = f"INSERT INTO {INDICATORS_TABLE} ({', '.join(INDICATOR_COLUMNS)}) VALUES"
        settings = None
        if self.settings.CLICKHOUSE_ASYNC_INSERT:
            settings = {"async_insert": 1, "wait_for_async_insert": 0}

        try:
            client.execute(query, rows, settings=settings)
            logger.debug(f"Inserted {len(rows)} indicators into ClickHouse")
            return len(rows)

        except Exception as e:
            logger.error(f"✗ ClickHouse indicator insert error ({len(rows)} rows): {e}")
            raise

    async def close(self) -> None:
        """Close connection"""
        if self.client:
            self.client.disconnect()
            self.client = None
            logger.info("✓ ClickHouse connection closed")
