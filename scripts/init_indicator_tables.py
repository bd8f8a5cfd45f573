#!/usr/bin/env python3
"""
Create the candle / indicator tables in ClickHouse and the checkpoint table in PostgreSQL

Idempotent (IF NOT EXISTS). The candle table is normally owned by the
ingestion side; it is created here so a fresh environment can run the
indicator service end to end.

Usage:
    uv run python scripts/init_indicator_tables.py
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from providers.opensource.clickhouse import CANDLES_TABLE, INDICATORS_TABLE, ClickHouseClient
from providers.opensource.postgres import STATUS_TABLE, PostgresCheckpointStore

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

CLICKHOUSE_DDL = [
    "CREATE DATABASE IF NOT EXISTS market_data",
    f"""
    CREATE TABLE IF NOT EXISTS {CANDLES_TABLE} (
        instrument_uid String,
        time Int64,
        open_units Int64,
        open_nano Int32,
        high_units Int64,
        high_nano Int32,
        low_units Int64,
        low_nano Int32,
        close_units Int64,
        close_nano Int32,
        volume Int64
    )
    ENGINE = ReplacingMergeTree
    ORDER BY (instrument_uid, time)
    """,
    # Append-only log; nullable floats hold NaN/inf as NULL
    f"""
    CREATE TABLE IF NOT EXISTS {INDICATORS_TABLE} (
        instrument_uid String,
        time Int64,
        open_price Float64,
        high_price Float64,
        low_price Float64,
        close_price Float64,
        volume Int64,
        rsi_14 Nullable(Float64),
        ma_10 Nullable(Float64),
        ma_30 Nullable(Float64),
        volume_norm Nullable(Float64),
        ma_diff Nullable(Float64),
        ma_cross Int8,
        rsi_zone Int8,
        volume_anomaly UInt8,
        hour_of_day UInt8,
        day_of_week UInt8,
        price_change_15m Nullable(Float64),
        signal_15m Int8
    )
    ENGINE = MergeTree
    ORDER BY (instrument_uid, time)
    """,
]

POSTGRES_DDL = [
    "CREATE SCHEMA IF NOT EXISTS market_data",
    f"""
    CREATE TABLE IF NOT EXISTS {STATUS_TABLE} (
        instrument_uid TEXT PRIMARY KEY,
        last_processed_time BIGINT NOT NULL DEFAULT 0,
        update_time TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
]


def create_clickhouse_tables(client) -> None:
    """Run ClickHouse DDL on a connected clickhouse_driver.Client"""
    for statement in CLICKHOUSE_DDL:
        client.execute(statement)
    logger.info(f"✓ ClickHouse tables ready: {CANDLES_TABLE}, {INDICATORS_TABLE}")


def create_postgres_tables(conn) -> None:
    """Run PostgreSQL DDL on a connected (autocommit) psycopg2 connection"""
    with conn.cursor() as cur:
        for statement in POSTGRES_DDL:
            cur.execute(statement)
    logger.info(f"✓ PostgreSQL table ready: {STATUS_TABLE}")


async def main():
    """Main entry point"""
    clickhouse = ClickHouseClient()
    checkpoints = PostgresCheckpointStore()

    await clickhouse.connect()
    await checkpoints.connect()

    try:
        create_clickhouse_tables(clickhouse.client)
        create_postgres_tables(checkpoints.conn)
    finally:
        await clickhouse.close()
        await checkpoints.close()

    logger.info("✅ Done! Indicator tables initialized")


if __name__ == "__main__":
    asyncio.run(main())
