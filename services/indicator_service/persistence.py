"""
Indicator Persistence - Adaptive batched writes to the indicator table

Strategy:
1. Split records into fixed-size sub-batches, one multi-row INSERT each
2. Capacity exhaustion (too many parts, memory limit) → retry that
   sub-batch row by row, pausing between rows; rows that hit exhaustion
   again are dropped and counted as not inserted
3. Any other error → abort, propagate, skip the remaining sub-batches

Architecture:
    insert() →
        ├─ _sanitize_row() (NaN/inf → NULL)
        ├─ db.insert_indicators(sub_batch)
        └─ _insert_row_by_row(sub_batch) (capacity fallback)
"""

import asyncio
import logging
import math
from collections.abc import Sequence

from core.interfaces.indicator_db import BaseIndicatorDB
from core.models.market_data import IndicatorRecord
from core.utils.errors import is_capacity_exhausted

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10000
DEFAULT_ROW_PAUSE_SECONDS = 0.01
DEFAULT_EXHAUSTION_PAUSE_SECONDS = 1.0


def sanitize_value(value):
    """Replace NaN / ±inf floats with None (NULL); other values pass through"""
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    return value


def _sanitize_row(record: IndicatorRecord) -> tuple:
    return tuple(sanitize_value(value) for value in record.to_row())


class IndicatorSink:
    """Write indicator records with capacity-aware fallback"""

    def __init__(
        self,
        db: BaseIndicatorDB,
        batch_size: int = DEFAULT_BATCH_SIZE,
        row_pause: float = DEFAULT_ROW_PAUSE_SECONDS,
        exhaustion_pause: float = DEFAULT_EXHAUSTION_PAUSE_SECONDS,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self.db = db
        self.batch_size = batch_size
        self.row_pause = row_pause
        self.exhaustion_pause = exhaustion_pause

    async def insert(self, records: Sequence[IndicatorRecord]) -> int:
        """
        Persist records

        Returns:
            Number of rows durably written (dropped rows excluded)

        Raises:
            Exception: The first non-capacity error, unchanged
        """
        if not records:
            logger.debug("No indicators to insert")
            return 0

        rows = [_sanitize_row(record) for record in records]
        total = len(rows)
        inserted = 0

        logger.info(f"Starting batch insertion of {total} indicators")

        for start in range(0, total, self.batch_size):
            batch = rows[start : start + self.batch_size]

            try:
                inserted += await self.db.insert_indicators(batch)
                logger.debug(
                    f"✓ Inserted batch of {len(batch)} indicators ({start + len(batch)}/{total})"
                )

            except Exception as e:
                if not is_capacity_exhausted(e):
                    logger.error(f"❌ Batch insertion failed, aborting: {e}")
                    raise

                logger.warning(
                    f"⚠️ Capacity exhausted for batch of {len(batch)} rows ({e}), "
                    f"retrying row by row"
                )
                inserted += await self._insert_row_by_row(batch)

        logger.info(f"Insertion complete: {inserted}/{total} indicators written")
        return inserted

    async def _insert_row_by_row(self, batch: list[tuple]) -> int:
        """
        Capacity fallback: one single-row insert per row

        Returns:
            Rows written; rows that hit exhaustion again are dropped
        """
        inserted = 0
        dropped = 0

        for i, row in enumerate(batch):
            if i > 0:
                await asyncio.sleep(self.row_pause)

            try:
                inserted += await self.db.insert_indicators([row])

            except Exception as e:
                if not is_capacity_exhausted(e):
                    logger.error(f"❌ Single-row insertion failed, aborting: {e}")
                    raise

                dropped += 1
                logger.error(f"✗ Dropping indicator row {row[0]}@{row[1]}: {e}")
                await asyncio.sleep(self.exhaustion_pause)

        if dropped:
            logger.warning(f"⚠️ Row-by-row fallback dropped {dropped}/{len(batch)} rows")

        return inserted
