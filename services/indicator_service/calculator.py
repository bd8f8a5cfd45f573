"""
Indicator Calculator - Checkpointed per-instrument processing

Clean separation of concerns:
- Read resume point (via BaseCheckpointStore)
- Page through candles (via BaseCandleSource)
- Calculate indicators (via WindowedIndicatorEngine)
- Persist results (via IndicatorSink)
- Advance checkpoint

Architecture:
    checkpoint → fetch page (+ warm-up) → engine → sink → checkpoint advance
    repeat until a page is empty or shorter than page_size

Warm-up:
    The first page of a resumed run is prefixed with up to `window_size`
    candles at or before the checkpoint so rolling state matches an
    uninterrupted run. Later pages of the same run are prefixed with the
    tail of the previous slice for the same reason.
"""

import asyncio
import logging
from datetime import UTC, datetime

from core.interfaces.candle_source import BaseCandleSource
from core.interfaces.checkpoint_store import BaseCheckpointStore
from core.models.market_data import Candle
from domain.indicators.engine import WindowedIndicatorEngine
from services.indicator_service.persistence import IndicatorSink

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10000
DEFAULT_PAGE_DELAY_SECONDS = 0.1


def format_time_range(start_timestamp: int, end_timestamp: int) -> str:
    """Human-readable UTC range for log lines"""

    def _fmt(ts: int) -> str:
        try:
            return datetime.fromtimestamp(ts, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")
        except (OverflowError, OSError, ValueError):
            return str(ts)

    return f"{_fmt(start_timestamp)} to {_fmt(end_timestamp)}"


class IndicatorCalculator:
    """Run the fetch → compute → write → checkpoint cycle for one instrument"""

    def __init__(
        self,
        source: BaseCandleSource,
        sink: IndicatorSink,
        checkpoints: BaseCheckpointStore,
        engine: WindowedIndicatorEngine,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_delay: float = DEFAULT_PAGE_DELAY_SECONDS,
    ):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")

        self.source = source
        self.sink = sink
        self.checkpoints = checkpoints
        self.engine = engine
        self.page_size = page_size
        self.page_delay = page_delay

    @property
    def window_size(self) -> int:
        return self.engine.window_size

    async def process_instrument(self, instrument_uid: str) -> int:
        """
        Process all new candles of one instrument

        Args:
            instrument_uid: Instrument identifier

        Returns:
            Number of indicator rows written

        Raises:
            Any source/sink/checkpoint error; the checkpoint is left at the
            last page whose records were submitted
        """
        checkpoint = await self.checkpoints.get_last_processed_time(instrument_uid)
        logger.debug(f"Resuming {instrument_uid} from checkpoint {checkpoint}")

        warmup: list[Candle] = []
        total_written = 0
        pages = 0

        while True:
            page = await self.source.fetch_candles_after(instrument_uid, checkpoint, self.page_size)
            if not page:
                break

            if pages == 0 and checkpoint > 0:
                warmup = await self._fetch_warmup(instrument_uid, checkpoint)

            pages += 1
            slice_ = warmup + page
            records = self.engine.compute(slice_, warm_start_index=len(warmup))

            if records:
                total_written += await self.sink.insert(records)

            # Advance even when nothing was emitted so short pages are not refetched forever
            latest_time = max(candle.time for candle in page)
            await self.checkpoints.update_checkpoint(instrument_uid, latest_time)
            checkpoint = latest_time

            logger.info(
                f"Processed page {pages} for {instrument_uid}: {len(page)} candles "
                f"({format_time_range(page[0].time, latest_time)}), "
                f"{len(records)} indicators, checkpoint → {checkpoint}"
            )

            if len(page) < self.page_size:
                break

            warmup = slice_[-self.window_size :]
            await asyncio.sleep(self.page_delay)

        return total_written

    async def _fetch_warmup(self, instrument_uid: str, checkpoint: int) -> list[Candle]:
        """Up to window_size candles at or before the checkpoint, oldest first"""
        newest_first = await self.source.fetch_candles_until(
            instrument_uid, checkpoint, self.window_size
        )
        warmup = list(reversed(newest_first))

        if len(warmup) < self.window_size:
            logger.debug(
                f"Short warm-up for {instrument_uid}: {len(warmup)}/{self.window_size} candles"
            )
        return warmup
