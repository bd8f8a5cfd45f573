"""
Indicators Scheduler - Timer-driven passes over all instruments

States:
- idle: waiting for the next tick (cancellable wait)
- running: one full pass in progress

Ticks are single-flight by construction: the loop awaits the pass before
waiting again, so a tick that would fire mid-pass is simply not queued.
A stop request only interrupts the idle wait; an in-flight pass finishes.
"""

import asyncio
import logging
from datetime import UTC, datetime, time

from core.interfaces.candle_source import BaseCandleSource
from services.indicator_service.calculator import IndicatorCalculator

logger = logging.getLogger(__name__)

TIME_FORMAT = "%H:%M:%S"


def _parse_time_of_day(value: str) -> time:
    return datetime.strptime(value, TIME_FORMAT).time()


def is_operation_allowed(
    start_time: str | None, end_time: str | None, now: time | None = None
) -> bool:
    """
    Check whether `now` (UTC time of day) falls in the daily operation window

    Args:
        start_time: Window start "HH:MM:SS" or None
        end_time: Window end "HH:MM:SS" or None
        now: Time of day to test (default: current UTC time)

    Returns:
        True when either bound is missing, when a bound cannot be parsed,
        or when `now` is inside the (inclusive) window. A window whose start
        is after its end wraps past midnight.

    Example:
        >>> is_operation_allowed("21:00:00", "04:00:00", time(23, 30))
        True
        >>> is_operation_allowed("21:00:00", "04:00:00", time(12, 0))
        False
    """
    if not start_time or not end_time:
        return True

    try:
        start = _parse_time_of_day(start_time)
        end = _parse_time_of_day(end_time)
    except ValueError as e:
        logger.warning(f"⚠️ Invalid operation window {start_time}-{end_time}: {e}, allowing run")
        return True

    if now is None:
        now = datetime.now(UTC).time().replace(tzinfo=None)

    if start <= end:
        return start <= now <= end

    # Window crosses midnight, e.g. 21:00:00 → 04:00:00
    return now >= start or now <= end


class IndicatorsScheduler:
    """
    Drive IndicatorCalculator over every known instrument

    Usage:
        scheduler = IndicatorsScheduler(calculator, source, enabled=True, interval_seconds=60)
        await scheduler.trigger_update()  # startup pass
        await scheduler.start()           # runs until stop()
    """

    def __init__(
        self,
        calculator: IndicatorCalculator,
        source: BaseCandleSource,
        enabled: bool = True,
        interval_seconds: float = 60,
        start_time: str | None = None,
        end_time: str | None = None,
        instrument_delay: float = 0.1,
    ):
        self.calculator = calculator
        self.source = source
        self.enabled = enabled
        self.interval_seconds = interval_seconds
        self.start_time = start_time
        self.end_time = end_time
        self.instrument_delay = instrument_delay

        self.running = False
        self._stop_event = asyncio.Event()

    def should_run(self, now: time | None = None) -> bool:
        """Tick gate: enabled flag and daily window"""
        if not self.enabled:
            return False
        return is_operation_allowed(self.start_time, self.end_time, now)

    async def trigger_update(self) -> int:
        """
        Run one full pass immediately (no gating)

        Returns:
            Number of instruments processed without error
        """
        logger.info("Starting indicators update for all instruments")

        instrument_uids = await self.source.get_instrument_uids()
        if not instrument_uids:
            logger.info("No instruments found for processing")
            return 0

        total = len(instrument_uids)
        logger.info(f"Found {total} instruments for processing")

        total_written = 0
        processed = 0

        for index, instrument_uid in enumerate(instrument_uids, start=1):
            logger.info(f"Processing instrument {index}/{total}: {instrument_uid}")

            try:
                written = await self.calculator.process_instrument(instrument_uid)
                total_written += written
                processed += 1
                logger.info(f"✓ Processed {written} indicators for instrument {instrument_uid}")

            except Exception as e:
                # Checkpoint stays at the last submitted page; next pass resumes there
                logger.error(
                    f"❌ Error processing indicators for instrument {instrument_uid}: {e}",
                    exc_info=True,
                )

            if index < total and self.instrument_delay > 0:
                await asyncio.sleep(self.instrument_delay)

        logger.info(
            f"✅ Completed indicators update: {total_written} indicators "
            f"for {processed}/{total} instruments"
        )
        return processed

    async def run_tick(self) -> int | None:
        """
        One timer tick: gate, then run a pass

        Returns:
            Instruments processed, or None if the tick was skipped
        """
        if not self.should_run():
            logger.debug(
                f"Scheduler: skipping update - disabled or outside operation window "
                f"(current time: {datetime.now(UTC).strftime(TIME_FORMAT)})"
            )
            return None

        logger.info("Scheduler: triggering indicators update")
        return await self.trigger_update()

    async def start(self) -> None:
        """Run the timer loop until stop() is called"""
        if not self.enabled:
            logger.info("Indicators scheduler is disabled in configuration")
            return

        if self.start_time and self.end_time:
            logger.info(
                f"Scheduler operation window configured: {self.start_time} to {self.end_time} UTC"
            )
        logger.info(f"Starting indicators scheduler with {self.interval_seconds} second interval")

        # A stop requested before start() (e.g. during the startup pass) is honoured
        if self._stop_event.is_set():
            logger.info("Indicators scheduler stop already requested, not starting")
            return

        self.running = True
        sleep_time = float(self.interval_seconds)

        while self.running:
            # Idle: wait for the next tick or a stop request
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=sleep_time)
            except TimeoutError:
                pass

            if not self.running:
                break

            started = datetime.now(UTC)

            try:
                count = await self.run_tick()
                if count is not None:
                    logger.info(f"Scheduler: successfully updated indicators for {count} instruments")
            except Exception as e:
                logger.error(f"Scheduler: failed to update indicators: {e}", exc_info=True)

            elapsed = (datetime.now(UTC) - started).total_seconds()
            sleep_time = max(0.0, self.interval_seconds - elapsed)
            logger.debug(f"Pass took {elapsed:.2f}s, next tick in {sleep_time:.1f}s")

        logger.info("Indicators scheduler stopped")

    def stop(self) -> None:
        """Request stop; the current pass (if any) completes first"""
        self.running = False
        self._stop_event.set()
