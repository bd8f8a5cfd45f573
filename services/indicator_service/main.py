"""
Indicator Service - Scheduled, resumable indicator calculation

Flow:
- Connect ClickHouse (candles + indicators) and PostgreSQL (checkpoints)
- Readiness check on both stores; the service stops if either is unreachable
- One immediate pass over all instruments (startup trigger)
- Timer-driven passes every N seconds, optionally within a daily UTC window

Each pass resumes every instrument from its checkpoint, so a crash or restart
never recomputes from scratch and never skips candles.
"""

import asyncio
import logging
import os
import signal
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from config.settings import get_settings
from factory.client_factory import (
    create_checkpoint_store,
    create_indicator_scheduler,
    create_timeseries_db,
)
from services.indicator_service.health import check_health, is_healthy

logger = logging.getLogger(__name__)

_fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_dir: str = "data/logs") -> None:
    """Console at `level`, rotating error file under `log_dir`"""
    os.makedirs(log_dir, exist_ok=True)

    _console = logging.StreamHandler(sys.stdout)
    _console.setLevel(level)
    _console.setFormatter(logging.Formatter(_fmt))

    _file = RotatingFileHandler(
        f"{log_dir}/indicator_service_errors.log",
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=3,
    )
    _file.setLevel(logging.ERROR)
    _file.setFormatter(logging.Formatter(_fmt))

    logging.basicConfig(level=level, handlers=[_console, _file])


class IndicatorService:
    """
    Indicator Service - owns the store handles and the scheduler

    Lifecycle: start() connects, runs the startup pass and the timer loop;
    stop() lets the in-flight pass finish, then closes both connections.
    """

    def __init__(self):
        self.settings = get_settings()

        # Initialize clients
        logger.info("🔧 Initializing clients...")
        self.db = create_timeseries_db()
        self.checkpoints = create_checkpoint_store()

        # Initialize components
        self.scheduler = create_indicator_scheduler(self.db, self.checkpoints)

    async def start(self):
        """Connect, run the startup pass, then the scheduled loop"""
        initial_delay = self.settings.INDICATOR_UPDATER_INITIAL_DELAY_SECONDS

        logger.info("=" * 60)
        logger.info("Indicator Service started (scheduled mode)")
        logger.info("=" * 60)
        logger.info(f"  Environment: {self.settings.ENVIRONMENT}")
        logger.info(f"  Enabled: {self.settings.INDICATOR_UPDATER_ENABLED}")
        logger.info(f"  Interval: {self.settings.INDICATOR_UPDATER_INTERVAL_SECONDS}s")
        logger.info(f"  Page size: {self.settings.INDICATOR_PAGE_SIZE}")
        logger.info(f"  Window size: {self.settings.INDICATOR_WINDOW_SIZE}")
        logger.info("=" * 60)

        try:
            await self.db.connect()
            await self.checkpoints.connect()

            status = await check_health(self.db, self.checkpoints)
            if not is_healthy(status):
                raise RuntimeError(f"Readiness check failed: {status}")

            if initial_delay > 0:
                logger.info(f"⏳ Initial {initial_delay}s delay...")
                await asyncio.sleep(initial_delay)

            if self.settings.INDICATOR_UPDATER_ENABLED:
                try:
                    count = await self.scheduler.trigger_update()
                    logger.info(
                        f"Initial indicators update completed: {count} instruments processed"
                    )
                except Exception as e:
                    logger.error(f"Failed to perform initial indicators update: {e}", exc_info=True)

            await self.scheduler.start()

        except KeyboardInterrupt:
            logger.info("⚠️ Received interrupt signal")
        except Exception as e:
            logger.error(f"❌ Fatal error: {e}", exc_info=True)
        finally:
            await self.stop()

    async def stop(self):
        """Graceful shutdown"""
        logger.info("🛑 Stopping Indicator Service...")
        self.scheduler.stop()

        if self.db:
            await self.db.close()
        if self.checkpoints:
            await self.checkpoints.close()

        logger.info("✅ Indicator Service stopped")


def signal_handler(service):
    """Handle SIGINT/SIGTERM"""

    def handler(signum, frame):
        logger.info(f"Received signal {signum}")
        service.scheduler.stop()

    return handler


async def main():
    """Main entry point"""
    setup_logging(get_settings().LOG_LEVEL)

    service = IndicatorService()

    signal.signal(signal.SIGINT, signal_handler(service))
    signal.signal(signal.SIGTERM, signal_handler(service))

    await service.start()


def run():
    """Console script entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Goodbye!")


if __name__ == "__main__":
    run()
