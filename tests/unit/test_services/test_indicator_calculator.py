"""
Unit tests for IndicatorCalculator

Drives the fetch → compute → write → checkpoint cycle against in-memory
stores: pagination, warm-up on resume, checkpoint advance and resume
consistency.
"""

from unittest.mock import AsyncMock, patch

import pytest

from domain.indicators.engine import WindowedIndicatorEngine
from services.indicator_service.calculator import IndicatorCalculator, format_time_range
from services.indicator_service.persistence import IndicatorSink
from tests.fakes import (
    BASE_TIME,
    InMemoryCandleSource,
    InMemoryCheckpointStore,
    InMemoryIndicatorDB,
    make_candles,
)


def _closes(n: int) -> list[float]:
    return [100.0 + (i % 9) * 0.4 - (i % 4) * 0.3 + i * 0.02 for i in range(n)]


def _volumes(n: int) -> list[int]:
    return [50 + (i * 53) % 400 for i in range(n)]


def _build(candles_by_uid, checkpoints=None, page_size=10000, window_size=50):
    source = InMemoryCandleSource(candles_by_uid)
    db = InMemoryIndicatorDB()
    store = checkpoints or InMemoryCheckpointStore()
    calculator = IndicatorCalculator(
        source=source,
        sink=IndicatorSink(db, batch_size=10000, row_pause=0, exhaustion_pause=0),
        checkpoints=store,
        engine=WindowedIndicatorEngine(window_size=window_size),
        page_size=page_size,
        page_delay=0,
    )
    return calculator, source, db, store


@pytest.mark.unit
class TestProcessInstrument:
    """Single-page behaviour"""

    async def test_first_run_writes_and_checkpoints(self):
        candles = make_candles([float(p) for p in range(1, 52)])
        calculator, source, db, store = _build({"ABC": candles})

        written = await calculator.process_instrument("ABC")

        assert written == 1
        assert len(db.rows) == 1
        assert db.rows[0][0] == "ABC"
        assert db.rows[0][1] == candles[-1].time
        assert await store.get_last_processed_time("ABC") == candles[-1].time

        # No checkpoint → no warm-up lookup
        assert source.until_calls == []

    async def test_no_new_candles(self):
        calculator, source, db, store = _build({"ABC": make_candles([100.0] * 10)})
        await store.update_checkpoint("ABC", BASE_TIME + 9 * 60)
        store.updates.clear()

        assert await calculator.process_instrument("ABC") == 0
        assert store.updates == []
        assert db.calls == []
        assert source.until_calls == []

    async def test_checkpoint_advances_without_records(self):
        """Too few candles to emit, but the cursor still moves"""
        candles = make_candles([100.0] * 10)
        calculator, _, db, store = _build({"ABC": candles})

        assert await calculator.process_instrument("ABC") == 0

        assert db.calls == []
        assert store.updates == [("ABC", candles[-1].time)]

    async def test_short_warmup_emits_nothing(self):
        """10 candles of history + 20 new: below the window, nothing written"""
        candles = make_candles([100.0] * 30)
        store = InMemoryCheckpointStore({"ABC": candles[9].time})
        calculator, source, db, store = _build({"ABC": candles}, checkpoints=store)

        assert await calculator.process_instrument("ABC") == 0

        assert source.until_calls == [("ABC", candles[9].time, 50)]
        assert db.rows == []
        assert await store.get_last_processed_time("ABC") == candles[-1].time

    async def test_unknown_instrument(self):
        calculator, _, db, store = _build({})

        assert await calculator.process_instrument("XYZ") == 0
        assert store.updates == []

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            _build({}, page_size=0)


@pytest.mark.unit
class TestPagination:
    """Multi-page runs"""

    async def test_pages_until_short_page(self):
        n = 200
        candles = make_candles(_closes(n), volumes=_volumes(n))
        calculator, source, db, store = _build({"ABC": candles}, page_size=60)

        written = await calculator.process_instrument("ABC")

        # Pages: 60, 60, 60, 20 (short page ends the run)
        assert [call[1] for call in source.after_calls] == [
            0,
            candles[59].time,
            candles[119].time,
            candles[179].time,
        ]
        assert store.updates == [
            ("ABC", candles[59].time),
            ("ABC", candles[119].time),
            ("ABC", candles[179].time),
            ("ABC", candles[199].time),
        ]
        # Every candle from index 50 on gets exactly one row
        assert written == 150
        assert [row[1] for row in db.rows] == [c.time for c in candles[50:]]

    async def test_exact_multiple_ends_on_empty_page(self):
        candles = make_candles(_closes(120))
        calculator, source, _, store = _build({"ABC": candles}, page_size=60)

        await calculator.process_instrument("ABC")

        assert len(source.after_calls) == 3
        assert len(store.updates) == 2

    async def test_in_run_pages_match_single_page_indicators(self):
        """Carry-over warm-up keeps rolling indicators identical across pages"""
        n = 200
        candles = make_candles(_closes(n), volumes=_volumes(n))

        single, _, single_db, _ = _build({"ABC": candles}, page_size=10000)
        paged, _, paged_db, _ = _build({"ABC": candles}, page_size=60)
        await single.process_instrument("ABC")
        await paged.process_instrument("ABC")

        # All columns up to day_of_week; forward labels may be truncated per page
        assert [row[:17] for row in paged_db.rows] == [row[:17] for row in single_db.rows]

    async def test_page_delay_between_full_pages(self):
        candles = make_candles(_closes(130))
        calculator, _, _, _ = _build({"ABC": candles}, page_size=60)
        calculator.page_delay = 0.5

        with patch(
            "services.indicator_service.calculator.asyncio.sleep", new_callable=AsyncMock
        ) as sleep:
            await calculator.process_instrument("ABC")

        # Sleep after each full page, not after the final short one
        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)


@pytest.mark.unit
class TestResume:
    """Interrupted runs reproduce an uninterrupted one"""

    @pytest.mark.parametrize("split", [60, 120, 151])
    async def test_resume_consistency(self, split):
        n = 200
        candles = make_candles(_closes(n), volumes=_volumes(n))

        full, _, full_db, _ = _build({"ABC": candles})
        await full.process_instrument("ABC")
        expected = {row[1]: row for row in full_db.rows}

        # Run on a prefix, then again after the rest arrives
        partial, source, db, store = _build({"ABC": candles[:split]})
        await partial.process_instrument("ABC")
        assert await store.get_last_processed_time("ABC") == candles[split - 1].time

        source.candles["ABC"] = candles
        db.rows.clear()
        await partial.process_instrument("ABC")

        assert source.until_calls[-1] == ("ABC", candles[split - 1].time, 50)
        assert [row[1] for row in db.rows] == [c.time for c in candles[split:]]
        for row in db.rows:
            assert row == expected[row[1]]

    async def test_warmup_fetched_once_per_run(self):
        candles = make_candles(_closes(300))
        store = InMemoryCheckpointStore({"ABC": candles[99].time})
        calculator, source, _, _ = _build({"ABC": candles}, checkpoints=store, page_size=50)

        await calculator.process_instrument("ABC")

        assert source.until_calls == [("ABC", candles[99].time, 50)]

    async def test_errors_leave_checkpoint_at_last_page(self):
        candles = make_candles(_closes(130))
        calculator, source, _, store = _build({"ABC": candles}, page_size=60)

        original = source.fetch_candles_after
        calls = 0

        async def flaky(uid, after_time, limit):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise ConnectionError("connection reset")
            return await original(uid, after_time, limit)

        source.fetch_candles_after = flaky

        with pytest.raises(ConnectionError):
            await calculator.process_instrument("ABC")

        assert await store.get_last_processed_time("ABC") == candles[59].time


@pytest.mark.unit
def test_format_time_range():
    assert format_time_range(BASE_TIME, BASE_TIME + 3600) == (
        "2024-01-01 00:00:00 to 2024-01-01 01:00:00"
    )
