"""
Unit tests for market data models
"""

import pytest
from pydantic import ValidationError

from core.models.market_data import (
    INDICATOR_COLUMNS,
    Candle,
    Checkpoint,
    IndicatorRecord,
    RawCandle,
    convert_price,
)
from tests.fakes import make_record


@pytest.mark.unit
class TestPriceConversion:
    def test_units_and_nano(self):
        assert convert_price(101, 250_000_000) == 101.25

    def test_zero_nano(self):
        assert convert_price(42, 0) == 42.0

    def test_negative_price(self):
        assert convert_price(-1, -500_000_000) == -1.5


@pytest.mark.unit
class TestRawCandle:
    def test_to_candle(self):
        raw = RawCandle(
            instrument_uid="ABC",
            time=1704067200,
            open_units=10,
            open_nano=100_000_000,
            high_units=11,
            high_nano=0,
            low_units=9,
            low_nano=900_000_000,
            close_units=10,
            close_nano=500_000_000,
            volume=1500,
        )

        candle = raw.to_candle()

        assert isinstance(candle, Candle)
        assert candle.open_price == pytest.approx(10.1)
        assert candle.high_price == 11.0
        assert candle.low_price == pytest.approx(9.9)
        assert candle.close_price == 10.5
        assert candle.volume == 1500
        assert candle.time == 1704067200

    def test_missing_field_rejected(self):
        with pytest.raises(ValidationError):
            RawCandle(instrument_uid="ABC", time=0)


@pytest.mark.unit
class TestIndicatorRecord:
    def test_row_follows_column_order(self):
        record = make_record(0, rsi_14=61.5, signal_15m=-1)

        row = record.to_row()

        assert len(row) == len(INDICATOR_COLUMNS) == 19
        assert row[0] == "ABC"
        assert row[INDICATOR_COLUMNS.index("rsi_14")] == 61.5
        assert row[-1] == -1

    def test_nan_is_accepted(self):
        record = make_record(0, rsi_14=float("nan"))
        assert record.rsi_14 != record.rsi_14

    def test_record_fields_match_columns(self):
        assert tuple(IndicatorRecord.model_fields) == INDICATOR_COLUMNS


@pytest.mark.unit
def test_checkpoint_update_time_optional():
    checkpoint = Checkpoint(instrument_uid="ABC", last_processed_time=1704067200)

    assert checkpoint.update_time is None
