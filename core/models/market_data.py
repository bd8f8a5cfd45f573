"""
Market data models

Pydantic models for the indicator pipeline:
- RawCandle: 1-minute candle as stored (fixed-point units + nano prices)
- Candle: Float projection consumed by the indicator engine
- IndicatorRecord: One computed indicator row (19 columns)
- Checkpoint: Per-instrument processing cursor
"""

from datetime import datetime

from pydantic import BaseModel, Field

NANO_PER_UNIT = 1_000_000_000


def convert_price(units: int, nano: int) -> float:
    """
    Convert fixed-point price (integer units + nano fraction) to float

    Example:
        >>> convert_price(101, 250_000_000)
        101.25
    """
    return units + nano / NANO_PER_UNIT


class Candle(BaseModel):
    """
    OHLCV candlestick (float projection)

    One fixed-interval summary for an instrument
    """

    instrument_uid: str = Field(description="Instrument identifier")
    time: int = Field(description="Candle open time (epoch seconds, UTC)")
    open_price: float = Field(description="Opening price")
    high_price: float = Field(description="Highest price in interval")
    low_price: float = Field(description="Lowest price in interval")
    close_price: float = Field(description="Closing price")
    volume: int = Field(description="Total volume traded")


class RawCandle(BaseModel):
    """
    Candle row as read from the candle table

    Prices are encoded as integer units plus a nano (1e-9) fractional part.
    """

    instrument_uid: str
    time: int
    open_units: int
    open_nano: int
    high_units: int
    high_nano: int
    low_units: int
    low_nano: int
    close_units: int
    close_nano: int
    volume: int

    def to_candle(self) -> Candle:
        """Convert to the float projection used by the engine"""
        return Candle(
            instrument_uid=self.instrument_uid,
            time=self.time,
            open_price=convert_price(self.open_units, self.open_nano),
            high_price=convert_price(self.high_units, self.high_nano),
            low_price=convert_price(self.low_units, self.low_nano),
            close_price=convert_price(self.close_units, self.close_nano),
            volume=self.volume,
        )


# Column order of market_data.tinkoff_indicators_1min
INDICATOR_COLUMNS = (
    "instrument_uid",
    "time",
    "open_price",
    "high_price",
    "low_price",
    "close_price",
    "volume",
    "rsi_14",
    "ma_10",
    "ma_30",
    "volume_norm",
    "ma_diff",
    "ma_cross",
    "rsi_zone",
    "volume_anomaly",
    "hour_of_day",
    "day_of_week",
    "price_change_15m",
    "signal_15m",
)


class IndicatorRecord(BaseModel):
    """
    Technical indicators for a single candle

    Carries the original OHLCV plus derived features and the 15-minute
    forward label.
    """

    # Identification
    instrument_uid: str
    time: int

    # Base prices
    open_price: float
    high_price: float
    low_price: float
    close_price: float
    volume: int

    # Indicators
    rsi_14: float
    ma_10: float
    ma_30: float
    volume_norm: float

    # Derived features
    ma_diff: float
    ma_cross: int = Field(description="+1 bullish cross, -1 bearish cross, 0 none")
    rsi_zone: int = Field(description="1 oversold (<30), -1 overbought (>70), 0 neutral")
    volume_anomaly: int = Field(description="1 if volume z-score > 2.0")

    # Time features
    hour_of_day: int = Field(description="UTC hour 0-23")
    day_of_week: int = Field(description="ISO weekday 1=Monday..7=Sunday")

    # Target
    price_change_15m: float
    signal_15m: int

    def to_row(self) -> tuple:
        """Values in destination column order"""
        return tuple(getattr(self, column) for column in INDICATOR_COLUMNS)


class Checkpoint(BaseModel):
    """Durable per-instrument cursor: latest raw candle time already processed"""

    instrument_uid: str
    last_processed_time: int = Field(description="Epoch seconds of latest processed candle")
    update_time: datetime | None = Field(default=None, description="When the cursor moved (UTC)")
