"""
Windowed indicator engine

Pure, stateful transform: ordered candles of one instrument -> indicator records.

Design principle:
- No database dependency (testable with plain candle lists)
- Rolling state lives only for the duration of one compute() call
- Continuity across pages comes from re-seeding with a warm-up prefix,
  never from state kept between calls

Emission rule:
    A record is produced for index i only when i >= warm_start_index AND
    i >= window_size, i.e. at least `window_size` earlier candles seeded the
    rolling state. An input of window_size candles or fewer yields nothing.
"""

import logging
from collections.abc import Sequence

from core.models.market_data import Candle, IndicatorRecord
from domain.indicators.labels import (
    FORWARD_HORIZON,
    calculate_future_price_change,
    time_features,
)
from domain.indicators.momentum import RSI_PERIOD, RSIWindow, classify_rsi_zone
from domain.indicators.moving_averages import (
    MA_FAST_PERIOD,
    MA_SLOW_PERIOD,
    PriceWindow,
    determine_ma_cross,
)
from domain.indicators.volume import VOLUME_WINDOW, VolumeStatistics, volume_anomaly_flag

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 50


class RollingWindowState:
    """
    Bounded rolling state for one instrument

    - prices: last MA_SLOW_PERIOD closes
    - rsi: last RSI_PERIOD gains/losses
    - volumes: count/sum/sum-of-squares over the last VOLUME_WINDOW volumes
    - ma_fast / ma_slow: moving averages after the latest update
    """

    def __init__(self):
        self.prices = PriceWindow(capacity=MA_SLOW_PERIOD)
        self.rsi = RSIWindow(period=RSI_PERIOD)
        self.volumes = VolumeStatistics(window_size=VOLUME_WINDOW)
        self.ma_fast = 0.0
        self.ma_slow = 0.0

    def update(self, candle: Candle) -> None:
        """Push one candle into every buffer and refresh the moving averages"""
        previous_close = self.prices.last
        if previous_close is not None:
            self.rsi.add_change(candle.close_price - previous_close)

        self.prices.add(candle.close_price)
        self.volumes.add(float(candle.volume))

        self.ma_fast = self.prices.sma(MA_FAST_PERIOD)
        self.ma_slow = self.prices.sma(MA_SLOW_PERIOD)


class WindowedIndicatorEngine:
    """
    Compute indicator records from an ordered candle slice

    Example:
        >>> engine = WindowedIndicatorEngine(window_size=50)
        >>> records = engine.compute(candles, warm_start_index=len(warmup))
    """

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE, forward_horizon: int = FORWARD_HORIZON):
        if window_size < 1:
            raise ValueError(f"window_size must be positive, got {window_size}")

        self.window_size = window_size
        self.forward_horizon = forward_horizon

    def compute(self, candles: Sequence[Candle], warm_start_index: int = 0) -> list[IndicatorRecord]:
        """
        Calculate indicators for candles[warm_start_index:]

        Args:
            candles: Candles of one instrument ordered by time ASC
                     (warm-up prefix followed by the current page)
            warm_start_index: Index of the first candle that may be emitted;
                              earlier candles only seed the rolling state

        Returns:
            One IndicatorRecord per emitted candle (possibly empty)
        """
        if len(candles) <= self.window_size:
            logger.debug(
                f"Not enough candles for indicator calculation: "
                f"{len(candles)} <= {self.window_size}"
            )
            return []

        emit_from = max(warm_start_index, self.window_size)
        state = RollingWindowState()
        records: list[IndicatorRecord] = []

        for i, candle in enumerate(candles):
            prev_fast, prev_slow = state.ma_fast, state.ma_slow
            state.update(candle)

            if i < emit_from:
                continue

            records.append(self._build_record(candles, i, state, prev_fast, prev_slow))

        return records

    def _build_record(
        self,
        candles: Sequence[Candle],
        index: int,
        state: RollingWindowState,
        prev_fast: float,
        prev_slow: float,
    ) -> IndicatorRecord:
        candle = candles[index]

        rsi_14 = state.rsi.value()
        volume_norm = state.volumes.z_score(float(candle.volume))

        # Forward label only sees the current slice
        future_index = index + self.forward_horizon
        if future_index < len(candles):
            price_change_15m, signal_15m = calculate_future_price_change(
                candle.close_price, candles[future_index].close_price
            )
        else:
            price_change_15m, signal_15m = 0.0, 0

        hour_of_day, day_of_week = time_features(candle.time)

        return IndicatorRecord(
            instrument_uid=candle.instrument_uid,
            time=candle.time,
            open_price=candle.open_price,
            high_price=candle.high_price,
            low_price=candle.low_price,
            close_price=candle.close_price,
            volume=candle.volume,
            rsi_14=rsi_14,
            ma_10=state.ma_fast,
            ma_30=state.ma_slow,
            volume_norm=volume_norm,
            ma_diff=state.ma_fast - state.ma_slow,
            ma_cross=determine_ma_cross(prev_fast, prev_slow, state.ma_fast, state.ma_slow),
            rsi_zone=classify_rsi_zone(rsi_14),
            volume_anomaly=volume_anomaly_flag(volume_norm),
            hour_of_day=hour_of_day,
            day_of_week=day_of_week,
            price_change_15m=price_change_15m,
            signal_15m=signal_15m,
        )
