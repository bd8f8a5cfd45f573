"""
Technical indicators module

Exports:
- Engine: WindowedIndicatorEngine, RollingWindowState
- Moving averages: PriceWindow, calculate_sma, determine_ma_cross
- Momentum: RSIWindow, calculate_rsi, classify_rsi_zone
- Volume: VolumeStatistics, volume_anomaly_flag
- Labels: calculate_future_price_change, time_features
"""

from domain.indicators.engine import RollingWindowState, WindowedIndicatorEngine
from domain.indicators.labels import calculate_future_price_change, time_features
from domain.indicators.momentum import RSIWindow, calculate_rsi, classify_rsi_zone
from domain.indicators.moving_averages import PriceWindow, calculate_sma, determine_ma_cross
from domain.indicators.volume import VolumeStatistics, volume_anomaly_flag

__all__ = [
    "WindowedIndicatorEngine",
    "RollingWindowState",
    "PriceWindow",
    "calculate_sma",
    "determine_ma_cross",
    "RSIWindow",
    "calculate_rsi",
    "classify_rsi_zone",
    "VolumeStatistics",
    "volume_anomaly_flag",
    "calculate_future_price_change",
    "time_features",
]
