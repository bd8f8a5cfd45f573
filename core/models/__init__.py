"""Models module - Pydantic data models"""

from .market_data import Candle, Checkpoint, IndicatorRecord, RawCandle

__all__ = [
    "Candle",
    "RawCandle",
    "IndicatorRecord",
    "Checkpoint",
]
