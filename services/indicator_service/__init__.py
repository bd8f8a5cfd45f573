"""
Indicator Service - Resumable technical indicator calculation

Scheduled service that:
1. Pages through 1-minute candles in ClickHouse per instrument
2. Seeds rolling state from a warm-up lookback on resume
3. Calculates MA(10/30), RSI(14), volume z-score, forward labels
4. Writes indicator rows to ClickHouse with capacity-aware fallback
5. Advances per-instrument checkpoints in PostgreSQL
"""

from services.indicator_service.calculator import IndicatorCalculator
from services.indicator_service.persistence import IndicatorSink
from services.indicator_service.scheduler import IndicatorsScheduler

__all__ = ["IndicatorCalculator", "IndicatorSink", "IndicatorsScheduler"]
