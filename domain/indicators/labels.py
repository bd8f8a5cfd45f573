"""
Forward labels and calendar features

- calculate_future_price_change: 15-minute forward return and trade signal
- time_features: UTC hour-of-day and ISO day-of-week
"""

import logging
from datetime import UTC, datetime

logger = logging.getLogger(__name__)

FORWARD_HORIZON = 15
SIGNAL_THRESHOLD_PCT = 0.2

# Substituted when a timestamp cannot be represented as a datetime
DEFAULT_INSTANT = datetime(1970, 1, 1, tzinfo=UTC)


def calculate_future_price_change(current_price: float, future_price: float) -> tuple[float, int]:
    """
    Percentage change to a future price and the derived signal

    Returns:
        (change_pct, signal) where signal is
        +1 if change > 0.2%, -1 if change < -0.2%, 0 otherwise.
        (0.0, 0) when the current price is 0.

    Example:
        >>> change, signal = calculate_future_price_change(100.0, 101.0)
        >>> round(change, 6), signal
        (1.0, 1)
    """
    if current_price == 0:
        return 0.0, 0

    change = (future_price / current_price - 1.0) * 100.0

    if change > SIGNAL_THRESHOLD_PCT:
        signal = 1
    elif change < -SIGNAL_THRESHOLD_PCT:
        signal = -1
    else:
        signal = 0

    return change, signal


def time_features(epoch_seconds: int) -> tuple[int, int]:
    """
    Hour of day (0-23) and ISO day of week (1=Monday..7=Sunday) in UTC

    An unrepresentable timestamp falls back to DEFAULT_INSTANT.
    """
    try:
        dt = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    except (OverflowError, OSError, ValueError) as e:
        logger.warning(f"⚠️ Invalid candle timestamp {epoch_seconds}: {e}, using {DEFAULT_INSTANT}")
        dt = DEFAULT_INSTANT

    return dt.hour, dt.isoweekday()
