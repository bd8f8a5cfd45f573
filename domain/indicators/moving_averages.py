"""
Moving average indicators

Implementations:
- PriceWindow: Bounded FIFO buffer of closing prices
- calculate_sma: Simple Moving Average over the tail of the buffer
- determine_ma_cross: Fast/slow crossover detection
"""

from collections import deque
from collections.abc import Sequence

MA_FAST_PERIOD = 10
MA_SLOW_PERIOD = 30


def calculate_sma(prices: Sequence[float], period: int) -> float:
    """
    Simple Moving Average of the last `period` prices

    Formula: SMA = SUM(Close[-period:]) / period

    Returns 0.0 when fewer than `period` prices are available.

    Example:
        >>> calculate_sma([1, 2, 3, 4, 5], 3)
        4.0
        >>> calculate_sma([1, 2, 3, 4, 5], 10)
        0.0
    """
    if period <= 0 or len(prices) < period:
        return 0.0

    tail = list(prices)[len(prices) - period :]
    return sum(tail) / period


def determine_ma_cross(
    prev_fast: float, prev_slow: float, curr_fast: float, curr_slow: float
) -> int:
    """
    Detect a moving-average crossover between two consecutive candles

    Returns:
        +1 golden cross (fast moves from <= slow to > slow)
        -1 death cross (fast moves from >= slow to < slow)
         0 otherwise
    """
    if prev_fast <= prev_slow and curr_fast > curr_slow:
        return 1

    if prev_fast >= prev_slow and curr_fast < curr_slow:
        return -1

    return 0


class PriceWindow:
    """
    Bounded buffer of recent closing prices

    Capacity is the largest moving-average period in use; the oldest price
    is evicted once full.
    """

    def __init__(self, capacity: int = MA_SLOW_PERIOD):
        self.capacity = capacity
        self.prices: deque[float] = deque(maxlen=capacity)

    def add(self, price: float) -> None:
        self.prices.append(price)

    def sma(self, period: int) -> float:
        return calculate_sma(self.prices, period)

    @property
    def last(self) -> float | None:
        return self.prices[-1] if self.prices else None

    def __len__(self) -> int:
        return len(self.prices)
