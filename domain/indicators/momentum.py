"""
Momentum indicators

Implementations:
- RSIWindow: Rolling gain/loss buffers for RSI
- calculate_rsi: Relative Strength Index from the buffers
- classify_rsi_zone: Oversold / overbought classification
"""

from collections import deque
from collections.abc import Sequence

RSI_PERIOD = 14
RSI_NEUTRAL = 50.0
RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0


def calculate_rsi(
    gains: Sequence[float], losses: Sequence[float], period: int = RSI_PERIOD
) -> float:
    """
    Relative Strength Index

    Formula:
        RS = Average Gain / Average Loss (over N deltas)
        RSI = 100 - (100 / (1 + RS))

    Interpretation:
        - RSI > 70: Overbought
        - RSI < 30: Oversold
        - RSI = 50: Neutral (also returned while fewer than N deltas exist)

    Returns 100.0 when there were no losses in the window.
    """
    if len(gains) < period or len(losses) < period:
        return RSI_NEUTRAL

    avg_gain = sum(gains) / period
    avg_loss = sum(losses) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def classify_rsi_zone(rsi: float) -> int:
    """1 if oversold (< 30), -1 if overbought (> 70), 0 otherwise"""
    if rsi < RSI_OVERSOLD:
        return 1
    if rsi > RSI_OVERBOUGHT:
        return -1
    return 0


class RSIWindow:
    """
    Rolling gain/loss buffers fed with consecutive close-to-close deltas

    A zero delta is recorded as a gain of 0.0.
    """

    def __init__(self, period: int = RSI_PERIOD):
        self.period = period
        self.gains: deque[float] = deque(maxlen=period)
        self.losses: deque[float] = deque(maxlen=period)

    def add_change(self, change: float) -> None:
        if change >= 0:
            self.gains.append(change)
            self.losses.append(0.0)
        else:
            self.gains.append(0.0)
            self.losses.append(-change)

    def value(self) -> float:
        return calculate_rsi(self.gains, self.losses, self.period)
