"""
Volume indicators

Rolling volume statistics for anomaly detection.
"""

import math
from collections import deque

VOLUME_WINDOW = 50
VOLUME_ANOMALY_THRESHOLD = 2.0


def volume_anomaly_flag(z_score: float, threshold: float = VOLUME_ANOMALY_THRESHOLD) -> int:
    """1 iff the z-score strictly exceeds the threshold"""
    return 1 if z_score > threshold else 0


class VolumeStatistics:
    """
    Bounded volume accumulator

    Tracks count, sum and sum of squares over the last `window_size` volumes
    so mean and sample standard deviation are O(1) per candle.

    Example:
        >>> stats = VolumeStatistics(window_size=3)
        >>> for v in (10, 20, 30):
        ...     stats.add(v)
        >>> stats.mean()
        20.0
        >>> stats.stddev()
        10.0
    """

    def __init__(self, window_size: int = VOLUME_WINDOW):
        self.window_size = window_size
        self.volumes: deque[float] = deque()
        self.sum = 0.0
        self.sum_sq = 0.0

    def add(self, volume: float) -> None:
        self.volumes.append(volume)
        self.sum += volume
        self.sum_sq += volume * volume

        if len(self.volumes) > self.window_size:
            old = self.volumes.popleft()
            self.sum -= old
            self.sum_sq -= old * old

    @property
    def count(self) -> int:
        return len(self.volumes)

    def mean(self) -> float:
        if not self.volumes:
            return 0.0
        return self.sum / self.count

    def stddev(self) -> float:
        """Sample standard deviation (Bessel-corrected), 0.0 if undefined"""
        n = self.count
        if n < 2:
            return 0.0

        variance = (self.sum_sq - (self.sum * self.sum) / n) / (n - 1)
        if variance <= 0:
            return 0.0

        return math.sqrt(variance)

    def z_score(self, volume: float) -> float:
        """(volume - mean) / stddev over the window, 0.0 if stddev is 0"""
        stddev = self.stddev()
        if stddev == 0:
            return 0.0
        return (volume - self.mean()) / stddev
