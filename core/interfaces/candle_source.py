"""
Abstract interface for paginated candle access

Read-only view of raw 1-minute candles, one instrument at a time
"""

from abc import ABC, abstractmethod

from core.models.market_data import Candle


class BaseCandleSource(ABC):
    """
    Candle source interface

    Implementations:
    - ClickHouseClient (providers/opensource/clickhouse.py)
    - InMemoryCandleSource (tests/fakes.py)
    """

    @abstractmethod
    async def get_instrument_uids(self) -> list[str]:
        """
        List every instrument that has candles

        Returns:
            Instrument identifiers in a stable enumeration order
        """

    @abstractmethod
    async def fetch_candles_after(
        self, instrument_uid: str, after_time: int, limit: int
    ) -> list[Candle]:
        """
        Fetch the next page of candles

        Args:
            instrument_uid: Instrument identifier
            after_time: Exclusive lower bound (epoch seconds)
            limit: Maximum number of candles

        Returns:
            Candles with time > after_time, ordered by time ASC
        """

    @abstractmethod
    async def fetch_candles_until(
        self, instrument_uid: str, until_time: int, limit: int
    ) -> list[Candle]:
        """
        Fetch warm-up candles

        Args:
            instrument_uid: Instrument identifier
            until_time: Inclusive upper bound (epoch seconds)
            limit: Maximum number of candles

        Returns:
            Candles with time <= until_time, ordered by time DESC (newest first)
        """
