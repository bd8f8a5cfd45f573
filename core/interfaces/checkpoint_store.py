"""
Abstract interface for per-instrument processing checkpoints
"""

from abc import ABC, abstractmethod

from core.models.market_data import Checkpoint


class BaseCheckpointStore(ABC):
    """
    Durable "last processed time" cursor keyed by instrument

    Implementations:
    - PostgresCheckpointStore (providers/opensource/postgres.py)
    - InMemoryCheckpointStore (tests/fakes.py)
    """

    @abstractmethod
    async def get_checkpoint(self, instrument_uid: str) -> Checkpoint | None:
        """
        Get checkpoint for an instrument

        Returns:
            Checkpoint or None if the instrument was never processed
        """

    @abstractmethod
    async def update_checkpoint(self, instrument_uid: str, last_processed_time: int) -> None:
        """
        Upsert the checkpoint

        The stored value never moves backwards: an older time leaves the
        existing cursor in place.
        """

    async def get_last_processed_time(self, instrument_uid: str) -> int:
        """Last processed time, 0 (start of epoch) if absent"""
        checkpoint = await self.get_checkpoint(instrument_uid)
        return checkpoint.last_processed_time if checkpoint else 0
