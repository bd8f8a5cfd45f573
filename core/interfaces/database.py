from abc import ABC, abstractmethod


class BaseDatabase(ABC):
    """
    Abstract connection lifecycle shared by store clients

    Implementations:
    - ClickHouseClient (candles + indicators)
    - PostgresCheckpointStore (processing checkpoints)
    """

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection to database"""

    @abstractmethod
    async def ping(self) -> bool:
        """
        Run a trivial query to verify connectivity

        Returns:
            True if the database answered, False otherwise
        """

    @abstractmethod
    async def close(self) -> None:
        """Close connection"""
