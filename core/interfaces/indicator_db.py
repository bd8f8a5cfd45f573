from abc import ABC, abstractmethod


class BaseIndicatorDB(ABC):
    """
    Write-only destination for indicator rows (append semantics)

    Implementations:
    - ClickHouseClient (providers/opensource/clickhouse.py)
    """

    @abstractmethod
    async def insert_indicators(self, rows: list[tuple]) -> int:
        """
        Insert indicator rows in a single multi-row write

        Args:
            rows: Tuples in INDICATOR_COLUMNS order (already sanitized)

        Returns:
            Number of rows inserted

        Raises:
            Driver exception on any failure (the caller classifies it)
        """
