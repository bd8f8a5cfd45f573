"""Interfaces module - Abstract base classes for store collaborators"""

from .candle_source import BaseCandleSource
from .checkpoint_store import BaseCheckpointStore
from .database import BaseDatabase
from .indicator_db import BaseIndicatorDB

__all__ = [
    "BaseDatabase",
    "BaseCandleSource",
    "BaseIndicatorDB",
    "BaseCheckpointStore",
]
