"""Factory package - Dependency injection for store clients"""

from .client_factory import (
    create_checkpoint_store,
    create_indicator_scheduler,
    create_timeseries_db,
)

__all__ = [
    "create_timeseries_db",
    "create_checkpoint_store",
    "create_indicator_scheduler",
]
