"""
Readiness check - verify connectivity to both stores

Independent of engine and sink state; safe to call at any time.
"""

import logging

from core.interfaces.database import BaseDatabase

logger = logging.getLogger(__name__)


async def check_health(db: BaseDatabase, checkpoints: BaseDatabase) -> dict[str, bool]:
    """
    Ping ClickHouse and PostgreSQL

    Returns:
        {"clickhouse": bool, "postgres": bool}
    """
    status = {
        "clickhouse": await db.ping(),
        "postgres": await checkpoints.ping(),
    }

    if all(status.values()):
        logger.info("✓ Health check passed: ClickHouse and PostgreSQL reachable")
    else:
        logger.warning(f"⚠️ Health check failed: {status}")

    return status


def is_healthy(status: dict[str, bool]) -> bool:
    return bool(status) and all(status.values())
