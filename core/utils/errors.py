"""
Error classification for destination writes

ClickHouse reports resource exhaustion (too many parts, memory limit) as
ordinary server exceptions. The sink retries those row by row and gives up on
anything else, so it needs to tell them apart.

Classification prefers the structured server error code and falls back to
message signatures for drivers/wrappers that only carry text.
"""

# ClickHouse server error codes
MEMORY_LIMIT_EXCEEDED = 241
TOO_MANY_PARTS = 252
TOO_MANY_SIMULTANEOUS_QUERIES = 202

CAPACITY_ERROR_CODES = frozenset(
    {MEMORY_LIMIT_EXCEEDED, TOO_MANY_PARTS, TOO_MANY_SIMULTANEOUS_QUERIES}
)

# Lower-cased substrings; matched against str(exc).lower()
CAPACITY_ERROR_SIGNATURES = (
    "too many parts",
    "too_many_parts",
    "memory limit exceeded",
    "memory limit (total) exceeded",
    "memory limit (for query) exceeded",
    "memory limit (for user) exceeded",
    "memory_limit_exceeded",
    "too many simultaneous queries",
    "too_many_simultaneous_queries",
)


class CapacityExhaustedError(Exception):
    """Destination store rejected a write because a resource limit was hit"""


def is_capacity_exhausted(exc: BaseException) -> bool:
    """
    Check whether an exception signals destination capacity exhaustion

    Args:
        exc: Exception raised by a write

    Returns:
        True for the recoverable capacity class, False otherwise

    Example:
        >>> is_capacity_exhausted(Exception("Code: 252. DB::Exception: Too many parts (300)"))
        True
        >>> is_capacity_exhausted(ConnectionRefusedError("Connection refused"))
        False
    """
    if isinstance(exc, CapacityExhaustedError):
        return True

    code = getattr(exc, "code", None)
    if isinstance(code, int) and code in CAPACITY_ERROR_CODES:
        return True

    message = str(exc).lower()
    return any(signature in message for signature in CAPACITY_ERROR_SIGNATURES)
