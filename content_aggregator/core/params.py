"""Input defaulting shared by the aggregation facades."""

from typing import Any

DEFAULT_LIMIT = 25
MAX_LIMIT = 100


def clamp_limit(limit: Any, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    """
    Keep ``limit`` inside ``(0, maximum]``.

    Non-positive, oversized or non-integer values fall back to ``default``
    instead of failing.
    """
    if isinstance(limit, bool) or not isinstance(limit, int):
        return default
    if limit <= 0 or limit > maximum:
        return default
    return limit
