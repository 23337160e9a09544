"""Horloge du domaine : datetimes UTC avec fuseau."""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Date courante en UTC (tzinfo=UTC)."""
    return datetime.now(timezone.utc)
