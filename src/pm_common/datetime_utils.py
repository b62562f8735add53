"""UTC datetime utilities and the registry clock."""

from datetime import datetime, timezone
from typing import Protocol


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class ClockProtocol(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock used for deadline comparisons in production."""

    def now(self) -> datetime:
        return utc_now()
