from datetime import datetime, timezone, tzinfo
from typing import Callable
from zoneinfo import ZoneInfo

from saloneasy.core.config import settings

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def salon_timezone() -> tzinfo:
    """Zone in which booking date/time labels are interpreted."""
    if settings.SALON_TIMEZONE.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(settings.SALON_TIMEZONE)


def get_clock() -> Clock:
    """
    Dependency returning the clock used for past-time checks.

    Tests override it through ``app.dependency_overrides`` to freeze time.
    """
    return utc_now
