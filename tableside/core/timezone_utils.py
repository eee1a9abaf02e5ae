from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tableside.core.config import settings

try:
    LOCAL_TZ = ZoneInfo(settings.TIMEZONE)
except (ZoneInfoNotFoundError, ValueError):
    # unknown zone name (or no tzdata installed): fall back to UTC
    LOCAL_TZ = timezone.utc


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime | None) -> datetime | None:
    """Return dt as an aware UTC datetime.

    Naive values are assumed to already be UTC (SQLite drops tzinfo on the
    way back from the database).
    """
    if dt is None:
        return None
    if getattr(dt, "tzinfo", None) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_local(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    return as_utc(dt).astimezone(LOCAL_TZ)


def local_midnight_utc(now: datetime | None = None) -> datetime:
    """Start of the current local day, expressed in UTC.

    Example with TIMEZONE=America/Sao_Paulo and now=2026-01-11T02:30Z
    (local 2026-01-10 23:30): returns 2026-01-10T03:00Z.
    """
    local_now = to_local(now or utcnow())
    start_local = datetime.combine(local_now.date(), time.min, tzinfo=LOCAL_TZ)
    return start_local.astimezone(timezone.utc)
