# utils/time_utils.py
from datetime import datetime, timezone, date


def utcnow():
    return datetime.now(timezone.utc)


def to_utc_naive(dt: datetime) -> datetime:
    """aware datetime -> naive UTC datetime (DB timezone=False 전제)"""
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def from_timestamp(ts):
    """epoch seconds (Stripe) -> naive UTC datetime"""
    if ts is None:
        return None
    return datetime.fromtimestamp(int(ts), tz=timezone.utc).replace(tzinfo=None)


def day_key(dt: datetime = None) -> date:
    dt = dt or utcnow()
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return date(dt.year, dt.month, dt.day)


def month_key(dt: datetime = None) -> date:
    d = day_key(dt)
    return date(d.year, d.month, 1)
