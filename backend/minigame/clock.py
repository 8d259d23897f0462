from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, the form stored in every table."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
