from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp, the form DateTime columns hand back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value):
    if isinstance(value, datetime) or value is None:
        return value
    value = str(value).strip()
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def iso(value):
    return value.isoformat() if value else None
