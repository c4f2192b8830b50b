# utils.py

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP


def utcnow():
    # Naive UTC, matching what SQLite hands back for DateTime columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).isoformat()


def parse_datetime(value):
    """Parse an ISO-8601 string into naive UTC. ``None`` passes through."""
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def quantize(value, places):
    """Round half-up to ``places`` decimals, going through str to avoid binary float artifacts."""
    if value is None:
        return None
    step = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP))
