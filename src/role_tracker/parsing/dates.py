"""Relative posting-date parsing ("Posted 2 days ago")."""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

UNIT_DURATIONS = {
    "hour": timedelta(hours=1),
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
}

# "Posted 2 days ago", "Posted less than 1 day ago", "Posted about 3 hours ago"
_POSTED_AGO = re.compile(
    r"Posted\s+(?:less than\s+)?(?:about\s+)?(\d+)\s+(hour|day|week|month)s?\s+ago",
    re.IGNORECASE,
)

# "(10 days ago)", "(about 5 hours ago)" as printed on YC company labels
_PAREN_AGO = re.compile(
    r"\((?:less than\s+)?(?:about\s+)?(\d+)\s+(hour|day|week|month)s?\s+ago\)",
    re.IGNORECASE,
)


def parse_posting_date(text: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Approximate a posting timestamp from relative text.

    Falls back to ``now`` when nothing matches; an unparseable date is an
    approximation, not an error.

    Args:
        text: Text containing a "Posted N units ago" phrase.
        now: Reference time (defaults to the current UTC time).

    Returns:
        Timezone-aware datetime.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    if not text:
        return now

    match = _POSTED_AGO.search(text) or _PAREN_AGO.search(text)
    if not match:
        return now

    amount = int(match.group(1))
    unit = match.group(2).lower()
    return now - amount * UNIT_DURATIONS[unit]


def parse_iso_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from an API payload. Naive values are read as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
