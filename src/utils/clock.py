"""Timezone-aware clock helpers.

All timestamps in Portcullis are UTC. Some drivers (SQLite) hand back naive
datetimes even for ``DateTime(timezone=True)`` columns; ``as_utc`` restores the
timezone so comparisons never mix naive and aware values.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
