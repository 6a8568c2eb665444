from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional

from ..models import utcnow


def http_date(dt: Optional[datetime] = None) -> str:
    """RFC 1123 date in GMT, e.g. ``Mon, 01 Jan 2024 10:00:00 GMT``.

    Naive datetimes are taken to be UTC, which is how the store keeps them.
    """
    dt = dt or utcnow()
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)
