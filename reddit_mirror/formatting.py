"""Count and timestamp formatting shared by every record builder."""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
RELATIVE_WINDOW = timedelta(days=30)

ABSOLUTE_FORMAT = "%b %d %Y, %H:%M:%S UTC"
SHORT_DATE_FORMAT = "%b %d '%y"


def format_num(num: int) -> tuple[str, str]:
    """Return the abbreviated (``1.2k``) and exact representations of ``num``."""
    if num >= 1_000_000 or num <= -1_000_000:
        truncated = f"{num / 1_000_000:.1f}m"
    elif num >= 1000 or num <= -1000:
        truncated = f"{num / 1_000:.1f}k"
    else:
        truncated = str(num)
    return truncated, str(num)


def _to_datetime(created: Any) -> datetime:
    try:
        seconds = float(created)
        rounded = int(math.copysign(math.floor(abs(seconds) + 0.5), seconds))
        return datetime.fromtimestamp(rounded, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return EPOCH


def format_short_date(created: Any) -> str:
    return _to_datetime(created).strftime(SHORT_DATE_FORMAT)


def format_time(created: Any, now: datetime | None = None) -> tuple[str, str]:
    """Return a relative (``3h ago``) and absolute timestamp for a UNIX time.

    Distances beyond thirty days collapse to a short calendar date instead of
    a relative offset. Unparseable input is treated as the epoch.
    """
    moment = _to_datetime(created)
    if now is None:
        now = datetime.now(timezone.utc)
    delta = abs(now - moment)

    if delta > RELATIVE_WINDOW:
        rel_time = moment.strftime(SHORT_DATE_FORMAT)
    else:
        total_seconds = int(delta.total_seconds())
        if delta.days > 0:
            rel_time = f"{delta.days}d"
        elif total_seconds >= 3600:
            rel_time = f"{total_seconds // 3600}h"
        else:
            rel_time = f"{total_seconds // 60}m"
        rel_time += " left" if now < moment else " ago"

    return rel_time, moment.strftime(ABSOLUTE_FORMAT)
