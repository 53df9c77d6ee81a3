# ─────────────────────────────────────────────────────────────────
# clock.py — Colombo Timestamps
#
# Every log record is stamped in Sri Lanka time (+05:30).
# The offset is fixed: we shift the UTC instant by 5h30m and then
# format its fields directly, instead of asking a timezone database.
# Sri Lanka has no daylight saving, so this never drifts.
# ─────────────────────────────────────────────────────────────────

from datetime import datetime, timedelta, timezone
from typing import Optional

COLOMBO_OFFSET = timedelta(hours=5, minutes=30)


def now_iso_colombo(now: Optional[datetime] = None) -> str:
    """
    Returns the current time as "YYYY-MM-DDTHH:MM:SS+05:30".

    `now` is only for tests — pass a fixed UTC instant to get a
    predictable string. A naive datetime is read as UTC.
    """

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)

    # Bake the offset into the instant, then read its fields as-is
    shifted = now.replace(tzinfo=None) + COLOMBO_OFFSET

    return shifted.strftime("%Y-%m-%dT%H:%M:%S") + "+05:30"
