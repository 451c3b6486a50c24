import logging
import os
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

SCHEDULE_TIMEZONE = (os.getenv("SIGNAGE_SCHEDULE_TIMEZONE", "") or "").strip()
try:
    _SCHEDULE_TZ = ZoneInfo(SCHEDULE_TIMEZONE) if SCHEDULE_TIMEZONE else None
except (ZoneInfoNotFoundError, ValueError):
    logger.warning("Unknown SIGNAGE_SCHEDULE_TIMEZONE %r, using system local time", SCHEDULE_TIMEZONE)
    _SCHEDULE_TZ = None


def local_now() -> datetime:
    if _SCHEDULE_TZ is None:
        return datetime.now()
    # Naive wall clock: schedule windows are stored without a zone.
    return datetime.now(_SCHEDULE_TZ).replace(tzinfo=None)


def timezone_label() -> str:
    return SCHEDULE_TIMEZONE if _SCHEDULE_TZ is not None else "system_local"
