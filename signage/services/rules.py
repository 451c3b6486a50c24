"""Typed schedule rules and screens, decoded from raw store records.

Records come out of the store as loose dicts with ``days`` kept as JSON text.
Everything past this module works with :class:`ScheduleRule` and
:class:`ScreenRef` only.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScreenRef:
    id: str
    group_id: str | None = None
    default_playlist_id: str | None = None
    owner_account: str | None = None


@dataclass(frozen=True)
class ScheduleRule:
    id: str
    playlist_id: str
    days: frozenset[int]
    start_time: str
    end_time: str
    priority: int = 0
    screen_id: str | None = None
    group_id: str | None = None

    def targets(self, screen: ScreenRef) -> bool:
        if self.screen_id and self.screen_id == screen.id:
            return True
        return bool(self.group_id) and self.group_id == screen.group_id


def parse_days(raw: Any) -> frozenset[int]:
    """Decode the stored weekday list (Sunday=0).

    Unparseable input gives an empty set, so the rule never matches.
    Entries that are not integers in 0..6 are dropped.
    """
    if raw is None:
        return frozenset()
    if isinstance(raw, (bytes, str)):
        try:
            raw = json.loads(raw or "[]")
        except ValueError:
            return frozenset()
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return frozenset()
    days: set[int] = set()
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int):
            continue
        if 0 <= value <= 6:
            days.add(value)
    return frozenset(days)


def parse_clock(value: Any) -> int | None:
    """Minutes since midnight for ``HH:MM`` (or ``HH:MM:SS``, seconds ignored).

    ``24:00`` is accepted as end of day. Returns None when unparseable.
    """
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        return None
    if not all(part.isascii() and part.isdigit() for part in parts):
        return None
    hour, minute = int(parts[0]), int(parts[1])
    if minute > 59 or (len(parts) == 3 and int(parts[2]) > 59):
        return None
    if hour > 24 or (hour == 24 and minute != 0):
        return None
    return hour * 60 + minute


def _optional_id(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def rule_from_record(record: dict[str, Any]) -> ScheduleRule | None:
    rule_id = _optional_id(record.get("id"))
    playlist_id = _optional_id(record.get("playlist_id"))
    if rule_id is None or playlist_id is None:
        logger.warning("Skipping schedule record without id or playlist_id: %r", record.get("id"))
        return None

    raw_priority = record.get("priority")
    try:
        priority = int(raw_priority) if raw_priority is not None else 0
    except (TypeError, ValueError):
        logger.warning("Skipping schedule %s: invalid priority %r", rule_id, raw_priority)
        return None

    days = parse_days(record.get("days"))
    if not days:
        logger.warning("Schedule %s has no usable days (%r), it will never be active", rule_id, record.get("days"))

    start_time = str(record.get("start_time") or "")
    end_time = str(record.get("end_time") or "")
    if parse_clock(start_time) is None or parse_clock(end_time) is None:
        logger.warning(
            "Schedule %s has an unreadable time window (%r-%r), it will never be active",
            rule_id,
            start_time,
            end_time,
        )

    return ScheduleRule(
        id=rule_id,
        playlist_id=playlist_id,
        days=days,
        start_time=start_time,
        end_time=end_time,
        priority=priority,
        screen_id=_optional_id(record.get("screen_id")),
        group_id=_optional_id(record.get("group_id")),
    )

