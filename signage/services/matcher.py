from datetime import datetime

from signage.services.rules import ScheduleRule, parse_clock


def weekday_sunday_first(now: datetime) -> int:
    return (now.weekday() + 1) % 7


def minute_of_day(now: datetime) -> int:
    return now.hour * 60 + now.minute


def is_active(rule: ScheduleRule, now: datetime) -> bool:
    """True when ``now`` falls on one of the rule's days inside [start, end).

    ``now`` is local wall-clock time. Windows never wrap past midnight: a rule
    whose end is not after its start is never active.
    """
    if weekday_sunday_first(now) not in rule.days:
        return False
    start = parse_clock(rule.start_time)
    end = parse_clock(rule.end_time)
    if start is None or end is None:
        return False
    return start <= minute_of_day(now) < end
