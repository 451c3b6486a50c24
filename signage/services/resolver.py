from datetime import datetime
from typing import Iterable

from signage.services.matcher import is_active
from signage.services.rules import ScheduleRule, ScreenRef


def _selection_key(rule: ScheduleRule) -> tuple[int, str]:
    # Highest priority first; equal priority falls back to the smallest rule id.
    return (-rule.priority, rule.id)


def active_rules(screen: ScreenRef, rules: Iterable[ScheduleRule], now: datetime) -> list[ScheduleRule]:
    return sorted(
        (rule for rule in rules if rule.targets(screen) and is_active(rule, now)),
        key=_selection_key,
    )


def resolve_active_rule(screen: ScreenRef, rules: Iterable[ScheduleRule], now: datetime) -> ScheduleRule | None:
    candidates = active_rules(screen, rules, now)
    return candidates[0] if candidates else None


def resolve_active_playlist(screen: ScreenRef, rules: Iterable[ScheduleRule], now: datetime) -> str | None:
    winner = resolve_active_rule(screen, rules, now)
    return winner.playlist_id if winner else None
