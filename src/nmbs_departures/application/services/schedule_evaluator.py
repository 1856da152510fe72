"""Selection of the active route from smart schedule rules."""

from collections.abc import Iterable
from datetime import datetime

from nmbs_departures.domain.models.schedule_rule import ActiveRoute, ScheduleRule


def weekday_number(now: datetime) -> int:
    """Weekday with 0 = Sunday .. 6 = Saturday, as used by schedule rules."""
    return now.isoweekday() % 7


def matches(rule: ScheduleRule, now: datetime) -> bool:
    """Whether an enabled rule covers ``now`` (both window ends inclusive)."""
    if not rule.enabled or weekday_number(now) not in rule.days:
        return False
    clock = now.strftime("%H:%M")
    return rule.start_time <= clock <= rule.end_time


def evaluate(rules: Iterable[ScheduleRule], now: datetime) -> ActiveRoute | None:
    """Return the route of the first rule matching ``now``, in stored order."""
    for rule in rules:
        if matches(rule, now):
            return ActiveRoute(rule.from_id, rule.to_id)
    return None
