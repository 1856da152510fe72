"""Tests for smart schedule evaluation."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from fakes import ANTWERP, BRUSSELS, GHENT, LEUVEN
from pydantic import ValidationError

from nmbs_departures.application.services import schedule_evaluator
from nmbs_departures.domain.models import ActiveRoute, ScheduleRule

BRUSSELS_TZ = ZoneInfo("Europe/Brussels")


def _at(day: int, hour: int, minute: int) -> datetime:
    """Moment in the week of 2025-01-12 (a Sunday) for weekday number ``day``."""
    return datetime(2025, 1, 12 + day, hour, minute, tzinfo=BRUSSELS_TZ)


def _rule(rule_id: str, days: set[int], start: str, end: str, **overrides: object) -> ScheduleRule:
    data = {
        "id": rule_id,
        "enabled": True,
        "days": days,
        "startTime": start,
        "endTime": end,
        "fromId": GHENT,
        "toId": BRUSSELS,
        **overrides,
    }
    return ScheduleRule.model_validate(data)


def test_weekday_number_starts_on_sunday() -> None:
    """Given dates across a week, when numbering weekdays, then Sunday is 0 and Saturday 6."""
    assert schedule_evaluator.weekday_number(_at(0, 12, 0)) == 0
    assert schedule_evaluator.weekday_number(_at(3, 12, 0)) == 3
    assert schedule_evaluator.weekday_number(_at(6, 12, 0)) == 6


def test_matching_rule_selects_route() -> None:
    """Given a workday morning rule, when evaluating inside the window, then its route is active."""
    rules = [_rule("commute", {1, 2, 3, 4, 5}, "07:00", "09:00")]

    assert schedule_evaluator.evaluate(rules, _at(3, 8, 15)) == ActiveRoute(GHENT, BRUSSELS)


@pytest.mark.parametrize(("hour", "minute"), [(7, 0), (9, 0)])
def test_window_is_inclusive(hour: int, minute: int) -> None:
    """Given a window, when evaluating at either boundary, then the rule matches."""
    rules = [_rule("commute", {3}, "07:00", "09:00")]

    assert schedule_evaluator.evaluate(rules, _at(3, hour, minute)) is not None


@pytest.mark.parametrize(
    ("day", "hour", "minute"), [(3, 6, 59), (3, 9, 1), (0, 8, 0), (6, 8, 0)]
)
def test_no_match_outside_window_or_day(day: int, hour: int, minute: int) -> None:
    """Given a workday window, when evaluating outside it, then no route is active."""
    rules = [_rule("commute", {1, 2, 3, 4, 5}, "07:00", "09:00")]

    assert schedule_evaluator.evaluate(rules, _at(day, hour, minute)) is None


def test_disabled_rules_are_ignored() -> None:
    """Given a disabled matching rule, when evaluating, then the next rule wins."""
    rules = [
        _rule("off", {3}, "07:00", "09:00", enabled=False, toId=LEUVEN),
        _rule("on", {3}, "07:00", "09:00", fromId=ANTWERP),
    ]

    assert schedule_evaluator.evaluate(rules, _at(3, 8, 0)) == ActiveRoute(ANTWERP, BRUSSELS)


def test_first_match_in_stored_order_wins() -> None:
    """Given overlapping rules, when evaluating, then the first stored match is used."""
    rules = [
        _rule("morning", {3}, "07:00", "09:00"),
        _rule("all-day", {3}, "00:00", "23:59", fromId=BRUSSELS, toId=GHENT),
    ]

    assert schedule_evaluator.evaluate(rules, _at(3, 8, 0)) == ActiveRoute(GHENT, BRUSSELS)
    assert schedule_evaluator.evaluate(rules, _at(3, 18, 0)) == ActiveRoute(BRUSSELS, GHENT)


def test_evaluation_is_idempotent() -> None:
    """Given the same rules and time, when evaluating twice, then results are equal."""
    rules = [_rule("commute", {3}, "07:00", "09:00")]
    now = _at(3, 8, 0)

    assert schedule_evaluator.evaluate(rules, now) == schedule_evaluator.evaluate(rules, now)


def test_overnight_window_is_rejected() -> None:
    """Given a window that wraps past midnight, when validating, then it is rejected."""
    with pytest.raises(ValidationError, match="overnight"):
        _rule("night", {5}, "23:00", "01:00")


@pytest.mark.parametrize("clock", ["7:00", "24:00", "07:60", "0700"])
def test_malformed_times_are_rejected(clock: str) -> None:
    """Given a badly formatted time, when validating, then the rule is rejected."""
    with pytest.raises(ValidationError):
        _rule("bad", {1}, clock, "23:00")


def test_out_of_range_days_are_rejected() -> None:
    """Given weekday 7, when validating, then the rule is rejected."""
    with pytest.raises(ValidationError):
        _rule("bad", {7}, "07:00", "09:00")
