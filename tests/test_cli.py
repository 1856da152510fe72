"""Tests for CLI helper functions."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from nmbs_departures.adapters.config import AppConfig
from nmbs_departures.adapters.storage import JsonFileStore
from nmbs_departures.application.services import CompanionStorage
from nmbs_departures.cli import evaluate_schedules, list_stations
from nmbs_departures.domain.models import Err, ErrorKind, Ok, ScheduleRule, StationCacheEntry


def _config(tmp_path: Path) -> AppConfig:
    return AppConfig.for_testing(storage_file=str(tmp_path / "storage.json"))


def test_evaluate_prints_active_route(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Given a stored weekday rule, when evaluating Monday morning, then its route is active."""
    config = _config(tmp_path)
    CompanionStorage(JsonFileStore(config.storage_path)).save_schedules(
        [
            ScheduleRule(
                id="commute",
                days=frozenset({1, 2, 3, 4, 5}),
                start_time="07:00",
                end_time="09:00",
                from_id="BE.NMBS.008892007",
                to_id="BE.NMBS.008813003",
            )
        ]
    )

    evaluate_schedules(config, at="08:15", day=1)

    output = capsys.readouterr().out
    assert "for day 1 at 08:15" in output
    assert " * commute" in output
    assert "Active route: BE.NMBS.008892007 -> BE.NMBS.008813003" in output


def test_evaluate_outside_window_has_no_route(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Given a weekday rule, when evaluating on Sunday, then no route is active."""
    config = _config(tmp_path)
    CompanionStorage(JsonFileStore(config.storage_path)).save_schedules(
        [
            ScheduleRule(
                id="commute",
                days=frozenset({1}),
                start_time="07:00",
                end_time="09:00",
                from_id="A",
                to_id="B",
            )
        ]
    )

    evaluate_schedules(config, at="08:00", day=0)

    assert "No active route." in capsys.readouterr().out


def test_evaluate_without_rules_exits(tmp_path: Path) -> None:
    """Given no stored schedules, when evaluating, then the CLI exits with an error."""
    with pytest.raises(SystemExit):
        evaluate_schedules(_config(tmp_path))


@pytest.mark.asyncio
async def test_list_stations_filters_by_name(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Given a station list, when searching, then only matching stations are printed."""
    repository = MagicMock()
    repository.fetch_stations = AsyncMock(
        return_value=Ok(
            [
                StationCacheEntry("BE.NMBS.008892007", "Ghent-Sint-Pieters"),
                StationCacheEntry("BE.NMBS.008813003", "Brussels-Central"),
            ]
        )
    )

    with patch("nmbs_departures.cli.IRailStationRepository", return_value=repository):
        await list_stations(_config(tmp_path), "ghent")

    output = capsys.readouterr().out
    assert "Found 1 station(s)" in output
    assert "BE.NMBS.008892007" in output
    assert "Brussels-Central" not in output


@pytest.mark.asyncio
async def test_list_stations_fetch_failure_exits(tmp_path: Path) -> None:
    """Given the station list cannot be fetched, when listing, then the CLI exits."""
    repository = MagicMock()
    repository.fetch_stations = AsyncMock(
        return_value=Err.of(ErrorKind.FETCH_FAILED, "Service unavailable", 503)
    )

    with (
        patch("nmbs_departures.cli.IRailStationRepository", return_value=repository),
        pytest.raises(SystemExit),
    ):
        await list_stations(_config(tmp_path), None)
