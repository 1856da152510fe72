"""CLI helpers for inspecting iRail data and companion configuration."""

import asyncio
import json
import sys
from dataclasses import asdict
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import aiohttp

from nmbs_departures.adapters.config import AppConfig
from nmbs_departures.adapters.irail_api import (
    IRailConnectionGateway,
    IRailHttpClient,
    IRailStationRepository,
)
from nmbs_departures.adapters.storage import JsonFileStore
from nmbs_departures.application.services import (
    CompanionStorage,
    RecordFormatter,
    locate_connection,
    schedule_evaluator,
)
from nmbs_departures.domain.constants import MAX_DEPARTURES
from nmbs_departures.domain.models import ConnectionIdentifier, Err


def _client(session: aiohttp.ClientSession, config: AppConfig) -> IRailHttpClient:
    return IRailHttpClient(
        session,
        user_agent=config.irail_user_agent,
        timeout_seconds=config.irail_timeout_seconds,
        language=lambda: config.language,
    )


async def list_stations(config: AppConfig, query: str | None, format_json: bool = False) -> None:
    """Print stations whose name contains ``query``."""
    async with aiohttp.ClientSession() as session:
        repository = IRailStationRepository(_client(session, config), config.irail_stations_url)
        result = await repository.fetch_stations()

    if isinstance(result, Err):
        print(f"Could not fetch stations: {result.error}", file=sys.stderr)
        sys.exit(1)

    stations = result.value
    if query:
        query_lower = query.lower()
        stations = [s for s in stations if query_lower in s.name.lower()]

    if format_json:
        print(json.dumps([asdict(s) for s in stations], indent=2, ensure_ascii=False))
        return
    if not stations:
        print(f"No stations found for '{query}'", file=sys.stderr)
        sys.exit(1)
    print(f"\nFound {len(stations)} station(s):\n")
    for station in stations:
        print(f"  {station.name}")
        print(f"    ID: {station.id}")


async def show_connections(
    config: AppConfig, from_id: str, to_id: str, detail_index: int | None = None
) -> None:
    """Print the departure records the watch would receive, or the legs of one of them."""
    formatter = RecordFormatter(config.timezone)
    async with aiohttp.ClientSession() as session:
        gateway = IRailConnectionGateway(
            _client(session, config), config.irail_connections_url, config.timezone
        )
        result = await gateway.search_connections(from_id, to_id)
        if isinstance(result, Err):
            print(f"Search failed: {result.error}", file=sys.stderr)
            sys.exit(1)
        connections = result.value.connection[:MAX_DEPARTURES]

        if detail_index is None:
            print(f"\n{len(connections)} connection(s):\n")
            for index, connection in enumerate(connections):
                record = formatter.departure_record(connection, index)
                delay = f" +{record.depart_delay}" if record.depart_delay else ""
                changed = " (platform changed)" if record.platform_changed else ""
                print(
                    f"  [{index}] {record.depart_time}{delay} -> {record.arrive_time} "
                    f"{record.train_type} to {record.destination}, "
                    f"platform {record.platform}{changed}, {record.duration}"
                    f"{'' if record.is_direct else ', with transfers'}"
                )
            return

        if not 0 <= detail_index < len(connections):
            print(f"No connection at index {detail_index}", file=sys.stderr)
            sys.exit(1)
        departure = connections[detail_index].departure
        identifier = ConnectionIdentifier(
            vehicle_ref=departure.vehicle or "", departure_epoch_seconds=departure.time or 0
        )
        detail = await gateway.fetch_connection_detail(from_id, to_id, identifier)

    if isinstance(detail, Err):
        print(f"Detail fetch failed: {detail.error}", file=sys.stderr)
        sys.exit(1)
    located = locate_connection(detail.value, identifier)
    if isinstance(located, Err):
        print(f"{located.error}", file=sys.stderr)
        sys.exit(1)

    legs = formatter.leg_records(located.value)
    print(f"\n{len(legs)} leg(s):\n")
    for leg in legs:
        print(
            f"  {leg.depart_time} {leg.depart_station} (platform {leg.depart_platform}) -> "
            f"{leg.arrive_time} {leg.arrive_station} (platform {leg.arrive_platform})"
        )
        print(f"    {leg.vehicle} direction {leg.direction}, {leg.stop_count} stop(s)")


def evaluate_schedules(config: AppConfig, at: str | None = None, day: int | None = None) -> None:
    """Print which stored schedule rule is active now or at the given time."""
    storage = CompanionStorage(JsonFileStore(config.storage_path))
    rules = storage.load_schedules()
    if not rules:
        print("No smart schedules stored.", file=sys.stderr)
        sys.exit(1)

    now = datetime.now(ZoneInfo(config.timezone))
    if at:
        hour, minute = (int(part) for part in at.split(":"))
        now = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if day is not None:
        now += timedelta(days=day - schedule_evaluator.weekday_number(now))

    print(
        f"\nEvaluating {len(rules)} rule(s) for day "
        f"{schedule_evaluator.weekday_number(now)} at {now:%H:%M}:\n"
    )
    for rule in rules:
        mark = "*" if schedule_evaluator.matches(rule, now) else " "
        state = "" if rule.enabled else " (disabled)"
        days = ",".join(str(d) for d in sorted(rule.days))
        print(
            f" {mark} {rule.id}: days {days} {rule.start_time}-{rule.end_time} "
            f"{rule.from_id} -> {rule.to_id}{state}"
        )

    route = schedule_evaluator.evaluate(rules, now)
    if route is None:
        print("\nNo active route.")
    else:
        print(f"\nActive route: {route.from_station_id} -> {route.to_station_id}")


async def main() -> None:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="NMBS Departures Companion Helper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search for stations
  nmbs-config stations "Gent"

  # Show departures the watch would receive
  nmbs-config connections BE.NMBS.008892007 BE.NMBS.008813003

  # Show the legs of the third departure
  nmbs-config connections BE.NMBS.008892007 BE.NMBS.008813003 --detail 2

  # Check which smart schedule is active on Monday at 08:15
  nmbs-config evaluate --day 1 --at 08:15
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Stations command
    stations_parser = subparsers.add_parser("stations", help="List or search stations")
    stations_parser.add_argument("query", nargs="?", help="Part of the station name")
    stations_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # Connections command
    connections_parser = subparsers.add_parser(
        "connections", help="Show connections between two stations"
    )
    connections_parser.add_argument("from_id", help="Departure station ID")
    connections_parser.add_argument("to_id", help="Arrival station ID")
    connections_parser.add_argument(
        "--detail", type=int, metavar="INDEX", help="Show the legs of one departure"
    )

    # Evaluate command
    evaluate_parser = subparsers.add_parser("evaluate", help="Evaluate stored smart schedules")
    evaluate_parser.add_argument("--at", metavar="HH:MM", help="Time of day to evaluate")
    evaluate_parser.add_argument(
        "--day", type=int, choices=range(7), help="Weekday (0 = Sunday .. 6 = Saturday)"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = AppConfig()
    try:
        if args.command == "stations":
            await list_stations(config, args.query, format_json=args.json)

        elif args.command == "connections":
            await show_connections(config, args.from_id, args.to_id, args.detail)

        elif args.command == "evaluate":
            evaluate_schedules(config, at=args.at, day=args.day)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
