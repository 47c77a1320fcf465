#!/usr/bin/env python3
"""
rtt-status — Realtime Trains journey tracker TUI

Finds one train by departure time, source and destination, then follows its
live running status stop by stop until you quit.
Data provided by Realtime Trains (https://www.realtimetrains.co.uk).

Usage:
    rtt-status <departs> <source> <dest>
    rtt-status 0830 EDB KGX                  # The 08:30-ish Edinburgh to King's Cross
    rtt-status 0830 EDB KGX --refresh-rate 60
    rtt-status 0830 EDB KGX --debug          # Log and dump responses to ~/.rtttui/debug

Keys:
    q   quit
    i   show/hide intermediate stops
"""

import argparse
import logging
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from time import monotonic

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.logging import RichHandler

from .api import FetchError, ResolutionError, RttApiError, RttClient, resolve_location
from .config import (
    CONFIG_PATH, DEBUG_DIR, REFRESH_INTERVAL, TICK_RATE,
    Config, ConfigError, load_credentials,
)
from .display import (
    build_error_panel, build_info_panel, build_no_match_panel,
    build_status_panel, build_train_info_panel,
)
from .keys import InputDispatcher, KeyReader
from .matching import NoMatchError, match_service
from .models import ServiceCandidate, StationRef, parse_hhmm
from .refresh import ServiceTracker

logger = logging.getLogger(__name__)


def _today() -> date:
    """Today's date in UTC, which is what the search endpoints expect. Extracted for test patching."""
    return datetime.now(timezone.utc).date()


def departure_time(value: str) -> str:
    """argparse type for HHMM departure times."""
    if parse_hhmm(value) is None:
        raise argparse.ArgumentTypeError(f"invalid departure time {value!r}, expected HHMM like 0830")
    return value


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rtt-status",
        description="Track a train",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s 0830 EDB KGX                  # Track the 08:30 from Edinburgh to King's Cross
    %(prog)s 1715 KGX YRK --refresh-rate 15
    %(prog)s 0830 EDB KGX --hide-intermediary

Stations are three letter CRS codes (EDB, KGX) or TIPLOC codes.
Credentials are read from ~/.config/rtt.yaml (username, password)
or the RTT_USERNAME and RTT_PASSWORD environment variables.
        """
    )
    parser.add_argument("departs", type=departure_time, help="departure time, ie 0830")
    parser.add_argument(
        "source",
        help="three letter source station (crs), ie EDB, or the TIPLOC code source station"
    )
    parser.add_argument(
        "dest",
        help="three letter destination station (crs), ie KGX, or the TIPLOC code destination station"
    )
    parser.add_argument(
        "--tick-rate",
        type=positive_int,
        default=TICK_RATE,
        help=f"time in ms between two ticks (default {TICK_RATE})"
    )
    parser.add_argument(
        "--refresh-rate",
        type=positive_int,
        default=REFRESH_INTERVAL,
        help=f"time in seconds between remote API updates (default {REFRESH_INTERVAL})"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_PATH,
        help="credentials file (default ~/.config/rtt.yaml)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="log to ~/.rtttui/debug/rtt-status.log and save every service response"
    )
    parser.add_argument(
        "--exit-on-error",
        action="store_true",
        help="exit when a live refresh fails instead of keeping the last data"
    )
    parser.add_argument(
        "--hide-intermediary",
        action="store_true",
        help="start with intermediate stops hidden (toggle with 'i')"
    )
    return parser


def parse_args(argv: list[str] | None = None) -> Config:
    args = build_parser().parse_args(argv)
    return Config(
        departs=args.departs,
        source=args.source,
        dest=args.dest,
        tick_rate=args.tick_rate,
        refresh_interval=args.refresh_rate,
        config_path=args.config,
        debug=args.debug,
        exit_on_error=args.exit_on_error,
        show_intermediary=not args.hide_intermediary,
    )


def setup_logging(console: Console, debug: bool, debug_dir: Path = DEBUG_DIR) -> None:
    """
    With --debug, log everything to a file in the debug directory. Otherwise
    only errors go to the console, since anything printed while the live
    screen is up would tear it.
    """
    if debug:
        debug_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(debug_dir / "rtt-status.log")
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        level = logging.DEBUG
    else:
        handler = RichHandler(console=console, show_path=False)
        level = logging.ERROR
    logging.basicConfig(level=level, handlers=[handler], force=True)


def candidate_run_date(candidate: ServiceCandidate, fallback: date) -> date:
    """The day the matched service runs on, as reported by the search."""
    if candidate.run_date:
        try:
            return date.fromisoformat(candidate.run_date)
        except ValueError:
            logger.warning("Ignoring unparsable runDate %r", candidate.run_date)
    return fallback


def find_service(client: RttClient, config: Config, today: date) -> tuple[StationRef, StationRef, ServiceCandidate]:
    """Resolve the destination, search the source's departures and pick the service."""
    destination = resolve_location(client, config.dest)
    search = client.search(config.source, today, config.departs, dump_name="source")
    candidate = match_service(search.services, destination, config.departs)
    return search.location, destination, candidate


def build_display(tracker: ServiceTracker, controls: InputDispatcher, width: int, now: float) -> Layout:
    """Lay out the three panels for one render pass. `width` is the terminal width."""
    layout = Layout()
    layout.split(
        Layout(name="header", size=4),
        Layout(name="status", ratio=2),
        Layout(name="footer", size=6),
    )

    snapshot = tracker.snapshot
    if snapshot is not None:
        layout["header"].update(build_train_info_panel(snapshot))
        layout["status"].update(
            build_status_panel(snapshot, width, controls.show_intermediary)
        )
    else:
        layout["header"].update(build_error_panel("No data yet"))
        layout["status"].update(build_error_panel(tracker.last_error or "Waiting for first update"))

    layout["footer"].update(
        build_info_panel(tracker.seconds_since_update(now), controls.show_intermediary, tracker.last_error)
    )
    return layout


def run_app(
    live: Live,
    console: Console,
    tracker: ServiceTracker,
    controls: InputDispatcher,
    keys: KeyReader,
    tick_rate: float,
) -> None:
    """
    Render, wait for a key or the end of the tick, dispatch the key, then
    refresh if a tick has passed. Stops after the iteration that sets quit.
    """
    last_tick = monotonic()
    while True:
        live.update(build_display(tracker, controls, console.size.width, monotonic()), refresh=True)

        timeout = tick_rate - (monotonic() - last_tick)
        key = keys.read_key(timeout)
        if key is not None:
            controls.on_key(key)

        if monotonic() - last_tick >= tick_rate:
            tracker.on_tick(monotonic())
            last_tick = monotonic()

        if controls.should_quit:
            return


def main(argv: list[str] | None = None) -> int:
    config = parse_args(argv)
    console = Console()
    setup_logging(console, config.debug)

    console.print("Train Tracking, Data Provided by Realtime Trains (realtimetrains.co.uk)")
    console.print(f"Searching for the {config.departs} from {config.source} to {config.dest}")

    try:
        credentials = load_credentials(config.config_path)
    except ConfigError as e:
        console.print(build_error_panel(str(e)))
        return 1

    client = RttClient(credentials, debug_dir=DEBUG_DIR, dump_responses=config.debug)
    today = _today()

    try:
        source, destination, candidate = find_service(client, config, today)
    except ResolutionError as e:
        console.print(build_error_panel(str(e), e.dump_path))
        return 1
    except NoMatchError as e:
        logger.debug("%s", e)
        console.print(build_no_match_panel(config.departs, config.source, config.dest))
        return 1

    found = candidate.train_identity or candidate.service_uid
    if candidate.operator:
        found = f"{candidate.operator} {found}"
    console.print(f"[green]✓ Found {found} from {source} to {destination}[/]")

    tracker = ServiceTracker(
        client,
        candidate.service_uid,
        candidate_run_date(candidate, today),
        config.refresh_interval,
        exit_on_error=config.exit_on_error,
    )
    try:
        tracker.start(monotonic())
    except FetchError as e:
        console.print(build_error_panel(str(e), e.dump_path))
        return 1

    controls = InputDispatcher(show_intermediary=config.show_intermediary)

    try:
        with KeyReader() as keys, Live(
            console=console,
            auto_refresh=False,
            screen=True,
        ) as live:
            run_app(live, console, tracker, controls, keys, config.tick_rate / 1000)
    except KeyboardInterrupt:
        pass
    except RttApiError as e:
        console.print(build_error_panel(str(e), e.dump_path))
        return 1

    console.print("[dim]Tracking stopped.[/]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
