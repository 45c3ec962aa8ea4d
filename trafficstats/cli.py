"""
Command-line reports over the sample store.

Run it as:

    python -m trafficstats.cli                      # all interfaces, detailed
    python -m trafficstats.cli -s                   # all interfaces, summary
    python -m trafficstats.cli internet -i --1h     # chart with 1h buckets
    python -m trafficstats.cli internet -H          # hour-of-day detail

Filter:
    <interface>            match interface name (substring)
    <device>               match device name
    <device>/<interface>   exact match
"""

import argparse
import logging
import shutil
import sys
import time
from datetime import datetime

from sqlalchemy import inspect

from trafficstats.aggregate import IntervalSpec
from trafficstats.analysis import (
    load_hour_stats,
    load_interval_series,
    load_period_traffic,
)
from trafficstats.chart import MIN_ROWS, render_series
from trafficstats.config import settings
from trafficstats.database import SessionLocal, engine
from trafficstats.filters import AmbiguousFilterError, FilterNotFoundError, pick_one, select_interfaces
from trafficstats.models import InterfaceSample
from trafficstats.reports import (
    detailed_report,
    hourly_detail_report,
    hourly_summary_report,
    insight_report,
    spans_report,
    summary_report,
)
from trafficstats.store import interface_spans, list_interfaces


def _chart_rows(value: str) -> int:
    rows = int(value)
    if rows < MIN_ROWS:
        raise argparse.ArgumentTypeError(f"must be at least {MIN_ROWS}, got {rows}")
    return rows


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="trafficstats",
        description="Traffic statistics and charts from stored interface counters.",
    )
    parser.add_argument(
        "filter",
        nargs="?",
        default=None,
        help="Interface name, device name, or device/interface.",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--summary", "-s", action="store_true", help="Compact table view.")
    mode.add_argument("--insight", "-i", action="store_true", help="ASCII graph for a single interface.")
    mode.add_argument("--hourly", "-H", action="store_true", help="Time-of-day analysis.")
    mode.add_argument("--spans", action="store_true", help="How much history is stored per interface.")

    parser.add_argument(
        "--interval",
        default=None,
        help="Graph interval for --insight: 5m, 15m, 30m, 1h.",
    )
    for shorthand in ("15m", "30m", "1h"):
        parser.add_argument(
            f"--{shorthand}",
            dest="interval",
            action="store_const",
            const=shorthand,
            help=f"Shorthand for --interval={shorthand}.",
        )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Terminal width used to size the graph (default: detected).",
    )
    parser.add_argument(
        "--height",
        type=_chart_rows,
        default=None,
        help=f"Graph height in rows (default: {settings.chart_rows}).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging and dropped-interval counts.",
    )
    return parser.parse_args(argv)


def _bucket_count(width) -> int:
    """Number of chart columns that fit: 3/4 of the terminal minus the axis."""
    if width is None:
        width = shutil.get_terminal_size((settings.chart_width, 24)).columns
    return max(int(width * 0.75) - 10, 1)


def _now() -> int:
    return int(time.time())


def _emit(lines) -> None:
    for line in lines:
        print(line)


def run(args: argparse.Namespace) -> int:
    if not inspect(engine).has_table(InterfaceSample.__tablename__):
        print(f"Sample store not found: {settings.database_url}", file=sys.stderr)
        return 1

    now = _now()
    tz = settings.tz

    with SessionLocal() as db:
        catalog = list_interfaces(db)
        if not catalog:
            print("No data in database")
            return 0

        if args.spans:
            _emit(spans_report(interface_spans(db), tz))
            return 0

        try:
            items = select_interfaces(args.filter, catalog)
        except FilterNotFoundError as exc:
            print(str(exc), file=sys.stderr)
            print(f"  Devices: {', '.join(exc.devices)}", file=sys.stderr)
            print(f"  Interfaces: {', '.join(exc.interfaces)}", file=sys.stderr)
            return 1

        if args.hourly:
            single = None
            if args.filter:
                try:
                    single = pick_one(items, args.filter)
                except AmbiguousFilterError:
                    single = None
            if single is not None:
                result = load_hour_stats(db, single)
                profile, hours = result if result else (None, None)
                _emit(hourly_detail_report(single, profile, hours))
            else:
                rows = []
                for ref in items:
                    result = load_hour_stats(db, ref)
                    rows.append((ref, result[1] if result else None))
                _emit(hourly_summary_report(rows))
            return 0

        if args.insight:
            try:
                ref = pick_one(items, args.filter)
            except AmbiguousFilterError as exc:
                print(f"{exc}:", file=sys.stderr)
                for match in exc.matches:
                    print(f"  {match.label}", file=sys.stderr)
                return 1

            spec = IntervalSpec.parse(args.interval or settings.default_interval)
            height = settings.chart_rows if args.height is None else args.height
            series = load_interval_series(db, ref, spec, _bucket_count(args.width), now)
            chart = render_series(series, rows=height, tz=tz)
            _emit(insight_report(ref, series, chart, spec.label, tz, show_dropped=args.verbose))
            return 0

        rows = [(ref, load_period_traffic(db, ref, now)) for ref in items]
        if args.summary:
            _emit(summary_report(rows))
        else:
            _emit(detailed_report(rows, datetime.now().astimezone(tz)))
    return 0


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="[%(name)s] %(message)s",
    )
    try:
        code = run(args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
