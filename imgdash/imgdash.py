#!/usr/bin/env python3
"""
imgdash - usage analytics for the image-generation admin dashboard.

Renders the generation heatmap and per-series usage table from an event
snapshot, or serves them over HTTP.

Usage:
    python -m imgdash.imgdash [options]
    imgdash [options]
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime

from imgdash.analytics.heatmap import events_on_day
from imgdash.analytics.pipeline import DashboardSession
from imgdash.analytics.ranges import GRANULARITIES, LOOKBACKS, RANGES
from imgdash.analytics.styles import legend_entries
from imgdash.config.loader import load_config, get_events_path, get_timezone
from imgdash.etl import load_snapshot, normalize_events
from imgdash.utils.timestamps import to_local_display


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all CLI flags."""
    parser = argparse.ArgumentParser(
        prog='imgdash',
        description='Usage analytics for the image-generation admin dashboard'
    )

    # Views (mutually exclusive group)
    views = parser.add_mutually_exclusive_group()
    views.add_argument('--heatmap', action='store_true',
                       help='Calendar activity heatmap')
    views.add_argument('--usage', action='store_true',
                       help='Usage by time bucket and series')
    views.add_argument('--day', metavar='DATE',
                       help='List the generations of one day (YYYY-MM-DD)')
    views.add_argument('--serve', action='store_true',
                       help='Start the statistics API server')

    # Controls
    controls = parser.add_argument_group('controls')
    controls.add_argument('--lookback', choices=LOOKBACKS,
                          help='Heatmap lookback window')
    controls.add_argument('--range', dest='range_name', choices=RANGES,
                          help='Usage chart range')
    controls.add_argument('--granularity', choices=GRANULARITIES,
                          help='Usage bucket size')
    controls.add_argument('--disable', metavar='SERIES', action='append', default=[],
                          help='Hide a series from the usage view (repeatable)')

    # Input / output
    parser.add_argument('--events', metavar='FILE',
                        help='Event snapshot JSON (default: events_path from config)')
    parser.add_argument('--json', action='store_true',
                        help='Output as JSON')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable colors')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    # Server
    parser.add_argument('--port', type=int, default=8080,
                        help='Port for the API server (default: 8080)')
    parser.add_argument('--host', default='127.0.0.1',
                        help='Host for the API server (default: 127.0.0.1)')

    return parser


def _view_to_json(view) -> dict:
    """Plain-data rendering of a dashboard view for --json."""
    return {
        "controls": {
            "lookback": view.controls.lookback,
            "range": view.controls.range,
            "granularity": view.controls.granularity,
            "disabled": sorted(view.controls.disabled),
        },
        "heatmap": {
            "summary": view.summary,
            "cells": [
                {
                    "date": c.date.isoformat(),
                    "count": c.count,
                    "weekday": c.weekday,
                    "week_index": c.week_index,
                    "is_placeholder": c.is_placeholder,
                }
                for c in view.cells
            ],
        },
        "buckets": [
            {"key": b.key, "label": b.label, "series_counts": b.series_counts}
            for b in view.buckets
        ],
        "series": legend_entries(view.styles, view.totals),
    }


def main(argv=None):
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = load_config()
    color_enabled = not args.no_color and config["display"].get("color_enabled", True)

    if args.serve:
        _run_serve(config, args)
        return

    events_path = args.events or get_events_path(config)
    try:
        events = normalize_events(load_snapshot(events_path))
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.verbose:
        print(f"Loaded {len(events)} events from {events_path}")

    if args.day:
        _print_day(events, args.day, config, args.json)
        return

    session = DashboardSession(config, events)
    changes = {}
    if args.lookback:
        changes["lookback"] = args.lookback
    if args.range_name:
        changes["range"] = args.range_name
    if args.granularity:
        changes["granularity"] = args.granularity
    if args.disable:
        changes["disabled"] = frozenset(args.disable)
    if changes:
        session.update_controls(**changes)

    view = session.recompute()

    if args.json:
        print(json.dumps(_view_to_json(view), indent=2))
        return

    from imgdash.reports.heatmap import generate_heatmap
    from imgdash.reports.usage import generate_usage

    if args.heatmap:
        print(generate_heatmap(view, config, color_enabled))
    elif args.usage:
        print(generate_usage(view, color_enabled))
    else:
        print(generate_heatmap(view, config, color_enabled))
        print()
        print(generate_usage(view, color_enabled))


def _print_day(events, day_text: str, config: dict, as_json: bool):
    """Print the events of one day."""
    try:
        day = date.fromisoformat(day_text)
    except ValueError:
        print(f"Error: Invalid date '{day_text}', expected YYYY-MM-DD")
        sys.exit(1)

    tz = get_timezone(config)
    day_events = events_on_day(events, day, tz)

    if as_json:
        print(json.dumps([
            {
                "timestamp": e.timestamp.isoformat(),
                "series_id": e.series_id,
                "user_id": e.user_id,
                "app_id": e.app_id,
                "user_name": e.user_name,
                "user_email": e.user_email,
            }
            for e in day_events
        ], indent=2))
        return

    from imgdash.output.formatter import format_table
    print(f"{len(day_events)} generations on {day.isoformat()}")
    if day_events:
        print()
        rows = [
            [to_local_display(e.timestamp, tz), e.series_id, e.app_id,
             e.user_email or e.user_name or e.user_id]
            for e in day_events
        ]
        print(format_table(["Time", "Series", "App", "User"], rows))


def _run_serve(config, args):
    """Start the statistics API server."""
    try:
        import uvicorn
    except ImportError:
        print("Error: The API server requires additional dependencies.")
        print("Install them with: python -m pip install fastapi uvicorn[standard] pydantic")
        sys.exit(1)

    from imgdash.server.app import create_app

    if args.events:
        config = dict(config, events_path=args.events)
    app = create_app(config=config)

    url = f"http://{args.host}:{args.port}"
    print(f"\nStarting imgdash API at {url} ({datetime.now():%Y-%m-%d %H:%M})")
    print("Press Ctrl+C to stop\n")

    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == '__main__':
    main()
