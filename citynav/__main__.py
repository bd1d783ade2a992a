#!/usr/bin/env python3
"""
citynav - Route resolution and turn-by-turn guidance

Usage:
    python -m citynav ORIGIN_LON ORIGIN_LAT DEST_LON DEST_LAT [options]

Options:
    --mode MODE       walking or driving (default: walking)
    --language LANG   en or ru (default: en)
    --mute            Do not speak announcements
    --strategy NAME   nearest or sequential maneuver selection (default: nearest)
    --preview         Resolve and print the route without following it
    --html FILE       Save a map of the route to an HTML file
    --gpx FILE        Export the route to a GPX file
    --record FILE     Record GPS trace to JSON file for debugging
    --playback FILE   Playback GPS trace from JSON file
    --speed FACTOR    Playback speed multiplier (default: 1.0)
    --log FILE        Log file path (default: citynav_TIMESTAMP.log)
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

from .app import Navigator
from .audio import Audio
from .config import CONFIG
from .gps import GPS, GPSPlayback, GPSRecorder
from .localizer import SUPPORTED_LANGUAGES, categorize, direction_symbol, phrase
from .logger import Logger
from .models import Coordinate, TravelMode
from .preview import render_route_html, save_gpx
from .resolver import build_resolver
from .session import SelectionStrategy


def _print_route(route, language: str):
    print(f"\nRoute via {route.provider}: {route.distance:.0f}m, "
          f"about {route.duration/60:.1f} minutes")
    if route.is_fallback:
        print("  No routing service answered; showing a straight line to the destination")
        return
    for i, step in enumerate(route.steps, 1):
        category = categorize(step.instruction)
        road = f" ({step.name})" if step.name else ""
        print(f"  {i:2d}. {direction_symbol(category)} {phrase(category, None, language)}{road}"
              f"  [{step.distance:.0f}m]")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="citynav - Route resolution and turn-by-turn guidance"
    )
    parser.add_argument("origin_lon", type=float, help="Origin longitude")
    parser.add_argument("origin_lat", type=float, help="Origin latitude")
    parser.add_argument("dest_lon", type=float, help="Destination longitude")
    parser.add_argument("dest_lat", type=float, help="Destination latitude")
    parser.add_argument("--mode", choices=[m.value for m in TravelMode],
                        default=TravelMode.WALKING.value,
                        help="Travel mode (default: walking)")
    parser.add_argument("--language", choices=SUPPORTED_LANGUAGES,
                        default=CONFIG["default_language"],
                        help="Instruction language (default: en)")
    parser.add_argument("--mute", action="store_true",
                        help="Do not speak announcements")
    parser.add_argument("--strategy", choices=[s.value for s in SelectionStrategy],
                        default=SelectionStrategy.NEAREST.value,
                        help="Maneuver selection strategy (default: nearest)")
    parser.add_argument("--preview", action="store_true",
                        help="Resolve and print the route without following it")
    parser.add_argument("--html", metavar="FILE",
                        help="Save a map of the route to an HTML file")
    parser.add_argument("--gpx", metavar="FILE",
                        help="Export the route to a GPX file")
    parser.add_argument("--record", metavar="FILE",
                        help="Record GPS trace to JSON file")
    parser.add_argument("--playback", metavar="FILE",
                        help="Playback GPS trace from JSON file")
    parser.add_argument("--speed", type=float, default=1.0,
                        help="Playback speed multiplier (default: 1.0)")
    parser.add_argument("--log", metavar="FILE",
                        help="Log file path (default: citynav_TIMESTAMP.log)")

    args = parser.parse_args(argv)

    for name in ("origin_lat", "dest_lat"):
        if not -90 <= getattr(args, name) <= 90:
            parser.error(f"{name} must be between -90 and 90")
    for name in ("origin_lon", "dest_lon"):
        if not -180 <= getattr(args, name) <= 180:
            parser.error(f"{name} must be between -180 and 180")
    if args.record and args.playback:
        parser.error("--record and --playback cannot be used together")
    if args.speed <= 0:
        parser.error("--speed must be positive")
    if args.playback and not Path(args.playback).exists():
        print(f"Playback file not found: {args.playback}")
        sys.exit(1)

    log_path = args.log
    if not log_path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = f"citynav_{timestamp}.log"
    logger = Logger(log_path)

    navigator = Navigator(
        build_resolver(CONFIG, logger=logger),
        audio=Audio(args.language),
        logger=logger,
        language=args.language,
        audio_enabled=not args.mute,
        strategy=SelectionStrategy(args.strategy),
    )

    try:
        route = navigator.request_route(
            Coordinate(args.origin_lon, args.origin_lat),
            Coordinate(args.dest_lon, args.dest_lat),
            TravelMode(args.mode),
        )
        _print_route(route, args.language)

        if args.html:
            render_route_html(route, args.html, args.language)
        if args.gpx:
            save_gpx(route, args.gpx, args.language)
        if args.preview:
            return

        if args.playback:
            source = GPSPlayback(args.playback, args.speed)
        elif args.record:
            source = GPSRecorder(GPS(), args.record)
        else:
            source = GPS()
        navigator.run(source)
    finally:
        logger.close()


if __name__ == "__main__":
    main()
