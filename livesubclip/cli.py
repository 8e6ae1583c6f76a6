"""Thin CLI entry point: offline window resolution and the HTTP service."""

import argparse
import json
import logging
import sys
from pathlib import Path

from livesubclip.config import DEFAULT_INTERVAL_SEC, DISCONTINUITY_FACTOR, config_from_env, load_config
from livesubclip.manifest import extract_timing
from livesubclip.resolver import resolve
from livesubclip.timespan import format_iso_duration, format_timespan, parse_timespan

EXIT_BAD_MANIFEST = 2
EXIT_NO_WINDOW = 3


def _resolve(args: argparse.Namespace) -> int:
    timing = extract_timing(args.manifest.read_bytes())
    if timing.is_error:
        print(f"Error: {args.manifest} has no usable chunk timing.", file=sys.stderr)
        return EXIT_BAD_MANIFEST

    try:
        last_end = parse_timespan(args.last_end) if args.last_end else None
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    window = resolve(
        timing,
        args.interval,
        last_end,
        discontinuity_factor=args.discontinuity_factor,
    )
    if window is None:
        print("No new chunks since the last subclip.", file=sys.stderr)
        return EXIT_NO_WINDOW

    print(json.dumps({
        "start": format_timespan(window.start),
        "end": format_timespan(window.end),
        "duration": format_iso_duration(window.duration),
    }))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="livesubclip",
        description="LiveSubclip: cut a live stream into contiguous GOP-aligned subclips.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    res = sub.add_parser("resolve", help="Compute the next subclip window from a client manifest file")
    res.add_argument("manifest", type=Path, help="Smooth Streaming client manifest")
    res.add_argument("--interval", "-i", type=int, default=DEFAULT_INTERVAL_SEC, help="Target subclip length (seconds)")
    res.add_argument("--last-end", "-l", type=str, help="End time of the previous subclip (e.g. 00:01:00)")
    res.add_argument(
        "--discontinuity-factor", type=float, default=DISCONTINUITY_FACTOR,
        help="Intervals of drift after which the previous end time is ignored",
    )

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--config", "-c", type=Path, help="JSON config file (default: LIVESUBCLIP_* env vars)")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "resolve":
        if args.interval <= 0:
            parser.error("--interval must be a positive number of seconds")
        sys.exit(_resolve(args))

    if args.command == "serve":
        from livesubclip.web import create_app
        try:
            config = load_config(args.config) if args.config else config_from_env()
            app = create_app(config)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"LiveSubclip API: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)


if __name__ == "__main__":
    main()
