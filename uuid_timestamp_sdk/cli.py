"""
Command-line decoder for version-1 UUID timestamps.

Usage:
    uuid-timestamp server.log                 # Decode every v1 UUID in a file
    cat ids.txt | uuid-timestamp              # Read from stdin
    uuid-timestamp --no-time-ago a.txt b.txt  # Instants only
    uuid-timestamp --now 2024-01-01T00:00:00 ids.txt
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from uuid_timestamp_sdk.config import RuntimeConfig, validate_utc_offset
from uuid_timestamp_sdk.core.batch import decode_all
from uuid_timestamp_sdk.core.decoder import parse_instant
from uuid_timestamp_sdk.core.errors import ConfigError, MalformedInstantError

logger = logging.getLogger(__name__)


def _utc_offset(value: str) -> int:
    try:
        return validate_utc_offset(int(value))
    except (ValueError, ConfigError) as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uuid-timestamp",
        description="Find version-1 UUIDs in text and print when they were created.",
    )
    parser.add_argument("files", nargs="*", type=Path,
                        help="Files to scan (default: stdin)")
    parser.add_argument("--no-time-ago", dest="time_ago", action="store_false",
                        default=None, help="Do not print relative time")
    zone = parser.add_mutually_exclusive_group()
    zone.add_argument("--local-time", action="store_true", default=None,
                      help="Render instants in the host's local UTC offset")
    zone.add_argument("--utc-offset", type=_utc_offset, metavar="MINUTES",
                      help="Render instants at a fixed UTC offset")
    parser.add_argument("--now", metavar="YYYY-MM-DDTHH:MM:SS",
                        help="Reference instant for relative time (default: now)")
    parser.add_argument("--env-file", help="Load UUID_* settings from this .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def load_config(args: argparse.Namespace) -> RuntimeConfig:
    """Environment first, then command-line overrides."""
    config = RuntimeConfig.from_env(args.env_file)
    if args.time_ago is not None:
        config.display.time_ago_enabled = args.time_ago
    if args.local_time:
        config.display.use_local_time = True
    elif args.utc_offset is not None:
        config.display.use_local_time = False
        config.display.utc_offset_minutes = args.utc_offset
    return config


def scan(text: str, source: str, config: RuntimeConfig, now, out: TextIO, tz=None) -> int:
    """Print one line per decoded UUID. Returns the number printed."""
    results = decode_all(
        text,
        now=now,
        tz=tz or config.display.tzinfo(),
        time_ago=config.display.time_ago_enabled,
    )
    printed = 0
    for result in results:
        if not result.ok:
            logger.warning("%s: skipping %s: %s", source, result.candidate.text, result.error)
            continue
        fields = [result.candidate.text, result.instant]
        if result.relative is not None:
            fields.append(result.relative)
        out.write("\t".join(fields) + "\n")
        printed += 1
    logger.debug("%s: %d candidate(s), %d decoded", source, len(results), printed)
    return printed


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args)
        tz = config.display.tzinfo()
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    now = None
    if args.now:
        try:
            now = parse_instant(args.now, tz)
        except MalformedInstantError as e:
            logger.error("Invalid --now: %s", e)
            return 2

    total = 0
    if not args.files:
        total += scan(sys.stdin.read(), "<stdin>", config, now, sys.stdout, tz)
    for path in args.files:
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.error("Cannot read %s: %s", path, e)
            continue
        total += scan(text, str(path), config, now, sys.stdout, tz)

    return 0 if total else 1


if __name__ == "__main__":
    sys.exit(main())
