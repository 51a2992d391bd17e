from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from config import config
from services.feed_source import CustomFeedSource
from services.oracle_errors import OracleSourceError
from services.oracle_sources import ClockSource, OracleSource, RandomSource
from services.source_registry import SourceConfigError, build_feed_source, load_source_list

logger = logging.getLogger(__name__)


def resolve_source(args: argparse.Namespace, sources_file: Path) -> OracleSource:
    if args.url:
        return CustomFeedSource(url=args.url, jsonpath=args.jsonpath, decimal=args.decimal)
    if args.source == "time":
        return ClockSource()
    if args.source == "rng":
        return RandomSource()

    source_list = load_source_list(sources_file)
    descriptor = source_list.get(args.source)
    if descriptor is None:
        msg = f"Unknown source {args.source!r}; configured: {', '.join(source_list.names())}"
        raise SourceConfigError(msg, path=sources_file)
    return build_feed_source(descriptor)


def run(args: argparse.Namespace) -> int:
    sources_file: Path = args.sources_file or config().sources_file

    try:
        if args.list:
            for name in ["time", "rng", *load_source_list(sources_file).names()]:
                print(name)
            return 0
        source = resolve_source(args, sources_file)
    except SourceConfigError as exc:
        logger.error("Invalid source configuration in %s: %s", exc.path, exc)
        return 1
    except ValueError as exc:
        logger.error("Invalid source arguments: %s", exc)
        return 1

    try:
        value = source.fetch(args.params)
    except OracleSourceError as exc:
        logger.error("Fetch from %s failed (%s): %s", source.name, exc.kind, exc)
        return 1

    print(json.dumps({"source": source.name, "params": args.params, "value": str(value)}, indent=2))
    return 0


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch a single fixed-point value from an oracle source.")
    parser.add_argument("--sources-file", type=Path, default=None, help="TOML source list (default from settings).")
    parser.add_argument("--list", action="store_true", help="List available source names and exit.")
    parser.add_argument("--source", default="time", help="time, rng, or a configured feed name (default: time).")
    parser.add_argument(
        "--params",
        type=int,
        nargs="*",
        default=[],
        help="Fetch parameters; for feeds the quote index then the base index.",
    )
    parser.add_argument("--url", help="Fetch from this fixed URL instead of a configured source.")
    parser.add_argument("--jsonpath", default="$", help="JSONPath selecting the value for --url (default: $).")
    parser.add_argument("--decimal", type=int, default=0, help="Decimal exponent for --url (default: 0).")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    logging.basicConfig(level=config().log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    raise SystemExit(run(parse_args(argv)))


if __name__ == "__main__":
    main()
