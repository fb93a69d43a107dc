#!/usr/bin/env python3
"""Command-line interface for The Scene data toolkit.

Commands:
  - scene ingest     : Sweep the Places API and write the generated venue module
  - scene photos     : Download one photo per generated or curated venue
  - scene recommend  : Print recommended venues from a generated module
  - scene plan       : Print the query plan without network calls

Typical usage:
  scene ingest --output src/lib/generated-data.ts
  scene ingest --limit-neighborhoods 2 --seed 7
  scene recommend --age 25-29 --dislike Clubs
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from scene.errors import SceneError

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="scene", description="The Scene data toolkit")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--config", "-c", default=None, help="Path to ingestion YAML config")
    p.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    p.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = p.add_subparsers(dest="cmd")

    # ingest
    pi = sub.add_parser("ingest", help="Run the venue ingestion sweep")
    pi.add_argument("--output", "-o", default=None, help="Generated module path")
    pi.add_argument(
        "--delay", type=float, default=None, help="Seconds to wait before each query"
    )
    pi.add_argument("--seed", type=int, default=None, help="Seed for facet tagging")
    pi.add_argument(
        "--limit-neighborhoods",
        type=int,
        default=None,
        help="Only sweep the first N neighborhoods",
    )

    # photos
    pph = sub.add_parser("photos", help="Download venue photos by place id")
    pph.add_argument("--artifact", "-a", default=None, help="Generated module to read")
    pph.add_argument("--output-dir", default=None, help="Directory for photo files")
    pph.add_argument("--mapping", default=None, help="Where to write the id -> path JSON")

    # recommend
    pre = sub.add_parser("recommend", help="Print recommended venues")
    pre.add_argument("--artifact", "-a", default=None, help="Generated module to read")
    pre.add_argument("--city", default=None, help="City key (defaults to config city)")
    pre.add_argument("--age", default=None, help="Age bracket, e.g. 25-29")
    pre.add_argument(
        "--dislike", action="append", default=None, help="Dislike (repeatable)"
    )
    pre.add_argument("--limit", type=int, default=20, help="Max venues to print")

    # plan
    pp = sub.add_parser("plan", help="Show the query plan without running it")
    pp.add_argument(
        "--limit-neighborhoods",
        type=int,
        default=None,
        help="Only plan the first N neighborhoods",
    )

    return p.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    from scene.configs.settings import get_settings
    from scene.monitoring.logging import LoggingOptions, setup_logging

    settings = get_settings()
    setup_logging(
        LoggingOptions(
            level=args.log_level or settings.LOG_LEVEL,
            json_logs=bool(args.json_logs or settings.LOG_JSON),
        )
    )


def _limited_plan(config, limit: int | None):
    from scene.ingestion.queries import QueryPlan

    neighborhoods = config.neighborhoods
    if limit is not None:
        neighborhoods = neighborhoods[: max(limit, 0)]
    return QueryPlan(neighborhoods, config.search_terms, config.locality)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI with the given arguments."""
    try:
        return _main_impl(argv)
    except (FileNotFoundError, SceneError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _main_impl(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.version:
        from scene import __version__

        print(f"scene version {__version__}")
        return 0

    if not args.cmd:
        print("Error: Command required. Use --help for usage info.", file=sys.stderr)
        return 1

    from scene.configs.config import Config

    config_path = Path(args.config) if args.config else None
    ingestion_config = Config.ingestion(config_path)

    if args.cmd == "plan":
        plan = _limited_plan(ingestion_config, args.limit_neighborhoods)
        print(f"{'NEIGHBORHOOD':<24} {'QUERY'}")
        print("-" * 60)
        for query in plan:
            print(f"{query.neighborhood:<24} {query.text}")
        print("-" * 60)
        print(f"Total queries: {len(plan)}")
        return 0

    _configure_logging(args)

    if args.cmd == "ingest":
        from scene.ingestion.pipeline import run_ingestion

        if args.delay is not None:
            ingestion_config = dataclasses.replace(
                ingestion_config, request_delay_seconds=args.delay
            )

        result = run_ingestion(
            ingestion_config,
            plan=_limited_plan(ingestion_config, args.limit_neighborhoods),
            output_path=Path(args.output) if args.output else None,
            seed=args.seed,
        )

        print("-" * 40)
        print(f"Run {result.status.value.upper()}")
        print(f"Run ID:      {result.run_id}")
        print(f"Output:      {result.output_path}")
        print(f"Summary:     {json.dumps(result.summary())}")
        print("-" * 40)
        return 0

    if args.cmd == "photos":
        from scene.configs.settings import get_settings
        from scene.ingestion.persist import load_venue_module
        from scene.ingestion.photos import CuratedVenue, PhotoEnricher, write_mapping
        from scene.ingestion.sources.google_places import PlacesSearchClient

        photo_config = Config.photos(config_path)
        api_key = get_settings().require_google_api_key()

        artifact = Path(args.artifact) if args.artifact else ingestion_config.output_path
        venues = load_venue_module(artifact, ingestion_config.export_name)
        logger.info(f"Loaded {len(venues)} venues from {artifact}")

        with PlacesSearchClient(
            api_key=api_key, request_timeout=photo_config.request_timeout
        ) as client:
            enricher = PhotoEnricher(
                client,
                output_dir=Path(args.output_dir) if args.output_dir else photo_config.output_dir,
                api_key=api_key,
                max_px=photo_config.max_px,
                request_delay_seconds=photo_config.request_delay_seconds,
                search_delay_seconds=photo_config.search_delay_seconds,
                download_delay_seconds=photo_config.download_delay_seconds,
                public_prefix=photo_config.public_prefix,
                city=photo_config.city,
                place_id_prefix=photo_config.place_id_prefix,
            )
            curated = [CuratedVenue.from_dict(entry) for entry in photo_config.curated]
            result = enricher.run(venues, curated)

        write_mapping(
            result.mapping, Path(args.mapping) if args.mapping else photo_config.mapping_path
        )
        print(f"Downloaded {result.downloaded}/{result.total} venue photos")
        return 0

    if args.cmd == "recommend":
        from scene.catalog.filters import UserPreferences, recommended_venues
        from scene.ingestion.persist import load_venue_module

        artifact = Path(args.artifact) if args.artifact else ingestion_config.output_path
        venues = load_venue_module(artifact, ingestion_config.export_name)
        preferences = UserPreferences(age_bracket=args.age, dislikes=list(args.dislike or []))
        picks = recommended_venues(venues, args.city or ingestion_config.city, preferences)

        print(f"{'RATING':<8} {'NEIGHBORHOOD':<24} {'NAME'}")
        print("-" * 60)
        for venue in picks[: args.limit]:
            print(f"{venue.rating:<8.1f} {venue.neighborhood:<24} {venue.name}")
        print("-" * 60)
        print(f"{len(picks)} recommended venues")
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
