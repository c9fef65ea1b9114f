#!/usr/bin/env python
"""CLI utility that replays a scripted choreography against the event bus."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from choreo.simulation import PublisherNotConfiguredError, WorkflowSimulation, load_entries, simulation_publisher


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish a scripted sequence of choreography events.")
    parser.add_argument("file", type=Path, help='JSON file shaped as {"events": [{"source", "detailType", "detail", "wait"}]}.')
    parser.add_argument("--dry-run", action="store_true", help="Log the events instead of publishing them.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        entries = load_entries(json.loads(args.file.read_text()))
    except (OSError, ValueError) as exc:
        logging.error("Could not load simulation %s: %s", args.file, exc)
        return 1

    try:
        publisher = simulation_publisher(dry_run=args.dry_run)
    except PublisherNotConfiguredError as exc:
        logging.error("%s", exc)
        return 1

    published = asyncio.run(WorkflowSimulation(publisher).run(entries))

    verb = "Logged" if args.dry_run else "Published"
    logging.info("%s %s events from %s", verb, len(published), args.file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
