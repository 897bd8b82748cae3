#!/usr/bin/env python3
"""CLI to run one meridian pipeline pass."""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from db.database import init_db
from db.repository import Repository
from db.seed import sync_source_registry
from pipeline.orchestrator import trigger_pipeline_run


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the meridian news pipeline once")
    parser.add_argument(
        "--sync-sources",
        action="store_true",
        help="Sync the source registry into the database before running",
    )
    parser.add_argument(
        "--sync-only",
        action="store_true",
        help="Only sync the source registry, do not run the pipeline",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    init_db()
    if args.sync_sources or args.sync_only:
        sync_source_registry(Repository())
    if args.sync_only:
        return

    result = trigger_pipeline_run()
    logging.info("Done. %s", result.message)
    if result.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
