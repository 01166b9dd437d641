# nwi/cli.py
"""
Populate the NWI database from the CSV extracts in DATA_DIR.

Loads the tract extract in batches, then applies CBSA transit/bike figures and
loads the zip -> CBSA crosswalk. Safe to rerun from scratch with --reset.

Usage:
    nwi-ingest --reset
    nwi-ingest --skip-tracts --data-dir /data/2021
"""
import argparse
import asyncio
import json
import logging
import sys

from nwi.core.config import settings
from nwi.core.database import AsyncSessionLocal, engine
from nwi.core.exceptions import NwiError
from nwi.core.init_db import init_tables
from nwi.core.logging import setup_logging
from nwi.services.ingest.orchestrator import NwiEtlOrchestrator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ingest National Walkability Index extracts")
    parser.add_argument("--data-dir", default=settings.DATA_DIR, help="Directory holding the CSV extracts")
    parser.add_argument("--batch-size", type=int, default=settings.INGEST_BATCH_SIZE, help="Rows per bulk insert")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate every table first")
    parser.add_argument("--skip-tracts", action="store_true")
    parser.add_argument("--skip-enrichment", action="store_true")
    parser.add_argument("--skip-zipcodes", action="store_true")
    return parser


async def run(args: argparse.Namespace) -> list:
    try:
        await init_tables(engine, reset=args.reset)
        orchestrator = NwiEtlOrchestrator(AsyncSessionLocal, data_dir=args.data_dir, batch_size=args.batch_size)
        reports = await orchestrator.run(
            tracts=not args.skip_tracts,
            enrichment=not args.skip_enrichment,
            zipcodes=not args.skip_zipcodes,
        )
    finally:
        await engine.dispose()
    return [r.as_dict() for r in reports]


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(settings.LOG_LEVEL)

    try:
        summary = asyncio.run(run(args))
    except (NwiError, OSError) as e:
        # Batch-or-nothing: rerun the whole job after fixing the cause
        logger.error(f"❌ Ingestion aborted: {e}")
        return 1

    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
