# nwi/services/ingest/orchestrator.py
import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Sequence

from sqlalchemy.ext.asyncio import async_sessionmaker

from nwi.core.config import settings
from nwi.models.group_tract import GroupTract
from nwi.repositories.tract_repository import TractRepository
from nwi.services.ingest.aggregator import TractAggregator
from nwi.services.ingest.batch import BatchLoader
from nwi.services.ingest.columns import BIKE_COLUMNS, TRANSIT_COLUMNS, ZIPCODE_COLUMNS, check_width
from nwi.services.ingest.enrichment import CbsaEnrichmentPass
from nwi.services.ingest.reader import CsvRecordReader
from nwi.services.ingest.report import IngestReport
from nwi.services.ingest.zipcodes import match_zip_to_cbsa

logger = logging.getLogger(__name__)


def read_positional(path: Path, columns: Dict[str, int], extract: str) -> List[List[str]]:
    with CsvRecordReader(path) as reader:
        check_width(reader.header, columns, extract)
        return list(reader)


class NwiEtlOrchestrator:
    """
    One-shot ingestion job: tract load first, then the CBSA enrichment and
    the zip crosswalk (independent of each other, run concurrently).

    Every pass opens its own session from `session_factory`.
    """

    def __init__(self, session_factory: async_sessionmaker, data_dir: str = None, batch_size: int = None):
        self.session_factory = session_factory
        self.data_dir = Path(data_dir or settings.DATA_DIR)
        self.loader = BatchLoader(batch_size or settings.INGEST_BATCH_SIZE)
        self.aggregator = TractAggregator()

    def _path(self, filename: str) -> Path:
        return self.data_dir / filename

    def _read_and_aggregate(self, path: Path, report: IngestReport) -> List[GroupTract]:
        with CsvRecordReader(path) as reader:
            return self.aggregator.aggregate(reader.header, reader, report)

    async def load_tracts(self, filename: str = None) -> IngestReport:
        path = self._path(filename or settings.TRACT_FILE)
        report = IngestReport(extract=path.name)
        logger.info(f"🚀 Loading tracts from {path}...")

        # Parse + aggregate off the event loop, then wait for the single result
        tracts = await asyncio.to_thread(self._read_and_aggregate, path, report)

        async with self.session_factory() as session:
            repo = TractRepository(session)
            report.batches = await self.loader.load(tracts, repo.insert_tracts)

        logger.info(f"✅ {report.entities} tracts persisted in {report.batches} batches.")
        return report

    async def load_zipcodes(self, filename: str = None) -> IngestReport:
        path = self._path(filename or settings.ZIPCODE_FILE)
        report = IngestReport(extract=path.name)
        logger.info(f"📮 Loading zip -> CBSA crosswalk from {path}...")

        rows = await asyncio.to_thread(read_positional, path, ZIPCODE_COLUMNS, "zipcode")
        zipcodes = match_zip_to_cbsa(rows, report)

        async with self.session_factory() as session:
            repo = TractRepository(session)
            report.batches = await self.loader.load(zipcodes, repo.insert_zipcodes)
        return report

    async def apply_transit(self, filename: str = None) -> IngestReport:
        path = self._path(filename or settings.CBSA_TRANSIT_FILE)
        report = IngestReport(extract=path.name)
        rows = await asyncio.to_thread(read_positional, path, TRANSIT_COLUMNS, "transit")
        async with self.session_factory() as session:
            await CbsaEnrichmentPass(TractRepository(session)).apply_transit(rows, report)
        return report

    async def apply_bike(self, filename: str = None) -> IngestReport:
        path = self._path(filename or settings.CBSA_BIKE_FILE)
        report = IngestReport(extract=path.name)
        rows = await asyncio.to_thread(read_positional, path, BIKE_COLUMNS, "bike")
        async with self.session_factory() as session:
            await CbsaEnrichmentPass(TractRepository(session)).apply_bike(rows, report)
        return report

    async def run(self, tracts: bool = True, enrichment: bool = True, zipcodes: bool = True) -> Sequence[IngestReport]:
        """Runs the selected passes. The first failing pass aborts the job."""
        reports = []
        if tracts:
            reports.append(await self.load_tracts())

        passes = []
        if enrichment:
            passes += [self.apply_transit(), self.apply_bike()]
        if zipcodes:
            passes.append(self.load_zipcodes())
        if passes:
            tasks = [asyncio.ensure_future(p) for p in passes]
            try:
                reports.extend(await asyncio.gather(*tasks))
            except BaseException:
                for task in tasks:
                    task.cancel()
                # Let the cancelled passes unwind before the caller disposes the engine
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        skipped = sum(r.skipped for r in reports)
        if skipped:
            logger.warning(f"⚠️ Ingestion finished with {skipped} skipped records.")
        return reports
