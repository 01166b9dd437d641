# nwi/services/ingest/enrichment.py
import logging
from typing import Iterable, Sequence

from nwi.repositories.tract_repository import TractRepository
from nwi.services.ingest.aggregator import FIRST_DATA_LINE, parse_code, parse_float, parse_int
from nwi.services.ingest.columns import BIKE_COLUMNS, TRANSIT_COLUMNS
from nwi.services.ingest.report import IngestReport

logger = logging.getLogger(__name__)


class CbsaEnrichmentPass:
    """
    Copies metro-level transit and bike figures onto every CBSA row with the
    matching code. A record with a bad number is logged and skipped; store
    failures propagate.
    """

    def __init__(self, repo: TractRepository):
        self.repo = repo

    async def apply_transit(self, rows: Iterable[Sequence[str]], report: IngestReport) -> IngestReport:
        for line, row in enumerate(rows, start=FIRST_DATA_LINE):
            report.rows_read += 1
            try:
                code = parse_code(row[TRANSIT_COLUMNS["cbsa"]])
                estimate = parse_float(row[TRANSIT_COLUMNS["estimate"]])
                percentage = parse_float(row[TRANSIT_COLUMNS["percentage"]])
                if code is None or estimate is None:
                    raise ValueError("missing CBSA code or transit estimate")
            except ValueError as e:
                logger.warning(f"Transit row {line} skipped: {e}")
                report.skip(line, str(e))
                continue

            report.updated += await self.repo.update_cbsas(
                code,
                public_transit_usage=estimate,
                public_transit_percentage=percentage,
            )

        logger.info(f"🚌 Transit usage applied to {report.updated} CBSA rows.")
        return report

    async def apply_bike(self, rows: Iterable[Sequence[str]], report: IngestReport) -> IngestReport:
        for line, row in enumerate(rows, start=FIRST_DATA_LINE):
            report.rows_read += 1
            try:
                code = parse_code(row[BIKE_COLUMNS["cbsa"]])
                ridership = parse_int(row[BIKE_COLUMNS["ridership"]])
                if code is None or ridership is None:
                    raise ValueError("missing CBSA code or ridership")
                if ridership < 0:
                    raise ValueError(f"negative ridership {ridership}")
            except ValueError as e:
                logger.warning(f"Bike row {line} skipped: {e}")
                report.skip(line, str(e))
                continue

            report.updated += await self.repo.update_cbsas(code, bike_ridership=ridership)

        logger.info(f"🚲 Bike ridership applied to {report.updated} CBSA rows.")
        return report
