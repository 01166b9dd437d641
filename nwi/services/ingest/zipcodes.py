# nwi/services/ingest/zipcodes.py
import logging
from typing import Iterable, List, Sequence

from nwi.models.group_tract import Zipcode
from nwi.services.ingest.aggregator import FIRST_DATA_LINE, parse_code
from nwi.services.ingest.columns import ZIPCODE_COLUMNS
from nwi.services.ingest.report import IngestReport

logger = logging.getLogger(__name__)


def match_zip_to_cbsa(rows: Iterable[Sequence[str]], report: IngestReport) -> List[Zipcode]:
    """
    Builds one Zipcode row per crosswalk record. Nothing is deduplicated: a
    zip split across two metro areas maps to both.
    """
    zipcodes = []
    for line, row in enumerate(rows, start=FIRST_DATA_LINE):
        report.rows_read += 1
        zipcode = row[ZIPCODE_COLUMNS["zipcode"]].strip()
        try:
            if not zipcode.isdigit() or len(zipcode) > 5:
                raise ValueError(f"invalid zip code {zipcode!r}")
            cbsa = parse_code(row[ZIPCODE_COLUMNS["cbsa"]])
            if cbsa is None:
                raise ValueError("missing CBSA code")
        except ValueError as e:
            report.skip(line, str(e))
            continue
        zipcodes.append(Zipcode(zipcode=zipcode.zfill(5), cbsa=cbsa))

    report.entities = len(zipcodes)
    logger.info(f"Matched {report.entities} zip codes to CBSAs ({report.skipped} skipped).")
    return zipcodes
