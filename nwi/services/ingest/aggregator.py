# nwi/services/ingest/aggregator.py
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from shapely import wkt
from shapely.errors import ShapelyError

from nwi.core.exceptions import MalformedGeoidError
from nwi.models.group_tract import GroupTract, GeoidDetail, CSA, CBSA, AC, Population, Rank, Shape
from nwi.services.geoid import BLOCK_GROUP_WIDTH, compose_geoid, split_geoid, tract_geoid, truncate_geoid
from nwi.services.ingest.columns import NATL_WI_COLUMNS, NATL_WI_OPTIONAL_COLUMNS, resolve_columns
from nwi.services.ingest.report import IngestReport

logger = logging.getLogger(__name__)

# Line 1 is the header
FIRST_DATA_LINE = 2


def parse_float(value: str) -> Optional[float]:
    value = (value or "").strip()
    if not value:
        return None
    return float(value)


def parse_int(value: str) -> Optional[int]:
    # Counts sometimes come formatted as floats ("1520.0")
    number = parse_float(value)
    return None if number is None else int(number)


def parse_code(value: str) -> Optional[int]:
    """Area codes: blank means the tract is outside any CSA/CBSA."""
    value = (value or "").strip()
    if not value:
        return None
    if not value.isdigit():
        raise ValueError(f"invalid area code {value!r}")
    return int(value)


def normalize_geometry(value: str) -> str:
    value = (value or "").strip()
    if not value:
        return ""
    try:
        return wkt.loads(value).wkt
    except ShapelyError as e:
        raise ValueError(f"invalid geometry: {e}") from e


class TractAggregator:
    """
    Turns Natl_WI rows into GroupTract entities, one per tract geoid.

    Rows that land on an already seen geoid replace the earlier entity
    (last write wins) but keep its position in the output.
    """

    def __init__(self, columns: Dict[str, str] = None, optional_columns: Dict[str, str] = None):
        self.columns = columns or NATL_WI_COLUMNS
        self.optional_columns = NATL_WI_OPTIONAL_COLUMNS if optional_columns is None else optional_columns

    def aggregate(self, header: Sequence[str], rows: Iterable[Sequence[str]], report: IngestReport) -> List[GroupTract]:
        idx = resolve_columns(list(header), self.columns, self.optional_columns)
        tracts: Dict[int, GroupTract] = {}

        for line, row in enumerate(rows, start=FIRST_DATA_LINE):
            report.rows_read += 1
            try:
                tract = self._build(row, idx)
            except (MalformedGeoidError, ValueError) as e:
                logger.warning(f"Skipping {report.extract} row {line}: {e}")
                report.skip(line, str(e))
                continue

            if tract.geoid10 in tracts:
                report.duplicates += 1
            tracts[tract.geoid10] = tract

        report.entities = len(tracts)
        if report.duplicates:
            logger.warning(f"⚠️ {report.duplicates} rows overwrote an earlier row with the same tract geoid.")
        logger.info(f"Aggregated {report.rows_read} rows into {report.entities} tracts.")
        return list(tracts.values())

    def _build(self, row: Sequence[str], idx: Dict[str, int]) -> GroupTract:
        def field(name):
            return row[idx[name]] if name in idx else ""

        parts = split_geoid(compose_geoid(field("statefp"), field("countyfp"), field("tractce"), field("blkgrpce")))
        geoid = tract_geoid(field("statefp"), field("countyfp"), field("tractce"))
        geoid20 = field("geoid20").strip()

        tract = GroupTract(
            geoid10=geoid,
            geoid20=truncate_geoid(geoid20, source_width=BLOCK_GROUP_WIDTH) if geoid20 else None,
        )
        tract.geoid_detail = GeoidDetail(
            geoid=geoid,
            statefp=parts.statefp,
            countyfp=parts.countyfp,
            tractce=parts.tractce,
            blkgrpce=parts.blkgrpce,
        )
        tract.csa = CSA(geoid=geoid, csa=parse_code(field("csa")), csa_name=field("csa_name").strip())
        tract.cbsa = CBSA(geoid=geoid, cbsa=parse_code(field("cbsa")), cbsa_name=field("cbsa_name").strip())
        tract.ac = AC(
            geoid=geoid,
            ac_total=parse_float(field("ac_total")),
            ac_water=parse_float(field("ac_water")),
            ac_land=parse_float(field("ac_land")),
            ac_unpr=parse_float(field("ac_unpr")),
        )
        tract.population = Population(
            geoid=geoid,
            total_pop=parse_int(field("total_pop")),
            count_hu=parse_float(field("count_hu")),
            hh=parse_float(field("hh")),
            workers=parse_int(field("workers")),
        )
        tract.rank = Rank(
            geoid=geoid,
            d2b_e8mixa=parse_float(field("d2b_e8mixa")),
            d2a_ephhm=parse_float(field("d2a_ephhm")),
            d3b=parse_float(field("d3b")),
            d4a=parse_float(field("d4a")),
            d2a_ranked=parse_float(field("d2a_ranked")),
            d2b_ranked=parse_float(field("d2b_ranked")),
            d3b_ranked=parse_float(field("d3b_ranked")),
            d4a_ranked=parse_float(field("d4a_ranked")),
            nwi=parse_float(field("nwi")),
            bike_count_rank=parse_int(field("bike_count_rank")),
            bike_percentage_rank=parse_int(field("bike_percentage_rank")),
            bike_fatality_rank=parse_int(field("bike_fatality_rank")),
            bike_share_rank=parse_int(field("bike_share_rank")) or 1,
            transit_score=parse_int(field("transit_score")),
            bike_score=parse_float(field("bike_score")),
        )
        tract.shape = Shape(
            geoid=geoid,
            shape_length=parse_float(field("shape_length")),
            shape_area=parse_float(field("shape_area")),
            geometry=normalize_geometry(field("geometry")),
        )
        return tract
