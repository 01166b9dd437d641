# nwi/services/ingest/columns.py
"""
Column contract between the loaders and the extract producers.

Bump the version when an extract changes layout: the loaders and the files
must be upgraded together.
"""
from typing import Dict, List

from nwi.core.exceptions import MalformedRecordError

EXTRACT_SCHEMA_VERSION = "2021.1"

# EPA National Walkability Index (Natl_WI.csv), resolved by header name.
NATL_WI_COLUMNS = {
    "geoid20": "GEOID20",
    "statefp": "STATEFP",
    "countyfp": "COUNTYFP",
    "tractce": "TRACTCE",
    "blkgrpce": "BLKGRPCE",
    "csa": "CSA",
    "csa_name": "CSA_Name",
    "cbsa": "CBSA",
    "cbsa_name": "CBSA_Name",
    "ac_total": "Ac_Total",
    "ac_water": "Ac_Water",
    "ac_land": "Ac_Land",
    "ac_unpr": "Ac_Unpr",
    "total_pop": "TotPop",
    "count_hu": "CountHU",
    "hh": "HH",
    "workers": "Workers",
    "d2b_e8mixa": "D2B_E8MIXA",
    "d2a_ephhm": "D2A_EPHHM",
    "d3b": "D3B",
    "d4a": "D4A",
    "d2a_ranked": "D2A_Ranked",
    "d2b_ranked": "D2B_Ranked",
    "d3b_ranked": "D3B_Ranked",
    "d4a_ranked": "D4A_Ranked",
    "nwi": "NatWalkInd",
    "shape_length": "Shape_Length",
    "shape_area": "Shape_Area",
}

# Present only in enriched extracts
NATL_WI_OPTIONAL_COLUMNS = {
    "geometry": "Geometry",
    "bike_count_rank": "BikeCountRank",
    "bike_percentage_rank": "BikePercentageRank",
    "bike_fatality_rank": "BikeFatalityRank",
    "bike_share_rank": "BikeShareRank",
    "transit_score": "TransitScore",
    "bike_score": "BikeScore",
}

# Positional extracts (ACS tables keyed by CBSA, HUD zip crosswalk)
TRANSIT_COLUMNS = {"estimate": 2, "percentage": 3, "cbsa": 4}
BIKE_COLUMNS = {"ridership": 2, "cbsa": 3}
ZIPCODE_COLUMNS = {"zipcode": 0, "cbsa": 1}


def resolve_columns(header: List[str], required: Dict[str, str], optional: Dict[str, str] = None) -> Dict[str, int]:
    """Maps field names to positions in `header` (case-insensitive)."""
    positions = {name.strip().lower(): i for i, name in enumerate(header)}
    resolved = {}
    missing = []
    for field, column in required.items():
        idx = positions.get(column.lower())
        if idx is None:
            missing.append(column)
        else:
            resolved[field] = idx
    if missing:
        raise MalformedRecordError(f"extract is missing columns {missing} (schema {EXTRACT_SCHEMA_VERSION})")
    for field, column in (optional or {}).items():
        idx = positions.get(column.lower())
        if idx is not None:
            resolved[field] = idx
    return resolved


def check_width(header: List[str], columns: Dict[str, int], extract: str) -> None:
    """Positional extracts must be at least as wide as their highest column."""
    needed = max(columns.values()) + 1
    if len(header) < needed:
        raise MalformedRecordError(
            f"{extract} extract has {len(header)} columns, needs {needed} (schema {EXTRACT_SCHEMA_VERSION})"
        )
