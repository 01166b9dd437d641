"""Shared fixtures: a throwaway SQLite database per test and extract builders."""
from __future__ import annotations

import os

# Settings() requires a database URL at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest

from nwi.core.database import make_engine, make_session_factory
from nwi.core.init_db import init_tables
from nwi.models.group_tract import AC, CBSA, CSA, GeoidDetail, GroupTract, Population, Rank, Shape

# ---------------------------------------------------------------------------
# Natl_WI extract
# ---------------------------------------------------------------------------

NATL_WI_HEADER = [
    "OBJECTID", "GEOID10", "GEOID20", "STATEFP", "COUNTYFP", "TRACTCE", "BLKGRPCE",
    "CSA", "CSA_Name", "CBSA", "CBSA_Name",
    "Ac_Total", "Ac_Water", "Ac_Land", "Ac_Unpr",
    "TotPop", "CountHU", "HH", "Workers",
    "D2B_E8MIXA", "D2A_EPHHM", "D3B", "D4A",
    "D2A_Ranked", "D2B_Ranked", "D3B_Ranked", "D4A_Ranked",
    "NatWalkInd", "Shape_Length", "Shape_Area",
]

_DEFAULT_ROW = {
    "OBJECTID": "1",
    "GEOID10": "60014001001",
    "GEOID20": "60014001001",
    "STATEFP": "06",
    "COUNTYFP": "001",
    "TRACTCE": "400100",
    "BLKGRPCE": "1",
    "CSA": "488",
    "CSA_Name": "San Jose-San Francisco-Oakland, CA",
    "CBSA": "41860",
    "CBSA_Name": "San Francisco-Oakland-Hayward, CA",
    "Ac_Total": "1520.5",
    "Ac_Water": "0",
    "Ac_Land": "1520.5",
    "Ac_Unpr": "1400.2",
    "TotPop": "3184",
    "CountHU": "1290",
    "HH": "1201",
    "Workers": "1650",
    "D2B_E8MIXA": "0.52",
    "D2A_EPHHM": "0.61",
    "D3B": "88.3",
    "D4A": "310.0",
    "D2A_Ranked": "14",
    "D2B_Ranked": "12",
    "D3B_Ranked": "16",
    "D4A_Ranked": "15",
    "NatWalkInd": "14.2",
    "Shape_Length": "8123.4",
    "Shape_Area": "3120044.1",
}


def natl_wi_row(**overrides) -> list[str]:
    values = {**_DEFAULT_ROW, **overrides}
    return [values[column] for column in NATL_WI_HEADER]


def write_csv(path, header, rows) -> str:
    lines = [",".join(header)]
    for row in rows:
        lines.append(",".join(f'"{v}"' if "," in v else v for v in row))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

def build_tract(
    geoid: int,
    nwi: float = 10.0,
    cbsa: int | None = 41860,
    cbsa_name: str = "San Francisco-Oakland-Hayward, CA",
    csa: int | None = 488,
    csa_name: str = "San Jose-San Francisco-Oakland, CA",
    with_cbsa: bool = True,
    with_csa: bool = True,
) -> GroupTract:
    text = str(geoid).zfill(11)
    tract = GroupTract(geoid10=geoid)
    tract.geoid_detail = GeoidDetail(
        geoid=geoid, statefp=int(text[:2]), countyfp=int(text[2:5]), tractce=int(text[5:11]), blkgrpce=1
    )
    if with_csa:
        tract.csa = CSA(geoid=geoid, csa=csa, csa_name=csa_name)
    if with_cbsa:
        tract.cbsa = CBSA(geoid=geoid, cbsa=cbsa, cbsa_name=cbsa_name)
    tract.ac = AC(geoid=geoid, ac_total=1.0, ac_water=0.0, ac_land=1.0, ac_unpr=1.0)
    tract.population = Population(geoid=geoid, total_pop=100, count_hu=40.0, hh=38.0, workers=50)
    tract.rank = Rank(geoid=geoid, nwi=nwi, d2a_ranked=10, d2b_ranked=10, d3b_ranked=10, d4a_ranked=10)
    tract.shape = Shape(geoid=geoid, shape_length=1.0, shape_area=1.0, geometry="")
    return tract


class FakeGeocoder:
    """Stands in for CensusGeocoderService."""

    def __init__(self, block_geoid: str | None = None, error: Exception | None = None):
        self.block_geoid = block_geoid
        self.error = error
        self.calls: list[str] = []

    async def resolve_address(self, address: str) -> str | None:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        return self.block_geoid


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture()
async def engine(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'nwi.db'}", echo=False)
    await init_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture()
async def session(session_factory):
    async with session_factory() as session:
        yield session
