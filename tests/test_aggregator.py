"""TractAggregator: one GroupTract per tract geoid, last row wins."""
from __future__ import annotations

import pytest

from conftest import NATL_WI_HEADER, natl_wi_row
from nwi.core.exceptions import MalformedRecordError
from nwi.services.ingest.aggregator import TractAggregator
from nwi.services.ingest.report import IngestReport


def _aggregate(rows, header=NATL_WI_HEADER):
    report = IngestReport(extract="Natl_WI.csv")
    return TractAggregator().aggregate(header, rows, report), report


def test_row_becomes_tract_with_every_sub_entity():
    tracts, report = _aggregate([natl_wi_row()])

    assert len(tracts) == 1
    tract = tracts[0]
    assert tract.geoid10 == 6001400100
    assert tract.geoid20 == 6001400100
    assert tract.geoid_detail.statefp == 6
    assert tract.geoid_detail.countyfp == 1
    assert tract.geoid_detail.tractce == 400100
    assert tract.geoid_detail.blkgrpce == 1
    assert tract.csa.csa == 488
    assert tract.cbsa.cbsa == 41860
    assert tract.cbsa.cbsa_name.startswith("San Francisco-Oakland")
    assert tract.ac.ac_land == pytest.approx(1520.5)
    assert tract.population.total_pop == 3184
    assert tract.population.workers == 1650
    assert tract.rank.nwi == pytest.approx(14.2)
    assert tract.rank.d3b_ranked == pytest.approx(16)
    assert tract.rank.bike_share_rank == 1
    assert tract.shape.geometry == ""
    for sub in (tract.geoid_detail, tract.csa, tract.cbsa, tract.ac, tract.population, tract.rank, tract.shape):
        assert sub.geoid == tract.geoid10
    assert report.rows_read == 1 and report.entities == 1 and report.skipped == 0


def test_duplicate_geoid_last_row_wins_in_first_seen_position():
    rows = [
        natl_wi_row(TRACTCE="400100", BLKGRPCE="1", NatWalkInd="5.0"),
        natl_wi_row(TRACTCE="400200", BLKGRPCE="1", NatWalkInd="9.0"),
        natl_wi_row(TRACTCE="400100", BLKGRPCE="2", NatWalkInd="14.2"),
    ]
    tracts, report = _aggregate(rows)

    assert [t.geoid10 for t in tracts] == [6001400100, 6001400200]
    assert tracts[0].rank.nwi == pytest.approx(14.2)
    assert tracts[0].geoid_detail.blkgrpce == 2
    assert report.duplicates == 1
    assert report.entities == 2


def test_output_is_not_sorted():
    rows = [natl_wi_row(TRACTCE="900100"), natl_wi_row(TRACTCE="100100")]
    tracts, _ = _aggregate(rows)
    assert [t.geoid10 for t in tracts] == [6001900100, 6001100100]


def test_bad_numeric_row_is_skipped_and_reported():
    rows = [natl_wi_row(NatWalkInd="n/a"), natl_wi_row(TRACTCE="400200")]
    tracts, report = _aggregate(rows)

    assert [t.geoid10 for t in tracts] == [6001400200]
    assert report.skipped == 1
    assert "row 2" in report.errors[0]


def test_bad_geoid_row_is_skipped():
    tracts, report = _aggregate([natl_wi_row(STATEFP="XX")])
    assert tracts == []
    assert report.skipped == 1


def test_blank_block_group_is_kept_as_null():
    tracts, report = _aggregate([natl_wi_row(BLKGRPCE="")])
    assert tracts[0].geoid_detail.blkgrpce is None
    assert tracts[0].geoid_detail.tractce == 400100
    assert report.skipped == 0


def test_multi_digit_block_group_is_skipped():
    tracts, report = _aggregate([natl_wi_row(BLKGRPCE="12")])
    assert tracts == []
    assert "block group" in report.errors[0]


def test_blank_area_codes_mean_outside_any_metro():
    tracts, _ = _aggregate([natl_wi_row(CSA="", CSA_Name="", CBSA="", CBSA_Name="")])
    assert tracts[0].csa.csa is None
    assert tracts[0].cbsa.cbsa is None
    assert tracts[0].cbsa.cbsa_name == ""


def test_missing_required_column_is_malformed():
    header = [c for c in NATL_WI_HEADER if c != "NatWalkInd"]
    with pytest.raises(MalformedRecordError):
        _aggregate([], header=header)


def test_optional_geometry_and_bike_columns():
    header = NATL_WI_HEADER + ["Geometry", "BikeScore", "BikeShareRank"]
    row = natl_wi_row() + ["POLYGON ((0 0, 1 0, 1 1, 0 0))", "3.5", "4"]
    tracts, _ = _aggregate([row], header=header)

    assert tracts[0].shape.geometry == "POLYGON ((0 0, 1 0, 1 1, 0 0))"
    assert tracts[0].rank.bike_score == pytest.approx(3.5)
    assert tracts[0].rank.bike_share_rank == 4


def test_invalid_geometry_is_skipped():
    header = NATL_WI_HEADER + ["Geometry"]
    tracts, report = _aggregate([natl_wi_row() + ["POLYGON ((0 0, 1"]], header=header)
    assert tracts == []
    assert report.skipped == 1


def test_geoid10_cannot_be_reassigned():
    tracts, _ = _aggregate([natl_wi_row()])
    with pytest.raises(ValueError):
        tracts[0].geoid10 = 6001400200
