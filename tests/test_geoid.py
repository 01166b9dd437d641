"""Geoid composition and truncation."""
from __future__ import annotations

import pytest

from nwi.core.exceptions import MalformedGeoidError
from nwi.services.geoid import (
    BLOCK_GROUP_WIDTH,
    compose_geoid,
    split_geoid,
    tract_geoid,
    truncate_geoid,
)


def test_compose_block_group_geoid_from_extract_fields():
    assert compose_geoid("06", "001", "400100", "1") == "060014001001"


def test_compose_pads_codes_stripped_of_leading_zeros():
    assert compose_geoid("6", "1", "400100", "1") == "060014001001"


def test_block_group_truncates_to_tract_key():
    assert truncate_geoid("060014001001") == 6001400100


def test_block_geoid_from_geocoder_truncates_to_tract_key():
    assert truncate_geoid("060014001001017") == 6001400100


@pytest.mark.parametrize(
    "geoid",
    ["60014001001", "10030001001", "40130001002", "90010001001"],
)
def test_integer_block_group_matches_first_ten_digits(geoid):
    # 11-digit block groups are state < 10 geoids that lost their leading zero
    assert truncate_geoid(geoid, source_width=BLOCK_GROUP_WIDTH) == int(geoid[:10])


def test_truncation_is_idempotent_at_tract_precision():
    once = truncate_geoid("360610001001")
    assert truncate_geoid(str(once).zfill(11)) == once


@pytest.mark.parametrize("geoid", ["", "06001", "0600140010", "06001A001001", "-60014001001"])
def test_truncate_rejects_malformed(geoid):
    with pytest.raises(MalformedGeoidError):
        truncate_geoid(geoid)


def test_compose_rejects_non_numeric_and_overwide_codes():
    with pytest.raises(MalformedGeoidError):
        compose_geoid("CA", "001", "400100")
    with pytest.raises(MalformedGeoidError):
        compose_geoid("06", "0001", "400100")


def test_tract_geoid_and_split_roundtrip_parts():
    assert tract_geoid("06", "001", "400100") == 6001400100
    parts = split_geoid("060014001001")
    assert (parts.statefp, parts.countyfp, parts.tractce, parts.blkgrpce) == (6, 1, 400100, 1)
    assert split_geoid("06001400100").blkgrpce is None
