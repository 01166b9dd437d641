# nwi/services/geoid.py
"""
Census GEOID helpers.

A GEOID is the concatenation of fixed-width codes:
    state(2) + county(3) + tract(6) [+ block group(1) [+ block(3)]]

Tract precision is 11 digits. Geoids are stored as integers, so tracts in
states below 10 lose their leading zero (06001400100 -> 6001400100).
"""
from typing import NamedTuple, Optional

from nwi.core.exceptions import MalformedGeoidError

STATE_WIDTH = 2
COUNTY_WIDTH = 3
TRACT_CODE_WIDTH = 6
BLKGRP_WIDTH = 1

TRACT_WIDTH = STATE_WIDTH + COUNTY_WIDTH + TRACT_CODE_WIDTH  # 11
BLOCK_GROUP_WIDTH = TRACT_WIDTH + BLKGRP_WIDTH               # 12


class GeoidParts(NamedTuple):
    statefp: int
    countyfp: int
    tractce: int
    blkgrpce: Optional[int]


def _pad(value: str, width: int, name: str) -> str:
    value = (value or "").strip()
    if not value.isdigit() or len(value) > width:
        raise MalformedGeoidError(f"invalid {name} code: {value!r}")
    return value.zfill(width)


def compose_geoid(state: str, county: str, tract: str, blkgrp: Optional[str] = None) -> str:
    """Builds the zero-padded geoid string from its component codes."""
    geoid = (
        _pad(state, STATE_WIDTH, "state")
        + _pad(county, COUNTY_WIDTH, "county")
        + _pad(tract, TRACT_CODE_WIDTH, "tract")
    )
    if blkgrp is not None and blkgrp.strip():
        geoid += _pad(blkgrp, BLKGRP_WIDTH, "block group")
    return geoid


def truncate_geoid(geoid: str, source_width: Optional[int] = None) -> int:
    """
    Truncates a block-group or block geoid to tract precision.

    `source_width` restores a leading zero lost when the geoid went through an
    integer column (e.g. an 11-digit block group geoid from state 06).
    """
    geoid = (geoid or "").strip()
    if not geoid.isdigit():
        raise MalformedGeoidError(f"geoid is not an unsigned integer: {geoid!r}")
    if source_width:
        geoid = geoid.zfill(source_width)
    if len(geoid) < TRACT_WIDTH:
        raise MalformedGeoidError(f"geoid shorter than tract precision: {geoid!r}")
    return int(geoid[:TRACT_WIDTH])


def tract_geoid(state: str, county: str, tract: str) -> int:
    return int(compose_geoid(state, county, tract))


def split_geoid(geoid: str) -> GeoidParts:
    geoid = (geoid or "").strip()
    if not geoid.isdigit() or len(geoid) < TRACT_WIDTH:
        raise MalformedGeoidError(f"cannot split geoid: {geoid!r}")
    county_end = STATE_WIDTH + COUNTY_WIDTH
    blkgrp = geoid[TRACT_WIDTH:BLOCK_GROUP_WIDTH]
    return GeoidParts(
        statefp=int(geoid[:STATE_WIDTH]),
        countyfp=int(geoid[STATE_WIDTH:county_end]),
        tractce=int(geoid[county_end:TRACT_WIDTH]),
        blkgrpce=int(blkgrp) if blkgrp else None,
    )
