# nwi/services/scores.py
import logging
from typing import List, Optional, Tuple

from nwi.core.exceptions import BadFormatError, MalformedGeoidError, NotFoundError, UpstreamResolutionError
from nwi.models.group_tract import Rank
from nwi.repositories.score_repository import ScoreRepository
from nwi.schemas.score import AddressScore, ScoreListing
from nwi.services.census.geocoder import CensusGeocoderService
from nwi.services.geoid import truncate_geoid

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "xml")
DEFAULT_LIMIT = 50
DEFAULT_OFFSET = 0


def check_format(fmt: Optional[str]) -> str:
    fmt = (fmt or "").strip().lower()
    if fmt not in SUPPORTED_FORMATS:
        raise BadFormatError(fmt)
    return fmt


def parse_page(limit: Optional[str], offset: Optional[str]) -> Tuple[int, int]:
    """Missing or invalid paging values fall back to the defaults, never an error."""
    try:
        page_limit = int(limit)
    except (TypeError, ValueError):
        page_limit = DEFAULT_LIMIT
    if page_limit < 1:
        page_limit = DEFAULT_LIMIT

    try:
        page_offset = int(offset)
    except (TypeError, ValueError):
        page_offset = DEFAULT_OFFSET
    if page_offset < 0:
        page_offset = DEFAULT_OFFSET

    return page_limit, page_offset


class ScoreResolver:
    """Joins Rank, CBSA and CSA rows into score results for the API."""

    def __init__(self, repo: ScoreRepository, geocoder: CensusGeocoderService):
        self.repo = repo
        self.geocoder = geocoder

    async def get_score(self, address: str, fmt: str = "json") -> AddressScore:
        fmt = check_format(fmt)

        block_geoid = await self.geocoder.resolve_address(address)
        if not block_geoid:
            raise NotFoundError(f"no census block matches {address!r}")

        try:
            geoid = truncate_geoid(block_geoid)
        except MalformedGeoidError as e:
            raise UpstreamResolutionError(f"geocoder returned a bad geoid: {e}") from e

        rank = await self.repo.get_rank(geoid)
        if rank is None:
            raise NotFoundError(f"no score for tract {geoid}")
        cbsa = await self.repo.get_cbsa(geoid)
        if cbsa is None:
            raise NotFoundError(f"no CBSA for tract {geoid}")

        return AddressScore(
            geoid=geoid,
            nwi=rank.nwi,
            searched_address=address,
            regional_transit_usage_percentage=cbsa.public_transit_percentage,
            regional_transit_usage=cbsa.public_transit_usage,
            regional_bike_ridership=cbsa.bike_ridership,
            format=fmt,
        )

    async def list_scores(
        self,
        zipcode: Optional[str] = None,
        limit: Optional[str] = None,
        offset: Optional[str] = None,
        fmt: str = "json",
    ) -> List[ScoreListing]:
        fmt = check_format(fmt)
        page_limit, page_offset = parse_page(limit, offset)

        zipcode = (zipcode or "").strip()
        if zipcode:
            if zipcode.isdigit():
                zipcode = zipcode.zfill(5)
            ranks: List[Rank] = []
            # A zip can straddle metro areas: one page per CBSA, concatenated
            for code in await self.repo.cbsa_codes_for_zip(zipcode):
                ranks.extend(await self.repo.list_ranks_for_cbsa(code, page_limit, page_offset))
        else:
            ranks = await self.repo.list_ranks(page_limit, page_offset)

        results = []
        for i, rank in enumerate(ranks):
            results.append(await self._listing(rank, i + page_offset, fmt))
        return results

    async def _listing(self, rank: Rank, position: int, fmt: str) -> ScoreListing:
        # Names are cosmetic: a missing CSA/CBSA leaves them empty
        csa = await self.repo.get_csa(rank.geoid)
        cbsa = await self.repo.get_cbsa(rank.geoid)
        return ScoreListing(
            id=position,
            geoid=rank.geoid,
            csa_name=(csa.csa_name or "") if csa else "",
            cbsa_name=(cbsa.cbsa_name or "") if cbsa else "",
            nwi=rank.nwi,
            regional_transit_usage_percentage=cbsa.public_transit_percentage if cbsa else None,
            regional_transit_usage=cbsa.public_transit_usage if cbsa else None,
            regional_bike_ridership=cbsa.bike_ridership if cbsa else None,
            format=fmt,
        )
