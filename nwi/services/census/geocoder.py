# nwi/services/census/geocoder.py
import asyncio
import httpx
import logging
import time
from typing import Any, Dict, Optional

from nwi.core.config import settings
from nwi.core.exceptions import UpstreamResolutionError

logger = logging.getLogger(__name__)

class CensusGeocoderService:
    """
    Resolves a one-line address to the GEOID of its census block using the
    Census Bureau geocoder.
    """

    HEADERS = {
        "User-Agent": "nwi-api/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        benchmark: str = None,
        vintage: str = None,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.base_url = base_url or settings.GEOCODER_URL
        self.timeout = timeout if timeout is not None else settings.GEOCODER_TIMEOUT
        self.benchmark = benchmark or settings.GEOCODER_BENCHMARK
        self.vintage = vintage or settings.GEOCODER_VINTAGE
        self.transport = transport  # injected in tests

    async def resolve_address(self, address: str) -> Optional[str]:
        """
        Returns the block GEOID of the first match, or None when the geocoder
        found no match. Anything else that goes wrong is UpstreamResolutionError.
        """
        params = {
            "address": address,
            "benchmark": self.benchmark,
            "vintage": self.vintage,
            "format": "json",
        }
        start = time.perf_counter()
        async with httpx.AsyncClient(timeout=self.timeout, headers=self.HEADERS, transport=self.transport) as client:
            try:
                # Total deadline: httpx timeouts only bound each connect/read step
                response = await asyncio.wait_for(client.get(self.base_url, params=params), self.timeout)
            except (httpx.TimeoutException, asyncio.TimeoutError) as e:
                raise UpstreamResolutionError(f"geocoder timed out after {self.timeout}s") from e
            except httpx.HTTPError as e:
                raise UpstreamResolutionError(f"geocoder unreachable: {e}") from e

        elapsed = time.perf_counter() - start
        logger.info(f"📍 Geocoded {address!r} in {elapsed:.2f}s (HTTP {response.status_code})")

        if response.status_code != 200:
            raise UpstreamResolutionError(f"geocoder answered HTTP {response.status_code}: {response.text[:200]}")

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamResolutionError("geocoder returned invalid JSON") from e

        return self._first_block_geoid(payload)

    @staticmethod
    def _first_block_geoid(payload: Dict[str, Any]) -> Optional[str]:
        try:
            matches = payload["result"]["addressMatches"]
        except (KeyError, TypeError) as e:
            raise UpstreamResolutionError("geocoder response has no addressMatches") from e

        if not matches:
            return None

        try:
            geographies = matches[0].get("geographies") or {}
            # The key is "Census Blocks" or "2020 Census Blocks" depending on the vintage
            blocks = next((v for k, v in geographies.items() if "Census Blocks" in k), None)
            geoid = blocks[0].get("GEOID") if blocks else None
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise UpstreamResolutionError("geocoder match has an unexpected shape") from e
        if not geoid:
            raise UpstreamResolutionError("geocoder match carries no census block")
        return str(geoid)
