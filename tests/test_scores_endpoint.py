"""GET /scores through the ASGI app, with the database and geocoder overridden."""
from __future__ import annotations

import xml.etree.ElementTree as ET

import httpx
import pytest

from conftest import FakeGeocoder, build_tract
from nwi.api.deps import get_geocoder
from nwi.core.database import get_db
from nwi.core.exceptions import UpstreamResolutionError
from nwi.main import app
from nwi.models.group_tract import Zipcode
from nwi.repositories.tract_repository import TractRepository


@pytest.fixture()
async def seeded(session_factory):
    async with session_factory() as session:
        repo = TractRepository(session)
        await repo.insert_tracts([build_tract(6001400100, nwi=14.2), build_tract(6001400200, nwi=9.5)])
        await repo.insert_zipcodes([Zipcode(zipcode="94601", cbsa=41860)])
    return session_factory


@pytest.fixture()
def geocoder():
    return FakeGeocoder("060014001001017")


@pytest.fixture()
async def client(seeded, geocoder):
    async def _get_db():
        async with seeded() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def test_health_check(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_address_score_json(client):
    resp = await client.get("/scores", params={"address": "1 Frank H Ogawa Plaza, Oakland", "format": "json"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["geoid"] == 6001400100
    assert body["nwi"] == pytest.approx(14.2)
    assert body["searched_address"] == "1 Frank H Ogawa Plaza, Oakland"
    assert body["format"] == "json"


async def test_address_score_xml(client):
    resp = await client.get("/scores", params={"address": "1 Frank H Ogawa Plaza", "format": "xml"})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/xml")
    root = ET.fromstring(resp.content)
    assert root.tag == "score"
    assert root.findtext("geoid") == "6001400100"
    assert float(root.findtext("nwi")) == pytest.approx(14.2)


async def test_unknown_format_is_400(client):
    resp = await client.get("/scores", params={"address": "1 Main St", "format": "yaml"})
    assert resp.status_code == 400


async def test_unmatched_address_is_404(client, geocoder):
    geocoder.block_geoid = None
    resp = await client.get("/scores", params={"address": "nowhere"})
    assert resp.status_code == 404


async def test_geocoder_failure_is_502(client, geocoder):
    geocoder.error = UpstreamResolutionError("geocoder timed out after 10.0s")
    resp = await client.get("/scores", params={"address": "1 Main St"})
    assert resp.status_code == 502


async def test_listing_with_invalid_paging_uses_defaults(client):
    resp = await client.get("/scores", params={"limit": "lots", "offset": "-1"})

    assert resp.status_code == 200
    assert [s["geoid"] for s in resp.json()] == [6001400100, 6001400200]


async def test_zip_listing_xml(client):
    resp = await client.get("/scores", params={"zipcode": "94601", "format": "xml"})

    assert resp.status_code == 200
    root = ET.fromstring(resp.content)
    assert root.tag == "scores"
    assert [s.findtext("geoid") for s in root.findall("score")] == ["6001400100", "6001400200"]
    assert root.find("score").findtext("cbsa_name").startswith("San Francisco-Oakland")
