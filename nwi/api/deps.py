# nwi/api/deps.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from nwi.core.database import get_db
from nwi.repositories.score_repository import ScoreRepository
from nwi.services.census.geocoder import CensusGeocoderService
from nwi.services.scores import ScoreResolver

def get_geocoder() -> CensusGeocoderService:
    return CensusGeocoderService()

async def get_score_resolver(
    db: AsyncSession = Depends(get_db),
    geocoder: CensusGeocoderService = Depends(get_geocoder),
) -> ScoreResolver:
    """One resolver per request, bound to the request's session."""
    return ScoreResolver(ScoreRepository(db), geocoder)
