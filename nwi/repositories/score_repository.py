# nwi/repositories/score_repository.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from nwi.models.group_tract import Rank, CBSA, CSA, Zipcode
from typing import List, Optional

class ScoreRepository:
    """Read side of the score API. Listings are always ordered by geoid."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_rank(self, geoid: int) -> Optional[Rank]:
        result = await self.db.execute(select(Rank).where(Rank.geoid == geoid).limit(1))
        return result.scalars().first()

    async def get_cbsa(self, geoid: int) -> Optional[CBSA]:
        result = await self.db.execute(select(CBSA).where(CBSA.geoid == geoid).limit(1))
        return result.scalars().first()

    async def get_csa(self, geoid: int) -> Optional[CSA]:
        result = await self.db.execute(select(CSA).where(CSA.geoid == geoid).limit(1))
        return result.scalars().first()

    async def list_ranks(self, limit: int, offset: int) -> List[Rank]:
        stmt = select(Rank).order_by(Rank.geoid).limit(limit).offset(offset)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def cbsa_codes_for_zip(self, zipcode: str) -> List[int]:
        """Every CBSA the zip maps to, in load order (repeats included)."""
        stmt = select(Zipcode.cbsa).where(Zipcode.zipcode == zipcode).order_by(Zipcode.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_ranks_for_cbsa(self, code: int, limit: int, offset: int) -> List[Rank]:
        stmt = (
            select(Rank)
            .join(CBSA, CBSA.geoid == Rank.geoid)
            .where(CBSA.cbsa == code)
            .order_by(Rank.geoid)
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
