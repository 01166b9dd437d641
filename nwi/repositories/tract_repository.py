# nwi/repositories/tract_repository.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, insert
from sqlalchemy.exc import SQLAlchemyError
from nwi.core.exceptions import PersistenceError
from nwi.models.group_tract import GroupTract, CBSA, Zipcode
from typing import List
import logging

logger = logging.getLogger(__name__)

class TractRepository:
    """Write side used by the ingestion pipeline."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert_tracts(self, tracts: List[GroupTract]):
        """Inserts one batch of tracts together with their sub-entities."""
        if not tracts: return
        self.db.add_all(tracts)
        await self._commit(f"{len(tracts)} tracts")

    async def insert_zipcodes(self, zipcodes: List[Zipcode]):
        if not zipcodes: return
        rows = [{"zipcode": z.zipcode, "cbsa": z.cbsa} for z in zipcodes]
        try:
            await self.db.execute(insert(Zipcode), rows)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"could not insert {len(rows)} zip codes: {e}") from e
        await self._commit(f"{len(rows)} zip codes")

    async def update_cbsas(self, code: int, **values) -> int:
        """Read-then-update of every CBSA row with this code. Returns rows touched."""
        try:
            result = await self.db.execute(select(CBSA).where(CBSA.cbsa == code))
            cbsas = result.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"could not read CBSA {code}: {e}") from e

        if not cbsas:
            logger.debug(f"No CBSA rows for code {code}")
            return 0

        for cbsa in cbsas:
            for column, value in values.items():
                setattr(cbsa, column, value)
        await self._commit(f"CBSA {code}")
        return len(cbsas)

    async def _commit(self, what: str):
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error saving {what}: {e}")
            await self.db.rollback()
            raise PersistenceError(f"could not save {what}: {e}") from e
