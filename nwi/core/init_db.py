# nwi/core/init_db.py
import logging
from sqlalchemy.ext.asyncio import AsyncEngine
from nwi.core.database import engine as default_engine, Base
from nwi.models import group_tract  # noqa: F401  (registers the tables on Base)

logger = logging.getLogger(__name__)

async def init_tables(engine: AsyncEngine = None, reset: bool = False):
    """
    Creates the tables. With reset=True every table is dropped first
    (truncate-and-reload before a full re-ingestion).
    """
    engine = engine or default_engine
    async with engine.begin() as conn:
        if reset:
            logger.warning("🧹 Dropping every NWI table before reload...")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✅ Tables checked/created.")
