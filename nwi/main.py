# nwi/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI

from nwi.core.config import settings
from nwi.core.logging import setup_logging
from nwi.routers import scores

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema is managed by Alembic / the ingestion CLI
    setup_logging(settings.LOG_LEVEL)
    yield

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.include_router(scores.router, tags=["scores"])

@app.get("/")
async def health_check():
    return {"status": "ok", "message": "NWI API is running"}
