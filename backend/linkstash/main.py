# @TASK S3-T3.2 - FastAPI 앱 엔트리포인트

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linkstash import models  # noqa: F401 - registers tables on Base.metadata
from linkstash.api.search import router as search_router
from linkstash.config import get_settings
from linkstash.database import Base, engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Ensure the notes schema exists, then release the pool on shutdown.

    Alembic owns schema changes; ``create_all`` only fills in a fresh
    development database.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Linkstash API started")

    yield

    await engine.dispose()
    logger.info("Linkstash API stopped")


app = FastAPI(
    title="Linkstash",
    description="Notes and links saved from Telegram, with fuzzy relevance-ranked search",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(search_router, prefix="/api")


@app.get("/api/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Liveness probe; does not touch the database."""
    return {"status": "ok"}
