# eats/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eats.api.v1.router import api_router
from eats.core.config import settings, setup_logging
from eats.core.database import close_db, init_db
from eats.core.redis_ import close_redis
from eats.services.events import get_pubsub, reset_pubsub

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    setup_logging()
    await init_db()
    get_pubsub()
    logger.info(f"{settings.PROJECT_NAME} started")

    yield

    await get_pubsub().close()
    reset_pubsub()
    await close_redis()
    await close_db()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Eats API",
        "docs": f"{settings.API_V1_PREFIX}/docs"
    }
