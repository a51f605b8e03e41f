"""FastAPI application entrypoint — lifespan, routers, middleware."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis
from sqlalchemy import text

from agrismart.config import get_settings
from agrismart.database import engine
from agrismart.middleware.logging import RequestLoggingMiddleware, configure_structured_logging
from agrismart.routes import advisory, crops, jobs, market, weather
from agrismart.services.market_service import InMemoryMarketPriceSource

logger = logging.getLogger("agrismart")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup / shutdown lifecycle.

    Startup:
      1. Initialize structured logging
      2. Verify the database is reachable (optional)
      3. Connect to Redis
      4. Open the shared weather HTTP client and the mandi quote board

    Shutdown:
      1. Close the HTTP client and Redis connection pool
      2. Dispose SQLAlchemy engine
    """
    configure_structured_logging()
    settings = get_settings()
    logger.info(
        "AgriSmart starting",
        extra={
            "log_level": settings.log_level,
            "default_soil_type": settings.default_soil_type.value,
        },
    )

    redis: Redis | None = None
    http_client: httpx.AsyncClient | None = None
    try:
        if settings.check_database_on_startup:
            async with engine.connect() as connection:
                await connection.execute(text("SELECT 1"))

        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        await redis.ping()
        app.state.redis = redis

        http_client = httpx.AsyncClient(timeout=settings.weather_timeout_seconds)
        app.state.http_client = http_client
        app.state.market_source = InMemoryMarketPriceSource()
    except Exception as exc:
        logger.exception("startup failure", extra={"error": str(exc)})
        raise

    yield

    logger.info("AgriSmart shutting down")
    if http_client is not None:
        await http_client.aclose()
    if redis is not None:
        await redis.aclose()
    await engine.dispose()


app = FastAPI(
    title="AgriSmart Advisory API",
    description=(
        "Agronomic decision engine for Nashik growers: crop phenology, "
        "irrigation water balance, weather-driven disease risk, harvest "
        "timing and mandi-aware advisories."
    ),
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS ────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


# ── Health check ────────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Basic health check — verifies the API process is alive."""
    return {
        "status": "ok",
        "service": "agrismart",
        "version": "0.1.0",
    }


# ── Router registration ────────────────────────────────────────────────────
app.include_router(crops.router, prefix="/api/v1")
app.include_router(advisory.router, prefix="/api/v1")
app.include_router(weather.router, prefix="/api/v1")
app.include_router(market.router, prefix="/api/v1")
app.include_router(jobs.router, prefix="/api/v1")
