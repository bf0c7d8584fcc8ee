"""
Indicator Engine Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from indicator_engine.core.config import settings, configure_logging
from indicator_engine.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    # Initialize SQLite database
    from indicator_engine.db.database import init_db, close_db, get_session_factory
    await init_db()
    session_factory = get_session_factory()

    # Indicator cache backend
    from indicator_engine.services.cache import (
        IndicatorCache,
        RedisSeriesStore,
        SQLSeriesStore,
        init_redis,
        close_redis,
    )
    if settings.cache_backend == "redis":
        redis_client = await init_redis()
        store = RedisSeriesStore(redis_client)
        if redis_client is None:
            logger.warning("Redis unavailable - indicator cache is in-memory only")
    else:
        store = SQLSeriesStore(session_factory)
    logger.info(f"Indicator cache: {store.name}")

    from indicator_engine.services.prices import SQLPriceSource
    from indicator_engine.services.charts import ChartSessionRegistry
    app.state.registry = ChartSessionRegistry(
        IndicatorCache(store), SQLPriceSource(session_factory), session_factory
    )

    if settings.seed_demo_data:
        from indicator_engine.services.prices.mock_data import seed_demo_data
        await seed_demo_data(settings.demo_symbols, settings.demo_lookback)

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_redis()
    await close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Chart Indicator Engine API

    ## Architecture
    - **Prices**: Close series per symbol and timeframe (SQLite)
    - **Indicators**: SMA, EMA and Bollinger Bands (pure Python/NumPy)
    - **Cache**: Computed series keyed by their full parameter tuple
    - **Charts**: Per-user chart sessions with stable indicator ids
    - **Presets**: Five saved indicator sets per user and symbol
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow both frontend ports
cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
# Add any additional origins from settings
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "cache_backend": settings.cache_backend,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Indicator Engine API",
        "docs": "/docs",
        "health": "/health",
    }
