"""
FastAPI application.

Wires process logging, the PostgreSQL pool lifecycle, the versioned REST
router and the GraphQL endpoint into one app.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import psycopg
from fastapi import FastAPI, HTTPException, Request, status
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.api.graphql import graphql_router
from src.api.handlers import install_exception_handlers
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

tags_metadata = [
    {
        "name": "v1",
        "description": "Local account registration and the authenticated user",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the pool and migrate before serving; close the pool on shutdown."""
    settings = get_settings()

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    logger.info(
        "Connection pool opened (min=%d, max=%d)",
        settings.pool_min_size,
        settings.pool_max_size,
    )
    run_migrations(pool)
    app.state.pool = pool

    try:
        yield
    finally:
        pool.close()
        logger.info("Connection pool closed")


app = FastAPI(
    title="enlist",
    description="User registration and authentication API over REST and GraphQL",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

install_exception_handlers(app)

app.include_router(v1_router, prefix="/v1")
app.include_router(graphql_router, prefix="/graphql")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """Report healthy once the database answers ``SELECT 1``; 503 otherwise."""
    pool: ConnectionPool = request.app.state.pool
    try:
        with pool.connection(timeout=2.0) as conn:
            conn.execute("SELECT 1")
    except (psycopg.Error, PoolTimeout) as e:
        logger.warning(f"Health check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        ) from None

    return {"status": "healthy"}
