"""FastAPI application for Clinical Term Normalizer."""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import catalogs_router, normalization_router
from app.core.config import Settings, settings
from app.services.catalog import CatalogStore
from app.services.normalization import TermNormalizationService
from app.services.tiss_form import TissFormBuilder
from app.services.tuss_matcher import TussMatcherService

logging.getLogger("app").setLevel(settings.log_level)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def init_services(app: FastAPI, config: Settings) -> dict[str, Any]:
    """Load the catalogs and build the services kept on app.state.

    Raises:
        CatalogLoadError: If a catalog is missing or malformed. The
            application must not serve without its catalogs.
    """
    store = CatalogStore.from_settings(config)
    normalization_service = TermNormalizationService(store)
    tuss_matcher = TussMatcherService(
        store,
        acceptance_threshold=config.tuss_acceptance_threshold,
        default_table=config.tuss_default_table,
    )

    app.state.catalog_store = store
    app.state.normalization_service = normalization_service
    app.state.tuss_matcher = tuss_matcher
    app.state.tiss_form_builder = TissFormBuilder(
        tuss_matcher,
        normalization_service,
        source_text_limit=config.tiss_source_text_limit,
    )
    return store.get_stats()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Startup loads and indexes every reference catalog before accepting
    requests. A catalog load failure aborts startup.
    """
    startup_start = time.perf_counter()

    catalog_stats = init_services(app, settings)
    catalogs = catalog_stats["catalogs"]
    logger.info(
        f"Catalogs loaded: {catalogs['diagnosis']['entry_count']} CID-10, "
        f"{catalogs['drug']['entry_count']} DCB, {catalogs['procedure']['entry_count']} TUSS"
    )

    total_startup_ms = (time.perf_counter() - startup_start) * 1000
    logger.info(f"Server ready - total startup time: {total_startup_ms:.0f}ms")

    # Store startup stats for readiness endpoint
    app.state.startup_time_ms = total_startup_ms

    yield


app = FastAPI(
    title="Clinical Term Normalizer",
    description="API for normalizing clinical mentions to CID-10, DCB and TUSS codes and drafting TISS forms.",
    version=VERSION,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(catalogs_router)
app.include_router(normalization_router)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, Any]:
    """Health check endpoint (liveness probe)."""
    return {
        "status": "healthy",
        "service": "clinical-term-normalizer",
        "version": VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, Any]:
    """Readiness check endpoint.

    Reports ready once the catalogs are loaded and indexed.
    """
    store: CatalogStore | None = getattr(app.state, "catalog_store", None)
    return {
        "status": "ready" if store is not None else "starting",
        "service": "clinical-term-normalizer",
        "version": VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
        "startup_time_ms": getattr(app.state, "startup_time_ms", 0),
        "catalogs": store.get_stats()["catalogs"] if store is not None else {},
    }


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "service": "Clinical Term Normalizer API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "ready": "/ready",
    }
