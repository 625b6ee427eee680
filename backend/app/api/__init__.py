"""API routers for Clinical Term Normalizer."""

from app.api.catalogs import router as catalogs_router
from app.api.normalization import router as normalization_router

__all__ = [
    "catalogs_router",
    "normalization_router",
]
