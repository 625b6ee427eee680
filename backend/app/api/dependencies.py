"""FastAPI dependencies exposing the catalog-backed services.

The catalog store and services are built once in the application lifespan
and kept on ``app.state``. Tests replace them through
``app.dependency_overrides``.
"""

from fastapi import Request

from app.services.catalog import CatalogStore
from app.services.normalization import TermNormalizationService
from app.services.tiss_form import TissFormBuilder
from app.services.tuss_matcher import TussMatcherService


def get_catalog_store(request: Request) -> CatalogStore:
    """Get the catalog store loaded at startup."""
    return request.app.state.catalog_store


def get_normalization_service(request: Request) -> TermNormalizationService:
    return request.app.state.normalization_service


def get_tuss_matcher(request: Request) -> TussMatcherService:
    return request.app.state.tuss_matcher


def get_tiss_form_builder(request: Request) -> TissFormBuilder:
    return request.app.state.tiss_form_builder
