"""Reference Catalog API Endpoints.

Autocomplete search over the CID-10, DCB and TUSS catalogs, TUSS code
lookup and catalog statistics.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.dependencies import get_catalog_store, get_normalization_service, get_tuss_matcher
from app.schemas.normalization import CatalogEntryResponse
from app.services.catalog import CatalogStore
from app.services.normalization import TermNormalizationService
from app.services.tuss_matcher import TussMatcherService

router = APIRouter(prefix="/catalogs", tags=["Catalogs"])


@router.get("/cid10/search", response_model=list[CatalogEntryResponse])
async def search_cid10(
    q: str = Query(..., description="Diagnosis text or code"),
    limit: int = Query(10, ge=1, le=50),
    service: TermNormalizationService = Depends(get_normalization_service),
) -> list[CatalogEntryResponse]:
    """Search CID-10 diagnoses."""
    return [CatalogEntryResponse.model_validate(e) for e in service.search_diagnoses(q, limit=limit)]


@router.get("/dcb/search", response_model=list[CatalogEntryResponse])
async def search_dcb(
    q: str = Query(..., description="Drug name or alias"),
    limit: int = Query(10, ge=1, le=50),
    service: TermNormalizationService = Depends(get_normalization_service),
) -> list[CatalogEntryResponse]:
    """Search DCB drugs."""
    return [CatalogEntryResponse.model_validate(e) for e in service.search_drugs(q, limit=limit)]


@router.get("/tuss/search", response_model=list[CatalogEntryResponse])
async def search_tuss(
    q: str = Query(..., description="Procedure description or synonym"),
    limit: int = Query(10, ge=1, le=50),
    matcher: TussMatcherService = Depends(get_tuss_matcher),
) -> list[CatalogEntryResponse]:
    """Search TUSS procedures."""
    return [CatalogEntryResponse.model_validate(e) for e in matcher.search_tuss_codes(q, limit=limit)]


@router.get("/tuss/{code}", response_model=CatalogEntryResponse)
async def get_tuss_code(
    code: str,
    matcher: TussMatcherService = Depends(get_tuss_matcher),
) -> CatalogEntryResponse:
    """Get a TUSS procedure by code."""
    entry = matcher.get_tuss_code(code)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"TUSS code not found: {code}")
    return CatalogEntryResponse.model_validate(entry)


@router.get("/stats")
async def catalog_stats(store: CatalogStore = Depends(get_catalog_store)) -> dict:
    """Get catalog sizes and index settings."""
    return store.get_stats()
