"""Pytest configuration and fixtures for backend tests."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import (
    get_catalog_store,
    get_normalization_service,
    get_tiss_form_builder,
    get_tuss_matcher,
)
from app.main import app
from app.services.catalog import (
    CatalogEntry,
    CatalogStore,
    parse_diagnosis_catalog,
    parse_drug_catalog,
    parse_procedure_catalog,
)
from app.services.normalization import TermNormalizationService
from app.services.tiss_form import TissFormBuilder
from app.services.tuss_matcher import TussMatcherService

DIAGNOSIS_RECORDS = [
    {"code": "I10", "label": "Hipertensão essencial (primária)"},
    {"code": "E11", "label": "Diabetes mellitus tipo 2"},
    {"code": "J45", "label": "Asma"},
    {"code": "J18.9", "label": "Pneumonia não especificada"},
    {"code": "K29.7", "label": "Gastrite não especificada"},
]

DRUG_RECORDS = [
    {"name": "Amoxicilina", "dcb": "AMOXICILINA TRIIDRATADA", "aliases": ["Amoxil"]},
    {"name": "Dipirona", "dcb": "DIPIRONA MONOIDRATADA", "aliases": ["Novalgina", "Metamizol"]},
    {"name": "Losartana", "dcb": "LOSARTANA POTÁSSICA", "aliases": ["Cozaar"]},
    {"name": "Metformina", "dcb": "CLORIDRATO DE METFORMINA", "aliases": ["Glifage"]},
]

PROCEDURE_RECORDS = [
    {
        "code": "40304361",
        "description": "Hemograma",
        "table": "22",
        "category": "Laboratório",
        "synonyms": ["hmg"],
    },
    {
        "code": "40302040",
        "description": "Glicose - pesquisa e/ou dosagem",
        "table": "22",
        "category": "Laboratório",
        "synonyms": ["glicemia", "glicemia de jejum"],
    },
    {
        "code": "40101010",
        "description": "ECG convencional de até 12 derivações",
        "table": "22",
        "category": "Métodos diagnósticos",
        "synonyms": ["eletrocardiograma"],
    },
    {
        "code": "41101014",
        "description": "RM - Crânio (encéfalo)",
        "table": "22",
        "category": "Ressonância magnética",
        "synonyms": ["ressonância magnética de crânio"],
    },
    {
        "code": "40808041",
        "description": "Mamografia convencional bilateral",
        "synonyms": ["mamografia"],
    },
]


@pytest.fixture
def diagnosis_entries() -> list[CatalogEntry]:
    return parse_diagnosis_catalog(DIAGNOSIS_RECORDS)


@pytest.fixture
def drug_entries() -> list[CatalogEntry]:
    return parse_drug_catalog(DRUG_RECORDS)


@pytest.fixture
def procedure_entries() -> list[CatalogEntry]:
    return parse_procedure_catalog(PROCEDURE_RECORDS)


@pytest.fixture
def catalog_store(
    diagnosis_entries: list[CatalogEntry],
    drug_entries: list[CatalogEntry],
    procedure_entries: list[CatalogEntry],
) -> CatalogStore:
    """Create a small in-memory catalog store."""
    return CatalogStore(diagnosis_entries, drug_entries, procedure_entries)


@pytest.fixture
def normalization_service(catalog_store: CatalogStore) -> TermNormalizationService:
    return TermNormalizationService(catalog_store)


@pytest.fixture
def tuss_matcher(catalog_store: CatalogStore) -> TussMatcherService:
    return TussMatcherService(catalog_store)


@pytest.fixture
def tiss_form_builder(
    tuss_matcher: TussMatcherService,
    normalization_service: TermNormalizationService,
) -> TissFormBuilder:
    return TissFormBuilder(tuss_matcher, normalization_service)


@pytest.fixture
async def client(
    catalog_store: CatalogStore,
    normalization_service: TermNormalizationService,
    tuss_matcher: TussMatcherService,
    tiss_form_builder: TissFormBuilder,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client backed by the in-memory catalogs.

    The application lifespan does not run under ASGITransport, so the
    services are supplied through dependency overrides.
    """
    app.dependency_overrides[get_catalog_store] = lambda: catalog_store
    app.dependency_overrides[get_normalization_service] = lambda: normalization_service
    app.dependency_overrides[get_tuss_matcher] = lambda: tuss_matcher
    app.dependency_overrides[get_tiss_form_builder] = lambda: tiss_form_builder

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()
