"""Tests for the reference catalog API endpoints."""

import pytest
from httpx import AsyncClient


class TestCatalogSearch:
    """Tests for catalog autocomplete endpoints."""

    @pytest.mark.asyncio
    async def test_search_cid10(self, client: AsyncClient) -> None:
        response = await client.get("/catalogs/cid10/search", params={"q": "asma"})
        assert response.status_code == 200
        data = response.json()
        assert data[0]["code"] == "J45"
        assert data[0]["label"] == "Asma"

    @pytest.mark.asyncio
    async def test_search_dcb_by_alias(self, client: AsyncClient) -> None:
        response = await client.get("/catalogs/dcb/search", params={"q": "Glifage"})
        data = response.json()
        assert data[0]["code"] == "Metformina"
        assert "Glifage" in data[0]["aliases"]

    @pytest.mark.asyncio
    async def test_search_tuss(self, client: AsyncClient) -> None:
        response = await client.get("/catalogs/tuss/search", params={"q": "glicemia"})
        data = response.json()
        assert data[0]["code"] == "40302040"
        assert data[0]["table"] == "22"
        assert data[0]["category"] == "Laboratório"

    @pytest.mark.asyncio
    async def test_short_query_returns_empty(self, client: AsyncClient) -> None:
        response = await client.get("/catalogs/cid10/search", params={"q": "as"})
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_limit(self, client: AsyncClient) -> None:
        response = await client.get(
            "/catalogs/cid10/search", params={"q": "não especificada", "limit": 1}
        )
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_limit_out_of_range(self, client: AsyncClient) -> None:
        response = await client.get("/catalogs/cid10/search", params={"q": "asma", "limit": 0})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_query_required(self, client: AsyncClient) -> None:
        response = await client.get("/catalogs/tuss/search")
        assert response.status_code == 422


class TestTussLookup:
    """Tests for GET /catalogs/tuss/{code}."""

    @pytest.mark.asyncio
    async def test_get_code(self, client: AsyncClient) -> None:
        response = await client.get("/catalogs/tuss/40808041")
        assert response.status_code == 200
        data = response.json()
        assert data["label"] == "Mamografia convencional bilateral"
        assert data["table"] == "22"

    @pytest.mark.asyncio
    async def test_unknown_code(self, client: AsyncClient) -> None:
        response = await client.get("/catalogs/tuss/00000000")
        assert response.status_code == 404


class TestCatalogStats:
    """Tests for GET /catalogs/stats."""

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient) -> None:
        response = await client.get("/catalogs/stats")
        assert response.status_code == 200
        data = response.json()
        assert data["catalogs"]["diagnosis"]["entry_count"] == 5
        assert data["catalogs"]["drug"]["min_score"] == 0.7
