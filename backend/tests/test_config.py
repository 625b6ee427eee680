"""Tests for application settings."""

from pathlib import Path

import pytest

from app.core.config import DEFAULT_CATALOG_DIR, Settings


class TestSettings:
    """Test settings defaults and overrides."""

    def test_defaults(self) -> None:
        config = Settings()
        assert config.min_query_length == 3
        assert config.cid10_min_score == 0.6
        assert config.dcb_min_score == 0.7
        assert config.tuss_min_score == 0.6
        assert config.tuss_acceptance_threshold == 0.3
        assert config.tuss_default_table == "22"

    def test_catalog_paths(self) -> None:
        config = Settings()
        assert config.cid10_path == DEFAULT_CATALOG_DIR / "cid10.json"
        assert config.dcb_path == DEFAULT_CATALOG_DIR / "dcb.json"
        assert config.tuss_path == DEFAULT_CATALOG_DIR / "tuss_codes.json"

    def test_packaged_catalogs_exist(self) -> None:
        config = Settings()
        for path in (config.cid10_path, config.dcb_path, config.tuss_path):
            assert path.is_file()

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test settings are read from environment variables."""
        monkeypatch.setenv("TUSS_ACCEPTANCE_THRESHOLD", "0.45")
        monkeypatch.setenv("CATALOG_DIR", str(tmp_path))
        config = Settings()
        assert config.tuss_acceptance_threshold == 0.45
        assert config.tuss_path == tmp_path / "tuss_codes.json"
