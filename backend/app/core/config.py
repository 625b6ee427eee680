"""Application configuration using pydantic-settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Reference catalogs shipped with the package
DEFAULT_CATALOG_DIR = Path(__file__).resolve().parent.parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Clinical Term Normalizer"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Reference catalogs
    catalog_dir: Path = DEFAULT_CATALOG_DIR
    cid10_file: str = "cid10.json"
    dcb_file: str = "dcb.json"
    tuss_file: str = "tuss_codes.json"

    # Matching
    min_query_length: int = 3
    cid10_min_score: float = 0.6
    dcb_min_score: float = 0.7
    tuss_min_score: float = 0.6

    # TUSS / TISS packaging
    tuss_acceptance_threshold: float = 0.3
    tuss_default_table: str = "22"
    tiss_source_text_limit: int = 500

    # TUSS import (ANS Tabela 22)
    tuss_csv_url: str = (
        "https://raw.githubusercontent.com/charlesfgarcia/tabelas-ans/master/TUSS/"
        "tabela%2022/Tabela%2022%20-%20Terminologia%20de%20procedimentos%20e%20eventos%20em%20saude.csv"
    )
    tuss_sync_timeout_seconds: float = 60.0

    @property
    def cid10_path(self) -> Path:
        """Get the CID-10 catalog file path."""
        return self.catalog_dir / self.cid10_file

    @property
    def dcb_path(self) -> Path:
        """Get the DCB catalog file path."""
        return self.catalog_dir / self.dcb_file

    @property
    def tuss_path(self) -> Path:
        """Get the TUSS catalog file path."""
        return self.catalog_dir / self.tuss_file


settings = Settings()
