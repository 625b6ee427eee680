"""Import the ANS TUSS procedure table into the procedure catalog.

Usage:
    python -m app.scripts.sync_tuss_codes
    python -m app.scripts.sync_tuss_codes --url <csv-url> --output <catalog.json>

Downloads TUSS "Tabela 22", drops expired codes and upserts the rest into
the TUSS catalog file used at startup.
"""

import argparse
import logging
import sys

import httpx

from app.core.config import settings
from app.services.catalog import CatalogLoadError
from app.services.tuss_sync import sync_tuss_catalog

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the TUSS import."""
    parser = argparse.ArgumentParser(description="Sync TUSS codes from the ANS table")
    parser.add_argument("--url", default=settings.tuss_csv_url, help="TUSS CSV URL")
    parser.add_argument("--output", default=str(settings.tuss_path), help="Catalog file to update")
    args = parser.parse_args(argv)

    try:
        result = sync_tuss_catalog(
            args.output,
            args.url,
            timeout=settings.tuss_sync_timeout_seconds,
        )
    except (httpx.HTTPError, CatalogLoadError) as e:
        logger.error(f"Error syncing TUSS codes: {e}")
        return 1

    if not result.success:
        logger.warning("TUSS sync imported no codes")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
