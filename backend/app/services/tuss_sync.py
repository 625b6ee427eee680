"""TUSS catalog import from the ANS terminology table.

The ANS publishes TUSS "Tabela 22" (procedimentos e eventos em saude) as a
semicolon-separated CSV:

    Codigo do Termo;Termo;Data de inicio de vigencia;Data de fim de vigencia;...

Rows whose end-of-validity date has passed are discarded. Imported rows are
upserted into the procedure catalog file: known codes get their description
refreshed while curated synonyms, table and category are kept.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

import httpx

from app.services.catalog import read_catalog_file

logger = logging.getLogger(__name__)

IMPORTED_TABLE = "22"
IMPORTED_CATEGORY = "Imported"


@dataclass
class TussSyncResult:
    """Counts from a TUSS import."""

    processed: int = 0
    created: int = 0
    updated: int = 0
    expired: int = 0

    @property
    def success(self) -> bool:
        return self.processed > 0


def _parse_end_date(value: str) -> date | None:
    try:
        return datetime.strptime(value, "%d/%m/%Y").date()
    except ValueError:
        return None


def parse_tuss_csv(text: str, today: date | None = None) -> tuple[list[dict[str, Any]], int]:
    """Parse the ANS TUSS CSV into catalog records.

    Args:
        text: CSV content.
        today: Reference date for validity checks (defaults to today).

    Returns:
        Tuple of (active records, number of expired rows skipped).
    """
    today = today or date.today()
    lines = text.splitlines()
    if lines and lines[0].lstrip("\ufeff").lower().startswith(("código", "codigo")):
        lines = lines[1:]

    records: list[dict[str, Any]] = []
    expired = 0
    for line in lines:
        line = line.strip()
        if not line:
            continue
        parts = line.split(";")
        if len(parts) < 2:
            continue

        code = parts[0].strip()
        description = parts[1].strip()
        if not code or not description:
            continue

        end_of_validity = parts[3].strip() if len(parts) > 3 else ""
        if end_of_validity:
            end = _parse_end_date(end_of_validity)
            # Unparseable dates are treated as still valid
            if end is not None and end < today:
                expired += 1
                continue

        records.append({
            "code": code,
            "description": description,
            "table": IMPORTED_TABLE,
            "category": IMPORTED_CATEGORY,
            "synonyms": [],
        })

    return records, expired


def merge_tuss_records(
    existing: list[dict[str, Any]],
    imported: list[dict[str, Any]],
) -> tuple[list[dict[str, Any]], TussSyncResult]:
    """Upsert imported records into existing catalog records.

    Existing records keep their position, synonyms, table and category; only
    the description is refreshed. New codes are appended in import order.
    """
    result = TussSyncResult()
    merged = [dict(record) for record in existing]
    by_code = {record.get("code"): record for record in merged}

    for record in imported:
        result.processed += 1
        current = by_code.get(record["code"])
        if current is None:
            new_record = dict(record)
            merged.append(new_record)
            by_code[record["code"]] = new_record
            result.created += 1
        elif current.get("description") != record["description"]:
            current["description"] = record["description"]
            result.updated += 1

    return merged, result


def _write_catalog(catalog_path: Path, data: dict[str, Any]) -> None:
    """Replace the catalog file atomically.

    The JSON goes to a sibling temporary file that then replaces the catalog.
    A failed write leaves the previous catalog untouched.
    """
    catalog_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = catalog_path.with_name(f"{catalog_path.name}.tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp_path.replace(catalog_path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def fetch_tuss_csv(url: str, client: httpx.Client | None = None, timeout: float = 60.0) -> str:
    """Download the TUSS CSV.

    Raises:
        httpx.HTTPError: If the download fails.
    """
    if client is None:
        with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
            return fetch_tuss_csv(url, own_client)

    response = client.get(url)
    response.raise_for_status()
    return response.text


def sync_tuss_catalog(
    catalog_path: str | Path,
    url: str,
    client: httpx.Client | None = None,
    today: date | None = None,
    timeout: float = 60.0,
) -> TussSyncResult:
    """Import the ANS TUSS table into a procedure catalog file.

    Args:
        catalog_path: Procedure catalog JSON file; created if missing.
        url: CSV location.
        client: Optional HTTP client (for testing or connection reuse).
        today: Reference date for validity checks.
        timeout: Download timeout in seconds.

    Returns:
        Import counts.
    """
    logger.info(f"Starting TUSS sync from {url}")
    catalog_path = Path(catalog_path)

    text = fetch_tuss_csv(url, client=client, timeout=timeout)
    imported, expired = parse_tuss_csv(text, today=today)

    existing = read_catalog_file(catalog_path) if catalog_path.exists() else []
    merged, result = merge_tuss_records(existing, imported)
    result.expired = expired

    _write_catalog(
        catalog_path,
        {
            "metadata": {"source": url, "total_codes": len(merged)},
            "entries": merged,
        },
    )

    logger.info(
        f"TUSS sync complete: processed={result.processed} created={result.created} "
        f"updated={result.updated} expired={result.expired}"
    )
    return result
