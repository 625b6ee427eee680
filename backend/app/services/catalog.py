"""Reference catalogs for term normalization.

Loads the three static code tables used by the normalizer:

- CID-10 diagnosis catalog: ``{code, label}``
- DCB drug catalog: ``{name, dcb, aliases}``
- TUSS procedure catalog: ``{code, description, table, category, synonyms}``

All catalogs are parsed into ``CatalogEntry`` records and indexed once by
``CatalogStore``. The store is read-only after construction and is shared by
every request.
"""

import json
import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from app.core.config import Settings
from app.schemas.base import CatalogKind
from app.services.fuzzy_index import FieldWeights, FuzzyIndex, build_index

logger = logging.getLogger(__name__)

DIAGNOSIS_WEIGHTS = FieldWeights(label=1.0, aliases=0.8, code=0.6)
DRUG_WEIGHTS = FieldWeights(label=1.0, aliases=0.8, code=0.6)
PROCEDURE_WEIGHTS = FieldWeights(label=1.0, aliases=0.75, code=0.25)

DEFAULT_MIN_SCORES: dict[CatalogKind, float] = {
    CatalogKind.DIAGNOSIS: 0.6,
    CatalogKind.DRUG: 0.7,
    CatalogKind.PROCEDURE: 0.6,
}


class CatalogLoadError(Exception):
    """Raised when a reference catalog cannot be loaded."""


@dataclass(frozen=True)
class CatalogEntry:
    """A canonical entry of a reference catalog."""

    code: str
    label: str
    aliases: tuple[str, ...] = field(default_factory=tuple)
    table: str | None = None
    category: str | None = None


def _required(record: Mapping[str, Any], key: str, catalog: str, position: int) -> str:
    value = record.get(key)
    if not isinstance(value, str) or not value.strip():
        raise CatalogLoadError(
            f"{catalog} catalog entry #{position} is missing required field '{key}'"
        )
    return value.strip()


def _string_list(record: Mapping[str, Any], key: str, catalog: str, position: int) -> tuple[str, ...]:
    values = record.get(key) or []
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise CatalogLoadError(f"{catalog} catalog entry #{position} has invalid '{key}' list")
    return tuple(v.strip() for v in values if v.strip())


def _dedupe(values: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = value.lower()
        if key not in seen:
            seen.add(key)
            result.append(value)
    return tuple(result)


def _check_unique(entries: list[CatalogEntry], catalog: str) -> list[CatalogEntry]:
    seen: set[str] = set()
    for entry in entries:
        if entry.code in seen:
            raise CatalogLoadError(f"{catalog} catalog has duplicate code '{entry.code}'")
        seen.add(entry.code)
    return entries


def _records(records: Iterable[Any], catalog: str) -> list[Mapping[str, Any]]:
    result = []
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise CatalogLoadError(f"{catalog} catalog entry #{position} is not an object")
        result.append(record)
    return result


def parse_diagnosis_catalog(records: Iterable[Any]) -> list[CatalogEntry]:
    """Parse CID-10 records (``code``, ``label``) into catalog entries."""
    entries = [
        CatalogEntry(
            code=_required(record, "code", "CID-10", i),
            label=_required(record, "label", "CID-10", i),
            aliases=_string_list(record, "synonyms", "CID-10", i),
        )
        for i, record in enumerate(_records(records, "CID-10"))
    ]
    return _check_unique(entries, "CID-10")


def parse_drug_catalog(records: Iterable[Any]) -> list[CatalogEntry]:
    """Parse DCB records (``name``, ``dcb``, ``aliases``) into catalog entries.

    The common name is the entry code and the DCB designation its label. The
    common name is also searchable, so it leads the alias list.
    """
    entries = []
    for i, record in enumerate(_records(records, "DCB")):
        name = _required(record, "name", "DCB", i)
        entries.append(
            CatalogEntry(
                code=name,
                label=_required(record, "dcb", "DCB", i),
                aliases=_dedupe([name, *_string_list(record, "aliases", "DCB", i)]),
            )
        )
    return _check_unique(entries, "DCB")


def parse_procedure_catalog(records: Iterable[Any], default_table: str = "22") -> list[CatalogEntry]:
    """Parse TUSS records into catalog entries."""
    entries = []
    for i, record in enumerate(_records(records, "TUSS")):
        table = record.get("table")
        category = record.get("category")
        entries.append(
            CatalogEntry(
                code=_required(record, "code", "TUSS", i),
                label=_required(record, "description", "TUSS", i),
                aliases=_string_list(record, "synonyms", "TUSS", i),
                table=str(table) if table else default_table,
                category=str(category) if category else None,
            )
        )
    return _check_unique(entries, "TUSS")


def read_catalog_file(path: str | Path) -> list[Any]:
    """Read the raw records of a catalog file.

    Accepts either a bare JSON list or an object with an ``entries`` list.

    Raises:
        CatalogLoadError: If the file is missing or malformed.
    """
    path = Path(path)
    if not path.exists():
        raise CatalogLoadError(f"Catalog file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Could not read catalog file {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("entries")
    if not isinstance(data, list):
        raise CatalogLoadError(f"Catalog file {path} must contain a list of entries")
    return data


class CatalogStore:
    """Indexed reference catalogs, built once at startup.

    Usage:
        store = CatalogStore.from_settings(settings)
        candidates = search(store.index_for(CatalogKind.DRUG), "amoxil", limit=1)
    """

    def __init__(
        self,
        diagnoses: list[CatalogEntry],
        drugs: list[CatalogEntry],
        procedures: list[CatalogEntry],
        *,
        min_scores: Mapping[CatalogKind, float] | None = None,
        min_query_length: int = 3,
    ) -> None:
        """Build the fuzzy indexes for the given catalogs.

        Args:
            diagnoses: CID-10 entries.
            drugs: DCB entries.
            procedures: TUSS entries.
            min_scores: Per-catalog minimum match score overrides.
            min_query_length: Shortest query the matcher will attempt.
        """
        start_time = time.perf_counter()
        scores = {**DEFAULT_MIN_SCORES, **(min_scores or {})}

        self._entries: dict[CatalogKind, list[CatalogEntry]] = {
            CatalogKind.DIAGNOSIS: list(diagnoses),
            CatalogKind.DRUG: list(drugs),
            CatalogKind.PROCEDURE: list(procedures),
        }
        weights = {
            CatalogKind.DIAGNOSIS: DIAGNOSIS_WEIGHTS,
            CatalogKind.DRUG: DRUG_WEIGHTS,
            CatalogKind.PROCEDURE: PROCEDURE_WEIGHTS,
        }
        self._indexes: dict[CatalogKind, FuzzyIndex] = {
            kind: build_index(
                entries,
                weights[kind],
                name=kind.value,
                min_score=scores[kind],
                min_query_length=min_query_length,
            )
            for kind, entries in self._entries.items()
        }
        self._by_code: dict[CatalogKind, dict[str, CatalogEntry]] = {
            kind: {entry.code: entry for entry in entries}
            for kind, entries in self._entries.items()
        }
        self._build_time_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"Catalogs indexed: {len(diagnoses)} CID-10, {len(drugs)} DCB, "
            f"{len(procedures)} TUSS entries in {self._build_time_ms:.2f}ms"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CatalogStore":
        """Load and index the catalogs configured in settings.

        Raises:
            CatalogLoadError: If any catalog file is missing or malformed.
        """
        return cls(
            diagnoses=parse_diagnosis_catalog(read_catalog_file(settings.cid10_path)),
            drugs=parse_drug_catalog(read_catalog_file(settings.dcb_path)),
            procedures=parse_procedure_catalog(
                read_catalog_file(settings.tuss_path),
                default_table=settings.tuss_default_table,
            ),
            min_scores={
                CatalogKind.DIAGNOSIS: settings.cid10_min_score,
                CatalogKind.DRUG: settings.dcb_min_score,
                CatalogKind.PROCEDURE: settings.tuss_min_score,
            },
            min_query_length=settings.min_query_length,
        )

    def index_for(self, kind: CatalogKind) -> FuzzyIndex:
        """Get the fuzzy index of a catalog."""
        return self._indexes[kind]

    def entries(self, kind: CatalogKind) -> list[CatalogEntry]:
        """Get all entries of a catalog, in catalog order."""
        return list(self._entries[kind])

    def get_entry(self, kind: CatalogKind, code: str) -> CatalogEntry | None:
        """Get a catalog entry by its exact code."""
        return self._by_code[kind].get(code.strip())

    @property
    def diagnosis_index(self) -> FuzzyIndex:
        return self._indexes[CatalogKind.DIAGNOSIS]

    @property
    def drug_index(self) -> FuzzyIndex:
        return self._indexes[CatalogKind.DRUG]

    @property
    def procedure_index(self) -> FuzzyIndex:
        return self._indexes[CatalogKind.PROCEDURE]

    def get_stats(self) -> dict:
        """Get catalog statistics for health checks."""
        return {
            "catalogs": {
                kind.value: {
                    "entry_count": len(self._entries[kind]),
                    "document_count": len(self._indexes[kind].documents),
                    "min_score": self._indexes[kind].min_score,
                }
                for kind in CatalogKind
            },
            "build_time_ms": round(self._build_time_ms, 2),
        }
