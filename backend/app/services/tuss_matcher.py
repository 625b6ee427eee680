"""TUSS procedure matcher.

Resolves procedure names detected in a consultation into TUSS codes for a
TISS claim form. Unlike diagnosis/drug normalization, weak matches are not
coded: they become empty lines the clinician fills in by hand.
"""

import logging
from dataclasses import dataclass

from app.schemas.base import CatalogKind, Urgency
from app.services.catalog import CatalogEntry, CatalogStore
from app.services.matcher import search

logger = logging.getLogger(__name__)

DEFAULT_ACCEPTANCE_THRESHOLD = 0.3
DEFAULT_TUSS_TABLE = "22"  # Procedimentos e eventos em saude


@dataclass
class DetectedProcedure:
    """A procedure request detected by the external detection step."""

    name: str
    urgency: Urgency = Urgency.ROUTINE
    quantity: int | None = None
    source_text: str = ""


@dataclass(frozen=True)
class TussMatchResult:
    """A TUSS catalog entry matched for a procedure name."""

    entry: CatalogEntry
    confidence: float


@dataclass(frozen=True)
class TussProcedureMatch:
    """A TISS line item, coded or left for manual entry."""

    code: str
    description: str
    table: str
    quantity: int
    match_confidence: float

    @property
    def is_coded(self) -> bool:
        return self.code != ""


class TussMatcherService:
    """Matches detected procedures against the TUSS catalog."""

    def __init__(
        self,
        store: CatalogStore,
        acceptance_threshold: float = DEFAULT_ACCEPTANCE_THRESHOLD,
        default_table: str = DEFAULT_TUSS_TABLE,
    ) -> None:
        """Initialize the matcher.

        Args:
            store: Catalog store holding the TUSS index.
            acceptance_threshold: Confidence a coded match must exceed.
            default_table: TUSS table used for unmatched procedures.
        """
        self._store = store
        self.acceptance_threshold = acceptance_threshold
        self.default_table = default_table

    def find_tuss_codes(self, procedure_name: str, limit: int = 5) -> list[TussMatchResult]:
        """Find TUSS codes matching a procedure name."""
        return [
            TussMatchResult(entry=c.entry, confidence=c.raw_score)
            for c in search(self._store.procedure_index, procedure_name, limit=limit)
        ]

    def get_best_tuss_match(self, procedure_name: str) -> TussMatchResult | None:
        """Get the best matching TUSS code for a procedure."""
        results = self.find_tuss_codes(procedure_name, limit=1)
        return results[0] if results else None

    def _match_one(self, procedure: DetectedProcedure) -> TussProcedureMatch:
        quantity = procedure.quantity or 1
        match = self.get_best_tuss_match(procedure.name)

        if match is None or match.confidence < self.acceptance_threshold:
            return TussProcedureMatch(
                code="",
                description=procedure.name,
                table=self.default_table,
                quantity=quantity,
                match_confidence=0.0,
            )

        return TussProcedureMatch(
            code=match.entry.code,
            description=match.entry.label,
            table=match.entry.table or self.default_table,
            quantity=quantity,
            match_confidence=match.confidence,
        )

    def match_procedures(self, detected: list[DetectedProcedure]) -> list[TussProcedureMatch]:
        """Convert detected procedures into TUSS line items.

        Unmatched procedures are kept with an empty code for manual entry.
        Coded matches at or below the acceptance threshold are dropped.
        """
        matches = [self._match_one(procedure) for procedure in detected]
        kept = [
            m for m in matches
            if m.match_confidence > self.acceptance_threshold or m.code == ""
        ]

        if len(kept) < len(matches):
            logger.info(f"Dropped {len(matches) - len(kept)} low-confidence TUSS matches")
        return kept

    def search_tuss_codes(self, query: str, limit: int = 10) -> list[CatalogEntry]:
        """Search TUSS codes by text (autocomplete)."""
        return [c.entry for c in search(self._store.procedure_index, query, limit=limit)]

    def get_tuss_code(self, code: str) -> CatalogEntry | None:
        """Get a TUSS entry by exact code."""
        return self._store.get_entry(CatalogKind.PROCEDURE, code)

    def get_all_tuss_codes(self) -> list[CatalogEntry]:
        return self._store.entries(CatalogKind.PROCEDURE)
