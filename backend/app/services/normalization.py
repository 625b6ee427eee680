"""Term normalization service for diagnoses (CID-10) and drugs (DCB).

The best catalog candidate is always surfaced, however weak, with its
confidence visible: the clinician accepts or dismisses each suggestion. A
mention with no candidate still yields a suggestion with no code, so it is
never silently dropped.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from app.schemas.base import SuggestionType
from app.services.catalog import CatalogEntry, CatalogStore
from app.services.matcher import best_match, search

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizationSuggestion:
    """Normalization of one raw mention, ready for clinician review."""

    type: SuggestionType
    raw_text: str
    normalized_code: str | None = None
    normalized_label: str | None = None
    confidence: float | None = None

    def __post_init__(self) -> None:
        if (self.normalized_code is None) != (self.confidence is None):
            raise ValueError("normalized_code and confidence must be both set or both empty")

    @property
    def is_matched(self) -> bool:
        return self.normalized_code is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the shape stored by the persistence layer."""
        return {
            "type": self.type.value,
            "rawText": self.raw_text,
            "normalizedCode": self.normalized_code,
            "normalizedLabel": self.normalized_label,
            "confidence": self.confidence,
        }


@dataclass
class ExtractedMentions:
    """Mention lists parsed from a generated SOAP note."""

    diagnoses: list[str] = field(default_factory=list)
    medications: list[str] = field(default_factory=list)


class TermNormalizationService:
    """Resolves diagnosis and medication mentions against CID-10 and DCB.

    Usage:
        service = TermNormalizationService(store)
        suggestion = service.normalize_medication("Amoxil 500mg")
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def normalize(self, raw_text: str, kind: SuggestionType) -> NormalizationSuggestion:
        """Normalize one mention.

        Args:
            raw_text: Mention as extracted; preserved verbatim in the result.
            kind: CID for diagnoses, DCB for drugs.

        Returns:
            A suggestion with the best candidate, or with no code when nothing
            matched.
        """
        candidate = best_match(self._store.index_for(kind.catalog), raw_text)
        if candidate is None:
            return NormalizationSuggestion(type=kind, raw_text=raw_text)

        return NormalizationSuggestion(
            type=kind,
            raw_text=raw_text,
            normalized_code=candidate.entry.code,
            normalized_label=candidate.entry.label,
            confidence=round(candidate.raw_score, 2),
        )

    def normalize_diagnosis(self, raw_text: str) -> NormalizationSuggestion:
        return self.normalize(raw_text, SuggestionType.CID)

    def normalize_medication(self, raw_text: str) -> NormalizationSuggestion:
        return self.normalize(raw_text, SuggestionType.DCB)

    def normalize_all(self, mentions: ExtractedMentions) -> list[NormalizationSuggestion]:
        """Normalize every extracted mention.

        Diagnoses come first, then medications, each in input order. Blank
        mentions are skipped; repeated mentions are not de-duplicated.
        """
        suggestions: list[NormalizationSuggestion] = []

        for diagnosis in mentions.diagnoses:
            if diagnosis and diagnosis.strip():
                suggestions.append(self.normalize_diagnosis(diagnosis))

        for medication in mentions.medications:
            if medication and medication.strip():
                suggestions.append(self.normalize_medication(medication))

        matched = sum(1 for s in suggestions if s.is_matched)
        logger.debug(f"Normalized {len(suggestions)} mentions, {matched} matched")
        return suggestions

    def search_diagnoses(self, query: str, limit: int = 10) -> list[CatalogEntry]:
        """Search the CID-10 catalog (autocomplete)."""
        return [c.entry for c in search(self._store.diagnosis_index, query, limit=limit)]

    def search_drugs(self, query: str, limit: int = 10) -> list[CatalogEntry]:
        """Search the DCB catalog (autocomplete), one result per drug."""
        return [c.entry for c in search(self._store.drug_index, query, limit=limit)]

    def get_stats(self) -> dict:
        return self._store.get_stats()
