"""TISS form drafting from detected procedure requests."""

import logging
from dataclasses import dataclass, field

from app.schemas.base import Urgency
from app.services.normalization import TermNormalizationService
from app.services.tuss_matcher import DetectedProcedure, TussMatcherService, TussProcedureMatch

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_TEXT_LIMIT = 500


@dataclass
class TissFormDraft:
    """Metadata of a suggested TISS (SP/SADT) form."""

    procedure_codes: list[TussProcedureMatch]
    urgency: Urgency
    confidence: float
    source_text: str
    cid_code: str | None = None
    cid_description: str | None = None
    warnings: list[str] = field(default_factory=list)


class TissFormBuilder:
    """Builds a TISS form draft from detected procedures and diagnoses."""

    def __init__(
        self,
        tuss_matcher: TussMatcherService,
        normalizer: TermNormalizationService,
        source_text_limit: int = DEFAULT_SOURCE_TEXT_LIMIT,
    ) -> None:
        self._tuss_matcher = tuss_matcher
        self._normalizer = normalizer
        self._source_text_limit = source_text_limit

    def build(
        self,
        procedures: list[DetectedProcedure],
        diagnoses: list[str] | None = None,
    ) -> TissFormDraft | None:
        """Draft a TISS form.

        Args:
            procedures: Procedures detected in the consultation.
            diagnoses: Assessment diagnoses; the first one is the clinical indication.

        Returns:
            The draft, or None when no procedure survives matching.
        """
        if not procedures:
            return None

        codes = self._tuss_matcher.match_procedures(procedures)
        if not codes:
            return None

        confidence = sum(c.match_confidence for c in codes) / len(codes)
        urgency = max((p.urgency for p in procedures), key=lambda u: u.rank)
        source_text = "; ".join(p.source_text for p in procedures if p.source_text)

        draft = TissFormDraft(
            procedure_codes=codes,
            urgency=urgency,
            confidence=confidence,
            source_text=source_text[: self._source_text_limit],
        )

        indication = next((d for d in diagnoses or [] if d and d.strip()), None)
        if indication is not None:
            draft.cid_description = indication
            suggestion = self._normalizer.normalize_diagnosis(indication)
            draft.cid_code = suggestion.normalized_code

        uncoded = sum(1 for c in codes if not c.is_coded)
        if uncoded:
            draft.warnings.append(f"{uncoded} procedure(s) need a TUSS code entered manually")
        if draft.cid_code is None:
            draft.warnings.append("No CID-10 code for the clinical indication")

        return draft
