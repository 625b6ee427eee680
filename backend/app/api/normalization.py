"""Term Normalization API Endpoints.

Provides normalization of mentions extracted from a generated SOAP note:
- CID-10 / DCB suggestions for diagnoses and medications
- TUSS codes for detected procedure requests
- TISS form drafts for insurance authorization
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_normalization_service, get_tiss_form_builder, get_tuss_matcher
from app.schemas.normalization import (
    DetectedProcedureRequest,
    MentionsRequest,
    NormalizationSuggestionResponse,
    ProcedureMatchRequest,
    TissFormRequest,
    TissFormResponse,
    TussProcedureMatchResponse,
)
from app.services.normalization import ExtractedMentions, TermNormalizationService
from app.services.tiss_form import TissFormBuilder
from app.services.tuss_matcher import DetectedProcedure, TussMatcherService

router = APIRouter(prefix="/normalization", tags=["Normalization"])


def _to_detected(procedures: list[DetectedProcedureRequest]) -> list[DetectedProcedure]:
    return [
        DetectedProcedure(
            name=p.name,
            urgency=p.urgency,
            quantity=p.quantity,
            source_text=p.source_text,
        )
        for p in procedures
    ]


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/suggestions", response_model=list[NormalizationSuggestionResponse])
async def normalize_mentions(
    request: MentionsRequest,
    service: TermNormalizationService = Depends(get_normalization_service),
) -> list[NormalizationSuggestionResponse]:
    """Normalize diagnosis and medication mentions.

    Returns one suggestion per non-blank mention, diagnoses first. Mentions
    without a catalog match are returned with no code.
    """
    suggestions = service.normalize_all(
        ExtractedMentions(diagnoses=request.diagnoses, medications=request.medications)
    )
    return [NormalizationSuggestionResponse.model_validate(s) for s in suggestions]


@router.post("/procedures", response_model=list[TussProcedureMatchResponse])
async def match_procedures(
    request: ProcedureMatchRequest,
    matcher: TussMatcherService = Depends(get_tuss_matcher),
) -> list[TussProcedureMatchResponse]:
    """Resolve detected procedures into TUSS line items."""
    matches = matcher.match_procedures(_to_detected(request.procedures))
    return [TussProcedureMatchResponse.model_validate(m) for m in matches]


@router.post("/tiss-form", response_model=TissFormResponse | None)
async def draft_tiss_form(
    request: TissFormRequest,
    builder: TissFormBuilder = Depends(get_tiss_form_builder),
) -> TissFormResponse | None:
    """Draft a TISS form, or return null when no procedure can be listed."""
    draft = builder.build(_to_detected(request.procedures), request.diagnoses)
    if draft is None:
        return None
    return TissFormResponse.model_validate(draft)
