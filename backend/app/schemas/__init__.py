"""Pydantic schemas and enums for Clinical Term Normalizer."""

from app.schemas.base import CatalogKind, SuggestionType, Urgency
from app.schemas.normalization import (
    CatalogEntryResponse,
    DetectedProcedureRequest,
    MentionsRequest,
    NormalizationSuggestionResponse,
    ProcedureMatchRequest,
    TissFormRequest,
    TissFormResponse,
    TussProcedureMatchResponse,
)

__all__ = [
    # Enums
    "CatalogKind",
    "SuggestionType",
    "Urgency",
    # Normalization
    "CatalogEntryResponse",
    "DetectedProcedureRequest",
    "MentionsRequest",
    "NormalizationSuggestionResponse",
    "ProcedureMatchRequest",
    "TissFormRequest",
    "TissFormResponse",
    "TussProcedureMatchResponse",
]
