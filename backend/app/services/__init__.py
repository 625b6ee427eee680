"""Services for Clinical Term Normalizer.

Services implement the catalog matching logic:
- CatalogStore: Loads and indexes the CID-10, DCB and TUSS catalogs
- TermNormalizationService: CID-10 / DCB suggestions for extracted mentions
- TussMatcherService: TUSS line items for detected procedures
- TissFormBuilder: TISS form drafts
"""

from app.services.catalog import CatalogEntry, CatalogLoadError, CatalogStore
from app.services.fuzzy_index import FieldWeights, FuzzyIndex, build_index
from app.services.matcher import MatchCandidate, best_match, search
from app.services.normalization import (
    ExtractedMentions,
    NormalizationSuggestion,
    TermNormalizationService,
)
from app.services.tiss_form import TissFormBuilder, TissFormDraft
from app.services.tuss_matcher import (
    DetectedProcedure,
    TussMatcherService,
    TussMatchResult,
    TussProcedureMatch,
)
from app.services.tuss_sync import TussSyncResult, sync_tuss_catalog

__all__ = [
    "CatalogEntry",
    "CatalogLoadError",
    "CatalogStore",
    "DetectedProcedure",
    "ExtractedMentions",
    "FieldWeights",
    "FuzzyIndex",
    "MatchCandidate",
    "NormalizationSuggestion",
    "TermNormalizationService",
    "TissFormBuilder",
    "TissFormDraft",
    "TussMatchResult",
    "TussMatcherService",
    "TussProcedureMatch",
    "TussSyncResult",
    "best_match",
    "build_index",
    "search",
    "sync_tuss_catalog",
]
