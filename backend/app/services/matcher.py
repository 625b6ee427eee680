"""Approximate matching of free-text mentions against a fuzzy index.

Scoring (per search document):

- Each field (term, combined aliases, code) is compared to the query with
  RapidFuzz. Field similarity is the best of the full ratio, the token-sort
  ratio, a discounted token-set ratio (every word of one side found in the
  other) and, when the query is not longer than the field, a discounted
  partial ratio. The partial ratio aligns the query anywhere inside the
  field, so where the hit falls in a long description does not matter. A
  short field is never aligned inside a longer query: "azi" does not match
  "hidroclorotiazida 25mg".
- The document score is the best ``weight * similarity`` over its fields.
- An entry scores as its best document. Entries under the index minimum
  score are dropped; equal scores keep catalog order.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rapidfuzz import fuzz

from app.services.fuzzy_index import FuzzyIndex, SearchDocument, normalize_text

if TYPE_CHECKING:
    from app.services.catalog import CatalogEntry

logger = logging.getLogger(__name__)

# A substring hit ranks below an equally close full-string match
PARTIAL_MATCH_SCALE = 0.9


@dataclass(frozen=True)
class MatchCandidate:
    """A catalog entry matched by a query, with its similarity score."""

    entry: "CatalogEntry"
    raw_score: float  # 1.0 is a perfect match


def field_similarity(query: str, text: str) -> float:
    """Similarity in [0, 1] between a normalized query and a normalized field."""
    if not query or not text:
        return 0.0
    score = max(
        fuzz.ratio(query, text),
        fuzz.token_sort_ratio(query, text),
        PARTIAL_MATCH_SCALE * fuzz.token_set_ratio(query, text),
    )
    # partial_ratio aligns the shorter string, which must be the query
    if len(query) <= len(text):
        score = max(score, PARTIAL_MATCH_SCALE * fuzz.partial_ratio(query, text))
    return min(score / 100.0, 1.0)


def score_document(query: str, document: SearchDocument, index: FuzzyIndex) -> float:
    """Weighted score of one search document for a normalized query."""
    weights = index.weights
    return max(
        weights.label * field_similarity(query, document.term),
        weights.aliases * field_similarity(query, document.aliases_text),
        weights.code * field_similarity(query, document.code),
    )


def _rank(index: FuzzyIndex, query: str) -> list[tuple[int, float]]:
    best: dict[int, float] = {}
    for document in index.documents:
        score = score_document(query, document, index)
        if score < index.min_score:
            continue
        if score > best.get(document.entry_position, -1.0):
            best[document.entry_position] = score
    return sorted(best.items(), key=lambda item: (-item[1], item[0]))


def search(index: FuzzyIndex, query: str, limit: int = 5) -> list[MatchCandidate]:
    """Search an index for the entries closest to a query.

    Args:
        index: Catalog index to search.
        query: Free-text mention.
        limit: Maximum number of candidates to return.

    Returns:
        Candidates ordered by descending score. Empty when the query is too
        short, nothing clears the index threshold, or the query cannot be
        scored.
    """
    if limit < 1 or not query:
        return []

    try:
        normalized = normalize_text(query)
        # Separators left by normalization do not count toward the minimum length
        if len(normalized.replace(" ", "")) < index.min_query_length:
            return []
        ranked = _rank(index, normalized)
    except Exception as e:
        logger.warning(f"Search failed on {index.name} catalog for {query!r}: {e}", exc_info=True)
        return []

    return [
        MatchCandidate(entry=index.entries[position], raw_score=score)
        for position, score in ranked[:limit]
    ]


def best_match(index: FuzzyIndex, query: str) -> MatchCandidate | None:
    """Get the single best candidate for a query, if any."""
    candidates = search(index, query, limit=1)
    return candidates[0] if candidates else None
