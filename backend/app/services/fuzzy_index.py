"""Fuzzy search index over a reference catalog.

Each catalog entry is expanded into one search document per searchable term
(the label plus every alias). All documents of an entry point back to it, so
a hit on any alias resolves to the one canonical code.
"""

import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rapidfuzz.utils import default_process

if TYPE_CHECKING:
    from app.services.catalog import CatalogEntry


@dataclass(frozen=True)
class FieldWeights:
    """Relative weight of each searchable field (label highest, code lowest)."""

    label: float = 1.0
    aliases: float = 0.8
    code: float = 0.6

    def __post_init__(self) -> None:
        for name in ("label", "aliases", "code"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Field weight '{name}' must be within [0, 1], got {value}")


@dataclass(frozen=True)
class SearchDocument:
    """A pre-normalized search document pointing to a catalog entry."""

    entry_position: int
    term: str  # label or one alias
    aliases_text: str
    code: str


@dataclass(frozen=True)
class FuzzyIndex:
    """Read-only search index for one catalog."""

    name: str
    entries: tuple["CatalogEntry", ...]
    documents: tuple[SearchDocument, ...]
    weights: FieldWeights
    min_score: float
    min_query_length: int

    @property
    def is_empty(self) -> bool:
        return not self.documents


def normalize_text(text: str) -> str:
    """Normalize text for fuzzy comparison.

    Folds accents, lower-cases, turns punctuation into whitespace and
    collapses runs of whitespace.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(default_process(folded).split())


def build_index(
    entries: list["CatalogEntry"],
    weights: FieldWeights,
    *,
    name: str = "catalog",
    min_score: float = 0.6,
    min_query_length: int = 3,
) -> FuzzyIndex:
    """Build a fuzzy index for a catalog.

    Args:
        entries: Catalog entries in catalog order.
        weights: Field weights used by the matcher.
        name: Catalog name, for logging.
        min_score: Minimum weighted score for a candidate to be returned.
        min_query_length: Shortest (stripped) query the matcher will attempt.

    Returns:
        The built index. An empty catalog yields a valid index that never matches.
    """
    documents: list[SearchDocument] = []
    for position, entry in enumerate(entries):
        aliases_text = normalize_text(" ".join(entry.aliases))
        code = normalize_text(entry.code)
        seen_terms: set[str] = set()
        for term in (entry.label, *entry.aliases):
            normalized = normalize_text(term)
            if not normalized or normalized in seen_terms:
                continue
            seen_terms.add(normalized)
            documents.append(
                SearchDocument(
                    entry_position=position,
                    term=normalized,
                    aliases_text=aliases_text,
                    code=code,
                )
            )

    return FuzzyIndex(
        name=name,
        entries=tuple(entries),
        documents=tuple(documents),
        weights=weights,
        min_score=min_score,
        min_query_length=min_query_length,
    )
