"""Base schemas and enums for Clinical Term Normalizer."""

from enum import Enum


class CatalogKind(str, Enum):
    """Reference catalogs available for normalization."""

    DIAGNOSIS = "diagnosis"  # CID-10
    DRUG = "drug"  # DCB
    PROCEDURE = "procedure"  # TUSS


class SuggestionType(str, Enum):
    """Persisted type of a normalization suggestion."""

    CID = "CID"
    DCB = "DCB"

    @property
    def catalog(self) -> CatalogKind:
        """Catalog a suggestion of this type is resolved against."""
        if self is SuggestionType.CID:
            return CatalogKind.DIAGNOSIS
        return CatalogKind.DRUG


class Urgency(str, Enum):
    """Urgency of a detected procedure request."""

    ROUTINE = "routine"
    URGENT = "urgent"
    EMERGENCY = "emergency"

    @property
    def rank(self) -> int:
        """Ordering used to pick the most urgent request."""
        return {"routine": 1, "urgent": 2, "emergency": 3}[self.value]
