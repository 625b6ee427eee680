"""Request and response schemas for term normalization."""

from pydantic import BaseModel, Field

from app.schemas.base import SuggestionType, Urgency


class MentionsRequest(BaseModel):
    """Mentions extracted from a SOAP note by the LLM parser."""

    diagnoses: list[str] = Field(default_factory=list, description="Raw diagnosis mentions")
    medications: list[str] = Field(default_factory=list, description="Raw medication mentions")


class NormalizationSuggestionResponse(BaseModel):
    """A CID-10 or DCB normalization suggestion."""

    type: SuggestionType = Field(..., description="CID for diagnoses, DCB for drugs")
    raw_text: str = Field(..., description="Mention text as extracted")
    normalized_code: str | None = Field(None, description="Resolved canonical code")
    normalized_label: str | None = Field(None, description="Resolved canonical label")
    confidence: float | None = Field(None, ge=0.0, le=1.0, description="Match confidence")

    model_config = {"from_attributes": True}


class DetectedProcedureRequest(BaseModel):
    """A procedure request detected in the consultation."""

    name: str = Field(..., min_length=1, description="Procedure name as detected")
    urgency: Urgency = Field(default=Urgency.ROUTINE, description="Requested urgency")
    quantity: int | None = Field(None, ge=1, description="Requested quantity")
    source_text: str = Field(default="", description="Text that triggered the detection")


class ProcedureMatchRequest(BaseModel):
    """Request to resolve detected procedures into TUSS codes."""

    procedures: list[DetectedProcedureRequest] = Field(default_factory=list)


class TussProcedureMatchResponse(BaseModel):
    """A TUSS line item for a TISS claim form."""

    code: str = Field(..., description="TUSS code, empty when manual entry is needed")
    description: str
    table: str
    quantity: int = Field(..., ge=1)
    match_confidence: float = Field(..., ge=0.0, le=1.0)

    model_config = {"from_attributes": True}


class TissFormRequest(BaseModel):
    """Request to draft a TISS form from detected procedures."""

    procedures: list[DetectedProcedureRequest] = Field(default_factory=list)
    diagnoses: list[str] = Field(default_factory=list, description="Diagnoses from the assessment")


class TissFormResponse(BaseModel):
    """Draft TISS form metadata."""

    procedure_codes: list[TussProcedureMatchResponse]
    cid_code: str | None = None
    cid_description: str | None = None
    urgency: Urgency
    confidence: float
    source_text: str
    warnings: list[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class CatalogEntryResponse(BaseModel):
    """A reference catalog entry."""

    code: str
    label: str
    aliases: list[str] = Field(default_factory=list)
    table: str | None = None
    category: str | None = None

    model_config = {"from_attributes": True}
