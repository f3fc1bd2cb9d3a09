"""Pydantic schemas for field extraction results."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Ordinal criticality of a field; S0 is blocking."""

    S0 = "S0"
    S1 = "S1"
    S2 = "S2"
    S3 = "S3"


class NormalizerKind(str, Enum):
    """Canonicalization applied to a field's winning value."""

    DATE = "date"
    BOOLEAN = "boolean"
    NAME = "name"
    UPPERCASE = "uppercase"
    NONE = "none"


class StrategyName(str, Enum):
    """Extraction strategies, declared in voting priority order."""

    REGEX = "regex"
    FUZZY = "fuzzy"
    CONTEXT = "context"
    LLM = "llm"


class Verdict(str, Enum):
    """Document-level audit outcome."""

    PASS = "PASS"
    FAIL = "FAIL"
    REVIEW_QUEUE = "REVIEW_QUEUE"


class ExtractionMethod(str, Enum):
    """How the caller obtained the document text (descriptive only)."""

    EMBEDDED_TEXT = "EMBEDDED_TEXT"
    OCR = "OCR"
    HYBRID = "HYBRID"


class ExtractionResult(BaseModel):
    """Outcome of a single strategy attempt for one field."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: Optional[str] = Field(None, description="Raw candidate value")
    confidence: float = Field(0.0, ge=0.0, le=100.0, description="Strategy confidence")
    strategy: StrategyName = Field(..., description="Strategy that produced the candidate")
    evidence: str = Field("", description="Short audit-trail note")

    @classmethod
    def empty(cls, strategy: StrategyName) -> "ExtractionResult":
        """Null result for a strategy that found nothing."""
        return cls(value=None, confidence=0.0, strategy=strategy, evidence="")


class FieldExtraction(BaseModel):
    """Final, voted extraction of one field in one document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    display_name: str
    required: bool
    severity: Severity
    value: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=100.0)
    strategy: str = Field(
        "none", description="Winning strategy, 'none', or 'ensemble(N agree)'"
    )
    evidence: str = ""
    consensus_count: Optional[int] = Field(
        None, ge=1, description="Number of strategies agreeing on the value"
    )


class DocumentExtractionResult(BaseModel):
    """
    Complete extraction result for a document.

    Produced fresh per call; never mutated after construction.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str
    verdict: Verdict
    quality_score: float = Field(..., ge=0.0, le=100.0)
    average_confidence: float = Field(..., ge=0.0, le=100.0)
    extracted_count: int = Field(..., ge=0)
    total_fields: int = Field(..., ge=0)
    required_extracted: int = Field(..., ge=0)
    required_total: int = Field(..., ge=0)
    missing_required: List[str] = Field(
        default_factory=list, description="Display names of required fields with no value"
    )
    low_confidence_fields: List[str] = Field(
        default_factory=list, description="Display names of fields with confidence in (0, 70)"
    )
    extracted_data: Dict[str, str] = Field(
        default_factory=dict, description="Field name to final value, extracted fields only"
    )
    field_details: Dict[str, FieldExtraction] = Field(default_factory=dict)
    document_type: str = "UNKNOWN"
    extraction_method: ExtractionMethod = ExtractionMethod.EMBEDDED_TEXT
    processing_time_ms: int = Field(0, ge=0)


class BatchSummary(BaseModel):
    """Aggregate statistics over a batch of documents."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    total: int = 0
    passed: int = 0
    failed: int = 0
    review_queue: int = 0
    avg_quality_score: float = 0.0
    avg_confidence: float = 0.0


class BatchResult(BaseModel):
    """Per-document results in input order plus the batch summary."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    results: List[DocumentExtractionResult] = Field(default_factory=list)
    summary: BatchSummary = Field(default_factory=BatchSummary)
