"""Result schemas for the extraction engine."""

from jobsheet_extraction.schemas.extraction_result import (
    BatchResult,
    BatchSummary,
    DocumentExtractionResult,
    ExtractionMethod,
    ExtractionResult,
    FieldExtraction,
    NormalizerKind,
    Severity,
    StrategyName,
    Verdict,
)

__all__ = [
    "BatchResult",
    "BatchSummary",
    "DocumentExtractionResult",
    "ExtractionMethod",
    "ExtractionResult",
    "FieldExtraction",
    "NormalizerKind",
    "Severity",
    "StrategyName",
    "Verdict",
]
