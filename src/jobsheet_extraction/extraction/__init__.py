"""
Job sheet field extraction.

Deterministic strategies (regex, fuzzy label, context) plus an optional LLM
fallback, combined per field by ensemble voting and scored per document.
"""

from jobsheet_extraction.extraction.spec_loader import (
    FieldDefinition,
    FieldSpec,
    FieldSpecError,
    get_spec,
    list_available_specs,
    load_spec,
)
from jobsheet_extraction.extraction.preprocessing import correct_ocr_errors
from jobsheet_extraction.extraction.similarity import fuzzy_ratio, levenshtein_distance
from jobsheet_extraction.extraction.normalizers import (
    NORMALIZERS,
    get_normalizer,
    normalize_value,
)
from jobsheet_extraction.extraction.strategies import (
    DETERMINISTIC_STRATEGIES,
    extract_with_context,
    extract_with_fuzzy,
    extract_with_pattern,
)
from jobsheet_extraction.extraction.llm_strategy import LLMFieldExtractor
from jobsheet_extraction.extraction.ensemble import ensemble_extract, vote
from jobsheet_extraction.extraction.document_processor import (
    DocumentProcessor,
    detect_document_type,
    process_document,
)

__all__ = [
    # Field registry
    "FieldDefinition",
    "FieldSpec",
    "FieldSpecError",
    "get_spec",
    "list_available_specs",
    "load_spec",
    # Text helpers
    "correct_ocr_errors",
    "fuzzy_ratio",
    "levenshtein_distance",
    # Normalization
    "NORMALIZERS",
    "get_normalizer",
    "normalize_value",
    # Strategies
    "DETERMINISTIC_STRATEGIES",
    "extract_with_context",
    "extract_with_fuzzy",
    "extract_with_pattern",
    "LLMFieldExtractor",
    # Voting and documents
    "ensemble_extract",
    "vote",
    "DocumentProcessor",
    "detect_document_type",
    "process_document",
]
