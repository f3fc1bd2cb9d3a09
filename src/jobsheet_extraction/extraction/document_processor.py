"""Document-level extraction: run the ensemble per field, score and audit."""

import logging
import time
from typing import Dict, List, Optional

from jobsheet_extraction.config.engine import EngineConfig, get_engine_config
from jobsheet_extraction.extraction.ensemble import ensemble_extract
from jobsheet_extraction.extraction.llm_strategy import LLMFieldExtractor
from jobsheet_extraction.extraction.preprocessing import correct_ocr_errors
from jobsheet_extraction.extraction.spec_loader import FieldSpec, get_spec
from jobsheet_extraction.schemas.extraction_result import (
    DocumentExtractionResult,
    ExtractionMethod,
    FieldExtraction,
    Verdict,
)

logger = logging.getLogger(__name__)

UNKNOWN_DOCUMENT_TYPE = "UNKNOWN"

# First matching rule wins
DOCUMENT_TYPE_RULES = (
    ("LOLER_COMPLIANCE", ("thorough examination report", "loler")),
    ("COMPLIANCE_REPORT", ("compliance report", "compliance test")),
    ("REPAIR_REPORT", ("repair report", "repair duration")),
    ("SERVICE_REPORT", ("service report", "service detail")),
)


def detect_document_type(text: str) -> str:
    """Classify a job sheet by the report heading phrases it contains."""
    lowered = (text or "").lower()
    for document_type, phrases in DOCUMENT_TYPE_RULES:
        if any(phrase in lowered for phrase in phrases):
            return document_type
    return UNKNOWN_DOCUMENT_TYPE


def compute_quality_score(
    required_extracted: int,
    required_total: int,
    optional_extracted: int,
    optional_total: int,
    required_weight: float = 0.7,
    optional_weight: float = 0.3,
) -> float:
    """Weighted completeness percentage.

    An empty group counts as fully complete. The score is exact; callers
    round it for reporting only, after the verdict is decided.
    """
    required_pct = required_extracted / required_total * 100 if required_total else 100.0
    optional_pct = optional_extracted / optional_total * 100 if optional_total else 100.0
    return required_pct * required_weight + optional_pct * optional_weight


def determine_verdict(
    missing_required: List[str],
    low_confidence_fields: List[str],
    quality_score: float,
    pass_threshold: float = 90.0,
) -> Verdict:
    if missing_required:
        return Verdict.FAIL
    if low_confidence_fields:
        return Verdict.REVIEW_QUEUE
    if quality_score >= pass_threshold:
        return Verdict.PASS
    return Verdict.REVIEW_QUEUE


class DocumentProcessor:
    """
    Extracts every field of a spec from one document's text.

    Holds no per-document state, so one instance can serve many threads.

    Usage:
        processor = DocumentProcessor()
        result = processor.process(text, "sheet-001.txt")
        print(result.verdict, result.quality_score)
    """

    def __init__(
        self,
        spec: Optional[FieldSpec] = None,
        config: Optional[EngineConfig] = None,
        llm_extractor: Optional[LLMFieldExtractor] = None,
    ):
        """
        Initialize the processor.

        Args:
            spec: Field registry; the configured default spec when omitted
            config: Engine thresholds; the cached engine config when omitted
            llm_extractor: Extractor used when ``use_llm`` is requested.
                Built from ``config.llm`` otherwise; its chat
                client is only created on the first LLM call.
        """
        self.config = config or get_engine_config()
        self.spec = spec or get_spec(self.config.default_spec)
        # One extractor and call counter for every thread sharing this processor
        self.llm_extractor = llm_extractor or LLMFieldExtractor(config=self.config.llm)

    def extract_fields(self, text: str, use_llm: bool = False) -> Dict[str, FieldExtraction]:
        """Run the ensemble over every field, in registry order."""
        extractor = self.llm_extractor if use_llm else None
        return {
            field.name: ensemble_extract(
                text,
                field,
                use_llm=use_llm,
                llm_extractor=extractor,
                llm_trigger_confidence=self.config.llm_trigger_confidence,
            )
            for field in self.spec.fields
        }

    def process(
        self,
        text: str,
        filename: str,
        use_llm: bool = False,
        extraction_method: ExtractionMethod = ExtractionMethod.EMBEDDED_TEXT,
    ) -> DocumentExtractionResult:
        """
        Extract, score and audit one document.

        Never raises on malformed text; a document with nothing recognisable
        simply fails the audit.

        Args:
            text: Document text
            filename: Name reported in the result
            use_llm: Allow the LLM fallback for weak fields
            extraction_method: How the text was obtained (recorded only)

        Returns:
            DocumentExtractionResult with verdict, scores and per-field detail
        """
        start = time.monotonic()

        corrected = correct_ocr_errors(text or "")
        document_type = detect_document_type(corrected)
        details = self.extract_fields(corrected, use_llm=use_llm)

        extracted_data: Dict[str, str] = {}
        missing_required: List[str] = []
        low_confidence_fields: List[str] = []
        required_extracted = 0
        optional_extracted = 0
        confidences: List[float] = []

        for name, detail in details.items():
            if detail.value is not None:
                extracted_data[name] = detail.value
                if detail.required:
                    required_extracted += 1
                else:
                    optional_extracted += 1
            elif detail.required:
                missing_required.append(detail.display_name)

            if detail.confidence > 0:
                confidences.append(detail.confidence)
                if detail.confidence < self.config.low_confidence_threshold:
                    low_confidence_fields.append(detail.display_name)

        required_total = len(self.spec.required_fields)
        optional_total = len(self.spec.optional_fields)
        exact_quality = compute_quality_score(
            required_extracted,
            required_total,
            optional_extracted,
            optional_total,
            required_weight=self.config.required_weight,
            optional_weight=self.config.optional_weight,
        )
        quality_score = round(exact_quality, 1)
        average_confidence = round(sum(confidences) / len(confidences), 1) if confidences else 0.0

        verdict = determine_verdict(
            missing_required,
            low_confidence_fields,
            exact_quality,
            pass_threshold=self.config.pass_threshold,
        )
        processing_time_ms = int((time.monotonic() - start) * 1000)

        logger.info(
            f"{filename}: {verdict.value} | quality={quality_score} | "
            f"{len(extracted_data)}/{len(details)} fields | {processing_time_ms}ms"
        )
        if missing_required:
            logger.debug(f"{filename}: missing required {missing_required}")

        return DocumentExtractionResult(
            filename=filename,
            verdict=verdict,
            quality_score=quality_score,
            average_confidence=average_confidence,
            extracted_count=len(extracted_data),
            total_fields=len(details),
            required_extracted=required_extracted,
            required_total=required_total,
            missing_required=missing_required,
            low_confidence_fields=low_confidence_fields,
            extracted_data=extracted_data,
            field_details=details,
            document_type=document_type,
            extraction_method=extraction_method,
            processing_time_ms=processing_time_ms,
        )

    def failed_result(self, filename: str, reason: str) -> DocumentExtractionResult:
        """FAIL result with every field missing, for documents that could not be processed."""
        details = {
            field.name: FieldExtraction(
                display_name=field.display_name,
                required=field.required,
                severity=field.severity,
                evidence=reason,
            )
            for field in self.spec.fields
        }
        optional_total = len(self.spec.optional_fields)
        return DocumentExtractionResult(
            filename=filename,
            verdict=Verdict.FAIL,
            quality_score=round(
                compute_quality_score(
                    0,
                    len(self.spec.required_fields),
                    0,
                    optional_total,
                    required_weight=self.config.required_weight,
                    optional_weight=self.config.optional_weight,
                ),
                1,
            ),
            average_confidence=0.0,
            extracted_count=0,
            total_fields=len(details),
            required_extracted=0,
            required_total=len(self.spec.required_fields),
            missing_required=[f.display_name for f in self.spec.required_fields],
            low_confidence_fields=[],
            extracted_data={},
            field_details=details,
        )


def process_document(
    text: str,
    filename: str,
    use_llm: bool = False,
    extraction_method: ExtractionMethod = ExtractionMethod.EMBEDDED_TEXT,
    processor: Optional[DocumentProcessor] = None,
) -> DocumentExtractionResult:
    """Process one document with the default job sheet spec and engine config."""
    processor = processor or DocumentProcessor()
    return processor.process(
        text,
        filename,
        use_llm=use_llm,
        extraction_method=extraction_method,
    )
