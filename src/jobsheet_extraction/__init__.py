"""Job sheet field extraction engine with ensemble voting."""

__version__ = "0.1.0"

from jobsheet_extraction.extraction.document_processor import (
    DocumentProcessor,
    process_document,
)
from jobsheet_extraction.pipeline.batch import BatchDocument, process_batch
from jobsheet_extraction.schemas.extraction_result import (
    BatchResult,
    DocumentExtractionResult,
    ExtractionMethod,
    Verdict,
)

__all__ = [
    "__version__",
    "BatchDocument",
    "BatchResult",
    "DocumentExtractionResult",
    "DocumentProcessor",
    "ExtractionMethod",
    "Verdict",
    "process_batch",
    "process_document",
]
