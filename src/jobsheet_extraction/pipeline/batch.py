"""Batch processing of job sheets with bounded parallelism.

Documents are independent, so they are fanned out over a thread pool. The
result list is index-addressed so output order always matches input order
regardless of completion order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from jobsheet_extraction.extraction.document_processor import DocumentProcessor
from jobsheet_extraction.schemas.extraction_result import (
    BatchResult,
    BatchSummary,
    DocumentExtractionResult,
    Verdict,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchDocument:
    """One document queued for batch processing."""

    text: str
    filename: str

    @classmethod
    def from_any(cls, item: Union["BatchDocument", Mapping[str, Any]]) -> "BatchDocument":
        """Accept either a BatchDocument or a ``{"text", "filename"}`` mapping."""
        if isinstance(item, BatchDocument):
            return item
        return cls(text=item.get("text") or "", filename=item.get("filename") or "")


def summarize(results: Sequence[DocumentExtractionResult]) -> BatchSummary:
    """Verdict counts and mean scores, rounded to one decimal."""
    total = len(results)
    if total == 0:
        return BatchSummary()

    return BatchSummary(
        total=total,
        passed=sum(1 for r in results if r.verdict == Verdict.PASS),
        failed=sum(1 for r in results if r.verdict == Verdict.FAIL),
        review_queue=sum(1 for r in results if r.verdict == Verdict.REVIEW_QUEUE),
        avg_quality_score=round(sum(r.quality_score for r in results) / total, 1),
        avg_confidence=round(sum(r.average_confidence for r in results) / total, 1),
    )


def process_batch(
    documents: Sequence[Union[BatchDocument, Mapping[str, Any]]],
    use_llm: bool = False,
    max_workers: Optional[int] = None,
    processor: Optional[DocumentProcessor] = None,
    on_progress: Optional[Callable[[DocumentExtractionResult], None]] = None,
) -> BatchResult:
    """
    Process many documents and summarize the outcome.

    A document that raises unexpectedly is logged and reported as FAIL so
    the rest of the batch still completes.

    Args:
        documents: BatchDocument items or ``{"text", "filename"}`` mappings
        use_llm: Allow the LLM fallback for weak fields
        max_workers: Thread count; the engine config's ``batch_max_workers``
            when omitted. 1 processes sequentially.
        processor: Shared DocumentProcessor; a default one when omitted
        on_progress: Called once per finished document

    Returns:
        BatchResult with results in input order and the summary
    """
    items = [BatchDocument.from_any(d) for d in documents]
    if not items:
        return BatchResult(results=[], summary=BatchSummary())

    processor = processor or DocumentProcessor()
    workers = max_workers or processor.config.batch_max_workers
    workers = max(1, min(workers, len(items)))

    def process_one(index: int, doc: BatchDocument) -> Tuple[int, DocumentExtractionResult]:
        return index, processor.process(doc.text, doc.filename, use_llm=use_llm)

    results: List[Optional[DocumentExtractionResult]] = [None] * len(items)

    logger.info(f"Batch starting: {len(items)} documents, {workers} workers")

    if workers == 1:
        for i, doc in enumerate(items):
            try:
                _, result = process_one(i, doc)
            except Exception as e:
                logger.error(f"Unexpected error processing {doc.filename}: {e}")
                result = processor.failed_result(doc.filename, f"Processing failed: {e}")
            results[i] = result
            if on_progress:
                on_progress(result)
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(process_one, i, doc): i for i, doc in enumerate(items)}

            for future in as_completed(futures):
                try:
                    index, result = future.result()
                except Exception as e:
                    index = futures[future]
                    filename = items[index].filename
                    logger.error(f"Unexpected error processing {filename}: {e}")
                    result = processor.failed_result(filename, f"Processing failed: {e}")
                results[index] = result
                if on_progress:
                    on_progress(result)

    summary = summarize(results)
    logger.info(
        f"Batch complete: {summary.total} documents | PASS={summary.passed} "
        f"FAIL={summary.failed} REVIEW={summary.review_queue} | "
        f"avg quality={summary.avg_quality_score}"
    )
    return BatchResult(results=results, summary=summary)
