"""Batch processing over many job sheets."""

from jobsheet_extraction.pipeline.batch import BatchDocument, process_batch, summarize

__all__ = ["BatchDocument", "process_batch", "summarize"]
