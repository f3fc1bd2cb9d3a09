"""End-to-end extraction over realistic job sheets.

Runs the packaged job sheet spec through preprocessing, all strategies,
voting, scoring and batch aggregation. The LLM is always mocked.
"""

import json

import pytest

from jobsheet_extraction import BatchDocument, DocumentProcessor, Verdict, process_batch
from jobsheet_extraction.extraction.llm_strategy import LLMFieldExtractor
from jobsheet_extraction.config.engine import LLMStrategyConfig


pytestmark = pytest.mark.integration


OCR_LOLER_SHEET = """THOROUGH EXAMINATION REPORT
Work Order: 77120
Registration: KX19ABC
Equipment: Genie GS-1932 Scissor Lift
Custorner Narne: northern access uk ltd
Date: 3.2.2024
Engineer: sam oneil
Safe to operate? N
Comments: Platform gate latch worn, unit taken out of service
Engineer Signature"""


class TestPartialSheet:
    """Four fields present, the rest missing."""

    def test_field_values(self, partial_job_sheet, engine_config):
        result = DocumentProcessor(config=engine_config).process(partial_job_sheet, "p.txt")

        assert result.extracted_data == {
            "asset_no": "AB-1234",
            "job_no": "4821",
            "date": "2024-01-15",
            "safe_to_use": "Yes",
        }

    def test_consensus_and_verdict(self, partial_job_sheet, engine_config):
        result = DocumentProcessor(config=engine_config).process(partial_job_sheet, "p.txt")

        job = result.field_details["job_no"]
        assert job.strategy == "ensemble(3 agree)"
        assert job.consensus_count == 3
        assert job.confidence >= 90.0
        assert result.verdict == Verdict.FAIL
        assert "Make/Model" in result.missing_required
        assert "Engineer Name" in result.missing_required

    def test_json_export(self, partial_job_sheet, engine_config):
        result = DocumentProcessor(config=engine_config).process(partial_job_sheet, "p.txt")

        data = json.loads(result.model_dump_json())
        assert data["verdict"] == "FAIL"
        assert data["field_details"]["date"]["value"] == "2024-01-15"
        assert data["field_details"]["make_model"]["value"] is None


class TestOcrLolerSheet:
    """An OCR'd LOLER report with misread labels and alternative labels."""

    @pytest.fixture
    def result(self, engine_config):
        return DocumentProcessor(config=engine_config).process(OCR_LOLER_SHEET, "loler.txt")

    def test_document_type(self, result):
        assert result.document_type == "LOLER_COMPLIANCE"

    def test_alternative_labels(self, result):
        assert result.extracted_data["job_no"] == "77120"
        assert result.extracted_data["asset_no"] == "KX19ABC"
        assert result.extracted_data["date"] == "2024-02-03"

    def test_ocr_corrected_customer(self, result):
        assert result.extracted_data["customer_name"] == "Northern Access UK LTD"

    def test_safe_to_use_normalized(self, result):
        assert result.extracted_data["safe_to_use"] == "No"

    def test_signature_presence(self, result):
        assert result.extracted_data["technician_signature"] == "Present"


class TestLLMFallback:
    """LLM fallback with a mocked chat client."""

    def test_llm_completes_partial_sheet(self, partial_job_sheet, engine_config, mock_llm_client):
        client = mock_llm_client({"value": "filled", "confidence": 92, "evidence": "model"})
        extractor = LLMFieldExtractor(config=LLMStrategyConfig(model="test-model"), client=client)
        processor = DocumentProcessor(config=engine_config, llm_extractor=extractor)

        result = processor.process(partial_job_sheet, "p.txt", use_llm=True)

        assert client.chat_completions_create.call_count == 6
        assert result.missing_required == []
        assert result.field_details["make_model"].strategy == "llm"
        assert result.field_details["job_no"].strategy == "ensemble(3 agree)"

    def test_llm_failure_degrades_gracefully(self, partial_job_sheet, engine_config, mock_llm_client):
        client = mock_llm_client(TimeoutError("request timed out"))
        extractor = LLMFieldExtractor(config=LLMStrategyConfig(model="test-model"), client=client)
        processor = DocumentProcessor(config=engine_config, llm_extractor=extractor)

        with_llm = processor.process(partial_job_sheet, "p.txt", use_llm=True)
        without_llm = processor.process(partial_job_sheet, "p.txt")

        assert with_llm.extracted_data == without_llm.extracted_data
        assert with_llm.verdict == Verdict.FAIL


class TestBatch:

    def test_mixed_batch(self, complete_job_sheet, partial_job_sheet, engine_config):
        processor = DocumentProcessor(config=engine_config)
        documents = [
            BatchDocument(text=complete_job_sheet, filename="complete.txt"),
            {"text": partial_job_sheet, "filename": "partial.txt"},
            BatchDocument(text=OCR_LOLER_SHEET, filename="loler.txt"),
            BatchDocument(text="", filename="blank.txt"),
        ]

        batch = process_batch(documents, max_workers=2, processor=processor)

        assert [r.filename for r in batch.results] == [
            "complete.txt",
            "partial.txt",
            "loler.txt",
            "blank.txt",
        ]
        assert batch.summary.total == 4
        assert batch.summary.passed + batch.summary.failed + batch.summary.review_queue == 4
        assert batch.results[0].verdict == Verdict.PASS
        assert batch.results[3].verdict == Verdict.FAIL
