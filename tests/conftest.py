"""
Pytest fixtures shared by the extraction engine tests.

Provides sample job sheet texts, small hand-built field specs and a mock
chat client that mimics the OpenAI response shape.
"""

import json
from unittest.mock import MagicMock

import pytest

from jobsheet_extraction.config.engine import EngineConfig
from jobsheet_extraction.extraction.spec_loader import clear_spec_cache, get_spec, parse_spec


COMPLETE_JOB_SHEET = """SERVICE REPORT
Job No: 4821
Asset No: AB-1234
Make/Model: JCB 3CX
Serial No: SN-998877
Customer Name: acme plant hire ltd
Date: 15/01/2024
Engineer Name: John Smith
Safe to use? Yes
Engineer Comments: Replaced hydraulic filter and tested
Technician Signature: J Smith"""

PARTIAL_JOB_SHEET = "Job No: 4821\nAsset No: AB-1234\nDate: 15/01/2024\nSafe to use? Yes"


@pytest.fixture(autouse=True)
def _fresh_spec_cache():
    """Each test sees specs loaded from disk."""
    clear_spec_cache()
    yield
    clear_spec_cache()


@pytest.fixture
def complete_job_sheet():
    return COMPLETE_JOB_SHEET


@pytest.fixture
def partial_job_sheet():
    return PARTIAL_JOB_SHEET


@pytest.fixture
def job_sheet_spec():
    return get_spec("job_sheet")


@pytest.fixture
def engine_config():
    """Default thresholds, independent of JOBSHEET_ENGINE_CONFIG."""
    return EngineConfig()


@pytest.fixture
def make_spec():
    """Build a FieldSpec from plain field dicts."""

    def _make(*fields, doc_type="test_sheet"):
        return parse_spec({"doc_type": doc_type, "version": "v1", "fields": list(fields)})

    return _make


def make_llm_response(content):
    """OpenAI-style response carrying ``content`` as the first choice."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
def mock_llm_client():
    """Create a mock chat client.

    Call with a dict (JSON-encoded as the answer), a raw string, or an
    exception to raise from every call.
    """

    def _make(answer):
        client = MagicMock()
        if isinstance(answer, Exception):
            client.chat_completions_create = MagicMock(side_effect=answer)
        else:
            content = json.dumps(answer) if isinstance(answer, dict) else answer
            client.chat_completions_create = MagicMock(return_value=make_llm_response(content))
        return client

    return _make
