"""LLM fallback strategy for fields the deterministic strategies miss.

One chat completion per (field, document). The model is asked for a JSON
object ``{"value", "confidence", "evidence"}``; the answer is accepted only
when ``value`` is truthy and ``confidence`` exceeds the configured minimum.

``LLMFieldExtractor.extract`` never raises: provider errors, timeouts,
missing credentials and unparseable answers all become the null result.
"""

import json
import logging
import re
import threading
from typing import Any, Dict, Optional

from jobsheet_extraction.config.engine import LLMStrategyConfig
from jobsheet_extraction.extraction.normalizers import safe_float, safe_string
from jobsheet_extraction.extraction.spec_loader import FieldDefinition
from jobsheet_extraction.schemas.extraction_result import ExtractionResult, StrategyName
from jobsheet_extraction.utils.prompt_loader import load_prompt

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def parse_llm_answer(content: Any) -> Optional[Dict[str, Any]]:
    """Find and parse the JSON object embedded in a completion.

    Returns:
        The parsed dict, or None when the content holds no JSON object.
    """
    if not isinstance(content, str):
        return None

    match = _JSON_OBJECT.search(content)
    if not match:
        return None

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None

    return parsed if isinstance(parsed, dict) else None


class LLMFieldExtractor:
    """Extracts single fields with a chat model.

    Attributes:
        config: Prompt, model and acceptance settings
        calls: Number of completions requested so far
    """

    def __init__(
        self,
        config: Optional[LLMStrategyConfig] = None,
        client: Optional[Any] = None,
    ):
        """Initialize the extractor.

        Args:
            config: LLM strategy configuration
            client: Optional pre-configured client exposing
                ``chat_completions_create``; an ``OpenAIChatClient`` is
                created on first use otherwise.
        """
        self.config = config or LLMStrategyConfig()
        self._client = client
        self.calls = 0
        self._calls_lock = threading.Lock()
        self._client_lock = threading.Lock()

    def _get_client(self) -> Any:
        with self._client_lock:
            if self._client is None:
                from jobsheet_extraction.services.llm_client import OpenAIChatClient

                self._client = OpenAIChatClient(timeout=self.config.timeout_seconds)
            return self._client

    def _resolve_model(self) -> str:
        if self.config.model:
            return self.config.model
        from jobsheet_extraction.services.openai_client import get_default_model

        return get_default_model()

    def _request(self, text: str, field: FieldDefinition) -> Any:
        prompt = load_prompt(
            self.config.prompt_name,
            display_name=field.display_name,
            instructions=field.llm_prompt,
            max_chars=self.config.max_chars,
            document_text=text[: self.config.max_chars],
        )
        with self._calls_lock:
            self.calls += 1
        response = self._get_client().chat_completions_create(
            model=self._resolve_model(),
            messages=prompt["messages"],
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            timeout=self.config.timeout_seconds,
        )
        return response.choices[0].message.content if response.choices else None

    def extract(self, text: str, field: FieldDefinition) -> ExtractionResult:
        """Ask the model for one field. Never raises."""
        try:
            content = self._request(text, field)
        except Exception as e:
            logger.warning(f"LLM extraction failed for {field.name}: {type(e).__name__}: {e}")
            return ExtractionResult.empty(StrategyName.LLM)

        try:
            return self._interpret(content, field)
        except Exception as e:
            logger.warning(f"LLM answer for {field.name} unusable: {type(e).__name__}: {e}")
            return ExtractionResult.empty(StrategyName.LLM)

    def _interpret(self, content: Any, field: FieldDefinition) -> ExtractionResult:
        parsed = parse_llm_answer(content)
        if parsed is None:
            logger.warning(f"LLM answer for {field.name} contained no JSON object")
            return ExtractionResult.empty(StrategyName.LLM)

        value = safe_string(parsed.get("value")) if parsed.get("value") else ""
        confidence = safe_float(parsed.get("confidence"), default=0.0)

        if not value or confidence <= self.config.min_confidence:
            logger.debug(
                f"LLM answer for {field.name} rejected (value={value!r}, confidence={confidence})"
            )
            return ExtractionResult.empty(StrategyName.LLM)

        return ExtractionResult(
            value=value,
            confidence=min(confidence, 100.0),
            strategy=StrategyName.LLM,
            evidence=safe_string(parsed.get("evidence")) or "LLM extraction",
        )
