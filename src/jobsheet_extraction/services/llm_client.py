"""Chat completion client used by the LLM fallback strategy.

The engine only relies on one capability: send chat messages, get back an
OpenAI-style response exposing ``choices[0].message.content``. Anything with
a compatible ``chat_completions_create`` method can be injected in its place
(tests use a ``MagicMock``).
"""

import logging
import time
from typing import Any, Dict, List, Optional

from jobsheet_extraction.services.openai_client import get_openai_client

logger = logging.getLogger(__name__)


class OpenAIChatClient:
    """Thin wrapper around the OpenAI SDK that logs latency and token usage.

    The underlying SDK client is created lazily on first call, so building
    an extractor never fails because credentials are missing.

    Usage:
        client = OpenAIChatClient(timeout=30)
        response = client.chat_completions_create(
            model="gpt-4o-mini",
            messages=[{"role": "user", "content": "..."}],
        )
    """

    def __init__(self, client: Optional[Any] = None, timeout: Optional[float] = None):
        """Initialize the wrapper.

        Args:
            client: Optional pre-built OpenAI/AzureOpenAI client
            timeout: Request timeout in seconds applied to every call
        """
        self._client = client
        self.timeout = timeout

    @property
    def client(self) -> Any:
        """The underlying SDK client, created on first access."""
        if self._client is None:
            self._client = get_openai_client(timeout=self.timeout)
        return self._client

    def chat_completions_create(
        self,
        model: str,
        messages: List[Dict[str, Any]],
        temperature: float = 0.0,
        max_tokens: int = 256,
        **kwargs,
    ) -> Any:
        """Create a chat completion, logging the outcome.

        Errors from the SDK are logged and re-raised; callers decide how to
        degrade.
        """
        start_ts = time.monotonic()
        if self.timeout is not None:
            kwargs.setdefault("timeout", self.timeout)

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except Exception as e:
            latency_ms = int((time.monotonic() - start_ts) * 1000)
            logger.debug(
                f"LLM call failed | model={model} | {latency_ms}ms | {type(e).__name__}: {e}"
            )
            raise

        latency_ms = int((time.monotonic() - start_ts) * 1000)
        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.debug(
                f"LLM call OK | model={model} | {latency_ms}ms | "
                f"in={usage.prompt_tokens} out={usage.completion_tokens}"
            )
        else:
            logger.debug(f"LLM call OK | model={model} | {latency_ms}ms")

        return response
