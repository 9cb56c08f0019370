"""Completion client: one prompt in, generated text out."""

import logging
from abc import ABC, abstractmethod

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from config.settings import Settings, get_settings
from src.errors import CompletionError

logger = logging.getLogger(__name__)


class CompletionClient(ABC):
    """Interface for text generation used by the agentic pipeline."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Return the model's text for a single prompt.

        Raises:
            CompletionError: On upstream failure or non-text output.
        """
        ...


class LangChainCompletionClient(CompletionClient):
    """Completion client backed by any LangChain chat model."""

    def __init__(self, llm: BaseChatModel):
        self._llm = llm

    def complete(self, prompt: str) -> str:
        try:
            response = self._llm.invoke([HumanMessage(content=prompt)])
        except Exception as e:
            raise CompletionError(f"Completion request failed: {e}") from e
        return _response_text(response.content)


class RetryingCompletionClient(CompletionClient):
    """Retries CompletionError with exponential backoff.

    Lives outside the chunkers so the core stays retry-free.
    """

    def __init__(
        self,
        inner: CompletionClient,
        max_attempts: int = 3,
        min_wait: float = 1.0,
        max_wait: float = 10.0,
    ):
        self._inner = inner
        self._complete = retry(
            retry=retry_if_exception_type(CompletionError),
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
            reraise=True,
        )(inner.complete)

    def complete(self, prompt: str) -> str:
        return self._complete(prompt)


def get_completion_client(settings: Settings | None = None) -> CompletionClient:
    """Build the configured completion client, with retries if enabled."""
    from src.llm.config import get_llm

    settings = settings or get_settings()
    client: CompletionClient = LangChainCompletionClient(get_llm(settings))
    if settings.docchunk_max_retries > 0:
        client = RetryingCompletionClient(client, max_attempts=settings.docchunk_max_retries + 1)
    return client


def _response_text(content) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # Content blocks: keep the text parts
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    raise CompletionError(f"Unexpected completion content type: {type(content).__name__}")
