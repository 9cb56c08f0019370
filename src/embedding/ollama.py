"""Ollama embedding provider via LangChain."""

import logging

from langchain_ollama import OllamaEmbeddings

from src.embedding.provider import EmbeddingProvider

logger = logging.getLogger(__name__)


class OllamaEmbeddingProvider(EmbeddingProvider):
    """Embeds text through an Ollama server (e.g. embeddinggemma)."""

    def __init__(
        self,
        model_name: str = "embeddinggemma",
        base_url: str = "http://localhost:11434",
        timeout: float | None = None,
    ):
        client_kwargs = {"timeout": timeout} if timeout else {}
        self._embeddings = OllamaEmbeddings(
            model=model_name,
            base_url=base_url,
            client_kwargs=client_kwargs,
        )
        self._model_name = model_name
        self._dimension: int | None = None

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts must not be empty")
        vectors = self._embeddings.embed_documents(texts)
        if vectors and self._dimension is None:
            self._dimension = len(vectors[0])
        return vectors

    def embed_query(self, texts: list[str]) -> list[list[float]]:
        return [self._embeddings.embed_query(text) for text in texts]

    @property
    def dimension(self) -> int:
        # Ollama does not report dimensions up front; probe once
        if self._dimension is None:
            self._dimension = len(self._embeddings.embed_query("dimension probe"))
        return self._dimension
