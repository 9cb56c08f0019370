"""Abstract embedding provider interface."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Interface for text embedding generation.

    Implementations wrap specific embedding backends (sentence-transformers,
    Ollama). Swap models by changing the provider in configuration.
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a batch of text strings.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input and in input order.

        Raises:
            EmbeddingError: If the backend fails or returns malformed vectors.
        """
        ...

    def embed_query(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for query texts.

        Some models require a special instruction prefix for queries but
        not for documents. Override this method to add model-specific query
        preprocessing. Default delegates to embed().
        """
        return self.embed(texts)

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimension (e.g., 768)."""
        ...
